"""Debug endpoints mounted under /debug/."""

from datetime import UTC, datetime

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, JSONResponse

from webdist import __version__

router = APIRouter(prefix="/debug", tags=["debug"])

# Simple in-memory counters for /debug/vars
_metrics: dict[str, int] = {
    "index_requests_total": 0,
    "dist_requests_total": 0,
    "dist_served_br": 0,
    "dist_served_gzip": 0,
    "dist_served_identity": 0,
    "dist_not_found": 0,
    "dist_not_seekable": 0,
}

_ENDPOINTS = {
    "healthz": "liveness check",
    "vars": "process counters and build state",
}


def increment_metric(name: str, amount: int = 1) -> None:
    """Increment a named metric counter."""
    _metrics[name] = _metrics.get(name, 0) + amount


def reset_metrics() -> None:
    for name in _metrics:
        _metrics[name] = 0


@router.get("/", response_class=HTMLResponse)
async def debug_index() -> str:
    items = "".join(
        f'<li><a href="/debug/{name}">{name}</a>: {desc}</li>' for name, desc in _ENDPOINTS.items()
    )
    return f"<html><body><h1>webdist {__version__}</h1><ul>{items}</ul></body></html>"


@router.get("/healthz")
async def healthz() -> dict[str, bool]:
    return {"ok": True}


@router.get("/vars")
async def debug_vars(request: Request) -> JSONResponse:
    state = request.app.state.serve
    return JSONResponse(
        content={
            **_metrics,
            "version": __version__,
            "started_at": state.started_at.isoformat(),
            "uptime_seconds": round(state.uptime_seconds, 3),
            "now": datetime.now(UTC).isoformat(),
            "index_etag": state.index.etag,
            "entry_points": state.index.entry_points,
        }
    )
