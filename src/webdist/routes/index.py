"""The rendered index.html, served at / and for unknown non-asset paths."""

from fastapi import APIRouter, Request
from fastapi.responses import Response

from webdist.config import INDEX_FILE
from webdist.http.content import content_type_for, file_response
from webdist.routes.debug import increment_metric
from webdist.state import ServeState

router = APIRouter(tags=["index"])

# Paths that never fall back to the index.
NO_FALLBACK_PREFIXES = ("/dist/", "/debug/")


def index_response(request: Request) -> Response:
    state: ServeState = request.app.state.serve
    increment_metric("index_requests_total")
    return file_response(
        request,
        state.index_file,
        state.started_at,
        media_type=content_type_for(INDEX_FILE),
        headers={"ETag": state.index.etag},
    )


@router.api_route("/", methods=["GET", "HEAD"])
def serve_index(request: Request) -> Response:
    return index_response(request)
