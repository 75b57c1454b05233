"""Static assets under /dist/, served in the best encoding the client accepts."""

import logging
import posixpath

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse, Response

from webdist.assets import best_variant
from webdist.errors import AssetNotFoundError
from webdist.http.content import content_type_for, file_response
from webdist.routes.debug import increment_metric
from webdist.state import ServeState

logger = logging.getLogger(__name__)

router = APIRouter(tags=["dist"])


@router.api_route("/dist/{asset_path:path}", methods=["GET", "HEAD"])
def serve_dist(request: Request, asset_path: str) -> Response:
    del asset_path  # the full request path names the asset
    state: ServeState = request.app.state.serve
    increment_metric("dist_requests_total")
    name = request.url.path[1:]

    try:
        path, encoding = best_variant(state.assets, name, request.headers.get("accept-encoding"))
    except AssetNotFoundError as exc:
        increment_metric("dist_not_found")
        return PlainTextResponse(str(exc), status_code=404)

    # Directories and special files cannot be seeked.
    if not path.is_file():
        increment_metric("dist_not_seekable")
        logger.error("Asset %s is not seekable", name)
        return PlainTextResponse("Not seekable", status_code=500)

    # Asset names are content-hashed, so responses never go stale.
    headers = {
        "Cache-Control": state.cache_control,
        "Vary": "Accept-Encoding",
    }
    if encoding is not None:
        headers["Content-Encoding"] = encoding
    increment_metric(f"dist_served_{encoding or 'identity'}")
    return file_response(
        request,
        path,
        state.started_at,
        media_type=content_type_for(posixpath.basename(request.url.path)),
        headers=headers,
    )
