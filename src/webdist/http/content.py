"""File responses whose Last-Modified is pinned to the process start time.

Range, If-Range and multipart/byteranges come from starlette's FileResponse;
If-None-Match and If-Modified-Since use the check StaticFiles applies.
"""

from __future__ import annotations

import mimetypes
import os
import stat
from collections.abc import Mapping
from datetime import datetime
from pathlib import Path

from fastapi import Request
from fastapi.responses import FileResponse, Response
from fastapi.staticfiles import StaticFiles
from starlette.staticfiles import NotModifiedResponse

mimetypes.add_type("application/wasm", ".wasm")
mimetypes.add_type("text/javascript", ".js")
mimetypes.add_type("text/javascript", ".mjs")

DEFAULT_CONTENT_TYPE = "application/octet-stream"

# Used only for its precondition check; serves no directory.
_preconditions = StaticFiles(check_dir=False)


def content_type_for(name: str) -> str:
    content_type, _ = mimetypes.guess_type(name)
    return content_type or DEFAULT_CONTENT_TYPE


def pinned_stat(path: Path, modtime: datetime) -> os.stat_result:
    """Stat *path*, replacing its mtime with *modtime* in whole seconds."""
    fields = list(os.stat(path))
    fields[stat.ST_MTIME] = int(modtime.timestamp())
    return os.stat_result(fields)


def file_response(
    request: Request,
    path: Path,
    modtime: datetime,
    *,
    media_type: str,
    headers: Mapping[str, str] | None = None,
) -> Response:
    """Serve the regular file at *path*, or 304 if the client copy is current.

    An ``ETag`` in *headers* replaces the one starlette derives from size
    and mtime.
    """
    response = FileResponse(
        path,
        headers=headers,
        media_type=media_type,
        stat_result=pinned_stat(path, modtime),
    )
    if _preconditions.is_not_modified(response.headers, request.headers):
        return NotModifiedResponse(response.headers)
    return response
