"""Render index.html with references to the content-hashed bundles."""

from __future__ import annotations

import hashlib
import logging
import os
import tempfile
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from webdist.assets import AssetSource, read_asset
from webdist.build.entry_points import ENTRY_POINT_MAP_FILE, EntryPointMap, read_entry_point_map
from webdist.config import DIST_DIR, INDEX_FILE
from webdist.errors import AssetNotFoundError, EntryPointMapError, IndexRenderError

logger = logging.getLogger(__name__)

# Paths index.html uses when no hashed build exists.
ENTRY_POINTS_TO_DIST_PATHS: Mapping[str, str] = {
    "src/index.css": "dist/index.css",
    "src/index.js": "dist/index.js",
}


@dataclass(frozen=True, slots=True)
class RenderedIndex:
    body: bytes
    etag: str
    entry_points: EntryPointMap


def render_index(
    template: bytes,
    entry_points: Mapping[str, str],
    defaults: Mapping[str, str] = ENTRY_POINTS_TO_DIST_PATHS,
) -> bytes:
    """Replace each default dist path in *template* with its hashed counterpart.

    This is a plain substring replacement. Entry points missing from
    *entry_points* (or mapped to "") leave the template untouched.
    """
    rendered = template
    for entry_point, default_path in defaults.items():
        hashed_path = entry_points.get(entry_point, "")
        if hashed_path:
            rendered = rendered.replace(default_path.encode(), hashed_path.encode())
    return rendered


def _etag_for(body: bytes) -> str:
    return '"' + hashlib.sha256(body).hexdigest()[:16] + '"'


def generate_serve_index(
    source: AssetSource,
    defaults: Mapping[str, str] = ENTRY_POINTS_TO_DIST_PATHS,
) -> RenderedIndex:
    logger.info("Generating %s...", INDEX_FILE)
    try:
        template = read_asset(source, INDEX_FILE)
    except (AssetNotFoundError, OSError) as exc:
        raise IndexRenderError(f"Could not read {INDEX_FILE}: {exc}") from exc

    map_name = f"{DIST_DIR}/{ENTRY_POINT_MAP_FILE}"
    try:
        raw_map = read_asset(source, map_name)
    except (AssetNotFoundError, OSError) as exc:
        raise IndexRenderError(f"Could not open {ENTRY_POINT_MAP_FILE}: {exc}") from exc
    try:
        entry_points = read_entry_point_map(raw_map)
    except EntryPointMapError as exc:
        raise IndexRenderError(str(exc)) from exc

    body = render_index(template, entry_points, defaults)
    for entry_point in defaults:
        if not entry_points.get(entry_point):
            logger.info("No hashed build for %s; keeping default path", entry_point)
    return RenderedIndex(body=body, etag=_etag_for(body), entry_points=entry_points)


def write_index_file(index: RenderedIndex, directory: Path | None = None) -> Path:
    """Write the rendered document to a private file that `/` streams from.

    The caller owns the returned path and removes it on shutdown.
    """
    try:
        fd, name = tempfile.mkstemp(prefix="webdist-index-", suffix=".html", dir=directory)
        with os.fdopen(fd, "wb") as f:
            f.write(index.body)
    except OSError as exc:
        raise IndexRenderError(f"Could not write rendered {INDEX_FILE}: {exc}") from exc
    return Path(name)
