"""Precompression of build outputs into .gz and .br siblings."""

from __future__ import annotations

import gzip
import logging
import os
import stat
from pathlib import Path

import brotli

from webdist.errors import CompressionError

logger = logging.getLogger(__name__)

GZIP_LEVEL = 9
BROTLI_QUALITY = 11

GZIP_SUFFIX = ".gz"
BROTLI_SUFFIX = ".br"


def compress(data: bytes) -> tuple[bytes, bytes]:
    """Return (gzip, brotli) encodings of *data* at maximum compression."""
    try:
        gzipped = gzip.compress(data, compresslevel=GZIP_LEVEL, mtime=0)
    except (OSError, ValueError) as exc:
        raise CompressionError(f"gzip encoding failed: {exc}") from exc
    try:
        brotlied = brotli.compress(data, quality=BROTLI_QUALITY)
    except brotli.error as exc:
        raise CompressionError(f"brotli encoding failed: {exc}") from exc
    return gzipped, brotlied


def _write_with_mode(path: Path, data: bytes, mode: int) -> None:
    path.write_bytes(data)
    os.chmod(path, mode)


def precompress(path: Path) -> tuple[Path, Path]:
    """Write ``<path>.gz`` and ``<path>.br`` with the same permission bits as *path*.

    Both encodings are produced before anything is written, so an encoder
    failure leaves no sibling behind.
    """
    try:
        contents = path.read_bytes()
        mode = stat.S_IMODE(path.lstat().st_mode)
    except OSError as exc:
        raise CompressionError(f"cannot read {path}: {exc}") from exc

    try:
        gzipped, brotlied = compress(contents)
    except CompressionError as exc:
        raise CompressionError(f"cannot compress {path}: {exc}") from exc

    gz_path = path.with_name(path.name + GZIP_SUFFIX)
    br_path = path.with_name(path.name + BROTLI_SUFFIX)
    try:
        _write_with_mode(gz_path, gzipped, mode)
        _write_with_mode(br_path, brotlied, mode)
    except OSError as exc:
        raise CompressionError(f"cannot write compressed copy of {path}: {exc}") from exc

    logger.debug(
        "Precompressed %s (raw=%d gzip=%d brotli=%d)",
        path,
        len(contents),
        len(gzipped),
        len(brotlied),
    )
    return gz_path, br_path
