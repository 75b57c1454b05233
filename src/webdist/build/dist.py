"""Housekeeping for the dist/ build output directory."""

from __future__ import annotations

import asyncio
import logging
import os
import shutil
from collections.abc import Callable
from pathlib import Path
from typing import Any

from webdist.build.compress import precompress
from webdist.errors import CleanError, DistWalkError

logger = logging.getLogger(__name__)

# Kept so that version control still creates the (otherwise empty) directory.
PLACEHOLDER_NAME = "placeholder"

COMPRESSIBLE_EXTENSIONS: frozenset[str] = frozenset({".js", ".css", ".wasm"})


def clean_dist(dist_dir: Path) -> list[Path]:
    """Remove everything in *dist_dir* except the placeholder file.

    Returns the removed paths. Stops at the first failure; whatever was
    already removed stays removed.
    """
    logger.info("Cleaning %s", dist_dir)
    try:
        entries = sorted(dist_dir.iterdir())
    except OSError as exc:
        raise CleanError(f"Cannot clean {dist_dir}: {exc}") from exc

    removed: list[Path] = []
    for entry in entries:
        if entry.name == PLACEHOLDER_NAME:
            continue
        try:
            if entry.is_dir() and not entry.is_symlink():
                shutil.rmtree(entry)
            else:
                entry.unlink()
        except OSError as exc:
            raise CleanError(f"Cannot clean {dist_dir}: cannot remove {entry}: {exc}") from exc
        removed.append(entry)
    return removed


def _raise_walk_error(exc: OSError) -> None:
    raise DistWalkError(f"Cannot walk {exc.filename}: {exc.strerror or exc}") from exc


def compressible_files(dist_dir: Path) -> list[Path]:
    """Regular files under *dist_dir* whose extension is worth precompressing."""
    selected: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(dist_dir, onerror=_raise_walk_error):
        dirnames.sort()
        for filename in sorted(filenames):
            path = Path(dirpath) / filename
            if path.suffix not in COMPRESSIBLE_EXTENSIONS:
                continue
            if not path.is_file():
                continue
            selected.append(path)
    return selected


async def precompress_dist(
    dist_dir: Path,
    compress: Callable[[Path], Any] = precompress,
) -> list[Path]:
    """Precompress every compressible file concurrently.

    All jobs run to completion; if any of them failed, the first failure
    (in walk order) is raised afterwards.
    """
    logger.info("Pre-compressing files in %s", dist_dir)
    paths = compressible_files(dist_dir)
    for path in paths:
        logger.info("Pre-compressing %s", path)

    results = await asyncio.gather(
        *(asyncio.to_thread(compress, path) for path in paths),
        return_exceptions=True,
    )

    failures = [result for result in results if isinstance(result, BaseException)]
    for failure in failures:
        if not isinstance(failure, Exception):
            raise failure
    if failures:
        if len(failures) > 1:
            logger.warning("%d of %d precompressions failed", len(failures), len(paths))
        raise failures[0]
    return paths


def precompress_dist_sync(
    dist_dir: Path,
    compress: Callable[[Path], Any] = precompress,
) -> list[Path]:
    return asyncio.run(precompress_dist(dist_dir, compress))
