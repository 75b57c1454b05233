"""Production build: clean, bundle, map hashed names, precompress."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from webdist.build.bundler import BundlerOptions, Runner, run_bundler
from webdist.build.dist import clean_dist, precompress_dist_sync
from webdist.build.entry_points import (
    EntryPointMap,
    entry_point_map,
    parse_metafile,
    write_entry_point_map,
)
from webdist.config import DIST_DIR, Settings
from webdist.logging import bind_context, clear_context

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BuildReport:
    entry_points: EntryPointMap
    compressed: list[Path] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def run_build(
    settings: Settings,
    *,
    options: BundlerOptions | None = None,
    runner: Runner | None = None,
) -> BuildReport:
    """Run the whole production build rooted at ``settings.web_root``.

    Any failure propagates as a WebdistError; output written before the
    failure is left in place.
    """
    root = settings.root_path
    dist_dir = settings.dist_path
    options = options or BundlerOptions(outdir=DIST_DIR)

    try:
        bind_context(phase="clean")
        clean_dist(dist_dir)

        bind_context(phase="bundle")
        logger.info("Running esbuild...")
        result = run_bundler(options, cwd=root, binary=settings.esbuild_bin, runner=runner)
        if result.warnings:
            logger.warning("esbuild reported %d warning(s)", len(result.warnings))
            for warning in result.warnings:
                logger.warning("%s", warning)

        # Extract hashed file names from the build metadata.
        bind_context(phase="map")
        mapping = entry_point_map(parse_metafile(result.metafile))
        map_path = write_entry_point_map(dist_dir, mapping)
        logger.info("Wrote %s with %d entries", map_path, len(mapping))

        bind_context(phase="precompress")
        compressed = precompress_dist_sync(dist_dir)
    finally:
        clear_context()

    logger.info("Build complete: %d file(s) precompressed", len(compressed))
    return BuildReport(entry_points=mapping, compressed=compressed, warnings=result.warnings)
