"""Build mode: bundle, hash and precompress the frontend."""

from webdist.build.compress import precompress
from webdist.build.dist import clean_dist, compressible_files, precompress_dist
from webdist.build.entry_points import (
    EntryPointMap,
    entry_point_map,
    parse_metafile,
    read_entry_point_map,
    write_entry_point_map,
)
from webdist.build.pipeline import BuildReport, run_build

__all__ = [
    "BuildReport",
    "EntryPointMap",
    "clean_dist",
    "compressible_files",
    "entry_point_map",
    "parse_metafile",
    "precompress",
    "precompress_dist",
    "read_entry_point_map",
    "run_build",
    "write_entry_point_map",
]
