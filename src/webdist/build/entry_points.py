"""Map bundler entry points to their content-hashed output files."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from webdist.errors import EntryPointMapError, MetafileError

logger = logging.getLogger(__name__)

ENTRY_POINT_MAP_FILE = "entry-point-map.json"

EntryPointMap = dict[str, str]


class EsbuildOutput(BaseModel):
    """One entry of the metafile ``outputs`` table (see esbuild's metafile docs)."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    entry_point: str = Field(alias="entryPoint", default="")


class EsbuildMetadata(BaseModel):
    """The subset of the esbuild metafile needed to find hashed names."""

    model_config = ConfigDict(extra="ignore")

    outputs: dict[str, EsbuildOutput] = Field(default_factory=dict)


def parse_metafile(raw: str | bytes) -> EsbuildMetadata:
    try:
        return EsbuildMetadata.model_validate_json(raw)
    except ValidationError as exc:
        raise MetafileError(f"Cannot parse esbuild metadata: {exc}") from exc


def entry_point_map(metadata: EsbuildMetadata) -> EntryPointMap:
    """Invert the metafile: entry point -> output path that was built from it.

    Outputs without an entry point (chunks, source maps, assets) are skipped.
    If two outputs claim the same entry point the later one in the metafile wins.
    """
    mapping: EntryPointMap = {}
    for output_path, output in metadata.outputs.items():
        if not output.entry_point:
            continue
        previous = mapping.get(output.entry_point)
        if previous is not None and previous != output_path:
            logger.warning(
                "Entry point %s produced several outputs (%s, %s); keeping the last",
                output.entry_point,
                previous,
                output_path,
            )
        mapping[output.entry_point] = output_path
    return mapping


def write_entry_point_map(dist_dir: Path, mapping: EntryPointMap) -> Path:
    out_path = dist_dir / ENTRY_POINT_MAP_FILE
    try:
        out_path.write_text(json.dumps(mapping, sort_keys=True), encoding="utf-8")
    except OSError as exc:
        raise EntryPointMapError(f"Cannot write entry point map: {exc}") from exc
    return out_path


def read_entry_point_map(raw: str | bytes) -> EntryPointMap:
    try:
        payload = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise EntryPointMapError(f"Could not parse {ENTRY_POINT_MAP_FILE}: {exc}") from exc
    if not isinstance(payload, dict):
        raise EntryPointMapError(f"Could not parse {ENTRY_POINT_MAP_FILE}: expected an object")
    mapping: EntryPointMap = {}
    for key, value in payload.items():
        if not isinstance(value, str):
            raise EntryPointMapError(
                f"Could not parse {ENTRY_POINT_MAP_FILE}: value for {key!r} is not a string"
            )
        mapping[key] = value
    return mapping
