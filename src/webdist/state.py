"""Values computed once at startup and shared read-only with every request."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from webdist.assets import AssetSource
from webdist.index import RenderedIndex


@dataclass(frozen=True, slots=True)
class ServeState:
    index: RenderedIndex
    # Holds index.body; responses for / stream from here.
    index_file: Path
    assets: AssetSource
    # Last-Modified for every response: assets only change on restart.
    started_at: datetime
    cache_max_age_seconds: int = 31535996

    @property
    def cache_control(self) -> str:
        return f"public, max-age={self.cache_max_age_seconds}"

    @property
    def uptime_seconds(self) -> float:
        return (datetime.now(UTC) - self.started_at).total_seconds()
