import gzip
from pathlib import Path

import brotli
import pytest

from webdist.build.compress import precompress
from webdist.build.dist import (
    PLACEHOLDER_NAME,
    clean_dist,
    compressible_files,
    precompress_dist,
    precompress_dist_sync,
)
from webdist.errors import CleanError, CompressionError, DistWalkError


def _populate(dist: Path) -> None:
    dist.mkdir(exist_ok=True)
    (dist / PLACEHOLDER_NAME).write_text("")
    (dist / "index-1.js").write_text("a")
    (dist / "index-1.js.gz").write_bytes(b"old")
    (dist / "entry-point-map.json").write_text("{}")
    (dist / "nested").mkdir()
    (dist / "nested" / "chunk.js").write_text("b")


def test_clean_dist_keeps_placeholder(tmp_path: Path) -> None:
    dist = tmp_path / "dist"
    _populate(dist)

    removed = clean_dist(dist)

    assert [p.name for p in dist.iterdir()] == [PLACEHOLDER_NAME]
    assert {p.name for p in removed} == {
        "index-1.js",
        "index-1.js.gz",
        "entry-point-map.json",
        "nested",
    }


def test_clean_dist_twice_is_noop(tmp_path: Path) -> None:
    dist = tmp_path / "dist"
    _populate(dist)
    clean_dist(dist)
    assert clean_dist(dist) == []
    assert (dist / PLACEHOLDER_NAME).exists()


def test_clean_dist_missing_directory(tmp_path: Path) -> None:
    with pytest.raises(CleanError):
        clean_dist(tmp_path / "dist")


def test_compressible_files_filters_by_extension(tmp_path: Path) -> None:
    dist = tmp_path / "dist"
    dist.mkdir()
    for name in ("a.js", "b.css", "c.wasm", "d.map", "e.png", "a.js.gz", PLACEHOLDER_NAME):
        (dist / name).write_text("x")
    (dist / "sub.js").mkdir()
    (dist / "sub.js" / "f.js").write_text("x")

    selected = compressible_files(dist)

    assert [p.relative_to(dist).as_posix() for p in selected] == [
        "a.js",
        "b.css",
        "c.wasm",
        "sub.js/f.js",
    ]


def test_compressible_files_missing_root(tmp_path: Path) -> None:
    with pytest.raises(DistWalkError):
        compressible_files(tmp_path / "missing")


def test_precompress_dist_sync_writes_siblings(tmp_path: Path) -> None:
    dist = tmp_path / "dist"
    dist.mkdir()
    (dist / "app.js").write_text("console.log(1);\n" * 10)
    (dist / "app.css").write_text("p{}\n" * 10)
    (dist / "logo.png").write_bytes(b"\x89PNG")

    compressed = precompress_dist_sync(dist)

    assert sorted(p.name for p in compressed) == ["app.css", "app.js"]
    assert gzip.decompress((dist / "app.js.gz").read_bytes()) == (dist / "app.js").read_bytes()
    assert brotli.decompress((dist / "app.css.br").read_bytes()) == (dist / "app.css").read_bytes()
    assert not (dist / "logo.png.gz").exists()


@pytest.mark.asyncio
async def test_precompress_dist_reports_one_error_and_finishes_the_rest(tmp_path: Path) -> None:
    dist = tmp_path / "dist"
    dist.mkdir()
    for i in range(10):
        (dist / f"file{i}.js").write_text(f"var v{i} = {i};\n" * 10)
    calls: list[str] = []

    def _flaky(path: Path) -> tuple[Path, Path]:
        calls.append(path.name)
        if path.name == "file3.js":
            raise CompressionError(f"cannot compress {path}")
        return precompress(path)

    with pytest.raises(CompressionError, match="file3.js"):
        await precompress_dist(dist, compress=_flaky)

    assert len(calls) == 10
    written = sorted(p.name for p in dist.glob("*.js.gz"))
    assert len(written) == 9
    assert "file3.js.gz" not in written
    assert len(list(dist.glob("*.js.br"))) == 9


@pytest.mark.asyncio
async def test_precompress_dist_first_error_in_walk_order(tmp_path: Path) -> None:
    dist = tmp_path / "dist"
    dist.mkdir()
    for name in ("a.js", "b.js", "c.js"):
        (dist / name).write_text("x")

    def _fail_some(path: Path) -> None:
        if path.name in {"b.js", "c.js"}:
            raise CompressionError(path.name)

    with pytest.raises(CompressionError, match="^b.js$"):
        await precompress_dist(dist, compress=_fail_some)
