"""Read-only asset tree served by the app, plus encoding negotiation."""

from __future__ import annotations

from pathlib import Path, PurePosixPath
from typing import Protocol

from webdist.build.compress import BROTLI_SUFFIX, GZIP_SUFFIX
from webdist.errors import AssetNotFoundError


class AssetSource(Protocol):
    def locate(self, name: str) -> Path:
        """Return the path backing *name* (slash-separated, relative) or raise AssetNotFoundError."""
        ...


def _not_found(name: str) -> AssetNotFoundError:
    return AssetNotFoundError(f"open {name}: file does not exist")


def _valid_name(name: str) -> bool:
    if not name or name.startswith("/") or "\\" in name or "\x00" in name:
        return False
    parts = PurePosixPath(name).parts
    return all(part not in ("", ".", "..") for part in parts)


class DirectoryAssets:
    """Assets below a directory tree that is not modified while serving.

    Any existing entry resolves, directories included; whether it can be
    streamed is up to the caller. Symlinks may not lead outside the root.
    """

    def __init__(self, root: Path) -> None:
        self.root = root

    def locate(self, name: str) -> Path:
        if not _valid_name(name):
            raise _not_found(name)
        path = self.root.joinpath(*PurePosixPath(name).parts)
        try:
            resolved = path.resolve(strict=True)
            root = self.root.resolve(strict=True)
        except (OSError, RuntimeError) as exc:
            raise _not_found(name) from exc
        if not resolved.is_relative_to(root):
            raise _not_found(name)
        return path


def read_asset(source: AssetSource, name: str) -> bytes:
    return source.locate(name).read_bytes()


def accepts_encoding(accept_encoding: str | None, encoding: str) -> bool:
    """Report whether an Accept-Encoding header value lists *encoding*.

    Parameters are ignored except an explicit ``q=0``, which rejects the coding.
    """
    if not accept_encoding:
        return False
    wanted = encoding.lower()
    for part in accept_encoding.split(","):
        coding, _, params = part.partition(";")
        if coding.strip().lower() != wanted:
            continue
        for param in params.split(";"):
            key, _, value = param.partition("=")
            if key.strip().lower() == "q":
                try:
                    return float(value.strip()) > 0
                except ValueError:
                    return True
        return True
    return False


def best_variant(
    source: AssetSource,
    name: str,
    accept_encoding: str | None,
) -> tuple[Path, str | None]:
    """Locate the smallest variant of *name* the client can decode.

    Prefers ``name.br``, then ``name.gz``, then *name* itself. Returns the
    path and its Content-Encoding (None for the raw file); raises
    AssetNotFoundError if the raw file is missing too.
    """
    # Prefer pre-compressed versions generated during the build step.
    if accepts_encoding(accept_encoding, "br"):
        try:
            return source.locate(name + BROTLI_SUFFIX), "br"
        except AssetNotFoundError:
            pass
    if accepts_encoding(accept_encoding, "gzip"):
        try:
            return source.locate(name + GZIP_SUFFIX), "gzip"
        except AssetNotFoundError:
            pass
    return source.locate(name), None
