"""webdist exception hierarchy.

All webdist-specific exceptions inherit from WebdistError so the CLI can
turn any build or startup failure into one fatal, descriptive exit.
"""


class WebdistError(Exception):
    """Base exception for all webdist errors."""


class ConfigError(WebdistError, ValueError):
    """Settings failed validation; also a ValueError for callers expecting one."""


class BundlerError(WebdistError):
    """The bundler could not run or reported build errors."""

    def __init__(self, message: str = "", *, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = list(errors or [])


class MetafileError(WebdistError):
    """Bundler metadata could not be parsed."""


class EntryPointMapError(WebdistError):
    """The entry point map artifact is missing or malformed."""


class CleanError(WebdistError):
    """The dist directory could not be cleaned."""


class DistWalkError(WebdistError):
    """The dist directory could not be traversed."""


class CompressionError(WebdistError):
    """A file could not be precompressed."""


class IndexRenderError(WebdistError):
    """index.html could not be generated at startup."""


class AssetNotFoundError(WebdistError):
    """No asset exists under the requested name."""
