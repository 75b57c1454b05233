"""Application configuration contract."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from webdist.errors import ConfigError

DIST_DIR = "dist"
INDEX_FILE = "index.html"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = Field(alias="APP_ENV", default="dev")
    log_level: str = Field(alias="LOG_LEVEL", default="INFO")

    # Directory holding index.html, src/ and dist/
    web_root: str = Field(alias="WEB_ROOT", default=".")
    esbuild_bin: str = Field(alias="ESBUILD_BIN", default="esbuild")

    # Security: bind host defaults to loopback
    bind_host: str = Field(alias="BIND_HOST", default="127.0.0.1")
    bind_port: int = Field(alias="BIND_PORT", default=8000)

    # Cache-Control max-age for /dist/ responses (about one year)
    cache_max_age_seconds: int = Field(alias="CACHE_MAX_AGE_SECONDS", default=31535996)

    @property
    def root_path(self) -> Path:
        return Path(self.web_root).expanduser()

    @property
    def dist_path(self) -> Path:
        return self.root_path / DIST_DIR


def validate_settings_for_env(settings: Settings) -> None:
    import logging as _logging
    import warnings

    _logger = _logging.getLogger(__name__)

    # Warn if binding to 0.0.0.0 in production
    if settings.app_env == "prod" and settings.bind_host == "0.0.0.0":
        msg = (
            "SECURITY WARNING: BIND_HOST=0.0.0.0 in production. "
            "This exposes the server to all network interfaces. "
            "Set BIND_HOST=127.0.0.1 and use a reverse proxy."
        )
        _logger.warning(msg)
        warnings.warn(msg, stacklevel=2)

    invalid: list[str] = []
    if not 0 < settings.bind_port < 65536:
        invalid.append("BIND_PORT(1-65535)")
    if not settings.web_root.strip():
        invalid.append("WEB_ROOT")
    if settings.cache_max_age_seconds <= 0:
        invalid.append("CACHE_MAX_AGE_SECONDS(> 0)")
    if settings.app_env == "prod" and not settings.esbuild_bin.strip():
        invalid.append("ESBUILD_BIN")

    if invalid:
        keys = ", ".join(sorted(set(invalid)))
        raise ConfigError(f"invalid configuration: {keys}")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
