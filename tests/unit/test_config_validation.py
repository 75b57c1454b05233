import pytest

from webdist.config import DIST_DIR, get_settings, validate_settings_for_env
from webdist.errors import ConfigError


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("CACHE_MAX_AGE_SECONDS", raising=False)
    get_settings.cache_clear()
    try:
        settings = get_settings()
        validate_settings_for_env(settings)
    finally:
        get_settings.cache_clear()
    assert settings.bind_host == "127.0.0.1"
    assert settings.bind_port == 8000
    assert settings.cache_max_age_seconds == 31535996
    assert settings.dist_path == settings.root_path / DIST_DIR


def test_env_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.setenv("WEB_ROOT", str(tmp_path))
    monkeypatch.setenv("BIND_PORT", "9090")
    monkeypatch.setenv("ESBUILD_BIN", "/opt/esbuild/bin/esbuild")

    get_settings.cache_clear()
    try:
        settings = get_settings()
    finally:
        get_settings.cache_clear()
    assert settings.root_path == tmp_path
    assert settings.dist_path == tmp_path / "dist"
    assert settings.bind_port == 9090
    assert settings.esbuild_bin == "/opt/esbuild/bin/esbuild"


@pytest.mark.parametrize(
    ("key", "value"),
    [("BIND_PORT", "0"), ("BIND_PORT", "70000"), ("CACHE_MAX_AGE_SECONDS", "0"), ("WEB_ROOT", " ")],
)
def test_validate_settings_rejects_invalid(
    monkeypatch: pytest.MonkeyPatch, key: str, value: str
) -> None:
    monkeypatch.setenv(key, value)

    get_settings.cache_clear()
    try:
        settings = get_settings()
        with pytest.raises(ValueError, match=key):
            validate_settings_for_env(settings)
    finally:
        get_settings.cache_clear()


def test_validate_settings_prod_requires_esbuild_bin(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_ENV", "prod")
    monkeypatch.setenv("ESBUILD_BIN", "")

    get_settings.cache_clear()
    try:
        settings = get_settings()
        with pytest.raises(ValueError, match="ESBUILD_BIN"):
            validate_settings_for_env(settings)
    finally:
        get_settings.cache_clear()


def test_validate_settings_prod_warns_on_public_bind(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_ENV", "prod")
    monkeypatch.setenv("BIND_HOST", "0.0.0.0")

    get_settings.cache_clear()
    try:
        settings = get_settings()
        with pytest.warns(UserWarning, match="BIND_HOST=0.0.0.0"):
            validate_settings_for_env(settings)
    finally:
        get_settings.cache_clear()


def test_invalid_settings_raise_config_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BIND_PORT", "0")

    get_settings.cache_clear()
    try:
        settings = get_settings()
        with pytest.raises(ConfigError, match="BIND_PORT"):
            validate_settings_for_env(settings)
    finally:
        get_settings.cache_clear()


def test_dist_dir_is_fixed_below_web_root(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.setenv("WEB_ROOT", str(tmp_path))
    monkeypatch.setenv("DIST_DIR", "out")

    get_settings.cache_clear()
    try:
        settings = get_settings()
    finally:
        get_settings.cache_clear()
    assert settings.dist_path == tmp_path / DIST_DIR == tmp_path / "dist"
    assert not hasattr(settings, "dist_dir")
