"""Click CLI group: build and serve commands."""

from __future__ import annotations

import logging

import click

from webdist.config import Settings, get_settings, validate_settings_for_env
from webdist.errors import BundlerError, ConfigError, WebdistError
from webdist.logging import configure_logging

logger = logging.getLogger(__name__)


def _settings_for(root: str | None) -> Settings:
    settings = get_settings()
    if root is not None:
        settings = settings.model_copy(update={"web_root": root})
    try:
        validate_settings_for_env(settings)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    configure_logging(settings.log_level)
    return settings


def parse_addr(addr: str) -> tuple[str, int]:
    """Split ``host:port`` (``[v6]:port`` allowed); an empty host means all interfaces."""
    host, sep, port = addr.rpartition(":")
    if not sep or not port.isdigit():
        raise click.BadParameter(f"expected HOST:PORT, got {addr!r}", param_hint="--addr")
    host = host.strip("[]") or "0.0.0.0"
    return host, int(port)


@click.group()
def cli() -> None:
    """Build and serve the hashed, precompressed web frontend."""


@cli.command()
@click.option(
    "--root",
    type=click.Path(exists=True, file_okay=False, path_type=str),
    default=None,
    help="Web root holding index.html, src/ and dist/ (default: WEB_ROOT).",
)
def build(root: str | None) -> None:
    """Production build: minify, hash and precompress into dist/."""
    from webdist.build.pipeline import run_build

    settings = _settings_for(root)
    try:
        report = run_build(settings)
    except BundlerError as exc:
        logger.error("ESBuild Error:")
        for error in exc.errors:
            logger.error("%s", error)
        raise click.ClickException(str(exc)) from exc
    except WebdistError as exc:
        logger.error("Build failed: %s", exc)
        raise click.ClickException(str(exc)) from exc

    for entry_point, output in sorted(report.entry_points.items()):
        click.echo(f"{entry_point} -> {output}")
    click.echo(f"precompressed {len(report.compressed)} file(s)")


@cli.command()
@click.option(
    "--root",
    type=click.Path(exists=True, file_okay=False, path_type=str),
    default=None,
    help="Web root holding index.html and dist/ (default: WEB_ROOT).",
)
@click.option(
    "--addr",
    type=str,
    default=None,
    help="Listen address HOST:PORT (default: BIND_HOST:BIND_PORT).",
)
def serve(root: str | None, addr: str | None) -> None:
    """Serve index.html and dist/ with precompressed asset negotiation."""
    import uvicorn

    from webdist.main import create_app

    settings = _settings_for(root)
    if addr is not None:
        host, port = parse_addr(addr)
        settings = settings.model_copy(update={"bind_host": host, "bind_port": port})
    try:
        app = create_app(settings=settings)
    except WebdistError as exc:
        logger.error("Startup failed: %s", exc)
        raise click.ClickException(str(exc)) from exc

    logger.info("Listening on %s:%d", settings.bind_host, settings.bind_port)
    uvicorn.run(app, host=settings.bind_host, port=settings.bind_port, log_config=None)
