"""Thin wrapper around the esbuild command line.

Bundling, minification and content hashing are entirely esbuild's job; this
module only assembles the production flags, runs the binary and collects the
metafile plus any diagnostics it printed.
"""

from __future__ import annotations

import os
import re
import subprocess
import tempfile
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from webdist.config import DIST_DIR
from webdist.errors import BundlerError

DEFAULT_ENTRY_POINTS = ("src/index.js", "src/index.css")

_ERROR_MARKER = "[ERROR]"
_WARNING_MARKER = "[WARNING]"
_SUMMARY_RE = re.compile(r"^\d+ (errors?|warnings?)( and \d+ (errors?|warnings?))?$")

Runner = Callable[..., subprocess.CompletedProcess[str]]


@dataclass(slots=True)
class BundlerOptions:
    entry_points: tuple[str, ...] = DEFAULT_ENTRY_POINTS
    outdir: str = DIST_DIR
    minify: bool = True
    entry_names: str = "[dir]/[name]-[hash]"
    asset_names: str = "[name]-[hash]"
    target: str = "es2017"
    sourcemap: str = "linked"
    defines: dict[str, str] = field(default_factory=lambda: {"DEBUG": "false"})
    loaders: dict[str, str] = field(
        default_factory=lambda: {".woff": "file", ".woff2": "file", ".svg": "file", ".png": "file"}
    )


@dataclass(slots=True)
class BundleResult:
    metafile: str
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def build_command(binary: str, options: BundlerOptions, metafile_path: Path) -> list[str]:
    cmd = [binary, *options.entry_points, "--bundle", f"--outdir={options.outdir}"]
    if options.minify:
        cmd.append("--minify")
    cmd += [
        f"--entry-names={options.entry_names}",
        f"--asset-names={options.asset_names}",
        f"--target={options.target}",
        f"--sourcemap={options.sourcemap}",
        f"--metafile={metafile_path}",
        "--log-level=warning",
        "--log-limit=0",
        "--color=false",
    ]
    for name, value in sorted(options.defines.items()):
        cmd.append(f"--define:{name}={value}")
    for ext, loader in sorted(options.loaders.items()):
        cmd.append(f"--loader:{ext}={loader}")
    return cmd


def split_diagnostics(stderr: str) -> tuple[list[str], list[str]]:
    """Split esbuild's stderr into (errors, warnings), one string per message."""
    errors: list[str] = []
    warnings: list[str] = []
    current: list[str] | None = None
    target: list[str] | None = None

    def flush() -> None:
        if current is not None and target is not None:
            target.append("\n".join(current).strip())

    for line in stderr.splitlines():
        stripped = line.strip()
        if _ERROR_MARKER in line or _WARNING_MARKER in line:
            flush()
            current = [stripped]
            target = errors if _ERROR_MARKER in line else warnings
            continue
        if _SUMMARY_RE.match(stripped):
            flush()
            current, target = None, None
            continue
        if current is not None:
            current.append(line.rstrip())
    flush()
    return errors, warnings


def run_bundler(
    options: BundlerOptions,
    *,
    cwd: Path,
    binary: str = "esbuild",
    runner: Runner | None = None,
) -> BundleResult:
    """Run esbuild in *cwd* and return its metafile and diagnostics.

    Raises BundlerError when the binary is missing, exits non-zero or reports errors.
    """
    runner = runner or subprocess.run
    env = os.environ.copy()
    env.setdefault("NO_COLOR", "1")
    with tempfile.TemporaryDirectory(prefix="webdist-") as tmp:
        metafile_path = Path(tmp) / "meta.json"
        cmd = build_command(binary, options, metafile_path)
        try:
            proc = runner(cmd, cwd=cwd, env=env, text=True, capture_output=True, check=False)
        except FileNotFoundError as exc:
            raise BundlerError(f"esbuild binary not found: {binary}") from exc

        errors, warnings = split_diagnostics(proc.stderr or "")
        if proc.returncode != 0 and not errors:
            errors = [(proc.stderr or "").strip() or f"esbuild exited with status {proc.returncode}"]
        if errors:
            raise BundlerError("Build failed", errors=errors)

        try:
            metafile = metafile_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise BundlerError(f"esbuild did not write a metafile: {exc}") from exc

    return BundleResult(metafile=metafile, errors=errors, warnings=warnings)
