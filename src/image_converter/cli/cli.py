#!/usr/bin/env python3
"""
image_converter.cli.cli

Typer-based CLI for batch image resizing and format conversion.

Examples
--------
Install core + CLI:

    uv pip install -e ".[cli]"

Resize a directory tree to 1280px wide WebP files:

    image-converter resize ./photos --width 1280 --format webp --quality 85
"""

from __future__ import annotations

import logging
import sys
import traceback
from pathlib import Path

import typer

from image_converter.application.results import BatchResult, TaskOutcome, TaskSuccess
from image_converter.errors import ConversionError
from image_converter.types import DEFAULT_FORMAT, DEFAULT_QUALITY, SUPPORTED_FORMATS

app = typer.Typer(
    name="image-converter",
    help="Resize and convert image files or directory trees in parallel.",
    no_args_is_help=True,
)

PARTIAL_FAILURE_EXIT_CODE = 2
WORKERS_ENVVAR = "IMAGE_CONVERTER_WORKERS"


# -----------------------------
# Utilities
# -----------------------------
class _EchoHandler(logging.Handler):
    """Route library log records to stderr through Typer."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            typer.echo(self.format(record), err=True)
        except Exception:
            self.handleError(record)


def _configure_logging(debug: bool) -> None:
    """Send library logs to stderr, verbosely when debugging."""
    package_logger = logging.getLogger("image_converter")
    package_logger.setLevel(logging.DEBUG if debug else logging.WARNING)
    if not any(isinstance(handler, _EchoHandler) for handler in package_logger.handlers):
        handler = _EchoHandler()
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        package_logger.addHandler(handler)


def _print_conversion_error(exc: Exception, debug: bool) -> int:
    """Print a user-friendly conversion error.

    Parameters
    ----------
    exc : Exception
        Exception raised before or during the batch.
    debug : bool
        Whether to include traceback details.

    Returns
    -------
    int
        Process exit code.
    """
    typer.echo(f"✗ {type(exc).__name__}: {exc}", err=True)
    if debug:
        typer.echo("\nTraceback:", err=True)
        typer.echo("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)), err=True)
    code = getattr(exc, "exit_code", None)
    if isinstance(code, int) and code > 0:
        return code
    return 1


def _echo_outcome(outcome: TaskOutcome, completed: int, total: int) -> None:
    """Print one progress line per finished file."""
    if isinstance(outcome, TaskSuccess):
        typer.echo(
            f"✓ [{completed}/{total}] {outcome.source_path.name} → {outcome.output_path.name}"
            f" ({outcome.plan})"
        )
    else:
        typer.echo(
            f"✗ [{completed}/{total}] {outcome.source_path.name}: {outcome.error_detail}",
            err=True,
        )


def _echo_summary(result: BatchResult) -> None:
    destination = result.succeeded[0].output_path.parent if result.succeeded else None
    summary = f"{len(result.succeeded)} converted, {len(result.failed)} failed"
    if destination is not None:
        summary += f" → {destination}"
    typer.echo(summary)


# -----------------------------
# Global options
# -----------------------------
@app.callback()
def _main(
    ctx: typer.Context,
    debug: bool = typer.Option(False, "--debug", help="Show debug logs and full tracebacks."),
) -> None:
    """Initialize shared CLI state.

    Parameters
    ----------
    ctx : typer.Context
        Typer context object used to store shared state.
    debug : bool, default=False
        Whether to enable debug output.
    """
    _configure_logging(debug)
    ctx.obj = {"debug": debug}


# -----------------------------
# Commands
# -----------------------------
@app.command("resize")
def resize_cmd(
    ctx: typer.Context,
    source: Path = typer.Argument(..., help="Image file or directory to convert."),
    destination: Path | None = typer.Option(
        None,
        "--dest",
        "-d",
        help="Output directory. Defaults to resized_<timestamp> next to the source.",
    ),
    width: int | None = typer.Option(None, "--width", min=1, help="Target width."),
    height: int | None = typer.Option(None, "--height", min=1, help="Target height."),
    quality: int = typer.Option(
        DEFAULT_QUALITY, "--quality", "-q", help="Encoder quality, 0 <= quality < 100."
    ),
    output_format: str = typer.Option(
        DEFAULT_FORMAT,
        "--format",
        "-f",
        help=f"Output format: {', '.join(SUPPORTED_FORMATS)}.",
    ),
    workers: int | None = typer.Option(
        None,
        "--workers",
        "-j",
        min=1,
        envvar=WORKERS_ENVVAR,
        help="Concurrent conversions. Defaults to half the CPUs minus one.",
    ),
    strict: bool = typer.Option(
        False, "--strict", help="Exit with code 2 when any file fails."
    ),
) -> None:
    """Resize and convert images.

    Parameters
    ----------
    ctx : typer.Context
        Typer context containing global options.
    source : Path
        Image file or directory tree.
    destination : Path | None
        Output directory.
    width, height : int | None
        Target size. A missing side keeps the aspect ratio.
    quality : int
        Encoder quality.
    output_format : str
        Output format. Unknown values fall back to ``jpg``.
    workers : int | None
        Worker count override.
    strict : bool
        Treat per-file failures as a failed run.
    """
    debug: bool = bool(ctx.obj.get("debug", False))

    try:
        from image_converter.api import convert_images

        result = convert_images(
            source=source,
            destination=destination,
            width=width,
            height=height,
            quality=quality,
            output_format=output_format,
            concurrency=workers,
            on_outcome=_echo_outcome,
        )
    except ConversionError as exc:
        raise typer.Exit(code=_print_conversion_error(exc, debug))
    except Exception as exc:
        raise typer.Exit(code=_print_conversion_error(exc, debug))

    _echo_summary(result)
    if strict and result.failed:
        raise typer.Exit(code=PARTIAL_FAILURE_EXIT_CODE)


@app.command("formats")
def formats_cmd() -> None:
    """List supported image formats."""
    for name in SUPPORTED_FORMATS:
        marker = " (default)" if name == DEFAULT_FORMAT else ""
        typer.echo(f"{name}{marker}")


@app.command("doctor")
def doctor_cmd() -> None:
    """Print installed toolchain versions and available encoders."""
    import importlib.metadata as metadata

    modules = ["pillow", "pillow-heif", "pydantic", "typer"]

    typer.echo(f"Python: {sys.version.split()[0]}")
    for module in modules:
        try:
            version = metadata.version(module)
            typer.echo(f"{module}: {version}")
        except metadata.PackageNotFoundError:
            typer.echo(f"{module}: <not installed>")

    try:
        from image_converter.adapters.codecs import available_encoders, register_optional_plugins

        register_optional_plugins()
        encoders = available_encoders()
    except Exception:
        typer.echo("encoders: <unavailable>")
        return
    usable = [name for name, ok in encoders.items() if ok]
    missing = [name for name, ok in encoders.items() if not ok]
    typer.echo(f"encoders: {', '.join(usable)}")
    if missing:
        typer.echo(f"no encoder: {', '.join(missing)}")


if __name__ == "__main__":
    app()
