"""Top-level API for batch image resizing and format conversion."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from image_converter.application.results import BatchResult, TaskFailure, TaskSuccess
from image_converter.errors import ConversionError
from image_converter.types import DEFAULT_FORMAT, SUPPORTED_FORMATS

__version__ = "0.1.0"


def run_batch(options: Mapping[str, object]) -> BatchResult:
    """Run a batch conversion from an options mapping.

    Parameters
    ----------
    options : Mapping[str, object]
        ``source`` (required), and optional ``destination``, ``width``,
        ``height``, ``quality``, ``format`` and ``concurrency``.

    Returns
    -------
    BatchResult
        Per-file successes and failures. Per-file errors never raise.

    Raises
    ------
    ConversionError
        If options, source or destination are invalid. Nothing is
        converted in that case.
    """
    from .application.use_cases import run_batch as _impl

    return _impl(options)


def convert_images(
    source: str | Path,
    destination: str | Path | None = None,
    *,
    width: int | None = None,
    height: int | None = None,
    quality: int | None = None,
    output_format: str | None = None,
    concurrency: int | None = None,
) -> BatchResult:
    """Resize and convert every eligible image under ``source``.

    Parameters
    ----------
    source : str | Path
        Image file or directory tree.
    destination : str | Path | None, default=None
        Output directory. Defaults to a ``resized_<timestamp>`` sibling
        directory of the source.
    width, height : int | None, default=None
        Target size. A missing side keeps the aspect ratio.
    quality : int | None, default=None
        Encoder quality in ``[0, 100)``, 80 when omitted.
    output_format : str | None, default=None
        One of ``SUPPORTED_FORMATS``; unknown values fall back to ``jpg``.
    concurrency : int | None, default=None
        Worker count. Defaults to half the CPUs minus one.
    """
    from .api import convert_images as _impl

    return _impl(
        source=source,
        destination=destination,
        width=width,
        height=height,
        quality=quality,
        output_format=output_format,
        concurrency=concurrency,
    )


__all__ = [
    "BatchResult",
    "ConversionError",
    "DEFAULT_FORMAT",
    "SUPPORTED_FORMATS",
    "TaskFailure",
    "TaskSuccess",
    "convert_images",
    "run_batch",
]
