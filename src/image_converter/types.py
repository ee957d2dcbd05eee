"""Shared type aliases and constants for conversion modules."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Final, Literal

type OutputFormat = Literal[
    "jpeg",
    "jpg",
    "png",
    "webp",
    "gif",
    "jp2",
    "tiff",
    "avif",
    "heif",
    "jxl",
    "raw",
    "tile",
]

SUPPORTED_FORMATS: Final[tuple[str, ...]] = (
    "jpeg",
    "jpg",
    "png",
    "webp",
    "gif",
    "jp2",
    "tiff",
    "avif",
    "heif",
    "jxl",
    "raw",
    "tile",
)
DEFAULT_FORMAT: Final = "jpg"
DEFAULT_QUALITY: Final = 80

type OptionScalar = str | int | None | Path
type OptionMap = Mapping[str, OptionScalar]


def extension_of(path: Path) -> str:
    """Return the lower-cased extension of ``path`` without its leading dot."""
    return path.suffix.lower().lstrip(".")


def is_supported_extension(path: Path) -> bool:
    """Check whether ``path`` carries an extension from the supported set."""
    return extension_of(path) in SUPPORTED_FORMATS
