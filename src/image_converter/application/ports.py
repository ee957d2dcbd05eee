"""Application ports for clean architecture boundaries."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from image_converter.application.planning import DimensionPlan, ImageSize


class CodecEngine(Protocol):
    """Decode, resize and encode a single image file."""

    def read_metadata(self, path: Path) -> ImageSize:
        """Return source dimensions or raise ``UnreadableDimensionsError``."""

    def convert(
        self,
        source_path: Path,
        output_path: Path,
        plan: DimensionPlan,
        output_format: str,
        quality: int,
    ) -> Path:
        """Write the converted image and return its path, or raise ``CodecError``."""
