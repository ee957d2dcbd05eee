"""Typed option objects shared across conversion use-cases."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from image_converter.types import DEFAULT_FORMAT, DEFAULT_QUALITY


@dataclass(frozen=True)
class ConversionRequest:
    """Validated, batch-wide conversion settings shared by every worker.

    Parameters
    ----------
    source_path : Path
        Absolute path of the batch source (file or directory).
    destination_dir : Path
        Absolute, already provisioned output directory.
    target_width : int | None, default=None
        Requested output width. ``None`` keeps the aspect ratio.
    target_height : int | None, default=None
        Requested output height. ``None`` keeps the aspect ratio.
    output_format : str, default="jpg"
        Output format name, also used as the output file extension.
    quality : int, default=80
        Encoder quality in ``[0, 100)``.
    """

    source_path: Path
    destination_dir: Path
    target_width: int | None = None
    target_height: int | None = None
    output_format: str = DEFAULT_FORMAT
    quality: int = DEFAULT_QUALITY

    def output_path_for(self, source_file: Path) -> Path:
        """Return the destination path for one source file."""
        return self.destination_dir / f"{source_file.stem}.{self.output_format}"


@dataclass(frozen=True)
class ConversionTask:
    """One unit of scheduled work: a source file and the batch request.

    ``collides_with`` names an earlier source of the same batch that already
    owns this task's output path; such a task is reported as failed instead
    of writing.
    """

    request: ConversionRequest
    source_path: Path
    collides_with: Path | None = None
