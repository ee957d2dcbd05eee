"""Public batch conversion API (delegates to application use-cases)."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from image_converter.application.ports import CodecEngine
from image_converter.application.results import BatchResult
from image_converter.application.scheduler import OutcomeListener
from image_converter.application.use_cases import run_batch


def convert_images(
    source: str | Path,
    destination: Optional[str | Path] = None,
    width: Optional[int] = None,
    height: Optional[int] = None,
    quality: Optional[int] = None,
    output_format: Optional[str] = None,
    concurrency: Optional[int] = None,
    codec: Optional[CodecEngine] = None,
    on_outcome: Optional[OutcomeListener] = None,
) -> BatchResult:
    """Resize and convert every eligible image under ``source``."""
    options: dict[str, object] = {
        "source": source,
        "destination": destination,
        "width": width,
        "height": height,
        "quality": quality,
        "format": output_format,
        "concurrency": concurrency,
    }
    return run_batch(options, codec=codec, on_outcome=on_outcome)
