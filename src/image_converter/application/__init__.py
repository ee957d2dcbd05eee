"""Application-layer use-cases, value objects and ports."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import datetime

from image_converter.application.options import ConversionRequest, ConversionTask
from image_converter.application.planning import DimensionPlan, ImageSize, plan_dimensions
from image_converter.application.ports import CodecEngine
from image_converter.application.results import (
    BatchResult,
    TaskFailure,
    TaskOutcome,
    TaskSuccess,
)
from image_converter.application.scheduler import (
    OutcomeListener,
    TaskScheduler,
    default_concurrency,
)
from image_converter.schemas import BatchOptionsConfig


def run_batch(
    options: BatchOptionsConfig | Mapping[str, object],
    *,
    codec: CodecEngine | None = None,
    scheduler: TaskScheduler | None = None,
    on_outcome: OutcomeListener | None = None,
    now: Callable[[], datetime] | None = None,
) -> BatchResult:
    """Run a batch conversion via lazy use-case import."""
    from image_converter.application.use_cases import run_batch as _impl

    return _impl(
        options,
        codec=codec,
        scheduler=scheduler,
        on_outcome=on_outcome,
        now=now,
    )


__all__ = [
    "BatchResult",
    "CodecEngine",
    "ConversionRequest",
    "ConversionTask",
    "DimensionPlan",
    "ImageSize",
    "TaskFailure",
    "TaskOutcome",
    "TaskScheduler",
    "TaskSuccess",
    "default_concurrency",
    "plan_dimensions",
    "run_batch",
]
