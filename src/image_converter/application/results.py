"""Application-layer result objects."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from image_converter.application.planning import DimensionPlan


@dataclass(frozen=True)
class TaskSuccess:
    """A source file converted and written to ``output_path``."""

    source_path: Path
    output_path: Path
    plan: DimensionPlan | None = None


@dataclass(frozen=True)
class TaskFailure:
    """A source file that could not be converted."""

    source_path: Path
    error_detail: str
    error_kind: str = "ConversionError"

    @classmethod
    def from_exception(cls, source_path: Path, exc: BaseException) -> TaskFailure:
        """Build a failure record from the exception raised by a task."""
        return cls(
            source_path=source_path,
            error_detail=str(exc) or repr(exc),
            error_kind=type(exc).__name__,
        )


type TaskOutcome = TaskSuccess | TaskFailure


@dataclass(frozen=True)
class BatchResult:
    """Structured outcome of a batch run."""

    succeeded: tuple[TaskSuccess, ...] = ()
    failed: tuple[TaskFailure, ...] = ()

    @classmethod
    def from_outcomes(cls, outcomes: Iterable[TaskOutcome]) -> BatchResult:
        """Split outcomes into successes and failures, keeping their order."""
        succeeded: list[TaskSuccess] = []
        failed: list[TaskFailure] = []
        for outcome in outcomes:
            if isinstance(outcome, TaskSuccess):
                succeeded.append(outcome)
            else:
                failed.append(outcome)
        return cls(succeeded=tuple(succeeded), failed=tuple(failed))

    @property
    def total(self) -> int:
        """Number of files accounted for."""
        return len(self.succeeded) + len(self.failed)

    @property
    def ok(self) -> bool:
        """``True`` when no file failed."""
        return not self.failed

    def source_paths(self) -> set[Path]:
        """Return every source path that appears in the result."""
        return {outcome.source_path for outcome in (*self.succeeded, *self.failed)}
