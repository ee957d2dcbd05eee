"""Bounded worker pool that runs one unit of work per conversion task."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor, as_completed

from image_converter.application.options import ConversionTask
from image_converter.application.results import BatchResult, TaskFailure, TaskOutcome

logger = logging.getLogger(__name__)

type UnitOfWork = Callable[[ConversionTask], TaskOutcome]
type OutcomeListener = Callable[[TaskOutcome, int, int], None]


def default_concurrency(cpu_count: int | None = None) -> int:
    """Return half the available CPUs minus one, never less than one.

    Parameters
    ----------
    cpu_count : int | None, default=None
        CPU count override. Defaults to ``os.cpu_count()``.
    """
    cpus = cpu_count if cpu_count is not None else (os.cpu_count() or 1)
    return max(1, cpus // 2 - 1)


class TaskScheduler:
    """Run conversion tasks on a fixed-size thread pool.

    Every task yields exactly one outcome. Exceptions raised by the unit of
    work are recorded as ``TaskFailure`` and never cancel sibling tasks.
    Outcomes are collected by the calling thread only.
    """

    def __init__(self, concurrency_limit: int | None = None) -> None:
        limit = default_concurrency() if concurrency_limit is None else concurrency_limit
        if limit <= 0:
            raise ValueError(f"concurrency_limit must be > 0, got {limit}")
        self.concurrency_limit = limit

    def run(
        self,
        tasks: Sequence[ConversionTask],
        unit_of_work: UnitOfWork,
        on_outcome: OutcomeListener | None = None,
    ) -> BatchResult:
        """Dispatch ``tasks`` and aggregate their outcomes.

        Parameters
        ----------
        tasks : Sequence[ConversionTask]
            Tasks to run, one per source file.
        unit_of_work : Callable[[ConversionTask], TaskOutcome]
            Converts a single task. It may raise; the exception becomes a
            ``TaskFailure`` for that task.
        on_outcome : Callable[[TaskOutcome, int, int], None] | None
            Called with ``(outcome, completed, total)`` after each task.

        Returns
        -------
        BatchResult
            Outcomes in completion order.
        """
        total = len(tasks)
        if total == 0:
            return BatchResult()

        workers = min(self.concurrency_limit, total)
        logger.debug("dispatching %d task(s) on %d worker(s)", total, workers)

        outcomes: list[TaskOutcome] = []
        with ThreadPoolExecutor(
            max_workers=workers, thread_name_prefix="image-converter"
        ) as executor:
            future_to_task: dict[Future[TaskOutcome], ConversionTask] = {
                executor.submit(_guarded, unit_of_work, task): task for task in tasks
            }
            for future in as_completed(future_to_task):
                task = future_to_task[future]
                try:
                    outcome = future.result()
                except Exception as exc:  # pragma: no cover - _guarded already catches
                    outcome = TaskFailure.from_exception(task.source_path, exc)
                outcomes.append(outcome)
                if on_outcome is not None:
                    _notify(on_outcome, outcome, len(outcomes), total)

        return BatchResult.from_outcomes(outcomes)


def _guarded(unit_of_work: UnitOfWork, task: ConversionTask) -> TaskOutcome:
    try:
        return unit_of_work(task)
    except Exception as exc:
        logger.debug("task failed for %s", task.source_path, exc_info=True)
        return TaskFailure.from_exception(task.source_path, exc)


def _notify(
    listener: OutcomeListener, outcome: TaskOutcome, completed: int, total: int
) -> None:
    try:
        listener(outcome, completed, total)
    except Exception:
        logger.exception("outcome listener failed for %s", outcome.source_path)
