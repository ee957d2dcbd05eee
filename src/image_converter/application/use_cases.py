"""Application use-cases orchestrating batch conversion workflows."""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable, Mapping
from datetime import datetime
from pathlib import Path

from pydantic import ValidationError

from image_converter.application.options import ConversionRequest, ConversionTask
from image_converter.application.planning import plan_dimensions
from image_converter.application.ports import CodecEngine
from image_converter.application.results import BatchResult, TaskOutcome, TaskSuccess
from image_converter.application.scheduler import OutcomeListener, TaskScheduler
from image_converter.errors import (
    BATCH_FATAL_ERRORS,
    CodecError,
    ConversionError,
    InvalidOptionsError,
    InvalidQualityError,
    InvalidSourceError,
    UnreadableDimensionsError,
)
from image_converter.infrastructure.destination import provision_destination
from image_converter.infrastructure.sources import SourceSet, resolve_sources
from image_converter.schemas import BatchOptionsConfig

logger = logging.getLogger(__name__)

type BatchOptions = BatchOptionsConfig | Mapping[str, object]


class BatchState(enum.Enum):
    """Lifecycle of a single batch run."""

    IDLE = "idle"
    VALIDATING = "validating"
    RESOLVING = "resolving"
    PROVISIONING = "provisioning"
    DISPATCHING = "dispatching"
    AGGREGATING = "aggregating"
    DONE = "done"
    FAILED = "failed"


def validate_batch_options(options: BatchOptions) -> BatchOptionsConfig:
    """Validate raw options, translating schema errors into the error taxonomy.

    Raises
    ------
    InvalidQualityError
        If ``quality`` is not an integer in ``[0, 100)``.
    InvalidSourceError
        If ``source`` is missing or blank.
    InvalidOptionsError
        If ``options`` is not a mapping, or for any other invalid option.
    """
    if isinstance(options, BatchOptionsConfig):
        return options
    if not isinstance(options, Mapping):
        raise InvalidOptionsError(
            f"Batch options must be a mapping, got {type(options).__name__}."
        )
    try:
        return BatchOptionsConfig.model_validate(dict(options))
    except ValidationError as exc:
        fields = {str(error["loc"][0]) for error in exc.errors() if error["loc"]}
        if "quality" in fields:
            raise InvalidQualityError(
                f"Invalid quality: {options.get('quality')!r}. Expected an integer in [0, 100)."
            ) from exc
        if "source" in fields:
            raise InvalidSourceError(f"Invalid source: {exc}") from exc
        raise InvalidOptionsError(f"Invalid batch options: {exc}") from exc


def convert_file(task: ConversionTask, codec: CodecEngine) -> TaskSuccess:
    """Use-case: convert one source file according to the batch request.

    Raises
    ------
    UnreadableDimensionsError
        If the codec engine cannot report positive dimensions.
    CodecError
        If the conversion itself fails, or another source of the batch
        already owns the output path.
    """
    request = task.request
    if task.collides_with is not None:
        raise CodecError(
            f"Output {request.output_path_for(task.source_path)} collides with "
            f"{task.collides_with}."
        )
    original = codec.read_metadata(task.source_path)
    if original.width <= 0 or original.height <= 0:
        raise UnreadableDimensionsError(
            f"{task.source_path} reported invalid dimensions "
            f"{original.width}x{original.height}."
        )

    plan = plan_dimensions(original, request.target_width, request.target_height)
    output_path = request.output_path_for(task.source_path)
    logger.info("%s ---> %s", task.source_path, plan)
    try:
        written = codec.convert(
            task.source_path,
            output_path,
            plan,
            request.output_format,
            request.quality,
        )
    except ConversionError:
        raise
    except Exception as exc:
        raise CodecError(str(exc)) from exc
    return TaskSuccess(source_path=task.source_path, output_path=written, plan=plan)


class BatchCoordinator:
    """Drive one batch from raw options to an aggregated ``BatchResult``.

    A coordinator instance runs one batch at a time; ``state`` and
    ``failure`` describe the most recent run.
    """

    def __init__(
        self,
        codec: CodecEngine | None = None,
        scheduler: TaskScheduler | None = None,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        if codec is None:
            from image_converter.adapters.codecs import PillowCodecEngine

            codec = PillowCodecEngine()
        self.codec = codec
        self.scheduler = scheduler
        self.now = now or datetime.now
        self.state = BatchState.IDLE
        self.failure: ConversionError | None = None

    def run(
        self,
        options: BatchOptions,
        on_outcome: OutcomeListener | None = None,
    ) -> BatchResult:
        """Validate, resolve, provision, dispatch and aggregate.

        Raises
        ------
        ConversionError
            A batch-fatal error raised before any task is dispatched.
        """
        self.failure = None
        try:
            self._enter(BatchState.VALIDATING)
            config = validate_batch_options(options)

            self._enter(BatchState.RESOLVING)
            sources = resolve_sources(config.source)

            self._enter(BatchState.PROVISIONING)
            destination = provision_destination(config.destination, sources, now=self.now)
        except BATCH_FATAL_ERRORS as exc:
            self.failure = exc
            logger.debug("batch failed in %s: %s", self.state.value, exc)
            self._enter(BatchState.FAILED)
            raise

        request = ConversionRequest(
            source_path=sources.root,
            destination_dir=destination,
            target_width=config.width,
            target_height=config.height,
            output_format=config.format,
            quality=config.quality,
        )
        scheduler = self.scheduler or TaskScheduler(config.concurrency)

        self._enter(BatchState.DISPATCHING)
        logger.info(
            "converting %d file(s) to %s in %s",
            len(sources),
            request.output_format,
            destination,
        )
        result = scheduler.run(
            build_tasks(request, sources),
            self._unit_of_work,
            on_outcome=on_outcome,
        )

        self._enter(BatchState.AGGREGATING)
        for failure in result.failed:
            logger.info(
                "failed to convert %s: %s: %s",
                failure.source_path,
                failure.error_kind,
                failure.error_detail,
            )
        logger.info("done: %d succeeded, %d failed", len(result.succeeded), len(result.failed))
        self._enter(BatchState.DONE)
        return result

    def _unit_of_work(self, task: ConversionTask) -> TaskOutcome:
        return convert_file(task, self.codec)

    def _enter(self, state: BatchState) -> None:
        logger.debug("batch state %s -> %s", self.state.value, state.value)
        self.state = state


def build_tasks(request: ConversionRequest, sources: SourceSet) -> list[ConversionTask]:
    """Build one task per source file, in source order.

    Output names are flat, so two sources sharing a stem map to the same
    output file. The first source in traversal order owns it; later ones are
    marked as colliding and fail without writing.
    """
    owners: dict[Path, Path] = {}
    tasks: list[ConversionTask] = []
    for path in sources:
        owner = owners.setdefault(request.output_path_for(path), path)
        collides_with = owner if owner != path else None
        tasks.append(
            ConversionTask(request=request, source_path=path, collides_with=collides_with)
        )
    return tasks


def run_batch(
    options: BatchOptions,
    *,
    codec: CodecEngine | None = None,
    scheduler: TaskScheduler | None = None,
    on_outcome: OutcomeListener | None = None,
    now: Callable[[], datetime] | None = None,
) -> BatchResult:
    """Use-case: run a full batch conversion with a fresh coordinator."""
    coordinator = BatchCoordinator(codec=codec, scheduler=scheduler, now=now)
    return coordinator.run(options, on_outcome=on_outcome)
