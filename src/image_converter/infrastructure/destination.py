"""Destination directory provisioning and write checks."""

from __future__ import annotations

import logging
import os
import uuid
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from image_converter.errors import DestinationNotWritableError
from image_converter.infrastructure.sources import SourceSet

logger = logging.getLogger(__name__)

DIRNAME_PREFIX = "resized_"
PROBE_PREFIX = ".image-converter-probe-"


def default_destination(sources: SourceSet, now: datetime) -> Path:
    """Return the ``resized_<YYYYMMDDHHMMSS>`` directory next to the source.

    For a file source the directory is a sibling of the file's parent
    directory, for a directory source a sibling of the directory itself.
    """
    dirname = f"{DIRNAME_PREFIX}{now:%Y%m%d%H%M%S}"
    anchor = sources.root.parent if sources.kind == "file" else sources.root
    return anchor.parent / dirname


def provision_destination(
    explicit_dest: str | os.PathLike[str] | None,
    sources: SourceSet,
    now: Callable[[], datetime] = datetime.now,
) -> Path:
    """Create the destination directory and check that it is writable.

    Parameters
    ----------
    explicit_dest : str | os.PathLike[str] | None
        Caller-supplied destination. ``None`` derives one from ``sources``.
    sources : SourceSet
        Resolved batch source.
    now : Callable[[], datetime], default=datetime.now
        Clock used to name the derived directory.

    Returns
    -------
    Path
        Absolute path of the writable destination directory.

    Raises
    ------
    DestinationNotWritableError
        If the directory cannot be created or the write probe fails.
    """
    if explicit_dest is None:
        destination = default_destination(sources, now())
    else:
        destination = Path(os.path.abspath(Path(explicit_dest).expanduser()))

    try:
        destination.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise DestinationNotWritableError(
            f"Failed to create destination directory {destination}: {exc}"
        ) from exc

    check_writable(destination)
    logger.debug("destination %s is writable", destination)
    return destination


def check_writable(directory: Path) -> None:
    """Create and remove a probe file inside ``directory``.

    Raises
    ------
    DestinationNotWritableError
        If the probe file cannot be created.
    """
    probe = directory / f"{PROBE_PREFIX}{uuid.uuid4().hex}"
    try:
        with probe.open("xb"):
            pass
    except OSError as exc:
        raise DestinationNotWritableError(
            f"Write test failed in {directory}: {exc}"
        ) from exc
    _remove_probe(probe)


def _remove_probe(probe: Path) -> None:
    # Best-effort cleanup: a missing probe is already clean.
    try:
        probe.unlink(missing_ok=True)
    except OSError as exc:
        logger.warning("could not remove write probe %s: %s", probe, exc)
