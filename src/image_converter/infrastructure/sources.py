"""Source path resolution and discovery of eligible image files."""

from __future__ import annotations

import logging
import os
import stat
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from image_converter.errors import (
    EmptySourceError,
    InvalidSourceError,
    UnsupportedFormatError,
)
from image_converter.types import SUPPORTED_FORMATS, extension_of, is_supported_extension

logger = logging.getLogger(__name__)

type SourceKind = Literal["file", "directory"]


@dataclass(frozen=True)
class SourceSet:
    """Validated, ordered image files for one batch.

    Parameters
    ----------
    root : Path
        Absolute path of the source argument.
    kind : {"file", "directory"}
        Whether ``root`` is a single file or a directory tree.
    files : tuple[Path, ...]
        Absolute paths of eligible files in traversal order.
    """

    root: Path
    kind: SourceKind
    files: tuple[Path, ...]

    def __len__(self) -> int:
        return len(self.files)

    def __iter__(self) -> Iterator[Path]:
        return iter(self.files)


def resolve_sources(source: str | os.PathLike[str]) -> SourceSet:
    """Classify ``source`` and collect the image files it refers to.

    Parameters
    ----------
    source : str | os.PathLike[str]
        File or directory path, relative paths resolve against the CWD.

    Returns
    -------
    SourceSet
        One file for a file source, every eligible file for a directory.

    Raises
    ------
    InvalidSourceError
        If the path does not exist, cannot be stat-ed, is neither a file nor
        a directory, or the directory tree cannot be traversed.
    UnsupportedFormatError
        If a file source has an unsupported extension.
    EmptySourceError
        If a directory source contains no eligible file.
    """
    root = Path(os.path.abspath(Path(source).expanduser()))
    try:
        mode = root.stat().st_mode
    except OSError as exc:
        raise InvalidSourceError(f"{root} is not a valid source: {exc}") from exc

    if stat.S_ISREG(mode):
        if not is_supported_extension(root):
            raise UnsupportedFormatError(
                f"{root} has unsupported extension '{extension_of(root)}'. "
                f"Supported: {', '.join(SUPPORTED_FORMATS)}"
            )
        return SourceSet(root=root, kind="file", files=(root,))

    if stat.S_ISDIR(mode):
        files = tuple(_walk_images(root))
        if not files:
            raise EmptySourceError(f"{root} does not contain any compatible image file.")
        logger.debug("resolved %d image(s) under %s", len(files), root)
        return SourceSet(root=root, kind="directory", files=files)

    raise InvalidSourceError(f"{root} is neither a regular file nor a directory.")


def _walk_images(directory: Path) -> Iterator[Path]:
    """Yield eligible files depth-first, files of a directory before its subdirectories."""
    try:
        with os.scandir(directory) as scanner:
            entries = sorted(scanner, key=lambda entry: entry.name)
    except OSError as exc:
        raise InvalidSourceError(f"Failed to read files in {directory}: {exc}") from exc

    subdirectories: list[Path] = []
    for entry in entries:
        try:
            if entry.is_symlink():
                logger.debug("skipping symlink %s", entry.path)
            elif entry.is_file(follow_symlinks=False):
                path = directory / entry.name
                if is_supported_extension(path):
                    yield path
            elif entry.is_dir(follow_symlinks=False):
                subdirectories.append(directory / entry.name)
            else:
                logger.debug("skipping special file %s", entry.path)
        except OSError as exc:
            raise InvalidSourceError(f"Failed to inspect {entry.path}: {exc}") from exc

    for subdirectory in subdirectories:
        yield from _walk_images(subdirectory)
