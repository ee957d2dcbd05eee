"""Exception taxonomy for batch image conversion."""

from __future__ import annotations


class ConversionError(Exception):
    """Base class for all conversion failures.

    ``exit_code`` is the process exit code the CLI reports for the error.
    """

    exit_code = 1


class InvalidOptionsError(ConversionError):
    """Batch options have the wrong type or are out of range."""

    exit_code = 2


class InvalidSourceError(ConversionError):
    """Source path is missing, unreadable or could not be traversed."""

    exit_code = 3


class UnsupportedFormatError(ConversionError):
    """Source file extension is not in the supported-format set."""

    exit_code = 4


class EmptySourceError(ConversionError):
    """Source directory holds no eligible image file."""

    exit_code = 5


class InvalidQualityError(InvalidOptionsError):
    """Quality is outside ``[0, 100)``."""

    exit_code = 6


class DestinationNotWritableError(ConversionError):
    """Destination directory could not be created or written to."""

    exit_code = 7


class UnreadableDimensionsError(ConversionError):
    """Codec engine could not report a positive width and height."""


class CodecError(ConversionError):
    """Codec engine failed to convert a single file."""


BATCH_FATAL_ERRORS: tuple[type[ConversionError], ...] = (
    InvalidOptionsError,
    InvalidSourceError,
    UnsupportedFormatError,
    EmptySourceError,
    DestinationNotWritableError,
)
