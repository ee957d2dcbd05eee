"""Unit tests for the error taxonomy."""

from __future__ import annotations

import pytest

from image_converter import errors


@pytest.mark.parametrize(
    "error",
    [
        errors.InvalidOptionsError,
        errors.InvalidSourceError,
        errors.UnsupportedFormatError,
        errors.EmptySourceError,
        errors.InvalidQualityError,
        errors.DestinationNotWritableError,
    ],
)
def test_batch_fatal_errors(error: type[errors.ConversionError]) -> None:
    """Classify validation, source and destination errors as batch-fatal."""
    assert issubclass(error, errors.BATCH_FATAL_ERRORS)
    assert error.exit_code > 1


@pytest.mark.parametrize("error", [errors.UnreadableDimensionsError, errors.CodecError])
def test_per_file_errors(error: type[errors.ConversionError]) -> None:
    """Keep per-file errors out of the batch-fatal set."""
    assert not issubclass(error, errors.BATCH_FATAL_ERRORS)
    assert issubclass(error, errors.ConversionError)


def test_exit_codes_are_distinct() -> None:
    """Give every batch-fatal error its own exit code."""
    codes = [
        errors.InvalidOptionsError.exit_code,
        errors.InvalidSourceError.exit_code,
        errors.UnsupportedFormatError.exit_code,
        errors.EmptySourceError.exit_code,
        errors.InvalidQualityError.exit_code,
        errors.DestinationNotWritableError.exit_code,
    ]
    assert len(set(codes)) == len(codes)
