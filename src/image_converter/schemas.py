"""Pydantic schemas for runtime validation of batch options."""

from __future__ import annotations

import logging
import os

from pydantic import BaseModel, ConfigDict, Field, field_validator

from image_converter.types import DEFAULT_FORMAT, DEFAULT_QUALITY, SUPPORTED_FORMATS

logger = logging.getLogger(__name__)


class BatchOptionsConfig(BaseModel):
    """Validated input for a batch conversion run."""

    model_config = ConfigDict(extra="forbid", strict=True, frozen=True)

    source: str
    destination: str | None = None
    width: int | None = Field(default=None, gt=0)
    height: int | None = Field(default=None, gt=0)
    quality: int = Field(default=DEFAULT_QUALITY, ge=0, lt=100)
    format: str = DEFAULT_FORMAT
    concurrency: int | None = Field(default=None, gt=0)

    @field_validator("source", "destination", mode="before")
    @classmethod
    def _coerce_path(cls, value: object) -> object:
        if isinstance(value, os.PathLike):
            return os.fspath(value)
        return value

    @field_validator("source")
    @classmethod
    def _validate_source(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("source file or directory is missing.")
        return value

    @field_validator("destination")
    @classmethod
    def _blank_destination_is_absent(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value

    @field_validator("quality", mode="before")
    @classmethod
    def _default_quality(cls, value: object) -> object:
        return DEFAULT_QUALITY if value is None else value

    @field_validator("format", mode="before")
    @classmethod
    def _normalize_format(cls, value: object) -> object:
        if value is None:
            return DEFAULT_FORMAT
        if not isinstance(value, str):
            return value
        normalized = value.strip().lower().lstrip(".")
        if normalized not in SUPPORTED_FORMATS:
            logger.warning(
                "unsupported output format %r, falling back to %s", value, DEFAULT_FORMAT
            )
            return DEFAULT_FORMAT
        return normalized
