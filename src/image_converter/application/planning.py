"""Output dimension planning."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ImageSize:
    """Width and height reported by the codec engine."""

    width: int
    height: int


@dataclass(frozen=True)
class DimensionPlan:
    """Output dimensions computed for one source file."""

    width: int
    height: int

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


def plan_dimensions(
    original: ImageSize,
    target_width: int | None = None,
    target_height: int | None = None,
) -> DimensionPlan:
    """Compute output dimensions for one image.

    A missing side is derived from the original aspect ratio and truncated
    toward zero. Both sides missing keeps the original size; both present
    are used as given.

    Parameters
    ----------
    original : ImageSize
        Source dimensions. Both sides must be positive.
    target_width : int | None, default=None
        Requested width.
    target_height : int | None, default=None
        Requested height.

    Returns
    -------
    DimensionPlan
        Planned output size, every side at least 1.
    """
    ratio = original.width / original.height

    if target_width is None:
        if target_height is None:
            return DimensionPlan(width=original.width, height=original.height)
        return DimensionPlan(
            width=max(1, int(target_height * ratio)),
            height=target_height,
        )
    if target_height is None:
        return DimensionPlan(
            width=target_width,
            height=max(1, int(target_width / ratio)),
        )
    return DimensionPlan(width=target_width, height=target_height)
