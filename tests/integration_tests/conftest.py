"""Fixtures that write real images with Pillow."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
from PIL import Image

type ImageFactory = Callable[..., Path]


@pytest.fixture
def make_image() -> ImageFactory:
    """Return a factory writing a solid-colour image of the given size."""

    def _make(
        path: Path,
        size: tuple[int, int],
        mode: str = "RGB",
        color: object = "steelblue",
        **save_kwargs: object,
    ) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.new(mode, size, color).save(path, **save_kwargs)
        return path

    return _make
