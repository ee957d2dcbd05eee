"""Fakes implementing the codec port for unit tests."""

from __future__ import annotations

import threading
from pathlib import Path

import pytest

from image_converter.application.planning import DimensionPlan, ImageSize
from image_converter.errors import CodecError, UnreadableDimensionsError


class FakeCodec:
    """In-memory codec engine that writes placeholder output files."""

    def __init__(
        self,
        sizes: dict[str, tuple[int, int]] | None = None,
        failing: set[str] | None = None,
        unreadable: set[str] | None = None,
        crashing: set[str] | None = None,
    ) -> None:
        self.sizes = sizes or {}
        self.failing = failing or set()
        self.unreadable = unreadable or set()
        self.crashing = crashing or set()
        self.converted: list[tuple[Path, Path, DimensionPlan, str, int]] = []
        self._lock = threading.Lock()

    def read_metadata(self, path: Path) -> ImageSize:
        if path.name in self.unreadable:
            raise UnreadableDimensionsError(f"cannot read {path.name}")
        width, height = self.sizes.get(path.name, (100, 100))
        return ImageSize(width=width, height=height)

    def convert(
        self,
        source_path: Path,
        output_path: Path,
        plan: DimensionPlan,
        output_format: str,
        quality: int,
    ) -> Path:
        if source_path.name in self.failing:
            raise CodecError(f"encoder rejected {source_path.name}")
        if source_path.name in self.crashing:
            raise RuntimeError(f"encoder crashed on {source_path.name}")
        output_path.write_bytes(b"converted")
        with self._lock:
            self.converted.append((source_path, output_path, plan, output_format, quality))
        return output_path

    def plan_for(self, name: str) -> DimensionPlan:
        for source_path, _, plan, _, _ in self.converted:
            if source_path.name == name:
                return plan
        raise KeyError(name)


@pytest.fixture
def fake_codec() -> FakeCodec:
    """Return a codec fake reporting 100x100 for every file."""
    return FakeCodec()


@pytest.fixture
def image_tree(tmp_path: Path) -> Path:
    """Create a source tree with eligible and ineligible files."""
    root = tmp_path / "photos"
    (root / "nested" / "deeper").mkdir(parents=True)
    (root / "a.jpg").write_bytes(b"a")
    (root / "b.PNG").write_bytes(b"b")
    (root / "notes.txt").write_text("not an image")
    (root / "nested" / "c.webp").write_bytes(b"c")
    (root / "nested" / "deeper" / "d.tiff").write_bytes(b"d")
    return root


@pytest.fixture
def make_codec() -> type[FakeCodec]:
    """Return the codec fake class for tests that need custom behaviour."""
    return FakeCodec
