"""Integration tests for the Pillow codec engine adapter."""

from __future__ import annotations

from pathlib import Path

import pytest
from PIL import Image, features

from image_converter.adapters.codecs import PillowCodecEngine, available_encoders
from image_converter.application.planning import DimensionPlan, ImageSize
from image_converter.errors import CodecError, UnreadableDimensionsError


@pytest.fixture
def codec() -> PillowCodecEngine:
    return PillowCodecEngine(register_plugins=False)


def test_read_metadata(codec: PillowCodecEngine, tmp_path: Path, make_image) -> None:
    """Report the pixel size of a PNG."""
    source = make_image(tmp_path / "a.png", (120, 80))
    assert codec.read_metadata(source) == ImageSize(width=120, height=80)


def test_read_metadata_applies_exif_rotation(
    codec: PillowCodecEngine, tmp_path: Path, make_image
) -> None:
    """Swap sides for images stored rotated by 90 degrees."""
    exif = Image.Exif()
    exif[0x0112] = 6
    source = make_image(tmp_path / "rotated.jpg", (300, 100), exif=exif)

    assert codec.read_metadata(source) == ImageSize(width=100, height=300)


def test_read_metadata_of_non_image(codec: PillowCodecEngine, tmp_path: Path) -> None:
    """Raise ``UnreadableDimensionsError`` for files Pillow cannot identify."""
    bogus = tmp_path / "fake.jpg"
    bogus.write_text("definitely not a jpeg")
    with pytest.raises(UnreadableDimensionsError):
        codec.read_metadata(bogus)


def test_read_metadata_of_oversized_image(
    codec: PillowCodecEngine, tmp_path: Path, make_image, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Report images over Pillow's pixel limit as unreadable."""
    source = make_image(tmp_path / "huge.png", (120, 80))
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)

    with pytest.raises(UnreadableDimensionsError, match="huge.png"):
        codec.read_metadata(source)


def test_convert_oversized_image(
    codec: PillowCodecEngine, tmp_path: Path, make_image, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Raise ``CodecError`` when decoding trips Pillow's pixel limit."""
    source = make_image(tmp_path / "huge.png", (120, 80))
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)

    with pytest.raises(CodecError):
        codec.convert(source, tmp_path / "huge.jpg", DimensionPlan(10, 10), "jpg", 80)


def test_convert_covers_and_crops(codec: PillowCodecEngine, tmp_path: Path, make_image) -> None:
    """Fill the planned box exactly, cropping the overflow."""
    source = make_image(tmp_path / "wide.png", (400, 200))
    target = tmp_path / "wide.png.out"

    written = codec.convert(source, target, DimensionPlan(100, 100), "png", 80)

    assert written == target
    with Image.open(target) as img:
        assert img.format == "PNG"
        assert img.size == (100, 100)


def test_convert_rgba_to_jpeg(codec: PillowCodecEngine, tmp_path: Path, make_image) -> None:
    """Drop the alpha channel for encoders that only accept RGB."""
    source = make_image(tmp_path / "alpha.png", (50, 40), mode="RGBA", color=(10, 20, 30, 128))
    target = tmp_path / "alpha.jpg"

    codec.convert(source, target, DimensionPlan(25, 20), "jpg", 60)

    with Image.open(target) as img:
        assert img.format == "JPEG"
        assert img.mode == "RGB"
        assert img.size == (25, 20)


def test_convert_without_encoder(codec: PillowCodecEngine, tmp_path: Path, make_image) -> None:
    """Fail per file for formats Pillow cannot write."""
    source = make_image(tmp_path / "a.png", (10, 10))
    with pytest.raises(CodecError, match="No Pillow encoder"):
        codec.convert(source, tmp_path / "a.raw", DimensionPlan(5, 5), "raw", 80)


def test_convert_corrupt_source(codec: PillowCodecEngine, tmp_path: Path) -> None:
    """Wrap decoder failures into ``CodecError``."""
    bogus = tmp_path / "broken.png"
    bogus.write_bytes(b"\x89PNG\r\n\x1a\n garbage")
    with pytest.raises(CodecError, match="Failed to convert"):
        codec.convert(bogus, tmp_path / "broken.jpg", DimensionPlan(5, 5), "jpg", 80)


@pytest.mark.skipif(not features.check("webp"), reason="Pillow built without WebP")
def test_convert_webp_honours_quality(
    codec: PillowCodecEngine, tmp_path: Path, make_image
) -> None:
    """Write smaller WebP files at lower quality."""
    source = tmp_path / "noise.png"
    Image.effect_noise((256, 256), 64).convert("RGB").save(source)

    low = codec.convert(source, tmp_path / "low.webp", DimensionPlan(256, 256), "webp", 5)
    high = codec.convert(source, tmp_path / "high.webp", DimensionPlan(256, 256), "webp", 95)

    assert low.stat().st_size < high.stat().st_size


def test_available_encoders() -> None:
    """Report encoders for core formats and none for raw or tile."""
    encoders = available_encoders()
    assert encoders["jpg"] and encoders["jpeg"] and encoders["png"]
    assert not encoders["raw"]
    assert not encoders["tile"]
