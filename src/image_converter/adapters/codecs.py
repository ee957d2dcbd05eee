"""Pillow-backed codec engine implementing the application port."""

from __future__ import annotations

import importlib
import importlib.util
import logging
from pathlib import Path
from typing import Any, Final

from PIL import Image, ImageOps

from image_converter.application.planning import DimensionPlan, ImageSize
from image_converter.errors import CodecError, UnreadableDimensionsError

logger = logging.getLogger(__name__)

# Output format name -> Pillow encoder name. ``None`` means no encoder exists.
PILLOW_FORMATS: Final[dict[str, str | None]] = {
    "jpeg": "JPEG",
    "jpg": "JPEG",
    "png": "PNG",
    "webp": "WEBP",
    "gif": "GIF",
    "jp2": "JPEG2000",
    "tiff": "TIFF",
    "avif": "AVIF",
    "heif": "HEIF",
    "jxl": "JXL",
    "raw": None,
    "tile": None,
}
QUALITY_ENCODERS: Final = frozenset({"JPEG", "WEBP", "AVIF", "HEIF", "JXL"})
RGB_ONLY_ENCODERS: Final = frozenset({"JPEG"})
RGB_COMPATIBLE_MODES: Final = frozenset({"RGB", "L", "CMYK"})

# EXIF orientations that rotate the image by 90 or 270 degrees.
_TRANSPOSED_ORIENTATIONS: Final = frozenset({5, 6, 7, 8})
_EXIF_ORIENTATION_TAG: Final = 0x0112

_OPTIONAL_PLUGINS: Final = (("pillow_heif", "register_heif_opener"),)


def _is_importable(module: str) -> bool:
    try:
        return importlib.util.find_spec(module) is not None
    except (ImportError, ValueError):
        return False


def register_optional_plugins() -> list[str]:
    """Register installed Pillow plugins and return their module names."""
    registered: list[str] = []
    for module_name, hook in _OPTIONAL_PLUGINS:
        if not _is_importable(module_name):
            continue
        module = importlib.import_module(module_name)
        getattr(module, hook)()
        registered.append(module_name)
        logger.debug("registered Pillow plugin %s", module_name)
    return registered


def available_encoders() -> dict[str, bool]:
    """Return whether Pillow can currently encode each output format."""
    Image.init()
    return {
        name: pillow_name is not None and pillow_name in Image.SAVE
        for name, pillow_name in PILLOW_FORMATS.items()
    }


class PillowCodecEngine:
    """Read, resize and encode images with Pillow."""

    def __init__(self, register_plugins: bool = True) -> None:
        if register_plugins:
            register_optional_plugins()

    def read_metadata(self, path: Path) -> ImageSize:
        """Return the displayed size of ``path``.

        Parameters
        ----------
        path : Path
            Source image file.

        Returns
        -------
        ImageSize
            Width and height after applying EXIF orientation.

        Raises
        ------
        UnreadableDimensionsError
            If the file cannot be opened or reports non-positive dimensions.
        """
        try:
            with Image.open(path) as img:
                width, height = img.size
                orientation = img.getexif().get(_EXIF_ORIENTATION_TAG)
        except (OSError, ValueError, Image.DecompressionBombError) as exc:
            raise UnreadableDimensionsError(
                f"Failed to acquire image dimensions of {path}: {exc}"
            ) from exc

        if not width or not height or width <= 0 or height <= 0:
            raise UnreadableDimensionsError(
                f"{path} is not a valid image file. Unable to acquire image dimensions."
            )
        if orientation in _TRANSPOSED_ORIENTATIONS:
            width, height = height, width
        return ImageSize(width=width, height=height)

    def convert(
        self,
        source_path: Path,
        output_path: Path,
        plan: DimensionPlan,
        output_format: str,
        quality: int,
    ) -> Path:
        """Resize ``source_path`` to cover ``plan`` and write ``output_path``.

        The image is scaled until it covers the planned box and the overflow
        is cropped around the centre, using Lanczos resampling.

        Raises
        ------
        CodecError
            If no encoder exists for ``output_format`` or decoding/encoding fails.
        """
        pillow_format = PILLOW_FORMATS.get(output_format)
        if pillow_format is None:
            raise CodecError(f"No Pillow encoder for output format '{output_format}'.")

        save_kwargs: dict[str, Any] = {}
        if pillow_format in QUALITY_ENCODERS:
            save_kwargs["quality"] = quality

        try:
            with Image.open(source_path) as img:
                oriented = ImageOps.exif_transpose(img)
                resized = ImageOps.fit(
                    oriented,
                    (plan.width, plan.height),
                    method=Image.Resampling.LANCZOS,
                )
                if pillow_format in RGB_ONLY_ENCODERS and resized.mode not in RGB_COMPATIBLE_MODES:
                    resized = resized.convert("RGB")
                resized.save(output_path, format=pillow_format, **save_kwargs)
        except (OSError, ValueError, KeyError, Image.DecompressionBombError) as exc:
            raise CodecError(
                f"Failed to convert {source_path} to {output_format}: {exc}"
            ) from exc
        return output_path
