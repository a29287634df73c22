"""In-memory pixel buffers."""

from __future__ import annotations

import enum
import io
import os
from dataclasses import dataclass
from typing import Iterator

from PIL import Image as PILImage

from .color import Color
from .geometry import Size

__all__ = ["ImageFormat", "ImageBuf"]


class ImageFormat(enum.Enum):
    """Pixel layout of raw image data."""

    GRAYSCALE = "grayscale"
    RGB = "rgb"
    RGBA_SEPARATE = "rgba_separate"
    RGBA_PREMUL = "rgba_premul"

    def bytes_per_pixel(self) -> int:
        if self is ImageFormat.GRAYSCALE:
            return 1
        if self is ImageFormat.RGB:
            return 3
        return 4


def _unpremul(x: int, a: int) -> int:
    """Undo alpha premultiplication of one channel, rounding to nearest."""
    if a == 0:
        return 0
    return min(255, (x * 255 + a // 2) // a)


_ALPHA_MODES = frozenset({"LA", "La", "RGBA", "RGBa", "PA"})


@dataclass(frozen=True, eq=False, repr=False)
class ImageBuf:
    """Raw pixel bytes with their dimensions and format."""

    pixels: bytes
    width: int
    height: int
    format: ImageFormat

    def __repr__(self) -> str:
        return (
            f"ImageBuf(size={len(self.pixels)}, width={self.width}, "
            f"height={self.height}, format={self.format.name})"
        )

    @classmethod
    def empty(cls) -> "ImageBuf":
        return cls(b"", 0, 0, ImageFormat.RGBA_SEPARATE)

    @classmethod
    def from_raw(cls, pixels: bytes, format: ImageFormat, width: int, height: int) -> "ImageBuf":
        """Wrap pixel data, which must hold exactly width * height pixels."""
        data = bytes(pixels)
        expected = width * height * format.bytes_per_pixel()
        if len(data) != expected:
            raise ValueError(f"pixel data has length {len(data)}, expected {expected}")
        return cls(data, width, height, format)

    @classmethod
    def _from_pil(cls, image: PILImage.Image) -> "ImageBuf":
        has_alpha = image.mode in _ALPHA_MODES or "transparency" in image.info
        if has_alpha:
            rgba = image.convert("RGBA")
            return cls.from_raw(rgba.tobytes(), ImageFormat.RGBA_SEPARATE, *rgba.size)
        rgb = image.convert("RGB")
        return cls.from_raw(rgb.tobytes(), ImageFormat.RGB, *rgb.size)

    @classmethod
    def from_data(cls, raw_image: bytes) -> "ImageBuf":
        """Decode an encoded image (PNG, JPEG, ...) from bytes."""
        with PILImage.open(io.BytesIO(raw_image)) as image:
            image.load()
            return cls._from_pil(image)

    @classmethod
    def from_file(cls, path: str | os.PathLike) -> "ImageBuf":
        """Decode an image file."""
        with PILImage.open(path) as image:
            image.load()
            return cls._from_pil(image)

    def raw_pixels(self) -> bytes:
        return self.pixels

    def size(self) -> Size:
        return Size(float(self.width), float(self.height))

    def _color_at(self, p: bytes) -> Color:
        if self.format is ImageFormat.GRAYSCALE:
            return Color.grey8(p[0])
        if self.format is ImageFormat.RGB:
            return Color.rgb8(p[0], p[1], p[2])
        if self.format is ImageFormat.RGBA_SEPARATE:
            return Color.rgba8(p[0], p[1], p[2], p[3])
        a = p[3]
        return Color.rgba8(_unpremul(p[0], a), _unpremul(p[1], a), _unpremul(p[2], a), a)

    def _row_colors(self, row: bytes) -> Iterator[Color]:
        bpp = self.format.bytes_per_pixel()
        for start in range(0, len(row), bpp):
            yield self._color_at(row[start : start + bpp])

    def pixel_colors(self) -> Iterator[Iterator[Color]]:
        """Iterate over rows, each an iterator over the colors of its pixels."""
        stride = self.width * self.format.bytes_per_pixel()
        if stride == 0:
            return
        for start in range(0, len(self.pixels), stride):
            yield self._row_colors(self.pixels[start : start + stride])