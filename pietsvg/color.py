"""A simple 32-bit RGBA color type."""

from __future__ import annotations

import math
from dataclasses import dataclass

__all__ = ["Color", "ColorParseError"]


class ColorParseError(ValueError):
    """Raised when a hex color string cannot be parsed."""

    def __init__(
        self,
        message: str,
        *,
        size: int | None = None,
        idx: int | None = None,
        byte: int | None = None,
    ) -> None:
        super().__init__(message)
        self.size = size
        self.idx = idx
        self.byte = byte

    @classmethod
    def wrong_size(cls, size: int) -> "ColorParseError":
        return cls(f"Input string has invalid length {size}", size=size)

    @classmethod
    def not_hex(cls, idx: int, byte: int) -> "ColorParseError":
        return cls(
            f"byte {byte:X} at index {idx} is not valid hex digit", idx=idx, byte=byte
        )


def _check_byte(value: int) -> int:
    if not 0 <= value <= 0xFF:
        raise ValueError(f"channel value {value} is not in 0..=255")
    return value


def _unit_to_byte(x: float) -> int:
    if math.isnan(x):
        x = 0.0
    x = min(max(x, 0.0), 1.0)
    return math.floor(x * 255.0 + 0.5)


def _hex_digit(byte: int) -> int | None:
    if 0x30 <= byte <= 0x39:
        return byte - 0x30
    if 0x41 <= byte <= 0x46:
        return byte - 0x41 + 10
    if 0x61 <= byte <= 0x66:
        return byte - 0x61 + 10
    return None


def _four_bit_channels(hex_str: str) -> list[int]:
    data = hex_str.encode("utf-8")
    if data[:1] == b"#" and len(data) in (4, 5, 7, 9):
        data = data[1:]
    f = ord("f")
    if len(data) == 3:
        r, g, b = data
        raw = [r, r, g, g, b, b, f, f]
    elif len(data) == 4:
        r, g, b, a = data
        raw = [r, r, g, g, b, b, a, a]
    elif len(data) == 6:
        raw = [*data, f, f]
    elif len(data) == 8:
        raw = list(data)
    else:
        raise ColorParseError.wrong_size(len(data))

    channels = []
    for idx, byte in enumerate(raw):
        digit = _hex_digit(byte)
        if digit is None:
            raise ColorParseError.not_hex(idx, byte)
        channels.append(digit)
    return channels


@dataclass(frozen=True, repr=False)
class Color:
    """A color stored as a 32-bit RGBA value, alpha in the least significant byte."""

    value: int

    def __post_init__(self) -> None:
        if not 0 <= self.value <= 0xFFFFFFFF:
            raise ValueError(f"rgba value {self.value:#x} does not fit in 32 bits")

    def __repr__(self) -> str:
        return f"#{self.value:08x}"

    @classmethod
    def from_rgba32_u32(cls, rgba: int) -> "Color":
        """Create a color from a 32-bit rgba value."""
        return cls(rgba)

    @classmethod
    def rgb8(cls, r: int, g: int, b: int) -> "Color":
        """Create an opaque color from 8-bit channels."""
        return cls.rgba8(r, g, b, 0xFF)

    @classmethod
    def rgba8(cls, r: int, g: int, b: int, a: int) -> "Color":
        """Create a color from 8-bit channels."""
        r, g, b, a = (_check_byte(v) for v in (r, g, b, a))
        return cls((r << 24) | (g << 16) | (b << 8) | a)

    @classmethod
    def from_hex_str(cls, hex_str: str) -> "Color":
        """Parse `rgb`, `rgba`, `rrggbb` or `rrggbbaa`, with or without a leading `#`."""
        r0, r1, g0, g1, b0, b1, a0, a1 = _four_bit_channels(hex_str)
        return cls.rgba8(r0 << 4 | r1, g0 << 4 | g1, b0 << 4 | b1, a0 << 4 | a1)

    @classmethod
    def grey8(cls, grey: int) -> "Color":
        """Create an opaque grey from an 8-bit value."""
        return cls.rgb8(grey, grey, grey)

    @classmethod
    def grey(cls, grey: float) -> "Color":
        """Create an opaque grey from a value in 0.0..=1.0."""
        return cls.rgb(grey, grey, grey)

    @classmethod
    def rgba(cls, r: float, g: float, b: float, a: float) -> "Color":
        """Create a color from four values in 0.0..=1.0, clamped."""
        r, g, b, a = (_unit_to_byte(v) for v in (r, g, b, a))
        return cls((r << 24) | (g << 16) | (b << 8) | a)

    @classmethod
    def rgb(cls, r: float, g: float, b: float) -> "Color":
        """Create an opaque color from three values in 0.0..=1.0, clamped."""
        return cls.rgba(r, g, b, 1.0)

    @classmethod
    def hlc(cls, h: float, l: float, c: float) -> "Color":  # noqa: E741
        """Create a color from a CIE HCL specification (hue in degrees, L in 0..100)."""

        def f_inv(t: float) -> float:
            d = 6.0 / 29.0
            if t > d:
                return t**3
            return 3.0 * d * d * (t - 4.0 / 29.0)

        def gamma(u: float) -> float:
            if u <= 0.0031308:
                return 12.92 * u
            return 1.055 * u ** (1.0 / 2.4) - 0.055

        th = h * (math.pi / 180.0)
        a = c * math.cos(th)
        b = c * math.sin(th)
        ll = (l + 16.0) * (1.0 / 116.0)
        x = f_inv(ll + a * (1.0 / 500.0))
        y = f_inv(ll)
        z = f_inv(ll - b * (1.0 / 200.0))
        r_lin = 3.02172918 * x - 1.61692294 * y - 0.40480625 * z
        g_lin = -0.94339358 * x + 1.91584267 * y + 0.02755094 * z
        b_lin = 0.06945666 * x - 0.22903204 * y + 1.15957526 * z
        return cls.rgb(gamma(r_lin), gamma(g_lin), gamma(b_lin))

    @classmethod
    def hlca(cls, h: float, l: float, c: float, a: float) -> "Color":  # noqa: E741
        """Create a color from a CIE HCL specification and an alpha value."""
        return cls.hlc(h, c, l).with_alpha(a)

    def with_alpha(self, a: float) -> "Color":
        """Return this color with its alpha replaced."""
        return Color((self.value & ~0xFF & 0xFFFFFFFF) | _unit_to_byte(a))

    def as_rgba_u32(self) -> int:
        return self.value

    def as_rgba8(self) -> tuple[int, int, int, int]:
        v = self.value
        return ((v >> 24) & 255, (v >> 16) & 255, (v >> 8) & 255, v & 255)

    def as_rgba(self) -> tuple[float, float, float, float]:
        r, g, b, a = self.as_rgba8()
        return (r / 255.0, g / 255.0, b / 255.0, a / 255.0)


Color.AQUA = Color.rgb8(0, 255, 255)
Color.BLACK = Color.rgb8(0, 0, 0)
Color.BLUE = Color.rgb8(0, 0, 255)
Color.FUCHSIA = Color.rgb8(255, 0, 255)
Color.GRAY = Color.grey8(128)
Color.GREEN = Color.rgb8(0, 128, 0)
Color.LIME = Color.rgb8(0, 255, 0)
Color.MAROON = Color.rgb8(128, 0, 0)
Color.NAVY = Color.rgb8(0, 0, 128)
Color.OLIVE = Color.rgb8(128, 128, 0)
Color.PURPLE = Color.rgb8(128, 0, 128)
Color.RED = Color.rgb8(255, 0, 0)
Color.SILVER = Color.grey8(192)
Color.TEAL = Color.rgb8(0, 128, 128)
Color.TRANSPARENT = Color.rgba8(0, 0, 0, 0)
Color.WHITE = Color.grey8(255)
Color.YELLOW = Color.rgb8(255, 255, 0)