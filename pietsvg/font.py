"""Font families, weights and styles."""

from __future__ import annotations

import enum
from dataclasses import dataclass

__all__ = ["FontFamily", "FontWeight", "FontStyle"]


@dataclass(frozen=True)
class FontFamily:
    """A generic CSS family such as ``serif``, or an explicit family name."""

    name: str
    generic: bool = False

    @classmethod
    def new_unchecked(cls, name: str) -> "FontFamily":
        """Create a named family without checking that it exists."""
        return cls(str(name))

    def is_generic(self) -> bool:
        return self.generic


FontFamily.SANS_SERIF = FontFamily("sans-serif", True)
FontFamily.SERIF = FontFamily("serif", True)
FontFamily.SYSTEM_UI = FontFamily("system-ui", True)
FontFamily.MONOSPACE = FontFamily("monospace", True)


@dataclass(frozen=True, order=True)
class FontWeight:
    """A font weight in the range 1..=1000; out-of-range values are clamped."""

    value: int = 400

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", min(max(int(self.value), 1), 1000))

    def to_raw(self) -> int:
        return self.value


FontWeight.THIN = FontWeight(100)
FontWeight.HAIRLINE = FontWeight.THIN
FontWeight.EXTRA_LIGHT = FontWeight(200)
FontWeight.LIGHT = FontWeight(300)
FontWeight.REGULAR = FontWeight(400)
FontWeight.NORMAL = FontWeight.REGULAR
FontWeight.MEDIUM = FontWeight(500)
FontWeight.SEMI_BOLD = FontWeight(600)
FontWeight.BOLD = FontWeight(700)
FontWeight.EXTRA_BOLD = FontWeight(800)
FontWeight.BLACK = FontWeight(900)
FontWeight.HEAVY = FontWeight.BLACK
FontWeight.EXTRA_BLACK = FontWeight(950)


class FontStyle(enum.Enum):
    """Regular or italic."""

    REGULAR = "regular"
    ITALIC = "italic"