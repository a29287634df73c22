"""Basic 2D geometry: vectors, points, rectangles, transforms and shapes."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterator, Union

__all__ = ["Vec2", "Point", "Size", "Rect", "Affine", "Circle", "RoundedRect", "BezPath"]


def _fmt(x: float) -> str:
    if math.isnan(x):
        return "NaN"
    if math.isinf(x):
        return "inf" if x > 0 else "-inf"
    text = format(Decimal(repr(float(x))), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


@dataclass(frozen=True)
class Vec2:
    """A 2D displacement."""

    x: float = 0.0
    y: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def __add__(self, other: "Vec2") -> "Vec2":
        if not isinstance(other, Vec2):
            return NotImplemented
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vec2") -> "Vec2":
        if not isinstance(other, Vec2):
            return NotImplemented
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, k: float) -> "Vec2":
        return Vec2(self.x * k, self.y * k)

    __rmul__ = __mul__

    def __truediv__(self, k: float) -> "Vec2":
        return Vec2(self.x / k, self.y / k)

    def __neg__(self) -> "Vec2":
        return Vec2(-self.x, -self.y)


@dataclass(frozen=True)
class Point:
    """A point in 2D space."""

    x: float = 0.0
    y: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def to_vec2(self) -> Vec2:
        return Vec2(self.x, self.y)

    def __add__(self, other: Vec2) -> "Point":
        if not isinstance(other, Vec2):
            return NotImplemented
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other):
        if isinstance(other, Point):
            return Vec2(self.x - other.x, self.y - other.y)
        if isinstance(other, Vec2):
            return Point(self.x - other.x, self.y - other.y)
        return NotImplemented


@dataclass(frozen=True)
class Size:
    """A width and a height."""

    width: float = 0.0
    height: float = 0.0

    def to_vec2(self) -> Vec2:
        return Vec2(self.width, self.height)

    def to_rect(self) -> "Rect":
        return Rect(0.0, 0.0, self.width, self.height)


Size.ZERO = Size(0.0, 0.0)


@dataclass(frozen=True)
class Rect:
    """An axis-aligned rectangle given by two corners."""

    x0: float = 0.0
    y0: float = 0.0
    x1: float = 0.0
    y1: float = 0.0

    @classmethod
    def from_origin_size(cls, origin: Point, size: Size) -> "Rect":
        end = origin + size.to_vec2()
        return cls(
            min(origin.x, end.x), min(origin.y, end.y), max(origin.x, end.x), max(origin.y, end.y)
        )

    def width(self) -> float:
        return self.x1 - self.x0

    def height(self) -> float:
        return self.y1 - self.y0

    def center(self) -> Point:
        return Point(0.5 * (self.x0 + self.x1), 0.5 * (self.y0 + self.y1))

    def origin(self) -> Point:
        return Point(self.x0, self.y0)

    def bounding_box(self) -> "Rect":
        """The same rectangle with its corners ordered."""
        return Rect(
            min(self.x0, self.x1), min(self.y0, self.y1), max(self.x0, self.x1), max(self.y0, self.y1)
        )


Rect.ZERO = Rect(0.0, 0.0, 0.0, 0.0)


@dataclass(frozen=True)
class Affine:
    """A 2D affine transform with coefficients (a, b, c, d, e, f)."""

    coeffs: tuple[float, float, float, float, float, float] = (1.0, 0.0, 0.0, 1.0, 0.0, 0.0)

    def __post_init__(self) -> None:
        coeffs = tuple(float(c) for c in self.coeffs)
        if len(coeffs) != 6:
            raise ValueError("an affine transform needs exactly six coefficients")
        object.__setattr__(self, "coeffs", coeffs)

    def as_coeffs(self) -> tuple[float, float, float, float, float, float]:
        return self.coeffs

    @classmethod
    def translate(cls, x: float, y: float) -> "Affine":
        return cls((1.0, 0.0, 0.0, 1.0, x, y))

    @classmethod
    def scale(cls, sx: float, sy: float) -> "Affine":
        return cls((sx, 0.0, 0.0, sy, 0.0, 0.0))

    def __mul__(self, other):
        a = self.coeffs
        if isinstance(other, Affine):
            b = other.coeffs
            return Affine(
                (
                    a[0] * b[0] + a[2] * b[1],
                    a[1] * b[0] + a[3] * b[1],
                    a[0] * b[2] + a[2] * b[3],
                    a[1] * b[2] + a[3] * b[3],
                    a[0] * b[4] + a[2] * b[5] + a[4],
                    a[1] * b[4] + a[3] * b[5] + a[5],
                )
            )
        if isinstance(other, Point):
            return Point(
                a[0] * other.x + a[2] * other.y + a[4],
                a[1] * other.x + a[3] * other.y + a[5],
            )
        return NotImplemented


Affine.IDENTITY = Affine()


@dataclass(frozen=True)
class Circle:
    """A circle given by center and radius."""

    center: Point
    radius: float

    def bounding_box(self) -> Rect:
        r = abs(self.radius)
        c = self.center
        return Rect(c.x - r, c.y - r, c.x + r, c.y + r)


RadiiLike = Union[float, "tuple[float, float, float, float]"]


@dataclass(frozen=True)
class RoundedRect:
    """A rectangle with rounded corners.

    ``radii`` is one radius or four (top-left, top-right, bottom-right,
    bottom-left); each is clamped to half the shorter side.
    """

    rect: Rect
    radii: RadiiLike = field(default=0.0)

    def __post_init__(self) -> None:
        rect = self.rect.bounding_box()
        limit = min(rect.width(), rect.height()) / 2.0
        raw = (self.radii,) * 4 if isinstance(self.radii, (int, float)) else tuple(self.radii)
        if len(raw) != 4:
            raise ValueError("a rounded rectangle needs one or four radii")
        object.__setattr__(self, "rect", rect)
        object.__setattr__(self, "radii", tuple(min(abs(float(r)), limit) for r in raw))

    @property
    def single_radius(self) -> float | None:
        """The common radius if all four corners agree, else None."""
        first = self.radii[0]
        return first if all(r == first for r in self.radii) else None

    def width(self) -> float:
        return self.rect.width()

    def height(self) -> float:
        return self.rect.height()

    def origin(self) -> Point:
        return self.rect.origin()

    def bounding_box(self) -> Rect:
        return self.rect


def _quad_extrema(p0: float, p1: float, p2: float) -> list[float]:
    denom = p0 - 2.0 * p1 + p2
    if denom == 0.0:
        return []
    t = (p0 - p1) / denom
    if 0.0 < t < 1.0:
        mt = 1.0 - t
        return [mt * mt * p0 + 2.0 * mt * t * p1 + t * t * p2]
    return []


def _cubic_extrema(p0: float, p1: float, p2: float, p3: float) -> list[float]:
    a, b, c = p1 - p0, p2 - p1, p3 - p2
    qa, qb, qc = a - 2.0 * b + c, 2.0 * (b - a), a
    if abs(qa) < 1e-12:
        roots = [] if qb == 0.0 else [-qc / qb]
    else:
        disc = qb * qb - 4.0 * qa * qc
        if disc < 0.0:
            roots = []
        else:
            sq = math.sqrt(disc)
            roots = [(-qb + sq) / (2.0 * qa), (-qb - sq) / (2.0 * qa)]
    values = []
    for t in roots:
        if 0.0 < t < 1.0:
            mt = 1.0 - t
            values.append(
                mt**3 * p0 + 3.0 * mt * mt * t * p1 + 3.0 * mt * t * t * p2 + t**3 * p3
            )
    return values


class BezPath:
    """A path built from move, line, quadratic, cubic and close elements."""

    def __init__(self) -> None:
        self._elements: list[tuple[str, tuple[Point, ...]]] = []
        self._started = False

    @property
    def elements(self) -> tuple[tuple[str, tuple[Point, ...]], ...]:
        return tuple(self._elements)

    def __iter__(self):
        return iter(self._elements)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BezPath):
            return NotImplemented
        return self._elements == other._elements

    def _require_start(self) -> None:
        if not self._started:
            raise ValueError("a path must begin with move_to")

    def move_to(self, point: Point) -> None:
        self._elements.append(("M", (point,)))
        self._started = True

    def line_to(self, point: Point) -> None:
        self._require_start()
        self._elements.append(("L", (point,)))

    def quad_to(self, p1: Point, p2: Point) -> None:
        self._require_start()
        self._elements.append(("Q", (p1, p2)))

    def curve_to(self, p1: Point, p2: Point, p3: Point) -> None:
        self._require_start()
        self._elements.append(("C", (p1, p2, p3)))

    def close_path(self) -> None:
        self._require_start()
        self._elements.append(("Z", ()))

    def _segments(self) -> Iterator[tuple[Point, ...]]:
        start = current = None
        for verb, points in self._elements:
            if verb == "M":
                start = current = points[0]
            elif verb == "Z":
                if current != start:
                    yield (current, start)
                current = start
            else:
                yield (current, *points)
                current = points[-1]

    def bounding_box(self) -> Rect:
        """The tight bounding box of all segments; zero for a path without segments."""
        xs: list[float] = []
        ys: list[float] = []
        for seg in self._segments():
            xs.extend((seg[0].x, seg[-1].x))
            ys.extend((seg[0].y, seg[-1].y))
            if len(seg) == 3:
                xs.extend(_quad_extrema(*(p.x for p in seg)))
                ys.extend(_quad_extrema(*(p.y for p in seg)))
            elif len(seg) == 4:
                xs.extend(_cubic_extrema(*(p.x for p in seg)))
                ys.extend(_cubic_extrema(*(p.y for p in seg)))
        if not xs:
            return Rect.ZERO
        return Rect(min(xs), min(ys), max(xs), max(ys))

    def to_svg(self) -> str:
        """Render the path as SVG path data."""
        parts = []
        for verb, points in self._elements:
            coords = " ".join(f"{_fmt(p.x)},{_fmt(p.y)}" for p in points)
            parts.append(verb + coords)
        return " ".join(parts)