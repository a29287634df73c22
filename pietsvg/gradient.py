"""Linear and radial gradient specifications.

Fixed gradients use image-space coordinates. Unit gradients use points in
the unit square and are resolved against the bounding box of whatever is
being painted.
"""

from __future__ import annotations

import dataclasses
import enum
from dataclasses import dataclass
from typing import Iterable

from .color import Color
from .geometry import Point, Rect, Size, Vec2

__all__ = [
    "GradientStop",
    "FixedLinearGradient",
    "FixedRadialGradient",
    "ScaleMode",
    "UnitPoint",
    "LinearGradient",
    "RadialGradient",
    "gradient_stops",
]


@dataclass(frozen=True)
class GradientStop:
    """A color at a position along a gradient."""

    pos: float
    color: Color


def gradient_stops(stops: Iterable[GradientStop] | Iterable[Color]) -> list[GradientStop]:
    """Normalise gradient stops.

    A sequence of stops is returned as a list; a sequence of colors is turned
    into equally spaced stops from 0.0 to 1.0.
    """
    items = list(stops)
    if not items:
        return []
    if all(isinstance(item, GradientStop) for item in items):
        return items
    if all(isinstance(item, Color) for item in items):
        denom = float(max(len(items) - 1, 1))
        return [GradientStop(i / denom, color) for i, color in enumerate(items)]
    raise TypeError("gradient stops must be all GradientStop or all Color values")


@dataclass(frozen=True)
class FixedLinearGradient:
    """A linear gradient in image-space coordinates."""

    start: Point
    end: Point
    stops: tuple[GradientStop, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "stops", tuple(gradient_stops(self.stops)))


@dataclass(frozen=True)
class FixedRadialGradient:
    """A radial gradient in image-space coordinates.

    ``origin_offset`` is the offset of the 0.0 point from ``center``.
    """

    center: Point
    origin_offset: Vec2
    radius: float
    stops: tuple[GradientStop, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "stops", tuple(gradient_stops(self.stops)))


class ScaleMode(enum.Enum):
    """How the unit square maps onto a non-square rectangle."""

    FIT = "fit"
    FILL = "fill"


@dataclass(frozen=True)
class UnitPoint:
    """A point relative to a unit rectangle; (0, 0) is top-left, (1, 1) bottom-right."""

    u: float
    v: float

    def resolve(self, rect: Rect) -> Point:
        """The point within ``rect`` that this unit point designates."""
        return Point(
            rect.x0 + self.u * (rect.x1 - rect.x0),
            rect.y0 + self.v * (rect.y1 - rect.y0),
        )


UnitPoint.TOP_LEFT = UnitPoint(0.0, 0.0)
UnitPoint.TOP = UnitPoint(0.5, 0.0)
UnitPoint.TOP_RIGHT = UnitPoint(1.0, 0.0)
UnitPoint.LEFT = UnitPoint(0.0, 0.5)
UnitPoint.CENTER = UnitPoint(0.5, 0.5)
UnitPoint.RIGHT = UnitPoint(1.0, 0.5)
UnitPoint.BOTTOM_LEFT = UnitPoint(0.0, 1.0)
UnitPoint.BOTTOM = UnitPoint(0.5, 1.0)
UnitPoint.BOTTOM_RIGHT = UnitPoint(1.0, 1.0)


@dataclass(frozen=True)
class LinearGradient:
    """A linear gradient between two unit points."""

    start: UnitPoint
    end: UnitPoint
    stops: tuple[GradientStop, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "stops", tuple(gradient_stops(self.stops)))

    def resolve(self, rect: Rect) -> FixedLinearGradient:
        """Map the unit points onto ``rect``."""
        return FixedLinearGradient(self.start.resolve(rect), self.end.resolve(rect), self.stops)


def _equalize_sides_preserving_center(rect: Rect, new_len: float) -> Rect:
    size = Size(new_len, new_len)
    origin = rect.center() - size.to_vec2() / 2.0
    return Rect.from_origin_size(origin, size)


@dataclass(frozen=True)
class RadialGradient:
    """A radial gradient in unit coordinates.

    ``center`` is the circle's center, ``origin`` the point mapped to 0.0;
    both default to the middle of the unit square.
    """

    radius: float
    stops: tuple[GradientStop, ...] = ()
    center: UnitPoint = UnitPoint.CENTER
    origin: UnitPoint = UnitPoint.CENTER
    scale_mode: ScaleMode = ScaleMode.FILL

    def __post_init__(self) -> None:
        object.__setattr__(self, "stops", tuple(gradient_stops(self.stops)))

    def with_center(self, center: UnitPoint) -> "RadialGradient":
        return dataclasses.replace(self, center=center)

    def with_origin(self, origin: UnitPoint) -> "RadialGradient":
        return dataclasses.replace(self, origin=origin)

    def with_scale_mode(self, scale_mode: ScaleMode) -> "RadialGradient":
        return dataclasses.replace(self, scale_mode=scale_mode)

    def resolve(self, rect: Rect) -> FixedRadialGradient:
        """Map the gradient onto ``rect``, squared up according to the scale mode."""
        if self.scale_mode is ScaleMode.FILL:
            scale_len = max(rect.width(), rect.height())
        else:
            scale_len = min(rect.width(), rect.height())
        square = _equalize_sides_preserving_center(rect, scale_len)
        center = self.center.resolve(square)
        origin = self.origin.resolve(square)
        return FixedRadialGradient(
            center=center,
            origin_offset=origin - center,
            radius=self.radius * scale_len,
            stops=self.stops,
        )