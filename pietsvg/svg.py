"""A render context that records drawing operations as an SVG document."""

from __future__ import annotations

import base64
import enum
import io
import math
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Callable, Union

from PIL import Image as PILImage

from .color import Color
from .errors import InvalidInputError, StackUnbalanceError, UnimplementedError
from .geometry import Affine, BezPath, Circle, Point, Rect, RoundedRect, Size
from .gradient import (
    FixedLinearGradient,
    FixedRadialGradient,
    LinearGradient,
    RadialGradient,
)
from .image import ImageFormat, _unpremul

__all__ = [
    "LineJoin",
    "LineCap",
    "StrokeStyle",
    "InterpolationMode",
    "Brush",
    "SvgImage",
    "RenderContext",
    "draw_html",
]

SVG_NAMESPACE = "http://www.w3.org/2000/svg"

_ID_ALPHABET = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
_KAPPA = 0.5522847498307936


def _num(x: float) -> str:
    if math.isnan(x):
        return "NaN"
    if math.isinf(x):
        return "inf" if x > 0 else "-inf"
    text = format(Decimal(repr(float(x))), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _value(value) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _num(value)
    if isinstance(value, (tuple, list)):
        return " ".join(_value(v) for v in value)
    return str(value)


def _escape_text(text: str) -> str:
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def _escape_attr(text: str) -> str:
    return _escape_text(text).replace('"', "&quot;")


class _Element:
    """A minimal SVG element: tag, attributes and children."""

    def __init__(self, tag: str, attrs: dict | None = None) -> None:
        self.tag = tag
        self.attrs: dict[str, str] = {}
        self.children: list[Union["_Element", str]] = []
        for name, value in (attrs or {}).items():
            self.set(name, value)

    def set(self, name: str, value) -> None:
        self.attrs[name] = _value(value)

    def append(self, child: Union["_Element", str]) -> None:
        self.children.append(child)

    def __str__(self) -> str:
        attrs = "".join(
            f' {name}="{_escape_attr(value)}"' for name, value in sorted(self.attrs.items())
        )
        if not self.children:
            return f"<{self.tag}{attrs}/>"
        inner = "\n".join(
            _escape_text(child) if isinstance(child, str) else str(child)
            for child in self.children
        )
        return f"<{self.tag}{attrs}>\n{inner}\n</{self.tag}>"


def _id_name(n: int) -> str:
    """Encode a numeric id as little-endian base-52 letters."""
    base = len(_ID_ALPHABET)
    out = []
    while True:
        out.append(_ID_ALPHABET[n % base])
        n //= base
        if n == 0:
            return "".join(out)


def _fmt_color(color: Color) -> str:
    return f"#{color.as_rgba_u32() >> 8:06x}"


def _fmt_opacity(color: Color) -> str:
    return _num(color.as_rgba()[3])


def _xf_val(xf: Affine) -> str:
    return "matrix(" + " ".join(_num(c) for c in xf.as_coeffs()) + ")"


class LineCap(enum.Enum):
    """How the ends of stroked lines are drawn."""

    BUTT = "butt"
    ROUND = "round"
    SQUARE = "square"


@dataclass(frozen=True)
class LineJoin:
    """How corners of stroked lines are drawn: ``miter`` (with a limit), ``round`` or ``bevel``."""

    kind: str = "miter"
    limit: float = 10.0

    def __post_init__(self) -> None:
        if self.kind not in ("miter", "round", "bevel"):
            raise ValueError(f"unknown line join {self.kind!r}")


LineJoin.DEFAULT_MITER_LIMIT = 10.0
LineJoin.MITER = LineJoin("miter", LineJoin.DEFAULT_MITER_LIMIT)
LineJoin.ROUND = LineJoin("round")
LineJoin.BEVEL = LineJoin("bevel")


@dataclass(frozen=True)
class StrokeStyle:
    """Options for stroking a path."""

    line_join: LineJoin = LineJoin.MITER
    line_cap: LineCap = LineCap.BUTT
    dash_pattern: tuple[float, ...] = ()
    dash_offset: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "dash_pattern", tuple(float(d) for d in self.dash_pattern))


class InterpolationMode(enum.Enum):
    """How images are sampled when scaled."""

    NEAREST_NEIGHBOR = "nearest_neighbor"
    BILINEAR = "bilinear"


@dataclass(frozen=True)
class Brush:
    """A solid color, or a reference to a gradient defined in the document."""

    color: Color | None = None
    ref: str | None = None

    def __post_init__(self) -> None:
        if (self.color is None) == (self.ref is None):
            raise ValueError("a brush is either a solid color or a gradient reference")

    def _paint(self) -> str:
        if self.color is not None:
            return _fmt_color(self.color)
        return f"url(#{self.ref})"

    def _opacity(self) -> str | None:
        if self.color is not None:
            return _fmt_opacity(self.color)
        return None


@dataclass(frozen=True)
class SvgImage:
    """An image ready to be embedded in the SVG output."""

    image: PILImage.Image

    def size(self) -> Size:
        width, height = self.image.size
        return Size(float(width), float(height))


@dataclass(frozen=True)
class _State:
    xf: Affine = Affine.IDENTITY
    clip: str | None = None


@dataclass
class _Attrs:
    xf: Affine = Affine.IDENTITY
    clip: str | None = None
    fill: tuple[Brush, str | None] | None = None
    stroke: tuple[Brush, float, StrokeStyle] | None = None

    def apply_to(self, node: _Element) -> None:
        node.set("transform", _xf_val(self.xf))
        if self.clip is not None:
            node.set("clip-path", f"url(#{self.clip})")
        if self.fill is not None:
            brush, rule = self.fill
            node.set("fill", brush._paint())
            opacity = brush._opacity()
            if opacity is not None:
                node.set("fill-opacity", opacity)
            if rule is not None:
                node.set("fill-rule", rule)
        else:
            node.set("fill", "none")
        if self.stroke is not None:
            brush, width, style = self.stroke
            node.set("stroke", brush._paint())
            opacity = brush._opacity()
            if opacity is not None:
                node.set("stroke-opacity", opacity)
            if width != 1.0:
                node.set("stroke-width", float(width))
            join = style.line_join
            if join.kind == "miter":
                if join.limit != LineJoin.DEFAULT_MITER_LIMIT:
                    node.set("stroke-miterlimit", float(join.limit))
            else:
                node.set("stroke-linejoin", join.kind)
            if style.line_cap is not LineCap.BUTT:
                node.set("stroke-linecap", style.line_cap.value)
            if style.dash_pattern:
                node.set("stroke-dasharray", list(style.dash_pattern))
            if style.dash_offset != 0.0:
                node.set("stroke-dashoffset", float(style.dash_offset))


Shape = Union[Rect, Circle, RoundedRect, BezPath]
BrushLike = Union[
    Brush, Color, FixedLinearGradient, FixedRadialGradient, LinearGradient, RadialGradient
]


def _rounded_rect_path(shape: RoundedRect) -> BezPath:
    r = shape.rect
    tl, tr, br, bl = shape.radii
    k = _KAPPA
    path = BezPath()
    path.move_to(Point(r.x0 + tl, r.y0))
    path.line_to(Point(r.x1 - tr, r.y0))
    if tr:
        path.curve_to(
            Point(r.x1 - tr + k * tr, r.y0), Point(r.x1, r.y0 + tr - k * tr), Point(r.x1, r.y0 + tr)
        )
    path.line_to(Point(r.x1, r.y1 - br))
    if br:
        path.curve_to(
            Point(r.x1, r.y1 - br + k * br), Point(r.x1 - br + k * br, r.y1), Point(r.x1 - br, r.y1)
        )
    path.line_to(Point(r.x0 + bl, r.y1))
    if bl:
        path.curve_to(
            Point(r.x0 + bl - k * bl, r.y1), Point(r.x0, r.y1 - bl + k * bl), Point(r.x0, r.y1 - bl)
        )
    path.line_to(Point(r.x0, r.y0 + tl))
    if tl:
        path.curve_to(
            Point(r.x0, r.y0 + tl - k * tl), Point(r.x0 + tl - k * tl, r.y0), Point(r.x0 + tl, r.y0)
        )
    path.close_path()
    return path


def _add_shape(parent: _Element, shape: Shape, attrs: _Attrs) -> None:
    if isinstance(shape, Circle):
        node = _Element(
            "circle",
            {"cx": float(shape.center.x), "cy": float(shape.center.y), "r": float(shape.radius)},
        )
    elif isinstance(shape, RoundedRect) and shape.single_radius is not None:
        origin = shape.origin()
        radius = float(shape.single_radius)
        node = _Element(
            "rect",
            {
                "x": float(origin.x),
                "y": float(origin.y),
                "width": float(shape.width()),
                "height": float(shape.height()),
                "rx": radius,
                "ry": radius,
            },
        )
    elif isinstance(shape, Rect):
        node = _Element(
            "rect",
            {
                "x": float(shape.x0),
                "y": float(shape.y0),
                "width": float(shape.width()),
                "height": float(shape.height()),
            },
        )
    elif isinstance(shape, RoundedRect):
        node = _Element("path", {"d": _rounded_rect_path(shape).to_svg()})
    elif isinstance(shape, BezPath):
        node = _Element("path", {"d": shape.to_svg()})
    else:
        raise TypeError(f"cannot draw shape of type {type(shape).__name__}")
    attrs.apply_to(node)
    parent.append(node)


def _gradient_stop(stop) -> _Element:
    return _Element(
        "stop",
        {
            "offset": float(stop.pos),
            "stop-color": _fmt_color(stop.color),
            "stop-opacity": _fmt_opacity(stop.color),
        },
    )


class RenderContext:
    """Renders drawing operations into an in-memory SVG document."""

    def __init__(self, size: Size) -> None:
        self._size = size
        self._stack: list[_State] = []
        self._state = _State()
        self._doc = _Element("svg", {"xmlns": SVG_NAMESPACE})
        self._next_id = 0

    @property
    def size(self) -> Size:
        """The size used for the view box."""
        return self._size

    def _new_id(self) -> str:
        name = _id_name(self._next_id)
        self._next_id += 1
        return name

    def display(self) -> str:
        """The SVG document rendered so far, as text."""
        return str(self._doc)

    def __str__(self) -> str:
        return self.display()

    def _repr_html_(self) -> str:
        return f'<div style="display:flex;justify-content:center;">{self.display()}</div>'

    def write(self, writer) -> None:
        """Write the document to a text or binary file-like object."""
        text = self.display()
        if isinstance(writer, io.TextIOBase):
            writer.write(text)
        else:
            writer.write(text.encode("utf-8"))

    def status(self) -> None:
        """Report deferred errors; this backend has none."""
        return None

    def _make_brush(self, brush: BrushLike, bbox: Callable[[], Rect]) -> Brush:
        if isinstance(brush, Brush):
            return brush
        if isinstance(brush, Color):
            return self.solid_brush(brush)
        if isinstance(brush, (FixedLinearGradient, FixedRadialGradient)):
            return self.gradient(brush)
        if isinstance(brush, (LinearGradient, RadialGradient)):
            return self.gradient(brush.resolve(bbox()))
        raise TypeError(f"cannot paint with {type(brush).__name__}")

    def _clip_attr(self, node: _Element) -> None:
        if self._state.clip is not None:
            node.set("clip-path", f"url(#{self._state.clip})")

    def clear(self, rect: Rect | None, color: Color) -> None:
        """Paint a rectangle, or the whole canvas when ``rect`` is None, with a color."""
        if rect is not None:
            node = _Element(
                "rect",
                {
                    "width": float(rect.width()),
                    "height": float(rect.height()),
                    "x": float(rect.x0),
                    "y": float(rect.y0),
                },
            )
        else:
            node = _Element("rect", {"width": "100%", "height": "100%"})
        node.set("fill", _fmt_color(color))
        node.set("fill-opacity", _fmt_opacity(color))
        self._clip_attr(node)
        self._doc.append(node)

    def solid_brush(self, color: Color) -> Brush:
        return Brush(color=color)

    def gradient(self, gradient: FixedLinearGradient | FixedRadialGradient) -> Brush:
        """Define a gradient in the document and return a brush referring to it."""
        gid = self._new_id()
        if isinstance(gradient, FixedLinearGradient):
            node = _Element(
                "linearGradient",
                {
                    "gradientUnits": "userSpaceOnUse",
                    "id": gid,
                    "x1": float(gradient.start.x),
                    "y1": float(gradient.start.y),
                    "x2": float(gradient.end.x),
                    "y2": float(gradient.end.y),
                },
            )
        elif isinstance(gradient, FixedRadialGradient):
            center, offset = gradient.center, gradient.origin_offset
            node = _Element(
                "radialGradient",
                {
                    "gradientUnits": "userSpaceOnUse",
                    "id": gid,
                    "cx": float(center.x),
                    "cy": float(center.y),
                    "fx": float(center.x + offset.x),
                    "fy": float(center.y + offset.y),
                    "r": float(gradient.radius),
                },
            )
        else:
            raise TypeError(f"not a fixed gradient: {type(gradient).__name__}")
        for stop in gradient.stops:
            node.append(_gradient_stop(stop))
        self._doc.append(node)
        return Brush(ref=gid)

    def fill(self, shape: Shape, brush: BrushLike) -> None:
        made = self._make_brush(brush, shape.bounding_box)
        _add_shape(
            self._doc, shape, _Attrs(xf=self._state.xf, clip=self._state.clip, fill=(made, None))
        )

    def fill_even_odd(self, shape: Shape, brush: BrushLike) -> None:
        made = self._make_brush(brush, shape.bounding_box)
        _add_shape(
            self._doc,
            shape,
            _Attrs(xf=self._state.xf, clip=self._state.clip, fill=(made, "evenodd")),
        )

    def clip(self, shape: Shape) -> None:
        """Restrict subsequent drawing to ``shape``."""
        cid = self._new_id()
        node = _Element("clipPath", {"id": cid})
        _add_shape(node, shape, _Attrs(xf=self._state.xf, clip=self._state.clip))
        self._doc.append(node)
        self._state = _State(self._state.xf, cid)

    def stroke(self, shape: Shape, brush: BrushLike, width: float) -> None:
        self.stroke_styled(shape, brush, width, StrokeStyle())

    def stroke_styled(
        self, shape: Shape, brush: BrushLike, width: float, style: StrokeStyle
    ) -> None:
        made = self._make_brush(brush, shape.bounding_box)
        _add_shape(
            self._doc,
            shape,
            _Attrs(xf=self._state.xf, clip=self._state.clip, stroke=(made, width, style)),
        )

    def save(self) -> None:
        """Push the current transform and clip."""
        self._stack.append(self._state)

    def restore(self) -> None:
        """Pop the transform and clip saved last."""
        if not self._stack:
            raise StackUnbalanceError()
        self._state = self._stack.pop()

    def finish(self) -> None:
        """Set the view box and size of the document."""
        w, h = float(self._size.width), float(self._size.height)
        self._doc.set("viewBox", (0, 0, w, h))
        self._doc.set("style", f"width:{_num(w)}px;height:{_num(h)}px;")

    def transform(self, transform: Affine) -> None:
        self._state = _State(self._state.xf * transform, self._state.clip)

    def current_transform(self) -> Affine:
        return self._state.xf

    def make_image(self, width: int, height: int, buf: bytes, format: ImageFormat) -> SvgImage:
        """Create an image from raw pixel data."""
        modes = {
            ImageFormat.GRAYSCALE: "L",
            ImageFormat.RGB: "RGB",
            ImageFormat.RGBA_SEPARATE: "RGBA",
            ImageFormat.RGBA_PREMUL: "RGBA",
        }
        mode = modes.get(format)
        if mode is None:
            raise UnimplementedError()
        expected = width * height * format.bytes_per_pixel()
        data = bytes(buf)
        if width < 0 or height < 0 or len(data) < expected:
            raise InvalidInputError()
        data = data[:expected]
        if format is ImageFormat.RGBA_PREMUL:
            out = bytearray(data)
            for i in range(0, len(out), 4):
                a = out[i + 3]
                out[i : i + 3] = bytes(_unpremul(c, a) for c in out[i : i + 3])
            data = bytes(out)
        return SvgImage(PILImage.frombytes(mode, (width, height), data))

    def _draw_image(self, image: SvgImage, dst_rect: Rect) -> None:
        encoded = io.BytesIO()
        image.image.save(encoded, format="PNG")
        data_url = "data:image/png;base64," + base64.b64encode(encoded.getvalue()).decode("ascii")
        node = _Element(
            "image",
            {
                "x": float(dst_rect.x0),
                "y": float(dst_rect.y0),
                "width": float(dst_rect.x1 - dst_rect.x0),
                "height": float(dst_rect.y1 - dst_rect.y0),
                "href": data_url,
            },
        )
        affine = self.current_transform()
        if affine != Affine.IDENTITY:
            node.set("transform", _xf_val(affine))
        self._clip_attr(node)
        self._doc.append(node)

    def draw_image(
        self,
        image: SvgImage,
        dst_rect: Rect,
        interp: InterpolationMode = InterpolationMode.BILINEAR,
    ) -> None:
        """Embed ``image`` as a PNG scaled to ``dst_rect``."""
        self._draw_image(image, dst_rect)

    def draw_image_area(
        self,
        image: SvgImage,
        src_rect: Rect,
        dst_rect: Rect,
        interp: InterpolationMode = InterpolationMode.BILINEAR,
    ) -> None:
        """Embed ``image`` in ``dst_rect``; the source area is not yet honoured."""
        self._draw_image(image, dst_rect)

    def capture_image_area(self, src_rect: Rect) -> SvgImage:
        raise UnimplementedError()

    def blurred_rect(self, rect: Rect, blur_radius: float, brush: BrushLike) -> None:
        """Fill ``rect``; blurring is not applied."""
        self.fill(rect, brush)


def draw_html(size: Size, f: Callable[[RenderContext], None]) -> str:
    """Run ``f`` on a fresh context and return the finished SVG wrapped in centred HTML."""
    ctx = RenderContext(size)
    f(ctx)
    ctx.finish()
    return ctx._repr_html_()