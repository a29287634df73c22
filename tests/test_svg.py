import base64
import io
import xml.etree.ElementTree as ET

import pytest
from PIL import Image as PILImage

from pietsvg.color import Color
from pietsvg.errors import InvalidInputError, StackUnbalanceError, UnimplementedError
from pietsvg.geometry import Affine, BezPath, Circle, Point, Rect, RoundedRect, Size
from pietsvg.gradient import FixedLinearGradient, GradientStop, LinearGradient, UnitPoint
from pietsvg.image import ImageFormat
from pietsvg.svg import (
    Brush,
    LineCap,
    LineJoin,
    RenderContext,
    StrokeStyle,
    draw_html,
)


def _local(tag):
    return tag.split("}")[-1]


def _parse(ctx):
    return ET.fromstring(ctx.display())


def _elements(ctx, name):
    return [el for el in _parse(ctx) if _local(el.tag) == name]


def _decode_href(href):
    prefix = "data:image/png;base64,"
    assert href.startswith(prefix)
    return PILImage.open(io.BytesIO(base64.b64decode(href[len(prefix):])))


def test_finish_sets_view_box_and_style():
    ctx = RenderContext(Size(100.0, 50.0))
    ctx.finish()
    root = _parse(ctx)
    assert _local(root.tag) == "svg"
    assert root.attrib["viewBox"] == "0 0 100 50"
    assert root.attrib["style"] == "width:100px;height:50px;"


def test_fill_rect_with_solid_brush():
    ctx = RenderContext(Size(100.0, 100.0))
    color = Color.from_hex_str("#12ab34")
    ctx.fill(Rect(10.0, 20.0, 40.0, 60.0), ctx.solid_brush(color))
    (rect,) = _elements(ctx, "rect")
    assert rect.attrib["x"] == "10"
    assert rect.attrib["y"] == "20"
    assert rect.attrib["width"] == "30"
    assert rect.attrib["height"] == "40"
    assert rect.attrib["fill"] == "#12ab34"
    assert float(rect.attrib["fill-opacity"]) == color.as_rgba()[3]
    assert rect.attrib["transform"] == "matrix(1 0 0 1 0 0)"


def test_translucent_fill_opacity_matches_alpha():
    ctx = RenderContext(Size(10.0, 10.0))
    color = Color.rgba8(1, 2, 3, 128)
    ctx.fill(Rect(0.0, 0.0, 1.0, 1.0), color)
    (rect,) = _elements(ctx, "rect")
    assert float(rect.attrib["fill-opacity"]) == color.as_rgba()[3]


def test_gradient_ids_and_references():
    ctx = RenderContext(Size(100.0, 100.0))
    grad = FixedLinearGradient(Point(0.0, 0.0), Point(10.0, 0.0), (Color.WHITE, Color.BLACK))
    first = ctx.gradient(grad)
    second = ctx.gradient(grad)
    assert first == Brush(ref="a")
    assert second == Brush(ref="b")
    ctx.fill(Rect(0.0, 0.0, 5.0, 5.0), second)
    (rect,) = _elements(ctx, "rect")
    assert rect.attrib["fill"] == "url(#b)"
    assert "fill-opacity" not in rect.attrib
    grads = _elements(ctx, "linearGradient")
    assert [g.attrib["id"] for g in grads] == ["a", "b"]
    stops = list(grads[0])
    assert [float(s.attrib["offset"]) for s in stops] == [0.0, 1.0]


def test_ids_roll_over_to_two_letters():
    ctx = RenderContext(Size(1.0, 1.0))
    grad = FixedLinearGradient(Point(0.0, 0.0), Point(1.0, 0.0), [GradientStop(0.0, Color.RED)])
    brushes = [ctx.gradient(grad) for _ in range(53)]
    assert brushes[51].ref == "Z"
    assert brushes[52].ref == "ab"


def test_unit_gradient_resolves_against_shape_bounds():
    ctx = RenderContext(Size(100.0, 100.0))
    rect = Rect(0.0, 0.0, 100.0, 50.0)
    ctx.fill(rect, LinearGradient(UnitPoint.TOP, UnitPoint.BOTTOM, (Color.WHITE, Color.BLACK)))
    (grad,) = _elements(ctx, "linearGradient")
    start = UnitPoint.TOP.resolve(rect)
    end = UnitPoint.BOTTOM.resolve(rect)
    assert float(grad.attrib["x1"]) == start.x
    assert float(grad.attrib["y1"]) == start.y
    assert float(grad.attrib["x2"]) == end.x
    assert float(grad.attrib["y2"]) == end.y
    (shape,) = _elements(ctx, "rect")
    assert shape.attrib["fill"] == "url(#" + grad.attrib["id"] + ")"


def test_restore_without_save_raises():
    ctx = RenderContext(Size(10.0, 10.0))
    with pytest.raises(StackUnbalanceError):
        ctx.restore()


def test_save_restore_round_trips_transform():
    ctx = RenderContext(Size(10.0, 10.0))
    ctx.save()
    ctx.transform(Affine.translate(5.0, 7.0))
    assert ctx.current_transform() == Affine.translate(5.0, 7.0)
    ctx.restore()
    assert ctx.current_transform() == Affine.IDENTITY


def test_transform_attribute():
    ctx = RenderContext(Size(10.0, 10.0))
    ctx.transform(Affine.translate(5.0, 7.0))
    ctx.fill(Rect(0.0, 0.0, 1.0, 1.0), Color.RED)
    (rect,) = _elements(ctx, "rect")
    assert rect.attrib["transform"] == "matrix(1 0 0 1 5 7)"


def test_clip_defines_clip_path_and_applies_it():
    ctx = RenderContext(Size(10.0, 10.0))
    ctx.clip(Circle(Point(5.0, 5.0), 3.0))
    ctx.fill(Rect(0.0, 0.0, 10.0, 10.0), Color.BLUE)
    (clip,) = _elements(ctx, "clipPath")
    (inner,) = list(clip)
    assert _local(inner.tag) == "circle"
    assert inner.attrib["fill"] == "none"
    (rect,) = _elements(ctx, "rect")
    assert rect.attrib["clip-path"] == "url(#" + clip.attrib["id"] + ")"


def test_clear_whole_canvas():
    ctx = RenderContext(Size(10.0, 10.0))
    ctx.clear(None, Color.WHITE)
    (rect,) = _elements(ctx, "rect")
    assert rect.attrib["width"] == "100%"
    assert rect.attrib["height"] == "100%"
    assert "transform" not in rect.attrib


def test_stroke_width_only_when_not_one():
    ctx = RenderContext(Size(10.0, 10.0))
    ctx.stroke(Rect(0.0, 0.0, 2.0, 2.0), Color.RED, 1.0)
    ctx.stroke(Rect(0.0, 0.0, 2.0, 2.0), Color.RED, 2.5)
    thin, thick = _elements(ctx, "rect")
    assert thin.attrib["fill"] == "none"
    assert "stroke-width" not in thin.attrib
    assert float(thick.attrib["stroke-width"]) == 2.5
    assert thick.attrib["stroke"] == thin.attrib["stroke"]


def test_stroke_styled_attributes():
    ctx = RenderContext(Size(10.0, 10.0))
    style = StrokeStyle(
        line_join=LineJoin.ROUND, line_cap=LineCap.SQUARE, dash_pattern=(4.0, 2.0), dash_offset=1.5
    )
    ctx.stroke_styled(Rect(0.0, 0.0, 2.0, 2.0), Color.RED, 1.0, style)
    (rect,) = _elements(ctx, "rect")
    assert rect.attrib["stroke-linejoin"] == "round"
    assert rect.attrib["stroke-linecap"] == "square"
    assert [float(v) for v in rect.attrib["stroke-dasharray"].split()] == [4.0, 2.0]
    assert float(rect.attrib["stroke-dashoffset"]) == 1.5


def test_miter_limit_only_when_not_default():
    ctx = RenderContext(Size(10.0, 10.0))
    ctx.stroke_styled(Rect(0.0, 0.0, 1.0, 1.0), Color.RED, 1.0, StrokeStyle(LineJoin.MITER))
    ctx.stroke_styled(
        Rect(0.0, 0.0, 1.0, 1.0), Color.RED, 1.0, StrokeStyle(LineJoin("miter", 4.0))
    )
    default, custom = _elements(ctx, "rect")
    assert "stroke-miterlimit" not in default.attrib
    assert float(custom.attrib["stroke-miterlimit"]) == 4.0
    assert "stroke-linecap" not in default.attrib


def test_circle_element():
    ctx = RenderContext(Size(10.0, 10.0))
    ctx.fill(Circle(Point(3.0, 4.0), 2.0), Color.RED)
    (circle,) = _elements(ctx, "circle")
    assert (float(circle.attrib["cx"]), float(circle.attrib["cy"])) == (3.0, 4.0)
    assert float(circle.attrib["r"]) == 2.0


def test_rounded_rect_single_and_mixed_radii():
    ctx = RenderContext(Size(50.0, 50.0))
    ctx.fill(RoundedRect(Rect(0.0, 0.0, 20.0, 20.0), 3.0), Color.RED)
    ctx.fill(RoundedRect(Rect(0.0, 0.0, 20.0, 20.0), (1.0, 2.0, 3.0, 4.0)), Color.RED)
    (rect,) = _elements(ctx, "rect")
    assert float(rect.attrib["rx"]) == 3.0
    assert rect.attrib["rx"] == rect.attrib["ry"]
    (path,) = _elements(ctx, "path")
    assert path.attrib["d"].startswith("M")
    assert path.attrib["d"].endswith("Z")


def test_fill_even_odd_path():
    ctx = RenderContext(Size(10.0, 10.0))
    path = BezPath()
    path.move_to(Point(0.0, 0.0))
    path.line_to(Point(5.0, 0.0))
    path.line_to(Point(5.0, 5.0))
    path.close_path()
    ctx.fill_even_odd(path, Color.RED)
    (node,) = _elements(ctx, "path")
    assert node.attrib["fill-rule"] == "evenodd"
    assert node.attrib["d"] == path.to_svg()


def test_unknown_shape_rejected():
    ctx = RenderContext(Size(10.0, 10.0))
    with pytest.raises(TypeError):
        ctx.fill(Point(1.0, 1.0), Color.RED)


def test_make_image_and_draw_round_trip():
    ctx = RenderContext(Size(10.0, 10.0))
    pixels = bytes([10, 20, 30, 255, 40, 50, 60, 128])
    image = ctx.make_image(2, 1, pixels, ImageFormat.RGBA_SEPARATE)
    assert image.size() == Size(2.0, 1.0)
    ctx.draw_image(image, Rect(1.0, 2.0, 5.0, 6.0))
    (node,) = _elements(ctx, "image")
    assert (float(node.attrib["x"]), float(node.attrib["y"])) == (1.0, 2.0)
    assert (float(node.attrib["width"]), float(node.attrib["height"])) == (4.0, 4.0)
    decoded = _decode_href(node.attrib["href"]).convert("RGBA")
    assert decoded.tobytes() == pixels


def test_grayscale_image_round_trip():
    ctx = RenderContext(Size(10.0, 10.0))
    image = ctx.make_image(2, 1, bytes([0, 200]), ImageFormat.GRAYSCALE)
    ctx.draw_image_area(image, Rect(0.0, 0.0, 1.0, 1.0), Rect(0.0, 0.0, 2.0, 1.0))
    (node,) = _elements(ctx, "image")
    assert list(_decode_href(node.attrib["href"]).getdata()) == [0, 200]


def test_premultiplied_opaque_matches_separate():
    ctx = RenderContext(Size(10.0, 10.0))
    pixels = bytes([100, 50, 25, 255])
    premul = ctx.make_image(1, 1, pixels, ImageFormat.RGBA_PREMUL)
    separate = ctx.make_image(1, 1, pixels, ImageFormat.RGBA_SEPARATE)
    assert premul.image.tobytes() == separate.image.tobytes()


def test_make_image_short_buffer_raises():
    ctx = RenderContext(Size(10.0, 10.0))
    with pytest.raises(InvalidInputError):
        ctx.make_image(2, 2, bytes(3), ImageFormat.RGB)


def test_capture_image_area_unimplemented():
    ctx = RenderContext(Size(10.0, 10.0))
    with pytest.raises(UnimplementedError):
        ctx.capture_image_area(Rect(0.0, 0.0, 1.0, 1.0))


def test_blurred_rect_same_as_fill():
    a = RenderContext(Size(10.0, 10.0))
    b = RenderContext(Size(10.0, 10.0))
    rect = Rect(1.0, 1.0, 4.0, 4.0)
    a.blurred_rect(rect, 3.0, Color.RED)
    b.fill(rect, Color.RED)
    assert a.display() == b.display()


def test_write_text_and_binary():
    ctx = RenderContext(Size(10.0, 10.0))
    ctx.fill(Rect(0.0, 0.0, 1.0, 1.0), Color.RED)
    ctx.finish()
    text_out = io.StringIO()
    bin_out = io.BytesIO()
    ctx.write(text_out)
    ctx.write(bin_out)
    assert text_out.getvalue() == ctx.display()
    assert bin_out.getvalue() == ctx.display().encode("utf-8")


def test_draw_html_wraps_finished_svg():
    def draw(ctx):
        ctx.fill(Rect(0.0, 0.0, 1.0, 1.0), Color.RED)

    html = draw_html(Size(20.0, 30.0), draw)
    prefix = '<div style="display:flex;justify-content:center;">'
    assert html.startswith(prefix)
    assert html.endswith("</div>")
    svg = ET.fromstring(html[len(prefix):-len("</div>")])
    assert svg.attrib["viewBox"] == "0 0 20 30"
    assert [_local(el.tag) for el in svg] == ["rect"]
    assert RenderContext(Size(1.0, 1.0)).status() is None
    assert Brush(color=Color.RED) == RenderContext(Size(1.0, 1.0)).solid_brush(Color.RED)