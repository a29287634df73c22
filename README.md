# pietsvg

A small 2D drawing API that writes SVG. You draw with a render context: fill
and stroke shapes, paint with solid colours or gradients, clip, transform and
place raster images. The result is a self-contained SVG document held in
memory, which you can get as text or write to a file.

## Installation

```
pip install pietsvg
```

Running the tests needs the `test` extra:

```
pip install "pietsvg[test]"
pytest
```

## Modules

- `pietsvg.color`: `Color`, a 32-bit RGBA value, and `ColorParseError`.
- `pietsvg.geometry`: `Vec2`, `Point`, `Size`, `Rect`, `Affine`, `Circle`,
  `RoundedRect` and `BezPath`.
- `pietsvg.gradient`: `GradientStop`, `FixedLinearGradient`,
  `FixedRadialGradient`, `LinearGradient`, `RadialGradient`, `UnitPoint`,
  `ScaleMode` and `gradient_stops`.
- `pietsvg.image`: `ImageFormat` and `ImageBuf`.
- `pietsvg.font`: `FontFamily`, `FontWeight` and `FontStyle`.
- `pietsvg.errors`: `PietError` and its subclasses.
- `pietsvg.svg`: `RenderContext`, `Brush`, `StrokeStyle`, `LineJoin`,
  `LineCap`, `InterpolationMode`, `SvgImage` and `draw_html`.

## Drawing

```python
import sys

from pietsvg.color import Color
from pietsvg.geometry import Affine, Circle, Point, Rect, Size
from pietsvg.gradient import LinearGradient, UnitPoint
from pietsvg.svg import LineCap, RenderContext, StrokeStyle

ctx = RenderContext(Size(200.0, 120.0))
ctx.clear(None, Color.WHITE)

red = ctx.solid_brush(Color.from_hex_str("#c33"))
ctx.fill(Circle(Point(60.0, 60.0), 40.0), red)

fade = LinearGradient(UnitPoint.TOP, UnitPoint.BOTTOM, (Color.WHITE, Color.NAVY))
ctx.fill(Rect(110.0, 20.0, 180.0, 100.0), fade)

ctx.save()
ctx.transform(Affine.translate(10.0, 10.0))
ctx.stroke_styled(Rect(0.0, 0.0, 180.0, 100.0), red, 2.0, StrokeStyle(line_cap=LineCap.ROUND))
ctx.restore()

ctx.finish()
ctx.write(sys.stdout)
```

Anything that paints accepts a `Brush`, a `Color`, a fixed gradient or a unit
gradient; unit gradients are resolved against the bounding box of the shape
being painted. Each gradient is written into the document once, under a short
generated id, and referred to from the shapes that use it.

`clear(rect, color)` paints a rectangle, or the whole canvas when `rect` is
`None`. `clip(shape)` restricts later drawing to `shape`. `save()` and
`restore()` push and pop the transform and clip; restoring with nothing saved
raises `StackUnbalanceError`. `finish()` sets the view box and the size of the
document. `display()` (and `str(ctx)`) returns the SVG text; `write()` accepts
a text or binary file-like object.

Circles become `<circle>`, rectangles and rounded rectangles with one radius
become `<rect>`; everything else, including `BezPath` outlines built with
`move_to`, `line_to`, `quad_to`, `curve_to` and `close_path`, becomes a
`<path>`.

## Colours

`Color` takes 8-bit channels (`rgb8`, `rgba8`, `grey8`), floats in 0..1
(`rgb`, `rgba`, `grey`), a packed value (`from_rgba32_u32`), CSS hex strings
(`from_hex_str`, with or without `#`, in the forms `rgb`, `rgba`, `rrggbb`,
`rrggbbaa`) or CIE HCL (`hlc`, `hlca`). A malformed hex string raises
`ColorParseError`. Named constants such as `Color.BLACK`, `Color.RED` and
`Color.TRANSPARENT` are provided.

## Images

`ImageBuf.from_raw(pixels, format, width, height)` wraps raw pixel data in one
of the `ImageFormat` layouts and checks its length; `ImageBuf.from_file` and
`ImageBuf.from_data` decode image files with Pillow. `pixel_colors()` iterates
over rows of `Color` values.

A render context turns pixel data into an `SvgImage` with `make_image`
(premultiplied alpha is undone; a buffer that is too short raises
`InvalidInputError`), and `draw_image` embeds it in the SVG as a base64 PNG
scaled to the destination rectangle.

## Notebooks

`draw_html(size, f)` makes a context, calls `f` with it, finishes the document
and returns an HTML snippet that centres the SVG. A `RenderContext` also has a
`_repr_html_` method, so a notebook displays it directly.

## What it does not do

- There is no text drawing: `pietsvg.font` only describes families, weights
  and styles, and the render context has no way to lay out or draw text.
- `blurred_rect` fills the rectangle without blurring it.
- `draw_image_area` ignores the source rectangle and draws the whole image;
  the interpolation mode is accepted but not used.
- `capture_image_area` raises `UnimplementedError`.
- There is no command-line program; the package is a library.