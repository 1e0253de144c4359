"""
CertMaker — Drawing context.

Wraps a Pillow RGB canvas together with an explicit stack of affine
transforms. Every drawing helper receives the context as a value; nothing
relies on global canvas state. Translucent fills blend through an RGBA
ImageDraw, and anything drawn under a non-trivial transform is painted on a
local layer and warped onto the canvas.
"""

from __future__ import annotations

import math
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Generator, Iterable, Sequence

from PIL import Image, ImageDraw, ImageFilter

Point = tuple[float, float]
Color = tuple[int, int, int, int]
Box = tuple[float, float, float, float]  # left, top, right, bottom


@dataclass(frozen=True)
class Affine:
    """2x3 affine matrix mapping (x, y) to (a*x + b*y + c, d*x + e*y + f)."""

    a: float = 1.0
    b: float = 0.0
    c: float = 0.0
    d: float = 0.0
    e: float = 1.0
    f: float = 0.0

    @classmethod
    def identity(cls) -> Affine:
        return cls()

    def then(self, other: Affine) -> Affine:
        """Compose so that ``other`` is applied first, then ``self``."""
        return Affine(
            a=self.a * other.a + self.b * other.d,
            b=self.a * other.b + self.b * other.e,
            c=self.a * other.c + self.b * other.f + self.c,
            d=self.d * other.a + self.e * other.d,
            e=self.d * other.b + self.e * other.e,
            f=self.d * other.c + self.e * other.f + self.f,
        )

    def translate(self, dx: float, dy: float) -> Affine:
        return self.then(Affine(c=dx, f=dy))

    def rotate(self, radians: float) -> Affine:
        cos, sin = math.cos(radians), math.sin(radians)
        return self.then(Affine(a=cos, b=-sin, d=sin, e=cos))

    def inverse(self) -> Affine:
        det = self.a * self.e - self.b * self.d
        if det == 0:
            raise ValueError("affine transform is not invertible")
        return Affine(
            a=self.e / det,
            b=-self.b / det,
            c=(self.b * self.f - self.e * self.c) / det,
            d=-self.d / det,
            e=self.a / det,
            f=(self.d * self.c - self.a * self.f) / det,
        )

    def apply(self, x: float, y: float) -> Point:
        return (self.a * x + self.b * y + self.c, self.d * x + self.e * y + self.f)

    @property
    def is_translation(self) -> bool:
        return self.a == 1.0 and self.b == 0.0 and self.d == 0.0 and self.e == 1.0

    @property
    def coefficients(self) -> tuple[float, float, float, float, float, float]:
        return (self.a, self.b, self.c, self.d, self.e, self.f)


def quad_bezier(p0: Point, p1: Point, p2: Point, steps: int = 16) -> list[Point]:
    """Flatten a quadratic Bézier into points, excluding ``p0``."""
    points: list[Point] = []
    for i in range(1, steps + 1):
        t = i / steps
        u = 1 - t
        points.append((
            u * u * p0[0] + 2 * u * t * p1[0] + t * t * p2[0],
            u * u * p0[1] + 2 * u * t * p1[1] + t * t * p2[1],
        ))
    return points


class Path:
    """Minimal path builder: move/line/quadratic segments, flattened on the fly."""

    def __init__(self) -> None:
        self.subpaths: list[list[Point]] = []
        self.closed: list[bool] = []

    def move_to(self, x: float, y: float) -> Path:
        self.subpaths.append([(x, y)])
        self.closed.append(False)
        return self

    def line_to(self, x: float, y: float) -> Path:
        self._current().append((x, y))
        return self

    def quad_to(self, cx: float, cy: float, x: float, y: float) -> Path:
        current = self._current()
        current.extend(quad_bezier(current[-1], (cx, cy), (x, y)))
        return self

    def close(self) -> Path:
        self.closed[-1] = True
        return self

    def _current(self) -> list[Point]:
        if not self.subpaths:
            self.move_to(0.0, 0.0)
        return self.subpaths[-1]


class DrawingContext:
    """A canvas plus an explicit transform stack."""

    def __init__(self, image: Image.Image):
        if image.mode != "RGB":
            raise ValueError(f"DrawingContext expects an RGB canvas, got {image.mode}")
        self.image = image
        self._draw = ImageDraw.Draw(image, "RGBA")
        self._stack: list[Affine] = [Affine.identity()]

    @classmethod
    def blank(cls, width: int, height: int, color: Color = (255, 255, 255, 255)) -> DrawingContext:
        return cls(Image.new("RGB", (width, height), color[:3]))

    @property
    def size(self) -> tuple[int, int]:
        return self.image.size

    @property
    def transform(self) -> Affine:
        return self._stack[-1]

    @property
    def depth(self) -> int:
        return len(self._stack)

    # -- transform stack ----------------------------------------------------

    def save(self) -> None:
        self._stack.append(self._stack[-1])

    def restore(self) -> None:
        if len(self._stack) == 1:
            raise RuntimeError("restore() called without a matching save()")
        self._stack.pop()

    def translate(self, dx: float, dy: float) -> None:
        self._stack[-1] = self._stack[-1].translate(dx, dy)

    def rotate(self, radians: float) -> None:
        self._stack[-1] = self._stack[-1].rotate(radians)

    @contextmanager
    def transformed(
        self, translate: Point = (0.0, 0.0), rotate: float = 0.0
    ) -> Generator[DrawingContext, None, None]:
        """Push a transform (translate first, then rotate) for the duration of the block."""
        self.save()
        try:
            if translate != (0.0, 0.0):
                self.translate(*translate)
            if rotate:
                self.rotate(rotate)
            yield self
        finally:
            self.restore()

    def map_points(self, points: Iterable[Point]) -> list[Point]:
        t = self.transform
        return [t.apply(x, y) for x, y in points]

    # -- fills --------------------------------------------------------------

    def fill_rect(self, box: Box, color: Color) -> None:
        left, top, right, bottom = box
        self.fill_polygon([(left, top), (right, top), (right, bottom), (left, bottom)], color)

    def fill_polygon(self, points: Sequence[Point], color: Color) -> None:
        if len(points) < 3:
            return
        self._draw.polygon(self.map_points(points), fill=tuple(color))

    def fill_path(self, path: Path, color: Color) -> None:
        for points in path.subpaths:
            self.fill_polygon(points, color)

    def vertical_gradient(self, box: Box, start: Color, end: Color) -> None:
        """Two-stop top-to-bottom gradient. Ignores the transform stack."""
        left, top, right, bottom = (int(round(v)) for v in box)
        width, height = right - left, bottom - top
        if width <= 0 or height <= 0:
            return
        mask = Image.linear_gradient("L").resize((width, height), Image.Resampling.BILINEAR)
        top_layer = Image.new("RGBA", (width, height), tuple(start))
        bottom_layer = Image.new("RGBA", (width, height), tuple(end))
        layer = Image.composite(bottom_layer, top_layer, mask)
        self.image.paste(layer, (left, top), layer)

    # -- strokes ------------------------------------------------------------

    def draw_line(self, start: Point, end: Point, color: Color, width: float = 1.0) -> None:
        self._draw.line(self.map_points([start, end]), fill=tuple(color), width=max(1, round(width)))

    def stroke_path(self, path: Path, color: Color, width: float = 1.0) -> None:
        for points, closed in zip(path.subpaths, path.closed):
            if len(points) < 2:
                continue
            mapped = self.map_points(points)
            if closed:
                mapped.append(mapped[0])
            self._draw.line(mapped, fill=tuple(color), width=max(1, round(width)), joint="curve")

    def stroke_rounded_rect(self, box: Box, radius: float, color: Color, width: float) -> None:
        """Stroke centred on ``box`` (Pillow strokes inward, so the box is grown by width/2)."""
        if width <= 0:
            return
        half = width / 2
        left, top, right, bottom = box
        (x0, y0), (x1, y1) = self._translated_box(
            (left - half, top - half, right + half, bottom + half)
        )
        self._draw.rounded_rectangle(
            (x0, y0, x1 - 1, y1 - 1),
            radius=max(0.0, radius + half),
            outline=tuple(color),
            width=max(1, round(width)),
        )

    # -- layers -------------------------------------------------------------

    def blurred_rounded_rect(self, box: Box, radius: float, color: Color, blur: float) -> None:
        """Soft shadow: a filled rounded rectangle with a Gaussian blur."""
        layer = Image.new("RGBA", self.size, (0, 0, 0, 0))
        (x0, y0), (x1, y1) = self._translated_box(box)
        ImageDraw.Draw(layer).rounded_rectangle((x0, y0, x1, y1), radius=radius, fill=tuple(color))
        layer = layer.filter(ImageFilter.GaussianBlur(blur))
        self.image.paste(layer, (0, 0), layer)

    def paint_layer(self, layer: Image.Image, x: float, y: float) -> None:
        """Composite an RGBA layer whose top-left sits at local (x, y)."""
        full = self.transform.translate(x, y)
        if full.is_translation:
            self.image.paste(layer, (round(full.c), round(full.f)), layer)
            return
        warped = layer.transform(
            self.size,
            Image.Transform.AFFINE,
            full.inverse().coefficients,
            resample=Image.Resampling.BICUBIC,
        )
        self.image.paste(warped, (0, 0), warped)

    def _translated_box(self, box: Box) -> tuple[Point, Point]:
        if not self.transform.is_translation:
            raise ValueError("rectangles can only be drawn under a translation")
        left, top, right, bottom = box
        return self.transform.apply(left, top), self.transform.apply(right, bottom)
