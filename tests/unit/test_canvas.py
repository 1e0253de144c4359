"""Unit tests for the drawing context and its transform stack."""

import math

import pytest
from PIL import Image

from certmaker.render.canvas import Affine, DrawingContext, Path, quad_bezier


def _close(p, q, tol=1e-9):
    return abs(p[0] - q[0]) < tol and abs(p[1] - q[1]) < tol


class TestAffine:
    def test_identity(self):
        assert Affine.identity().apply(3, 4) == (3, 4)
        assert Affine.identity().is_translation

    def test_translate_then_rotate_maps_local_axes(self):
        # Canvas-style: translate to the anchor, then rotate about it.
        t = Affine.identity().translate(100, 50).rotate(math.pi / 2)
        assert _close(t.apply(10, 0), (100, 60))
        assert _close(t.apply(0, 10), (90, 50))

    def test_inverse_round_trip(self):
        t = Affine.identity().translate(12, -7).rotate(-0.3)
        x, y = t.apply(5, 9)
        assert _close(t.inverse().apply(x, y), (5, 9))

    def test_singular_matrix_has_no_inverse(self):
        with pytest.raises(ValueError):
            Affine(a=0, e=0).inverse()


class TestTransformStack:
    def test_transformed_restores_on_exit(self):
        ctx = DrawingContext.blank(50, 50)
        with ctx.transformed(translate=(10, 10), rotate=math.pi):
            assert ctx.depth == 2
            assert not ctx.transform.is_translation
        assert ctx.depth == 1
        assert ctx.transform == Affine.identity()

    def test_transformed_restores_after_error(self):
        ctx = DrawingContext.blank(20, 20)
        with pytest.raises(RuntimeError):
            with ctx.transformed(translate=(5, 5)):
                raise RuntimeError("draw failed")
        assert ctx.depth == 1

    def test_restore_without_save(self):
        with pytest.raises(RuntimeError):
            DrawingContext.blank(10, 10).restore()

    def test_nested_transforms_compose(self):
        ctx = DrawingContext.blank(10, 10)
        with ctx.transformed(translate=(5, 0)):
            with ctx.transformed(translate=(0, 3)):
                assert ctx.map_points([(1, 1)]) == [(6, 4)]
            assert ctx.map_points([(1, 1)]) == [(6, 1)]


class TestDrawing:
    def test_requires_rgb_canvas(self):
        with pytest.raises(ValueError):
            DrawingContext(Image.new("RGBA", (4, 4)))

    def test_fill_rect_under_translation(self):
        ctx = DrawingContext.blank(20, 20)
        with ctx.transformed(translate=(10, 10)):
            ctx.fill_rect((0, 0, 5, 5), (255, 0, 0, 255))
        assert ctx.image.getpixel((12, 12)) == (255, 0, 0)
        assert ctx.image.getpixel((2, 2)) == (255, 255, 255)

    def test_translucent_fill_blends(self):
        ctx = DrawingContext.blank(10, 10)
        ctx.fill_rect((0, 0, 10, 10), (0, 0, 0, 128))
        r, g, b = ctx.image.getpixel((5, 5))
        assert 100 < r < 160

    def test_vertical_gradient_runs_top_to_bottom(self):
        ctx = DrawingContext.blank(10, 100)
        ctx.vertical_gradient((0, 0, 10, 100), (0, 0, 0, 255), (255, 255, 255, 255))
        top = ctx.image.getpixel((5, 1))[0]
        bottom = ctx.image.getpixel((5, 98))[0]
        assert top < 20
        assert bottom > 235

    def test_paint_layer_under_rotation(self):
        ctx = DrawingContext.blank(100, 100)
        layer = Image.new("RGBA", (10, 40), (0, 0, 255, 255))
        with ctx.transformed(translate=(50, 50), rotate=math.pi / 2):
            ctx.paint_layer(layer, 0, 0)
        # A 10x40 bar rotated a quarter turn lies along -x from the anchor.
        assert ctx.image.getpixel((30, 55)) == (0, 0, 255)
        assert ctx.image.getpixel((55, 70)) == (255, 255, 255)

    def test_stroke_rounded_rect_requires_translation(self):
        ctx = DrawingContext.blank(20, 20)
        with ctx.transformed(rotate=0.5):
            with pytest.raises(ValueError):
                ctx.stroke_rounded_rect((2, 2, 18, 18), 3, (0, 0, 0, 255), 2)


class TestPath:
    def test_quad_bezier_ends_at_target(self):
        points = quad_bezier((0, 0), (5, 10), (10, 0), steps=8)
        assert len(points) == 8
        assert _close(points[-1], (10, 0))

    def test_subpaths_and_close(self):
        path = Path().move_to(0, 0).line_to(1, 0).close().move_to(5, 5).quad_to(6, 6, 7, 5)
        assert len(path.subpaths) == 2
        assert path.closed == [True, False]
        assert _close(path.subpaths[1][-1], (7, 5))
