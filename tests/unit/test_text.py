"""Unit tests for the text layout primitive."""

from datetime import date

import pytest

from certmaker.models.config import LayoutConfig
from certmaker.models.records import AchievementRecord, PersonRecord
from certmaker.render.canvas import DrawingContext
from certmaker.render.templates import content_box
from certmaker.render.text import ELLIPSIS, TextStyle, layout_text, load_font, measure_line
from certmaker.utils.validate import collect_record_errors

BLACK = (0, 0, 0, 255)


@pytest.fixture
def style():
    return TextStyle(color=BLACK, size=24)


class TestMeasure:
    def test_block_has_positive_size(self, style):
        block = layout_text("Hello World", style)
        assert block.width > 0
        assert block.height > 0
        assert block.lines == ("Hello World",)

    def test_letter_spacing_widens_run(self, style):
        plain = layout_text("SPACING", style)
        spaced = layout_text("SPACING", style.copy_with(letter_spacing=8))
        assert spaced.width == pytest.approx(
            sum(plain.font.getlength(ch) for ch in "SPACING") + 8 * 6
        )
        assert spaced.width > plain.width

    def test_empty_line_measures_zero(self, style):
        font = load_font(style.family, 24)
        assert measure_line("", font, 4) == 0.0

    def test_line_height_multiplier(self, style):
        block = layout_text("a\nb\nc", style.copy_with(line_height=2.0))
        assert len(block.lines) == 3
        assert block.height == pytest.approx(3 * max(48, block.ascent + block.descent))

    def test_blank_lines_are_kept(self, style):
        block = layout_text("first\n\nthird", style)
        assert block.lines == ("first", "", "third")


class TestWrapping:
    def test_wraps_to_max_width(self, style):
        text = "one two three four five six seven eight nine ten"
        natural = layout_text(text, style)
        wrapped = layout_text(text, style, max_width=natural.width / 2)
        assert len(wrapped.lines) > 1
        assert all(w <= natural.width / 2 for w in wrapped.line_widths)
        assert " ".join(wrapped.lines) == text

    def test_long_name_breaks_within_width(self):
        layout = LayoutConfig()
        box_left, _, box_right, _ = content_box(layout)
        max_width = box_right - box_left
        name = "Wolfeschlegelsteinhausenbergerdorff" * 3
        name = name[:100]
        assert collect_record_errors(
            PersonRecord(name=name, id="STU-1", completion_date=date(2024, 1, 1), email="a@b.co"),
            AchievementRecord(name="Course", duration="1h", instructor="Jo", institution="MI"),
            today=date(2024, 1, 2),
        ) == {}
        block = layout_text(
            name,
            TextStyle(color=BLACK, size=layout.name_font_size, bold=True, letter_spacing=2),
            max_width=max_width,
        )
        assert len(block.lines) > 1
        assert block.width <= max_width
        assert "".join(block.lines) == name

    def test_long_word_after_short_words(self, style):
        block = layout_text("to Supercalifragilistic", style, max_width=60)
        assert block.lines[0] == "to"
        assert all(w <= 60 for w in block.line_widths)
        assert "".join(block.lines[1:]) == "Supercalifragilistic"

    def test_single_glyph_wider_than_limit_is_kept(self, style):
        block = layout_text("WW", style, max_width=1)
        assert block.lines == ("W", "W")

    def test_max_lines_truncates_with_ellipsis(self, style):
        block = layout_text("a\nb\nc\nd", style, max_lines=2)
        assert len(block.lines) == 2
        assert block.lines[-1].endswith(ELLIPSIS)

    def test_max_lines_must_be_positive(self, style):
        with pytest.raises(ValueError):
            layout_text("x", style, max_lines=0)


class TestFonts:
    def test_fonts_are_cached(self):
        assert load_font("sans-serif", 20) is load_font("sans-serif", 20)

    def test_unknown_family_falls_back(self):
        font = load_font("no-such-family", 18, bold=True)
        assert font.getlength("abc") > 0


class TestPaint:
    def test_paint_changes_pixels_inside_block(self, style):
        ctx = DrawingContext.blank(300, 100)
        block = layout_text("MMMM", style)
        block.paint(ctx, 10, 10)
        region = ctx.image.crop((10, 10, 10 + int(block.width), 10 + int(block.height)))
        assert region.getextrema()[0][0] < 128

    def test_render_layer_matches_block_size(self, style):
        block = layout_text("Sized", style)
        layer = block.render_layer()
        assert layer.mode == "RGBA"
        assert layer.width >= int(block.width)
        assert layer.height >= int(block.height)
