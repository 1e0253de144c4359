"""
CertMaker — Text layout primitive.

Measures a styled run of text (letter spacing, line height, wrapping to a
maximum width, line limit with ellipsis) and returns a TextBlock whose size
callers use to flow the next element. Painting goes through the drawing
context so blocks can be placed under any transform.
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass, replace
from functools import lru_cache
from typing import Union

from PIL import Image, ImageDraw, ImageFont

from certmaker.core.config import settings
from certmaker.render.canvas import Color, DrawingContext
from certmaker.utils.logging import logger

Font = Union[ImageFont.FreeTypeFont, ImageFont.ImageFont]

ELLIPSIS = "…"

# (bold, italic) → candidate font files, most preferred first.
_FAMILY_FILES: dict[str, dict[tuple[bool, bool], tuple[str, ...]]] = {
    "sans-serif": {
        (False, False): ("DejaVuSans.ttf", "LiberationSans-Regular.ttf", "Arial.ttf"),
        (True, False): ("DejaVuSans-Bold.ttf", "LiberationSans-Bold.ttf", "Arial Bold.ttf"),
        (False, True): ("DejaVuSans-Oblique.ttf", "LiberationSans-Italic.ttf", "Arial Italic.ttf"),
        (True, True): ("DejaVuSans-BoldOblique.ttf", "LiberationSans-BoldItalic.ttf"),
    },
    "serif": {
        (False, False): ("DejaVuSerif.ttf", "LiberationSerif-Regular.ttf", "Times New Roman.ttf"),
        (True, False): ("DejaVuSerif-Bold.ttf", "LiberationSerif-Bold.ttf"),
        (False, True): ("DejaVuSerif-Italic.ttf", "LiberationSerif-Italic.ttf"),
        (True, True): ("DejaVuSerif-BoldItalic.ttf", "LiberationSerif-BoldItalic.ttf"),
    },
    "monospace": {
        (False, False): ("DejaVuSansMono.ttf", "LiberationMono-Regular.ttf", "Courier New.ttf"),
        (True, False): ("DejaVuSansMono-Bold.ttf", "LiberationMono-Bold.ttf"),
        (False, True): ("DejaVuSansMono-Oblique.ttf", "LiberationMono-Italic.ttf"),
        (True, True): ("DejaVuSansMono-BoldOblique.ttf", "LiberationMono-BoldItalic.ttf"),
    },
}


@dataclass(frozen=True)
class TextStyle:
    color: Color
    size: float
    family: str = "sans-serif"
    bold: bool = False
    italic: bool = False
    letter_spacing: float = 0.0
    line_height: float | None = None  # multiple of size; None = font metrics
    align: str = "center"  # left | center | right

    def copy_with(self, **changes) -> TextStyle:
        return replace(self, **changes)


def _candidates(family: str, bold: bool, italic: bool) -> list[str]:
    names: list[str] = []
    if family.lower().endswith((".ttf", ".otf", ".ttc")):
        names.append(family)
    table = _FAMILY_FILES.get(family.lower(), _FAMILY_FILES["sans-serif"])
    for name in table[(bold, italic)]:
        if settings.font_dir:
            names.append(os.path.join(settings.font_dir, name))
        names.append(name)
    return names


@lru_cache(maxsize=128)
def load_font(family: str, size: int, bold: bool = False, italic: bool = False) -> Font:
    """Resolve a family name to a TrueType font, falling back to Pillow's default."""
    for candidate in _candidates(family, bold, italic):
        try:
            return ImageFont.truetype(candidate, size)
        except OSError:
            continue
    logger.warning("No TrueType font found for %s (bold=%s, italic=%s); using default", family, bold, italic)
    return ImageFont.load_default(size=size)


def _metrics(font: Font) -> tuple[int, int]:
    if isinstance(font, ImageFont.FreeTypeFont):
        return font.getmetrics()
    left, top, right, bottom = font.getbbox("Ag")
    return bottom, 0


def measure_line(text: str, font: Font, letter_spacing: float = 0.0) -> float:
    if not text:
        return 0.0
    if not letter_spacing:
        return float(font.getlength(text))
    return sum(font.getlength(ch) for ch in text) + letter_spacing * (len(text) - 1)


def _break_word(word: str, font: Font, letter_spacing: float, max_width: float) -> list[str]:
    """Split a word greedily at character boundaries; every piece keeps at least one character."""
    pieces: list[str] = []
    current = ""
    for ch in word:
        if current and measure_line(current + ch, font, letter_spacing) > max_width:
            pieces.append(current)
            current = ch
        else:
            current += ch
    pieces.append(current)
    return pieces


def _wrap(text: str, font: Font, letter_spacing: float, max_width: float | None) -> list[str]:
    lines: list[str] = []
    for paragraph in text.split("\n"):
        if max_width is None or measure_line(paragraph, font, letter_spacing) <= max_width:
            lines.append(paragraph)
            continue
        current = ""
        for word in paragraph.split(" "):
            if measure_line(word, font, letter_spacing) > max_width:
                if current:
                    lines.append(current)
                pieces = _break_word(word, font, letter_spacing, max_width)
                lines.extend(pieces[:-1])
                current = pieces[-1]
                continue
            trial = f"{current} {word}" if current else word
            if current and measure_line(trial, font, letter_spacing) > max_width:
                lines.append(current)
                current = word
            else:
                current = trial
        lines.append(current)
    return lines


def _truncate(lines: list[str], font: Font, letter_spacing: float, max_lines: int, max_width: float | None) -> list[str]:
    kept = lines[:max_lines]
    last = kept[-1].rstrip()
    while last and max_width is not None and measure_line(last + ELLIPSIS, font, letter_spacing) > max_width:
        last = last[:-1].rstrip()
    kept[-1] = last + ELLIPSIS
    return kept


@dataclass(frozen=True)
class TextBlock:
    """A measured, ready-to-paint run of one or more lines."""

    lines: tuple[str, ...]
    line_widths: tuple[float, ...]
    style: TextStyle
    font: Font
    ascent: int
    descent: int
    line_advance: float

    @property
    def width(self) -> float:
        return max(self.line_widths, default=0.0)

    @property
    def height(self) -> float:
        return self.line_advance * len(self.lines)

    def render_layer(self) -> Image.Image:
        """Draw the block onto a transparent layer sized to the block."""
        layer = Image.new(
            "RGBA",
            (max(1, math.ceil(self.width)), max(1, math.ceil(self.height))),
            (0, 0, 0, 0),
        )
        draw = ImageDraw.Draw(layer)
        fill = tuple(self.style.color)
        leading = (self.line_advance - (self.ascent + self.descent)) / 2
        for index, (line, line_width) in enumerate(zip(self.lines, self.line_widths)):
            if self.style.align == "center":
                x = (self.width - line_width) / 2
            elif self.style.align == "right":
                x = self.width - line_width
            else:
                x = 0.0
            y = index * self.line_advance + leading
            if not self.style.letter_spacing:
                draw.text((x, y), line, font=self.font, fill=fill, anchor="la")
                continue
            for ch in line:
                draw.text((x, y), ch, font=self.font, fill=fill, anchor="la")
                x += self.font.getlength(ch) + self.style.letter_spacing
        return layer

    def paint(self, ctx: DrawingContext, x: float, y: float) -> None:
        ctx.paint_layer(self.render_layer(), x, y)


def layout_text(
    text: str,
    style: TextStyle,
    max_width: float | None = None,
    max_lines: int | None = None,
) -> TextBlock:
    """Measure ``text`` under ``style`` within the given constraints."""
    if max_lines is not None and max_lines < 1:
        raise ValueError("max_lines must be at least 1")
    font = load_font(style.family, max(1, round(style.size)), style.bold, style.italic)
    ascent, descent = _metrics(font)
    lines = _wrap(text, font, style.letter_spacing, max_width)
    if max_lines is not None and len(lines) > max_lines:
        lines = _truncate(lines, font, style.letter_spacing, max_lines, max_width)
    natural = ascent + descent
    line_advance = max(natural, style.size * style.line_height) if style.line_height else natural
    return TextBlock(
        lines=tuple(lines),
        line_widths=tuple(measure_line(line, font, style.letter_spacing) for line in lines),
        style=style,
        font=font,
        ascent=ascent,
        descent=descent,
        line_advance=float(line_advance),
    )
