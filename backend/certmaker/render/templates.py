"""
CertMaker — Certificate template renderer.

A template paints, in order: background, border, ornaments, watermark,
content. The content is a top-down flow: each block is measured, painted
centred at the cursor, and the cursor advances by the block height plus a
fixed gap. The footer is pinned to the bottom band instead of flowing.

Variants are built by composition. The Elegant template is the Standard
template with a CornerOrnament added; the drawing helpers below are shared.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from typing import Protocol, Sequence

from PIL import Image

from certmaker.models.config import LayoutConfig, StyleConfig
from certmaker.models.records import AchievementRecord, PersonRecord
from certmaker.render.canvas import Box, DrawingContext, Path
from certmaker.render.text import TextStyle, layout_text
from certmaker.utils.logging import step_timer

TITLE_TEXT = "CERTIFICATE OF COMPLETION"
WATERMARK_ANGLE = -0.3  # radians, about -17 degrees

MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def format_completion_date(value: date) -> str:
    return f"{value.day} {MONTHS[value.month - 1]} {value.year}"


def content_box(layout: LayoutConfig) -> Box:
    p = layout.padding
    return (p.left, p.top, layout.width - p.right, layout.height - p.bottom)


# ---------------------------------------------------------------------------
# Shared drawing helpers
# ---------------------------------------------------------------------------


def draw_background(ctx: DrawingContext, style: StyleConfig) -> None:
    width, height = ctx.size
    if style.use_gradient_background:
        ctx.vertical_gradient((0, 0, width, height), style.gradient_start_color, style.gradient_end_color)
    else:
        ctx.fill_rect((0, 0, width, height), style.background_color)

    if style.show_shadow:
        inset = style.border_width + 4
        ctx.blurred_rounded_rect(
            (inset, inset, width - inset, height - inset),
            radius=style.corner_radius,
            color=style.shadow_color,
            blur=8,
        )


def draw_border(ctx: DrawingContext, style: StyleConfig) -> None:
    width, height = ctx.size
    half = style.border_width / 2
    ctx.stroke_rounded_rect(
        (half, half, width - half, height - half),
        radius=style.corner_radius,
        color=style.border_color,
        width=style.border_width,
    )

    inset = style.border_width + 12
    ctx.stroke_rounded_rect(
        (inset, inset, width - inset, height - inset),
        radius=max(style.corner_radius - 8, 0),
        color=style.accent_color,
        width=2,
    )


def draw_watermark(ctx: DrawingContext, style: StyleConfig, layout: LayoutConfig) -> None:
    if not style.show_watermark or not style.watermark_text:
        return
    block = layout_text(
        style.watermark_text,
        TextStyle(
            color=style.watermark_color,
            size=layout.width * 0.08,
            family=style.primary_font,
            bold=True,
            letter_spacing=8,
        ),
    )
    width, height = ctx.size
    with ctx.transformed(translate=(width / 2, height / 2), rotate=WATERMARK_ANGLE):
        block.paint(ctx, -block.width / 2, -block.height / 2)


def _draw_header(
    ctx: DrawingContext,
    style: StyleConfig,
    layout: LayoutConfig,
    box: Box,
    institution: str,
    logo_path: str | None,
    y: float,
) -> float:
    left, _, right, _ = box
    center_x = (left + right) / 2

    if logo_path:
        with Image.open(logo_path) as source:
            logo = source.convert("RGBA")
        size = max(1, round(layout.logo_size))
        logo.thumbnail((size, size), Image.Resampling.LANCZOS)
        ctx.paint_layer(logo, center_x - logo.width / 2, y)
        y += layout.logo_size + 40

    block = layout_text(
        institution.upper(),
        TextStyle(
            color=style.primary_text_color,
            size=layout.body_font_size * 1.2,
            family=style.primary_font,
            bold=True,
            letter_spacing=2,
        ),
        max_width=right - left,
    )
    block.paint(ctx, center_x - block.width / 2, y)
    return y + block.height + 60


def _draw_title(ctx: DrawingContext, style: StyleConfig, layout: LayoutConfig, box: Box, y: float) -> float:
    left, _, right, _ = box
    block = layout_text(
        TITLE_TEXT,
        TextStyle(
            color=style.primary_text_color,
            size=layout.title_font_size,
            family=style.primary_font,
            bold=True,
            letter_spacing=4,
        ),
        max_width=right - left,
    )
    block.paint(ctx, (left + right) / 2 - block.width / 2, y)
    return y + block.height + 80


def _draw_name(
    ctx: DrawingContext, style: StyleConfig, layout: LayoutConfig, box: Box, name: str, y: float
) -> float:
    left, _, right, _ = box
    center_x = (left + right) / 2
    block = layout_text(
        name,
        TextStyle(
            color=style.accent_color,
            size=layout.name_font_size,
            family=style.primary_font,
            bold=True,
            letter_spacing=2,
        ),
        max_width=right - left,
    )
    underline_y = y + block.height + 10
    ctx.draw_line(
        (center_x - block.width / 2 - 50, underline_y),
        (center_x + block.width / 2 + 50, underline_y),
        style.accent_color,
        width=3,
    )
    block.paint(ctx, center_x - block.width / 2, y)
    return underline_y + 60


def _draw_completion_text(
    ctx: DrawingContext,
    style: StyleConfig,
    layout: LayoutConfig,
    box: Box,
    achievement: AchievementRecord,
    y: float,
) -> float:
    left, _, right, _ = box
    text = (
        "has successfully completed the course\n\n"
        f'"{achievement.name}"\n\n'
        f"Duration: {achievement.duration}"
    )
    block = layout_text(
        text,
        TextStyle(
            color=style.primary_text_color,
            size=layout.body_font_size,
            family=style.secondary_font,
            line_height=1.5,
        ),
        max_width=right - left,
        max_lines=5,
    )
    block.paint(ctx, (left + right) / 2 - block.width / 2, y)
    return y + block.height + 60


def _draw_completion_date(
    ctx: DrawingContext, style: StyleConfig, layout: LayoutConfig, box: Box, completed: date, y: float
) -> float:
    left, _, right, _ = box
    block = layout_text(
        f"Completed on {format_completion_date(completed)}",
        TextStyle(
            color=style.secondary_text_color,
            size=layout.body_font_size * 0.9,
            family=style.secondary_font,
            italic=True,
        ),
        max_width=right - left,
    )
    block.paint(ctx, (left + right) / 2 - block.width / 2, y)
    return y + block.height + 40


def _draw_footer(
    ctx: DrawingContext,
    style: StyleConfig,
    layout: LayoutConfig,
    box: Box,
    instructor: str,
    certificate_id: str,
) -> None:
    left, _, right, bottom = box
    start_y = bottom - layout.footer_height
    signature_style = TextStyle(
        color=style.primary_text_color,
        size=layout.signature_font_size,
        family=style.secondary_font,
        align="left",
    )

    line_y = start_y + 60
    ctx.draw_line((left + 100, line_y), (left + 400, line_y), style.primary_text_color, width=1)

    name_block = layout_text(instructor, signature_style)
    name_block.paint(ctx, left + 100, line_y + 10)

    label_block = layout_text(
        "Instructor",
        signature_style.copy_with(
            size=layout.signature_font_size * 0.8,
            color=style.secondary_text_color,
        ),
    )
    label_block.paint(ctx, left + 100, line_y + 10 + name_block.height + 4)

    id_block = layout_text(
        f"Certificate ID: {certificate_id}",
        TextStyle(
            color=style.secondary_text_color,
            size=layout.signature_font_size * 0.7,
            family="monospace",
            align="right",
        ),
    )
    id_block.paint(ctx, right - id_block.width, bottom - id_block.height)


def draw_content(
    ctx: DrawingContext,
    style: StyleConfig,
    layout: LayoutConfig,
    person: PersonRecord,
    achievement: AchievementRecord,
    certificate_id: str,
    logo_path: str | None = None,
) -> float:
    """Run the vertical flow and return the final cursor position."""
    box = content_box(layout)
    y = box[1]
    y = _draw_header(ctx, style, layout, box, achievement.institution, logo_path, y)
    y = _draw_title(ctx, style, layout, box, y)
    y = _draw_name(ctx, style, layout, box, person.name, y)
    y = _draw_completion_text(ctx, style, layout, box, achievement, y)
    y = _draw_completion_date(ctx, style, layout, box, person.completion_date, y)
    _draw_footer(ctx, style, layout, box, achievement.instructor, certificate_id)
    return y


# ---------------------------------------------------------------------------
# Ornaments
# ---------------------------------------------------------------------------


class Ornament(Protocol):
    def draw(self, ctx: DrawingContext, style: StyleConfig) -> None: ...


@dataclass(frozen=True)
class CornerOrnament:
    """One corner glyph, reused in all four corners through the transform stack."""

    size: float = 60.0
    margin: float = 30.0
    stroke_width: float = 3.0
    fill_opacity: float = 0.1

    def draw(self, ctx: DrawingContext, style: StyleConfig) -> None:
        width, height = ctx.size
        m = style.border_width + self.margin
        anchors = (
            ((m, m), 0.0),
            ((width - m, m), math.pi / 2),
            ((width - m, height - m), math.pi),
            ((m, height - m), 3 * math.pi / 2),
        )
        for anchor, angle in anchors:
            with ctx.transformed(translate=anchor, rotate=angle):
                self.draw_glyph(ctx, style)

    def draw_glyph(self, ctx: DrawingContext, style: StyleConfig) -> None:
        """Draw the base glyph at the local origin, opening towards +x/+y."""
        s = self.size
        r, g, b, a = style.accent_color
        fill_color = (r, g, b, round(a * self.fill_opacity))

        fill = (
            Path()
            .move_to(0, 0)
            .line_to(s * 0.6, 0)
            .quad_to(s * 0.7, s * 0.1, s * 0.6, s * 0.2)
            .line_to(s * 0.2, s * 0.6)
            .quad_to(s * 0.1, s * 0.7, 0, s * 0.6)
            .close()
        )
        ctx.fill_path(fill, fill_color)

        stroke = (
            Path()
            .move_to(0, 0).line_to(s, 0)
            .move_to(0, 0).line_to(0, s)
            .move_to(s * 0.3, 0).quad_to(s * 0.4, s * 0.1, s * 0.3, s * 0.3)
            .move_to(0, s * 0.3).quad_to(s * 0.1, s * 0.4, s * 0.3, s * 0.3)
        )
        ctx.stroke_path(stroke, style.accent_color, self.stroke_width)


# ---------------------------------------------------------------------------
# Template
# ---------------------------------------------------------------------------


class CertificateTemplate:
    """Standard certificate renderer; extra ornaments make other variants."""

    def __init__(
        self,
        template_name: str = "Modern Standard Certificate",
        style: StyleConfig | None = None,
        layout: LayoutConfig | None = None,
        ornaments: Sequence[Ornament] = (),
    ):
        self.template_name = template_name
        self.style = style or StyleConfig()
        self.layout = layout or LayoutConfig()
        self.ornaments: tuple[Ornament, ...] = tuple(ornaments)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.template_name!r}, ornaments={len(self.ornaments)})"

    def without_watermark(self) -> CertificateTemplate:
        return CertificateTemplate(
            template_name=self.template_name,
            style=self.style.model_copy(update={"show_watermark": False}),
            layout=self.layout,
            ornaments=self.ornaments,
        )

    def validate(self, person: PersonRecord, achievement: AchievementRecord) -> bool:
        """Cheap non-blank pre-check; the pipeline's validation is stricter."""
        return all(
            value.strip()
            for value in (
                person.name,
                person.id,
                achievement.name,
                achievement.instructor,
                achievement.institution,
            )
        )

    def draw_background(self, ctx: DrawingContext) -> None:
        draw_background(ctx, self.style)

    def draw_border(self, ctx: DrawingContext) -> None:
        draw_border(ctx, self.style)
        for ornament in self.ornaments:
            ornament.draw(ctx, self.style)

    def draw_watermark(self, ctx: DrawingContext) -> None:
        draw_watermark(ctx, self.style, self.layout)

    def draw_content(
        self,
        ctx: DrawingContext,
        person: PersonRecord,
        achievement: AchievementRecord,
        certificate_id: str,
        logo_path: str | None = None,
    ) -> float:
        return draw_content(ctx, self.style, self.layout, person, achievement, certificate_id, logo_path)

    def render(
        self,
        person: PersonRecord,
        achievement: AchievementRecord,
        certificate_id: str,
        logo_path: str | None = None,
    ) -> Image.Image:
        """Paint the certificate and return the RGB raster at layout size."""
        if not self.validate(person, achievement):
            raise ValueError("Invalid person or achievement data")

        with step_timer(f"Paint {self.template_name}"):
            ctx = DrawingContext.blank(self.layout.width, self.layout.height, self.style.background_color)
            self.draw_background(ctx)
            self.draw_border(ctx)
            self.draw_watermark(ctx)
            self.draw_content(ctx, person, achievement, certificate_id, logo_path)
        return ctx.image

