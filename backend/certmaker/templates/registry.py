"""
CertMaker — Template registry.

Ships 2 templates out of the box. Each declares its default style preset
and the ornaments layered on top of the standard renderer.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from certmaker.core.config import settings
from certmaker.models.config import (
    MODERN_ELEGANT,
    MODERN_MINIMAL,
    MODERN_STANDARD,
    LayoutConfig,
    StyleConfig,
)
from certmaker.render.templates import CertificateTemplate, CornerOrnament, Ornament

STYLE_PRESETS: dict[str, StyleConfig] = {
    "modern-standard": MODERN_STANDARD,
    "modern-elegant": MODERN_ELEGANT,
    "modern-minimal": MODERN_MINIMAL,
}

ORNAMENTS: dict[str, Ornament] = {
    "corners": CornerOrnament(),
}


class TemplateEntry(BaseModel):
    id: str
    name: str
    description: str
    style_preset: str = "modern-standard"
    ornaments: list[str] = Field(default_factory=list)

    def build(
        self,
        style: StyleConfig | None = None,
        layout: LayoutConfig | None = None,
    ) -> CertificateTemplate:
        return CertificateTemplate(
            template_name=self.name,
            style=style or STYLE_PRESETS[self.style_preset],
            layout=layout,
            ornaments=[ORNAMENTS[key] for key in self.ornaments],
        )


TEMPLATES: dict[str, TemplateEntry] = {
    "standard": TemplateEntry(
        id="standard",
        name="Modern Standard Certificate",
        description="Blue/white certificate with gradient background, rounded border and diagonal watermark.",
        style_preset="modern-standard",
    ),
    "elegant": TemplateEntry(
        id="elegant",
        name="Modern Elegant Certificate",
        description="Deeper blues, heavier border and decorative corner ornaments.",
        style_preset="modern-elegant",
        ornaments=["corners"],
    ),
}


def get_template(template_id: str | None = None) -> TemplateEntry | None:
    return TEMPLATES.get(template_id or settings.default_template)


def list_templates() -> list[TemplateEntry]:
    return list(TEMPLATES.values())
