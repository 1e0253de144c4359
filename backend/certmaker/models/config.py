"""
CertMaker — Style, layout, output and security configuration.

All configuration objects are frozen so one generator (or many threads)
can share them read-only.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, model_validator

Channel = Annotated[int, Field(ge=0, le=255)]
RGBA = tuple[Channel, Channel, Channel, Channel]

SUPPORTED_FORMATS = ("jpg", "jpeg", "png")


def argb(value: int) -> tuple[int, int, int, int]:
    """Unpack a 0xAARRGGBB literal into an (r, g, b, a) tuple."""
    return (
        (value >> 16) & 0xFF,
        (value >> 8) & 0xFF,
        value & 0xFF,
        (value >> 24) & 0xFF,
    )


class StyleConfig(BaseModel):
    """Visual theme. Defaults are the modern blue/white standard look."""

    model_config = ConfigDict(frozen=True)

    background_color: RGBA = argb(0xFFFFFFFF)
    primary_text_color: RGBA = argb(0xFF1E3A8A)
    secondary_text_color: RGBA = argb(0xFF64748B)
    border_color: RGBA = argb(0xFF3B82F6)
    accent_color: RGBA = argb(0xFF06B6D4)
    gradient_start_color: RGBA = argb(0xFFF8FAFC)
    gradient_end_color: RGBA = argb(0xFFFFFFFF)
    primary_font: str = "sans-serif"
    secondary_font: str = "sans-serif"
    border_width: float = Field(default=4.0, ge=0)
    corner_radius: float = Field(default=16.0, ge=0)
    show_watermark: bool = True
    watermark_text: str = "CERTIFIED"
    watermark_color: RGBA = argb(0x08000000)
    use_gradient_background: bool = True
    show_shadow: bool = True
    shadow_color: RGBA = argb(0x10000000)


MODERN_STANDARD = StyleConfig()

MODERN_ELEGANT = StyleConfig(
    primary_text_color=argb(0xFF0F172A),
    secondary_text_color=argb(0xFF475569),
    border_color=argb(0xFF1E40AF),
    accent_color=argb(0xFF0EA5E9),
    gradient_start_color=argb(0xFFEFF6FF),
    border_width=6.0,
    corner_radius=20.0,
    watermark_text="EXCELLENCE",
    watermark_color=argb(0x06000000),
)

MODERN_MINIMAL = StyleConfig(
    primary_text_color=argb(0xFF1F2937),
    secondary_text_color=argb(0xFF6B7280),
    border_color=argb(0xFF2563EB),
    accent_color=argb(0xFF3B82F6),
    gradient_start_color=argb(0xFFFBFCFE),
    border_width=2.0,
    corner_radius=12.0,
    watermark_text="VERIFIED",
    watermark_color=argb(0x04000000),
    use_gradient_background=False,
)


class Padding(BaseModel):
    model_config = ConfigDict(frozen=True)

    left: float = Field(default=120, ge=0)
    top: float = Field(default=120, ge=0)
    right: float = Field(default=120, ge=0)
    bottom: float = Field(default=120, ge=0)

    @classmethod
    def all(cls, value: float) -> Padding:
        return cls(left=value, top=value, right=value, bottom=value)

    @property
    def horizontal(self) -> float:
        return self.left + self.right

    @property
    def vertical(self) -> float:
        return self.top + self.bottom


class LayoutConfig(BaseModel):
    """Canvas geometry in pixels. Presets are sized for 300 DPI.

    ``header_height`` is reserved: the header flows from the top padding and
    never reads it.
    """

    model_config = ConfigDict(frozen=True)

    width: int = Field(default=2480, gt=0)
    height: int = Field(default=3508, gt=0)
    padding: Padding = Padding()
    header_height: float = Field(default=300, ge=0)
    footer_height: float = Field(default=400, ge=0)
    logo_size: float = Field(default=150, ge=0)
    title_font_size: float = Field(default=96, gt=0)
    name_font_size: float = Field(default=128, gt=0)
    body_font_size: float = Field(default=48, gt=0)
    signature_font_size: float = Field(default=32, gt=0)

    @model_validator(mode="after")
    def _padding_fits(self) -> LayoutConfig:
        p = self.padding
        if max(p.left, p.right) > self.width / 2 or max(p.top, p.bottom) > self.height / 2:
            raise ValueError("padding must not exceed half of the canvas width/height")
        return self


A4 = LayoutConfig()

LETTER = LayoutConfig(width=2550, height=3300)


class OutputConfig(BaseModel):
    """Export settings. Range checks live in ``is_valid`` so an invalid
    config can still be expressed and rejected by the generator.

    ``preserve_aspect_ratio`` is reserved: both axes always scale by dpi / 300.
    """

    model_config = ConfigDict(frozen=True)

    dpi: int = 300
    quality: int = 95
    format: str = "jpg"
    preserve_aspect_ratio: bool = True
    output_directory: str = ""

    def is_valid(self) -> bool:
        return not self.problems()

    def problems(self) -> dict[str, str]:
        errors: dict[str, str] = {}
        if not 72 <= self.dpi <= 600:
            errors["output.dpi"] = "DPI must be between 72 and 600"
        if not 1 <= self.quality <= 100:
            errors["output.quality"] = "Quality must be between 1 and 100"
        if self.format.lower() not in SUPPORTED_FORMATS:
            errors["output.format"] = f"Format must be one of: {', '.join(SUPPORTED_FORMATS)}"
        return errors


class SecurityConfig(BaseModel):
    """Tamper-evidence toggles. The secret key is opaque and never checked for strength."""

    model_config = ConfigDict(frozen=True)

    enable_watermark: bool = True
    enable_digital_signature: bool = True
    secret_key: str = ""
    embed_metadata: bool = True
    enable_qr_code: bool = False

    @classmethod
    def disabled(cls) -> SecurityConfig:
        return cls(
            enable_watermark=False,
            enable_digital_signature=False,
            embed_metadata=False,
            enable_qr_code=False,
        )
