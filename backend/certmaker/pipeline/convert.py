"""
CertMaker — Format and resolution conversion.

Layouts are sized for 300 DPI. The target size for an output DPI is
``round(dimension * dpi / 300)`` per axis, rounding halves up. The raster
is resampled (bicubic) only when its size differs from the target.
"""

from __future__ import annotations

import io
import math

from PIL import Image

from certmaker.errors import GenerationError
from certmaker.models.config import LayoutConfig, OutputConfig
from certmaker.utils.logging import step_timer

LAYOUT_DPI = 300


def scale_dimension(value: int, dpi: int) -> int:
    return math.floor(value * dpi / LAYOUT_DPI + 0.5)


def target_size(layout: LayoutConfig, dpi: int) -> tuple[int, int]:
    return scale_dimension(layout.width, dpi), scale_dimension(layout.height, dpi)


def resize_to_target(image: Image.Image, size: tuple[int, int]) -> Image.Image:
    if image.size == size:
        return image
    return image.resize(size, Image.Resampling.BICUBIC)


def encode(image: Image.Image, output: OutputConfig) -> bytes:
    fmt = output.format.lower()
    buffer = io.BytesIO()
    if fmt in ("jpg", "jpeg"):
        image.convert("RGB").save(
            buffer,
            format="JPEG",
            quality=output.quality,
            dpi=(output.dpi, output.dpi),
        )
    elif fmt == "png":
        image.save(buffer, format="PNG", dpi=(output.dpi, output.dpi))
    else:
        raise GenerationError(f"Unsupported output format: {output.format}")
    return buffer.getvalue()


def convert_to_output_format(image: Image.Image, layout: LayoutConfig, output: OutputConfig) -> bytes:
    """Resample to the DPI-scaled layout size and encode."""
    size = target_size(layout, output.dpi)
    if image.size != size:
        with step_timer(f"Resample {image.width}x{image.height} to {size[0]}x{size[1]}"):
            image = resize_to_target(image, size)
    with step_timer(f"Encode {output.format.upper()}"):
        return encode(image, output)
