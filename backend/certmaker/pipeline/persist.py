"""
CertMaker — Artifact persistence.

Resolves the output directory, builds the filename and writes bytes.
Every OSError is re-raised as a GenerationError; a partially written file
may remain on disk when a write fails.
"""

from __future__ import annotations

import time
from pathlib import Path

from certmaker.core.config import settings
from certmaker.errors import GenerationError
from certmaker.utils.logging import logger
from certmaker.utils.validate import validate_output_file_name


def resolve_output_directory(output_directory: str = "") -> Path:
    directory = Path(output_directory).expanduser() if output_directory else settings.certificates_dir
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise GenerationError(f"Cannot create output directory {directory}: {exc}", exc) from exc
    return directory


def build_filename(certificate_id: str, fmt: str, custom_name: str | None = None) -> str:
    if custom_name:
        validate_output_file_name(custom_name)
        return custom_name if Path(custom_name).suffix else f"{custom_name}.{fmt}"
    return f"certificate_{certificate_id}_{time.time_ns() // 1_000_000}.{fmt}"


def write_artifact(
    data: bytes,
    certificate_id: str,
    fmt: str,
    output_directory: str = "",
    custom_name: str | None = None,
) -> Path:
    directory = resolve_output_directory(output_directory)
    path = directory / build_filename(certificate_id, fmt, custom_name)
    try:
        path.write_bytes(data)
    except OSError as exc:
        raise GenerationError(f"Failed to save certificate file {path}: {exc}", exc) from exc
    logger.info("  Wrote %s (%d bytes)", path, len(data))
    return path
