"""
CertMaker — Certificate verification module.

Inspects persisted certificates locally. Both operations answer questions
about files that may be missing or tampered with, so neither raises:
``verify`` reports False and ``inspect`` reports None on any failure.
"""

from __future__ import annotations

import hashlib
from pathlib import Path

from PIL import Image

from certmaker.models.result import CertificateInfo
from certmaker.utils.logging import logger


def compute_checksum(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


class CertificateVerifier:
    """Checksum and raster inspection for persisted certificates."""

    def verify(self, path: str | Path, expected_checksum: str) -> bool:
        try:
            data = Path(path).read_bytes()
        except Exception as exc:
            logger.info("  Verification failed for %s: %s", path, exc)
            return False
        matches = compute_checksum(data) == expected_checksum
        logger.info("  Verification %s: %s", path, "✓" if matches else "✗ checksum mismatch")
        return matches

    def inspect(self, path: str | Path) -> CertificateInfo | None:
        path = Path(path)
        try:
            data = path.read_bytes()
            with Image.open(path) as image:
                image.load()
                width, height = image.size
        except Exception as exc:
            logger.info("  Cannot inspect %s: %s", path, exc)
            return None

        return CertificateInfo(
            width=width,
            height=height,
            file_size=len(data),
            format=path.suffix.lstrip(".").lower(),
            checksum=compute_checksum(data),
        )
