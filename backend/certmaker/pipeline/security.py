"""
CertMaker — Tamper-evidence sub-stages.

Applied in order: digital signature, metadata embedding, QR placement.
Each is skipped when its flag is off, and a skipped stage hands back the
exact raster it received.

Only the signature does any work today: its hash is computed and returned
to the caller but is not written into the artifact. Metadata embedding and
QR placement are pass-through hooks. The artifact format for all three is
still undecided, so none of them alter pixels or file headers.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass

from PIL import Image

from certmaker.models.config import SecurityConfig
from certmaker.models.records import AchievementRecord, PersonRecord
from certmaker.utils.logging import logger


@dataclass(frozen=True)
class SecuredRaster:
    image: Image.Image
    signature: str | None = None
    applied: tuple[str, ...] = ()


def compute_signature(
    certificate_id: str,
    person: PersonRecord,
    achievement: AchievementRecord,
    secret_key: str,
) -> str:
    data = f"{certificate_id}{person.name}{person.id}{achievement.name}{secret_key}"
    return hashlib.sha256(data.encode("utf-8")).hexdigest()


def add_digital_signature(image: Image.Image, signature: str) -> Image.Image:
    # Not embedded yet; see module docstring.
    return image


def embed_metadata(image: Image.Image, certificate_id: str) -> Image.Image:
    return image


def add_qr_code(image: Image.Image, certificate_id: str) -> Image.Image:
    return image


def apply_security_measures(
    image: Image.Image,
    certificate_id: str,
    person: PersonRecord,
    achievement: AchievementRecord,
    security: SecurityConfig,
    fallback_secret: str = "",
) -> SecuredRaster:
    signature: str | None = None
    applied: list[str] = []

    if security.enable_digital_signature:
        signature = compute_signature(
            certificate_id, person, achievement, security.secret_key or fallback_secret
        )
        image = add_digital_signature(image, signature)
        applied.append("digital_signature")
        logger.debug("  Signature computed for %s: %s…", certificate_id, signature[:12])

    if security.embed_metadata:
        image = embed_metadata(image, certificate_id)
        applied.append("metadata")

    if security.enable_qr_code:
        image = add_qr_code(image, certificate_id)
        applied.append("qr_code")

    return SecuredRaster(image=image, signature=signature, applied=tuple(applied))
