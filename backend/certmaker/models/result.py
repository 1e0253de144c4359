"""
CertMaker — Generation result and pipeline output contracts.

Every generation returns a GenerationResult with full traceability:
certificate id, file location, checksum, metadata and step timings.
"""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from certmaker.errors import CertMakerError, ErrorKind


class PipelineState(str, enum.Enum):
    RECEIVED = "RECEIVED"
    VALIDATED = "VALIDATED"
    ID_MINTED = "ID_MINTED"
    RENDERED = "RENDERED"
    SECURED = "SECURED"
    CONVERTED = "CONVERTED"
    PERSISTED = "PERSISTED"
    CHECKSUMMED = "CHECKSUMMED"
    DELIVERED = "DELIVERED"
    FAILED = "FAILED"


class StepTiming(BaseModel):
    step: str
    duration_ms: int
    status: str = "ok"  # ok | skipped | failed
    detail: str = ""


class GenerationResult(BaseModel):
    """Complete output contract for every certificate generation."""

    model_config = ConfigDict(frozen=True)

    certificate_id: str
    file_path: str
    file_size: int
    generated_at: datetime
    checksum: str  # SHA-256 of the persisted bytes
    metadata: dict[str, Any] = Field(default_factory=dict)
    timings: list[StepTiming] = Field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude={"timings"})


class CertificateInfo(BaseModel):
    """Basic raster facts read back from a persisted certificate."""

    width: int
    height: int
    file_size: int
    format: str
    checksum: str


class GenerationOutcome(BaseModel):
    """Either a result or an error, for callers that branch on error kind."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    result: GenerationResult | None = None
    error: CertMakerError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> ErrorKind | None:
        return self.error.kind if self.error is not None else None
