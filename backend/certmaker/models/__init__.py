"""CertMaker data models — typed contracts for the entire pipeline."""

from certmaker.models.records import (
    PersonRecord,
    AchievementRecord,
)
from certmaker.models.config import (
    StyleConfig,
    LayoutConfig,
    Padding,
    OutputConfig,
    SecurityConfig,
)
from certmaker.models.result import (
    PipelineState,
    StepTiming,
    GenerationResult,
    GenerationOutcome,
    CertificateInfo,
)

__all__ = [
    "PersonRecord",
    "AchievementRecord",
    "StyleConfig",
    "LayoutConfig",
    "Padding",
    "OutputConfig",
    "SecurityConfig",
    "PipelineState",
    "StepTiming",
    "GenerationResult",
    "GenerationOutcome",
    "CertificateInfo",
]
