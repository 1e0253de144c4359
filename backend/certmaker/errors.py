"""
CertMaker — Structured error catalog.

Every error has a code, human message, and suggested fix.
Two kinds only: validation failures (bad input) and generation
failures (anything downstream of validation).
"""

from __future__ import annotations

import enum
from typing import Any


class ErrorKind(str, enum.Enum):
    VALIDATION = "validation"
    GENERATION = "generation"


class CertMakerError(Exception):
    """Base error with structured code + suggestion."""

    kind: ErrorKind = ErrorKind.GENERATION

    def __init__(self, code: str, message: str, suggestion: str = "", detail: Any = None):
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.detail = detail
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "error_code": self.code,
            "kind": self.kind.value,
            "message": self.message,
        }
        if self.suggestion:
            d["suggestion"] = self.suggestion
        if self.detail:
            d["detail"] = self.detail
        return d


class ValidationError(CertMakerError):
    """Input or certificate id failed structural rules.

    ``field_errors`` maps every violated field to its message, not just the first.
    """

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, field_errors: dict[str, str] | None = None):
        self.field_errors: dict[str, str] = dict(field_errors or {})
        if self.field_errors:
            message = f"{message}: {'; '.join(f'{k}: {v}' for k, v in self.field_errors.items())}"
        super().__init__(
            code="VALIDATION_FAILED",
            message=message,
            suggestion="Check the person and achievement fields listed in detail.",
            detail=self.field_errors,
        )


class GenerationError(CertMakerError):
    """Render, encode, or I/O failure after validation passed."""

    kind = ErrorKind.GENERATION

    def __init__(self, message: str, cause: BaseException | None = None):
        self.cause = cause
        super().__init__(
            code="GENERATION_FAILED",
            message=message,
            suggestion="Check the output directory permissions and the output format.",
            detail=f"{type(cause).__name__}: {cause}" if cause is not None else None,
        )
