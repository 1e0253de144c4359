"""
CertMaker — Recipient and achievement records.

Records are structurally typed only. Field rules (lengths, patterns, dates)
are enforced by the pipeline's Validate stage so that every violation can be
reported at once.
"""

from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict


class PersonRecord(BaseModel):
    """The certificate recipient."""

    model_config = ConfigDict(frozen=True)

    name: str
    id: str
    completion_date: date
    email: str

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PersonRecord:
        return cls.model_validate(data)


class AchievementRecord(BaseModel):
    """The course or award being certified."""

    model_config = ConfigDict(frozen=True)

    name: str
    duration: str
    instructor: str
    institution: str
    description: str = ""

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AchievementRecord:
        return cls.model_validate(data)
