"""
CertMaker — Field-level validation for records and certificate ids.

Collects every violated rule into a field → message map before raising,
so callers can show all problems at once.
"""

import re
from datetime import date

from certmaker.errors import ValidationError
from certmaker.models.records import AchievementRecord, PersonRecord

ID_PATTERN = re.compile(r"[A-Za-z0-9_-]+")
EMAIL_PATTERN = re.compile(r"[^@]+@[^@]+\.[^@]+")

CERTIFICATE_ID_MIN_LENGTH = 10
CERTIFICATE_ID_MAX_LENGTH = 50


def collect_record_errors(
    person: PersonRecord,
    achievement: AchievementRecord,
    today: date | None = None,
) -> dict[str, str]:
    """Return every rule the two records violate, keyed by field."""
    today = today or date.today()
    errors: dict[str, str] = {}

    if not person.name.strip():
        errors["person.name"] = "Name is required"
    elif len(person.name) < 2:
        errors["person.name"] = "Name must be at least 2 characters"
    elif len(person.name) > 100:
        errors["person.name"] = "Name must not exceed 100 characters"

    if not person.id.strip():
        errors["person.id"] = "ID is required"
    elif not ID_PATTERN.fullmatch(person.id):
        errors["person.id"] = "ID contains invalid characters"

    if not person.email.strip():
        errors["person.email"] = "Email is required"
    elif not EMAIL_PATTERN.fullmatch(person.email):
        errors["person.email"] = "Invalid email format"

    if person.completion_date > today:
        errors["person.completion_date"] = "Completion date cannot be in the future"

    if not achievement.name.strip():
        errors["achievement.name"] = "Achievement name is required"
    elif len(achievement.name) < 3:
        errors["achievement.name"] = "Achievement name must be at least 3 characters"
    elif len(achievement.name) > 200:
        errors["achievement.name"] = "Achievement name must not exceed 200 characters"

    if not achievement.instructor.strip():
        errors["achievement.instructor"] = "Instructor name is required"
    elif len(achievement.instructor) < 2:
        errors["achievement.instructor"] = "Instructor name must be at least 2 characters"

    if not achievement.institution.strip():
        errors["achievement.institution"] = "Institution name is required"
    elif len(achievement.institution) < 2:
        errors["achievement.institution"] = "Institution name must be at least 2 characters"

    if not achievement.duration.strip():
        errors["achievement.duration"] = "Duration is required"

    return errors


def validate_records(
    person: PersonRecord,
    achievement: AchievementRecord,
    today: date | None = None,
) -> None:
    """Raise ValidationError carrying all field errors, if any."""
    errors = collect_record_errors(person, achievement, today)
    if errors:
        raise ValidationError("Input validation failed", errors)


def validate_certificate_id(certificate_id: str) -> None:
    if not certificate_id:
        raise ValidationError(
            "Invalid certificate ID",
            {"certificate_id": "Certificate ID cannot be empty"},
        )
    if not CERTIFICATE_ID_MIN_LENGTH <= len(certificate_id) <= CERTIFICATE_ID_MAX_LENGTH:
        raise ValidationError(
            "Invalid certificate ID",
            {
                "certificate_id": (
                    f"Certificate ID must be between {CERTIFICATE_ID_MIN_LENGTH} "
                    f"and {CERTIFICATE_ID_MAX_LENGTH} characters"
                )
            },
        )
    if not ID_PATTERN.fullmatch(certificate_id):
        raise ValidationError(
            "Invalid certificate ID",
            {"certificate_id": "Certificate ID contains invalid characters"},
        )


def validate_output_file_name(file_name: str) -> None:
    """A custom file name must be a bare name inside the output directory."""
    if not file_name.strip() or file_name in (".", ".."):
        message = "File name cannot be empty"
    elif "/" in file_name or "\\" in file_name:
        message = "File name must not contain path separators"
    else:
        return
    raise ValidationError("Invalid output file name", {"output_file_name": message})
