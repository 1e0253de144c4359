"""Shared test configuration and fixtures for CertMaker test suite."""

import sys
from datetime import date
from pathlib import Path

import pytest

# Add backend to Python path so imports work
backend_dir = str(Path(__file__).parent.parent / "backend")
if backend_dir not in sys.path:
    sys.path.insert(0, backend_dir)

from certmaker.models.config import LayoutConfig, OutputConfig, Padding  # noqa: E402
from certmaker.models.records import AchievementRecord, PersonRecord  # noqa: E402


@pytest.fixture(scope="session")
def project_root():
    return Path(__file__).parent.parent


@pytest.fixture
def person():
    return PersonRecord(
        name="Ada Lovelace",
        id="STU-100",
        completion_date=date(2024, 1, 10),
        email="ada@example.com",
    )


@pytest.fixture
def achievement():
    return AchievementRecord(
        name="Intro to Computing",
        duration="10 hours",
        instructor="A. Turing",
        institution="Example University",
    )


@pytest.fixture
def small_layout():
    """A quarter-scale A4 canvas so rendering tests stay fast."""
    return LayoutConfig(
        width=620,
        height=877,
        padding=Padding.all(30),
        header_height=75,
        footer_height=100,
        logo_size=40,
        title_font_size=24,
        name_font_size=32,
        body_font_size=12,
        signature_font_size=8,
    )


@pytest.fixture
def png_output(tmp_path):
    return OutputConfig(format="png", output_directory=str(tmp_path / "certs"))
