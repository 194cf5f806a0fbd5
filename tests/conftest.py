"""Shared pytest fixtures for auditrollup tests."""

from pathlib import Path
from typing import Any

import pytest

from auditrollup.core.logging import reset_logging


@pytest.fixture(autouse=True)
def clean_logging():  # type: ignore[misc]
    """Reset logging state around every test."""
    reset_logging()
    yield
    reset_logging()


@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to the fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def reports_dir(fixtures_dir: Path) -> Path:
    """Return path to the report input fixtures."""
    return fixtures_dir / "reports"


@pytest.fixture
def sample_config() -> dict[str, Any]:
    """Return a two-category configuration."""
    return {
        "categories": {
            "performance": {
                "name": "Performance",
                "weight": 1,
                "audits": [
                    {"id": "first-paint", "weight": 3, "title": "First paint"},
                    {"id": "interactive", "weight": 1, "title": "Interactive"},
                ],
            },
            "accessibility": {
                "name": "Accessibility",
                "weight": 1,
                "audits": [
                    {"id": "color-contrast", "weight": 1},
                    {"id": "image-alt", "weight": 1},
                ],
            },
        }
    }


@pytest.fixture
def sample_results() -> dict[str, Any]:
    """Return results for every audit in sample_config."""
    return {
        "first-paint": {"score": 80, "rawValue": 1200},
        "interactive": {"score": 40},
        "color-contrast": {"score": True},
        "image-alt": {"score": False, "debugString": "2 images lack alt"},
    }
