"""Shared pytest fixtures for the ghcomments test suite."""

from __future__ import annotations

import pytest

from ghcomments.config import AppSettings

pytest_plugins = ("respx",)

API_BASE = "https://api.github.example.com"


@pytest.fixture
def settings() -> AppSettings:
    """Provide application settings with deterministic defaults for tests."""
    return AppSettings.model_validate(
        {
            "github_api_base": API_BASE,
            "github_token": "token",  # pragma: allowlist secret
            "per_page": 30,
            "max_attempts": 3,
        },
    )
