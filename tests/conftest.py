"""Root test fixtures shared across all test types.

Database-backed fixtures are in tests/integration/conftest.py.
"""

import os

os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("RESEND_API_KEY", "")

# ruff: noqa: E402 - Imports must be after env var setup
import pytest

from src.teamdesk.core.config import get_settings

# Clear settings cache to ensure test environment variables are picked up
get_settings.cache_clear()


@pytest.fixture
def override_settings(monkeypatch: pytest.MonkeyPatch):
    """Set settings fields for one test, restoring the cached instance after."""
    settings = get_settings()

    def _override(**values) -> None:
        for key, value in values.items():
            monkeypatch.setattr(settings, key, value)

    return _override
