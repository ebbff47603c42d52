"""Shared fixtures for the unit, config, and integration suites."""

import sys
from pathlib import Path

# Make ``src`` importable when pytest runs from a plain checkout.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import pytest  # noqa: E402
from flask import Flask  # noqa: E402
from flask.testing import FlaskClient  # noqa: E402

from wagetax.backend.app import create_app  # noqa: E402
from wagetax.backend.config import profile_config  # noqa: E402


@pytest.fixture(autouse=True)
def _fresh_profile_cache():
    """Drop cached profiles so a test never sees another test's patched files."""

    profile_config.clear_caches()
    yield
    profile_config.clear_caches()


@pytest.fixture()
def app(monkeypatch: pytest.MonkeyPatch) -> Flask:
    """Return a configured Flask application for integration tests."""

    monkeypatch.setenv("WAGETAX_ALLOWED_ORIGINS", "http://localhost:5173")
    application = create_app()
    application.config.update(TESTING=True)
    return application


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Provide a test client bound to the configured Flask app."""

    return app.test_client()
