"""Shared pytest fixtures for Switchboard tests.

This module provides common fixtures used across all test modules:
- Settings isolation (no SWITCHBOARD_ env vars, no stray .env file)
- Router and classifier instances built on the built-in availability table
"""

from __future__ import annotations

import os

import pytest

from switchboard.config.settings import SwitchboardSettings, clear_settings_cache
from switchboard.routing import DEFAULT_AVAILABILITY, MessageClassifier, Router, reset_router


# -----------------------------------------------------------------------------
# Isolation Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def clean_settings_cache():
    """Clear cached settings and the shared router before and after each test."""
    clear_settings_cache()
    reset_router()
    yield
    clear_settings_cache()
    reset_router()


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Remove SWITCHBOARD_ env vars and run from an empty directory.

    The empty .env in tmp_path keeps pydantic-settings from picking up a
    developer's local .env file.
    """
    for key in [k for k in os.environ if k.upper().startswith("SWITCHBOARD_")]:
        monkeypatch.delenv(key, raising=False)
    (tmp_path / ".env").write_text("")
    monkeypatch.chdir(tmp_path)
    yield tmp_path


# -----------------------------------------------------------------------------
# Component Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def settings(clean_env) -> SwitchboardSettings:
    """Default settings with no environment influence."""
    return SwitchboardSettings()


@pytest.fixture
def router(settings) -> Router:
    """Router over the built-in availability table."""
    return Router(settings, DEFAULT_AVAILABILITY)


@pytest.fixture
def classifier(settings) -> MessageClassifier:
    """Full message classifier with default settings."""
    return MessageClassifier(settings)
