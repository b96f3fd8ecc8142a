"""Typed smoke tests for the settings loader.

These tests verify three guarantees:
1) Importing the module-level `settings` yields a `Settings` instance.
2) Environment variables override defaults after clearing the loader cache.
3) `get_logger()` respects the configured LOG_LEVEL when constructing loggers.

Every test that mutates the environment clears the loader cache on teardown
so the overrides do not leak into other modules' tests.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest

from versionable.core.settings import (
    Settings,
    get_logger,
    load_settings,
    settings,
)


@pytest.fixture(autouse=True)
def _fresh_settings() -> Iterator[None]:
    load_settings.cache_clear()
    yield
    load_settings.cache_clear()


def test_settings_instance_type() -> None:
    """`settings` should be an instance of the typed `Settings` model."""
    assert isinstance(settings, Settings)


def test_env_overrides_with_cache_clear(monkeypatch: Any) -> None:
    """Changing env vars should take effect after `load_settings.cache_clear()`."""
    monkeypatch.setenv("VERSIONABLE_ENV", "test")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("VERSIONABLE_DB_PATH", "/tmp/elsewhere.db")
    monkeypatch.setenv("VERSIONABLE_DEFAULT_KEEP", "7")

    load_settings.cache_clear()
    s = load_settings()

    assert s.environment == "test"
    assert s.is_test and not s.is_prod
    assert s.log_level == "DEBUG"
    assert s.db_path == Path("/tmp/elsewhere.db")
    assert s.default_keep == 7


def test_negative_default_keep_is_rejected(monkeypatch: Any) -> None:
    """A negative retention count is a configuration error at load time."""
    monkeypatch.setenv("VERSIONABLE_DEFAULT_KEEP", "-1")
    load_settings.cache_clear()
    with pytest.raises(ValueError):
        load_settings()


def test_get_logger_respects_level(monkeypatch: Any) -> None:
    """`get_logger()` should apply the numeric level derived from `LOG_LEVEL`.

    A unique logger name avoids side effects between tests.
    """
    monkeypatch.setenv("LOG_LEVEL", "ERROR")
    load_settings.cache_clear()

    logger = get_logger("versionable.tests.settings")

    assert logger.level == logging.ERROR
    assert logger.handlers, "Expected at least one StreamHandler to be attached."
