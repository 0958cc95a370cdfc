"""
Shared pytest fixtures and configuration for clockspine tests.

This module provides:
- Settings cache / default scheduler cleanup for test isolation
- Auto-marking of tests by location
"""

from pathlib import Path
from typing import Generator

import pytest

from clockspine.core.settings import clear_settings_cache
from clockspine.default import reset_default_scheduler


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their markers."""
    for item in items:
        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "slow"}):
            item.add_marker(pytest.mark.unit)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Generator[None, None, None]:
    """Keep CLOCKSPINE_* variables and .env files from leaking between tests."""
    import os

    for key in list(os.environ):
        if key.startswith("CLOCKSPINE_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True)
def clean_default_scheduler() -> Generator[None, None, None]:
    """Reset the process-wide scheduler before and after each test."""
    reset_default_scheduler()
    yield
    reset_default_scheduler()
