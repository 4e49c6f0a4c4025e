"""Shared fixtures."""

from __future__ import annotations

import pytest

from shapeguard.validation import get_registry


@pytest.fixture(autouse=True)
def _reset_registry():
    """Every test starts from the built-in registry defaults."""
    get_registry().reset()
    yield
    get_registry().reset()
