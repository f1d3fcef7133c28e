"""Shared pytest fixtures."""

import pytest
from helpers import CounterState

from store_actions import ActionRuntime


@pytest.fixture
def runtime() -> ActionRuntime:
    """Create a fresh ActionRuntime for each test."""
    return ActionRuntime()


@pytest.fixture
def state() -> CounterState:
    """Create fresh store state for each test."""
    return CounterState()
