from __future__ import annotations

import logging
from unittest.mock import Mock

import pytest

from tests.helpers import ManualScheduler


@pytest.fixture
def scheduler() -> ManualScheduler:
    """Create a scheduler that only runs callbacks when asked to."""
    return ManualScheduler()


@pytest.fixture
def mock_logger() -> Mock:
    """Create a mock logger recording the handler log lines."""
    return Mock(spec=logging.Logger)


@pytest.fixture
def mock_callback() -> Mock:
    """Create a mock callback function for testing callbacks.

    Returns:
        A Mock object that can be used as a success or failure callback.
    """
    return Mock()
