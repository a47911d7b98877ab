"""Fixtures for infrastructure.logging tests."""

import logging
from unittest.mock import patch

import pytest

from infrastructure.logging.setup import configure_logging


@pytest.fixture
def outside_tests():
    """Run configure_logging as it behaves outside pytest.

    The suppressed test configuration is restored afterwards.
    """
    target = "infrastructure.logging.setup._is_test_environment"
    with patch(target, return_value=False):
        yield
    configure_logging()
    logging.root.setLevel(logging.CRITICAL + 1)
