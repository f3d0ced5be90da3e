"""
Pytest configuration for softbody tests.

Puts src/ on sys.path so the tests run from a plain checkout, and keeps the
global Logger isolated between tests.
"""

import sys
import os

import pytest

# Add src/ to sys.path for imports
_src_root = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "src")
if _src_root not in sys.path:
    sys.path.insert(0, _src_root)

from softbody.logger import Logger, MemoryStrategy


@pytest.fixture(autouse=True)
def _reset_logger():
    Logger.reset()
    yield
    Logger.reset()


@pytest.fixture
def memory_log():
    """Route Logger output into a list for the duration of a test."""
    strategy = MemoryStrategy()
    Logger.set_log_storage_strategy(strategy)
    return strategy
