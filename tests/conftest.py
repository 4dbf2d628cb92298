"""
Pytest configuration and fixtures.
"""

import logging

import pytest

from feed_fakes import SleepRecorder
from feed_simulator import FeedSimulator


def pytest_collection_modifyitems(config, items):
    """
    Mark every test in the integration directory as 'integration'.
    """
    for item in items:
        if "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


@pytest.fixture(autouse=True)
def setup_logging(caplog):
    """
    Capture package log output at DEBUG for every test.
    """
    caplog.set_level(logging.DEBUG, logger="abx_feed")


@pytest.fixture
def sleeper():
    return SleepRecorder()


@pytest.fixture
def simulator():
    """Local TCP feed server; configure it, then call start()."""
    sim = FeedSimulator()
    
    yield sim
    
    sim.stop()
