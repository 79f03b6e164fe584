"""
Shared fixtures for the timeline layout tests.
"""

import os
import time

os.environ.setdefault('QT_QPA_PLATFORM', 'offscreen')

import pytest
from PyQt5.QtCore import QCoreApplication

from timeline_layout.data.models import PositionedEvent


@pytest.fixture(scope='session')
def qapp():
    """A QCoreApplication for tests that need queued signals or timers."""
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    yield app


@pytest.fixture
def wait_until(qapp):
    """Pump the Qt event loop until a condition holds or the timeout expires."""
    def _wait(condition, timeout=5.0):
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            qapp.processEvents()
            if condition():
                return True
            time.sleep(0.005)
        qapp.processEvents()
        return condition()
    return _wait


def make_events(*positions, entities=None):
    """Build PositionedEvents e0, e1, ... at the given positions."""
    return tuple(
        PositionedEvent(f"e{i}", position, (entities or {}).get(f"e{i}", ()))
        for i, position in enumerate(positions)
    )
