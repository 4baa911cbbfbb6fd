"""Pytest fixtures for test configuration.

Qt objects (stores, timers, loaders) need a QCoreApplication; one instance is
shared by the whole session. No test talks to a real results endpoint.
"""
import pytest
from pathlib import Path
from typing import Any, Callable, Dict

from PySide6.QtCore import QCoreApplication
from PySide6.QtTest import QTest

# Expose mock fixtures (stub_client, loader_factory, sample_items)
from .mocks.fixtures import *  # noqa: F401,F403


@pytest.fixture(scope='session')
def qapp():
    """Create QCoreApplication instance for Qt-based tests."""
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    yield app


@pytest.fixture
def wait_until(qapp) -> Callable[..., bool]:
    """Process Qt events until ``predicate()`` holds or the timeout elapses."""
    def _wait(predicate: Callable[[], bool], timeout_ms: int = 2000, step_ms: int = 10) -> bool:
        waited = 0
        while not predicate():
            if waited >= timeout_ms:
                return False
            QTest.qWait(step_ms)
            waited += step_ms
        return True
    return _wait


@pytest.fixture
def test_config(tmp_path: Path) -> Dict[str, Any]:
    """Provide a minimal test configuration as a dict.

    Tests should pass this as ``obj`` to the CLI rather than setting
    environment variables.
    """
    return {
        'log_level': 'DEBUG',
        'endpoint': {
            'base_url': 'http://moviemeter.test',
            'timeout_seconds': 5.0,
        },
        'debounce': {
            'delay_ms': 20,
        },
    }
