# tests/utils/log_fixtures.py
"""Reusable fixtures for testing with the app logger."""

import uuid

import pytest

import soljitsu.logs as mod_logs

from .patch_everywhere import patch_everywhere
from .trace import make_test_trace


TEST_TRACE = make_test_trace(icon="📏")


def _suffix() -> str:
    return "_" + uuid.uuid4().hex[:6]


@pytest.fixture
def module_logger(monkeypatch: pytest.MonkeyPatch) -> mod_logs.AppLogger:
    """Replace getAppLogger() everywhere with a new isolated instance.

    All modules (catalog, ordering, build, ...) calling getAppLogger()
    use this logger for the duration of the test.
    """
    new_logger = mod_logs.AppLogger(f"isolated_logger{_suffix()}", enable_color=False)
    new_logger.setLevel("test")
    patch_everywhere(monkeypatch, mod_logs, "getAppLogger", lambda: new_logger)
    TEST_TRACE(
        "module_logger fixture",
        f"id={id(new_logger)}",
        f"level={new_logger.levelName}",
    )
    return new_logger
