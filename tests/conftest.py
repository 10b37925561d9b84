# tests/conftest.py
"""Shared test setup for project."""

from collections.abc import Generator

import pytest

import soljitsu.logs as mod_logs
from tests.utils import DEFAULT_TEST_LOG_LEVEL
from tests.utils.log_fixtures import (
    module_logger,
)


# These fixtures are intentionally re-exported so pytest can discover them.
__all__ = [
    "module_logger",
]


# ----------------------------------------------------------------------
# Fixtures
# ----------------------------------------------------------------------


@pytest.fixture(autouse=True)
def reset_logger_level() -> Generator[None, None, None]:
    """Reset logger level to DEFAULT_TEST_LOG_LEVEL (test)
        before each test for isolation.

    The app logger is a module-level singleton; main() and resolve_config()
    change its level, so it is reset before and after each test.
    """
    logger = mod_logs.getAppLogger()
    logger.setLevel(DEFAULT_TEST_LOG_LEVEL)
    yield
    logger.setLevel(DEFAULT_TEST_LOG_LEVEL)


# ----------------------------------------------------------------------
# Hooks
# ----------------------------------------------------------------------


def pytest_collection_modifyitems(
    config: pytest.Config,
    items: list[pytest.Item],
) -> None:
    """Skip tests marked debug unless asked for with -k debug."""
    keywords = config.getoption("-k") or ""
    if "debug" in keywords.lower():
        return

    for item in items:
        if "debug" in item.keywords:
            item.add_marker(
                pytest.mark.skip(reason="Skipped debug test (use -k debug to run)"),
            )
