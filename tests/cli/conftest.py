"""Fixtures for CLI tests."""

import logging

import pytest


@pytest.fixture(autouse=True)
def isolated_cli(monkeypatch):
    """Clear error-reporting env flags and undo the CLI's logging setup."""
    for name in ("PBFORMAT_VERBOSE", "PBFORMAT_DEBUG", "PBFORMAT_RERAISE", "PBFORMAT_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    package_logger = logging.getLogger("pbformat")
    saved = (list(package_logger.handlers), package_logger.level, package_logger.propagate)
    yield
    package_logger.handlers[:] = saved[0]
    package_logger.setLevel(saved[1])
    package_logger.propagate = saved[2]
