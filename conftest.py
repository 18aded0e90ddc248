"""Global test configuration and shared fixtures."""

from __future__ import annotations

import logging
import typing as t

import pytest

pytest_plugins = ("func_mox.pytest_plugin", "pytester")


@pytest.fixture(autouse=True)
def func_mox_debug_logging(
    caplog: pytest.LogCaptureFixture,
) -> t.Generator[None, None, None]:
    """Capture func_mox debug logs so failing tests show dispatch history."""
    with caplog.at_level(logging.DEBUG, logger="func_mox"):
        yield
