"""Example tests demonstrating strict mocks."""

from __future__ import annotations

import typing as t

from examples import _utils
from func_mox.comparators import anything, starts_with

pytest_plugins = ("func_mox.pytest_plugin",)

if t.TYPE_CHECKING:  # pragma: no cover - typing only
    from func_mox.controller import FuncMox


def test_mock_enforces_args_and_call_count(func_mox: FuncMox) -> None:
    """Mocks require exact arguments and can enforce call counts."""
    func_mox.mock(_utils.http_get).expects(
        "https://weather.example/oslo", 5.0
    ).returns(b"snow").twice()
    func_mox.mock(_utils.log_line).expects("forecast", "oslo").returns().twice()

    assert _utils.forecast("oslo") == "snow"
    assert _utils.forecast("oslo") == "snow"


def test_mock_with_matching_args(func_mox: FuncMox) -> None:
    """Matchers stand in for arguments that vary or do not matter."""
    func_mox.mock(_utils.http_get).expects(
        starts_with("https://weather.example/"), anything()
    ).returns(b"rain").once()
    func_mox.mock(_utils.log_line).expects(anything(), anything()).returns().once()

    assert _utils.forecast("bergen") == "rain"


def test_mock_not_called(func_mox: FuncMox) -> None:
    """``not_called`` asserts a collaborator is never reached."""
    func_mox.mock(_utils.http_get).not_called()
    assert func_mox.called(_utils.http_get) == 0
