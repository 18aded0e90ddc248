"""Pytest plugin providing the ``func_mox`` fixture."""

from __future__ import annotations

import logging
import typing as t

import pytest

from .controller import FuncMox, Phase

logger = logging.getLogger(__name__)


def pytest_addoption(parser: pytest.Parser) -> None:
    """Register command-line and ini options for the plugin."""
    group = parser.getgroup("func_mox")
    group.addoption(
        "--func-mox-auto-verify",
        action="store_true",
        dest="func_mox_auto_verify",
        default=None,
        help=(
            "Call verify() on the func_mox fixture during teardown. "
            "Overrides the pytest.ini setting."
        ),
    )
    group.addoption(
        "--no-func-mox-auto-verify",
        action="store_false",
        dest="func_mox_auto_verify",
        default=None,
        help=(
            "Only revert redirections during teardown; the test calls verify() "
            "itself. Overrides the pytest.ini setting."
        ),
    )
    parser.addini(
        "func_mox_auto_verify",
        "Automatically call verify() on the func_mox fixture during teardown.",
        type="bool",
        default=True,
    )


def pytest_configure(config: pytest.Config) -> None:
    """Register plugin-specific markers."""
    config.addinivalue_line(
        "markers",
        (
            "func_mox(auto_verify: bool = True): override automatic verify() "
            "behaviour for a single test."
        ),
    )


class _FuncMoxItem(t.Protocol):
    """pytest item carrying func_mox teardown metadata."""

    _func_mox_call_failed: bool
    _func_mox_verify_error: Exception | None


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(
    item: pytest.Item, call: pytest.CallInfo[t.Any]
) -> t.Generator[None, None, None]:
    """Remember whether the test body failed; attach deferred verify errors."""
    del call
    outcome = yield
    rep = outcome.get_result()
    if rep.when == "call":
        t.cast("_FuncMoxItem", item)._func_mox_call_failed = rep.failed
    elif rep.when == "teardown":
        _apply_deferred_verify_failure(item, rep)


def _auto_verify_enabled(request: pytest.FixtureRequest) -> bool:
    """Return whether the fixture should verify during teardown.

    A per-test override wins over the command line, which wins over the ini
    setting.
    """
    override = _per_test_auto_verify(request)
    if override is not None:
        return override
    cli_value = request.config.getoption("func_mox_auto_verify")
    if cli_value is not None:
        return bool(cli_value)
    return bool(request.config.getini("func_mox_auto_verify"))


def _per_test_auto_verify(request: pytest.FixtureRequest) -> bool | None:
    """Return the ``auto_verify`` set by the marker or else the fixture param."""
    marker = request.node.get_closest_marker("func_mox")
    if marker is not None and "auto_verify" in marker.kwargs:
        return bool(marker.kwargs["auto_verify"])
    param = getattr(request, "param", None)
    if param is None or isinstance(param, bool):
        return param
    if isinstance(param, dict) and "auto_verify" in param:
        return bool(param["auto_verify"])
    msg = (
        "func_mox fixture param must be a bool or a dict with an 'auto_verify' "
        f"key, got {param!r}"
    )
    raise TypeError(msg)


def _apply_deferred_verify_failure(
    item: pytest.Item, report: pytest.TestReport
) -> None:
    """Attach a verification error hidden by an earlier test failure."""
    err: Exception | None = getattr(item, "_func_mox_verify_error", None)
    if err is None:
        return
    delattr(item, "_func_mox_verify_error")
    report.sections.append(("func_mox verification", f"{type(err).__name__}: {err}"))


@pytest.fixture
def func_mox(request: pytest.FixtureRequest) -> t.Generator[FuncMox, None, None]:
    """Provide a :class:`FuncMox` whose redirections are reverted after the test."""
    mox = FuncMox(verify_on_exit=False)
    auto_verify = _auto_verify_enabled(request)
    try:
        yield mox
    except Exception:
        logger.exception("Error during func_mox fixture test execution")
        raise
    finally:
        _teardown_func_mox(request.node, mox, auto_verify=auto_verify)


def _teardown_func_mox(item: pytest.Item, mox: FuncMox, *, auto_verify: bool) -> None:
    """Verify when requested, always restore, and fail the test if needed."""
    if mox.phase is not Phase.ACTIVE:
        return
    if not auto_verify:
        try:
            mox.restore()
        except Exception:
            logger.exception("Error during func_mox fixture cleanup")
            pytest.fail("func_mox fixture cleanup failed")
        return
    try:
        mox.verify()
    except Exception as err:
        logger.exception("Error during func_mox verification")
        if _call_stage_failed(item):
            t.cast("_FuncMoxItem", item)._func_mox_verify_error = err
            return
        pytest.fail(f"{type(err).__name__}: {err}")


def _call_stage_failed(item: pytest.Item) -> bool:
    """Return ``True`` when the test body has already failed."""
    return bool(getattr(item, "_func_mox_call_failed", False))
