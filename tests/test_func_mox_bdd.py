"""Behavioural tests for the FuncMox controller using pytest-bdd."""

from __future__ import annotations

from pathlib import Path

from pytest_bdd import scenario

from tests.steps import *  # noqa: F403

FEATURES_DIR = Path(__file__).resolve().parent.parent / "features"
FEATURE = str(FEATURES_DIR / "func_mox.feature")


@scenario(FEATURE, "mocked function returns programmed values")
def test_mocked_function_returns_values() -> None:
    """A satisfied mock serves its values and is reverted on verify."""


@scenario(FEATURE, "unmet mock fails verification")
def test_unmet_mock_fails() -> None:
    """Missing calls are reported with expected and actual counts."""


@scenario(FEATURE, "unexpected argument is reported")
def test_unexpected_argument() -> None:
    """Argument mismatches are reported while the call is still served."""


@scenario(FEATURE, "forbidden call is reported once")
def test_forbidden_call_reported_once() -> None:
    """Calls to a not-called target produce a single failure."""


@scenario(FEATURE, "stub repeats its last result")
def test_stub_repeats_last_result() -> None:
    """Stubs clamp to their final expectation."""


@scenario(FEATURE, "side effect observes an argument")
def test_side_effect_observes_argument() -> None:
    """Parameter side effects receive the selected argument."""


@scenario(FEATURE, "missing return slots use zero values")
def test_missing_return_slots() -> None:
    """``None`` return values become zero values of the declared type."""


@scenario(FEATURE, "mixing mock and stub is rejected")
def test_mixing_rejected() -> None:
    """One target cannot be both mocked and stubbed."""


@scenario(FEATURE, "replacement function computes the result")
def test_replacement_computes_result() -> None:
    """A replacement function serves each call of a mock."""


@scenario(FEATURE, "replacement function errors reach the caller")
def test_replacement_errors_reach_caller() -> None:
    """Exceptions raised by a replacement propagate to the code under test."""
