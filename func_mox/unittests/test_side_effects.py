"""Unit tests for :mod:`func_mox.side_effects`."""

from __future__ import annotations

import pytest

from func_mox.side_effects import (
    GeneralSideEffect,
    ParamSideEffect,
    general_side_effect,
    param_side_effect,
)


def test_general_side_effect_skips_other_calls() -> None:
    """A call index selects a single call."""
    fired: list[int] = []
    effect = general_side_effect(2, lambda: fired.append(1))

    effect.execute(1, (10,))
    assert fired == []
    effect.execute(2, (10,))
    assert fired == [1]
    effect.execute(3, (10,))
    assert fired == [1]


def test_general_side_effect_zero_fires_every_call() -> None:
    """Call index zero applies to every call."""
    fired: list[int] = []
    effect = GeneralSideEffect(0, lambda: fired.append(1))
    for call_number in (1, 2, 3):
        effect.execute(call_number, ())
    assert fired == [1, 1, 1]


def test_param_side_effect_receives_selected_argument() -> None:
    """Only the argument at ``param_index`` is delivered."""
    received: list[object] = []
    effect = param_side_effect(0, 1, received.append)

    effect.execute(1, ("first", "second"))
    effect.execute(2, ("third", "fourth"))

    assert received == ["first", "third"]


def test_param_side_effect_skips_when_call_index_differs() -> None:
    """Both indices must match before the callback fires."""
    received: list[object] = []
    effect = ParamSideEffect(1, 2, received.append)

    effect.execute(2, ("a", "b"))
    assert received == []
    effect.execute(1, ("a", "b"))
    assert received == ["b"]


def test_param_side_effect_ignores_missing_position() -> None:
    """Positions past the actual argument count never fire."""
    received: list[object] = []
    ParamSideEffect(0, 3, received.append).execute(1, ("a",))
    assert received == []


@pytest.mark.parametrize(
    ("factory", "error"),
    [
        (lambda: GeneralSideEffect(-1, lambda: None), ValueError),
        (lambda: ParamSideEffect(-1, 1, print), ValueError),
        (lambda: ParamSideEffect(0, 0, print), ValueError),
        (lambda: ParamSideEffect(0, True, print), TypeError),
        (lambda: GeneralSideEffect("1", lambda: None), TypeError),  # type: ignore
    ],
)
def test_invalid_indices_are_rejected(
    factory: object, error: type[Exception]
) -> None:
    """Construction validates call and parameter indices."""
    with pytest.raises(error):
        factory()  # type: ignore[operator]
