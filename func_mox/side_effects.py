"""Callbacks fired while a redirected call is being served."""

from __future__ import annotations

import abc
import dataclasses as dc
import typing as t

from ._validators import validate_call_index, validate_param_index


class SideEffect(abc.ABC):
    """Base class for side effects attached to an expectation."""

    call_index: int

    def applies_to(self, call_number: int) -> bool:
        """Return ``True`` when this effect fires on *call_number*."""
        return self.call_index in (0, call_number)

    @abc.abstractmethod
    def execute(self, call_number: int, arguments: t.Sequence[object]) -> None:
        """Run the callback for *call_number* given the flattened *arguments*."""


@dc.dataclass(frozen=True, slots=True)
class GeneralSideEffect(SideEffect):
    """Invoke ``func()`` on every call, or only on call ``call_index``."""

    call_index: int
    func: t.Callable[[], object]

    def __post_init__(self) -> None:
        validate_call_index(self.call_index)

    def execute(self, call_number: int, arguments: t.Sequence[object]) -> None:
        """Call ``func`` when the call number matches."""
        del arguments
        if self.applies_to(call_number):
            self.func()


@dc.dataclass(frozen=True, slots=True)
class ParamSideEffect(SideEffect):
    """Pass the argument at ``param_index`` (1-based) to ``func``."""

    call_index: int
    param_index: int
    func: t.Callable[[t.Any], object]

    def __post_init__(self) -> None:
        validate_call_index(self.call_index)
        validate_param_index(self.param_index)

    def execute(self, call_number: int, arguments: t.Sequence[object]) -> None:
        """Call ``func`` with each argument whose position matches."""
        if not self.applies_to(call_number):
            return
        for position, value in enumerate(arguments, start=1):
            if position == self.param_index:
                self.func(value)


def general_side_effect(
    call_index: int, func: t.Callable[[], object]
) -> GeneralSideEffect:
    """Return a side effect calling ``func()`` on the selected call(s)."""
    return GeneralSideEffect(call_index, func)


def param_side_effect(
    call_index: int, param_index: int, func: t.Callable[[t.Any], object]
) -> ParamSideEffect:
    """Return a side effect receiving the argument at ``param_index``."""
    return ParamSideEffect(call_index, param_index, func)


__all__ = [
    "GeneralSideEffect",
    "ParamSideEffect",
    "SideEffect",
    "general_side_effect",
    "param_side_effect",
]
