"""Exception hierarchy for :mod:`func_mox`."""

from __future__ import annotations

import typing as t


class FuncMoxError(Exception):
    """Base class for all errors raised by func-mox."""


class UsageError(FuncMoxError):
    """Raised when the fluent setup API is used out of sequence."""


class LifecycleError(UsageError):
    """Raised when a controller is used after verification."""


class SetupError(FuncMoxError):
    """Raised when a target cannot be resolved or redirected."""


class UnregisteredCallError(FuncMoxError):
    """Raised when a redirected call reaches a target that was never set up."""


class VerificationError(FuncMoxError):
    """Raised by :meth:`FuncMox.verify` when any failure was reported."""

    def __init__(self, message: str, failures: t.Sequence[str] = ()) -> None:
        super().__init__(message)
        self.failures: tuple[str, ...] = tuple(failures)


__all__ = [
    "FuncMoxError",
    "LifecycleError",
    "SetupError",
    "UnregisteredCallError",
    "UsageError",
    "VerificationError",
]
