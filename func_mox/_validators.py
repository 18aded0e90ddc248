"""Shared validation helpers."""

from __future__ import annotations


def require_int(value: int, name: str) -> None:
    """Reject booleans and non-integers for count-like arguments."""
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"{name} must be an integer"
        raise TypeError(msg)


def validate_call_index(call_index: int) -> None:
    """Ensure *call_index* is ``0`` (every call) or a 1-based call number."""
    require_int(call_index, "call_index")
    if call_index < 0:
        msg = "call_index must be >= 0"
        raise ValueError(msg)


def validate_param_index(param_index: int) -> None:
    """Ensure *param_index* is a 1-based argument position."""
    require_int(param_index, "param_index")
    if param_index < 1:
        msg = "param_index must be >= 1"
        raise ValueError(msg)
