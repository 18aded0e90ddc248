"""Expectation records and parameter verification."""

from __future__ import annotations

import dataclasses as dc
import typing as t

from .comparators import as_matcher
from .errors import FuncMoxError

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from .side_effects import SideEffect
    from .targets import CallArguments


@dc.dataclass(frozen=True, slots=True)
class Mismatch:
    """A single parameter verification failure."""

    message: str
    shape: bool = False
    recovered: bool = False


@dc.dataclass(frozen=True, slots=True)
class Expectation:
    """One anticipated invocation of a target.

    ``parameters`` is ``None`` when no parameters were registered (stubs and
    the placeholder created by ``not_called``). ``replacement``, when set,
    serves the call in place of ``returns``.
    """

    parameters: tuple[object, ...] | None = None
    returns: tuple[object, ...] = ()
    side_effects: tuple[SideEffect, ...] = ()
    replacement: t.Callable[..., object] | None = None

    def check_parameters(
        self, name: str, call_number: int, arguments: CallArguments
    ) -> list[Mismatch]:
        """Return a :class:`Mismatch` for every parameter that does not match.

        A count mismatch is reported once and suppresses the per-position
        comparison it affects; value mismatches accumulate. A matcher that
        raises yields a ``recovered`` mismatch for its position and the
        remaining positions are still compared.
        """
        expected = self.parameters or ()
        fixed_count = len(arguments.fixed)
        if arguments.variadic is None:
            if len(expected) != fixed_count:
                return [
                    _count_mismatch(
                        name, call_number, "parameters", len(expected), fixed_count
                    )
                ]
            return _compare_positions(name, call_number, expected, arguments.fixed)

        if len(expected) < fixed_count:
            return [
                _count_mismatch(
                    name, call_number, "parameters", len(expected), fixed_count
                )
            ]
        failures = _compare_positions(
            name, call_number, expected[:fixed_count], arguments.fixed
        )
        remaining = expected[fixed_count:]
        if len(remaining) != len(arguments.variadic):
            failures.append(
                _count_mismatch(
                    name,
                    call_number,
                    "variadic parameters",
                    len(remaining),
                    len(arguments.variadic),
                )
            )
            return failures
        failures.extend(
            _compare_positions(
                name, call_number, remaining, arguments.variadic, start=fixed_count + 1
            )
        )
        return failures

    def run_side_effects(
        self, call_number: int, arguments: t.Sequence[object]
    ) -> None:
        """Execute every side effect in registration order."""
        for effect in self.side_effects:
            effect.execute(call_number, arguments)


def recovered_message(name: str, call_number: int, exc: Exception) -> str:
    """Return the diagnostic for an exception raised by user code."""
    return (
        f"[{name}] Exception recovered at call #{call_number}: "
        f"{type(exc).__name__}: {exc}"
    )


def _count_mismatch(
    name: str, call_number: int, label: str, expected: int, actual: int
) -> Mismatch:
    return Mismatch(
        f"[{name}] Invalid number of {label} at call #{call_number}: "
        f"expect {expected}, actual {actual}",
        shape=True,
    )


def _compare_positions(
    name: str,
    call_number: int,
    expected: t.Sequence[object],
    actual: t.Sequence[object],
    *,
    start: int = 1,
) -> list[Mismatch]:
    failures: list[Mismatch] = []
    for position, (want, got) in enumerate(
        zip(expected, actual, strict=True), start=start
    ):
        matcher = as_matcher(want)
        try:
            matched = matcher.compare(got)
        except FuncMoxError:
            raise
        except Exception as exc:  # noqa: BLE001 - predicates and __eq__ are user code
            failures.append(
                Mismatch(recovered_message(name, call_number, exc), recovered=True)
            )
            continue
        if not matched:
            failures.append(
                Mismatch(
                    f"[{name}] Parameter mismatch at call #{call_number} "
                    f"parameter #{position}: {matcher.explain(got)}"
                )
            )
    return failures


__all__ = ["Expectation", "Mismatch", "recovered_message"]
