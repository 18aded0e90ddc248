"""Serve redirected calls from the registered expectations."""

from __future__ import annotations

import functools
import inspect
import logging
import typing as t

from .errors import FuncMoxError, UnregisteredCallError
from .expectations import recovered_message
from .targets import Mode

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    import threading

    from .expectations import Expectation
    from .reporting import TestReporter
    from .targets import CallArguments, Target, TargetEntry, TargetIdentity

logger = logging.getLogger(__name__)


def count_message(name: str, expected: int, actual: int) -> str:
    """Return the diagnostic used for call-count violations."""
    return f"[{name}] Unexpected number of calls: expect {expected}, actual {actual}"


class Dispatcher:
    """Match each intercepted call against the next expectation of its target.

    The dispatcher shares the registry's entry map and lock. Bookkeeping
    happens under the lock; predicates, equality checks and side effects run
    after it is released so they may call other redirected targets.
    """

    def __init__(
        self,
        entries: dict[TargetIdentity, TargetEntry],
        lock: threading.Lock,
        reporter: TestReporter,
    ) -> None:
        self._entries = entries
        self._lock = lock
        self._reporter = reporter

    def redirect_for(self, target: Target) -> t.Callable[..., object]:
        """Build the function installed in place of *target*."""
        if target.is_coroutine:

            async def redirect_async(*args: object, **kwargs: object) -> object:
                result = self.dispatch(target, args, kwargs)
                if inspect.isawaitable(result):
                    return await result
                return result

            return functools.update_wrapper(redirect_async, target.function)

        def redirect(*args: object, **kwargs: object) -> object:
            return self.dispatch(target, args, kwargs)

        return functools.update_wrapper(redirect, target.function)

    def dispatch(
        self, target: Target, args: tuple[object, ...], kwargs: dict[str, object]
    ) -> object:
        """Handle one call of *target* and return the synthesised result.

        The call is counted before its arguments are bound, so a call that
        does not fit the signature still shows up in the count check.
        """
        with self._lock:
            entry = self._entries.get(target.identity)
            if entry is None:
                msg = (
                    "The underlying function or method "
                    f"{target.display_name} was never set up"
                )
                self._reporter.report_fatal(UnregisteredCallError(msg))
            entry.actual_count += 1
            call_number = entry.actual_count
            mode = entry.mode
            expected_count = entry.expected_count
            expectation, report_overflow = self._select(entry, call_number)

        logger.debug("Dispatching %s call #%d", entry.name, call_number)
        arguments = target.bind(args, kwargs)
        if expectation is None:
            if report_overflow:
                self._reporter.report_failure(
                    count_message(entry.name, expected_count, call_number)
                )
            return _zero_result(target)

        try:
            if not self._prepare(entry, mode, expectation, call_number, arguments):
                return _zero_result(target)
            if expectation.replacement is None:
                return self._synthesise(entry, mode, expectation, call_number)
        except FuncMoxError:
            raise
        except Exception as exc:  # noqa: BLE001 - user callbacks may raise anything
            self._reporter.report_failure(
                recovered_message(entry.name, call_number, exc)
            )
            return _zero_result(target)
        return expectation.replacement(*args, **kwargs)

    @staticmethod
    def _select(
        entry: TargetEntry, call_number: int
    ) -> tuple[Expectation | None, bool]:
        """Pick the expectation for *call_number*; caller holds the lock.

        Returns ``(None, report)`` when the call overflows a mock; ``report``
        is ``True`` only the first time the entry overflows.
        """
        available = len(entry.expectations)
        overflow = call_number > entry.expected_count or call_number > available
        if not overflow:
            return entry.expectations[call_number - 1], False
        if entry.mode is Mode.STUB and available:
            return entry.expectations[available - 1], False
        report = not entry.already_reported
        entry.already_reported = True
        return None, report

    def _mark_reported(self, entry: TargetEntry) -> None:
        with self._lock:
            entry.already_reported = True

    def _prepare(
        self,
        entry: TargetEntry,
        mode: Mode,
        expectation: Expectation,
        call_number: int,
        arguments: CallArguments,
    ) -> bool:
        """Check parameters and run side effects.

        Returns ``False`` when a matcher raised; the call then skips its side
        effects and returns zero values.
        """
        if mode is Mode.MOCK:
            mismatches = expectation.check_parameters(
                entry.name, call_number, arguments
            )
            for mismatch in mismatches:
                self._reporter.report_failure(mismatch.message)
            if any(mismatch.shape for mismatch in mismatches):
                self._mark_reported(entry)
            if any(mismatch.recovered for mismatch in mismatches):
                return False

        expectation.run_side_effects(call_number, arguments.flat)
        return True

    def _synthesise(
        self,
        entry: TargetEntry,
        mode: Mode,
        expectation: Expectation,
        call_number: int,
    ) -> object:
        shape = entry.target.returns
        values = expectation.returns
        if shape.arity is not None and shape.arity != len(values):
            self._reporter.report_failure(
                f"[{entry.name}] Invalid number of returns at call #{call_number}: "
                f"expect {shape.arity}, actual {len(values)}"
            )
            if mode is not Mode.STUB:
                self._mark_reported(entry)
            return shape.pack(shape.zero_values())
        return shape.pack(shape.fill(values))


def _zero_result(target: Target) -> object:
    shape = target.returns
    return shape.pack(shape.zero_values())


__all__ = ["Dispatcher", "count_message"]
