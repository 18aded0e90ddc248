"""Sinks that receive failures detected by the engine."""

from __future__ import annotations

import logging
import threading
import typing as t

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    import unittest

    from .errors import FuncMoxError

logger = logging.getLogger(__name__)


class TestReporter(t.Protocol):
    """Receiver of diagnostics produced while a test runs."""

    @property
    def failures(self) -> tuple[str, ...]:
        """Return every failure recorded so far."""
        ...

    def report_failure(self, message: str) -> None:
        """Record a non-terminating failure."""
        ...

    def report_fatal(self, error: FuncMoxError) -> t.NoReturn:
        """Record *error* and abandon the current operation by raising it."""
        ...

    def on_teardown(self, callback: t.Callable[[], object]) -> None:
        """Register *callback* to run when the test ends."""
        ...

    def clear(self) -> None:
        """Forget recorded failures."""
        ...


class CollectingReporter:
    """Accumulate failures in memory; safe to call from any thread."""

    def __init__(self) -> None:
        self._failures: list[str] = []
        self._teardown: list[t.Callable[[], object]] = []
        self._lock = threading.Lock()

    @property
    def failures(self) -> tuple[str, ...]:
        """Return every failure recorded so far."""
        with self._lock:
            return tuple(self._failures)

    def report_failure(self, message: str) -> None:
        """Record *message* and keep going."""
        logger.warning("%s", message)
        with self._lock:
            self._failures.append(message)

    def report_fatal(self, error: FuncMoxError) -> t.NoReturn:
        """Record *error* then raise it."""
        self.report_failure(str(error))
        raise error

    def on_teardown(self, callback: t.Callable[[], object]) -> None:
        """Queue *callback* for :meth:`run_teardown`."""
        self._teardown.append(callback)

    def run_teardown(self) -> None:
        """Run queued teardown callbacks, most recent first."""
        while self._teardown:
            self._teardown.pop()()

    def clear(self) -> None:
        """Forget recorded failures."""
        with self._lock:
            self._failures.clear()


class UnitTestReporter(CollectingReporter):
    """Collect failures and hook teardown into a :class:`unittest.TestCase`."""

    def __init__(self, testcase: unittest.TestCase) -> None:
        super().__init__()
        self._testcase = testcase

    def on_teardown(self, callback: t.Callable[[], object]) -> None:
        """Register *callback* with ``TestCase.addCleanup``."""
        self._testcase.addCleanup(callback)


__all__ = ["CollectingReporter", "TestReporter", "UnitTestReporter"]
