"""FuncMox controller: the registry behind the fluent API."""

from __future__ import annotations

import enum
import logging
import threading
import types  # noqa: TC003
import typing as t

from ._validators import require_int
from .builder import MockSetup, SetupSession, StubSetup
from .dispatch import Dispatcher
from .errors import LifecycleError, SetupError, UsageError, VerificationError
from .expectations import Expectation
from .patching import AttributePatcher
from .reporting import CollectingReporter, UnitTestReporter
from .targets import Mode, TargetEntry, resolve_target
from .verifiers import CountVerifier, format_failures, incomplete_setup_message

if t.TYPE_CHECKING:
    import unittest

    from .patching import Patcher
    from .reporting import TestReporter
    from .targets import Target, TargetIdentity

logger = logging.getLogger(__name__)


class Phase(enum.StrEnum):
    """Lifecycle phases for :class:`FuncMox`."""

    ACTIVE = "ACTIVE"
    VERIFIED = "VERIFIED"


class FuncMox:
    """Registry of expectations for one test.

    Registration and dispatch share one lock per instance, so code under test
    may call redirected targets from its own threads while the test keeps
    registering expectations. Only one setup chain may be open at a time.
    """

    def __init__(
        self,
        *,
        reporter: TestReporter | None = None,
        patcher: Patcher | None = None,
        verify_on_exit: bool = True,
    ) -> None:
        """Create a new controller.

        Parameters
        ----------
        reporter:
            Sink for diagnostics. Defaults to a :class:`CollectingReporter`.
            :meth:`verify` is registered with the reporter's teardown hook.
        patcher:
            Facility used to redirect targets. Defaults to an
            :class:`AttributePatcher`.
        verify_on_exit:
            When ``True`` (the default), leaving the ``with`` block calls
            :meth:`verify`. Otherwise redirections are only reverted.
        """
        self.reporter: TestReporter = (
            reporter if reporter is not None else CollectingReporter()
        )
        self.patcher: Patcher = patcher if patcher is not None else AttributePatcher()
        self._verify_on_exit = verify_on_exit
        self._lock = threading.Lock()
        self._entries: dict[TargetIdentity, TargetEntry] = {}
        self._open: SetupSession | None = None
        self._phase = Phase.ACTIVE
        self._dispatcher = Dispatcher(self._entries, self._lock, self.reporter)
        self.reporter.on_teardown(self._verify_at_teardown)

    @classmethod
    def for_testcase(cls, testcase: unittest.TestCase) -> FuncMox:
        """Return a controller verified automatically by ``testcase`` cleanup."""
        return cls(reporter=UnitTestReporter(testcase))

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def phase(self) -> Phase:
        """Return the current lifecycle phase."""
        return self._phase

    @property
    def mocks(self) -> dict[str, TargetEntry]:
        """Return entries verified as mocks, keyed by display name."""
        return self._entries_by_mode(Mode.MOCK, Mode.NOT_CALLED)

    @property
    def stubs(self) -> dict[str, TargetEntry]:
        """Return stub entries, keyed by display name."""
        return self._entries_by_mode(Mode.STUB)

    def _entries_by_mode(self, *modes: Mode) -> dict[str, TargetEntry]:
        with self._lock:
            return {
                entry.name: entry
                for entry in self._entries.values()
                if entry.mode in modes
            }

    def called(self, target: object, attribute: str | None = None) -> int:
        """Return how many times *target* has been called so far."""
        identity = self._resolve(target, attribute).identity
        with self._lock:
            entry = self._entries.get(identity)
            return 0 if entry is None else entry.actual_count

    # ------------------------------------------------------------------
    # Context manager protocol
    # ------------------------------------------------------------------
    def __enter__(self) -> FuncMox:
        """Enter the context; the controller is already active."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: types.TracebackType | None,
    ) -> None:
        """Verify (or just restore) when leaving the context."""
        if self._phase is not Phase.ACTIVE:
            return
        if not self._verify_on_exit:
            self.restore()
            return
        verify_error: Exception | None = None
        try:
            self.verify()
        except Exception as err:  # noqa: BLE001
            verify_error = err
        if exc_type is None and verify_error is not None:
            raise verify_error

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def mock(self, target: object, attribute: str | None = None) -> MockSetup:
        """Start a mock setup: parameters and call count are verified."""
        return MockSetup(self, self._open_session(target, attribute, Mode.MOCK))

    def stub(self, target: object, attribute: str | None = None) -> StubSetup:
        """Start a stub setup: only returns and side effects are programmed."""
        return StubSetup(self, self._open_session(target, attribute, Mode.STUB))

    def verify(self) -> None:
        """Reconcile call counts, revert redirections and raise on failures."""
        self._require_phase(Phase.ACTIVE, "verify")
        try:
            with self._lock:
                stale = self._open
                entries = list(self._entries.values())
            if stale is not None:
                self.reporter.report_failure(
                    incomplete_setup_message(stale.entry.name)
                )
            CountVerifier().verify(entries, self.reporter)
        finally:
            self.restore()
        failures = self.reporter.failures
        if failures:
            raise VerificationError(format_failures(failures), failures)

    def restore(self) -> None:
        """Discard all expectations and revert every redirection."""
        with self._lock:
            self._entries.clear()
            self._open = None
            self._phase = Phase.VERIFIED
        self.patcher.revert_all()
        logger.debug("Reverted all redirections")

    # ------------------------------------------------------------------
    # Setup session management (used by the builder states)
    # ------------------------------------------------------------------
    def _open_session(
        self, target: object, attribute: str | None, mode: Mode
    ) -> SetupSession:
        self._require_phase(Phase.ACTIVE, mode.value)
        resolved = self._resolve(target, attribute)
        with self._lock:
            if self._open is not None:
                stale = self._open
                self._open = None
                self._fatal(incomplete_setup_message(stale.entry.name))
            entry = self._entries.get(resolved.identity)
            if entry is None:
                entry = TargetEntry(resolved, mode)
                self._entries[resolved.identity] = entry
            elif entry.mode is Mode.NOT_CALLED:
                self._fatal(
                    f"A former setup for function or method [{entry.name}] was to "
                    "be not called, therefore no more mock or stub can be set up "
                    "for it now."
                )
            elif entry.mode is not mode:
                self._fatal(
                    f"A former setup for function or method [{entry.name}] was a "
                    f"{entry.mode.capitalize()} but current setup is a "
                    f"{mode.capitalize()}. Mixing stub and mock for the same "
                    "function or method is not supported."
                )
            session = SetupSession(entry)
            self._open = session
        logger.debug("Opened %s setup for %s", mode, entry.name)
        return session

    def _ensure_open(self, session: SetupSession, operation: str) -> None:
        with self._lock:
            if self._open is not session:
                self._fatal(
                    f"Unexpected call to {operation}() without setting up an "
                    "anticipated function or method"
                )

    def _set_replacement(
        self, session: SetupSession, func: t.Callable[..., object]
    ) -> None:
        with self._lock:
            if self._open is not session:
                self._fatal(
                    "Unexpected call to runs() without setting up an anticipated "
                    "function or method"
                )
            if not callable(func):
                self._open = None
                self._fatal(
                    f"Function or method [{session.entry.name}] requires a "
                    f"callable for runs(), got {type(func).__name__}"
                )
            session.replacement = func

    def _commit(self, session: SetupSession, count: int) -> None:
        require_int(count, "count")
        with self._lock:
            if self._open is not session:
                self._fatal(
                    "Unexpected call to times() without setting up an anticipated "
                    "function or method"
                )
            entry = session.entry
            if count < 0:
                self._open = None
                self._fatal(
                    f"Function or method [{entry.name}] cannot be mocked for "
                    f"negative [{count}] times"
                )
            if count == 0:
                self._open = None
                self._fatal(
                    f"Function or method [{entry.name}] cannot be mocked for zero "
                    "times using times(). Use not_called() instead."
                )
            expectation = session.build()
            entry.expectations.extend([expectation] * count)
            entry.expected_count += count
            self._open = None
        logger.debug("Registered %d call(s) for %s", count, entry.name)
        self._install(entry.target)

    def _seal(self, session: SetupSession) -> None:
        with self._lock:
            if self._open is not session:
                self._fatal(
                    "Unexpected call to not_called() without setting up an "
                    "anticipated function or method"
                )
            entry = session.entry
            entry.mode = Mode.NOT_CALLED
            entry.expected_count = 0
            entry.expectations = [Expectation()]
            self._open = None
        logger.debug("Registered %s as not called", entry.name)
        self._install(entry.target)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _install(self, target: Target) -> None:
        if self.patcher.is_installed(target.identity):
            return
        try:
            self.patcher.install(target, self._dispatcher.redirect_for(target))
        except SetupError as exc:
            self.reporter.report_fatal(exc)

    def _resolve(self, target: object, attribute: str | None) -> Target:
        try:
            return resolve_target(target, attribute)
        except SetupError as exc:
            self.reporter.report_fatal(exc)

    def _fatal(self, message: str) -> t.NoReturn:
        self.reporter.report_fatal(UsageError(message))

    def _require_phase(self, expected: Phase, action: str) -> None:
        """Ensure we're in ``expected`` phase before executing ``action``."""
        if self._phase is not expected:
            msg = (
                f"Cannot call {action}(): not in '{expected.name.lower()}' phase "
                f"(current phase: {self._phase.name.lower()})"
            )
            raise LifecycleError(msg)

    def _verify_at_teardown(self) -> None:
        if self._phase is Phase.ACTIVE:
            self.verify()


__all__ = ["FuncMox", "Phase"]
