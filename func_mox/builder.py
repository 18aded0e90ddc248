"""Fluent setup states for building expectations.

Each state exposes only the operations that may legally follow it::

    mox.mock(target)  -> MockSetup  -> expects() -> ExpectsSet
                                    -> not_called()
    mox.stub(target)  -> StubSetup  -> returns() -> ReturnsSet
    ExpectsSet        -> returns() | runs() -> ReturnsSet
    ReturnsSet        -> side_effects() -> ReturnsSet
                      -> times(n) | once() | twice()

The registry additionally checks at runtime that the session a state refers
to is still the open one, which catches reuse of a stale state object.
"""

from __future__ import annotations

import dataclasses as dc
import typing as t

from .expectations import Expectation

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from .controller import FuncMox
    from .side_effects import SideEffect
    from .targets import TargetEntry


@dc.dataclass(slots=True)
class SetupSession:
    """The expectation currently under construction for one target."""

    entry: TargetEntry
    parameters: tuple[object, ...] | None = None
    returns: tuple[object, ...] = ()
    side_effects: list[SideEffect] = dc.field(default_factory=list)
    replacement: t.Callable[..., object] | None = None

    def build(self) -> Expectation:
        """Freeze the collected values into an :class:`Expectation`."""
        return Expectation(
            parameters=self.parameters,
            returns=self.returns,
            side_effects=tuple(self.side_effects),
            replacement=self.replacement,
        )


class _SetupState:
    __slots__ = ("_registry", "_session")

    def __init__(self, registry: FuncMox, session: SetupSession) -> None:
        self._registry = registry
        self._session = session

    def __repr__(self) -> str:
        """Return a debug representation."""
        return f"{type(self).__name__}({self._session.entry.name!r})"


class ReturnsSet(_SetupState):
    """Return values are set; side effects may be added before committing."""

    __slots__ = ()

    def side_effects(self, *effects: SideEffect) -> ReturnsSet:
        """Append *effects*; may be called repeatedly."""
        self._registry._ensure_open(self._session, "side_effects")
        self._session.side_effects.extend(effects)
        return self

    def times(self, count: int) -> None:
        """Commit the expectation for ``count`` consecutive calls."""
        self._registry._commit(self._session, count)

    def once(self) -> None:
        """Commit the expectation for a single call."""
        self.times(1)

    def twice(self) -> None:
        """Commit the expectation for two calls."""
        self.times(2)


class ExpectsSet(_SetupState):
    """Parameters are set; return values come next."""

    __slots__ = ()

    def returns(self, *values: object) -> ReturnsSet:
        """Set the values returned by the call; ``None`` means the zero value."""
        self._registry._ensure_open(self._session, "returns")
        self._session.returns = values
        return ReturnsSet(self._registry, self._session)

    def runs(self, func: t.Callable[..., object]) -> ReturnsSet:
        """Serve each call with ``func(*args, **kwargs)`` instead of fixed values.

        ``func`` receives the arguments the target was called with, the
        receiver first for methods reached through their class. Its result
        is returned unchanged and exceptions it raises reach the caller. A
        coroutine target awaits ``func``'s result when it is awaitable.
        """
        self._registry._set_replacement(self._session, func)
        return ReturnsSet(self._registry, self._session)


class StubSetup(ExpectsSet):
    """A stub session; parameters are not verified for stubs."""

    __slots__ = ()


class MockSetup(_SetupState):
    """A mock session awaiting its expected parameters."""

    __slots__ = ()

    def expects(self, *parameters: object) -> ExpectsSet:
        """Set the expected arguments (literals or matchers)."""
        self._registry._ensure_open(self._session, "expects")
        self._session.parameters = parameters
        return ExpectsSet(self._registry, self._session)

    def not_called(self) -> None:
        """Require that the target is never called during the session."""
        self._registry._seal(self._session)


__all__ = [
    "ExpectsSet",
    "MockSetup",
    "ReturnsSet",
    "SetupSession",
    "StubSetup",
]
