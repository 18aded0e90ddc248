"""Target identity resolution and per-target bookkeeping."""

from __future__ import annotations

import dataclasses as dc
import enum
import inspect
import logging
import sys
import types
import typing as t

from .errors import SetupError
from .returns import ReturnShape

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from .expectations import Expectation

logger = logging.getLogger(__name__)


class Mode(enum.StrEnum):
    """How calls to a target are verified."""

    MOCK = "mock"
    STUB = "stub"
    NOT_CALLED = "not_called"


@dc.dataclass(frozen=True, slots=True)
class TargetIdentity:
    """Stable key naming the attribute that holds a target."""

    owner: object
    attribute: str


@dc.dataclass(frozen=True, slots=True)
class CallArguments:
    """Arguments of one call, flattened in declaration order."""

    fixed: tuple[object, ...]
    variadic: tuple[object, ...] | None = None

    @property
    def flat(self) -> tuple[object, ...]:
        """Return fixed arguments followed by the variadic tail."""
        return self.fixed + (self.variadic or ())


@dc.dataclass(frozen=True, slots=True)
class Target:
    """A resolved target: identity, display name and call shape."""

    identity: TargetIdentity
    display_name: str
    original: object
    signature: inspect.Signature | None
    returns: ReturnShape
    is_coroutine: bool = False

    @property
    def function(self) -> t.Callable[..., object]:
        """Return the plain function behind descriptors and bound methods."""
        return t.cast("t.Callable[..., object]", _underlying(self.original))

    @property
    def variadic(self) -> bool:
        """Return ``True`` when the target declares ``*args``."""
        if self.signature is None:
            return False
        return any(
            param.kind is inspect.Parameter.VAR_POSITIONAL
            for param in self.signature.parameters.values()
        )

    def bind(
        self, args: tuple[object, ...], kwargs: dict[str, object]
    ) -> CallArguments:
        """Flatten a call into :class:`CallArguments`.

        Positional parameters come first, then keyword-only parameters, then
        the ``**kwargs`` mapping; ``*args`` always forms the variadic tail.
        Raises ``TypeError`` when the call does not fit the signature.
        """
        if self.signature is None:
            extra = (dict(kwargs),) if kwargs else ()
            return CallArguments(tuple(args) + extra)
        bound = self.signature.bind(*args, **kwargs)
        bound.apply_defaults()
        positional: list[object] = []
        keyword: list[object] = []
        mapping: list[object] = []
        variadic: tuple[object, ...] | None = None
        for param in self.signature.parameters.values():
            value = bound.arguments[param.name]
            if param.kind is inspect.Parameter.VAR_POSITIONAL:
                variadic = tuple(t.cast("tuple[object, ...]", value))
            elif param.kind is inspect.Parameter.VAR_KEYWORD:
                mapping.append(value)
            elif param.kind is inspect.Parameter.KEYWORD_ONLY:
                keyword.append(value)
            else:
                positional.append(value)
        return CallArguments(tuple(positional + keyword + mapping), variadic)


@dc.dataclass(slots=True)
class TargetEntry:
    """Accumulated expectation state for one target during a session."""

    target: Target
    mode: Mode
    expected_count: int = 0
    actual_count: int = 0
    expectations: list[Expectation] = dc.field(default_factory=list)
    already_reported: bool = False

    @property
    def name(self) -> str:
        """Return the display name used in diagnostics."""
        return self.target.display_name


# ----------------------------------------------------------------------
# Resolution
# ----------------------------------------------------------------------
def _describe_owner(owner: object) -> str:
    if isinstance(owner, types.ModuleType):
        return owner.__name__
    if isinstance(owner, type):
        return f"{owner.__module__}.{owner.__qualname__}"
    return repr(owner)


def _underlying(value: object) -> object:
    """Unwrap ``staticmethod``/``classmethod`` descriptors and bound methods."""
    if isinstance(value, (staticmethod, classmethod)):
        return value.__func__
    if inspect.ismethod(value):
        return value.__func__
    return value


def _locate_callable(target: object) -> tuple[object, str]:
    """Return the ``(owner, attribute)`` pair through which *target* is reached."""
    if inspect.ismethod(target):
        receiver = target.__self__
        owner = receiver if isinstance(receiver, type) else type(receiver)
        return owner, target.__func__.__name__
    module_name = getattr(target, "__module__", None)
    qualname = getattr(target, "__qualname__", None)
    if not module_name or not qualname:
        msg = f"{target!r} cannot be resolved to a module attribute"
        raise SetupError(msg)
    parts = qualname.split(".")
    if "<locals>" in parts:
        msg = (
            f"{module_name}.{qualname} is defined in a local scope and cannot be "
            "redirected; move it to module level or pass (owner, attribute)"
        )
        raise SetupError(msg)
    owner: object | None = sys.modules.get(module_name)
    if owner is None:
        msg = f"module {module_name!r} for {qualname} is not imported"
        raise SetupError(msg)
    for part in parts[:-1]:
        try:
            owner = getattr(owner, part)
        except AttributeError as exc:
            msg = f"{module_name}.{qualname} cannot be located"
            raise SetupError(msg) from exc
    return owner, parts[-1]


def _signature(func: object) -> inspect.Signature | None:
    try:
        return inspect.signature(t.cast("t.Callable[..., object]", func))
    except (TypeError, ValueError):
        logger.debug("No signature available for %r", func)
        return None


def resolve_target(target: object, attribute: str | None = None) -> Target:
    """Resolve *target* (or *target*.*attribute*) into a :class:`Target`.

    ``target`` may be a function, a bound method, a static or class method
    reached through its class, or an owner (module, class or instance) when
    ``attribute`` names the callable on it. Instances resolve to their type.
    """
    if attribute is not None:
        if isinstance(target, (type, types.ModuleType)):
            owner: object = target
        else:
            owner = type(target)
        name = attribute
    else:
        if not callable(target):
            msg = f"{target!r} is not callable"
            raise SetupError(msg)
        owner, name = _locate_callable(target)

    try:
        static = inspect.getattr_static(owner, name)
    except AttributeError as exc:
        msg = f"{name!r} cannot be located on {_describe_owner(owner)}"
        raise SetupError(msg) from exc

    func = _underlying(static)
    if not callable(func):
        msg = f"{_describe_owner(owner)}.{name} is not callable"
        raise SetupError(msg)
    if attribute is None and func is not _underlying(target):
        msg = (
            f"{_describe_owner(owner)}.{name} does not refer to {target!r}; "
            "pass (owner, attribute) explicitly"
        )
        raise SetupError(msg)

    callable_func = t.cast("t.Callable[..., object]", func)
    return Target(
        identity=TargetIdentity(owner, name),
        display_name=f"{_describe_owner(owner)}.{name}",
        original=static,
        signature=_signature(callable_func),
        returns=ReturnShape.from_callable(callable_func),
        is_coroutine=inspect.iscoroutinefunction(callable_func),
    )


__all__ = [
    "CallArguments",
    "Mode",
    "Target",
    "TargetEntry",
    "TargetIdentity",
    "resolve_target",
]
