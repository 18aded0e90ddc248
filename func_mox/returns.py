"""Declared return shapes and zero-value synthesis."""

from __future__ import annotations

import dataclasses as dc
import inspect
import logging
import types
import typing as t

logger = logging.getLogger(__name__)

_ZERO_FACTORIES: frozenset[type] = frozenset(
    {
        bool,
        bytearray,
        bytes,
        complex,
        dict,
        float,
        frozenset,
        int,
        list,
        set,
        str,
        tuple,
    }
)


def zero_value(annotation: object) -> object:
    """Return the zero value for a declared type.

    Builtin value types produce their empty instance (``0``, ``""``, ``[]``
    and so on); parametrised generics fall back to their origin. Everything
    else, including unions, ``Any`` and user classes, yields ``None``.
    """
    if annotation is None or annotation is type(None):
        return None
    origin = t.get_origin(annotation)
    if origin in (t.Union, types.UnionType):
        return None
    candidate = origin if origin is not None else annotation
    if isinstance(candidate, type) and candidate in _ZERO_FACTORIES:
        return candidate()
    return None


def is_zero_value(value: object) -> bool:
    """Return ``True`` for ``None`` or the empty instance of a builtin value type."""
    if value is None:
        return True
    kind = type(value)
    return kind in _ZERO_FACTORIES and bool(value == kind())


def _is_fixed_tuple(annotation: object) -> bool:
    if t.get_origin(annotation) is not tuple:
        return False
    args = t.get_args(annotation)
    return bool(args) and Ellipsis not in args


@dc.dataclass(frozen=True, slots=True)
class ReturnShape:
    """Return slots declared by a target.

    ``slots`` is ``None`` when the target carries no return annotation, in
    which case the arity is whatever the expectation provides.
    """

    slots: tuple[object, ...] | None = None
    packed: bool = False

    @classmethod
    def undeclared(cls) -> ReturnShape:
        """Return a shape that accepts any number of values."""
        return cls()

    @classmethod
    def from_annotation(cls, annotation: object) -> ReturnShape:
        """Build a shape from an evaluated return annotation."""
        if annotation is inspect.Signature.empty or isinstance(annotation, str):
            return cls.undeclared()
        if annotation is None or annotation is type(None):
            return cls(slots=())
        if _is_fixed_tuple(annotation):
            return cls(slots=t.get_args(annotation), packed=True)
        return cls(slots=(annotation,))

    @classmethod
    def from_callable(cls, func: t.Callable[..., object]) -> ReturnShape:
        """Inspect *func*'s return annotation."""
        try:
            hints = t.get_type_hints(func)
        except Exception:  # noqa: BLE001 - unresolved forward references
            logger.debug("Could not evaluate type hints for %r", func)
            try:
                annotation = inspect.signature(func).return_annotation
            except (TypeError, ValueError):
                return cls.undeclared()
        else:
            annotation = hints.get("return", inspect.Signature.empty)
        return cls.from_annotation(annotation)

    @property
    def arity(self) -> int | None:
        """Return the number of declared return slots, or ``None``."""
        return None if self.slots is None else len(self.slots)

    def zero_values(self) -> tuple[object, ...]:
        """Return the zero value of every declared slot."""
        if self.slots is None:
            return ()
        return tuple(zero_value(slot) for slot in self.slots)

    def fill(self, values: t.Sequence[object]) -> tuple[object, ...]:
        """Replace ``None`` entries in *values* with their slot's zero value."""
        if self.slots is None:
            return tuple(values)
        return tuple(
            zero_value(slot) if value is None else value
            for slot, value in zip(self.slots, values, strict=True)
        )

    def pack(self, values: t.Sequence[object]) -> object:
        """Convert slot values into what the Python call returns."""
        if self.packed:
            return tuple(values)
        if not values:
            return None
        if len(values) == 1:
            return values[0]
        return tuple(values)


__all__ = ["ReturnShape", "is_zero_value", "zero_value"]
