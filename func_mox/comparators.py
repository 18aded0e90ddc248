"""Parameter matchers used in place of literal expected arguments."""

from __future__ import annotations

import abc
import re
import typing as t

from .returns import is_zero_value


class Matcher(abc.ABC):
    """Comparison strategy for a single argument position."""

    @abc.abstractmethod
    def compare(self, value: object) -> bool:
        """Return ``True`` if *value* satisfies the matcher."""

    @abc.abstractmethod
    def explain(self, actual: object) -> str:
        """Describe why *actual* did not satisfy the matcher."""

    def __call__(self, value: object) -> bool:
        """Alias for :meth:`compare` so matchers double as predicates."""
        return self.compare(value)


class Exact(Matcher):
    """Match by structural equality.

    An expected ``None`` accepts ``None`` or the zero value of the actual
    value's own builtin type (``0``, ``""``, ``[]`` and so on).
    """

    def __init__(self, value: object) -> None:
        self.value = value

    def compare(self, value: object) -> bool:
        """Return ``True`` when *value* equals the expected value."""
        if self.value is None:
            return is_zero_value(value)
        return bool(self.value == value)

    def explain(self, actual: object) -> str:
        """Report the expected and actual values."""
        return f"expect {self.value!r}, actual {actual!r}"

    def __repr__(self) -> str:
        """Return a debug representation."""
        return f"Exact({self.value!r})"


class Anything(Matcher):
    """Match any value without inspecting it."""

    def compare(self, value: object) -> bool:
        """Return ``True`` for any input."""
        return True

    def explain(self, actual: object) -> str:  # pragma: no cover - never fails
        """Return an empty explanation; :class:`Anything` never mismatches."""
        return ""

    def __repr__(self) -> str:
        """Return a debug representation."""
        return "Anything()"


class Matching(Matcher):
    """Use a custom ``predicate`` to determine a match."""

    def __init__(
        self, predicate: t.Callable[[t.Any], object], *, label: str | None = None
    ) -> None:
        self.predicate = predicate
        self._label = label

    def compare(self, value: object) -> bool:
        """Return ``True`` if ``predicate(value)`` is truthy."""
        return bool(self.predicate(value))

    def explain(self, actual: object) -> str:
        """Report the failing predicate and the offending value."""
        return f"{self!r} failed on actual {actual!r}"

    def __repr__(self) -> str:
        """Return a debug representation."""
        if self._label is not None:
            return self._label
        name = getattr(self.predicate, "__qualname__", repr(self.predicate))
        return f"Matching({name})"


def as_matcher(expected: object) -> Matcher:
    """Return *expected* itself when it is a matcher, else wrap it in :class:`Exact`."""
    if isinstance(expected, Matcher):
        return expected
    return Exact(expected)


def anything() -> Anything:
    """Return the wildcard matcher."""
    return Anything()


def matches(predicate: t.Callable[[t.Any], object]) -> Matching:
    """Return a matcher accepting values for which *predicate* is truthy."""
    return Matching(predicate)


def is_a(typ: type | tuple[type, ...]) -> Matching:
    """Match instances of ``typ``."""
    names = typ if isinstance(typ, tuple) else (typ,)
    label = ", ".join(item.__name__ for item in names)
    return Matching(lambda value: isinstance(value, typ), label=f"is_a({label})")


def contains(item: object) -> Matching:
    """Match containers holding ``item``."""

    def _contains(value: t.Any) -> bool:
        try:
            return item in value
        except TypeError:
            return False

    return Matching(_contains, label=f"contains({item!r})")


def regex(pattern: str) -> Matching:
    """Match strings in which ``pattern`` can be found."""
    compiled = re.compile(pattern)
    return Matching(
        lambda value: isinstance(value, str) and compiled.search(value) is not None,
        label=f"regex({compiled.pattern!r})",
    )


def starts_with(prefix: str) -> Matching:
    """Match strings beginning with ``prefix``."""
    return Matching(
        lambda value: isinstance(value, str) and value.startswith(prefix),
        label=f"starts_with({prefix!r})",
    )


__all__ = [
    "Anything",
    "Exact",
    "Matcher",
    "Matching",
    "anything",
    "as_matcher",
    "contains",
    "is_a",
    "matches",
    "regex",
    "starts_with",
]
