"""Unit tests for target resolution and call flattening."""

from __future__ import annotations

import inspect
import types

import pytest

from func_mox.errors import SetupError
from func_mox.targets import CallArguments, TargetIdentity, resolve_target
from func_mox.unittests import _targets

_MODULE = _targets.__name__


def test_resolve_module_function() -> None:
    """A function resolves to its defining module and name."""
    target = resolve_target(_targets.add)
    assert target.identity == TargetIdentity(_targets, "add")
    assert target.display_name == f"{_MODULE}.add"
    assert target.returns.arity == 1
    assert not target.is_coroutine


def test_resolve_explicit_owner_and_attribute() -> None:
    """``(owner, attribute)`` pairs resolve to the same identity."""
    assert resolve_target(_targets, "add").identity == resolve_target(
        _targets.add
    ).identity


def test_resolve_bound_method_uses_receiver_type() -> None:
    """Bound methods resolve to the class of their receiver."""
    repo = _targets.Repository()
    target = resolve_target(repo.get)
    assert target.identity == TargetIdentity(_targets.Repository, "get")
    assert target.display_name == f"{_MODULE}.Repository.get"


def test_resolve_inherited_method_on_subclass() -> None:
    """A method reached through a subclass is keyed on the subclass."""
    repo = _targets.CachedRepository()
    target = resolve_target(repo.get)
    assert target.identity.owner is _targets.CachedRepository
    assert target.display_name == f"{_MODULE}.CachedRepository.get"


def test_resolve_instance_with_attribute_uses_type() -> None:
    """An instance owner is replaced by its type."""
    target = resolve_target(_targets.Repository(), "get")
    assert target.identity.owner is _targets.Repository


def test_resolve_static_and_class_methods() -> None:
    """Descriptors are kept as the original so they can be restored."""
    static = resolve_target(_targets.Repository.normalise)
    assert isinstance(static.original, staticmethod)
    assert static.identity == TargetIdentity(_targets.Repository, "normalise")

    cls_method = resolve_target(_targets.Repository.create)
    assert isinstance(cls_method.original, classmethod)
    assert cls_method.identity == TargetIdentity(_targets.Repository, "create")


def test_resolve_coroutine_function() -> None:
    """Coroutine functions are flagged."""
    assert resolve_target(_targets.fetch).is_coroutine


def test_local_function_is_rejected() -> None:
    """Functions defined in a local scope cannot be redirected."""

    def _local() -> None:
        return None

    with pytest.raises(SetupError, match="local scope"):
        resolve_target(_local)


def test_missing_attribute_is_rejected() -> None:
    """An unknown attribute on the owner raises :class:`SetupError`."""
    with pytest.raises(SetupError, match="cannot be located"):
        resolve_target(_targets, "does_not_exist")


def test_non_callable_is_rejected() -> None:
    """Plain values cannot be targets."""
    with pytest.raises(SetupError, match="not callable"):
        resolve_target(42)


def test_aliased_function_must_match_owner_attribute() -> None:
    """A function whose qualname points elsewhere is refused."""
    fake = types.FunctionType(
        _targets.greet.__code__, _targets.greet.__globals__, "greet"
    )
    fake.__qualname__ = "greet"
    fake.__module__ = _MODULE
    with pytest.raises(SetupError, match="does not refer to"):
        resolve_target(fake)


@pytest.mark.parametrize(
    ("func", "args", "kwargs", "expected"),
    [
        (_targets.add, (1,), {"b": 2}, CallArguments((1, 2))),
        (_targets.total, (1, 2, 3), {}, CallArguments((1,), (2, 3))),
        (_targets.total, (1,), {}, CallArguments((1,), ())),
        (_targets.lookup, ("k",), {}, CallArguments(("k", None))),
        (
            _targets.configure,
            ("svc",),
            {"retries": 3},
            CallArguments(("svc", False, {"retries": 3})),
        ),
    ],
)
def test_bind_flattens_arguments(
    func: object,
    args: tuple[object, ...],
    kwargs: dict[str, object],
    expected: CallArguments,
) -> None:
    """Defaults are applied and the variadic tail is split off."""
    assert resolve_target(func).bind(args, kwargs) == expected


def test_bind_rejects_invalid_call() -> None:
    """Calls that do not fit the signature raise ``TypeError``."""
    with pytest.raises(TypeError):
        resolve_target(_targets.add).bind((1, 2, 3), {})


def test_bind_includes_receiver_for_methods() -> None:
    """The receiver is the first flattened argument of an instance method."""
    repo = _targets.Repository()
    target = resolve_target(repo.get)
    assert target.bind((repo, "k"), {}).flat == (repo, "k")


def test_flat_appends_variadic_tail() -> None:
    """``flat`` concatenates fixed and variadic arguments."""
    assert CallArguments((1,), (2, 3)).flat == (1, 2, 3)
    assert CallArguments((1,)).flat == (1,)


def test_signature_is_captured() -> None:
    """The original signature is kept for binding."""
    target = resolve_target(_targets.total)
    assert isinstance(target.signature, inspect.Signature)
    assert target.variadic
    assert not resolve_target(_targets.add).variadic
