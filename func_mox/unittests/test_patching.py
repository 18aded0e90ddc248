"""Unit tests for :class:`func_mox.patching.AttributePatcher`."""

from __future__ import annotations

import logging
import typing as t

import pytest

from func_mox.errors import SetupError
from func_mox.patching import AttributePatcher
from func_mox.targets import resolve_target
from func_mox.unittests import _targets

_ORIGINAL_ADD = _targets.add


def _replacement(*args: object, **kwargs: object) -> str:
    del args, kwargs
    return "patched"


@pytest.fixture
def patcher() -> t.Generator[AttributePatcher, None, None]:
    """Yield a patcher that is always reverted."""
    patcher = AttributePatcher()
    yield patcher
    patcher.revert_all()


def test_install_and_revert_module_function(patcher: AttributePatcher) -> None:
    """Module attributes are swapped and restored."""
    target = resolve_target(_targets.add)
    patcher.install(target, _replacement)

    assert _targets.add(1, 2) == "patched"
    assert patcher.is_installed(target.identity)

    patcher.revert_all()
    assert _targets.add is _ORIGINAL_ADD
    assert not patcher.is_installed(target.identity)


def test_install_is_idempotent(patcher: AttributePatcher) -> None:
    """A second install for the same identity keeps the first replacement."""
    target = resolve_target(_targets.greet)
    patcher.install(target, _replacement)
    patcher.install(target, lambda *_: "other")
    assert _targets.greet("x") == "patched"


def test_static_and_class_methods_keep_descriptor_type(
    patcher: AttributePatcher,
) -> None:
    """Replacements are rewrapped so calls through the class still work."""
    patcher.install(resolve_target(_targets.Repository.normalise), _replacement)
    patcher.install(resolve_target(_targets.Repository.create), _replacement)

    assert isinstance(_targets.Repository.__dict__["normalise"], staticmethod)
    assert isinstance(_targets.Repository.__dict__["create"], classmethod)
    assert _targets.Repository.normalise("X") == "patched"
    assert _targets.Repository.create("p") == "patched"

    patcher.revert_all()
    assert _targets.Repository.normalise("X") == "x"
    assert _targets.Repository.create("p").prefix == "p"


def test_inherited_attribute_is_shadowed_then_removed(
    patcher: AttributePatcher,
) -> None:
    """Subclass patches never touch the base class."""
    patcher.install(resolve_target(_targets.CachedRepository, "get"), _replacement)

    assert "get" in _targets.CachedRepository.__dict__
    assert _targets.CachedRepository().get("k") == "patched"
    assert _targets.Repository().get("k") == "repo:k"

    patcher.revert_all()
    assert "get" not in _targets.CachedRepository.__dict__
    assert _targets.CachedRepository().get("k") == "repo:k"


def test_unpatchable_owner_raises_setup_error(patcher: AttributePatcher) -> None:
    """Owners that refuse attribute assignment surface as :class:`SetupError`."""
    target = resolve_target(str, "upper")
    with pytest.raises(SetupError, match="cannot be redirected"):
        patcher.install(target, _replacement)
    assert not patcher.is_installed(target.identity)


def test_revert_collects_errors(
    patcher: AttributePatcher, caplog: pytest.LogCaptureFixture
) -> None:
    """Revert failures are logged and raised after every target is attempted."""
    shadow = resolve_target(_targets.CachedRepository, "get")
    patcher.install(resolve_target(_targets.add), _replacement)
    patcher.install(shadow, _replacement)
    del _targets.CachedRepository.get

    with (
        caplog.at_level(logging.ERROR, logger="func_mox.patching"),
        pytest.raises(RuntimeError, match="Cleanup failed"),
    ):
        patcher.revert_all()

    assert _targets.add is _ORIGINAL_ADD
    assert "Reverting redirections encountered errors" in caplog.text
