"""Redirect attribute lookups of targets to the dispatcher and restore them."""

from __future__ import annotations

import dataclasses as dc
import logging
import threading
import typing as t

from .errors import SetupError

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from .targets import Target, TargetIdentity

logger = logging.getLogger(__name__)

CleanupError = tuple[str, Exception]


class Patcher(t.Protocol):
    """Facility that swaps a target for a replacement and can undo it."""

    def install(
        self, target: Target, replacement: t.Callable[..., object]
    ) -> None:
        """Route future calls of *target* to *replacement*."""
        ...

    def is_installed(self, identity: TargetIdentity) -> bool:
        """Return ``True`` when *identity* is currently redirected."""
        ...

    def revert_all(self) -> None:
        """Restore every redirected target."""
        ...


@dc.dataclass(frozen=True, slots=True)
class _SavedAttribute:
    target: Target
    defined_on_owner: bool


def _rewrap(original: object, replacement: t.Callable[..., object]) -> object:
    """Wrap *replacement* in the same descriptor type as *original*."""
    if isinstance(original, staticmethod):
        return staticmethod(replacement)
    if isinstance(original, classmethod):
        return classmethod(replacement)
    return replacement


class AttributePatcher:
    """Replace the owner's attribute for each target and restore it later.

    Attributes inherited from a base class are shadowed on the owner and
    deleted again on revert, leaving the base class untouched.
    """

    def __init__(self) -> None:
        self._saved: dict[TargetIdentity, _SavedAttribute] = {}
        self._lock = threading.Lock()

    def install(
        self, target: Target, replacement: t.Callable[..., object]
    ) -> None:
        """Install *replacement* for *target*; repeated installs are no-ops."""
        identity = target.identity
        with self._lock:
            if identity in self._saved:
                return
            owner = identity.owner
            defined_on_owner = identity.attribute in getattr(owner, "__dict__", {})
            try:
                setattr(
                    owner, identity.attribute, _rewrap(target.original, replacement)
                )
            except (AttributeError, TypeError) as exc:
                msg = f"{target.display_name} cannot be redirected: {exc}"
                raise SetupError(msg) from exc
            self._saved[identity] = _SavedAttribute(target, defined_on_owner)
        logger.debug("Redirected %s", target.display_name)

    def is_installed(self, identity: TargetIdentity) -> bool:
        """Return ``True`` when *identity* is currently redirected."""
        with self._lock:
            return identity in self._saved

    def revert_all(self) -> None:
        """Restore every redirected attribute, newest first.

        Failures are collected so one broken owner does not leave the others
        patched; they are raised together once every revert was attempted.
        """
        with self._lock:
            saved = list(self._saved.values())
            self._saved.clear()
        cleanup_errors: list[CleanupError] = []
        for entry in reversed(saved):
            self._restore(entry, cleanup_errors)
        if cleanup_errors:
            error_msg = "; ".join(msg for msg, _ in cleanup_errors)
            logger.error("Reverting redirections encountered errors: %s", error_msg)
            msg = f"Cleanup failed: {error_msg}"
            raise RuntimeError(msg) from cleanup_errors[0][1]

    @staticmethod
    def _restore(entry: _SavedAttribute, cleanup_errors: list[CleanupError]) -> None:
        identity = entry.target.identity
        try:
            if entry.defined_on_owner:
                setattr(identity.owner, identity.attribute, entry.target.original)
            else:
                delattr(identity.owner, identity.attribute)
        except (AttributeError, TypeError) as exc:
            cleanup_errors.append((f"{entry.target.display_name}: {exc}", exc))
            return
        logger.debug("Restored %s", entry.target.display_name)


__all__ = ["AttributePatcher", "Patcher"]
