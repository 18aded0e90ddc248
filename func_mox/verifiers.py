"""Verification helpers for :class:`FuncMox`."""

from __future__ import annotations

import typing as t
from textwrap import indent

from .dispatch import count_message
from .targets import Mode

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from .reporting import TestReporter
    from .targets import TargetEntry


def _numbered(entries: t.Sequence[str], *, start: int = 1) -> str:
    if not entries:
        return "(none)"
    lines: list[str] = []
    for index, entry in enumerate(entries, start=start):
        entry_lines = entry.splitlines() or [""]
        lines.append(f"{index}. {entry_lines[0]}")
        lines.extend(f"   {extra}" for extra in entry_lines[1:])
    return "\n".join(lines)


def _format_sections(title: str, sections: list[tuple[str, str]]) -> str:
    parts = [title]
    for label, body in sections:
        if not body:
            continue
        parts.append("")
        parts.append(f"{label}:")
        parts.append(indent(body, "  "))
    return "\n".join(parts)


def format_failures(failures: t.Sequence[str]) -> str:
    """Return the message carried by :class:`VerificationError`."""
    return _format_sections(
        "Mock verification failed.",
        [("Failures", _numbered(failures))],
    )


def incomplete_setup_message(name: str) -> str:
    """Return the diagnostic for a setup chain that was never committed."""
    return (
        f"A former setup for function or method [{name}] was incomplete. "
        "Did you miss calling once(), twice() or times() at the end?"
    )


class CountVerifier:
    """Check that each target was called the expected number of times."""

    def verify(
        self, entries: t.Iterable[TargetEntry], reporter: TestReporter
    ) -> None:
        """Report every non-stub entry whose counts disagree.

        Entries that already reported a terminal violation while being called
        are skipped so each target is reported at most once.
        """
        for entry in entries:
            if entry.already_reported or entry.mode is Mode.STUB:
                continue
            if entry.expected_count != entry.actual_count:
                reporter.report_failure(
                    count_message(entry.name, entry.expected_count, entry.actual_count)
                )
                entry.already_reported = True


__all__ = ["CountVerifier", "format_failures", "incomplete_setup_message"]
