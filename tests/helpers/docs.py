"""Helpers for validating documentation content in tests."""

from __future__ import annotations

import re

_INLINE_NAME = re.compile(r"`([A-Za-z_][A-Za-z0-9_]*)`")


def section_text(text: str, *, heading: str) -> str:
    """Return the body of the level-two markdown section titled ``heading``.

    Raises
    ------
    ValueError
        If the heading does not occur exactly once.
    """
    marker = f"## {heading}\n"
    count = text.count(marker)
    if count != 1:
        msg = f"Expected exactly one {heading!r} section; found {count}."
        raise ValueError(msg)
    body = text.split(marker, 1)[1]
    following = body.find("\n## ")
    return body if following == -1 else body[:following]


def documented_names(section: str) -> set[str]:
    """Return every identifier written as inline code in ``section``."""
    return set(_INLINE_NAME.findall(section))
