"""Collaborators used by the runnable examples."""

from __future__ import annotations

import urllib.request


def http_get(url: str, timeout: float = 5.0) -> bytes:
    """Fetch ``url`` over the network."""
    with urllib.request.urlopen(url, timeout=timeout) as response:  # noqa: S310
        return response.read()


def log_line(*parts: str) -> None:
    """Write ``parts`` to an audit log."""
    del parts


def forecast(city: str) -> str:
    """Code under test: fetch and decode a forecast for ``city``."""
    body = http_get(f"https://weather.example/{city}")
    log_line("forecast", city)
    return body.decode()


class Cache:
    """A tiny cache whose methods are redirected by the examples."""

    def get(self, key: str) -> str | None:
        """Return the cached value for ``key``."""
        del key
        return None

    async def refresh(self, key: str) -> bool:
        """Refresh ``key``; returns ``True`` when the value changed."""
        del key
        return False
