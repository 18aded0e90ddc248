"""Module-level functions and classes redirected by the test suite.

Code under test reaches these through the module attribute (``_targets.add``)
so redirections installed on the module are observed.
"""

from __future__ import annotations


def add(a: int, b: int) -> int:
    """Return the sum of ``a`` and ``b``."""
    return a + b


def greet(name: str) -> str:
    """Return a greeting for ``name``."""
    return f"hello {name}"


def total(first: int, *rest: int) -> int:
    """Return the sum of all arguments."""
    return first + sum(rest)


def notify(message: str) -> None:
    """Pretend to deliver ``message``."""
    del message


def split(value: int, parts: int) -> tuple[int, int]:
    """Return quotient and remainder."""
    return divmod(value, parts)


def lookup(key, default=None):  # noqa: ANN001, ANN201 - deliberately unannotated
    """Return ``default``; the return shape is undeclared."""
    del key
    return default


def configure(
    name: str, *, verbose: bool = False, **options: object
) -> dict[str, object]:
    """Return the configuration mapping."""
    return {"name": name, "verbose": verbose, **options}


def maybe_count(items: list[str] | None) -> int | None:
    """Return the number of items, or ``None``."""
    return None if items is None else len(items)


def collect(names: list[str]) -> list[str]:
    """Return a copy of ``names``."""
    return list(names)


async def fetch(url: str) -> str:
    """Pretend to fetch ``url``."""
    return f"fetched {url}"


def run_pipeline(value: int) -> int:
    """Code under test: doubles ``value`` through :func:`add`."""
    return add(value, value)


class Repository:
    """Small class whose methods are redirected in tests."""

    def __init__(self, prefix: str = "repo") -> None:
        self.prefix = prefix

    def __repr__(self) -> str:
        return f"Repository({self.prefix!r})"

    def get(self, key: str) -> str | None:
        """Return a value for ``key``."""
        return f"{self.prefix}:{key}"

    @staticmethod
    def normalise(key: str) -> str:
        """Return ``key`` lower-cased."""
        return key.lower()

    @classmethod
    def create(cls, prefix: str) -> Repository:
        """Build a repository."""
        return cls(prefix)


class CachedRepository(Repository):
    """Subclass inheriting :meth:`Repository.get`."""
