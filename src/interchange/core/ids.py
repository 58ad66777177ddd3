"""Group identifier sources.

Group ids are opaque strings. Production runs mint random UUIDs; tests and
reproducible runs use a counter so exact ids can be asserted on.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol
from uuid import uuid4


class IdGenerator(Protocol):
    """Callable that returns a fresh group id on every call."""

    def __call__(self) -> str: ...


class UuidIds:
    """Random UUID4 group ids."""

    __slots__ = ()

    def __call__(self) -> str:
        return str(uuid4())


class CounterIds:
    """Deterministic ids: G00001, G00002, ...

    Args:
        prefix: Leading text of every id.
        width: Zero-padded width of the numeric part.
        start: First number handed out.
    """

    __slots__ = ("_next", "_prefix", "_width")

    def __init__(self, prefix: str = "G", width: int = 5, start: int = 1) -> None:
        if width < 1:
            raise ValueError(f"width must be >= 1, got {width}")
        if start < 0:
            raise ValueError(f"start must be >= 0, got {start}")
        self._prefix = prefix
        self._width = width
        self._next = start

    def __call__(self) -> str:
        value = f"{self._prefix}{self._next:0{self._width}d}"
        self._next += 1
        return value

    def advance_past(self, existing: Iterable[str]) -> None:
        """Move the counter beyond the highest matching id in ``existing``."""
        highest = self._next - 1
        for group_id in existing:
            suffix = group_id[len(self._prefix):]
            if group_id.startswith(self._prefix) and suffix.isdigit():
                highest = max(highest, int(suffix))
        self._next = highest + 1


def make_id_generator(scheme: str, prefix: str = "G") -> IdGenerator:
    """Build an id generator from a config scheme name."""
    if scheme == "uuid":
        return UuidIds()
    if scheme == "counter":
        return CounterIds(prefix=prefix)
    raise ValueError(f"Unknown id scheme: '{scheme}' (expected 'uuid' or 'counter')")
