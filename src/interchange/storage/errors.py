"""Errors raised at the storage boundary."""

from __future__ import annotations

from pathlib import Path


class InterchangeStorageError(Exception):
    """Base class for store and relation file failures."""


class StoreNotFoundError(InterchangeStorageError):
    """A persisted store (or one of its tables) does not exist."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Store not found: {path}")
        self.path = path


class StoreFormatError(InterchangeStorageError):
    """A store table has the wrong columns."""


class StoreWriteError(InterchangeStorageError):
    """The output directory or a table could not be written."""


class RelationParseError(InterchangeStorageError):
    """A relation file row could not be parsed."""

    def __init__(self, message: str, line: int) -> None:
        super().__init__(f"line {line}: {message}")
        self.line = line
