"""Relation records read from input files."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class RelationKind(IntEnum):
    """Relationship codes accepted in relation files."""

    REGISTER = 0  # Register the main part alone
    DIRECTED = 1  # main -> related, one way
    BIDIRECTIONAL = 2  # main and related are interchangeable


@dataclass(frozen=True)
class Relation:
    """
    One row of a relation file.

    The code is kept as a raw integer so rows with unknown codes can be
    reported and skipped instead of rejected at parse time.

    Attributes:
        main_part: Part number in the main column
        related_part: Part number in the related column (may be empty)
        code: Relationship code
        line: 1-based line number in the source file, 0 if not from a file
    """

    main_part: str
    related_part: str
    code: int
    line: int = 0

    @property
    def kind(self) -> RelationKind | None:
        """The known relationship kind, or None for unknown codes."""
        try:
            return RelationKind(self.code)
        except ValueError:
            return None
