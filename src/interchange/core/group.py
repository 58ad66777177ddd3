"""Read-only views of groups and links."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

GroupId = str


@dataclass(frozen=True)
class Group:
    """
    A snapshot of one equivalence class of part numbers.

    Groups handed out by the catalog are copies; mutating the catalog
    afterwards does not change them.

    Attributes:
        id: The group's identifier
        members: Every part number in the group (never empty)
        main: Designated representative part number, if any
    """

    id: GroupId
    members: frozenset[str]
    main: str | None = None

    @property
    def size(self) -> int:
        return len(self.members)


@dataclass(frozen=True)
class Link:
    """A directed supersedes/fits relation between two groups."""

    source: GroupId
    target: GroupId


class LinkOutcome(StrEnum):
    """What a directed relation did to the catalog."""

    LINKED = "linked"  # New edge stored
    EXISTS = "exists"  # Edge already present
    SAME_GROUP = "same_group"  # Both parts already interchangeable
    COLLAPSED = "collapsed"  # Relation closed a cycle; groups merged


@dataclass(frozen=True)
class LinkResult:
    """Result of a directed relation.

    Attributes:
        outcome: What happened
        group_id: Group of the source part after the call
        collapsed: Ids retired by a cycle collapse, in path order
    """

    outcome: LinkOutcome
    group_id: GroupId
    collapsed: tuple[GroupId, ...] = ()


@dataclass(frozen=True)
class CatalogStats:
    """Counts describing a catalog."""

    parts: int
    groups: int
    mains: int
    links: int

    def to_dict(self) -> dict[str, int]:
        return {
            "parts": self.parts,
            "groups": self.groups,
            "mains": self.mains,
            "links": self.links,
        }
