"""Core data models for the interchange catalog."""

from interchange.core.group import (
    CatalogStats,
    Group,
    GroupId,
    Link,
    LinkOutcome,
    LinkResult,
)
from interchange.core.ids import CounterIds, IdGenerator, UuidIds, make_id_generator
from interchange.core.relation import Relation, RelationKind

__all__ = [
    # Groups and links
    "Group",
    "GroupId",
    "Link",
    "LinkOutcome",
    "LinkResult",
    "CatalogStats",
    # Identifiers
    "IdGenerator",
    "UuidIds",
    "CounterIds",
    "make_id_generator",
    # Input records
    "Relation",
    "RelationKind",
]
