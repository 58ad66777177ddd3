"""Interchange - catalog of interchangeable part numbers.

Part numbers that can substitute for each other are clustered into groups;
one-way supersedes/fits relations between groups form a directed graph.
Directed chains that loop back on themselves collapse into a single group.
"""

from interchange.config import CatalogConfig
from interchange.core.group import Group, Link, LinkOutcome, LinkResult
from interchange.core.ids import CounterIds, UuidIds
from interchange.core.relation import Relation, RelationKind
from interchange.engine.catalog import Catalog
from interchange.engine.ingest import IngestReport, apply_relations

__version__ = "0.1.0"

__all__ = [
    "Catalog",
    "CatalogConfig",
    "CounterIds",
    "Group",
    "IngestReport",
    "Link",
    "LinkOutcome",
    "LinkResult",
    "Relation",
    "RelationKind",
    "UuidIds",
    "__version__",
    "apply_relations",
]
