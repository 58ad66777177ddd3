"""Grouping and linking engine."""

from interchange.engine.catalog import Catalog
from interchange.engine.ingest import IngestReport, apply_relations
from interchange.engine.link_graph import LinkGraph
from interchange.engine.path_search import find_cycle, find_path
from interchange.engine.registry import GroupRegistry

__all__ = [
    "Catalog",
    "GroupRegistry",
    "IngestReport",
    "LinkGraph",
    "apply_relations",
    "find_cycle",
    "find_path",
]
