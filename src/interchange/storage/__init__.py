"""Storage adapters: flat-file stores and relation files."""

from interchange.storage.csv_store import load_catalog, save_catalog, store_exists
from interchange.storage.errors import (
    InterchangeStorageError,
    RelationParseError,
    StoreFormatError,
    StoreNotFoundError,
    StoreWriteError,
)
from interchange.storage.relations import read_relations

__all__ = [
    "InterchangeStorageError",
    "RelationParseError",
    "StoreFormatError",
    "StoreNotFoundError",
    "StoreWriteError",
    "load_catalog",
    "read_relations",
    "save_catalog",
    "store_exists",
]
