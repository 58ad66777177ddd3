"""Configuration for catalog storage and relation files."""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

ENV_PREFIX = "INTERCHANGE_"


@dataclass(frozen=True)
class CatalogConfig:
    """File layout and identifier settings.

    Attributes:
        groups_file: Table of (part_number, id) rows in a store directory.
        mains_file: Table of (part_number, id) main designations.
        links_file: Table of (id_from, id_to) directed links.
        retired_file: Table of ids retired by merges; optional on load.
        delimiter: Field separator for every table and relation file.
        main_column: Relation file column holding the main part number.
        related_column: Relation file column holding the related part number.
        code_column: Relation file column holding the relationship code.
        id_scheme: How new group ids are minted ("uuid" | "counter").
        id_prefix: Prefix for counter ids.
    """

    groups_file: str = "fffc_groups.csv"
    mains_file: str = "fffc_mains.csv"
    links_file: str = "fffc_links.csv"
    retired_file: str = "fffc_retired.csv"
    delimiter: str = ","
    main_column: str = "MAIN"
    related_column: str = "IC"
    code_column: str = "RELATIONSHIP"
    id_scheme: str = "uuid"
    id_prefix: str = "G"

    _VALID_SCHEMES: tuple[str, ...] = ("uuid", "counter")

    def __post_init__(self) -> None:
        if len(self.delimiter) != 1:
            raise ValueError(f"delimiter must be a single character, got '{self.delimiter}'")
        if self.id_scheme not in self._VALID_SCHEMES:
            raise ValueError(
                f"id_scheme must be one of {self._VALID_SCHEMES}, got '{self.id_scheme}'"
            )
        names = (self.groups_file, self.mains_file, self.links_file, self.retired_file)
        if any(not name for name in names):
            raise ValueError("table file names must not be empty")
        if len(set(names)) != len(names):
            raise ValueError(f"table file names must be distinct, got {names}")
        columns = (self.main_column, self.related_column, self.code_column)
        if len(set(columns)) != len(columns):
            raise ValueError(f"relation column names must be distinct, got {columns}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "groups_file": self.groups_file,
            "mains_file": self.mains_file,
            "links_file": self.links_file,
            "retired_file": self.retired_file,
            "delimiter": self.delimiter,
            "main_column": self.main_column,
            "related_column": self.related_column,
            "code_column": self.code_column,
            "id_scheme": self.id_scheme,
            "id_prefix": self.id_prefix,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CatalogConfig:
        known = {f.name for f in fields(cls) if not f.name.startswith("_")}
        unknown = set(data) - known
        if unknown:
            logger.warning("Ignoring unknown config keys: %s", ", ".join(sorted(unknown)))
        try:
            return cls(**{key: str(value) for key, value in data.items() if key in known})
        except (ValueError, TypeError) as exc:
            logger.warning("Invalid catalog config (%s); using defaults", exc)
            return cls()  # Fall back to safe defaults

    @classmethod
    def load(cls, path: Path | None = None) -> CatalogConfig:
        """Load from a TOML file's ``[catalog]`` table, then apply env overrides.

        A missing file is the same as an empty one. Environment variables
        named ``INTERCHANGE_<FIELD>`` (e.g. ``INTERCHANGE_ID_SCHEME``) take
        precedence over the file.
        """
        data: dict[str, Any] = {}
        if path is not None and path.exists():
            with path.open("rb") as f:
                document = tomllib.load(f)
            data.update(document.get("catalog", {}))

        for key in cls().to_dict():
            value = os.environ.get(f"{ENV_PREFIX}{key.upper()}")
            if value is not None:
                data[key] = value

        return cls.from_dict(data)
