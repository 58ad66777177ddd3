"""Shared fixtures: catalogs with deterministic group ids."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from interchange.core.ids import CounterIds
from interchange.engine.catalog import Catalog


@pytest.fixture
def catalog() -> Catalog:
    """Empty catalog minting G00001, G00002, ..."""
    return Catalog(CounterIds())


@pytest.fixture
def write_relations() -> Callable[[Path, list[tuple[str, str, object]]], Path]:
    """Factory writing a relation file with the default MAIN,IC,RELATIONSHIP header."""

    def _write(path: Path, rows: list[tuple[str, str, object]]) -> Path:
        lines = ["MAIN,IC,RELATIONSHIP"]
        lines.extend(f"{main},{related},{code}" for main, related, code in rows)
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write


@pytest.fixture
def relations_file(
    tmp_path: Path, write_relations: Callable[[Path, list[tuple[str, str, object]]], Path]
) -> Path:
    """Relation file exercising every code, including a cycle and a bad code."""
    return write_relations(
        tmp_path / "relations.csv",
        [
            ("A", "", 0),
            ("A", "B", 2),
            ("C", "D", 1),
            ("D", "E", 1),
            ("E", "C", 1),
            ("B", "C", 1),
            ("X", "Y", 9),
        ],
    )
