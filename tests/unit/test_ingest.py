"""Tests for applying relation streams."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from interchange.core.relation import Relation, RelationKind
from interchange.engine.catalog import Catalog
from interchange.engine.ingest import apply_relations
from interchange.storage.relations import read_relations


class TestApplyRelations:
    def test_report_counts(self, catalog: Catalog) -> None:
        relations = [
            Relation("A", "", 0, line=2),
            Relation("A", "B", 2, line=3),
            Relation("C", "D", 1, line=4),
            Relation("D", "E", 1, line=5),
            Relation("E", "C", 1, line=6),
            Relation("B", "C", 1, line=7),
            Relation("X", "Y", 9, line=8),
        ]

        report = apply_relations(catalog, relations)

        assert report.applied == 6
        assert report.skipped == 1
        assert report.total == 7
        assert report.skipped_lines == [8]
        assert report.by_kind == {
            RelationKind.REGISTER: 1,
            RelationKind.BIDIRECTIONAL: 1,
            RelationKind.DIRECTED: 4,
        }
        assert report.cycles == 1
        assert report.merges == 2

        assert catalog.interchangeable("C") == frozenset({"C", "D", "E"})
        assert catalog.interchangeable("A") == frozenset({"A", "B"})
        assert catalog.stats().to_dict() == {"parts": 5, "groups": 2, "mains": 2, "links": 1}
        assert "X" not in catalog

    def test_bidirectional_merge_counted(self, catalog: Catalog) -> None:
        catalog.add_part("A")
        catalog.add_part("B")

        report = apply_relations(catalog, [Relation("A", "B", 2)])

        assert report.merges == 1
        assert report.cycles == 0

    def test_order_insensitive_equivalence_classes(self) -> None:
        relations = [
            Relation("A", "B", 2),
            Relation("B", "C", 1),
            Relation("C", "A", 1),
            Relation("D", "E", 2),
            Relation("E", "F", 1),
        ]
        forward, backward = Catalog(), Catalog()
        apply_relations(forward, relations)
        apply_relations(backward, list(reversed(relations)))

        def classes(catalog: Catalog) -> set[frozenset[str]]:
            return {group.members for group in catalog.groups()}

        assert classes(forward) == classes(backward)

    def test_rerun_converges(self, catalog: Catalog) -> None:
        relations = [Relation("A", "B", 1), Relation("B", "C", 1), Relation("C", "A", 1)]
        apply_relations(catalog, relations)
        before = {group.members for group in catalog.groups()}

        report = apply_relations(catalog, relations)

        assert {group.members for group in catalog.groups()} == before
        assert report.merges == 0
        assert catalog.links() == []

    def test_reader_errors_propagate(self, catalog: Catalog) -> None:
        def broken():  # type: ignore[no-untyped-def]
            yield Relation("A", "B", 2)
            raise ValueError("bad row")

        with pytest.raises(ValueError, match="bad row"):
            apply_relations(catalog, broken())
        # Rows before the failure stay applied
        assert catalog.group_of("A") == catalog.group_of("B")

    def test_to_dict(self, catalog: Catalog) -> None:
        report = apply_relations(catalog, [Relation("A", "", 0), Relation("A", "B", 5, line=3)])
        assert report.to_dict() == {
            "applied": 1,
            "skipped": 1,
            "by_kind": {"register": 1},
            "merges": 0,
            "cycles": 0,
            "skipped_lines": [3],
        }

    def test_unknown_code_with_empty_part_is_skipped(
        self,
        catalog: Catalog,
        tmp_path: Path,
        write_relations: Callable[[Path, list[tuple[str, str, object]]], Path],
    ) -> None:
        path = write_relations(tmp_path / "rel.csv", [("", "B", 9), ("A", "B", 2)])

        report = apply_relations(catalog, read_relations(path))

        assert report.applied == 1
        assert report.skipped == 1
        assert report.skipped_lines == [2]
        assert catalog.interchangeable("A") == frozenset({"A", "B"})
        assert "" not in catalog
