"""Apply a stream of relation records to a catalog."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from interchange.core.group import LinkOutcome
from interchange.core.relation import Relation, RelationKind
from interchange.engine.catalog import Catalog

logger = logging.getLogger(__name__)


@dataclass
class IngestReport:
    """Tally of one ingest run.

    Attributes:
        applied: Rows applied to the catalog
        skipped: Rows skipped for an unknown relationship code
        by_kind: Applied rows per relationship kind
        merges: Groups retired by merges (union or cycle collapse)
        cycles: Directed rows that closed a cycle
        skipped_lines: Line numbers of skipped rows
    """

    applied: int = 0
    skipped: int = 0
    by_kind: dict[RelationKind, int] = field(default_factory=dict)
    merges: int = 0
    cycles: int = 0
    skipped_lines: list[int] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.applied + self.skipped

    def to_dict(self) -> dict[str, Any]:
        return {
            "applied": self.applied,
            "skipped": self.skipped,
            "by_kind": {kind.name.lower(): count for kind, count in self.by_kind.items()},
            "merges": self.merges,
            "cycles": self.cycles,
            "skipped_lines": list(self.skipped_lines),
        }


def apply_relations(catalog: Catalog, relations: Iterable[Relation]) -> IngestReport:
    """Apply every relation in order and report what happened.

    Unknown relationship codes are skipped with a warning. Any exception
    raised while reading ``relations`` propagates and ends the run.
    """
    report = IngestReport()

    for relation in relations:
        kind = relation.kind
        if kind is None:
            catalog.apply(relation)
            report.skipped += 1
            report.skipped_lines.append(relation.line)
            continue

        retired_before = catalog.retired_count
        if kind == RelationKind.DIRECTED:
            result = catalog.add_directional(relation.main_part, relation.related_part)
            if result.outcome == LinkOutcome.COLLAPSED:
                report.cycles += 1
        else:
            catalog.apply(relation)

        report.merges += catalog.retired_count - retired_before
        report.applied += 1
        report.by_kind[kind] = report.by_kind.get(kind, 0) + 1

    logger.info(
        "Applied %d relations (%d skipped, %d merges, %d cycles)",
        report.applied,
        report.skipped,
        report.merges,
        report.cycles,
    )
    return report
