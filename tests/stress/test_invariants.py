"""Stress tests: catalog invariants under long random relation streams."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from interchange.core.ids import CounterIds
from interchange.core.relation import Relation
from interchange.engine.catalog import Catalog
from interchange.engine.ingest import apply_relations
from interchange.storage.csv_store import load_catalog, save_catalog

pytestmark = [pytest.mark.stress]

RelationFactory = Callable[..., list[Relation]]


def _classes(catalog: Catalog) -> set[frozenset[str]]:
    return {group.members for group in catalog.groups()}


def _assert_acyclic(catalog: Catalog) -> None:
    """Kahn's algorithm must consume every node of the link graph."""
    indegree = {group_id: len(catalog.predecessors(group_id)) for group_id in catalog.group_ids()}
    ready = [group_id for group_id, degree in indegree.items() if degree == 0]
    seen = 0
    while ready:
        node = ready.pop()
        seen += 1
        for successor in catalog.successors(node):
            indegree[successor] -= 1
            if indegree[successor] == 0:
                ready.append(successor)
    assert seen == len(indegree)


@pytest.mark.parametrize("seed", range(8))
def test_invariants_hold_after_every_relation(seed: int, random_relations: RelationFactory) -> None:
    catalog = Catalog(CounterIds())

    for relation in random_relations(seed, 400):
        catalog.apply(relation)
        assert catalog.check() == []

    for link in catalog.links():
        assert link.source != link.target
        assert link.target in catalog.successors(link.source)
        assert link.source in catalog.predecessors(link.target)
    _assert_acyclic(catalog)


@pytest.mark.parametrize("seed", range(5))
def test_membership_partitions_parts(seed: int, random_relations: RelationFactory) -> None:
    catalog = Catalog(CounterIds())
    apply_relations(catalog, random_relations(seed, 500))

    members = [pn for group in catalog.groups() for pn in group.members]
    assert len(members) == len(set(members)) == catalog.stats().parts
    for group in catalog.groups():
        for pn in group.members:
            assert catalog.group_of(pn) == group.id


@pytest.mark.parametrize("seed", range(5))
def test_final_classes_ignore_order(seed: int, random_relations: RelationFactory) -> None:
    relations = random_relations(seed, 300)
    forward, backward = Catalog(CounterIds()), Catalog(CounterIds())

    apply_relations(forward, relations)
    apply_relations(backward, list(reversed(relations)))

    assert _classes(forward) == _classes(backward)


@pytest.mark.parametrize("seed", range(3))
def test_store_round_trip_after_heavy_merging(
    seed: int, random_relations: RelationFactory, tmp_path: Path
) -> None:
    catalog = Catalog(CounterIds())
    apply_relations(catalog, random_relations(seed, 600, weights=(1, 8, 3)))

    save_catalog(catalog, tmp_path)
    loaded = load_catalog(tmp_path, id_generator=CounterIds())

    assert loaded.check() == []
    assert sorted(loaded.parts()) == sorted(catalog.parts())
    assert sorted(loaded.mains()) == sorted(catalog.mains())
    assert set(loaded.links()) == set(catalog.links())


def test_long_chain_then_closing_link() -> None:
    """A single link closing a very long chain collapses it without recursion."""
    catalog = Catalog(CounterIds())
    chain = [f"C{i:05d}" for i in range(3000)]
    for source, target in zip(chain, chain[1:]):
        catalog.add_directional(source, target)

    result = catalog.add_directional(chain[-1], chain[0])

    assert len(result.collapsed) == len(chain) - 1
    assert len(catalog) == 1
    assert catalog.links() == []
    assert catalog.check() == []
