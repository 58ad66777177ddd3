"""The interchange catalog engine.

Groups interchangeable part numbers and tracks one-way relations between
groups. Two kinds of evidence merge groups:

1. A bidirectional relation between parts in different groups.
2. A directed relation that closes a cycle in the link graph. Every group
   on the cycle is collapsed into the source part's group.

After any merge, cycles that now run through the surviving group are
collapsed as well, so the link graph stays acyclic and the final groups
do not depend on the order relations arrive in.

The anchor (surviving id) is always chosen by the operation, never by
group size.
"""

from __future__ import annotations

import logging

from interchange.core.group import (
    CatalogStats,
    Group,
    GroupId,
    Link,
    LinkOutcome,
    LinkResult,
)
from interchange.core.ids import IdGenerator
from interchange.core.relation import Relation, RelationKind
from interchange.engine.link_graph import LinkGraph
from interchange.engine.path_search import find_cycle, find_path
from interchange.engine.registry import GroupRegistry

logger = logging.getLogger(__name__)


class Catalog:
    """In-memory catalog of part groups and the links between them.

    The catalog exclusively owns its registry and link graph. Callers only
    see snapshots, so every invariant holds between any two calls.
    """

    def __init__(self, id_generator: IdGenerator | None = None) -> None:
        self._registry = GroupRegistry(id_generator)
        self._graph = LinkGraph()

    # ========== Parts and groups ==========

    def add_part(self, pn: str) -> GroupId:
        """Register ``pn`` (idempotent) and return its group id."""
        return self._registry.add_part(pn)

    def set_main(self, group_id: GroupId, pn: str) -> GroupId:
        """Designate the main part of a group.

        Falls back to registering ``pn`` as a new part when ``group_id``
        is not live; the id actually used is returned.
        """
        return self._registry.set_main(group_id, pn)

    def merge_groups(self, keep: GroupId, discard: GroupId) -> GroupId:
        """Union two live groups into ``keep``, carrying links across.

        Links between the two are dropped. Any cycle the merge closes
        through ``keep`` is collapsed into ``keep`` too.

        Raises:
            ValueError: If the ids are equal or either one is not live.
        """
        self._absorb(keep, discard)
        self._collapse_cycles(keep)
        return keep

    # ========== Relations ==========

    def add_bidirectional(self, pn1: str, pn2: str) -> GroupId:
        """Declare two part numbers interchangeable.

        The anchor is the group of ``pn1`` if registered, else the group of
        ``pn2`` if registered, else a new group for ``pn1``. The other part
        is folded into the anchor. Returns the anchor id.
        """
        id1 = self._registry.group_of(pn1)
        if id1 is not None:
            self._fold(id1, pn2)
            return id1

        id2 = self._registry.group_of(pn2)
        if id2 is not None:
            self._fold(id2, pn1)
            return id2

        anchor = self._registry.add_part(pn1)
        self._fold(anchor, pn2)
        return anchor

    def add_directional(self, pn_from: str, pn_to: str) -> LinkResult:
        """Declare a one-way relation from ``pn_from``'s group to ``pn_to``'s.

        If the link graph already leads from ``pn_to``'s group back to
        ``pn_from``'s, the new relation closes a cycle: every group on the
        path found is merged into ``pn_from``'s group and no edge is
        stored. Cycles still running through that group afterwards (via
        side branches of the path) are collapsed as well. Otherwise the
        edge is inserted unless already present.
        """
        id_from = self._registry.add_part(pn_from)
        id_to = self._registry.add_part(pn_to)

        if id_from == id_to:
            return LinkResult(outcome=LinkOutcome.SAME_GROUP, group_id=id_from)

        path = find_path(self._graph, id_to, id_from)
        if path is None:
            if self._graph.add(id_from, id_to):
                return LinkResult(outcome=LinkOutcome.LINKED, group_id=id_from)
            return LinkResult(outcome=LinkOutcome.EXISTS, group_id=id_from)

        on_path = [group_id for group_id in path if group_id != id_from]
        for group_id in on_path:
            self._absorb(id_from, group_id)
        collapsed = (*on_path, *self._collapse_cycles(id_from))
        logger.debug(
            "Link %s -> %s closed a cycle; collapsed %d groups into %s",
            pn_from,
            pn_to,
            len(collapsed),
            id_from,
        )
        return LinkResult(
            outcome=LinkOutcome.COLLAPSED, group_id=id_from, collapsed=collapsed
        )

    def apply(self, relation: Relation) -> bool:
        """Apply one relation record.

        Returns False, leaving the catalog untouched, when the record's
        code is unknown.
        """
        kind = relation.kind
        if kind is None:
            logger.warning(
                "Invalid relationship value %s on line %d; skipping row",
                relation.code,
                relation.line,
            )
            return False

        if kind == RelationKind.REGISTER:
            self.add_part(relation.main_part)
        elif kind == RelationKind.DIRECTED:
            self.add_directional(relation.main_part, relation.related_part)
        else:
            self.add_bidirectional(relation.main_part, relation.related_part)
        return True

    # ========== Restore (used by storage) ==========

    def restore_part(self, pn: str, group_id: GroupId) -> None:
        self._registry.restore(pn, group_id)

    def restore_main(self, group_id: GroupId, pn: str) -> bool:
        return self._registry.restore_main(group_id, pn)

    def restore_retired(self, group_id: GroupId) -> bool:
        return self._registry.restore_retired(group_id)

    def restore_link(self, source: GroupId, target: GroupId) -> bool:
        """Re-add a stored link. Returns False if it cannot be kept."""
        if not (self._registry.is_live(source) and self._registry.is_live(target)):
            return False
        return self._graph.add(source, target)

    # ========== Queries ==========

    def group_of(self, pn: str) -> GroupId | None:
        return self._registry.group_of(pn)

    def get_group(self, group_id: GroupId) -> Group | None:
        if not self._registry.is_live(group_id):
            return None
        return Group(
            id=group_id,
            members=self._registry.members(group_id),
            main=self._registry.main_of(group_id),
        )

    def groups(self) -> list[Group]:
        return [
            Group(
                id=group_id,
                members=self._registry.members(group_id),
                main=self._registry.main_of(group_id),
            )
            for group_id in self._registry.group_ids()
        ]

    def interchangeable(self, pn: str) -> frozenset[str]:
        """All part numbers in ``pn``'s group, or empty if unknown."""
        group_id = self._registry.group_of(pn)
        if group_id is None:
            return frozenset()
        return self._registry.members(group_id)

    def reachable_parts(self, pn: str) -> frozenset[str]:
        """Part numbers of every group downstream of ``pn``'s group."""
        group_id = self._registry.group_of(pn)
        if group_id is None:
            return frozenset()
        parts: set[str] = set()
        for downstream in self._graph.reachable(group_id):
            parts.update(self._registry.members(downstream))
        return frozenset(parts)

    def parts(self) -> list[tuple[str, GroupId]]:
        return list(self._registry.parts())

    def mains(self) -> list[tuple[GroupId, str]]:
        return list(self._registry.mains())

    def links(self) -> list[Link]:
        return list(self._graph.links())

    def successors(self, group_id: GroupId) -> frozenset[GroupId]:
        return self._graph.successors(group_id)

    def predecessors(self, group_id: GroupId) -> frozenset[GroupId]:
        return self._graph.predecessors(group_id)

    def group_ids(self) -> list[GroupId]:
        return self._registry.group_ids()

    def stats(self) -> CatalogStats:
        return CatalogStats(
            parts=self._registry.part_count,
            groups=len(self._registry),
            mains=self._registry.main_count,
            links=len(self._graph),
        )

    def retired_ids(self) -> list[GroupId]:
        """Ids retired by merges, including those restored from a store."""
        return self._registry.retired_ids()

    @property
    def retired_count(self) -> int:
        """Number of group ids retired by merges so far."""
        return self._registry.retired_count

    def check(self) -> list[str]:
        """Validate every cross-index invariant. Empty list means consistent."""
        problems = self._registry.check() + self._graph.check()
        for node in self._graph.nodes():
            if not self._registry.is_live(node):
                problems.append(f"link graph references dead group {node}")
        return problems

    def __contains__(self, pn: object) -> bool:
        return pn in self._registry

    def __len__(self) -> int:
        return len(self._registry)

    # ========== Internals ==========

    def _fold(self, anchor: GroupId, pn: str) -> None:
        """Bring ``pn`` into ``anchor``'s group."""
        current = self._registry.group_of(pn)
        if current is None:
            self._registry.add_member(anchor, pn)
        elif current != anchor:
            self.merge_groups(anchor, current)

    def _absorb(self, keep: GroupId, discard: GroupId) -> None:
        """Merge ``discard`` into ``keep`` and move its links over."""
        self._registry.merge_groups(keep, discard)
        self._graph.redirect(discard, keep)
        logger.debug("Merged group %s into %s", discard, keep)

    def _collapse_cycles(self, anchor: GroupId) -> list[GroupId]:
        """Merge every group on a cycle through ``anchor`` into it."""
        retired: list[GroupId] = []
        cycle = find_cycle(self._graph, anchor)
        while cycle is not None:
            for group_id in cycle[1:]:
                self._absorb(anchor, group_id)
                retired.append(group_id)
            cycle = find_cycle(self._graph, anchor)
        return retired
