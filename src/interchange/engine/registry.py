"""Part registry and group store.

Keeps three indices in lockstep:

- part number -> group id
- group id -> member part numbers
- group id -> main part number

A group id is live exactly while it has an entry in the member index.
Merging retires the discarded id for good; it is never minted again.
Retired ids are restored from a store along with the live ones.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from interchange.core.group import GroupId
from interchange.core.ids import IdGenerator, UuidIds

logger = logging.getLogger(__name__)

# Re-mint attempts before giving up on a generator that keeps colliding
_MAX_MINT_ATTEMPTS = 1000


class GroupRegistry:
    """Owns the part -> group, group -> members and group -> main maps."""

    def __init__(self, id_generator: IdGenerator | None = None) -> None:
        self._new_id = id_generator or UuidIds()
        self._lookup: dict[str, GroupId] = {}
        self._members: dict[GroupId, set[str]] = {}
        self._mains: dict[GroupId, str] = {}
        self._retired: set[GroupId] = set()

    # ========== Mutations ==========

    def add_part(self, pn: str) -> GroupId:
        """Return the group of ``pn``, creating a singleton group if unseen."""
        existing = self._lookup.get(pn)
        if existing is not None:
            return existing

        group_id = self._mint()
        self._members[group_id] = {pn}
        self._lookup[pn] = group_id
        self._mains[group_id] = pn
        return group_id

    def set_main(self, group_id: GroupId, pn: str) -> GroupId:
        """Designate ``pn`` as main of a live group.

        The part does not have to be a member. When ``group_id`` is not
        live, ``pn`` is added as a part instead and its own group id is
        returned.
        """
        if group_id not in self._members:
            logger.debug("set_main on non-live group %s; adding %s as a part", group_id, pn)
            return self.add_part(pn)
        self._mains[group_id] = pn
        return group_id

    def add_member(self, group_id: GroupId, pn: str) -> None:
        """Put an unregistered part straight into a live group."""
        if group_id not in self._members:
            raise ValueError(f"Group {group_id} is not live")
        if pn in self._lookup:
            raise ValueError(f"Part {pn} is already registered to {self._lookup[pn]}")
        self._members[group_id].add(pn)
        self._lookup[pn] = group_id

    def merge_groups(self, keep: GroupId, discard: GroupId) -> None:
        """Move every member of ``discard`` into ``keep`` and retire ``discard``.

        The main of ``keep`` is left as it is; the main of ``discard`` is
        dropped.
        """
        if keep == discard:
            raise ValueError(f"Cannot merge group {keep} into itself")
        if keep not in self._members:
            raise ValueError(f"Group {keep} is not live")
        if discard not in self._members:
            raise ValueError(f"Group {discard} is not live")

        moved = self._members.pop(discard)
        for pn in moved:
            self._lookup[pn] = keep
        self._members[keep].update(moved)
        self._mains.pop(discard, None)
        self._retired.add(discard)

    def restore(self, pn: str, group_id: GroupId) -> None:
        """Register ``pn`` under a known id, as read back from a store.

        The first id seen for a part wins; later rows for it are ignored.
        """
        if pn in self._lookup:
            if self._lookup[pn] != group_id:
                logger.warning(
                    "Part %s listed under %s and %s; keeping %s",
                    pn,
                    self._lookup[pn],
                    group_id,
                    self._lookup[pn],
                )
            return
        self._members.setdefault(group_id, set()).add(pn)
        self._lookup[pn] = group_id

    def restore_main(self, group_id: GroupId, pn: str) -> bool:
        """Set a main read back from a store. Returns False for dead ids."""
        if group_id not in self._members:
            return False
        self._mains.setdefault(group_id, pn)
        return True

    def restore_retired(self, group_id: GroupId) -> bool:
        """Mark an id read back from a store as retired. False if it is live."""
        if group_id in self._members:
            return False
        self._retired.add(group_id)
        return True

    # ========== Queries ==========

    def group_of(self, pn: str) -> GroupId | None:
        return self._lookup.get(pn)

    def is_live(self, group_id: GroupId) -> bool:
        return group_id in self._members

    def members(self, group_id: GroupId) -> frozenset[str]:
        return frozenset(self._members.get(group_id, ()))

    def main_of(self, group_id: GroupId) -> str | None:
        return self._mains.get(group_id)

    def group_ids(self) -> list[GroupId]:
        return list(self._members)

    def parts(self) -> Iterator[tuple[str, GroupId]]:
        """Iterate (part number, group id) pairs."""
        yield from self._lookup.items()

    def mains(self) -> Iterator[tuple[GroupId, str]]:
        """Iterate (group id, main part number) pairs."""
        yield from self._mains.items()

    @property
    def part_count(self) -> int:
        return len(self._lookup)

    @property
    def main_count(self) -> int:
        return len(self._mains)

    def retired_ids(self) -> list[GroupId]:
        return list(self._retired)

    @property
    def retired_count(self) -> int:
        return len(self._retired)

    def __len__(self) -> int:
        return len(self._members)

    def __contains__(self, pn: object) -> bool:
        return pn in self._lookup

    def check(self) -> list[str]:
        """Return a description of every broken invariant (empty if none)."""
        problems: list[str] = []
        for pn, group_id in self._lookup.items():
            if group_id not in self._members:
                problems.append(f"part {pn} points at dead group {group_id}")
            elif pn not in self._members[group_id]:
                problems.append(f"part {pn} missing from members of {group_id}")
        for group_id, members in self._members.items():
            if not members:
                problems.append(f"group {group_id} has no members")
            for pn in members:
                if self._lookup.get(pn) != group_id:
                    problems.append(f"member {pn} of {group_id} resolves elsewhere")
        for group_id in self._mains:
            if group_id not in self._members:
                problems.append(f"main recorded for dead group {group_id}")
        for group_id in self._retired & self._members.keys():
            problems.append(f"retired group {group_id} is live again")
        return problems

    # ========== Internals ==========

    def _mint(self) -> GroupId:
        for _ in range(_MAX_MINT_ATTEMPTS):
            group_id = self._new_id()
            if group_id not in self._members and group_id not in self._retired:
                return group_id
        raise RuntimeError(
            f"Id generator produced {_MAX_MINT_ATTEMPTS} ids already in use"
        )
