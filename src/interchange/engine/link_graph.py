"""Directed links between groups, indexed in both directions."""

from __future__ import annotations

from collections.abc import Iterator

from interchange.core.group import GroupId, Link


class LinkGraph:
    """Set-based directed graph with forward and reverse adjacency.

    Invariants held after every public call:

    - no self-loops
    - no duplicate edges (adjacency is stored as sets)
    - ``b in forward[a]`` exactly when ``a in reverse[b]``
    - no empty adjacency sets are left behind
    """

    __slots__ = ("_forward", "_reverse")

    def __init__(self) -> None:
        self._forward: dict[GroupId, set[GroupId]] = {}
        self._reverse: dict[GroupId, set[GroupId]] = {}

    def add(self, source: GroupId, target: GroupId) -> bool:
        """Insert ``source -> target``. Returns False for self-loops and duplicates."""
        if source == target:
            return False
        targets = self._forward.setdefault(source, set())
        if target in targets:
            return False
        targets.add(target)
        self._reverse.setdefault(target, set()).add(source)
        return True

    def remove(self, source: GroupId, target: GroupId) -> bool:
        """Delete ``source -> target``. Returns False if it was not present."""
        targets = self._forward.get(source)
        if not targets or target not in targets:
            return False
        _discard(self._forward, source, target)
        _discard(self._reverse, target, source)
        return True

    def redirect(self, old: GroupId, new: GroupId) -> None:
        """Rewrite every edge touching ``old`` to touch ``new`` instead.

        Edges between ``old`` and ``new`` would become self-loops and are
        dropped. Afterwards ``old`` appears in neither index.
        """
        if old == new:
            return
        for target in self._forward.pop(old, set()):
            _discard(self._reverse, target, old)
            self.add(new, target)
        for source in self._reverse.pop(old, set()):
            _discard(self._forward, source, old)
            self.add(source, new)

    def successors(self, node: GroupId) -> frozenset[GroupId]:
        return frozenset(self._forward.get(node, ()))

    def predecessors(self, node: GroupId) -> frozenset[GroupId]:
        return frozenset(self._reverse.get(node, ()))

    def has_link(self, source: GroupId, target: GroupId) -> bool:
        return target in self._forward.get(source, ())

    def reachable(self, node: GroupId) -> set[GroupId]:
        """Every group reachable from ``node`` along forward edges.

        ``node`` itself is only included when it lies on a cycle.
        """
        seen: set[GroupId] = set()
        stack = list(self._forward.get(node, ()))
        while stack:
            current = stack.pop()
            if current in seen:
                continue
            seen.add(current)
            stack.extend(self._forward.get(current, ()))
        return seen

    def nodes(self) -> set[GroupId]:
        """Every group with at least one incident edge."""
        return set(self._forward) | set(self._reverse)

    def links(self) -> Iterator[Link]:
        for source, targets in self._forward.items():
            for target in targets:
                yield Link(source=source, target=target)

    def __len__(self) -> int:
        return sum(len(targets) for targets in self._forward.values())

    def __contains__(self, node: object) -> bool:
        return node in self._forward or node in self._reverse

    def check(self) -> list[str]:
        """Return a description of every broken invariant (empty if none)."""
        problems: list[str] = []
        for source, targets in self._forward.items():
            if not targets:
                problems.append(f"empty forward entry for {source}")
            if source in targets:
                problems.append(f"self-loop on {source}")
            for target in targets:
                if source not in self._reverse.get(target, ()):
                    problems.append(f"{source} -> {target} missing from reverse index")
        for target, sources in self._reverse.items():
            if not sources:
                problems.append(f"empty reverse entry for {target}")
            for source in sources:
                if target not in self._forward.get(source, ()):
                    problems.append(f"reverse entry {target} <- {source} has no forward edge")
        return problems


def _discard(index: dict[GroupId, set[GroupId]], key: GroupId, value: GroupId) -> None:
    """Remove ``value`` from ``index[key]``, dropping the key once empty."""
    values = index.get(key)
    if values is None:
        return
    values.discard(value)
    if not values:
        del index[key]
