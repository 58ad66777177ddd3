"""Path search over the link graph, used to detect cycles."""

from __future__ import annotations

from collections.abc import Iterator

from interchange.core.group import GroupId
from interchange.engine.link_graph import LinkGraph


def find_path(graph: LinkGraph, start: GroupId, goal: GroupId) -> list[GroupId] | None:
    """Find a simple forward path from ``start`` to ``goal``.

    Iterative depth-first search. Each stack frame holds a node and an
    iterator over its remaining successors; a frame is popped once its
    successors are exhausted, so nodes on branches that never reach
    ``goal`` drop off the stack again. When an edge into ``goal`` is
    found the stack is exactly the path, and ``goal`` is appended.

    Successors are visited in sorted order, which makes the returned path
    deterministic. Every node is expanded at most once.

    Returns:
        ``[start, ..., goal]`` in edge order, ``[start]`` when
        ``start == goal``, or None when ``goal`` is unreachable.
    """
    if start == goal:
        return [start]
    return _search(graph, start, goal)


def find_cycle(graph: LinkGraph, node: GroupId) -> list[GroupId] | None:
    """Find a cycle through ``node``.

    Returns:
        ``[node, ..., last]`` where ``last -> node`` closes the cycle, or
        None when ``node`` is not on a cycle.
    """
    path = _search(graph, node, node)
    if path is None:
        return None
    return path[:-1]


def _search(graph: LinkGraph, start: GroupId, goal: GroupId) -> list[GroupId] | None:
    visited: set[GroupId] = {start}
    path: list[GroupId] = [start]
    frames: list[Iterator[GroupId]] = [_sorted_successors(graph, start)]

    while frames:
        advanced = False
        for nxt in frames[-1]:
            if nxt == goal:
                return [*path, goal]
            if nxt in visited:
                continue
            visited.add(nxt)
            path.append(nxt)
            frames.append(_sorted_successors(graph, nxt))
            advanced = True
            break
        if not advanced:
            frames.pop()
            path.pop()

    return None


def _sorted_successors(graph: LinkGraph, node: GroupId) -> Iterator[GroupId]:
    return iter(sorted(graph.successors(node)))
