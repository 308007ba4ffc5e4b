"""Circular dependency detection.

Depth-first search from every module not yet visited. The visited set is
global to the scan: a module exhausted from an earlier root is not walked
again from a later one, so a cycle reachable only through such a module
is not reported. Rotations of one cycle found from different roots are
reported as they are found, without canonicalizing.

Traversal uses an explicit stack so long dependency chains cannot hit
the interpreter's recursion limit.
"""

from __future__ import annotations

from typing import Iterator

from infragraph.resolution.graph import DependencyGraph


def detect_circular_dependencies(graph: DependencyGraph) -> list[list[str]]:
    """Find directed cycles in a module graph.

    Args:
        graph: Assembled dependency graph.

    Returns:
        Closed walks ``[m1, m2, ..., m1]`` in discovery order.
    """
    adjacency = graph.successors()
    visited: set[str] = set()
    cycles: list[list[str]] = []

    for node in graph.nodes:
        if node.id not in visited:
            cycles.extend(_walk(node.id, adjacency, visited))

    return cycles


def _walk(
    root: str,
    adjacency: dict[str, list[str]],
    visited: set[str],
) -> Iterator[list[str]]:
    path: list[str] = [root]
    on_path: set[str] = {root}
    stack: list[Iterator[str]] = [iter(adjacency.get(root, []))]
    visited.add(root)

    while stack:
        target = next(stack[-1], None)
        if target is None:
            # Outgoing edges exhausted: backtrack.
            stack.pop()
            on_path.discard(path.pop())
            continue

        if target in on_path:
            start = path.index(target)
            yield path[start:] + [target]
            continue

        if target in visited:
            continue

        visited.add(target)
        on_path.add(target)
        path.append(target)
        stack.append(iter(adjacency.get(target, [])))
