"""Sync graph validation — cycle detection and topological ordering."""

from collections import defaultdict, deque
from typing import Iterable, Iterator, Mapping

from settings_engine.errors import CyclicSyncError

WHITE, GRAY, BLACK = 0, 1, 2


def _node_order(
    adjacency: Mapping[str, Iterable[str]],
    nodes: Iterable[str] | None,
) -> list[str]:
    order = list(nodes) if nodes is not None else list(adjacency)
    seen = set(order)
    # Targets that only appear on the right-hand side still need a slot
    for targets in adjacency.values():
        for target in targets:
            if target not in seen:
                seen.add(target)
                order.append(target)
    return order


def detect_cycle(
    adjacency: Mapping[str, Iterable[str]],
    nodes: Iterable[str] | None = None,
) -> list[str] | None:
    """Find a directed cycle in a sync adjacency map.

    DFS with white/gray/black colouring. Roots are visited in ``nodes``
    order (adjacency order when omitted) so the reported path is stable.

    Args:
        adjacency: source -> targets.
        nodes: Node visiting order.

    Returns:
        The cycle as a closed path (e.g. ["a", "b", "a"]), or None.
    """
    color: dict[str, int] = defaultdict(lambda: WHITE)

    for root in _node_order(adjacency, nodes):
        if color[root] != WHITE:
            continue
        # Explicit stack so long sync chains do not hit the recursion limit
        path: list[str] = [root]
        stack: list[tuple[str, Iterator[str]]] = [(root, iter(adjacency.get(root, ())))]
        color[root] = GRAY
        while stack:
            node, neighbors = stack[-1]
            for neighbor in neighbors:
                if color[neighbor] == GRAY:
                    cycle_start = path.index(neighbor)
                    return path[cycle_start:] + [neighbor]
                if color[neighbor] == WHITE:
                    color[neighbor] = GRAY
                    path.append(neighbor)
                    stack.append((neighbor, iter(adjacency.get(neighbor, ()))))
                    break
            else:
                stack.pop()
                path.pop()
                color[node] = BLACK
    return None


def check_acyclic(
    adjacency: Mapping[str, Iterable[str]],
    nodes: Iterable[str] | None = None,
) -> None:
    """Raise CyclicSyncError if the adjacency map contains a cycle."""
    cycle = detect_cycle(adjacency, nodes)
    if cycle:
        raise CyclicSyncError(cycle)


def topological_order(
    adjacency: Mapping[str, Iterable[str]],
    nodes: Iterable[str] | None = None,
) -> list[str]:
    """Order nodes so every source precedes its targets (Kahn's algorithm).

    Sources are seeded in ``nodes`` order, so the result is deterministic.
    Nodes caught in a cycle are left out; validate with check_acyclic first.
    """
    order = _node_order(adjacency, nodes)
    in_degree: dict[str, int] = {node: 0 for node in order}
    for targets in adjacency.values():
        for target in targets:
            in_degree[target] += 1

    queue = deque(node for node in order if in_degree[node] == 0)
    result = []
    while queue:
        node = queue.popleft()
        result.append(node)
        for target in adjacency.get(node, ()):
            in_degree[target] -= 1
            if in_degree[target] == 0:
                queue.append(target)
    return result
