"""Dependency ordering of node specifications (Kahn's algorithm)."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field

from ..models import ExcludedNode
from .spec import NodeSpec


@dataclass
class SortResult:
    """
    Nodes in execution order, plus the ones that could not be scheduled.

    ``excluded`` is diagnostic only: the harness still runs ``ordered``
    and simply never executes excluded nodes.
    """
    ordered: list[NodeSpec] = field(default_factory=list)
    excluded: list[ExcludedNode] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.excluded


def _unique(ids: tuple[str, ...]) -> list[str]:
    seen: set[str] = set()
    result = []
    for node_id in ids:
        if node_id not in seen:
            seen.add(node_id)
            result.append(node_id)
    return result


def topological_sort(nodes: list[NodeSpec]) -> SortResult:
    """
    Order nodes so every node follows all of its present prerequisites.

    Ties are broken by declaration order. Prerequisites naming ids that
    are not in the set do not block scheduling; the executor's gating
    check skips such nodes later. Nodes on or downstream of a cycle never
    reach in-degree zero and land in ``excluded``.
    """
    node_map: dict[str, NodeSpec] = {}
    excluded: list[ExcludedNode] = []
    for node in nodes:
        if node.id in node_map:
            excluded.append(ExcludedNode(id=node.id, reason="duplicate_id", prereqs=list(node.prereqs)))
            continue
        node_map[node.id] = node

    prereqs = {node_id: _unique(node.prereqs) for node_id, node in node_map.items()}
    dependents: dict[str, list[str]] = {node_id: [] for node_id in node_map}
    in_degree = {node_id: 0 for node_id in node_map}

    for node_id, node_prereqs in prereqs.items():
        for prereq in node_prereqs:
            if prereq in node_map:
                in_degree[node_id] += 1
                dependents[prereq].append(node_id)

    queue = deque(node_id for node_id, degree in in_degree.items() if degree == 0)
    ordered: list[NodeSpec] = []

    while queue:
        node_id = queue.popleft()
        ordered.append(node_map[node_id])
        for dependent in dependents[node_id]:
            in_degree[dependent] -= 1
            if in_degree[dependent] == 0:
                queue.append(dependent)

    for node_id, degree in in_degree.items():
        if degree > 0:
            excluded.append(ExcludedNode(id=node_id, reason="cycle", prereqs=prereqs[node_id]))

    return SortResult(ordered=ordered, excluded=excluded)
