"""Topology: adjacency, reachability, cycles and paths over a workflow graph."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field

from flowise_core.schemas.graph import GraphEdge, WorkflowGraph

logger = logging.getLogger(__name__)


@dataclass
class Topology:
    node_ids: list[str] = field(default_factory=list)
    edges_by_source: dict[str, list[GraphEdge]] = field(default_factory=dict)
    successors: dict[str, list[str]] = field(default_factory=dict)
    incoming_count: dict[str, int] = field(default_factory=dict)
    outgoing_count: dict[str, int] = field(default_factory=dict)
    root_ids: list[str] = field(default_factory=list)


def build_topology(graph: WorkflowGraph) -> Topology:
    """Index *graph* for traversal. Edges with unknown endpoints are skipped."""
    node_ids: list[str] = []
    for node in graph.nodes:
        if node.id not in node_ids:
            node_ids.append(node.id)
    known = set(node_ids)

    edges_by_source: dict[str, list[GraphEdge]] = {}
    successors: dict[str, list[str]] = {nid: [] for nid in node_ids}
    incoming_count: dict[str, int] = {nid: 0 for nid in node_ids}
    outgoing_count: dict[str, int] = {nid: 0 for nid in node_ids}

    for edge in graph.edges:
        if edge.source not in known or edge.target not in known:
            continue
        edges_by_source.setdefault(edge.source, []).append(edge)
        incoming_count[edge.target] += 1
        outgoing_count[edge.source] += 1
        if edge.target not in successors[edge.source]:
            successors[edge.source].append(edge.target)

    return Topology(
        node_ids=node_ids,
        edges_by_source=edges_by_source,
        successors=successors,
        incoming_count=incoming_count,
        outgoing_count=outgoing_count,
        root_ids=[nid for nid in node_ids if incoming_count[nid] == 0],
    )


def _reachable_node_ids(start_ids: list[str], successors: dict[str, list[str]]) -> set[str]:
    """BFS from *start_ids* following successor lists."""
    visited: set[str] = set()
    queue = deque(start_ids)
    while queue:
        nid = queue.popleft()
        if nid in visited:
            continue
        visited.add(nid)
        for target in successors.get(nid, []):
            if target not in visited:
                queue.append(target)
    return visited


def detect_cycles(topo: Topology) -> list[list[str]]:
    """Return one closed path (first node repeated at the end) per back edge."""
    white, gray, black = 0, 1, 2
    color = {nid: white for nid in topo.node_ids}
    cycles: list[list[str]] = []

    for start in topo.node_ids:
        if color[start] != white:
            continue
        color[start] = gray
        path = [start]
        stack = [(start, iter(topo.successors[start]))]
        while stack:
            node, it = stack[-1]
            advanced = False
            for nxt in it:
                if color[nxt] == white:
                    color[nxt] = gray
                    path.append(nxt)
                    stack.append((nxt, iter(topo.successors[nxt])))
                    advanced = True
                    break
                if color[nxt] == gray:
                    cycles.append(path[path.index(nxt):] + [nxt])
            if not advanced:
                color[node] = black
                path.pop()
                stack.pop()

    return cycles


def topological_order(topo: Topology) -> list[str] | None:
    """Kahn's algorithm in graph order. None when the graph has a cycle."""
    # parallel edges count once per distinct successor
    remaining = {nid: 0 for nid in topo.node_ids}
    for nid in topo.node_ids:
        for target in topo.successors[nid]:
            remaining[target] += 1

    queue = deque(nid for nid in topo.node_ids if remaining[nid] == 0)
    order: list[str] = []
    while queue:
        nid = queue.popleft()
        order.append(nid)
        for target in topo.successors[nid]:
            remaining[target] -= 1
            if remaining[target] == 0:
                queue.append(target)

    if len(order) != len(topo.node_ids):
        return None
    return order


def enumerate_paths(topo: Topology, max_paths: int = 256) -> list[list[str]]:
    """Root-to-sink simple paths in discovery order, at most *max_paths*.

    A path ends where no successor can extend it without revisiting a node.
    """
    paths: list[list[str]] = []
    for root in topo.root_ids:
        stack: list[list[str]] = [[root]]
        while stack:
            if len(paths) >= max_paths:
                logger.debug("Path enumeration capped at %d paths", max_paths)
                return paths
            path = stack.pop()
            extensions = [n for n in topo.successors[path[-1]] if n not in path]
            if not extensions:
                paths.append(path)
                continue
            for nxt in reversed(extensions):
                stack.append(path + [nxt])
    return paths


def max_depth(topo: Topology, paths: list[list[str]] | None = None) -> int:
    """Number of edges on the longest path.

    Exact for DAGs; for cyclic graphs falls back to the longest enumerated
    simple path.
    """
    order = topological_order(topo)
    if order is None:
        return max((len(p) - 1 for p in paths or []), default=0)

    depth = {nid: 0 for nid in order}
    for nid in order:
        for target in topo.successors[nid]:
            depth[target] = max(depth[target], depth[nid] + 1)
    return max(depth.values(), default=0)


def divergence_count(topo: Topology) -> int:
    """Extra branches created where a node fans out to several successors."""
    return sum(max(0, len(targets) - 1) for targets in topo.successors.values())
