"""Tests for topology: adjacency, BFS reachability, cycles, ordering and path enumeration."""

from __future__ import annotations

from conftest import make_graph
from flowise_core.services.topology import (
    _reachable_node_ids,
    build_topology,
    detect_cycles,
    divergence_count,
    enumerate_paths,
    max_depth,
    topological_order,
)


def _topo(ids, pairs):
    return build_topology(make_graph([(nid, "Custom", {}) for nid in ids], pairs))


class TestReachableNodeIds:
    """Test the BFS reachability function directly."""

    def test_linear_chain(self):
        successors = {"A": ["B"], "B": ["C"], "C": ["D"], "D": []}
        assert _reachable_node_ids(["A"], successors) == {"A", "B", "C", "D"}

    def test_unreachable_nodes(self):
        successors = {"A": ["B"], "B": [], "C": ["D"], "D": []}
        assert _reachable_node_ids(["A"], successors) == {"A", "B"}

    def test_cycle(self):
        assert _reachable_node_ids(["A"], {"A": ["B"], "B": ["A"]}) == {"A", "B"}

    def test_multiple_starts(self):
        successors = {"A": [], "B": ["C"], "C": []}
        assert _reachable_node_ids(["A", "B"], successors) == {"A", "B", "C"}

    def test_no_starts(self):
        assert _reachable_node_ids([], {"A": []}) == set()


class TestBuildTopology:
    def test_counts_and_roots(self):
        topo = _topo(["a", "b", "c"], [("a", "b"), ("a", "c"), ("b", "c")])
        assert topo.root_ids == ["a"]
        assert topo.incoming_count == {"a": 0, "b": 1, "c": 2}
        assert topo.outgoing_count == {"a": 2, "b": 1, "c": 0}

    def test_dangling_edges_skipped(self):
        topo = _topo(["a"], [("a", "ghost"), ("ghost", "a")])
        assert topo.successors == {"a": []}
        assert topo.root_ids == ["a"]

    def test_parallel_edges_counted_once_as_successor(self):
        topo = _topo(["a", "b"], [("a", "b"), ("a", "b")])
        assert topo.successors["a"] == ["b"]
        assert topo.outgoing_count["a"] == 2

    def test_duplicate_node_ids_collapse(self):
        topo = _topo(["a", "a", "b"], [("a", "b")])
        assert topo.node_ids == ["a", "b"]


class TestCycles:
    def test_acyclic(self, chat_graph):
        topo = build_topology(chat_graph)
        assert detect_cycles(topo) == []
        assert topological_order(topo) == chat_graph.node_ids()

    def test_simple_cycle(self):
        topo = _topo(["a", "b", "c"], [("a", "b"), ("b", "c"), ("c", "b")])
        assert detect_cycles(topo) == [["b", "c", "b"]]
        assert topological_order(topo) is None

    def test_self_loop(self):
        assert detect_cycles(_topo(["a"], [("a", "a")])) == [["a", "a"]]

    def test_diamond_is_not_a_cycle(self):
        topo = _topo(["a", "b", "c", "d"], [("a", "b"), ("a", "c"), ("b", "d"), ("c", "d")])
        assert detect_cycles(topo) == []


class TestPaths:
    def test_linear(self):
        topo = _topo(["a", "b", "c"], [("a", "b"), ("b", "c")])
        assert enumerate_paths(topo) == [["a", "b", "c"]]
        assert max_depth(topo) == 2

    def test_branches_in_discovery_order(self):
        topo = _topo(["a", "b", "c", "d"], [("a", "b"), ("a", "c"), ("b", "d"), ("c", "d")])
        assert enumerate_paths(topo) == [["a", "b", "d"], ["a", "c", "d"]]
        assert divergence_count(topo) == 1

    def test_single_node(self):
        topo = _topo(["a"], [])
        assert enumerate_paths(topo) == [["a"]]
        assert max_depth(topo) == 0
        assert divergence_count(topo) == 0

    def test_cap(self):
        # 2^6 paths through six diamonds
        ids = [f"n{i}" for i in range(19)]
        pairs = []
        for i in range(0, 18, 3):
            pairs += [(ids[i], ids[i + 1]), (ids[i], ids[i + 2]), (ids[i + 1], ids[i + 3]), (ids[i + 2], ids[i + 3])]
        topo = _topo(ids, pairs)
        assert len(enumerate_paths(topo)) == 64
        assert len(enumerate_paths(topo, max_paths=10)) == 10

    def test_cycle_paths_stop_before_revisit(self):
        topo = _topo(["a", "b", "c"], [("a", "b"), ("b", "c"), ("c", "b")])
        assert enumerate_paths(topo) == [["a", "b", "c"]]
        assert max_depth(topo, enumerate_paths(topo)) == 2

    def test_depth_uses_longest_branch(self):
        topo = _topo(["a", "b", "c", "d"], [("a", "b"), ("b", "c"), ("a", "d")])
        assert max_depth(topo) == 2
