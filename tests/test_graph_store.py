"""
Tests for GraphStore structural invariants.
"""

import networkx as nx
import pytest

from routegraph.exceptions import (
    DuplicateEdge,
    GraphInvariantError,
    InvalidEdgeEndpoint,
    UnknownNode,
)
from routegraph.graph_store import GraphStore
from routegraph.objects import PATH, Edge, Node


@pytest.fixture
def store():
    return GraphStore()


@pytest.fixture
def triangle(store):
    a, b, c = (store.add_node(Node(x, y)) for x, y in [(0, 0), (100, 0), (50, 80)])
    edges = [store.add_edge(Edge(a, b)), store.add_edge(Edge(b, c)), store.add_edge(Edge(c, a))]
    return (a, b, c), edges


def assert_symmetric(store):
    for node in store.nodes:
        for other in store.neighbours(node):
            assert node in store.neighbours(other)


class TestNodes:
    def test_add_node_registers_empty_adjacency(self, store):
        node = store.add_node(Node(10, 10))
        assert store.has_node(node)
        assert list(store.neighbours(node)) == []
        assert len(store) == 1

    def test_nodes_keep_insertion_order(self, store):
        nodes = [store.add_node(Node(i * 50, 0)) for i in range(5)]
        assert store.nodes == nodes

    def test_equal_positions_are_distinct_nodes(self, store):
        first = store.add_node(Node(5, 5))
        second = store.add_node(Node(5, 5))
        assert len(store) == 2
        assert first is not second

    def test_neighbours_of_unknown_node_raises(self, store):
        with pytest.raises(UnknownNode):
            store.neighbours(Node(0, 0))

    def test_remove_unknown_node_raises(self, store):
        with pytest.raises(UnknownNode):
            store.remove_node(Node(0, 0))

    def test_radius_must_be_positive(self):
        with pytest.raises(ValueError):
            Node(0, 0, radius=0)


class TestEdges:
    def test_add_edge_links_both_ways(self, store):
        a, b = store.add_node(Node(0, 0)), store.add_node(Node(50, 0))
        edge = store.add_edge(Edge(a, b))

        assert edge in store.edges
        assert b in store.neighbours(a)
        assert a in store.neighbours(b)
        assert store.has_edge(b, a)
        assert store.find_edge(b, a) is edge

    def test_add_edge_with_unknown_endpoint_fails_without_mutation(self, store):
        a = store.add_node(Node(0, 0))
        stranger = Node(50, 0)

        with pytest.raises(InvalidEdgeEndpoint):
            store.add_edge(Edge(a, stranger))

        assert store.edges == []
        assert list(store.neighbours(a)) == []

    def test_self_loop_rejected(self, store):
        a = store.add_node(Node(0, 0))
        with pytest.raises(InvalidEdgeEndpoint):
            store.add_edge(Edge(a, a))

    def test_duplicate_edge_rejected_in_either_direction(self, store):
        a, b = store.add_node(Node(0, 0)), store.add_node(Node(50, 0))
        first = store.add_edge(Edge(a, b))

        with pytest.raises(DuplicateEdge) as exc:
            store.add_edge(Edge(b, a))

        assert exc.value.existing is first
        assert store.edges == [first]

    def test_remove_edge_unlinks_both_ways(self, store, triangle):
        (a, b, c), edges = triangle
        store.remove_edge(edges[0])

        assert edges[0] not in store.edges
        assert b not in store.neighbours(a)
        assert a not in store.neighbours(b)
        assert_symmetric(store)
        store.check_invariants()

    def test_remove_absent_edge_is_noop(self, store, triangle):
        (a, b, c), edges = triangle
        store.remove_edge(edges[0])
        before = (store.nodes, store.edges, {n: set(store.neighbours(n)) for n in store.nodes})

        store.remove_edge(edges[0])

        after = (store.nodes, store.edges, {n: set(store.neighbours(n)) for n in store.nodes})
        assert before == after

    def test_removing_foreign_edge_keeps_real_connection(self, store):
        """An Edge object the store never held must not cut an existing link."""
        a, b = store.add_node(Node(0, 0)), store.add_node(Node(50, 0))
        store.add_edge(Edge(a, b))

        store.remove_edge(Edge(a, b))

        assert store.has_edge(a, b)
        store.check_invariants()


class TestRemovalClosure:
    def test_remove_node_purges_adjacency_and_edges(self, store, triangle):
        (a, b, c), _ = triangle
        store.remove_node(b)

        assert not store.has_node(b)
        for node in store.nodes:
            assert b not in store.neighbours(node)
        assert all(not edge.touches(b) for edge in store.edges)
        assert len(store.edges) == 1
        store.check_invariants()

    def test_remove_node_purges_path_edges(self, store, triangle):
        (a, b, c), _ = triangle
        store.add_path_edge(Edge(a, b))
        store.add_path_edge(Edge(c, a))

        store.remove_node(b)

        assert len(store.path_edges) == 1
        assert store.path_edges[0].connects(a, c)
        store.check_invariants()

    def test_symmetry_after_mixed_operations(self, store):
        nodes = [store.add_node(Node(i * 30, (i % 3) * 30)) for i in range(8)]
        for i in range(len(nodes) - 1):
            store.add_edge(Edge(nodes[i], nodes[i + 1]))
        store.add_edge(Edge(nodes[0], nodes[5]))
        store.add_edge(Edge(nodes[2], nodes[7]))
        store.remove_node(nodes[3])
        store.remove_edge(store.find_edge(nodes[0], nodes[1]))
        store.remove_node(nodes[7])

        assert_symmetric(store)
        store.check_invariants()


class TestPathEdges:
    def test_path_edges_stay_out_of_adjacency(self, store):
        a, b, c = (store.add_node(Node(x, 0)) for x in (0, 50, 100))
        store.add_edge(Edge(a, b))
        path = store.add_path_edge(Edge(a, c))

        assert path.has_tag(PATH)
        assert c not in store.neighbours(a)
        assert path not in store.edges
        assert list(store.render_edges())[-1] is path

    def test_clear_path_edges(self, store):
        a, b = store.add_node(Node(0, 0)), store.add_node(Node(50, 0))
        store.add_path_edge(Edge(a, b))
        assert store.clear_path_edges() == 1
        assert store.path_edges == []

    def test_path_edge_needs_live_endpoints(self, store):
        a = store.add_node(Node(0, 0))
        with pytest.raises(InvalidEdgeEndpoint):
            store.add_path_edge(Edge(a, Node(10, 10)))


class TestInvariantCheck:
    def test_detects_asymmetric_adjacency(self, store):
        a, b = store.add_node(Node(0, 0)), store.add_node(Node(50, 0))
        store.add_edge(Edge(a, b))
        # Corrupt one direction behind the store's back
        store._adjacency[b].pop(a)

        with pytest.raises(GraphInvariantError):
            store.check_invariants()


def test_to_networkx_matches_structure(store, triangle):
    (a, b, c), _ = triangle
    store.add_path_edge(Edge(a, b))
    G = store.to_networkx()

    assert isinstance(G, nx.Graph)
    assert set(G.nodes) == {a.id, b.id, c.id}
    assert G.number_of_edges() == 3
    assert G.nodes[a.id]['x'] == 0.0
