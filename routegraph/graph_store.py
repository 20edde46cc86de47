"""
Graph Store - owner of the node, edge and adjacency collections.

Three structures have to agree at all times:
- nodes: every registered node
- edges: structural edges, each backed by a mutual adjacency entry
- adjacency: node -> neighbours, kept symmetric

Path edges produced by the router live in a fourth, decorative collection.
They are rendered but never enter the adjacency mapping and are never hit-tested.

All collections are insertion-ordered dicts used as ordered sets, so
iteration (and therefore every tie-break built on it) is stable.
"""

import logging
from typing import Dict, Iterator, List, Optional

import networkx as nx

from routegraph.exceptions import (
    DuplicateEdge,
    GraphInvariantError,
    InvalidEdgeEndpoint,
    UnknownNode,
)
from routegraph.objects import PATH, Edge, Node

logger = logging.getLogger(__name__)


class GraphStore:
    """Owns one undirected graph and enforces its structural invariants."""

    def __init__(self):
        self._adjacency: Dict[Node, Dict[Node, None]] = {}
        self._edges: Dict[Edge, None] = {}
        self._path_edges: Dict[Edge, None] = {}

    # --- Read access ---

    @property
    def nodes(self) -> List[Node]:
        return list(self._adjacency)

    @property
    def edges(self) -> List[Edge]:
        return list(self._edges)

    @property
    def path_edges(self) -> List[Edge]:
        return list(self._path_edges)

    def render_edges(self) -> Iterator[Edge]:
        """Structural edges first, then the path overlay drawn on top."""
        yield from self._edges
        yield from self._path_edges

    def has_node(self, node: Node) -> bool:
        return node in self._adjacency

    def has_edge(self, a: Node, b: Node) -> bool:
        return a in self._adjacency and b in self._adjacency[a]

    def find_edge(self, a: Node, b: Node) -> Optional[Edge]:
        for edge in self._edges:
            if edge.connects(a, b):
                return edge
        return None

    def neighbours(self, node: Node):
        """Return a read-only view of the nodes adjacent to ``node``."""
        try:
            return self._adjacency[node].keys()
        except KeyError:
            raise UnknownNode(node) from None

    def __len__(self) -> int:
        return len(self._adjacency)

    def __contains__(self, obj) -> bool:
        return obj in self._adjacency or obj in self._edges

    # --- Mutation ---

    def add_node(self, node: Node) -> Node:
        self._adjacency.setdefault(node, {})
        logger.debug(f"Added {node!r}")
        return node

    def remove_node(self, node: Node) -> None:
        """Remove a node and purge every structure that references it."""
        if node not in self._adjacency:
            raise UnknownNode(node)

        for neighbour in self._adjacency[node]:
            self._adjacency[neighbour].pop(node, None)
        del self._adjacency[node]

        stale = [edge for edge in self._edges if edge.touches(node)]
        for edge in stale:
            del self._edges[edge]
        stale_path = [edge for edge in self._path_edges if edge.touches(node)]
        for edge in stale_path:
            del self._path_edges[edge]

        logger.debug(f"Removed {node!r} with {len(stale)} incident edges "
                     f"and {len(stale_path)} path edges")

    def add_edge(self, edge: Edge) -> Edge:
        self._validate_endpoints(edge)
        existing = self.find_edge(edge.source, edge.target)
        if existing is not None:
            raise DuplicateEdge(edge, existing)

        self._adjacency[edge.source][edge.target] = None
        self._adjacency[edge.target][edge.source] = None
        self._edges[edge] = None
        logger.debug(f"Added {edge!r}")
        return edge

    def remove_edge(self, edge: Edge) -> None:
        """Remove a structural edge. Removing an absent edge does nothing."""
        if edge not in self._edges:
            return
        self._adjacency[edge.source].pop(edge.target, None)
        self._adjacency[edge.target].pop(edge.source, None)
        del self._edges[edge]
        logger.debug(f"Removed {edge!r}")

    # --- Path overlay ---

    def add_path_edge(self, edge: Edge) -> Edge:
        self._validate_endpoints(edge)
        edge.set_tag(PATH)
        self._path_edges[edge] = None
        return edge

    def clear_path_edges(self) -> int:
        count = len(self._path_edges)
        self._path_edges.clear()
        return count

    # --- Consistency ---

    def _validate_endpoints(self, edge: Edge) -> None:
        if edge.source is edge.target:
            raise InvalidEdgeEndpoint(edge, "both ends are the same node")
        for endpoint in edge.endpoints:
            if endpoint not in self._adjacency:
                raise InvalidEdgeEndpoint(edge, f"{endpoint!r} is not a live node")

    def check_invariants(self) -> None:
        """Raise GraphInvariantError on the first disagreement between collections."""
        for node, neighbours in self._adjacency.items():
            for other in neighbours:
                if other not in self._adjacency:
                    raise GraphInvariantError(f"{node!r} is adjacent to unregistered {other!r}")
                if node not in self._adjacency[other]:
                    raise GraphInvariantError(f"Adjacency {node!r} -> {other!r} is not symmetric")
                if self.find_edge(node, other) is None:
                    raise GraphInvariantError(f"Adjacency {node!r} -> {other!r} has no edge")

        for edge in self._edges:
            a, b = edge.endpoints
            if a not in self._adjacency or b not in self._adjacency:
                raise GraphInvariantError(f"{edge!r} references a removed node")
            if b not in self._adjacency[a]:
                raise GraphInvariantError(f"{edge!r} is missing from adjacency")

        for edge in self._path_edges:
            if edge.source not in self._adjacency or edge.target not in self._adjacency:
                raise GraphInvariantError(f"Path {edge!r} references a removed node")

    def to_networkx(self) -> nx.Graph:
        """Export the structural graph keyed by node id."""
        G = nx.Graph()
        for node in self._adjacency:
            G.add_node(node.id, x=node.x, y=node.y, tags=sorted(node.tags))
        for edge in self._edges:
            G.add_edge(edge.source.id, edge.target.id, id=edge.id)
        return G
