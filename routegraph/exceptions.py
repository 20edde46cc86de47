"""
Exceptions raised by the graph model.

These signal programming errors at the model seams (a caller handed the store
something it does not own). User-facing conditions such as a missing route are
reported through RouteResult instead.
"""


class GraphError(Exception):
    """Base class for graph model errors."""


class InvalidEdgeEndpoint(GraphError):
    """An edge references a node that is not registered, or both ends are the same node."""

    def __init__(self, edge, reason: str = "endpoint is not a live node"):
        self.edge = edge
        self.reason = reason
        super().__init__(f"Invalid edge {edge!r}: {reason}")


class UnknownNode(GraphError):
    """A node was queried or removed that the store does not hold."""

    def __init__(self, node):
        self.node = node
        super().__init__(f"Unknown node {node!r}")


class DuplicateEdge(GraphError):
    """An edge was added between two nodes that are already connected."""

    def __init__(self, edge, existing):
        self.edge = edge
        self.existing = existing
        super().__init__(f"Nodes of {edge!r} are already connected by {existing!r}")


class GraphInvariantError(GraphError):
    """The store's collections disagree with each other."""
