"""RouteGraph: an interactive undirected graph editor with shortest-route search."""

__version__ = "0.1.0"
