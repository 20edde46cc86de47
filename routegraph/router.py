"""
Router - shortest route by hop count.

Breadth-first search over the store's adjacency mapping. The search is
modelled as a resumable task (RouteSearch) so the host can either run it to
completion inside one handler or step it from a timer to animate the
exploration. Every started search carries a run id; starting another search or
cancelling bumps the id and any older search is discarded when it completes.

Ties between equally short routes follow adjacency insertion order.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Deque, Dict, List, Optional

from routegraph.graph_store import GraphStore
from routegraph.objects import VISITED, Edge, Node

logger = logging.getLogger(__name__)


class RouteStatus(str, Enum):
    FOUND = 'found'
    NOT_FOUND = 'not_found'
    ROLES_UNSET = 'roles_unset'
    SUPERSEDED = 'superseded'


MESSAGES = {
    RouteStatus.FOUND: 'Route found',
    RouteStatus.NOT_FOUND: 'Path not found',
    RouteStatus.ROLES_UNSET: 'Source or target not set',
    RouteStatus.SUPERSEDED: 'Route search was superseded',
}


@dataclass
class RouteResult:
    """Outcome of a route run. Failures are values, never exceptions."""
    status: RouteStatus
    nodes: List[Node] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status is RouteStatus.FOUND

    @property
    def message(self) -> str:
        if self.ok:
            return f"Route found: {len(self.edges)} hops"
        return MESSAGES[self.status]


class RouteSearch:
    """
    One breadth-first search from ``source`` toward ``target``.

    The search keeps going until the frontier is exhausted; the route is then
    rebuilt from the predecessor map.
    """

    def __init__(self, store: GraphStore, source: Node, target: Node,
                 run_id: int = 0, mark_visited: bool = False):
        self.store = store
        self.source = source
        self.target = target
        self.run_id = run_id
        self.mark_visited = mark_visited

        self.visited: Dict[Node, None] = {source: None}
        self.frontier: Deque[Node] = deque([source])
        self.predecessors: Dict[Node, Node] = {}
        self.steps = 0

    @property
    def done(self) -> bool:
        return not self.frontier

    def step(self) -> Optional[Node]:
        """Expand the next frontier node and return it, or None when finished."""
        if not self.frontier:
            return None

        current = self.frontier.popleft()
        if self.mark_visited:
            current.set_tag(VISITED)

        for neighbour in self.store.neighbours(current):
            if neighbour in self.visited:
                continue
            self.visited[neighbour] = None
            self.frontier.append(neighbour)
            self.predecessors[neighbour] = current

        self.steps += 1
        return current

    def run(self) -> List[Node]:
        while self.step() is not None:
            pass
        return self.route()

    def route(self) -> List[Node]:
        if self.target not in self.visited:
            return []

        route = [self.target]
        node = self.target
        while node is not self.source:
            node = self.predecessors[node]
            route.append(node)
        route.reverse()
        return route


class Router:
    def __init__(self, store: GraphStore):
        self._store = store
        self._run_id = 0

    @property
    def run_id(self) -> int:
        return self._run_id

    def find_route(self, source: Node, target: Node) -> List[Node]:
        return RouteSearch(self._store, source, target).run()

    def start(self, source: Node, target: Node, mark_visited: bool = True) -> RouteSearch:
        """Open a new search and supersede any search still in flight."""
        self._run_id += 1
        logger.debug(f"Starting route search #{self._run_id} {source!r} -> {target!r}")
        return RouteSearch(self._store, source, target, self._run_id, mark_visited)

    def cancel(self) -> None:
        self._run_id += 1

    def is_current(self, search: RouteSearch) -> bool:
        return search.run_id == self._run_id

    def reset(self) -> None:
        """Drop the previous run's path overlay and exploration marks."""
        self._store.clear_path_edges()
        for node in self._store.nodes:
            node.remove_tag(VISITED)

    def run(self, source: Optional[Node], target: Optional[Node]) -> RouteResult:
        """Clear the previous path, search synchronously and record the new path."""
        self.reset()
        if source is None or target is None:
            logger.info("Route requested without both source and target")
            return RouteResult(RouteStatus.ROLES_UNSET)

        self._run_id += 1
        search = RouteSearch(self._store, source, target, self._run_id)
        search.run()
        return self.complete(search)

    def complete(self, search: RouteSearch) -> RouteResult:
        """Turn a finished search into path edges, unless it has been superseded."""
        if not self.is_current(search):
            logger.debug(f"Discarding stale route search #{search.run_id}")
            return RouteResult(RouteStatus.SUPERSEDED)

        route = search.route()
        if not route:
            logger.info(f"No route from {search.source!r} to {search.target!r}")
            return RouteResult(RouteStatus.NOT_FOUND)

        edges = [self._store.add_path_edge(Edge(a, b)) for a, b in zip(route, route[1:])]
        logger.info(f"Route {search.source!r} -> {search.target!r}: {len(edges)} hops "
                    f"after {search.steps} steps")
        return RouteResult(RouteStatus.FOUND, nodes=route, edges=edges)
