"""
Interaction Controller - single source of truth for editing state.

Maps the active tool plus a hit-test result onto a graph mutation:
- add: create node / start or complete an edge
- remove: delete node (with cascade) or edge
- set_source / set_target: toggle the route endpoints
- actions: invoke the bound callback

The controller never renders. Every pointer event ends with a call to the
registered on_change callback; the host redraws from the model.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Union

from routegraph.exceptions import GraphError
from routegraph.graph_store import GraphStore
from routegraph.hit_test import EDGE_HIT_TOLERANCE, HitTester
from routegraph.objects import (
    DEFAULT_NODE_RADIUS,
    HOVERED,
    SELECTED,
    SOURCE,
    TARGET,
    Edge,
    Node,
)
from routegraph.router import Router, RouteResult, RouteSearch, RouteStatus
from routegraph.edit.tools import (
    ADD_TOOL,
    REMOVE_TOOL,
    SET_SOURCE_TOOL,
    SET_TARGET_TOOL,
    Action,
    PaletteEntry,
)

logger = logging.getLogger(__name__)

Hit = Optional[Union[Node, Edge]]


@dataclass
class InteractionState:
    current_tool: PaletteEntry = ADD_TOOL
    selected_node: Optional[Node] = None
    source_node: Optional[Node] = None
    target_node: Optional[Node] = None
    prev_hovered: Hit = None


class InteractionController:
    """Tool-driven state machine over one GraphStore."""

    def __init__(self, store: GraphStore, router: Optional[Router] = None,
                 notify: Optional[Callable[[RouteResult], None]] = None,
                 node_radius: float = DEFAULT_NODE_RADIUS,
                 edge_tolerance: float = EDGE_HIT_TOLERANCE):
        self.store = store
        self.router = router or Router(store)
        self.hit_tester = HitTester(store, edge_tolerance)
        self.node_radius = node_radius
        self._state = InteractionState()
        self._notify = notify
        self._on_change: Optional[Callable[[], None]] = None

    @property
    def state(self) -> InteractionState:
        return self._state

    def set_on_change(self, callback: Callable[[], None]):
        self._on_change = callback

    def set_notifier(self, callback: Callable[[RouteResult], None]):
        self._notify = callback

    def _request_render(self):
        if self._on_change:
            self._on_change()

    # --- Tool selection ---

    def set_current_tool(self, tool: PaletteEntry):
        if tool != self._state.current_tool:
            self._clear_selection()
        self._state.current_tool = tool
        logger.debug(f"Current tool: {tool.name}")

    def activate(self, entry: PaletteEntry):
        """Entry point for the tool panel: tools become current, actions fire."""
        if isinstance(entry, Action):
            return entry.activate()
        self.set_current_tool(entry)
        return None

    # --- Pointer events ---

    def handle_move(self, x: float, y: float) -> Hit:
        hovered = self.hit_tester.locate(x, y)
        if self._state.prev_hovered is not None:
            self._state.prev_hovered.remove_tag(HOVERED)
        if hovered is not None:
            hovered.set_tag(HOVERED)
        self._state.prev_hovered = hovered
        self._request_render()
        return hovered

    def handle_click(self, x: float, y: float) -> Hit:
        hit = self.hit_tester.locate(x, y)
        tool = self._state.current_tool

        if isinstance(tool, Action):
            tool.activate()
        elif tool == ADD_TOOL:
            self._click_add(x, y, hit)
        elif tool == REMOVE_TOOL:
            self._click_remove(hit)
        elif tool == SET_SOURCE_TOOL:
            self._click_role(hit, SOURCE)
        elif tool == SET_TARGET_TOOL:
            self._click_role(hit, TARGET)
        else:
            logger.warning(f"Click ignored: unknown tool {tool!r}")

        self._request_render()
        return hit

    def _click_add(self, x: float, y: float, hit: Hit):
        if hit is None:
            self.store.add_node(Node(x, y, self.node_radius))
            return
        if not isinstance(hit, Node):
            return

        selected = self._state.selected_node
        if selected is None:
            hit.set_tag(SELECTED)
            self._state.selected_node = hit
            return

        if hit is selected:
            # Second click on the pending node cancels instead of making a loop
            self._clear_selection()
            return

        if self.store.has_edge(selected, hit):
            logger.warning(f"{selected!r} and {hit!r} are already connected")
        else:
            try:
                self.store.add_edge(Edge(selected, hit))
                self._invalidate_route()
            except GraphError as e:
                logger.error(f"Edge creation failed: {e}")
        self._clear_selection()

    def _click_remove(self, hit: Hit):
        if isinstance(hit, Node):
            self.remove_node(hit)
        elif isinstance(hit, Edge):
            self.store.remove_edge(hit)
            if self._state.prev_hovered is hit:
                self._state.prev_hovered = None
            self._invalidate_route()

    def _click_role(self, hit: Hit, role: str):
        if not isinstance(hit, Node):
            return

        other = TARGET if role == SOURCE else SOURCE
        if self._role_holder(other) is hit:
            hit.remove_tag(other)
            self._set_role_holder(other, None)

        current = self._role_holder(role)
        if current is not None:
            current.remove_tag(role)

        if current is hit:
            self._set_role_holder(role, None)
        else:
            hit.set_tag(role)
            self._set_role_holder(role, hit)
        self._invalidate_route()

    def _role_holder(self, role: str) -> Optional[Node]:
        return self._state.source_node if role == SOURCE else self._state.target_node

    def _set_role_holder(self, role: str, node: Optional[Node]):
        if role == SOURCE:
            self._state.source_node = node
        else:
            self._state.target_node = node

    # --- Structural changes ---

    def remove_node(self, node: Node):
        """Remove a node and drop every piece of interaction state pointing at it."""
        self.store.remove_node(node)
        if self._state.selected_node is node:
            self._state.selected_node = None
        if self._state.source_node is node:
            self._state.source_node = None
        if self._state.target_node is node:
            self._state.target_node = None
        prev = self._state.prev_hovered
        if prev is node or (isinstance(prev, Edge) and prev.touches(node)):
            self._state.prev_hovered = None
        self._invalidate_route()

    def _invalidate_route(self):
        # Path and in-flight search go stale once the graph or an endpoint changes
        self.router.cancel()
        self.router.reset()

    def _clear_selection(self):
        if self._state.selected_node is not None:
            self._state.selected_node.remove_tag(SELECTED)
            self._state.selected_node = None

    # --- Routing ---

    def run_route(self) -> RouteResult:
        result = self.router.run(self._state.source_node, self._state.target_node)
        self._report(result)
        self._request_render()
        return result

    def begin_route(self) -> Optional[RouteSearch]:
        """Start an animated search. Returns None when a role is missing."""
        self.router.reset()
        source, target = self._state.source_node, self._state.target_node
        if source is None or target is None:
            self.router.cancel()
            self._report(RouteResult(RouteStatus.ROLES_UNSET))
            self._request_render()
            return None
        search = self.router.start(source, target)
        self._request_render()
        return search

    def advance_route(self, search: RouteSearch) -> Optional[RouteResult]:
        """
        Expand one node of an animated search.

        Returns None while the search is still running, otherwise the final
        result. A superseded search stops immediately without touching the model.
        """
        if not self.router.is_current(search):
            return RouteResult(RouteStatus.SUPERSEDED)

        if search.step() is not None and not search.done:
            self._request_render()
            return None

        result = self.router.complete(search)
        self._report(result)
        self._request_render()
        return result

    def _report(self, result: RouteResult):
        if result.status in (RouteStatus.NOT_FOUND, RouteStatus.ROLES_UNSET):
            logger.info(result.message)
            if self._notify:
                self._notify(result)
