"""
Edit Handlers - NiceGUI event handlers for the graph canvas.

Keeps pointer binding, notifications and search timers out of app.py so the
page function only deals with layout.
"""

import logging
from typing import Any, Callable, Dict, Optional

from nicegui import ui

from routegraph.config import EditorConfig
from routegraph.edit.controller import InteractionController
from routegraph.edit.pointer import CLICK, MOVE, normalize_pointer_payload
from routegraph.edit.tools import PaletteEntry
from routegraph.router import RouteResult, RouteSearch, RouteStatus

logger = logging.getLogger(__name__)


def notify_route_result(result: RouteResult):
    """Non-blocking user notification for route outcomes."""
    if result.status is RouteStatus.ROLES_UNSET:
        ui.notify(result.message, type='warning', position='bottom')
    elif result.status is RouteStatus.NOT_FOUND:
        ui.notify(result.message, type='negative', position='bottom')


def setup_edit_handlers(
    state: Dict[str, Any],
    controller: InteractionController,
    config: EditorConfig,
    refresh_canvas: Callable[[], None],
    refresh_tools: Callable[[], None],
):
    """
    Wire the controller to the page.

    Args:
        state: Page state dictionary (holds the active search timer)
        controller: InteractionController for this page's graph
        config: Effective editor configuration
        refresh_canvas: Redraws the SVG layer from the model
        refresh_tools: Re-styles the tool panel after a tool switch

    Returns:
        Dict with handler functions for binding to UI events
    """
    controller.set_on_change(refresh_canvas)
    controller.set_notifier(notify_route_result)

    def handle_mouse(event):
        """Dispatch canvas mouse events to the controller."""
        pointer = normalize_pointer_payload(event)
        if pointer is None:
            return
        if pointer.kind == MOVE:
            controller.handle_move(pointer.x, pointer.y)
        elif pointer.kind == CLICK:
            controller.handle_click(pointer.x, pointer.y)

    def handle_tool(entry: PaletteEntry):
        controller.activate(entry)
        refresh_tools()

    def _stop_timer():
        timer: Optional[ui.timer] = state.get('search_timer')
        if timer is not None:
            timer.cancel()
            state['search_timer'] = None

    def run_route():
        """Bound to the 'run' action."""
        _stop_timer()
        if config.animation_step_ms <= 0:
            result = controller.run_route()
            if result.ok:
                ui.notify(result.message, type='positive', position='bottom', timeout=1000)
            return

        search = controller.begin_route()
        if search is None:
            return

        def tick(search: RouteSearch = search):
            result = controller.advance_route(search)
            if result is None:
                return
            timer.cancel()
            if state.get('search_timer') is timer:
                state['search_timer'] = None
            if result.ok:
                ui.notify(result.message, type='positive', position='bottom', timeout=1000)

        timer = ui.timer(config.animation_step_seconds, tick)
        state['search_timer'] = timer
        logger.debug(f"Animating route search #{search.run_id}")

    return {
        'handle_mouse': handle_mouse,
        'handle_tool': handle_tool,
        'run_route': run_route,
    }
