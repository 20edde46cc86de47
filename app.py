"""
Main NiceGUI application for RouteGraph.

Renders the graph as an SVG layer on ui.interactive_image, a tool panel on the
left, and a status line. All decisions live in routegraph.edit.controller;
this file only builds the page and binds events.
"""

import logging
import sys

import networkx as nx
from dotenv import load_dotenv
from nicegui import ui

from routegraph.paths import get_env_path

load_dotenv(get_env_path())

from routegraph.config import load_config
from routegraph.edit import (
    DEFAULT_TOOLS,
    InteractionController,
    make_run_action,
    setup_edit_handlers,
)
from routegraph.graph_store import GraphStore
from routegraph.router import Router
from routegraph.svg_builder import build_svg_content

config = load_config()
logging.basicConfig(
    level=config.log_level,
    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
)
logger = logging.getLogger(__name__)

TOOL_ICONS = {
    'add': 'add_circle',
    'remove': 'delete',
    'set_source': 'flag',
    'set_target': 'sports_score',
    'run': 'play_arrow',
}

TOOL_LABELS = {
    'add': 'Add node / connect two nodes',
    'remove': 'Remove node or edge',
    'set_source': 'Toggle source',
    'set_target': 'Toggle target',
    'run': 'Find shortest route',
}


def describe_graph(store: GraphStore) -> str:
    G = store.to_networkx()
    components = nx.number_connected_components(G) if len(G) else 0
    return (f"{G.number_of_nodes()} nodes · {G.number_of_edges()} edges · "
            f"{components} components · {len(store.path_edges)} hops on route")


# One graph per page visit: the store is created here and handed to every
# collaborator, nothing is module-global.
@ui.page('/')
def main_page():
    store = GraphStore()
    router = Router(store)
    controller = InteractionController(
        store,
        router,
        node_radius=config.node_radius,
        edge_tolerance=config.edge_tolerance,
    )
    state = {'search_timer': None, 'tool_buttons': {}}

    def refresh_canvas():
        state['canvas'].content = build_svg_content(store)
        state['status'].text = describe_graph(store)

    def refresh_tools():
        current = controller.state.current_tool
        for tool, button in state['tool_buttons'].items():
            button.props(f'color={"primary" if tool == current else "grey"}')

    handlers = setup_edit_handlers(
        state=state,
        controller=controller,
        config=config,
        refresh_canvas=refresh_canvas,
        refresh_tools=refresh_tools,
    )
    palette = [*DEFAULT_TOOLS, make_run_action(handlers['run_route'])]

    with ui.row().classes('w-full no-wrap items-start gap-4 p-4'):
        # 1. Tool panel
        with ui.column().classes('gap-2'):
            for entry in palette:
                button = ui.button(
                    icon=TOOL_ICONS.get(entry.name, 'help'),
                    on_click=lambda _, e=entry: handlers['handle_tool'](e),
                ).props('round').tooltip(TOOL_LABELS.get(entry.name, entry.name))
                if entry in DEFAULT_TOOLS:
                    state['tool_buttons'][entry] = button

        # 2. Canvas
        with ui.column().classes('gap-1'):
            state['canvas'] = ui.interactive_image(
                size=(config.canvas_width, config.canvas_height),
                on_mouse=handlers['handle_mouse'],
                events=['mousemove', 'click'],
                cross=False,
            ).classes('border border-slate-600 rounded')
            state['status'] = ui.label('').classes('text-xs text-gray-400')

    refresh_tools()
    refresh_canvas()
    logger.info("Graph editor page ready")


if __name__ in {"__main__", "__mp_main__"}:
    ui.run(
        title='RouteGraph',
        port=config.port,
        reload=not getattr(sys, 'frozen', False),
    )
