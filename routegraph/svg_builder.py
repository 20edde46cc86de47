"""
SVG builder for the graph canvas.

Converts the store into SVG markup for ui.interactive_image. This module only
describes what the model already says: colours are picked from tags, nothing
here decides anything about the graph.
"""

from typing import Dict, Optional
from xml.sax.saxutils import escape

from routegraph.graph_store import GraphStore
from routegraph.objects import HOVERED, PATH, SELECTED, SOURCE, TARGET, VISITED, Edge, Node


NODE_COLORS = {
    SELECTED: 'black',
    HOVERED: 'blue',
    VISITED: 'orange',
    'default': 'green',
}

EDGE_COLORS = {
    PATH: 'gold',
    HOVERED: 'blue',
    'default': 'red',
}

EDGE_WIDTH = 5
PATH_WIDTH = 7
GLYPH_COLOR = '#FFFFFF'


def _pick(tags, palette: Dict[str, str]) -> str:
    # Palette order is priority order
    for tag, color in palette.items():
        if tag in tags:
            return color
    return palette['default']


def node_fill(node: Node, palette: Optional[Dict[str, str]] = None) -> str:
    return _pick(node.tags, palette or NODE_COLORS)


def edge_stroke(edge: Edge, palette: Optional[Dict[str, str]] = None) -> str:
    return _pick(edge.tags, palette or EDGE_COLORS)


def _edge_svg(edge: Edge) -> str:
    width = PATH_WIDTH if edge.has_tag(PATH) else EDGE_WIDTH
    return (
        f'<line id="edge-{edge.id}" x1="{edge.source.x:g}" y1="{edge.source.y:g}" '
        f'x2="{edge.target.x:g}" y2="{edge.target.y:g}" '
        f'stroke="{edge_stroke(edge)}" stroke-width="{width}" stroke-linecap="round" />'
    )


def _node_svg(node: Node) -> str:
    parts = [
        f'<circle id="node-{node.id}" cx="{node.x:g}" cy="{node.y:g}" r="{node.radius:g}" '
        f'fill="{node_fill(node)}" />'
    ]
    glyphs = ''.join(g for tag, g in ((SOURCE, 'S'), (TARGET, 'T')) if node.has_tag(tag))
    if glyphs:
        font_size = int(node.radius * 1.6)
        parts.append(
            f'<text x="{node.x:g}" y="{node.y:g}" fill="{GLYPH_COLOR}" font-size="{font_size}" '
            f'font-family="serif" text-anchor="middle" dominant-baseline="central">'
            f'{escape(glyphs)}</text>'
        )
    return ''.join(parts)


def build_svg_content(store: GraphStore) -> str:
    """Inner SVG elements, as ui.interactive_image expects for its content layer."""
    body = [_edge_svg(edge) for edge in store.render_edges()]
    body.extend(_node_svg(node) for node in store.nodes)
    return ''.join(body)


def build_svg(store: GraphStore, width: int, height: int) -> str:
    """
    Build a standalone SVG document for the current model.

    Args:
        store: Graph to draw
        width: Canvas width in pixels
        height: Canvas height in pixels

    Returns:
        SVG markup; edges are emitted before nodes so nodes sit on top
    """
    return (
        f'<svg width="{width}" height="{height}" viewBox="0 0 {width} {height}" '
        f'xmlns="http://www.w3.org/2000/svg">{build_svg_content(store)}</svg>'
    )
