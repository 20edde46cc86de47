"""
Spatial objects placed on the canvas.

Nodes and edges share a small capability surface:
- contains(x, y, tolerance): geometric hit test
- describe(): plain dict consumed by the SVG builder
- tags: named boolean flags (hovered, selected, source, ...)

Identity is by reference. Two nodes at the same position are still two nodes.
"""

import math
import uuid
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Set


# Tag names shared by the controller, router and SVG builder
HOVERED = 'hovered'
SELECTED = 'selected'
SOURCE = 'source'
TARGET = 'target'
PATH = 'path'
VISITED = 'visited'

DEFAULT_NODE_RADIUS = 20.0


class ObjectKind(str, Enum):
    NODE = 'node'
    EDGE = 'edge'


def _short_id() -> str:
    return uuid.uuid4().hex[:8]


def distance(x1: float, y1: float, x2: float, y2: float) -> float:
    return math.hypot(x1 - x2, y1 - y2)


class SpatialObject:
    """Base for anything hit-testable that carries tags."""

    kind: ObjectKind

    def __init__(self, tags: Optional[Iterable[str]] = None):
        self.id: str = _short_id()
        self.tags: Set[str] = set(tags or ())

    def set_tag(self, tag: str) -> None:
        self.tags.add(tag)

    def remove_tag(self, tag: str) -> None:
        self.tags.discard(tag)

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags

    def contains(self, x: float, y: float, tolerance: float = 0.0) -> bool:
        raise NotImplementedError

    def describe(self) -> Dict[str, Any]:
        raise NotImplementedError


class Node(SpatialObject):
    """A point on the canvas with a fixed hit radius."""

    kind = ObjectKind.NODE

    def __init__(self, x: float, y: float, radius: float = DEFAULT_NODE_RADIUS,
                 tags: Optional[Iterable[str]] = None):
        if radius <= 0:
            raise ValueError(f"Node radius must be positive, got {radius}")
        super().__init__(tags)
        self._x = float(x)
        self._y = float(y)
        self._radius = float(radius)

    # Position and radius are fixed once the node exists
    @property
    def x(self) -> float:
        return self._x

    @property
    def y(self) -> float:
        return self._y

    @property
    def radius(self) -> float:
        return self._radius

    @property
    def position(self):
        return (self._x, self._y)

    def contains(self, x: float, y: float, tolerance: float = 0.0) -> bool:
        return distance(x, y, self._x, self._y) <= self._radius + tolerance

    def describe(self) -> Dict[str, Any]:
        return {
            'kind': self.kind.value,
            'id': self.id,
            'x': self._x,
            'y': self._y,
            'radius': self._radius,
            'tags': sorted(self.tags),
        }

    def __repr__(self) -> str:
        return f"Node({self.id}, x={self._x:g}, y={self._y:g})"


class Edge(SpatialObject):
    """
    An undirected segment between two nodes.

    ``source`` and ``target`` only record the order the user picked the ends in;
    connects(a, b) and connects(b, a) are the same question.
    """

    kind = ObjectKind.EDGE

    def __init__(self, source: Node, target: Node, tags: Optional[Iterable[str]] = None):
        super().__init__(tags)
        self.source = source
        self.target = target

    @property
    def endpoints(self):
        return (self.source, self.target)

    def connects(self, a: Node, b: Node) -> bool:
        return (self.source is a and self.target is b) or (self.source is b and self.target is a)

    def touches(self, node: Node) -> bool:
        return self.source is node or self.target is node

    def other(self, node: Node) -> Node:
        if node is self.source:
            return self.target
        if node is self.target:
            return self.source
        raise ValueError(f"{node!r} is not an endpoint of {self!r}")

    @property
    def length(self) -> float:
        return distance(self.source.x, self.source.y, self.target.x, self.target.y)

    def contains(self, x: float, y: float, tolerance: float = 1.0) -> bool:
        # Triangle-inequality collinearity check. The band it accepts is widest
        # around the midpoint and grows with the segment length, so it is only
        # a good approximation at the segment's own scale.
        d_from = distance(self.source.x, self.source.y, x, y)
        d_to = distance(self.target.x, self.target.y, x, y)
        return abs(self.length - (d_from + d_to)) <= tolerance

    def describe(self) -> Dict[str, Any]:
        return {
            'kind': self.kind.value,
            'id': self.id,
            'source': self.source.id,
            'target': self.target.id,
            'x1': self.source.x,
            'y1': self.source.y,
            'x2': self.target.x,
            'y2': self.target.y,
            'tags': sorted(self.tags),
        }

    def __repr__(self) -> str:
        return f"Edge({self.id}, {self.source.id}-{self.target.id})"
