"""
Pointer payload normalisation.

Canvas events reach Python in several shapes depending on how they were bound:
NiceGUI MouseEventArguments, raw JS event dicts, or [x, y] lists.
"""

from dataclasses import dataclass
from typing import Any, Optional

MOVE = 'mousemove'
CLICK = 'click'


@dataclass
class PointerEvent:
    kind: str
    x: float
    y: float


def _first_present(raw: dict, *keys) -> Optional[Any]:
    for key in keys:
        if raw.get(key) is not None:
            return raw[key]
    return None


def normalize_pointer_payload(raw: Any, default_kind: str = CLICK) -> Optional[PointerEvent]:
    """
    Turn an event payload into a PointerEvent in canvas coordinates.

    Returns None for payloads that carry no usable coordinates.
    """
    if hasattr(raw, 'image_x') and hasattr(raw, 'image_y'):
        kind = getattr(raw, 'type', None) or default_kind
        x, y = raw.image_x, raw.image_y
    elif isinstance(raw, dict):
        kind = raw.get('type') or default_kind
        x = _first_present(raw, 'image_x', 'offsetX', 'x')
        y = _first_present(raw, 'image_y', 'offsetY', 'y')
    elif isinstance(raw, (list, tuple)) and len(raw) >= 2:
        kind = default_kind
        x, y = raw[0], raw[1]
    else:
        return None

    try:
        return PointerEvent(kind=kind, x=float(x), y=float(y))
    except (TypeError, ValueError):
        return None
