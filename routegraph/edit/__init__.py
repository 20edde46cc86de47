"""
Tool-driven editing for the RouteGraph canvas.

This package provides click/move editing:
- InteractionController: tool state machine and hover tracking
- Tool / Action: palette entries
- normalize_pointer_payload: event payload normalisation
- setup_edit_handlers: NiceGUI bindings for app.py

Usage:
    from routegraph.edit import InteractionController, DEFAULT_TOOLS
    from routegraph.edit.handlers import setup_edit_handlers
"""

from routegraph.edit.tools import (
    ADD_TOOL,
    REMOVE_TOOL,
    SET_SOURCE_TOOL,
    SET_TARGET_TOOL,
    DEFAULT_TOOLS,
    Action,
    Tool,
    make_run_action,
)
from routegraph.edit.controller import InteractionController, InteractionState
from routegraph.edit.pointer import PointerEvent, normalize_pointer_payload
from routegraph.edit.handlers import setup_edit_handlers

__all__ = [
    'InteractionController',
    'InteractionState',
    'Tool',
    'Action',
    'ADD_TOOL',
    'REMOVE_TOOL',
    'SET_SOURCE_TOOL',
    'SET_TARGET_TOOL',
    'DEFAULT_TOOLS',
    'make_run_action',
    'PointerEvent',
    'normalize_pointer_payload',
    'setup_edit_handlers',
]
