"""
Tests for the NiceGUI glue that do not need a running page.
"""

from types import SimpleNamespace

import pytest

from routegraph.config import EditorConfig
from routegraph.edit import (
    REMOVE_TOOL,
    SET_SOURCE_TOOL,
    SET_TARGET_TOOL,
    InteractionController,
    setup_edit_handlers,
)
from routegraph.edit import handlers as handlers_module
from routegraph.graph_store import GraphStore
from routegraph.objects import HOVERED


@pytest.fixture
def wiring():
    store = GraphStore()
    controller = InteractionController(store)
    calls = {'canvas': 0, 'tools': 0}

    def refresh_canvas():
        calls['canvas'] += 1

    def refresh_tools():
        calls['tools'] += 1

    handlers = setup_edit_handlers(
        state={'search_timer': None},
        controller=controller,
        config=EditorConfig(),
        refresh_canvas=refresh_canvas,
        refresh_tools=refresh_tools,
    )
    return store, controller, handlers, calls


def test_click_payload_reaches_controller(wiring):
    store, controller, handlers, calls = wiring
    handlers['handle_mouse']({'type': 'click', 'image_x': 50, 'image_y': 60})

    assert len(store.nodes) == 1
    assert calls['canvas'] == 1


def test_move_payload_sets_hover(wiring):
    store, controller, handlers, calls = wiring
    handlers['handle_mouse']({'type': 'click', 'image_x': 50, 'image_y': 60})
    handlers['handle_mouse']({'type': 'mousemove', 'image_x': 52, 'image_y': 60})

    assert store.nodes[0].has_tag(HOVERED)


def test_malformed_payload_is_ignored(wiring):
    store, controller, handlers, calls = wiring
    handlers['handle_mouse']({'type': 'click'})
    assert store.nodes == []
    assert calls['canvas'] == 0


def test_tool_button_switches_tool(wiring):
    store, controller, handlers, calls = wiring
    handlers['handle_tool'](REMOVE_TOOL)

    assert controller.state.current_tool == REMOVE_TOOL
    assert calls['tools'] == 1


class FakeTimer:
    def __init__(self, interval, callback):
        self.interval = interval
        self.callback = callback
        self.active = True

    def cancel(self):
        self.active = False


@pytest.fixture
def fake_ui(monkeypatch):
    """Stand-in for nicegui's ui namespace: records timers and notifications."""
    recorded = SimpleNamespace(timers=[], notices=[])

    def timer(interval, callback):
        created = FakeTimer(interval, callback)
        recorded.timers.append(created)
        return created

    def notify(message, **kwargs):
        recorded.notices.append((message, kwargs.get('type')))

    monkeypatch.setattr(handlers_module, 'ui', SimpleNamespace(timer=timer, notify=notify))
    return recorded


def route_page(animation_step_ms):
    """A-B-C chain with A as source and C as target, wired to handlers."""
    store = GraphStore()
    controller = InteractionController(store)
    state = {'search_timer': None}
    handlers = setup_edit_handlers(
        state=state,
        controller=controller,
        config=EditorConfig(animation_step_ms=animation_step_ms),
        refresh_canvas=lambda: None,
        refresh_tools=lambda: None,
    )
    for x in (100, 200, 300):
        controller.handle_click(x, 100)
    for p, q in (((100, 100), (200, 100)), ((200, 100), (300, 100))):
        controller.handle_click(*p)
        controller.handle_click(*q)
    controller.set_current_tool(SET_SOURCE_TOOL)
    controller.handle_click(100, 100)
    controller.set_current_tool(SET_TARGET_TOOL)
    controller.handle_click(300, 100)
    return store, controller, state, handlers


def run_timer(timer):
    while timer.active:
        timer.callback()


class TestRunRoute:
    def test_immediate_run_notifies_success(self, fake_ui):
        store, controller, state, handlers = route_page(0)
        handlers['run_route']()

        assert fake_ui.timers == []
        assert fake_ui.notices == [('Route found: 2 hops', 'positive')]
        assert len(store.path_edges) == 2

    def test_animated_run_ticks_until_found(self, fake_ui):
        store, controller, state, handlers = route_page(50)
        handlers['run_route']()

        (timer,) = fake_ui.timers
        assert timer.interval == 0.05
        assert state['search_timer'] is timer
        assert store.path_edges == []

        run_timer(timer)

        assert state['search_timer'] is None
        assert len(store.path_edges) == 2
        assert fake_ui.notices == [('Route found: 2 hops', 'positive')]

    def test_rerun_cancels_previous_timer(self, fake_ui):
        store, controller, state, handlers = route_page(50)
        handlers['run_route']()
        handlers['run_route']()

        first, second = fake_ui.timers
        assert not first.active
        assert state['search_timer'] is second

        run_timer(second)
        assert len(store.path_edges) == 2

    def test_superseded_search_stops_its_timer(self, fake_ui):
        store, controller, state, handlers = route_page(50)
        handlers['run_route']()
        (timer,) = fake_ui.timers

        controller.set_current_tool(REMOVE_TOOL)
        controller.handle_click(200, 100)
        timer.callback()

        assert not timer.active
        assert state['search_timer'] is None
        assert store.path_edges == []
        assert fake_ui.notices == []

    def test_missing_roles_warn_without_timer(self, fake_ui):
        store = GraphStore()
        controller = InteractionController(store)
        handlers = setup_edit_handlers(
            state={'search_timer': None},
            controller=controller,
            config=EditorConfig(animation_step_ms=50),
            refresh_canvas=lambda: None,
            refresh_tools=lambda: None,
        )
        handlers['run_route']()

        assert fake_ui.timers == []
        assert fake_ui.notices == [('Source or target not set', 'warning')]
