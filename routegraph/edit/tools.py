"""
Tool palette entries.

A Tool is a mode: it decides how the next canvas click is interpreted.
An Action is a one-shot trigger bound to a button (e.g. "run").
"""

from dataclasses import dataclass
from typing import Callable, List, Union


@dataclass(frozen=True)
class Tool:
    name: str

    @property
    def icon(self) -> str:
        return f"{self.name}.png"


@dataclass(frozen=True)
class Action:
    name: str
    on_activate: Callable[[], object]

    @property
    def icon(self) -> str:
        return f"{self.name}.png"

    def activate(self):
        return self.on_activate()


PaletteEntry = Union[Tool, Action]

ADD_TOOL = Tool('add')
REMOVE_TOOL = Tool('remove')
SET_SOURCE_TOOL = Tool('set_source')
SET_TARGET_TOOL = Tool('set_target')

DEFAULT_TOOLS: List[Tool] = [ADD_TOOL, REMOVE_TOOL, SET_SOURCE_TOOL, SET_TARGET_TOOL]

RUN = 'run'


def make_run_action(callback: Callable[[], object]) -> Action:
    return Action(RUN, callback)
