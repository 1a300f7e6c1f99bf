"""
Abstract Base Class for Generative Processes

All process kinds (cellular automata, L-systems, agent fields) implement
this interface so the lab can drive any of them interchangeably.

Optional behaviour (pointer input, resize, teardown, actions, render
hints) is expressed as runtime-checkable protocols. Callers query them
with isinstance() before calling; a process that lacks one is skipped.
"""

import logging
from abc import ABC, abstractmethod
from typing import Protocol, runtime_checkable

from .params import ParamKind, coerce_value

logger = logging.getLogger(__name__)

# Pointer buttons as passed to handle_mouse_down
PRIMARY = 0
MIDDLE = 1
SECONDARY = 2


class GenerativeProcess(ABC):
    """Base class for generative processes."""

    label = ""  # display name, e.g. "Game of Life"
    PARAMETERS = ()

    def __init__(self, width, height):
        self.width = int(width)
        self.height = int(height)
        self.process_id = ""
        self.iteration = 0
        self.params = {
            d.key: d.default for d in self.get_parameters() if not _is_action(d)
        }

    @abstractmethod
    def step(self):
        """Advance exactly one iteration."""

    @abstractmethod
    def reset(self, randomize=True):
        """Reinitialize state.

        randomize=False must produce a deterministic blank configuration.
        Implementations set self.iteration back to 0.
        """

    def get_parameters(self):
        """Return the ordered tuple of ParamDescriptor entries."""
        return self.PARAMETERS

    def get_param_value(self, key):
        return self.params.get(key)

    def set_param_value(self, key, value):
        """Write a declared parameter. Undeclared keys are ignored."""
        desc = self._descriptor(key)
        if desc is None or _is_action(desc):
            logger.debug("%s: ignoring write to undeclared parameter %r",
                         type(self).__name__, key)
            return
        ok, val = coerce_value(desc, value)
        if not ok:
            logger.debug("%s: ignoring malformed value %r for %r",
                         type(self).__name__, value, key)
            return
        self.params[key] = val
        self.on_param_changed(key, val)

    def on_param_changed(self, key, value):
        """Hook for rebuilding derived state after a parameter write."""

    def get_iteration(self):
        return self.iteration

    def get_population(self):
        """Return a display metric, or None when the process has none."""
        return None

    def _descriptor(self, key):
        for desc in self.get_parameters():
            if desc.key == key:
                return desc
        return None


def _is_action(desc):
    return desc.kind is ParamKind.BUTTON


class NullProcess(GenerativeProcess):
    """Inert stand-in used when a requested process kind is unknown."""

    label = "Unknown"

    def step(self):
        self.iteration += 1

    def reset(self, randomize=True):
        self.iteration = 0


@runtime_checkable
class SupportsPointerDown(Protocol):
    def handle_mouse_down(self, x, y, button=0): ...


@runtime_checkable
class SupportsPointerMove(Protocol):
    def handle_mouse_move(self, x, y): ...


@runtime_checkable
class SupportsPointerUp(Protocol):
    def handle_mouse_up(self, x, y): ...


@runtime_checkable
class SupportsResize(Protocol):
    def on_resize(self, width, height): ...


@runtime_checkable
class SupportsTeardown(Protocol):
    def destroy(self): ...


@runtime_checkable
class SupportsActions(Protocol):
    def trigger_action(self, key): ...


@runtime_checkable
class SupportsVisualizationHints(Protocol):
    def get_visualization_hints(self): ...
