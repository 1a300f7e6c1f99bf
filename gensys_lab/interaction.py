"""
Pointer Interaction

Translates window-space pointer events into process (backing-store)
coordinates and forwards them to processes that accept pointer input.
The canvas backing store can differ from its displayed size, e.g. with a
pixel ratio below 1 or between a window resize and the debounced
resize handling.
"""

from dataclasses import dataclass

from .process_base import (
    MIDDLE, PRIMARY, SECONDARY, SupportsPointerDown, SupportsPointerMove, SupportsPointerUp,
)

_PYGAME_BUTTONS = {1: PRIMARY, 2: MIDDLE, 3: SECONDARY}


def from_pygame_button(button):
    """Map pygame's 1/2/3 button numbers to PRIMARY/MIDDLE/SECONDARY.

    Wheel buttons map to None.
    """
    return _PYGAME_BUTTONS.get(button)


@dataclass
class SurfaceGeometry:
    """Where the canvas is displayed and how large its backing store is."""

    left: float
    top: float
    display_width: float
    display_height: float
    backing_width: int
    backing_height: int

    def contains(self, client_x, client_y):
        return (self.left <= client_x < self.left + self.display_width and
                self.top <= client_y < self.top + self.display_height)

    def to_backing(self, client_x, client_y):
        scale_x = self.backing_width / self.display_width
        scale_y = self.backing_height / self.display_height
        return ((client_x - self.left) * scale_x,
                (client_y - self.top) * scale_y)


class PointerDispatcher:
    """Drag-style pointer routing to the live process.

    Each handler is optional on its own: a process that only implements
    handle_mouse_down still receives clicks.
    """

    def __init__(self, get_process, request_render, geometry=None):
        self._get_process = get_process
        self._request_render = request_render
        self.geometry = geometry
        self.pointer_down_flag = False

    def _target(self, capability):
        process = self._get_process()
        if isinstance(process, capability):
            return process
        return None

    def pointer_down(self, client_x, client_y, button=PRIMARY):
        """Returns True when the press landed on the surface."""
        if self.geometry is None or not self.geometry.contains(client_x, client_y):
            return False
        self.pointer_down_flag = True
        process = self._target(SupportsPointerDown)
        if process is not None:
            x, y = self.geometry.to_backing(client_x, client_y)
            process.handle_mouse_down(x, y, button)
            self._request_render()
        return True

    def pointer_move(self, client_x, client_y):
        if not self.pointer_down_flag:
            return
        process = self._target(SupportsPointerMove)
        if process is not None:
            x, y = self.geometry.to_backing(client_x, client_y)
            process.handle_mouse_move(x, y)
            self._request_render()

    def pointer_up(self, client_x, client_y):
        """Release the drag. The final position is forwarded even off-surface."""
        if not self.pointer_down_flag:
            return
        self.pointer_down_flag = False
        process = self._target(SupportsPointerUp)
        if process is not None:
            x, y = self.geometry.to_backing(client_x, client_y)
            process.handle_mouse_up(x, y)
            self._request_render()

    def cancel(self):
        """Drop drag state, e.g. when the process is replaced mid-drag."""
        self.pointer_down_flag = False
