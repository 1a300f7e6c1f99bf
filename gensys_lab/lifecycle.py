"""
Lab Lifecycle Controller

Owns the live process and is the only place that replaces it. Switching,
reset, clear and resize go through here so the scheduler, pointer
dispatcher, renderer and parameter panel always agree on which process
is current.

Collaborators:
  renderer  - render(process), clear(), resize(w, h),
              set_visualization_params(**kw), update_hints(hints),
              optionally prepare_pixel_buffer()
  param_ui  - populate(process), show_error(message)
"""

import logging
from dataclasses import dataclass
from typing import Optional, Protocol, runtime_checkable

from .config import RESIZE_DEBOUNCE_MS, LabConfig
from .frame_host import Debouncer
from .interaction import PointerDispatcher, SurfaceGeometry
from .process_base import (
    SupportsActions, SupportsResize, SupportsTeardown, SupportsVisualizationHints,
)
from .registry import create_process
from .scheduler import Scheduler

logger = logging.getLogger(__name__)

NO_PROCESS_NAME = "No System"
LOAD_ERROR = "Error loading system."


@runtime_checkable
class SupportsPixelBuffer(Protocol):
    def prepare_pixel_buffer(self): ...


@dataclass
class LabStatus:
    name: str
    iteration: int
    population: Optional[float]
    running: bool
    rate: float
    error: Optional[str] = None

    @property
    def population_text(self):
        if self.population is None:
            return "-"
        if isinstance(self.population, float):
            return f"{self.population:.2f}"
        return f"{self.population:,}"


class LabController:

    def __init__(self, host, renderer=None, param_ui=None, display_size=None,
                 config=None):
        """
        Args:
            host: FrameHost driving the scheduler and resize debounce
            renderer: drawing collaborator (may be None for headless use)
            param_ui: parameter panel collaborator (may be None)
            display_size: (w, h) of the displayed canvas area
            config: LabConfig with rate, palette and pixel ratio
        """
        self.config = config or LabConfig()
        self.host = host
        self.renderer = renderer
        self.param_ui = param_ui

        if display_size is None:
            display_size = (self.config.width, self.config.height)
        display_w, display_h = display_size
        self.width, self.height = self.config.backing_size(display_w, display_h)

        self._process = None
        self.error = None
        self.last_result = None
        self.visualization = {
            "grid_enabled": self.config.grid_enabled,
            "palette": self.config.palette,
        }
        self._status_listeners = []

        self.scheduler = Scheduler(
            host,
            get_process=lambda: self._process,
            get_renderer=lambda: self.renderer,
            on_step=self._refresh_status,
            rate=self.config.rate,
        )
        self.dispatcher = PointerDispatcher(
            get_process=lambda: self._process,
            request_render=self.scheduler.request_render,
            geometry=SurfaceGeometry(0, 0, display_w, display_h,
                                     self.width, self.height),
        )
        self._resize_debounce = Debouncer(host, RESIZE_DEBOUNCE_MS, self.handle_resize)

        if self.renderer is not None:
            self.renderer.resize(self.width, self.height)

    @property
    def process(self):
        return self._process

    @property
    def running(self):
        return self.scheduler.running

    # --- status ---

    def add_status_listener(self, callback):
        self._status_listeners.append(callback)

    def status(self):
        process = self._process
        if process is None:
            return LabStatus(NO_PROCESS_NAME, 0, None, self.running,
                             self.scheduler.rate, self.error)
        return LabStatus(
            name=process.label or "Unknown",
            iteration=process.get_iteration(),
            population=process.get_population(),
            running=self.running,
            rate=self.scheduler.rate,
        )

    def _refresh_status(self):
        status = self.status()
        for callback in self._status_listeners:
            callback(status)

    # --- process switching ---

    def load_process(self, process_id):
        """Replace the live process. Returns False when construction failed."""
        logger.info("Loading process: %s", process_id)
        self.scheduler.pause()
        self.dispatcher.cancel()

        outgoing, self._process = self._process, None
        if isinstance(outgoing, SupportsTeardown):
            outgoing.destroy()

        result = create_process(process_id, self.width, self.height)
        self.last_result = result
        if not result.usable:
            logger.error("Failed to create instance for process id %r", process_id)
            self.error = LOAD_ERROR
            if self.param_ui is not None:
                self.param_ui.show_error(LOAD_ERROR)
            if self.renderer is not None:
                self.renderer.clear()
            self._refresh_status()
            return False

        self.error = None
        process = result.process
        process.reset(True)
        self._process = process

        if self.param_ui is not None:
            self.param_ui.populate(process)
        if self.renderer is not None:
            self.renderer.set_visualization_params(**self.visualization)
            self._forward_hints(process)

        self._refresh_status()
        self.scheduler.request_render()
        return True

    def _forward_hints(self, process):
        if self.renderer is None:
            return
        hints = {}
        if isinstance(process, SupportsVisualizationHints):
            hints = process.get_visualization_hints() or {}
        self.renderer.update_hints(hints)
        if hints.get("pixel_buffer") and isinstance(self.renderer, SupportsPixelBuffer):
            self.renderer.prepare_pixel_buffer()

    # --- simulation controls ---

    def toggle_play_pause(self):
        running = self.scheduler.toggle_play_pause()
        self._refresh_status()
        return running

    def step_once(self):
        return self.scheduler.step_once()

    def set_speed(self, rate):
        self.scheduler.set_rate(rate)
        self._refresh_status()

    def reset(self):
        if self._process is None:
            return
        self.scheduler.pause()
        self._process.reset(True)
        logger.info("Simulation reset")
        self._refresh_status()
        self.scheduler.request_render()

    def clear(self):
        if self._process is None:
            return
        self.scheduler.pause()
        if self.renderer is not None:
            self.renderer.clear()
        self._process.reset(False)
        logger.info("Simulation cleared")
        self._refresh_status()
        self.scheduler.request_render()

    # --- parameters and visualization ---

    def set_param_value(self, key, value):
        process = self._process
        if process is None:
            return
        process.set_param_value(key, value)
        desc = next((d for d in process.get_parameters() if d.key == key), None)
        if desc is not None and desc.resets:
            process.reset(True)
        self._forward_hints(process)
        self._refresh_status()
        self.scheduler.request_render()

    def trigger_action(self, key):
        process = self._process
        if process is None:
            return
        if isinstance(process, SupportsActions):
            process.trigger_action(key)
            self._forward_hints(process)
            self._refresh_status()
        self.scheduler.request_render()

    def set_visualization_params(self, grid_enabled=None, palette=None):
        changes = {}
        if grid_enabled is not None:
            changes["grid_enabled"] = bool(grid_enabled)
        if palette is not None:
            changes["palette"] = palette
        self.visualization.update(changes)
        if self.renderer is not None and changes:
            self.renderer.set_visualization_params(**changes)
        self.scheduler.request_render()

    # --- geometry ---

    def set_display_rect(self, left, top, width, height):
        """Record where the canvas is displayed. The backing store is unchanged."""
        geometry = self.dispatcher.geometry
        geometry.left, geometry.top = left, top
        geometry.display_width, geometry.display_height = width, height

    def request_resize(self, container_w, container_h):
        """Debounced: only the last request of a burst is handled."""
        self._resize_debounce.trigger(container_w, container_h)

    def handle_resize(self, container_w, container_h):
        if container_w <= 0 or container_h <= 0:
            return
        self.width, self.height = self.config.backing_size(container_w, container_h)
        geometry = self.dispatcher.geometry
        geometry.display_width, geometry.display_height = container_w, container_h
        geometry.backing_width, geometry.backing_height = self.width, self.height
        logger.info("Canvas resized to: %dx%d", self.width, self.height)

        if self.renderer is not None:
            self.renderer.resize(self.width, self.height)
        if isinstance(self._process, SupportsResize):
            self._process.on_resize(self.width, self.height)
        self.scheduler.request_render()

    # --- loop ---

    def start(self):
        self.scheduler.start()

    def shutdown(self):
        """Stop the loop and tear down the live process."""
        self.scheduler.stop()
        self._resize_debounce.cancel()
        process, self._process = self._process, None
        if isinstance(process, SupportsTeardown):
            process.destroy()
