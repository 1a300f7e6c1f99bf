"""
Simulation Scheduler

Two independent cadences on top of a FrameHost:
- stepping: while running, at most one step() per frame, and only once
  target_interval ms have passed since the last accepted tick;
- rendering: render requests are coalesced into a single draw on the
  next frame.

The running/paused state does not gate rendering, so a paused process
is still redrawn after a manual step or a parameter edit.
"""

import logging

from .config import DEFAULT_RATE, MAX_RATE, MIN_RATE

logger = logging.getLogger(__name__)


class Scheduler:

    def __init__(self, host, get_process, get_renderer, on_step=None,
                 rate=DEFAULT_RATE):
        """
        Args:
            host: FrameHost providing request_frame/cancel_frame
            get_process: callable returning the live process or None
            get_renderer: callable returning the renderer or None
            on_step: called after every step (status display refresh)
            rate: initial simulation rate in steps per second
        """
        self.host = host
        self._get_process = get_process
        self._get_renderer = get_renderer
        self._on_step = on_step

        self.running = False
        self.rate = DEFAULT_RATE
        self.target_interval = 1000.0 / DEFAULT_RATE
        self.set_rate(rate)

        self.last_tick = None
        self.render_pending = False
        self._loop_handle = None
        self._looping = False

    # --- running / paused ---

    def toggle_play_pause(self):
        self.running = not self.running
        logger.info("Simulation %s", "started" if self.running else "paused")
        return self.running

    def play(self):
        self.running = True

    def pause(self):
        self.running = False

    def set_rate(self, steps_per_second):
        """Set the stepping rate; takes effect on the next evaluated interval."""
        rate = min(MAX_RATE, max(MIN_RATE, float(steps_per_second)))
        self.rate = rate
        self.target_interval = 1000.0 / rate

    # --- frame loop ---

    @property
    def looping(self):
        return self._looping

    def start(self):
        if self._looping:
            return
        logger.debug("Starting animation loop")
        self._looping = True
        self.last_tick = self.host.now
        self._loop_handle = self.host.request_frame(self._animate)

    def stop(self):
        if not self._looping:
            return
        logger.debug("Stopping animation loop")
        self._looping = False
        if self._loop_handle is not None:
            self.host.cancel_frame(self._loop_handle)
            self._loop_handle = None

    def _animate(self, timestamp):
        if not self._looping:
            return
        if self.last_tick is None:
            self.last_tick = timestamp

        if self.running and timestamp - self.last_tick >= self.target_interval:
            process = self._get_process()
            if process is not None:
                try:
                    process.step()
                except Exception:
                    logger.exception("Step failed for %s", process.process_id)
                else:
                    self._notify_step()
                    self.request_render()
            # Anchor to this frame, never last_tick + interval: no catch-up bursts
            self.last_tick = timestamp

        self._loop_handle = self.host.request_frame(self._animate)

    def step_once(self):
        """Advance a single step regardless of the running state."""
        process = self._get_process()
        if process is None:
            return False
        process.step()
        self._notify_step()
        self.request_render()
        return True

    def _notify_step(self):
        if self._on_step is not None:
            self._on_step()

    # --- rendering ---

    def request_render(self):
        if self.render_pending:
            return
        self.render_pending = True
        self.host.request_frame(self._draw)

    def _draw(self, timestamp):
        try:
            renderer = self._get_renderer()
            process = self._get_process()
            if renderer is not None and process is not None:
                renderer.render(process)
        finally:
            self.render_pending = False
