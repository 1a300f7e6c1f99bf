"""
Frame Host - next-frame callbacks and timers

The viewer loop calls run_frame() once per display frame with a
millisecond timestamp. Components ask for work on the next frame with
request_frame() or after a delay with call_later(). Everything runs on
the caller's thread, one frame at a time.
"""

import itertools
import logging

logger = logging.getLogger(__name__)


class FrameHost:
    """Queue of next-frame callbacks and delayed timers."""

    def __init__(self):
        self.now = None  # timestamp of the frame being (or last) run
        self._handles = itertools.count(1)
        self._frame_callbacks = {}  # handle -> callback(timestamp)
        self._timers = {}           # handle -> (due, callback, args)

    def request_frame(self, callback):
        """Run callback(timestamp) on the next frame. Returns a handle."""
        handle = next(self._handles)
        self._frame_callbacks[handle] = callback
        return handle

    def cancel_frame(self, handle):
        self._frame_callbacks.pop(handle, None)

    def call_later(self, delay_ms, callback, *args):
        """Run callback(*args) on the first frame at least delay_ms from now."""
        handle = next(self._handles)
        start = self.now if self.now is not None else 0.0
        self._timers[handle] = (start + delay_ms, callback, args)
        return handle

    def cancel_timer(self, handle):
        self._timers.pop(handle, None)

    @property
    def pending_frames(self):
        return len(self._frame_callbacks)

    def run_frame(self, timestamp):
        """Fire due timers, then every frame callback queued before this frame.

        Callbacks requested while this runs wait for the next frame. A
        callback that raises is logged and the rest still run.
        """
        self.now = timestamp

        due = [h for h, (when, _, _) in self._timers.items() if when <= timestamp]
        for handle in sorted(due):
            entry = self._timers.pop(handle, None)
            if entry is not None:
                _, callback, args = entry
                self._invoke(callback, *args)

        pending, self._frame_callbacks = self._frame_callbacks, {}
        for callback in pending.values():
            self._invoke(callback, timestamp)

    @staticmethod
    def _invoke(callback, *args):
        try:
            callback(*args)
        except Exception:
            logger.exception("Callback %r failed", callback)


class Debouncer:
    """Collapse a burst of trigger() calls into one call after a quiet period."""

    def __init__(self, host, delay_ms, callback):
        self.host = host
        self.delay_ms = delay_ms
        self.callback = callback
        self._timer = None

    @property
    def pending(self):
        return self._timer is not None

    def trigger(self, *args):
        if self._timer is not None:
            self.host.cancel_timer(self._timer)
        self._timer = self.host.call_later(self.delay_ms, self._fire, *args)

    def cancel(self):
        if self._timer is not None:
            self.host.cancel_timer(self._timer)
            self._timer = None

    def _fire(self, *args):
        self._timer = None
        self.callback(*args)
