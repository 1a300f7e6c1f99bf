"""
Physarum Slime Mold - Stigmergic Agent System

Thousands of agents walk over a shared trail map. Each step every agent:
1. Samples the trail at three sensors (left, ahead, right)
2. Turns toward the strongest reading (randomly when ahead is weakest)
3. Moves forward and deposits trail at its new cell

The trail then diffuses (3x3 mean) and decays, so paths that many agents
reinforce survive while abandoned ones fade. The result is a transport
network similar to Physarum polycephalum.
"""

import logging

import numpy as np
from scipy.ndimage import uniform_filter

from .params import button, checkbox, number, slider
from .process_base import GenerativeProcess, SECONDARY

logger = logging.getLogger(__name__)


class SlimeMold(GenerativeProcess):

    label = "Slime Mold"
    PARAMETERS = (
        number("agents", "Agents", 4000, min_val=0, max_val=50000, step=100,
               resets=True),
        slider("sensor_angle", "Sensor angle", 5.0, 90.0, 30.0, step=1, fmt=".0f"),
        slider("sensor_distance", "Sensor distance", 1.0, 30.0, 9.0, step=1, fmt=".0f"),
        slider("turn_speed", "Turn speed", 0.0, 90.0, 25.0, step=1, fmt=".0f"),
        slider("move_speed", "Move speed", 0.2, 5.0, 1.0, step=0.1, fmt=".1f"),
        slider("deposit", "Deposit", 0.0, 5.0, 1.0, step=0.1, fmt=".1f"),
        slider("decay", "Trail decay", 0.5, 1.0, 0.95, step=0.01),
        checkbox("diffuse", "Diffuse trail", True),
        button("scatter", "Agents", button_text="Scatter agents"),
    )

    brush_radius = 12
    brush_value = 5.0

    def __init__(self, width, height):
        super().__init__(width, height)
        self.rng = np.random.default_rng()
        self.trail = np.zeros((self.height, self.width), dtype=np.float32)
        self.pos = np.zeros((0, 2), dtype=np.float64)
        self.heading = np.zeros(0, dtype=np.float64)
        self._brush = None

    def reset(self, randomize=True):
        self.trail = np.zeros((self.height, self.width), dtype=np.float32)
        if randomize:
            self._scatter(int(self.params["agents"]))
        else:
            self.pos = np.zeros((0, 2), dtype=np.float64)
            self.heading = np.zeros(0, dtype=np.float64)
        self.iteration = 0

    def _scatter(self, n):
        """Place n agents uniformly inside a centered disc, random headings."""
        radius = 0.35 * min(self.width, self.height)
        r = radius * np.sqrt(self.rng.random(n))
        theta = self.rng.random(n) * 2 * np.pi
        self.pos = np.column_stack([
            self.width / 2 + r * np.cos(theta),
            self.height / 2 + r * np.sin(theta),
        ])
        self.heading = self.rng.random(n) * 2 * np.pi

    def _sense(self, offset, distance):
        h, w = self.trail.shape
        ang = self.heading + offset
        sx = (self.pos[:, 0] + np.cos(ang) * distance).astype(np.int64) % w
        sy = (self.pos[:, 1] + np.sin(ang) * distance).astype(np.int64) % h
        return self.trail[sy, sx]

    def step(self):
        """Sense, steer, move, deposit, then diffuse and decay the trail."""
        p = self.params
        n = len(self.heading)
        h, w = self.trail.shape

        if n:
            sensor_angle = np.radians(p["sensor_angle"])
            left = self._sense(sensor_angle, p["sensor_distance"])
            ahead = self._sense(0.0, p["sensor_distance"])
            right = self._sense(-sensor_angle, p["sensor_distance"])

            turn = np.radians(p["turn_speed"])
            steer = np.zeros(n)
            keep = (ahead > left) & (ahead > right)
            wander = (ahead < left) & (ahead < right)
            steer[wander] = (self.rng.random(int(wander.sum())) - 0.5) * 2 * turn
            other = ~keep & ~wander
            steer[other & (left > right)] = turn
            steer[other & (right > left)] = -turn
            self.heading = (self.heading + steer) % (2 * np.pi)

            self.pos[:, 0] = (self.pos[:, 0] + np.cos(self.heading) * p["move_speed"]) % w
            self.pos[:, 1] = (self.pos[:, 1] + np.sin(self.heading) * p["move_speed"]) % h

            cx = self.pos[:, 0].astype(np.int64) % w
            cy = self.pos[:, 1].astype(np.int64) % h
            np.add.at(self.trail, (cy, cx), p["deposit"])

        if p["diffuse"]:
            self.trail = uniform_filter(self.trail, size=3, mode="wrap")
        self.trail *= p["decay"]

        self.iteration += 1

    def get_population(self):
        """Number of live agents."""
        return 0 if self.heading is None else len(self.heading)

    def get_visualization_hints(self):
        return {"kind": "field", "pixel_buffer": True}

    def trigger_action(self, key):
        if key == "scatter":
            self._scatter(int(self.params["agents"]))

    # --- pointer: primary lays trail, secondary erases ---

    def handle_mouse_down(self, x, y, button=0):
        self._brush = 0.0 if button == SECONDARY else self.brush_value
        self._paint(x, y)

    def handle_mouse_move(self, x, y):
        if self._brush is not None:
            self._paint(x, y)

    def handle_mouse_up(self, x, y):
        self._brush = None

    def _paint(self, x, y):
        h, w = self.trail.shape
        Y, X = np.ogrid[:h, :w]
        mask = (X - x) ** 2 + (Y - y) ** 2 < self.brush_radius ** 2
        if self._brush:
            self.trail[mask] += self._brush
        else:
            self.trail[mask] = 0.0

    def on_resize(self, width, height):
        """Resize the trail map, keeping overlap, and rescale agent positions."""
        width, height = int(width), int(height)
        old = self.trail
        self.trail = np.zeros((height, width), dtype=np.float32)
        rows = min(old.shape[0], height)
        cols = min(old.shape[1], width)
        self.trail[:rows, :cols] = old[:rows, :cols]
        if len(self.pos):
            self.pos[:, 0] *= width / self.width
            self.pos[:, 1] *= height / self.height
        self.width, self.height = width, height

    def destroy(self):
        """Release the trail map and agent arrays."""
        logger.debug("Releasing slime mold buffers (%d agents)", self.get_population())
        self.trail = None
        self.pos = None
        self.heading = None
