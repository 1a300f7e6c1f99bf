"""
Canvas Renderer

Turns process state into pixels on an off-screen pygame Surface at
backing-store resolution. The viewer scales that surface onto the
window; snapshot mode reads it back with to_rgb().

What to draw is chosen by the process's visualization hints:
  grid   - process.cells, integer states on a cell grid
  lines  - process.segments (N x 4) with branch depths process.depths
  field  - process.trail, a float intensity map (pixel-buffer path)
"""

import numpy as np
import pygame

from .colormaps import apply_colormap, get_colormap
from .config import DEFAULT_PALETTE


GRID_LINE_COLOR = (40, 44, 56)


class CanvasRenderer:

    def __init__(self, width, height, palette=DEFAULT_PALETTE):
        self.width = int(width)
        self.height = int(height)
        self.surface = pygame.Surface((self.width, self.height), 0, 32)
        self.grid_enabled = False
        self.palette = palette
        self.lut = get_colormap(palette)
        self.hints = {}
        self.pixel_buffer = None
        self.frames_rendered = 0
        self.clear()

    @property
    def background(self):
        return tuple(int(c) for c in self.lut[0])

    def set_visualization_params(self, grid_enabled=None, palette=None):
        if grid_enabled is not None:
            self.grid_enabled = bool(grid_enabled)
        if palette is not None:
            self.palette = palette
            self.lut = get_colormap(palette)

    def update_hints(self, hints):
        self.hints = dict(hints or {})

    def prepare_pixel_buffer(self):
        """Allocate the reusable (W, H, 3) buffer for dense field blits."""
        self.pixel_buffer = np.zeros((self.width, self.height, 3), dtype=np.uint8)

    def resize(self, width, height):
        self.width, self.height = int(width), int(height)
        self.surface = pygame.Surface((self.width, self.height), 0, 32)
        if self.pixel_buffer is not None:
            self.prepare_pixel_buffer()
        self.clear()

    def clear(self):
        self.surface.fill(self.background)

    def render(self, process):
        kind = self.hints.get("kind")
        if kind == "grid":
            self._render_grid(process)
        elif kind == "lines":
            self._render_lines(process)
        elif kind == "field":
            self._render_field(process)
        else:
            self.clear()
        self.frames_rendered += 1

    def to_rgb(self):
        """Copy of the canvas as an (H, W, 3) uint8 array."""
        return pygame.surfarray.array3d(self.surface).swapaxes(0, 1).copy()

    # --- drawing modes ---

    def _blit_rgb(self, rgb, buffer=None):
        """Blit an (H, W, 3) image at the origin, cropped to the canvas."""
        if buffer is None or buffer.shape != (self.width, self.height, 3):
            buffer = np.empty((self.width, self.height, 3), dtype=np.uint8)
        buffer[:] = self.background
        h = min(rgb.shape[0], self.height)
        w = min(rgb.shape[1], self.width)
        buffer[:w, :h] = rgb[:h, :w].swapaxes(0, 1)
        pygame.surfarray.blit_array(self.surface, buffer)

    def _render_grid(self, process):
        cells = getattr(process, "cells", None)
        if cells is None:
            self.clear()
            return
        cs = max(1, int(self.hints.get("cell_size", 1)))
        n = max(2, int(self.hints.get("num_states", 2)))

        # State 0 is background; later states fade toward the dark end
        levels = np.zeros(n)
        levels[1:] = np.linspace(1.0, 0.45, n - 1)
        rgb = apply_colormap(levels[np.clip(cells, 0, n - 1)], self.lut)
        rgb = np.repeat(np.repeat(rgb, cs, axis=0), cs, axis=1)
        self._blit_rgb(rgb)

        if self.grid_enabled and cs >= 3:
            for x in range(0, self.width, cs):
                pygame.draw.line(self.surface, GRID_LINE_COLOR, (x, 0), (x, self.height))
            for y in range(0, self.height, cs):
                pygame.draw.line(self.surface, GRID_LINE_COLOR, (0, y), (self.width, y))

    def _render_lines(self, process):
        self.clear()
        segments = getattr(process, "segments", None)
        if segments is None or len(segments) == 0:
            return
        depths = getattr(process, "depths", None)
        if depths is None or len(depths) != len(segments):
            depths = np.zeros(len(segments), dtype=np.int32)

        # Trunk at the bright end of the palette, tips toward the middle
        max_depth = max(1, int(depths.max()))
        indices = (255 - 140 * depths / max_depth).astype(np.int32)
        colors = self.lut[indices]
        for (x0, y0, x1, y1), color in zip(segments, colors):
            pygame.draw.aaline(self.surface, tuple(int(c) for c in color),
                               (x0, y0), (x1, y1))

    def _render_field(self, process):
        trail = getattr(process, "trail", None)
        if trail is None:
            self.clear()
            return
        peak = float(trail.max()) if trail.size else 0.0
        if peak > 0:
            norm = np.sqrt(trail / peak)
        else:
            norm = np.zeros_like(trail)
        self._blit_rgb(apply_colormap(norm, self.lut), self.pixel_buffer)
