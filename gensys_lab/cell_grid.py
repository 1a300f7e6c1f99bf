"""
Shared grid machinery for discrete cellular automata.

The canvas is divided into square cells of `cell_size` pixels. Cell
states are small integers held in `self.cells` (rows x cols); the
renderer maps them through the active palette.
"""

import numpy as np

from .params import button, checkbox, number, slider
from .process_base import GenerativeProcess, SECONDARY


GRID_PARAMETERS = (
    slider("density", "Seed density", 0.0, 1.0, 0.25, step=0.01,
           tooltip="Fraction of cells switched on by a randomized reset"),
    number("cell_size", "Cell size (px)", 6, min_val=1, max_val=40, resets=True),
    checkbox("wrap", "Wrap edges", True),
    button("randomize", "Seed", button_text="Randomize"),
)


def _count_moore_wrapped(grid):
    """Count Moore neighborhood (8 neighbors) with periodic boundaries."""
    n = np.zeros_like(grid)
    for dy in (-1, 0, 1):
        for dx in (-1, 0, 1):
            if dy == 0 and dx == 0:
                continue
            n += np.roll(np.roll(grid, dy, axis=0), dx, axis=1)
    return n


def _count_moore_bounded(grid):
    """Count Moore neighborhood with dead cells beyond the border."""
    rows, cols = grid.shape
    padded = np.pad(grid, 1)
    n = np.zeros_like(grid)
    for dy in range(3):
        for dx in range(3):
            if dy == 1 and dx == 1:
                continue
            n += padded[dy:dy + rows, dx:dx + cols]
    return n


class GridProcess(GenerativeProcess):
    """Base for automata living on a rectangular cell grid."""

    num_states = 2
    paint_state = 1  # state painted by the primary button
    PARAMETERS = GRID_PARAMETERS

    def __init__(self, width, height):
        super().__init__(width, height)
        self.rng = np.random.default_rng()
        self.cells = np.zeros(self._grid_shape(), dtype=np.int8)
        self._brush_state = None

    @property
    def cell_size(self):
        return int(self.params["cell_size"])

    def _grid_shape(self):
        cs = self.cell_size
        return max(1, self.height // cs), max(1, self.width // cs)

    def reset(self, randomize=True):
        self.cells = np.zeros(self._grid_shape(), dtype=np.int8)
        if randomize:
            self._seed_random(self.params["density"])
        self.iteration = 0

    def _seed_random(self, density):
        alive = self.rng.random(self.cells.shape) < density
        self.cells[alive] = self.paint_state

    def count_neighbors(self, mask):
        """Number of neighbors where mask is True, per cell."""
        grid = mask.astype(np.int16)
        if self.params["wrap"]:
            return _count_moore_wrapped(grid)
        return _count_moore_bounded(grid)

    def get_population(self):
        return int((self.cells == self.paint_state).sum())

    def get_visualization_hints(self):
        return {
            "kind": "grid",
            "cell_size": self.cell_size,
            "num_states": self.num_states,
        }

    def trigger_action(self, key):
        if key == "randomize":
            self.reset(True)

    # --- pointer painting ---

    def handle_mouse_down(self, x, y, button=0):
        self._brush_state = 0 if button == SECONDARY else self.paint_state
        self._paint(x, y)

    def handle_mouse_move(self, x, y):
        if self._brush_state is not None:
            self._paint(x, y)

    def handle_mouse_up(self, x, y):
        self._brush_state = None

    def _paint(self, x, y):
        row = int(y // self.cell_size)
        col = int(x // self.cell_size)
        rows, cols = self.cells.shape
        if 0 <= row < rows and 0 <= col < cols:
            self.cells[row, col] = self._brush_state

    def on_resize(self, width, height):
        """Rebuild the grid for a new canvas, keeping the overlapping cells."""
        self.width, self.height = int(width), int(height)
        old = self.cells
        self.cells = np.zeros(self._grid_shape(), dtype=np.int8)
        rows = min(old.shape[0], self.cells.shape[0])
        cols = min(old.shape[1], self.cells.shape[1])
        self.cells[:rows, :cols] = old[:rows, :cols]
