"""
Brian's Brain - Three-State Excitable Automaton

- Off cells (0) start firing when exactly two neighbors are firing
- Firing cells (1) become dying
- Dying cells (2) switch off

Produces gliding, self-sustaining wave fronts. Unlike Life there is no
survival rule, so every firing cell lasts exactly one generation.
"""

import numpy as np

from .cell_grid import GRID_PARAMETERS, GridProcess
from .params import slider

OFF = 0
FIRING = 1
DYING = 2


class BriansBrain(GridProcess):

    label = "Brian's Brain"
    num_states = 3
    paint_state = FIRING
    PARAMETERS = (
        slider("density", "Seed density", 0.0, 1.0, 0.10, step=0.01),
    ) + GRID_PARAMETERS[1:]

    def step(self):
        """Advance one generation."""
        firing = self.cells == FIRING
        neighbors = self.count_neighbors(firing)

        new_cells = np.zeros_like(self.cells)
        new_cells[(self.cells == OFF) & (neighbors == 2)] = FIRING
        new_cells[firing] = DYING
        # DYING -> OFF is already the zero fill

        self.cells = new_cells
        self.iteration += 1

    def get_population(self):
        """Number of firing cells."""
        return int((self.cells == FIRING).sum())
