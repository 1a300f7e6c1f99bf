"""
Game of Life - Classic and Variant Cellular Automata

Supports arbitrary B/S (birth/survival) rule notation:
- B3/S23: Conway's Game of Life
- B36/S23: HighLife (self-replicating)
- B3678/S34678: Day & Night
"""

import numpy as np

from .cell_grid import GRID_PARAMETERS, GridProcess
from .params import text


def parse_rule(rule_str):
    """Parse B/S notation like 'B3/S23' into (birth_set, survive_set).

    Characters other than neighbor counts 0-8 are skipped.
    """
    rule_str = str(rule_str).upper().replace(" ", "")
    birth = set()
    survive = set()
    for part in rule_str.split("/"):
        counts = {int(c) for c in part[1:] if c.isdigit() and int(c) <= 8}
        if part.startswith("B"):
            birth = counts
        elif part.startswith("S"):
            survive = counts
    return birth, survive


class ConwayLife(GridProcess):

    label = "Game of Life"
    PARAMETERS = GRID_PARAMETERS + (
        text("rule", "Rule (B/S)", "B3/S23"),
    )

    def __init__(self, width, height):
        super().__init__(width, height)
        self.birth, self.survive = parse_rule(self.params["rule"])

    def on_param_changed(self, key, value):
        if key == "rule":
            self.birth, self.survive = parse_rule(value)

    def step(self):
        """Advance one generation."""
        alive = self.cells == 1
        neighbors = self.count_neighbors(alive)

        born = ~alive & np.isin(neighbors, sorted(self.birth))
        stays = alive & np.isin(neighbors, sorted(self.survive))
        self.cells = (born | stays).astype(np.int8)

        self.iteration += 1
