"""
L-System Fractal Generators

Each step applies one parallel rewrite of the current string (up to a
maximum derivation depth), then a turtle pass turns the string into line
segments fitted to the canvas.

Turtle commands:
  F, G   draw forward one unit
  f      move forward without drawing
  + / -  turn left / right by the angle
  |      turn around
  [ / ]  push / pop turtle state (branching)
Other symbols are placeholders that only take part in rewriting.
"""

import math

import numpy as np

from .params import button, number, slider, text, textarea
from .process_base import GenerativeProcess

MAX_SYMBOLS = 250_000


def parse_rules(rules_text):
    """Parse 'X=F+[X]' or 'X->F+[X]' lines into a {symbol: replacement} dict.

    Blank and malformed lines are skipped.
    """
    rules = {}
    for line in str(rules_text).splitlines():
        line = line.strip()
        if "->" in line:
            head, _, body = line.partition("->")
        elif "=" in line:
            head, _, body = line.partition("=")
        else:
            continue
        head = head.strip()
        if len(head) != 1:
            continue
        rules[head] = body.strip()
    return rules


def rewrite(symbols, rules):
    """Apply one generation of parallel rewriting."""
    return "".join(rules.get(ch, ch) for ch in symbols)


def interpret(symbols, angle_deg, start_heading=90.0, jitter_deg=0.0, rng=None):
    """Walk the turtle over symbols.

    Returns (segments, depths): segments is an (N, 4) array of
    x0, y0, x1, y1 in turtle space (y up), depths the branch nesting
    level of each segment.
    """
    x = y = 0.0
    heading = start_heading
    stack = []
    segments = []
    depths = []

    for ch in symbols:
        if ch in "FGf":
            rad = math.radians(heading)
            nx, ny = x + math.cos(rad), y + math.sin(rad)
            if ch != "f":
                segments.append((x, y, nx, ny))
                depths.append(len(stack))
            x, y = nx, ny
        elif ch in "+-":
            turn = angle_deg
            if jitter_deg and rng is not None:
                turn += rng.uniform(-jitter_deg, jitter_deg)
            heading += turn if ch == "+" else -turn
        elif ch == "|":
            heading += 180.0
        elif ch == "[":
            stack.append((x, y, heading))
        elif ch == "]" and stack:
            x, y, heading = stack.pop()

    segs = np.array(segments, dtype=np.float64).reshape(-1, 4)
    return segs, np.array(depths, dtype=np.int32)


def fit_to_canvas(segments, width, height, margin=0.05):
    """Scale and center turtle-space segments into canvas pixels (y down)."""
    if len(segments) == 0:
        return segments.copy()
    xs = segments[:, [0, 2]]
    ys = -segments[:, [1, 3]]
    min_x, max_x = xs.min(), xs.max()
    min_y, max_y = ys.min(), ys.max()
    span_x = max(max_x - min_x, 1e-9)
    span_y = max(max_y - min_y, 1e-9)

    scale = min(width * (1 - 2 * margin) / span_x,
                height * (1 - 2 * margin) / span_y)
    off_x = (width - span_x * scale) / 2 - min_x * scale
    off_y = (height - span_y * scale) / 2 - min_y * scale

    out = np.empty_like(segments)
    out[:, [0, 2]] = xs * scale + off_x
    out[:, [1, 3]] = ys * scale + off_y
    return out


def _lsystem_parameters(axiom, rules, angle, max_depth, jitter):
    return (
        text("axiom", "Axiom", axiom, resets=True),
        textarea("rules", "Rules (one per line)", rules, rows=4, resets=True),
        slider("angle", "Angle", 0.0, 180.0, angle, step=0.5, fmt=".1f"),
        number("max_depth", "Max depth", max_depth, min_val=0, max_val=9),
        slider("jitter", "Angle jitter", 0.0, 20.0, jitter, step=0.5, fmt=".1f",
               tooltip="Random variation per turn, fixed until the next reset"),
        button("regrow", "Growth", button_text="Regrow"),
    )


class LSystem(GenerativeProcess):
    """Rewriting system drawn with turtle graphics."""

    start_heading = 90.0

    def __init__(self, width, height):
        super().__init__(width, height)
        self.rng = np.random.default_rng()
        self.rules = parse_rules(self.params["rules"])
        self.symbols = ""
        self.depth = 0
        self._turn_seed = 0
        self.segments = np.zeros((0, 4))
        self.depths = np.zeros(0, dtype=np.int32)

    def on_param_changed(self, key, value):
        if key == "rules":
            self.rules = parse_rules(value)
        elif key in ("angle", "jitter"):
            self._interpret()

    def reset(self, randomize=True):
        self.iteration = 0
        self.depth = 0
        if randomize:
            self.symbols = self.params["axiom"]
            self._turn_seed = int(self.rng.integers(2 ** 31))
        else:
            self.symbols = ""
            self._turn_seed = 0
        self._interpret()

    def step(self):
        """Rewrite once. Past max depth the drawing is complete and unchanged."""
        self.iteration += 1
        if not self.symbols or self.depth >= self.params["max_depth"]:
            return
        grown = rewrite(self.symbols, self.rules)
        if len(grown) > MAX_SYMBOLS or grown == self.symbols:
            return
        self.symbols = grown
        self.depth += 1
        self._interpret()

    def _interpret(self):
        segs, depths = interpret(
            self.symbols, self.params["angle"],
            start_heading=self.start_heading,
            jitter_deg=self.params["jitter"],
            rng=np.random.default_rng(self._turn_seed),
        )
        self.segments = fit_to_canvas(segs, self.width, self.height)
        self.depths = depths

    def get_population(self):
        """Length of the current string."""
        return len(self.symbols)

    def get_visualization_hints(self):
        return {
            "kind": "lines",
            "max_depth": int(self.depths.max()) if len(self.depths) else 0,
        }

    def trigger_action(self, key):
        if key == "regrow":
            self.reset(True)

    def on_resize(self, width, height):
        self.width, self.height = int(width), int(height)
        self._interpret()


class LSystemTree(LSystem):

    label = "Fractal Plant"
    PARAMETERS = _lsystem_parameters(
        "X", "X=F+[[X]-X]-F[-FX]+X\nF=FF", 25.0, 6, 4.0)


class KochSnowflake(LSystem):

    label = "Koch Snowflake"
    start_heading = 0.0
    PARAMETERS = _lsystem_parameters(
        "F--F--F", "F=F+F--F+F", 60.0, 5, 0.0)
