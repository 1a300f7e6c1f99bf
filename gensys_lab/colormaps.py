"""
Colormaps for the Canvas Renderer

Maps float values [0, 1] to RGB colors. Each colormap is a (256, 3)
uint8 array used as a lookup table. Index 0 doubles as the background.
"""

import numpy as np


def _interpolate_colors(stops, n=256):
    """
    Build a colormap by smoothstep interpolation between color stops.

    Args:
        stops: List of (position, (r, g, b)) where position is [0, 1]
        n: Number of entries in the LUT
    """
    positions = np.array([s[0] for s in stops], dtype=np.float64)
    colors = np.array([s[1] for s in stops], dtype=np.float64)
    t = np.linspace(0.0, 1.0, n)

    # Segment index for every t, then smoothstep within the segment
    idx = np.clip(np.searchsorted(positions, t, side="right") - 1, 0, len(stops) - 2)
    span = positions[idx + 1] - positions[idx]
    frac = np.where(span > 0, (t - positions[idx]) / np.where(span > 0, span, 1), 0.0)
    frac = np.clip(frac, 0.0, 1.0)
    frac = frac * frac * (3 - 2 * frac)

    lut = colors[idx] + frac[:, None] * (colors[idx + 1] - colors[idx])
    return np.clip(lut, 0, 255).astype(np.uint8)


# --- Colormap Definitions ---

def default():
    """Dark slate background, teal body, pale highlights."""
    return _interpolate_colors([
        (0.00, (14, 16, 24)),
        (0.35, (20, 90, 110)),
        (0.70, (60, 200, 190)),
        (1.00, (235, 250, 240)),
    ])


def fire():
    """Black-red-orange-yellow-white heat gradient."""
    return _interpolate_colors([
        (0.00, (0, 0, 0)),
        (0.25, (120, 10, 0)),
        (0.50, (220, 60, 0)),
        (0.75, (255, 180, 20)),
        (1.00, (255, 255, 220)),
    ])


def ocean():
    """Deep navy to cyan foam."""
    return _interpolate_colors([
        (0.00, (2, 6, 20)),
        (0.30, (10, 40, 90)),
        (0.60, (20, 120, 170)),
        (0.85, (80, 210, 220)),
        (1.00, (220, 250, 255)),
    ])


def neon():
    """Near black, purple, hot pink, electric green."""
    return _interpolate_colors([
        (0.00, (5, 2, 8)),
        (0.30, (90, 20, 140)),
        (0.60, (230, 30, 140)),
        (0.85, (60, 240, 120)),
        (1.00, (200, 255, 200)),
    ])


def mono():
    """Black to white."""
    return _interpolate_colors([
        (0.00, (0, 0, 0)),
        (1.00, (255, 255, 255)),
    ])


COLORMAPS = {
    "default": default,
    "fire": fire,
    "ocean": ocean,
    "neon": neon,
    "mono": mono,
}

_cache = {}


def get_colormap(name):
    """Get a colormap LUT by name. Unknown names fall back to 'default'."""
    if name not in COLORMAPS:
        name = "default"
    if name not in _cache:
        _cache[name] = COLORMAPS[name]()
    return _cache[name]


def apply_colormap(field, lut):
    """
    Apply a colormap LUT to a float field in [0, 1].

    Args:
        field: 2D float array with values in [0, 1]
        lut: (256, 3) uint8 colormap

    Returns:
        (H, W, 3) uint8 RGB image
    """
    indices = np.clip(field * 255, 0, 255).astype(np.uint8)
    return lut[indices]
