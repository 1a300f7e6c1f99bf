"""
Lab Configuration

Module-level defaults plus the LabConfig record the command line fills in.
"""

from dataclasses import dataclass

PANEL_WIDTH = 300
DEFAULT_WINDOW = (900, 700)

DEFAULT_PROCESS = "ca_life"

# Simulation rate in steps per second (speed slider range)
DEFAULT_RATE = 10
MIN_RATE = 1
MAX_RATE = 60

# Quiet period before a window resize is applied
RESIZE_DEBOUNCE_MS = 250

FRAME_RATE_CAP = 60

PALETTE_ORDER = ["default", "fire", "ocean", "neon", "mono"]
DEFAULT_PALETTE = "default"


@dataclass(frozen=True)
class LabConfig:
    width: int = DEFAULT_WINDOW[0]
    height: int = DEFAULT_WINDOW[1]
    start_process: str = DEFAULT_PROCESS
    rate: float = DEFAULT_RATE
    palette: str = DEFAULT_PALETTE
    grid_enabled: bool = False
    # Backing-store pixels per displayed pixel
    pixel_ratio: float = 1.0

    def backing_size(self, display_w, display_h):
        """Backing-store size for a canvas displayed at display_w x display_h."""
        return (max(1, int(display_w * self.pixel_ratio)),
                max(1, int(display_h * self.pixel_ratio)))
