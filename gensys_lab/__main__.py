"""
Generative Systems Lab - Entry Point

Usage:
    python -m gensys_lab [process] [--window WxH] [--rate N] [--palette P]
                         [--pixel-ratio F] [--grid] [--snap N] [--out PATH]
                         [--verbose]

Examples:
    python -m gensys_lab
    python -m gensys_lab agent_slime --rate 30
    python -m gensys_lab l_system_tree --palette neon --window 1200x900
    python -m gensys_lab ca_brain --snap 200 --out brain.png

Processes:
    ca_life        - Conway's Game of Life (B/S rule strings)
    ca_brain       - Brian's Brain three-state automaton
    l_system_tree  - Branching fractal plant
    l_system_koch  - Koch snowflake
    agent_slime    - Physarum-style slime mold agents

Use --list to see all available processes.
"""

import logging
import os
import sys

from .config import DEFAULT_PROCESS, DEFAULT_RATE, DEFAULT_WINDOW, PALETTE_ORDER, LabConfig
from .registry import PROCESS_ORDER, get_label, list_processes

logger = logging.getLogger(__name__)


def snap(config, steps, out_path=None):
    """Headless mode: run N steps, save a PNG of the canvas, exit."""
    import numpy as np
    from PIL import Image

    from .frame_host import FrameHost
    from .lifecycle import LabController
    from .renderer import CanvasRenderer

    host = FrameHost()
    renderer = CanvasRenderer(config.width, config.height, config.palette)
    controller = LabController(host, renderer=renderer, config=config)
    if not controller.load_process(config.start_process):
        print(f"Could not create process: {config.start_process}")
        return None

    print(f"  {get_label(config.start_process)}: running {steps} steps...", end="", flush=True)
    for _ in range(steps):
        controller.step_once()
    # Flush the coalesced render request
    host.run_frame(0)

    rgb = renderer.to_rgb()
    if out_path is None:
        screenshots_dir = os.path.join(os.getcwd(), "screenshots")
        os.makedirs(screenshots_dir, exist_ok=True)
        out_path = os.path.join(screenshots_dir, f"snap_{config.start_process}.png")
    Image.fromarray(np.ascontiguousarray(rgb)).save(out_path)
    print(f" saved: {out_path}")

    status = controller.status()
    controller.shutdown()
    logger.info("Snapshot: %s iteration=%d population=%s",
                status.name, status.iteration, status.population_text)
    return out_path


def main(argv=None):
    process_id = DEFAULT_PROCESS
    win_w, win_h = DEFAULT_WINDOW
    rate = DEFAULT_RATE
    palette = PALETTE_ORDER[0]
    pixel_ratio = 1.0
    grid = False
    snap_steps = 0
    out_path = None
    verbose = False

    args = sys.argv[1:] if argv is None else list(argv)
    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--window" and i + 1 < len(args):
            parts = args[i + 1].split("x")
            win_w, win_h = int(parts[0]), int(parts[1])
            i += 2
        elif arg == "--rate" and i + 1 < len(args):
            rate = float(args[i + 1])
            i += 2
        elif arg == "--palette" and i + 1 < len(args):
            palette = args[i + 1]
            if palette not in PALETTE_ORDER:
                print(f"Unknown palette: {palette} (choose from {', '.join(PALETTE_ORDER)})")
                return 2
            i += 2
        elif arg == "--pixel-ratio" and i + 1 < len(args):
            pixel_ratio = float(args[i + 1])
            i += 2
        elif arg == "--snap" and i + 1 < len(args):
            snap_steps = int(args[i + 1])
            i += 2
        elif arg == "--out" and i + 1 < len(args):
            out_path = args[i + 1]
            i += 2
        elif arg == "--grid":
            grid = True
            i += 1
        elif arg in ("--verbose", "-v"):
            verbose = True
            i += 1
        elif arg == "--list":
            print("\nAvailable processes:")
            for key, label in list_processes():
                print(f"    {key:16s} {label}")
            print()
            return 0
        elif arg in ("--help", "-h"):
            print(__doc__)
            return 0
        elif arg in PROCESS_ORDER:
            process_id = arg
            i += 1
        else:
            print(f"Unknown argument: {arg}")
            print("Use --list to see available processes")
            return 2

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = LabConfig(
        width=win_w,
        height=win_h,
        start_process=process_id,
        rate=rate,
        palette=palette,
        grid_enabled=grid,
        pixel_ratio=pixel_ratio,
    )

    if snap_steps > 0:
        print(f"Headless snap mode: {process_id} @ {win_w}x{win_h}, {snap_steps} steps")
        return 0 if snap(config, snap_steps, out_path) else 1

    print("Starting Generative Systems Lab")
    print(f"  Process: {get_label(process_id)} ({process_id})")
    print(f"  Window: {win_w}x{win_h}")
    print(f"  Rate: {rate:g} steps/s")
    print()

    from .viewer import Viewer
    Viewer(config).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
