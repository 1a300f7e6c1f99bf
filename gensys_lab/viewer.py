"""
Generative Systems Lab - Viewer

Pygame window with the simulation canvas on the left and a control panel
on the right. The window loop only pumps events and drives the FrameHost;
stepping and rendering cadence belong to the Scheduler inside
LabController.

Keys:
    SPACE  play / pause        N  single step
    R      reset (reseed)      C  clear
    H      toggle HUD          TAB  toggle panel
    S      save screenshot     1-5  switch process
    Q/ESC  quit
"""

import logging
import os
import time

import pygame

from .config import (
    FRAME_RATE_CAP, MAX_RATE, MIN_RATE, PALETTE_ORDER, PANEL_WIDTH, LabConfig,
)
from .controls import THEME, ControlPanel
from .frame_host import FrameHost
from .interaction import from_pygame_button
from .lifecycle import LabController
from .param_panel import build_param_controls
from .registry import PROCESS_ORDER, list_processes
from .renderer import CanvasRenderer

logger = logging.getLogger(__name__)


class Viewer:
    def __init__(self, config=None):
        self.config = config or LabConfig()
        self.canvas_w = self.config.width
        self.canvas_h = self.config.height
        self.panel_visible = True
        self.show_hud = True
        self.running = True
        self.fps_history = []

        self.process_id = self.config.start_process
        self.palette = self.config.palette
        self.grid_enabled = self.config.grid_enabled

        # Built after pygame.init in setup()
        self.host = None
        self.renderer = None
        self.controller = None
        self.panel = None
        self.process_buttons = None
        self.play_button = None
        self.param_widgets = {}
        self._error = None

    @property
    def total_w(self):
        return self.canvas_w + (PANEL_WIDTH if self.panel_visible else 0)

    # --- param_ui collaborator ---

    def populate(self, process):
        self._error = None
        self._build_panel(process)

    def show_error(self, message):
        self._error = message
        self._build_panel(None)

    # --- panel ---

    def _build_panel(self, process):
        panel = ControlPanel(self.canvas_w, 0, PANEL_WIDTH, self.canvas_h)

        panel.add_section("SYSTEMS")
        labels = [label for _, label in list_processes()]
        selected = PROCESS_ORDER.index(self.process_id) if self.process_id in PROCESS_ORDER else -1
        self.process_buttons = panel.add_button_row(
            labels, selected=selected, on_select=self._on_process_select)

        panel.add_section("CONTROLS")
        self.play_button, _, _, _ = panel.add_button_group([
            ("Play", self._on_play_pause),
            ("Step", self._on_step),
            ("Reset", self._on_reset),
            ("Clear", self._on_clear),
        ])
        rate = self.controller.scheduler.rate if self.controller else self.config.rate
        panel.add_slider("Speed (steps/s)", MIN_RATE, MAX_RATE, rate, fmt=".0f",
                         step=1, on_change=self._on_speed_change)
        panel.add_button_row(
            [p.capitalize() for p in PALETTE_ORDER],
            selected=PALETTE_ORDER.index(self.palette) if self.palette in PALETTE_ORDER else 0,
            on_select=self._on_palette_select)
        panel.add_toggle("Grid lines", self.grid_enabled, on_change=self._on_grid_toggle)

        panel.add_section("PARAMETERS")
        if self._error:
            panel.add_label(self._error, color="text_error")
            self.param_widgets = {}
        else:
            self.param_widgets = build_param_controls(
                panel, process, self._on_param_change, self._on_param_action)

        panel.add_spacer(4)
        panel.add_button("Screenshot  [S]", on_click=self._save_screenshot)

        self.panel = panel

    # --- callbacks ---

    def _on_process_select(self, idx, name):
        if idx < len(PROCESS_ORDER):
            self._load(PROCESS_ORDER[idx])

    def _load(self, process_id):
        self.process_id = process_id
        self.controller.load_process(process_id)

    def _on_play_pause(self):
        self.controller.toggle_play_pause()

    def _on_step(self):
        self.controller.step_once()

    def _on_reset(self):
        self.controller.reset()

    def _on_clear(self):
        self.controller.clear()

    def _on_speed_change(self, val):
        self.controller.set_speed(val)

    def _on_palette_select(self, idx, name):
        self.palette = PALETTE_ORDER[idx]
        self.controller.set_visualization_params(palette=self.palette)

    def _on_grid_toggle(self, value):
        self.grid_enabled = value
        self.controller.set_visualization_params(grid_enabled=value)

    def _on_param_change(self, key, value):
        self.controller.set_param_value(key, value)

    def _on_param_action(self, key):
        self.controller.trigger_action(key)

    # --- drawing ---

    def _draw_hud(self, screen, fps):
        if not self.show_hud:
            return

        status = self.controller.status()
        line = (f"{status.name}  |  Iteration: {status.iteration:,}  |  "
                f"Population: {status.population_text}  |  "
                f"{status.rate:.0f} steps/s  |  FPS: {fps:.0f}")
        if status.error:
            line = status.error
        elif not status.running:
            line = "[PAUSED]  " + line

        bg_surface = pygame.Surface((self.canvas_w, 24), pygame.SRCALPHA)
        bg_surface.fill((0, 0, 0, 140))
        screen.blit(bg_surface, (0, 0))
        screen.blit(self.hud_font.render(line, True, (210, 215, 225)), (10, 6))

    def _save_screenshot(self):
        screenshots_dir = os.path.join(os.getcwd(), "screenshots")
        os.makedirs(screenshots_dir, exist_ok=True)
        timestamp = time.strftime("%Y%m%d_%H%M%S")
        path = os.path.join(screenshots_dir, f"lab_{self.process_id}_{timestamp}.png")
        pygame.image.save(self.renderer.surface, path)
        logger.info("Screenshot saved: %s", path)
        print(f"Screenshot saved: {path}")

    # --- window ---

    def _relayout(self):
        """Apply a canvas size change: panel now, backing store after the debounce."""
        self.controller.set_display_rect(0, 0, self.canvas_w, self.canvas_h)
        self.controller.request_resize(self.canvas_w, self.canvas_h)
        if self.panel:
            self.panel.x = self.canvas_w
            self.panel.height = self.canvas_h

    def _handle_resize_event(self, event):
        self.canvas_w = max(1, event.w - (PANEL_WIDTH if self.panel_visible else 0))
        self.canvas_h = max(1, event.h)
        self._relayout()

    def _handle_keydown(self, event):
        key = event.key

        if key in (pygame.K_q, pygame.K_ESCAPE):
            self.running = False

        elif key == pygame.K_SPACE:
            self.controller.toggle_play_pause()

        elif key == pygame.K_n:
            self.controller.step_once()

        elif key == pygame.K_r:
            self.controller.reset()

        elif key == pygame.K_c:
            self.controller.clear()

        elif key == pygame.K_h:
            self.show_hud = not self.show_hud

        elif key == pygame.K_TAB:
            self.panel_visible = not self.panel_visible
            pygame.display.set_mode((self.total_w, self.canvas_h), pygame.RESIZABLE)
            self._relayout()

        elif key == pygame.K_s:
            self._save_screenshot()

        # Process selection (1-5)
        elif pygame.K_1 <= key <= pygame.K_9:
            idx = key - pygame.K_1
            if idx < len(PROCESS_ORDER):
                self._load(PROCESS_ORDER[idx])

    def _handle_event(self, event):
        dispatcher = self.controller.dispatcher
        panel = self.panel if self.panel_visible else None

        if event.type == pygame.KEYDOWN:
            if panel and panel.has_focus:
                panel.handle_event(event)
            else:
                self._handle_keydown(event)

        elif event.type == pygame.VIDEORESIZE:
            self._handle_resize_event(event)

        elif event.type == pygame.MOUSEWHEEL:
            if panel and pygame.mouse.get_pos()[0] >= self.canvas_w:
                panel.scroll(event.y * 24)

        elif event.type == pygame.MOUSEBUTTONDOWN:
            if panel and panel.handle_event(event):
                return
            button = from_pygame_button(event.button)
            if button is not None:
                dispatcher.pointer_down(event.pos[0], event.pos[1], button)

        elif event.type == pygame.MOUSEMOTION:
            if panel and panel.handle_event(event):
                return
            dispatcher.pointer_move(event.pos[0], event.pos[1])

        elif event.type == pygame.MOUSEBUTTONUP:
            if from_pygame_button(event.button) is None:
                return
            if panel:
                panel.handle_event(event)
            dispatcher.pointer_up(event.pos[0], event.pos[1])

    def setup(self):
        """Open the window and wire up the lab. Returns the display surface."""
        pygame.init()

        screen = pygame.display.set_mode((self.total_w, self.canvas_h), pygame.RESIZABLE)
        pygame.display.set_caption("Generative Systems Lab")

        self.hud_font = pygame.font.SysFont("menlo", 13)
        self.panel_font = pygame.font.SysFont("menlo", 12)

        self.host = FrameHost()
        self.renderer = CanvasRenderer(self.canvas_w, self.canvas_h, self.palette)
        self.controller = LabController(
            self.host, renderer=self.renderer, param_ui=self,
            display_size=(self.canvas_w, self.canvas_h), config=self.config)
        self.controller.load_process(self.process_id)
        self.controller.start()
        return screen

    def draw_frame(self, screen, frame_time=0.0):
        screen.fill(THEME["bg"])
        scaled = pygame.transform.smoothscale(self.renderer.surface,
                                              (self.canvas_w, self.canvas_h))
        screen.blit(scaled, (0, 0))

        self.fps_history.append(frame_time)
        if len(self.fps_history) > 30:
            self.fps_history.pop(0)
        avg_fps = 1.0 / max(sum(self.fps_history) / len(self.fps_history), 0.001)
        self._draw_hud(screen, avg_fps)

        if self.panel_visible and self.panel:
            self.play_button.label = "Pause" if self.controller.running else "Play"
            self.panel.x = self.canvas_w
            self.panel.height = self.canvas_h
            self.panel.draw(screen, self.panel_font)

    def run(self):
        """Main viewer loop."""
        self.setup()
        clock = pygame.time.Clock()

        while self.running:
            frame_start = time.time()

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self.running = False
                    continue
                self._handle_event(event)

            # Timers, scheduler tick and coalesced draw
            self.host.run_frame(pygame.time.get_ticks())

            self.draw_frame(pygame.display.get_surface(), time.time() - frame_start)
            pygame.display.flip()
            clock.tick(FRAME_RATE_CAP)

        self.controller.shutdown()
        pygame.quit()
