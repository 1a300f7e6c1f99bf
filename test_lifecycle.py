"""
LabController: switching, reset/clear ordering, parameters and resize.
"""

import logging

import pytest

from gensys_lab import registry
from gensys_lab.config import LabConfig
from gensys_lab.lifecycle import LOAD_ERROR, NO_PROCESS_NAME, LabController
from gensys_lab.process_base import NullProcess
from gensys_lab.slime import SlimeMold


EVENTS = []


class Recorder(NullProcess):
    """Records lifecycle calls in the shared EVENTS log."""

    label = "Recorder"

    def __init__(self, width, height):
        super().__init__(width, height)
        self.name = f"rec{len([e for e in EVENTS if e[0] == 'init'])}"
        EVENTS.append(("init", self.name))

    def reset(self, randomize=True):
        EVENTS.append(("reset", self.name, randomize))
        super().reset(randomize)

    def destroy(self):
        EVENTS.append(("destroy", self.name))

    def on_resize(self, width, height):
        self.width, self.height = width, height
        EVENTS.append(("resize", self.name, width, height))


class Exploding(NullProcess):
    def __init__(self, width, height):
        raise MemoryError("too big")


@pytest.fixture(autouse=True)
def lifecycle_log(monkeypatch):
    EVENTS.clear()
    monkeypatch.setitem(registry.PROCESS_CLASSES, "recorder", Recorder)
    monkeypatch.setitem(registry.PROCESS_CLASSES, "boom", Exploding)
    return EVENTS


@pytest.fixture
def controller(host, renderer, param_ui):
    return LabController(host, renderer=renderer, param_ui=param_ui,
                         display_size=(400, 300))


def test_renderer_sized_on_construction(host, renderer):
    LabController(host, renderer=renderer, display_size=(400, 300),
                  config=LabConfig(pixel_ratio=2.0))
    assert renderer.size == (800, 600)


def test_load_populates_and_renders(controller, host, renderer, param_ui):
    assert controller.load_process("ca_life")
    process = controller.process
    assert process.label == "Game of Life"
    assert process.get_population() > 0
    assert param_ui.populated == [process]
    assert renderer.hints["kind"] == "grid"
    assert renderer.visualization == {"grid_enabled": False, "palette": "default"}

    host.run_frame(0)
    assert renderer.rendered == [(process, 0)]


def test_field_process_gets_pixel_buffer(controller, renderer):
    controller.load_process("agent_slime")
    assert "pixel_buffer" in renderer.calls


def test_switch_while_running_pauses_and_tears_down_first(controller, lifecycle_log):
    controller.load_process("recorder")
    controller.toggle_play_pause()
    assert controller.running

    assert controller.load_process("recorder")
    assert not controller.running
    assert lifecycle_log == [
        ("init", "rec0"),
        ("reset", "rec0", True),
        ("destroy", "rec0"),
        ("init", "rec1"),
        ("reset", "rec1", True),
    ]


def test_switch_releases_slime_buffers(controller):
    controller.load_process("agent_slime")
    slime = controller.process
    assert isinstance(slime, SlimeMold)
    controller.load_process("ca_brain")
    assert slime.trail is None
    assert controller.process.label == "Brian's Brain"


def test_failed_construction_shows_error(controller, host, renderer, param_ui, caplog):
    controller.load_process("ca_life")
    renderer.calls.clear()
    with caplog.at_level(logging.ERROR):
        assert not controller.load_process("boom")

    assert controller.process is None
    assert param_ui.errors == [LOAD_ERROR]
    assert "clear" in renderer.calls
    status = controller.status()
    assert status.name == NO_PROCESS_NAME
    assert status.error == LOAD_ERROR
    assert status.population_text == "-"

    # Controls are inert with no process
    assert not controller.step_once()
    controller.reset()
    controller.clear()
    host.run_frame(0)
    assert renderer.rendered == []


def test_unknown_id_loads_inert_process(controller):
    assert controller.load_process("does_not_exist")
    assert isinstance(controller.process, NullProcess)
    assert controller.status().name == "Unknown"


def test_switch_to_process_without_hints_clears_them(controller, renderer):
    controller.load_process("ca_life")
    assert renderer.hints["kind"] == "grid"
    controller.load_process("does_not_exist")
    assert renderer.hints == {}


def test_reset_pauses_and_reseeds(controller, lifecycle_log):
    controller.load_process("recorder")
    controller.toggle_play_pause()
    controller.step_once()
    controller.reset()
    assert not controller.running
    assert controller.process.get_iteration() == 0
    assert lifecycle_log[-1] == ("reset", "rec0", True)


def test_clear_wipes_surface_before_blank_reset(host, param_ui, lifecycle_log):
    class OrderedRenderer:
        def resize(self, w, h):
            pass

        def clear(self):
            lifecycle_log.append(("surface_clear",))

        def render(self, process):
            pass

        def set_visualization_params(self, **kw):
            pass

        def update_hints(self, hints):
            pass

    controller = LabController(host, renderer=OrderedRenderer(), param_ui=param_ui,
                               display_size=(100, 100))
    controller.load_process("recorder")
    controller.toggle_play_pause()
    controller.clear()
    assert not controller.running
    assert lifecycle_log[-2:] == [("surface_clear",), ("reset", "rec0", False)]


def test_param_with_reset_flag_reinitializes(controller):
    controller.load_process("agent_slime")
    controller.set_param_value("agents", 120)
    assert controller.process.get_population() == 120

    controller.set_param_value("decay", 0.9)
    assert controller.process.get_param_value("decay") == pytest.approx(0.9)
    assert controller.process.get_population() == 120


def test_actions_forwarded(controller):
    controller.load_process("l_system_tree")
    controller.step_once()
    controller.trigger_action("regrow")
    assert controller.process.get_iteration() == 0
    assert controller.process.symbols == "X"


def test_visualization_params_forwarded(controller, renderer):
    controller.set_visualization_params(grid_enabled=True, palette="fire")
    assert renderer.visualization == {"grid_enabled": True, "palette": "fire"}
    controller.load_process("ca_life")
    assert renderer.visualization["palette"] == "fire"


def test_status_listener_sees_steps(controller):
    seen = []
    controller.add_status_listener(seen.append)
    controller.load_process("ca_life")
    controller.step_once()
    assert seen[-1].iteration == 1
    assert seen[-1].name == "Game of Life"
    controller.set_speed(25)
    assert seen[-1].rate == 25


def test_resize_is_debounced(host, renderer, param_ui, lifecycle_log):
    controller = LabController(host, renderer=renderer, param_ui=param_ui,
                               display_size=(400, 300),
                               config=LabConfig(pixel_ratio=2.0))
    controller.load_process("recorder")
    host.run_frame(0)

    controller.set_display_rect(0, 0, 500, 400)
    controller.request_resize(450, 350)
    host.run_frame(100)
    controller.request_resize(500, 400)
    host.run_frame(300)
    assert renderer.size == (800, 600)

    host.run_frame(350)
    assert renderer.size == (1000, 800)
    assert (controller.width, controller.height) == (1000, 800)
    assert [e for e in lifecycle_log if e[0] == "resize"] == [("resize", "rec0", 1000, 800)]

    # Pointer mapping follows the new backing store
    geometry = controller.dispatcher.geometry
    assert geometry.to_backing(250, 200) == (500, 400)


def test_resize_to_zero_is_ignored(controller, renderer):
    controller.handle_resize(0, 300)
    assert renderer.size == (400, 300)


def test_shutdown_tears_down(controller, host):
    controller.load_process("agent_slime")
    slime = controller.process
    controller.start()
    host.run_frame(0)
    controller.shutdown()
    assert slime.trail is None
    assert controller.process is None
    assert not controller.scheduler.looping
