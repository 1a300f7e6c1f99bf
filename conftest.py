import os

# Surfaces and fonts work without a real display
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pytest  # noqa: E402

from gensys_lab.frame_host import FrameHost  # noqa: E402


class FakeRenderer:
    """Records every call the lab makes on its renderer."""

    def __init__(self):
        self.calls = []
        self.rendered = []
        self.hints = None
        self.size = None
        self.visualization = {}

    def render(self, process):
        self.calls.append("render")
        self.rendered.append((process, process.get_iteration()))

    def clear(self):
        self.calls.append("clear")

    def resize(self, width, height):
        self.calls.append("resize")
        self.size = (width, height)

    def set_visualization_params(self, **kw):
        self.calls.append("visualization")
        self.visualization.update(kw)

    def update_hints(self, hints):
        self.calls.append("hints")
        self.hints = hints

    def prepare_pixel_buffer(self):
        self.calls.append("pixel_buffer")


class FakeParamUI:
    def __init__(self):
        self.populated = []
        self.errors = []

    def populate(self, process):
        self.populated.append(process)

    def show_error(self, message):
        self.errors.append(message)


@pytest.fixture
def host():
    return FrameHost()


@pytest.fixture
def renderer():
    return FakeRenderer()


@pytest.fixture
def param_ui():
    return FakeParamUI()
