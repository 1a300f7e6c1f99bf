"""
Control panel widgets and the parameter panel builder.
"""

import pygame
import pytest

from gensys_lab.controls import ControlPanel, Slider, Stepper, TextBox, Toggle
from gensys_lab.lsystem import LSystemTree
from gensys_lab.param_panel import NO_PARAMETERS, build_param_controls
from gensys_lab.process_base import NullProcess
from gensys_lab.slime import SlimeMold


def click(pos, button=1):
    return pygame.event.Event(pygame.MOUSEBUTTONDOWN, pos=pos, button=button)


def key(k, unicode=""):
    return pygame.event.Event(pygame.KEYDOWN, key=k, unicode=unicode, mod=0)


@pytest.fixture
def panel():
    return ControlPanel(0, 0, 300, 2000)


def test_slider_click_sets_value():
    seen = []
    slider = Slider(0, 0, 200, "Decay", 0.0, 1.0, 0.5, step=0.1, on_change=seen.append)
    assert slider.handle_event(click((slider.track_x + slider.track_w, slider.track_y)))
    assert slider.value == pytest.approx(1.0)
    assert seen == [slider.value]
    assert not slider.handle_event(click((5, 500)))


def test_stepper_respects_bounds():
    seen = []
    stepper = Stepper(0, 0, 300, "Depth", 8, step=1, min_val=0, max_val=9,
                      on_change=seen.append)
    stepper.handle_event(click(stepper.plus.center))
    stepper.handle_event(click(stepper.plus.center))
    assert stepper.value == 9
    assert seen == [9]
    stepper.handle_event(click(stepper.minus.center))
    assert seen == [9, 8]


def test_toggle_flips():
    seen = []
    toggle = Toggle(8, 0, 200, "Wrap", True, on_change=seen.append)
    toggle.handle_event(click((10, 10)))
    assert seen == [False]


def test_single_line_text_commits_on_enter():
    seen = []
    box = TextBox(0, 0, 300, "Rule", "B3/S2", on_commit=seen.append)
    box.handle_event(click(box.box.center))
    assert box.focused
    box.handle_event(key(pygame.K_3, "3"))
    box.handle_event(key(pygame.K_RETURN))
    assert seen == ["B3/S23"]
    assert not box.focused


def test_multiline_text_commits_on_blur():
    seen = []
    box = TextBox(0, 0, 300, "Rules", "X=F", rows=3, on_commit=seen.append)
    box.handle_event(click(box.box.center))
    box.handle_event(key(pygame.K_RETURN))
    for ch in "F=FF":
        box.handle_event(key(ord(ch.lower()), ch))
    box.handle_event(key(pygame.K_BACKSPACE))
    assert seen == []
    box.handle_event(click((1000, 1000)))
    assert seen == ["X=F\nF=F"]


def test_keys_ignored_without_focus():
    box = TextBox(0, 0, 300, "Rule", "abc")
    assert not box.handle_event(key(pygame.K_x, "x"))
    assert box.text == "abc"


def test_param_controls_cover_every_descriptor(panel):
    slime = SlimeMold(40, 40)
    changes, actions = [], []
    widgets = build_param_controls(panel, slime, lambda k, v: changes.append((k, v)),
                                   actions.append)
    assert list(widgets) == [d.key for d in slime.get_parameters()]
    assert isinstance(widgets["agents"], Stepper)
    assert isinstance(widgets["diffuse"], Toggle)
    assert isinstance(widgets["decay"], Slider)

    panel.handle_event(click(widgets["diffuse"].rect.center))
    assert changes == [("diffuse", False)]
    panel.handle_event(click(widgets["scatter"].rect.center))
    assert actions == ["scatter"]


def test_text_params_build_text_boxes(panel):
    tree = LSystemTree(40, 40)
    widgets = build_param_controls(panel, tree, lambda k, v: None, lambda k: None)
    assert widgets["axiom"].rows == 1
    assert widgets["rules"].rows == 4
    assert widgets["rules"].text == tree.get_param_value("rules")


def test_process_without_parameters_gets_note(panel):
    assert build_param_controls(panel, NullProcess(10, 10), None, None) == {}
    assert panel.widgets[-1].text == NO_PARAMETERS


def test_panel_translates_and_blurs():
    panel = ControlPanel(500, 0, 300, 2000)
    seen = []
    box = panel.add_textbox("Axiom", "X", on_commit=seen.append)
    panel.handle_event(click((500 + box.box.centerx, box.box.centery)))
    assert panel.has_focus
    panel.handle_event(click((100, 100)))
    assert not panel.has_focus
    assert seen == ["X"]


def test_click_on_earlier_widget_blurs_text_box():
    panel = ControlPanel(0, 0, 300, 2000)
    clicks, seen = [], []
    button = panel.add_button("Regrow", on_click=lambda: clicks.append(1))
    box = panel.add_textbox("Axiom", "X", on_commit=seen.append)
    panel.handle_event(click(box.box.center))
    panel.handle_event(key(pygame.K_f, "F"))
    assert panel.has_focus
    assert panel.handle_event(click(button.rect.center))
    assert clicks == [1]
    assert seen == ["XF"]
    assert not panel.has_focus


def test_wheel_over_panel_keeps_text_focus():
    panel = ControlPanel(0, 0, 300, 2000)
    panel.add_button("Regrow")
    box = panel.add_textbox("Axiom", "X")
    panel.handle_event(click(box.box.center))
    panel.handle_event(click((150, 5), button=4))
    assert box.focused


def test_panel_scroll_limits():
    panel = ControlPanel(0, 0, 300, 100)
    for i in range(10):
        panel.add_button(f"B{i}")
    panel.scroll(-10_000)
    assert panel.scroll_y == panel.content_height - 100
    panel.scroll(10_000)
    assert panel.scroll_y == 0


def test_panel_draws():
    pygame.font.init()
    font = pygame.font.Font(None, 14)
    panel = ControlPanel(0, 0, 300, 400)
    panel.add_section("PARAMETERS")
    build_param_controls(panel, LSystemTree(40, 40), lambda k, v: None, lambda k: None)
    target = pygame.Surface((300, 400))
    panel.draw(target, font)
