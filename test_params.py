"""Parameter descriptor coercion."""

import math

from gensys_lab.params import (
    ParamKind, button, checkbox, coerce_value, number, slider, text, textarea,
)


def test_slider_clamps_to_range():
    desc = slider("decay", "Decay", 0.5, 1.0, 0.95, step=0.01)
    assert coerce_value(desc, 2.0) == (True, 1.0)
    assert coerce_value(desc, -3) == (True, 0.5)
    assert coerce_value(desc, "0.75") == (True, 0.75)


def test_integral_step_rounds_to_int():
    desc = number("cell_size", "Cell size", 6, min_val=1, max_val=40)
    ok, val = coerce_value(desc, "7.6")
    assert ok and val == 8 and isinstance(val, int)
    assert coerce_value(desc, 0) == (True, 1)


def test_malformed_numbers_rejected():
    desc = slider("angle", "Angle", 0.0, 180.0, 25.0, step=0.5)
    assert coerce_value(desc, "abc") == (False, None)
    assert coerce_value(desc, None) == (False, None)
    assert coerce_value(desc, math.nan) == (False, None)


def test_checkbox_and_text_kinds():
    assert coerce_value(checkbox("wrap", "Wrap", True), 0) == (True, False)
    assert coerce_value(text("rule", "Rule", "B3/S23"), None) == (True, "")
    assert coerce_value(textarea("rules", "Rules", ""), 12) == (True, "12")


def test_buttons_carry_no_value():
    desc = button("regrow", "Growth", button_text="Regrow")
    assert desc.kind is ParamKind.BUTTON
    assert desc.button_text == "Regrow"
    assert coerce_value(desc, 1) == (False, None)


def test_descriptor_properties():
    assert slider("a", "A", 0, 1, 0.5).is_numeric
    assert not slider("a", "A", 0, 1, 0.5).integral
    assert number("n", "N", 1).integral
    assert not text("t", "T").is_numeric
