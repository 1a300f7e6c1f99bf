"""
Behaviour every registered process must share, whatever it simulates.
"""

import numpy as np
import pytest

from gensys_lab.lsystem import LSystem
from gensys_lab.process_base import (
    NullProcess, SupportsActions, SupportsPointerDown, SupportsPointerMove,
    SupportsPointerUp, SupportsResize, SupportsTeardown, SupportsVisualizationHints,
)
from gensys_lab.params import ParamKind
from gensys_lab.registry import PROCESS_CLASSES, PROCESS_ORDER

W, H = 96, 72


def _state(process):
    """Comparable snapshot of whatever the process draws from."""
    for attr in ("cells", "trail", "segments"):
        value = getattr(process, attr, None)
        if value is not None:
            return np.array(value, copy=True)
    return None


@pytest.fixture(params=PROCESS_ORDER)
def process(request):
    return PROCESS_CLASSES[request.param](W, H)


def test_step_advances_iteration_by_one(process):
    process.reset(True)
    assert process.get_iteration() == 0
    process.step()
    assert process.get_iteration() == 1
    process.step()
    assert process.get_iteration() == 2


def test_reset_returns_to_zero(process):
    process.reset(True)
    for _ in range(3):
        process.step()
    process.reset(True)
    assert process.get_iteration() == 0
    process.reset(False)
    assert process.get_iteration() == 0


def test_blank_reset_is_deterministic(process):
    process.reset(False)
    first = _state(process)
    population = process.get_population()
    process.reset(True)
    process.step()
    process.reset(False)
    assert np.array_equal(_state(process), first)
    assert process.get_population() == population


def test_parameters_are_declared_once(process):
    params = process.get_parameters()
    keys = [d.key for d in params]
    assert len(keys) == len(set(keys))
    for desc in params:
        if desc.kind is ParamKind.BUTTON:
            assert process.get_param_value(desc.key) is None
        else:
            assert process.get_param_value(desc.key) == desc.default


def test_undeclared_parameter_write_is_ignored(process):
    before = dict(process.params)
    process.set_param_value("no_such_param", 3)
    assert process.params == before


def test_malformed_numeric_write_keeps_previous_value(process):
    numeric = [d for d in process.get_parameters() if d.is_numeric]
    desc = numeric[0]
    before = process.get_param_value(desc.key)
    process.set_param_value(desc.key, "not a number")
    assert process.get_param_value(desc.key) == before


def test_numeric_write_is_clamped(process):
    desc = next(d for d in process.get_parameters() if d.is_numeric and d.max is not None)
    process.set_param_value(desc.key, desc.max * 10 + 100)
    assert process.get_param_value(desc.key) == desc.max


def test_hints_and_actions_available(process):
    assert isinstance(process, SupportsVisualizationHints)
    assert isinstance(process, SupportsActions)
    assert isinstance(process, SupportsResize)
    assert process.get_visualization_hints()["kind"] in ("grid", "lines", "field")


def test_pointer_support_by_kind():
    pointer = (SupportsPointerDown, SupportsPointerMove, SupportsPointerUp)
    for process_id in ("ca_life", "agent_slime"):
        process = PROCESS_CLASSES[process_id](W, H)
        assert all(isinstance(process, cap) for cap in pointer)
    tree = PROCESS_CLASSES["l_system_tree"](W, H)
    assert not any(isinstance(tree, cap) for cap in pointer)
    assert issubclass(PROCESS_CLASSES["l_system_koch"], LSystem)


def test_teardown_only_where_declared():
    assert isinstance(PROCESS_CLASSES["agent_slime"](W, H), SupportsTeardown)
    assert not isinstance(PROCESS_CLASSES["ca_life"](W, H), SupportsTeardown)


def test_null_process_has_no_optional_capabilities():
    null = NullProcess(W, H)
    assert not isinstance(null, SupportsPointerDown)
    assert not isinstance(null, SupportsVisualizationHints)
    assert null.get_population() is None
