import logging

from gensys_lab import registry
from gensys_lab.process_base import GenerativeProcess, NullProcess
from gensys_lab.registry import (
    PROCESS_ORDER, CreateStatus, create_process, get_label, list_processes,
)


class Exploding(GenerativeProcess):
    label = "Exploding"

    def __init__(self, width, height):
        raise RuntimeError("no canvas for you")

    def step(self):
        pass

    def reset(self, randomize=True):
        pass


def test_selector_order_and_labels():
    assert [key for key, _ in list_processes()] == [
        "ca_life", "ca_brain", "l_system_tree", "l_system_koch", "agent_slime",
    ]
    assert get_label("ca_brain") == "Brian's Brain"
    assert get_label("nope") == "nope"


def test_create_known_process():
    for process_id in PROCESS_ORDER:
        result = create_process(process_id, 120, 90)
        assert result.status is CreateStatus.CREATED
        assert result.usable
        assert result.process.process_id == process_id
        assert result.process.get_iteration() == 0
        assert (result.process.width, result.process.height) == (120, 90)


def test_unknown_id_falls_back_to_inert_process(caplog):
    with caplog.at_level(logging.WARNING, logger="gensys_lab.registry"):
        result = create_process("ca_unknown", 100, 100)
    assert result.status is CreateStatus.FALLBACK
    assert isinstance(result.process, NullProcess)
    assert result.process.label == "Unknown"
    assert "ca_unknown" in caplog.text

    # Inert but well-behaved
    result.process.step()
    assert result.process.get_iteration() == 1
    assert result.process.get_parameters() == ()


def test_constructor_failure_is_reported_not_raised(monkeypatch, caplog):
    monkeypatch.setitem(registry.PROCESS_CLASSES, "boom", Exploding)
    with caplog.at_level(logging.ERROR, logger="gensys_lab.registry"):
        result = create_process("boom", 100, 100)
    assert result.status is CreateStatus.FAILED
    assert result.process is None
    assert not result.usable
    assert isinstance(result.error, RuntimeError)
    assert any(r.levelno == logging.ERROR for r in caplog.records)
