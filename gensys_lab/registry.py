"""
Process Registry and Factory

Maps process identifiers to classes. Adding a process kind only needs a
new entry here; the scheduler and pointer dispatcher are unaffected.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Optional

from .brain import BriansBrain
from .life import ConwayLife
from .lsystem import KochSnowflake, LSystemTree
from .process_base import GenerativeProcess, NullProcess
from .slime import SlimeMold

logger = logging.getLogger(__name__)


# Process class registry
PROCESS_CLASSES = {
    "ca_life": ConwayLife,
    "ca_brain": BriansBrain,
    "l_system_tree": LSystemTree,
    "l_system_koch": KochSnowflake,
    "agent_slime": SlimeMold,
}

PROCESS_ORDER = ["ca_life", "ca_brain", "l_system_tree", "l_system_koch", "agent_slime"]


class CreateStatus(enum.Enum):
    CREATED = "created"
    FALLBACK = "fallback"  # unknown id, inert stand-in returned
    FAILED = "failed"      # constructor raised, no instance


@dataclass
class CreateResult:
    status: CreateStatus
    process: Optional[GenerativeProcess] = None
    error: Optional[BaseException] = None

    @property
    def usable(self):
        return self.process is not None


def create_process(process_id, width, height):
    """Instantiate the process registered under process_id.

    Never raises: an unknown id yields a NullProcess (FALLBACK) and a
    failing constructor yields no process at all (FAILED).
    """
    cls = PROCESS_CLASSES.get(process_id)
    if cls is None:
        logger.warning("Process id %r not found in registry", process_id)
        return CreateResult(CreateStatus.FALLBACK, NullProcess(width, height))

    try:
        logger.info("Creating instance of %s (%dx%d)", cls.__name__, width, height)
        process = cls(width, height)
    except Exception as e:
        logger.exception("Error constructing process %r", process_id)
        return CreateResult(CreateStatus.FAILED, error=e)

    process.process_id = process_id
    process.iteration = process.iteration or 0
    return CreateResult(CreateStatus.CREATED, process)


def get_label(process_id):
    cls = PROCESS_CLASSES.get(process_id)
    return cls.label if cls else process_id


def list_processes():
    """Return (id, label) pairs in selector order."""
    return [(key, PROCESS_CLASSES[key].label) for key in PROCESS_ORDER
            if key in PROCESS_CLASSES]
