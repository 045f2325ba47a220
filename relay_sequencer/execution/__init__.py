"""
Execution Layer - Program Interpretation

Defines the ProgramEngine (the interpreter and its Idle/Running/Waiting
state machine), the countdown timer used by wait steps, and the events and
reports it produces.
"""

from relay_sequencer.execution.engine import ProgramEngine
from relay_sequencer.execution.schemas.events import EngineEvent, EventKind
from relay_sequencer.execution.schemas.sweep import SweepReport
from relay_sequencer.execution.timer import CountdownTimer


__all__ = [
    "CountdownTimer",
    "EngineEvent",
    "EventKind",
    "ProgramEngine",
    "SweepReport",
]
