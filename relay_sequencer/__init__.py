"""
Relay Sequencer

Runs short automation programs on a four-relay board (pumps and valves):
relay switches interleaved with timed waits and repeated blocks, with an
emergency stop that forces every output off.
"""

from relay_sequencer.domain import (
    DurationType,
    LoopStep,
    MalformedProgram,
    Program,
    RelayAction,
    RelayConfig,
    RelayStep,
    Step,
    WaitStep,
    load_program,
    load_programs,
)
from relay_sequencer.state import (
    ActionLogEntry,
    EngineState,
    ExecutionCursor,
    Frame,
    RunProgress,
)
from relay_sequencer.execution import (
    EngineEvent,
    EventKind,
    ProgramEngine,
    SweepReport,
)

__all__ = [
    # Domain Layer
    "DurationType",
    "LoopStep",
    "MalformedProgram",
    "Program",
    "RelayAction",
    "RelayConfig",
    "RelayStep",
    "Step",
    "WaitStep",
    "load_program",
    "load_programs",
    # State Layer
    "ActionLogEntry",
    "EngineState",
    "ExecutionCursor",
    "Frame",
    "RunProgress",
    # Execution Layer
    "EngineEvent",
    "EventKind",
    "ProgramEngine",
    "SweepReport",
]
