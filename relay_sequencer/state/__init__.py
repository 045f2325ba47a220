"""
State Layer - Runtime Data Models

Defines the ephemeral execution state of a program run (the cursor's call
stack of frames), progress snapshots and action log records.
"""

from relay_sequencer.state.models import (
    ActionLogEntry,
    EngineState,
    ExecutionCursor,
    Frame,
    RunProgress,
)

__all__ = [
    "ActionLogEntry",
    "EngineState",
    "ExecutionCursor",
    "Frame",
    "RunProgress",
]
