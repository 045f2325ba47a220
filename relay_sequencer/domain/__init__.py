"""
Domain Layer - Static Data Models

Defines the program model (Programs and their Relay, Wait and Loop steps),
its validation, and the relay configuration used to describe actions.
"""

from relay_sequencer.domain.exceptions import MalformedProgram
from relay_sequencer.domain.models import (
    DurationType,
    LoopStep,
    Program,
    RelayAction,
    RelayStep,
    Step,
    WaitStep,
    load_program,
    load_programs,
)
from relay_sequencer.domain.relays import (
    RELAY_COUNT,
    RELAY_INDICES,
    RelayConfig,
    RelayKind,
    ValveMode,
    default_relay_configs,
    load_relay_configs,
    read_relay_configs,
)

__all__ = [
    "DurationType",
    "LoopStep",
    "MalformedProgram",
    "Program",
    "RelayAction",
    "RelayStep",
    "Step",
    "WaitStep",
    "load_program",
    "load_programs",
    "RELAY_COUNT",
    "RELAY_INDICES",
    "RelayConfig",
    "RelayKind",
    "ValveMode",
    "default_relay_configs",
    "load_relay_configs",
    "read_relay_configs",
]
