"""
Human-readable "current action" text for progress reporting.
"""

from typing import Dict, Optional

from ..domain.models import LoopStep, RelayStep, Step
from ..domain.relays import RelayConfig, default_relay_configs

WAITING = "waiting"


def describe_step(step: Step, relay_configs: Optional[Dict[int, RelayConfig]] = None) -> str:
    """
    RelayStep -> "<relay name>: <verb>" (e.g. "Garden valve: open")
    WaitStep  -> "waiting"
    LoopStep  -> "loop x<iterations>"
    """
    if isinstance(step, RelayStep):
        configs = relay_configs or default_relay_configs()
        config = configs.get(step.relay) or RelayConfig(name=f"Relay {step.relay + 1}")
        return f"{config.name}: {config.verb(step.action)}"
    if isinstance(step, LoopStep):
        return f"loop x{step.iterations}"
    return WAITING
