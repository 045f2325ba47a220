"""
Relay configuration.

The board exposes four outputs (in1..in4, addressed 0..3). Each output
drives either a pump or a valve; valves are normally-closed or
normally-open, which flips the meaning of ON and OFF for the user.
"""

import json
from enum import Enum
from pathlib import Path
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field

from .models import RelayAction

RELAY_COUNT = 4
RELAY_INDICES = range(RELAY_COUNT)


class RelayKind(str, Enum):
    PUMP = "pump"
    VALVE = "valve"


class ValveMode(str, Enum):
    NORMALLY_CLOSED = "nc"
    NORMALLY_OPEN = "no"


class RelayConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    type: RelayKind = RelayKind.PUMP
    valve_mode: ValveMode = Field(ValveMode.NORMALLY_CLOSED, alias="valveMode")
    enabled: bool = True

    def verb(self, action: RelayAction) -> str:
        """What switching this output to `action` physically does."""
        on = action == RelayAction.ON
        if self.type == RelayKind.PUMP:
            return "activate" if on else "deactivate"
        if self.valve_mode == ValveMode.NORMALLY_CLOSED:
            return "open" if on else "close"
        return "close" if on else "open"


def default_relay_configs() -> Dict[int, RelayConfig]:
    return {index: RelayConfig(name=f"Relay {index + 1}") for index in RELAY_INDICES}


def load_relay_configs(data: Dict[str, Any]) -> Dict[int, RelayConfig]:
    """
    Builds relay configs from a mapping keyed by board output name
    ("in1".."in4", as the settings page saves them) or by index ("0".."3").
    Outputs that are not mentioned keep their defaults.

    Raises:
        ValueError: unknown output key or invalid config.
    """
    configs = default_relay_configs()
    for key, value in data.items():
        key = str(key)
        if key.startswith("in") and key[2:].isdigit():
            index = int(key[2:]) - 1
        elif key.isdigit():
            index = int(key)
        else:
            raise ValueError(f"unknown relay output '{key}'")
        if index not in RELAY_INDICES:
            raise ValueError(f"unknown relay output '{key}'")
        configs[index] = RelayConfig.model_validate({**configs[index].model_dump(by_alias=True), **value})
    return configs


def read_relay_configs(path: Path) -> Dict[int, RelayConfig]:
    return load_relay_configs(json.loads(path.read_text(encoding="utf-8")))
