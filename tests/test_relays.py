"""
Tests for relay configuration loading and the ON/OFF verbs.

Run with: pytest -q
"""
import json

import pytest

from relay_sequencer.domain.models import RelayAction
from relay_sequencer.domain.relays import (
    RelayConfig,
    RelayKind,
    ValveMode,
    default_relay_configs,
    load_relay_configs,
    read_relay_configs,
)


class TestRelayConfigs:

    def test_defaults_name_every_output(self):
        configs = default_relay_configs()

        assert [c.name for c in configs.values()] == ["Relay 1", "Relay 2", "Relay 3", "Relay 4"]
        assert all(c.enabled and c.type == RelayKind.PUMP for c in configs.values())

    def test_load_by_board_output_names(self):
        """Test the settings page format keyed by in1..in4."""
        configs = load_relay_configs(
            {
                "in1": {"name": "Main pump", "type": "pump"},
                "in3": {"name": "Drain", "type": "valve", "valveMode": "no", "enabled": False},
            }
        )

        assert configs[0].name == "Main pump"
        assert configs[1].name == "Relay 2"
        assert configs[2].type == RelayKind.VALVE
        assert configs[2].valve_mode == ValveMode.NORMALLY_OPEN
        assert configs[2].enabled is False

    def test_load_by_index(self):
        configs = load_relay_configs({"3": {"name": "Spare"}})

        assert configs[3].name == "Spare"
        assert configs[3].enabled is True

    @pytest.mark.parametrize("key", ["in5", "4", "pump"])
    def test_unknown_output_is_rejected(self, key):
        with pytest.raises(ValueError):
            load_relay_configs({key: {"name": "x"}})

    def test_invalid_type_is_rejected(self):
        with pytest.raises(ValueError):
            load_relay_configs({"in1": {"type": "heater"}})

    def test_read_from_file(self, tmp_path):
        path = tmp_path / "relays.json"
        path.write_text(json.dumps({"in2": {"name": "Garden", "type": "valve"}}), encoding="utf-8")

        configs = read_relay_configs(path)

        assert configs[1].name == "Garden"
        assert configs[1].verb(RelayAction.ON) == "open"


class TestVerbs:

    def test_pump(self):
        config = RelayConfig(name="Pump")
        assert config.verb(RelayAction.ON) == "activate"
        assert config.verb(RelayAction.OFF) == "deactivate"

    def test_normally_closed_valve(self):
        config = RelayConfig(name="Valve", type=RelayKind.VALVE)
        assert config.verb(RelayAction.ON) == "open"
        assert config.verb(RelayAction.OFF) == "close"

    def test_normally_open_valve(self):
        config = RelayConfig(name="Valve", type=RelayKind.VALVE, valve_mode=ValveMode.NORMALLY_OPEN)
        assert config.verb(RelayAction.ON) == "close"
        assert config.verb(RelayAction.OFF) == "open"
