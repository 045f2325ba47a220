"""
Tests for the program model and its validation.

Run with: pytest -q
"""
import random

import pytest

from relay_sequencer.domain.exceptions import MalformedProgram
from relay_sequencer.domain.models import (
    DurationType,
    LoopStep,
    RelayAction,
    RelayStep,
    WaitStep,
    load_program,
    load_programs,
)

from factories import loop, make_program, relay, wait


def exported_program(**overrides):
    """A program as the editor exports it (camelCase keys)."""
    data = {
        "id": "p1",
        "name": "Morning watering",
        "enabled": True,
        "steps": [
            {"id": "s1", "type": "relay", "relay": 0, "action": "ON"},
            {"id": "s2", "type": "wait", "durationType": "fixed", "duration": 10},
            {
                "id": "s3",
                "type": "loop",
                "iterations": 3,
                "loopSteps": [
                    {"id": "s4", "type": "relay", "relay": 1, "action": "ON"},
                    {
                        "id": "s5",
                        "type": "wait",
                        "durationType": "random",
                        "durationMin": 2,
                        "durationMax": 4,
                    },
                    {"id": "s6", "type": "relay", "relay": 1, "action": "OFF"},
                ],
            },
            {"id": "s7", "type": "relay", "relay": 0, "action": "OFF"},
        ],
    }
    data.update(overrides)
    return data


class TestLoadProgram:
    """Parsing exported JSON into Program models."""

    def test_parses_all_step_variants(self):
        """Test relay, wait and loop steps are parsed into their own types."""
        program = load_program(exported_program())

        assert [type(s) for s in program.steps] == [RelayStep, WaitStep, LoopStep, RelayStep]
        loop_step = program.steps[2]
        assert loop_step.iterations == 3
        assert [s.id for s in loop_step.body] == ["s4", "s5", "s6"]
        assert loop_step.body[1].duration_type == DurationType.RANDOM
        assert loop_step.body[1].duration_min == 2
        assert loop_step.body[1].duration_max == 4

    def test_enabled_defaults_to_true(self):
        """Test programs without an enabled flag are enabled."""
        data = exported_program()
        del data["enabled"]
        assert load_program(data).enabled is True

    def test_serializes_back_to_camel_case(self):
        """Test to_json_dict uses the editor's key names."""
        data = load_program(exported_program()).to_json_dict()

        assert data["steps"][1]["durationType"] == "fixed"
        assert data["steps"][2]["loopSteps"][1]["durationMin"] == 2
        assert "body" not in data["steps"][2]

    def test_iter_steps_walks_nested_bodies_depth_first(self):
        """Test iter_steps visits loop bodies in place."""
        program = load_program(exported_program())
        assert [s.id for s in program.iter_steps()] == ["s1", "s2", "s3", "s4", "s5", "s6", "s7"]

    def test_load_programs_accepts_wrapped_list(self):
        """Test a {'programs': [...]} document yields every program."""
        second = exported_program(id="p2")
        programs = load_programs({"programs": [exported_program(), second]})
        assert [p.id for p in programs] == ["p1", "p2"]

    def test_load_programs_accepts_single_object(self):
        """Test a single program document is wrapped in a list."""
        assert [p.id for p in load_programs(exported_program())] == ["p1"]


class TestValidation:
    """MalformedProgram names the offending field."""

    def test_relay_index_out_of_range(self):
        data = exported_program()
        data["steps"][0]["relay"] = 4

        with pytest.raises(MalformedProgram) as exc_info:
            load_program(data)
        assert exc_info.value.field == "steps.0.relay"

    def test_nested_relay_index_out_of_range(self):
        data = exported_program()
        data["steps"][2]["loopSteps"][0]["relay"] = -1

        with pytest.raises(MalformedProgram) as exc_info:
            load_program(data)
        assert exc_info.value.field == "steps.2.loopSteps.0.relay"

    def test_negative_duration(self):
        data = exported_program()
        data["steps"][1]["duration"] = -5

        with pytest.raises(MalformedProgram) as exc_info:
            load_program(data)
        assert exc_info.value.field == "steps.1.duration"

    def test_fixed_wait_without_duration(self):
        data = exported_program()
        del data["steps"][1]["duration"]

        with pytest.raises(MalformedProgram) as exc_info:
            load_program(data)
        assert exc_info.value.field == "steps.1.duration"

    def test_random_wait_without_upper_bound(self):
        data = exported_program()
        del data["steps"][2]["loopSteps"][1]["durationMax"]

        with pytest.raises(MalformedProgram) as exc_info:
            load_program(data)
        assert exc_info.value.field == "steps.2.loopSteps.1.durationMax"

    def test_random_wait_with_inverted_range(self):
        data = exported_program()
        data["steps"][2]["loopSteps"][1]["durationMin"] = 9

        with pytest.raises(MalformedProgram) as exc_info:
            load_program(data)
        assert exc_info.value.field == "steps.2.loopSteps.1.durationMin"

    def test_zero_iterations(self):
        data = exported_program()
        data["steps"][2]["iterations"] = 0

        with pytest.raises(MalformedProgram) as exc_info:
            load_program(data)
        assert exc_info.value.field == "steps.2.iterations"

    def test_duplicate_step_id_inside_loop(self):
        data = exported_program()
        data["steps"][2]["loopSteps"][2]["id"] = "s1"

        with pytest.raises(MalformedProgram) as exc_info:
            load_program(data)
        assert exc_info.value.field == "steps"
        assert "s1" in exc_info.value.message

    def test_unknown_step_type(self):
        data = exported_program()
        data["steps"][0]["type"] = "beep"

        with pytest.raises(MalformedProgram) as exc_info:
            load_program(data)
        assert exc_info.value.field == "steps.0"

    def test_load_programs_prefixes_program_index(self):
        bad = exported_program(id="p2")
        bad["steps"][0]["relay"] = 7

        with pytest.raises(MalformedProgram) as exc_info:
            load_programs([exported_program(), bad])
        assert exc_info.value.field == "1.steps.0.relay"

    def test_str_contains_field_and_message(self):
        error = MalformedProgram("steps.0.relay", "too large")
        assert str(error) == "steps.0.relay: too large"


class TestSteps:
    """Behaviour attached to individual steps."""

    def test_relay_target_state(self):
        assert relay(0, "ON").target_state is True
        assert relay(0, "OFF").target_state is False

    def test_fixed_wait_resolves_literal_duration(self):
        assert wait(12).resolve_duration() == 12

    def test_random_wait_stays_within_bounds(self):
        step = WaitStep(duration_type=DurationType.RANDOM, duration_min=3, duration_max=6)
        rng = random.Random(42)

        draws = {step.resolve_duration(rng) for _ in range(200)}
        assert draws <= {3, 4, 5, 6}
        assert {3, 6} <= draws

    def test_random_wait_with_equal_bounds(self):
        step = WaitStep(duration_type=DurationType.RANDOM, duration_min=5, duration_max=5)
        assert step.resolve_duration(random.Random(0)) == 5

    def test_generated_step_ids_are_unique(self):
        program = make_program(relay(0, "ON"), loop(2, relay(1, "ON"), relay(1, "OFF")))
        ids = [s.id for s in program.iter_steps()]
        assert len(ids) == len(set(ids)) == 4

    def test_steps_are_immutable(self):
        step = relay(2, "ON")
        with pytest.raises(Exception):
            step.relay = 3
        assert step.action == RelayAction.ON
