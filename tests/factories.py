"""Builders for programs used across the test suite."""

from relay_sequencer.domain.models import (
    DurationType,
    LoopStep,
    Program,
    RelayAction,
    RelayStep,
    WaitStep,
)


def relay(relay_index, action, step_id=None):
    """Shorthand for a RelayStep; ids are generated when not given."""
    kwargs = {"relay": relay_index, "action": RelayAction(action)}
    if step_id:
        kwargs["id"] = step_id
    return RelayStep(**kwargs)


def wait(seconds, step_id=None):
    kwargs = {"duration": seconds}
    if step_id:
        kwargs["id"] = step_id
    return WaitStep(**kwargs)


def random_wait(low, high):
    return WaitStep(duration_type=DurationType.RANDOM, duration_min=low, duration_max=high)


def loop(iterations, *body):
    return LoopStep(iterations=iterations, body=list(body))


def make_program(*steps, program_id="test_program", name="Test program", enabled=True):
    return Program(id=program_id, name=name, enabled=enabled, steps=list(steps))
