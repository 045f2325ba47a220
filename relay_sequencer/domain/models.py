"""
Domain Layer - Program Data Models

This module defines the static structure of an automation program: an
ordered list of Steps that switch relays, wait, or repeat a block of
nested steps. Programs are authored elsewhere (the editor exports JSON)
and are read-only input for the ProgramEngine.

The JSON wire format uses camelCase keys (durationType, durationMin,
durationMax, loopSteps); the Python attributes are snake_case and both
spellings are accepted when parsing.
"""

import random
from enum import Enum
from typing import Annotated, Any, Dict, Iterator, List, Literal, Optional, Union
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
from pydantic_core import PydanticCustomError

from .exceptions import MalformedProgram


class RelayAction(str, Enum):
    ON = "ON"
    OFF = "OFF"


class DurationType(str, Enum):
    """
    fixed: wait exactly `duration` seconds.
    random: wait a whole number of seconds drawn from [durationMin, durationMax].
    """
    FIXED = "fixed"
    RANDOM = "random"


def _new_step_id() -> str:
    return uuid4().hex


class _StepBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = Field(default_factory=_new_step_id)


class RelayStep(_StepBase):
    """Switch one output. `relay` is the zero-based output index (0-3)."""

    type: Literal["relay"] = "relay"
    relay: int = Field(ge=0, le=3)
    action: RelayAction

    @property
    def target_state(self) -> bool:
        return self.action == RelayAction.ON


class WaitStep(_StepBase):
    """
    Pause before the next step.

    Attributes:
        duration_type: fixed or random.
        duration: Seconds to wait (fixed waits).
        duration_min: Lower bound in seconds, inclusive (random waits).
        duration_max: Upper bound in seconds, inclusive (random waits).
    """

    type: Literal["wait"] = "wait"
    duration_type: DurationType = Field(DurationType.FIXED, alias="durationType")
    duration: Optional[int] = Field(None, ge=0)
    duration_min: Optional[int] = Field(None, ge=0, alias="durationMin")
    duration_max: Optional[int] = Field(None, ge=0, alias="durationMax")

    @model_validator(mode="after")
    def _check_duration_fields(self) -> "WaitStep":
        if self.duration_type == DurationType.FIXED:
            if self.duration is None:
                raise PydanticCustomError(
                    "missing_duration",
                    "duration is required for a fixed wait",
                    {"field": "duration"},
                )
            return self

        for name, value in (("durationMin", self.duration_min), ("durationMax", self.duration_max)):
            if value is None:
                raise PydanticCustomError(
                    "missing_duration",
                    "{field} is required for a random wait",
                    {"field": name},
                )
        if self.duration_min > self.duration_max:
            raise PydanticCustomError(
                "inverted_range",
                "durationMin ({low}) must not exceed durationMax ({high})",
                {"field": "durationMin", "low": self.duration_min, "high": self.duration_max},
            )
        return self

    def resolve_duration(self, rng: Optional[random.Random] = None) -> int:
        """Seconds to wait. Random waits draw once per call, bounds inclusive."""
        if self.duration_type == DurationType.FIXED:
            return self.duration
        rng = rng or random
        return rng.randint(self.duration_min, self.duration_max)


class LoopStep(_StepBase):
    """Repeat `body` (`loopSteps` on the wire) `iterations` times. Bodies may nest loops."""

    type: Literal["loop"] = "loop"
    iterations: int = Field(ge=1)
    body: List["Step"] = Field(default_factory=list, alias="loopSteps")


Step = Annotated[Union[RelayStep, WaitStep, LoopStep], Field(discriminator="type")]

LoopStep.model_rebuild()


class Program(BaseModel):
    """
    A named automation sequence.

    Attributes:
        id: Unique identifier of the program.
        name: Human-readable title shown to the user.
        enabled: Disabled programs are listed but cannot be started.
        steps: Root step sequence, executed top to bottom.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    enabled: bool = True
    steps: List[Step] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_unique_step_ids(self) -> "Program":
        seen = set()
        for step in self.iter_steps():
            if step.id in seen:
                raise PydanticCustomError(
                    "duplicate_step_id",
                    "step id '{step_id}' is used more than once",
                    {"field": "steps", "step_id": step.id},
                )
            seen.add(step.id)
        return self

    def iter_steps(self) -> Iterator[Union[RelayStep, WaitStep, LoopStep]]:
        """Depth-first walk over every step, including loop bodies."""
        pending = list(reversed(self.steps))
        while pending:
            step = pending.pop()
            yield step
            if isinstance(step, LoopStep):
                pending.extend(reversed(step.body))

    def to_json_dict(self) -> Dict[str, Any]:
        """Serialize using the editor's camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)


# ==============================================================================
# Parsing
# ==============================================================================

_STEP_TAGS = {"relay", "wait", "loop"}


def _field_path(error: Dict[str, Any]) -> str:
    """
    Turns a pydantic error location into a dotted path such as
    'steps.2.loopSteps.0.relay'. Discriminator tags that pydantic inserts
    after list indexes are dropped.
    """
    parts: List[str] = []
    previous: Any = None
    for item in error.get("loc", ()):
        if isinstance(item, str) and isinstance(previous, int) and item in _STEP_TAGS:
            previous = item
            continue
        parts.append(str(item))
        previous = item

    extra = (error.get("ctx") or {}).get("field")
    if extra:
        parts.append(extra)
    return ".".join(parts) or "program"


def load_program(data: Dict[str, Any]) -> Program:
    """
    Validates raw program data (e.g. parsed from an exported JSON file).

    Raises:
        MalformedProgram: naming the first offending field.
    """
    try:
        return Program.model_validate(data)
    except ValidationError as exc:
        first = exc.errors()[0]
        raise MalformedProgram(_field_path(first), first["msg"]) from exc


def load_programs(data: Any) -> List[Program]:
    """Accepts a list of programs or an object with a 'programs' list."""
    if isinstance(data, dict) and "programs" in data:
        data = data["programs"]
    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list):
        raise MalformedProgram("programs", "expected a program or a list of programs")

    programs = []
    for index, item in enumerate(data):
        try:
            programs.append(load_program(item))
        except MalformedProgram as exc:
            raise MalformedProgram(f"{index}.{exc.field}", exc.message) from exc
    return programs
