"""
State Layer - Runtime Data Models

This module defines the ephemeral state of a program run. The engine
tracks its position with an explicit Call Stack of Frames: the root frame
walks the program's steps and every LoopStep being executed pushes a frame
for its body. Nothing here outlives the run.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator

from ..domain.models import LoopStep, Program, RelayAction, Step


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class EngineState(str, Enum):
    IDLE = "idle"  # No program running
    RUNNING = "running"  # Dispatching steps
    WAITING = "waiting"  # Countdown active


class Frame(BaseModel):
    """
    Represents a single item on the call stack.
    """
    steps: List[Step]
    index: int = 0

    # Only set for loop frames
    loop_step_id: Optional[str] = None
    iterations: int = 1
    completed_iterations: int = 0

    @property
    def is_root(self) -> bool:
        return self.loop_step_id is None

    @property
    def exhausted(self) -> bool:
        return self.index >= len(self.steps)

    @property
    def current_step(self) -> Optional[Step]:
        if self.exhausted:
            return None
        return self.steps[self.index]


class ExecutionCursor(BaseModel):
    """
    Position of a run across nested sequences. The top frame is where
    interpretation resumes after a wait.
    """
    stack: List[Frame] = Field(default_factory=list)

    @classmethod
    def for_program(cls, program: Program) -> "ExecutionCursor":
        return cls(stack=[Frame(steps=program.steps)])

    @property
    def active_frame(self) -> Optional[Frame]:
        if not self.stack:
            return None
        return self.stack[-1]

    @property
    def depth(self) -> int:
        return len(self.stack)

    @property
    def current_step(self) -> Optional[Step]:
        frame = self.active_frame
        return frame.current_step if frame else None

    @property
    def pending_step(self) -> Optional[Step]:
        """
        The step interpretation is busy with. When the top frame has run off
        the end of a loop body this is the enclosing LoopStep.
        """
        for frame in reversed(self.stack):
            if not frame.exhausted:
                return frame.current_step
        return None

    def advance(self) -> None:
        self.stack[-1].index += 1

    def push_loop(self, loop: LoopStep) -> Frame:
        frame = Frame(steps=loop.body, loop_step_id=loop.id, iterations=loop.iterations)
        self.stack.append(frame)
        return frame

    def complete_pass(self) -> bool:
        """
        Called when a loop frame reached the end of its body. Either rewinds
        the body for another pass or pops the frame and moves the parent past
        the LoopStep. Returns True when the loop is finished.
        """
        frame = self.stack[-1]
        frame.completed_iterations += 1
        if frame.completed_iterations < frame.iterations:
            frame.index = 0
            return False
        self.stack.pop()
        self.advance()
        return True

    def clear(self) -> None:
        self.stack.clear()


class RunProgress(BaseModel):
    """What the engine reports while a program is running."""
    program_id: str
    program_name: str
    state: EngineState
    current_action: Optional[str] = None
    remaining_seconds: Optional[int] = None


class ActionLogEntry(BaseModel):
    """One relay transition, as recorded for the history view."""
    id: str = Field(default_factory=lambda: uuid4().hex)
    relay: int
    action: RelayAction
    timestamp: datetime = Field(default_factory=utc_now)

    @field_validator("timestamp")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # Naive clock readings are taken to be UTC; the SQL log only stores aware datetimes
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
