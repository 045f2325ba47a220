"""
Engine Events - what subscribers observe while a program runs.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from ...state.models import utc_now


class EventKind(str, Enum):
    TICK = "tick"  # One second of a wait elapsed; carries remaining_seconds
    STEP_ADVANCED = "step_advanced"  # A relay or wait step is being dispatched; carries description
    FINISHED = "finished"  # Root sequence completed
    ERROR = "error"  # A relay command failed; carries reason
    CANCELLED = "cancelled"  # Emergency stop


class EngineEvent(BaseModel):
    kind: EventKind
    program_id: str
    remaining_seconds: Optional[int] = None
    description: Optional[str] = None
    reason: Optional[str] = None
    timestamp: datetime = Field(default_factory=utc_now)
