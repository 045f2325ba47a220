"""
API Layer - Request/Response Schemas

Pydantic models for API request and response validation.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel

from ..state.models import EngineState


class ProgramSummary(BaseModel):
    id: str
    name: str
    enabled: bool
    step_count: int


class StartResponse(BaseModel):
    program_id: str
    started: bool


class StatusResponse(BaseModel):
    state: EngineState
    program_id: Optional[str] = None
    program_name: Optional[str] = None
    current_action: Optional[str] = None
    remaining_seconds: Optional[int] = None


class StopResponse(BaseModel):
    results: Dict[int, bool]
    failed_relays: List[int]


class RelayCommand(BaseModel):
    state: bool
