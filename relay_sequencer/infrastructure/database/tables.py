"""
Database Table Definitions.

This module defines the SQL schema using SQLModel.
We use the 'DBModel' suffix to distinguish these persistence models
from the Pydantic domain models (Program, ActionLogEntry).
"""

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import Column, JSON
from sqlmodel import Field, SQLModel

from ...state.models import utc_now


class ProgramDBModel(SQLModel, table=True):
    """
    Persistence model for Programs.
    Maps 1-to-1 with the 'programs' table.
    """

    __tablename__ = "programs"

    program_id: str = Field(primary_key=True)
    name: str
    enabled: bool = Field(default=True)

    # Store the entire nested step tree (camelCase wire format) as JSON.
    program_data: Dict[str, Any] = Field(sa_column=Column(JSON, nullable=False))

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class ActionLogDBModel(SQLModel, table=True):
    """
    Persistence model for relay transitions.
    Maps 1-to-1 with the 'action_logs' table.
    """

    __tablename__ = "action_logs"

    # Autoincrement key keeps insertion order
    id: Optional[int] = Field(default=None, primary_key=True)
    entry_id: str = Field(index=True)
    relay: int
    action: str
    timestamp: datetime
