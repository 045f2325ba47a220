"""
Shared pytest fixtures for the Relay Sequencer test suite.

The environment is pinned before the package is imported so the settings
singleton never points at real hardware or an on-disk database.
"""
import os

os.environ.setdefault("ACTUATOR_BACKEND", "simulated")
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import create_engine

from relay_sequencer.actuators.adapters.simulated import SimulatedActuatorClient
from relay_sequencer.execution.engine import ProgramEngine
from relay_sequencer.infrastructure.database.connection import init_db
from relay_sequencer.repositories.action_log import InMemoryActionLog


@pytest.fixture
def actuator():
    return SimulatedActuatorClient()


@pytest.fixture
def action_log():
    return InMemoryActionLog()


@pytest.fixture
def engine(actuator, action_log):
    """Engine with a zero tick interval so waits finish instantly."""
    return ProgramEngine(actuator=actuator, action_log=action_log, tick_interval=0.0)


@pytest.fixture
def events(engine):
    """Every event the engine emits, in order."""
    received = []
    engine.subscribe(received.append)
    return received


@pytest.fixture
def db_engine():
    """Fresh in-memory SQLite database shared across threads."""
    db = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(db)
    return db
