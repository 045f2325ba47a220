"""
Dependency Injection Wiring (Composition Root).

This module acts as the central "container" for the application's services.
It is responsible for:
1. Instantiating the core Singleton services (Repositories, Adapters, Engine).
2. Wiring them together (e.g., injecting the ActuatorClient and ActionLog into the Engine).
3. Managing the lifecycle of these objects using @lru_cache to ensure
   they are created only once per application process.

Tests override get_program_service through FastAPI's dependency_overrides.
"""


from functools import lru_cache
from pathlib import Path
from typing import Dict

from ..config import settings
from ..actuators.interface import ActuatorClient
from ..actuators.adapters.http_adapter import HttpActuatorClient
from ..actuators.adapters.simulated import SimulatedActuatorClient
from ..domain.relays import RelayConfig, default_relay_configs, read_relay_configs
from ..repositories.action_log import ActionLog, InMemoryActionLog, SqlActionLog
from ..repositories.program import ProgramRepository, StaticProgramRepository, SqlProgramRepository
from ..execution.engine import ProgramEngine
from ..services.program import ProgramService

# Actuator Client (Singleton)
@lru_cache()
def get_actuator_client() -> ActuatorClient:
    if settings.ACTUATOR_BACKEND == "simulated":
        return SimulatedActuatorClient()
    return HttpActuatorClient(
        base_url=settings.ACTUATOR_BASE_URL,
        timeout=settings.ACTUATOR_TIMEOUT_SECONDS,
    )

# Program Repository (Singleton)
# Note: In-memory storage must be a singleton so data persists across requests!
@lru_cache()
def get_program_repository() -> ProgramRepository:
    if settings.STORAGE_BACKEND == "memory":
        return StaticProgramRepository()
    return SqlProgramRepository()

# Action Log (Singleton)
@lru_cache()
def get_action_log() -> ActionLog:
    if settings.STORAGE_BACKEND == "memory":
        return InMemoryActionLog(max_entries=settings.ACTION_LOG_MAX_ENTRIES)
    return SqlActionLog(max_entries=settings.ACTION_LOG_MAX_ENTRIES)

# Relay Configs (Singleton)
@lru_cache()
def get_relay_configs() -> Dict[int, RelayConfig]:
    if settings.RELAY_CONFIG_FILE:
        return read_relay_configs(Path(settings.RELAY_CONFIG_FILE))
    return default_relay_configs()

# The Engine (Singleton Service)
# One engine per process: programs and manual switching share its board and log.
@lru_cache()
def get_program_engine() -> ProgramEngine:
    return ProgramEngine(
        actuator=get_actuator_client(),
        action_log=get_action_log(),
        relay_configs=get_relay_configs(),
        tick_interval=settings.TICK_INTERVAL_SECONDS,
    )

# The Program Service (Singleton Service)
@lru_cache()
def get_program_service() -> ProgramService:
    """
    Injects all necessary components into the ProgramService.
    """
    return ProgramService(
        program_repository=get_program_repository(),
        action_log=get_action_log(),
        engine=get_program_engine(),
    )
