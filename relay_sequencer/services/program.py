"""
Program Service - Application Orchestration Layer

This service is the entry point for all program operations. It resolves
programs from the ProgramRepository, hands them to the ProgramEngine and
exposes run status, manual relay control and the action history to the API.
"""

import logging
from typing import Any, Dict, List, Optional

from ..actuators.exceptions import ActuatorFailure
from ..domain.models import Program, RelayAction, load_program
from ..domain.relays import RelayConfig
from ..execution.engine import ProgramEngine
from ..execution.schemas.sweep import SweepReport
from ..repositories.action_log import ActionLog
from ..repositories.program import ProgramRepository
from ..state.models import ActionLogEntry, RunProgress, utc_now
from .exceptions import EngineBusyError, ProgramDisabledError, RelayDisabledError

logger = logging.getLogger(__name__)


class ProgramService:
    def __init__(
        self,
        program_repository: ProgramRepository,
        action_log: ActionLog,
        engine: ProgramEngine,
    ):
        self.program_repo = program_repository
        self.action_log = action_log
        self.engine = engine

    def list_programs(self, enabled_only: bool = False) -> List[Program]:
        programs = self.program_repo.list_programs()
        if enabled_only:
            return [p for p in programs if p.enabled]
        return programs

    def get_program(self, program_id: str) -> Program:
        return self.program_repo.get_program(program_id)

    def import_program(self, data: Dict[str, Any]) -> Program:
        """
        Validates raw program data and stores it, replacing any program with
        the same ID. Raises MalformedProgram before anything is written.
        """
        program = load_program(data)
        self.program_repo.save_program(program)
        logger.info(f"Imported program '{program.id}' ({len(program.steps)} steps)")
        return program

    def delete_program(self, program_id: str) -> bool:
        return self.program_repo.delete_program(program_id)

    def start_program(self, program_id: str) -> bool:
        """
        Returns True if the run started, False if the engine is busy or the
        program is empty.

        Raises:
            ProgramNotFoundError: unknown ID.
            ProgramDisabledError: the program is switched off.
        """
        program = self.program_repo.get_program(program_id)
        if not program.enabled:
            raise ProgramDisabledError(program_id)
        return self.engine.start(program)

    async def stop(self) -> SweepReport:
        """Emergency stop: cancels any run and switches every output off."""
        return await self.engine.stop()

    def status(self) -> Optional[RunProgress]:
        return self.engine.progress

    async def relay_states(self) -> Dict[int, bool]:
        """Reads the outputs from the board. Raises ActuatorFailure if unreachable."""
        return await self.engine.actuator.get_state()

    def relay_configs(self) -> Dict[int, RelayConfig]:
        return self.engine.relay_configs

    async def set_relay(self, index: int, state: bool) -> ActionLogEntry:
        """
        Manually switches one output and records it in the action log.

        Raises:
            RelayDisabledError: the output is disabled in the relay config.
            EngineBusyError: a program or an all-off sweep is running.
            ActuatorFailure: the board rejected the command or is unreachable.
        """
        config = self.engine.relay_configs.get(index)
        if config is not None and not config.enabled:
            raise RelayDisabledError(index)
        if self.engine.is_busy:
            raise EngineBusyError()

        if not await self.engine.actuator.set_relay(index, state):
            action = RelayAction.ON if state else RelayAction.OFF
            raise ActuatorFailure(index, f"rejected {action.value}")

        logger.info(f"Relay {index} switched {'on' if state else 'off'} by hand")
        return self.action_log.append(index, state, utc_now())

    def history(self) -> List[ActionLogEntry]:
        return self.action_log.list_entries()

    def clear_history(self) -> None:
        self.action_log.clear()
