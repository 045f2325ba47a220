import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List

from fastapi import FastAPI, HTTPException, Depends, Path, status
from fastapi.responses import Response

from ..config import settings
from ..actuators.exceptions import ActuatorFailure, CancellationSweepFailure
from ..domain.exceptions import MalformedProgram
from ..infrastructure.database.connection import init_db
from ..services.exceptions import (
    EngineBusyError,
    ProgramDisabledError,
    ProgramNotFoundError,
    RelayDisabledError,
)
from ..services.program import ProgramService
from ..state.models import ActionLogEntry, EngineState
from .dependencies import get_actuator_client, get_program_service
from .schemas import (
    ProgramSummary,
    RelayCommand,
    StartResponse,
    StatusResponse,
    StopResponse,
)

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.STORAGE_BACKEND == "sql":
        init_db()
    yield
    await get_actuator_client().aclose()


app = FastAPI(title="Relay Sequencer", lifespan=lifespan)

# --- Programs ---

@app.get("/programs", response_model=List[ProgramSummary])
def list_programs(
    enabled_only: bool = False,
    service: ProgramService = Depends(get_program_service)
):
    return [
        ProgramSummary(id=p.id, name=p.name, enabled=p.enabled, step_count=len(p.steps))
        for p in service.list_programs(enabled_only=enabled_only)
    ]


@app.get("/programs/{program_id}")
def get_program(
    program_id: str,
    service: ProgramService = Depends(get_program_service)
):
    try:
        return service.get_program(program_id).to_json_dict()
    except ProgramNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@app.put("/programs")
def import_program(
    payload: Dict[str, Any],
    service: ProgramService = Depends(get_program_service)
):
    """Creates or replaces a program from the editor's JSON export."""
    try:
        program = service.import_program(payload)
    except MalformedProgram as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"field": e.field, "message": e.message},
        )
    return program.to_json_dict()


@app.delete("/programs/{program_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_program(
    program_id: str,
    service: ProgramService = Depends(get_program_service)
):
    if not service.delete_program(program_id):
        raise HTTPException(status_code=404, detail="Program not found")

    # For 204, we must explicitly return a Response object with no content
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# --- Execution ---
# These endpoints are async: the engine schedules runs on the server's event loop.

@app.post(
    "/programs/{program_id}/start",
    response_model=StartResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def start_program(
    program_id: str,
    service: ProgramService = Depends(get_program_service)
):
    try:
        started = service.start_program(program_id)
    except ProgramNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ProgramDisabledError as e:
        raise HTTPException(status_code=409, detail=str(e))

    if not started:
        raise HTTPException(
            status_code=409,
            detail="Another program is running or this program has no steps.",
        )
    return StartResponse(program_id=program_id, started=True)


@app.post("/stop", response_model=StopResponse)
async def emergency_stop(service: ProgramService = Depends(get_program_service)):
    report = await service.stop()
    try:
        report.raise_for_failures()
    except CancellationSweepFailure as e:
        # The engine is idle either way; the caller must check the outputs.
        raise HTTPException(status_code=502, detail=str(e))
    return StopResponse(results=report.results, failed_relays=report.failed_relays)


@app.get("/status", response_model=StatusResponse)
def get_status(service: ProgramService = Depends(get_program_service)):
    progress = service.status()
    if progress is None:
        return StatusResponse(state=EngineState.IDLE)
    return StatusResponse(**progress.model_dump())


@app.get("/relays")
async def get_relays(service: ProgramService = Depends(get_program_service)):
    try:
        states = await service.relay_states()
    except ActuatorFailure as e:
        raise HTTPException(status_code=502, detail=str(e))
    return {str(index): state for index, state in states.items()}


@app.get("/relays/config")
def get_relay_configs(service: ProgramService = Depends(get_program_service)):
    return {
        str(index): config.model_dump(mode="json", by_alias=True)
        for index, config in service.relay_configs().items()
    }


@app.post("/relays/{index}", response_model=ActionLogEntry)
async def set_relay(
    command: RelayCommand,
    index: int = Path(ge=0, le=3),
    service: ProgramService = Depends(get_program_service)
):
    """Manual switch. Refused while a program runs or for a disabled output."""
    try:
        return await service.set_relay(index, command.state)
    except (RelayDisabledError, EngineBusyError) as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ActuatorFailure as e:
        raise HTTPException(status_code=502, detail=str(e))


# --- History ---

@app.get("/history", response_model=List[ActionLogEntry])
def get_history(service: ProgramService = Depends(get_program_service)):
    return service.history()


@app.delete("/history", status_code=status.HTTP_204_NO_CONTENT)
def clear_history(service: ProgramService = Depends(get_program_service)):
    service.clear_history()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
