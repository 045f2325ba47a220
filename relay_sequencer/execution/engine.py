"""
Engine - Program Execution Layer

The ProgramEngine is the interpreter ("The Manager") that walks a program's
steps, drives the ActuatorClient, records transitions in the ActionLog and
reports progress to subscribers.
-----------------------------------------------

Position is tracked with an explicit ExecutionCursor (a call stack of
Frames) instead of nested callbacks, so a run can be suspended at a wait
and resumed from the top frame.

The Control Logic is "Momentum-Based":
1. RelaySteps and LoopSteps are zero-duration transitions: the engine keeps
    the floor and dispatches the next step immediately (Running).
2. A WaitStep starts the countdown timer and suspends the run until the
    countdown reaches zero (Waiting), then interpretation continues.
3. Reaching the end of the root sequence, a failed relay command or an
    emergency stop returns the engine to Idle.

Only one program runs at a time. Every run carries its own cancellation
flag: once stop() records it, the interpreter never acts on the result of
an in-flight command and never dispatches another step.
"""

import asyncio
import logging
import random
from datetime import datetime
from typing import AsyncIterator, Callable, Dict, List, Optional

from ..actuators.exceptions import ActuatorFailure
from ..actuators.interface import ActuatorClient
from ..config import settings
from ..domain.models import LoopStep, Program, RelayStep, WaitStep
from ..domain.relays import RelayConfig, default_relay_configs
from ..repositories.action_log import ActionLog
from ..state.models import EngineState, ExecutionCursor, RunProgress, utc_now
from .descriptions import describe_step
from .schemas.events import EngineEvent, EventKind
from .schemas.sweep import SweepReport
from .timer import CountdownTimer

logger = logging.getLogger(__name__)

EventListener = Callable[[EngineEvent], None]


class _Run:
    """Bookkeeping for one execution of a program."""

    def __init__(self, program: Program):
        self.program = program
        self.cursor = ExecutionCursor.for_program(program)
        self.cancelled = False
        self.timer: Optional[CountdownTimer] = None
        self.remaining_seconds: Optional[int] = None


class ProgramEngine:
    def __init__(
        self,
        actuator: ActuatorClient,
        action_log: ActionLog,
        relay_configs: Optional[Dict[int, RelayConfig]] = None,
        tick_interval: float = settings.TICK_INTERVAL_SECONDS,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.actuator = actuator
        self.action_log = action_log
        self.relay_configs = relay_configs or default_relay_configs()
        self.tick_interval = tick_interval
        self._rng = rng or random.Random()
        self._clock = clock

        self._state = EngineState.IDLE
        self._run: Optional[_Run] = None
        self._task: Optional[asyncio.Task] = None
        self._listeners: List[EventListener] = []
        self._sweeps_in_flight = 0

    # ==========================================================================
    # Public Boundary
    # ==========================================================================

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def is_idle(self) -> bool:
        return self._state == EngineState.IDLE

    @property
    def is_busy(self) -> bool:
        """True while a program runs or an all-off sweep is still in flight."""
        return not self.is_idle or self._sweeps_in_flight > 0

    @property
    def progress(self) -> Optional[RunProgress]:
        """Snapshot of the running program, or None when Idle."""
        run = self._run
        if run is None:
            return None

        step = run.cursor.pending_step
        return RunProgress(
            program_id=run.program.id,
            program_name=run.program.name,
            state=self._state,
            current_action=describe_step(step, self.relay_configs) if step else None,
            remaining_seconds=(
                run.remaining_seconds if self._state == EngineState.WAITING else None
            ),
        )

    def start(self, program: Program) -> bool:
        """
        Starts `program` in the background. Must be called from a running
        event loop. Returns False (and changes nothing) if a program is already
        running, an emergency-stop sweep is still switching outputs off, or
        `program` has no steps.
        """
        if self._sweeps_in_flight:
            logger.info(f"Ignoring start of '{program.id}': all-off sweep in progress")
            return False
        if not self.is_idle:
            logger.info(
                f"Ignoring start of '{program.id}': '{self._run.program.id}' is {self._state.value}"
            )
            return False
        if not program.steps:
            logger.info(f"Ignoring start of '{program.id}': program has no steps")
            return False

        run = _Run(program)
        self._run = run
        self._state = EngineState.RUNNING
        self._task = asyncio.get_running_loop().create_task(self._interpret(run))
        logger.info(f"Program '{program.id}' started")
        return True

    async def stop(self) -> SweepReport:
        """
        Emergency stop. Cancels the running program (if any), then switches
        every output off regardless of state. Sweep failures are logged and
        reported but never block the transition to Idle.
        """
        run = self._run
        if run is not None:
            run.cancelled = True
            if run.timer is not None:
                run.timer.cancel()
            run.cursor.clear()
            self._go_idle()

            task = self._task
            if task is not None and not task.done() and task is not asyncio.current_task():
                task.cancel()

            logger.warning(f"Program '{run.program.id}' cancelled by emergency stop")
            self._emit(EngineEvent(kind=EventKind.CANCELLED, program_id=run.program.id))

        self._sweeps_in_flight += 1
        try:
            report = SweepReport(results=await self.actuator.set_all_off())
        finally:
            self._sweeps_in_flight -= 1
        if not report.ok:
            logger.error(f"All-off sweep failed for relays {report.failed_relays}")
        return report

    async def wait_until_idle(self) -> None:
        """Waits for the current interpretation task (if any) to wind down."""
        task = self._task
        if task is None or task.done():
            return
        # asyncio.wait never raises the task's own cancellation
        await asyncio.wait({task})

    def subscribe(self, listener: EventListener) -> Callable[[], None]:
        """Registers `listener` for every engine event. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def events(self) -> AsyncIterator[EngineEvent]:
        """Async stream of engine events, starting from the moment of the call."""
        queue: asyncio.Queue = asyncio.Queue()
        unsubscribe = self.subscribe(queue.put_nowait)
        try:
            while True:
                yield await queue.get()
        finally:
            unsubscribe()

    # ==========================================================================
    # Interpretation Loop
    # ==========================================================================

    async def _interpret(self, run: _Run) -> None:
        try:
            while not run.cancelled:
                frame = run.cursor.active_frame

                # 1. End of the current sequence
                if frame.exhausted:
                    if frame.is_root:
                        self._finish(run)
                        return
                    run.cursor.complete_pass()
                    continue

                # 2. Dispatch the step under the cursor
                step = frame.current_step
                if isinstance(step, RelayStep):
                    if not await self._dispatch_relay(run, step):
                        return
                elif isinstance(step, WaitStep):
                    if not await self._dispatch_wait(run, step):
                        return
                elif isinstance(step, LoopStep):
                    if step.body:
                        run.cursor.push_loop(step)
                    else:
                        run.cursor.advance()
                    # Yield so a pending stop() is observed inside loop-only bodies
                    await asyncio.sleep(0)

        except asyncio.CancelledError:
            logger.debug(f"Interpretation of '{run.program.id}' interrupted")
            raise
        except Exception as e:
            logger.exception(f"Program '{run.program.id}' crashed")
            if not run.cancelled:
                self._abort(run, f"internal error: {e}")

    async def _dispatch_relay(self, run: _Run, step: RelayStep) -> bool:
        """Returns True if interpretation may continue."""
        description = describe_step(step, self.relay_configs)
        self._emit(
            EngineEvent(
                kind=EventKind.STEP_ADVANCED,
                program_id=run.program.id,
                description=description,
            )
        )
        logger.debug(f"[{run.program.id}] relay {step.relay} -> {step.action.value}")

        try:
            success = await self.actuator.set_relay(step.relay, step.target_state)
            reason = None if success else f"relay {step.relay} rejected {step.action.value}"
        except ActuatorFailure as e:
            success, reason = False, str(e)

        # The emergency stop owns the outputs now; drop the result.
        if run.cancelled:
            return False

        if not success:
            logger.error(f"Program '{run.program.id}' aborted: {reason}")
            self._abort(run, reason)
            return False

        self.action_log.append(step.relay, step.target_state, self._clock())
        run.cursor.advance()

        # Yield so a pending stop() is observed before the next step.
        await asyncio.sleep(0)
        return not run.cancelled

    async def _dispatch_wait(self, run: _Run, step: WaitStep) -> bool:
        """Returns True if interpretation may continue."""
        seconds = step.resolve_duration(self._rng)
        run.remaining_seconds = seconds
        self._state = EngineState.WAITING
        self._emit(
            EngineEvent(
                kind=EventKind.STEP_ADVANCED,
                program_id=run.program.id,
                description=describe_step(step, self.relay_configs),
                remaining_seconds=seconds,
            )
        )

        timer = CountdownTimer(
            seconds,
            on_tick=lambda remaining: self._on_tick(run, remaining),
            interval=self.tick_interval,
        )
        run.timer = timer
        timer.start()
        try:
            completed = await timer.wait()
        finally:
            timer.cancel()
            run.timer = None

        if not completed or run.cancelled:
            return False

        run.remaining_seconds = None
        self._state = EngineState.RUNNING
        run.cursor.advance()
        return True

    def _on_tick(self, run: _Run, remaining: int) -> None:
        if run.cancelled:
            return
        run.remaining_seconds = remaining
        self._emit(
            EngineEvent(
                kind=EventKind.TICK,
                program_id=run.program.id,
                remaining_seconds=remaining,
            )
        )

    # ==========================================================================
    # Terminal Transitions
    # ==========================================================================

    def _finish(self, run: _Run) -> None:
        run.cursor.clear()
        self._go_idle()
        logger.info(f"Program '{run.program.id}' finished")
        self._emit(EngineEvent(kind=EventKind.FINISHED, program_id=run.program.id))

    def _abort(self, run: _Run, reason: str) -> None:
        run.cursor.clear()
        self._go_idle()
        self._emit(EngineEvent(kind=EventKind.ERROR, program_id=run.program.id, reason=reason))

    def _go_idle(self) -> None:
        self._run = None
        self._state = EngineState.IDLE

    def _emit(self, event: EngineEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception(f"Event listener failed on {event.kind.value}")
