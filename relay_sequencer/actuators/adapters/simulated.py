import asyncio
from typing import Dict, Iterable, List, Tuple

from ..exceptions import ActuatorFailure
from ..interface import ActuatorClient
from ...domain.relays import RELAY_INDICES


class SimulatedActuatorClient(ActuatorClient):
    """
    In-memory relay board for development and tests.

    Records every command it receives in `commands`. Failures can be injected
    by call number (1-based, the board answers success=0) or by relay index
    (the board is unreachable and ActuatorFailure is raised).
    """

    def __init__(
        self,
        fail_on_calls: Iterable[int] = (),
        unreachable_relays: Iterable[int] = (),
        latency: float = 0.0,
    ):
        self.states: Dict[int, bool] = {index: False for index in RELAY_INDICES}
        self.commands: List[Tuple[int, bool]] = []
        self.latency = latency
        self._fail_on_calls = set(fail_on_calls)
        self._unreachable_relays = set(unreachable_relays)

    async def set_relay(self, index: int, state: bool) -> bool:
        self.commands.append((index, state))
        call_number = len(self.commands)

        if self.latency:
            await asyncio.sleep(self.latency)

        if index in self._unreachable_relays:
            raise ActuatorFailure(index, "board unreachable")
        if call_number in self._fail_on_calls:
            return False

        self.states[index] = state
        return True

    async def get_state(self) -> Dict[int, bool]:
        return dict(self.states)
