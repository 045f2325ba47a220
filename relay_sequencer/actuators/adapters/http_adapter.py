from typing import Dict, Optional

import httpx

from ..exceptions import ActuatorFailure
from ..interface import ActuatorClient
from ...config import settings
from ...domain.relays import RELAY_INDICES


class HttpActuatorClient(ActuatorClient):
    """
    Talks to the relay board's HTTP API:
        POST /relay/set  {"relay": 0-3, "state": 0|1}  -> {"success": 1}
        GET  /state                                     -> {"in1": 0|1, ..., "in4": 0|1}
    """

    def __init__(
        self,
        base_url: str = settings.ACTUATOR_BASE_URL,
        timeout: float = settings.ACTUATOR_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def set_relay(self, index: int, state: bool) -> bool:
        try:
            response = await self.client.post(
                "/relay/set", json={"relay": index, "state": 1 if state else 0}
            )
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise ActuatorFailure(index, str(e) or e.__class__.__name__) from e

        return int(payload.get("success", 0)) == 1

    async def get_state(self) -> Dict[int, bool]:
        try:
            response = await self.client.get("/state")
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise ActuatorFailure(-1, f"could not read relay state: {e}") from e

        # The board names its outputs in1..in4
        return {index: bool(payload.get(f"in{index + 1}", 0)) for index in RELAY_INDICES}

    async def aclose(self) -> None:
        await self.client.aclose()
