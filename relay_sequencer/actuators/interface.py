import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Dict

from ..domain.relays import RELAY_INDICES
from .exceptions import ActuatorFailure

logger = logging.getLogger(__name__)


class ActuatorClient(ABC):
    """
    Abstract Base Class interface that defines the contract for anything that
    can switch the four outputs (the relay board over HTTP, a simulator, ...)
    """

    @abstractmethod
    async def set_relay(self, index: int, state: bool) -> bool:
        """
        Switches output `index` (0-3) on or off.
        Returns False if the board rejected the command; raises
        ActuatorFailure if it could not be reached.
        """
        pass

    @abstractmethod
    async def get_state(self) -> Dict[int, bool]:
        """Current state of every output, keyed by index."""
        pass

    async def set_all_off(self) -> Dict[int, bool]:
        """
        Sends one explicit OFF command per output. Every command is attempted
        even if others fail; the result maps index -> success.
        """
        results = await asyncio.gather(*(self._switch_off(index) for index in RELAY_INDICES))
        return dict(zip(RELAY_INDICES, results))

    async def _switch_off(self, index: int) -> bool:
        try:
            return await self.set_relay(index, False)
        except ActuatorFailure as e:
            logger.error(f"All-off command failed: {e}")
            return False

    async def aclose(self) -> None:
        """Releases network resources, if any."""
        pass
