"""
Actuator Exceptions
"""

from typing import Iterable


class ActuatorFailure(Exception):
    """A relay command could not be delivered or was rejected by the board."""

    def __init__(self, relay: int, reason: str):
        super().__init__(f"relay {relay}: {reason}")
        self.relay = relay
        self.reason = reason


class CancellationSweepFailure(Exception):
    """One or more all-off commands failed during an emergency stop."""

    def __init__(self, failed_relays: Iterable[int]):
        self.failed_relays = sorted(failed_relays)
        super().__init__(
            "could not switch off relays " + ", ".join(str(r) for r in self.failed_relays)
        )
