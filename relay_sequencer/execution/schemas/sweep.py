"""
Result of the all-outputs-off sweep issued by an emergency stop.
"""

from typing import Dict, List

from pydantic import BaseModel

from ...actuators.exceptions import CancellationSweepFailure


class SweepReport(BaseModel):
    results: Dict[int, bool]

    @property
    def ok(self) -> bool:
        return all(self.results.values())

    @property
    def failed_relays(self) -> List[int]:
        return sorted(index for index, success in self.results.items() if not success)

    def raise_for_failures(self) -> None:
        if not self.ok:
            raise CancellationSweepFailure(self.failed_relays)
