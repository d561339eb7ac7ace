from dataclasses import dataclass

from tracedispatch.dispatcher.api import ContractViolation


@dataclass
class OutcomeTracker:
    """Counts what became of the processed jobs. Every counter only ever grows"""

    ignored: int = 0  # jobs that could not be served, for whatever reason
    handed_off: int = 0  # jobs given over to a runner
    destroyed: int = 0  # instances released after their job completed

    @property
    def processed(self) -> int:
        return self.ignored + self.handed_off

    def record_ignored(self) -> None:
        self.ignored += 1

    def record_handoff(self) -> None:
        self.handed_off += 1

    def record_completion(self, units: int) -> None:
        if units <= 0:
            raise ContractViolation(f"completion must free a positive number of instances, got {units}")
        self.destroyed += units
