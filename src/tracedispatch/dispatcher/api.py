"""
Describes the interfaces of the dispatcher's collaborators:
 - ResourcePool: grants (or refuses) instances for a job. Comes with at least one Repository
   where the appliance is registered, and exposes its members' capacities
 - JobRunner: takes over a job once its instances are granted, reports back on completion
 - Timer: the discrete event facility that calls the dispatcher back at chosen instants
 - CompletionSink: what the runner reports completions to, ie, the dispatcher

None of these are implemented in this package except as simulations, see `tracedispatch.simulator`.
All of them are assumed to live on the same single-threaded event timeline.
"""

from dataclasses import dataclass
from typing import Callable, Protocol, Sequence, runtime_checkable

from tracedispatch.low.core import Appliance, InstanceState, Job, ResourceConstraints


class AllocationError(Exception):
    """The request as a whole exceeds what the pool could ever offer"""


class ContractViolation(ValueError):
    """A collaborator broke its side of the contract, eg reported a non-positive completion.
    Never absorbed by the dispatch loop"""


@runtime_checkable
class Repository(Protocol):
    def register(self, appliance: Appliance) -> None:
        raise NotImplementedError


@runtime_checkable
class InstanceHandle(Protocol):
    @property
    def state(self) -> InstanceState:
        raise NotImplementedError


@runtime_checkable
class ResourcePool(Protocol):
    @property
    def repositories(self) -> Sequence[Repository]:
        raise NotImplementedError

    def member_cpus(self) -> Sequence[float]:
        """Cpu capacity of each member of the pool"""
        raise NotImplementedError

    def request_allocation(
        self,
        appliance: Appliance,
        constraints: ResourceConstraints,
        repository: Repository,
        count: int,
    ) -> Sequence[InstanceHandle]:
        """Grants `count` instances each satisfying `constraints`. Raises AllocationError if the
        request is oversized; individual handles may still come back `nonservable`"""
        raise NotImplementedError


@dataclass(frozen=True)
class PoolTarget:
    """A pool together with the repository its instances are started from"""

    pool: ResourcePool
    repository: Repository


@runtime_checkable
class CompletionSink(Protocol):
    def record_completion(self, units: int) -> None:
        """`units` instances were released after their job finished. Must be positive"""
        raise NotImplementedError


# Called once per handed-off job. What it returns is ignored -- completion comes back
# through the sink, not through the return value
JobRunner = Callable[[Job, Sequence[InstanceHandle], CompletionSink], object]


@runtime_checkable
class Firable(Protocol):
    def on_fire(self, current_time: int) -> None:
        raise NotImplementedError


@runtime_checkable
class Timer(Protocol):
    """Times are integer milliseconds. Firings are delivered in non-decreasing time order, at most
    once per firable per instant"""

    def now(self) -> int:
        raise NotImplementedError

    def subscribe(self, firable: Firable, delay: int) -> None:
        """Fire `firable` once, `delay` ms from now. Replaces any pending firing of the same firable"""
        raise NotImplementedError

    def unsubscribe(self, firable: Firable) -> None:
        """Cancel the pending firing of `firable`, if any"""
        raise NotImplementedError
