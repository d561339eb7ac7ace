"""
Fake collaborators for driving the dispatcher by hand, without an event loop
"""

from dataclasses import dataclass, field

from tracedispatch.dispatcher.api import AllocationError
from tracedispatch.low.core import Appliance, InstanceState, Job, ResourceConstraints


class ManualTimer:
    """Records subscriptions, fires only when told to"""

    def __init__(self, now: int = 0) -> None:
        self.current = now
        self.subscriptions: list[int] = []  # absolute times requested, in order
        self.pending: int | None = None
        self.unsubscribed = 0

    def now(self) -> int:
        return self.current

    def subscribe(self, firable, delay: int) -> None:
        self.pending = self.current + delay
        self.subscriptions.append(self.pending)

    def unsubscribe(self, firable) -> None:
        self.pending = None
        self.unsubscribed += 1

    def fire_next(self, firable) -> int:
        """Advances to the pending instant and fires"""
        assert self.pending is not None
        self.current, self.pending = self.pending, None
        firable.on_fire(self.current)
        return self.current


@dataclass
class FakeHandle:
    state: InstanceState = InstanceState.running


class FakeRepository:
    def __init__(self) -> None:
        self.registered: list[Appliance] = []

    def register(self, appliance: Appliance) -> None:
        self.registered.append(appliance)


@dataclass
class Request:
    constraints: ResourceConstraints
    count: int


class FakePool:
    """Grants everything, unless told otherwise via `behaviour`: a list consumed one per request,
    of either an InstanceState for the granted handles or an exception to raise"""

    def __init__(self, cpus: list[float], behaviour: list | None = None) -> None:
        self.cpus = cpus
        self.repositories = [FakeRepository()]
        self.requests: list[Request] = []
        self.behaviour = list(behaviour) if behaviour else []

    def member_cpus(self) -> list[float]:
        return self.cpus

    def request_allocation(self, appliance, constraints, repository, count):
        assert repository is self.repositories[0]
        assert appliance in repository.registered
        self.requests.append(Request(constraints, count))
        outcome = self.behaviour.pop(0) if self.behaviour else InstanceState.running
        if isinstance(outcome, BaseException):
            raise outcome
        return [FakeHandle(outcome) for _ in range(count)]


@dataclass
class RecordingRunner:
    calls: list[tuple[Job, list]] = field(default_factory=list)

    def __call__(self, job, handles, sink) -> None:
        self.calls.append((job, list(handles)))

    @property
    def job_ids(self) -> list[str]:
        return [job.id for job, _ in self.calls]


def oversized() -> AllocationError:
    return AllocationError("too large")


def jobs_at(*specs: tuple[int, int]) -> list[Job]:
    """(submit_time, nprocs) pairs, ids assigned in the given order"""
    return [Job(id=f"j{i}", submit_time=t, nprocs=n) for i, (t, n) in enumerate(specs)]
