"""
Simulated resource pools. Good enough to exercise the dispatcher, no more:
 - a request is oversized if its cpus in total exceed those of all members together
 - an instance larger than the largest member is granted, but nonservable
 - anything else is granted and considered running right away

There is no placement, no queueing and no capacity accounting of running instances.
"""

import logging
from dataclasses import dataclass, field
from math import isclose
from typing import Sequence

import randomname
from pydantic import BaseModel, ConfigDict, Field

from tracedispatch.dispatcher.api import AllocationError
from tracedispatch.low.core import Appliance, InstanceState, ResourceConstraints

logger = logging.getLogger(__name__)


class Member(BaseModel):
    model_config = ConfigDict(frozen=True)

    cpus: float = Field(gt=0)
    memory_bytes: int = Field(gt=0)


class SimulatedRepository:
    def __init__(self, name: str) -> None:
        self.name = name
        self.appliances: dict[str, Appliance] = {}

    def register(self, appliance: Appliance) -> None:
        self.appliances[appliance.id] = appliance

    def __repr__(self) -> str:
        return f"SimulatedRepository({self.name})"


@dataclass
class SimulatedInstance:
    pool: str
    constraints: ResourceConstraints
    state: InstanceState = field(default=InstanceState.running)


class SimulatedPool:
    def __init__(self, members: Sequence[Member], name: str | None = None) -> None:
        self.name = name if name is not None else randomname.get_name()
        self.members = list(members)
        self.repositories = [SimulatedRepository(f"{self.name}-repo")]
        self.granted: list[SimulatedInstance] = []

    @classmethod
    def uniform(
        cls,
        count: int,
        cpus: float,
        memory_bytes: int = 64_000_000_000,
        name: str | None = None,
    ) -> "SimulatedPool":
        return cls([Member(cpus=cpus, memory_bytes=memory_bytes) for _ in range(count)], name)

    def member_cpus(self) -> list[float]:
        return [member.cpus for member in self.members]

    def total_cpus(self) -> float:
        return sum(self.member_cpus())

    def request_allocation(
        self,
        appliance: Appliance,
        constraints: ResourceConstraints,
        repository: SimulatedRepository,
        count: int,
    ) -> list[SimulatedInstance]:
        if appliance.id not in repository.appliances:
            raise AllocationError(f"appliance {appliance.id} is not registered in {repository}")
        requested = constraints.required_cpus * count
        if requested > self.total_cpus() and not isclose(requested, self.total_cpus()):
            raise AllocationError(f"{requested} cpus requested from {self.name} which has {self.total_cpus()}")
        largest = max(self.member_cpus(), default=0)
        state = InstanceState.running if constraints.required_cpus <= largest else InstanceState.nonservable
        instances = [SimulatedInstance(pool=self.name, constraints=constraints, state=state) for _ in range(count)]
        self.granted.extend(instances)
        logger.debug(f"{self.name} granted {count} x {constraints.required_cpus} cpus, {state.value}")
        return instances

    def release(self, instance: SimulatedInstance) -> None:
        if instance.state == InstanceState.destroyed:
            raise ValueError(f"instance of {self.name} released twice")
        instance.state = InstanceState.destroyed

    def __repr__(self) -> str:
        return f"SimulatedPool({self.name}, members={len(self.members)})"
