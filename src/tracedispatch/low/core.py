"""
Core data structures -- jobs of a trace and the shape of resource requests made on their behalf
"""

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from typing_extensions import Self

from tracedispatch.low.func import pyd_replace

JobId = str


class Job(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: JobId
    submit_time: int = Field(ge=0, description="seconds, as recorded in the trace plus any offset")
    nprocs: int = Field(gt=0, description="processing units the job needs, all at once")
    runtime: int = Field(
        0, ge=0, description="seconds the job runs once started. Only consulted by simulated runners"
    )
    offset: int = Field(0, ge=0, description="total shift applied to the original submission time")

    def shifted(self, delta: int) -> Self:
        """The same job, due `delta` seconds later. Submission times never move backwards"""
        if delta < 0:
            raise ValueError(f"job {self.id} cannot be shifted by {delta=}")
        return pyd_replace(self, submit_time=self.submit_time + delta, offset=self.offset + delta)


class Appliance(BaseModel):
    """The image every instance is started from -- registered once in each pool's repository"""

    model_config = ConfigDict(frozen=True)

    id: str = "test"
    startup_delay: int = 30
    startup_processing: int = 0
    pool_based: bool = False
    size_bytes: int = 100_000_000


class ResourceConstraints(BaseModel):
    """What a single instance asks of the pool"""

    model_config = ConfigDict(frozen=True)

    required_cpus: float = Field(gt=0)
    processing_power: float = Field(
        gt=0, description="per-cpu processing power share, allows under-provisioning"
    )
    minimum: bool = Field(
        description="whether processing_power is a guaranteed minimum or the total"
    )
    memory_bytes: int = Field(gt=0)


@dataclass(frozen=True)
class AllocationRequest:
    instances: int
    constraints: ResourceConstraints


class InstanceState(str, Enum):
    requested = "requested"  # granted, not started yet
    running = "running"
    nonservable = "nonservable"  # granted without error, yet the pool can never host it
    destroyed = "destroyed"
