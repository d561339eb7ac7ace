"""
Turns a job's processor count into a request: how many instances, each with how many cpus.

NOTE pools are assumed uniform -- a single capacity figure, the largest member seen across
*all* pools, sizes every request regardless of which pool it ends up at
"""

import logging
from typing import Iterable

from tracedispatch.dispatcher.api import ResourcePool
from tracedispatch.low.func import Either

logger = logging.getLogger(__name__)


def max_member_capacity(pools: Iterable[ResourcePool]) -> Either[int, str]:
    capacity = 0
    for pool in pools:
        for cpus in pool.member_cpus():
            # NOTE truncated, a member with 1.5 cpus counts as 1
            if int(cpus) > capacity:
                capacity = int(cpus)
    if capacity < 1:
        return Either.error("no pool member offers a whole cpu")
    logger.debug(f"largest pool member has {capacity} cpus")
    return Either.ok(capacity)


def size_request(nprocs: int, capacity: int) -> tuple[int, float]:
    """Returns (instances, cpus per instance). Never under-allocates: instances * capacity >= nprocs.
    The share is left fractional, the pool's acceptance logic deals with it"""
    if capacity < 1:
        raise ValueError(f"cannot size requests against {capacity=}")
    if nprocs < 1:
        raise ValueError(f"cannot size a request for {nprocs=}")
    instances = 1 if nprocs <= capacity else -(-nprocs // capacity)
    return instances, nprocs / instances
