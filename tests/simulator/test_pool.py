import pytest

from tracedispatch.dispatcher.api import AllocationError, ResourcePool
from tracedispatch.low.core import Appliance, InstanceState, ResourceConstraints
from tracedispatch.simulator.pool import Member, SimulatedPool


def constraints(cpus: float) -> ResourceConstraints:
    return ResourceConstraints(required_cpus=cpus, processing_power=0.001, minimum=False, memory_bytes=1)


@pytest.fixture
def pool():
    pool = SimulatedPool([Member(cpus=32, memory_bytes=1), Member(cpus=16, memory_bytes=1)], name="p")
    pool.repositories[0].register(Appliance())
    return pool


def test_protocol(pool):
    assert isinstance(pool, ResourcePool)
    assert pool.member_cpus() == [32, 16]
    assert pool.total_cpus() == 48


def test_grant(pool):
    instances = pool.request_allocation(Appliance(), constraints(16), pool.repositories[0], 3)
    assert len(instances) == 3
    assert all(instance.state == InstanceState.running for instance in instances)
    assert all(instance.pool == "p" for instance in instances)
    pool.release(instances[0])
    assert instances[0].state == InstanceState.destroyed
    with pytest.raises(ValueError, match="released twice"):
        pool.release(instances[0])


def test_grant_exactly_all(pool):
    instances = pool.request_allocation(Appliance(), constraints(48 / 3), pool.repositories[0], 3)
    assert len(instances) == 3


def test_nonservable(pool):
    instances = pool.request_allocation(Appliance(), constraints(40), pool.repositories[0], 1)
    assert [instance.state for instance in instances] == [InstanceState.nonservable]


def test_oversized(pool):
    with pytest.raises(AllocationError, match="48"):
        pool.request_allocation(Appliance(), constraints(25), pool.repositories[0], 2)


def test_unregistered_appliance(pool):
    with pytest.raises(AllocationError, match="not registered"):
        pool.request_allocation(Appliance(id="other"), constraints(1), pool.repositories[0], 1)


def test_generated_name():
    pool = SimulatedPool.uniform(2, 8)
    assert pool.name
    assert pool.member_cpus() == [8, 8]
