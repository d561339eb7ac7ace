import pytest

from helpers import FakePool, ManualTimer, RecordingRunner

from tracedispatch.simulator.pool import SimulatedPool


@pytest.fixture(scope="function")
def timer():
    return ManualTimer()


@pytest.fixture(scope="function")
def runner():
    return RecordingRunner()


@pytest.fixture(scope="function")
def two_pools():
    return [FakePool([64, 32]), FakePool([64, 64])]


@pytest.fixture(scope="function")
def simulated_pools():
    return [SimulatedPool.uniform(4, 64, name="p0"), SimulatedPool.uniform(4, 64, name="p1")]
