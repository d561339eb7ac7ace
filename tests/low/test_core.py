import pytest
from pydantic import ValidationError

from tracedispatch.low.core import Appliance, Job, ResourceConstraints
from tracedispatch.low.func import Either


def test_job_shifted():
    job = Job(id="a", submit_time=10, nprocs=4, runtime=3)
    moved = job.shifted(5).shifted(2)
    assert (moved.submit_time, moved.offset) == (17, 7)
    assert (moved.id, moved.nprocs, moved.runtime) == ("a", 4, 3)
    # original untouched
    assert (job.submit_time, job.offset) == (10, 0)
    assert job.shifted(0) == job


def test_job_never_moves_back():
    with pytest.raises(ValueError, match="cannot be shifted"):
        Job(id="a", submit_time=10, nprocs=4).shifted(-1)


@pytest.mark.parametrize(
    "fields",
    [
        dict(id="a", submit_time=0, nprocs=0),
        dict(id="a", submit_time=-1, nprocs=1),
        dict(id="a", submit_time=0, nprocs=1, runtime=-5),
    ],
)
def test_job_validation(fields):
    with pytest.raises(ValidationError):
        Job(**fields)


def test_job_frozen():
    job = Job(id="a", submit_time=0, nprocs=1)
    with pytest.raises(ValidationError):
        job.submit_time = 3


def test_constraints_and_appliance():
    c = ResourceConstraints(required_cpus=2.5, processing_power=0.001, minimum=False, memory_bytes=512_000_000)
    assert c.required_cpus == 2.5
    with pytest.raises(ValidationError):
        ResourceConstraints(required_cpus=0, processing_power=0.001, minimum=False, memory_bytes=1)
    assert Appliance() == Appliance(id="test", startup_delay=30, startup_processing=0, pool_based=False, size_bytes=100_000_000)


def test_either():
    assert Either.ok(3).get_or_raise() == 3
    gathered = Either.ok(1).append("first").append(", second")
    with pytest.raises(ValueError, match="first, second"):
        gathered.get_or_raise()
    with pytest.raises(KeyError):
        Either.error("bad").get_or_raise(KeyError)
