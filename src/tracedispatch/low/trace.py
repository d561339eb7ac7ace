"""
Traces -- where the jobs come from, and the immutable snapshot the dispatcher walks through.

Producers hand out an unordered bag of jobs; `TraceSnapshot.from_jobs` is the only place
where ordering happens.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Protocol, runtime_checkable

import numpy as np
from pydantic import ValidationError
from typing_extensions import Self

from tracedispatch.low.core import Job
from tracedispatch.low.func import Either

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TraceSnapshot:
    jobs: tuple[Job, ...]
    earliest_submit_time: int | None  # None iff there are no jobs

    @classmethod
    def from_jobs(cls, jobs: Iterable[Job]) -> Self:
        # NOTE sorted is stable, so jobs submitted at the same second keep the producer's order
        ordered = tuple(sorted(jobs, key=lambda job: job.submit_time))
        earliest = ordered[0].submit_time if ordered else None
        return cls(jobs=ordered, earliest_submit_time=earliest)

    def shifted(self, delta: int) -> Self:
        if self.earliest_submit_time is None:
            return self
        return type(self)(
            jobs=tuple(job.shifted(delta) for job in self.jobs),
            earliest_submit_time=self.earliest_submit_time + delta,
        )

    def __len__(self) -> int:
        return len(self.jobs)

    def __getitem__(self, i: int) -> Job:
        return self.jobs[i]

    def __iter__(self) -> Iterator[Job]:
        return iter(self.jobs)


@runtime_checkable
class TraceProducer(Protocol):
    def get_all_jobs(self) -> list[Job]:
        """All jobs of the trace, in no particular order"""
        raise NotImplementedError


class ListTraceProducer:
    def __init__(self, jobs: Iterable[Job]) -> None:
        self.jobs = list(jobs)

    def get_all_jobs(self) -> list[Job]:
        return list(self.jobs)


def parse_jobs(lines: Iterable[str]) -> Either[list[Job], str]:
    """One json object per line, blank lines skipped. Reports every malformed line, not just the first"""
    jobs: list[Job] = []
    result: Either[list[Job], str] = Either.ok(jobs)
    for lineno, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            jobs.append(Job.model_validate_json(line))
        except ValidationError as e:
            prefix = "\n" if result.e else ""
            result = result.append(f"{prefix}line {lineno}: {e}")
    return result


class JsonLinesTraceProducer:
    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def get_all_jobs(self) -> list[Job]:
        with self.path.open() as f:
            jobs = parse_jobs(f).get_or_raise()
        logger.debug(f"loaded {len(jobs)} jobs from {self.path}")
        return jobs


class SyntheticTraceProducer:
    """Random trace: exponential inter-arrival and runtimes, power of two processor counts"""

    def __init__(
        self,
        count: int,
        seed: int | None = None,
        mean_interarrival: float = 10.0,
        max_nprocs_exponent: int = 8,
        mean_runtime: float = 600.0,
        start: int = 0,
    ) -> None:
        if count < 0:
            raise ValueError(f"cannot generate {count=} jobs")
        self.count = count
        self.seed = seed
        self.mean_interarrival = mean_interarrival
        self.max_nprocs_exponent = max_nprocs_exponent
        self.mean_runtime = mean_runtime
        self.start = start

    def get_all_jobs(self) -> list[Job]:
        rng = np.random.default_rng(self.seed)
        # rounding to whole seconds means several jobs may share a submission time
        gaps = np.rint(rng.exponential(self.mean_interarrival, self.count)).astype(np.int64)
        submit_times = self.start + np.cumsum(gaps)
        nprocs = 2 ** rng.integers(0, self.max_nprocs_exponent + 1, self.count)
        runtimes = np.rint(rng.exponential(self.mean_runtime, self.count)).astype(np.int64)
        return [
            Job(id=f"job{i}", submit_time=int(t), nprocs=int(n), runtime=int(r))
            for i, (t, n, r) in enumerate(zip(submit_times, nprocs, runtimes))
        ]
