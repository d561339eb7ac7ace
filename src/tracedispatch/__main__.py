"""
Entrypoint for replaying traces against simulated pools

Example:
```
python -m tracedispatch synthetic --jobs 1000 --pools 2 --members 16 --cpus 64 --seed 42
python -m tracedispatch replay trace.jsonl --pools 3 --members 8 --cpus 32
```
"""

import logging
import logging.config

import fire

from tracedispatch.config import Config, logging_config
from tracedispatch.low.trace import JsonLinesTraceProducer, SyntheticTraceProducer, TraceProducer
from tracedispatch.simulator.pool import SimulatedPool
from tracedispatch.simulator.run import simulate


def _run(producer: TraceProducer, pools: int, members: int, cpus: float, start_time: int) -> dict:
    logging.config.dictConfig(logging_config)
    targets = [SimulatedPool.uniform(members, cpus, name=f"pool{i}") for i in range(pools)]
    return simulate(producer, targets, Config.from_env(), start_time=start_time)


def synthetic(
    jobs: int = 100,
    pools: int = 2,
    members: int = 16,
    cpus: float = 64,
    seed: int | None = None,
    start_time: int = 0,
) -> dict:
    return _run(SyntheticTraceProducer(jobs, seed=seed), pools, members, cpus, start_time)


def replay(path: str, pools: int = 2, members: int = 16, cpus: float = 64, start_time: int = 0) -> dict:
    return _run(JsonLinesTraceProducer(path), pools, members, cpus, start_time)


if __name__ == "__main__":
    fire.Fire({"synthetic": synthetic, "replay": replay})
