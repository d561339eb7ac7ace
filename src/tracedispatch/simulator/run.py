import logging
from typing import Any, Sequence

from tracedispatch.config import Config
from tracedispatch.dispatcher.api import CompletionSink
from tracedispatch.dispatcher.impl import JobDispatcher
from tracedispatch.low.core import Job
from tracedispatch.low.trace import TraceProducer
from tracedispatch.simulator.pool import SimulatedInstance, SimulatedPool
from tracedispatch.simulator.runner import SimulatedJobRunner
from tracedispatch.simulator.timing import EventLoop, SimulatedTimer

logger = logging.getLogger(__name__)


def simulate(
    producer: TraceProducer,
    pools: Sequence[SimulatedPool],
    config: Config | None = None,
    start_time: int = 0,
    stop_at: int | None = None,
) -> dict[str, Any]:
    """Replays the trace until every handed-off job completed. If `stop_at` (ms) is given, the
    dispatcher is stopped at that instant and the loop runs to the end regardless"""
    config = config if config is not None else Config()
    loop = EventLoop(start=start_time)
    timer = SimulatedTimer(loop)
    by_name = {pool.name: pool for pool in pools}
    if len(by_name) != len(pools):
        raise ValueError(f"pool names must be unique: {[pool.name for pool in pools]}")
    runners: list[SimulatedJobRunner] = []

    def runner(job: Job, instances: Sequence[SimulatedInstance], sink: CompletionSink) -> SimulatedJobRunner:
        r = SimulatedJobRunner(job, instances, sink, loop, by_name, config.time_unit_ms)
        runners.append(r)
        return r

    dispatcher = JobDispatcher(producer, pools, timer, runner, config)
    if stop_at is not None:
        loop.add_event(stop_at, lambda _: dispatcher.stop())
    loop.run()

    rv = dict(
        jobs=len(dispatcher.trace),
        processed=dispatcher.tracker.processed,
        ignored=dispatcher.ignore_counter,
        handed_off=dispatcher.tracker.handed_off,
        destroyed=dispatcher.destroy_counter,
        adjusted_by=dispatcher.trace[0].offset if len(dispatcher.trace) else 0,
        state=dispatcher.state.value,
        end_time=loop.now,
    )
    logger.info(f"simulation finished: {rv}")
    return rv
