import logging
from typing import Sequence

from tracedispatch.dispatcher.api import CompletionSink
from tracedispatch.low.core import Job
from tracedispatch.simulator.pool import SimulatedInstance, SimulatedPool
from tracedispatch.simulator.timing import EventLoop

logger = logging.getLogger(__name__)


class SimulatedJobRunner:
    """Occupies the granted instances for the job's recorded runtime, then releases them and
    reports back. The runtime is taken as is -- neither the share of cpus granted nor the
    processing power affect it"""

    def __init__(
        self,
        job: Job,
        instances: Sequence[SimulatedInstance],
        sink: CompletionSink,
        loop: EventLoop,
        pools: dict[str, SimulatedPool],
        time_unit_ms: int = 1000,
    ) -> None:
        self.job = job
        self.instances = list(instances)
        self.sink = sink
        self.pools = pools
        self.started = loop.now
        self.finished: int | None = None
        loop.add_event(loop.now + job.runtime * time_unit_ms, self._complete)

    def _complete(self, time: int) -> None:
        for instance in self.instances:
            self.pools[instance.pool].release(instance)
        self.finished = time
        logger.debug(f"job {self.job.id} finished at {time} on {len(self.instances)} instances")
        self.sink.record_completion(len(self.instances))
