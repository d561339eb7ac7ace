"""
The dispatch loop. Woken up by the Timer whenever the next job of the trace is due:
 - every job due now is sized, sent to the next pool in round-robin order, and either
   handed over to the runner or counted as ignored
 - the first job due later determines the next wakeup
 - once the trace is exhausted, no further wakeups are requested

Jobs are attempted exactly once. The trace is walked by an index that only moves forward,
the pool cursor moves after every attempt -- neither is affected by how the attempt went.
"""

import logging
from enum import Enum
from typing import Sequence

from tracedispatch.config import Config
from tracedispatch.dispatcher.api import (
    AllocationError,
    ContractViolation,
    InstanceHandle,
    JobRunner,
    PoolTarget,
    ResourcePool,
    Timer,
)
from tracedispatch.dispatcher.selector import RoundRobinSelector
from tracedispatch.dispatcher.sizing import max_member_capacity, size_request
from tracedispatch.dispatcher.tracker import OutcomeTracker
from tracedispatch.low.core import AllocationRequest, InstanceState, Job, ResourceConstraints
from tracedispatch.low.trace import TraceProducer, TraceSnapshot

logger = logging.getLogger(__name__)


class DispatcherState(str, Enum):
    active = "active"  # subscribed to the timer
    draining = "draining"  # trace exhausted. Terminal
    stopped = "stopped"  # halted from outside. Terminal


class JobDispatcher:
    """Replays the trace of `producer` against `pools`.

    WARNING: only uniform pools are supported right now -- requests are sized against the
    largest member found in any of the pools, see `tracedispatch.dispatcher.sizing`
    """

    def __init__(
        self,
        producer: TraceProducer,
        pools: Sequence[ResourcePool],
        timer: Timer,
        runner: JobRunner,
        config: Config | None = None,
    ) -> None:
        self.config = config if config is not None else Config()
        self.timer = timer
        self.runner = runner
        self.trace = TraceSnapshot.from_jobs(producer.get_all_jobs())

        self.targets: list[PoolTarget] = []
        for pool in pools:
            repository = pool.repositories[0]
            repository.register(self.config.appliance)
            self.targets.append(PoolTarget(pool=pool, repository=repository))
        self.selector = RoundRobinSelector(len(self.targets))
        self.capacity = max_member_capacity(pools).get_or_raise()

        self.processing_power = self.config.processing_power
        self.minimum_power = self.config.minimum_power
        self.tracker = OutcomeTracker()
        self.min_index = 0

        if self.trace.earliest_submit_time is None:
            logger.debug("empty trace, nothing to dispatch")
            self.state = DispatcherState.draining
            return
        self.state = DispatcherState.active

        unit = self.config.time_unit_ms
        now = self.timer.now()
        first_due = self.trace.earliest_submit_time * unit
        if now > first_due:
            # we are late -- move the whole trace forward by whole seconds so that nothing is in the past
            adjust = -(-(now - first_due) // unit)
            logger.debug(f"started {now - first_due}ms after the first job, shifting trace by {adjust}")
            self.trace = self.trace.shifted(adjust)
            first_due = self.trace.earliest_submit_time * unit
        self.timer.subscribe(self, first_due - now)

    @property
    def min_submit_time(self) -> int | None:
        return self.trace.earliest_submit_time

    @property
    def target_index(self) -> int:
        return self.selector.current

    @property
    def ignore_counter(self) -> int:
        return self.tracker.ignored

    @property
    def destroy_counter(self) -> int:
        return self.tracker.destroyed

    @property
    def is_stopped(self) -> bool:
        return self.state is DispatcherState.stopped

    def build_request(self, job: Job) -> AllocationRequest:
        instances, cpus = size_request(job.nprocs, self.capacity)
        constraints = ResourceConstraints(
            required_cpus=cpus,
            processing_power=self.processing_power,
            minimum=self.minimum_power,
            memory_bytes=self.config.instance_memory_bytes,
        )
        return AllocationRequest(instances=instances, constraints=constraints)

    def set_resource_share(self, processing_power: float, minimum: bool) -> None:
        """Affects requests made from now on, not the ones already issued"""
        if processing_power <= 0:
            raise ValueError(f"processing power share must be positive, got {processing_power}")
        self.processing_power = processing_power
        self.minimum_power = minimum

    def on_fire(self, current_time: int) -> None:
        if self.state is not DispatcherState.active:
            logger.debug(f"fired at {current_time} while {self.state.value}, ignoring")
            return
        unit = self.config.time_unit_ms
        for i in range(self.min_index, len(self.trace)):
            job = self.trace[i]
            due = job.submit_time * unit
            if due > current_time:
                self.timer.subscribe(self, due - current_time)
                break
            if due < current_time:
                logger.warning(f"job {job.id} was due at {due}, dispatching late at {current_time}")
            self._dispatch(i, job)
            self.min_index = i + 1
            if self.state is not DispatcherState.active:
                # stopped from within the runner
                return
        if self.min_index == len(self.trace):
            logger.debug(f"trace exhausted at {current_time}, {self.tracker}")
            self.timer.unsubscribe(self)
            self.state = DispatcherState.draining

    def _servable(self, handles: Sequence[InstanceHandle]) -> bool:
        # NOTE an empty grant cannot host anything either
        return len(handles) > 0 and all(handle.state != InstanceState.nonservable for handle in handles)

    def _dispatch(self, index: int, job: Job) -> None:
        request = self.build_request(job)
        target = self.targets[self.selector.current]
        try:
            try:
                handles = target.pool.request_allocation(
                    self.config.appliance, request.constraints, target.repository, request.instances
                )
            finally:
                self.selector.advance()
            if self._servable(handles):
                self.runner(job, handles, self)
                self.tracker.record_handoff()
            else:
                logger.debug(f"job {job.id} at index {index} got nonservable instances")
                self.tracker.record_ignored()
        except ContractViolation:
            raise
        except AllocationError:
            logger.debug(f"oversized job {job.id} at index {index}: {request}")
            self.tracker.record_ignored()
        except Exception:
            logger.exception(f"unexpected failure when dispatching job {job.id} at index {index}")
            self.tracker.record_ignored()

    def record_completion(self, units: int) -> None:
        """Called by runners once their job finished and `units` instances were released"""
        if self.state is DispatcherState.stopped and units > 0:
            logger.debug(f"dropping completion of {units} instances reported after stop")
            return
        self.tracker.record_completion(units)

    def stop(self) -> None:
        """Halts trace processing for good. Safe to call at any time, repeatedly"""
        if self.state is not DispatcherState.active:
            return
        self.timer.unsubscribe(self)
        self.state = DispatcherState.stopped
        logger.debug(f"stopped at index {self.min_index} of {len(self.trace)}, {self.tracker}")
