"""
Dispatcher module is responsible for turning a trace into resource requests. The
JobDispatcher is woken up by a Timer whenever a job is due, sizes a request for it,
sends it to the next pool in round-robin order and hands the job over to a runner
if the pool delivers. Every job is attempted exactly once -- unservable jobs are
counted, not retried.

Submodules:
 - api: the collaborators the dispatcher talks to
 - sizing: capacity profile of the pools and request sizing
 - selector: round-robin pool cursor
 - tracker: outcome counters
 - impl: the dispatch loop itself
"""

from tracedispatch.dispatcher.impl import DispatcherState, JobDispatcher

__all__ = ["DispatcherState", "JobDispatcher"]
