"""
tracedispatch replays a job trace against a set of resource pools: at each job's
submission time it sizes a resource request, picks a pool round-robin and hands the
job over to a runner once the resources are granted.

Submodules:
 - low: data model, trace snapshot and producers, functional helpers
 - dispatcher: the dispatch loop and its sizing/selection/bookkeeping parts
 - simulator: event loop, simulated pools and runners for replaying a trace
"""

from tracedispatch.version import __version__

__all__ = ["__version__"]
