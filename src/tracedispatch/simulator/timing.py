import logging

from sortedcontainers import SortedDict

from tracedispatch.dispatcher.api import Firable

logger = logging.getLogger(__name__)


class EventLoop:
    """Discrete event loop over integer milliseconds. Callbacks get the time as first argument"""

    def __init__(self, start: int = 0):
        self.timesteps = SortedDict()
        self.now = start

    def add_event(self, time, callback, *args):
        if time < self.now:
            raise ValueError(f"cannot add event at {time}, loop is already at {self.now}")
        if time in self.timesteps:
            self.timesteps[time].append((callback, *args))
        else:
            self.timesteps[time] = [(callback, *args)]

    def run(self, until: int | None = None):
        """Runs until no events are left, or the next one is after `until`"""
        while len(self.timesteps) > 0:
            if until is not None and self.timesteps.peekitem(0)[0] > until:
                self.now = until
                return
            time, callbacks = self.timesteps.popitem(0)
            self.now = time
            # callbacks may add more events for this very instant, so no iterating over a copy
            while len(callbacks) > 0:
                callback = callbacks[0]
                callback[0](time, *callback[1:])
                callbacks.pop(0)
        if until is not None and until > self.now:
            self.now = until


class SimulatedTimer:
    """Timer facility on top of EventLoop. Keeps at most one pending firing per firable -- a
    cancelled or superseded firing is left in the loop, but does nothing once it comes"""

    def __init__(self, loop: EventLoop) -> None:
        self.loop = loop
        self.pending: dict[int, tuple[Firable, int]] = {}  # keyed by id of the firable

    def now(self) -> int:
        return self.loop.now

    def subscribe(self, firable: Firable, delay: int) -> None:
        if delay < 0:
            raise ValueError(f"cannot subscribe with negative {delay=}")
        at = self.loop.now + delay
        self.pending[id(firable)] = (firable, at)
        self.loop.add_event(at, self._fire, firable)
        logger.debug(f"{firable} to fire at {at}")

    def unsubscribe(self, firable: Firable) -> None:
        self.pending.pop(id(firable), None)

    def _fire(self, time: int, firable: Firable) -> None:
        entry = self.pending.get(id(firable))
        if entry is None or entry[1] != time:
            return
        del self.pending[id(firable)]
        firable.on_fire(time)
