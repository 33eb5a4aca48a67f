import heapq
from itertools import count

from queuesim.core.event import Event


class EventHeap:
    def __init__(self, events: list[Event] | None = None):
        """Store Events directly on a binary min-heap.

        Events implement ordering by ``(tick, kind, sort_index)``, so there's
        no need to store tuples. The heap stamps each pushed event with a
        monotonically increasing sort index, which makes same-tick, same-kind
        ordering follow scheduling order and keeps runs reproducible.
        """
        self._counter = count()
        self._heap: list[Event] = []
        if events:
            self.push(events)

    def push(self, events: Event | list[Event]):
        """Push an Event or a list of Events onto the heap."""
        if isinstance(events, list):
            for event in events:
                self._push_one(event)
        else:
            self._push_one(events)

    def _push_one(self, event: Event):
        event._sort_index = next(self._counter)
        heapq.heappush(self._heap, event)

    def pop(self) -> Event:
        return heapq.heappop(self._heap)

    def peek(self) -> Event:
        return self._heap[0]

    def has_events(self) -> bool:
        return bool(self._heap)

    def size(self) -> int:
        return len(self._heap)

    def __len__(self) -> int:
        return len(self._heap)
