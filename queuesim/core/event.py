"""Events that drive the simulation forward.

Each event represents something that happens at a specific tick. Events
are ordered by ``(tick, kind, sort_index)``: at the same tick arrivals run
before completions, and completions before timeout checks. The sort index
is assigned by the EventHeap at push time, so same-tick events of the same
kind run in the order they were scheduled.
"""

from __future__ import annotations

from enum import IntEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from queuesim.core.request import Request


class EventKind(IntEnum):
    """Event kinds; the integer value is the same-tick rank."""

    ARRIVAL = 0
    COMPLETION = 1
    TIMEOUT_CHECK = 2


class Event:
    """A scheduled occurrence at a tick.

    Attributes:
        tick: When this event should be processed.
        kind: What happens (also the tie-break rank within a tick).
        request: The request a completion or timeout check refers to.
        worker_id: The worker finishing, for completions.
        retry_count: Attempt number of the request an arrival creates.
        organic: True for arrivals drawn from the arrival process; those
            schedule the next organic arrival when handled.
    """

    __slots__ = ("_sort_index", "kind", "organic", "request", "retry_count", "tick", "worker_id")

    def __init__(
        self,
        tick: int,
        kind: EventKind,
        *,
        request: Request | None = None,
        worker_id: int | None = None,
        retry_count: int = 0,
        organic: bool = False,
    ):
        self.tick = tick
        self.kind = kind
        self.request = request
        self.worker_id = worker_id
        self.retry_count = retry_count
        self.organic = organic
        self._sort_index = 0

    @classmethod
    def arrival(cls, tick: int, *, retry_count: int = 0, organic: bool = True) -> Event:
        return cls(tick, EventKind.ARRIVAL, retry_count=retry_count, organic=organic)

    @classmethod
    def completion(cls, tick: int, request: Request, worker_id: int) -> Event:
        return cls(tick, EventKind.COMPLETION, request=request, worker_id=worker_id)

    @classmethod
    def timeout_check(cls, request: Request) -> Event:
        return cls(request.deadline_tick, EventKind.TIMEOUT_CHECK, request=request)

    def sort_key(self) -> tuple[int, int, int]:
        return (self.tick, self.kind, self._sort_index)

    def __lt__(self, other: Event) -> bool:
        return self.sort_key() < other.sort_key()

    def __repr__(self) -> str:
        request_id = self.request.id if self.request is not None else None
        return f"Event(tick={self.tick}, kind={self.kind.name}, request={request_id})"
