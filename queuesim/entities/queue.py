"""Bounded request queue with FIFO or LIFO ordering.

The queue holds requests that arrived while every worker was busy. Its
capacity is a hard limit: when it is full the *incoming* request is
rejected, and nothing already queued is ever evicted to make room.

Example:
    from queuesim.entities import BoundedQueue, QueueDiscipline

    queue = BoundedQueue(capacity=100, discipline=QueueDiscipline.LIFO)
    accepted = queue.try_enqueue(request)
    next_request = queue.dequeue_next()
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from queuesim.errors import ConfigurationError

if TYPE_CHECKING:
    from queuesim.core.request import Request

logger = logging.getLogger(__name__)

# Tombstones are compacted once they exceed max(live entries, this floor).
_COMPACTION_FLOOR = 64


class QueueDiscipline(Enum):
    """Order in which waiting requests are served."""

    FIFO = "fifo"  # oldest first
    LIFO = "lifo"  # newest first (stack)


@dataclass(frozen=True)
class QueueStats:
    """Statistics tracked by BoundedQueue."""

    accepted: int = 0
    rejected: int = 0  # incoming requests refused because the queue was full
    removed: int = 0  # withdrawn while waiting (timed out)
    dequeued: int = 0
    peak_depth: int = 0


class BoundedQueue:
    """Waiting room in front of the worker pool.

    Requests are always inserted at the tail. FIFO serves from the head,
    LIFO from the tail. Withdrawing a request from the middle (a timeout)
    is O(1): the entry is tombstoned and skipped when it reaches the end
    being served. Tombstones never count toward ``len()`` or capacity.

    Attributes:
        capacity: Maximum number of waiting requests (0 = no waiting room).
        discipline: FIFO or LIFO, fixed for the queue's lifetime.
    """

    def __init__(self, capacity: int, discipline: QueueDiscipline = QueueDiscipline.FIFO):
        if capacity < 0:
            raise ConfigurationError(f"capacity must be >= 0, got {capacity}")
        self._capacity = capacity
        self._discipline = discipline

        self._items: deque[Request] = deque()
        self._members: set[int] = set()
        self._tombstones: set[int] = set()

        self._accepted = 0
        self._rejected = 0
        self._removed = 0
        self._dequeued = 0
        self._peak_depth = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def discipline(self) -> QueueDiscipline:
        return self._discipline

    @property
    def peak_depth(self) -> int:
        """Largest number of requests waiting at once."""
        return self._peak_depth

    @property
    def stats(self) -> QueueStats:
        """Return a frozen snapshot of queue statistics."""
        return QueueStats(
            accepted=self._accepted,
            rejected=self._rejected,
            removed=self._removed,
            dequeued=self._dequeued,
            peak_depth=self._peak_depth,
        )

    def __len__(self) -> int:
        return len(self._members)

    def __contains__(self, request: Request) -> bool:
        return request.id in self._members

    def is_empty(self) -> bool:
        return not self._members

    def is_full(self) -> bool:
        return len(self._members) >= self._capacity

    def try_enqueue(self, request: Request) -> bool:
        """Add a request at the tail.

        Returns:
            False if the queue is full (the request is rejected), else True.
        """
        if self.is_full():
            self._rejected += 1
            return False

        self._items.append(request)
        self._members.add(request.id)
        self._accepted += 1
        depth = len(self._members)
        if depth > self._peak_depth:
            self._peak_depth = depth
        return True

    def dequeue_next(self) -> Request | None:
        """Remove and return the next request to serve, or None if empty."""
        pop = self._items.popleft if self._discipline is QueueDiscipline.FIFO else self._items.pop
        while self._items:
            request = pop()
            if request.id in self._tombstones:
                self._tombstones.discard(request.id)
                continue
            self._members.discard(request.id)
            self._dequeued += 1
            return request
        return None

    def remove(self, request: Request) -> bool:
        """Withdraw a waiting request.

        Returns:
            True if the request was waiting and has been removed.
        """
        if request.id not in self._members:
            return False
        self._members.discard(request.id)
        self._tombstones.add(request.id)
        self._removed += 1
        if len(self._tombstones) > max(len(self._members), _COMPACTION_FLOOR):
            self._compact()
        return True

    def _compact(self) -> None:
        logger.debug(
            "Compacting queue: live=%d tombstones=%d", len(self._members), len(self._tombstones)
        )
        self._items = deque(r for r in self._items if r.id in self._members)
        self._tombstones.clear()

    def __iter__(self) -> Iterator[Request]:
        """Iterate waiting requests in the order they would be served."""
        ordered = self._items if self._discipline is QueueDiscipline.FIFO else reversed(self._items)
        return (r for r in ordered if r.id in self._members)

    def drain(self) -> list[Request]:
        """Remove every waiting request, returned in service order."""
        waiting = list(self)
        self._items.clear()
        self._members.clear()
        self._tombstones.clear()
        return waiting
