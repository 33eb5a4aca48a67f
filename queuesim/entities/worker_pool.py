"""Fixed pool of workers serving one request at a time each."""

from __future__ import annotations

import heapq
from dataclasses import dataclass
from typing import TYPE_CHECKING

from queuesim.errors import ConfigurationError, SchedulingError

if TYPE_CHECKING:
    from queuesim.core.request import Request


@dataclass(slots=True)
class Worker:
    """One server thread.

    A worker stays busy until its completion is processed, even on the
    completion tick itself, so arrivals handled earlier in that tick queue
    rather than take it.
    """

    id: int
    request: Request | None = None

    def is_idle(self) -> bool:
        return self.request is None


class WorkerPool:
    """Dispatch bookkeeping for ``num_workers`` identical workers.

    Idle worker lookup always returns the lowest idle index so runs are
    reproducible. Idle indices live in a min-heap; entries for workers
    that have since become busy are discarded lazily.
    """

    def __init__(self, num_workers: int):
        if num_workers < 1:
            raise ConfigurationError(f"num_workers must be >= 1, got {num_workers}")
        self._workers = [Worker(id=i) for i in range(num_workers)]
        self._idle: list[int] = list(range(num_workers))
        self._busy = 0

    def __len__(self) -> int:
        return len(self._workers)

    def __getitem__(self, worker_id: int) -> Worker:
        return self._workers[worker_id]

    @property
    def busy_count(self) -> int:
        return self._busy

    @property
    def idle_count(self) -> int:
        return len(self._workers) - self._busy

    def find_idle_worker(self) -> int | None:
        """Return the lowest-index idle worker, or None if all are busy."""
        idle = self._idle
        while idle:
            worker_id = idle[0]
            if self._workers[worker_id].is_idle():
                return worker_id
            heapq.heappop(idle)
        return None

    def assign(self, worker_id: int, request: Request, now: int, service_time: int) -> int:
        """Start serving ``request`` on an idle worker.

        Returns:
            The tick at which the worker completes the request.

        Raises:
            SchedulingError: If the worker is already busy or the service
                time is not positive.
        """
        worker = self._workers[worker_id]
        if not worker.is_idle():
            raise SchedulingError(
                f"Worker {worker_id} is serving request {worker.request.id}; cannot assign request {request.id}"
            )
        if service_time < 1:
            raise SchedulingError(f"Service time must be >= 1 tick, got {service_time}")

        completion_tick = now + service_time
        worker.request = request
        self._busy += 1
        if self._idle and self._idle[0] == worker_id:
            heapq.heappop(self._idle)
        return completion_tick

    def release(self, worker_id: int) -> Request | None:
        """Mark a worker idle and return the request it was holding."""
        worker = self._workers[worker_id]
        request = worker.request
        if request is None:
            return None
        worker.request = None
        self._busy -= 1
        heapq.heappush(self._idle, worker_id)
        return request

    def in_service(self) -> list[Request]:
        """Requests currently held by workers, by worker index."""
        return [w.request for w in self._workers if w.request is not None]
