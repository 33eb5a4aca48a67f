"""Server-side structures: the bounded queue and the worker pool."""

from queuesim.entities.queue import BoundedQueue, QueueDiscipline, QueueStats
from queuesim.entities.worker_pool import Worker, WorkerPool

__all__ = [
    "BoundedQueue",
    "QueueDiscipline",
    "QueueStats",
    "Worker",
    "WorkerPool",
]
