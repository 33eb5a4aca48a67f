"""Requests and their lifecycle states."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class RequestState(Enum):
    """Where a request is in its lifecycle.

    QUEUED and IN_SERVICE are live states; the rest are terminal. A request
    reaches exactly one terminal state.
    """

    QUEUED = "queued"
    IN_SERVICE = "in_service"
    SUCCEEDED = "succeeded"
    TIMED_OUT = "timed_out"
    REJECTED = "rejected"
    INCOMPLETE = "incomplete"

    @property
    def is_terminal(self) -> bool:
        return self not in (RequestState.QUEUED, RequestState.IN_SERVICE)


@dataclass(eq=False, slots=True)
class Request:
    """A single attempt by a client to get a reply.

    A retry is a new Request (new id, ``retry_count + 1``), never the old
    one resurrected. Requests compare by identity.

    Attributes:
        id: Sequence number, unique within a run.
        arrival_tick: Tick the attempt reached the server.
        deadline_tick: Tick at which the client gives up.
        retry_count: Number of earlier attempts for the same logical call.
        state: Current lifecycle state; None until admitted.
        worker_id: Worker currently serving the request, if any.
    """

    id: int
    arrival_tick: int
    deadline_tick: int
    retry_count: int = 0
    state: RequestState | None = field(default=None)
    worker_id: int | None = field(default=None)

    @classmethod
    def create(cls, request_id: int, now: int, timeout: int, retry_count: int = 0) -> Request:
        return cls(
            id=request_id,
            arrival_tick=now,
            deadline_tick=now + timeout,
            retry_count=retry_count,
        )

    def is_expired(self, now: int) -> bool:
        """True once the client has stopped waiting."""
        return now >= self.deadline_tick

    @property
    def is_terminal(self) -> bool:
        return self.state is not None and self.state.is_terminal
