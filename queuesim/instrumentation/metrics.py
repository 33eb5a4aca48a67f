"""Outcome counters for a simulation run.

MetricsAccumulator only observes: the engine reports each classification
and the accumulator counts it. Read the counters through ``snapshot()``,
which returns an immutable MetricsSnapshot with the derived failure rate.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class MetricsSnapshot:
    """Immutable view of the counters at the end of a run.

    Attributes:
        total_generated: Requests created (organic arrivals plus retries).
        total_succeeded: Requests served before the client gave up.
        total_timed_out: Requests whose client gave up.
        total_rejected: Requests refused because the queue was full.
        total_incomplete: Requests still queued or in service at the end.
        total_retries: Requests created by the retry controller.
        peak_queue_depth: Most requests waiting at once.
        total_success_latency: Sum of arrival-to-completion ticks of successes.
    """

    total_generated: int = 0
    total_succeeded: int = 0
    total_timed_out: int = 0
    total_rejected: int = 0
    total_incomplete: int = 0
    total_retries: int = 0
    peak_queue_depth: int = 0
    total_success_latency: int = 0

    @property
    def total_failed(self) -> int:
        return self.total_timed_out + self.total_rejected

    @property
    def organic_arrivals(self) -> int:
        return self.total_generated - self.total_retries

    @property
    def failure_rate(self) -> float:
        """Failed requests as a percentage of generated requests."""
        if self.total_generated == 0:
            return 0.0
        return self.total_failed / self.total_generated * 100.0

    @property
    def mean_success_latency(self) -> float | None:
        if self.total_succeeded == 0:
            return None
        return self.total_success_latency / self.total_succeeded

    def format_failure_rate(self) -> str:
        return f"{self.failure_rate:.2f}%"

    def is_balanced(self) -> bool:
        """True if every generated request has exactly one classification."""
        return self.total_generated == (
            self.total_succeeded + self.total_timed_out + self.total_rejected + self.total_incomplete
        )

    def to_dict(self) -> dict[str, Any]:
        result = asdict(self)
        result["total_failed"] = self.total_failed
        result["failure_rate"] = self.failure_rate
        result["mean_success_latency"] = self.mean_success_latency
        return result


class MetricsAccumulator:
    """Monotonic outcome counters, incremented by the simulation loop."""

    def __init__(self):
        self.total_generated = 0
        self.total_succeeded = 0
        self.total_timed_out = 0
        self.total_rejected = 0
        self.total_incomplete = 0
        self.total_retries = 0
        self.peak_queue_depth = 0
        self.total_success_latency = 0

    def record_generated(self, is_retry: bool) -> None:
        self.total_generated += 1
        if is_retry:
            self.total_retries += 1

    def record_success(self, latency: int) -> None:
        self.total_succeeded += 1
        self.total_success_latency += latency

    def record_timeout(self) -> None:
        self.total_timed_out += 1

    def record_rejection(self) -> None:
        self.total_rejected += 1

    def record_incomplete(self, count: int = 1) -> None:
        self.total_incomplete += count

    def observe_queue_depth(self, depth: int) -> None:
        if depth > self.peak_queue_depth:
            self.peak_queue_depth = depth

    def snapshot(self) -> MetricsSnapshot:
        return MetricsSnapshot(
            total_generated=self.total_generated,
            total_succeeded=self.total_succeeded,
            total_timed_out=self.total_timed_out,
            total_rejected=self.total_rejected,
            total_incomplete=self.total_incomplete,
            total_retries=self.total_retries,
            peak_queue_depth=self.peak_queue_depth,
            total_success_latency=self.total_success_latency,
        )
