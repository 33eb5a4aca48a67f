"""Simulation summary generated after a run completes.

SimulationSummary gives a structured overview of what happened during a
run: how far the clock got, how many events were processed, how long it
took on the wall clock, and the final outcome counters.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from queuesim.instrumentation.metrics import MetricsSnapshot


@dataclass
class SimulationSummary:
    """Auto-generated summary of a simulation run."""

    final_tick: int
    simulation_time: int
    events_processed: int
    wall_clock_seconds: float
    metrics: MetricsSnapshot

    @property
    def events_per_second(self) -> float:
        """Wall-clock processing speed."""
        if self.wall_clock_seconds <= 0:
            return 0.0
        return self.events_processed / self.wall_clock_seconds

    def __str__(self) -> str:
        m = self.metrics
        lines = [
            "Simulation Summary",
            f"  Ticks: {self.final_tick} / {self.simulation_time} ({self.wall_clock_seconds:.3f}s wall)",
            f"  Events processed: {self.events_processed} ({self.events_per_second:.0f}/s)",
            f"  Requests: {m.total_generated} generated ({m.organic_arrivals} organic, {m.total_retries} retries)",
            f"  Outcomes: succeeded={m.total_succeeded}, timed_out={m.total_timed_out}, "
            f"rejected={m.total_rejected}, incomplete={m.total_incomplete}",
            f"  Peak queue depth: {m.peak_queue_depth}",
        ]
        if m.mean_success_latency is not None:
            lines.append(f"  Mean success latency: {m.mean_success_latency:.1f} ticks")
        lines.append(f"  Failure rate: {m.format_failure_rate()}")
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        return {
            "final_tick": self.final_tick,
            "simulation_time": self.simulation_time,
            "events_processed": self.events_processed,
            "wall_clock_seconds": self.wall_clock_seconds,
            "events_per_second": self.events_per_second,
            "metrics": self.metrics.to_dict(),
        }
