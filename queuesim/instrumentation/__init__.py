"""Outcome counters and run summaries."""

from queuesim.instrumentation.metrics import MetricsAccumulator, MetricsSnapshot
from queuesim.instrumentation.summary import SimulationSummary

__all__ = [
    "MetricsAccumulator",
    "MetricsSnapshot",
    "SimulationSummary",
]
