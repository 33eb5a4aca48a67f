"""Exponentially distributed service times.

ExponentialServiceTime samples from an exponential distribution with the
configured mean. The exponential distribution models memoryless work and
is the usual service time model in queueing theory (M/M/c).
"""

from __future__ import annotations

import math

import numpy as np

from queuesim.distributions.spike_profile import SpikeProfile
from queuesim.errors import ConfigurationError


class ExponentialServiceTime:
    """Per-request service durations in whole ticks.

    Samples have high variance (coefficient of variation = 1), so values
    range from a single tick to several multiples of the mean. When a spike
    profile is attached, requests that *start* inside the spike window use
    a mean inflated by the spike factor.

    Args:
        mean_latency: Expected service time in ticks outside a spike.
        rng: Shared random generator for the run.
        spike: Optional spike window; None means the mean never changes.
    """

    def __init__(
        self,
        mean_latency: float,
        rng: np.random.Generator,
        spike: SpikeProfile | None = None,
    ):
        if mean_latency <= 0:
            raise ConfigurationError(f"mean_latency must be > 0, got {mean_latency}")
        self._mean_latency = float(mean_latency)
        self._rng = rng
        self._spike = spike

    @property
    def mean_latency(self) -> float:
        return self._mean_latency

    @property
    def spike(self) -> SpikeProfile | None:
        return self._spike

    def mean_at(self, current_tick: int) -> float:
        """Mean service time for a request started at ``current_tick``."""
        if self._spike is None:
            return self._mean_latency
        return self._mean_latency * self._spike.get_factor(current_tick)

    def next_service_time(self, current_tick: int) -> int:
        """Sample a service time, rounded up to at least one tick."""
        sample = self._rng.exponential(self.mean_at(current_tick))
        return max(1, math.ceil(sample))
