"""Normally distributed service times.

NormalServiceTime draws from a normal distribution whose standard
deviation is a quarter of the mean. Work is far more predictable than
under the exponential model: almost every request takes between half and
one and a half times the mean.
"""

from __future__ import annotations

import math

import numpy as np

from queuesim.distributions.spike_profile import SpikeProfile
from queuesim.errors import ConfigurationError

# Standard deviation as a fraction of the mean.
RELATIVE_SPREAD = 0.25


class NormalServiceTime:
    """Per-request service durations in whole ticks, Normal(mean, mean / 4).

    Negative draws are clamped; like ExponentialServiceTime the result is
    rounded up to at least one tick and a spike profile inflates the mean
    (and with it the spread) for requests started inside its window.
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
        if self._spike is None:
            return self._mean_latency
        return self._mean_latency * self._spike.get_factor(current_tick)

    def next_service_time(self, current_tick: int) -> int:
        mean = self.mean_at(current_tick)
        sample = self._rng.normal(mean, mean * RELATIVE_SPREAD)
        return max(1, math.ceil(sample))
