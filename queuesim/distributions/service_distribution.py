"""Choice of service time model."""

from __future__ import annotations

from enum import Enum

import numpy as np

from queuesim.distributions.exponential import ExponentialServiceTime
from queuesim.distributions.normal import NormalServiceTime
from queuesim.distributions.spike_profile import SpikeProfile


class ServiceDistribution(Enum):
    EXPONENTIAL = "exponential"  # Memoryless, coefficient of variation 1
    NORMAL = "normal"  # Normal(mean, mean / 4), fairly predictable work


def build_service_time(
    distribution: ServiceDistribution,
    mean_latency: float,
    rng: np.random.Generator,
    spike: SpikeProfile | None = None,
) -> ExponentialServiceTime | NormalServiceTime:
    """Create the sampler for ``distribution`` on the run's generator."""
    if distribution is ServiceDistribution.NORMAL:
        return NormalServiceTime(mean_latency, rng, spike=spike)
    return ExponentialServiceTime(mean_latency, rng, spike=spike)
