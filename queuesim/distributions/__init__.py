"""Service time distributions and latency spike profiles."""

from queuesim.distributions.exponential import ExponentialServiceTime
from queuesim.distributions.normal import NormalServiceTime
from queuesim.distributions.service_distribution import ServiceDistribution, build_service_time
from queuesim.distributions.spike_profile import SpikeProfile

__all__ = [
    "ExponentialServiceTime",
    "NormalServiceTime",
    "ServiceDistribution",
    "SpikeProfile",
    "build_service_time",
]
