"""Temporary latency spike applied to service times.

A spike models a transient server slowdown (GC storm, cold cache, noisy
neighbour): for a bounded window of ticks every request started takes
``factor`` times longer on average. This is the condition that most often
tips a loaded server into congestion collapse.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from queuesim.errors import ConfigurationError

DEFAULT_SPIKE_START = 0
DEFAULT_SPIKE_DURATION = 10_000
DEFAULT_SPIKE_FACTOR = 10.0

# A scaled spike covers the arrivals of the first 1/1000th of the run.
SPIKE_RUN_FRACTION = 1000


@dataclass(frozen=True)
class SpikeProfile:
    """Latency multiplier active over ``[start_tick, start_tick + duration_ticks)``.

    The defaults match ``SpikeProfile.scaled`` for the default run (one
    million ticks at 0.1 arrivals per tick) with a 10x slowdown.

    Attributes:
        start_tick: First tick of the window.
        duration_ticks: Length of the window; 0 disables the spike.
        factor: Multiplier applied to the mean latency inside the window.
    """

    start_tick: int = DEFAULT_SPIKE_START
    duration_ticks: int = DEFAULT_SPIKE_DURATION
    factor: float = DEFAULT_SPIKE_FACTOR

    def __post_init__(self):
        if self.start_tick < 0:
            raise ConfigurationError(f"spike start_tick must be >= 0, got {self.start_tick}")
        if self.duration_ticks < 0:
            raise ConfigurationError(
                f"spike duration_ticks must be >= 0, got {self.duration_ticks}"
            )
        if self.factor <= 0:
            raise ConfigurationError(f"spike factor must be > 0, got {self.factor}")

    @classmethod
    def scaled(
        cls,
        simulation_time: int,
        arrival_rate: float,
        start_tick: int = DEFAULT_SPIKE_START,
        factor: float = DEFAULT_SPIKE_FACTOR,
    ) -> SpikeProfile:
        """Spike sized to the run: long enough for ``simulation_time / 1000``
        organic requests to arrive at ``arrival_rate``.

        Raises:
            ConfigurationError: If ``simulation_time`` or ``arrival_rate``
                is not positive.
        """
        if simulation_time <= 0:
            raise ConfigurationError(f"simulation_time must be > 0, got {simulation_time}")
        if not arrival_rate > 0:
            raise ConfigurationError(f"arrival_rate must be > 0, got {arrival_rate}")
        spiked_requests = simulation_time / SPIKE_RUN_FRACTION
        duration = max(1, math.ceil(round(spiked_requests / arrival_rate, 6)))
        return cls(start_tick=start_tick, duration_ticks=duration, factor=factor)

    @property
    def end_tick(self) -> int:
        """First tick after the window."""
        return self.start_tick + self.duration_ticks

    def is_active(self, tick: int) -> bool:
        return self.start_tick <= tick < self.end_tick

    def get_factor(self, tick: int) -> float:
        return self.factor if self.is_active(tick) else 1.0
