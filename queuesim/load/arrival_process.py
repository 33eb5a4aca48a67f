"""Poisson arrival process on an integer tick clock.

Inter-arrival times are exponential with mean ``1 / arrival_rate``. The
process keeps its own continuous-time position and reports arrivals on the
tick that contains them, so rates above one request per tick still work:
several arrivals then share a tick and are handled in the order drawn.
"""

from __future__ import annotations

import logging
import math

import numpy as np

from queuesim.errors import ConfigurationError

logger = logging.getLogger(__name__)


class PoissonArrivalProcess:
    """Generates organic (non-retry) request arrivals.

    Attributes:
        arrival_rate: Mean arrivals per tick.
        current_time: Continuous time of the last generated arrival.
    """

    def __init__(self, arrival_rate: float, rng: np.random.Generator, start_time: float = 0.0):
        if arrival_rate <= 0:
            raise ConfigurationError(f"arrival_rate must be > 0, got {arrival_rate}")
        self.arrival_rate = float(arrival_rate)
        self.current_time = float(start_time)
        self._rng = rng
        self._scale = 1.0 / self.arrival_rate

    def next_interarrival_time(self) -> float:
        """Draw the (positive) gap to the next arrival."""
        gap = self._rng.exponential(self._scale)
        # exponential() can return exactly 0.0; keep the stream strictly advancing
        return gap if gap > 0 else math.ulp(self.current_time or 1.0)

    def next_arrival_tick(self) -> int:
        """Advance the process by one arrival and return the tick it lands on."""
        self.current_time += self.next_interarrival_time()
        tick = math.floor(self.current_time)
        logger.debug("Next arrival: time=%.4f tick=%d", self.current_time, tick)
        return tick
