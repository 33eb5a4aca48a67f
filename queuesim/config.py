"""Simulation configuration.

SimulationConfig is an immutable snapshot of every tunable parameter of a
run. It validates itself on construction, so an invalid configuration is
rejected before any tick executes.

Example:
    from queuesim import SimulationConfig, QueueDiscipline

    config = SimulationConfig(arrival_rate=0.1, discipline=QueueDiscipline.LIFO, seed=42)
    bigger_queue = config.with_overrides(queue_size=5000)
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import Any

from queuesim.distributions.service_distribution import ServiceDistribution
from queuesim.distributions.spike_profile import SpikeProfile
from queuesim.entities.queue import QueueDiscipline
from queuesim.errors import ConfigurationError

DEFAULT_NUM_WORKERS = 10
DEFAULT_TIMEOUT = 1000
DEFAULT_MEAN_LATENCY = 50.0
DEFAULT_SIMULATION_TIME = 1_000_000
DEFAULT_QUEUE_SIZE = 1000
DEFAULT_RETRY_PROBABILITY = 0.5


class DeadlinePolicy(Enum):
    """What a client deadline means for a request already being served.

    QUEUE_ONLY: the deadline only applies while waiting; once a worker has
        picked the request up it completes as a success.
    END_TO_END: the client gives up at the deadline wherever the request
        is. A request still in service is counted as timed out (and may be
        retried) while the worker keeps burning time on it; the late result
        is discarded.
    ON_COMPLETION: the server never looks at deadlines. Every admitted
        request is served, however stale, and a response produced at or
        after the deadline is counted as timed out (and may be retried)
        when it completes.
    """

    QUEUE_ONLY = "queue_only"
    END_TO_END = "end_to_end"
    ON_COMPLETION = "on_completion"


@dataclass(frozen=True)
class SimulationConfig:
    """Parameters of one simulation run. Durations are in ticks.

    Attributes:
        arrival_rate: Mean organic arrivals per tick (> 0).
        num_workers: Number of workers (>= 1).
        timeout: Ticks a client waits before giving up (> 0). Should be
            well above ``mean_latency`` for a meaningful run.
        mean_latency: Mean service time in ticks (> 0).
        service_distribution: Shape of the service time distribution.
        simulation_time: Number of ticks to simulate (> 0).
        queue_size: Waiting room capacity (>= 0).
        discipline: FIFO or LIFO service order of waiting requests.
        simulate_spike: Whether ``spike`` is applied to service times.
        spike: Window and multiplier of the latency spike. None sizes the
            window with ``SpikeProfile.scaled`` from ``simulation_time`` and
            ``arrival_rate``.
        retry_probability: Chance that a failed request is retried, in [0, 1].
        max_retries: Cap on retries per logical call; None means unlimited.
        deadline_policy: Where and when client deadlines are enforced.
        seed: Seed for the run's random generator; None draws fresh entropy.
    """

    arrival_rate: float
    num_workers: int = DEFAULT_NUM_WORKERS
    timeout: int = DEFAULT_TIMEOUT
    mean_latency: float = DEFAULT_MEAN_LATENCY
    service_distribution: ServiceDistribution = ServiceDistribution.EXPONENTIAL
    simulation_time: int = DEFAULT_SIMULATION_TIME
    queue_size: int = DEFAULT_QUEUE_SIZE
    discipline: QueueDiscipline = QueueDiscipline.FIFO
    simulate_spike: bool = False
    spike: SpikeProfile | None = None
    retry_probability: float = DEFAULT_RETRY_PROBABILITY
    max_retries: int | None = None
    deadline_policy: DeadlinePolicy = DeadlinePolicy.QUEUE_ONLY
    seed: int | None = None

    def __post_init__(self):
        if not self.arrival_rate > 0:
            raise ConfigurationError(f"arrival_rate must be > 0, got {self.arrival_rate}")
        if not self.mean_latency > 0:
            raise ConfigurationError(f"mean_latency must be > 0, got {self.mean_latency}")
        if self.timeout <= 0:
            raise ConfigurationError(f"timeout must be > 0, got {self.timeout}")
        if self.simulation_time <= 0:
            raise ConfigurationError(f"simulation_time must be > 0, got {self.simulation_time}")
        if self.num_workers < 1:
            raise ConfigurationError(f"num_workers must be >= 1, got {self.num_workers}")
        if self.queue_size < 0:
            raise ConfigurationError(f"queue_size must be >= 0, got {self.queue_size}")
        if not 0.0 <= self.retry_probability <= 1.0:
            raise ConfigurationError(
                f"retry_probability must be between 0 and 1, got {self.retry_probability}"
            )
        if self.max_retries is not None and self.max_retries < 0:
            raise ConfigurationError(f"max_retries must be >= 0 or None, got {self.max_retries}")
        # A rejected retry is reissued on the same tick, so certain unbounded
        # retries against a full queue never let the clock advance.
        if self.retry_probability >= 1.0 and self.max_retries is None:
            raise ConfigurationError("retry_probability of 1 requires max_retries to be set")
        if not isinstance(self.discipline, QueueDiscipline):
            raise ConfigurationError(f"discipline must be a QueueDiscipline, got {self.discipline!r}")
        if not isinstance(self.deadline_policy, DeadlinePolicy):
            raise ConfigurationError(
                f"deadline_policy must be a DeadlinePolicy, got {self.deadline_policy!r}"
            )
        if not isinstance(self.service_distribution, ServiceDistribution):
            raise ConfigurationError(
                f"service_distribution must be a ServiceDistribution, got {self.service_distribution!r}"
            )

    @property
    def lifo(self) -> bool:
        return self.discipline is QueueDiscipline.LIFO

    @property
    def spike_profile(self) -> SpikeProfile:
        """The configured spike, or one scaled to this run."""
        if self.spike is not None:
            return self.spike
        return SpikeProfile.scaled(self.simulation_time, self.arrival_rate)

    @property
    def active_spike(self) -> SpikeProfile | None:
        """The spike profile if spikes are enabled, else None."""
        return self.spike_profile if self.simulate_spike else None

    def with_overrides(self, **changes: Any) -> SimulationConfig:
        """Return a validated copy with some fields replaced."""
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        spike = self.spike_profile
        return {
            "arrival_rate": self.arrival_rate,
            "num_workers": self.num_workers,
            "timeout": self.timeout,
            "mean_latency": self.mean_latency,
            "service_distribution": self.service_distribution.value,
            "simulation_time": self.simulation_time,
            "queue_size": self.queue_size,
            "discipline": self.discipline.value,
            "simulate_spike": self.simulate_spike,
            "spike": {
                "start_tick": spike.start_tick,
                "duration_ticks": spike.duration_ticks,
                "factor": spike.factor,
            },
            "retry_probability": self.retry_probability,
            "max_retries": self.max_retries,
            "deadline_policy": self.deadline_policy.value,
            "seed": self.seed,
        }
