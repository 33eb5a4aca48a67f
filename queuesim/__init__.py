"""queuesim: discrete-event simulation of a server under load.

Models a synchronous request/reply server (workers in front of a bounded
FIFO or LIFO queue) with client timeouts and retries, to measure how
queueing policy and capacity drive the failure rate and when retries tip
the server into congestion collapse.
"""

import logging

# Silent by default; see queuesim.logging_config to enable output.
logging.getLogger("queuesim").addHandler(logging.NullHandler())

from queuesim.config import DeadlinePolicy, SimulationConfig
from queuesim.core import (
    Event,
    EventHeap,
    EventKind,
    Request,
    RequestState,
    RetryController,
    Simulation,
    SimulationClock,
    SimulationPhase,
    SimulationResult,
    run_simulation,
)
from queuesim.distributions import (
    ExponentialServiceTime,
    NormalServiceTime,
    ServiceDistribution,
    SpikeProfile,
)
from queuesim.entities import BoundedQueue, QueueDiscipline, QueueStats, WorkerPool
from queuesim.errors import ConfigurationError, QueueSimError, SchedulingError, SimulationError
from queuesim.instrumentation import MetricsAccumulator, MetricsSnapshot, SimulationSummary
from queuesim.load import PoissonArrivalProcess
from queuesim.logging_config import (
    configure_from_env,
    disable_logging,
    enable_console_logging,
    enable_file_logging,
    enable_json_logging,
    set_level,
    set_module_level,
)

__version__ = "0.1.0"

__all__ = [
    # Configuration
    "DeadlinePolicy",
    "QueueDiscipline",
    "ServiceDistribution",
    "SimulationConfig",
    "SpikeProfile",
    # Engine
    "Event",
    "EventHeap",
    "EventKind",
    "Request",
    "RequestState",
    "RetryController",
    "Simulation",
    "SimulationClock",
    "SimulationPhase",
    "SimulationResult",
    "run_simulation",
    # Components
    "BoundedQueue",
    "ExponentialServiceTime",
    "NormalServiceTime",
    "PoissonArrivalProcess",
    "QueueStats",
    "WorkerPool",
    # Results
    "MetricsAccumulator",
    "MetricsSnapshot",
    "SimulationSummary",
    # Errors
    "ConfigurationError",
    "QueueSimError",
    "SchedulingError",
    "SimulationError",
    # Logging
    "configure_from_env",
    "disable_logging",
    "enable_console_logging",
    "enable_file_logging",
    "enable_json_logging",
    "set_level",
    "set_module_level",
]
