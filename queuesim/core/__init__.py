"""Core simulation engine components."""

from queuesim.core.clock import SimulationClock
from queuesim.core.event import Event, EventKind
from queuesim.core.event_heap import EventHeap
from queuesim.core.request import Request, RequestState
from queuesim.core.retry import RetryController
from queuesim.core.simulation import (
    Simulation,
    SimulationPhase,
    SimulationResult,
    run_simulation,
)

__all__ = [
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
]
