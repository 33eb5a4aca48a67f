"""Exceptions raised by queuesim.

Queue-full rejections and timeouts are simulation outcomes and are counted,
never raised. Exceptions are reserved for bad input and broken engine
invariants.
"""


class QueueSimError(Exception):
    """Base class for all queuesim errors."""


class ConfigurationError(QueueSimError, ValueError):
    """A SimulationConfig (or one of its parts) failed validation."""


class SimulationError(QueueSimError, RuntimeError):
    """The engine was used incorrectly, e.g. run twice."""


class SchedulingError(SimulationError):
    """An engine invariant was violated (time travel, double assignment)."""
