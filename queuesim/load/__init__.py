"""Load generation for simulations."""

from queuesim.load.arrival_process import PoissonArrivalProcess

__all__ = [
    "PoissonArrivalProcess",
]
