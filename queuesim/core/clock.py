from queuesim.errors import SchedulingError


class SimulationClock:
    """Integer virtual clock. Only the simulation loop advances it."""

    def __init__(self, start_tick: int = 0):
        self._current_tick = start_tick

    @property
    def now(self) -> int:
        return self._current_tick

    def advance_to(self, tick: int) -> None:
        if tick < self._current_tick:
            raise SchedulingError(
                f"Clock cannot move backwards: now={self._current_tick}, requested={tick}"
            )
        self._current_tick = tick
