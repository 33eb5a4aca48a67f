"""Discrete-event engine for a synchronous request/reply server.

The Simulation owns every piece of mutable state for a run: the virtual
clock, the event heap, the bounded queue, the worker pool and the metrics.
Nothing is shared between runs; randomness comes from one injected
``numpy.random.Generator``, so a seed fully determines the outcome.

Event handling, per popped event (ties at a tick: arrivals, then
completions, then timeout checks):

- **Arrival**: create a request and schedule its timeout check (none when
  the server ignores deadlines). Hand it to the lowest idle worker, else
  queue it, else reject it (and maybe retry).
  Organic arrivals schedule the next organic arrival.
- **Completion**: free the worker and record the success (unless the
  client already gave up, or under ``DeadlinePolicy.ON_COMPLETION`` the
  response is late, which is a timeout). Then drain the queue: stale
  entries are timed out on the spot, the first live one is served. Under
  ``ON_COMPLETION`` the head is served whatever its age.
- **TimeoutCheck**: a request still waiting at its deadline is withdrawn
  and timed out. For a request in service this depends on the deadline
  policy.

The run stops at ``simulation_time``; requests still queued or in service
are counted as incomplete.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from itertools import count

import numpy as np

from queuesim.config import DeadlinePolicy, SimulationConfig
from queuesim.core.clock import SimulationClock
from queuesim.core.event import Event, EventKind
from queuesim.core.event_heap import EventHeap
from queuesim.core.request import Request, RequestState
from queuesim.core.retry import RetryController
from queuesim.distributions.service_distribution import build_service_time
from queuesim.entities.queue import BoundedQueue
from queuesim.entities.worker_pool import WorkerPool
from queuesim.errors import SchedulingError, SimulationError
from queuesim.instrumentation.metrics import MetricsAccumulator, MetricsSnapshot
from queuesim.instrumentation.summary import SimulationSummary
from queuesim.load.arrival_process import PoissonArrivalProcess

logger = logging.getLogger(__name__)


class SimulationPhase(Enum):
    INITIALIZING = "initializing"
    RUNNING = "running"
    TERMINATED = "terminated"


@dataclass(frozen=True)
class SimulationResult:
    """Everything a caller needs after a run."""

    config: SimulationConfig
    metrics: MetricsSnapshot
    summary: SimulationSummary

    @property
    def failure_rate(self) -> float:
        return self.metrics.failure_rate


class Simulation:
    """One run of the queueing model.

    Args:
        config: Validated run parameters.
        rng: Random generator to use; defaults to
            ``numpy.random.default_rng(config.seed)``.

    Example:
        result = Simulation(SimulationConfig(arrival_rate=0.1, seed=1)).run()
        print(result.metrics.format_failure_rate())
    """

    def __init__(self, config: SimulationConfig, rng: np.random.Generator | None = None):
        self.config = config
        self._rng = rng if rng is not None else np.random.default_rng(config.seed)

        self.clock = SimulationClock()
        self.queue = BoundedQueue(config.queue_size, config.discipline)
        self.workers = WorkerPool(config.num_workers)
        self.metrics = MetricsAccumulator()

        self._arrivals = PoissonArrivalProcess(config.arrival_rate, self._rng)
        self._service_time = build_service_time(
            config.service_distribution, config.mean_latency, self._rng, spike=config.active_spike
        )
        self._retry = RetryController(
            config.retry_probability, self._rng, max_retries=config.max_retries
        )

        self._heap = EventHeap()
        self._request_ids = count()
        self._events_processed = 0
        self._phase = SimulationPhase.INITIALIZING
        self._debug = False
        self._policy = config.deadline_policy
        self._withdraws_stale = config.deadline_policy is not DeadlinePolicy.ON_COMPLETION

    @property
    def phase(self) -> SimulationPhase:
        return self._phase

    @property
    def now(self) -> int:
        return self.clock.now

    @property
    def events_processed(self) -> int:
        return self._events_processed

    def schedule(self, event: Event) -> None:
        """Add an event to the heap.

        Raises:
            SchedulingError: If the event is earlier than the current tick.
        """
        if event.tick < self.clock.now:
            raise SchedulingError(f"Cannot schedule {event!r} before current tick {self.clock.now}")
        self._heap.push(event)

    def run(self) -> SimulationResult:
        """Process events until ``simulation_time`` and return the outcome.

        Raises:
            SimulationError: If the simulation has already been run.
        """
        if self._phase is not SimulationPhase.INITIALIZING:
            raise SimulationError("A Simulation can only be run once; create a new one")

        config = self.config
        end_tick = config.simulation_time
        self._debug = logger.isEnabledFor(logging.DEBUG)
        logger.info(
            "Simulation starting: rate=%s workers=%d queue=%d (%s) timeout=%d deadline=%s ticks=%d spike=%s",
            config.arrival_rate,
            config.num_workers,
            config.queue_size,
            config.discipline.name,
            config.timeout,
            config.deadline_policy.value,
            end_tick,
            config.simulate_spike,
        )

        wall_start = time.perf_counter()
        self._phase = SimulationPhase.RUNNING
        self._schedule_next_organic_arrival()

        heap = self._heap
        while heap.has_events():
            if heap.peek().tick > end_tick:
                break
            event = heap.pop()
            self.clock.advance_to(event.tick)
            self._events_processed += 1

            if event.kind is EventKind.ARRIVAL:
                self._handle_arrival(event)
            elif event.kind is EventKind.COMPLETION:
                self._handle_completion(event)
            else:
                self._handle_timeout_check(event)

        self._classify_unfinished()
        self._phase = SimulationPhase.TERMINATED
        wall_elapsed = time.perf_counter() - wall_start

        snapshot = self.metrics.snapshot()
        summary = SimulationSummary(
            final_tick=self.clock.now,
            simulation_time=end_tick,
            events_processed=self._events_processed,
            wall_clock_seconds=wall_elapsed,
            metrics=snapshot,
        )
        logger.info(
            "Simulation finished: generated=%d failed=%d incomplete=%d failure_rate=%s (%.3fs)",
            snapshot.total_generated,
            snapshot.total_failed,
            snapshot.total_incomplete,
            snapshot.format_failure_rate(),
            wall_elapsed,
        )
        return SimulationResult(config=config, metrics=snapshot, summary=summary)

    # -- event handlers ------------------------------------------------------

    def _handle_arrival(self, event: Event) -> None:
        now = self.clock.now
        request = Request.create(next(self._request_ids), now, self.config.timeout, event.retry_count)
        self.metrics.record_generated(is_retry=not event.organic)
        if self._withdraws_stale:
            self.schedule(Event.timeout_check(request))

        worker_id = self.workers.find_idle_worker()
        if worker_id is not None:
            self._start_service(worker_id, request)
        elif self.queue.try_enqueue(request):
            request.state = RequestState.QUEUED
            self.metrics.observe_queue_depth(len(self.queue))
            if self._debug:
                logger.debug("[%d] Request %d queued (depth=%d)", now, request.id, len(self.queue))
        else:
            self._fail(request, RequestState.REJECTED)

        if event.organic:
            self._schedule_next_organic_arrival()

    def _handle_completion(self, event: Event) -> None:
        worker_id = event.worker_id
        request = self.workers.release(worker_id)
        if request is not event.request:
            raise SchedulingError(
                f"Worker {worker_id} completed {request!r}, expected request {event.request.id}"
            )

        request.worker_id = None

        if request.state is RequestState.TIMED_OUT:
            # Client already gave up; the work was wasted.
            if self._debug:
                logger.debug("[%d] Discarding late result of request %d", self.clock.now, request.id)
        elif not self._withdraws_stale and request.is_expired(self.clock.now):
            self._fail(request, RequestState.TIMED_OUT)
        else:
            request.state = RequestState.SUCCEEDED
            self.metrics.record_success(self.clock.now - request.arrival_tick)
            if self._debug:
                logger.debug("[%d] Request %d succeeded on worker %d", self.clock.now, request.id, worker_id)

        self._drain_queue(worker_id)

    def _handle_timeout_check(self, event: Event) -> None:
        request = event.request
        now = self.clock.now
        if not request.is_expired(now):
            return

        if request.state is RequestState.QUEUED:
            self.queue.remove(request)
            self._fail(request, RequestState.TIMED_OUT)
        elif (
            request.state is RequestState.IN_SERVICE
            and self._policy is DeadlinePolicy.END_TO_END
        ):
            # The worker keeps going; its completion will be discarded.
            self._fail(request, RequestState.TIMED_OUT)

    # -- helpers -------------------------------------------------------------

    def _schedule_next_organic_arrival(self) -> None:
        tick = self._arrivals.next_arrival_tick()
        if tick <= self.config.simulation_time:
            self.schedule(Event.arrival(tick))

    def _start_service(self, worker_id: int, request: Request) -> None:
        now = self.clock.now
        service_time = self._service_time.next_service_time(now)
        completion_tick = self.workers.assign(worker_id, request, now, service_time)
        request.state = RequestState.IN_SERVICE
        request.worker_id = worker_id
        self.schedule(Event.completion(completion_tick, request, worker_id))
        if self._debug:
            logger.debug(
                "[%d] Request %d started on worker %d until %d",
                now,
                request.id,
                worker_id,
                completion_tick,
            )

    def _drain_queue(self, worker_id: int) -> None:
        """Serve the next waiting request.

        Stale entries met on the way are timed out on the spot unless the
        server ignores deadlines, in which case the head is served as is.
        """
        now = self.clock.now
        while (request := self.queue.dequeue_next()) is not None:
            if self._withdraws_stale and request.is_expired(now):
                self._fail(request, RequestState.TIMED_OUT)
                continue
            self._start_service(worker_id, request)
            return

    def _fail(self, request: Request, outcome: RequestState) -> None:
        request.state = outcome
        if outcome is RequestState.REJECTED:
            self.metrics.record_rejection()
        else:
            self.metrics.record_timeout()
        if self._debug:
            logger.debug("[%d] Request %d %s", self.clock.now, request.id, outcome.value)

        if self._retry.should_retry(request):
            self.schedule(
                Event.arrival(self.clock.now, retry_count=request.retry_count + 1, organic=False)
            )

    def _classify_unfinished(self) -> None:
        unfinished = self.queue.drain()
        unfinished.extend(
            r for r in self.workers.in_service() if r.state is RequestState.IN_SERVICE
        )
        for request in unfinished:
            request.state = RequestState.INCOMPLETE
        self.metrics.record_incomplete(len(unfinished))
        if unfinished:
            logger.info("%d requests still queued or in service at end of run", len(unfinished))


def run_simulation(config: SimulationConfig, rng: np.random.Generator | None = None) -> SimulationResult:
    """Build a Simulation for ``config`` and run it."""
    return Simulation(config, rng=rng).run()
