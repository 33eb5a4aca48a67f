"""Whole-run properties of the queueing model with real random draws.

Each test runs a seeded simulation long enough for steady state and checks
a property that must hold for any seed: counters add up, the queue never
overflows, and the qualitative overload behaviour (LIFO beats FIFO, a
deeper queue makes collapse worse) shows up. A few seeded runs are pinned
to their exact failure rate.

Run:
    pytest tests/integration/test_simulation_properties.py -v
"""

from __future__ import annotations

import pytest

from queuesim import (
    DeadlinePolicy,
    QueueDiscipline,
    ServiceDistribution,
    SimulationConfig,
    SpikeProfile,
    run_simulation,
)

OVERLOAD = SimulationConfig(
    arrival_rate=0.3,
    simulation_time=100_000,
    deadline_policy=DeadlinePolicy.END_TO_END,
    seed=2024,
)


class TestAccounting:
    """Every generated request ends up in exactly one bucket."""

    @pytest.mark.parametrize(
        "config",
        [
            SimulationConfig(arrival_rate=0.05, simulation_time=20_000, seed=1),
            SimulationConfig(arrival_rate=0.5, simulation_time=20_000, seed=2),
            SimulationConfig(arrival_rate=0.5, simulation_time=20_000, queue_size=0, seed=3),
            SimulationConfig(
                arrival_rate=0.3,
                simulation_time=20_000,
                discipline=QueueDiscipline.LIFO,
                deadline_policy=DeadlinePolicy.END_TO_END,
                seed=4,
            ),
            SimulationConfig(arrival_rate=0.1, simulation_time=20_000, simulate_spike=True, seed=5),
            SimulationConfig(
                arrival_rate=0.3,
                simulation_time=20_000,
                deadline_policy=DeadlinePolicy.ON_COMPLETION,
                service_distribution=ServiceDistribution.NORMAL,
                seed=15,
            ),
        ],
        ids=["light", "overload", "no-queue", "lifo-end-to-end", "spike", "on-completion"],
    )
    def test_outcomes_partition_generated_requests(self, config):
        m = run_simulation(config).metrics

        assert m.is_balanced()
        assert m.total_generated == m.organic_arrivals + m.total_retries
        assert 0.0 <= m.failure_rate <= 100.0

    def test_queue_never_exceeds_capacity(self):
        config = SimulationConfig(arrival_rate=0.5, simulation_time=20_000, queue_size=25, seed=6)

        m = run_simulation(config).metrics

        assert m.peak_queue_depth == 25
        assert m.total_rejected > 0


class TestLoad:

    def test_no_retries_means_generated_tracks_arrival_rate(self):
        config = SimulationConfig(
            arrival_rate=0.1, simulation_time=50_000, retry_probability=0.0, seed=7
        )

        m = run_simulation(config).metrics

        assert m.total_retries == 0
        assert m.total_generated == pytest.approx(0.1 * 50_000, rel=0.05)

    def test_retries_amplify_load_under_overload(self):
        config = SimulationConfig(arrival_rate=0.5, simulation_time=20_000, seed=8)

        m = run_simulation(config).metrics

        assert m.total_retries > 0
        assert m.total_generated > m.organic_arrivals

    def test_light_load_never_fails(self):
        config = SimulationConfig(arrival_rate=0.01, simulation_time=50_000, seed=9)

        m = run_simulation(config).metrics

        assert m.total_failed == 0
        assert m.format_failure_rate() == "0.00%"

    def test_overload_fails_most_requests(self):
        # 10 workers at mean latency 50 serve about 0.2 requests per tick
        config = SimulationConfig(arrival_rate=0.5, simulation_time=50_000, seed=10)

        m = run_simulation(config).metrics

        assert m.failure_rate > 55.0


class TestCongestionCollapse:
    """Clients that give up while their request is in service waste work.

    Runs use END_TO_END deadlines; see TestQueueSizeByDeadlinePolicy for how
    the queue size effect depends on the policy.
    """

    def test_lifo_fails_less_than_fifo(self):
        fifo = run_simulation(OVERLOAD.with_overrides(discipline=QueueDiscipline.FIFO)).metrics
        lifo = run_simulation(OVERLOAD.with_overrides(discipline=QueueDiscipline.LIFO)).metrics

        assert lifo.failure_rate < fifo.failure_rate - 20.0

    def test_deeper_fifo_queue_is_worse(self):
        shallow = run_simulation(OVERLOAD.with_overrides(queue_size=5)).metrics
        deep = run_simulation(OVERLOAD.with_overrides(queue_size=1000)).metrics

        assert shallow.failure_rate < deep.failure_rate - 20.0

    def test_deep_fifo_queue_collapses(self):
        m = run_simulation(OVERLOAD).metrics

        assert m.failure_rate > 90.0

    def test_spike_causes_failures_below_capacity(self):
        base = SimulationConfig(arrival_rate=0.15, simulation_time=50_000, seed=11)
        spike = base.with_overrides(
            simulate_spike=True, spike=SpikeProfile(start_tick=0, duration_ticks=10_000, factor=10.0)
        )

        calm = run_simulation(base).metrics
        spiked = run_simulation(spike).metrics

        assert spiked.failure_rate > calm.failure_rate
        assert spiked.total_failed > 0


class TestQueueSizeByDeadlinePolicy:
    """A deeper queue only drives collapse when stale work still costs capacity."""

    @pytest.mark.parametrize(
        "queue_size, expected",
        [(5, "50.86%"), (50, "51.58%"), (200, "50.96%"), (1000, "49.63%"), (5000, "49.63%")],
    )
    def test_queue_only_failure_rate_is_flat(self, queue_size, expected):
        config = OVERLOAD.with_overrides(
            deadline_policy=DeadlinePolicy.QUEUE_ONLY, queue_size=queue_size
        )

        assert run_simulation(config).metrics.format_failure_rate() == expected

    @pytest.mark.parametrize(
        "queue_size, expected",
        [(5, "50.86%"), (50, "51.58%"), (200, "76.73%"), (1000, "96.09%"), (5000, "96.09%")],
    )
    def test_end_to_end_failure_rate_grows_with_queue(self, queue_size, expected):
        config = OVERLOAD.with_overrides(queue_size=queue_size)

        assert run_simulation(config).metrics.format_failure_rate() == expected

    def test_queue_only_deep_queue_is_no_worse(self):
        base = OVERLOAD.with_overrides(deadline_policy=DeadlinePolicy.QUEUE_ONLY)

        shallow = run_simulation(base.with_overrides(queue_size=5)).metrics
        deep = run_simulation(base.with_overrides(queue_size=1000)).metrics

        assert deep.failure_rate <= shallow.failure_rate + 2.0

    def test_on_completion_deep_queue_collapses(self):
        base = OVERLOAD.with_overrides(
            deadline_policy=DeadlinePolicy.ON_COMPLETION,
            service_distribution=ServiceDistribution.NORMAL,
        )

        shallow = run_simulation(base.with_overrides(queue_size=5)).metrics
        deep = run_simulation(base.with_overrides(queue_size=1000)).metrics

        assert deep.failure_rate > 90.0
        assert shallow.failure_rate < deep.failure_rate - 20.0

class TestDeterminism:

    def test_same_seed_same_metrics(self):
        config = SimulationConfig(arrival_rate=0.3, simulation_time=20_000, seed=12)

        assert run_simulation(config).metrics == run_simulation(config).metrics

    def test_different_seeds_differ(self):
        config = SimulationConfig(arrival_rate=0.3, simulation_time=20_000, seed=13)

        first = run_simulation(config).metrics
        second = run_simulation(config.with_overrides(seed=14)).metrics

        assert first != second
