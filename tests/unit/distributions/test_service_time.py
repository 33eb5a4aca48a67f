"""Tests for the service time distributions and SpikeProfile."""

import numpy as np
import pytest

from queuesim.distributions import (
    ExponentialServiceTime,
    NormalServiceTime,
    ServiceDistribution,
    SpikeProfile,
    build_service_time,
)
from queuesim.errors import ConfigurationError


class TestSpikeProfile:

    def test_default_window(self):
        spike = SpikeProfile()

        assert spike.start_tick == 0
        assert spike.duration_ticks == 10_000
        assert spike.factor == 10.0
        assert spike.end_tick == 10_000

    def test_window_is_half_open(self):
        spike = SpikeProfile(start_tick=100, duration_ticks=50, factor=4.0)

        assert not spike.is_active(99)
        assert spike.is_active(100)
        assert spike.is_active(149)
        assert not spike.is_active(150)
        assert spike.get_factor(120) == 4.0
        assert spike.get_factor(150) == 1.0

    def test_zero_duration_is_never_active(self):
        spike = SpikeProfile(start_tick=0, duration_ticks=0)

        assert not spike.is_active(0)

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"start_tick": -1},
            {"duration_ticks": -5},
            {"factor": 0.0},
            {"factor": -2.0},
        ],
    )
    def test_rejects_invalid_parameters(self, kwargs):
        with pytest.raises(ConfigurationError):
            SpikeProfile(**kwargs)

    def test_scaled_window_covers_first_thousandth_of_arrivals(self):
        spike = SpikeProfile.scaled(simulation_time=1_000_000, arrival_rate=0.1)

        assert spike == SpikeProfile()
        assert SpikeProfile.scaled(200_000, 0.5).duration_ticks == 400

    def test_scaled_window_is_at_least_one_tick(self):
        assert SpikeProfile.scaled(simulation_time=10, arrival_rate=5.0).duration_ticks == 1

    def test_scaled_keeps_start_and_factor(self):
        spike = SpikeProfile.scaled(1_000_000, 0.1, start_tick=500, factor=3.0)

        assert spike.start_tick == 500
        assert spike.end_tick == 10_500
        assert spike.factor == 3.0

    @pytest.mark.parametrize("simulation_time, arrival_rate", [(0, 0.1), (1000, 0.0)])
    def test_scaled_rejects_invalid_run(self, simulation_time, arrival_rate):
        with pytest.raises(ConfigurationError):
            SpikeProfile.scaled(simulation_time, arrival_rate)


class TestExponentialServiceTime:

    def test_rejects_non_positive_mean(self):
        with pytest.raises(ConfigurationError):
            ExponentialServiceTime(0.0, np.random.default_rng(0))

    def test_rounds_up_to_whole_ticks(self, scripted_rng):
        rng = scripted_rng(arrival_scale=-1.0, service_times=[0.0001, 2.2, 5.0])
        service = ExponentialServiceTime(50.0, rng)

        assert [service.next_service_time(0) for _ in range(3)] == [1, 3, 5]

    def test_uses_configured_mean_without_spike(self, scripted_rng):
        rng = scripted_rng(arrival_scale=-1.0, service_times=[1.0])
        service = ExponentialServiceTime(50.0, rng)

        service.next_service_time(0)

        assert rng.service_scales == [50.0]
        assert service.mean_at(0) == 50.0

    def test_spike_inflates_mean_inside_window_only(self, scripted_rng):
        rng = scripted_rng(arrival_scale=-1.0, service_times=[1.0, 1.0, 1.0])
        spike = SpikeProfile(start_tick=10, duration_ticks=10, factor=10.0)
        service = ExponentialServiceTime(50.0, rng, spike=spike)

        for tick in (5, 10, 20):
            service.next_service_time(tick)

        assert rng.service_scales == [50.0, 500.0, 50.0]

    def test_sample_mean_close_to_configured_mean(self):
        service = ExponentialServiceTime(50.0, np.random.default_rng(7))

        samples = [service.next_service_time(0) for _ in range(20_000)]

        # Rounding up adds about half a tick on average
        assert np.mean(samples) == pytest.approx(50.5, rel=0.05)
        assert min(samples) >= 1


class TestNormalServiceTime:

    def test_rejects_non_positive_mean(self):
        with pytest.raises(ConfigurationError):
            NormalServiceTime(-1.0, np.random.default_rng(0))

    def test_spread_is_a_quarter_of_the_mean(self, scripted_rng):
        rng = scripted_rng(arrival_scale=-1.0, service_times=[40.2, 60.0])
        spike = SpikeProfile(start_tick=10, duration_ticks=10, factor=10.0)
        service = NormalServiceTime(50.0, rng, spike=spike)

        assert service.next_service_time(0) == 41
        assert service.next_service_time(10) == 60
        assert rng.normal_params == [(50.0, 12.5), (500.0, 125.0)]

    def test_negative_draws_clamp_to_one_tick(self, scripted_rng):
        rng = scripted_rng(arrival_scale=-1.0, service_times=[-3.0, 0.0])
        service = NormalServiceTime(2.0, rng)

        assert [service.next_service_time(0) for _ in range(2)] == [1, 1]

    def test_samples_concentrate_around_mean(self):
        service = NormalServiceTime(50.0, np.random.default_rng(7))

        samples = np.array([service.next_service_time(0) for _ in range(20_000)])

        assert samples.mean() == pytest.approx(50.5, rel=0.02)
        assert samples.std() == pytest.approx(12.5, rel=0.05)


class TestBuildServiceTime:

    @pytest.mark.parametrize(
        "distribution, expected",
        [
            (ServiceDistribution.EXPONENTIAL, ExponentialServiceTime),
            (ServiceDistribution.NORMAL, NormalServiceTime),
        ],
    )
    def test_builds_requested_model(self, distribution, expected):
        spike = SpikeProfile()

        service = build_service_time(distribution, 50.0, np.random.default_rng(0), spike=spike)

        assert isinstance(service, expected)
        assert service.mean_latency == 50.0
        assert service.spike is spike
