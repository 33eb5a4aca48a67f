"""Command line interface.

Usage:
    python -m queuesim -r 0.1 --lifo --simulate_spike
    queuesim --arrival_rate 0.5 --seed 42 --summary
"""

from __future__ import annotations

import argparse
import json
import sys

from queuesim import config as defaults
from queuesim.config import DeadlinePolicy, SimulationConfig
from queuesim.core.simulation import run_simulation
from queuesim.distributions.service_distribution import ServiceDistribution
from queuesim.distributions.spike_profile import (
    DEFAULT_SPIKE_FACTOR,
    DEFAULT_SPIKE_START,
    SpikeProfile,
)
from queuesim.entities.queue import QueueDiscipline
from queuesim.errors import ConfigurationError
from queuesim.logging_config import configure_from_env, enable_console_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="queuesim",
        description="Queueing simulator: failure rate of a synchronous server under load.",
    )
    parser.add_argument(
        "-r", "--arrival_rate", type=float, required=True,
        help="Rate at which new requests arrive per tick, must be > 0",
    )
    parser.add_argument(
        "-w", "--workers", type=int, default=defaults.DEFAULT_NUM_WORKERS,
        help="Number of workers to simulate",
    )
    parser.add_argument(
        "-t", "--timeout", type=int, default=defaults.DEFAULT_TIMEOUT,
        help="Ticks before a request is considered timed out; should exceed the mean latency",
    )
    parser.add_argument(
        "--mean_latency", type=float, default=defaults.DEFAULT_MEAN_LATENCY,
        help="Mean request processing latency in ticks, must be > 0",
    )
    parser.add_argument(
        "--service_distribution", default=ServiceDistribution.EXPONENTIAL.value,
        choices=[d.value for d in ServiceDistribution],
        help="Service time model: exponential, or normal with a spread of a quarter of the mean",
    )
    parser.add_argument(
        "--simulation_time", type=int, default=defaults.DEFAULT_SIMULATION_TIME,
        help="Number of ticks to run the simulation",
    )
    parser.add_argument(
        "-q", "--queue_size", type=int, default=defaults.DEFAULT_QUEUE_SIZE,
        help="Size of the request queue",
    )
    parser.add_argument("--lifo", action="store_true", help="Use a LIFO instead of a FIFO queue")
    parser.add_argument(
        "--simulate_spike", action="store_true",
        help="Simulate a temporary spike in request latency",
    )
    parser.add_argument("--spike_start", type=int, default=DEFAULT_SPIKE_START, help="First tick of the spike")
    parser.add_argument(
        "--spike_duration", type=int, default=None,
        help="Length of the spike in ticks (default: long enough for simulation_time / 1000 arrivals)",
    )
    parser.add_argument(
        "--spike_factor", type=float, default=DEFAULT_SPIKE_FACTOR, help="Latency multiplier during the spike"
    )
    parser.add_argument(
        "--retry_probability", type=float, default=defaults.DEFAULT_RETRY_PROBABILITY,
        help="Probability a failed request is retried, between 0 and 1 inclusive; 1 requires --max_retries",
    )
    parser.add_argument("--max_retries", type=int, default=None, help="Retries per call (default: unlimited)")
    parser.add_argument(
        "--deadline_policy", default=DeadlinePolicy.QUEUE_ONLY.value,
        choices=[p.value for p in DeadlinePolicy],
        help=(
            "queue_only: deadlines apply while waiting; end_to_end: clients also abandon "
            "requests in service; on_completion: the server serves everything and late "
            "responses fail"
        ),
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed (default: nondeterministic)")
    parser.add_argument("--summary", action="store_true", help="Print the full run summary")
    parser.add_argument("--json", action="store_true", help="Print the metrics as JSON")
    parser.add_argument(
        "--log-level", default=None, choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Enable console logging at this level (default: QS_LOGGING or silent)",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> SimulationConfig:
    """Translate parsed arguments into a validated SimulationConfig."""
    if args.spike_duration is None:
        spike = SpikeProfile.scaled(
            args.simulation_time,
            args.arrival_rate,
            start_tick=args.spike_start,
            factor=args.spike_factor,
        )
    else:
        spike = SpikeProfile(
            start_tick=args.spike_start,
            duration_ticks=args.spike_duration,
            factor=args.spike_factor,
        )
    return SimulationConfig(
        arrival_rate=args.arrival_rate,
        num_workers=args.workers,
        timeout=args.timeout,
        mean_latency=args.mean_latency,
        service_distribution=ServiceDistribution(args.service_distribution),
        simulation_time=args.simulation_time,
        queue_size=args.queue_size,
        discipline=QueueDiscipline.LIFO if args.lifo else QueueDiscipline.FIFO,
        simulate_spike=args.simulate_spike,
        spike=spike,
        retry_probability=args.retry_probability,
        max_retries=args.max_retries,
        deadline_policy=DeadlinePolicy(args.deadline_policy),
        seed=args.seed,
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.log_level:
        enable_console_logging(level=args.log_level)
    else:
        configure_from_env()

    try:
        config = config_from_args(args)
    except ConfigurationError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2

    result = run_simulation(config)

    if args.json:
        print(json.dumps({"config": config.to_dict(), "metrics": result.metrics.to_dict()}, indent=2))
    elif args.summary:
        print(result.summary)
    else:
        print(f"Failure rate: {result.metrics.format_failure_rate()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
