"""Congestion collapse: a deeper queue makes an overloaded server fail more.

Ten workers at a mean latency of 50 ticks serve about 0.2 requests per
tick; this example offers 0.3. Clients give up after 1000 ticks wherever
their request is (end-to-end deadline) and half of the failures are
retried.

With a shallow queue the excess is rejected quickly and every request that
reaches a worker still has a waiting client. With a deep FIFO queue the
request at the head has nearly used up its deadline by the time a worker
takes it, so the workers spend their time on answers nobody will read and
almost everything fails.

Run:
    python examples/congestive_collapse.py --output output/congestive_collapse
"""

from __future__ import annotations

from pathlib import Path

from queuesim import DeadlinePolicy, SimulationConfig
from queuesim.analysis import plot_sweep, sweep

QUEUE_SIZES = [0, 5, 10, 25, 50, 100, 250, 500, 1000]


def run_collapse_sweep(arrival_rate: float, simulation_time: int, seed: int | None):
    base = SimulationConfig(
        arrival_rate=arrival_rate,
        simulation_time=simulation_time,
        deadline_policy=DeadlinePolicy.END_TO_END,
        seed=seed,
    )
    return sweep(base, "queue_size", QUEUE_SIZES)


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Failure rate vs queue size under overload")
    parser.add_argument("--rate", type=float, default=0.3, help="Arrival rate per tick")
    parser.add_argument("--ticks", type=int, default=200_000, help="Simulated ticks per run")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (-1 for random)")
    parser.add_argument("--output", type=str, default="output/congestive_collapse", help="Output dir")
    parser.add_argument("--no-viz", action="store_true", help="Skip visualization")
    args = parser.parse_args()

    seed = None if args.seed == -1 else args.seed

    print(f"Sweeping queue size at arrival rate {args.rate} for {args.ticks} ticks...")
    frame = run_collapse_sweep(args.rate, args.ticks, seed)
    print(frame[["queue_size", "failure_rate", "total_retries", "peak_queue_depth"]].to_string(index=False))

    if not args.no_viz:
        output_dir = Path(args.output)
        path = plot_sweep(frame, "queue_size", output_dir / "failure_rate_vs_queue_size.png")
        print(f"\nPlot saved to: {path.absolute()}")
