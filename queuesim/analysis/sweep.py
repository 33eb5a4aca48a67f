"""Parameter sweeps over simulation configurations.

Runs the same base configuration several times, changing one field per
run, and collects the outcome of each run into a pandas DataFrame. The
typical use is the congestion collapse experiment: sweep ``queue_size``
with a fixed seed and watch the failure rate climb once the queue is deep
enough for waiting requests to outlive their clients.

Example:
    from queuesim import SimulationConfig, DeadlinePolicy
    from queuesim.analysis import sweep, plot_sweep

    base = SimulationConfig(arrival_rate=0.3, seed=7, deadline_policy=DeadlinePolicy.END_TO_END)
    frame = sweep(base, "queue_size", [0, 10, 100, 1000])
    plot_sweep(frame, "queue_size", "output/queue_size.png")
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import pandas as pd

from queuesim.config import SimulationConfig
from queuesim.core.simulation import run_simulation
from queuesim.entities.queue import QueueDiscipline

logger = logging.getLogger(__name__)

RESULT_COLUMNS = [
    "total_generated",
    "total_succeeded",
    "total_timed_out",
    "total_rejected",
    "total_incomplete",
    "total_retries",
    "peak_queue_depth",
    "failure_rate",
    "mean_success_latency",
]

_CONFIG_FIELDS = {f.name for f in dataclasses.fields(SimulationConfig)}


def _row(config: SimulationConfig, parameter: str, value: Any) -> dict[str, Any]:
    metrics = run_simulation(config).metrics.to_dict()
    row: dict[str, Any] = {parameter: value}
    row.update({column: metrics[column] for column in RESULT_COLUMNS})
    return row


def sweep(base_config: SimulationConfig, parameter: str, values: Iterable[Any]) -> pd.DataFrame:
    """Run ``base_config`` once per value of ``parameter``.

    Every run reuses the base seed, so differences between rows come from
    the parameter, not from randomness.

    Args:
        base_config: Configuration shared by every run.
        parameter: Name of a SimulationConfig field to vary.
        values: Values to try, in order.

    Returns:
        One row per value with the parameter and the run's metrics.

    Raises:
        ValueError: If ``parameter`` is not a SimulationConfig field.
        ConfigurationError: If a value produces an invalid configuration.
    """
    if parameter not in _CONFIG_FIELDS:
        raise ValueError(f"Unknown SimulationConfig field: {parameter!r}")

    rows = []
    for value in values:
        config = base_config.with_overrides(**{parameter: value})
        row = _row(config, parameter, value)
        logger.info("Sweep %s=%s: failure_rate=%.2f%%", parameter, value, row["failure_rate"])
        rows.append(row)
    return pd.DataFrame(rows, columns=[parameter] + RESULT_COLUMNS)


def compare_disciplines(base_config: SimulationConfig) -> pd.DataFrame:
    """Run the base configuration once with FIFO and once with LIFO."""
    frame = sweep(base_config, "discipline", [QueueDiscipline.FIFO, QueueDiscipline.LIFO])
    frame["discipline"] = frame["discipline"].map(lambda d: d.name)
    return frame


def plot_sweep(frame: pd.DataFrame, parameter: str, path: str | Path, title: str | None = None) -> Path:
    """Save a failure rate vs ``parameter`` line chart to ``path``."""
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fig, ax = plt.subplots(figsize=(8, 5))
    ax.plot(frame[parameter], frame["failure_rate"], marker="o", color="tab:red")
    ax.set_xlabel(parameter)
    ax.set_ylabel("Failure rate (%)")
    ax.set_ylim(bottom=0)
    ax.set_title(title or f"Failure rate vs {parameter}")
    ax.grid(True, alpha=0.3)

    fig.tight_layout()
    fig.savefig(path, dpi=150)
    plt.close(fig)
    logger.info("Saved sweep plot to %s", path)
    return path
