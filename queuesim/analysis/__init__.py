"""Multi-run experiments: parameter sweeps and plots."""

from queuesim.analysis.sweep import compare_disciplines, plot_sweep, sweep

__all__ = [
    "compare_disciplines",
    "plot_sweep",
    "sweep",
]
