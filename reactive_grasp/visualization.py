from __future__ import annotations

import os
from typing import Optional, Sequence

import matplotlib.pyplot as plt

from .statistics import GraspStatistics


def _finish(fig, save_path: Optional[str], show: bool) -> None:
    if save_path:
        d = os.path.dirname(save_path)
        if d:
            os.makedirs(d, exist_ok=True)
        fig.savefig(save_path, dpi=200, bbox_inches="tight")
    if show:
        plt.show()
    else:
        plt.close(fig)


def plot_fitness_traces(
    stats: GraspStatistics,
    runs: Optional[Sequence[int]] = None,
    title: str = "",
    save_path: Optional[str] = None,
    show: bool = True,
):
    """
    Best-so-far fitness against evaluations, one step line per run.
    Improvements (solution checkpoints) are marked with dots.
    """
    if runs is None:
        runs = range(stats.num_runs)

    fig, ax = plt.subplots()
    for i in runs:
        r = stats.run(i)
        if not r.trace:
            continue
        xs = [e.evals for e in r.trace]
        ys = [e.best for e in r.trace]
        line, = ax.step(xs, ys, where="post", linewidth=1.0, label=f"run {i} (seed {r.seed})")
        ax.scatter([e.evals for e in r.sols], [e.fitness for e in r.sols], s=12, color=line.get_color())

    ax.set_xlabel("Evaluations")
    ax.set_ylabel("Best fitness")
    ax.grid(True, linewidth=0.3)
    ax.set_title(title or f"Reactive GRASP | runs={len(runs)}")
    if len(runs) <= 10:
        ax.legend(loc="upper right", fontsize=8)

    _finish(fig, save_path, show)
    return fig


def plot_probability_trace(
    stats: GraspStatistics,
    run: int = 0,
    title: str = "",
    save_path: Optional[str] = None,
    show: bool = True,
):
    """Stacked area of the RCL value probabilities along one run."""
    r = stats.run(run)
    fig, ax = plt.subplots()

    if r.probs:
        xs = [e.evals for e in r.probs]
        # one series per control value
        series = [[e.prob[k] for e in r.probs] for k in range(len(r.values))]
        ax.stackplot(xs, series, labels=[str(v) for v in r.values], alpha=0.85)
        if len(r.values) <= 12:
            ax.legend(loc="upper right", fontsize=8, title="RCL")

    ax.set_xlabel("Evaluations")
    ax.set_ylabel("Probability")
    ax.set_ylim(0.0, 1.0)
    ax.set_title(title or f"RCL probabilities | run {run} (seed {r.seed})")

    _finish(fig, save_path, show)
    return fig
