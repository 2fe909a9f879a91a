from __future__ import annotations

import csv
import os
from typing import List

from .comparison import summarize_runs
from .statistics import GraspStatistics
from .task_assignment import TaskAssignment


def _read_ints(path: str) -> List[int]:
    values: List[int] = []
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            for tok in line.split():
                try:
                    values.append(int(tok))
                except ValueError:
                    raise ValueError(f"{path}: not an integer: {tok!r}") from None
    return values


def load_instance(path: str) -> TaskAssignment:
    """
    Reads a .tap file:
      n
      c(0,0) c(0,1) ... c(0,n-1)
      ...
    i.e. n followed by the n*n costs (agent-major), any whitespace.
    """
    values = _read_ints(path)
    if not values:
        raise ValueError(f"Empty instance file: {path}")
    n = values[0]
    if n < 1:
        raise ValueError(f"{path}: invalid number of tasks {n}")
    if len(values) - 1 < n * n:
        raise ValueError(f"{path}: expected {n * n} costs, found {len(values) - 1}")
    costs = values[1:1 + n * n]
    return TaskAssignment.build([costs[i * n:(i + 1) * n] for i in range(n)])


def save_instance(inst: TaskAssignment, path: str) -> str:
    d = os.path.dirname(path)
    if d:
        os.makedirs(d, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(str(inst))
    return path


def write_stats_json(stats: GraspStatistics, path: str) -> str:
    d = os.path.dirname(path)
    if d:
        os.makedirs(d, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(stats.to_json())
    return path


def write_summary_csv(stats: GraspStatistics, path: str) -> str:
    rows = summarize_runs(stats)
    if not rows:
        raise RuntimeError("No closed runs to write.")
    d = os.path.dirname(path)
    if d:
        os.makedirs(d, exist_ok=True)
    with open(path, "w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=list(rows[0].keys()))
        w.writeheader()
        w.writerows(rows)
    return path
