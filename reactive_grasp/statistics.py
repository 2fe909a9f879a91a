from __future__ import annotations

import json
import math
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence


@dataclass(frozen=True)
class StatisticEntry:
    evals: int
    best: float


@dataclass(frozen=True)
class SolutionEntry:
    evals: int
    fitness: float
    ranks: List[int]
    solution: Any


@dataclass(frozen=True)
class ProbabilityEntry:
    evals: int
    prob: List[float]


@dataclass
class RunRecord:
    """Everything recorded during a single run."""
    seed: int
    elapsed_s: float = 0.0
    trace: List[StatisticEntry] = field(default_factory=list)
    sols: List[SolutionEntry] = field(default_factory=list)
    probs: List[ProbabilityEntry] = field(default_factory=list)
    values: List[int] = field(default_factory=list)

    @property
    def best_entry(self) -> Optional[SolutionEntry]:
        return self.sols[-1] if self.sols else None

    @property
    def best_fitness(self) -> float:
        entry = self.best_entry
        return entry.fitness if entry is not None else math.inf


class GraspStatistics:
    """
    Per-run traces of a reactive GRASP:
      - best fitness so far after every solution generated
      - a checkpoint (ranks + solution) every time the best improves
      - the probability vector after every reactive update
    Runs are opened with new_run(), filled during the search and committed
    by close_run(). Only closed runs are visible to the queries.
    """

    def __init__(self):
        self.clear()

    def clear(self) -> None:
        self.runs: List[RunRecord] = []
        self._current: Optional[RunRecord] = None
        self._current_best = math.inf
        self._tic = 0.0

    @property
    def run_active(self) -> bool:
        return self._current is not None

    @property
    def num_runs(self) -> int:
        return len(self.runs)

    # ------------------------------------------------------------------ recording

    def new_run(self, seed: int) -> None:
        if self._current is not None:
            self.close_run()
        self._current = RunRecord(seed=seed)
        self._current_best = math.inf
        self._tic = time.time()

    def close_run(self) -> None:
        if self._current is None:
            return
        self._current.elapsed_s = time.time() - self._tic
        self.runs.append(self._current)
        self._current = None

    def _open_run(self) -> RunRecord:
        if self._current is None:
            raise RuntimeError("No active run: call new_run() first")
        return self._current

    def take_stats(self, evals: int, fitness: float, ranks: Sequence[int], solution: Any) -> None:
        run = self._open_run()
        run.trace.append(StatisticEntry(evals, min(self._current_best, fitness)))
        if fitness < self._current_best:
            self._current_best = fitness
            run.sols.append(SolutionEntry(evals, fitness, list(ranks), solution))

    def take_prob_stats(self, evals: int, prob: Mapping[int, float]) -> None:
        """prob maps control value -> probability; stored in ascending value order."""
        run = self._open_run()
        keys = sorted(prob)
        if not run.values:
            run.values = keys
        run.probs.append(ProbabilityEntry(evals, [prob[k] for k in keys]))

    # ------------------------------------------------------------------ queries

    def run(self, i: int) -> RunRecord:
        return self.runs[i]

    def _best_run(self) -> RunRecord:
        if not self.runs:
            raise RuntimeError("No closed runs recorded")
        best = self.runs[0]
        for r in self.runs[1:]:
            if r.best_fitness < best.best_fitness:
                best = r
        return best

    def _best_entry(self, i: Optional[int]) -> SolutionEntry:
        run = self._best_run() if i is None else self.runs[i]
        entry = run.best_entry
        if entry is None:
            raise RuntimeError(f"Run with seed {run.seed} recorded no solution")
        return entry

    def best_fitness(self, i: Optional[int] = None) -> float:
        """Best fitness of run i, or of all runs when i is None."""
        if i is None:
            return self._best_run().best_fitness
        return self.runs[i].best_fitness

    def best(self, i: Optional[int] = None) -> Any:
        return self._best_entry(i).solution

    def best_ranks(self, i: Optional[int] = None) -> List[int]:
        return self._best_entry(i).ranks

    def time(self, i: int) -> float:
        return self.runs[i].elapsed_s

    def seed(self, i: int) -> int:
        return self.runs[i].seed

    def current_best(self) -> Any:
        run = self._open_run()
        return run.sols[-1].solution if run.sols else None

    def current_best_ranks(self) -> Optional[List[int]]:
        run = self._open_run()
        return run.sols[-1].ranks if run.sols else None

    # ------------------------------------------------------------------ export

    def to_dict(self, i: int) -> Dict[str, Any]:
        r = self.runs[i]
        return {
            "run_index": i,
            "seed": r.seed,
            "elapsed_seconds": r.elapsed_s,
            "fitness_trace": {
                "eval_indices": [e.evals for e in r.trace],
                "best_values": [e.best for e in r.trace],
            },
            "solution_checkpoints": {
                "eval_indices": [e.evals for e in r.sols],
                "fitness_values": [e.fitness for e in r.sols],
                "control_vectors": [list(e.ranks) for e in r.sols],
                "solutions": [e.solution for e in r.sols],
            },
            "probability_trace": {
                "eval_indices": [e.evals for e in r.probs],
                "control_values": list(r.values),
                "probability_vectors": [list(e.prob) for e in r.probs],
            },
        }

    def to_list(self) -> List[Dict[str, Any]]:
        """All closed runs; an open run is not exported."""
        return [self.to_dict(i) for i in range(len(self.runs))]

    def to_json(self, indent: Optional[int] = None) -> str:
        """Solutions that are not JSON-native are written as lists (sets) or repr()."""
        return json.dumps(self.to_list(), indent=indent, default=_json_default)

    def __str__(self) -> str:
        lines: List[str] = []
        for i, r in enumerate(self.runs):
            lines.append(f"Run {i}")
            lines.append("=======")
            lines.append("#evals\tbest")
            lines.append("------\t----")
            for e in r.trace:
                lines.append(f"{e.evals}\t{e.best}")
        return "\n".join(lines) + ("\n" if lines else "")


def _json_default(o: Any) -> Any:
    if isinstance(o, (set, frozenset)):
        return sorted(o, key=repr)
    return repr(o)
