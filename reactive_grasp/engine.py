from __future__ import annotations

import math
import random
from typing import Iterable, List, Optional

from .objective import ObjectiveFunction
from .probability import ProbabilityModel
from .statistics import GraspStatistics

ITER_UPDATE = 100
AMPLIFICATION = 1.0


class ReactiveGRASP:
    """
    Reactive GRASP driven by an evaluation budget.

    Each pass picks an RCL control value v from the probability model, draws
    one rank in [0, v] per decision (clamped to the shrinking candidate pool),
    decodes, improves and evaluates the solution. Every iter_update passes the
    probabilities are re-weighted towards the values that produced better
    average fitness.

    run() uses the current seed and advances it by one; run(seed) uses the
    given seed and leaves the sequence untouched.
    """

    def __init__(self,
                 objective: Optional[ObjectiveFunction] = None,
                 num_iters: float = 0.0,
                 seed: int = 1,
                 amplification: float = AMPLIFICATION,
                 iter_update: int = ITER_UPDATE,
                 verbosity: int = 0):
        self.rng = random.Random(seed)
        self.seed = seed
        self.objective = objective
        self.num_iters = num_iters
        self.amplification = amplification
        self.iter_update = iter_update
        self.verbosity = verbosity
        self.model = ProbabilityModel()
        self.stats = GraspStatistics()
        self.best_so_far = math.inf
        # bookkeeping of the last run
        self.last_evals = 0.0
        self.last_passes = 0
        self.last_updates = 0

    # ------------------------------------------------------------------ setup

    def set_seed(self, seed: int) -> None:
        self.seed = seed
        self.rng.seed(seed)

    def add_value(self, v: int) -> None:
        """Registers an RCL control value (duplicates are ignored)."""
        self.model.add_value(v)

    def add_values(self, values: Iterable[int]) -> None:
        for v in values:
            self.add_value(v)

    @property
    def values(self) -> List[int]:
        return list(self.model.values)

    def set_amplification(self, a: float) -> None:
        if a < 0:
            raise ValueError(f"amplification must be >= 0, got {a}")
        self.amplification = a

    def set_iter_update(self, iters: int) -> None:
        if iters <= 0:
            raise ValueError(f"iter_update must be > 0, got {iters}")
        self.iter_update = iters

    def set_num_iters(self, num: float) -> None:
        if num <= 0:
            raise ValueError(f"num_iters must be > 0, got {num}")
        self.num_iters = num

    def set_objective_function(self, objective: ObjectiveFunction) -> None:
        self.objective = objective

    def _check(self) -> None:
        if self.objective is None:
            raise ValueError("No objective function set")
        if len(self.model) == 0:
            raise ValueError("No RCL control values: call add_value() before run()")
        if self.num_iters <= 0:
            raise ValueError(f"num_iters must be > 0, got {self.num_iters}")
        if self.iter_update <= 0:
            raise ValueError(f"iter_update must be > 0, got {self.iter_update}")
        if self.amplification < 0:
            raise ValueError(f"amplification must be >= 0, got {self.amplification}")
        if self.objective.equivalent_cost() <= 0:
            raise ValueError(f"equivalent_cost() must be > 0, got {self.objective.equivalent_cost()}")
        if self.objective.number_of_variables() < 1:
            raise ValueError("number_of_variables() must be >= 1")

    # ------------------------------------------------------------------ search

    def run(self, seed: Optional[int] = None) -> GraspStatistics:
        """
        One independent run. Without a seed, consumes the current seed and
        advances it; with a seed, runs once and restores the previous one.
        """
        if seed is not None:
            old_seed = self.seed
            self.set_seed(seed)
            try:
                return self.run()
            finally:
                self.set_seed(old_seed)

        self._check()
        gof = self.objective
        model = self.model
        stats = self.stats

        stats.new_run(self.seed)
        self.set_seed(self.seed)
        self.seed += 1

        model.reset()
        self.best_so_far = math.inf
        n = gof.number_of_variables()
        eq = gof.equivalent_cost()
        stats.take_prob_stats(1, model.probabilities())

        evals = 0.0
        passes = 0
        updates = 0
        while evals < self.num_iters:
            passes += 1
            i = int(evals)
            v = model.pick(self.rng)
            ranks = [min(self.rng.randint(0, v), n - j - 1) for j in range(n)]

            if self.verbosity > 1:
                print(f"value selected: {v}\tranks: {ranks}")

            sol = gof.decode(ranks)
            sol, ls_cost = gof.improve(sol)
            evals += ls_cost
            f = gof.evaluate(sol)

            if self.verbosity > 1:
                print(f"solution generated: {f}")

            stats.take_stats(i, f, ranks, sol)

            if f < self.best_so_far:
                if self.verbosity > 0:
                    print(f"new best solution {f} (was {self.best_so_far})")
                self.best_so_far = f
            model.record(v, f)

            if passes % self.iter_update == 0:
                model.update(self.best_so_far, self.amplification)
                updates += 1
                stats.take_prob_stats(i, model.probabilities())
                if self.verbosity > 1:
                    print(f"Probabilities updated: {model.probabilities()}")

            evals += eq

        stats.close_run()
        self.last_evals = evals
        self.last_passes = passes
        self.last_updates = updates
        return stats

    def run_many(self, num_runs: int) -> GraspStatistics:
        if num_runs < 1:
            raise ValueError(f"num_runs must be >= 1, got {num_runs}")
        for _ in range(num_runs):
            self.run()
        return self.stats

    def get_statistics(self) -> GraspStatistics:
        return self.stats
