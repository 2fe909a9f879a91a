from __future__ import annotations

import math
import random
from typing import Dict, Iterable, List

# Guards divisions by zero in the quality ratio.
EPSILON1 = 1e-10
# Laplace correction, spread uniformly over all control values.
EPSILON2 = 1e-2
# Largest deviation of the probability sum from 1 left untouched by update().
DRIFT_TOLERANCE = 1e-12


class ProbabilityModel:
    """
    Discrete distribution over the RCL control values with reactive update.

    Values live in a fixed array (ascending order) with a parallel
    value -> index lookup, so the sampling walk never depends on hashing.
    """

    def __init__(self, values: Iterable[int] = ()):
        self.values: List[int] = []
        self._index: Dict[int, int] = {}
        self.prob: List[float] = []
        self.score: List[float] = []
        self.count: List[int] = []
        for v in values:
            self.add_value(v)

    def __len__(self) -> int:
        return len(self.values)

    def __contains__(self, v: int) -> bool:
        return v in self._index

    @property
    def laplace(self) -> float:
        return EPSILON2 / len(self.values) if self.values else 0.0

    def add_value(self, v: int) -> None:
        v = int(v)
        if v < 0:
            raise ValueError(f"Control values must be non-negative, got {v}")
        if v in self._index:
            return
        self.values.append(v)
        self.values.sort()
        self._index = {val: k for k, val in enumerate(self.values)}
        self.reset()

    def reset(self) -> None:
        """Uniform probabilities, zero scores and counts."""
        n = len(self.values)
        if n == 0:
            raise ValueError("No control values registered")
        p = 1.0 / n
        self.prob = [p] * n
        self.score = [0.0] * n
        self.count = [0] * n

    def probabilities(self) -> Dict[int, float]:
        return {v: self.prob[k] for k, v in enumerate(self.values)}

    def pick(self, rng: random.Random) -> int:
        """Roulette-wheel selection of a control value."""
        r = rng.random()
        for k, p in enumerate(self.prob):
            r -= p
            if r <= 0:
                return self.values[k]
        # floating-point leftover after the whole walk
        return self.values[-1]

    def record(self, v: int, fitness: float) -> None:
        k = self._index[v]
        self.score[k] += fitness
        self.count[k] += 1

    def average(self, v: int) -> float:
        k = self._index[v]
        if self.count[k] == 0:
            return math.nan
        return self.score[k] / self.count[k]

    def update(self, best_so_far: float, amplification: float = 1.0) -> List[float]:
        """
        Reactive update. Each visited value gets quality
            q = (best_so_far / (avg + EPSILON1)) ** amplification
        and probability
            laplace + (1 - laplace) * (q + EPSILON1 / n0) / (sigma + EPSILON1)
        where sigma sums q over the n0 visited values. Unvisited values keep
        exactly the Laplace floor.

        The expression above totals 1 + EPSILON2 * (1 - 1/|values|), so the
        mass above the floor is then rescaled to bring the sum back to 1.
        """
        n = len(self.values)
        laplace = self.laplace

        quality: Dict[int, float] = {}
        sigma = 0.0
        for k in range(n):
            if self.count[k] == 0:
                continue
            avg = self.score[k] / self.count[k]
            q = math.pow(best_so_far / (avg + EPSILON1), amplification)
            quality[k] = q
            sigma += q

        n0 = len(quality)
        if n0 == 0:
            return list(self.prob)
        correct = EPSILON1 / n0

        for k in range(n):
            if k in quality:
                self.prob[k] = laplace + (1.0 - laplace) * (quality[k] + correct) / (sigma + EPSILON1)
            else:
                self.prob[k] = laplace

        self._renormalize(laplace)
        return list(self.prob)

    def _renormalize(self, floor: float) -> None:
        total = sum(self.prob)
        if abs(total - 1.0) <= DRIFT_TOLERANCE:
            return
        n = len(self.prob)
        excess = total - n * floor
        target = 1.0 - n * floor
        if excess <= 0.0:
            self.prob = [1.0 / n] * n
            return
        factor = target / excess
        self.prob = [floor + (p - floor) * factor for p in self.prob]
