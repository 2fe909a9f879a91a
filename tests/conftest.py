from __future__ import annotations

import random

import matplotlib
matplotlib.use("Agg")

import pytest

from reactive_grasp.engine import ReactiveGRASP
from reactive_grasp.objective import LocalSearchResult
from reactive_grasp.task_assignment import TaskAssignment, TaskAssignmentObjective


class RankSumObjective:
    """Solution = the ranks themselves, fitness = 1 + sum(ranks)."""

    def __init__(self, n: int = 4, eq: float = 2.5, ls_cost: float = 0.0):
        self.n = n
        self.eq = eq
        self.ls_cost = ls_cost
        self.decoded = 0

    def number_of_variables(self) -> int:
        return self.n

    def equivalent_cost(self) -> float:
        return self.eq

    def decode(self, ranks):
        self.decoded += 1
        return list(ranks)

    def improve(self, solution):
        return LocalSearchResult(solution, self.ls_cost)

    def evaluate(self, solution) -> float:
        return 1.0 + sum(solution)


class FixedRandom:
    """Stands in for random.Random in pick()."""

    def __init__(self, *values):
        self.values = list(values)

    def random(self):
        return self.values.pop(0)


@pytest.fixture
def rank_sum():
    return RankSumObjective()


@pytest.fixture
def small_tap():
    return TaskAssignment.random(8, random.Random(3))


@pytest.fixture
def make_engine():
    def _make(objective=None, values=(1, 2, 3), num_iters=200.0, seed=7, iter_update=5, amplification=1.0):
        engine = ReactiveGRASP(
            objective=objective if objective is not None else RankSumObjective(),
            num_iters=num_iters,
            seed=seed,
            iter_update=iter_update,
            amplification=amplification,
        )
        engine.add_values(values)
        return engine
    return _make


@pytest.fixture
def tap_engine(small_tap):
    engine = ReactiveGRASP(objective=TaskAssignmentObjective(small_tap, num_neighbors=2),
                           num_iters=400.0, seed=11, iter_update=10)
    engine.add_values(range(1, small_tap.n))
    return engine
