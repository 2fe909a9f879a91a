from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .objective import LocalSearchResult

Assignment = List[int]   # assignment[task] = agent

MINCOST = 10


@dataclass(frozen=True)
class TaskAssignment:
    """
    n agents, n tasks, cost[agent][task]. Each agent takes exactly one task.
    """
    costs: Tuple[Tuple[int, ...], ...]

    @property
    def n(self) -> int:
        return len(self.costs)

    def cost(self, agent: int, task: int) -> int:
        return self.costs[agent][task]

    @staticmethod
    def build(costs: Sequence[Sequence[int]]) -> "TaskAssignment":
        n = len(costs)
        if n == 0:
            raise ValueError("Empty cost matrix")
        for row in costs:
            if len(row) != n:
                raise ValueError(f"Cost matrix must be square ({n}x{n})")
        return TaskAssignment(costs=tuple(tuple(int(c) for c in row) for row in costs))

    @staticmethod
    def random(n: int, rng: random.Random) -> "TaskAssignment":
        """Costs drawn uniformly from 1..max(n, MINCOST)."""
        if n < 1:
            raise ValueError(f"n must be >= 1, got {n}")
        val = max(n, MINCOST)
        return TaskAssignment.build([[rng.randint(1, val) for _ in range(n)] for _ in range(n)])

    def total_cost(self, assignment: Sequence[int]) -> int:
        return sum(self.cost(agent, task) for task, agent in enumerate(assignment))

    def __str__(self) -> str:
        rows = ["".join(f"{c}\t" for c in row) for row in self.costs]
        return f"{self.n}\n" + "\n".join(rows) + "\n"


class TaskAssignmentObjective:
    """
    Greedy decoder + swap local search for the task assignment problem.

    Task i is assigned in order; candidates are the agents still free, sorted
    by cost(agent, i). Rank 0 is the cheapest agent; ranks past the end pick
    the most expensive one.
    """

    def __init__(self, data: TaskAssignment, num_neighbors: int = 0, verbosity: int = 0):
        self.data = data
        self.num_neighbors = num_neighbors
        self.verbosity = verbosity

    def number_of_variables(self) -> int:
        return self.data.n

    def equivalent_cost(self) -> float:
        # stage i checks n-i+1 candidates: n(n+1)/2 in total, i.e. (n+1)/2
        # evaluations of an n-variable solution
        return (self.data.n + 1) / 2.0

    def candidates(self, task: int, remaining: Sequence[int]) -> List[int]:
        return sorted(remaining, key=lambda a: (self.data.cost(a, task), a))

    def decode(self, ranks: Sequence[int]) -> Assignment:
        n = self.data.n
        if len(ranks) != n:
            raise ValueError(f"Expected {n} ranks, got {len(ranks)}")
        if self.verbosity > 0:
            print(f"Ranks: {list(ranks)}")

        remaining = list(range(n))
        assignment: Assignment = []
        for task in range(n):
            cands = self.candidates(task, remaining)
            d = min(len(cands) - 1, ranks[task])
            agent = cands[d]
            assignment.append(agent)
            remaining.remove(agent)
        return assignment

    def improve(self, solution: Assignment) -> LocalSearchResult[Assignment]:
        if self.num_neighbors > 0:
            improved, examined = swap_descent(self.data, solution, self.num_neighbors)
            # each neighbour touches two of the n variables
            return LocalSearchResult(improved, 2.0 * examined / self.data.n)
        return LocalSearchResult(solution, 0.0)

    def evaluate(self, solution: Assignment) -> float:
        return float(self.data.total_cost(solution))


def swap_descent(data: TaskAssignment, assignment: Sequence[int], max_neighbors: int) -> Tuple[Assignment, int]:
    """
    Steepest descent on the pairwise-swap neighbourhood. A new sweep starts
    only while fewer than max_neighbors neighbours have been examined, so the
    total never exceeds max_neighbors plus one sweep of n(n-1)/2.
    Returns the new assignment and the number of neighbours examined.
    """
    n = data.n
    sol = list(assignment)
    examined = 0
    while examined < max_neighbors:
        best = 0
        bi = bj = -1
        for i in range(1, n):
            a1 = sol[i]
            c1 = data.cost(a1, i)
            for j in range(i):
                a2 = sol[j]
                examined += 1
                net = data.cost(a1, j) + data.cost(a2, i) - data.cost(a2, j) - c1
                if net < best:
                    best = net
                    bi, bj = i, j
        if best >= 0:
            break
        sol[bi], sol[bj] = sol[bj], sol[bi]
    return sol, examined
