from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Protocol, Sequence, TypeVar

S = TypeVar("S")


@dataclass
class LocalSearchResult(Generic[S]):
    """Improved solution and the extra evaluation-budget cost of obtaining it."""
    solution: S
    cost: float = 0.0

    def __iter__(self):
        yield self.solution
        yield self.cost


class ObjectiveFunction(Protocol[S]):
    """
    What the engine needs from a problem:
      - number_of_variables : length of the rank vector (>= 1)
      - equivalent_cost     : evaluations one construction pass is worth (> 0)
      - decode              : ranks -> solution (out-of-range ranks are clamped)
      - improve             : local search, returns solution + extra cost
      - evaluate            : fitness, lower is better
    The solution itself is opaque to the engine.
    """

    def number_of_variables(self) -> int:
        ...

    def equivalent_cost(self) -> float:
        ...

    def decode(self, ranks: Sequence[int]) -> S:
        ...

    def improve(self, solution: S) -> LocalSearchResult[S]:
        ...

    def evaluate(self, solution: S) -> float:
        ...

