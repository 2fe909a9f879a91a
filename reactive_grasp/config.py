from __future__ import annotations

import json
from dataclasses import dataclass, asdict
from typing import Any, Dict

from .engine import AMPLIFICATION, ITER_UPDATE, ReactiveGRASP


@dataclass
class GraspConfig:
    """
    Algorithm configuration, as read from a JSON file:
      {"iterations": 10000, "numruns": 10, "seed": 1,
       "amplification": 1.0, "update": 100, "neighbors": 0}
    iterations is the evaluation budget of each run.
    """
    iterations: float
    numruns: int = 1
    seed: int = 1
    amplification: float = AMPLIFICATION
    update: int = ITER_UPDATE
    neighbors: int = 0

    def validate(self) -> "GraspConfig":
        if self.iterations <= 0:
            raise ValueError(f"iterations must be > 0, got {self.iterations}")
        if self.numruns < 1:
            raise ValueError(f"numruns must be >= 1, got {self.numruns}")
        if self.amplification < 0:
            raise ValueError(f"amplification must be >= 0, got {self.amplification}")
        if self.update <= 0:
            raise ValueError(f"update must be > 0, got {self.update}")
        if self.neighbors < 0:
            raise ValueError(f"neighbors must be >= 0, got {self.neighbors}")
        return self

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "GraspConfig":
        missing = [k for k in ("iterations", "numruns") if k not in d]
        if missing:
            raise ValueError(f"Missing configuration keys: {', '.join(missing)}")
        try:
            cfg = GraspConfig(
                iterations=float(d["iterations"]),
                numruns=int(d["numruns"]),
                seed=int(d.get("seed", 1)),
                amplification=float(d.get("amplification", AMPLIFICATION)),
                update=int(d.get("update", ITER_UPDATE)),
                neighbors=int(d.get("neighbors", 0)),
            )
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid configuration: {e}") from e
        return cfg.validate()

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def apply(self, engine: ReactiveGRASP) -> ReactiveGRASP:
        engine.set_seed(self.seed)
        engine.set_num_iters(self.iterations)
        engine.set_amplification(self.amplification)
        engine.set_iter_update(self.update)
        return engine


def load_config(path: str) -> GraspConfig:
    with open(path, "r", encoding="utf-8") as f:
        try:
            d = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"{path}: malformed JSON ({e})") from e
    if not isinstance(d, dict):
        raise ValueError(f"{path}: expected a JSON object")
    return GraspConfig.from_dict(d)
