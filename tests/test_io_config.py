import csv
import json

import pytest

from reactive_grasp.config import GraspConfig, load_config
from reactive_grasp.engine import ReactiveGRASP
from reactive_grasp.io_instances import load_instance, save_instance, write_stats_json, write_summary_csv
from reactive_grasp.task_assignment import TaskAssignment


def _write(path, text):
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_load_instance(tmp_path):
    p = _write(tmp_path / "a.tap", "3\n1 2 3\n4 5 6\n7 8 9\n")
    inst = load_instance(p)
    assert inst.n == 3
    assert inst.cost(1, 2) == 6
    assert inst.cost(2, 0) == 7


def test_saved_instance_reads_back(tmp_path, small_tap):
    p = save_instance(small_tap, str(tmp_path / "sub" / "inst.tap"))
    assert load_instance(p) == small_tap


@pytest.mark.parametrize("text", ["", "2\n1 2 3\n", "2\n1 x 3 4\n", "0\n"])
def test_malformed_instances(tmp_path, text):
    p = _write(tmp_path / "bad.tap", text)
    with pytest.raises(ValueError):
        load_instance(p)


def test_load_config_defaults(tmp_path):
    p = _write(tmp_path / "c.json", json.dumps({"iterations": 5000, "numruns": 3}))
    cfg = load_config(p)
    assert cfg == GraspConfig(iterations=5000.0, numruns=3)
    assert cfg.seed == 1
    assert cfg.amplification == 1.0
    assert cfg.update == 100
    assert cfg.neighbors == 0


def test_load_config_full(tmp_path):
    d = {"iterations": 100, "numruns": 2, "seed": 9, "amplification": 2.5, "update": 7, "neighbors": 3}
    cfg = load_config(_write(tmp_path / "c.json", json.dumps(d)))
    assert cfg.to_dict() == {"iterations": 100.0, "numruns": 2, "seed": 9,
                             "amplification": 2.5, "update": 7, "neighbors": 3}


@pytest.mark.parametrize("text", [
    "{not json",
    "[1, 2]",
    json.dumps({"numruns": 2}),
    json.dumps({"iterations": 0, "numruns": 2}),
    json.dumps({"iterations": 10, "numruns": 0}),
    json.dumps({"iterations": 10, "numruns": 1, "amplification": -1}),
    json.dumps({"iterations": 10, "numruns": 1, "update": 0}),
    json.dumps({"iterations": "ten", "numruns": 1}),
])
def test_invalid_config(tmp_path, text):
    with pytest.raises(ValueError):
        load_config(_write(tmp_path / "c.json", text))


def test_config_apply():
    engine = ReactiveGRASP()
    GraspConfig(iterations=50, seed=12, amplification=0.5, update=4).apply(engine)
    assert engine.seed == 12
    assert engine.num_iters == 50
    assert engine.amplification == 0.5
    assert engine.iter_update == 4


def test_write_stats(tmp_path, tap_engine):
    stats = tap_engine.run_many(2)
    p = write_stats_json(stats, str(tmp_path / "out" / "stats.json"))
    with open(p, encoding="utf-8") as f:
        data = json.load(f)
    assert [d["run_index"] for d in data] == [0, 1]
    assert data[1]["seed"] == stats.seed(1)
    assert data[0]["solution_checkpoints"]["solutions"][-1] == stats.best(0)

    p = write_summary_csv(stats, str(tmp_path / "summary.csv"))
    with open(p, newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert len(rows) == 2
    assert list(rows[0]) == [
        "run", "seed", "time_s", "best_fitness", "best_evals",
        "solutions", "improvements", "prob_updates",
    ]
    assert float(rows[0]["best_fitness"]) == stats.best_fitness(0)


def test_write_summary_without_runs(tmp_path):
    from reactive_grasp.statistics import GraspStatistics
    with pytest.raises(RuntimeError):
        write_summary_csv(GraspStatistics(), str(tmp_path / "x.csv"))
