import random

import pytest

from reactive_grasp.engine import ReactiveGRASP
from reactive_grasp.task_assignment import MINCOST, TaskAssignment, TaskAssignmentObjective, swap_descent


@pytest.fixture
def diag():
    return TaskAssignment.build([[1, 10], [10, 1]])


def test_random_instance_is_reproducible():
    a = TaskAssignment.random(12, random.Random(4))
    b = TaskAssignment.random(12, random.Random(4))
    c = TaskAssignment.random(12, random.Random(5))
    assert a == b
    assert a != c
    assert a.n == 12
    assert all(1 <= x <= 12 for row in a.costs for x in row)


def test_small_random_instance_uses_min_cost_range():
    inst = TaskAssignment.random(3, random.Random(0))
    assert all(1 <= x <= MINCOST for row in inst.costs for x in row)


def test_build_rejects_non_square():
    with pytest.raises(ValueError):
        TaskAssignment.build([[1, 2], [3]])
    with pytest.raises(ValueError):
        TaskAssignment.build([])


def test_text_format():
    assert str(TaskAssignment.build([[1, 2], [3, 4]])) == "2\n1\t2\t\n3\t4\t\n"


def test_decode_greedy_and_ranked(diag):
    obj = TaskAssignmentObjective(diag)
    assert obj.decode([0, 0]) == [0, 1]
    assert obj.decode([1, 0]) == [1, 0]


def test_decode_clamps_out_of_range_ranks(diag):
    obj = TaskAssignmentObjective(diag)
    assert obj.decode([5, 5]) == [1, 0]


def test_decode_returns_permutation(small_tap):
    obj = TaskAssignmentObjective(small_tap)
    rng = random.Random(1)
    for _ in range(20):
        ranks = [rng.randint(0, 20) for _ in range(small_tap.n)]
        assert sorted(obj.decode(ranks)) == list(range(small_tap.n))


def test_decode_wrong_length(diag):
    with pytest.raises(ValueError):
        TaskAssignmentObjective(diag).decode([0])


def test_evaluate_and_equivalent_cost(diag):
    obj = TaskAssignmentObjective(diag)
    assert obj.number_of_variables() == 2
    assert obj.equivalent_cost() == 1.5
    assert obj.evaluate([0, 1]) == 2.0
    assert obj.evaluate([1, 0]) == 20.0


def test_improve_without_neighbors_is_noop(diag):
    res = TaskAssignmentObjective(diag, num_neighbors=0).improve([1, 0])
    assert res.solution == [1, 0]
    assert res.cost == 0.0


def test_swap_descent_reaches_optimum(diag):
    sol, examined = swap_descent(diag, [1, 0], max_neighbors=5)
    assert sol == [0, 1]
    assert examined == 2
    res = TaskAssignmentObjective(diag, num_neighbors=5).improve([1, 0])
    assert res.solution == [0, 1]
    assert res.cost == 2.0


def test_swap_descent_budget_counts_neighbours():
    inst = TaskAssignment.random(30, random.Random(1))
    obj = TaskAssignmentObjective(inst, num_neighbors=50)
    start = obj.decode([29] * 30)
    sweep = 30 * 29 // 2
    sol, examined = swap_descent(inst, start, max_neighbors=50)
    assert 0 < examined < 50 + sweep
    assert sorted(sol) == list(range(30))
    res = obj.improve(start)
    assert res.cost == pytest.approx(2.0 * examined / 30)
    assert res.cost < 2.0 * (50 + sweep) / 30


def test_swap_descent_never_worsens(small_tap):
    obj = TaskAssignmentObjective(small_tap, num_neighbors=3)
    start = obj.decode([3] * small_tap.n)
    res = obj.improve(start)
    assert obj.evaluate(res.solution) <= obj.evaluate(start)
    assert sorted(res.solution) == list(range(small_tap.n))
    assert res.cost > 0


def test_engine_on_task_assignment(small_tap):
    obj = TaskAssignmentObjective(small_tap, num_neighbors=1)
    engine = ReactiveGRASP(objective=obj, num_iters=600, seed=2, iter_update=10)
    engine.add_values(range(1, small_tap.n))
    stats = engine.run_many(2)
    best = stats.best()
    assert sorted(best) == list(range(small_tap.n))
    assert obj.evaluate(best) == stats.best_fitness()
