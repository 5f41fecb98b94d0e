import pytest

from orders.batching.scoring import (
    OBJECTIVES,
    MaxThroughoutTime,
    NumCompleteBatches,
    PickingTime,
    PickingTimeByWeight,
    SumAbsoluteDiffBatchTimes,
    SumEarliness,
    SumEarlinessTardiness,
    SumTardiness,
    build_objective,
)
from orders.models import Batch, Order

from conftest import CountingOracle


@pytest.fixture
def two_batches():
    """
    Oracle gives 10 per order:
      first  -> 2 orders, weight 5, service 20, arrivals 40/60, due 50/10
      second -> 1 order,  weight 5, service 10, arrival 90,    due 100
    """
    first = Batch(10, [Order("a", 2, due_date=50, arrival_time=40), Order("b", 3, due_date=10, arrival_time=60)])
    second = Batch(10, [Order("c", 5, due_date=100, arrival_time=90)])
    return first, second


def test_service_time_is_computed_once(oracle, two_batches):
    first, _ = two_batches
    objective = PickingTime(oracle)

    assert first.service_time is None
    assert objective.run(first) == 20
    assert objective.run(first) == 20
    assert oracle.calls == 1
    assert first.service_time == 20


def test_zero_service_time_is_still_cached(two_batches):
    oracle = CountingOracle(per_order=0.0)
    first, _ = two_batches
    objective = PickingTime(oracle)

    objective.run(first)
    objective.run(first)

    assert oracle.calls == 1
    assert first.service_time == 0.0


def test_oracle_failure_propagates(two_batches):
    def broken(batch):
        raise RuntimeError("routing service down")

    first, _ = two_batches
    with pytest.raises(RuntimeError):
        PickingTime(broken).run(first)
    assert first.service_time is None


def test_oracle_is_required():
    with pytest.raises(ValueError):
        PickingTime()
    # counting full batches needs no routing
    NumCompleteBatches()


def test_picking_time_list(oracle, two_batches):
    assert PickingTime(oracle).run(list(two_batches)) == 30


def test_picking_time_by_weight(oracle, two_batches):
    first, second = two_batches
    objective = PickingTimeByWeight(oracle)

    assert objective.run(first) == pytest.approx(4.0)
    assert objective.run(second) == pytest.approx(2.0)
    # total time / total weight, not 4 + 2
    assert objective.run([first, second]) == pytest.approx(3.0)
    assert objective.run([]) == 0.0


def test_num_complete_batches():
    full = Batch(5, [Order(1, 2), Order(2, 3)])
    partial = Batch(5, [Order(3, 3)])
    objective = NumCompleteBatches()

    assert objective.run(full) == 1
    assert objective.run(partial) == 0
    assert objective.run([full, partial, full]) == 2


def test_max_throughout_time(oracle, two_batches):
    first, second = two_batches
    objective = MaxThroughoutTime(oracle)

    assert objective.run(second, now=100) == 10 + 10
    # first: 20 + (100 - 40) = 80 ; second: 30 + (100 - 90) = 40
    assert objective.run([first, second], now=100) == 80
    # reversed: second 10 + 10 = 20 ; first 30 + 60 = 90
    assert objective.run([second, first], now=100) == 90


def test_sum_earliness_and_tardiness(oracle, two_batches):
    first, second = two_batches
    batches = [first, second]

    # completion: first at 20, second at 30
    assert SumEarliness(oracle).run(batches, now=0) == (50 - 20) + (100 - 30)
    assert SumTardiness(oracle).run(batches, now=0) == 20 - 10
    assert SumEarlinessTardiness(oracle).run(batches, now=0) == 110


def test_due_date_objectives_follow_list_order(oracle, two_batches):
    first, second = two_batches
    batches = [second, first]

    # completion: second at 10, first at 30
    assert SumEarliness(oracle).run(batches, now=0) == (100 - 10) + (50 - 30)
    assert SumTardiness(oracle).run(batches, now=0) == 30 - 10
    assert oracle.calls == 2


def test_due_date_objectives_single_batch(oracle, two_batches):
    _, second = two_batches

    assert SumEarliness(oracle).run(second, now=0) == 90
    assert SumTardiness(oracle).run(second, now=0) == 0
    assert SumTardiness(oracle).run(second, now=200) == 110
    assert SumEarlinessTardiness(oracle).run(second, now=0) == 90


def test_sum_absolute_diff_batch_times(oracle):
    batches = [
        Batch(10, [Order(1, 1)]),
        Batch(10, [Order(2, 1), Order(3, 1)]),
        Batch(10, [Order(4, 1), Order(5, 1), Order(6, 1)]),
    ]
    objective = SumAbsoluteDiffBatchTimes(oracle)

    assert objective.run(batches) == 20
    assert objective.run(batches[1]) == 20
    assert objective.run([]) == 0.0
    assert oracle.calls == 3


def test_now_comes_from_clock(oracle, two_batches):
    _, second = two_batches
    objective = MaxThroughoutTime(oracle, clock=lambda: 150.0)

    assert objective.current_time() == 150.0
    assert objective.run(second) == 10 + 60


def test_schedule_records_completion_times(oracle, two_batches):
    first, second = two_batches
    times = PickingTime(oracle).schedule([first, second], now=1000)

    assert times == [1020, 1030]
    assert first.completion_time == 1020
    assert second.completion_time == 1030


def test_build_objective(oracle):
    for name in OBJECTIVES:
        assert build_objective(name, oracle).name == name
    with pytest.raises(ValueError):
        build_objective("shortest_walk", oracle)
