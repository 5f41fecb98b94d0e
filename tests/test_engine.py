import pytest

from orders.batching import engine
from orders.batching.engine import BatchResult, batch_orders
from orders.batching.policy import BatchingPolicy, default_policy, policy_from_env, savings_policy
from orders.errors import SolutionInvalidError, UnassignableOrderError
from orders.models import Batch, Order
from routing.oracle import OracleError

from conftest import CountingOracle, ids


@pytest.fixture
def orders():
    return [Order(i, w, due_date=100 + 10 * i) for i, w in enumerate([3, 4, 5, 2, 6, 1])]


def test_basic_run_is_validated_and_scored(orders, oracle):
    result = batch_orders(orders, policy=default_policy(worker_capacity=7), oracle=oracle)

    assert isinstance(result, BatchResult)
    assert result.objective_name == "picking_time"
    assert sum(len(b) for b in result.batches) == len(orders)
    assert result.score == pytest.approx(10.0 * len(orders))
    assert all(b.weight <= 7 for b in result.batches)


def test_savings_run(orders):
    oracle = CountingOracle(per_order=5.0, base=30.0)
    result = batch_orders(orders, policy=savings_policy(worker_capacity=7), oracle=oracle)

    assert sorted(o for b in result.batches for o in b.order_ids) == list(range(6))
    assert result.score == pytest.approx(30.0 * result.num_batches + 5.0 * len(orders))


def test_savings_needs_an_objective(orders):
    with pytest.raises(ValueError):
        batch_orders(orders, policy=savings_policy(worker_capacity=7))


def test_score_is_none_without_oracle(orders):
    result = batch_orders(orders, policy=default_policy(worker_capacity=7))
    assert result.score is None
    assert result.objective_name is None


def test_objective_without_oracle_is_scored(abc_orders):
    policy = BatchingPolicy(worker_capacity=7, objective="num_complete_batches")
    result = batch_orders(abc_orders, policy=policy)

    assert ids(result.batches) == [("A", "B"), ("C",)]
    assert result.score == 1


def test_policy_sort_strategy_is_applied():
    orders = [Order("a", 2), Order("b", 5), Order("c", 4), Order("d", 3)]
    policy = BatchingPolicy(worker_capacity=7, sort_by="weight_desc")

    result = batch_orders(orders, policy=policy)

    assert [b.order_ids for b in result.batches] == [["b", "a"], ["c", "d"]]


def test_heavy_order_aborts_run(orders):
    with pytest.raises(UnassignableOrderError):
        batch_orders(orders, policy=default_policy(worker_capacity=5))


def test_invalid_oracle_value_fails(orders):
    with pytest.raises(OracleError):
        batch_orders(orders, policy=default_policy(worker_capacity=7), oracle=lambda batch: -1.0)


def test_broken_heuristic_is_caught(orders, monkeypatch):
    class Duplicating:
        def run(self, orders):
            return [Batch(100, orders[:-1]), Batch(100, orders[:1])]

    monkeypatch.setattr(engine, "build_algorithm", lambda policy, objective: Duplicating())

    with pytest.raises(SolutionInvalidError):
        batch_orders(orders, policy=default_policy(worker_capacity=7))


def test_time_objective_uses_clock(abc_orders, oracle):
    policy = BatchingPolicy(worker_capacity=7, objective="sum_tardiness")
    result = batch_orders(abc_orders, policy=policy, oracle=oracle, clock=lambda: 0.0)

    # all due dates are 0: batch [A, B] ends at 20, batch [C] at 30
    assert result.score == pytest.approx(2 * 20 + 30)


def test_policy_validation():
    with pytest.raises(ValueError):
        BatchingPolicy(worker_capacity=0).validate()
    with pytest.raises(ValueError):
        BatchingPolicy(algorithm="genetic").validate()
    with pytest.raises(ValueError):
        BatchingPolicy(sort_by="colour").validate()
    with pytest.raises(ValueError):
        BatchingPolicy(objective="happiness").validate()


def test_policy_from_env(monkeypatch):
    monkeypatch.setenv("OBP_WORKER_CAPACITY", "24.5")
    monkeypatch.setenv("OBP_ALGORITHM", "savings")
    monkeypatch.setenv("OBP_COMPACT", "false")
    monkeypatch.setenv("OBP_SORT_BY", "random")
    monkeypatch.setenv("OBP_RANDOM_SEED", "7")
    monkeypatch.setenv("OBP_OBJECTIVE", "sum_tardiness")

    p = policy_from_env()

    assert p.worker_capacity == 24.5
    assert p.algorithm == "savings"
    assert p.compact is False
    assert p.sort_by == "random"
    assert p.random_seed == 7
    assert p.objective == "sum_tardiness"
    assert p.validate_solution is True


def test_policy_from_env_rejects_bad_values(monkeypatch):
    monkeypatch.setenv("OBP_ALGORITHM", "tabu")
    with pytest.raises(ValueError):
        policy_from_env()


def test_oracle_calls_are_reported(orders, oracle):
    result = batch_orders(orders, policy=default_policy(worker_capacity=7), oracle=oracle)

    # one evaluation per final batch, scoring only
    assert result.oracle_calls == result.num_batches
    assert oracle.calls == result.num_batches


def test_oracle_objective_without_oracle_is_skipped(orders, monkeypatch):
    def must_not_build(*args, **kwargs):
        raise AssertionError("objective built without an oracle")

    monkeypatch.setattr(engine, "build_objective", must_not_build)
    result = batch_orders(orders, policy=default_policy(worker_capacity=7))

    assert result.score is None
    assert result.oracle_calls is None
