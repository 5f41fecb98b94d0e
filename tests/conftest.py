import pytest

from orders.batching.scoring import ObjectiveFunction
from orders.models import Order


class CountingOracle:
    """
    Mock service-time oracle: base + per_order * number of orders.
    Counts how often it is asked.
    """

    def __init__(self, per_order=10.0, base=0.0):
        self.per_order = per_order
        self.base = base
        self.calls = 0

    def __call__(self, batch):
        self.calls += 1
        return self.base + self.per_order * len(batch.orders)


class TotalWeight(ObjectiveFunction):
    """Scores a batch by its total weight; no oracle needed."""

    name = "total_weight"
    requires_oracle = False

    def score_batch(self, batch, now):
        return batch.weight

    def score_list(self, batches, now):
        return sum(batch.weight for batch in batches)


class TableCost(ObjectiveFunction):
    """Scores a batch from a lookup table keyed by its set of order ids."""

    name = "table_cost"
    requires_oracle = False

    def __init__(self, costs, default=100.0):
        super().__init__()
        self.costs = {frozenset(k): v for k, v in costs.items()}
        self.default = default

    def score_batch(self, batch, now):
        return self.costs.get(frozenset(batch.order_ids), self.default)

    def score_list(self, batches, now):
        return sum(self.score_batch(batch, now) for batch in batches)


def ids(batches):
    """Batches as sorted tuples of order ids, order of batches ignored."""
    return sorted(tuple(sorted(batch.order_ids)) for batch in batches)


@pytest.fixture
def oracle():
    return CountingOracle()


@pytest.fixture
def abc_orders():
    return [Order("A", 3), Order("B", 4), Order("C", 5)]
