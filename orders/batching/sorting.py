"""
Purpose: Order-list pre-processing before constructive batching.
What it does:

- SortByNone: keep the input order (arrival order greedy batching)
- SortByWeight: ascending (or descending) by weight, stable
- SortByRandom: seeded shuffle

Contract for every strategy:
- sort(orders) returns a NEW list, the input is never modified
- value(order) returns the scalar the ordering is based on

Rule: Strategies only reorder. They never drop or duplicate orders.
"""

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from ..models import Order

DEFAULT_SEED = 50


class SortBy(ABC):
    """
    Ordering policy applied to the order list before batching.
    """

    @abstractmethod
    def sort(self, orders: Sequence[Order]) -> List[Order]:
        ...

    @abstractmethod
    def value(self, order: Order) -> float:
        ...

    def compare(self, order1: Order, order2: Order) -> int:
        v1, v2 = self.value(order1), self.value(order2)
        return (v1 > v2) - (v1 < v2)


class SortByNone(SortBy):
    def sort(self, orders: Sequence[Order]) -> List[Order]:
        return list(orders)

    def value(self, order: Order) -> float:
        return 0.0


class SortByWeight(SortBy):
    """
    Sort by order weight. Python's sort is stable, so equal weights keep
    their input order (also when descending).
    """

    def __init__(self, descending: bool = False):
        self.descending = descending

    def sort(self, orders: Sequence[Order]) -> List[Order]:
        return sorted(orders, key=self.value, reverse=self.descending)

    def value(self, order: Order) -> float:
        return float(order.weight)


class SortByRandom(SortBy):
    """
    Seeded random ordering.

    One generator is shared by sort(), value() and compare(), so successive
    calls on the same instance continue the same stream. Reproducibility is
    per seed, not per call: reseed() to restart it.
    """

    def __init__(self, seed: int = DEFAULT_SEED):
        self.seed = seed
        self._rng = random.Random(seed)

    def reseed(self, seed: Optional[int] = None) -> None:
        if seed is not None:
            self.seed = seed
        self._rng.seed(self.seed)

    def sort(self, orders: Sequence[Order]) -> List[Order]:
        shuffled = list(orders)
        self._rng.shuffle(shuffled)
        return shuffled

    def value(self, order: Order) -> float:
        return self._rng.random()

    def compare(self, order1: Order, order2: Order) -> int:
        draw = self._rng.random()
        if draw == 0.5:
            return 0
        return 1 if draw < 0.5 else -1


SORT_STRATEGIES = {
    "none": SortByNone,
    "weight": SortByWeight,
    "weight_desc": lambda: SortByWeight(descending=True),
    "random": SortByRandom,
}


def build_sort_strategy(name: str, *, seed: int = DEFAULT_SEED) -> SortBy:
    """
    Build a strategy from its configuration name.
    """
    if name not in SORT_STRATEGIES:
        raise ValueError(f"Unknown sort strategy '{name}'. Options: {sorted(SORT_STRATEGIES)}")
    if name == "random":
        return SortByRandom(seed=seed)
    return SORT_STRATEGIES[name]()
