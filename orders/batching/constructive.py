"""
Purpose: Constructive heuristics that turn an order list into batches.
What it does:

- BasicConstructive: greedy packing in list order.
    compact=True  -> first-fit over every open batch (back-fills)
    compact=False -> only the last opened batch is a candidate (no back-fill)
- SavingsConstructive: Clarke & Wright style agglomerative merge driven by
  an objective function.

Both return a List[Batch] covering every input order exactly once, with
every batch within the worker capacity.

Rule: Heuristics build batches; they do not score solutions for reporting
and they do not validate them (engine.py does).
"""

# orders/batching/constructive.py

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..errors import CapacityExceededError, UnassignableOrderError
from ..models import Batch, Order
from .operations import can_add_order_to_batch, can_add_orders_in_a_batch, union_batch
from .scoring import ObjectiveFunction
from .sorting import SortBy

logger = logging.getLogger(__name__)


class BatchingAlgorithm(ABC):
    """
    Common interface: run(orders) -> batches.
    """

    def __init__(self, worker_capacity: float):
        if worker_capacity <= 0:
            raise ValueError("worker_capacity must be > 0")
        self.worker_capacity = worker_capacity

    @abstractmethod
    def run(self, orders: Sequence[Order]) -> List[Batch]:
        ...

    def new_batch(self, order: Order) -> Batch:
        """
        Open a batch holding only `order`. An order that does not fit in an
        empty batch can never be assigned, so this is fatal for the run.
        """
        batch = Batch(max_weight=self.worker_capacity)
        try:
            batch.add_order(order)
        except CapacityExceededError as exc:
            raise UnassignableOrderError(order.id, order.weight, self.worker_capacity) from exc
        return batch


class BasicConstructive(BatchingAlgorithm):
    """
    Greedy batching in list order.

    With a weight SortBy, compact mode approximates first-fit (de|in)creasing
    bin packing. Non-compact mode models a picker who cannot come back to a
    batch once a newer one is open.
    """

    def __init__(self, worker_capacity: float, sort_by: Optional[SortBy] = None, compact: bool = True):
        super().__init__(worker_capacity)
        self.sort_by = sort_by
        self.compact = compact

    def run(self, orders: Sequence[Order]) -> List[Batch]:
        initial_orders = list(orders)
        if self.sort_by is not None:
            initial_orders = self.sort_by.sort(initial_orders)

        batches = self._build_batches(initial_orders)
        logger.info(
            "basic constructive (compact=%s): %d orders -> %d batches",
            self.compact, len(initial_orders), len(batches),
        )
        return batches

    def _build_batches(self, orders: List[Order]) -> List[Batch]:
        batches: List[Batch] = []

        for order in orders:
            target = self._find_batch(batches, order)
            if target is None:
                batches.append(self.new_batch(order))
            else:
                target.add_order(order)

        return batches

    def _find_batch(self, batches: List[Batch], order: Order) -> Optional[Batch]:
        if not batches:
            return None
        if self.compact:
            for batch in batches:
                if can_add_order_to_batch(order, batch):
                    return batch
            return None
        current = batches[-1]
        if can_add_order_to_batch(order, current):
            return current
        return None


@dataclass(frozen=True)
class MergeCandidate:
    """
    A feasible pair of batches and the evaluation of their union.
    """
    first_index: int
    second_index: int
    union: Batch
    union_cost: float
    saving: float


class SavingsConstructive(BatchingAlgorithm):
    """
    Savings (Clarke & Wright style) heuristic.

    Start from one batch per order. Each iteration evaluates every pair of
    batches that fits together, merges the pair whose union has the lowest
    objective value, and stops when no pair fits anymore.

    Selection uses the union's own cost, not the largest saving
    cost(i) + cost(j) - cost(union); the saving is kept for diagnostics.
    Ties go to the first pair in (i, j) scan order.

    Each iteration is O(n^2) objective evaluations and there are at most
    n - 1 merges, so an expensive oracle dominates the run time.
    """

    def __init__(self, worker_capacity: float, objective: ObjectiveFunction):
        super().__init__(worker_capacity)
        self.objective = objective

    def run(self, orders: Sequence[Order]) -> List[Batch]:
        orders = list(orders)
        n = len(orders)

        if n == 0:
            return []
        if n == 1:
            return [self.new_batch(orders[0])]
        if n == 2:
            return self._pair(orders[0], orders[1])

        now = self.objective.current_time()
        batches = self.initialize_batch_list(orders, now)

        merges = 0
        while True:
            candidate = self.best_merge(batches, now)
            if candidate is None:
                break
            batches = self._apply_merge(batches, candidate)
            merges += 1
            logger.debug(
                "merge %d: batches (%d, %d) cost %.3f saving %.3f -> %d batches",
                merges, candidate.first_index, candidate.second_index,
                candidate.union_cost, candidate.saving, len(batches),
            )

        logger.info("savings constructive: %d orders -> %d batches after %d merges", n, len(batches), merges)
        return batches

    def initialize_batch_list(self, orders: Sequence[Order], now: float) -> List[Batch]:
        """
        One batch per order, each scored once so the service time is cached.
        """
        batches: List[Batch] = []
        for order in orders:
            batch = self.new_batch(order)
            self.objective.run(batch, now=now)
            batches.append(batch)
        return batches

    def best_merge(self, batches: List[Batch], now: float) -> Optional[MergeCandidate]:
        """
        Scan all pairs (i < j) and return the feasible merge with the lowest
        union cost, or None when no pair fits within capacity.
        """
        best: Optional[MergeCandidate] = None

        for i in range(len(batches)):
            for j in range(i + 1, len(batches)):
                first, second = batches[i], batches[j]
                if first.weight + second.weight > self.worker_capacity:
                    continue

                union = union_batch(first, second)
                union_cost = self.objective.run(union, now=now)
                saving = (
                    self.objective.run(first, now=now)
                    + self.objective.run(second, now=now)
                    - union_cost
                )

                if best is None or union_cost < best.union_cost:
                    best = MergeCandidate(
                        first_index=i,
                        second_index=j,
                        union=union,
                        union_cost=union_cost,
                        saving=saving,
                    )

        return best

    # -------------------------
    # Internal helpers
    # -------------------------

    def _pair(self, order1: Order, order2: Order) -> List[Batch]:
        if can_add_orders_in_a_batch(order1, order2, self.worker_capacity):
            batch = self.new_batch(order1)
            batch.add_order(order2)
            return [batch]
        return [self.new_batch(order1), self.new_batch(order2)]

    @staticmethod
    def _apply_merge(batches: List[Batch], candidate: MergeCandidate) -> List[Batch]:
        # merged-away batches are dropped, never mutated; the union goes last
        merged = [
            batch
            for index, batch in enumerate(batches)
            if index not in (candidate.first_index, candidate.second_index)
        ]
        merged.append(candidate.union)
        return merged


ALGORITHMS = ("basic", "savings")
