# orders/batching/operations.py
"""
Purpose: Batch algebra shared by the heuristics and by solution checks.
What it does:

- capacity checks (order into batch, two orders together)
- union of two batches without touching either input
- post-hoc solution validation: every order exactly once

Rule: Pure helpers. The only thing they create is the union clone.
"""

from __future__ import annotations

from typing import List, Sequence

from ..errors import CapacityExceededError, SolutionInvalidError
from ..models import Batch, Order, OrderId


def can_add_order_to_batch(order: Order, batch: Batch) -> bool:
    return batch.weight + order.weight <= batch.max_weight


def can_add_orders_in_a_batch(order1: Order, order2: Order, max_weight: float) -> bool:
    return order1.weight + order2.weight <= max_weight


def union_batch(batch1: Batch, batch2: Batch) -> Batch:
    """
    Combine two batches into a new one (batch1 orders first, then batch2).

    Raises CapacityExceededError if the combined weight exceeds batch1's
    max weight; neither input is modified in any case.
    The union has no cached service time: the oracle value of a union is not
    derivable from the two inputs.
    """
    if batch1.weight + batch2.weight > batch1.max_weight:
        raise CapacityExceededError(
            f"Maximum weight limit exceeded for the union "
            f"({batch1.weight} + {batch2.weight} > {batch1.max_weight})"
        )

    # capacity already checked on the totals; per-order adds could disagree by rounding
    combined = batch1.clone()
    combined.orders.extend(batch2.orders)
    combined.weight = batch1.weight + batch2.weight

    if batch2.earliest_arrival_time is not None and (
        combined.earliest_arrival_time is None
        or batch2.earliest_arrival_time < combined.earliest_arrival_time
    ):
        combined.recalculate_minimum_arrival_time()

    combined.service_time = None
    combined.completion_time = None
    return combined


def number_of_orders(batches: Sequence[Batch]) -> int:
    return sum(len(batch.orders) for batch in batches)


def number_of_duplicate_orders(batches: Sequence[Batch]) -> int:
    seen = set()
    duplicates = 0
    for batch in batches:
        for order in batch.orders:
            if order.id in seen:
                duplicates += 1
            else:
                seen.add(order.id)
    return duplicates


def number_of_products(orders: Sequence[Order]) -> int:
    return sum(order.num_references for order in orders)


def same_orders(orders1: Sequence[Order], orders2: Sequence[Order]) -> bool:
    """
    True when both sequences hold the same order ids, ignoring order.
    """
    if len(orders1) != len(orders2):
        return False
    return sorted(map(_sort_key, orders1)) == sorted(map(_sort_key, orders2))


def stamp_arrival_times(orders: Sequence[Order], now: float) -> List[Order]:
    """
    Return copies of `orders` that all arrived at `now` (problem start).
    """
    return [order.with_arrival_time(now) for order in orders]


def validate_solution(all_orders: Sequence[Order], batches: Sequence[Batch]) -> None:
    """
    Authoritative correctness check, independent of the heuristic used.

    Raises SolutionInvalidError if the total number of orders across batches
    differs from the input, or if any order id appears more than once.
    """
    expected = len(all_orders)
    found = number_of_orders(batches)
    if expected != found:
        raise SolutionInvalidError(
            f"Number of orders in the solution is incorrect (expected {expected}, found {found})"
        )

    duplicates = number_of_duplicate_orders(batches)
    if duplicates:
        raise SolutionInvalidError(f"There are {duplicates} duplicate orders in the solution")

    known_ids = {order.id for order in all_orders}
    unknown = [order.id for batch in batches for order in batch.orders if order.id not in known_ids]
    if unknown:
        raise SolutionInvalidError(f"Orders not in the instance found in the solution: {unknown}")


# -------------------------
# Internal helpers
# -------------------------

def _sort_key(order: Order) -> tuple:
    # ids may mix ints and strings across instances
    oid: OrderId = order.id
    return (type(oid).__name__, oid)
