"""
Purpose: Domain models for order batching.
What it does:
- Defines core data structures:
- Product (id, aisle, side, height, weight)
- Order (id, weight, due date, arrival time, products)
- Batch (capacity-bounded list of orders picked in one trip)

Batch owns the weight bookkeeping and the cached service time, so the
capacity invariant (weight <= max_weight) can never be broken from outside
through the public methods.

Rule: No routing calls, no batching heuristics. Models only.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Iterator, List, Optional, Tuple, Union

from .errors import CapacityExceededError

OrderId = Union[int, str]

LEFT_SIDE_AISLE = 0
RIGHT_SIDE_AISLE = 1


@dataclass(frozen=True)
class Product:
    """
    A product line of an order, located in the warehouse.
    """
    id: int
    aisle: int = 0
    side: int = LEFT_SIDE_AISLE
    height_position: float = 0.0
    weight: float = 0.0


@dataclass(frozen=True)
class Order:
    """
    A customer order. Immutable once created; never split across batches.

    Times (due_date, arrival_time) share one unit with the `now` value the
    objective functions use.
    """

    id: OrderId
    weight: float
    due_date: float = 0.0
    arrival_time: float = 0.0
    products: Tuple[Product, ...] = ()

    def __post_init__(self):
        if not math.isfinite(self.weight) or self.weight <= 0:
            raise ValueError(f"Order {self.id}: weight must be a finite number > 0 (got {self.weight})")

    @staticmethod # Factory: weight is the sum of the product weights
    def from_products(
        order_id: OrderId,
        products: List[Product],
        *,
        due_date: float = 0.0,
        arrival_time: float = 0.0,
    ) -> Order:
        return Order(
            id=order_id,
            weight=sum(p.weight for p in products),
            due_date=due_date,
            arrival_time=arrival_time,
            products=tuple(products),
        )

    @property
    def num_references(self) -> int:
        return len(self.products)

    @property
    def distinct_product_ids(self) -> List[int]:
        seen: List[int] = []
        for product in self.products:
            if product.id not in seen:
                seen.append(product.id)
        return seen

    def with_arrival_time(self, arrival_time: float) -> Order:
        return replace(self, arrival_time=arrival_time)


@dataclass(eq=False)
class Batch:
    """
    Group of orders assigned to one picking trip.

    `orders` keeps insertion order, which is the pickup order.
    `service_time` is None until an objective function asks the oracle for it;
    any change of contents resets it to None.
    """

    max_weight: float
    orders: List[Order] = field(default_factory=list)
    service_time: Optional[float] = None

    # Filled by callers that simulate the picking queue (optional)
    completion_time: Optional[float] = None

    weight: float = field(init=False, default=0.0)
    earliest_arrival_time: Optional[float] = field(init=False, default=None)

    def __post_init__(self):
        initial_orders = list(self.orders)
        cached_service_time = self.service_time
        self.orders = []
        for order in initial_orders:
            self.add_order(order)
        self.service_time = cached_service_time

    # --- Derived values ---

    @property
    def available_weight(self) -> float:
        return self.max_weight - self.weight

    @property
    def order_ids(self) -> List[OrderId]:
        return [order.id for order in self.orders]

    @property
    def is_empty(self) -> bool:
        return not self.orders

    def __len__(self) -> int:
        return len(self.orders)

    def __iter__(self) -> Iterator[Order]:
        return iter(self.orders)

    # --- Mutation ---

    def add_order(self, order: Order) -> None:
        """
        Append an order. Raises CapacityExceededError (batch untouched) if the
        order does not fit.
        """
        if self.weight + order.weight > self.max_weight:
            raise CapacityExceededError(
                f"Maximum weight limit exceeded for the batch "
                f"(weight {self.weight} + order {order.id} weight {order.weight} > {self.max_weight})"
            )
        self.orders.append(order)
        self.weight += order.weight
        if self.earliest_arrival_time is None or order.arrival_time < self.earliest_arrival_time:
            self.earliest_arrival_time = order.arrival_time
        self.service_time = None

    def remove_order(self, order: Order) -> None:
        """
        Remove an order (matched by id). Raises KeyError if it is not in the batch.
        """
        for index, current in enumerate(self.orders):
            if current.id == order.id:
                del self.orders[index]
                self.weight -= current.weight
                if self.earliest_arrival_time == current.arrival_time:
                    self.recalculate_minimum_arrival_time()
                self.service_time = None
                return
        raise KeyError(f"Order {order.id} is not in the batch")

    def clone(self) -> Batch:
        """
        Independent copy: same max weight, copied order list, same cached values.
        Orders are immutable so they are shared, not copied.
        """
        copy = Batch(max_weight=self.max_weight)
        copy.orders = list(self.orders)
        copy.weight = self.weight
        copy.earliest_arrival_time = self.earliest_arrival_time
        copy.service_time = self.service_time
        copy.completion_time = self.completion_time
        return copy

    def recalculate_minimum_arrival_time(self) -> None:
        if not self.orders:
            self.earliest_arrival_time = None
            return
        self.earliest_arrival_time = min(order.arrival_time for order in self.orders)

    # --- Queries ---

    def maximum_arrival_time(self) -> Optional[float]:
        if not self.orders:
            return None
        return max(order.arrival_time for order in self.orders)

    def contains_order(self, order: Order) -> bool:
        return any(current.id == order.id for current in self.orders)

    def aisles(self) -> List[int]:
        """Distinct aisles visited by the batch, in first-visit order."""
        aisles: List[int] = []
        for order in self.orders:
            for product in order.products:
                if product.aisle not in aisles:
                    aisles.append(product.aisle)
        return aisles

    def product_ids(self) -> List[int]:
        product_ids: List[int] = []
        for order in self.orders:
            for product_id in order.distinct_product_ids:
                if product_id not in product_ids:
                    product_ids.append(product_id)
        return product_ids

    def __repr__(self) -> str:
        return f"Batch(weight={self.weight}/{self.max_weight}, orders={self.order_ids})"
