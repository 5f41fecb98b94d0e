"""
Orders domain package.

Public API:
- Domain models: Order, Product, Batch
- Error kinds: BatchingError, CapacityExceededError, UnassignableOrderError,
  SolutionInvalidError
- Batching entry: batch_orders (see orders.batching)

Should not contain business logic.
"""
from .errors import BatchingError, CapacityExceededError, SolutionInvalidError, UnassignableOrderError
from .models import Batch, Order, Product

__all__ = [
    "Order",
    "Product",
    "Batch",
    "BatchingError",
    "CapacityExceededError",
    "UnassignableOrderError",
    "SolutionInvalidError",
]
