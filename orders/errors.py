"""
Purpose: Error kinds raised by the batching core.

- CapacityExceededError: an add/union would push a batch over its max weight.
  Local: the caller picks another batch or gives up.
- UnassignableOrderError: a single order is heavier than the worker capacity.
  Fatal for the whole run.
- SolutionInvalidError: post-hoc validation found a missing or duplicated order.
  Always fatal, never corrected silently.

Rule: No retries anywhere. Failures are deterministic for fixed inputs.
"""


class BatchingError(Exception):
    """Base class for batching errors."""
    pass


class CapacityExceededError(BatchingError):
    """Adding orders would exceed the batch maximum weight."""
    pass


class UnassignableOrderError(BatchingError):
    """A single order exceeds the maximum batch capacity."""

    def __init__(self, order_id, weight: float, capacity: float):
        self.order_id = order_id
        self.weight = weight
        self.capacity = capacity
        super().__init__(
            f"Data error: single order exceeds maximum batch capacity "
            f"(order {order_id}: weight {weight} > capacity {capacity})"
        )


class SolutionInvalidError(BatchingError):
    """A finished batch list does not cover every order exactly once."""
    pass
