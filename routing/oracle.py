"""
Purpose: The service-time oracle contract.
What it does:
- Names the oracle type: a callable taking a Batch and returning the
  duration (non-negative) a picker needs to retrieve it.
- Wraps any callable so bad results fail loudly instead of being cached.

The oracle must be a pure function of the batch contents: the objective
functions cache its value on the batch and never ask twice.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from orders.models import Batch

logger = logging.getLogger(__name__)

ServiceTimeOracle = Callable[["Batch"], float]


class OracleError(Exception):
    """The service-time oracle failed or returned an unusable value."""
    pass


class CheckedServiceTimeOracle:
    """
    Adapts any oracle callable and validates each result.
    """

    def __init__(self, oracle: ServiceTimeOracle):
        self.oracle = oracle
        self.calls = 0

    def __call__(self, batch: "Batch") -> float:
        self.calls += 1
        raw = self.oracle(batch)
        try:
            value = float(raw)
        except (TypeError, ValueError) as exc:
            raise OracleError(f"Service time oracle returned a non-numeric value: {raw!r}") from exc

        if math.isnan(value) or value < 0:
            raise OracleError(f"Service time oracle returned an invalid duration: {value}")

        logger.debug("service time %.3f for batch %s", value, batch.order_ids)
        return value


def checked_oracle(oracle: ServiceTimeOracle) -> CheckedServiceTimeOracle:
    """
    Convenience wrapper, returns the oracle unchanged if it is already checked.
    """
    if isinstance(oracle, CheckedServiceTimeOracle):
        return oracle
    return CheckedServiceTimeOracle(oracle)
