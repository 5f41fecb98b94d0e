"""
Purpose: The batching "orchestrator" (single entry point).
What it does:

Coordinates one run end-to-end:

- takes the orders of one problem instance

- builds the objective (scoring.py) and heuristic (constructive.py) from the policy

- runs the heuristic

- validates coverage and uniqueness of the result (operations.py)

- scores the finished batch list

Typical public function signature:

- batch_orders(orders, policy=..., oracle=...) -> BatchResult
  where BatchResult contains:

- batches: List[Batch]

- score: objective value of the batch list

- oracle_calls: service-time evaluations made for the run

Rule: Engine is the only file other modules should call directly for batching.
"""

# orders/batching/engine.py

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..models import Batch, Order
from .constructive import BasicConstructive, BatchingAlgorithm, SavingsConstructive
from .operations import validate_solution
from .policy import BatchingPolicy
from .scoring import OBJECTIVES, Clock, ObjectiveFunction, build_objective
from .sorting import build_sort_strategy
from routing.oracle import CheckedServiceTimeOracle, ServiceTimeOracle, checked_oracle

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BatchResult:
    """
    Output of a batching run for one instance.
    """
    batches: List[Batch]
    score: Optional[float]
    objective_name: Optional[str]
    elapsed_seconds: float = 0.0
    oracle_calls: Optional[int] = None

    @property
    def num_batches(self) -> int:
        return len(self.batches)


def build_algorithm(policy: BatchingPolicy, objective: Optional[ObjectiveFunction]) -> BatchingAlgorithm:
    """
    Heuristic described by the policy. The savings heuristic needs an objective.
    """
    if policy.algorithm == "savings":
        if objective is None:
            raise ValueError("the savings algorithm needs an objective function")
        return SavingsConstructive(policy.worker_capacity, objective)

    return BasicConstructive(
        policy.worker_capacity,
        sort_by=build_sort_strategy(policy.sort_by, seed=policy.random_seed),
        compact=policy.compact,
    )


def batch_orders(
    orders: Sequence[Order],
    *,
    policy: BatchingPolicy,
    oracle: Optional[ServiceTimeOracle] = None,
    objective: Optional[ObjectiveFunction] = None,
    clock: Clock = time.time,
) -> BatchResult:
    """
    Main batching entry point (pure algorithm).

    Parameters
    ----------
    orders:
        All orders of the instance.
    policy:
        BatchingPolicy: capacity, heuristic, sort strategy, objective name.
    oracle:
        Service-time oracle. Wrapped with routing.oracle.checked_oracle so a
        negative or non-numeric duration fails instead of being cached.
        Only needed when the objective uses service times.
    objective:
        Ready-made objective; overrides policy.objective.
    clock:
        Time source for objectives built here.

    Returns
    -------
    BatchResult:
        batches in picking order, and their score (None when neither an
        objective nor an oracle for the policy's objective is available).

    Raises
    ------
    UnassignableOrderError: an order is heavier than the worker capacity.
    SolutionInvalidError: the heuristic lost or duplicated an order.
    """
    policy.validate()
    started = time.perf_counter()

    checked = None
    if objective is None:
        checked = checked_oracle(oracle) if oracle is not None else None
        objective = _objective_for(policy, checked, clock)

    algorithm = build_algorithm(policy, objective)
    logger.info(
        "batching %d orders with %s (capacity %s, objective %s)",
        len(orders), type(algorithm).__name__, policy.worker_capacity,
        objective.name if objective else None,
    )

    batches = algorithm.run(orders)

    if policy.validate_solution:
        validate_solution(orders, batches)

    score = None
    if objective is not None:
        now = objective.current_time()
        score = objective.run(batches, now=now)

    elapsed = time.perf_counter() - started
    oracle_calls = checked.calls if checked is not None else None
    logger.info("%d batches, score %s, %s oracle calls, %.3fs", len(batches), score, oracle_calls, elapsed)

    return BatchResult(
        batches=batches,
        score=score,
        objective_name=objective.name if objective else None,
        elapsed_seconds=elapsed,
        oracle_calls=oracle_calls,
    )


def _objective_for(
    policy: BatchingPolicy,
    oracle: Optional[CheckedServiceTimeOracle],
    clock: Clock,
) -> Optional[ObjectiveFunction]:
    if oracle is None and OBJECTIVES[policy.objective].requires_oracle:
        return None
    return build_objective(policy.objective, oracle, clock=clock)
