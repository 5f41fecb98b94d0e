"""
Batching subpackage for the Orders domain.

Public API:
- batch_orders, BatchResult
- BatchingPolicy and its factories
- heuristics: BasicConstructive, SavingsConstructive
- objectives: ObjectiveFunction and its variants, build_objective
- sort strategies: SortByNone, SortByWeight, SortByRandom
- batch algebra: union_batch, validate_solution, capacity checks
"""

from .constructive import BasicConstructive, BatchingAlgorithm, SavingsConstructive
from .engine import BatchResult, batch_orders, build_algorithm
from .operations import (
    can_add_order_to_batch,
    can_add_orders_in_a_batch,
    union_batch,
    validate_solution,
)
from .policy import BatchingPolicy, default_policy, policy_from_env, savings_policy
from .scoring import (
    OBJECTIVES,
    MaxThroughoutTime,
    NumCompleteBatches,
    ObjectiveFunction,
    PickingTime,
    PickingTimeByWeight,
    SumAbsoluteDiffBatchTimes,
    SumEarliness,
    SumEarlinessTardiness,
    SumTardiness,
    build_objective,
)
from .sorting import SortBy, SortByNone, SortByRandom, SortByWeight

__all__ = [
    "batch_orders",
    "BatchResult",
    "build_algorithm",
    "BatchingPolicy",
    "default_policy",
    "savings_policy",
    "policy_from_env",
    "BatchingAlgorithm",
    "BasicConstructive",
    "SavingsConstructive",
    "ObjectiveFunction",
    "PickingTime",
    "PickingTimeByWeight",
    "NumCompleteBatches",
    "MaxThroughoutTime",
    "SumEarliness",
    "SumTardiness",
    "SumEarlinessTardiness",
    "SumAbsoluteDiffBatchTimes",
    "OBJECTIVES",
    "build_objective",
    "SortBy",
    "SortByNone",
    "SortByWeight",
    "SortByRandom",
    "can_add_order_to_batch",
    "can_add_orders_in_a_batch",
    "union_batch",
    "validate_solution",
]
