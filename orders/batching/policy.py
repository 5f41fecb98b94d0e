"""
Purpose: Central configuration for batching runs (single source of truth).
What it does:

Stores the tunables of one batching run:

WORKER_CAPACITY = max weight a picker carries per trip

ALGORITHM = basic | savings

COMPACT = first-fit (True) or last-batch-only (False) for basic

SORT_BY = none | weight | weight_desc | random

RANDOM_SEED = 50

OBJECTIVE = registry name in scoring.OBJECTIVES

Values can come from the environment (or a .env file):
OBP_WORKER_CAPACITY, OBP_ALGORITHM, OBP_COMPACT, OBP_SORT_BY,
OBP_RANDOM_SEED, OBP_OBJECTIVE, OBP_VALIDATE_SOLUTION.

Rule: No logic here, just parameters so you can tune without rewriting code.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from .constructive import ALGORITHMS
from .scoring import OBJECTIVES
from .sorting import DEFAULT_SEED, SORT_STRATEGIES


@dataclass(frozen=True)
class BatchingPolicy:
    """
    Central configuration for order batching.

    Notes:
    - worker_capacity is in the same unit as order weights.
    - compact only matters for the basic algorithm; the savings algorithm
      picks merges with the objective instead.
    - the objective also drives the savings merges, so choosing
      "num_complete_batches" there makes little sense.
    """

    # --- Capacity ---
    worker_capacity: float = 10.0

    # --- Heuristic ---
    algorithm: str = "basic"
    compact: bool = True

    # --- Pre-processing (basic only) ---
    sort_by: str = "none"
    random_seed: int = DEFAULT_SEED

    # --- Scoring ---
    objective: str = "picking_time"

    # --- Safety net ---
    # Check coverage/uniqueness of every produced solution.
    validate_solution: bool = True

    def validate(self) -> None:
        """
        Basic sanity checks. Call once at startup if you want.
        """
        if self.worker_capacity <= 0:
            raise ValueError("worker_capacity must be > 0")

        if self.algorithm not in ALGORITHMS:
            raise ValueError(f"algorithm must be one of {ALGORITHMS}")

        if self.sort_by not in SORT_STRATEGIES:
            raise ValueError(f"sort_by must be one of {sorted(SORT_STRATEGIES)}")

        if self.objective not in OBJECTIVES:
            raise ValueError(f"objective must be one of {sorted(OBJECTIVES)}")


def default_policy(worker_capacity: float = 10.0) -> BatchingPolicy:
    """
    Convenience factory for the default policy.
    """
    p = BatchingPolicy(worker_capacity=worker_capacity)
    p.validate()
    return p


def savings_policy(worker_capacity: float = 10.0, objective: str = "picking_time") -> BatchingPolicy:
    """
    Savings heuristic driven by the given objective.
    """
    p = BatchingPolicy(worker_capacity=worker_capacity, algorithm="savings", objective=objective)
    p.validate()
    return p


def policy_from_env() -> BatchingPolicy:
    """
    Build a policy from OBP_* environment variables (a .env file is read
    first). Unset variables keep the dataclass defaults.
    """
    load_dotenv()
    defaults = BatchingPolicy()

    p = BatchingPolicy(
        worker_capacity=float(os.getenv("OBP_WORKER_CAPACITY", defaults.worker_capacity)),
        algorithm=os.getenv("OBP_ALGORITHM", defaults.algorithm),
        compact=_env_flag("OBP_COMPACT", defaults.compact),
        sort_by=os.getenv("OBP_SORT_BY", defaults.sort_by),
        random_seed=int(os.getenv("OBP_RANDOM_SEED", defaults.random_seed)),
        objective=os.getenv("OBP_OBJECTIVE", defaults.objective),
        validate_solution=_env_flag("OBP_VALIDATE_SOLUTION", defaults.validate_solution),
    )
    p.validate()
    return p


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")
