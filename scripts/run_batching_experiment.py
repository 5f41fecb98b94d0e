# Run from the repository root: python -m scripts.run_batching_experiment orders.csv
import argparse
import logging
from typing import List

from orders.batching.engine import batch_orders
from orders.batching.policy import BatchingPolicy, policy_from_env
from orders.loader import load_orders_csv, solution_frame
from orders.models import Batch

logger = logging.getLogger("batching_experiment")


class AisleCountOracle:
    """
    Stand-in for a real routing service: a fixed time per visited aisle plus
    a fixed time per product line. Good enough to compare heuristics offline.
    """

    def __init__(self, seconds_per_aisle: float = 30.0, seconds_per_pick: float = 10.0):
        self.seconds_per_aisle = seconds_per_aisle
        self.seconds_per_pick = seconds_per_pick

    def __call__(self, batch: Batch) -> float:
        picks = sum(order.num_references or 1 for order in batch.orders)
        return self.seconds_per_aisle * max(len(batch.aisles()), 1) + self.seconds_per_pick * picks


def experiment_policies(base: BatchingPolicy) -> List[BatchingPolicy]:
    common = dict(worker_capacity=base.worker_capacity, objective=base.objective, random_seed=base.random_seed)
    return [
        BatchingPolicy(algorithm="basic", compact=False, sort_by="none", **common),
        BatchingPolicy(algorithm="basic", compact=True, sort_by="none", **common),
        BatchingPolicy(algorithm="basic", compact=True, sort_by="weight_desc", **common),
        BatchingPolicy(algorithm="basic", compact=True, sort_by="random", **common),
        BatchingPolicy(algorithm="savings", **common),
    ]


def main():
    parser = argparse.ArgumentParser(description="Compare batching heuristics on one order file.")
    parser.add_argument("orders_csv", help="CSV produced by scripts/generate_mock_orders.py")
    parser.add_argument("--limit", type=int, default=60, help="only use the first N orders")
    parser.add_argument("--show", action="store_true", help="print the best solution table")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")

    orders = load_orders_csv(args.orders_csv)[: args.limit]
    oracle = AisleCountOracle()
    base = policy_from_env()

    # batching starts once the last order of the file has arrived
    start = max(order.arrival_time for order in orders)

    best = None
    for policy in experiment_policies(base):
        result = batch_orders(orders, policy=policy, oracle=oracle, clock=lambda: start)
        label = f"{policy.algorithm}/compact={policy.compact}/sort={policy.sort_by}"
        logger.info(
            "%-40s batches=%3d score=%.2f oracle_calls=%s time=%.3fs",
            label, result.num_batches, result.score, result.oracle_calls, result.elapsed_seconds,
        )
        if best is None or result.score < best[1].score:
            best = (label, result)

    logger.info("Best: %s (score %.2f)", best[0], best[1].score)
    if args.show:
        print(solution_frame(best[1].batches).to_string(index=False))


if __name__ == "__main__":
    main()
