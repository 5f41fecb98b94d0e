"""
Purpose: Objective functions that score a batch or a batch list.
What it does:

Every objective answers two questions:

- run(batch) -> score of one batch in isolation
- run(batches) -> score of a whole solution, list order = picking order

Variants:

- PickingTime: total service time
- PickingTimeByWeight: service time per unit of weight
- NumCompleteBatches: number of batches filled exactly to capacity
- MaxThroughoutTime: worst (queue wait + waiting since arrival) over batches
- SumEarliness / SumTardiness / SumEarlinessTardiness: due date deviations
- SumAbsoluteDiffBatchTimes: spread of batch service times around the mean

Service time comes from the oracle and is cached on the batch the first
time it is needed, so repeated scoring of an unchanged batch is O(1).

`now` is captured once per run() call (or passed explicitly), so one
evaluation never mixes two clock readings.

Rule: Scoring never changes batch contents. The only writes are the cached
service time and, through schedule(), completion times.
"""

# orders/batching/scoring.py

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Tuple, Type, Union

from ..models import Batch
from routing.oracle import ServiceTimeOracle

Clock = Callable[[], float]
Scorable = Union[Batch, Sequence[Batch]]


class ObjectiveFunction(ABC):
    """
    Base class for all objectives. Lower is better for every built-in
    variant except NumCompleteBatches (a count you usually maximise).

    Parameters
    ----------
    oracle:
        Service-time oracle, required unless the subclass sets
        requires_oracle = False.
    clock:
        Zero-argument callable returning the current time in the same unit as
        order due dates and arrival times. Defaults to time.time.
    """

    name: str = ""
    requires_oracle: bool = True

    def __init__(self, oracle: Optional[ServiceTimeOracle] = None, *, clock: Clock = time.time):
        if self.requires_oracle and oracle is None:
            raise ValueError(f"{type(self).__name__} needs a service time oracle")
        self.oracle = oracle
        self.clock = clock

    # --- Public API ---

    def run(self, target: Scorable, now: Optional[float] = None) -> float:
        if now is None:
            now = self.current_time()
        if isinstance(target, Batch):
            return float(self.score_batch(target, now))
        return float(self.score_list(list(target), now))

    def current_time(self) -> float:
        return float(self.clock())

    def service_time(self, batch: Batch) -> float:
        """
        Cached service time of `batch`; asks the oracle only on the first call.
        Oracle errors propagate unchanged and leave the cache empty.
        """
        if batch.service_time is None:
            batch.service_time = float(self.oracle(batch))
        return batch.service_time

    def schedule(self, batches: Sequence[Batch], now: Optional[float] = None) -> List[float]:
        """
        Process the batches one after another starting at `now`; record and
        return each batch's completion time.
        """
        if now is None:
            now = self.current_time()
        completion_times = []
        for batch, elapsed in self._accumulated(batches):
            batch.completion_time = now + elapsed
            completion_times.append(batch.completion_time)
        return completion_times

    # --- Variant hooks ---

    @abstractmethod
    def score_batch(self, batch: Batch, now: float) -> float:
        ...

    @abstractmethod
    def score_list(self, batches: List[Batch], now: float) -> float:
        ...

    def _accumulated(self, batches: Sequence[Batch]) -> Iterator[Tuple[Batch, float]]:
        # list order is the picking order: batch k finishes after batches 0..k
        total = 0.0
        for batch in batches:
            total += self.service_time(batch)
            yield batch, total

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class PickingTime(ObjectiveFunction):
    name = "picking_time"

    def score_batch(self, batch: Batch, now: float) -> float:
        return self.service_time(batch)

    def score_list(self, batches: List[Batch], now: float) -> float:
        return sum(self.score_batch(batch, now) for batch in batches)


class PickingTimeByWeight(ObjectiveFunction):
    """
    The list score is total service time over total weight, not the sum of
    the per-batch ratios.
    """

    name = "picking_time_by_weight"

    def score_batch(self, batch: Batch, now: float) -> float:
        if batch.weight == 0:
            return 0.0
        return self.service_time(batch) / batch.weight

    def score_list(self, batches: List[Batch], now: float) -> float:
        total_time = 0.0
        total_weight = 0.0
        for batch in batches:
            total_time += self.service_time(batch)
            total_weight += batch.weight
        if total_weight == 0:
            return 0.0
        return total_time / total_weight


class NumCompleteBatches(ObjectiveFunction):
    name = "num_complete_batches"
    requires_oracle = False

    def score_batch(self, batch: Batch, now: float) -> float:
        return 1.0 if batch.available_weight == 0 else 0.0

    def score_list(self, batches: List[Batch], now: float) -> float:
        return sum(self.score_batch(batch, now) for batch in batches)


class MaxThroughoutTime(ObjectiveFunction):
    """
    Throughput time of a batch = time until it is picked (service times of
    every batch ahead of it plus its own) + how long its oldest order has
    been waiting. The list score is the worst batch.
    """

    name = "max_throughout_time"

    def score_batch(self, batch: Batch, now: float) -> float:
        return self.service_time(batch) + _waiting_time(batch, now)

    def score_list(self, batches: List[Batch], now: float) -> float:
        worst = 0.0
        for batch, elapsed in self._accumulated(batches):
            throughput = elapsed + _waiting_time(batch, now)
            if throughput > worst:
                worst = throughput
        return worst


class _DueDateObjective(ObjectiveFunction):
    """
    Shared accumulation for due-date objectives: completion time of batch k
    is now + service times of batches 0..k.
    """

    def score_batch(self, batch: Batch, now: float) -> float:
        return self.batch_deviation(batch, now + self.service_time(batch))

    def score_list(self, batches: List[Batch], now: float) -> float:
        total = 0.0
        for batch, elapsed in self._accumulated(batches):
            total += self.batch_deviation(batch, now + elapsed)
        return total

    @abstractmethod
    def batch_deviation(self, batch: Batch, completion_time: float) -> float:
        ...


class SumEarliness(_DueDateObjective):
    name = "sum_earliness"

    def batch_deviation(self, batch: Batch, completion_time: float) -> float:
        return sum(
            order.due_date - completion_time
            for order in batch.orders
            if order.due_date > completion_time
        )


class SumTardiness(_DueDateObjective):
    name = "sum_tardiness"

    def batch_deviation(self, batch: Batch, completion_time: float) -> float:
        return sum(
            completion_time - order.due_date
            for order in batch.orders
            if order.due_date < completion_time
        )


class SumEarlinessTardiness(ObjectiveFunction):
    name = "sum_earliness_tardiness"

    def __init__(self, oracle: Optional[ServiceTimeOracle] = None, *, clock: Clock = time.time):
        super().__init__(oracle, clock=clock)
        self.earliness = SumEarliness(oracle, clock=clock)
        self.tardiness = SumTardiness(oracle, clock=clock)

    def score_batch(self, batch: Batch, now: float) -> float:
        return self.earliness.score_batch(batch, now) + self.tardiness.score_batch(batch, now)

    def score_list(self, batches: List[Batch], now: float) -> float:
        return self.earliness.score_list(batches, now) + self.tardiness.score_list(batches, now)


class SumAbsoluteDiffBatchTimes(ObjectiveFunction):
    """
    Balance measure: sum over batches of |mean service time - service time|.
    """

    name = "sum_absolute_diff_batch_times"

    def score_batch(self, batch: Batch, now: float) -> float:
        return self.service_time(batch)

    def score_list(self, batches: List[Batch], now: float) -> float:
        if not batches:
            return 0.0
        times = [self.service_time(batch) for batch in batches]
        average = sum(times) / len(times)
        return sum(abs(average - t) for t in times)


OBJECTIVES: Dict[str, Type[ObjectiveFunction]] = {
    cls.name: cls
    for cls in (
        PickingTime,
        PickingTimeByWeight,
        NumCompleteBatches,
        MaxThroughoutTime,
        SumEarliness,
        SumTardiness,
        SumEarlinessTardiness,
        SumAbsoluteDiffBatchTimes,
    )
}


def build_objective(
    name: str,
    oracle: Optional[ServiceTimeOracle] = None,
    *,
    clock: Clock = time.time,
) -> ObjectiveFunction:
    """
    Factory used by the engine and configuration: objective by registry name.
    """
    try:
        cls = OBJECTIVES[name]
    except KeyError:
        raise ValueError(f"Unknown objective '{name}'. Options: {sorted(OBJECTIVES)}") from None
    return cls(oracle, clock=clock)


# -------------------------
# Internal helpers
# -------------------------

def _waiting_time(batch: Batch, now: float) -> float:
    if batch.earliest_arrival_time is None:
        return 0.0
    return now - batch.earliest_arrival_time
