"""Timing and throughput collection for tree builds and verifications.

Each tracked operation records how long a call took together with how much
work it did: payloads hashed into a new tree, or nodes in the tree being
verified. Reports then show both wall time and units per second.
"""

import time
import functools
import statistics
from typing import Callable, Dict, List, NamedTuple
from dataclasses import dataclass, field


class Sample(NamedTuple):
    elapsed: float
    units: int


@dataclass
class OperationMetrics:
    """Samples for one tagged operation such as 'TreeBuilder.build'."""
    unit: str
    samples: List[Sample] = field(default_factory=list)

    @property
    def calls(self) -> int:
        return len(self.samples)

    @property
    def total_time(self) -> float:
        return sum(s.elapsed for s in self.samples)

    @property
    def total_units(self) -> int:
        return sum(s.units for s in self.samples)

    @property
    def median_time(self) -> float:
        return statistics.median(s.elapsed for s in self.samples) if self.samples else 0.0

    @property
    def throughput(self) -> float:
        """Units processed per second over every recorded call."""
        elapsed = self.total_time
        return self.total_units / elapsed if elapsed > 0 else 0.0


class PerformanceTracker:
    """Process-wide collector; off until `enable()` is called."""

    _instance = None

    @classmethod
    def get_instance(cls) -> 'PerformanceTracker':
        if cls._instance is None:
            cls._instance = PerformanceTracker()
        return cls._instance

    def __init__(self):
        self.operations: Dict[str, OperationMetrics] = {}
        self.enabled = False

    def record(self, tag: str, unit: str, elapsed: float, units: int) -> None:
        if not self.enabled:
            return
        metrics = self.operations.get(tag)
        if metrics is None:
            metrics = self.operations[tag] = OperationMetrics(unit)
        metrics.samples.append(Sample(elapsed, units))

    def reset(self) -> None:
        self.operations.clear()

    def enable(self) -> None:
        self.enabled = True

    def disable(self) -> None:
        self.enabled = False

    def report(self, sort_by: str = 'total_time') -> str:
        """
        Render one row per operation, largest `sort_by` value first.

        `sort_by` names any OperationMetrics property: 'total_time', 'calls',
        'median_time', 'total_units' or 'throughput'.
        """
        if not self.operations:
            return "No performance data collected."

        rule = "-" * 86
        rows = [
            rule,
            f"{'Operation':<22} {'Calls':>6} {'Total (s)':>11} {'Median (s)':>11} "
            f"{'Units':>12} {'Throughput':>19}",
            rule,
        ]
        ranked = sorted(self.operations.items(),
                        key=lambda item: getattr(item[1], sort_by), reverse=True)
        for tag, m in ranked:
            rate = f"{m.throughput:,.0f} {m.unit}/s"
            rows.append(f"{tag:<22} {m.calls:>6} {m.total_time:>11.6f} {m.median_time:>11.6f} "
                        f"{m.total_units:>12} {rate:>19}")
        return "\n".join(rows)


def track_performance(tag: str, unit: str, count: Callable[..., int]) -> Callable:
    """
    Record wall time and work done by each call of the decorated method.

    Args:
        tag: Row name in the report.
        unit: What `count` measures, e.g. "payloads" or "nodes".
        count: Called as `count(result, *args)` after a successful call to
            size the work. A call that raises is recorded with zero units.
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            tracker = PerformanceTracker.get_instance()
            if not tracker.enabled:
                return func(*args, **kwargs)

            units = 0
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
                units = count(result, *args)
                return result
            finally:
                tracker.record(tag, unit, time.perf_counter() - start, units)
        return wrapper
    return decorator
