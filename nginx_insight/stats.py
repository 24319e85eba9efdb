"""nginx-insight - Statistics helpers

Order statistics use the nearest-rank method on a sorted copy of the
sample. Percentages are taken against the number of parsed records.
"""

import math
from typing import Dict, List, Mapping, Optional, Sequence, Union

from .models import RankedItem, ResponseTimeStats, StatusBreakdown, StatusBucket
from .patterns import TOP_N

Number = Union[int, float]


def average(values: Sequence[Number]) -> float:
    return sum(values) / len(values)


def median(values: Sequence[Number]) -> float:
    ordered = sorted(values)
    mid = len(ordered) // 2
    if len(ordered) % 2:
        return ordered[mid]
    return (ordered[mid - 1] + ordered[mid]) / 2


def percentile(values: Sequence[Number], p: float) -> float:
    """Nearest-rank percentile: index = ceil(p/100 * n) - 1, clamped"""
    ordered = sorted(values)
    index = math.ceil(p / 100 * len(ordered)) - 1
    return ordered[min(max(index, 0), len(ordered) - 1)]


def percentage(count: int, total: int) -> float:
    if not total:
        return 0.0
    return round(count / total * 100, 2)


def top_n(counts: Mapping[str, int], total: int, limit: int = TOP_N) -> List[RankedItem]:
    """Rank by descending count; ties keep first-seen order"""
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)[:limit]
    return [RankedItem(value, count, percentage(count, total)) for value, count in ranked]


def status_breakdown(status_counts: Dict[int, int], total: int) -> StatusBreakdown:
    buckets = {2: 0, 3: 0, 4: 0, 5: 0}
    for status, count in status_counts.items():
        klass = status // 100
        if klass in buckets:
            buckets[klass] += count

    return StatusBreakdown(
        success=StatusBucket(buckets[2], percentage(buckets[2], total)),
        redirect=StatusBucket(buckets[3], percentage(buckets[3], total)),
        client_error=StatusBucket(buckets[4], percentage(buckets[4], total)),
        server_error=StatusBucket(buckets[5], percentage(buckets[5], total)),
    )


def response_time_stats(samples: Sequence[float]) -> Optional[ResponseTimeStats]:
    """None when no record carried a response time"""
    if not samples:
        return None
    return ResponseTimeStats(
        avg=average(samples),
        median=median(samples),
        p95=percentile(samples, 95),
        p99=percentile(samples, 99),
        max=max(samples),
    )
