"""nginx-insight - Benchmark grading"""

from .models import BenchmarkMetrics
from .patterns import (ANY_ERROR_DEDUCTION, ERROR_RATE_DEDUCTIONS, GRADE_BANDS,
                       LATENCY_DEDUCTIONS, SOCKET_ERROR_DEDUCTIONS)


def _deduction(value: float, bands) -> int:
    for threshold, points in bands:
        if value > threshold:
            return points
    return 0


def _score(metrics: BenchmarkMetrics) -> int:
    score = 100

    if metrics.latency and metrics.latency.avg:
        score -= _deduction(metrics.latency.avg, LATENCY_DEDUCTIONS)

    error_rate = metrics.error_rate
    if metrics.error_count and error_rate is not None:
        score -= _deduction(error_rate, ERROR_RATE_DEDUCTIONS) or ANY_ERROR_DEDUCTION

    if metrics.socket_errors:
        score -= _deduction(metrics.socket_errors.total, SOCKET_ERROR_DEDUCTIONS)

    return score


def grade(metrics: BenchmarkMetrics) -> str:
    """Letter grade A-F from latency, error rate and socket errors"""
    score = _score(metrics)
    for minimum, letter in GRADE_BANDS:
        if score >= minimum:
            return letter
    return 'F'
