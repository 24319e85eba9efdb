from nginx_insight.grading import grade
from nginx_insight.models import BenchmarkMetrics, FormatKind, LatencyStats, SocketErrors


def _metrics(avg=None, errors=None, total=None, sockets=None):
    return BenchmarkMetrics(
        tool=FormatKind.WRK,
        latency=LatencyStats(avg=avg) if avg is not None else None,
        error_count=errors,
        total_requests=total,
        socket_errors=sockets,
    )


def test_perfect_run():
    assert grade(_metrics(avg=50, errors=0, total=1000)) == 'A'


def test_slow_latency_without_errors_is_d():
    assert grade(_metrics(avg=1200, errors=0, total=1000, sockets=SocketErrors())) == 'D'


def test_latency_bands():
    assert grade(_metrics(avg=150)) == 'A'
    assert grade(_metrics(avg=300)) == 'B'
    assert grade(_metrics(avg=600)) == 'C'


def test_error_rate_bands():
    assert grade(_metrics(errors=120, total=1000)) == 'C'
    assert grade(_metrics(errors=60, total=1000)) == 'B'
    assert grade(_metrics(errors=20, total=1000)) == 'A'
    assert grade(_metrics(avg=600, errors=1, total=1000)) == 'C'


def test_errors_without_total_are_not_scored():
    assert grade(_metrics(avg=1200, errors=50)) == 'D'


def test_socket_error_bands():
    assert grade(_metrics(sockets=SocketErrors(connect=150))) == 'B'
    assert grade(_metrics(sockets=SocketErrors(read=5, timeout=6))) == 'A'
    assert grade(_metrics(avg=300, sockets=SocketErrors(write=1))) == 'B'


def test_combined_deductions_fail():
    metrics = _metrics(avg=1500, errors=200, total=1000, sockets=SocketErrors(timeout=500))
    assert grade(metrics) == 'F'


def test_missing_metrics_grade_a():
    assert grade(_metrics()) == 'A'
