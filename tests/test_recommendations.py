from nginx_insight.models import (BenchmarkMetrics, BotTraffic, FormatKind, LatencyStats,
                                  LogMetrics, RankedItem, ResponseTimeStats, SecurityIssue,
                                  Severity, SocketErrors, StatusBucket, Throughput)
from nginx_insight.recommendations import (access_log_recommendations,
                                           benchmark_recommendations,
                                           error_log_recommendations)
from nginx_insight.stats import status_breakdown


def _access(statuses, total=None, p95=None, bots=0.0, top_client=None):
    total = total if total is not None else sum(statuses.values())
    return LogMetrics(
        kind=FormatKind.ACCESS,
        total=total,
        counts=statuses,
        status_breakdown=status_breakdown(statuses, total),
        response_times=ResponseTimeStats(p95 / 2, p95 / 2, p95, p95, p95) if p95 is not None else None,
        bot_traffic=BotTraffic(int(bots), bots),
        top_clients=[RankedItem('198.51.100.7', 1, top_client)] if top_client is not None else [],
    )


def _by_category(recommendations):
    return {rec.category: rec for rec in recommendations}


def test_healthy_access_log_has_no_recommendations():
    assert access_log_recommendations(_access({200: 100}, p95=120, bots=5.0, top_client=10.0)) == []


def test_server_error_rate_above_threshold():
    recs = _by_category(access_log_recommendations(_access({200: 90, 502: 10})))

    assert recs['errors'].severity is Severity.HIGH
    assert recs['errors'].message == 'High server error rate: 10.00%'
    assert recs['errors'].suggestions[0] == 'Check nginx error logs for details'


def test_server_error_rate_at_threshold_does_not_fire():
    assert access_log_recommendations(_access({200: 95, 500: 5})) == []


def test_not_found_rate():
    recs = _by_category(access_log_recommendations(_access({200: 80, 404: 20})))

    assert recs['not-found'].severity is Severity.MEDIUM
    assert recs['not-found'].message == 'High 404 rate: 20.00%'


def test_not_found_rate_just_over_threshold():
    recs = _by_category(access_log_recommendations(_access({200: 22499, 404: 2501})))

    assert recs['not-found'].message == 'High 404 rate: 10.00%'


def test_not_found_rate_at_threshold_does_not_fire():
    assert access_log_recommendations(_access({200: 90, 404: 10})) == []


def test_p95_bands():
    high = _by_category(access_log_recommendations(_access({200: 10}, p95=1500)))
    medium = _by_category(access_log_recommendations(_access({200: 10}, p95=700)))

    assert high['performance'].severity is Severity.HIGH
    assert high['performance'].message == 'Slow response times (P95: 1500ms)'
    assert medium['performance'].severity is Severity.MEDIUM


def test_latency_rules_skipped_without_timings():
    recs = access_log_recommendations(_access({200: 10}))
    assert 'performance' not in _by_category(recs)


def test_bot_traffic_and_single_client():
    recs = _by_category(access_log_recommendations(_access({200: 10}, bots=45.0, top_client=60.0)))

    assert recs['bots'].severity is Severity.MEDIUM
    assert recs['security'].severity is Severity.HIGH
    assert recs['security'].suggestions[0] == 'Review IP: 198.51.100.7'


def test_security_issues_become_recommendations():
    issue = SecurityIssue('path-traversal', Severity.HIGH, 'Potential path traversal attempts detected',
                          ['/../etc/passwd'])
    recs = access_log_recommendations(_access({200: 10}), [issue])

    assert len(recs) == 1
    assert recs[0].category == 'security'
    assert 'path traversal' in recs[0].message
    assert recs[0].suggestions


def test_all_rules_fire_together():
    metrics = _access({200: 50, 404: 30, 503: 20}, p95=2000, bots=40.0, top_client=70.0)
    categories = sorted(rec.category for rec in access_log_recommendations(metrics))

    assert categories == ['bots', 'errors', 'not-found', 'performance', 'security']


def test_error_log_rules():
    metrics = LogMetrics(
        kind=FormatKind.ERROR,
        total=1500,
        counts={'error': 1490, 'crit': 6, 'emerg': 4},
        error_signatures={'upstream-timeout': 12},
    )
    recs = _by_category(error_log_recommendations(metrics))

    assert recs['errors'].message == 'High error count: 1500'
    assert recs['critical'].message == 'Critical errors detected: 10'
    assert recs['upstream-timeout'].severity is Severity.MEDIUM
    assert recs['upstream-timeout'].message == 'Upstream timeouts in error log: 12'


def test_quiet_error_log():
    metrics = LogMetrics(kind=FormatKind.ERROR, total=3, counts={'warn': 3})
    assert error_log_recommendations(metrics) == []


def _bench(avg=None, rps=None, errors=None, total=None, sockets=None):
    return BenchmarkMetrics(
        tool=FormatKind.WRK,
        latency=LatencyStats(avg=avg) if avg is not None else None,
        throughput=Throughput(requests_per_sec=rps) if rps is not None else None,
        error_count=errors,
        total_requests=total,
        socket_errors=sockets,
    )


def test_benchmark_latency_bands():
    severities = [
        benchmark_recommendations(_bench(avg=avg))[0].severity
        for avg in (1500, 700, 300)
    ]
    assert severities == [Severity.HIGH, Severity.MEDIUM, Severity.LOW]
    assert benchmark_recommendations(_bench(avg=150)) == []


def test_benchmark_throughput_bands():
    low = benchmark_recommendations(_bench(rps=50))
    excellent = benchmark_recommendations(_bench(rps=20000))

    assert low[0].severity is Severity.MEDIUM
    assert low[0].category == 'throughput'
    assert excellent[0].severity is Severity.INFO
    assert benchmark_recommendations(_bench(rps=5000)) == []


def test_benchmark_error_rate_bands():
    high = benchmark_recommendations(_bench(errors=80, total=1000))
    medium = benchmark_recommendations(_bench(errors=20, total=1000))

    assert high[0].severity is Severity.HIGH
    assert high[0].message == 'High error rate: 8.00%'
    assert medium[0].severity is Severity.MEDIUM
    assert benchmark_recommendations(_bench(errors=5, total=1000)) == []
    assert benchmark_recommendations(_bench(errors=80)) == []


def test_socket_error_suggestions_follow_error_kinds():
    recs = benchmark_recommendations(_bench(sockets=SocketErrors(connect=2, timeout=3)))

    assert len(recs) == 1
    assert recs[0].severity is Severity.HIGH
    assert recs[0].message == 'Socket errors detected: 5 total'
    assert recs[0].suggestions[:2] == [
        'Increase proxy_read_timeout and proxy_send_timeout',
        'Increase proxy_connect_timeout',
    ]
    assert 'Review client_body_timeout' not in recs[0].suggestions


def test_zero_socket_errors_do_not_fire():
    assert benchmark_recommendations(_bench(sockets=SocketErrors())) == []
