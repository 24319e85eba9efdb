"""nginx-insight - Recommendation rules

Every rule is an independent threshold check and all matching rules fire.
Rules whose input metric is absent are skipped, never treated as zero.
"""

from typing import List, Optional

from .models import (BenchmarkMetrics, LogMetrics, Recommendation, SecurityIssue,
                     Severity)
from .patterns import (BOT_TRAFFIC_RATE, CRITICAL_LEVELS, ERROR_COUNT_HIGH,
                       ERROR_RATE_HIGH, ERROR_RATE_MEDIUM, ERROR_SIGNATURES,
                       LATENCY_HIGH_MS, LATENCY_LOW_MS, LATENCY_MEDIUM_MS,
                       NOT_FOUND_RATE, P95_HIGH_MS, P95_MEDIUM_MS, RPS_EXCELLENT,
                       RPS_LOW, SERVER_ERROR_RATE, SINGLE_CLIENT_RATE)

SECURITY_SUGGESTIONS = {
    'sql-injection': [
        'Block suspicious query patterns with a WAF such as ModSecurity',
        'Return 403 for requests matching SQL keywords in a location rule',
        'Review input validation in the application',
    ],
    'path-traversal': [
        'Deny requests containing ".." with a location rule',
        'Check that root and alias directives do not expose system paths',
        'Disable autoindex on sensitive locations',
    ],
}


def access_log_recommendations(metrics: LogMetrics,
                               security_issues: Optional[List[SecurityIssue]] = None
                               ) -> List[Recommendation]:
    recommendations = []
    total = metrics.total

    breakdown = metrics.status_breakdown
    if breakdown and breakdown.server_error.count > 0:
        rate = breakdown.server_error.percentage
        if rate > SERVER_ERROR_RATE:
            recommendations.append(Recommendation(
                severity=Severity.HIGH,
                category='errors',
                message=f'High server error rate: {rate:.2f}%',
                suggestions=[
                    'Check nginx error logs for details',
                    'Review upstream server health',
                    'Increase upstream timeouts if needed',
                    'Enable health checks for upstreams',
                ],
            ))

    not_found_rate = metrics.counts.get(404, 0) / total * 100 if total else 0.0
    if not_found_rate > NOT_FOUND_RATE:
        recommendations.append(Recommendation(
            severity=Severity.MEDIUM,
            category='not-found',
            message=f'High 404 rate: {not_found_rate:.2f}%',
            suggestions=[
                'Review most requested 404 paths',
                'Set up proper redirects',
                'Create custom 404 page',
                'Check for broken links',
            ],
        ))

    if metrics.response_times:
        p95 = metrics.response_times.p95
        if p95 > P95_HIGH_MS:
            recommendations.append(Recommendation(
                severity=Severity.HIGH,
                category='performance',
                message=f'Slow response times (P95: {p95:.0f}ms)',
                suggestions=[
                    'Enable proxy caching',
                    'Review upstream performance',
                    'Enable gzip compression',
                    'Consider adding a CDN',
                ],
            ))
        elif p95 > P95_MEDIUM_MS:
            recommendations.append(Recommendation(
                severity=Severity.MEDIUM,
                category='performance',
                message=f'Moderate response times (P95: {p95:.0f}ms)',
                suggestions=[
                    'Enable microcache for dynamic content',
                    'Optimize worker settings',
                    'Review buffer configurations',
                ],
            ))

    if metrics.bot_traffic and metrics.bot_traffic.percentage > BOT_TRAFFIC_RATE:
        recommendations.append(Recommendation(
            severity=Severity.MEDIUM,
            category='bots',
            message=f'High bot traffic: {metrics.bot_traffic.percentage:.2f}%',
            suggestions=[
                'Implement rate limiting for bots',
                'Consider robots.txt configuration',
                'Add User-Agent based rate limiting',
                'Monitor for malicious crawlers',
            ],
        ))

    if metrics.top_clients:
        top = metrics.top_clients[0]
        if top.percentage > SINGLE_CLIENT_RATE:
            recommendations.append(Recommendation(
                severity=Severity.HIGH,
                category='security',
                message=f'Single IP accounts for {top.percentage:.2f}% of traffic',
                suggestions=[
                    f'Review IP: {top.value}',
                    'Consider rate limiting per IP',
                    'Enable DDoS protection',
                    'Check for potential abuse',
                ],
            ))

    for issue in security_issues or []:
        recommendations.append(Recommendation(
            severity=issue.severity,
            category='security',
            message=f'{issue.message} ({len(issue.paths)} paths)',
            suggestions=list(SECURITY_SUGGESTIONS.get(issue.type, [])),
        ))

    return recommendations


def error_log_recommendations(metrics: LogMetrics) -> List[Recommendation]:
    recommendations = []

    if metrics.total > ERROR_COUNT_HIGH:
        recommendations.append(Recommendation(
            severity=Severity.HIGH,
            category='errors',
            message=f'High error count: {metrics.total}',
            suggestions=[
                'Review top error messages',
                'Check application logs',
                'Monitor system resources',
                'Review nginx configuration',
            ],
        ))

    critical = sum(metrics.counts.get(level, 0) for level in CRITICAL_LEVELS)
    if critical > 0:
        recommendations.append(Recommendation(
            severity=Severity.HIGH,
            category='critical',
            message=f'Critical errors detected: {critical}',
            suggestions=[
                'Immediate investigation required',
                'Check system stability',
                'Review error details',
            ],
        ))

    for name, count in metrics.error_signatures.items():
        signature = ERROR_SIGNATURES[name]
        recommendations.append(Recommendation(
            severity=Severity.MEDIUM,
            category=name,
            message=f"{signature['message']}: {count}",
            suggestions=list(signature['suggestions']),
        ))

    return recommendations


def benchmark_recommendations(metrics: BenchmarkMetrics) -> List[Recommendation]:
    recommendations = []

    avg_latency = metrics.latency.avg if metrics.latency else None
    if avg_latency is not None:
        if avg_latency > LATENCY_HIGH_MS:
            recommendations.append(Recommendation(
                severity=Severity.HIGH,
                category='latency',
                message='Very high latency detected (>1s)',
                suggestions=[
                    'Enable proxy caching for API responses',
                    'Increase worker_processes to match CPU cores',
                    'Enable HTTP/2 or HTTP/3',
                    'Check upstream server performance',
                    'Consider adding a CDN for static assets',
                ],
            ))
        elif avg_latency > LATENCY_MEDIUM_MS:
            recommendations.append(Recommendation(
                severity=Severity.MEDIUM,
                category='latency',
                message='High latency detected (>500ms)',
                suggestions=[
                    'Enable microcache for dynamic content',
                    'Optimize worker_connections setting',
                    'Enable gzip compression',
                    'Review upstream keepalive settings',
                ],
            ))
        elif avg_latency > LATENCY_LOW_MS:
            recommendations.append(Recommendation(
                severity=Severity.LOW,
                category='latency',
                message='Moderate latency detected (>200ms)',
                suggestions=[
                    'Fine-tune proxy_buffering',
                    'Consider enabling HTTP/2 server push',
                    'Review cache TTL settings',
                ],
            ))

    rps = metrics.requests_per_sec
    if rps is not None:
        if rps < RPS_LOW:
            recommendations.append(Recommendation(
                severity=Severity.MEDIUM,
                category='throughput',
                message='Low requests/sec (<100 RPS)',
                suggestions=[
                    'Increase worker_connections (current may be bottleneck)',
                    'Enable connection pooling with keepalive',
                    'Review buffer sizes (client_body_buffer_size, etc.)',
                    'Check if worker_processes matches CPU cores',
                ],
            ))
        elif rps > RPS_EXCELLENT:
            recommendations.append(Recommendation(
                severity=Severity.INFO,
                category='throughput',
                message='Excellent throughput (>10k RPS)',
                suggestions=[
                    'Configuration is well-optimized',
                    'Consider adding DDoS protection',
                    'Monitor system resources for bottlenecks',
                ],
            ))

    error_rate = metrics.error_rate
    if error_rate is not None and metrics.error_count:
        if error_rate > ERROR_RATE_HIGH:
            recommendations.append(Recommendation(
                severity=Severity.HIGH,
                category='errors',
                message=f'High error rate: {error_rate:.2f}%',
                suggestions=[
                    'Check upstream server health',
                    'Review proxy_next_upstream settings',
                    'Enable upstream health checks',
                    'Increase upstream timeouts',
                    'Check nginx error logs for details',
                ],
            ))
        elif error_rate > ERROR_RATE_MEDIUM:
            recommendations.append(Recommendation(
                severity=Severity.MEDIUM,
                category='errors',
                message=f'Moderate error rate: {error_rate:.2f}%',
                suggestions=[
                    'Review upstream failover configuration',
                    'Check proxy_connect_timeout and proxy_read_timeout',
                    'Consider adding backup servers',
                ],
            ))

    socket = metrics.socket_errors
    if socket and socket.total > 0:
        suggestions = []
        if socket.timeout:
            suggestions.append('Increase proxy_read_timeout and proxy_send_timeout')
        if socket.connect:
            suggestions.append('Increase proxy_connect_timeout')
        if socket.read:
            suggestions.append('Check upstream server capacity')
        if socket.write:
            suggestions.append('Review client_body_timeout')
        suggestions += [
            'Increase worker_connections if maxed out',
            'Check system file descriptor limits (ulimit -n)',
        ]
        recommendations.append(Recommendation(
            severity=Severity.HIGH,
            category='socket-errors',
            message=f'Socket errors detected: {socket.total} total',
            suggestions=suggestions,
        ))

    return recommendations
