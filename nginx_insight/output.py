"""nginx-insight - Report output"""

import io
from dataclasses import asdict
from enum import Enum
from itertools import groupby
from typing import Any, Dict, List, Union

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .models import (BenchmarkAnalysisResult, FormatKind, LogAnalysisResult,
                     RankedItem, Recommendation, Severity)

AnalysisResult = Union[LogAnalysisResult, BenchmarkAnalysisResult]

SEVERITY_STYLES = {
    Severity.HIGH: 'red bold',
    Severity.MEDIUM: 'yellow',
    Severity.LOW: 'blue',
    Severity.INFO: 'green',
}
GRADE_STYLES = {'A': 'green bold', 'B': 'green', 'C': 'yellow', 'D': 'red', 'F': 'red bold'}

RULE = "═" * 70
SECTION = "─" * 70


def _section(console: Console, title: str, style: str = "bold"):
    console.print("\n" + SECTION, style="cyan")
    console.print(title, style=style)


def _ranked_table(label: str, items: List[RankedItem], unit: str = "Requests") -> Table:
    table = Table(box=box.ROUNDED)
    table.add_column("#", style="dim", justify="right")
    table.add_column(label, style="cyan", overflow="fold")
    table.add_column(unit, justify="right")
    table.add_column("%", justify="right")
    for idx, item in enumerate(items, 1):
        table.add_row(str(idx), escape(item.value), f"{item.count:,}", f"{item.percentage:.2f}")
    return table


def _ms(value) -> str:
    return f"{value:.2f} ms" if value is not None else "-"


def _render_access(result: LogAnalysisResult, console: Console):
    metrics = result.metrics
    lines = [f"Total Requests: [cyan]{metrics.total:,}[/]"]
    if metrics.total_bytes is not None:
        lines.append(f"Bytes Sent: [cyan]{metrics.total_bytes:,}[/]")
    if metrics.time_range:
        lines.append(f"Time Range: [cyan]{escape(metrics.time_range.start)}[/] → [cyan]{escape(metrics.time_range.end)}[/]")
    if metrics.bot_traffic:
        lines.append(f"Bot Traffic: [cyan]{metrics.bot_traffic.count:,}[/] "
                     f"({metrics.bot_traffic.percentage:.2f}%)")
    console.print(Panel.fit("\n".join(lines), title="Summary", border_style="cyan"))

    breakdown = metrics.status_breakdown
    if breakdown:
        _section(console, "STATUS CODE DISTRIBUTION")
        for label, bucket, color in (("2xx Success", breakdown.success, "green"),
                                     ("3xx Redirect", breakdown.redirect, "cyan"),
                                     ("4xx Client Error", breakdown.client_error, "yellow"),
                                     ("5xx Server Error", breakdown.server_error, "red")):
            console.print(f"  {label}: [{color}]{bucket.count:,}[/] ({bucket.percentage:.2f}%)")

    if metrics.methods:
        _section(console, "METHODS")
        for method, count in sorted(metrics.methods.items(), key=lambda kv: kv[1], reverse=True):
            console.print(f"  {escape(method)}: {count:,}")

    rt = metrics.response_times
    if rt:
        _section(console, "RESPONSE TIMES")
        for label, value in (("Average", rt.avg), ("Median", rt.median), ("P95", rt.p95),
                             ("P99", rt.p99), ("Max", rt.max)):
            console.print(f"  {label}: {_ms(value)}")

    if metrics.top_paths:
        _section(console, f"TOP {len(metrics.top_paths)} REQUESTED PATHS")
        console.print(_ranked_table("Path", metrics.top_paths))

    if metrics.top_clients:
        _section(console, "TOP IPs (by requests)")
        console.print(_ranked_table("IP Address", metrics.top_clients))


def _render_error(result: LogAnalysisResult, console: Console):
    metrics = result.metrics
    lines = [f"Total Errors: [cyan]{metrics.total:,}[/]"]
    if metrics.time_range:
        lines.append(f"Time Range: [cyan]{escape(metrics.time_range.start)}[/] → [cyan]{escape(metrics.time_range.end)}[/]")
    console.print(Panel.fit("\n".join(lines), title="Summary", border_style="cyan"))

    if metrics.counts:
        _section(console, "ERROR LEVELS")
        for level, count in metrics.counts.items():
            console.print(f"  {escape(str(level))}: {count:,} ({count / metrics.total * 100:.2f}%)")

    if metrics.top_errors:
        _section(console, "TOP ERRORS")
        console.print(_ranked_table("Message", metrics.top_errors, unit="Count"))


def _render_benchmark(result: BenchmarkAnalysisResult, console: Console):
    metrics = result.metrics
    lines = []
    if metrics.total_requests is not None:
        lines.append(f"Total Requests: [cyan]{metrics.total_requests:,}[/]")
    if metrics.duration_ms is not None:
        lines.append(f"Duration: [cyan]{metrics.duration_ms / 1000:.2f} s[/]")
    if metrics.error_count is not None:
        rate = metrics.error_rate
        suffix = f" ({rate:.2f}%)" if rate is not None else ""
        lines.append(f"Errors: [cyan]{metrics.error_count:,}[/]{suffix}")
    if metrics.availability is not None:
        lines.append(f"Availability: [cyan]{metrics.availability:.2f}%[/]")
    style = GRADE_STYLES.get(result.grade, "white")
    lines.append(f"Performance Grade: [{style}]{result.grade}[/]")
    console.print(Panel.fit("\n".join(lines), title="Summary", border_style="cyan"))

    config = metrics.config
    if config:
        _section(console, "CONFIGURATION")
        for key, value in asdict(config).items():
            if value is not None:
                console.print(f"  {key}: {value}")

    latency = metrics.latency
    if latency:
        _section(console, "LATENCY")
        for label, value in (("Average", latency.avg), ("Stdev", latency.stdev),
                             ("Median", latency.median), ("P95", latency.p95),
                             ("P99", latency.p99), ("Max", latency.max)):
            if value is not None:
                console.print(f"  {label}: {_ms(value)}")

    throughput = metrics.throughput
    if throughput:
        _section(console, "THROUGHPUT")
        if throughput.requests_per_sec is not None:
            console.print(f"  Requests/sec: {throughput.requests_per_sec:,.2f}")
        if throughput.bytes_per_sec is not None:
            console.print(f"  Bytes/sec: {throughput.bytes_per_sec:,.0f}")

    if metrics.distribution:
        _section(console, "LATENCY DISTRIBUTION")
        table = Table(box=box.ROUNDED)
        table.add_column("Percentile", style="cyan")
        table.add_column("Latency", justify="right")
        for key, value in metrics.distribution.items():
            table.add_row(key.upper(), _ms(value))
        console.print(table)

    socket = metrics.socket_errors
    if socket and socket.total:
        _section(console, "SOCKET ERRORS", style="bold red")
        console.print(f"  connect {socket.connect}, read {socket.read}, "
                      f"write {socket.write}, timeout {socket.timeout}")


def _render_recommendations(recommendations: List[Recommendation], console: Console):
    if not recommendations:
        return
    _section(console, "RECOMMENDATIONS")
    ordered = sorted(recommendations, key=lambda r: (r.category, r.severity.rank))
    for category, group in groupby(ordered, key=lambda r: r.category):
        console.print(f"\n[bold]{category.upper()}[/]")
        for rec in group:
            style = SEVERITY_STYLES[rec.severity]
            console.print(f"  [{style}]\\[{rec.severity.value.upper()}][/] {escape(rec.message)}")
            for suggestion in rec.suggestions:
                console.print(f"     • {escape(suggestion)}")


def print_report(result: AnalysisResult, console: Console):
    if isinstance(result, LogAnalysisResult):
        title = f"LOG ANALYSIS ({result.metrics.kind.value.upper()})"
    else:
        title = f"BENCHMARK ANALYSIS ({result.metrics.tool.value.upper()})"

    console.print("\n" + RULE, style="cyan")
    console.print(title.center(70).rstrip(), style="bold cyan")
    console.print(RULE, style="cyan")

    if isinstance(result, BenchmarkAnalysisResult):
        _render_benchmark(result, console)
    elif result.metrics.kind is FormatKind.ACCESS:
        _render_access(result, console)
    else:
        _render_error(result, console)

    if isinstance(result, LogAnalysisResult) and result.security_issues:
        _section(console, "SECURITY ISSUES", style="bold red")
        for idx, issue in enumerate(result.security_issues, 1):
            console.print(f"{idx}. [red]\\[{issue.type.upper()}][/] {issue.message}")
            console.print(f"   Suspicious paths: {', '.join(issue.paths)}", markup=False)

    _render_recommendations(result.recommendations, console)
    console.print("\n" + RULE, style="cyan")


def format_report(result: AnalysisResult, width: int = 100) -> str:
    """Render the report as plain text"""
    buffer = io.StringIO()
    console = Console(file=buffer, width=width, color_system=None,
                      force_terminal=False, highlight=False, emoji=False)
    print_report(result, console)
    return buffer.getvalue()


def _enum_values(items) -> Dict[str, Any]:
    return {key: value.value if isinstance(value, Enum) else value for key, value in items}


def report_to_dict(result: AnalysisResult) -> Dict[str, Any]:
    """JSON-ready view of a result"""
    return asdict(result, dict_factory=_enum_values)
