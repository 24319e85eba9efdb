"""nginx-insight - Core analysis engine"""

import logging
from collections import Counter
from typing import Callable, Collection, List, Optional, Type, Union

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from .benchmarks import BENCHMARK_PARSERS
from .detector import detect_log_kind, detect_tool
from .errors import UnknownTool, UnsupportedFormat
from .grading import grade
from .models import (AUTO, AccessRecord, BenchmarkAnalysisResult, ErrorRecord,
                     FormatKind, LogAnalysisResult, LogMetrics, TimeRange)
from .parsers import parse_access_line, parse_error_line
from .patterns import ERROR_KEY_LENGTH, TOP_N
from .recommendations import (access_log_recommendations, benchmark_recommendations,
                              error_log_recommendations)
from .security import bot_traffic, detect_security_issues, error_signature_counts
from .stats import response_time_stats, status_breakdown, top_n

log = logging.getLogger(__name__)

KindArg = Union[str, FormatKind]


def _resolve_kind(content: str, kind: KindArg, allowed: Collection[FormatKind],
                  detect: Callable[[str], FormatKind], error: Type[UnsupportedFormat],
                  label: str) -> FormatKind:
    if isinstance(kind, FormatKind):
        resolved = kind
    elif kind.strip().lower() == AUTO:
        resolved = detect(content)
        log.debug("Detected %s: %s", label, resolved.value)
    else:
        resolved = FormatKind.from_name(kind)

    if resolved not in allowed:
        name = kind.value if isinstance(kind, FormatKind) else kind
        raise error(f"Unknown {label}: {name}")
    return resolved


class LogAnalyzer:
    """Analyzes nginx access and error logs held in memory"""

    def __init__(self, top_n: int = TOP_N, console: Optional[Console] = None):
        self.top_n = top_n
        self.console = console

    def analyze(self, content: str, kind: KindArg = AUTO) -> LogAnalysisResult:
        kind = _resolve_kind(content, kind, (FormatKind.ACCESS, FormatKind.ERROR),
                             detect_log_kind, UnsupportedFormat, 'log type')
        lines = [line for line in content.splitlines() if line.strip()]

        if kind is FormatKind.ACCESS:
            return self._analyze_access(lines)
        return self._analyze_error(lines)

    def _parse(self, lines: List[str], parser: Callable) -> list:
        if not self.console:
            return [r for r in map(parser, lines) if r]

        records = []
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=self.console,
            transient=True
        ) as progress:
            task = progress.add_task("Analyzing logs...", total=len(lines))

            for line in lines:
                record = parser(line)
                if record:
                    records.append(record)
                progress.update(task, advance=1)
        return records

    def _analyze_access(self, lines: List[str]) -> LogAnalysisResult:
        records: List[AccessRecord] = self._parse(lines, parse_access_line)
        total = len(records)
        log.debug("Parsed %d access records", total)

        statuses: Counter = Counter()
        methods: Counter = Counter()
        paths: Counter = Counter()
        clients: Counter = Counter()
        agents: Counter = Counter()
        samples: List[float] = []
        total_bytes = 0

        for record in records:
            statuses[record.status] += 1
            methods[record.method] += 1
            paths[record.path] += 1
            clients[record.ip] += 1
            if record.user_agent:
                agents[record.user_agent] += 1
            if record.response_time is not None:
                samples.append(record.response_time)
            total_bytes += record.bytes

        metrics = LogMetrics(
            kind=FormatKind.ACCESS,
            total=total,
            counts=dict(statuses),
            methods=dict(methods),
            top_paths=top_n(paths, total, self.top_n),
            top_clients=top_n(clients, total, self.top_n),
            response_times=response_time_stats(samples),
            status_breakdown=status_breakdown(statuses, total),
            bot_traffic=bot_traffic(agents, total),
            total_bytes=total_bytes,
            time_range=TimeRange(records[0].timestamp, records[-1].timestamp) if records else None,
        )

        security_issues = detect_security_issues(metrics.top_paths)
        return LogAnalysisResult(
            metrics=metrics,
            recommendations=access_log_recommendations(metrics, security_issues),
            security_issues=security_issues,
        )

    def _analyze_error(self, lines: List[str]) -> LogAnalysisResult:
        records: List[ErrorRecord] = self._parse(lines, parse_error_line)
        total = len(records)
        log.debug("Parsed %d error records", total)

        levels: Counter = Counter(record.level for record in records)
        grouped: Counter = Counter(record.message[:ERROR_KEY_LENGTH] for record in records)
        messages: Counter = Counter(record.message for record in records)

        metrics = LogMetrics(
            kind=FormatKind.ERROR,
            total=total,
            counts=dict(levels),
            top_errors=top_n(grouped, total, self.top_n),
            time_range=TimeRange(records[0].timestamp, records[-1].timestamp) if records else None,
            error_signatures=error_signature_counts(messages),
        )
        return LogAnalysisResult(
            metrics=metrics,
            recommendations=error_log_recommendations(metrics),
        )


class BenchmarkAnalyzer:
    """Analyzes console output of wrk, ab, k6, autocannon and siege"""

    def analyze(self, content: str, tool: KindArg = AUTO) -> BenchmarkAnalysisResult:
        tool = _resolve_kind(content, tool, tuple(BENCHMARK_PARSERS), detect_tool,
                             UnknownTool, 'benchmark tool')
        metrics = BENCHMARK_PARSERS[tool](content)
        log.debug("Parsed %s summary (requests=%s)", tool.value, metrics.total_requests)
        return BenchmarkAnalysisResult(
            metrics=metrics,
            grade=grade(metrics),
            recommendations=benchmark_recommendations(metrics),
        )


def analyze_log(content: str, kind: KindArg = AUTO) -> LogAnalysisResult:
    return LogAnalyzer().analyze(content, kind)


def analyze_benchmark(content: str, tool: KindArg = AUTO) -> BenchmarkAnalysisResult:
    return BenchmarkAnalyzer().analyze(content, tool)
