"""nginx-insight - Load-test output parsers

Every parser scans a whole tool output for its fixed summary lines and
fills what it finds. Fields the tool does not report stay None.
"""

import json
import re
from typing import Any, Callable, Dict, List, Optional

from .models import (BenchmarkConfig, BenchmarkMetrics, FormatKind,
                     LatencyStats, SocketErrors, Throughput)
from .units import normalize_bytes, normalize_number, normalize_time

_NUM = r'(\d+(?:\.\d+)?)'
_MAG = r'(\d+(?:\.\d+)?[kmg]?)'

# Shared by wrk and autocannon
REQUESTS_SUMMARY = re.compile(
    _MAG + r'\s+requests in\s+' + _NUM + r'([a-z]+)'
    r'(?:,\s+' + _NUM + r'\s*([kKMGT]?B)\s+read)?'
)

WRK_THREADS = re.compile(r'(\d+)\s+threads\s+and\s+(\d+)\s+connections')
WRK_DURATION = re.compile(r'Running\s+(\d+(?:\.\d+)?[smh])\s+test')
WRK_LATENCY = re.compile(
    r'Latency\s+' + _NUM + r'(\w+)\s+' + _NUM + r'(\w+)\s+'
    + _NUM + r'(\w+)\s+' + _NUM + r'%'
)
WRK_REQ_SEC = re.compile(
    r'Req/Sec\s+' + _MAG + r'\s+' + _MAG + r'\s+' + _MAG + r'\s+' + _NUM + r'%'
)
WRK_REQUESTS_PER_SEC = re.compile(r'Requests/sec:\s+' + _NUM)
WRK_TRANSFER = re.compile(r'Transfer/sec:\s+' + _NUM + r'\s*([KMGT]?B)')
WRK_NON_2XX = re.compile(r'Non-2xx or 3xx responses:\s+(\d+)')
WRK_SOCKET = re.compile(
    r'Socket errors:\s+connect\s+(\d+),\s+read\s+(\d+),'
    r'\s+write\s+(\d+),\s+timeout\s+(\d+)'
)
LADDER_LINE = re.compile(r'^\s*' + _NUM + r'%\s+' + _NUM + r'\s*([a-zµ]*)')

AB_CONCURRENCY = re.compile(r'Concurrency Level:\s+(\d+)')
AB_ELAPSED = re.compile(r'Time taken for tests:\s+' + _NUM + r'\s+seconds')
AB_COMPLETE = re.compile(r'Complete requests:\s+(\d+)')
AB_FAILED = re.compile(r'Failed requests:\s+(\d+)')
AB_NON_2XX = re.compile(r'Non-2xx responses:\s+(\d+)')
AB_TRANSFERRED = re.compile(r'Total transferred:\s+(\d+)\s+bytes')
AB_RPS = re.compile(r'Requests per second:\s+' + _NUM)
AB_TIME_PER_REQUEST = re.compile(r'Time per request:\s+' + _NUM + r'\s+\[ms\]\s+\(mean\)')
AB_TRANSFER_RATE = re.compile(r'Transfer rate:\s+' + _NUM + r'\s+\[Kbytes/sec\]')
AB_LADDER_HEADER = 'Percentage of the requests served'

K6_DURATION_LINE = re.compile(r'^\s*\W?\s*http_req_duration\.*:(.*)$', re.MULTILINE)
K6_DURATION_FIELD = re.compile(
    r'(avg|min|med|max|p\(\d+(?:\.\d+)?\))='
    r'((?:\d+h)?(?:\d+m(?!s))?[\d.]+(?:ms|us|µs|μs|s|m|h)?)'
)
# k6 prints durations of a minute or more as 1m5s, 1h2m3s
K6_DURATION_PART = re.compile(r'(\d+(?:\.\d+)?)(ms|us|µs|μs|h|m|s)?')
K6_REQS = re.compile(r'http_reqs\.*:\s+(\d+)\s+' + _NUM + r'/s')
K6_FAILED = re.compile(r'http_req_failed\.*:\s+' + _NUM + r'%\s+(?:\S+\s+)?(\d+)')
K6_RECEIVED = re.compile(r'data_received\.*:\s+' + _NUM + r'\s*([kMGT]?B)\s+' + _NUM + r'\s*([kMGT]?B)/s')
K6_VUS_MAX = re.compile(r'vus_max\.*:\s+(\d+)')

AUTOCANNON_RPS = re.compile(r'Req/Sec.*?Avg:\s+' + _NUM)
AUTOCANNON_LATENCY = re.compile(r'Latency.*?Avg:\s+' + _NUM + r'\s+ms')
AUTOCANNON_CONNECTIONS = re.compile(r'^\s*(\d+)\s+connections', re.MULTILINE)
AUTOCANNON_DURATION = re.compile(r'Running\s+(\d+(?:\.\d+)?s)\s+test')
AUTOCANNON_ERRORS = re.compile(r'(\d+)\s+errors\s+\((\d+)\s+timeouts\)')
AUTOCANNON_NON_2XX = re.compile(r'(\d+)\s+non 2xx responses')
AUTOCANNON_ROWS = ('Latency', 'Req/Sec', 'Bytes/Sec')

SIEGE_TRANSACTIONS = re.compile(r'Transactions:\s+(\d+)\s+hits')
SIEGE_AVAILABILITY = re.compile(r'Availability:\s+' + _NUM + r'\s*%')
SIEGE_ELAPSED = re.compile(r'Elapsed time:\s+' + _NUM + r'\s+(secs|ms|s)\b')
SIEGE_TRANSFERRED = re.compile(r'Data transferred:\s+' + _NUM + r'\s+([KMG]B)')
SIEGE_RESPONSE = re.compile(r'Response time:\s+' + _NUM + r'\s+(secs|ms|s)\b')
SIEGE_RATE = re.compile(r'Transaction rate:\s+' + _NUM + r'\s+trans/sec')
SIEGE_THROUGHPUT = re.compile(r'Throughput:\s+' + _NUM + r'\s+([KMG]B)/sec')
SIEGE_CONCURRENCY = re.compile(r'Concurrency:\s+' + _NUM)
SIEGE_FAILED = re.compile(r'Failed transactions:\s+(\d+)')
SIEGE_LONGEST = re.compile(r'Longest transaction:\s+' + _NUM)


def _ladder(lines: List[str]) -> Dict[str, float]:
    """Read consecutive 'NN%  value[unit]' lines into {'pNN': ms}"""
    ladder = {}
    for line in lines:
        match = LADDER_LINE.match(line)
        if not match:
            if ladder:
                break
            continue
        pct, value, unit = match.groups()
        key = 'p' + pct.rstrip('0').rstrip('.') if '.' in pct else 'p' + pct
        ladder[key] = normalize_time(value, unit) if unit else float(value)
    return ladder


def _lines_after(content: str, header: str) -> List[str]:
    lines = content.splitlines()
    for i, line in enumerate(lines):
        if header in line:
            return lines[i + 1:]
    return []


def _apply_ladder(latency: LatencyStats, ladder: Dict[str, float]):
    latency.median = ladder.get('p50', latency.median)
    latency.p95 = ladder.get('p95', latency.p95)
    latency.p99 = ladder.get('p99', latency.p99)
    latency.max = ladder.get('p100', latency.max)


def _requests_summary(metrics: BenchmarkMetrics, content: str):
    match = REQUESTS_SUMMARY.search(content)
    if not match:
        return
    total, duration, duration_unit, read, read_unit = match.groups()
    metrics.total_requests = int(normalize_number(total))
    metrics.duration_ms = normalize_time(duration, duration_unit)
    if read:
        metrics.bytes_read = normalize_bytes(read, read_unit)


def parse_wrk(content: str) -> BenchmarkMetrics:
    metrics = BenchmarkMetrics(tool=FormatKind.WRK)

    threads = WRK_THREADS.search(content)
    duration = WRK_DURATION.search(content)
    if threads or duration:
        metrics.config = BenchmarkConfig(
            threads=int(threads.group(1)) if threads else None,
            connections=int(threads.group(2)) if threads else None,
            duration=duration.group(1) if duration else None,
        )

    latency = WRK_LATENCY.search(content)
    if latency:
        avg, avg_unit, stdev, stdev_unit, peak, peak_unit, _ = latency.groups()
        metrics.latency = LatencyStats(
            avg=normalize_time(avg, avg_unit),
            stdev=normalize_time(stdev, stdev_unit),
            max=normalize_time(peak, peak_unit),
        )

    ladder = _ladder(_lines_after(content, 'Latency Distribution'))
    if ladder:
        metrics.distribution = ladder
        metrics.latency = metrics.latency or LatencyStats()
        _apply_ladder(metrics.latency, ladder)

    # Overall rate first; the per-thread Req/Sec row is a fallback
    rps = WRK_REQUESTS_PER_SEC.search(content)
    thread_rps = WRK_REQ_SEC.search(content)
    transfer = WRK_TRANSFER.search(content)
    if rps or thread_rps or transfer:
        metrics.throughput = Throughput(
            requests_per_sec=float(rps.group(1)) if rps
            else normalize_number(thread_rps.group(1)) if thread_rps else None,
            bytes_per_sec=normalize_bytes(*transfer.groups()) if transfer else None,
        )

    _requests_summary(metrics, content)

    # wrk prints the error lines only when they are non-zero
    non_2xx = WRK_NON_2XX.search(content)
    if non_2xx:
        metrics.error_count = int(non_2xx.group(1))
    elif metrics.total_requests is not None:
        metrics.error_count = 0

    socket = WRK_SOCKET.search(content)
    if socket:
        connect, read, write, timeout = (int(g) for g in socket.groups())
        metrics.socket_errors = SocketErrors(connect, read, write, timeout)

    return metrics


def parse_ab(content: str) -> BenchmarkMetrics:
    metrics = BenchmarkMetrics(tool=FormatKind.AB)

    concurrency = AB_CONCURRENCY.search(content)
    if concurrency:
        metrics.config = BenchmarkConfig(concurrency=int(concurrency.group(1)))

    rps = AB_RPS.search(content)
    rate = AB_TRANSFER_RATE.search(content)
    if rps or rate:
        metrics.throughput = Throughput(
            requests_per_sec=float(rps.group(1)) if rps else None,
            bytes_per_sec=float(rate.group(1)) * 1024 if rate else None,
        )

    time_per_request = AB_TIME_PER_REQUEST.search(content)
    if time_per_request:
        metrics.latency = LatencyStats(avg=float(time_per_request.group(1)))

    complete = AB_COMPLETE.search(content)
    if complete:
        metrics.total_requests = int(complete.group(1))

    failed = AB_FAILED.search(content)
    non_2xx = AB_NON_2XX.search(content)
    if failed or non_2xx:
        metrics.error_count = sum(int(m.group(1)) for m in (failed, non_2xx) if m)

    elapsed = AB_ELAPSED.search(content)
    if elapsed:
        metrics.duration_ms = float(elapsed.group(1)) * 1000

    transferred = AB_TRANSFERRED.search(content)
    if transferred:
        metrics.bytes_read = float(transferred.group(1))

    ladder = _ladder(_lines_after(content, AB_LADDER_HEADER))
    if ladder:
        metrics.distribution = ladder
        metrics.latency = metrics.latency or LatencyStats()
        _apply_ladder(metrics.latency, ladder)

    return metrics


def _k6_values(source: Dict[str, Any], name: str) -> Dict[str, Any]:
    metric = source.get(name)
    if not isinstance(metric, dict):
        return {}
    values = metric.get('values', metric)
    return values if isinstance(values, dict) else {}


def _parse_k6_json(data: Dict[str, Any]) -> BenchmarkMetrics:
    """Read a handleSummary or --summary-export document"""
    metrics = BenchmarkMetrics(tool=FormatKind.K6)
    source = data.get('metrics')
    if not isinstance(source, dict):
        return metrics

    duration = _k6_values(source, 'http_req_duration')
    if duration:
        metrics.latency = LatencyStats(
            avg=duration.get('avg'),
            median=duration.get('med'),
            max=duration.get('max'),
            p95=duration.get('p(95)'),
            p99=duration.get('p(99)'),
        )
        metrics.distribution = {
            'p' + key[2:-1]: float(value) for key, value in duration.items()
            if key.startswith('p(') and isinstance(value, (int, float))
        }

    reqs = _k6_values(source, 'http_reqs')
    received = _k6_values(source, 'data_received')
    if reqs or received:
        metrics.throughput = Throughput(
            requests_per_sec=reqs.get('rate'),
            bytes_per_sec=received.get('rate'),
        )
    if 'count' in reqs:
        metrics.total_requests = int(reqs['count'])
    if 'count' in received:
        metrics.bytes_read = float(received['count'])

    failed = _k6_values(source, 'http_req_failed')
    if 'passes' in failed:
        metrics.error_count = int(failed['passes'])

    vus = _k6_values(source, 'vus_max')
    vus_max = vus.get('max', vus.get('value'))
    if vus_max is not None:
        metrics.config = BenchmarkConfig(concurrency=vus_max)

    state = data.get('state')
    if isinstance(state, dict) and 'testRunDurationMs' in state:
        metrics.duration_ms = float(state['testRunDurationMs'])

    return metrics


def _k6_duration(token: str) -> float:
    return sum(normalize_time(value, unit) for value, unit in K6_DURATION_PART.findall(token))


def _parse_k6_text(content: str) -> BenchmarkMetrics:
    metrics = BenchmarkMetrics(tool=FormatKind.K6)

    duration = K6_DURATION_LINE.search(content)
    if duration:
        fields = {
            name: _k6_duration(token)
            for name, token in K6_DURATION_FIELD.findall(duration.group(1))
        }
        if fields:
            metrics.latency = LatencyStats(
                avg=fields.get('avg'),
                median=fields.get('med'),
                max=fields.get('max'),
                p95=fields.get('p(95)'),
                p99=fields.get('p(99)'),
            )
            metrics.distribution = {
                'p' + name[2:-1]: value for name, value in fields.items()
                if name.startswith('p(')
            }

    reqs = K6_REQS.search(content)
    received = K6_RECEIVED.search(content)
    if reqs or received:
        metrics.throughput = Throughput(
            requests_per_sec=float(reqs.group(2)) if reqs else None,
            bytes_per_sec=normalize_bytes(received.group(3), received.group(4)) if received else None,
        )
    if reqs:
        metrics.total_requests = int(reqs.group(1))
    if received:
        metrics.bytes_read = normalize_bytes(received.group(1), received.group(2))

    failed = K6_FAILED.search(content)
    if failed:
        metrics.error_count = int(failed.group(2))

    vus_max = K6_VUS_MAX.search(content)
    if vus_max:
        metrics.config = BenchmarkConfig(concurrency=int(vus_max.group(1)))

    return metrics


def parse_k6(content: str) -> BenchmarkMetrics:
    """Structured JSON summary first, text summary otherwise"""
    try:
        data = json.loads(content)
    except ValueError:
        data = None
    if isinstance(data, dict):
        return _parse_k6_json(data)
    return _parse_k6_text(content)


def _value_unit(cell: str):
    parts = cell.split()
    if not parts:
        return None, ''
    try:
        value = float(parts[0])
    except ValueError:
        return None, ''
    return value, parts[1] if len(parts) > 1 else ''


def _autocannon_table(content: str) -> Dict[str, Dict[str, str]]:
    """Map row name -> {column header: cell} for the box-drawn tables"""
    rows: Dict[str, Dict[str, str]] = {}
    header: Optional[List[str]] = None
    for line in content.splitlines():
        cells = [c.strip() for c in re.split(r'[│|]', line) if c.strip()]
        if not cells:
            continue
        if cells[0] == 'Stat':
            header = cells
        elif header and cells[0] in AUTOCANNON_ROWS:
            rows[cells[0]] = dict(zip(header, cells))
    return rows


def parse_autocannon(content: str) -> BenchmarkMetrics:
    metrics = BenchmarkMetrics(tool=FormatKind.AUTOCANNON)

    connections = AUTOCANNON_CONNECTIONS.search(content)
    duration = AUTOCANNON_DURATION.search(content)
    if connections or duration:
        metrics.config = BenchmarkConfig(
            connections=int(connections.group(1)) if connections else None,
            duration=duration.group(1) if duration else None,
        )

    table = _autocannon_table(content)
    latency_row = table.get('Latency')
    if latency_row:
        stats = {}
        for column, field_name in (('Avg', 'avg'), ('Stdev', 'stdev'), ('Max', 'max'),
                                   ('50%', 'median'), ('99%', 'p99')):
            value, unit = _value_unit(latency_row.get(column, ''))
            if value is not None:
                stats[field_name] = normalize_time(value, unit or 'ms')
        if stats:
            metrics.latency = LatencyStats(**stats)
        for column, cell in latency_row.items():
            value, unit = _value_unit(cell)
            if column.endswith('%') and value is not None:
                metrics.distribution['p' + column[:-1]] = normalize_time(value, unit or 'ms')
    else:
        latency = AUTOCANNON_LATENCY.search(content)
        if latency:
            metrics.latency = LatencyStats(avg=float(latency.group(1)))

    rps_value, _ = _value_unit(table.get('Req/Sec', {}).get('Avg', ''))
    if rps_value is None:
        rps = AUTOCANNON_RPS.search(content)
        rps_value = float(rps.group(1)) if rps else None
    bytes_value, bytes_unit = _value_unit(table.get('Bytes/Sec', {}).get('Avg', ''))
    if rps_value is not None or bytes_value is not None:
        metrics.throughput = Throughput(
            requests_per_sec=rps_value,
            bytes_per_sec=normalize_bytes(bytes_value, bytes_unit or 'B') if bytes_value is not None else None,
        )

    _requests_summary(metrics, content)

    errors = AUTOCANNON_ERRORS.search(content)
    non_2xx = AUTOCANNON_NON_2XX.search(content)
    if errors or non_2xx:
        metrics.error_count = sum(int(m.group(1)) for m in (errors, non_2xx) if m)

    return metrics


def _parse_siege_json(data: Dict[str, Any]) -> BenchmarkMetrics:
    metrics = BenchmarkMetrics(tool=FormatKind.SIEGE)
    if 'transactions' in data:
        metrics.total_requests = int(data['transactions'])
    if 'availability' in data:
        metrics.availability = float(data['availability'])
    if 'elapsed_time' in data:
        metrics.duration_ms = float(data['elapsed_time']) * 1000
    if 'data_transferred' in data:
        metrics.bytes_read = normalize_bytes(data['data_transferred'], 'MB')
    if 'response_time' in data or 'longest_transaction' in data:
        metrics.latency = LatencyStats(
            avg=float(data['response_time']) * 1000 if 'response_time' in data else None,
            max=float(data['longest_transaction']) * 1000 if 'longest_transaction' in data else None,
        )
    if 'transaction_rate' in data or 'throughput' in data:
        metrics.throughput = Throughput(
            requests_per_sec=data.get('transaction_rate'),
            bytes_per_sec=normalize_bytes(data['throughput'], 'MB') if 'throughput' in data else None,
        )
    if 'concurrency' in data:
        metrics.config = BenchmarkConfig(concurrency=float(data['concurrency']))
    if 'failed_transactions' in data:
        metrics.error_count = int(data['failed_transactions'])
    return metrics


def parse_siege(content: str) -> BenchmarkMetrics:
    """Text summary, or the JSON block printed by siege 4.1+"""
    brace = content.find('{')
    if brace != -1:
        try:
            data = json.loads(content[brace:content.rfind('}') + 1])
        except ValueError:
            data = None
        if isinstance(data, dict) and 'transactions' in data:
            return _parse_siege_json(data)

    metrics = BenchmarkMetrics(tool=FormatKind.SIEGE)

    transactions = SIEGE_TRANSACTIONS.search(content)
    if transactions:
        metrics.total_requests = int(transactions.group(1))

    availability = SIEGE_AVAILABILITY.search(content)
    if availability:
        metrics.availability = float(availability.group(1))

    elapsed = SIEGE_ELAPSED.search(content)
    if elapsed:
        metrics.duration_ms = normalize_time(*elapsed.groups())

    transferred = SIEGE_TRANSFERRED.search(content)
    if transferred:
        metrics.bytes_read = normalize_bytes(*transferred.groups())

    response = SIEGE_RESPONSE.search(content)
    longest = SIEGE_LONGEST.search(content)
    if response or longest:
        metrics.latency = LatencyStats(
            avg=normalize_time(*response.groups()) if response else None,
            max=float(longest.group(1)) * 1000 if longest else None,
        )

    rate = SIEGE_RATE.search(content)
    throughput = SIEGE_THROUGHPUT.search(content)
    if rate or throughput:
        metrics.throughput = Throughput(
            requests_per_sec=float(rate.group(1)) if rate else None,
            bytes_per_sec=normalize_bytes(*throughput.groups()) if throughput else None,
        )

    concurrency = SIEGE_CONCURRENCY.search(content)
    if concurrency:
        metrics.config = BenchmarkConfig(concurrency=float(concurrency.group(1)))

    failed = SIEGE_FAILED.search(content)
    if failed:
        metrics.error_count = int(failed.group(1))

    return metrics


BENCHMARK_PARSERS: Dict[FormatKind, Callable[[str], BenchmarkMetrics]] = {
    FormatKind.WRK: parse_wrk,
    FormatKind.AB: parse_ab,
    FormatKind.K6: parse_k6,
    FormatKind.AUTOCANNON: parse_autocannon,
    FormatKind.SIEGE: parse_siege,
}
