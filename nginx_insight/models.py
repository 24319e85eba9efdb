"""nginx-insight - Data models"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Union


class FormatKind(str, Enum):
    """Concrete input format"""
    ACCESS = 'access'
    ERROR = 'error'
    WRK = 'wrk'
    AB = 'ab'
    K6 = 'k6'
    AUTOCANNON = 'autocannon'
    SIEGE = 'siege'

    @property
    def is_log(self) -> bool:
        return self in (FormatKind.ACCESS, FormatKind.ERROR)

    @classmethod
    def from_name(cls, name: str) -> Optional['FormatKind']:
        """Resolve a user-supplied name, including common aliases"""
        key = name.strip().lower()
        return _ALIASES.get(key) or next((k for k in cls if k.value == key), None)


_ALIASES = {
    'access-log': FormatKind.ACCESS,
    'error-log': FormatKind.ERROR,
    'apachebench': FormatKind.AB,
}

AUTO = 'auto'


class Severity(str, Enum):
    HIGH = 'high'
    MEDIUM = 'medium'
    LOW = 'low'
    INFO = 'info'

    @property
    def rank(self) -> int:
        return list(Severity).index(self)


@dataclass(frozen=True)
class AccessRecord:
    """Parsed access log line"""
    ip: str
    timestamp: str
    method: str
    path: str
    status: int
    bytes: int
    referrer: str
    user_agent: str
    response_time: Optional[float] = None


@dataclass(frozen=True)
class ErrorRecord:
    """Parsed error log line"""
    timestamp: str
    level: str
    message: str


@dataclass
class RankedItem:
    """Entry of a top-N list"""
    value: str
    count: int
    percentage: float


@dataclass
class ResponseTimeStats:
    """Response time distribution in milliseconds"""
    avg: float
    median: float
    p95: float
    p99: float
    max: float


@dataclass
class StatusBucket:
    count: int
    percentage: float


@dataclass
class StatusBreakdown:
    success: StatusBucket
    redirect: StatusBucket
    client_error: StatusBucket
    server_error: StatusBucket


@dataclass
class BotTraffic:
    count: int
    percentage: float


@dataclass
class TimeRange:
    start: str
    end: str


@dataclass
class LogMetrics:
    """Aggregate result of one log analysis"""
    kind: FormatKind
    total: int
    counts: Dict[Union[int, str], int] = field(default_factory=dict)
    methods: Dict[str, int] = field(default_factory=dict)
    top_paths: List[RankedItem] = field(default_factory=list)
    top_clients: List[RankedItem] = field(default_factory=list)
    top_errors: List[RankedItem] = field(default_factory=list)
    response_times: Optional[ResponseTimeStats] = None
    status_breakdown: Optional[StatusBreakdown] = None
    bot_traffic: Optional[BotTraffic] = None
    total_bytes: Optional[int] = None
    time_range: Optional[TimeRange] = None
    error_signatures: Dict[str, int] = field(default_factory=dict)


@dataclass
class LatencyStats:
    """Benchmark latency in milliseconds; tools report different subsets"""
    avg: Optional[float] = None
    stdev: Optional[float] = None
    max: Optional[float] = None
    median: Optional[float] = None
    p95: Optional[float] = None
    p99: Optional[float] = None


@dataclass
class Throughput:
    requests_per_sec: Optional[float] = None
    bytes_per_sec: Optional[float] = None


@dataclass
class SocketErrors:
    connect: int = 0
    read: int = 0
    write: int = 0
    timeout: int = 0

    @property
    def total(self) -> int:
        return self.connect + self.read + self.write + self.timeout


@dataclass
class BenchmarkConfig:
    threads: Optional[int] = None
    connections: Optional[int] = None
    concurrency: Optional[float] = None
    duration: Optional[str] = None


@dataclass
class BenchmarkMetrics:
    """Summary fields of one load-test run; absent fields stay None"""
    tool: FormatKind
    config: Optional[BenchmarkConfig] = None
    latency: Optional[LatencyStats] = None
    throughput: Optional[Throughput] = None
    total_requests: Optional[int] = None
    duration_ms: Optional[float] = None
    bytes_read: Optional[float] = None
    error_count: Optional[int] = None
    socket_errors: Optional[SocketErrors] = None
    availability: Optional[float] = None
    distribution: Dict[str, float] = field(default_factory=dict)

    @property
    def requests_per_sec(self) -> Optional[float]:
        return self.throughput.requests_per_sec if self.throughput else None

    @property
    def error_rate(self) -> Optional[float]:
        """Error percentage, known only with both counts present"""
        if self.error_count is None or not self.total_requests:
            return None
        return self.error_count / self.total_requests * 100


@dataclass
class Recommendation:
    severity: Severity
    category: str
    message: str
    suggestions: List[str] = field(default_factory=list)


@dataclass
class SecurityIssue:
    type: str
    severity: Severity
    message: str
    paths: List[str] = field(default_factory=list)


@dataclass
class LogAnalysisResult:
    metrics: LogMetrics
    recommendations: List[Recommendation] = field(default_factory=list)
    security_issues: List[SecurityIssue] = field(default_factory=list)


@dataclass
class BenchmarkAnalysisResult:
    metrics: BenchmarkMetrics
    grade: str
    recommendations: List[Recommendation] = field(default_factory=list)
