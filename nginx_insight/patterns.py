"""nginx-insight - Constants and patterns"""

import re

VERSION = "1.0.0"

TOP_N = 10

# Errors are grouped by message prefix
ERROR_KEY_LENGTH = 100

# Log line grammars
ACCESS_LINE = re.compile(
    r'^(?P<ip>\S+)\s+\S+\s+\S+\s+\[(?P<timestamp>[^\]]+)\]\s+'
    r'"(?P<method>\S+)\s+(?P<path>\S+)\s+HTTP/[\d.]+"\s+'
    r'(?P<status>\d{3})\s+(?P<bytes>\d+|-)\s+'
    r'"(?P<referrer>[^"]*)"\s+"(?P<user_agent>[^"]*)"'
)
RESPONSE_TIME = re.compile(r'\brt=(?P<seconds>[\d.]+)')
ERROR_LINE = re.compile(
    r'(?P<timestamp>\d{4}/\d{2}/\d{2}\s+\d{2}:\d{2}:\d{2})\s+'
    r'\[(?P<level>\w+)\]\s+\d+#\d+:\s+(?P<message>.*)'
)

# Content signatures used by the format detector
ERROR_LOG_SIGNATURE = re.compile(
    r'\d{4}/\d{2}/\d{2}\s+\d{2}:\d{2}:\d{2}\s+'
    r'\[(?:debug|info|notice|warn|error|crit|alert|emerg)\]'
)
ACCESS_LOG_SIGNATURE = re.compile(
    r'(?:GET|POST|PUT|DELETE|PATCH|HEAD|OPTIONS)\s+.*?\s+HTTP/[\d.]+'
)
AB_SIGNATURE = re.compile(r'This is ApacheBench|(?:^|\s)ab\s+-')
K6_SIGNATURE = re.compile(r'k6 run|execution: local|http_req_duration')
AUTOCANNON_SIGNATURE = re.compile(r'autocannon|Stat\s+.?\s*2\.5%')
SIEGE_SIGNATURE = re.compile(r'siege', re.IGNORECASE)

# Threat detection patterns, applied to the top requested paths only
THREAT_PATTERNS = {
    'sql-injection': {
        'pattern': r"('|\"|;|--|/\*|\*/|union|select|insert|delete|drop|update|exec)",
        'severity': 'high',
        'message': 'Potential SQL injection attempts detected',
    },
    'path-traversal': {
        'pattern': r"\.\.|/etc/|/proc/|/var/",
        'severity': 'high',
        'message': 'Potential path traversal attempts detected',
    },
}

BOT_PATTERNS = [
    r"bot",
    r"crawler",
    r"spider",
    r"scraper",
    r"curl",
    r"wget",
    r"python",
    r"java",
]

# Well-known nginx error log messages
ERROR_SIGNATURES = {
    'upstream-timeout': {
        'pattern': r"upstream timed out",
        'message': 'Upstream timeouts in error log',
        'suggestions': [
            'Increase proxy_read_timeout for slow endpoints',
            'Check upstream server load and response times',
            'Enable proxy_next_upstream for failover',
        ],
    },
    'upstream-refused': {
        'pattern': r"connect\(\) failed \(111|connection refused",
        'message': 'Upstream refused connections',
        'suggestions': [
            'Verify the upstream service is running',
            'Check upstream server addresses and ports',
            'Add max_fails and fail_timeout to upstream servers',
        ],
    },
    'worker-connections': {
        'pattern': r"worker_connections are not enough",
        'message': 'Worker connections exhausted',
        'suggestions': [
            'Increase worker_connections in the events block',
            'Raise worker_rlimit_nofile accordingly',
        ],
    },
    'open-files': {
        'pattern': r"too many open files",
        'message': 'File descriptor limit reached',
        'suggestions': [
            'Increase worker_rlimit_nofile',
            'Raise the system file descriptor limit (ulimit -n)',
        ],
    },
    'body-too-large': {
        'pattern': r"client intended to send too large body",
        'message': 'Clients sending request bodies over the limit',
        'suggestions': [
            'Increase client_max_body_size if large uploads are expected',
            'Return a clear 413 error page to clients',
        ],
    },
    'missing-file': {
        'pattern': r"No such file or directory|is not found",
        'message': 'Requests for missing files',
        'suggestions': [
            'Check root and alias directives',
            'Add try_files with a sensible fallback',
            'Set up redirects for moved content',
        ],
    },
}

CRITICAL_LEVELS = ('crit', 'alert', 'emerg')

# Recommendation thresholds (percentages and milliseconds)
SERVER_ERROR_RATE = 5
NOT_FOUND_RATE = 10
P95_HIGH_MS = 1000
P95_MEDIUM_MS = 500
BOT_TRAFFIC_RATE = 30
SINGLE_CLIENT_RATE = 50
ERROR_COUNT_HIGH = 1000

LATENCY_HIGH_MS = 1000
LATENCY_MEDIUM_MS = 500
LATENCY_LOW_MS = 200
RPS_LOW = 100
RPS_EXCELLENT = 10000
ERROR_RATE_HIGH = 5
ERROR_RATE_MEDIUM = 1

# Grading: (threshold, deduction) bands, checked in order
LATENCY_DEDUCTIONS = [(1000, 40), (500, 25), (200, 15), (100, 5)]
ERROR_RATE_DEDUCTIONS = [(10, 30), (5, 20), (1, 10)]
ANY_ERROR_DEDUCTION = 5
SOCKET_ERROR_DEDUCTIONS = [(100, 20), (10, 10), (0, 5)]
GRADE_BANDS = [(90, 'A'), (80, 'B'), (70, 'C'), (60, 'D')]
