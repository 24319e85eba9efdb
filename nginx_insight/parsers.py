"""nginx-insight - Log line parsers

Each parser applies one fixed grammar to one line and returns a record,
or None when the line does not match. Non-matching lines are dropped by
the caller without being counted.
"""

from typing import Optional

from .models import AccessRecord, ErrorRecord
from .patterns import ACCESS_LINE, ERROR_LINE, RESPONSE_TIME


def parse_access_line(line: str) -> Optional[AccessRecord]:
    """Parse a combined-format access log line, with optional rt=<seconds>"""
    match = ACCESS_LINE.match(line.strip())
    if not match:
        return None

    groups = match.groupdict()
    rt_match = RESPONSE_TIME.search(line)
    response_time = None
    if rt_match:
        try:
            response_time = float(rt_match.group('seconds')) * 1000
        except ValueError:
            response_time = None

    return AccessRecord(
        ip=groups['ip'],
        timestamp=groups['timestamp'],
        method=groups['method'],
        path=groups['path'].split('?', 1)[0],
        status=int(groups['status']),
        bytes=int(groups['bytes']) if groups['bytes'] != '-' else 0,
        referrer=groups['referrer'],
        user_agent=groups['user_agent'],
        response_time=response_time,
    )


def parse_error_line(line: str) -> Optional[ErrorRecord]:
    """Parse an nginx error log line: 2024/01/01 12:00:00 [error] 123#0: msg"""
    match = ERROR_LINE.search(line)
    if not match:
        return None
    return ErrorRecord(
        timestamp=match.group('timestamp'),
        level=match.group('level'),
        message=match.group('message').strip(),
    )
