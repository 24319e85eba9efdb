"""nginx-insight - Format detection

Signature predicates are tried in a fixed order and the first match wins.
Content carrying signatures of two formats resolves to whichever comes
first in FORMAT_SIGNATURES.
"""

from typing import Callable, Iterable, List, Tuple

from .errors import FormatUndetected
from .models import FormatKind
from .patterns import (AB_SIGNATURE, ACCESS_LOG_SIGNATURE, AUTOCANNON_SIGNATURE,
                       ERROR_LOG_SIGNATURE, K6_SIGNATURE, SIEGE_SIGNATURE)

Predicate = Callable[[str], bool]


def _is_wrk(content: str) -> bool:
    return 'Running ' in content and 'threads and ' in content and 'connections' in content


def _is_siege(content: str) -> bool:
    if '"transaction_rate"' in content:
        return True
    return 'Transactions:' in content and bool(SIEGE_SIGNATURE.search(content))


FORMAT_SIGNATURES: List[Tuple[FormatKind, Predicate]] = [
    (FormatKind.ERROR, lambda c: bool(ERROR_LOG_SIGNATURE.search(c))),
    (FormatKind.ACCESS, lambda c: bool(ACCESS_LOG_SIGNATURE.search(c))),
    (FormatKind.WRK, _is_wrk),
    (FormatKind.AB, lambda c: bool(AB_SIGNATURE.search(c))),
    (FormatKind.K6, lambda c: bool(K6_SIGNATURE.search(c))),
    (FormatKind.AUTOCANNON, lambda c: bool(AUTOCANNON_SIGNATURE.search(c))),
    (FormatKind.SIEGE, _is_siege),
]


def _first_match(content: str, kinds: Iterable[FormatKind], what: str) -> FormatKind:
    allowed = set(kinds)
    for kind, predicate in FORMAT_SIGNATURES:
        if kind in allowed and predicate(content):
            return kind
    raise FormatUndetected(f"Could not detect {what}. Please specify {what.split()[-1]} explicitly.")


def detect_format(content: str) -> FormatKind:
    """Detect any supported log or benchmark format"""
    return _first_match(content, FormatKind, 'input format')


def detect_log_kind(content: str) -> FormatKind:
    return _first_match(content, (FormatKind.ACCESS, FormatKind.ERROR), 'log type')


def detect_tool(content: str) -> FormatKind:
    return _first_match(content, (k for k in FormatKind if not k.is_log), 'benchmark tool')
