"""nginx-insight - Pattern-based detection: attacks, bots, known error messages"""

import re
from typing import Dict, List, Mapping

from .models import BotTraffic, RankedItem, SecurityIssue, Severity
from .patterns import BOT_PATTERNS, ERROR_SIGNATURES, THREAT_PATTERNS
from .stats import percentage


def _compile_patterns() -> Dict[str, Dict]:
    compiled = {}
    for threat_type, data in THREAT_PATTERNS.items():
        compiled[threat_type] = {
            'pattern': re.compile(data['pattern'], re.IGNORECASE),
            'severity': Severity(data['severity']),
            'message': data['message'],
        }
    return compiled


_THREATS = _compile_patterns()
_BOTS = [re.compile(p, re.IGNORECASE) for p in BOT_PATTERNS]
_ERROR_SIGNATURES = {
    name: re.compile(data['pattern'], re.IGNORECASE) for name, data in ERROR_SIGNATURES.items()
}


def detect_security_issues(top_paths: List[RankedItem]) -> List[SecurityIssue]:
    """Scan the ranked top paths (not every record) for attack signatures"""
    issues = []
    for threat_type, data in _THREATS.items():
        paths = [item.value for item in top_paths if data['pattern'].search(item.value)]
        if paths:
            issues.append(SecurityIssue(
                type=threat_type,
                severity=data['severity'],
                message=data['message'],
                paths=paths,
            ))
    return issues


def is_bot(user_agent: str) -> bool:
    return any(pattern.search(user_agent) for pattern in _BOTS)


def bot_traffic(user_agents: Mapping[str, int], total: int) -> BotTraffic:
    count = sum(n for agent, n in user_agents.items() if is_bot(agent))
    return BotTraffic(count=count, percentage=percentage(count, total))


def error_signature_counts(messages: Mapping[str, int]) -> Dict[str, int]:
    """Count occurrences of well-known nginx error messages"""
    counts: Dict[str, int] = {}
    for message, n in messages.items():
        for name, pattern in _ERROR_SIGNATURES.items():
            if pattern.search(message):
                counts[name] = counts.get(name, 0) + n
    return counts
