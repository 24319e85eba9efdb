"""nginx-insight - Unit normalization helpers"""

from typing import Union

_TIME_FACTORS = {
    'us': 0.001,
    'µs': 0.001,
    'μs': 0.001,
    'ms': 1.0,
    's': 1000.0,
    'sec': 1000.0,
    'secs': 1000.0,
    'm': 60000.0,
    'h': 3600000.0,
}

_BYTE_FACTORS = {
    'b': 1,
    'kb': 1024,
    'mb': 1024 ** 2,
    'gb': 1024 ** 3,
    'tb': 1024 ** 4,
}

_MAGNITUDES = {
    'k': 1e3,
    'm': 1e6,
    'g': 1e9,
}


def normalize_time(value: Union[str, float], unit: str) -> float:
    """Convert a duration to milliseconds; unknown units pass through"""
    return float(value) * _TIME_FACTORS.get(unit.strip().lower(), 1.0)


def normalize_bytes(value: Union[str, float], unit: str) -> float:
    """Convert a size to bytes (binary multiples)"""
    return float(value) * _BYTE_FACTORS.get(unit.strip().lower(), 1)


def normalize_number(token: str) -> float:
    """Expand magnitude suffixes: '56.20k' -> 56200.0"""
    token = token.strip()
    suffix = token[-1:].lower()
    if suffix in _MAGNITUDES:
        return float(token[:-1]) * _MAGNITUDES[suffix]
    return float(token)
