"""기간 문자열 파싱 유틸리티.

Duration string parsing utility.
Turns compact TTL strings such as "15m", "7d" or "3600" into timedelta values.

Supported units:
    ms (milliseconds), s (seconds), m (minutes), h (hours), d (days), w (weeks)
    단위 없는 정수는 초 단위 (A bare integer is a number of seconds)
"""

import re
from datetime import timedelta

_DURATION_RE = re.compile(r"^\s*(\d+)\s*(ms|s|m|h|d|w)?\s*$", re.IGNORECASE)

_UNIT_SECONDS: dict[str, float] = {
    "ms": 0.001,
    "s": 1,
    "m": 60,
    "h": 60 * 60,
    "d": 24 * 60 * 60,
    "w": 7 * 24 * 60 * 60,
}


def parse_duration(value: str | int) -> timedelta:
    """기간 문자열을 timedelta로 변환합니다.

    Parse a duration string into a timedelta.

    Args:
        value: "15m", "7d", "12h", "3600" 형식 또는 초 단위 정수
               (Duration string or an integer number of seconds)

    Returns:
        timedelta: 변환된 기간 (Parsed duration)

    Raises:
        ValueError: 형식이 잘못되었거나 0 이하일 때 (Malformed or non-positive)
    """
    if isinstance(value, int):
        seconds: float = value
    else:
        match = _DURATION_RE.match(value)
        if match is None:
            raise ValueError(f"Invalid duration: {value!r}")
        amount, unit = match.groups()
        seconds = int(amount) * _UNIT_SECONDS[(unit or "s").lower()]

    if seconds <= 0:
        raise ValueError(f"Duration must be positive: {value!r}")
    return timedelta(seconds=seconds)
