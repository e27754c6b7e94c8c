from __future__ import annotations

import math
import re
from typing import Any


_LEADING_NUMBER = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


class InvalidInputError(ValueError):
    """Raised by the strict parsers when a required numeric field is unusable."""


def _to_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    text = str(value).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return None
    return int(number) if math.isfinite(number) else None


def _to_number(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        # Bedside entries carry units ("250 mL"); only the leading number counts.
        match = _LEADING_NUMBER.match(str(value))
        if match is None:
            return None
        number = float(match.group(1))
    return number if math.isfinite(number) else None


def parse_int_with_fallback(value: Any, default: int = 1, *, positive: bool = True) -> int:
    parsed = _to_int(value)
    if parsed is None:
        return default
    if positive and parsed <= 0:
        return default
    return parsed


def parse_number_with_fallback(value: Any, default: float = 0.0) -> float:
    parsed = _to_number(value)
    return default if parsed is None else parsed


def require_positive_int(value: Any, field: str) -> int:
    parsed = _to_int(value)
    if parsed is None:
        raise InvalidInputError(f"{field}: a whole number is required")
    if parsed <= 0:
        raise InvalidInputError(f"{field}: must be greater than zero")
    return parsed


def require_one_of(field: str, **values: Any) -> None:
    if all(value is None for value in values.values()):
        names = " or ".join(values)
        raise InvalidInputError(f"{field}: provide {names}")
