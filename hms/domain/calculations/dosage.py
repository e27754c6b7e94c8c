from __future__ import annotations

from typing import Any

from hms.domain.constants import DURATION_DAY_MULTIPLIERS, DurationUnit
from hms.domain.rules.input_rules import (
    InvalidInputError,
    parse_int_with_fallback,
    require_positive_int,
)

DEFAULT_FREQUENCY = "1"

FREQUENCIES: dict[str, tuple[str, tuple[str, ...]]] = {
    "1": ("Once daily", ("Morning",)),
    "2": ("Twice daily", ("Morning", "Night")),
    "3": ("Three times daily", ("Morning", "Afternoon", "Night")),
    "4": ("Four times daily", ("Morning", "Afternoon", "Evening", "Night")),
}


def _normalize_code(frequency_code: Any) -> str:
    return str(frequency_code).strip() if frequency_code is not None else ""


def schedule_for_frequency(frequency_code: Any) -> list[str]:
    code = _normalize_code(frequency_code)
    _, schedule = FREQUENCIES.get(code, FREQUENCIES[DEFAULT_FREQUENCY])
    return list(schedule)


def frequency_label(frequency_code: Any) -> str:
    code = _normalize_code(frequency_code)
    label, _ = FREQUENCIES.get(code, FREQUENCIES[DEFAULT_FREQUENCY])
    return label


def times_per_day(frequency_code: Any, *, strict: bool = False) -> int:
    code = _normalize_code(frequency_code)
    if code in FREQUENCIES:
        return int(code)
    if strict:
        raise InvalidInputError(f"frequency: unknown code {frequency_code!r}")
    return int(DEFAULT_FREQUENCY)


def day_multiplier(duration_unit: Any, *, strict: bool = False) -> int:
    unit = _normalize_code(duration_unit).lower()
    if unit in DURATION_DAY_MULTIPLIERS:
        return DURATION_DAY_MULTIPLIERS[unit]
    if strict:
        raise InvalidInputError(
            f"duration_unit: expected one of {', '.join(DurationUnit.values())}"
        )
    return DURATION_DAY_MULTIPLIERS[DurationUnit.DAYS]


def duration_in_days(duration: Any, duration_unit: Any, *, strict: bool = False) -> int:
    if strict:
        count = require_positive_int(duration, "duration")
    else:
        count = parse_int_with_fallback(duration, default=1)
    return count * day_multiplier(duration_unit, strict=strict)


def quantity(
    frequency_code: Any,
    duration: Any,
    duration_unit: Any,
    *,
    strict: bool = False,
) -> int:
    """Total units to dispense for one medicine line.

    ``duration × {days: 1, weeks: 7, months: 30} × times per day``. In the
    default mode unusable input is replaced (duration 1, frequency "1",
    unit days) so the result is always a positive integer; with
    ``strict=True`` the same input raises :class:`InvalidInputError`.
    """
    days = duration_in_days(duration, duration_unit, strict=strict)
    return days * times_per_day(frequency_code, strict=strict)


def medicine_summary(dosage_form: str, medicine_name: str, strength: str | None, frequency_code: Any) -> str:
    parts = [part for part in (dosage_form, medicine_name, strength or "") if part]
    return f"{' '.join(parts)} - {frequency_label(frequency_code)}"
