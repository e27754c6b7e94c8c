from __future__ import annotations

import calendar
import math
from datetime import UTC, date, datetime, timedelta

from hms.domain.constants import (
    DUE_SOON_WINDOW_DAYS,
    SERVICE_FREQUENCY_MONTHS,
    EquipmentStatus,
    ServiceFrequency,
)

_DAY = timedelta(days=1)


def add_months(value: date, months: int) -> date:
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return value.replace(year=year, month=month, day=min(value.day, last_day))


def next_due_date(last_service_date: date | None, frequency: str | ServiceFrequency) -> date | None:
    if last_service_date is None:
        return None
    try:
        months = SERVICE_FREQUENCY_MONTHS[ServiceFrequency(frequency)]
    except ValueError as exc:
        raise ValueError(f"Unknown service frequency: {frequency!r}") from exc
    return add_months(last_service_date, months)


def _as_datetime(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime(value.year, value.month, value.day)


def _naive_utc(value: datetime) -> datetime:
    # Naive values are taken as UTC.
    if value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


def days_until(due: date | datetime, today: date | datetime) -> int:
    due_dt = _as_datetime(due)
    today_dt = _as_datetime(today)
    if (due_dt.tzinfo is None) != (today_dt.tzinfo is None):
        due_dt = _naive_utc(due_dt)
        today_dt = _naive_utc(today_dt)
    return math.ceil((due_dt - today_dt) / _DAY)


def service_status(due: date | datetime, today: date | datetime) -> EquipmentStatus:
    diff_days = days_until(due, today)
    if diff_days < 0:
        return EquipmentStatus.OVERDUE
    if diff_days <= DUE_SOON_WINDOW_DAYS:
        return EquipmentStatus.DUE_SOON
    return EquipmentStatus.UP_TO_DATE
