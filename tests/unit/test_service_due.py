from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from hms.domain.calculations.service_due import add_months, days_until, next_due_date, service_status
from hms.domain.constants import EquipmentStatus


def test_next_due_date_rolls_over_year() -> None:
    assert next_due_date(date(2024, 11, 15), "quarterly") == date(2025, 2, 15)
    assert next_due_date(date(2024, 12, 5), "monthly") == date(2025, 1, 5)
    assert next_due_date(date(2024, 3, 1), "yearly") == date(2025, 3, 1)


def test_next_due_date_clamps_to_month_end() -> None:
    assert next_due_date(date(2024, 1, 31), "monthly") == date(2024, 2, 29)
    assert next_due_date(date(2023, 1, 31), "monthly") == date(2023, 2, 28)
    assert next_due_date(date(2024, 2, 29), "yearly") == date(2025, 2, 28)
    assert next_due_date(date(2024, 11, 30), "quarterly") == date(2025, 2, 28)


@pytest.mark.parametrize(("frequency", "months"), [("monthly", 1), ("quarterly", 3), ("yearly", 12)])
@pytest.mark.parametrize("start", [date(2023, 1, 15), date(2024, 6, 1), date(2024, 10, 28), date(2024, 12, 31)])
def test_month_difference_matches_frequency(frequency: str, months: int, start: date) -> None:
    due = next_due_date(start, frequency)
    assert due is not None
    assert (due.year - start.year) * 12 + (due.month - start.month) == months


def test_next_due_date_without_last_service() -> None:
    assert next_due_date(None, "monthly") is None


def test_next_due_date_rejects_unknown_frequency() -> None:
    with pytest.raises(ValueError, match="weekly"):
        next_due_date(date(2024, 1, 1), "weekly")


def test_add_months_negative() -> None:
    assert add_months(date(2024, 3, 31), -1) == date(2024, 2, 29)
    assert add_months(date(2024, 1, 15), -1) == date(2023, 12, 15)


@pytest.mark.parametrize(
    ("offset", "expected"),
    [
        (-1, EquipmentStatus.OVERDUE),
        (0, EquipmentStatus.DUE_SOON),
        (30, EquipmentStatus.DUE_SOON),
        (31, EquipmentStatus.UP_TO_DATE),
        (-45, EquipmentStatus.OVERDUE),
    ],
)
def test_status_boundaries(offset: int, expected: EquipmentStatus) -> None:
    today = date(2025, 1, 10)
    assert service_status(today + timedelta(days=offset), today) == expected


def test_days_until_rounds_partial_days_up() -> None:
    assert days_until(date(2025, 1, 10), datetime(2025, 1, 9, 12, 0)) == 1
    assert days_until(date(2025, 1, 10), datetime(2025, 1, 10, 8, 0)) == 0
    assert service_status(date(2025, 1, 10), datetime(2025, 1, 10, 8, 0)) == EquipmentStatus.DUE_SOON


def test_status_is_repeatable() -> None:
    due, today = date(2025, 3, 1), date(2025, 2, 1)
    assert service_status(due, today) == service_status(due, today) == EquipmentStatus.DUE_SOON


def test_days_until_converts_aware_due_to_utc() -> None:
    new_york_midnight = datetime(2025, 1, 10, 0, 0, tzinfo=timezone(timedelta(hours=-5)))
    assert days_until(new_york_midnight, date(2025, 1, 10)) == 1
    assert days_until(date(2025, 1, 10), datetime(2025, 1, 9, 20, 0, tzinfo=timezone(timedelta(hours=-5)))) == 0
