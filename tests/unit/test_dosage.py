from __future__ import annotations

import pytest

from hms.domain.calculations.dosage import (
    duration_in_days,
    frequency_label,
    medicine_summary,
    quantity,
    schedule_for_frequency,
    times_per_day,
)
from hms.domain.rules.input_rules import InvalidInputError


def test_quantity_examples() -> None:
    assert quantity("2", 5, "days") == 10
    assert quantity("3", 2, "weeks") == 42
    assert quantity("1", 1, "months") == 30


@pytest.mark.parametrize("frequency", ["1", "2", "3", "4"])
@pytest.mark.parametrize(("unit", "multiplier"), [("days", 1), ("weeks", 7), ("months", 30)])
@pytest.mark.parametrize("duration", [1, 3, 14])
def test_quantity_is_duration_times_multiplier_times_frequency(
    frequency: str, unit: str, multiplier: int, duration: int
) -> None:
    assert quantity(frequency, duration, unit) == duration * multiplier * int(frequency)


def test_schedule_lookup_and_fallback() -> None:
    assert schedule_for_frequency("2") == ["Morning", "Night"]
    assert schedule_for_frequency("4") == ["Morning", "Afternoon", "Evening", "Night"]
    assert schedule_for_frequency("7") == ["Morning"]
    assert schedule_for_frequency(None) == ["Morning"]
    assert frequency_label("3") == "Three times daily"
    assert frequency_label("SOS") == "Once daily"


def test_schedule_is_a_fresh_list() -> None:
    schedule = schedule_for_frequency("1")
    schedule.append("Night")
    assert schedule_for_frequency("1") == ["Morning"]


def test_missing_or_invalid_input_falls_back() -> None:
    assert quantity("2", "", "days") == 2
    assert quantity("2", None, "weeks") == 14
    assert quantity("2", "abc", "days") == 2
    assert quantity("2", 0, "days") == 2
    assert quantity("x", 5, "days") == 5
    assert quantity("3", "4", "fortnights") == 12
    assert duration_in_days(" 2 ", "WEEKS") == 14


def test_strict_mode_rejects_unusable_input() -> None:
    with pytest.raises(InvalidInputError, match="duration"):
        quantity("2", "", "days", strict=True)
    with pytest.raises(InvalidInputError, match="greater than zero"):
        quantity("2", -1, "days", strict=True)
    with pytest.raises(InvalidInputError, match="frequency"):
        times_per_day("9", strict=True)
    with pytest.raises(InvalidInputError, match="duration_unit"):
        quantity("1", 3, "years", strict=True)
    assert quantity("4", "3", "days", strict=True) == 12


def test_quantity_is_repeatable() -> None:
    assert quantity("3", 10, "days") == quantity("3", 10, "days") == 30


def test_medicine_summary() -> None:
    assert medicine_summary("Tab", "Paracetamol", "500mg", "2") == "Tab Paracetamol 500mg - Twice daily"
    assert medicine_summary("Syrup", "Cetirizine", None, "unknown") == "Syrup Cetirizine - Once daily"
