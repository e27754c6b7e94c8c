from __future__ import annotations

from hms.domain.calculations.contamination import contamination_rate, format_rate, rate_for_area, summarize


def _sample(area_type: str, result_status: str | None, status: str = "completed") -> dict:
    return {"area_type": area_type, "result_status": result_status, "status": status}


def test_empty_subset_rate_is_zero() -> None:
    assert contamination_rate([]) == 0.0
    assert rate_for_area([_sample("ICU", "FAIL")], "OT") == 0.0


def test_rate_for_area_one_decimal() -> None:
    samples = [
        _sample("OT", "FAIL"),
        _sample("OT", "PASS"),
        _sample("OT", None, status="pending"),
        _sample("ICU", "FAIL"),
    ]
    assert rate_for_area(samples, "OT") == 33.3
    assert rate_for_area(samples, "ICU") == 100.0
    assert format_rate(rate_for_area(samples, "OT")) == "33.3"
    assert format_rate(0.0) == "0.0"


def test_custom_predicate() -> None:
    samples = [_sample("OT", "FAIL"), _sample("OT", "ACCEPTABLE"), _sample("ICU", "FAIL")]
    assert contamination_rate(samples, lambda s: s["result_status"] is not None) == 66.7


def test_summarize_counts() -> None:
    samples = [
        _sample("OT", "PASS"),
        _sample("OT", "FAIL"),
        _sample("OT", "ACCEPTABLE"),
        _sample("ICU", None, status="pending"),
    ]
    summary = summarize(samples)
    assert summary["total"] == 4
    assert summary["pass"] == 1
    assert summary["fail"] == 1
    assert summary["acceptable"] == 1
    assert summary["pending"] == 1
    assert summary["ot_samples"] == 3
    assert summary["icu_contamination_rate"] == 0.0
    assert summary["ot_contamination_rate"] == 33.3


def test_exact_half_rounds_up() -> None:
    samples = [_sample("OT", "FAIL")] + [_sample("OT", "PASS") for _ in range(15)]
    rate = rate_for_area(samples, "OT")
    assert rate == 6.3
    assert format_rate(rate) == "6.3"
    assert format_rate(6.25) == "6.3"
    assert format_rate(18.75) == "18.8"
