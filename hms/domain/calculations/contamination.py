from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from hms.domain.constants import AreaType, SwabCollectionStatus, SwabResultStatus


def _field(sample: Any, name: str) -> Any:
    if isinstance(sample, Mapping):
        return sample.get(name)
    return getattr(sample, name, None)


def _one_decimal(value: float) -> Decimal:
    # Exact halves round up (6.25 -> 6.3), as displayed percentages do.
    return Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)


def _is_fail(sample: Any) -> bool:
    return _field(sample, "result_status") == SwabResultStatus.FAIL


def contamination_rate(
    samples: Iterable[Any],
    predicate: Callable[[Any], bool] | None = None,
) -> float:
    subset = [s for s in samples if predicate is None or predicate(s)]
    if not subset:
        return 0.0
    failed = sum(1 for s in subset if _is_fail(s))
    return float(_one_decimal(failed / len(subset) * 100.0))


def rate_for_area(samples: Iterable[Any], area_type: str | AreaType) -> float:
    return contamination_rate(samples, lambda s: _field(s, "area_type") == area_type)


def format_rate(value: float) -> str:
    return str(_one_decimal(value))


def summarize(samples: Iterable[Any]) -> dict[str, Any]:
    items = list(samples)
    counts = {status.value: 0 for status in SwabResultStatus}
    pending = 0
    for sample in items:
        result = _field(sample, "result_status")
        if result in counts:
            counts[result] += 1
        if _field(sample, "status") == SwabCollectionStatus.PENDING:
            pending += 1
    return {
        "total": len(items),
        "pass": counts[SwabResultStatus.PASS],
        "acceptable": counts[SwabResultStatus.ACCEPTABLE],
        "fail": counts[SwabResultStatus.FAIL],
        "pending": pending,
        "ot_samples": sum(1 for s in items if _field(s, "area_type") == AreaType.OT),
        "icu_samples": sum(1 for s in items if _field(s, "area_type") == AreaType.ICU),
        "ot_contamination_rate": rate_for_area(items, AreaType.OT),
        "icu_contamination_rate": rate_for_area(items, AreaType.ICU),
    }
