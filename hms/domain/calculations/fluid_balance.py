from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from hms.domain.rules.input_rules import parse_number_with_fallback


@dataclass(frozen=True)
class FluidBalance:
    total_intake: float
    total_output: float

    @property
    def net_balance(self) -> float:
        return self.total_intake - self.total_output


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _read_amount(entry: Any, field: str) -> float:
    if isinstance(entry, Mapping):
        raw = entry.get(field, entry.get(_camel(field)))
    else:
        raw = getattr(entry, field, None)
    return parse_number_with_fallback(raw)


def sum_field(entries: Iterable[Any], field: str) -> float:
    return sum((_read_amount(entry, field) for entry in entries), 0.0)


def aggregate(intake_entries: Iterable[Any], output_entries: Iterable[Any] | None = None) -> FluidBalance:
    """Sum intake and output amounts; non-numeric amounts count as 0.

    When ``output_entries`` is omitted, ``intake_entries`` is read for both
    fields (entries that carry intake and output side by side).
    """
    intake = list(intake_entries)
    output = intake if output_entries is None else list(output_entries)
    return FluidBalance(
        total_intake=sum_field(intake, "total_intake"),
        total_output=sum_field(output, "total_output"),
    )


def format_balance(value: float, unit: str = "mL") -> str:
    number = int(value) if float(value).is_integer() else round(value, 1)
    sign = "+" if value >= 0 else ""
    return f"{sign}{number} {unit}"
