from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, Field


class IcuChartCreateRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    patient_name: str = Field(min_length=1)
    bed_number: str | None = None
    chart_date: date


class FluidEntryRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, coerce_numbers_to_str=True)

    hour_slot: str = Field(min_length=1)
    total_intake: str | None = None
    total_output: str | None = None
    recorded_by: int | None = None


class FluidTargetRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, coerce_numbers_to_str=True)

    target_intake: str | None = None
    target_output: str | None = None
    net_balance_goal: str | None = None


class FluidBalanceResponse(BaseModel):
    chart_id: int
    entry_count: int
    total_intake: float
    total_output: float
    net_balance: float
    target: FluidTargetRequest | None = None
