from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from hms.domain.constants import DurationUnit, PrescriptionStatus


class MedicineItemRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, coerce_numbers_to_str=True)

    medicine_name: str = Field(min_length=1)
    dosage_form: str = "Tab"
    strength: str | None = None
    frequency: str = "1"
    meal_timing: str | None = "after_food"
    # Raw form input; parsed by the dosage rules, which decide between default and rejection.
    duration: int | str | None = 5
    duration_unit: str = DurationUnit.DAYS
    special_instructions: str | None = None


class PrescriptionCreateRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    patient_id: str = Field(min_length=1)
    patient_name: str = Field(min_length=1)
    doctor_id: str = Field(min_length=1)
    doctor_name: str = Field(min_length=1)
    diagnosis: str | None = None
    instructions: str | None = None
    prescription_date: date | None = None
    follow_up_date: date | None = None
    items: list[MedicineItemRequest] = Field(default_factory=list)
    finalize: bool = False
    created_by: int | None = None


class MedicineItemResponse(BaseModel):
    id: int
    medicine_name: str
    dosage_form: str
    strength: str | None = None
    frequency: str
    frequency_label: str
    schedule: list[str]
    duration: int
    duration_unit: str
    quantity: int
    summary: str


class PrescriptionResponse(BaseModel):
    id: int
    patient_id: str
    patient_name: str
    doctor_name: str
    prescription_date: date
    follow_up_date: date | None = None
    status: PrescriptionStatus
    signed_by: str | None = None
    signed_at: datetime | None = None
    items: list[MedicineItemResponse] = Field(default_factory=list)
