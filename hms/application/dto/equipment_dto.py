from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from hms.domain.constants import EquipmentStatus, ServiceFrequency


class EquipmentCreateRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1)
    model: str | None = None
    serial_number: str = Field(min_length=1)
    location: str | None = None
    service_frequency: ServiceFrequency = ServiceFrequency.QUARTERLY
    last_service_date: date | None = None
    next_due_date: date | None = None
    company_name: str | None = None
    contact_number: str | None = None


class ServiceRecordRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    equipment_id: int
    service_date: date
    technician: str = Field(min_length=1)
    description: str | None = None
    cost: str | None = None


class EquipmentResponse(BaseModel):
    id: int
    name: str
    model: str | None = None
    serial_number: str
    location: str | None = None
    service_frequency: ServiceFrequency
    last_service_date: date | None = None
    next_due_date: date
    status: EquipmentStatus
    days_until_due: int


class ServiceHistoryResponse(BaseModel):
    id: int
    equipment_id: int
    service_date: date
    technician: str
    description: str | None = None
    cost: str | None = None
