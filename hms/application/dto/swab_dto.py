from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from hms.domain.constants import AreaType, CapaStatus, GrowthLevel, SwabResultStatus


class SwabAreaCreateRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    block: str = Field(min_length=1)
    floor: str = Field(min_length=1)
    area_type: AreaType
    area_name: str = Field(min_length=1)
    equipment: str | None = None


class SwabCollectionCreateRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    area_id: int
    sampling_site: str = Field(min_length=1)
    reason: str = Field(min_length=1)
    collected_by: str = Field(min_length=1)
    collected_by_name: str | None = None
    remarks: str | None = None
    collection_date: datetime | None = None


class SwabLabResultRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    swab_collection_id: int
    culture_media: str = Field(min_length=1)
    organism: str = Field(min_length=1)
    cfu_count: int | None = Field(default=None, ge=0)
    growth_level: GrowthLevel
    sensitivity_test: bool = False
    sensitivity_details: str | None = None
    processed_by: str = Field(min_length=1)
    remarks: str | None = None
    result_date: datetime | None = None


class CapaCloseRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    closed_by: str = Field(min_length=1)
    closure_remarks: str | None = None


class SwabCollectionResponse(BaseModel):
    id: int
    swab_id: str
    collection_date: datetime
    area_type: AreaType
    area_id: int
    sampling_site: str
    status: str
    result_status: SwabResultStatus | None = None


class CapaResponse(BaseModel):
    id: int
    swab_collection_id: int
    issue_summary: str
    responsible_department: str
    target_closure_date: date
    verification_swab_required: bool
    status: CapaStatus


class SwabSummaryResponse(BaseModel):
    total: int
    passed: int
    acceptable: int
    failed: int
    pending: int
    open_capa: int
    ot_samples: int
    icu_samples: int
    ot_contamination_rate: float
    icu_contamination_rate: float


class SwabAreaResponse(BaseModel):
    id: int
    block: str
    floor: str
    area_type: AreaType
    area_name: str
    equipment: str | None = None
    is_active: bool
