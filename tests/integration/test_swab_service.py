from __future__ import annotations

from datetime import date, datetime

import pytest

from hms.application.dto.swab_dto import (
    CapaCloseRequest,
    SwabAreaCreateRequest,
    SwabCollectionCreateRequest,
    SwabLabResultRequest,
)
from hms.application.errors import NotFoundError, ValidationError
from hms.application.services.swab_service import SwabService
from hms.domain.constants import AreaType, CapaStatus, GrowthLevel, SwabResultStatus
from hms.infrastructure.db.models_sqlalchemy import SwabArea


def _collect(service: SwabService, area_id: int, when: datetime, site: str = "Operating table"):
    return service.create_collection(
        SwabCollectionCreateRequest(
            area_id=area_id,
            sampling_site=site,
            reason="Routine",
            collected_by="N-12",
            collection_date=when,
        )
    )


def _result(collection_id: int, growth: GrowthLevel, organism: str = "No growth") -> SwabLabResultRequest:
    return SwabLabResultRequest(
        swab_collection_id=collection_id,
        culture_media="Blood agar",
        organism=organism,
        growth_level=growth,
        processed_by="L-3",
        result_date=datetime(2025, 3, 12, 8, 0),
    )


def _areas(service: SwabService) -> tuple[int, int]:
    ot = service.create_area(SwabAreaCreateRequest(block="A", floor="2", area_type=AreaType.OT, area_name="OT-1"))
    icu = service.create_area(SwabAreaCreateRequest(block="B", floor="3", area_type=AreaType.ICU, area_name="ICU-1"))
    return ot, icu


def test_swab_numbers_are_sequential_per_day(session_factory) -> None:
    service = SwabService(session_factory=session_factory)
    ot, icu = _areas(service)

    first = _collect(service, ot, datetime(2025, 3, 10, 9, 0))
    second = _collect(service, icu, datetime(2025, 3, 10, 11, 30))
    next_day = _collect(service, ot, datetime(2025, 3, 11, 9, 0))

    assert first.swab_id == "SWB-20250310-0001"
    assert second.swab_id == "SWB-20250310-0002"
    assert next_day.swab_id == "SWB-20250311-0001"
    assert second.area_type == AreaType.ICU
    assert first.status == "pending"


def test_inactive_or_missing_area_is_rejected(session_factory) -> None:
    service = SwabService(session_factory=session_factory)
    ot, _ = _areas(service)
    with session_factory() as session:
        area = session.get(SwabArea, ot)
        assert area is not None
        area.is_active = False

    assert [a.area_name for a in service.list_areas()] == ["ICU-1"]
    assert [a.is_active for a in service.list_areas(area_type="OT", active_only=False)] == [False]

    with pytest.raises(ValidationError, match="inactive"):
        _collect(service, ot, datetime(2025, 3, 10, 9, 0))
    with pytest.raises(NotFoundError):
        _collect(service, 999, datetime(2025, 3, 10, 9, 0))


def test_fail_result_opens_capa(session_factory) -> None:
    service = SwabService(session_factory=session_factory)
    ot, _ = _areas(service)
    collection = _collect(service, ot, datetime(2025, 3, 10, 9, 0))

    resp = service.record_lab_result(_result(collection.id, GrowthLevel.HEAVY, organism="S. aureus"))
    assert resp.result_status == SwabResultStatus.FAIL
    assert resp.status == "completed"

    capa_list = service.list_capa(open_only=True)
    assert len(capa_list) == 1
    capa = capa_list[0]
    assert capa.swab_collection_id == collection.id
    assert capa.target_closure_date == date(2025, 3, 19)
    assert capa.verification_swab_required is True
    assert "S. aureus" in capa.issue_summary

    with pytest.raises(ValidationError, match="already recorded"):
        service.record_lab_result(_result(collection.id, GrowthLevel.NONE))

    closed = service.close_capa(capa.id, CapaCloseRequest(closed_by="IC-1", closure_remarks="Repeat swab PASS"))
    assert closed.status == CapaStatus.CLOSED
    assert service.list_capa(open_only=True) == []
    with pytest.raises(ValidationError, match="already closed"):
        service.close_capa(capa.id, CapaCloseRequest(closed_by="IC-1"))


def test_summary_rates(session_factory) -> None:
    service = SwabService(session_factory=session_factory)
    ot, icu = _areas(service)

    passed = _collect(service, ot, datetime(2025, 3, 10, 8, 0))
    failed = _collect(service, ot, datetime(2025, 3, 10, 9, 0), site="Anaesthesia trolley")
    _collect(service, ot, datetime(2025, 3, 10, 10, 0), site="Scrub sink")
    acceptable = _collect(service, icu, datetime(2025, 3, 11, 8, 0), site="Bed rail")

    service.record_lab_result(_result(passed.id, GrowthLevel.NONE))
    service.record_lab_result(_result(failed.id, GrowthLevel.MODERATE, organism="Klebsiella"))
    service.record_lab_result(_result(acceptable.id, GrowthLevel.LOW, organism="CoNS"))

    summary = service.summary()
    assert summary.total == 4
    assert (summary.passed, summary.acceptable, summary.failed, summary.pending) == (1, 1, 1, 1)
    assert summary.open_capa == 1
    assert (summary.ot_samples, summary.icu_samples) == (3, 1)
    assert summary.ot_contamination_rate == 33.3
    assert summary.icu_contamination_rate == 0.0

    later = service.summary(date_from=date(2025, 3, 11))
    assert later.total == 1
    assert later.ot_contamination_rate == 0.0

    assert [c.swab_id for c in service.list_collections(area_type="ICU")] == [acceptable.swab_id]
