from __future__ import annotations

import hashlib
from datetime import date, datetime
from pathlib import Path

from openpyxl import load_workbook
from sqlalchemy import select

from hms.application.dto.equipment_dto import EquipmentCreateRequest
from hms.application.dto.swab_dto import SwabAreaCreateRequest, SwabCollectionCreateRequest, SwabLabResultRequest
from hms.application.services.equipment_service import EquipmentService
from hms.application.services.reporting_service import ReportingService
from hms.application.services.swab_service import SwabService
from hms.domain.constants import AreaType, GrowthLevel
from hms.infrastructure.db.models_sqlalchemy import AuditLog


def _services(session_factory) -> tuple[SwabService, EquipmentService, ReportingService]:
    swab_service = SwabService(session_factory=session_factory)
    equipment_service = EquipmentService(session_factory=session_factory, clock=lambda: date(2024, 12, 1))
    reporting = ReportingService(
        swab_service=swab_service,
        equipment_service=equipment_service,
        session_factory=session_factory,
    )
    return swab_service, equipment_service, reporting


def test_export_swab_report(tmp_path: Path, session_factory) -> None:
    swab_service, _, reporting = _services(session_factory)
    area_id = swab_service.create_area(
        SwabAreaCreateRequest(block="A", floor="1", area_type=AreaType.OT, area_name="OT-2")
    )
    collection = swab_service.create_collection(
        SwabCollectionCreateRequest(
            area_id=area_id,
            sampling_site="Light handle",
            reason="Post-cleaning",
            collected_by="N-5",
            collection_date=datetime(2025, 3, 10, 9, 0),
        )
    )
    swab_service.record_lab_result(
        SwabLabResultRequest(
            swab_collection_id=collection.id,
            culture_media="MacConkey",
            organism="Pseudomonas",
            growth_level=GrowthLevel.HEAVY,
            processed_by="L-1",
            result_date=datetime(2025, 3, 11, 10, 0),
        )
    )

    out = tmp_path / "reports" / "swab.xlsx"
    result = reporting.export_swab_report_xlsx(out)

    assert out.exists()
    assert result["sha256"] == hashlib.sha256(out.read_bytes()).hexdigest()
    assert result["summary"]["failed"] == 1

    wb = load_workbook(out)
    assert wb.sheetnames == ["Summary", "Collections", "CAPA"]
    summary_rows = {row[0]: row[1] for row in wb["Summary"].iter_rows(min_row=2, values_only=True)}
    assert summary_rows["OT contamination, %"] == 100.0
    collection_rows = list(wb["Collections"].iter_rows(min_row=2, values_only=True))
    assert collection_rows[0][0] == collection.swab_id
    assert collection_rows[0][5] == "FAIL"
    assert wb["CAPA"].max_row == 2

    with session_factory() as session:
        actions = session.execute(select(AuditLog.action).where(AuditLog.entity_type == "report")).scalars().all()
    assert actions == ["export_swab_xlsx"]


def test_export_equipment_register(tmp_path: Path, session_factory) -> None:
    _, equipment_service, reporting = _services(session_factory)
    equipment_service.register(
        EquipmentCreateRequest(name="Autoclave", serial_number="AC-1", last_service_date=date(2024, 11, 15))
    )
    equipment_service.register(
        EquipmentCreateRequest(name="Defibrillator", serial_number="DF-9", next_due_date=date(2024, 11, 1))
    )

    out = tmp_path / "equipment.xlsx"
    result = reporting.export_equipment_register_xlsx(out, today=date(2024, 12, 1))

    assert result["summary"] == {"overdue": 1, "up-to-date": 1}
    rows = list(load_workbook(out)["Equipment"].iter_rows(min_row=2, values_only=True))
    assert [(r[2], r[7], r[8]) for r in rows] == [("DF-9", -30, "overdue"), ("AC-1", 76, "up-to-date")]
