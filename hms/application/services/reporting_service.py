from __future__ import annotations

import hashlib
import json
from collections.abc import Callable
from datetime import UTC, date, datetime
from pathlib import Path
from typing import Any

from openpyxl import Workbook

from hms.application.services.equipment_service import EquipmentService
from hms.application.services.swab_service import SwabService
from hms.infrastructure.db.repositories.audit_repo import AuditLogRepository
from hms.infrastructure.db.session import session_scope


def _format_value(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.strftime("%d.%m.%Y %H:%M")
    if isinstance(value, date):
        return value.strftime("%d.%m.%Y")
    return value


def _sha256_file(path: Path, chunk_size: int = 8192) -> str:
    digest = hashlib.sha256()
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(chunk_size), b""):
            digest.update(chunk)
    return digest.hexdigest()


class ReportingService:
    def __init__(
        self,
        swab_service: SwabService,
        equipment_service: EquipmentService,
        audit_repo: AuditLogRepository | None = None,
        session_factory: Callable = session_scope,
    ) -> None:
        self.swab_service = swab_service
        self.equipment_service = equipment_service
        self.audit_repo = audit_repo or AuditLogRepository()
        self.session_factory = session_factory

    def export_swab_report_xlsx(
        self,
        file_path: str | Path,
        date_from: date | None = None,
        date_to: date | None = None,
        actor_id: int | None = None,
    ) -> dict[str, Any]:
        file_path = Path(file_path)
        summary = self.swab_service.summary(date_from=date_from, date_to=date_to)
        collections = self.swab_service.list_collections(date_from=date_from, date_to=date_to)
        capa_actions = self.swab_service.list_capa()

        wb = Workbook()
        summary_ws = wb.active
        summary_ws.title = "Summary"
        summary_ws.append(["Metric", "Value"])
        summary_ws.append(["Report date", datetime.now(UTC).strftime("%d.%m.%Y %H:%M")])
        summary_ws.append(["Period from", _format_value(date_from) or ""])
        summary_ws.append(["Period to", _format_value(date_to) or ""])
        summary_ws.append(["Total samples", summary.total])
        summary_ws.append(["PASS", summary.passed])
        summary_ws.append(["ACCEPTABLE", summary.acceptable])
        summary_ws.append(["FAIL", summary.failed])
        summary_ws.append(["Pending", summary.pending])
        summary_ws.append(["Open CAPA", summary.open_capa])
        summary_ws.append(["OT contamination, %", summary.ot_contamination_rate])
        summary_ws.append(["ICU contamination, %", summary.icu_contamination_rate])

        data_ws = wb.create_sheet(title="Collections")
        data_ws.append(["Swab ID", "Collected", "Area type", "Sampling site", "Status", "Result"])
        for row in collections:
            data_ws.append(
                [
                    row.swab_id,
                    _format_value(row.collection_date),
                    row.area_type.value,
                    row.sampling_site,
                    row.status,
                    row.result_status.value if row.result_status else "",
                ]
            )

        capa_ws = wb.create_sheet(title="CAPA")
        capa_ws.append(["ID", "Issue", "Department", "Target closure", "Verification swab", "Status"])
        for capa in capa_actions:
            capa_ws.append(
                [
                    capa.id,
                    capa.issue_summary,
                    capa.responsible_department,
                    _format_value(capa.target_closure_date),
                    "yes" if capa.verification_swab_required else "no",
                    capa.status.value,
                ]
            )

        return self._save(wb, file_path, report_type="swab", actor_id=actor_id, summary=summary.model_dump())

    def export_equipment_register_xlsx(
        self,
        file_path: str | Path,
        today: date | None = None,
        actor_id: int | None = None,
    ) -> dict[str, Any]:
        file_path = Path(file_path)
        rows = self.equipment_service.list_equipment(today=today)

        wb = Workbook()
        ws = wb.active
        ws.title = "Equipment"
        ws.append(
            ["Name", "Model", "Serial number", "Location", "Frequency", "Last service", "Next due", "Days left", "Status"]
        )
        counts: dict[str, int] = {}
        for row in rows:
            ws.append(
                [
                    row.name,
                    row.model or "",
                    row.serial_number,
                    row.location or "",
                    row.service_frequency.value,
                    _format_value(row.last_service_date) or "",
                    _format_value(row.next_due_date),
                    row.days_until_due,
                    row.status.value,
                ]
            )
            counts[row.status.value] = counts.get(row.status.value, 0) + 1

        return self._save(wb, file_path, report_type="equipment", actor_id=actor_id, summary=counts)

    def _save(
        self,
        wb: Workbook,
        file_path: Path,
        *,
        report_type: str,
        actor_id: int | None,
        summary: dict[str, Any],
    ) -> dict[str, Any]:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        wb.save(file_path)
        report_hash = _sha256_file(file_path)
        with self.session_factory() as session:
            self.audit_repo.add_event(
                session,
                user_id=actor_id,
                entity_type="report",
                entity_id=report_type,
                action=f"export_{report_type}_xlsx",
                payload_json=json.dumps({"path": str(file_path), "sha256": report_hash, "summary": summary}),
            )
        return {"path": str(file_path), "sha256": report_hash, "summary": summary}
