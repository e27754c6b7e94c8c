from __future__ import annotations

from dataclasses import dataclass

from hms.application.services.equipment_service import EquipmentService
from hms.application.services.icu_service import IcuService
from hms.application.services.prescription_service import PrescriptionService
from hms.application.services.reporting_service import ReportingService
from hms.application.services.swab_service import SwabService
from hms.infrastructure.db.repositories.audit_repo import AuditLogRepository
from hms.infrastructure.db.repositories.equipment_repo import EquipmentRepository
from hms.infrastructure.db.repositories.icu_repo import IcuRepository
from hms.infrastructure.db.repositories.prescription_repo import PrescriptionRepository
from hms.infrastructure.db.repositories.swab_repo import SwabRepository
from hms.infrastructure.db.session import session_scope


@dataclass
class Container:
    audit_repo: AuditLogRepository
    prescription_repo: PrescriptionRepository
    equipment_repo: EquipmentRepository
    icu_repo: IcuRepository
    swab_repo: SwabRepository

    prescription_service: PrescriptionService
    equipment_service: EquipmentService
    icu_service: IcuService
    swab_service: SwabService
    reporting_service: ReportingService


def build_container(session_factory=session_scope) -> Container:
    audit_repo = AuditLogRepository()
    prescription_repo = PrescriptionRepository()
    equipment_repo = EquipmentRepository()
    icu_repo = IcuRepository()
    swab_repo = SwabRepository()

    prescription_service = PrescriptionService(
        repo=prescription_repo,
        audit_repo=audit_repo,
        session_factory=session_factory,
    )
    equipment_service = EquipmentService(
        repo=equipment_repo,
        audit_repo=audit_repo,
        session_factory=session_factory,
    )
    icu_service = IcuService(repo=icu_repo, audit_repo=audit_repo, session_factory=session_factory)
    swab_service = SwabService(repo=swab_repo, audit_repo=audit_repo, session_factory=session_factory)
    reporting_service = ReportingService(
        swab_service=swab_service,
        equipment_service=equipment_service,
        audit_repo=audit_repo,
        session_factory=session_factory,
    )

    return Container(
        audit_repo=audit_repo,
        prescription_repo=prescription_repo,
        equipment_repo=equipment_repo,
        icu_repo=icu_repo,
        swab_repo=swab_repo,
        prescription_service=prescription_service,
        equipment_service=equipment_service,
        icu_service=icu_service,
        swab_service=swab_service,
        reporting_service=reporting_service,
    )
