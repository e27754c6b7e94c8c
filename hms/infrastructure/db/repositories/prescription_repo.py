from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime

from sqlalchemy import select, update
from sqlalchemy.orm import Session, selectinload

from hms.infrastructure.db.models_sqlalchemy import Prescription, PrescriptionItem


class PrescriptionRepository:
    def get(self, session: Session, prescription_id: int) -> Prescription | None:
        stmt = (
            select(Prescription)
            .options(selectinload(Prescription.items))
            .where(Prescription.id == prescription_id)
        )
        return session.execute(stmt).scalar_one_or_none()

    def create(
        self,
        session: Session,
        *,
        patient_id: str,
        patient_name: str,
        doctor_id: str,
        doctor_name: str,
        diagnosis: str | None,
        instructions: str | None,
        prescription_date: date,
        follow_up_date: date | None,
        status: str,
        created_by: int | None,
        items: Iterable[dict],
    ) -> Prescription:
        prescription = Prescription(
            patient_id=patient_id,
            patient_name=patient_name,
            doctor_id=doctor_id,
            doctor_name=doctor_name,
            diagnosis=diagnosis,
            instructions=instructions,
            prescription_date=prescription_date,
            follow_up_date=follow_up_date,
            status=status,
            created_by=created_by,
        )
        prescription.items = [PrescriptionItem(**item) for item in items]
        session.add(prescription)
        session.flush()
        return prescription

    def mark_finalized(self, session: Session, prescription_id: int, *, signed_by: str, signed_at: datetime) -> None:
        stmt = (
            update(Prescription)
            .where(Prescription.id == prescription_id)
            .values(status="finalized", signed_by=signed_by, signed_at=signed_at)
        )
        session.execute(stmt)

    def list_by_patient(self, session: Session, patient_id: str) -> list[Prescription]:
        stmt = (
            select(Prescription)
            .options(selectinload(Prescription.items))
            .where(Prescription.patient_id == patient_id)
            .order_by(Prescription.prescription_date.desc(), Prescription.id.desc())
        )
        return list(session.execute(stmt).scalars())
