from __future__ import annotations

from datetime import date

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from hms.infrastructure.db.models_sqlalchemy import Equipment, ServiceHistory


class EquipmentRepository:
    def get(self, session: Session, equipment_id: int) -> Equipment | None:
        stmt = select(Equipment).where(Equipment.id == equipment_id)
        return session.execute(stmt).scalar_one_or_none()

    def get_by_serial(self, session: Session, serial_number: str) -> Equipment | None:
        stmt = select(Equipment).where(Equipment.serial_number == serial_number)
        return session.execute(stmt).scalar_one_or_none()

    def create(
        self,
        session: Session,
        *,
        name: str,
        model: str | None,
        serial_number: str,
        location: str | None,
        service_frequency: str,
        last_service_date: date | None,
        next_due_date: date,
        status: str,
        company_name: str | None,
        contact_number: str | None,
    ) -> Equipment:
        equipment = Equipment(
            name=name,
            model=model,
            serial_number=serial_number,
            location=location,
            service_frequency=service_frequency,
            last_service_date=last_service_date,
            next_due_date=next_due_date,
            status=status,
            company_name=company_name,
            contact_number=contact_number,
        )
        session.add(equipment)
        session.flush()
        return equipment

    def update_schedule(
        self,
        session: Session,
        equipment_id: int,
        *,
        last_service_date: date | None,
        next_due_date: date,
        status: str,
    ) -> None:
        stmt = (
            update(Equipment)
            .where(Equipment.id == equipment_id)
            .values(last_service_date=last_service_date, next_due_date=next_due_date, status=status)
        )
        session.execute(stmt)

    def update_status(self, session: Session, equipment_id: int, status: str) -> None:
        session.execute(update(Equipment).where(Equipment.id == equipment_id).values(status=status))

    def list_all(self, session: Session) -> list[Equipment]:
        stmt = select(Equipment).order_by(Equipment.next_due_date, Equipment.id)
        return list(session.execute(stmt).scalars())

    def count_by_status(self, session: Session) -> dict[str, int]:
        stmt = select(Equipment.status, func.count(Equipment.id)).group_by(Equipment.status)
        return {str(status): int(count) for status, count in session.execute(stmt).all()}

    def add_service_history(
        self,
        session: Session,
        *,
        equipment_id: int,
        service_date: date,
        technician: str,
        description: str | None,
        cost: str | None,
    ) -> ServiceHistory:
        entry = ServiceHistory(
            equipment_id=equipment_id,
            service_date=service_date,
            technician=technician,
            description=description,
            cost=cost,
        )
        session.add(entry)
        session.flush()
        return entry

    def list_service_history(self, session: Session, equipment_id: int | None = None) -> list[ServiceHistory]:
        stmt = select(ServiceHistory)
        if equipment_id is not None:
            stmt = stmt.where(ServiceHistory.equipment_id == equipment_id)
        stmt = stmt.order_by(ServiceHistory.service_date.desc(), ServiceHistory.id.desc())
        return list(session.execute(stmt).scalars())
