from __future__ import annotations

import json
import logging
from collections.abc import Callable
from datetime import UTC, date, datetime
from typing import cast

from sqlalchemy.exc import IntegrityError

from hms.application.dto.equipment_dto import (
    EquipmentCreateRequest,
    EquipmentResponse,
    ServiceHistoryResponse,
    ServiceRecordRequest,
)
from hms.application.errors import NotFoundError, ValidationError
from hms.domain.calculations.service_due import days_until, next_due_date, service_status
from hms.domain.constants import EquipmentStatus, ServiceFrequency
from hms.domain.rules.input_rules import InvalidInputError, require_one_of
from hms.infrastructure.db.models_sqlalchemy import Equipment, ServiceHistory
from hms.infrastructure.db.repositories.audit_repo import AuditLogRepository
from hms.infrastructure.db.repositories.equipment_repo import EquipmentRepository
from hms.infrastructure.db.session import session_scope


def _today() -> date:
    return datetime.now(UTC).date()


def _to_response(equipment: Equipment, today: date) -> EquipmentResponse:
    due = cast(date, equipment.next_due_date)
    return EquipmentResponse(
        id=cast(int, equipment.id),
        name=cast(str, equipment.name),
        model=cast(str | None, equipment.model),
        serial_number=cast(str, equipment.serial_number),
        location=cast(str | None, equipment.location),
        service_frequency=ServiceFrequency(cast(str, equipment.service_frequency)),
        last_service_date=cast(date | None, equipment.last_service_date),
        next_due_date=due,
        status=EquipmentStatus(cast(str, equipment.status)),
        days_until_due=days_until(due, today),
    )


def _history_to_response(entry: ServiceHistory) -> ServiceHistoryResponse:
    return ServiceHistoryResponse(
        id=cast(int, entry.id),
        equipment_id=cast(int, entry.equipment_id),
        service_date=cast(date, entry.service_date),
        technician=cast(str, entry.technician),
        description=cast(str | None, entry.description),
        cost=cast(str | None, entry.cost),
    )


class EquipmentService:
    def __init__(
        self,
        repo: EquipmentRepository | None = None,
        audit_repo: AuditLogRepository | None = None,
        session_factory: Callable = session_scope,
        clock: Callable[[], date] = _today,
    ) -> None:
        self.repo = repo or EquipmentRepository()
        self.audit_repo = audit_repo or AuditLogRepository()
        self.session_factory = session_factory
        self.clock = clock
        self._logger = logging.getLogger(__name__)

    def register(self, request: EquipmentCreateRequest, actor_id: int | None = None) -> EquipmentResponse:
        try:
            require_one_of("equipment", last_service_date=request.last_service_date, next_due_date=request.next_due_date)
        except InvalidInputError as exc:
            raise ValidationError(str(exc)) from exc
        due = request.next_due_date or next_due_date(request.last_service_date, request.service_frequency)
        due = cast(date, due)
        today = self.clock()
        status = service_status(due, today)
        with self.session_factory() as session:
            if self.repo.get_by_serial(session, request.serial_number):
                raise ValidationError(f"Serial number {request.serial_number} is already registered")
            try:
                equipment = self.repo.create(
                    session,
                    name=request.name,
                    model=request.model,
                    serial_number=request.serial_number,
                    location=request.location,
                    service_frequency=request.service_frequency.value,
                    last_service_date=request.last_service_date,
                    next_due_date=due,
                    status=status.value,
                    company_name=request.company_name,
                    contact_number=request.contact_number,
                )
            except IntegrityError as exc:
                raise ValidationError("Equipment could not be saved") from exc
            self.audit_repo.add_event(
                session,
                user_id=actor_id,
                entity_type="equipment",
                entity_id=str(cast(int, equipment.id)),
                action="register_equipment",
                payload_json=json.dumps({"serial_number": request.serial_number, "status": status.value}),
            )
            return _to_response(equipment, today)

    def record_service(self, request: ServiceRecordRequest, actor_id: int | None = None) -> ServiceHistoryResponse:
        today = self.clock()
        with self.session_factory() as session:
            equipment = self.repo.get(session, request.equipment_id)
            if not equipment:
                raise NotFoundError("Equipment not found")
            entry = self.repo.add_service_history(
                session,
                equipment_id=request.equipment_id,
                service_date=request.service_date,
                technician=request.technician,
                description=request.description,
                cost=request.cost,
            )
            due = cast(date, next_due_date(request.service_date, cast(str, equipment.service_frequency)))
            status = service_status(due, today)
            self.repo.update_schedule(
                session,
                request.equipment_id,
                last_service_date=request.service_date,
                next_due_date=due,
                status=status.value,
            )
            self.audit_repo.add_event(
                session,
                user_id=actor_id,
                entity_type="equipment",
                entity_id=str(request.equipment_id),
                action="record_service",
                payload_json=json.dumps(
                    {
                        "service_date": request.service_date.isoformat(),
                        "next_due_date": due.isoformat(),
                        "status": status.value,
                    }
                ),
            )
            self._logger.info(
                "Equipment %s serviced on %s, next due %s (%s)",
                request.equipment_id,
                request.service_date,
                due,
                status.value,
            )
            return _history_to_response(entry)

    def refresh_statuses(self, today: date | None = None) -> dict[str, int]:
        """Recompute every stored status for ``today``; returns the number of rows changed per new status."""
        today = today or self.clock()
        changed: dict[str, int] = {}
        with self.session_factory() as session:
            for equipment in self.repo.list_all(session):
                status = service_status(cast(date, equipment.next_due_date), today)
                if equipment.status == status:
                    continue
                self.repo.update_status(session, cast(int, equipment.id), status.value)
                changed[status.value] = changed.get(status.value, 0) + 1
        if changed:
            self._logger.info("Equipment statuses refreshed for %s: %s", today, changed)
        return changed

    def get(self, equipment_id: int) -> EquipmentResponse:
        with self.session_factory() as session:
            equipment = self.repo.get(session, equipment_id)
            if not equipment:
                raise NotFoundError("Equipment not found")
            return _to_response(equipment, self.clock())

    def list_equipment(self, today: date | None = None) -> list[EquipmentResponse]:
        today = today or self.clock()
        with self.session_factory() as session:
            return [_to_response(e, today) for e in self.repo.list_all(session)]

    def status_counts(self) -> dict[str, int]:
        with self.session_factory() as session:
            counts = self.repo.count_by_status(session)
        return {status.value: counts.get(status.value, 0) for status in EquipmentStatus}

    def list_history(self, equipment_id: int | None = None) -> list[ServiceHistoryResponse]:
        with self.session_factory() as session:
            return [_history_to_response(h) for h in self.repo.list_service_history(session, equipment_id)]
