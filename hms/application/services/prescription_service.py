from __future__ import annotations

import json
import logging
from collections.abc import Callable
from datetime import UTC, date, datetime
from typing import Any, cast

from hms.application.dto.prescription_dto import (
    MedicineItemRequest,
    MedicineItemResponse,
    PrescriptionCreateRequest,
    PrescriptionResponse,
)
from hms.application.errors import NotFoundError, ValidationError
from hms.config import settings
from hms.domain.calculations.dosage import (
    frequency_label,
    medicine_summary,
    quantity,
    schedule_for_frequency,
)
from hms.domain.constants import PrescriptionStatus
from hms.domain.rules.input_rules import (
    InvalidInputError,
    parse_int_with_fallback,
    require_positive_int,
)
from hms.infrastructure.db.models_sqlalchemy import Prescription, PrescriptionItem
from hms.infrastructure.db.repositories.audit_repo import AuditLogRepository
from hms.infrastructure.db.repositories.prescription_repo import PrescriptionRepository
from hms.infrastructure.db.session import session_scope


def _item_to_response(item: PrescriptionItem) -> MedicineItemResponse:
    frequency = cast(str, item.frequency)
    return MedicineItemResponse(
        id=cast(int, item.id),
        medicine_name=cast(str, item.medicine_name),
        dosage_form=cast(str, item.dosage_form),
        strength=cast(str | None, item.strength),
        frequency=frequency,
        frequency_label=frequency_label(frequency),
        schedule=schedule_for_frequency(frequency),
        duration=cast(int, item.duration),
        duration_unit=cast(str, item.duration_unit),
        quantity=cast(int, item.quantity),
        summary=medicine_summary(
            cast(str, item.dosage_form),
            cast(str, item.medicine_name),
            cast(str | None, item.strength),
            frequency,
        ),
    )


def _to_response(prescription: Prescription) -> PrescriptionResponse:
    return PrescriptionResponse(
        id=cast(int, prescription.id),
        patient_id=cast(str, prescription.patient_id),
        patient_name=cast(str, prescription.patient_name),
        doctor_name=cast(str, prescription.doctor_name),
        prescription_date=cast(date, prescription.prescription_date),
        follow_up_date=cast(date | None, prescription.follow_up_date),
        status=PrescriptionStatus(cast(str, prescription.status)),
        signed_by=cast(str | None, prescription.signed_by),
        signed_at=cast(datetime | None, prescription.signed_at),
        items=[_item_to_response(item) for item in prescription.items],
    )


class PrescriptionService:
    def __init__(
        self,
        repo: PrescriptionRepository | None = None,
        audit_repo: AuditLogRepository | None = None,
        session_factory: Callable = session_scope,
        strict_input: bool | None = None,
    ) -> None:
        self.repo = repo or PrescriptionRepository()
        self.audit_repo = audit_repo or AuditLogRepository()
        self.session_factory = session_factory
        self.strict_input = settings.strict_numeric_input if strict_input is None else strict_input
        self._logger = logging.getLogger(__name__)

    def calculate_item(self, item: MedicineItemRequest) -> dict[str, Any]:
        try:
            if self.strict_input:
                duration = require_positive_int(item.duration, "duration")
            else:
                duration = parse_int_with_fallback(item.duration, default=1)
            qty = quantity(item.frequency, duration, item.duration_unit, strict=self.strict_input)
        except InvalidInputError as exc:
            raise ValidationError(f"{item.medicine_name}: {exc}") from exc
        if str(item.duration).strip() != str(duration):
            self._logger.debug("Duration %r for %s defaulted to %s", item.duration, item.medicine_name, duration)
        return {
            "medicine_name": item.medicine_name,
            "dosage_form": item.dosage_form,
            "strength": item.strength,
            "frequency": item.frequency,
            "meal_timing": item.meal_timing,
            "duration": duration,
            "duration_unit": item.duration_unit,
            "special_instructions": item.special_instructions,
            "quantity": qty,
        }

    def create_prescription(self, request: PrescriptionCreateRequest) -> PrescriptionResponse:
        if request.finalize and not request.items:
            raise ValidationError("Add at least one medicine before finalizing")
        items = [self.calculate_item(item) for item in request.items]
        status = PrescriptionStatus.DRAFT
        with self.session_factory() as session:
            prescription = self.repo.create(
                session,
                patient_id=request.patient_id,
                patient_name=request.patient_name,
                doctor_id=request.doctor_id,
                doctor_name=request.doctor_name,
                diagnosis=request.diagnosis,
                instructions=request.instructions,
                prescription_date=request.prescription_date or datetime.now(UTC).date(),
                follow_up_date=request.follow_up_date,
                status=status.value,
                created_by=request.created_by,
                items=items,
            )
            prescription_id = cast(int, prescription.id)
            self.audit_repo.add_event(
                session,
                user_id=request.created_by,
                entity_type="prescription",
                entity_id=str(prescription_id),
                action="create_prescription",
                payload_json=json.dumps(
                    {"patient_id": request.patient_id, "items": [i["medicine_name"] for i in items]}
                ),
            )
            if request.finalize:
                self._finalize(session, prescription_id, signed_by=request.doctor_id, actor_id=request.created_by)
                session.refresh(prescription)
            self._logger.info("Prescription %s created with %s item(s)", prescription_id, len(items))
            return _to_response(prescription)

    def finalize(self, prescription_id: int, signed_by: str, actor_id: int | None = None) -> PrescriptionResponse:
        with self.session_factory() as session:
            prescription = self.repo.get(session, prescription_id)
            if not prescription:
                raise NotFoundError("Prescription not found")
            if prescription.status == PrescriptionStatus.FINALIZED:
                raise ValidationError("Prescription is already finalized")
            if not prescription.items:
                raise ValidationError("Add at least one medicine before finalizing")
            self._finalize(session, prescription_id, signed_by=signed_by, actor_id=actor_id)
            session.refresh(prescription)
            return _to_response(prescription)

    def _finalize(self, session, prescription_id: int, *, signed_by: str, actor_id: int | None) -> None:
        self.repo.mark_finalized(session, prescription_id, signed_by=signed_by, signed_at=datetime.now(UTC))
        self.audit_repo.add_event(
            session,
            user_id=actor_id,
            entity_type="prescription",
            entity_id=str(prescription_id),
            action="finalize_prescription",
            payload_json=json.dumps({"signed_by": signed_by}),
        )

    def get(self, prescription_id: int) -> PrescriptionResponse:
        with self.session_factory() as session:
            prescription = self.repo.get(session, prescription_id)
            if not prescription:
                raise NotFoundError("Prescription not found")
            return _to_response(prescription)

    def list_by_patient(self, patient_id: str) -> list[PrescriptionResponse]:
        with self.session_factory() as session:
            return [_to_response(p) for p in self.repo.list_by_patient(session, patient_id)]
