from __future__ import annotations

from datetime import date

import pytest

from hms.application.dto.prescription_dto import MedicineItemRequest, PrescriptionCreateRequest
from hms.application.errors import NotFoundError, ValidationError
from hms.application.services.prescription_service import PrescriptionService
from hms.domain.constants import PrescriptionStatus
from hms.infrastructure.db.repositories.audit_repo import AuditLogRepository


def _request(items: list[MedicineItemRequest], *, finalize: bool = False) -> PrescriptionCreateRequest:
    return PrescriptionCreateRequest(
        patient_id="P-0001",
        patient_name="Ayesha Rahman",
        doctor_id="D-17",
        doctor_name="Dr. Karim",
        diagnosis="Acute pharyngitis",
        prescription_date=date(2025, 3, 4),
        items=items,
        finalize=finalize,
    )


def test_create_prescription_computes_quantities(session_factory) -> None:
    service = PrescriptionService(session_factory=session_factory, strict_input=False)
    resp = service.create_prescription(
        _request(
            [
                MedicineItemRequest(medicine_name="Paracetamol", strength="500mg", frequency="2", duration=5),
                MedicineItemRequest(
                    medicine_name="Amoxicillin", dosage_form="Cap", frequency="3", duration="2", duration_unit="weeks"
                ),
                MedicineItemRequest(medicine_name="Cetirizine", frequency="1", duration=""),
            ]
        )
    )

    assert resp.status == PrescriptionStatus.DRAFT
    assert [item.quantity for item in resp.items] == [10, 42, 1]
    assert resp.items[0].schedule == ["Morning", "Night"]
    assert resp.items[0].summary == "Tab Paracetamol 500mg - Twice daily"
    assert resp.items[1].frequency_label == "Three times daily"
    assert resp.items[2].duration == 1

    with session_factory() as session:
        events = AuditLogRepository().list_for_entity(session, "prescription", str(resp.id))
    assert [event.action for event in events] == ["create_prescription"]


def test_strict_input_rejects_blank_duration(session_factory) -> None:
    service = PrescriptionService(session_factory=session_factory, strict_input=True)
    with pytest.raises(ValidationError, match="Cetirizine"):
        service.create_prescription(_request([MedicineItemRequest(medicine_name="Cetirizine", duration="")]))
    assert service.list_by_patient("P-0001") == []


def test_finalize_flow(session_factory) -> None:
    service = PrescriptionService(session_factory=session_factory, strict_input=False)
    with pytest.raises(ValidationError):
        service.create_prescription(_request([], finalize=True))

    empty = service.create_prescription(_request([]))
    with pytest.raises(ValidationError, match="at least one medicine"):
        service.finalize(empty.id, signed_by="D-17")

    draft = service.create_prescription(_request([MedicineItemRequest(medicine_name="Ibuprofen", frequency="3")]))
    final = service.finalize(draft.id, signed_by="D-17")
    assert final.status == PrescriptionStatus.FINALIZED
    assert final.signed_by == "D-17"
    assert final.signed_at is not None

    with pytest.raises(ValidationError, match="already finalized"):
        service.finalize(draft.id, signed_by="D-17")
    with pytest.raises(NotFoundError):
        service.finalize(9999, signed_by="D-17")

    signed_now = service.create_prescription(
        _request([MedicineItemRequest(medicine_name="Omeprazole", duration=1, duration_unit="months")], finalize=True)
    )
    assert signed_now.status == PrescriptionStatus.FINALIZED
    assert signed_now.items[0].quantity == 30
    assert len(service.list_by_patient("P-0001")) == 3


def test_numeric_frequency_code_is_accepted(session_factory) -> None:
    item = MedicineItemRequest(medicine_name="Metformin", strength="500mg", frequency=2, duration=7)
    assert item.frequency == "2"

    service = PrescriptionService(session_factory=session_factory, strict_input=True)
    resp = service.create_prescription(_request([item]))
    assert resp.items[0].quantity == 14
    assert resp.items[0].schedule == ["Morning", "Night"]
