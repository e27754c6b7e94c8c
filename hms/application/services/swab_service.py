from __future__ import annotations

import json
import logging
from collections.abc import Callable
from datetime import UTC, date, datetime, timedelta
from typing import cast

from sqlalchemy.orm import Session

from hms.application.dto.swab_dto import (
    CapaCloseRequest,
    CapaResponse,
    SwabAreaCreateRequest,
    SwabAreaResponse,
    SwabCollectionCreateRequest,
    SwabCollectionResponse,
    SwabLabResultRequest,
    SwabSummaryResponse,
)
from hms.application.errors import NotFoundError, ValidationError
from hms.domain.calculations.contamination import summarize
from hms.domain.constants import (
    CAPA_TARGET_CLOSURE_DAYS,
    GROWTH_RESULT_STATUS,
    AreaType,
    CapaStatus,
    SwabCollectionStatus,
    SwabResultStatus,
)
from hms.infrastructure.db.models_sqlalchemy import SwabArea, SwabCapaAction, SwabCollection
from hms.infrastructure.db.repositories.audit_repo import AuditLogRepository
from hms.infrastructure.db.repositories.swab_repo import SwabRepository
from hms.infrastructure.db.session import session_scope


def _format_swab_id(seq_date: datetime, seq: int) -> str:
    return f"SWB-{seq_date.strftime('%Y%m%d')}-{seq:04d}"


def _collection_to_response(collection: SwabCollection) -> SwabCollectionResponse:
    result_status = cast(str | None, collection.result_status)
    return SwabCollectionResponse(
        id=cast(int, collection.id),
        swab_id=cast(str, collection.swab_id),
        collection_date=cast(datetime, collection.collection_date),
        area_type=AreaType(cast(str, collection.area_type)),
        area_id=cast(int, collection.area_id),
        sampling_site=cast(str, collection.sampling_site),
        status=cast(str, collection.status),
        result_status=SwabResultStatus(result_status) if result_status else None,
    )


def _area_to_response(area: SwabArea) -> SwabAreaResponse:
    return SwabAreaResponse(
        id=cast(int, area.id),
        block=cast(str, area.block),
        floor=cast(str, area.floor),
        area_type=AreaType(cast(str, area.area_type)),
        area_name=cast(str, area.area_name),
        equipment=cast(str | None, area.equipment),
        is_active=bool(area.is_active),
    )


def _capa_to_response(capa: SwabCapaAction) -> CapaResponse:
    return CapaResponse(
        id=cast(int, capa.id),
        swab_collection_id=cast(int, capa.swab_collection_id),
        issue_summary=cast(str, capa.issue_summary),
        responsible_department=cast(str, capa.responsible_department),
        target_closure_date=cast(date, capa.target_closure_date),
        verification_swab_required=bool(capa.verification_swab_required),
        status=CapaStatus(cast(str, capa.status)),
    )


class SwabService:
    def __init__(
        self,
        repo: SwabRepository | None = None,
        audit_repo: AuditLogRepository | None = None,
        session_factory: Callable = session_scope,
    ) -> None:
        self.repo = repo or SwabRepository()
        self.audit_repo = audit_repo or AuditLogRepository()
        self.session_factory = session_factory
        self._logger = logging.getLogger(__name__)

    def create_area(self, request: SwabAreaCreateRequest) -> int:
        with self.session_factory() as session:
            area = self.repo.create_area(
                session,
                block=request.block,
                floor=request.floor,
                area_type=request.area_type.value,
                area_name=request.area_name,
                equipment=request.equipment,
            )
            return cast(int, area.id)

    def list_areas(self, area_type: str | None = None, active_only: bool = True) -> list[SwabAreaResponse]:
        with self.session_factory() as session:
            areas = self.repo.list_areas(session, area_type=area_type, active_only=active_only)
            return [_area_to_response(a) for a in areas]

    def create_collection(self, request: SwabCollectionCreateRequest, actor_id: int | None = None) -> SwabCollectionResponse:
        collection_date = request.collection_date or datetime.now(UTC)
        with self.session_factory() as session:
            area = self.repo.get_area(session, request.area_id)
            if not area:
                raise NotFoundError("Swab area not found")
            if not area.is_active:
                raise ValidationError(f"Area {area.area_name} is inactive")
            seq = self.repo.next_swab_number(session, collection_date)
            swab_id = _format_swab_id(collection_date, seq)
            collection = self.repo.create_collection(
                session,
                swab_id=swab_id,
                collection_date=collection_date,
                area_type=cast(str, area.area_type),
                area_id=request.area_id,
                sampling_site=request.sampling_site,
                reason=request.reason,
                collected_by=request.collected_by,
                collected_by_name=request.collected_by_name,
                remarks=request.remarks,
            )
            self.audit_repo.add_event(
                session,
                user_id=actor_id,
                entity_type="swab_collection",
                entity_id=str(cast(int, collection.id)),
                action="create_swab_collection",
                payload_json=json.dumps({"swab_id": swab_id}),
            )
            return _collection_to_response(collection)

    def record_lab_result(self, request: SwabLabResultRequest, actor_id: int | None = None) -> SwabCollectionResponse:
        result_date = request.result_date or datetime.now(UTC)
        result_status = GROWTH_RESULT_STATUS[request.growth_level]
        with self.session_factory() as session:
            collection = self.repo.get_collection(session, request.swab_collection_id)
            if not collection:
                raise NotFoundError("Swab collection not found")
            if collection.status == SwabCollectionStatus.COMPLETED:
                raise ValidationError(f"Result for {collection.swab_id} is already recorded")
            self.repo.add_lab_result(
                session,
                swab_collection_id=request.swab_collection_id,
                culture_media=request.culture_media,
                organism=request.organism,
                cfu_count=request.cfu_count,
                growth_level=request.growth_level.value,
                sensitivity_test=request.sensitivity_test,
                sensitivity_details=request.sensitivity_details,
                result_date=result_date,
                processed_by=request.processed_by,
                remarks=request.remarks,
            )
            self.repo.set_collection_result(
                session,
                request.swab_collection_id,
                status=SwabCollectionStatus.COMPLETED.value,
                result_status=result_status.value,
            )
            if result_status == SwabResultStatus.FAIL:
                self._open_capa(session, collection, request, result_date.date())
            self.audit_repo.add_event(
                session,
                user_id=actor_id,
                entity_type="swab_collection",
                entity_id=str(request.swab_collection_id),
                action="record_swab_result",
                payload_json=json.dumps(
                    {"growth_level": request.growth_level.value, "result_status": result_status.value}
                ),
            )
            session.refresh(collection)
            return _collection_to_response(collection)

    def _open_capa(
        self,
        session: Session,
        collection: SwabCollection,
        request: SwabLabResultRequest,
        result_day: date,
    ) -> SwabCapaAction:
        capa = self.repo.add_capa(
            session,
            swab_collection_id=cast(int, collection.id),
            issue_summary=(
                f"{collection.swab_id}: {request.growth_level.value} growth of {request.organism} "
                f"at {collection.sampling_site} ({collection.area_type})"
            ),
            immediate_action="Repeat terminal cleaning and disinfection of the area",
            responsible_department=cast(str, collection.area_type),
            target_closure_date=result_day + timedelta(days=CAPA_TARGET_CLOSURE_DAYS),
            verification_swab_required=True,
            status=CapaStatus.OPEN.value,
        )
        self._logger.warning("Swab %s failed; CAPA %s opened", collection.swab_id, capa.id)
        return capa

    def close_capa(self, capa_id: int, request: CapaCloseRequest, actor_id: int | None = None) -> CapaResponse:
        with self.session_factory() as session:
            capa = self.repo.get_capa(session, capa_id)
            if not capa:
                raise NotFoundError("CAPA action not found")
            if capa.status == CapaStatus.CLOSED:
                raise ValidationError("CAPA action is already closed")
            self.repo.close_capa(
                session,
                capa_id,
                closed_by=request.closed_by,
                closed_at=datetime.now(UTC),
                closure_remarks=request.closure_remarks,
            )
            self.audit_repo.add_event(
                session,
                user_id=actor_id,
                entity_type="swab_capa",
                entity_id=str(capa_id),
                action="close_capa",
                payload_json=json.dumps({"closed_by": request.closed_by}),
            )
            session.refresh(capa)
            return _capa_to_response(capa)

    def list_collections(
        self,
        area_type: str | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> list[SwabCollectionResponse]:
        with self.session_factory() as session:
            rows = self.repo.list_collections(session, area_type=area_type, date_from=date_from, date_to=date_to)
            return [_collection_to_response(c) for c in rows]

    def list_capa(self, open_only: bool = False) -> list[CapaResponse]:
        with self.session_factory() as session:
            return [_capa_to_response(c) for c in self.repo.list_capa(session, open_only=open_only)]

    def summary(self, date_from: date | None = None, date_to: date | None = None) -> SwabSummaryResponse:
        with self.session_factory() as session:
            collections = self.repo.list_collections(session, date_from=date_from, date_to=date_to)
            stats = summarize(collections)
            open_capa = len(self.repo.list_capa(session, open_only=True))
        return SwabSummaryResponse(
            total=stats["total"],
            passed=stats["pass"],
            acceptable=stats["acceptable"],
            failed=stats["fail"],
            pending=stats["pending"],
            open_capa=open_capa,
            ot_samples=stats["ot_samples"],
            icu_samples=stats["icu_samples"],
            ot_contamination_rate=stats["ot_contamination_rate"],
            icu_contamination_rate=stats["icu_contamination_rate"],
        )
