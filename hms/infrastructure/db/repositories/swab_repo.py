from __future__ import annotations

from datetime import date, datetime
from typing import Any, cast

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from hms.infrastructure.db.models_sqlalchemy import (
    SwabArea,
    SwabCapaAction,
    SwabCollection,
    SwabLabResult,
    SwabNumberSequence,
)


class SwabRepository:
    def create_area(
        self,
        session: Session,
        *,
        block: str,
        floor: str,
        area_type: str,
        area_name: str,
        equipment: str | None,
    ) -> SwabArea:
        area = SwabArea(block=block, floor=floor, area_type=area_type, area_name=area_name, equipment=equipment)
        session.add(area)
        session.flush()
        return area

    def get_area(self, session: Session, area_id: int) -> SwabArea | None:
        return session.execute(select(SwabArea).where(SwabArea.id == area_id)).scalar_one_or_none()

    def list_areas(self, session: Session, area_type: str | None = None, active_only: bool = True) -> list[SwabArea]:
        stmt = select(SwabArea)
        if area_type:
            stmt = stmt.where(SwabArea.area_type == area_type)
        if active_only:
            stmt = stmt.where(SwabArea.is_active.is_(True))
        return list(session.execute(stmt.order_by(SwabArea.block, SwabArea.floor, SwabArea.area_name)).scalars())

    def next_swab_number(self, session: Session, seq_date: datetime) -> int:
        seq_day = seq_date.date()
        stmt = select(SwabNumberSequence).where(SwabNumberSequence.seq_date == seq_day)
        seq = session.execute(stmt).scalar_one_or_none()
        if seq is None:
            seq = SwabNumberSequence(seq_date=seq_day, last_number=1)
            session.add(seq)
            session.flush()
            return cast(int, cast(Any, seq).last_number)
        seq_obj = cast(Any, seq)
        seq_obj.last_number = cast(int, seq_obj.last_number) + 1
        session.flush()
        return cast(int, seq_obj.last_number)

    def create_collection(
        self,
        session: Session,
        *,
        swab_id: str,
        collection_date: datetime,
        area_type: str,
        area_id: int,
        sampling_site: str,
        reason: str,
        collected_by: str,
        collected_by_name: str | None,
        remarks: str | None,
    ) -> SwabCollection:
        collection = SwabCollection(
            swab_id=swab_id,
            collection_date=collection_date,
            area_type=area_type,
            area_id=area_id,
            sampling_site=sampling_site,
            reason=reason,
            collected_by=collected_by,
            collected_by_name=collected_by_name,
            remarks=remarks,
            status="pending",
        )
        session.add(collection)
        session.flush()
        return collection

    def get_collection(self, session: Session, collection_id: int) -> SwabCollection | None:
        stmt = select(SwabCollection).where(SwabCollection.id == collection_id)
        return session.execute(stmt).scalar_one_or_none()

    def list_collections(
        self,
        session: Session,
        *,
        area_type: str | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> list[SwabCollection]:
        stmt = select(SwabCollection)
        if area_type:
            stmt = stmt.where(SwabCollection.area_type == area_type)
        if date_from:
            stmt = stmt.where(SwabCollection.collection_date >= datetime.combine(date_from, datetime.min.time()))
        if date_to:
            stmt = stmt.where(SwabCollection.collection_date <= datetime.combine(date_to, datetime.max.time()))
        stmt = stmt.order_by(SwabCollection.collection_date.desc(), SwabCollection.id.desc())
        return list(session.execute(stmt).scalars())

    def set_collection_result(self, session: Session, collection_id: int, *, status: str, result_status: str) -> None:
        stmt = (
            update(SwabCollection)
            .where(SwabCollection.id == collection_id)
            .values(status=status, result_status=result_status)
        )
        session.execute(stmt)

    def add_lab_result(self, session: Session, **values: Any) -> SwabLabResult:
        result = SwabLabResult(**values)
        session.add(result)
        session.flush()
        return result

    def add_capa(self, session: Session, **values: Any) -> SwabCapaAction:
        capa = SwabCapaAction(**values)
        session.add(capa)
        session.flush()
        return capa

    def get_capa(self, session: Session, capa_id: int) -> SwabCapaAction | None:
        return session.execute(select(SwabCapaAction).where(SwabCapaAction.id == capa_id)).scalar_one_or_none()

    def list_capa(self, session: Session, open_only: bool = False) -> list[SwabCapaAction]:
        stmt = select(SwabCapaAction)
        if open_only:
            stmt = stmt.where(SwabCapaAction.status != "closed")
        return list(session.execute(stmt.order_by(SwabCapaAction.target_closure_date, SwabCapaAction.id)).scalars())

    def close_capa(
        self,
        session: Session,
        capa_id: int,
        *,
        closed_by: str,
        closed_at: datetime,
        closure_remarks: str | None,
    ) -> None:
        stmt = (
            update(SwabCapaAction)
            .where(SwabCapaAction.id == capa_id)
            .values(status="closed", closed_by=closed_by, closed_at=closed_at, closure_remarks=closure_remarks)
        )
        session.execute(stmt)
