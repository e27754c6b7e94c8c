from __future__ import annotations

import json
from collections.abc import Callable
from typing import cast

from hms.application.dto.icu_dto import (
    FluidBalanceResponse,
    FluidEntryRequest,
    FluidTargetRequest,
    IcuChartCreateRequest,
)
from hms.application.errors import NotFoundError
from hms.domain.calculations.fluid_balance import aggregate
from hms.infrastructure.db.repositories.audit_repo import AuditLogRepository
from hms.infrastructure.db.repositories.icu_repo import IcuRepository
from hms.infrastructure.db.session import session_scope


class IcuService:
    def __init__(
        self,
        repo: IcuRepository | None = None,
        audit_repo: AuditLogRepository | None = None,
        session_factory: Callable = session_scope,
    ) -> None:
        self.repo = repo or IcuRepository()
        self.audit_repo = audit_repo or AuditLogRepository()
        self.session_factory = session_factory

    def create_chart(self, request: IcuChartCreateRequest, actor_id: int | None = None) -> int:
        with self.session_factory() as session:
            chart = self.repo.create_chart(
                session,
                patient_name=request.patient_name,
                bed_number=request.bed_number,
                chart_date=request.chart_date,
            )
            chart_id = cast(int, chart.id)
            self.audit_repo.add_event(
                session,
                user_id=actor_id,
                entity_type="icu_chart",
                entity_id=str(chart_id),
                action="create_icu_chart",
                payload_json=json.dumps({"bed_number": request.bed_number}),
            )
            return chart_id

    def add_fluid_entry(self, chart_id: int, request: FluidEntryRequest) -> int:
        with self.session_factory() as session:
            if not self.repo.get_chart(session, chart_id):
                raise NotFoundError("ICU chart not found")
            entry = self.repo.add_fluid_entry(
                session,
                chart_id=chart_id,
                hour_slot=request.hour_slot,
                total_intake=request.total_intake,
                total_output=request.total_output,
                recorded_by=request.recorded_by,
            )
            self.audit_repo.add_event(
                session,
                user_id=request.recorded_by,
                entity_type="icu_chart",
                entity_id=str(chart_id),
                action="add_fluid_entry",
                payload_json=json.dumps(
                    {
                        "hour_slot": request.hour_slot,
                        "total_intake": request.total_intake,
                        "total_output": request.total_output,
                    }
                ),
            )
            return cast(int, entry.id)

    def set_target(self, chart_id: int, request: FluidTargetRequest, actor_id: int | None = None) -> None:
        with self.session_factory() as session:
            if not self.repo.get_chart(session, chart_id):
                raise NotFoundError("ICU chart not found")
            self.repo.upsert_target(
                session,
                chart_id,
                target_intake=request.target_intake,
                target_output=request.target_output,
                net_balance_goal=request.net_balance_goal,
            )
            self.audit_repo.add_event(
                session,
                user_id=actor_id,
                entity_type="icu_chart",
                entity_id=str(chart_id),
                action="set_fluid_target",
                payload_json=request.model_dump_json(),
            )

    def fluid_balance(self, chart_id: int) -> FluidBalanceResponse:
        with self.session_factory() as session:
            if not self.repo.get_chart(session, chart_id):
                raise NotFoundError("ICU chart not found")
            entries = self.repo.list_fluid_entries(session, chart_id)
            target = self.repo.get_target(session, chart_id)
            balance = aggregate(entries)
            return FluidBalanceResponse(
                chart_id=chart_id,
                entry_count=len(entries),
                total_intake=balance.total_intake,
                total_output=balance.total_output,
                net_balance=balance.net_balance,
                target=(
                    FluidTargetRequest(
                        target_intake=cast(str | None, target.target_intake),
                        target_output=cast(str | None, target.target_output),
                        net_balance_goal=cast(str | None, target.net_balance_goal),
                    )
                    if target
                    else None
                ),
            )
