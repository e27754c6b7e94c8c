from __future__ import annotations

from datetime import date

from sqlalchemy import select
from sqlalchemy.orm import Session

from hms.infrastructure.db.models_sqlalchemy import IcuChart, IcuFluidEntry, IcuFluidTarget


class IcuRepository:
    def get_chart(self, session: Session, chart_id: int) -> IcuChart | None:
        stmt = select(IcuChart).where(IcuChart.id == chart_id)
        return session.execute(stmt).scalar_one_or_none()

    def create_chart(self, session: Session, *, patient_name: str, bed_number: str | None, chart_date: date) -> IcuChart:
        chart = IcuChart(patient_name=patient_name, bed_number=bed_number, chart_date=chart_date)
        session.add(chart)
        session.flush()
        return chart

    def add_fluid_entry(
        self,
        session: Session,
        *,
        chart_id: int,
        hour_slot: str,
        total_intake: str | None,
        total_output: str | None,
        recorded_by: int | None,
    ) -> IcuFluidEntry:
        entry = IcuFluidEntry(
            chart_id=chart_id,
            hour_slot=hour_slot,
            total_intake=total_intake,
            total_output=total_output,
            recorded_by=recorded_by,
        )
        session.add(entry)
        session.flush()
        return entry

    def list_fluid_entries(self, session: Session, chart_id: int) -> list[IcuFluidEntry]:
        stmt = (
            select(IcuFluidEntry)
            .where(IcuFluidEntry.chart_id == chart_id)
            .order_by(IcuFluidEntry.hour_slot, IcuFluidEntry.id)
        )
        return list(session.execute(stmt).scalars())

    def get_target(self, session: Session, chart_id: int) -> IcuFluidTarget | None:
        stmt = select(IcuFluidTarget).where(IcuFluidTarget.chart_id == chart_id)
        return session.execute(stmt).scalar_one_or_none()

    def upsert_target(
        self,
        session: Session,
        chart_id: int,
        *,
        target_intake: str | None,
        target_output: str | None,
        net_balance_goal: str | None,
    ) -> IcuFluidTarget:
        target = self.get_target(session, chart_id)
        if target is None:
            target = IcuFluidTarget(chart_id=chart_id)
            session.add(target)
        target.target_intake = target_intake
        target.target_output = target_output
        target.net_balance_goal = net_balance_goal
        session.flush()
        return target
