from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, relationship
from sqlalchemy.sql import expression

naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    # avoid constraint_name token to allow unnamed CheckConstraint
    "ck": "ck_%(table_name)s_%(column_0_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=naming_convention)


class Base(DeclarativeBase):
    metadata = metadata


def utc_now() -> datetime:
    return datetime.now(UTC)


class AuditLog(Base):
    __tablename__ = "audit_log"

    id = Column(Integer, primary_key=True)
    event_ts = Column(DateTime, nullable=False, default=utc_now)
    user_id = Column(Integer, nullable=True)
    entity_type = Column(String, nullable=False)
    entity_id = Column(String, nullable=False)
    action = Column(String, nullable=False)
    payload_json = Column(Text, nullable=True)


class Prescription(Base):
    __tablename__ = "prescriptions"

    id = Column(Integer, primary_key=True)
    patient_id = Column(String, nullable=False)
    patient_name = Column(String, nullable=False)
    doctor_id = Column(String, nullable=False)
    doctor_name = Column(String, nullable=False)
    diagnosis = Column(Text)
    instructions = Column(Text)
    prescription_date = Column(Date, nullable=False)
    follow_up_date = Column(Date)
    status = Column(String, nullable=False, default="draft")
    signed_by = Column(String)
    signed_at = Column(DateTime)
    created_at = Column(DateTime, nullable=False, default=utc_now)
    created_by = Column(Integer)

    items = relationship(
        "PrescriptionItem",
        back_populates="prescription",
        cascade="all, delete-orphan",
        order_by="PrescriptionItem.id",
    )

    __table_args__ = (
        CheckConstraint("status in ('draft','finalized')", name="ck_prescriptions_status"),
        Index("ix_prescriptions_patient_id_prescription_date", "patient_id", "prescription_date"),
    )


class PrescriptionItem(Base):
    __tablename__ = "prescription_items"

    id = Column(Integer, primary_key=True)
    prescription_id = Column(Integer, ForeignKey("prescriptions.id", ondelete="CASCADE"), nullable=False)
    medicine_name = Column(String, nullable=False)
    dosage_form = Column(String, nullable=False)
    strength = Column(String)
    frequency = Column(String, nullable=False)
    meal_timing = Column(String)
    duration = Column(Integer, nullable=False)
    duration_unit = Column(String, nullable=False)
    special_instructions = Column(Text)
    quantity = Column(Integer, nullable=False)

    prescription = relationship("Prescription", back_populates="items")

    __table_args__ = (
        CheckConstraint("duration_unit in ('days','weeks','months')", name="ck_prescription_items_duration_unit"),
    )


class Equipment(Base):
    __tablename__ = "equipment"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    model = Column(String)
    serial_number = Column(String, nullable=False, unique=True)
    location = Column(String)
    service_frequency = Column(String, nullable=False)
    last_service_date = Column(Date)
    next_due_date = Column(Date, nullable=False)
    status = Column(String, nullable=False)
    company_name = Column(String)
    contact_number = Column(String)
    created_at = Column(DateTime, nullable=False, default=utc_now)

    __table_args__ = (
        CheckConstraint(
            "service_frequency in ('monthly','quarterly','yearly')",
            name="ck_equipment_service_frequency",
        ),
        CheckConstraint("status in ('up-to-date','due-soon','overdue')", name="ck_equipment_status"),
        Index("ix_equipment_status_next_due_date", "status", "next_due_date"),
    )


class ServiceHistory(Base):
    __tablename__ = "service_history"

    id = Column(Integer, primary_key=True)
    equipment_id = Column(Integer, ForeignKey("equipment.id", ondelete="CASCADE"), nullable=False)
    service_date = Column(Date, nullable=False)
    technician = Column(String, nullable=False)
    description = Column(Text)
    cost = Column(String)
    created_at = Column(DateTime, nullable=False, default=utc_now)

    __table_args__ = (Index("ix_service_history_equipment_id_service_date", "equipment_id", "service_date"),)


class IcuChart(Base):
    __tablename__ = "icu_charts"

    id = Column(Integer, primary_key=True)
    patient_name = Column(String, nullable=False)
    bed_number = Column(String)
    chart_date = Column(Date, nullable=False)
    created_at = Column(DateTime, nullable=False, default=utc_now)


class IcuFluidEntry(Base):
    __tablename__ = "icu_fluid_entries"

    id = Column(Integer, primary_key=True)
    chart_id = Column(Integer, ForeignKey("icu_charts.id", ondelete="CASCADE"), nullable=False)
    hour_slot = Column(String, nullable=False)
    # Stored as entered; aggregation treats non-numeric text as 0.
    total_intake = Column(String)
    total_output = Column(String)
    recorded_by = Column(Integer)
    created_at = Column(DateTime, nullable=False, default=utc_now)

    __table_args__ = (Index("ix_icu_fluid_entries_chart_id_hour_slot", "chart_id", "hour_slot"),)


class IcuFluidTarget(Base):
    __tablename__ = "icu_fluid_targets"

    id = Column(Integer, primary_key=True)
    chart_id = Column(Integer, ForeignKey("icu_charts.id", ondelete="CASCADE"), nullable=False, unique=True)
    target_intake = Column(String)
    target_output = Column(String)
    net_balance_goal = Column(String)


class SwabArea(Base):
    __tablename__ = "swab_areas"

    id = Column(Integer, primary_key=True)
    block = Column(String, nullable=False)
    floor = Column(String, nullable=False)
    area_type = Column(String, nullable=False)
    area_name = Column(String, nullable=False)
    equipment = Column(String)
    is_active = Column(Boolean, nullable=False, server_default=expression.true())

    __table_args__ = (UniqueConstraint("block", "floor", "area_name", name="uq_swab_areas_location"),)


class SwabNumberSequence(Base):
    __tablename__ = "swab_number_sequence"

    id = Column(Integer, primary_key=True)
    seq_date = Column(Date, nullable=False)
    last_number = Column(Integer, nullable=False)

    __table_args__ = (UniqueConstraint("seq_date", name="uq_swab_number_sequence"),)


class SwabCollection(Base):
    __tablename__ = "swab_collections"

    id = Column(Integer, primary_key=True)
    swab_id = Column(String, nullable=False, unique=True)
    collection_date = Column(DateTime, nullable=False)
    area_type = Column(String, nullable=False)
    area_id = Column(Integer, ForeignKey("swab_areas.id"), nullable=False)
    sampling_site = Column(String, nullable=False)
    reason = Column(String, nullable=False)
    collected_by = Column(String, nullable=False)
    collected_by_name = Column(String)
    remarks = Column(Text)
    status = Column(String, nullable=False, default="pending")
    result_status = Column(String, CheckConstraint("result_status in ('PASS','ACCEPTABLE','FAIL')"))
    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, onupdate=utc_now)

    __table_args__ = (Index("ix_swab_collections_area_type_collection_date", "area_type", "collection_date"),)


class SwabLabResult(Base):
    __tablename__ = "swab_lab_results"

    id = Column(Integer, primary_key=True)
    swab_collection_id = Column(Integer, ForeignKey("swab_collections.id", ondelete="CASCADE"), nullable=False)
    culture_media = Column(String, nullable=False)
    organism = Column(String, nullable=False)
    cfu_count = Column(Integer)
    growth_level = Column(String, nullable=False)
    sensitivity_test = Column(Boolean, nullable=False, server_default=expression.false())
    sensitivity_details = Column(Text)
    result_date = Column(DateTime, nullable=False)
    processed_by = Column(String, nullable=False)
    remarks = Column(Text)
    created_at = Column(DateTime, nullable=False, default=utc_now)


class SwabCapaAction(Base):
    __tablename__ = "swab_capa_actions"

    id = Column(Integer, primary_key=True)
    swab_collection_id = Column(Integer, ForeignKey("swab_collections.id", ondelete="CASCADE"), nullable=False)
    issue_summary = Column(Text, nullable=False)
    root_cause = Column(Text)
    immediate_action = Column(Text, nullable=False)
    responsible_department = Column(String, nullable=False)
    target_closure_date = Column(Date, nullable=False)
    verification_swab_required = Column(Boolean, nullable=False, server_default=expression.true())
    status = Column(String, nullable=False, default="open")
    closed_by = Column(String)
    closed_at = Column(DateTime)
    closure_remarks = Column(Text)
    created_at = Column(DateTime, nullable=False, default=utc_now)

    __table_args__ = (
        CheckConstraint("status in ('open','in_progress','closed')", name="ck_swab_capa_actions_status"),
    )
