"""Clinical rules schema: prescriptions, equipment, ICU fluid charting, swab monitoring"""
from __future__ import annotations

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "audit_log",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("event_ts", sa.DateTime(), nullable=False),
        sa.Column("user_id", sa.Integer()),
        sa.Column("entity_type", sa.String(), nullable=False),
        sa.Column("entity_id", sa.String(), nullable=False),
        sa.Column("action", sa.String(), nullable=False),
        sa.Column("payload_json", sa.Text()),
    )

    op.create_table(
        "prescriptions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("patient_id", sa.String(), nullable=False),
        sa.Column("patient_name", sa.String(), nullable=False),
        sa.Column("doctor_id", sa.String(), nullable=False),
        sa.Column("doctor_name", sa.String(), nullable=False),
        sa.Column("diagnosis", sa.Text()),
        sa.Column("instructions", sa.Text()),
        sa.Column("prescription_date", sa.Date(), nullable=False),
        sa.Column("follow_up_date", sa.Date()),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("signed_by", sa.String()),
        sa.Column("signed_at", sa.DateTime()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("created_by", sa.Integer()),
        sa.CheckConstraint("status in ('draft','finalized')", name="ck_prescriptions_status"),
    )
    op.create_index(
        "ix_prescriptions_patient_id_prescription_date",
        "prescriptions",
        ["patient_id", "prescription_date"],
        unique=False,
    )

    op.create_table(
        "prescription_items",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "prescription_id",
            sa.Integer(),
            sa.ForeignKey("prescriptions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("medicine_name", sa.String(), nullable=False),
        sa.Column("dosage_form", sa.String(), nullable=False),
        sa.Column("strength", sa.String()),
        sa.Column("frequency", sa.String(), nullable=False),
        sa.Column("meal_timing", sa.String()),
        sa.Column("duration", sa.Integer(), nullable=False),
        sa.Column("duration_unit", sa.String(), nullable=False),
        sa.Column("special_instructions", sa.Text()),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.CheckConstraint(
            "duration_unit in ('days','weeks','months')", name="ck_prescription_items_duration_unit"
        ),
    )

    op.create_table(
        "equipment",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("model", sa.String()),
        sa.Column("serial_number", sa.String(), nullable=False, unique=True),
        sa.Column("location", sa.String()),
        sa.Column("service_frequency", sa.String(), nullable=False),
        sa.Column("last_service_date", sa.Date()),
        sa.Column("next_due_date", sa.Date(), nullable=False),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("company_name", sa.String()),
        sa.Column("contact_number", sa.String()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint(
            "service_frequency in ('monthly','quarterly','yearly')", name="ck_equipment_service_frequency"
        ),
        sa.CheckConstraint("status in ('up-to-date','due-soon','overdue')", name="ck_equipment_status"),
    )
    op.create_index("ix_equipment_status_next_due_date", "equipment", ["status", "next_due_date"], unique=False)

    op.create_table(
        "service_history",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("equipment_id", sa.Integer(), sa.ForeignKey("equipment.id", ondelete="CASCADE"), nullable=False),
        sa.Column("service_date", sa.Date(), nullable=False),
        sa.Column("technician", sa.String(), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("cost", sa.String()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index(
        "ix_service_history_equipment_id_service_date",
        "service_history",
        ["equipment_id", "service_date"],
        unique=False,
    )

    op.create_table(
        "icu_charts",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("patient_name", sa.String(), nullable=False),
        sa.Column("bed_number", sa.String()),
        sa.Column("chart_date", sa.Date(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )

    op.create_table(
        "icu_fluid_entries",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("chart_id", sa.Integer(), sa.ForeignKey("icu_charts.id", ondelete="CASCADE"), nullable=False),
        sa.Column("hour_slot", sa.String(), nullable=False),
        sa.Column("total_intake", sa.String()),
        sa.Column("total_output", sa.String()),
        sa.Column("recorded_by", sa.Integer()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index(
        "ix_icu_fluid_entries_chart_id_hour_slot", "icu_fluid_entries", ["chart_id", "hour_slot"], unique=False
    )

    op.create_table(
        "icu_fluid_targets",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "chart_id",
            sa.Integer(),
            sa.ForeignKey("icu_charts.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("target_intake", sa.String()),
        sa.Column("target_output", sa.String()),
        sa.Column("net_balance_goal", sa.String()),
    )

    op.create_table(
        "swab_areas",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("block", sa.String(), nullable=False),
        sa.Column("floor", sa.String(), nullable=False),
        sa.Column("area_type", sa.String(), nullable=False),
        sa.Column("area_name", sa.String(), nullable=False),
        sa.Column("equipment", sa.String()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.UniqueConstraint("block", "floor", "area_name", name="uq_swab_areas_location"),
    )

    op.create_table(
        "swab_number_sequence",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("seq_date", sa.Date(), nullable=False),
        sa.Column("last_number", sa.Integer(), nullable=False),
        sa.UniqueConstraint("seq_date", name="uq_swab_number_sequence"),
    )

    op.create_table(
        "swab_collections",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("swab_id", sa.String(), nullable=False, unique=True),
        sa.Column("collection_date", sa.DateTime(), nullable=False),
        sa.Column("area_type", sa.String(), nullable=False),
        sa.Column("area_id", sa.Integer(), sa.ForeignKey("swab_areas.id"), nullable=False),
        sa.Column("sampling_site", sa.String(), nullable=False),
        sa.Column("reason", sa.String(), nullable=False),
        sa.Column("collected_by", sa.String(), nullable=False),
        sa.Column("collected_by_name", sa.String()),
        sa.Column("remarks", sa.Text()),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column(
            "result_status",
            sa.String(),
            sa.CheckConstraint("result_status in ('PASS','ACCEPTABLE','FAIL')"),
        ),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime()),
    )
    op.create_index(
        "ix_swab_collections_area_type_collection_date",
        "swab_collections",
        ["area_type", "collection_date"],
        unique=False,
    )

    op.create_table(
        "swab_lab_results",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "swab_collection_id",
            sa.Integer(),
            sa.ForeignKey("swab_collections.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("culture_media", sa.String(), nullable=False),
        sa.Column("organism", sa.String(), nullable=False),
        sa.Column("cfu_count", sa.Integer()),
        sa.Column("growth_level", sa.String(), nullable=False),
        sa.Column("sensitivity_test", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("sensitivity_details", sa.Text()),
        sa.Column("result_date", sa.DateTime(), nullable=False),
        sa.Column("processed_by", sa.String(), nullable=False),
        sa.Column("remarks", sa.Text()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )

    op.create_table(
        "swab_capa_actions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "swab_collection_id",
            sa.Integer(),
            sa.ForeignKey("swab_collections.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("issue_summary", sa.Text(), nullable=False),
        sa.Column("root_cause", sa.Text()),
        sa.Column("immediate_action", sa.Text(), nullable=False),
        sa.Column("responsible_department", sa.String(), nullable=False),
        sa.Column("target_closure_date", sa.Date(), nullable=False),
        sa.Column("verification_swab_required", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("closed_by", sa.String()),
        sa.Column("closed_at", sa.DateTime()),
        sa.Column("closure_remarks", sa.Text()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("status in ('open','in_progress','closed')", name="ck_swab_capa_actions_status"),
    )


def downgrade() -> None:
    op.drop_table("swab_capa_actions")
    op.drop_table("swab_lab_results")
    op.drop_index("ix_swab_collections_area_type_collection_date", table_name="swab_collections")
    op.drop_table("swab_collections")
    op.drop_table("swab_number_sequence")
    op.drop_table("swab_areas")
    op.drop_table("icu_fluid_targets")
    op.drop_index("ix_icu_fluid_entries_chart_id_hour_slot", table_name="icu_fluid_entries")
    op.drop_table("icu_fluid_entries")
    op.drop_table("icu_charts")
    op.drop_index("ix_service_history_equipment_id_service_date", table_name="service_history")
    op.drop_table("service_history")
    op.drop_index("ix_equipment_status_next_due_date", table_name="equipment")
    op.drop_table("equipment")
    op.drop_table("prescription_items")
    op.drop_index("ix_prescriptions_patient_id_prescription_date", table_name="prescriptions")
    op.drop_table("prescriptions")
    op.drop_table("audit_log")
