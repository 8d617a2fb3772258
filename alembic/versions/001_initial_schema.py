"""Initial schema - tenants, rating sources, quadrant labels, talent data, assessments, evidence.

Revision ID: 001
Revises:
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "tenants",
        sa.Column("tenant_id", sa.UUID(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("api_key_hash", sa.String(255), unique=True, nullable=False),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False),
    )

    op.create_table(
        "nine_box_rating_sources",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("tenant_id", sa.UUID(), sa.ForeignKey("tenants.tenant_id"), nullable=False),
        sa.Column("axis", sa.String(20), nullable=False),
        sa.Column("source_type", sa.String(100), nullable=False),
        sa.Column("weight", sa.Float(), nullable=False),
        sa.Column("priority", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("minimum_confidence", sa.Float(), nullable=True),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.UniqueConstraint(
            "tenant_id", "axis", "source_type", name="uq_rating_sources_tenant_axis_type"
        ),
        sa.CheckConstraint("weight >= 0 AND weight <= 1", name="ck_rating_sources_weight"),
    )

    op.create_table(
        "nine_box_indicator_configs",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("tenant_id", sa.UUID(), sa.ForeignKey("tenants.tenant_id"), nullable=False),
        sa.Column("performance_level", sa.Integer(), nullable=False),
        sa.Column("potential_level", sa.Integer(), nullable=False),
        sa.Column("default_label", sa.Text(), nullable=False),
        sa.Column("custom_label", sa.Text(), nullable=True),
        sa.Column("use_custom_label", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("suggested_actions", JSONB(), nullable=False, server_default="[]"),
        sa.Column("color_code", sa.String(9), nullable=True),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.UniqueConstraint(
            "tenant_id",
            "performance_level",
            "potential_level",
            name="uq_indicator_configs_tenant_cell",
        ),
    )

    op.create_table(
        "talent_signal_snapshots",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("tenant_id", sa.UUID(), sa.ForeignKey("tenants.tenant_id"), nullable=False),
        sa.Column("employee_id", sa.UUID(), nullable=False),
        sa.Column("signal_code", sa.Text(), nullable=False),
        sa.Column("signal_category", sa.String(100), nullable=False),
        sa.Column("score", sa.Float(), nullable=False),
        sa.Column("confidence", sa.Float(), nullable=False),
        sa.Column("bias_risk_level", sa.String(10), nullable=True),
        sa.Column("is_current", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("captured_at", sa.TIMESTAMP(timezone=True), nullable=False),
    )
    op.create_index(
        "ix_signal_snapshots_employee_category",
        "talent_signal_snapshots",
        ["tenant_id", "employee_id", "signal_category"],
    )

    op.create_table(
        "talent_source_records",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("tenant_id", sa.UUID(), sa.ForeignKey("tenants.tenant_id"), nullable=False),
        sa.Column("employee_id", sa.UUID(), nullable=False),
        sa.Column("source_type", sa.String(100), nullable=False),
        sa.Column("value", sa.Float(), nullable=False),
        sa.Column("is_current", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("recorded_at", sa.TIMESTAMP(timezone=True), nullable=False),
    )
    op.create_index(
        "ix_source_records_employee_type",
        "talent_source_records",
        ["tenant_id", "employee_id", "source_type"],
    )

    op.create_table(
        "nine_box_assessments",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("tenant_id", sa.UUID(), sa.ForeignKey("tenants.tenant_id"), nullable=False),
        sa.Column("employee_id", sa.UUID(), nullable=False),
        sa.Column("assessed_by", sa.UUID(), nullable=True),
        sa.Column("assessment_date", sa.Date(), nullable=False),
        sa.Column("assessment_period", sa.Text(), nullable=True),
        sa.Column("performance_rating", sa.Integer(), nullable=False),
        sa.Column("potential_rating", sa.Integer(), nullable=False),
        sa.Column("performance_score", sa.Float(), nullable=True),
        sa.Column("potential_score", sa.Float(), nullable=True),
        sa.Column("performance_confidence", sa.Float(), nullable=True),
        sa.Column("potential_confidence", sa.Float(), nullable=True),
        sa.Column("performance_overridden", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("potential_overridden", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("performance_notes", sa.Text(), nullable=True),
        sa.Column("potential_notes", sa.Text(), nullable=True),
        sa.Column("overall_notes", sa.Text(), nullable=True),
        sa.Column("evidence_hash", sa.String(64), nullable=True),
        sa.Column("is_current", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.CheckConstraint("performance_rating BETWEEN 1 AND 3", name="ck_assessments_performance"),
        sa.CheckConstraint("potential_rating BETWEEN 1 AND 3", name="ck_assessments_potential"),
    )
    # Partial unique: at most one current assessment per employee
    op.create_index(
        "uq_assessments_current_employee",
        "nine_box_assessments",
        ["tenant_id", "employee_id"],
        unique=True,
        postgresql_where=sa.text("is_current"),
    )
    op.create_index(
        "ix_assessments_employee_date",
        "nine_box_assessments",
        ["tenant_id", "employee_id", "assessment_date"],
    )

    op.create_table(
        "nine_box_evidence_sources",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column(
            "assessment_id",
            sa.UUID(),
            sa.ForeignKey("nine_box_assessments.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("axis", sa.String(20), nullable=False),
        sa.Column("source_type", sa.String(100), nullable=False),
        sa.Column("source_id", sa.Text(), nullable=True),
        sa.Column("source_value", sa.Float(), nullable=True),
        sa.Column("weight_applied", sa.Float(), nullable=True),
        sa.Column("confidence_level", sa.Float(), nullable=True),
        sa.Column("contribution_summary", sa.Text(), nullable=False),
        sa.Column("ordinal", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False),
    )
    op.create_index(
        "ix_evidence_sources_assessment", "nine_box_evidence_sources", ["assessment_id"]
    )


def downgrade() -> None:
    op.drop_index("ix_evidence_sources_assessment", table_name="nine_box_evidence_sources")
    op.drop_table("nine_box_evidence_sources")
    op.drop_index("ix_assessments_employee_date", table_name="nine_box_assessments")
    op.drop_index("uq_assessments_current_employee", table_name="nine_box_assessments")
    op.drop_table("nine_box_assessments")
    op.drop_index("ix_source_records_employee_type", table_name="talent_source_records")
    op.drop_table("talent_source_records")
    op.drop_index("ix_signal_snapshots_employee_category", table_name="talent_signal_snapshots")
    op.drop_table("talent_signal_snapshots")
    op.drop_table("nine_box_indicator_configs")
    op.drop_table("nine_box_rating_sources")
    op.drop_table("tenants")
