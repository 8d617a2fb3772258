"""Per-signal mappings - route individual signals to an axis with their own weight.

Revision ID: 002
Revises: 001
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "nine_box_signal_mappings",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("tenant_id", sa.UUID(), sa.ForeignKey("tenants.tenant_id"), nullable=False),
        sa.Column("signal_code", sa.Text(), nullable=False),
        sa.Column("contributes_to", sa.String(20), nullable=False),
        sa.Column("weight", sa.Float(), nullable=False, server_default="1.0"),
        sa.Column("minimum_confidence", sa.Float(), nullable=False, server_default="0.6"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.UniqueConstraint("tenant_id", "signal_code", name="uq_signal_mappings_tenant_code"),
        sa.CheckConstraint("weight >= 0 AND weight <= 1", name="ck_signal_mappings_weight"),
        sa.CheckConstraint(
            "minimum_confidence >= 0 AND minimum_confidence <= 1",
            name="ck_signal_mappings_minimum_confidence",
        ),
    )


def downgrade() -> None:
    op.drop_table("nine_box_signal_mappings")
