"""Rating source mappings and quadrant label configuration."""

from datetime import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from ninebox.database import Base
from ninebox.models.types import JSONDoc, UUIDStr


class SourceMapping(Base):
    """Binds one raw source or signal category to an axis with a weight."""

    __tablename__ = "nine_box_rating_sources"

    id: Mapped[str] = mapped_column(UUIDStr, primary_key=True)
    tenant_id: Mapped[str] = mapped_column(
        UUIDStr, ForeignKey("tenants.tenant_id"), nullable=False
    )
    axis: Mapped[str] = mapped_column(String(20), nullable=False)  # performance|potential
    source_type: Mapped[str] = mapped_column(String(100), nullable=False)
    weight: Mapped[float] = mapped_column(Float, nullable=False)
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    # Signal sources only
    minimum_confidence: Mapped[float | None] = mapped_column(Float, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        UniqueConstraint("tenant_id", "axis", "source_type", name="uq_rating_sources_tenant_axis_type"),
        CheckConstraint("weight >= 0 AND weight <= 1", name="ck_rating_sources_weight"),
    )


class QuadrantLabel(Base):
    """Display label, color and suggested actions for one grid cell."""

    __tablename__ = "nine_box_indicator_configs"

    id: Mapped[str] = mapped_column(UUIDStr, primary_key=True)
    tenant_id: Mapped[str] = mapped_column(
        UUIDStr, ForeignKey("tenants.tenant_id"), nullable=False
    )
    performance_level: Mapped[int] = mapped_column(Integer, nullable=False)
    potential_level: Mapped[int] = mapped_column(Integer, nullable=False)
    default_label: Mapped[str] = mapped_column(Text, nullable=False)
    custom_label: Mapped[str | None] = mapped_column(Text, nullable=True)
    use_custom_label: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    suggested_actions: Mapped[list] = mapped_column(JSONDoc, nullable=False, default=list)
    color_code: Mapped[str | None] = mapped_column(String(9), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        UniqueConstraint(
            "tenant_id",
            "performance_level",
            "potential_level",
            name="uq_indicator_configs_tenant_cell",
        ),
    )

    @property
    def display_label(self) -> str:
        if self.use_custom_label and self.custom_label:
            return self.custom_label
        return self.default_label


class SignalMapping(Base):
    """Routes one signal definition to an axis (or both) with its own weight and threshold."""

    __tablename__ = "nine_box_signal_mappings"

    id: Mapped[str] = mapped_column(UUIDStr, primary_key=True)
    tenant_id: Mapped[str] = mapped_column(
        UUIDStr, ForeignKey("tenants.tenant_id"), nullable=False
    )
    signal_code: Mapped[str] = mapped_column(Text, nullable=False)
    # performance|potential|both
    contributes_to: Mapped[str] = mapped_column(String(20), nullable=False)
    weight: Mapped[float] = mapped_column(Float, nullable=False, default=1.0)
    minimum_confidence: Mapped[float] = mapped_column(Float, nullable=False, default=0.6)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        UniqueConstraint("tenant_id", "signal_code", name="uq_signal_mappings_tenant_code"),
        CheckConstraint("weight >= 0 AND weight <= 1", name="ck_signal_mappings_weight"),
        CheckConstraint(
            "minimum_confidence >= 0 AND minimum_confidence <= 1",
            name="ck_signal_mappings_minimum_confidence",
        ),
    )
