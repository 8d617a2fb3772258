"""Read-only talent data owned by upstream systems (signals, appraisal, goals)."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ninebox.database import Base
from ninebox.models.types import UUIDStr


class SignalSnapshot(Base):
    """Normalized behavioral signal (0-1) derived from feedback data."""

    __tablename__ = "talent_signal_snapshots"

    id: Mapped[str] = mapped_column(UUIDStr, primary_key=True)
    tenant_id: Mapped[str] = mapped_column(
        UUIDStr, ForeignKey("tenants.tenant_id"), nullable=False
    )
    employee_id: Mapped[str] = mapped_column(UUIDStr, nullable=False)
    signal_code: Mapped[str] = mapped_column(Text, nullable=False)
    signal_category: Mapped[str] = mapped_column(String(100), nullable=False)
    score: Mapped[float] = mapped_column(Float, nullable=False)
    confidence: Mapped[float] = mapped_column(Float, nullable=False)
    bias_risk_level: Mapped[str | None] = mapped_column(String(10), nullable=True)
    is_current: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    captured_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index("ix_signal_snapshots_employee_category", "tenant_id", "employee_id", "signal_category"),
    )


class SourceRecord(Base):
    """Raw source value on its native scale (appraisal score, goal progress, ...)."""

    __tablename__ = "talent_source_records"

    id: Mapped[str] = mapped_column(UUIDStr, primary_key=True)
    tenant_id: Mapped[str] = mapped_column(
        UUIDStr, ForeignKey("tenants.tenant_id"), nullable=False
    )
    employee_id: Mapped[str] = mapped_column(UUIDStr, nullable=False)
    source_type: Mapped[str] = mapped_column(String(100), nullable=False)
    value: Mapped[float] = mapped_column(Float, nullable=False)
    is_current: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    recorded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index("ix_source_records_employee_type", "tenant_id", "employee_id", "source_type"),
    )
