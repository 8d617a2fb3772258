"""Nine-box assessment and evidence audit models."""

from datetime import date, datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ninebox.database import Base
from ninebox.models.types import UUIDStr


class Assessment(Base):
    """One rating event for an employee. Historical rows are never deleted."""

    __tablename__ = "nine_box_assessments"

    id: Mapped[str] = mapped_column(UUIDStr, primary_key=True)
    tenant_id: Mapped[str] = mapped_column(
        UUIDStr, ForeignKey("tenants.tenant_id"), nullable=False
    )
    employee_id: Mapped[str] = mapped_column(UUIDStr, nullable=False)
    assessed_by: Mapped[str | None] = mapped_column(UUIDStr, nullable=True)
    assessment_date: Mapped[date] = mapped_column(Date, nullable=False)
    assessment_period: Mapped[str | None] = mapped_column(Text, nullable=True)
    performance_rating: Mapped[int] = mapped_column(Integer, nullable=False)
    potential_rating: Mapped[int] = mapped_column(Integer, nullable=False)
    performance_score: Mapped[float | None] = mapped_column(Float, nullable=True)
    potential_score: Mapped[float | None] = mapped_column(Float, nullable=True)
    performance_confidence: Mapped[float | None] = mapped_column(Float, nullable=True)
    potential_confidence: Mapped[float | None] = mapped_column(Float, nullable=True)
    performance_overridden: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    potential_overridden: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    performance_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    potential_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    overall_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    evidence_hash: Mapped[str | None] = mapped_column(String(64), nullable=True)
    is_current: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    evidence: Mapped[list["EvidenceRecord"]] = relationship(
        back_populates="assessment",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="raise",
    )

    __table_args__ = (
        CheckConstraint("performance_rating BETWEEN 1 AND 3", name="ck_assessments_performance"),
        CheckConstraint("potential_rating BETWEEN 1 AND 3", name="ck_assessments_potential"),
        # At most one current assessment per employee
        Index(
            "uq_assessments_current_employee",
            "tenant_id",
            "employee_id",
            unique=True,
            postgresql_where=text("is_current"),
            sqlite_where=text("is_current = 1"),
        ),
        Index("ix_assessments_employee_date", "tenant_id", "employee_id", "assessment_date"),
    )


class EvidenceRecord(Base):
    """Immutable snapshot of one source's contribution to an assessment."""

    __tablename__ = "nine_box_evidence_sources"

    id: Mapped[str] = mapped_column(UUIDStr, primary_key=True)
    assessment_id: Mapped[str] = mapped_column(
        UUIDStr,
        ForeignKey("nine_box_assessments.id", ondelete="CASCADE"),
        nullable=False,
    )
    axis: Mapped[str] = mapped_column(String(20), nullable=False)
    source_type: Mapped[str] = mapped_column(String(100), nullable=False)
    source_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    source_value: Mapped[float | None] = mapped_column(Float, nullable=True)
    weight_applied: Mapped[float | None] = mapped_column(Float, nullable=True)
    confidence_level: Mapped[float | None] = mapped_column(Float, nullable=True)
    contribution_summary: Mapped[str] = mapped_column(Text, nullable=False)
    ordinal: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    assessment: Mapped[Assessment] = relationship(back_populates="evidence")

    __table_args__ = (
        Index("ix_evidence_sources_assessment", "assessment_id"),
    )
