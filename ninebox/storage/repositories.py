"""Repository functions for assessments and evidence."""

from collections import defaultdict
from datetime import date, datetime, timezone
from uuid import uuid4

from sqlalchemy import delete, select, text
from sqlalchemy.ext.asyncio import AsyncSession

from ninebox.models import Assessment, EvidenceRecord


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


async def lock_employee(db: AsyncSession, tenant_id: str, employee_id: str) -> None:
    """
    Serialize writers for one (tenant, employee) until the transaction ends.

    PostgreSQL only: takes a transaction-scoped advisory lock so two first
    saves cannot both observe "no current assessment". Other backends rely on
    the partial unique index.
    """
    if db.get_bind().dialect.name != "postgresql":
        return
    await db.execute(
        text("SELECT pg_advisory_xact_lock(hashtextextended(:key, 0))"),
        {"key": f"nine_box:{tenant_id}:{employee_id}"},
    )


async def get_current_assessments(
    db: AsyncSession, tenant_id: str, employee_id: str, for_update: bool = False
) -> list[Assessment]:
    """Current assessment rows for an employee (more than one is an integrity bug)."""
    query = select(Assessment).where(
        Assessment.tenant_id == tenant_id,
        Assessment.employee_id == employee_id,
        Assessment.is_current.is_(True),
    )
    if for_update:
        query = query.with_for_update()
    result = await db.execute(query)
    return list(result.scalars().all())


async def get_assessment_by_id(
    db: AsyncSession, assessment_id: str, tenant_id: str
) -> Assessment | None:
    """Get assessment by ID (tenant-scoped)."""
    result = await db.execute(
        select(Assessment).where(
            Assessment.id == assessment_id,
            Assessment.tenant_id == tenant_id,
        )
    )
    return result.scalar_one_or_none()


async def list_assessments(
    db: AsyncSession, tenant_id: str, employee_id: str
) -> list[Assessment]:
    """All assessments for an employee, newest assessment date first."""
    result = await db.execute(
        select(Assessment)
        .where(
            Assessment.tenant_id == tenant_id,
            Assessment.employee_id == employee_id,
        )
        .order_by(Assessment.assessment_date.desc(), Assessment.created_at.desc())
    )
    return list(result.scalars().all())


async def list_current_assessments(db: AsyncSession, tenant_id: str) -> list[Assessment]:
    """Current placement of every assessed employee in the tenant."""
    result = await db.execute(
        select(Assessment)
        .where(
            Assessment.tenant_id == tenant_id,
            Assessment.is_current.is_(True),
        )
        .order_by(Assessment.assessment_date.desc())
    )
    return list(result.scalars().all())


async def create_assessment(
    db: AsyncSession,
    tenant_id: str,
    employee_id: str,
    performance_rating: int,
    potential_rating: int,
    assessment_date: date,
    **fields,
) -> Assessment:
    """Insert a new current assessment row."""
    now = now_utc()
    assessment = Assessment(
        id=str(uuid4()),
        tenant_id=tenant_id,
        employee_id=employee_id,
        performance_rating=performance_rating,
        potential_rating=potential_rating,
        assessment_date=assessment_date,
        is_current=True,
        created_at=now,
        updated_at=now,
        **fields,
    )
    db.add(assessment)
    await db.flush()
    return assessment


async def delete_evidence(db: AsyncSession, assessment_id: str) -> int:
    """Remove every evidence row of an assessment. Returns the number deleted."""
    result = await db.execute(
        delete(EvidenceRecord).where(EvidenceRecord.assessment_id == assessment_id)
    )
    return result.rowcount or 0


async def list_evidence(db: AsyncSession, assessment_id: str) -> list[EvidenceRecord]:
    """Evidence of one assessment ordered by axis, then creation time."""
    result = await db.execute(
        select(EvidenceRecord)
        .where(EvidenceRecord.assessment_id == assessment_id)
        .order_by(EvidenceRecord.axis, EvidenceRecord.created_at, EvidenceRecord.ordinal)
    )
    return list(result.scalars().all())


async def list_evidence_for(
    db: AsyncSession, assessment_ids: list[str]
) -> dict[str, list[EvidenceRecord]]:
    """Evidence for several assessments, grouped by assessment id."""
    grouped: dict[str, list[EvidenceRecord]] = defaultdict(list)
    if not assessment_ids:
        return grouped
    result = await db.execute(
        select(EvidenceRecord)
        .where(EvidenceRecord.assessment_id.in_(assessment_ids))
        .order_by(EvidenceRecord.axis, EvidenceRecord.created_at, EvidenceRecord.ordinal)
    )
    for record in result.scalars():
        grouped[str(record.assessment_id)].append(record)
    return grouped
