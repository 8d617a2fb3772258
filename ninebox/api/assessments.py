"""Nine-box assessment endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ninebox.auth.middleware import TenantDep
from ninebox.database import get_db
from ninebox.engine.manager import AssessmentManager
from ninebox.schemas.assessment import (
    AssessmentOut,
    AssessmentWithEvidence,
    EvidenceOut,
    GridPlacement,
    SaveAssessmentRequest,
    SuggestedRatings,
)

router = APIRouter()


def _manager(tenant, db: AsyncSession) -> AssessmentManager:
    return AssessmentManager(db, str(tenant.tenant_id))


@router.get(
    "/employees/{employee_id}/nine-box/suggestion", response_model=SuggestedRatings
)
async def get_suggested_ratings(
    employee_id: UUID,
    tenant: TenantDep,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """
    Suggested performance/potential ratings from current source data.
    Axes without data come back with insufficient_data set and no rating.
    """
    return await _manager(tenant, db).compute_suggested_ratings(str(employee_id))


@router.post(
    "/employees/{employee_id}/nine-box/assessments",
    response_model=AssessmentWithEvidence,
    status_code=201,
)
async def save_assessment(
    employee_id: UUID,
    body: SaveAssessmentRequest,
    tenant: TenantDep,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Save a new current assessment (or re-save the current one) with its evidence."""
    manager = _manager(tenant, db)
    assessment = await manager.save_assessment(
        str(employee_id),
        body.performance_rating,
        body.potential_rating,
        overrides=body.overrides,
        justifications=body.justifications,
        assessor_id=str(body.assessed_by) if body.assessed_by else None,
        assessment_date=body.assessment_date,
        assessment_period=body.assessment_period,
        overall_notes=body.overall_notes,
        assessment_id=str(body.assessment_id) if body.assessment_id else None,
    )
    evidence = await manager.get_evidence(str(assessment.id))
    return AssessmentWithEvidence(
        **AssessmentOut.model_validate(assessment).model_dump(),
        evidence=[EvidenceOut.model_validate(e) for e in evidence],
    )


@router.get(
    "/employees/{employee_id}/nine-box/assessments",
    response_model=list[AssessmentWithEvidence],
)
async def get_history(
    employee_id: UUID,
    tenant: TenantDep,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Assessment history, newest first, each with the evidence stored at save time."""
    return await _manager(tenant, db).get_history(str(employee_id))


@router.get(
    "/employees/{employee_id}/nine-box/current",
    response_model=AssessmentOut | None,
)
async def get_current(
    employee_id: UUID,
    tenant: TenantDep,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Current assessment, or null before the first save."""
    return await _manager(tenant, db).get_current(str(employee_id))


@router.get(
    "/nine-box/assessments/{assessment_id}/evidence",
    response_model=list[EvidenceOut],
)
async def get_evidence(
    assessment_id: UUID,
    tenant: TenantDep,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Evidence audit trail for one assessment (tenant-scoped)."""
    return await _manager(tenant, db).get_evidence(str(assessment_id))


@router.get("/nine-box/grid", response_model=list[GridPlacement])
async def get_grid(
    tenant: TenantDep,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Current grid placement of every assessed employee."""
    return await _manager(tenant, db).list_grid()
