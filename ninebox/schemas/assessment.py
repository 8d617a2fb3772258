"""Assessment request/response schemas."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from ninebox.schemas.scoring import ContributingSource


class AxisSuggestion(BaseModel):
    """Suggested rating for one axis."""

    axis: str
    score: float
    confidence: float
    suggested_rating: int | None
    insufficient_data: bool
    needs_review: bool
    contributing_sources: list[ContributingSource] = Field(default_factory=list)


class QuadrantInfo(BaseModel):
    """Grid cell the ratings land in."""

    performance_level: int
    potential_level: int
    label: str
    color_code: str | None = None
    description: str | None = None
    suggested_actions: list[str] = Field(default_factory=list)


class SuggestedRatings(BaseModel):
    """GET /v1/employees/{id}/nine-box/suggestion response."""

    employee_id: str
    performance: AxisSuggestion
    potential: AxisSuggestion
    quadrant: QuadrantInfo | None = None


class OverrideFlags(BaseModel):
    performance: bool = False
    potential: bool = False


class Justifications(BaseModel):
    performance: str | None = None
    potential: str | None = None


class SaveAssessmentRequest(BaseModel):
    """POST /v1/employees/{id}/nine-box/assessments request."""

    performance_rating: int
    potential_rating: int
    overrides: OverrideFlags = Field(default_factory=OverrideFlags)
    justifications: Justifications = Field(default_factory=Justifications)
    assessed_by: UUID | None = None
    assessment_date: date | None = None
    assessment_period: str | None = None
    overall_notes: str | None = None
    # Re-save the current assessment in place instead of creating a new one
    assessment_id: UUID | None = None


class EvidenceOut(BaseModel):
    """Evidence row as returned to auditors."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    assessment_id: str
    axis: str
    source_type: str
    source_id: str | None
    source_value: float | None
    weight_applied: float | None
    confidence_level: float | None
    contribution_summary: str
    created_at: datetime


class AssessmentOut(BaseModel):
    """Stored assessment."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    employee_id: str
    assessed_by: str | None
    assessment_date: date
    assessment_period: str | None
    performance_rating: int
    potential_rating: int
    performance_score: float | None
    potential_score: float | None
    performance_confidence: float | None
    potential_confidence: float | None
    performance_overridden: bool
    potential_overridden: bool
    performance_notes: str | None
    potential_notes: str | None
    overall_notes: str | None
    evidence_hash: str | None
    is_current: bool
    created_at: datetime


class AssessmentWithEvidence(AssessmentOut):
    evidence: list[EvidenceOut] = Field(default_factory=list)


class GridPlacement(BaseModel):
    """Current placement of one employee on the grid."""

    assessment: AssessmentOut
    quadrant: QuadrantInfo
