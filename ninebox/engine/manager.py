"""Assessment manager - suggested ratings, overrides and the current/historical lifecycle."""

import logging
from datetime import date
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ninebox.config import settings
from ninebox.engine.constants import AXES, MAX_RATING, MIN_RATING
from ninebox.engine.evidence import EvidenceRecorder
from ninebox.engine.rating import quadrant_for, score_to_rating
from ninebox.engine.scorer import score_axis
from ninebox.errors import ConsistencyViolation, NoDataError, NotFoundError, ValidationError
from ninebox.models import Assessment, EvidenceRecord
from ninebox.schemas.assessment import (
    AssessmentOut,
    AssessmentWithEvidence,
    AxisSuggestion,
    EvidenceOut,
    GridPlacement,
    Justifications,
    OverrideFlags,
    SuggestedRatings,
)
from ninebox.schemas.scoring import AxisOutcome, AxisScore
from ninebox.storage import repositories
from ninebox.storage.registry import SourceMappingRegistry
from ninebox.storage.sources import RawSourceProvider, SignalStore, load_source_data

logger = logging.getLogger(__name__)


def validate_overrides(flags: OverrideFlags, justifications: Justifications) -> None:
    """Every overridden axis needs a non-empty justification."""
    for axis in AXES:
        reason = getattr(justifications, axis)
        if getattr(flags, axis) and not (reason and reason.strip()):
            raise ValidationError(
                f"A justification is required to override the {axis} rating", axis=axis
            )


def validate_rating(axis: str, rating: int) -> None:
    if not MIN_RATING <= rating <= MAX_RATING:
        raise ValidationError(
            f"The {axis} rating must be between {MIN_RATING} and {MAX_RATING}", axis=axis
        )


class AssessmentLifecycle:
    """
    NONE -> CURRENT on the first save, CURRENT -> HISTORICAL in the same
    transaction as the next save. There is no other transition and no delete.
    """

    NONE = "none"
    CURRENT = "current"
    HISTORICAL = "historical"

    def __init__(self, db: AsyncSession, tenant_id: str, employee_id: str):
        self.db = db
        self.tenant_id = tenant_id
        self.employee_id = employee_id

    @classmethod
    def state_of(cls, assessment: Assessment | None) -> str:
        if assessment is None:
            return cls.NONE
        return cls.CURRENT if assessment.is_current else cls.HISTORICAL

    async def current(self, for_update: bool = False) -> Assessment | None:
        rows = await repositories.get_current_assessments(
            self.db, self.tenant_id, self.employee_id, for_update=for_update
        )
        if len(rows) > 1:
            raise ConsistencyViolation(
                f"{len(rows)} current assessments for employee {self.employee_id}"
            )
        return rows[0] if rows else None

    async def promote(self, **fields) -> Assessment:
        """Insert a new current assessment, retiring the previous one."""
        await repositories.lock_employee(self.db, self.tenant_id, self.employee_id)
        previous = await self.current(for_update=True)
        if previous is not None:
            previous.is_current = False
            previous.updated_at = repositories.now_utc()
            # The retire must reach the database before the insert
            await self.db.flush()
        return await repositories.create_assessment(
            self.db, tenant_id=self.tenant_id, employee_id=self.employee_id, **fields
        )

    async def resave(self, assessment_id: str, **fields) -> Assessment:
        """Update the current assessment in place; historical rows are immutable."""
        try:
            assessment_id = str(UUID(assessment_id))
        except ValueError:
            raise NotFoundError(f"Assessment {assessment_id} not found") from None
        await repositories.lock_employee(self.db, self.tenant_id, self.employee_id)
        current = await self.current(for_update=True)
        if current is None or str(current.id) != assessment_id:
            existing = await repositories.get_assessment_by_id(
                self.db, assessment_id, self.tenant_id
            )
            if existing is None or str(existing.employee_id) != self.employee_id:
                raise NotFoundError(f"Assessment {assessment_id} not found")
            raise ValidationError(
                "Historical assessments cannot be changed; save a new assessment instead"
            )
        for key, value in fields.items():
            setattr(current, key, value)
        current.updated_at = repositories.now_utc()
        await self.db.flush()
        return current


class AssessmentManager:
    """Orchestrates scoring, validation and persistence of nine-box assessments."""

    def __init__(
        self,
        db: AsyncSession,
        tenant_id: str,
        signal_store: SignalStore | None = None,
        raw_sources: RawSourceProvider | None = None,
        review_threshold: float | None = None,
    ):
        self.db = db
        self.tenant_id = tenant_id
        self.registry = SourceMappingRegistry(db, tenant_id)
        self.signal_store = signal_store or SignalStore(db, tenant_id)
        self.raw_sources = raw_sources or RawSourceProvider(db, tenant_id)
        self.review_threshold = (
            settings.review_confidence_threshold
            if review_threshold is None
            else review_threshold
        )

    async def score_axes(self, employee_id: str) -> dict[str, AxisScore]:
        mappings = await self.registry.list_mappings(active_only=True)
        signal_mappings = await self.registry.list_signal_mappings()
        scores = {}
        for axis in AXES:
            axis_mappings = [m for m in mappings if m.axis == axis]
            data = await load_source_data(
                employee_id,
                axis,
                axis_mappings,
                self.signal_store,
                self.raw_sources,
                signal_mappings,
            )
            scores[axis] = score_axis(axis, axis_mappings, data)
        return scores

    def _suggest(self, axis_score: AxisScore) -> AxisSuggestion:
        has_data = axis_score.has_data
        needs_review = axis_score.confidence < self.review_threshold
        if has_data and needs_review:
            logger.warning(
                "Low confidence %.2f on %s axis", axis_score.confidence, axis_score.axis
            )
        return AxisSuggestion(
            axis=axis_score.axis,
            score=axis_score.score,
            confidence=axis_score.confidence,
            suggested_rating=score_to_rating(axis_score.score) if has_data else None,
            insufficient_data=not has_data,
            needs_review=needs_review,
            contributing_sources=axis_score.contributing_sources,
        )

    async def _label_map(self) -> dict:
        return {
            (label.performance_level, label.potential_level): label
            for label in await self.registry.list_labels()
        }

    async def compute_suggested_ratings(self, employee_id: str) -> SuggestedRatings:
        """Suggested rating per axis from current source data. Nothing is persisted."""
        scores = await self.score_axes(employee_id)
        performance = self._suggest(scores["performance"])
        potential = self._suggest(scores["potential"])
        quadrant = None
        if performance.suggested_rating and potential.suggested_rating:
            quadrant = quadrant_for(
                performance.suggested_rating,
                potential.suggested_rating,
                await self._label_map(),
            )
        return SuggestedRatings(
            employee_id=employee_id,
            performance=performance,
            potential=potential,
            quadrant=quadrant,
        )

    def _outcomes(
        self,
        scores: dict[str, AxisScore],
        ratings: dict[str, int],
        flags: OverrideFlags,
        justifications: Justifications,
    ) -> list[AxisOutcome]:
        outcomes = []
        for axis in AXES:
            axis_score = scores[axis]
            overridden = getattr(flags, axis)
            if not overridden:
                if not axis_score.has_data:
                    raise NoDataError(axis)
                suggested = score_to_rating(axis_score.score)
                if ratings[axis] != suggested:
                    raise ValidationError(
                        f"The {axis} rating {ratings[axis]} differs from the suggested "
                        f"rating {suggested}; mark it as an override with a justification",
                        axis=axis,
                    )
            outcomes.append(
                AxisOutcome(
                    axis=axis,
                    rating=ratings[axis],
                    axis_score=axis_score,
                    overridden=overridden,
                    override_reason=getattr(justifications, axis) if overridden else None,
                )
            )
        return outcomes

    async def save_assessment(
        self,
        employee_id: str,
        performance_rating: int,
        potential_rating: int,
        overrides: OverrideFlags | None = None,
        justifications: Justifications | None = None,
        assessor_id: str | None = None,
        assessment_date: date | None = None,
        assessment_period: str | None = None,
        overall_notes: str | None = None,
        assessment_id: str | None = None,
    ) -> Assessment:
        """
        Validate and persist an assessment with its evidence in one transaction.

        Creates a new current assessment (retiring the previous one), or, with
        ``assessment_id``, re-saves the current assessment in place. Evidence
        is always fully replaced. Any failure rolls the whole save back.
        """
        overrides = overrides or OverrideFlags()
        justifications = justifications or Justifications()
        validate_overrides(overrides, justifications)
        ratings = {"performance": performance_rating, "potential": potential_rating}
        for axis, rating in ratings.items():
            validate_rating(axis, rating)

        try:
            scores = await self.score_axes(employee_id)
            outcomes = self._outcomes(scores, ratings, overrides, justifications)
            fields = {
                "performance_rating": performance_rating,
                "potential_rating": potential_rating,
                "performance_score": scores["performance"].score,
                "potential_score": scores["potential"].score,
                "performance_confidence": scores["performance"].confidence,
                "potential_confidence": scores["potential"].confidence,
                "performance_overridden": overrides.performance,
                "potential_overridden": overrides.potential,
                "performance_notes": justifications.performance,
                "potential_notes": justifications.potential,
                "overall_notes": overall_notes,
                "assessed_by": assessor_id,
                "assessment_period": assessment_period,
                "assessment_date": assessment_date or date.today(),
            }
            lifecycle = AssessmentLifecycle(self.db, self.tenant_id, employee_id)
            if assessment_id:
                assessment = await lifecycle.resave(assessment_id, **fields)
            else:
                assessment = await lifecycle.promote(**fields)
            assessment.evidence_hash = await EvidenceRecorder(self.db).record(
                str(assessment.id), outcomes
            )
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            logger.error(
                "Integrity violation saving assessment for employee %s: %s", employee_id, exc
            )
            raise ConsistencyViolation(
                f"Assessment for employee {employee_id} violates an integrity constraint"
            ) from exc
        except Exception:
            await self.db.rollback()
            raise

        logger.info(
            "Saved nine-box assessment %s for employee %s (%d/%d)",
            assessment.id,
            employee_id,
            performance_rating,
            potential_rating,
        )
        return assessment

    async def get_current(self, employee_id: str) -> Assessment | None:
        return await AssessmentLifecycle(self.db, self.tenant_id, employee_id).current()

    async def get_evidence(self, assessment_id: str) -> list[EvidenceRecord]:
        """Stored evidence of one assessment, ordered by axis then creation time."""
        assessment = await repositories.get_assessment_by_id(
            self.db, assessment_id, self.tenant_id
        )
        if assessment is None:
            raise NotFoundError(f"Assessment {assessment_id} not found")
        return await repositories.list_evidence(self.db, assessment_id)

    async def get_history(self, employee_id: str) -> list[AssessmentWithEvidence]:
        """Every assessment with the evidence stored at save time, newest first."""
        assessments = await repositories.list_assessments(
            self.db, self.tenant_id, employee_id
        )
        evidence = await repositories.list_evidence_for(
            self.db, [str(a.id) for a in assessments]
        )
        return [
            AssessmentWithEvidence(
                **AssessmentOut.model_validate(a).model_dump(),
                evidence=[EvidenceOut.model_validate(e) for e in evidence.get(str(a.id), [])],
            )
            for a in assessments
        ]

    async def list_grid(self) -> list[GridPlacement]:
        """Current placement of every assessed employee with its quadrant."""
        labels = await self._label_map()
        return [
            GridPlacement(
                assessment=AssessmentOut.model_validate(a),
                quadrant=quadrant_for(a.performance_rating, a.potential_rating, labels),
            )
            for a in await repositories.list_current_assessments(self.db, self.tenant_id)
        ]
