"""Evidence recorder - immutable snapshot of every source behind a saved rating."""

import logging
from uuid import uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from ninebox.engine.constants import (
    DEFAULT_OVERRIDE_REASON,
    MANUAL_OVERRIDE_SOURCE,
    source_label,
)
from ninebox.models import EvidenceRecord
from ninebox.schemas.scoring import AxisOutcome
from ninebox.storage.repositories import delete_evidence, now_utc
from ninebox.utils.canonical import evidence_hash

logger = logging.getLogger(__name__)


def contribution_summary(source_type: str, outcome: AxisOutcome) -> str:
    if not outcome.overridden:
        return f"Auto-calculated from {source_label(source_type)}"
    reason = (outcome.override_reason or "").strip() or DEFAULT_OVERRIDE_REASON
    return f"Override: {reason}"


def build_evidence_rows(outcomes: list[AxisOutcome]) -> list[dict]:
    """
    One row per contributing source per axis.

    An overridden axis keeps the sources that produced the suggestion it
    replaced; when there were none, a single manual_override row records the
    chosen rating.
    """
    rows: list[dict] = []
    for outcome in outcomes:
        sources = outcome.axis_score.contributing_sources
        if not sources and outcome.overridden:
            rows.append(
                {
                    "axis": outcome.axis,
                    "source_type": MANUAL_OVERRIDE_SOURCE,
                    "source_id": None,
                    "source_value": float(outcome.rating),
                    "weight_applied": 1.0,
                    "confidence_level": None,
                    "contribution_summary": contribution_summary(
                        MANUAL_OVERRIDE_SOURCE, outcome
                    ),
                }
            )
            continue
        for source in sources:
            rows.append(
                {
                    "axis": outcome.axis,
                    "source_type": source.source_type,
                    "source_id": source.source_id,
                    "source_value": source.value,
                    "weight_applied": source.weight,
                    "confidence_level": source.confidence,
                    "contribution_summary": contribution_summary(source.source_type, outcome),
                }
            )
    return rows


class EvidenceRecorder:
    """Replaces the full evidence set of an assessment inside the caller's transaction."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def record(self, assessment_id: str, outcomes: list[AxisOutcome]) -> str:
        """Delete existing evidence, insert the new set, return its hash.

        Runs in the caller's transaction: if any insert fails, the rollback
        also restores the deleted rows.
        """
        removed = await delete_evidence(self.db, assessment_id)
        rows = build_evidence_rows(outcomes)
        created_at = now_utc()
        for ordinal, row in enumerate(rows):
            self.db.add(
                EvidenceRecord(
                    id=str(uuid4()),
                    assessment_id=assessment_id,
                    ordinal=ordinal,
                    created_at=created_at,
                    **row,
                )
            )
        await self.db.flush()
        logger.info(
            "Recorded %d evidence rows for assessment %s (replaced %d)",
            len(rows),
            assessment_id,
            removed,
        )
        return evidence_hash(rows)
