"""Tests for evidence row construction and the evidence recorder."""

from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from ninebox.engine.evidence import EvidenceRecorder, build_evidence_rows
from ninebox.schemas.scoring import AxisOutcome, AxisScore, ContributingSource
from ninebox.storage.repositories import create_assessment, list_evidence, now_utc


def _axis_score(axis, *sources):
    return AxisScore(
        axis=axis,
        score=0.8,
        confidence=0.8,
        contributing_sources=[
            ContributingSource(source_type=t, value=v, weight=w, confidence=1.0)
            for t, v, w in sources
        ],
    )


def test_auto_rows_one_per_source():
    """Each contributing source gets an auto-calculated row."""
    outcome = AxisOutcome(
        axis="performance",
        rating=3,
        axis_score=_axis_score(
            "performance",
            ("appraisal_overall_score", 0.84, 0.5),
            ("goal_achievement", 0.783, 0.3),
        ),
    )
    rows = build_evidence_rows([outcome])
    assert len(rows) == 2
    assert rows[0]["contribution_summary"] == "Auto-calculated from Appraisal Overall Score"
    assert rows[1]["contribution_summary"] == "Auto-calculated from Goal Achievement"
    assert rows[0]["weight_applied"] == 0.5


def test_override_rows_carry_reason():
    """Overridden axes record the justification on every source row."""
    outcome = AxisOutcome(
        axis="potential",
        rating=1,
        axis_score=_axis_score("potential", ("potential_assessment", 0.9, 0.4)),
        overridden=True,
        override_reason="Declined relocation",
    )
    rows = build_evidence_rows([outcome])
    assert [r["contribution_summary"] for r in rows] == ["Override: Declined relocation"]


def test_override_without_reason_falls_back():
    """A blank override reason falls back to the fixed literal."""
    outcome = AxisOutcome(
        axis="potential",
        rating=2,
        axis_score=_axis_score("potential", ("potential_assessment", 0.9, 0.4)),
        overridden=True,
        override_reason="   ",
    )
    rows = build_evidence_rows([outcome])
    assert rows[0]["contribution_summary"] == "Override: Manual adjustment"


def test_override_without_sources_records_manual_row():
    """An override on an axis with no data still leaves one evidence row."""
    outcome = AxisOutcome(
        axis="performance",
        rating=2,
        axis_score=AxisScore(axis="performance"),
        overridden=True,
        override_reason="New hire, no appraisal yet",
    )
    rows = build_evidence_rows([outcome])
    assert len(rows) == 1
    assert rows[0]["source_type"] == "manual_override"
    assert rows[0]["source_value"] == 2.0


async def test_recorder_replaces_previous_evidence(db, tenant_id, employee_id):
    """Recording twice leaves only the second evidence set."""
    assessment = await create_assessment(
        db, tenant_id, employee_id, 3, 2, assessment_date=now_utc().date()
    )
    recorder = EvidenceRecorder(db)
    first = AxisOutcome(
        axis="performance",
        rating=3,
        axis_score=_axis_score(
            "performance",
            ("appraisal_overall_score", 0.84, 0.5),
            ("goal_achievement", 0.783, 0.3),
        ),
    )
    second = AxisOutcome(
        axis="performance",
        rating=3,
        axis_score=_axis_score("performance", ("calibrated_score", 0.9, 1.0)),
    )
    h1 = await recorder.record(str(assessment.id), [first])
    h2 = await recorder.record(str(assessment.id), [second])
    await db.commit()

    evidence = await list_evidence(db, str(assessment.id))
    assert [e.source_type for e in evidence] == ["calibrated_score"]
    assert h1 != h2


async def test_evidence_requires_existing_assessment(db):
    """Evidence can never reference a missing assessment."""
    outcome = AxisOutcome(
        axis="performance",
        rating=3,
        axis_score=_axis_score("performance", ("appraisal_overall_score", 0.84, 0.5)),
    )
    with pytest.raises(IntegrityError):
        await EvidenceRecorder(db).record(str(uuid4()), [outcome])
    await db.rollback()
