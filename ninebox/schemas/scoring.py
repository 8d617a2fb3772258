"""Scoring value types passed between the adapters, scorer and evidence recorder."""

from pydantic import BaseModel, Field


class SignalObservation(BaseModel):
    """Current signal snapshot as seen by the scorer."""

    signal_id: str | None = None
    signal_code: str | None = None
    signal_category: str | None = None
    score: float
    confidence: float
    bias_risk_level: str | None = None
    # Set from a signal mapping; unmapped signals count once at the source threshold
    weight: float = 1.0
    minimum_confidence: float | None = None


class RawObservation(BaseModel):
    """Raw source value on its native scale."""

    source_id: str | None = None
    value: float


class ContributingSource(BaseModel):
    """A mapping that resolved a value and was folded into the axis score."""

    source_type: str
    source_id: str | None = None
    value: float
    weight: float
    confidence: float
    bias_adjusted: bool = False


class AxisScore(BaseModel):
    """Score and confidence for one axis."""

    axis: str
    score: float = 0.0
    confidence: float = 0.0
    contributing_sources: list[ContributingSource] = Field(default_factory=list)

    @property
    def has_data(self) -> bool:
        return bool(self.contributing_sources)


class AxisOutcome(BaseModel):
    """Final rating of one axis as saved: the computed score plus any override."""

    axis: str
    rating: int
    axis_score: AxisScore
    overridden: bool = False
    override_reason: str | None = None
