"""Axis scorer - weighted, renormalized score per axis with bias dampening."""

import logging
from collections.abc import Iterable, Mapping
from typing import Protocol

from ninebox.config import settings
from ninebox.engine.constants import (
    BIAS_MULTIPLIERS,
    DEFAULT_BIAS_MULTIPLIER,
    SOURCE_SCALES,
    signal_category_for,
)
from ninebox.schemas.scoring import (
    AxisScore,
    ContributingSource,
    RawObservation,
    SignalObservation,
)

logger = logging.getLogger(__name__)


class MappingLike(Protocol):
    source_type: str
    weight: float
    priority: int
    is_active: bool
    minimum_confidence: float | None


SourceData = RawObservation | list[SignalObservation] | None


def bias_multiplier(bias_risk_level: str | None) -> float:
    """Dampening factor for a signal's bias-risk level (unset means no dampening)."""
    if not bias_risk_level:
        return DEFAULT_BIAS_MULTIPLIER
    return BIAS_MULTIPLIERS.get(bias_risk_level.lower(), DEFAULT_BIAS_MULTIPLIER)


def normalize_raw(source_type: str, value: float) -> float:
    """Divide by the source's fixed scale and clamp to [0, 1]."""
    scale = SOURCE_SCALES.get(source_type)
    if scale is None:
        raise ValueError(f"No scale configured for source type {source_type!r}")
    normalized = value / scale
    if normalized < 0.0 or normalized > 1.0:
        logger.warning(
            "Clamping out-of-range %s value %s (scale %s)", source_type, value, scale
        )
        normalized = min(max(normalized, 0.0), 1.0)
    return normalized


def aggregate_signals(
    signals: Iterable[SignalObservation], minimum_confidence: float
) -> tuple[float, float, list[SignalObservation]] | None:
    """Weighted mean bias-adjusted score and weighted mean confidence.

    Each signal counts with its own ``weight`` and is dropped when its
    confidence is below its own ``minimum_confidence`` (falling back to
    ``minimum_confidence``). Returns None when no signal qualifies.
    """

    def qualifies(signal: SignalObservation) -> bool:
        threshold = (
            minimum_confidence
            if signal.minimum_confidence is None
            else signal.minimum_confidence
        )
        return signal.weight > 0 and signal.confidence >= threshold

    kept = [s for s in signals if qualifies(s)]
    if not kept:
        return None
    total_weight = sum(s.weight for s in kept)
    value = (
        sum(
            min(max(s.score, 0.0), 1.0) * bias_multiplier(s.bias_risk_level) * s.weight
            for s in kept
        )
        / total_weight
    )
    confidence = sum(s.confidence * s.weight for s in kept) / total_weight
    return value, confidence, kept


def _resolve(mapping: MappingLike, data: SourceData) -> ContributingSource | None:
    if data is None:
        return None

    if signal_category_for(mapping.source_type) is not None:
        if not isinstance(data, list):
            raise TypeError(f"{mapping.source_type} expects signal observations")
        threshold = (
            mapping.minimum_confidence
            if mapping.minimum_confidence is not None
            else settings.default_signal_minimum_confidence
        )
        aggregated = aggregate_signals(data, threshold)
        if aggregated is None:
            return None
        value, confidence, kept = aggregated
        return ContributingSource(
            source_type=mapping.source_type,
            source_id=kept[0].signal_id if len(kept) == 1 else None,
            value=value,
            weight=mapping.weight,
            confidence=confidence,
            bias_adjusted=any(bias_multiplier(s.bias_risk_level) < 1.0 for s in kept),
        )

    if not isinstance(data, RawObservation):
        raise TypeError(f"{mapping.source_type} expects a raw observation")
    return ContributingSource(
        source_type=mapping.source_type,
        source_id=data.source_id,
        value=normalize_raw(mapping.source_type, data.value),
        weight=mapping.weight,
        confidence=1.0,
    )


def score_axis(
    axis: str,
    mappings: Iterable[MappingLike],
    source_data: Mapping[str, SourceData],
) -> AxisScore:
    """
    Weighted average of the mapped sources that have data.

    Weights are renormalized over resolved sources only, so a missing source
    never drags the score down; instead confidence drops to the resolved
    weight mass (capped at 1.0). No resolved source yields score 0 and
    confidence 0 with an empty ``contributing_sources``.
    """
    active = sorted(
        (m for m in mappings if m.is_active), key=lambda m: (m.priority, m.source_type)
    )

    total_score = 0.0
    total_weight = 0.0
    contributing: list[ContributingSource] = []

    for mapping in active:
        if mapping.weight <= 0:
            continue
        source = _resolve(mapping, source_data.get(mapping.source_type))
        if source is None:
            continue
        total_score += source.value * source.weight
        total_weight += source.weight
        contributing.append(source)

    if total_weight <= 0:
        return AxisScore(axis=axis)

    return AxisScore(
        axis=axis,
        score=min(max(total_score / total_weight, 0.0), 1.0),
        confidence=min(total_weight, 1.0),
        contributing_sources=contributing,
    )
