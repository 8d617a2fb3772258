"""Property-based tests for the scorer and rating converter."""

from types import SimpleNamespace

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from ninebox.engine.constants import SOURCE_SCALES
from ninebox.engine.rating import score_to_rating
from ninebox.engine.scorer import score_axis
from ninebox.schemas.scoring import RawObservation, SignalObservation

RAW_SOURCES = sorted(SOURCE_SCALES)

unit_st = st.floats(min_value=0.0, max_value=1.0, allow_nan=False, allow_infinity=False)
positive_unit_st = st.floats(min_value=0.01, max_value=1.0, allow_nan=False, allow_infinity=False)


@st.composite
def raw_axis_st(draw):
    """Draw a mapping per raw source with a weight and optional present value."""
    mappings = []
    data = {}
    for priority, source_type in enumerate(RAW_SOURCES, start=1):
        weight = draw(unit_st)
        mappings.append(
            SimpleNamespace(
                source_type=source_type,
                weight=weight,
                priority=priority,
                is_active=True,
                minimum_confidence=None,
            )
        )
        if draw(st.booleans()):
            fraction = draw(unit_st)
            data[source_type] = RawObservation(value=fraction * SOURCE_SCALES[source_type])
    return mappings, data


@settings(max_examples=300)
@given(unit_st, unit_st)
def test_rating_is_monotonic(a, b):
    """A higher score never yields a lower rating."""
    low, high = sorted((a, b))
    assert score_to_rating(low) <= score_to_rating(high)


@settings(max_examples=300)
@given(raw_axis_st())
def test_score_is_weighted_average_of_present_sources(axis):
    """The axis score is the weighted average restricted to sources with data."""
    mappings, data = axis
    result = score_axis("performance", mappings, data)

    present = [m for m in mappings if m.source_type in data and m.weight > 0]
    total_weight = sum(m.weight for m in present)
    if not present:
        assert result.score == 0
        assert result.confidence == 0
        assert not result.has_data
        return
    expected = (
        sum(data[m.source_type].value / SOURCE_SCALES[m.source_type] * m.weight for m in present)
        / total_weight
    )
    assert result.score == pytest.approx(expected, abs=1e-9)
    assert 0.0 <= result.score <= 1.0


@settings(max_examples=300)
@given(raw_axis_st())
def test_confidence_bounds(axis):
    """Confidence lies in [0, min(configured weight, 1)] and is 0 only without data."""
    mappings, data = axis
    result = score_axis("performance", mappings, data)
    configured = sum(m.weight for m in mappings)
    assert 0.0 <= result.confidence <= min(configured, 1.0) + 1e-9
    assert (result.confidence == 0) == (not result.has_data)


@settings(max_examples=300)
@given(raw_axis_st())
def test_removing_absent_mapping_keeps_score(axis):
    """Dropping a mapping that has no data never changes the score."""
    mappings, data = axis
    absent = [m for m in mappings if m.source_type not in data]
    if not absent:
        return
    trimmed = [m for m in mappings if m is not absent[0]]
    full = score_axis("performance", mappings, data)
    reduced = score_axis("performance", trimmed, data)
    assert reduced.score == pytest.approx(full.score)
    assert reduced.confidence == pytest.approx(full.confidence)


@settings(max_examples=300)
@given(positive_unit_st, positive_unit_st)
def test_high_bias_dampens_by_exact_ratio(score, weight):
    """A high bias-risk signal contributes exactly 0.7 of a low-risk one."""
    mappings = [
        SimpleNamespace(
            source_type="leadership_signals",
            weight=weight,
            priority=1,
            is_active=True,
            minimum_confidence=0.0,
        )
    ]

    def contribution(bias):
        signal = SignalObservation(score=score, confidence=1.0, bias_risk_level=bias)
        result = score_axis("potential", mappings, {"leadership_signals": [signal]})
        source = result.contributing_sources[0]
        return source.value * source.weight

    assert contribution("high") < contribution("low")
    assert contribution("high") == pytest.approx(0.7 * contribution("low"))
