"""Unit tests for the rating converter and quadrant lookup."""

from types import SimpleNamespace

import pytest

from ninebox.engine.rating import quadrant_for, score_to_rating


@pytest.mark.parametrize(
    "score,rating",
    [
        (0.0, 1),
        (0.329999, 1),
        (0.33, 2),
        (0.5, 2),
        (0.669999, 2),
        (0.67, 3),
        (1.0, 3),
    ],
)
def test_threshold_boundaries(score, rating):
    """Ratings switch exactly at 0.33 and 0.67."""
    assert score_to_rating(score) == rating


@pytest.mark.parametrize("score", [-0.01, 1.01])
def test_out_of_range_score_rejected(score):
    """Callers must clamp; out-of-range scores are an invariant violation."""
    with pytest.raises(ValueError):
        score_to_rating(score)


def test_quadrant_defaults_without_config():
    """Unconfigured cells fall back to the standard labels."""
    info = quadrant_for(3, 3)
    assert info.label == "Star Performer"
    assert info.color_code == "#22c55e"
    assert info.suggested_actions


def test_quadrant_uses_custom_label_when_enabled():
    """Custom label wins only when use_custom_label is on."""
    label = SimpleNamespace(
        display_label="A+ Talent",
        color_code="#000000",
        description="Top of the grid",
        suggested_actions=["Promote"],
    )
    info = quadrant_for(3, 3, {(3, 3): label})
    assert info.label == "A+ Talent"
    assert info.description == "Top of the grid"
    assert info.suggested_actions == ["Promote"]


def test_quadrant_invalid_ratings():
    """Ratings outside the grid have no cell."""
    with pytest.raises(ValueError):
        quadrant_for(4, 1)
