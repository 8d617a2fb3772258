"""Rating converter - maps a 0-1 axis score onto the 1-3 grid."""

from collections.abc import Mapping
from typing import TYPE_CHECKING

from ninebox.engine.constants import DEFAULT_QUADRANT_LABELS, RATING_THRESHOLDS
from ninebox.schemas.assessment import QuadrantInfo

if TYPE_CHECKING:
    from ninebox.models import QuadrantLabel


def score_to_rating(score: float) -> int:
    """Convert an axis score in [0, 1] to a rating 1-3.

    Scores outside the range are a caller bug (the scorer clamps), so they
    raise rather than being silently clamped here.
    """
    if not 0.0 <= score <= 1.0:
        raise ValueError(f"Axis score must be within [0, 1], got {score!r}")
    low, high = RATING_THRESHOLDS
    if score < low:
        return 1
    if score < high:
        return 2
    return 3


def quadrant_for(
    performance_rating: int,
    potential_rating: int,
    labels: Mapping[tuple[int, int], "QuadrantLabel"] | None = None,
) -> QuadrantInfo:
    """Grid cell info for a rating pair, falling back to the standard labels."""
    key = (performance_rating, potential_rating)
    if key not in DEFAULT_QUADRANT_LABELS:
        raise ValueError(f"No grid cell for ratings {key}")
    label = (labels or {}).get(key)
    if label is None:
        name, color, actions = DEFAULT_QUADRANT_LABELS[key]
        return QuadrantInfo(
            performance_level=performance_rating,
            potential_level=potential_rating,
            label=name,
            color_code=color,
            suggested_actions=list(actions),
        )
    return QuadrantInfo(
        performance_level=performance_rating,
        potential_level=potential_rating,
        label=label.display_label,
        color_code=label.color_code,
        description=label.description,
        suggested_actions=list(label.suggested_actions or []),
    )
