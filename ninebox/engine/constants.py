"""Scoring policy constants and industry-standard defaults."""

AXES = ("performance", "potential")

# Upper bounds of ratings 1 and 2; anything at or above the last is rating 3
RATING_THRESHOLDS = (0.33, 0.67)
MIN_RATING = 1
MAX_RATING = 3

BIAS_MULTIPLIERS = {
    "high": 0.7,
    "medium": 0.85,
    "low": 1.0,
}
DEFAULT_BIAS_MULTIPLIER = 1.0

# Divisor that maps each raw source's native scale onto 0-1
SOURCE_SCALES = {
    "appraisal_overall_score": 5.0,
    "calibrated_score": 5.0,
    "competency_average": 5.0,
    "goal_achievement": 100.0,
    "potential_assessment": 100.0,
}

# Raw sources that average all current records instead of taking the latest
AVERAGED_SOURCES = frozenset({"goal_achievement", "competency_average"})

SIGNAL_SOURCE_CATEGORIES = {
    "leadership_signals": "leadership",
    "values_signals": "values",
}
SIGNAL_SOURCE_PREFIX = "signal:"

# Per-signal mappings: which axis a signal feeds and how much it counts
SIGNAL_CONTRIBUTIONS = ("performance", "potential", "both")
DEFAULT_SIGNAL_WEIGHT = 1.0

MANUAL_OVERRIDE_SOURCE = "manual_override"

SOURCE_TYPE_LABELS = {
    "appraisal_overall_score": "Appraisal Overall Score",
    "calibrated_score": "Calibrated Score",
    "goal_achievement": "Goal Achievement",
    "competency_average": "Competency Average",
    "potential_assessment": "Potential Assessment",
    "leadership_signals": "Leadership Signals",
    "values_signals": "Values Signals",
    MANUAL_OVERRIDE_SOURCE: "Manual Override",
}

DEFAULT_OVERRIDE_REASON = "Manual adjustment"

DEFAULT_PERFORMANCE_SOURCES = [
    {"source_type": "appraisal_overall_score", "weight": 0.5, "priority": 1},
    {"source_type": "goal_achievement", "weight": 0.3, "priority": 2},
    {"source_type": "competency_average", "weight": 0.2, "priority": 3},
]

DEFAULT_POTENTIAL_SOURCES = [
    {"source_type": "potential_assessment", "weight": 0.4, "priority": 1},
    {"source_type": "leadership_signals", "weight": 0.4, "priority": 2, "minimum_confidence": 0.6},
    {"source_type": "values_signals", "weight": 0.2, "priority": 3, "minimum_confidence": 0.6},
]

# (performance_level, potential_level) -> McKinsey-style defaults
DEFAULT_QUADRANT_LABELS = {
    (3, 3): (
        "Star Performer",
        "#22c55e",
        ["Accelerate development", "Consider for key roles", "High visibility projects"],
    ),
    (2, 3): (
        "High Potential",
        "#3b82f6",
        ["Develop performance skills", "Stretch assignments", "Mentoring"],
    ),
    (1, 3): (
        "Inconsistent Performer",
        "#f59e0b",
        ["Address performance gaps", "Leverage potential through coaching"],
    ),
    (3, 2): (
        "Core Player",
        "#06b6d4",
        ["Maintain engagement", "Develop for future potential"],
    ),
    (2, 2): (
        "Solid Contributor",
        "#8b5cf6",
        ["Continue development", "Explore growth opportunities"],
    ),
    (1, 2): (
        "Underperformer",
        "#f97316",
        ["Performance improvement plan", "Identify root causes"],
    ),
    (3, 1): (
        "Technical Expert",
        "#14b8a6",
        ["Leverage expertise", "Consider technical leadership track"],
    ),
    (2, 1): (
        "Average Performer",
        "#94a3b8",
        ["Set clear expectations", "Provide development support"],
    ),
    (1, 1): (
        "Low Performer",
        "#ef4444",
        ["Immediate intervention required", "Assess fit for role"],
    ),
}


def signal_category_for(source_type: str) -> str | None:
    """Signal category read by a signal-backed source type, else None."""
    if source_type in SIGNAL_SOURCE_CATEGORIES:
        return SIGNAL_SOURCE_CATEGORIES[source_type]
    if source_type.startswith(SIGNAL_SOURCE_PREFIX):
        return source_type[len(SIGNAL_SOURCE_PREFIX):] or None
    return None


def source_label(source_type: str) -> str:
    """Human-readable label for a source type."""
    if source_type in SOURCE_TYPE_LABELS:
        return SOURCE_TYPE_LABELS[source_type]
    category = signal_category_for(source_type)
    if category:
        return f"{category.replace('_', ' ').title()} Signals"
    return source_type


def contributes_to_axis(contributes_to: str, axis: str) -> bool:
    return contributes_to == axis or contributes_to == "both"
