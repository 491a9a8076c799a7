"""Scale helpers for the 0-4 Context Profile dimensions.

Every ordinal Context Profile field uses the same 0-4 scale, but each field
has its own human-readable labels. Display helpers clamp and round; the
validation helper does not, since a value of 2.5 or 5 is a caller bug.
"""

import math

SCALE_MIN: int = 0
SCALE_MAX: int = 4

CONTEXT_FIELD_LABELS: dict[str, tuple[str, str, str, str, str]] = {
    "regulatory_intensity": ("None", "Guidance", "Some Rules", "Audited", "Heavily Regulated"),
    "data_sensitivity": (
        "Public",
        "Internal",
        "Confidential",
        "PII/Trade Secrets",
        "PHI/PCI + Regional",
    ),
    "safety_criticality": (
        "Low Harm",
        "Inconvenience",
        "Costly Mistakes",
        "Serious Impact",
        "Physical Safety",
    ),
    "brand_exposure": ("Tolerant", "Minor Risk", "Meaningful Risk", "Major Risk", "Existential Risk"),
    "clock_speed": ("Annual", "Quarterly", "Monthly", "Weekly", "Frontier Pace"),
    "latency_edge": ("Seconds OK", "<1s", "<500ms", "<200ms", "Offline/Edge"),
    "scale_throughput": ("Small Internal", "Department", "Enterprise", "High-Traffic", "Hyperscale"),
    "data_advantage": ("None", "Small", "Moderate", "Strong", "Large & Clear"),
    "build_readiness": ("None", "Early Pilots", "Basics in Place", "Mature CoE", "Industrialized"),
    "finops_priority": ("Low", "Med-Low", "Medium", "High", "Strict Budgets"),
}

GENERIC_SCALE_LABELS: tuple[str, str, str, str, str] = (
    "Very Low",
    "Low",
    "Medium",
    "High",
    "Very High",
)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _round_half_up(value: float) -> int:
    # Built-in round() is banker's rounding; 2.5 must display as 3.
    return math.floor(value + 0.5)


def is_valid_scale_value(value: object) -> bool:
    """Return True only for integers in 0-4.

    Booleans are rejected even though ``bool`` subclasses ``int``.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return SCALE_MIN <= value <= SCALE_MAX


def format_scale_value(field_key: str, value: float, show_numeric: bool = True) -> str:
    """Format a scale value with the field's own label.

    Args:
        field_key: Context Profile field name (e.g. 'scale_throughput').
        value: Scale value; rounded and clamped to 0-4 for display.
        show_numeric: Append a '(n/4)' indicator.

    Returns:
        A label such as 'Enterprise (2/4)' or 'Enterprise'. Unknown fields
        fall back to the generic labels.
    """
    clamped = int(_clamp(_round_half_up(value), SCALE_MIN, SCALE_MAX))
    labels = CONTEXT_FIELD_LABELS.get(field_key, GENERIC_SCALE_LABELS)
    label = labels[clamped]
    return f"{label} ({clamped}/{SCALE_MAX})" if show_numeric else label


def format_scale_label_only(field_key: str, value: float) -> str:
    """Return just the field label for a scale value."""
    return format_scale_value(field_key, value, show_numeric=False)


def format_generic_scale(value: float, show_numeric: bool = True) -> str:
    """Format a scale value when the field is not known."""
    clamped = int(_clamp(_round_half_up(value), SCALE_MIN, SCALE_MAX))
    label = GENERIC_SCALE_LABELS[clamped]
    return f"{label} ({clamped}/{SCALE_MAX})" if show_numeric else label


def scale_to_percentage(value: float) -> float:
    """Map a 0-4 scale value onto 0-100 (clamped)."""
    return (_clamp(value, SCALE_MIN, SCALE_MAX) / SCALE_MAX) * 100.0


def percentage_to_scale(percentage: float) -> int:
    """Map a 0-100 percentage onto the nearest 0-4 scale value (clamped)."""
    clamped = _clamp(percentage, 0.0, 100.0)
    return _round_half_up((clamped / 100.0) * SCALE_MAX)


def format_score(value: float) -> str:
    """Format a numeric score to one decimal place for insight text."""
    return f"{value:.1f}"
