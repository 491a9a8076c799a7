"""Context Profile record and the derived context flags.

A Context Profile is created once per assessment at intake and never mutated;
an edit produces a new profile. ``ContextProfile.from_mapping`` is the single
validation point: a missing field is rejected rather than defaulted to 0,
because 0 is a meaningful low value distinct from "unknown".
"""

from collections.abc import Mapping
from dataclasses import asdict, dataclass
from typing import Any

from cortex_assessment.core.errors import InvalidProfileError, UnknownDimensionError
from cortex_assessment.core.questions import BOOLEAN_FIELDS, ORDINAL_FIELDS
from cortex_assessment.core.scale import is_valid_scale_value

# Shared "high" / "low" cut-offs used by gates, insights, value overlay, and
# priority moves.
HIGH_THRESHOLD: int = 3
LOW_THRESHOLD: int = 1


@dataclass(frozen=True)
class ContextProfile:
    """Immutable description of an organization's operating environment.

    Ordinal fields are integers in 0-4; the last two fields are flags.
    """

    regulatory_intensity: int
    data_sensitivity: int
    safety_criticality: int
    brand_exposure: int
    clock_speed: int
    latency_edge: int
    scale_throughput: int
    data_advantage: int
    build_readiness: int
    finops_priority: int
    procurement_constraints: bool
    edge_operations: bool

    def __post_init__(self) -> None:
        problems = _collect_problems(asdict(self))
        if problems:
            raise InvalidProfileError(problems)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "ContextProfile":
        """Build a validated profile from a JSON-like mapping.

        Args:
            data: Mapping with all 12 Context Profile fields.

        Returns:
            A validated, immutable ContextProfile.

        Raises:
            InvalidProfileError: If data is None, a field is missing, an
                ordinal is not an integer in 0-4, or a flag is not a bool.
            UnknownDimensionError: If data contains keys outside the catalog.
        """
        if data is None:
            raise InvalidProfileError({"context_profile": "missing"})

        unknown = set(data) - set(ORDINAL_FIELDS) - set(BOOLEAN_FIELDS)
        if unknown:
            raise UnknownDimensionError(unknown)

        problems = _collect_problems(data)
        if problems:
            raise InvalidProfileError(problems)

        return cls(**{key: data[key] for key in (*ORDINAL_FIELDS, *BOOLEAN_FIELDS)})

    def to_dict(self) -> dict[str, Any]:
        """Return the profile as a plain dict in catalog field order."""
        return asdict(self)


def _collect_problems(data: Mapping[str, Any]) -> dict[str, str]:
    problems: dict[str, str] = {}
    for key in ORDINAL_FIELDS:
        if key not in data or data[key] is None:
            problems[key] = "missing"
        elif not is_valid_scale_value(data[key]):
            problems[key] = f"must be an integer 0-4, got {data[key]!r}"
    for key in BOOLEAN_FIELDS:
        if key not in data or data[key] is None:
            problems[key] = "missing"
        elif not isinstance(data[key], bool):
            problems[key] = f"must be a boolean, got {data[key]!r}"
    return problems


def coerce_profile(profile: "ContextProfile | Mapping[str, Any] | None") -> ContextProfile:
    """Accept either a ContextProfile or a raw mapping and return a validated profile."""
    if isinstance(profile, ContextProfile):
        return profile
    return ContextProfile.from_mapping(profile)


@dataclass(frozen=True)
class ContextFlags:
    """Boolean context flags shared by the insight engine and value overlay."""

    high_regulation: bool = False
    high_data_sensitivity: bool = False
    high_safety_criticality: bool = False
    low_build_readiness: bool = False
    fast_paced: bool = False
    has_edge_operations: bool = False
    has_procurement_constraints: bool = False

    @classmethod
    def from_profile(cls, profile: ContextProfile | None) -> "ContextFlags":
        """Derive flags from a profile; None means no context flags apply."""
        if profile is None:
            return cls()
        return cls(
            high_regulation=profile.regulatory_intensity >= HIGH_THRESHOLD,
            high_data_sensitivity=profile.data_sensitivity >= HIGH_THRESHOLD,
            high_safety_criticality=profile.safety_criticality >= HIGH_THRESHOLD,
            low_build_readiness=profile.build_readiness <= LOW_THRESHOLD,
            fast_paced=profile.clock_speed >= HIGH_THRESHOLD,
            has_edge_operations=profile.edge_operations,
            has_procurement_constraints=profile.procurement_constraints,
        )
