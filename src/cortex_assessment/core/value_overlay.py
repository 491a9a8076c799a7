"""Value overlay: context-aware default tracking metrics per pillar.

Each pillar starts from a fixed baseline default metric. Override rules then
swap in a different metric when the Context Profile crosses a threshold.
Overrides are independent per pillar; when several rules target the same
pillar, the first matching rule in declaration order wins.

The overlay depends on the Context Profile only. Pulse answers never change
which metric is selected.
"""

from collections.abc import Mapping
from dataclasses import asdict, dataclass, replace
from types import MappingProxyType
from typing import Any, Literal

from cortex_assessment.core.gates import GateCondition
from cortex_assessment.core.profile import ContextProfile, coerce_profile
from cortex_assessment.core.questions import PILLAR_ORDER
from cortex_assessment.observability import get_logger

logger = get_logger(__name__)

Cadence = Literal["monthly", "quarterly"]

CADENCES: frozenset[str] = frozenset({"monthly", "quarterly"})


@dataclass(frozen=True)
class Metric:
    """A trackable value metric from the catalog.

    Attributes:
        metric_id: Unique identifier (e.g. 'o_value_gate_pass').
        pillar: Pillar the metric tracks.
        name: Display name.
        definition: One-line definition.
        unit: Unit symbol shown next to baseline/target.
        unit_hint: Longer unit description for input forms.
        tags: Free-form topic tags.
        is_default: True for the pillar's baseline default.
    """

    metric_id: str
    pillar: str
    name: str
    definition: str
    unit: str
    unit_hint: str
    tags: tuple[str, ...]
    is_default: bool = False


@dataclass(frozen=True)
class ValueOverlayEntry:
    """Tracking state for one pillar's selected metric.

    baseline and target start as None and are the only user-editable
    fields; edits return a new entry via ``update_overlay_entry``.
    """

    pillar: str
    metric_id: str
    name: str
    unit: str
    cadence: Cadence
    baseline: float | None = None
    target: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class MetricOverrideRule:
    """Swap a pillar's default metric when any condition holds.

    Attributes:
        pillar: Pillar whose default is replaced.
        metric_id: Replacement metric.
        conditions: OR-ed threshold predicates over the Context Profile.
        reasons: Human-readable factor per condition field, for explanations.
    """

    pillar: str
    metric_id: str
    conditions: tuple[GateCondition, ...]
    reasons: Mapping[str, str]

    def matches(self, profile: ContextProfile) -> bool:
        return any(condition.holds(profile) for condition in self.conditions)

    def factors(self, profile: ContextProfile) -> list[str]:
        return [
            self.reasons[condition.field]
            for condition in self.conditions
            if condition.holds(profile)
        ]


METRIC_CATALOG: tuple[Metric, ...] = (
    # C: Clarity & Command
    Metric(
        "c_initiatives_ai_outcomes",
        "C",
        "% strategic initiatives with explicit AI outcomes",
        "Share of enterprise initiatives that specify measurable AI impact",
        "%",
        "percentage",
        ("strategic", "leadership"),
        is_default=True,
    ),
    Metric(
        "c_reallocation_ai_driven",
        "C",
        "% reallocation decisions driven by AI results",
        "Budget/resource decisions per quarter based on AI performance data",
        "%",
        "percentage",
        ("financial", "decisions"),
    ),
    Metric(
        "c_leadership_ai_agenda",
        "C",
        "% leadership reviews with AI on the agenda",
        "Executive review meetings that include AI progress as agenda item",
        "%",
        "percentage",
        ("governance", "leadership"),
    ),
    # O: Operations & Data
    Metric(
        "o_value_gate_pass",
        "O",
        "% AI use-cases passing the value gate",
        "Use-cases approved after value/feasibility screening",
        "%",
        "percentage",
        ("screening", "value"),
        is_default=True,
    ),
    Metric(
        "o_latency_availability",
        "O",
        "p95 latency or service availability of AI endpoints",
        "End-to-end performance of AI services",
        "ms/%",
        "milliseconds or percentage",
        ("performance", "technical"),
    ),
    Metric(
        "o_drift_incidents",
        "O",
        "Drift incidents acknowledged and resolved",
        "Model drift issues identified and addressed per quarter",
        "count",
        "number per quarter",
        ("quality", "monitoring"),
    ),
    # R: Risk, Trust & Security
    Metric(
        "r_mttr",
        "R",
        "AI incidents mean time to resolve (MTTR)",
        "Average time to resolve AI-related incidents",
        "hours",
        "hours or days",
        ("incident", "response"),
        is_default=True,
    ),
    Metric(
        "r_hitl_coverage",
        "R",
        "% high-impact AI systems with HITL active",
        "Critical AI systems with human-in-the-loop oversight",
        "%",
        "percentage",
        ("oversight", "safety"),
    ),
    Metric(
        "r_audit_pass_rate",
        "R",
        "Audit/assurance pass rate",
        "Internal/external AI reviews passed in last 12 months",
        "%",
        "percentage",
        ("compliance", "assurance"),
    ),
    # T: Talent & Culture
    Metric(
        "t_adoption",
        "T",
        "% target roles actively using AI weekly",
        "Adoption in roles expected to use AI tools regularly",
        "%",
        "percentage",
        ("adoption", "usage"),
        is_default=True,
    ),
    Metric(
        "t_training_coverage",
        "T",
        "% target roles trained in last 12 months",
        "Role-based AI training completion rates",
        "%",
        "percentage",
        ("training", "skills"),
    ),
    Metric(
        "t_sop_redesign",
        "T",
        "% redesigned SOPs/tasks that embed AI + checkpoints",
        "Work processes updated to integrate AI with quality controls",
        "%",
        "percentage",
        ("process", "integration"),
    ),
    # E: Ecosystem & Infrastructure
    Metric(
        "e_unit_cost",
        "E",
        "Unit cost of AI",
        "Cost per 1k tokens/call with trend direction",
        "$/call",
        "dollars per unit",
        ("cost", "finops"),
        is_default=True,
    ),
    Metric(
        "e_quota_breach_rate",
        "E",
        "Quota/limit breach rate",
        "Rate limits or license caps hit per month",
        "count",
        "number per month",
        ("limits", "capacity"),
    ),
    Metric(
        "e_dual_readiness",
        "E",
        "% critical paths with dual vendor/region readiness tested",
        "Critical AI dependencies with verified backup options",
        "%",
        "percentage",
        ("resilience", "redundancy"),
    ),
    # X: Experimentation & Evolution
    Metric(
        "x_pilot_throughput",
        "X",
        "Pilot throughput",
        "Ideas to pilots to decisions per quarter",
        "count",
        "number per quarter",
        ("innovation", "velocity"),
        is_default=True,
    ),
    Metric(
        "x_retirement_rate",
        "X",
        "% pilots retired on schedule",
        "Sunset logic honored for completed pilots",
        "%",
        "percentage",
        ("discipline", "sunset"),
    ),
    Metric(
        "x_time_to_learning",
        "X",
        "Time-to-learning",
        "Median days from pilot start to decision",
        "days",
        "days",
        ("speed", "learning"),
    ),
)

METRICS_BY_ID: MappingProxyType[str, Metric] = MappingProxyType(
    {metric.metric_id: metric for metric in METRIC_CATALOG}
)

BASELINE_DEFAULTS: MappingProxyType[str, str] = MappingProxyType(
    {metric.pillar: metric.metric_id for metric in METRIC_CATALOG if metric.is_default}
)

# Experimentation is measured on longer cycles than operational pillars.
DEFAULT_CADENCE: MappingProxyType[str, Cadence] = MappingProxyType(
    {pillar: ("quarterly" if pillar == "X" else "monthly") for pillar in PILLAR_ORDER}
)

# Declaration order matters: per pillar, the first matching rule wins.
OVERRIDE_RULES: tuple[MetricOverrideRule, ...] = (
    MetricOverrideRule(
        pillar="R",
        metric_id="r_mttr",
        conditions=(
            GateCondition("regulatory_intensity", ">=", 3),
            GateCondition("safety_criticality", ">=", 3),
        ),
        reasons=MappingProxyType(
            {
                "regulatory_intensity": "high regulatory intensity",
                "safety_criticality": "high safety criticality",
            }
        ),
    ),
    MetricOverrideRule(
        pillar="X",
        metric_id="x_pilot_throughput",
        conditions=(GateCondition("clock_speed", ">=", 3),),
        reasons=MappingProxyType({"clock_speed": "high clock speed requirements"}),
    ),
    MetricOverrideRule(
        pillar="O",
        metric_id="o_latency_availability",
        conditions=(
            GateCondition("scale_throughput", ">=", 3),
            GateCondition("latency_edge", ">=", 3),
        ),
        reasons=MappingProxyType(
            {
                "scale_throughput": "high scale requirements",
                "latency_edge": "latency-sensitive operations",
            }
        ),
    ),
    MetricOverrideRule(
        pillar="T",
        metric_id="t_adoption",
        conditions=(GateCondition("build_readiness", "<=", 1),),
        reasons=MappingProxyType({"build_readiness": "early-stage AI readiness"}),
    ),
    MetricOverrideRule(
        pillar="E",
        metric_id="e_unit_cost",
        conditions=(GateCondition("finops_priority", ">=", 3),),
        reasons=MappingProxyType({"finops_priority": "high FinOps priority"}),
    ),
)


def _matching_rules(profile: ContextProfile) -> dict[str, MetricOverrideRule]:
    winners: dict[str, MetricOverrideRule] = {}
    for rule in OVERRIDE_RULES:
        if rule.pillar not in winners and rule.matches(profile):
            winners[rule.pillar] = rule
    return winners


def select_default_metrics(profile: ContextProfile | Mapping[str, Any] | None) -> dict[str, str]:
    """Choose the default tracking metric for every pillar.

    Args:
        profile: A ContextProfile or a raw mapping with all 12 fields.

    Returns:
        Mapping of pillar letter to metric ID, in C, O, R, T, E, X order.

    Raises:
        InvalidProfileError: If the profile is missing, incomplete, or out of range.
    """
    validated = coerce_profile(profile)
    winners = _matching_rules(validated)
    defaults = {
        pillar: winners[pillar].metric_id if pillar in winners else BASELINE_DEFAULTS[pillar]
        for pillar in PILLAR_ORDER
    }
    logger.debug(
        "Value overlay defaults selected",
        overridden_pillars=sorted(winners),
        defaults=defaults,
    )
    return defaults


def initialize_value_overlay(
    profile: ContextProfile | Mapping[str, Any] | None,
) -> dict[str, ValueOverlayEntry]:
    """Build a fresh overlay with null baseline and target for every pillar."""
    overlay: dict[str, ValueOverlayEntry] = {}
    for pillar, metric_id in select_default_metrics(profile).items():
        metric = METRICS_BY_ID[metric_id]
        overlay[pillar] = ValueOverlayEntry(
            pillar=pillar,
            metric_id=metric.metric_id,
            name=metric.name,
            unit=metric.unit,
            cadence=DEFAULT_CADENCE[pillar],
        )
    return overlay


_UNSET: Any = object()


def update_overlay_entry(
    entry: ValueOverlayEntry,
    baseline: float | None = _UNSET,
    target: float | None = _UNSET,
    cadence: str = _UNSET,
) -> ValueOverlayEntry:
    """Return a copy of ``entry`` with user-edited baseline, target or cadence.

    Arguments left unset keep their current value; passing None clears a
    baseline or target.

    Raises:
        ValueError: If cadence is not 'monthly' or 'quarterly'.
    """
    changes: dict[str, Any] = {}
    if baseline is not _UNSET:
        changes["baseline"] = baseline
    if target is not _UNSET:
        changes["target"] = target
    if cadence is not _UNSET:
        if cadence not in CADENCES:
            raise ValueError(f"cadence must be 'monthly' or 'quarterly', got {cadence!r}")
        changes["cadence"] = cadence
    return replace(entry, **changes)


def switch_overlay_metric(entry: ValueOverlayEntry, metric_id: str) -> ValueOverlayEntry:
    """Point an entry at another metric of the same pillar.

    Baseline and target are reset because they were measured in the old
    metric's unit.

    Raises:
        ValueError: If the metric is unknown or belongs to another pillar.
    """
    metric = get_metric(metric_id)
    if metric is None:
        raise ValueError(f"Unknown metric: {metric_id!r}")
    if metric.pillar != entry.pillar:
        raise ValueError(
            f"Metric {metric_id!r} belongs to pillar {metric.pillar!r}, not {entry.pillar!r}"
        )
    return replace(
        entry,
        metric_id=metric.metric_id,
        name=metric.name,
        unit=metric.unit,
        baseline=None,
        target=None,
    )


def metric_selection_explanation(
    metric_id: str,
    profile: ContextProfile | Mapping[str, Any] | None,
) -> str | None:
    """Explain why a metric was chosen for this profile, if context drove it.

    Returns:
        e.g. 'Selected due to high scale requirements and latency-sensitive
        operations', or None when the metric is a plain baseline default.
    """
    validated = coerce_profile(profile)
    for rule in OVERRIDE_RULES:
        if rule.metric_id != metric_id:
            continue
        factors = rule.factors(validated)
        if factors:
            return f"Selected due to {' and '.join(factors)}"
    return None


def get_metric(metric_id: str) -> Metric | None:
    """Look up a metric by ID."""
    return METRICS_BY_ID.get(metric_id)


def metrics_for_pillar(pillar: str) -> list[Metric]:
    """Return every catalog metric for a pillar, in catalog order."""
    return [metric for metric in METRIC_CATALOG if metric.pillar == pillar]


def default_metric_for_pillar(pillar: str) -> Metric | None:
    """Return the baseline default metric for a pillar."""
    metric_id = BASELINE_DEFAULTS.get(pillar)
    return METRICS_BY_ID.get(metric_id) if metric_id is not None else None
