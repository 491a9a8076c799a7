"""Executive insight and 90-day priority selection.

The engine is a priority cascade, not a set of independent rules. Rules run
in a fixed order and each match appends to the result:

    1. Compliance:      any triggered gate; always first.
    2. Maturity band:   exactly one band by average pillar score.
    3. Weakest domain:  only when the weakest pillar scores <= 1.0;
                        first matching specialization wins.
    4. Imbalance:       only while fewer than 3 insights are selected and
                        variance > 1.2.

Insights and priorities are then truncated independently to their first 3
entries, in cascade order (never re-sorted by urgency).

Rules that need pillar scores are skipped when no pillar is scored yet, so
a partially completed assessment degrades to fewer insights instead of
failing.
"""

from collections.abc import Callable, Mapping, Sequence
from dataclasses import asdict, dataclass
from typing import Any

from cortex_assessment.core.gates import Gate
from cortex_assessment.core.insight_library import (
    INSIGHT_LIBRARY,
    PRIORITY_LIBRARY,
    Urgency,
    render_template,
)
from cortex_assessment.core.profile import ContextFlags, ContextProfile, coerce_profile
from cortex_assessment.core.scale import format_score
from cortex_assessment.core.scoring import (
    DomainScore,
    MaturityAnalysis,
    analyze_maturity,
    weakest_domains,
)
from cortex_assessment.observability import get_logger

logger = get_logger(__name__)

MAX_INSIGHTS: int = 3
MAX_PRIORITIES: int = 3

# Three or more gates escalate compliance guidance from moderate to critical.
CRITICAL_GATE_COUNT: int = 3

# Stricter than the 0.8 "unbalanced" flag in scoring; the two are distinct on purpose.
IMBALANCE_INSIGHT_VARIANCE: float = 1.2

WEAKEST_DOMAIN_CEILING: float = 1.0


@dataclass(frozen=True)
class Insight:
    """A selected executive insight with its template slots filled."""

    key: str
    type: str
    title: str
    description: str
    action: str
    reasoning: str
    business_impact: str
    urgency: Urgency

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Priority:
    """A selected near-term priority action."""

    key: str
    title: str
    description: str
    reasoning: str
    timeframe: str
    urgency: Urgency

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class InsightResult:
    """The capped insights and priorities for one evaluation."""

    insights: tuple[Insight, ...]
    priorities: tuple[Priority, ...]


@dataclass(frozen=True)
class MaturityBand:
    """One row of the maturity-band table.

    Attributes:
        upper_bound: Exclusive upper bound on the average score; None = no bound.
        insight_key: INSIGHT_LIBRARY key selected for this band.
        priority_key: PRIORITY_LIBRARY key, or None when the band has no priority.
        priority_reasoning: Band-specific reasoning overriding the library text.
    """

    upper_bound: float | None
    insight_key: str
    priority_key: str | None = None
    priority_reasoning: str | None = None

    def matches(self, avg: float) -> bool:
        return self.upper_bound is None or avg < self.upper_bound


@dataclass(frozen=True)
class WeakestDomainRule:
    """A weakest-domain specialization.

    Attributes:
        name: Rule name, used in logs.
        predicate: Called with (weakest pillar, maturity analysis, context flags).
        insight_key: INSIGHT_LIBRARY key, or None for priority-only rules.
        priority_key: PRIORITY_LIBRARY key, or None for insight-only rules.
    """

    name: str
    predicate: Callable[[DomainScore, MaturityAnalysis, ContextFlags], bool]
    insight_key: str | None
    priority_key: str | None


# Evaluated top to bottom; the first band whose bound exceeds the average wins.
MATURITY_BANDS: tuple[MaturityBand, ...] = (
    MaturityBand(1.0, "foundations_critical", "build_foundations"),
    MaturityBand(
        1.5,
        "foundations_weak",
        "build_foundations",
        priority_reasoning="current capabilities need reinforcement before scaling initiatives",
    ),
    MaturityBand(2.5, "systematic_development", "systematize_practices"),
    MaturityBand(3.0, "optimization_focus", "optimize_operations"),
    # Leadership-level organizations get insight-only guidance.
    MaturityBand(None, "maturity_leadership"),
)

# First match wins; the last rule always matches.
WEAKEST_DOMAIN_RULES: tuple[WeakestDomainRule, ...] = (
    WeakestDomainRule(
        name="data_debt",
        predicate=lambda weakest, maturity, flags: weakest.pillar == "O" and maturity.avg > 1.5,
        insight_key="data_debt_blocking",
        priority_key="resolve_data_debt",
    ),
    WeakestDomainRule(
        name="talent",
        predicate=lambda weakest, maturity, flags: weakest.pillar == "T",
        insight_key="talent_constraint",
        priority_key="develop_talent",
    ),
    WeakestDomainRule(
        name="security",
        predicate=lambda weakest, maturity, flags: (
            weakest.pillar == "R" and (flags.high_regulation or flags.high_data_sensitivity)
        ),
        insight_key="security_gaps",
        priority_key=None,
    ),
    WeakestDomainRule(
        name="strengthen_weakest",
        predicate=lambda weakest, maturity, flags: True,
        insight_key=None,
        priority_key="strengthen_weakest",
    ),
)


def _build_insight(key: str, slots: Mapping[str, str]) -> Insight:
    template = INSIGHT_LIBRARY[key]
    return Insight(
        key=template.key,
        type=template.type,
        title=render_template(template.title, slots),
        description=render_template(template.description, slots),
        action=render_template(template.action, slots),
        reasoning=render_template(template.reasoning, slots),
        business_impact=template.business_impact,
        urgency=template.urgency,
    )


def _build_priority(
    key: str,
    slots: Mapping[str, str],
    reasoning: str | None = None,
) -> Priority:
    template = PRIORITY_LIBRARY[key]
    return Priority(
        key=template.key,
        title=render_template(template.title, slots),
        description=render_template(template.description, slots),
        reasoning=render_template(reasoning or template.reasoning, slots),
        timeframe=template.timeframe,
        urgency=template.urgency,
    )


def _slots(
    gate_count: int,
    maturity: MaturityAnalysis,
    weakest: DomainScore | None,
) -> dict[str, str]:
    slots = {
        "count": str(gate_count),
        "plural": "" if gate_count == 1 else "s",
        "avg": format_score(maturity.avg),
        "spread": format_score(maturity.max - maturity.min),
    }
    if weakest is not None:
        slots["domain"] = weakest.name
        slots["score"] = format_score(weakest.score)
    return slots


def generate_insights(
    scores: Mapping[str, float] | None,
    gates: Sequence[Gate] | None,
    profile: ContextProfile | Mapping[str, Any] | None,
    max_insights: int = MAX_INSIGHTS,
    max_priorities: int = MAX_PRIORITIES,
) -> InsightResult:
    """Select up to 3 insights and 3 priorities for an assessment.

    Args:
        scores: Pillar scores, possibly partial or empty.
        gates: Triggered gates for the profile (may be empty).
        profile: Context Profile, or None when no context flags apply.
        max_insights: Cap on returned insights; values above 3 are ignored.
        max_priorities: Cap on returned priorities; values above 3 are ignored.

    Returns:
        InsightResult with insights and priorities in cascade order.

    Raises:
        InvalidProfileError: If a raw profile mapping is given but is invalid.
    """
    gate_list = list(gates or ())
    flags = ContextFlags.from_profile(coerce_profile(profile) if profile is not None else None)
    has_scores = bool(scores)
    maturity = analyze_maturity(scores)
    weakest_list = weakest_domains(scores, 1)
    weakest = weakest_list[0] if weakest_list else None
    slots = _slots(len(gate_list), maturity, weakest)

    insights: list[Insight] = []
    priorities: list[Priority] = []

    # 1. Compliance always takes precedence.
    if gate_list:
        key = "compliance_critical" if len(gate_list) >= CRITICAL_GATE_COUNT else "compliance_moderate"
        insights.append(_build_insight(key, slots))
        priorities.append(_build_priority("address_compliance", slots))

    # 2. Maturity band.
    if has_scores:
        band = next(band for band in MATURITY_BANDS if band.matches(maturity.avg))
        insights.append(_build_insight(band.insight_key, slots))
        if band.priority_key is not None:
            priorities.append(_build_priority(band.priority_key, slots, band.priority_reasoning))

    # 3. Weakest-domain specialization.
    if weakest is not None and weakest.score <= WEAKEST_DOMAIN_CEILING:
        rule = next(rule for rule in WEAKEST_DOMAIN_RULES if rule.predicate(weakest, maturity, flags))
        if rule.insight_key is not None:
            insights.append(_build_insight(rule.insight_key, slots))
        if rule.priority_key is not None:
            priorities.append(_build_priority(rule.priority_key, slots))
        logger.debug("Weakest-domain rule matched", rule=rule.name, pillar=weakest.pillar)

    # 4. Imbalance, only while there is still room.
    if (
        has_scores
        and len(insights) < MAX_INSIGHTS
        and maturity.variance > IMBALANCE_INSIGHT_VARIANCE
    ):
        insights.append(_build_insight("capability_imbalance", slots))

    result = InsightResult(
        insights=tuple(insights[:min(max_insights, MAX_INSIGHTS)]),
        priorities=tuple(priorities[:min(max_priorities, MAX_PRIORITIES)]),
    )

    logger.debug(
        "Insights generated",
        insight_keys=[insight.key for insight in result.insights],
        priority_keys=[priority.key for priority in result.priorities],
        gate_count=len(gate_list),
        average_score=maturity.avg,
    )
    return result


def format_insight_for_executive(insight: Insight) -> str:
    """Render an insight as a one-line markdown summary."""
    return f"**{insight.title}**: {insight.description} {insight.reasoning}. *{insight.action}*"


def business_impact_summary(insights: Sequence[Insight]) -> str:
    """Summarize how many high-urgency issues the insights raise."""
    high_urgency_count = sum(1 for insight in insights if insight.urgency == "high")
    if high_urgency_count >= 2:
        return (
            "Multiple high-priority issues require immediate executive attention to "
            "prevent AI initiative failure."
        )
    if high_urgency_count == 1:
        return (
            "One critical issue requires immediate attention, while other areas support "
            "strategic development."
        )
    return (
        "No critical blockers identified - focus on systematic capability development "
        "and optimization."
    )
