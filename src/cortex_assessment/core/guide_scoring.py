"""Implementation-guide ranking for one pillar.

Guides are short how-to playbooks from a fixed library. For a pillar the
candidate set is every guide of that pillar plus every gate and context
guide. Each candidate scores

    base_relevance
      + 0.4  * (3 - pillar_score)                 gap
      + 0.35 * sum(trigger boosts that hold)      context
      + 0.25 * sum(per-question answer boosts)    pulse targeting
      + urgency bonus (critical 0.1, high 0.05)

An unscored pillar contributes no gap term. Candidates are sorted by score
(ties keep library order), then any prerequisite that is also a candidate is
pulled in front of the guide that needs it.

This is the only ranking that reads the Context Profile and individual pulse
answers together.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal

from cortex_assessment.core.errors import UnknownPillarError
from cortex_assessment.core.gates import GateCondition
from cortex_assessment.core.priority_moves import MAX_PILLAR_SCORE
from cortex_assessment.core.profile import ContextProfile, coerce_profile
from cortex_assessment.core.questions import PILLARS, pillar_name
from cortex_assessment.core.scale import format_score
from cortex_assessment.observability import get_logger

logger = get_logger(__name__)

GuideCategory = Literal["gate", "pillar", "context"]
GuideUrgency = Literal["critical", "high", "medium", "low"]

GAP_WEIGHT: float = 0.4
CONTEXT_WEIGHT: float = 0.35
PULSE_WEIGHT: float = 0.25

# Gap and context reasons are only worth mentioning past these sizes.
GAP_REASON_MIN: float = 0.3
CONTEXT_REASON_MIN_BOOST: float = 0.2

URGENCY_BONUS: dict[str, float] = {"critical": 0.1, "high": 0.05}

# No / Started / Mostly; a "Yes" answer earns nothing.
PULSE_ANSWER_BOOSTS: dict[float, float] = {0.0: 0.25, 0.25: 0.15, 0.5: 0.05}

DEFAULT_GUIDE_LIMIT: int = 5

_FOUNDATIONAL_EXPLANATION = "Foundational guide for this domain"


@dataclass(frozen=True)
class ContextTrigger:
    """Boost a guide when its condition holds for the profile."""

    condition: GateCondition
    boost: float

    @property
    def phrase(self) -> str:
        return f"matches your {self.condition.field.replace('_', ' ')}"


@dataclass(frozen=True)
class GuideMetadata:
    """A library guide and the signals that make it relevant.

    Attributes:
        guide_id: Stable identifier.
        title: Display title.
        category: 'gate' and 'context' guides are candidates for every pillar;
            'pillar' guides only for their own pillar.
        pillar: Owning pillar for 'pillar' guides, otherwise None.
        difficulty: 'beginner', 'intermediate' or 'advanced'.
        time_to_implement: Rough effort, e.g. '1-week'.
        urgency: Drives the urgency bonus.
        base_relevance: Starting score (0-1).
        targets: Pulse question IDs whose weak answers this guide addresses.
        prerequisites: Guide IDs that should be read first.
        triggers: Context boosts.
    """

    guide_id: str
    title: str
    category: GuideCategory
    pillar: str | None
    difficulty: str
    time_to_implement: str
    urgency: GuideUrgency
    base_relevance: float
    targets: tuple[str, ...] = ()
    prerequisites: tuple[str, ...] = ()
    triggers: tuple[ContextTrigger, ...] = ()

    def is_candidate_for(self, pillar: str) -> bool:
        return self.category != "pillar" or self.pillar == pillar


@dataclass(frozen=True)
class GuideScore:
    """A scored guide with the factors and reasons behind its score."""

    guide: GuideMetadata
    score: float
    gap_boost: float
    context_boost: float
    pulse_boost: float
    reasons: tuple[str, ...]

    @property
    def explanation(self) -> str:
        return guide_explanation(self.reasons)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.guide.guide_id,
            "title": self.guide.title,
            "category": self.guide.category,
            "pillar": self.guide.pillar,
            "difficulty": self.guide.difficulty,
            "time_to_implement": self.guide.time_to_implement,
            "urgency": self.guide.urgency,
            "prerequisites": list(self.guide.prerequisites),
            "score": self.score,
            "explain": {
                "gap_boost": self.gap_boost,
                "context_boost": self.context_boost,
                "pulse_boost": self.pulse_boost,
                "reasons": list(self.reasons),
            },
            "explanation": self.explanation,
        }


@dataclass(frozen=True)
class GuideRecommendations:
    pillar: str
    pillar_score: float | None
    guides: tuple[GuideScore, ...]
    total_evaluated: int


def _at_least(field: str, threshold: int, boost: float) -> ContextTrigger:
    return ContextTrigger(GateCondition(field, ">=", threshold), boost)


def _at_most(field: str, threshold: int, boost: float) -> ContextTrigger:
    return ContextTrigger(GateCondition(field, "<=", threshold), boost)


def _is_set(field: str, boost: float) -> ContextTrigger:
    return ContextTrigger(GateCondition(field, "is", True), boost)


GUIDE_LIBRARY: tuple[GuideMetadata, ...] = (
    GuideMetadata(
        guide_id="gate_hitl",
        title="Human-in-the-Loop Oversight",
        category="gate",
        pillar=None,
        difficulty="intermediate",
        time_to_implement="1-week",
        urgency="critical",
        base_relevance=0.75,
        targets=("O1", "R2"),
        triggers=(
            _at_least("regulatory_intensity", 3, 0.25),
            _at_least("safety_criticality", 3, 0.30),
        ),
    ),
    GuideMetadata(
        guide_id="gate_assurance",
        title="Assurance Cadence and Audit Readiness",
        category="gate",
        pillar=None,
        difficulty="advanced",
        time_to_implement="1-month",
        urgency="high",
        base_relevance=0.70,
        targets=("R1", "R3"),
        triggers=(
            _at_least("regulatory_intensity", 3, 0.20),
            _at_least("brand_exposure", 3, 0.15),
        ),
    ),
    GuideMetadata(
        guide_id="pillar_c_deep",
        title="AI Strategy and Leadership Deep Dive",
        category="pillar",
        pillar="C",
        difficulty="beginner",
        time_to_implement="1-week",
        urgency="high",
        base_relevance=0.65,
        targets=("C1", "C2", "C3"),
        triggers=(_at_most("build_readiness", 1, 0.20),),
    ),
    GuideMetadata(
        guide_id="pillar_o_deep",
        title="AI Operations Deep Dive",
        category="pillar",
        pillar="O",
        difficulty="intermediate",
        time_to_implement="1-month",
        urgency="high",
        base_relevance=0.68,
        targets=("O1", "O2", "O3"),
        triggers=(
            _at_least("scale_throughput", 3, 0.20),
            _at_least("data_advantage", 3, 0.15),
        ),
    ),
    GuideMetadata(
        guide_id="pillar_o_data_quality",
        title="Data Quality for AI",
        category="pillar",
        pillar="O",
        difficulty="intermediate",
        time_to_implement="1-month",
        urgency="critical",
        base_relevance=0.72,
        targets=("O2",),
        triggers=(
            _at_least("data_sensitivity", 3, 0.25),
            _at_least("scale_throughput", 3, 0.15),
        ),
    ),
    GuideMetadata(
        guide_id="pillar_r_deep",
        title="Risk and Trust Deep Dive",
        category="pillar",
        pillar="R",
        difficulty="intermediate",
        time_to_implement="1-month",
        urgency="high",
        base_relevance=0.70,
        targets=("R1", "R2", "R3"),
        triggers=(
            _at_least("regulatory_intensity", 3, 0.30),
            _at_least("safety_criticality", 3, 0.25),
        ),
    ),
    GuideMetadata(
        guide_id="pillar_r_bias_testing",
        title="Bias and Fairness Testing",
        category="pillar",
        pillar="R",
        difficulty="advanced",
        time_to_implement="1-month",
        urgency="medium",
        base_relevance=0.60,
        targets=("R2",),
        prerequisites=("pillar_r_deep",),
        triggers=(
            _at_least("brand_exposure", 3, 0.20),
            _at_least("regulatory_intensity", 3, 0.15),
        ),
    ),
    GuideMetadata(
        guide_id="pillar_t_deep",
        title="AI Talent and Culture Deep Dive",
        category="pillar",
        pillar="T",
        difficulty="beginner",
        time_to_implement="3-months",
        urgency="medium",
        base_relevance=0.62,
        targets=("T1", "T2", "T3"),
        triggers=(_at_most("build_readiness", 1, 0.25),),
    ),
    GuideMetadata(
        guide_id="pillar_t_change_management",
        title="Change Management for AI Adoption",
        category="pillar",
        pillar="T",
        difficulty="intermediate",
        time_to_implement="3-months",
        urgency="medium",
        base_relevance=0.58,
        targets=("T2", "T3"),
        triggers=(_at_least("clock_speed", 3, 0.15),),
    ),
    GuideMetadata(
        guide_id="pillar_e_deep",
        title="AI Platform and Ecosystem Deep Dive",
        category="pillar",
        pillar="E",
        difficulty="advanced",
        time_to_implement="3-months",
        urgency="medium",
        base_relevance=0.65,
        targets=("E1", "E2", "E3"),
        triggers=(
            _at_least("scale_throughput", 3, 0.25),
            _is_set("edge_operations", 0.20),
        ),
    ),
    GuideMetadata(
        guide_id="pillar_e_cost_optimization",
        title="AI Cost Optimization",
        category="pillar",
        pillar="E",
        difficulty="intermediate",
        time_to_implement="1-month",
        urgency="high",
        base_relevance=0.63,
        targets=("E3",),
        triggers=(
            _at_least("finops_priority", 3, 0.30),
            _at_least("scale_throughput", 3, 0.15),
        ),
    ),
    GuideMetadata(
        guide_id="pillar_x_deep",
        title="Experimentation Deep Dive",
        category="pillar",
        pillar="X",
        difficulty="beginner",
        time_to_implement="1-week",
        urgency="medium",
        base_relevance=0.60,
        targets=("X1", "X2", "X3"),
        triggers=(_at_least("clock_speed", 3, 0.15),),
    ),
    GuideMetadata(
        guide_id="pillar_x_pilot_management",
        title="Pilot Portfolio Management",
        category="pillar",
        pillar="X",
        difficulty="intermediate",
        time_to_implement="1-month",
        urgency="medium",
        base_relevance=0.58,
        targets=("X2",),
        triggers=(_at_least("data_advantage", 3, 0.20),),
    ),
    GuideMetadata(
        guide_id="gate_data_governance",
        title="Data Governance Controls",
        category="gate",
        pillar=None,
        difficulty="advanced",
        time_to_implement="3-months",
        urgency="critical",
        base_relevance=0.72,
        targets=("O2", "R1"),
        triggers=(
            _at_least("data_sensitivity", 3, 0.30),
            _at_least("regulatory_intensity", 3, 0.25),
        ),
    ),
    GuideMetadata(
        guide_id="gate_model_monitoring",
        title="Model Monitoring and Drift Detection",
        category="gate",
        pillar=None,
        difficulty="intermediate",
        time_to_implement="1-month",
        urgency="high",
        base_relevance=0.68,
        targets=("O1", "R1"),
        triggers=(
            _at_least("scale_throughput", 3, 0.20),
            _at_least("safety_criticality", 3, 0.25),
        ),
    ),
    GuideMetadata(
        guide_id="context_regulated",
        title="AI in Regulated Industries",
        category="context",
        pillar=None,
        difficulty="advanced",
        time_to_implement="3-months",
        urgency="critical",
        base_relevance=0.50,
        triggers=(_at_least("regulatory_intensity", 3, 0.40),),
    ),
    GuideMetadata(
        guide_id="context_startup",
        title="Getting Started with Limited AI Capacity",
        category="context",
        pillar=None,
        difficulty="beginner",
        time_to_implement="1-week",
        urgency="high",
        base_relevance=0.45,
        triggers=(_at_most("build_readiness", 1, 0.30),),
    ),
    GuideMetadata(
        guide_id="context_enterprise",
        title="Scaling AI Across the Enterprise",
        category="context",
        pillar=None,
        difficulty="advanced",
        time_to_implement="3-months",
        urgency="medium",
        base_relevance=0.45,
        triggers=(
            _at_least("scale_throughput", 3, 0.25),
            _at_least("build_readiness", 3, 0.20),
        ),
    ),
    GuideMetadata(
        guide_id="gate_roi_measurement",
        title="AI ROI Measurement",
        category="gate",
        pillar=None,
        difficulty="intermediate",
        time_to_implement="1-month",
        urgency="high",
        base_relevance=0.65,
        targets=("C3",),
        triggers=(_at_least("finops_priority", 3, 0.25),),
    ),
    GuideMetadata(
        guide_id="gate_vendor_selection",
        title="AI Vendor Selection",
        category="gate",
        pillar=None,
        difficulty="intermediate",
        time_to_implement="1-month",
        urgency="medium",
        base_relevance=0.60,
        targets=("E2",),
        triggers=(
            _at_most("build_readiness", 2, 0.20),
            _is_set("procurement_constraints", 0.25),
        ),
    ),
    GuideMetadata(
        guide_id="context_board_governance",
        title="Board-Level AI Governance",
        category="context",
        pillar=None,
        difficulty="advanced",
        time_to_implement="3-months",
        urgency="high",
        base_relevance=0.55,
        targets=("C1",),
        triggers=(
            _at_least("brand_exposure", 3, 0.25),
            _at_least("regulatory_intensity", 3, 0.20),
        ),
    ),
    GuideMetadata(
        guide_id="pillar_x_usecase_triage",
        title="Use-Case Triage",
        category="pillar",
        pillar="X",
        difficulty="beginner",
        time_to_implement="1-week",
        urgency="high",
        base_relevance=0.62,
        targets=("X1", "X2"),
    ),
    GuideMetadata(
        guide_id="pillar_r_security_redteaming",
        title="Security Red-Teaming",
        category="pillar",
        pillar="R",
        difficulty="advanced",
        time_to_implement="1-month",
        urgency="medium",
        base_relevance=0.58,
        targets=("R3",),
        prerequisites=("pillar_r_deep",),
        triggers=(
            _at_least("safety_criticality", 3, 0.30),
            _at_least("brand_exposure", 3, 0.20),
        ),
    ),
    GuideMetadata(
        guide_id="gate_llm_privacy",
        title="LLM Privacy Safeguards",
        category="gate",
        pillar=None,
        difficulty="advanced",
        time_to_implement="1-month",
        urgency="critical",
        base_relevance=0.70,
        targets=("R1", "O2"),
        triggers=(
            _at_least("data_sensitivity", 3, 0.35),
            _at_least("regulatory_intensity", 3, 0.25),
        ),
    ),
    GuideMetadata(
        guide_id="gate_contractual_controls",
        title="Contractual Controls for AI Vendors",
        category="gate",
        pillar=None,
        difficulty="intermediate",
        time_to_implement="1-month",
        urgency="high",
        base_relevance=0.62,
        targets=("E2", "R1"),
        triggers=(
            _is_set("procurement_constraints", 0.30),
            _at_least("regulatory_intensity", 3, 0.20),
        ),
    ),
    GuideMetadata(
        guide_id="pillar_e_usage_governance",
        title="Usage and Cost Governance",
        category="pillar",
        pillar="E",
        difficulty="intermediate",
        time_to_implement="1-month",
        urgency="high",
        base_relevance=0.64,
        targets=("E3",),
        triggers=(
            _at_least("finops_priority", 3, 0.30),
            _at_least("scale_throughput", 3, 0.20),
        ),
    ),
)

GUIDES_BY_ID: dict[str, GuideMetadata] = {guide.guide_id: guide for guide in GUIDE_LIBRARY}


def score_guide(
    guide: GuideMetadata,
    pillar: str,
    pillar_score: float | None,
    profile: ContextProfile,
    responses: Mapping[str, float | None],
) -> GuideScore:
    """Score one guide for a pillar, profile and set of pulse answers.

    Args:
        guide: Library guide to score.
        pillar: Pillar the recommendation is for.
        pillar_score: Pillar score (0-3), or None when the pillar is unscored.
        profile: Validated Context Profile.
        responses: Question ID -> answer value; absent or None = unanswered.

    Returns:
        GuideScore with the total, each component, and the ordered reasons
        (gap, context, pulse answers, urgency).
    """
    reasons: list[str] = []

    gap_boost = 0.0
    if pillar_score is not None:
        gap_boost = round((MAX_PILLAR_SCORE - pillar_score) * GAP_WEIGHT, 4)
        if gap_boost > GAP_REASON_MIN:
            reasons.append(
                f"addresses weak {pillar_name(pillar)} domain ({format_score(pillar_score)}/3)"
            )

    context_boost = 0.0
    for trigger in guide.triggers:
        if not trigger.condition.holds(profile):
            continue
        context_boost += trigger.boost * CONTEXT_WEIGHT
        if trigger.boost >= CONTEXT_REASON_MIN_BOOST:
            reasons.append(trigger.phrase)

    pulse_boost = 0.0
    for question_id in guide.targets:
        answer = responses.get(question_id)
        if answer is None:
            continue
        pulse_boost += PULSE_ANSWER_BOOSTS.get(float(answer), 0.0)
        if answer == 0:
            reasons.append(f'directly addresses "{question_id}" gap')
        elif answer == 0.25:
            reasons.append(f'builds on "{question_id}" progress')

    urgency_bonus = URGENCY_BONUS.get(guide.urgency, 0.0)
    if guide.urgency == "critical":
        reasons.append("critical priority")

    score = (
        guide.base_relevance
        + gap_boost
        + context_boost
        + pulse_boost * PULSE_WEIGHT
        + urgency_bonus
    )
    return GuideScore(
        guide=guide,
        score=round(score, 4),
        gap_boost=gap_boost,
        context_boost=round(context_boost, 4),
        pulse_boost=round(pulse_boost, 4),
        reasons=tuple(reasons),
    )


def rank_guides_for_pillar(
    pillar: str,
    pillar_score: float | None,
    profile: ContextProfile | Mapping[str, Any] | None,
    responses: Mapping[str, float | None] | None,
    limit: int = DEFAULT_GUIDE_LIMIT,
) -> GuideRecommendations:
    """Rank candidate guides for a pillar.

    Args:
        pillar: Pillar key (C, O, R, T, E or X).
        pillar_score: Pillar score (0-3), or None when the pillar is unscored.
        profile: A ContextProfile or raw mapping with all 12 fields.
        responses: Pulse answers used for question targeting.
        limit: Number of guides to return.

    Returns:
        GuideRecommendations with at most ``limit`` guides, prerequisites
        ahead of the guides that depend on them.

    Raises:
        UnknownPillarError: If ``pillar`` is not a catalog pillar.
        InvalidProfileError: If the profile is missing or invalid.
    """
    if pillar not in PILLARS:
        raise UnknownPillarError(pillar)
    validated = coerce_profile(profile)
    answers = responses or {}

    scored = [
        score_guide(guide, pillar, pillar_score, validated, answers)
        for guide in GUIDE_LIBRARY
        if guide.is_candidate_for(pillar)
    ]
    # sorted() is stable, so equal scores keep library order.
    scored.sort(key=lambda item: item.score, reverse=True)

    by_id = {item.guide.guide_id: item for item in scored}
    ordered: list[GuideScore] = []
    added: set[str] = set()
    for item in scored:
        for prerequisite_id in item.guide.prerequisites:
            prerequisite = by_id.get(prerequisite_id)
            if prerequisite is not None and prerequisite_id not in added:
                ordered.append(prerequisite)
                added.add(prerequisite_id)
        if item.guide.guide_id not in added:
            ordered.append(item)
            added.add(item.guide.guide_id)

    guides = tuple(ordered[:limit])
    logger.debug(
        "Guides ranked",
        pillar=pillar,
        top_guides=[item.guide.guide_id for item in guides],
        total_evaluated=len(scored),
    )
    return GuideRecommendations(
        pillar=pillar,
        pillar_score=pillar_score,
        guides=guides,
        total_evaluated=len(scored),
    )


def guide_explanation(reasons: tuple[str, ...] | list[str]) -> str:
    """Join selection reasons into one sentence, or fall back to a generic line."""
    if not reasons:
        return _FOUNDATIONAL_EXPLANATION
    if len(reasons) == 1:
        return f"Selected because it {reasons[0]}"
    if len(reasons) == 2:
        return f"Selected because it {reasons[0]} and {reasons[1]}"
    return f"Selected because it {', '.join(reasons[:-1])}, and {reasons[-1]}"
