"""Priority move ranking and content-tag routing.

Moves are concrete initiatives from a fixed library. Each move's priority is

    base_score + 0.02 * (3 - pillar_score) + profile_boost

where a pillar with no score yet counts as 0 (largest gap boost) and the
profile boost sums every ``PROFILE_BOOSTS`` row whose tags overlap the move's
tags and whose context condition holds. Ranking is descending by priority;
ties keep library order.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from cortex_assessment.core.gates import GateCondition
from cortex_assessment.core.profile import ContextProfile, coerce_profile
from cortex_assessment.observability import get_logger

logger = get_logger(__name__)

GAP_BOOST_PER_POINT: float = 0.02
MAX_PILLAR_SCORE: float = 3.0
DEFAULT_MOVE_LIMIT: int = 6


@dataclass(frozen=True)
class PlaybookItem:
    kind: str
    label: str


@dataclass(frozen=True)
class MoveTemplate:
    """A library initiative before context weighting."""

    move_id: str
    pillar: str
    title: str
    base_score: float
    tags: tuple[str, ...]
    description: str
    playbook: tuple[PlaybookItem, ...] = ()


@dataclass(frozen=True)
class ProfileBoost:
    """Boost applied when a move carries any of ``tags`` and a condition holds."""

    tags: tuple[str, ...]
    conditions: tuple[GateCondition, ...]
    boost: float

    def applies(self, tags: tuple[str, ...], profile: ContextProfile) -> bool:
        return any(tag in self.tags for tag in tags) and any(
            condition.holds(profile) for condition in self.conditions
        )


@dataclass(frozen=True)
class ContextReason:
    """A "why it matters" phrase tied to one move tag and a context condition."""

    tag: str
    conditions: tuple[GateCondition, ...]
    phrase: str


@dataclass(frozen=True)
class RankedMove:
    """A move with its computed priority and explanation."""

    move_id: str
    pillar: str
    title: str
    description: str
    playbook: tuple[PlaybookItem, ...]
    priority: float
    rank: int
    gap_boost: float
    profile_boost: float
    pillar_score: float
    triggering_tags: tuple[str, ...]
    why_it_matters: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.move_id,
            "pillar": self.pillar,
            "title": self.title,
            "description": self.description,
            "playbook": [{"kind": item.kind, "label": item.label} for item in self.playbook],
            "priority": self.priority,
            "rank": self.rank,
            "explain": {
                "gap_boost": self.gap_boost,
                "profile_boost": self.profile_boost,
                "pillar_score": self.pillar_score,
                "triggering_tags": list(self.triggering_tags),
            },
            "why_it_matters": self.why_it_matters,
        }


@dataclass(frozen=True)
class PriorityMoves:
    moves: tuple[RankedMove, ...]
    total_evaluated: int


MOVES_LIBRARY: tuple[MoveTemplate, ...] = (
    MoveTemplate(
        move_id="incident_runbook",
        pillar="R",
        title="Publish AI incident response runbook",
        base_score=0.70,
        tags=("regulatory", "brand_risk"),
        description=(
            "Create a documented process for handling AI system failures, model drift, or "
            "unexpected outputs that could impact users or brand reputation."
        ),
        playbook=(
            PlaybookItem("template", "Incident Response Template"),
            PlaybookItem("guide", "Tabletop Exercise Guide"),
        ),
    ),
    MoveTemplate(
        move_id="privacy_controls",
        pillar="R",
        title="Implement privacy and data governance controls",
        base_score=0.65,
        tags=("data_governance", "regulatory"),
        description=(
            "Establish policies and technical controls for handling sensitive data in AI "
            "systems, including data minimization, consent management, and audit trails."
        ),
        playbook=(
            PlaybookItem("checklist", "Privacy Assessment Checklist"),
            PlaybookItem("template", "Data Governance Policy"),
        ),
    ),
    MoveTemplate(
        move_id="monitoring_dashboard",
        pillar="O",
        title="Deploy AI monitoring and observability dashboard",
        base_score=0.60,
        tags=("scale", "edge"),
        description=(
            "Set up real-time monitoring for model performance, latency, accuracy drift, "
            "and resource utilization across your AI systems."
        ),
        playbook=(
            PlaybookItem("guide", "Metrics Selection Guide"),
            PlaybookItem("template", "Dashboard Template"),
        ),
    ),
    MoveTemplate(
        move_id="human_oversight",
        pillar="O",
        title="Establish human oversight protocols",
        base_score=0.68,
        tags=("safety", "regulatory"),
        description=(
            "Define when and how humans review AI decisions, especially for high-stakes "
            "applications or regulated environments."
        ),
        playbook=(
            PlaybookItem("framework", "Human-in-Loop Framework"),
            PlaybookItem("guide", "Escalation Procedures"),
        ),
    ),
    MoveTemplate(
        move_id="ai_governance",
        pillar="C",
        title="Establish AI governance framework",
        base_score=0.72,
        tags=("regulatory", "readiness_building"),
        description=(
            "Create clear decision rights, approval processes, and accountability "
            "structures for AI initiatives across the organization."
        ),
        playbook=(
            PlaybookItem("template", "Governance Charter"),
            PlaybookItem("guide", "Stakeholder Mapping"),
        ),
    ),
    MoveTemplate(
        move_id="skills_development",
        pillar="T",
        title="Launch AI skills development program",
        base_score=0.63,
        tags=("readiness_building",),
        description=(
            "Build internal AI literacy and capabilities through structured training, "
            "hands-on projects, and knowledge sharing."
        ),
        playbook=(
            PlaybookItem("guide", "Skills Assessment Tool"),
            PlaybookItem("template", "Training Curriculum"),
        ),
    ),
    MoveTemplate(
        move_id="mlops_platform",
        pillar="E",
        title="Deploy MLOps platform and tooling",
        base_score=0.66,
        tags=("scale", "readiness_building", "cost_control"),
        description=(
            "Implement infrastructure for versioning models, automating deployments, and "
            "managing the ML lifecycle at scale."
        ),
        playbook=(
            PlaybookItem("guide", "Tool Selection Guide"),
            PlaybookItem("checklist", "Platform Readiness"),
        ),
    ),
    MoveTemplate(
        move_id="edge_deployment",
        pillar="E",
        title="Implement edge AI deployment capabilities",
        base_score=0.64,
        tags=("edge", "agility"),
        description=(
            "Enable AI models to run on edge devices for lower latency, offline operation, "
            "or data residency requirements."
        ),
        playbook=(
            PlaybookItem("guide", "Edge Architecture Patterns"),
            PlaybookItem("template", "Deployment Checklist"),
        ),
    ),
    MoveTemplate(
        move_id="rapid_prototyping",
        pillar="X",
        title="Set up rapid AI prototyping environment",
        base_score=0.61,
        tags=("agility", "data_advantage"),
        description=(
            "Create a sandbox environment where teams can quickly test AI concepts with "
            "production-like data and infrastructure."
        ),
        playbook=(
            PlaybookItem("template", "Sandbox Setup Guide"),
            PlaybookItem("guide", "Experiment Tracking"),
        ),
    ),
)

PROFILE_BOOSTS: tuple[ProfileBoost, ...] = (
    ProfileBoost(
        tags=("regulatory", "safety"),
        conditions=(
            GateCondition("regulatory_intensity", ">=", 3),
            GateCondition("safety_criticality", ">=", 3),
        ),
        boost=0.08,
    ),
    ProfileBoost(("data_governance",), (GateCondition("data_sensitivity", ">=", 3),), 0.06),
    ProfileBoost(("brand_risk",), (GateCondition("brand_exposure", ">=", 3),), 0.05),
    ProfileBoost(("agility",), (GateCondition("clock_speed", ">=", 3),), 0.07),
    ProfileBoost(("edge",), (GateCondition("latency_edge", ">=", 3),), 0.06),
    ProfileBoost(("scale",), (GateCondition("scale_throughput", ">=", 3),), 0.06),
    ProfileBoost(("data_advantage",), (GateCondition("data_advantage", ">=", 3),), 0.07),
    ProfileBoost(("readiness_building",), (GateCondition("build_readiness", "<=", 1),), 0.07),
    ProfileBoost(("cost_control",), (GateCondition("finops_priority", ">=", 3),), 0.05),
)

WHY_IT_MATTERS: tuple[ContextReason, ...] = (
    ContextReason(
        "regulatory",
        (GateCondition("regulatory_intensity", ">=", 3),),
        "your high regulatory requirements",
    ),
    ContextReason(
        "safety",
        (GateCondition("safety_criticality", ">=", 3),),
        "your safety-critical applications",
    ),
    ContextReason("brand_risk", (GateCondition("brand_exposure", ">=", 3),), "your high brand exposure"),
    ContextReason(
        "data_governance",
        (GateCondition("data_sensitivity", ">=", 3),),
        "your sensitive data requirements",
    ),
    ContextReason(
        "edge",
        (GateCondition("edge_operations", "is", True), GateCondition("latency_edge", ">=", 3)),
        "your edge/latency needs",
    ),
    ContextReason("scale", (GateCondition("scale_throughput", ">=", 3),), "your high-scale environment"),
    ContextReason("data_advantage", (GateCondition("data_advantage", ">=", 3),), "your strong data assets"),
    ContextReason(
        "readiness_building",
        (GateCondition("build_readiness", "<=", 1),),
        "your current readiness gaps",
    ),
    ContextReason(
        "cost_control",
        (GateCondition("finops_priority", ">=", 3),),
        "your cost management priorities",
    ),
    ContextReason("agility", (GateCondition("clock_speed", ">=", 3),), "your need for competitive speed"),
)

_FOUNDATIONAL_WHY = (
    "This foundational capability will strengthen your AI readiness across multiple domains."
)

# (tag, OR-ed conditions) for routing guidance content.
CONTENT_TAG_RULES: tuple[tuple[str, tuple[GateCondition, ...]], ...] = (
    ("regulated", (GateCondition("regulatory_intensity", ">=", 3),)),
    ("high_safety", (GateCondition("safety_criticality", ">=", 3),)),
    ("high_sensitivity", (GateCondition("data_sensitivity", ">=", 3),)),
    ("edge", (GateCondition("edge_operations", "is", True), GateCondition("latency_edge", ">=", 3))),
    ("hyperscale", (GateCondition("scale_throughput", ">=", 3),)),
    ("data_advantage", (GateCondition("data_advantage", ">=", 3),)),
    ("low_readiness", (GateCondition("build_readiness", "<=", 1),)),
    ("finops_strict", (GateCondition("finops_priority", ">=", 3),)),
    ("public_procurement", (GateCondition("procurement_constraints", "is", True),)),
)


def _profile_boost(tags: tuple[str, ...], profile: ContextProfile) -> float:
    return sum((row.boost for row in PROFILE_BOOSTS if row.applies(tags, profile)), 0.0)


def _why_it_matters(tags: tuple[str, ...], profile: ContextProfile) -> str:
    reasons = [
        reason.phrase
        for reason in WHY_IT_MATTERS
        if reason.tag in tags and any(condition.holds(profile) for condition in reason.conditions)
    ]
    if not reasons:
        return _FOUNDATIONAL_WHY
    return f"Prioritized based on {', '.join(reasons)}."


def rank_priority_moves(
    profile: ContextProfile | Mapping[str, Any] | None,
    scores: Mapping[str, float] | None,
    limit: int = DEFAULT_MOVE_LIMIT,
) -> PriorityMoves:
    """Rank the move library for a profile and its pillar scores.

    Args:
        profile: A ContextProfile or raw mapping with all 12 fields.
        scores: Pillar scores, possibly partial; missing pillars count as 0.
        limit: Number of top moves to return.

    Returns:
        PriorityMoves with the top ``limit`` moves ranked 1..n and the size
        of the library evaluated.

    Raises:
        InvalidProfileError: If the profile is missing or invalid.
    """
    validated = coerce_profile(profile)
    pillar_scores = scores or {}

    scored: list[tuple[float, MoveTemplate, float, float, float]] = []
    for move in MOVES_LIBRARY:
        pillar_score = float(pillar_scores.get(move.pillar, 0.0))
        gap_boost = round(GAP_BOOST_PER_POINT * (MAX_PILLAR_SCORE - pillar_score), 4)
        profile_boost = round(_profile_boost(move.tags, validated), 4)
        priority = round(move.base_score + gap_boost + profile_boost, 4)
        scored.append((priority, move, gap_boost, profile_boost, pillar_score))

    # sorted() is stable, so equal priorities keep library order.
    scored.sort(key=lambda item: item[0], reverse=True)

    moves = tuple(
        RankedMove(
            move_id=move.move_id,
            pillar=move.pillar,
            title=move.title,
            description=move.description,
            playbook=move.playbook,
            priority=priority,
            rank=index + 1,
            gap_boost=gap_boost,
            profile_boost=profile_boost,
            pillar_score=pillar_score,
            triggering_tags=tuple(tag for tag in move.tags if _profile_boost((tag,), validated) > 0),
            why_it_matters=_why_it_matters(move.tags, validated),
        )
        for index, (priority, move, gap_boost, profile_boost, pillar_score) in enumerate(scored[:limit])
    )

    logger.debug(
        "Priority moves ranked",
        top_moves=[move.move_id for move in moves],
        total_evaluated=len(MOVES_LIBRARY),
    )
    return PriorityMoves(moves=moves, total_evaluated=len(MOVES_LIBRARY))


def content_tags(profile: ContextProfile | Mapping[str, Any] | None) -> list[str]:
    """Return routing tags describing the profile's operating context."""
    validated = coerce_profile(profile)
    return [
        tag
        for tag, conditions in CONTENT_TAG_RULES
        if any(condition.holds(validated) for condition in conditions)
    ]
