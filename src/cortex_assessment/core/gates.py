"""Context gate rules and evaluation.

A gate is a mandatory safeguard triggered purely by the Context Profile,
never by pulse answers. Each rule is a declarative list of conditions joined
by OR; the same conditions drive both evaluation and the threshold lookup
shown to users, so the predicate and the displayed threshold cannot drift.

Gate catalog (display order):
    require_hitl              O  regulatory_intensity >= 3 OR safety_criticality >= 3
    assurance_cadence         R  regulatory_intensity >= 3
    data_residency            R  data_sensitivity >= 3
    latency_fallback          E  latency_edge >= 3
    scale_hardening           E  scale_throughput >= 3
    build_readiness_gate      C  build_readiness <= 1
    procurement_compliance    E  procurement_constraints is True
    edge_operations_security  R  edge_operations is True
"""

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Literal

from cortex_assessment.core.profile import ContextProfile, coerce_profile
from cortex_assessment.observability import get_logger

logger = get_logger(__name__)

Operator = Literal[">=", "<=", "is"]

_OPERATOR_SYMBOLS: dict[str, str] = {">=": "≥", "<=": "≤", "is": ""}


@dataclass(frozen=True)
class GateCondition:
    """One threshold predicate over a single Context Profile field.

    Attributes:
        field: Context Profile field name.
        operator: '>=', '<=' for ordinals, 'is' for boolean equality.
        threshold: Ordinal threshold or expected boolean.
    """

    field: str
    operator: Operator
    threshold: int | bool

    def holds(self, profile: ContextProfile) -> bool:
        """Return True if the profile satisfies this condition."""
        value = getattr(profile, self.field)
        if self.operator == ">=":
            return value >= self.threshold
        if self.operator == "<=":
            return value <= self.threshold
        return value is self.threshold

    @property
    def display(self) -> str:
        """Threshold as shown to users, e.g. '≥3', '≤1' or 'True'."""
        return f"{_OPERATOR_SYMBOLS[self.operator]}{self.threshold}"


@dataclass(frozen=True)
class GateRule:
    """A gate definition: conditions (OR-ed) plus the guidance payload."""

    gate_id: str
    pillar: str | None
    title: str
    reason: str
    description: str
    actions: tuple[str, ...]
    conditions: tuple[GateCondition, ...]

    def triggering_values(self, profile: ContextProfile) -> dict[str, int | bool]:
        """Return the literal values of every field whose condition held."""
        return {
            condition.field: getattr(profile, condition.field)
            for condition in self.conditions
            if condition.holds(profile)
        }


@dataclass(frozen=True)
class Gate:
    """A triggered gate for one Context Profile.

    Attributes:
        id: Gate identifier.
        pillar: Associated pillar letter, if any.
        title: Short headline.
        reason: Why the gate applies.
        description: What the safeguard involves.
        actions: Ordered remediation steps.
        explain: Field name -> literal profile value that caused the trigger.
        status: Always 'unmet' at evaluation time.
    """

    id: str
    pillar: str | None
    title: str
    reason: str
    description: str
    actions: tuple[str, ...]
    explain: dict[str, int | bool]
    status: str = "unmet"

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready dict."""
        return {
            "id": self.id,
            "pillar": self.pillar,
            "title": self.title,
            "reason": self.reason,
            "description": self.description,
            "actions": list(self.actions),
            "explain": dict(self.explain),
            "status": self.status,
        }


GATE_RULES: tuple[GateRule, ...] = (
    GateRule(
        gate_id="require_hitl",
        pillar="O",
        title="Human-in-the-Loop Required",
        reason="High regulatory intensity or safety criticality requires human oversight",
        description=(
            "Implement human-in-the-loop controls for high-impact AI decisions to ensure "
            "appropriate oversight and accountability."
        ),
        actions=(
            "Define clear escalation paths for AI decision review",
            "Implement approval workflows for high-stakes use cases",
            "Train reviewers on AI system capabilities and limitations",
            "Document review criteria and decision rationale",
        ),
        conditions=(
            GateCondition("regulatory_intensity", ">=", 3),
            GateCondition("safety_criticality", ">=", 3),
        ),
    ),
    GateRule(
        gate_id="assurance_cadence",
        pillar="R",
        title="Enhanced Assurance Cadence Required",
        reason="High regulatory intensity requires frequent monitoring and annual governance reviews",
        description=(
            "Establish monthly fairness/privacy/drift monitoring and annual governance "
            "reviews to meet regulatory expectations."
        ),
        actions=(
            "Schedule monthly bias and drift monitoring",
            "Implement automated fairness testing pipelines",
            "Plan annual governance review with external auditors",
            "Create compliance reporting dashboards",
        ),
        conditions=(GateCondition("regulatory_intensity", ">=", 3),),
    ),
    GateRule(
        gate_id="data_residency",
        pillar="R",
        title="Data Residency & Retention Controls",
        reason="High data sensitivity requires strict residency and retention controls",
        description=(
            "Implement data residency controls and retention limits to protect sensitive "
            "information and meet compliance requirements."
        ),
        actions=(
            "Map data flows and storage locations",
            "Implement regional processing requirements",
            "Set automated retention and deletion policies",
            "Document cross-border data transfer controls",
        ),
        conditions=(GateCondition("data_sensitivity", ">=", 3),),
    ),
    GateRule(
        gate_id="latency_fallback",
        pillar="E",
        title="Latency SLO & Failover Required",
        reason="High latency requirements need SLOs and tested failover mechanisms",
        description=(
            "Establish p95 latency SLOs (200ms or better) and implement tested failover "
            "mechanisms for edge operations."
        ),
        actions=(
            "Define p95 latency SLOs for critical paths",
            "Implement edge caching and backup models",
            "Test failover scenarios regularly",
            "Monitor latency metrics and alerts",
        ),
        conditions=(GateCondition("latency_edge", ">=", 3),),
    ),
    GateRule(
        gate_id="scale_hardening",
        pillar="E",
        title="Scale Hardening Required",
        reason="High scale requirements need load testing and redundancy planning",
        description=(
            "Implement load testing, rate limiting, and dual-region/vendor strategies to "
            "handle high-scale operations."
        ),
        actions=(
            "Conduct regular load testing at expected scale",
            "Implement intelligent rate limiting",
            "Plan dual-region deployment strategy",
            "Establish vendor redundancy options",
        ),
        conditions=(GateCondition("scale_throughput", ">=", 3),),
    ),
    GateRule(
        gate_id="build_readiness_gate",
        pillar="C",
        title="Consider Buy-First Strategy",
        reason="Low build readiness suggests focusing on vendor solutions before heavy development",
        description=(
            "Given current build capabilities, prioritize vendor solutions and RAG approaches "
            "before investing in heavy ML development."
        ),
        actions=(
            "Evaluate leading vendor AI platforms",
            "Implement RAG solutions using existing data",
            "Build foundational MLOps and governance capabilities",
            "Start with low-risk proof-of-concept projects",
        ),
        conditions=(GateCondition("build_readiness", "<=", 1),),
    ),
    GateRule(
        gate_id="procurement_compliance",
        pillar="E",
        title="Procurement Compliance Required",
        reason="Public sector or mandatory vendor rules require structured procurement processes",
        description=(
            "Follow structured procurement processes and use approved vendor frameworks "
            "for AI initiatives."
        ),
        actions=(
            "Use approved vendor frameworks and contracts",
            "Follow public RFP processes for major AI investments",
            "Extend project timelines for procurement cycles",
            "Engage procurement team early in planning",
        ),
        conditions=(GateCondition("procurement_constraints", "is", True),),
    ),
    GateRule(
        gate_id="edge_operations_security",
        pillar="R",
        title="Edge Operations Security Required",
        reason="OT/SCADA and field operations require specialized security patterns",
        description=(
            "Implement OT security patterns, offline capabilities, and careful change "
            "management for edge AI systems."
        ),
        actions=(
            "Implement OT-specific security protocols",
            "Design offline operation capabilities",
            "Plan careful change management for field systems",
            "Establish secure remote monitoring and updates",
        ),
        conditions=(GateCondition("edge_operations", "is", True),),
    ),
)

GATES_BY_ID: MappingProxyType[str, GateRule] = MappingProxyType(
    {rule.gate_id: rule for rule in GATE_RULES}
)


def evaluate_gates(profile: ContextProfile | Mapping[str, Any] | None) -> list[Gate]:
    """Return the gates triggered by a Context Profile, in catalog order.

    Args:
        profile: A ContextProfile or a raw mapping with all 12 fields.

    Returns:
        Triggered gates; empty when no rule fires.

    Raises:
        InvalidProfileError: If the profile is missing, incomplete, or out of range.
        UnknownDimensionError: If a raw mapping carries unknown keys.
    """
    validated = coerce_profile(profile)

    gates: list[Gate] = []
    for rule in GATE_RULES:
        explain = rule.triggering_values(validated)
        if not explain:
            continue
        gates.append(
            Gate(
                id=rule.gate_id,
                pillar=rule.pillar,
                title=rule.title,
                reason=rule.reason,
                description=rule.description,
                actions=rule.actions,
                explain=explain,
            )
        )

    logger.debug(
        "Context gates evaluated",
        gate_count=len(gates),
        gate_ids=[gate.id for gate in gates],
    )
    return gates


def gate_threshold(gate_id: str, field_name: str) -> str | None:
    """Return the threshold a field had to meet to trigger a gate.

    Args:
        gate_id: Gate identifier (e.g. 'require_hitl').
        field_name: Context Profile field name.

    Returns:
        Display threshold such as '≥3', '≤1' or 'True'; None if the field
        plays no part in that gate or the gate is unknown.
    """
    rule = GATES_BY_ID.get(gate_id)
    if rule is None:
        return None
    for condition in rule.conditions:
        if condition.field == field_name:
            return condition.display
    return None
