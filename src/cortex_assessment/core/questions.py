"""CORTEX domain catalog: pillars, pulse questions, context items, stages.

Contains the fixed, process-wide read-only catalog every other engine module
depends on. Nothing in this module is mutated after import.

Pillars (abbreviation, display name):
    C: Clarity & Command
    O: Operations & Data
    R: Risk, Trust & Security
    T: Talent & Culture
    E: Ecosystem & Infrastructure
    X: Experimentation & Evolution

Each pillar is measured by exactly 3 pulse questions answered No / Started /
Mostly / Yes, worth 0 / 0.25 / 0.5 / 1, so a complete pillar scores 0-3.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Literal


@dataclass(frozen=True)
class Pillar:
    """A CORTEX maturity pillar.

    Attributes:
        key: Single-letter pillar abbreviation (C, O, R, T, E, X).
        name: Display name used in insight and priority text.
        description: One-line description of what the pillar measures.
    """

    key: str
    name: str
    description: str


@dataclass(frozen=True)
class PulseQuestion:
    """A single pulse-check question.

    Attributes:
        question_id: Unique identifier (e.g., 'C1').
        pillar: Pillar abbreviation this question belongs to.
        text: The statement presented to respondents.
    """

    question_id: str
    pillar: str
    text: str


@dataclass(frozen=True)
class ContextItem:
    """A Context Profile dimension as presented at intake.

    Attributes:
        key: Field name on the Context Profile.
        label: Short human-readable label.
        description: What the dimension captures.
        kind: 'slider' for 0-4 ordinals, 'boolean' for flags.
    """

    key: str
    label: str
    description: str
    kind: Literal["slider", "boolean"]


@dataclass(frozen=True)
class MaturityStage:
    """A named maturity stage on the 0-3 pillar scale."""

    level: int
    name: str
    description: str


PILLAR_ORDER: tuple[str, ...] = ("C", "O", "R", "T", "E", "X")

PILLARS: MappingProxyType[str, Pillar] = MappingProxyType(
    {
        "C": Pillar(
            key="C",
            name="Clarity & Command",
            description="Leadership owns a value-anchored AI ambition and operating model",
        ),
        "O": Pillar(
            key="O",
            name="Operations & Data",
            description="Reliable, monitored AI in production with governed data",
        ),
        "R": Pillar(
            key="R",
            name="Risk, Trust & Security",
            description="Demonstrable safety, fairness, privacy, and security",
        ),
        "T": Pillar(
            key="T",
            name="Talent & Culture",
            description="Skills, incentives, and job redesign for AI adoption",
        ),
        "E": Pillar(
            key="E",
            name="Ecosystem & Infrastructure",
            description="Partners and platform capacity that scale economically",
        ),
        "X": Pillar(
            key="X",
            name="Experimentation & Evolution",
            description="Safe, disciplined learning cycles with clear success/sunset criteria",
        ),
    }
)


def pillar_name(pillar: str) -> str:
    """Return the display name for a pillar, or the key itself if unknown."""
    entry = PILLARS.get(pillar.upper())
    return entry.name if entry is not None else pillar


PULSE_QUESTIONS: tuple[PulseQuestion, ...] = (
    # -----------------------------------------------------------------------
    # C: Clarity & Command
    # -----------------------------------------------------------------------
    PulseQuestion(
        question_id="C1",
        pillar="C",
        text="Top leadership has approved a written AI ambition with measurable business outcomes.",
    ),
    PulseQuestion(
        question_id="C2",
        pillar="C",
        text="One senior leader owns AI success and CoE-to-BU roles are clear.",
    ),
    PulseQuestion(
        question_id="C3",
        pillar="C",
        text=(
            "AI progress is reviewed on a set cadence and leads to resource "
            "reallocation (fund/defund) decisions."
        ),
    ),
    # -----------------------------------------------------------------------
    # O: Operations & Data
    # -----------------------------------------------------------------------
    PulseQuestion(
        question_id="O1",
        pillar="O",
        text=(
            "All AI solutions you operate or consume follow a documented lifecycle "
            "with performance logging and HITL/QA where needed."
        ),
    ),
    PulseQuestion(
        question_id="O2",
        pillar="O",
        text=(
            "Key data/prompts have documented owners, lineage, and quality standards "
            "in an accessible catalogue."
        ),
    ),
    PulseQuestion(
        question_id="O3",
        pillar="O",
        text=(
            "Every new AI idea, build or buy, clears a standardized value/feasibility "
            "gate before major spend."
        ),
    ),
    # -----------------------------------------------------------------------
    # R: Risk, Trust & Security
    # -----------------------------------------------------------------------
    PulseQuestion(
        question_id="R1",
        pillar="R",
        text="A living inventory lists each AI system/service with risk level and named risk owner.",
    ),
    PulseQuestion(
        question_id="R2",
        pillar="R",
        text=(
            "High-impact AI undergoes scheduled fairness/privacy/drift checks and "
            "periodic security red-teaming."
        ),
    ),
    PulseQuestion(
        question_id="R3",
        pillar="R",
        text=(
            "AI controls have been reviewed (internal or external) in the last 12 months, "
            "and an incident response & communication plan exists."
        ),
    ),
    # -----------------------------------------------------------------------
    # T: Talent & Culture
    # -----------------------------------------------------------------------
    PulseQuestion(
        question_id="T1",
        pillar="T",
        text="There's a written plan to attract, develop, and retain the AI skills strategy requires.",
    ),
    PulseQuestion(
        question_id="T2",
        pillar="T",
        text=(
            "Most AI-touching roles completed role-appropriate training and tasks have "
            "been redesigned to use AI safely/productively."
        ),
    ),
    PulseQuestion(
        question_id="T3",
        pillar="T",
        text=(
            "AI wins, failures, and lessons are shared company-wide on a regular rhythm "
            "with incentives to adopt."
        ),
    ),
    # -----------------------------------------------------------------------
    # E: Ecosystem & Infrastructure
    # -----------------------------------------------------------------------
    PulseQuestion(
        question_id="E1",
        pillar="E",
        text=(
            "Compute/licence/API capacity scales to demand and is cost-monitored (FinOps) "
            "so projects aren't delayed or derailed by spend."
        ),
    ),
    PulseQuestion(
        question_id="E2",
        pillar="E",
        text=(
            "You maintain strategic model/tool/data partners and documented "
            "exit/portability plans to avoid lock-in."
        ),
    ),
    PulseQuestion(
        question_id="E3",
        pillar="E",
        text=(
            "Data exchange with external parties occurs only via governed, auditable, "
            "interoperable mechanisms (secure APIs, clean rooms)."
        ),
    ),
    # -----------------------------------------------------------------------
    # X: Experimentation & Evolution
    # -----------------------------------------------------------------------
    PulseQuestion(
        question_id="X1",
        pillar="X",
        text=(
            "Business teams have a safe sandbox with representative data and a "
            "structured practice of external scanning."
        ),
    ),
    PulseQuestion(
        question_id="X2",
        pillar="X",
        text=(
            "A defined slice of budget/time/credits is reserved each year for "
            "exploratory/high-uncertainty AI work."
        ),
    ),
    PulseQuestion(
        question_id="X3",
        pillar="X",
        text=(
            "All AI pilots include success and sunset criteria; non-performers are "
            "consistently retired or redirected on schedule."
        ),
    ),
)

# Convenience mappings for fast lookup
QUESTIONS_BY_ID: MappingProxyType[str, PulseQuestion] = MappingProxyType(
    {q.question_id: q for q in PULSE_QUESTIONS}
)

QUESTIONS_BY_PILLAR: MappingProxyType[str, tuple[str, ...]] = MappingProxyType(
    {
        pillar: tuple(q.question_id for q in PULSE_QUESTIONS if q.pillar == pillar)
        for pillar in PILLAR_ORDER
    }
)

# No / Started / Mostly / Yes
ANSWER_VALUES: MappingProxyType[str, float] = MappingProxyType(
    {
        "no": 0.0,
        "started": 0.25,
        "mostly": 0.5,
        "yes": 1.0,
    }
)

ALLOWED_ANSWER_VALUES: frozenset[float] = frozenset(ANSWER_VALUES.values())

CONTEXT_ITEMS: tuple[ContextItem, ...] = (
    ContextItem(
        "regulatory_intensity",
        "Regulatory Intensity",
        "Level of regulatory oversight and compliance requirements",
        "slider",
    ),
    ContextItem("data_sensitivity", "Data Sensitivity", "Sensitivity level of data handled", "slider"),
    ContextItem(
        "safety_criticality",
        "Safety Criticality",
        "Potential impact of AI failures on safety",
        "slider",
    ),
    ContextItem("brand_exposure", "Brand Exposure", "Public visibility and reputational risk", "slider"),
    ContextItem("clock_speed", "Market Clock Speed", "Pace of change in your market/technology", "slider"),
    ContextItem(
        "latency_edge",
        "Latency/Edge Needs",
        "Requirements for low-latency or edge computing",
        "slider",
    ),
    ContextItem("scale_throughput", "Scale/Throughput", "Volume and scale requirements", "slider"),
    ContextItem(
        "data_advantage",
        "Proprietary Data Advantage",
        "Uniqueness and value of your data assets",
        "slider",
    ),
    ContextItem(
        "build_readiness",
        "Build Readiness",
        "Organizational capability for building AI systems",
        "slider",
    ),
    ContextItem(
        "finops_priority",
        "FinOps Priority",
        "Importance of cost optimization and financial operations",
        "slider",
    ),
    ContextItem(
        "procurement_constraints",
        "Procurement Constraints",
        "Significant procurement or vendor restrictions",
        "boolean",
    ),
    ContextItem(
        "edge_operations",
        "Edge Operations",
        "Operations at network edge or remote locations",
        "boolean",
    ),
)

ORDINAL_FIELDS: tuple[str, ...] = tuple(item.key for item in CONTEXT_ITEMS if item.kind == "slider")
BOOLEAN_FIELDS: tuple[str, ...] = tuple(item.key for item in CONTEXT_ITEMS if item.kind == "boolean")

MATURITY_STAGES: tuple[MaturityStage, ...] = (
    MaturityStage(0, "Nascent", "Ad hoc, minimal capability, no consistent practices"),
    MaturityStage(1, "Emerging", "Early structures exist; partial coverage and inconsistent execution"),
    MaturityStage(2, "Integrated", "Documented practices, clear ownership, reliable execution at scale"),
    MaturityStage(
        3,
        "Leading",
        "Institutionalized capabilities, continuous improvement, and measurable business impact",
    ),
)


def stage_for_score(score: float) -> MaturityStage:
    """Map a 0-3 pillar score to its maturity stage (floor, clamped)."""
    level = max(0, min(len(MATURITY_STAGES) - 1, int(score)))
    return MATURITY_STAGES[level]
