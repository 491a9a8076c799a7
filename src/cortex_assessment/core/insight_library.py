"""Fixed insight and priority template libraries.

Insight text is selected from these tables, never generated. Templates carry
named slots filled at selection time by ``render_template``:

    {domain}  display name of the weakest pillar
    {score}   weakest pillar score, 1 decimal
    {avg}     average pillar score, 1 decimal
    {count}   number of triggered gates
    {plural}  's' when count != 1
    {spread}  max - min pillar score, 1 decimal
"""

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Literal

Urgency = Literal["high", "medium", "low"]

TEMPLATE_SLOTS: frozenset[str] = frozenset({"domain", "score", "avg", "count", "plural", "spread"})


@dataclass(frozen=True)
class InsightTemplate:
    """A library entry for an executive insight.

    Attributes:
        key: Library key (e.g. 'foundations_critical').
        type: Insight category reported to callers (e.g. 'foundation').
        title: Headline.
        description: One-sentence situation summary.
        action: Recommended action (may contain slots).
        reasoning: "because ..." explanation (may contain slots).
        business_impact: Expected business consequence.
        urgency: high, medium or low.
    """

    key: str
    type: str
    title: str
    description: str
    action: str
    reasoning: str
    business_impact: str
    urgency: Urgency


@dataclass(frozen=True)
class PriorityTemplate:
    """A library entry for a 90-day priority action."""

    key: str
    title: str
    description: str
    reasoning: str
    timeframe: str
    urgency: Urgency


class _SlotValues(dict):
    # Unknown slots are left in place rather than raising KeyError.
    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


def render_template(template: str, slots: Mapping[str, str]) -> str:
    """Substitute the fixed named slots into a template string.

    Only names in TEMPLATE_SLOTS are substituted; anything else in braces is
    left untouched.
    """
    values = _SlotValues({key: value for key, value in slots.items() if key in TEMPLATE_SLOTS})
    return template.format_map(values)


INSIGHT_LIBRARY: MappingProxyType[str, InsightTemplate] = MappingProxyType(
    {
        "foundations_critical": InsightTemplate(
            key="foundations_critical",
            type="foundation",
            title="Critical: Build AI Strategic Foundations",
            description=(
                "Your organization lacks fundamental AI capabilities required for any "
                "successful AI initiative."
            ),
            action=(
                "Establish data governance, AI strategy, and basic infrastructure before "
                "pursuing AI projects."
            ),
            reasoning=(
                "because your average maturity score of {avg} indicates fundamental "
                "capabilities are missing"
            ),
            business_impact=(
                "Without foundations, AI projects face 80% higher failure rates and "
                "significant compliance risks."
            ),
            urgency="high",
        ),
        "foundations_weak": InsightTemplate(
            key="foundations_weak",
            type="foundation",
            title="Strengthen AI Strategic Foundations",
            description="Basic AI capabilities exist but need reinforcement before scaling initiatives.",
            action="Invest in data quality, governance frameworks, and talent development.",
            reasoning=(
                "because while basic capabilities exist (average score {avg}), they need "
                "strengthening"
            ),
            business_impact="Strong foundations reduce project risk and accelerate time-to-value.",
            urgency="high",
        ),
        "systematic_development": InsightTemplate(
            key="systematic_development",
            type="development",
            title="Systematize AI Development Practices",
            description=(
                "You have foundational capabilities but lack systematic approaches to "
                "scale effectively."
            ),
            action=(
                "Establish AI governance committee, standardize development processes, and "
                "expand pilot programs."
            ),
            reasoning=(
                "because you have solid foundations (average score {avg}) but need "
                "systematic approaches to scale"
            ),
            business_impact=(
                "Systematic practices enable consistent AI outcomes and reduce operational overhead."
            ),
            urgency="medium",
        ),
        "optimization_focus": InsightTemplate(
            key="optimization_focus",
            type="optimization",
            title="Optimize AI Operations for Scale",
            description=(
                "Strong AI foundations position you to focus on optimization and "
                "competitive differentiation."
            ),
            action=(
                "Enhance monitoring capabilities, expand successful use cases, and drive "
                "strategic advantage."
            ),
            reasoning=(
                "because strong capabilities (average score {avg}) enable focus on "
                "optimization and competitive advantage"
            ),
            business_impact=(
                "Optimized AI operations can deliver 25-40% additional value from existing investments."
            ),
            urgency="medium",
        ),
        "maturity_leadership": InsightTemplate(
            key="maturity_leadership",
            type="leadership",
            title="Lead Through AI Innovation",
            description="Advanced AI maturity enables industry leadership and competitive moats.",
            action=(
                "Focus on breakthrough applications, ecosystem partnerships, and market "
                "differentiation."
            ),
            reasoning=(
                "because advanced capabilities (average score {avg}) position you for "
                "industry leadership"
            ),
            business_impact=(
                "AI leadership can create sustainable competitive advantages and new revenue streams."
            ),
            urgency="low",
        ),
        "compliance_critical": InsightTemplate(
            key="compliance_critical",
            type="compliance",
            title="Critical Compliance Gaps Require Immediate Action",
            description="Your risk profile demands specific safeguards before expanding AI initiatives.",
            action="Implement required governance controls and compliance measures immediately.",
            reasoning=(
                "because your organizational context triggered {count} critical "
                "requirement{plural} that must be addressed"
            ),
            business_impact=(
                "Non-compliance can result in regulatory penalties, operational shutdowns, "
                "and reputation damage."
            ),
            urgency="high",
        ),
        "compliance_moderate": InsightTemplate(
            key="compliance_moderate",
            type="compliance",
            title="Address Compliance Requirements",
            description="Your operational context requires enhanced governance and risk management.",
            action="Establish oversight processes and compliance monitoring for AI systems.",
            reasoning=(
                "because your organizational context triggered {count} "
                "requirement{plural} that call for moderate, proactive safeguards"
            ),
            business_impact="Proactive compliance reduces regulatory risk and builds stakeholder trust.",
            urgency="medium",
        ),
        "data_debt_blocking": InsightTemplate(
            key="data_debt_blocking",
            type="data_debt",
            title="Data Infrastructure Debt Blocks AI Scale",
            description="Poor data foundations limit AI effectiveness and create operational risks.",
            action=(
                "Prioritize data quality, integration, and governance before expanding AI use cases."
            ),
            reasoning=(
                "because {domain} scored only {score} while other areas are stronger, "
                "creating a bottleneck"
            ),
            business_impact=(
                "Data debt can reduce AI project success rates by 60% and increase costs significantly."
            ),
            urgency="high",
        ),
        "talent_constraint": InsightTemplate(
            key="talent_constraint",
            type="talent",
            title="Talent Constraints Limit AI Potential",
            description="Skills gaps in critical areas prevent effective AI adoption and scaling.",
            action="Invest in upskilling programs, strategic hiring, and external partnerships.",
            reasoning=(
                "because {domain} scored only {score}, limiting your ability to execute "
                "AI initiatives"
            ),
            business_impact="Talent constraints can delay AI initiatives by 6-12 months and reduce ROI.",
            urgency="medium",
        ),
        "security_gaps": InsightTemplate(
            key="security_gaps",
            type="security",
            title="Security Posture Requires Immediate Strengthening",
            description="AI security vulnerabilities expose organization to significant risks.",
            action="Implement AI security controls, monitoring, and incident response capabilities.",
            reasoning="because {domain} scored only {score} in a high-risk environment",
            business_impact=(
                "AI security breaches can cause 5-10x more damage than traditional "
                "cybersecurity incidents."
            ),
            urgency="high",
        ),
        "capability_imbalance": InsightTemplate(
            key="capability_imbalance",
            type="imbalance",
            title="Address Significant Capability Imbalances",
            description=(
                "Large gaps between your strongest and weakest domains create operational risks."
            ),
            action=(
                "Focus on strengthening {domain} to reduce the {spread}-point gap with your "
                "strongest areas."
            ),
            reasoning=(
                "because there's a {spread}-point spread between your strongest and "
                "weakest domains"
            ),
            business_impact=(
                "Capability imbalances can create bottlenecks that limit overall AI effectiveness."
            ),
            urgency="medium",
        ),
    }
)

PRIORITY_LIBRARY: MappingProxyType[str, PriorityTemplate] = MappingProxyType(
    {
        "build_foundations": PriorityTemplate(
            key="build_foundations",
            title="Build AI Strategic Foundations",
            description="Establish data governance, AI strategy, and basic infrastructure",
            reasoning="foundational capabilities are required before any AI initiative can succeed",
            timeframe="60-90 days",
            urgency="high",
        ),
        "address_compliance": PriorityTemplate(
            key="address_compliance",
            title="Address Critical Compliance Requirements",
            description="Implement required governance controls and oversight processes",
            reasoning="{count} critical requirement{plural} identified based on your risk profile",
            timeframe="30-60 days",
            urgency="high",
        ),
        "strengthen_weakest": PriorityTemplate(
            key="strengthen_weakest",
            title="Strengthen {domain}",
            description="Focus improvement efforts on your biggest capability gap",
            reasoning="{domain} scored lowest at {score}, representing your biggest improvement opportunity",
            timeframe="90 days",
            urgency="medium",
        ),
        "systematize_practices": PriorityTemplate(
            key="systematize_practices",
            title="Systematize AI Development Practices",
            description="Establish governance, standardize processes, expand pilots",
            reasoning="systematic practices will enable consistent and scalable AI outcomes",
            timeframe="90 days",
            urgency="medium",
        ),
        "resolve_data_debt": PriorityTemplate(
            key="resolve_data_debt",
            title="Resolve Critical Data Infrastructure Debt",
            description="Improve data quality, integration, and governance",
            reasoning="data infrastructure gaps are blocking progress in other domains",
            timeframe="90-120 days",
            urgency="high",
        ),
        "develop_talent": PriorityTemplate(
            key="develop_talent",
            title="Develop AI Talent and Capabilities",
            description="Upskilling, strategic hiring, and external partnerships",
            reasoning="talent constraints are the primary limiting factor for AI success",
            timeframe="90-180 days",
            urgency="medium",
        ),
        "optimize_operations": PriorityTemplate(
            key="optimize_operations",
            title="Optimize AI Operations for Scale",
            description="Enhance monitoring, expand use cases, drive efficiency",
            reasoning="your strong foundation enables focus on operational excellence and scale",
            timeframe="60-90 days",
            urgency="medium",
        ),
    }
)
