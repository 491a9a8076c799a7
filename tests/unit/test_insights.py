"""Unit tests for the insight engine cascade.

Tests cover:
- Compliance precedence and the moderate/critical split at 3 gates
- Exactly one maturity band per evaluation, including boundaries
- Weakest-domain specializations (first match wins)
- Imbalance insight gating on room and variance
- Caps, partial data and determinism
"""

import pytest

from cortex_assessment.core.gates import evaluate_gates
from cortex_assessment.core.insight_library import INSIGHT_LIBRARY, render_template
from cortex_assessment.core.insights import (
    Insight,
    InsightResult,
    business_impact_summary,
    format_insight_for_executive,
    generate_insights,
)
from cortex_assessment.core.scoring import score_pillars
from tests.factories import answers_for_scores, make_profile, uniform_answers


def _keys(result: InsightResult) -> tuple[list[str], list[str]]:
    return (
        [insight.key for insight in result.insights],
        [priority.key for priority in result.priorities],
    )


def _all(score: float, **overrides: float) -> dict[str, float]:
    scores = {pillar: score for pillar in "CORTEX"}
    scores.update(overrides)
    return scores


# ---------------------------------------------------------------------------
# Worked scenarios
# ---------------------------------------------------------------------------


class TestScenarios:
    """End-to-end cascades from profile and answers."""

    def test_regulated_profile_with_weak_pillars(self) -> None:
        """Two gates give moderate compliance guidance ahead of the maturity band."""
        profile = make_profile(
            regulatory_intensity=4,
            safety_criticality=4,
            data_sensitivity=2,
            brand_exposure=2,
            clock_speed=2,
            latency_edge=2,
            scale_throughput=2,
            data_advantage=2,
            build_readiness=2,
            finops_priority=2,
        )
        gates = evaluate_gates(profile)
        assert [gate.id for gate in gates] == ["require_hitl", "assurance_cadence"]

        result = generate_insights(score_pillars(answers_for_scores(_all(1.0))), gates, profile)

        assert result.insights[0].type == "compliance"
        assert "moderate" in result.insights[0].reasoning
        assert "critical" not in result.insights[0].reasoning
        assert _keys(result) == (
            ["compliance_moderate", "foundations_weak"],
            ["address_compliance", "build_foundations", "strengthen_weakest"],
        )

    def test_all_yes_gives_leadership_without_priority(self) -> None:
        scores = score_pillars(uniform_answers(1.0))
        result = generate_insights(scores, [], make_profile())
        assert _keys(result) == (["maturity_leadership"], [])
        assert result.insights[0].type == "leadership"

    def test_all_no_gives_critical_foundations(self) -> None:
        scores = score_pillars(uniform_answers(0.0))
        result = generate_insights(scores, [], make_profile())
        assert result.insights[0].key == "foundations_critical"
        assert result.insights[0].type == "foundation"
        assert _keys(result)[1] == ["build_foundations", "strengthen_weakest"]
        assert result.priorities[1].title == "Strengthen Clarity & Command"

    def test_single_pillar_uses_only_available_data(self) -> None:
        result = generate_insights({"O": 2.0}, [], make_profile())
        assert _keys(result) == (["systematic_development"], ["systematize_practices"])
        assert "2.0" in result.insights[0].reasoning


# ---------------------------------------------------------------------------
# Compliance
# ---------------------------------------------------------------------------


class TestCompliance:
    def test_three_gates_are_critical(self) -> None:
        profile = make_profile(regulatory_intensity=4, data_sensitivity=4)
        gates = evaluate_gates(profile)
        assert len(gates) == 3

        result = generate_insights(_all(2.0), gates, profile)
        first = result.insights[0]
        assert first.key == "compliance_critical"
        assert first.urgency == "high"
        assert "3 critical requirements" in first.reasoning

    def test_single_gate_is_singular(self) -> None:
        profile = make_profile(data_sensitivity=3)
        result = generate_insights(_all(2.0), evaluate_gates(profile), profile)
        assert result.insights[0].key == "compliance_moderate"
        assert "triggered 1 requirement that" in result.insights[0].reasoning
        assert result.priorities[0].reasoning.startswith("1 critical requirement identified")

    def test_compliance_survives_without_scores(self) -> None:
        profile = make_profile(edge_operations=True)
        result = generate_insights({}, evaluate_gates(profile), profile)
        assert _keys(result) == (["compliance_moderate"], ["address_compliance"])


# ---------------------------------------------------------------------------
# Maturity bands
# ---------------------------------------------------------------------------


class TestMaturityBands:
    """Exactly one band fires; lower bounds are inclusive."""

    @pytest.mark.parametrize(
        ("score", "insight_key"),
        [
            (0.75, "foundations_critical"),
            (1.0, "foundations_weak"),
            (1.25, "foundations_weak"),
            (1.5, "systematic_development"),
            (2.25, "systematic_development"),
            (2.5, "optimization_focus"),
            (3.0, "maturity_leadership"),
        ],
    )
    def test_band_by_average(self, score: float, insight_key: str) -> None:
        result = generate_insights(_all(score), [], None)
        band_insights = [
            insight
            for insight in result.insights
            if insight.key
            in {
                "foundations_critical",
                "foundations_weak",
                "systematic_development",
                "optimization_focus",
                "maturity_leadership",
            }
        ]
        assert [insight.key for insight in band_insights] == [insight_key]

    def test_average_is_interpolated_to_one_decimal(self) -> None:
        result = generate_insights({"C": 1.0, "O": 1.25, "R": 2.0}, [], None)
        assert "average score 1.4" in result.insights[0].reasoning

    def test_foundations_weak_priority_reasoning(self) -> None:
        result = generate_insights(_all(1.25), [], None)
        assert result.priorities[0].key == "build_foundations"
        assert result.priorities[0].reasoning == (
            "current capabilities need reinforcement before scaling initiatives"
        )


# ---------------------------------------------------------------------------
# Weakest-domain specializations
# ---------------------------------------------------------------------------


class TestWeakestDomain:
    def test_data_debt_when_operations_weakest_and_average_above_1_5(self) -> None:
        result = generate_insights(_all(3.0, O=0.5), [], make_profile())
        assert _keys(result) == (
            ["optimization_focus", "data_debt_blocking"],
            ["optimize_operations", "resolve_data_debt"],
        )
        assert "Operations & Data scored only 0.5" in result.insights[1].reasoning

    def test_operations_weakest_with_low_average_falls_through(self) -> None:
        result = generate_insights(_all(1.0, O=0.5), [], make_profile())
        assert "data_debt_blocking" not in _keys(result)[0]
        assert _keys(result)[1][-1] == "strengthen_weakest"

    def test_talent_constraint(self) -> None:
        result = generate_insights(_all(2.0, T=0.0), [], make_profile())
        assert _keys(result) == (
            ["systematic_development", "talent_constraint"],
            ["systematize_practices", "develop_talent"],
        )

    def test_security_gaps_in_regulated_context_has_no_priority(self) -> None:
        profile = make_profile(regulatory_intensity=3)
        result = generate_insights(_all(2.0, R=0.5), evaluate_gates(profile), profile)
        assert _keys(result) == (
            ["compliance_moderate", "systematic_development", "security_gaps"],
            ["address_compliance", "systematize_practices"],
        )

    def test_security_gaps_for_sensitive_data(self) -> None:
        profile = make_profile(data_sensitivity=4)
        result = generate_insights(_all(2.0, R=1.0), evaluate_gates(profile), profile)
        assert "security_gaps" in _keys(result)[0]

    def test_risk_weakest_without_context_strengthens_weakest(self) -> None:
        result = generate_insights(_all(2.0, R=0.5), [], make_profile())
        assert "security_gaps" not in _keys(result)[0]
        assert result.priorities[-1].title == "Strengthen Risk, Trust & Security"

    def test_no_specialization_above_ceiling(self) -> None:
        result = generate_insights(_all(2.0, X=1.25), [], make_profile())
        assert _keys(result) == (["systematic_development"], ["systematize_practices"])

    def test_only_one_specialization_fires(self) -> None:
        """O and T tie at 0; the tie resolves to O and data debt wins."""
        result = generate_insights(_all(3.0, O=0.0, T=0.0), [], make_profile())
        specialized = {"data_debt_blocking", "talent_constraint", "security_gaps"}
        assert specialized & set(_keys(result)[0]) == {"data_debt_blocking"}
        assert "develop_talent" not in _keys(result)[1]


# ---------------------------------------------------------------------------
# Imbalance
# ---------------------------------------------------------------------------


class TestImbalance:
    def test_fires_above_1_2_variance(self) -> None:
        result = generate_insights(_all(3.0, C=0.0), [], None)
        assert _keys(result)[0] == ["optimization_focus", "capability_imbalance"]
        imbalance = result.insights[1]
        assert imbalance.action == (
            "Focus on strengthening Clarity & Command to reduce the 3.0-point gap with your "
            "strongest areas."
        )
        assert "3.0-point spread" in imbalance.reasoning

    def test_unbalanced_but_below_insight_threshold(self) -> None:
        """Variance 1.0 flags the analysis as unbalanced but adds no insight."""
        result = generate_insights({"C": 0.0, "O": 2.0}, [], None)
        assert "capability_imbalance" not in _keys(result)[0]

    def test_skipped_when_insights_already_full(self) -> None:
        profile = make_profile(regulatory_intensity=4, data_sensitivity=4)
        result = generate_insights(_all(3.0, R=0.0), evaluate_gates(profile), profile)
        assert _keys(result)[0] == ["compliance_critical", "optimization_focus", "security_gaps"]

    def test_respects_custom_insight_cap(self) -> None:
        result = generate_insights(_all(3.0, C=0.0), [], None, max_insights=1)
        assert _keys(result)[0] == ["optimization_focus"]


# ---------------------------------------------------------------------------
# Caps, partial data, determinism
# ---------------------------------------------------------------------------


class TestCapsAndEdgeCases:
    def test_never_more_than_three(self) -> None:
        profile = make_profile(regulatory_intensity=4, data_sensitivity=4, build_readiness=0)
        result = generate_insights(_all(2.0, T=0.0), evaluate_gates(profile), profile)
        assert len(result.insights) <= 3
        assert len(result.priorities) <= 3

    def test_truncation_keeps_cascade_order(self) -> None:
        profile = make_profile(regulatory_intensity=4)
        result = generate_insights(
            _all(2.0, T=0.0), evaluate_gates(profile), profile, max_insights=2, max_priorities=1
        )
        assert _keys(result) == (
            ["compliance_moderate", "systematic_development"],
            ["address_compliance"],
        )

    def test_caps_above_three_are_ignored(self) -> None:
        profile = make_profile(regulatory_intensity=4)
        gates = evaluate_gates(profile)
        scores = _all(3.0, R=0.0)
        widened = generate_insights(scores, gates, profile, max_insights=10, max_priorities=10)
        assert len(widened.insights) == 3
        assert len(widened.priorities) <= 3
        assert widened == generate_insights(scores, gates, profile)

    def test_imbalance_never_fills_a_fourth_slot(self) -> None:
        profile = make_profile(regulatory_intensity=4)
        result = generate_insights(
            _all(3.0, R=0.0), evaluate_gates(profile), profile, max_insights=4
        )
        assert "capability_imbalance" not in _keys(result)[0]

    def test_empty_everything(self) -> None:
        result = generate_insights({}, [], None)
        assert result.insights == ()
        assert result.priorities == ()

    def test_none_scores_and_gates(self) -> None:
        result = generate_insights(None, None, None)
        assert result.insights == ()

    def test_deterministic(self) -> None:
        profile = make_profile(regulatory_intensity=4, latency_edge=4)
        gates = evaluate_gates(profile)
        scores = _all(1.5, E=0.25)
        assert generate_insights(scores, gates, profile) == generate_insights(scores, gates, profile)

    def test_accepts_raw_profile_mapping(self) -> None:
        result = generate_insights(_all(2.0, R=0.0), [], make_profile(data_sensitivity=3).to_dict())
        assert "security_gaps" in _keys(result)[0]


# ---------------------------------------------------------------------------
# Presentation helpers
# ---------------------------------------------------------------------------


class TestPresentationHelpers:
    def _insight(self, urgency: str) -> Insight:
        return Insight(
            key="k",
            type="t",
            title="Title",
            description="Description.",
            action="Do it.",
            reasoning="because reasons",
            business_impact="Impact.",
            urgency=urgency,  # type: ignore[arg-type]
        )

    def test_format_for_executive(self) -> None:
        text = format_insight_for_executive(self._insight("high"))
        assert text == "**Title**: Description. because reasons. *Do it.*"

    def test_business_impact_summary_levels(self) -> None:
        assert business_impact_summary([self._insight("high"), self._insight("high")]).startswith(
            "Multiple high-priority issues"
        )
        assert business_impact_summary([self._insight("high"), self._insight("low")]).startswith(
            "One critical issue"
        )
        assert business_impact_summary([]).startswith("No critical blockers")


class TestRenderTemplate:
    def test_fills_known_slots(self) -> None:
        assert render_template("{domain} at {score}", {"domain": "Talent", "score": "0.5"}) == (
            "Talent at 0.5"
        )

    def test_leaves_unknown_slots_untouched(self) -> None:
        assert render_template("{domain} {other}", {"domain": "X", "other": "y"}) == "X {other}"

    def test_every_library_template_renders(self) -> None:
        slots = {"domain": "D", "score": "1.0", "avg": "1.0", "count": "2", "plural": "s", "spread": "1.0"}
        for template in INSIGHT_LIBRARY.values():
            for text in (template.title, template.action, template.reasoning, template.description):
                assert "{" not in render_template(text, slots)
