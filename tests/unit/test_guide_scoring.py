"""Unit tests for implementation-guide ranking.

Tests cover:
- score components: gap, context triggers, pulse targeting, urgency
- reasons and the explanation sentence
- candidate selection per pillar and prerequisite ordering
- library integrity against the profile and question catalogs
"""

import pytest

from cortex_assessment.core import guide_scoring
from cortex_assessment.core.errors import UnknownPillarError
from cortex_assessment.core.guide_scoring import (
    GUIDE_LIBRARY,
    GUIDES_BY_ID,
    GuideMetadata,
    GuideRecommendations,
    guide_explanation,
    rank_guides_for_pillar,
    score_guide,
)
from cortex_assessment.core.questions import (
    BOOLEAN_FIELDS,
    ORDINAL_FIELDS,
    PILLARS,
    QUESTIONS_BY_ID,
)
from tests.factories import make_profile

_R_ALL_NO = {"R1": 0.0, "R2": 0.0, "R3": 0.0}


def _ids(result: GuideRecommendations) -> list[str]:
    return [item.guide.guide_id for item in result.guides]


def _guide(guide_id: str, base: float, prerequisites: tuple[str, ...] = ()) -> GuideMetadata:
    return GuideMetadata(
        guide_id=guide_id,
        title=guide_id,
        category="pillar",
        pillar="R",
        difficulty="beginner",
        time_to_implement="1-week",
        urgency="low",
        base_relevance=base,
        prerequisites=prerequisites,
    )


# ---------------------------------------------------------------------------
# Library integrity
# ---------------------------------------------------------------------------


class TestGuideLibrary:
    def test_ids_are_unique(self) -> None:
        assert len(GUIDES_BY_ID) == len(GUIDE_LIBRARY) == 26

    def test_trigger_fields_exist_on_profile(self) -> None:
        known = set(ORDINAL_FIELDS) | set(BOOLEAN_FIELDS)
        for guide in GUIDE_LIBRARY:
            for trigger in guide.triggers:
                assert trigger.condition.field in known, guide.guide_id

    def test_targets_are_catalog_questions(self) -> None:
        for guide in GUIDE_LIBRARY:
            assert set(guide.targets) <= set(QUESTIONS_BY_ID), guide.guide_id

    def test_prerequisites_are_library_guides(self) -> None:
        for guide in GUIDE_LIBRARY:
            assert set(guide.prerequisites) <= set(GUIDES_BY_ID), guide.guide_id

    def test_pillar_guides_name_a_pillar(self) -> None:
        for guide in GUIDE_LIBRARY:
            if guide.category == "pillar":
                assert guide.pillar in PILLARS
            else:
                assert guide.pillar is None


# ---------------------------------------------------------------------------
# Scoring one guide
# ---------------------------------------------------------------------------


class TestScoreGuide:
    """score = base + 0.4 * gap + 0.35 * context + 0.25 * pulse + urgency."""

    def test_all_components(self) -> None:
        guide = GUIDES_BY_ID["pillar_r_deep"]
        result = score_guide(guide, "R", 0.0, make_profile(), _R_ALL_NO)

        assert result.gap_boost == pytest.approx(1.2)
        assert result.context_boost == 0.0
        assert result.pulse_boost == pytest.approx(0.75)
        assert result.score == pytest.approx(0.70 + 1.2 + 0.75 * 0.25 + 0.05)
        assert result.reasons == (
            "addresses weak Risk, Trust & Security domain (0.0/3)",
            'directly addresses "R1" gap',
            'directly addresses "R2" gap',
            'directly addresses "R3" gap',
        )

    def test_unscored_pillar_has_no_gap_term(self) -> None:
        result = score_guide(GUIDES_BY_ID["pillar_r_deep"], "R", None, make_profile(), {})
        assert result.gap_boost == 0.0
        assert result.score == pytest.approx(0.75)
        assert result.reasons == ()

    def test_small_gap_is_not_a_reason(self) -> None:
        result = score_guide(GUIDES_BY_ID["pillar_r_deep"], "R", 2.5, make_profile(), {})
        assert result.gap_boost == pytest.approx(0.2)
        assert result.reasons == ()

    def test_context_triggers_weighted(self) -> None:
        profile = make_profile(regulatory_intensity=4, safety_criticality=3)
        result = score_guide(GUIDES_BY_ID["pillar_r_deep"], "R", None, profile, {})
        assert result.context_boost == pytest.approx((0.30 + 0.25) * 0.35)
        assert result.reasons == (
            "matches your regulatory intensity",
            "matches your safety criticality",
        )

    def test_weak_trigger_boosts_without_reason(self) -> None:
        result = score_guide(
            GUIDES_BY_ID["gate_assurance"], "R", None, make_profile(brand_exposure=4), {}
        )
        assert result.context_boost == pytest.approx(0.15 * 0.35)
        assert result.reasons == ()

    def test_boolean_trigger(self) -> None:
        result = score_guide(
            GUIDES_BY_ID["gate_contractual_controls"],
            "E",
            None,
            make_profile(procurement_constraints=True),
            {},
        )
        assert result.context_boost == pytest.approx(0.30 * 0.35)
        assert result.reasons == ("matches your procurement constraints",)

    @pytest.mark.parametrize(
        ("answer", "pulse_boost", "reasons"),
        [
            (0.0, 0.25, ('directly addresses "E3" gap',)),
            (0.25, 0.15, ('builds on "E3" progress',)),
            (0.5, 0.05, ()),
            (1.0, 0.0, ()),
        ],
    )
    def test_pulse_targeting(
        self, answer: float, pulse_boost: float, reasons: tuple[str, ...]
    ) -> None:
        result = score_guide(
            GUIDES_BY_ID["pillar_e_cost_optimization"], "E", None, make_profile(), {"E3": answer}
        )
        assert result.pulse_boost == pytest.approx(pulse_boost)
        assert result.reasons == reasons

    def test_critical_urgency_bonus_and_reason(self) -> None:
        result = score_guide(GUIDES_BY_ID["context_regulated"], "C", None, make_profile(), {})
        assert result.score == pytest.approx(0.50 + 0.1)
        assert result.reasons == ("critical priority",)

    def test_to_dict(self) -> None:
        data = score_guide(GUIDES_BY_ID["gate_hitl"], "O", 1.0, make_profile(), {}).to_dict()
        assert data["id"] == "gate_hitl"
        assert data["category"] == "gate"
        assert data["explain"]["gap_boost"] == pytest.approx(0.8)
        assert data["explanation"].startswith("Selected because it addresses weak Operations & Data")


# ---------------------------------------------------------------------------
# Ranking for a pillar
# ---------------------------------------------------------------------------


class TestRankGuidesForPillar:
    def test_weak_risk_pillar(self) -> None:
        result = rank_guides_for_pillar("R", 0.0, make_profile(), _R_ALL_NO)

        assert result.total_evaluated == 15
        assert _ids(result) == [
            "pillar_r_deep",
            "gate_hitl",
            "gate_data_governance",
            "gate_assurance",
            "gate_llm_privacy",
        ]
        assert result.guides[0].score == pytest.approx(2.1375)

    def test_candidates_are_own_pillar_plus_gate_and_context(self) -> None:
        result = rank_guides_for_pillar("T", 1.0, make_profile(), {}, limit=50)
        for item in result.guides:
            assert item.guide.category != "pillar" or item.guide.pillar == "T"
        assert {"pillar_t_deep", "pillar_t_change_management"} <= set(_ids(result))
        assert result.total_evaluated == 14

    def test_limit(self) -> None:
        assert len(rank_guides_for_pillar("C", 1.0, make_profile(), {}, limit=2).guides) == 2

    def test_accepts_raw_profile_mapping(self) -> None:
        result = rank_guides_for_pillar("X", None, make_profile().to_dict(), None)
        assert len(result.guides) == 5
        assert result.pillar_score is None

    def test_unknown_pillar(self) -> None:
        with pytest.raises(UnknownPillarError):
            rank_guides_for_pillar("Z", 1.0, make_profile(), {})

    def test_deterministic(self) -> None:
        profile = make_profile(finops_priority=4, scale_throughput=3)
        answers = {"E1": 0.25, "E2": 0.0, "E3": 0.5}
        assert rank_guides_for_pillar("E", 1.5, profile, answers) == rank_guides_for_pillar(
            "E", 1.5, profile, answers
        )


class TestPrerequisiteOrdering:
    def test_prerequisite_is_pulled_ahead(self, monkeypatch: pytest.MonkeyPatch) -> None:
        library = (
            _guide("basics", 0.1),
            _guide("advanced", 0.9, prerequisites=("basics",)),
            _guide("other", 0.5),
        )
        monkeypatch.setattr(guide_scoring, "GUIDE_LIBRARY", library)

        result = rank_guides_for_pillar("R", None, make_profile(), {})
        assert _ids(result) == ["basics", "advanced", "other"]

    def test_prerequisite_counts_against_limit(self, monkeypatch: pytest.MonkeyPatch) -> None:
        library = (
            _guide("basics", 0.1),
            _guide("advanced", 0.9, prerequisites=("basics",)),
        )
        monkeypatch.setattr(guide_scoring, "GUIDE_LIBRARY", library)

        result = rank_guides_for_pillar("R", None, make_profile(), {}, limit=1)
        assert _ids(result) == ["basics"]

    def test_missing_prerequisite_is_skipped(self, monkeypatch: pytest.MonkeyPatch) -> None:
        library = (_guide("advanced", 0.9, prerequisites=("not_in_library",)),)
        monkeypatch.setattr(guide_scoring, "GUIDE_LIBRARY", library)

        result = rank_guides_for_pillar("R", None, make_profile(), {})
        assert _ids(result) == ["advanced"]

    def test_library_prerequisite_precedes_dependents(self) -> None:
        profile = make_profile(brand_exposure=4, safety_criticality=4)
        ids = _ids(rank_guides_for_pillar("R", 0.0, profile, _R_ALL_NO, limit=50))
        assert ids.index("pillar_r_deep") < ids.index("pillar_r_bias_testing")
        assert ids.index("pillar_r_deep") < ids.index("pillar_r_security_redteaming")


# ---------------------------------------------------------------------------
# Explanation sentence
# ---------------------------------------------------------------------------


class TestGuideExplanation:
    @pytest.mark.parametrize(
        ("reasons", "expected"),
        [
            ((), "Foundational guide for this domain"),
            (("critical priority",), "Selected because it critical priority"),
            (
                ("matches your finops priority", "critical priority"),
                "Selected because it matches your finops priority and critical priority",
            ),
            (
                ("a", "b", "c"),
                "Selected because it a, b, and c",
            ),
        ],
    )
    def test_sentence(self, reasons: tuple[str, ...], expected: str) -> None:
        assert guide_explanation(reasons) == expected
