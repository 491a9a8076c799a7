"""Service layer orchestrating a full CORTEX evaluation.

Pipeline for one submission:
    1. validate the Context Profile
    2. score_pillars()          per-pillar scores from pulse answers
    3. evaluate_gates()         safeguards triggered by the profile
    4. analyze_maturity()       aggregate statistics and priority_levels()
    5. generate_insights()      capped insights and 90-day priorities
    6. rank_priority_moves()    context-weighted initiative ranking
    7. content_tags()           routing tags for guidance content
    8. initialize_value_overlay() default tracking metric per pillar

``recommend_guides`` is a separate entry point that ranks implementation
guides for one pillar from the same profile and answers.

Every step is a pure function of its inputs. No FastAPI imports belong here;
those live in the routes layer.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from cortex_assessment.core.gates import Gate, evaluate_gates
from cortex_assessment.core.guide_scoring import (
    DEFAULT_GUIDE_LIMIT,
    GuideRecommendations,
    rank_guides_for_pillar,
)
from cortex_assessment.core.insights import (
    MAX_INSIGHTS,
    MAX_PRIORITIES,
    Insight,
    Priority,
    business_impact_summary,
    generate_insights,
)
from cortex_assessment.core.priority_moves import (
    DEFAULT_MOVE_LIMIT,
    RankedMove,
    content_tags,
    rank_priority_moves,
)
from cortex_assessment.core.profile import ContextProfile, coerce_profile
from cortex_assessment.core.questions import PULSE_QUESTIONS, stage_for_score
from cortex_assessment.core.scoring import (
    MaturityAnalysis,
    analyze_maturity,
    pillar_completion,
    priority_levels,
    score_pillars,
)
from cortex_assessment.core.value_overlay import ValueOverlayEntry, initialize_value_overlay
from cortex_assessment.observability import get_logger

logger = get_logger(__name__)

_TOTAL_QUESTIONS: int = len(PULSE_QUESTIONS)


@dataclass(frozen=True)
class PillarScoreSummary:
    """Scores for a possibly in-progress pulse check.

    Attributes:
        scores: Pillar letter -> score (0-3) for fully answered pillars only.
        completion: Pillar letter -> answered question count (0-3).
        stages: Pillar letter -> maturity stage name for scored pillars.
        answered_count: Total answered questions.
        total_questions: Size of the pulse catalog (18).
    """

    scores: dict[str, float]
    completion: dict[str, int]
    stages: dict[str, str]
    answered_count: int
    total_questions: int

    @property
    def is_complete(self) -> bool:
        return self.answered_count == self.total_questions


@dataclass(frozen=True)
class AssessmentEvaluation:
    """Everything derived from one (profile, responses) submission."""

    profile: ContextProfile
    pillar_scores: PillarScoreSummary
    gates: tuple[Gate, ...]
    maturity: MaturityAnalysis
    priority_levels: list[tuple[str, int]]
    insights: tuple[Insight, ...]
    priorities: tuple[Priority, ...]
    business_impact_summary: str
    priority_moves: tuple[RankedMove, ...]
    moves_evaluated: int
    content_tags: tuple[str, ...]
    value_overlay: dict[str, ValueOverlayEntry]


class EvaluationService:
    """Runs the CORTEX evaluation pipeline.

    Holds only result caps; carries no per-request state, so a single
    instance can serve concurrent requests.
    """

    def __init__(
        self,
        insight_limit: int = MAX_INSIGHTS,
        priority_limit: int = MAX_PRIORITIES,
        priority_move_limit: int = DEFAULT_MOVE_LIMIT,
        guide_limit: int = DEFAULT_GUIDE_LIMIT,
    ) -> None:
        """Initialise the service with result caps.

        Args:
            insight_limit: Maximum insights returned per evaluation, at most 3.
            priority_limit: Maximum 90-day priorities returned per evaluation, at most 3.
            priority_move_limit: Maximum ranked priority moves returned.
            guide_limit: Maximum guides returned per pillar recommendation.
        """
        self._insight_limit = min(insight_limit, MAX_INSIGHTS)
        self._priority_limit = min(priority_limit, MAX_PRIORITIES)
        self._priority_move_limit = priority_move_limit
        self._guide_limit = guide_limit

    def score_only(self, responses: Mapping[str, float | None]) -> PillarScoreSummary:
        """Score pulse answers without a Context Profile.

        Args:
            responses: Question ID -> answer value; None or absent = unanswered.

        Returns:
            PillarScoreSummary for the answers given so far.

        Raises:
            UnknownQuestionError: If a key is not a catalog question ID.
            InvalidAnswerError: If a value is outside the allowed set.
        """
        scores = score_pillars(responses)
        completion = pillar_completion(responses)
        return PillarScoreSummary(
            scores=scores,
            completion=completion,
            stages={pillar: stage_for_score(score).name for pillar, score in scores.items()},
            answered_count=sum(completion.values()),
            total_questions=_TOTAL_QUESTIONS,
        )

    def evaluate(
        self,
        profile: ContextProfile | Mapping[str, Any] | None,
        responses: Mapping[str, float | None],
    ) -> AssessmentEvaluation:
        """Run the full evaluation for a Context Profile and pulse answers.

        Args:
            profile: A ContextProfile or raw mapping with all 12 fields.
            responses: Question ID -> answer value; may be partial.

        Returns:
            AssessmentEvaluation with scores, gates, insights, priorities,
            ranked moves, content tags and the default value overlay.

        Raises:
            InvalidProfileError: If the profile is missing or out of range.
            UnknownDimensionError: If the profile carries unknown keys.
            UnknownQuestionError: If a response key is not a catalog question.
            InvalidAnswerError: If a response value is outside the allowed set.
        """
        validated = coerce_profile(profile)
        summary = self.score_only(responses)
        gates = evaluate_gates(validated)
        maturity = analyze_maturity(summary.scores)
        insight_result = generate_insights(
            summary.scores,
            gates,
            validated,
            max_insights=self._insight_limit,
            max_priorities=self._priority_limit,
        )
        moves = rank_priority_moves(validated, summary.scores, limit=self._priority_move_limit)
        tags = content_tags(validated)
        overlay = initialize_value_overlay(validated)

        logger.info(
            "Assessment evaluated",
            scored_pillars=list(summary.scores),
            answered_count=summary.answered_count,
            gate_ids=[gate.id for gate in gates],
            insight_keys=[insight.key for insight in insight_result.insights],
            average_score=round(maturity.avg, 3),
        )

        return AssessmentEvaluation(
            profile=validated,
            pillar_scores=summary,
            gates=tuple(gates),
            maturity=maturity,
            priority_levels=priority_levels(summary.scores),
            insights=insight_result.insights,
            priorities=insight_result.priorities,
            business_impact_summary=business_impact_summary(insight_result.insights),
            priority_moves=moves.moves,
            moves_evaluated=moves.total_evaluated,
            content_tags=tuple(tags),
            value_overlay=overlay,
        )

    def recommend_guides(
        self,
        profile: ContextProfile | Mapping[str, Any] | None,
        responses: Mapping[str, float | None],
        pillar: str,
    ) -> GuideRecommendations:
        """Rank implementation guides for one pillar.

        The pillar's score comes from the same answers, so an unanswered
        pillar is ranked on context and urgency alone.

        Raises:
            UnknownPillarError: If ``pillar`` is not a catalog pillar.
            InvalidProfileError: If the profile is missing or out of range.
            UnknownQuestionError: If a response key is not a catalog question.
            InvalidAnswerError: If a response value is outside the allowed set.
        """
        validated = coerce_profile(profile)
        scores = score_pillars(responses)
        recommendations = rank_guides_for_pillar(
            pillar,
            scores.get(pillar),
            validated,
            responses,
            limit=self._guide_limit,
        )
        logger.info(
            "Guides recommended",
            pillar=pillar,
            guide_ids=[item.guide.guide_id for item in recommendations.guides],
        )
        return recommendations
