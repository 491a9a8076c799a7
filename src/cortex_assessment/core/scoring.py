"""Pillar scoring and maturity distribution analysis.

Pulse answers are summed per pillar: 3 questions per pillar, each worth
0 / 0.25 / 0.5 / 1, so a complete pillar scores 0-3. A pillar with fewer
than 3 answers has no score at all (it is omitted, never reported as 0).

The analysis helpers only look at pillars that are present, so a partially
completed assessment still produces meaningful statistics.

This module is intentionally independent of the HTTP layer so that the
scoring logic can be unit-tested without any infrastructure.
"""

from collections.abc import Mapping
from dataclasses import dataclass

from cortex_assessment.core.errors import InvalidAnswerError, UnknownQuestionError
from cortex_assessment.core.questions import (
    ALLOWED_ANSWER_VALUES,
    PILLAR_ORDER,
    QUESTIONS_BY_ID,
    QUESTIONS_BY_PILLAR,
    pillar_name,
)
from cortex_assessment.observability import get_logger

logger = get_logger(__name__)

# Variance above this marks maturity as "spiky" rather than broadly even.
UNBALANCED_VARIANCE_THRESHOLD: float = 0.8
STRENGTH_THRESHOLD: float = 2.5
WEAKNESS_THRESHOLD: float = 1.0


@dataclass(frozen=True)
class MaturityAnalysis:
    """Aggregate statistics over the scored pillars.

    Attributes:
        avg: Mean pillar score.
        min: Lowest pillar score.
        max: Highest pillar score.
        variance: Population variance of the pillar scores.
        is_unbalanced: variance > 0.8.
        has_strengths: max >= 2.5.
        has_weaknesses: min <= 1.0.
    """

    avg: float
    min: float
    max: float
    variance: float
    is_unbalanced: bool
    has_strengths: bool
    has_weaknesses: bool


# Returned when there is nothing to analyze yet.
NO_DATA_ANALYSIS = MaturityAnalysis(
    avg=0.0,
    min=0.0,
    max=0.0,
    variance=0.0,
    is_unbalanced=False,
    has_strengths=False,
    has_weaknesses=True,
)


@dataclass(frozen=True)
class DomainScore:
    """A pillar paired with its score and display name."""

    pillar: str
    score: float
    name: str


def _validate_responses(responses: Mapping[str, float | None]) -> None:
    unknown = [question_id for question_id in responses if question_id not in QUESTIONS_BY_ID]
    if unknown:
        raise UnknownQuestionError(unknown)

    for question_id, value in responses.items():
        if value is None:
            continue
        # bool is an int subclass; True must not silently count as 1.
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidAnswerError(question_id, value)
        if value not in ALLOWED_ANSWER_VALUES:
            raise InvalidAnswerError(question_id, value)


def score_pillars(responses: Mapping[str, float | None]) -> dict[str, float]:
    """Reduce pulse answers to per-pillar scores.

    Args:
        responses: Mapping of question ID to answer value (0, 0.25, 0.5, 1).
            A value of None counts as unanswered.

    Returns:
        Mapping of pillar letter to score (0-3) in C, O, R, T, E, X order.
        Pillars without all 3 answers are absent.

    Raises:
        UnknownQuestionError: If a key is not one of the 18 catalog IDs.
        InvalidAnswerError: If a value is outside the allowed discrete set.
    """
    _validate_responses(responses)

    scores: dict[str, float] = {}
    for pillar in PILLAR_ORDER:
        answers = [responses.get(question_id) for question_id in QUESTIONS_BY_PILLAR[pillar]]
        if any(answer is None for answer in answers):
            continue
        scores[pillar] = float(sum(answers))  # type: ignore[arg-type]

    logger.debug(
        "Pillar scores computed",
        scored_pillars=list(scores),
        answer_count=sum(1 for value in responses.values() if value is not None),
    )
    return scores


def pillar_completion(responses: Mapping[str, float | None]) -> dict[str, int]:
    """Count answered questions per pillar (0-3), in pillar order.

    Unknown question IDs are ignored here; ``score_pillars`` is the place
    that rejects them.
    """
    return {
        pillar: sum(
            1 for question_id in QUESTIONS_BY_PILLAR[pillar] if responses.get(question_id) is not None
        )
        for pillar in PILLAR_ORDER
    }


def _ordered_scores(scores: Mapping[str, float]) -> list[tuple[str, float]]:
    # Catalog pillars first in C,O,R,T,E,X order, then anything else as given.
    known = [(pillar, scores[pillar]) for pillar in PILLAR_ORDER if pillar in scores]
    extra = [(pillar, score) for pillar, score in scores.items() if pillar not in PILLAR_ORDER]
    return known + extra


def analyze_maturity(scores: Mapping[str, float] | None) -> MaturityAnalysis:
    """Compute aggregate statistics over the pillars present in ``scores``.

    Missing pillars neither contribute nor count toward the denominator.

    Args:
        scores: Pillar scores, possibly partial. None is treated as empty.

    Returns:
        MaturityAnalysis; the no-data state when there are no scores.
    """
    if not scores:
        return NO_DATA_ANALYSIS

    values = [score for _, score in _ordered_scores(scores)]
    avg = sum(values) / len(values)
    min_score = min(values)
    max_score = max(values)
    variance = sum((value - avg) ** 2 for value in values) / len(values)

    return MaturityAnalysis(
        avg=avg,
        min=min_score,
        max=max_score,
        variance=variance,
        is_unbalanced=variance > UNBALANCED_VARIANCE_THRESHOLD,
        has_strengths=max_score >= STRENGTH_THRESHOLD,
        has_weaknesses=min_score <= WEAKNESS_THRESHOLD,
    )


def weakest_domains(scores: Mapping[str, float] | None, count: int = 2) -> list[DomainScore]:
    """Return the ``count`` lowest-scoring pillars, weakest first.

    Ties keep C, O, R, T, E, X order (``sorted`` is stable), so "the" weakest
    pillar named in insight text is always deterministic.
    """
    if not scores:
        return []

    ranked = sorted(_ordered_scores(scores), key=lambda item: item[1])
    return [
        DomainScore(pillar=pillar, score=score, name=pillar_name(pillar))
        for pillar, score in ranked[:count]
    ]


def priority_levels(scores: Mapping[str, float] | None) -> list[tuple[str, int]]:
    """Rank pillars by need.

    Pillars are listed weakest first. Those at Emerging or Nascent (score
    <= 1) get their 1-based rank as priority; stronger pillars get 0.
    """
    if not scores:
        return []

    ranked = sorted(_ordered_scores(scores), key=lambda item: item[1])
    return [
        (pillar, index + 1 if score <= WEAKNESS_THRESHOLD else 0)
        for index, (pillar, score) in enumerate(ranked)
    ]
