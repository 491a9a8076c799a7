"""Pydantic request/response schemas for the CORTEX assessment API.

Request bodies carry the Context Profile and pulse answers as plain mappings:
the engine owns their validation so every rejection surfaces with a domain
error code. Every response is a typed Pydantic v2 model.
"""

from typing import Any, Literal

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


class PillarSchema(BaseModel):
    key: str
    name: str
    description: str


class PulseQuestionSchema(BaseModel):
    question_id: str
    pillar: str
    text: str


class ContextItemSchema(BaseModel):
    """A Context Profile dimension as presented to respondents.

    Attributes:
        key: Profile field name.
        label: Display label.
        description: What the dimension measures.
        kind: 'slider' for 0-4 ordinals, 'boolean' for yes/no.
        scale_labels: Anchor labels for 0..4 (sliders only).
    """

    key: str
    label: str
    description: str
    kind: Literal["slider", "boolean"]
    scale_labels: list[str] = Field(default_factory=list)


class MaturityStageSchema(BaseModel):
    level: int
    name: str
    description: str


class MetricSchema(BaseModel):
    """A value-overlay metric from the fixed catalog."""

    metric_id: str
    pillar: str
    name: str
    definition: str
    unit: str
    unit_hint: str
    tags: list[str]
    is_default: bool


class CatalogResponse(BaseModel):
    """Static assessment catalog used to render the questionnaire."""

    pillars: list[PillarSchema]
    questions: list[PulseQuestionSchema]
    context_items: list[ContextItemSchema]
    answer_values: dict[str, float]
    maturity_stages: list[MaturityStageSchema]
    metrics: list[MetricSchema]


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class ContextProfileRequest(BaseModel):
    """Request body carrying only a Context Profile.

    Attributes:
        context_profile: The 12 context dimensions (10 ordinals 0-4, 2 booleans).
    """

    context_profile: dict[str, Any] | None = Field(
        default=None,
        description="Context Profile: 10 ordinal fields (0-4) and 2 boolean fields",
    )


class PulseResponsesRequest(BaseModel):
    """Request body carrying only pulse answers.

    Attributes:
        pulse_responses: Question ID -> 0, 0.25, 0.5 or 1; null = unanswered.
    """

    pulse_responses: dict[str, Any] = Field(
        default_factory=dict,
        description="Question ID (C1..X3) -> answer value in {0, 0.25, 0.5, 1}",
    )


class EvaluationRequest(ContextProfileRequest, PulseResponsesRequest):
    """Request body for a full evaluation."""


# ---------------------------------------------------------------------------
# Response building blocks
# ---------------------------------------------------------------------------


class PillarScoresResponse(BaseModel):
    """Scores for a possibly in-progress pulse check.

    Attributes:
        scores: Pillar -> score (0-3), fully answered pillars only.
        completion: Pillar -> answered question count (0-3).
        stages: Pillar -> maturity stage name for scored pillars.
        answered_count: Total answered questions.
        total_questions: Number of questions in the pulse check.
        is_complete: Whether every question is answered.
    """

    scores: dict[str, float]
    completion: dict[str, int]
    stages: dict[str, str]
    answered_count: int
    total_questions: int
    is_complete: bool


class GateSchema(BaseModel):
    """A triggered safeguard.

    Attributes:
        explain: Field name -> literal profile value that triggered the gate.
        explain_labels: Field name -> scale label for the triggering value
            (e.g. 'Heavily Regulated (4/4)'); booleans show 'Yes'.
        thresholds: Field name -> threshold display (e.g. '≥3') for each
            triggering field.
    """

    id: str
    pillar: str | None
    title: str
    reason: str
    description: str
    actions: list[str]
    explain: dict[str, int | bool]
    explain_labels: dict[str, str]
    thresholds: dict[str, str]
    status: str


class GatesResponse(BaseModel):
    gates: list[GateSchema]
    total: int


class MaturityAnalysisSchema(BaseModel):
    avg: float
    min: float
    max: float
    variance: float
    is_unbalanced: bool
    has_strengths: bool
    has_weaknesses: bool


class PriorityLevelSchema(BaseModel):
    """A pillar ranked by need; priority 0 means not a priority."""

    pillar: str
    priority: int


class InsightSchema(BaseModel):
    key: str
    type: str
    title: str
    description: str
    action: str
    reasoning: str
    business_impact: str
    urgency: Literal["high", "medium", "low"]


class PrioritySchema(BaseModel):
    key: str
    title: str
    description: str
    reasoning: str
    timeframe: str
    urgency: Literal["high", "medium", "low"]


class PlaybookItemSchema(BaseModel):
    kind: str
    label: str


class PriorityMoveExplainSchema(BaseModel):
    gap_boost: float
    profile_boost: float
    pillar_score: float
    triggering_tags: list[str]


class PriorityMoveSchema(BaseModel):
    """A ranked initiative with the factors behind its priority."""

    id: str
    pillar: str
    title: str
    description: str
    playbook: list[PlaybookItemSchema]
    priority: float
    rank: int
    explain: PriorityMoveExplainSchema
    why_it_matters: str


class ValueOverlayEntrySchema(BaseModel):
    pillar: str
    metric_id: str
    name: str
    unit: str
    cadence: Literal["monthly", "quarterly"]
    baseline: float | None = None
    target: float | None = None


class ValueOverlayResponse(BaseModel):
    """Default overlay for a profile plus why each non-baseline pick was made.

    Attributes:
        overlay: Pillar -> overlay entry, in C, O, R, T, E, X order.
        explanations: Pillar -> selection explanation, or None when the
            baseline default was used.
    """

    overlay: dict[str, ValueOverlayEntrySchema]
    explanations: dict[str, str | None]


class SwitchMetricRequest(BaseModel):
    entry: ValueOverlayEntrySchema
    metric_id: str = Field(..., min_length=1)


class UpdateOverlayEntryRequest(BaseModel):
    """Edit baseline, target or cadence of one overlay entry.

    Fields left out of the body are unchanged; an explicit null clears
    baseline or target.
    """

    entry: ValueOverlayEntrySchema
    baseline: float | None = None
    target: float | None = None
    cadence: str | None = None


# ---------------------------------------------------------------------------
# Full evaluation
# ---------------------------------------------------------------------------


class EvaluationResponse(BaseModel):
    """Complete evaluation result for one submission."""

    context_profile: dict[str, int | bool]
    pillar_scores: PillarScoresResponse
    gates: list[GateSchema]
    maturity: MaturityAnalysisSchema
    priority_levels: list[PriorityLevelSchema]
    insights: list[InsightSchema]
    priorities: list[PrioritySchema]
    business_impact_summary: str
    priority_moves: list[PriorityMoveSchema]
    moves_evaluated: int
    content_tags: list[str]
    value_overlay: dict[str, ValueOverlayEntrySchema]


# ---------------------------------------------------------------------------
# Implementation guides
# ---------------------------------------------------------------------------


class GuideRecommendationRequest(EvaluationRequest):
    """Request body for ranking implementation guides for one pillar.

    Attributes:
        pillar: Pillar key (C, O, R, T, E or X); validated by the engine.
    """

    pillar: str = Field(..., min_length=1, description="Pillar key: C, O, R, T, E or X")


class GuideExplainSchema(BaseModel):
    gap_boost: float
    context_boost: float
    pulse_boost: float
    reasons: list[str]


class GuideSchema(BaseModel):
    """A ranked implementation guide."""

    id: str
    title: str
    category: Literal["gate", "pillar", "context"]
    pillar: str | None
    difficulty: str
    time_to_implement: str
    urgency: Literal["critical", "high", "medium", "low"]
    prerequisites: list[str]
    score: float
    explain: GuideExplainSchema
    explanation: str


class GuideRecommendationsResponse(BaseModel):
    """Guides for one pillar, prerequisites first.

    Attributes:
        pillar_score: Score of the pillar, or None when it is not fully answered.
        total_evaluated: Number of candidate guides scored for the pillar.
    """

    pillar: str
    pillar_score: float | None
    guides: list[GuideSchema]
    total_evaluated: int


# ---------------------------------------------------------------------------
# Metric choices per pillar
# ---------------------------------------------------------------------------


class PillarMetricsResponse(BaseModel):
    pillar: str
    default_metric_id: str
    metrics: list[MetricSchema]
