"""FastAPI routes for CORTEX evaluations.

All routes are thin: they parse inputs, delegate to EvaluationService or the
engine functions, and serialise responses. No business logic lives here.

Auth: None. The engine is stateless and stores nothing.
"""

from dataclasses import asdict

from fastapi import APIRouter, Depends, status

from cortex_assessment.api.errors import engine_error_to_http
from cortex_assessment.api.schemas.evaluation import (
    CatalogResponse,
    ContextItemSchema,
    ContextProfileRequest,
    EvaluationRequest,
    EvaluationResponse,
    GateSchema,
    GatesResponse,
    GuideRecommendationRequest,
    GuideRecommendationsResponse,
    GuideSchema,
    InsightSchema,
    MaturityAnalysisSchema,
    MaturityStageSchema,
    MetricSchema,
    PillarSchema,
    PillarScoresResponse,
    PriorityLevelSchema,
    PrioritySchema,
    PriorityMoveSchema,
    PulseQuestionSchema,
    PulseResponsesRequest,
    ValueOverlayEntrySchema,
)
from cortex_assessment.core.errors import AssessmentEngineError
from cortex_assessment.core.gates import Gate, evaluate_gates, gate_threshold
from cortex_assessment.core.questions import (
    ANSWER_VALUES,
    CONTEXT_ITEMS,
    MATURITY_STAGES,
    PILLARS,
    PULSE_QUESTIONS,
)
from cortex_assessment.core.scale import CONTEXT_FIELD_LABELS, format_scale_value
from cortex_assessment.core.services.evaluation_service import (
    EvaluationService,
    PillarScoreSummary,
)
from cortex_assessment.core.value_overlay import METRIC_CATALOG
from cortex_assessment.observability import get_logger
from cortex_assessment.settings import Settings

logger = get_logger(__name__)

router = APIRouter(tags=["CORTEX Assessment"])

settings = Settings()


# ---------------------------------------------------------------------------
# Dependency factory
# ---------------------------------------------------------------------------


def get_evaluation_service() -> EvaluationService:
    """Build EvaluationService with result caps from settings."""
    return EvaluationService(
        insight_limit=settings.insight_limit,
        priority_limit=settings.priority_limit,
        priority_move_limit=settings.priority_move_limit,
        guide_limit=settings.guide_limit,
    )


# ---------------------------------------------------------------------------
# Serialisation helpers
# ---------------------------------------------------------------------------


def _explain_label(field_name: str, value: int | bool) -> str:
    if isinstance(value, bool):
        return "Yes" if value else "No"
    return format_scale_value(field_name, value)


def _gate_schema(gate: Gate) -> GateSchema:
    thresholds = {
        field_name: threshold
        for field_name in gate.explain
        if (threshold := gate_threshold(gate.id, field_name)) is not None
    }
    return GateSchema(
        **gate.to_dict(),
        explain_labels={
            field_name: _explain_label(field_name, value) for field_name, value in gate.explain.items()
        },
        thresholds=thresholds,
    )


def _pillar_scores_response(summary: PillarScoreSummary) -> PillarScoresResponse:
    return PillarScoresResponse(
        scores=summary.scores,
        completion=summary.completion,
        stages=summary.stages,
        answered_count=summary.answered_count,
        total_questions=summary.total_questions,
        is_complete=summary.is_complete,
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.get(
    "/catalog",
    response_model=CatalogResponse,
    status_code=status.HTTP_200_OK,
    summary="Retrieve the assessment catalog",
)
async def get_catalog() -> CatalogResponse:
    """Return pillars, pulse questions, context dimensions and metric catalog.

    Everything a client needs to render the questionnaire and the value
    overlay editor. The catalog is fixed at build time.
    """
    return CatalogResponse(
        pillars=[
            PillarSchema(key=pillar.key, name=pillar.name, description=pillar.description)
            for pillar in PILLARS.values()
        ],
        questions=[
            PulseQuestionSchema(question_id=q.question_id, pillar=q.pillar, text=q.text)
            for q in PULSE_QUESTIONS
        ],
        context_items=[
            ContextItemSchema(
                key=item.key,
                label=item.label,
                description=item.description,
                kind=item.kind,
                scale_labels=list(CONTEXT_FIELD_LABELS.get(item.key, ())),
            )
            for item in CONTEXT_ITEMS
        ],
        answer_values=dict(ANSWER_VALUES),
        maturity_stages=[
            MaturityStageSchema(level=stage.level, name=stage.name, description=stage.description)
            for stage in MATURITY_STAGES
        ],
        metrics=[
            MetricSchema(
                metric_id=metric.metric_id,
                pillar=metric.pillar,
                name=metric.name,
                definition=metric.definition,
                unit=metric.unit,
                unit_hint=metric.unit_hint,
                tags=list(metric.tags),
                is_default=metric.is_default,
            )
            for metric in METRIC_CATALOG
        ],
    )


@router.post(
    "/evaluations",
    response_model=EvaluationResponse,
    status_code=status.HTTP_200_OK,
    summary="Evaluate a Context Profile and pulse answers",
)
async def create_evaluation(
    body: EvaluationRequest,
    service: EvaluationService = Depends(get_evaluation_service),
) -> EvaluationResponse:
    """Run the full CORTEX evaluation.

    Returns pillar scores, triggered gates, maturity statistics, up to 3
    insights and 3 priorities, ranked priority moves, content tags and the
    default value overlay. Partial pulse answers are accepted; pillars
    without all 3 answers are simply left unscored.
    """
    try:
        evaluation = service.evaluate(body.context_profile, body.pulse_responses)
    except AssessmentEngineError as exc:
        logger.info("Evaluation rejected", error_code=exc.error_code)
        raise engine_error_to_http(exc) from exc

    return EvaluationResponse(
        context_profile=evaluation.profile.to_dict(),
        pillar_scores=_pillar_scores_response(evaluation.pillar_scores),
        gates=[_gate_schema(gate) for gate in evaluation.gates],
        maturity=MaturityAnalysisSchema(**asdict(evaluation.maturity)),
        priority_levels=[
            PriorityLevelSchema(pillar=pillar, priority=priority)
            for pillar, priority in evaluation.priority_levels
        ],
        insights=[InsightSchema(**insight.to_dict()) for insight in evaluation.insights],
        priorities=[PrioritySchema(**priority.to_dict()) for priority in evaluation.priorities],
        business_impact_summary=evaluation.business_impact_summary,
        priority_moves=[PriorityMoveSchema(**move.to_dict()) for move in evaluation.priority_moves],
        moves_evaluated=evaluation.moves_evaluated,
        content_tags=list(evaluation.content_tags),
        value_overlay={
            pillar: ValueOverlayEntrySchema(**entry.to_dict())
            for pillar, entry in evaluation.value_overlay.items()
        },
    )


@router.post(
    "/pillar-scores",
    response_model=PillarScoresResponse,
    status_code=status.HTTP_200_OK,
    summary="Score pulse answers without a Context Profile",
)
async def score_pillars(
    body: PulseResponsesRequest,
    service: EvaluationService = Depends(get_evaluation_service),
) -> PillarScoresResponse:
    """Score an in-progress pulse check.

    Answers are accepted on the discrete scale:
        0    = No
        0.25 = Started
        0.5  = Mostly
        1    = Yes
    """
    try:
        summary = service.score_only(body.pulse_responses)
    except AssessmentEngineError as exc:
        raise engine_error_to_http(exc) from exc
    return _pillar_scores_response(summary)


@router.post(
    "/gates",
    response_model=GatesResponse,
    status_code=status.HTTP_200_OK,
    summary="Evaluate context gates for a profile",
)
async def get_gates(body: ContextProfileRequest) -> GatesResponse:
    """Return the safeguards a Context Profile triggers, in catalog order."""
    try:
        gates = evaluate_gates(body.context_profile)
    except AssessmentEngineError as exc:
        raise engine_error_to_http(exc) from exc
    return GatesResponse(gates=[_gate_schema(gate) for gate in gates], total=len(gates))


@router.post(
    "/guides",
    response_model=GuideRecommendationsResponse,
    status_code=status.HTTP_200_OK,
    summary="Rank implementation guides for one pillar",
)
async def recommend_guides(
    body: GuideRecommendationRequest,
    service: EvaluationService = Depends(get_evaluation_service),
) -> GuideRecommendationsResponse:
    """Rank pillar, gate and context guides for a profile and pulse answers.

    Weak pillar scores, matching context dimensions and "No" or "Started"
    answers on the questions a guide targets all raise its score. A guide's
    prerequisites are listed before it.
    """
    try:
        recommendations = service.recommend_guides(
            body.context_profile, body.pulse_responses, body.pillar
        )
    except AssessmentEngineError as exc:
        raise engine_error_to_http(exc) from exc

    return GuideRecommendationsResponse(
        pillar=recommendations.pillar,
        pillar_score=recommendations.pillar_score,
        guides=[GuideSchema(**item.to_dict()) for item in recommendations.guides],
        total_evaluated=recommendations.total_evaluated,
    )
