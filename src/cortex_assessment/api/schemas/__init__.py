"""Pydantic schemas package for the CORTEX assessment API."""

from cortex_assessment.api.schemas.evaluation import (
    CatalogResponse,
    ContextProfileRequest,
    EvaluationRequest,
    EvaluationResponse,
    GateSchema,
    GatesResponse,
    GuideRecommendationRequest,
    GuideRecommendationsResponse,
    PillarMetricsResponse,
    PillarScoresResponse,
    PulseResponsesRequest,
    SwitchMetricRequest,
    UpdateOverlayEntryRequest,
    ValueOverlayEntrySchema,
    ValueOverlayResponse,
)

__all__ = [
    "CatalogResponse",
    "ContextProfileRequest",
    "EvaluationRequest",
    "EvaluationResponse",
    "GateSchema",
    "GatesResponse",
    "GuideRecommendationRequest",
    "GuideRecommendationsResponse",
    "PillarMetricsResponse",
    "PillarScoresResponse",
    "PulseResponsesRequest",
    "SwitchMetricRequest",
    "UpdateOverlayEntryRequest",
    "ValueOverlayEntrySchema",
    "ValueOverlayResponse",
]
