"""Services package for the CORTEX assessment engine."""

from cortex_assessment.core.services.evaluation_service import (
    AssessmentEvaluation,
    EvaluationService,
    PillarScoreSummary,
)

__all__ = [
    "AssessmentEvaluation",
    "EvaluationService",
    "PillarScoreSummary",
]
