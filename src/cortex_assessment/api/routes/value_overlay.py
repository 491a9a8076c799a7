"""FastAPI routes for value-overlay defaults and edits.

The overlay is not stored server-side: clients send the entry they hold and
receive the edited copy back.
"""

from fastapi import APIRouter, status

from cortex_assessment.api.errors import engine_error_to_http, overlay_edit_to_http
from cortex_assessment.api.schemas.evaluation import (
    ContextProfileRequest,
    MetricSchema,
    PillarMetricsResponse,
    SwitchMetricRequest,
    UpdateOverlayEntryRequest,
    ValueOverlayEntrySchema,
    ValueOverlayResponse,
)
from cortex_assessment.core.errors import AssessmentEngineError, UnknownPillarError
from cortex_assessment.core.profile import ContextProfile
from cortex_assessment.core.value_overlay import (
    Metric,
    ValueOverlayEntry,
    default_metric_for_pillar,
    initialize_value_overlay,
    metric_selection_explanation,
    metrics_for_pillar,
    switch_overlay_metric,
    update_overlay_entry,
)

router = APIRouter(prefix="/value-overlay", tags=["Value Overlay"])


def _to_entry(schema: ValueOverlayEntrySchema) -> ValueOverlayEntry:
    return ValueOverlayEntry(**schema.model_dump())


def _metric_schema(metric: Metric) -> MetricSchema:
    return MetricSchema(
        metric_id=metric.metric_id,
        pillar=metric.pillar,
        name=metric.name,
        definition=metric.definition,
        unit=metric.unit,
        unit_hint=metric.unit_hint,
        tags=list(metric.tags),
        is_default=metric.is_default,
    )


@router.post(
    "/defaults",
    response_model=ValueOverlayResponse,
    status_code=status.HTTP_200_OK,
    summary="Select default tracking metrics for a profile",
)
async def get_value_overlay_defaults(body: ContextProfileRequest) -> ValueOverlayResponse:
    """Return one default metric per pillar with null baseline and target.

    Each pillar starts from its baseline default; context-specific rules may
    swap in a better-suited metric, and ``explanations`` says why.
    """
    try:
        profile = ContextProfile.from_mapping(body.context_profile)
        overlay = initialize_value_overlay(profile)
    except AssessmentEngineError as exc:
        raise engine_error_to_http(exc) from exc

    return ValueOverlayResponse(
        overlay={
            pillar: ValueOverlayEntrySchema(**entry.to_dict()) for pillar, entry in overlay.items()
        },
        explanations={
            pillar: metric_selection_explanation(entry.metric_id, profile)
            for pillar, entry in overlay.items()
        },
    )


@router.post(
    "/switch",
    response_model=ValueOverlayEntrySchema,
    status_code=status.HTTP_200_OK,
    summary="Switch an overlay entry to another metric of the same pillar",
)
async def switch_metric(body: SwitchMetricRequest) -> ValueOverlayEntrySchema:
    """Point an entry at another catalog metric; baseline and target reset."""
    try:
        entry = switch_overlay_metric(_to_entry(body.entry), body.metric_id)
    except ValueError as exc:
        raise overlay_edit_to_http(exc) from exc
    return ValueOverlayEntrySchema(**entry.to_dict())


@router.post(
    "/update",
    response_model=ValueOverlayEntrySchema,
    status_code=status.HTTP_200_OK,
    summary="Edit baseline, target or cadence of an overlay entry",
)
async def update_entry(body: UpdateOverlayEntryRequest) -> ValueOverlayEntrySchema:
    """Apply only the fields present in the request body."""
    changes = {
        name: getattr(body, name)
        for name in ("baseline", "target", "cadence")
        if name in body.model_fields_set
    }
    try:
        entry = update_overlay_entry(_to_entry(body.entry), **changes)
    except ValueError as exc:
        raise overlay_edit_to_http(exc) from exc
    return ValueOverlayEntrySchema(**entry.to_dict())


@router.get(
    "/metrics/{pillar}",
    response_model=PillarMetricsResponse,
    status_code=status.HTTP_200_OK,
    summary="List the metrics an overlay entry can switch to",
)
async def get_pillar_metrics(pillar: str) -> PillarMetricsResponse:
    """Return every catalog metric for a pillar and its baseline default."""
    default_metric = default_metric_for_pillar(pillar)
    if default_metric is None:
        raise engine_error_to_http(UnknownPillarError(pillar))
    return PillarMetricsResponse(
        pillar=pillar,
        default_metric_id=default_metric.metric_id,
        metrics=[_metric_schema(metric) for metric in metrics_for_pillar(pillar)],
    )
