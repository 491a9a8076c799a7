"""Translation of engine errors into HTTP responses."""

from typing import Any

from fastapi import HTTPException

from cortex_assessment.core.errors import AssessmentEngineError, InvalidProfileError

INVALID_OVERLAY_EDIT: str = "INVALID_OVERLAY_EDIT"

# Starlette renamed HTTP_422_UNPROCESSABLE_ENTITY and deprecated the old name.
UNPROCESSABLE_CONTENT: int = 422


def engine_error_to_http(exc: AssessmentEngineError) -> HTTPException:
    """Map an engine validation failure to a 422 with its error code.

    Args:
        exc: The raised engine error.

    Returns:
        HTTPException whose detail carries ``message`` and ``error_code``,
        plus ``fields`` for an invalid Context Profile.
    """
    detail: dict[str, Any] = {"message": str(exc), "error_code": exc.error_code}
    if isinstance(exc, InvalidProfileError):
        detail["fields"] = exc.fields
    return HTTPException(status_code=UNPROCESSABLE_CONTENT, detail=detail)


def overlay_edit_to_http(exc: ValueError) -> HTTPException:
    """Map a rejected value-overlay edit to a 422."""
    return HTTPException(
        status_code=UNPROCESSABLE_CONTENT,
        detail={"message": str(exc), "error_code": INVALID_OVERLAY_EDIT},
    )
