"""Error taxonomy for the assessment engine.

All engine errors are raised synchronously to the immediate caller. Nothing
here is transient, so callers never retry; the HTTP layer maps each error to
a 422 response using ``error_code``.

An incomplete pillar is NOT an error: the pillar scorer omits it instead.
"""

from collections.abc import Iterable


class AssessmentEngineError(Exception):
    """Base class for all engine validation failures."""

    error_code: str = "ASSESSMENT_ENGINE_ERROR"


class InvalidProfileError(AssessmentEngineError):
    """Raised when a Context Profile field is missing or out of range.

    Attributes:
        fields: Mapping of offending field name to a short problem description.
    """

    error_code = "INVALID_CONTEXT_PROFILE"

    def __init__(self, fields: dict[str, str]) -> None:
        self.fields = dict(fields)
        details = ", ".join(f"{name}: {problem}" for name, problem in sorted(self.fields.items()))
        super().__init__(f"Invalid context profile ({details})")


class UnknownDimensionError(AssessmentEngineError):
    """Raised when a Context Profile carries keys outside the fixed catalog."""

    error_code = "UNKNOWN_CONTEXT_DIMENSION"

    def __init__(self, keys: Iterable[str]) -> None:
        self.keys = sorted(keys)
        super().__init__(f"Unknown context dimension(s): {', '.join(self.keys)}")


class UnknownQuestionError(AssessmentEngineError):
    """Raised when pulse responses reference a question ID not in the catalog."""

    error_code = "UNKNOWN_PULSE_QUESTION"

    def __init__(self, question_ids: Iterable[str]) -> None:
        self.question_ids = sorted(question_ids)
        super().__init__(f"Unknown pulse question(s): {', '.join(self.question_ids)}")


class InvalidAnswerError(AssessmentEngineError):
    """Raised when a pulse answer is not one of 0, 0.25, 0.5 or 1."""

    error_code = "INVALID_PULSE_ANSWER"

    def __init__(self, question_id: str, value: object) -> None:
        self.question_id = question_id
        self.value = value
        super().__init__(
            f"Answer for {question_id!r} must be one of 0, 0.25, 0.5, 1; got {value!r}"
        )


class UnknownPillarError(AssessmentEngineError):
    """Raised when a pillar key is not one of C, O, R, T, E, X."""

    error_code = "UNKNOWN_PILLAR"

    def __init__(self, pillar: object) -> None:
        self.pillar = pillar
        super().__init__(f"Unknown pillar: {pillar!r}")
