from __future__ import annotations

from pydantic import ValidationError


class AnalysisError(RuntimeError):
    def __init__(self, message: str, *, code: str = "analysis_error"):
        super().__init__(message)
        self.code = code


class InvalidInputError(AnalysisError):
    """Raised when a caller passes a malformed artifact, keyword set or text argument.

    Empty strings are valid input and never raise; only missing or wrongly typed
    fields do.
    """

    def __init__(self, message: str, *, field: str):
        super().__init__(message, code="invalid_input")
        self.field = field


class PatternEngineError(AnalysisError):
    """A rule failed to evaluate. Indicates a defect in the rule tables."""

    def __init__(self, message: str, *, rule: str):
        super().__init__(message, code="pattern_engine")
        self.rule = rule


def invalid_input_from_validation(exc: ValidationError, *, root: str) -> InvalidInputError:
    """Name the first offending field of a pydantic ValidationError."""
    errors = exc.errors()
    if not errors:
        return InvalidInputError(f"Invalid {root}.", field=root)
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ())) or root
    return InvalidInputError(f"Invalid {root} field '{field}': {first.get('msg', 'invalid value')}", field=field)


class SemanticProviderError(AnalysisError):
    """A semantic-match provider returned no usable score."""

    def __init__(self, message: str, *, provider: str):
        super().__init__(message, code="semantic_provider")
        self.provider = provider
