"""
Scorecard Evaluation Errors
===========================

Error taxonomy for scorecard evaluation. Every failure aborts the whole
evaluation call; no partial score is ever returned.

Usage:
    from src.scorecard.errors import InvalidResultError

    raise InvalidResultError("No attribute matched", characteristic=2)

A missing input value is not an error: it resolves to the model's
default prediction and never reaches this module.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel


# =============================================================================
# ERROR RESPONSE MODEL
# =============================================================================

class ErrorResponse(BaseModel):
    """Serializable description of an evaluation failure."""
    error: str
    error_code: str
    message: str
    details: Optional[Dict[str, Any]] = None
    timestamp: str


# =============================================================================
# EXCEPTIONS
# =============================================================================

class ScorecardError(Exception):
    """Base class for scorecard evaluation failures."""

    def __init__(
        self,
        message: str,
        error_code: str = "SCORECARD_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(
            error=self.__class__.__name__,
            error_code=self.error_code,
            message=self.message,
            details=self.details,
            timestamp=datetime.now().isoformat(),
        )


class InvalidFeatureError(ScorecardError):
    """Structural malformation discovered while evaluating a model."""

    def __init__(self, message: str = "Invalid model feature", **details):
        super().__init__(
            message=message,
            error_code="INVALID_FEATURE",
            details=details,
        )


class InvalidResultError(ScorecardError):
    """The model cannot produce a valid scoring outcome."""

    def __init__(self, message: str = "Invalid result", **details):
        super().__init__(
            message=message,
            error_code="INVALID_RESULT",
            details=details,
        )


class UnsupportedFeatureError(ScorecardError):
    """The model declares a mode or algorithm that is not implemented."""

    def __init__(self, message: str = "Unsupported feature", feature: Optional[str] = None, **details):
        if feature:
            details["feature"] = feature
        super().__init__(
            message=message,
            error_code="UNSUPPORTED_FEATURE",
            details=details,
        )
