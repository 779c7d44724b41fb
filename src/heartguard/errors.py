"""
Exception classes for HeartGuard.

The risk engine itself raises a single error kind, ``ValidationError``, when a
clinical record fails its range checks. The service layer adds lookup errors
for stored predictions. Both carry a ``context`` dict so the API can surface
structured details.
"""

from typing import Any, Dict, Optional


class HeartGuardError(Exception):
    """Base exception class for all project-specific errors"""
    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.context = context or {}


class ValidationError(HeartGuardError):
    """Raised on the first clinical field that fails validation.

    Attributes
    ----------
    field:
        Name of the offending field (snake_case record attribute).
    reason:
        Human-readable explanation suitable for an end user.
    """
    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"{field}: {reason}", {"field": field, "reason": reason})
        self.field = field
        self.reason = reason


class PredictionNotFoundError(HeartGuardError):
    """Raised when a stored prediction cannot be located"""
    def __init__(self, prediction_id: str) -> None:
        super().__init__(f"Prediction {prediction_id} not found", {"prediction_id": prediction_id})
        self.prediction_id = prediction_id
