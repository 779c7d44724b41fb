"""HeartGuard: rule-based heart-disease risk scoring, explanation and stratification."""

from .errors import ValidationError
from .model import MODEL_VERSION, predict, predict_frame
from .services.stratification import StratificationLevel, stratify

__all__ = [
    "MODEL_VERSION",
    "StratificationLevel",
    "ValidationError",
    "predict",
    "predict_frame",
    "stratify",
]
