"""
HeartGuard Risk API.

This module exposes a FastAPI application that serves the rule-based
heart-disease risk model and the clinician-facing stratification tools.

Endpoints
---------
- GET  `/`                                 : Liveness/health check.
- GET  `/version`                          : App + model version info.
- GET  `/feature-map`                      : Factor weights, flat addends and label thresholds.
- POST `/predict`                          : Score one record or a list of records.
- POST `/explain`                          : Ranked per-factor contributions for one record.
- POST `/stratify`                         : Stratification level for a 0-100 score.
- GET  `/risk-categories`                  : The four stratification categories.
- GET  `/predictions/{user_id}`            : A user's prediction history, newest first.
- GET  `/predictions/id/{prediction_id}`   : One stored prediction.
- GET  `/patients/{user_id}/risk-profile`  : Stratified profile from the latest prediction.
- GET  `/cohort/analysis`                  : Population summary over every user's latest profile.

Notes
-----
- Input shape is validated by Pydantic (``.schemas``); clinical ranges are
  validated by the engine, and the first violation is returned as HTTP 400
  with a ``{"field", "reason"}`` detail.
- Predictions are stored only when ``/predict`` is called with ``user_id``.
  The in-memory history keeps at most ``settings.history_max_logs`` entries
  and evicts the oldest first.
- No business logic is implemented in the API layer; the API delegates to
  ``heartguard.model`` and the service layer.
"""

from typing import Annotated, Any, Dict, List, Optional, Union

from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel, Field

from .config import settings
from .errors import PredictionNotFoundError, ValidationError
from .logging_config import configure_logging, get_logger
from .model import MODEL_VERSION, predict as model_predict
from .schemas import ClinicalDataRequest
from .services.calculators import compute_factor_risks
from .services.cohort import cohort_analysis
from .services.explain import TOP_K, explain
from .services.history import PredictionHistory
from .services.scoring import FACTOR_WEIGHTS, FLAT_ADDENDS, HIGH_RISK_THRESHOLD, MEDIUM_RISK_THRESHOLD
from .services.stratification import RISK_CATEGORIES, build_risk_profile, risk_category, stratify
from .services.validation import validate_record

configure_logging(settings.log_level, settings.log_format)
logger = get_logger(__name__)

app = FastAPI(
    title=settings.app_title,
    version=settings.app_version,
    description="API for rule-based heart disease risk prediction, explanation and stratification",
)

HISTORY = PredictionHistory(max_logs=settings.history_max_logs)

# -----------------------------
# Pydantic models (API schemas)
# -----------------------------

class ContributionItem(BaseModel):
    """One contribution as produced by ``/predict`` or ``/explain``.

    Attributes
    ----------
    factor:
        Factor name (informational).
    contribution:
        Weighted contribution; its absolute value drives escalation.
    explanation:
        Plain-language text (informational).
    """
    factor: Optional[str] = None
    contribution: float
    explanation: Optional[str] = None


class StratifyRequest(BaseModel):
    """Request payload for risk stratification.

    Attributes
    ----------
    score:
        Aggregate risk on the **0-100** scale (multiply a model score by 100).
    contributions:
        Top contributions of the prediction.
    conditions:
        Known condition tags, e.g. ``heart-disease``.
    """
    score: Annotated[float, Field(ge=0.0, le=100.0)]
    contributions: List[ContributionItem] = Field(default_factory=list)
    conditions: List[str] = Field(default_factory=list)


class StratifyResponse(BaseModel):
    level: str
    category: Dict[str, Any]


def _bad_request(err: ValidationError, index: Optional[int] = None) -> HTTPException:
    detail: Dict[str, Any] = {"field": err.field, "reason": err.reason}
    if index is not None:
        detail["index"] = index
    logger.info("Rejected clinical record: field=%s", err.field)
    return HTTPException(status_code=400, detail=detail)


# -----------
# Endpoints
# -----------

@app.get("/")
async def health_check():
    """Liveness probe and minimal version info.

    Returns
    -------
    dict
        App version, status and model version.
    """
    return {"version": settings.app_version, "status": "OK", "model_version": MODEL_VERSION}


@app.get("/version")
async def version():
    """Return application and model versions."""
    return {"app_version": settings.app_version, "model_version": MODEL_VERSION}


@app.get("/feature-map")
async def feature_map():
    """Expose the scoring weights used by the model.

    Returns
    -------
    dict
        Keys: ``weights`` (per explained factor), ``flat_addends`` and
        ``label_thresholds``.
    """
    return {
        "weights": dict(FACTOR_WEIGHTS),
        "flat_addends": dict(FLAT_ADDENDS),
        "label_thresholds": {"high": HIGH_RISK_THRESHOLD, "medium": MEDIUM_RISK_THRESHOLD},
    }


@app.post("/predict")
async def predict(
    data: Union[ClinicalDataRequest, List[ClinicalDataRequest]],
    user_id: Annotated[Optional[str], Query(min_length=1)] = None,
):
    """Score one record, or a list of records.

    Parameters
    ----------
    data:
        A single record or a list of records following
        ``ClinicalDataRequest``.
    user_id:
        If provided, every prediction is stored in the history under this
        user and its ``prediction_id`` is returned.

    Returns
    -------
    dict
        For a single record, the prediction itself. For a list,
        ``{"predictions": [...]}`` in input order.

    Raises
    ------
    HTTPException
        With status 400 on the first clinical validation failure (the
        detail carries ``index`` for list payloads).
    """
    items = data if isinstance(data, list) else [data]
    out: List[Dict[str, Any]] = []
    for i, item in enumerate(items):
        try:
            record = validate_record(item.to_record_dict())
        except ValidationError as e:
            raise _bad_request(e, i if isinstance(data, list) else None)

        result = model_predict(record)
        payload = result.to_dict()
        if user_id is not None:
            log = HISTORY.record(user_id, record, result)
            payload["prediction_id"] = log.id
        out.append(payload)

    return {"predictions": out} if isinstance(data, list) else out[0]


@app.post("/explain")
async def explain_record(
    data: ClinicalDataRequest,
    top_k: Annotated[int, Query(ge=1, le=TOP_K)] = TOP_K,
):
    """Ranked per-factor contributions for one record.

    Parameters
    ----------
    data:
        The clinical record.
    top_k:
        Number of contributions to return (1..5).

    Returns
    -------
    dict
        ``{"contributions": [...]}`` sorted by absolute contribution.

    Raises
    ------
    HTTPException
        With status 400 if the record fails clinical validation.
    """
    try:
        record = validate_record(data.to_record_dict())
    except ValidationError as e:
        raise _bad_request(e)

    contributions = explain(record, compute_factor_risks(record), top_k=top_k)
    return {"contributions": [c.to_dict() for c in contributions]}


@app.post("/stratify", response_model=StratifyResponse)
async def stratify_patient(payload: StratifyRequest):
    """Stratify a patient from a 0-100 score, contributions and conditions.

    Returns
    -------
    StratifyResponse
        The level and its category description.
    """
    level = stratify(
        payload.score,
        [c.model_dump() for c in payload.contributions],
        payload.conditions,
    )
    return StratifyResponse(level=level.value, category=risk_category(level).to_dict())


@app.get("/risk-categories")
async def risk_categories():
    """The four stratification categories, lowest first."""
    return [c.to_dict() for c in RISK_CATEGORIES]


@app.get("/predictions/id/{prediction_id}")
async def get_prediction(prediction_id: str):
    """Return one stored prediction.

    Raises
    ------
    HTTPException
        With status 404 if the id is unknown.
    """
    try:
        return HISTORY.get(prediction_id).to_dict()
    except PredictionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@app.get("/predictions/{user_id}")
async def prediction_history(user_id: str):
    """A user's stored predictions, newest first."""
    return {"user_id": user_id, "predictions": [log.to_dict() for log in HISTORY.for_user(user_id)]}


@app.get("/patients/{user_id}/risk-profile")
async def patient_risk_profile(
    user_id: str,
    conditions: Annotated[Optional[List[str]], Query()] = None,
):
    """Stratified risk profile built from the user's latest prediction.

    Parameters
    ----------
    user_id:
        The patient.
    conditions:
        Extra condition tags known from outside the clinical record
        (repeatable query parameter).

    Raises
    ------
    HTTPException
        With status 404 if the user has no stored prediction.
    """
    log = HISTORY.latest(user_id)
    if log is None:
        raise HTTPException(status_code=404, detail=f"No predictions for user {user_id}")
    profile = build_risk_profile(user_id, log.record, log.prediction, log.timestamp, conditions or [])
    return profile.to_dict()


@app.get("/cohort/analysis")
async def cohort():
    """Population summary over every user's latest stratified profile."""
    profiles = [
        build_risk_profile(log.user_id, log.record, log.prediction, log.timestamp)
        for log in HISTORY.all_latest()
    ]
    return cohort_analysis(profiles)
