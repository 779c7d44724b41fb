"""
HeartGuard heart-disease risk model.

``predict`` is the production entry point: it validates a clinical record,
runs the per-factor calculators, aggregates them into a bounded score and
label, and attaches explanations, risk-factor findings and lifestyle
recommendations. It is a pure function of its input; there is no model
state to load, and concurrent calls need no coordination.

Pipeline
--------
1) ``validate_record``       -> ClinicalRecord (or ValidationError)
2) ``compute_factor_risks``  -> raw per-factor risks
3) ``aggregate``             -> (score, label)
4) ``explain``               -> top-5 RiskContribution
5) ``advise`` / ``recommend`` -> findings and ordered recommendations

``predict_frame`` applies the same pipeline to every row of a DataFrame.
"""

import logging
from typing import Any, Mapping, Union

import pandas as pd

from .records import ClinicalRecord, PredictionResult
from .services.advice import advise, recommend
from .services.calculators import compute_factor_risks
from .services.explain import explain
from .services.scoring import aggregate
from .services.validation import validate_record

MODEL_VERSION = "v3.0.0"

logger = logging.getLogger(__name__)


def predict(data: Union[Mapping[str, Any], ClinicalRecord]) -> PredictionResult:
    """Score one clinical record.

    Parameters
    ----------
    data:
        Mapping keyed by the record's snake_case field names, or a
        ``ClinicalRecord``.

    Returns
    -------
    PredictionResult
        Score in [0, 1] (4 decimals), label, model version, up to five
        ranked contributions, risk-factor findings and recommendations.

    Raises
    ------
    ValidationError
        If any field is missing or out of range (first violation only).
    """
    record = validate_record(data)
    factors = compute_factor_risks(record)
    score, label = aggregate(factors)

    result = PredictionResult(
        score=score,
        label=label,
        model_version=MODEL_VERSION,
        top_contributions=explain(record, factors),
        risk_factors=advise(record),
        lifestyle_recommendations=recommend(record, score),
    )
    logger.debug("Scored record: score=%.4f label=%s", score, label.value)
    return result


def _row_to_mapping(row: Mapping[str, Any]) -> dict:
    # NaN / NA marks an absent optional value in a DataFrame
    return {k: (None if pd.isna(v) else v) for k, v in row.items()}


def predict_frame(df: pd.DataFrame) -> pd.DataFrame:
    """Score every row of a DataFrame.

    Parameters
    ----------
    df:
        One clinical record per row, columns named like the record fields.
        Missing optional columns and NaN cells are treated as absent.

    Returns
    -------
    pd.DataFrame
        Columns ``score``, ``label`` and ``model_version``, indexed like
        ``df``.

    Raises
    ------
    ValidationError
        For the first invalid row encountered.
    """
    rows = []
    for row in df.to_dict(orient="records"):
        res = predict(_row_to_mapping(row))
        rows.append({"score": res.score, "label": res.label.value, "model_version": res.model_version})
    logger.info("Scored %d records", len(rows))
    return pd.DataFrame(rows, index=df.index, columns=["score", "label", "model_version"])
