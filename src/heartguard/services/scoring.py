"""
Risk aggregation: weights, bounded score and label.

The aggregate score is a weighted sum of the calculator outputs plus three
flat addends (smoking, fasting blood sugar, resting ECG), clamped to [0, 1]
and rounded to 4 decimals. The label is derived from the rounded score so
that the reported score and label always agree.
"""

from typing import Dict, Tuple

from ..records import RiskLabel
from .calculators import FASTING_BLOOD_SUGAR_ADDEND, LVH_ECG_ADDEND, FactorRisks

# Weight applied to each calculator output. Age and the sex/age interaction
# enter at full weight; smoking is a flat addend reported at full weight.
FACTOR_WEIGHTS: Dict[str, float] = {
    "age": 1.0,
    "sex": 1.0,
    "resting_blood_pressure": 0.15,
    "cholesterol": 0.12,
    "exercise_induced_angina": 0.18,
    "chest_pain_type": 0.10,
    "max_heart_rate_achieved": 0.08,
    "st_depression": 0.10,
    "st_slope": 0.07,
    "major_vessel_count": 0.12,
    "thalassemia_type": 0.08,
    "bmi": 0.05,
    "smoking": 1.0,
}

# Unweighted addends that never appear in explanations.
FLAT_ADDENDS: Dict[str, float] = {
    "fasting_blood_sugar_high": FASTING_BLOOD_SUGAR_ADDEND,
    "resting_ecg_result": LVH_ECG_ADDEND,
}

HIGH_RISK_THRESHOLD = 0.70
MEDIUM_RISK_THRESHOLD = 0.40
SCORE_DECIMALS = 4


def weighted_contributions(factors: FactorRisks) -> Dict[str, float]:
    """Weighted term per factor, in the fixed enumeration order.

    BMI is present only when it was computed (height and weight given).
    """
    weighted = {}
    for name, weight in FACTOR_WEIGHTS.items():
        raw = getattr(factors, name)
        if raw is None:
            continue
        weighted[name] = raw * weight
    return weighted


def label_for(score: float) -> RiskLabel:
    """Bands are inclusive at their lower bound."""
    if score >= HIGH_RISK_THRESHOLD:
        return RiskLabel.HIGH
    if score >= MEDIUM_RISK_THRESHOLD:
        return RiskLabel.MEDIUM
    return RiskLabel.LOW


def aggregate(factors: FactorRisks) -> Tuple[float, RiskLabel]:
    """Combine calculator outputs into a bounded score and its label.

    Parameters
    ----------
    factors:
        Raw calculator outputs from ``compute_factor_risks``.

    Returns
    -------
    tuple[float, RiskLabel]
        ``(score, label)`` with ``score`` clamped to [0, 1] and rounded to
        ``SCORE_DECIMALS`` places.
    """
    w = FACTOR_WEIGHTS
    total = 0.0
    total += factors.age * w["age"]
    total += factors.sex * w["sex"]
    total += factors.resting_blood_pressure * w["resting_blood_pressure"]
    total += factors.cholesterol * w["cholesterol"]
    total += factors.exercise_induced_angina * w["exercise_induced_angina"]
    total += factors.chest_pain_type * w["chest_pain_type"]
    total += factors.max_heart_rate_achieved * w["max_heart_rate_achieved"]
    total += factors.st_depression * w["st_depression"]
    total += factors.st_slope * w["st_slope"]
    total += factors.major_vessel_count * w["major_vessel_count"]
    total += factors.thalassemia_type * w["thalassemia_type"]
    total += factors.fasting_blood_sugar
    total += factors.resting_ecg
    if factors.bmi is not None:
        total += factors.bmi * w["bmi"]
    total += factors.smoking * w["smoking"]

    score = round(max(0.0, min(1.0, total)), SCORE_DECIMALS)
    return score, label_for(score)
