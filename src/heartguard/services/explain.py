# src/heartguard/services/explain.py
"""
Per-prediction explanations for the HeartGuard risk model.

The model is additive, so each factor's share of the score is exactly its
weighted term from ``services.scoring``. This module turns those terms into
a ranked list of ``RiskContribution`` entries, each paired with a short
plain-language sentence that quotes the patient's own value.

Applicability
-------------
- Always emitted: age, sex, resting blood pressure, cholesterol, maximum
  heart rate.
- Emitted only when the raw input is non-zero / true: exercise-induced
  angina, chest pain type, ST depression, ST slope, major vessels,
  thalassemia.
- Emitted only when the optional inputs are present: BMI (height and weight
  both given) and smoking (status ``former`` or ``current``).

Ranking
-------
Candidates are built in the fixed enumeration order above (age, sex, blood
pressure, cholesterol, angina, chest pain, heart rate, ST depression, slope,
vessels, thalassemia, BMI, smoking) and sorted by absolute contribution,
descending, with a *stable* sort. Ties therefore keep enumeration order,
which decides which entries survive truncation to the top ``TOP_K``.

Notes
-----
- The flat fasting-blood-sugar and resting-ECG addends are part of the score
  but are never explained.
- Contributions are rounded to 4 decimals before sorting.
"""

from typing import Callable, List, Optional, Tuple

from ..records import ClinicalRecord, RiskContribution, Sex, SmokingStatus
from .calculators import FactorRisks
from .scoring import weighted_contributions

TOP_K = 5
CONTRIBUTION_DECIMALS = 4


def _age_text(r: ClinicalRecord, f: FactorRisks) -> str:
    return (
        f"At {r.age} years old, your age contributes to cardiovascular risk. "
        "Risk naturally increases after age 40."
    )


def _sex_text(r: ClinicalRecord, f: FactorRisks) -> str:
    sex = "Male" if r.sex == Sex.MALE else "Female"
    return (
        f"{sex} sex affects cardiovascular risk differently. "
        "Males typically have higher risk, especially after age 45."
    )


def _blood_pressure_text(r: ClinicalRecord, f: FactorRisks) -> str:
    bp = r.resting_blood_pressure
    if bp >= 140:
        status = "is elevated and"
    elif bp >= 120:
        status = "is borderline high and"
    else:
        status = "is within normal range and"
    return f"Resting blood pressure of {bp} mmHg {status} affects heart disease risk."


def _cholesterol_text(r: ClinicalRecord, f: FactorRisks) -> str:
    chol = r.cholesterol
    if chol >= 240:
        status = "is high and"
    elif chol >= 200:
        status = "is borderline high and"
    else:
        status = "is within healthy range and"
    return f"Cholesterol level of {chol} mg/dL {status} impacts cardiovascular health."


def _angina_text(r: ClinicalRecord, f: FactorRisks) -> str:
    return (
        "Exercise-induced angina indicates reduced blood flow to the heart during "
        "physical activity, which is a significant risk factor."
    )


def _chest_pain_text(r: ClinicalRecord, f: FactorRisks) -> str:
    return (
        f"Chest pain type {r.chest_pain_type} suggests possible cardiac issues. "
        "More severe types indicate higher risk."
    )


def _heart_rate_text(r: ClinicalRecord, f: FactorRisks) -> str:
    hr = r.max_heart_rate_achieved
    status = "is lower than expected for your age and" if hr < 150 else "is within normal range and"
    return f"Maximum heart rate of {hr} bpm during exercise {status} affects risk assessment."


def _st_depression_text(r: ClinicalRecord, f: FactorRisks) -> str:
    return (
        f"ST depression of {r.st_depression:g} during exercise indicates possible myocardial "
        "ischemia (reduced blood flow to heart muscle)."
    )


def _st_slope_text(r: ClinicalRecord, f: FactorRisks) -> str:
    shape = "flat" if r.st_slope == 1 else "downsloping"
    return (
        f"Slope of the peak exercise ST segment being {shape} indicates abnormal "
        "heart response to exercise."
    )


def _vessels_text(r: ClinicalRecord, f: FactorRisks) -> str:
    return (
        f"{r.major_vessel_count} major vessels showing abnormalities on fluoroscopy "
        "indicates reduced blood flow to the heart."
    )


def _thalassemia_text(r: ClinicalRecord, f: FactorRisks) -> str:
    defect = "fixed defect" if r.thalassemia_type == 1 else "reversible defect"
    return f"Thalassemia type {defect} indicates abnormal blood flow to the heart."


def _bmi_text(r: ClinicalRecord, f: FactorRisks) -> str:
    bmi = f.bmi_value
    if bmi >= 30:
        status = "indicates obesity, which"
    elif bmi >= 25:
        status = "indicates overweight, which"
    elif bmi < 18.5:
        status = "indicates underweight, which"
    else:
        status = "is in the healthy range and"
    return f"Your BMI of {bmi:.1f} {status} affects cardiovascular risk."


def _smoking_text(r: ClinicalRecord, f: FactorRisks) -> str:
    if r.smoking_status == SmokingStatus.CURRENT:
        return "Your smoking status as a current smoker significantly increases cardiovascular risk."
    return "Your smoking status as a former smoker significantly elevates cardiovascular risk."


Applicable = Callable[[ClinicalRecord], bool]
Template = Callable[[ClinicalRecord, FactorRisks], str]

# Enumeration order is the tie-break order.
_EXPLAINERS: List[Tuple[str, Applicable, Template]] = [
    ("age", lambda r: True, _age_text),
    ("sex", lambda r: True, _sex_text),
    ("resting_blood_pressure", lambda r: True, _blood_pressure_text),
    ("cholesterol", lambda r: True, _cholesterol_text),
    ("exercise_induced_angina", lambda r: r.exercise_induced_angina, _angina_text),
    ("chest_pain_type", lambda r: r.chest_pain_type > 0, _chest_pain_text),
    ("max_heart_rate_achieved", lambda r: True, _heart_rate_text),
    ("st_depression", lambda r: r.st_depression > 0, _st_depression_text),
    ("st_slope", lambda r: r.st_slope != 0, _st_slope_text),
    ("major_vessel_count", lambda r: r.major_vessel_count > 0, _vessels_text),
    ("thalassemia_type", lambda r: r.thalassemia_type != 0, _thalassemia_text),
    ("bmi", lambda r: r.has_body_measurements, _bmi_text),
    (
        "smoking",
        lambda r: r.smoking_status in (SmokingStatus.FORMER, SmokingStatus.CURRENT),
        _smoking_text,
    ),
]


def candidate_contributions(record: ClinicalRecord, factors: FactorRisks) -> List[RiskContribution]:
    """Build every applicable contribution, unsorted, in enumeration order.

    Args
    ----
    record:
        Validated clinical record whose values are quoted in the text.
    factors:
        Raw calculator outputs for the same record.

    Returns
    -------
    list[RiskContribution]
        One entry per applicable factor, contribution rounded to 4 decimals.
    """
    weighted = weighted_contributions(factors)
    out: List[RiskContribution] = []
    for name, applicable, template in _EXPLAINERS:
        if not applicable(record):
            continue
        out.append(
            RiskContribution(
                factor_name=name,
                raw_contribution=round(weighted[name], CONTRIBUTION_DECIMALS),
                explanation_text=template(record, factors),
            )
        )
    return out


def rank_contributions(
    contributions: List[RiskContribution],
    top_k: Optional[int] = TOP_K,
) -> List[RiskContribution]:
    """Order by absolute contribution (descending, stable) and truncate.

    Args
    ----
    contributions:
        Candidates in enumeration order.
    top_k:
        Maximum number of entries to keep; ``None`` keeps all.

    Returns
    -------
    list[RiskContribution]
        The ranked, truncated list.

    Raises
    ------
    ValueError
        If ``top_k`` is given and is smaller than 1.
    """
    if top_k is not None and top_k < 1:
        raise ValueError("top_k must be >= 1.")
    # sorted() is stable, also with reverse=True
    ranked = sorted(contributions, key=lambda c: abs(c.raw_contribution), reverse=True)
    return ranked if top_k is None else ranked[:top_k]


def explain(
    record: ClinicalRecord,
    factors: FactorRisks,
    top_k: Optional[int] = TOP_K,
) -> List[RiskContribution]:
    """Ranked per-factor explanation of a prediction.

    Args
    ----
    record:
        Validated clinical record.
    factors:
        Raw calculator outputs from ``compute_factor_risks(record)``.
    top_k:
        Number of entries to return (default: 5).

    Returns
    -------
    list[RiskContribution]
        At most ``top_k`` entries sorted by ``abs(raw_contribution)``
        descending; ties keep the fixed enumeration order.
    """
    return rank_contributions(candidate_contributions(record, factors), top_k)
