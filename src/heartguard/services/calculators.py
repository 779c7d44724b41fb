"""
Per-factor risk calculators.

Each calculator maps one clinical input to a bounded, non-negative raw risk
value. The bucket thresholds are the scoring model: they are reproduced
exactly and must not be tuned independently of ``MODEL_VERSION``.

``compute_factor_risks`` evaluates every calculator for a validated record
and returns the raw (unweighted) values; weighting happens in
``services.scoring``.
"""

from dataclasses import dataclass
from typing import Optional

from ..records import ClinicalRecord, Sex, SmokingStatus


def age_risk(age: int) -> float:
    """Risk rises in steps from age 40."""
    if age < 40:
        return 0.05
    if age < 50:
        return 0.10
    if age < 60:
        return 0.15
    if age < 70:
        return 0.25
    return 0.35


def sex_age_risk(sex: int, age: int) -> float:
    """Males carry more risk, stepping up at 45; females step up at 55."""
    if sex == Sex.MALE:
        return 0.05 if age < 45 else 0.12
    return 0.02 if age < 55 else 0.08


def blood_pressure_risk(resting_blood_pressure: int) -> float:
    if resting_blood_pressure < 120:
        return 0.0   # normal
    if resting_blood_pressure < 130:
        return 0.05  # elevated
    if resting_blood_pressure < 140:
        return 0.10  # stage 1 hypertension
    if resting_blood_pressure < 180:
        return 0.20  # stage 2 hypertension
    return 0.35      # hypertensive crisis


def cholesterol_risk(cholesterol: int) -> float:
    if cholesterol < 200:
        return 0.0
    if cholesterol < 240:
        return 0.08
    return 0.18


def exercise_angina_risk(exercise_induced_angina: bool) -> float:
    return 0.25 if exercise_induced_angina else 0.0


_CHEST_PAIN_RISK = {0: 0.0, 1: 0.05, 2: 0.12, 3: 0.20}


def chest_pain_risk(chest_pain_type: int) -> float:
    return _CHEST_PAIN_RISK.get(chest_pain_type, 0.0)


def max_heart_rate_risk(max_heart_rate_achieved: int, age: int) -> float:
    """Penalize a peak heart rate well below the age-predicted maximum.

    The predicted maximum is ``220 - age``; the achieved rate is expressed as
    a percentage of it. Below 70% scores 0.15, below 80% scores 0.08.
    """
    predicted_max = 220 - age
    reserve_pct = max_heart_rate_achieved / predicted_max * 100
    if reserve_pct < 70:
        return 0.15
    if reserve_pct < 80:
        return 0.08
    return 0.0


def st_depression_risk(st_depression: float) -> float:
    if st_depression == 0:
        return 0.0
    if st_depression < 1:
        return 0.08
    if st_depression < 2:
        return 0.15
    return 0.25


_ST_SLOPE_RISK = {0: 0.05, 1: 0.10, 2: 0.20}


def st_slope_risk(st_slope: int) -> float:
    return _ST_SLOPE_RISK.get(st_slope, 0.0)


_MAJOR_VESSELS_RISK = {0: 0.0, 1: 0.10, 2: 0.20, 3: 0.30}


def major_vessels_risk(major_vessel_count: int) -> float:
    return _MAJOR_VESSELS_RISK.get(major_vessel_count, 0.0)


_THALASSEMIA_RISK = {0: 0.0, 1: 0.15, 2: 0.25}


def thalassemia_risk(thalassemia_type: int) -> float:
    return _THALASSEMIA_RISK.get(thalassemia_type, 0.0)


def body_mass_index(weight_kg: float, height_cm: float) -> float:
    height_m = height_cm / 100
    return weight_kg / (height_m * height_m)


def bmi_risk(bmi: float) -> float:
    if bmi < 18.5:
        return 0.05  # underweight
    if bmi < 25:
        return 0.0
    if bmi < 30:
        return 0.10  # overweight
    return 0.20      # obese


def smoking_risk(smoking_status: Optional[SmokingStatus]) -> float:
    """Flat addend; absent or ``never`` contributes nothing."""
    if smoking_status == SmokingStatus.CURRENT:
        return 0.15
    if smoking_status == SmokingStatus.FORMER:
        return 0.08
    return 0.0


FASTING_BLOOD_SUGAR_ADDEND = 0.03
LVH_ECG_ADDEND = 0.05


def fasting_blood_sugar_risk(fasting_blood_sugar_high: bool) -> float:
    return FASTING_BLOOD_SUGAR_ADDEND if fasting_blood_sugar_high else 0.0


def resting_ecg_risk(resting_ecg_result: int) -> float:
    # only left ventricular hypertrophy (2) counts
    return LVH_ECG_ADDEND if resting_ecg_result == 2 else 0.0


@dataclass(frozen=True)
class FactorRisks:
    """Raw calculator outputs for one record.

    ``bmi`` and ``bmi_value`` are ``None`` when height or weight is missing;
    the factor is then skipped entirely rather than scored as zero.
    """
    age: float
    sex: float
    resting_blood_pressure: float
    cholesterol: float
    exercise_induced_angina: float
    chest_pain_type: float
    max_heart_rate_achieved: float
    st_depression: float
    st_slope: float
    major_vessel_count: float
    thalassemia_type: float
    bmi: Optional[float]
    bmi_value: Optional[float]
    smoking: float
    fasting_blood_sugar: float
    resting_ecg: float


def compute_factor_risks(record: ClinicalRecord) -> FactorRisks:
    """Run every calculator against a validated record."""
    bmi_value = None
    bmi = None
    if record.has_body_measurements:
        bmi_value = body_mass_index(record.weight_kg, record.height_cm)
        bmi = bmi_risk(bmi_value)

    return FactorRisks(
        age=age_risk(record.age),
        sex=sex_age_risk(record.sex, record.age),
        resting_blood_pressure=blood_pressure_risk(record.resting_blood_pressure),
        cholesterol=cholesterol_risk(record.cholesterol),
        exercise_induced_angina=exercise_angina_risk(record.exercise_induced_angina),
        chest_pain_type=chest_pain_risk(record.chest_pain_type),
        max_heart_rate_achieved=max_heart_rate_risk(record.max_heart_rate_achieved, record.age),
        st_depression=st_depression_risk(record.st_depression),
        st_slope=st_slope_risk(record.st_slope),
        major_vessel_count=major_vessels_risk(record.major_vessel_count),
        thalassemia_type=thalassemia_risk(record.thalassemia_type),
        bmi=bmi,
        bmi_value=bmi_value,
        smoking=smoking_risk(record.smoking_status),
        fasting_blood_sugar=fasting_blood_sugar_risk(record.fasting_blood_sugar_high),
        resting_ecg=resting_ecg_risk(record.resting_ecg_result),
    )
