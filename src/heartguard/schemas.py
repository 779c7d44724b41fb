"""
Input schemas for the HeartGuard API.

This module defines the Pydantic request model used by the API to receive a
clinical record for heart-disease risk prediction. Fields use the engine's
snake_case names; the classic UCI Heart Disease column names are accepted as
aliases so dataset rows can be posted unchanged.

Notes
-----
- Pydantic only checks that values have the right shape (HTTP 422 if not).
  Clinical ranges are enforced by ``services.validation`` so that the first
  violation is reported as a single ``{"field", "reason"}`` error (HTTP 400).
- Aliases:
    * chest_pain_type: cp
    * resting_blood_pressure: trestbps
    * cholesterol: chol
    * fasting_blood_sugar_high: fbs
    * resting_ecg_result: restecg
    * max_heart_rate_achieved: thalach
    * exercise_induced_angina: exang
    * st_depression: oldpeak
    * st_slope: slope
    * major_vessel_count: ca
    * thalassemia_type: thal
    * height_cm / weight_kg: height / weight
"""

from typing import Any, Dict, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


def _alias(name: str, uci: str) -> AliasChoices:
    return AliasChoices(name, uci)


class ClinicalDataRequest(BaseModel):
    """Single clinical record for risk prediction.

    Attributes
    ----------
    age : int
        Age in years.
    sex : int
        Biological sex (0=female, 1=male).
    chest_pain_type : int
        Chest pain type encoded as 0..3.
    resting_blood_pressure : int
        Resting systolic blood pressure (mm Hg).
    cholesterol : int
        Serum cholesterol (mg/dL).
    fasting_blood_sugar_high : bool
        Fasting blood sugar above 120 mg/dL (true/false or 1/0).
    resting_ecg_result : int
        Resting electrocardiographic results (0..2).
    max_heart_rate_achieved : int
        Maximum heart rate achieved (bpm).
    exercise_induced_angina : bool
        Exercise-induced angina (true/false or 1/0).
    st_depression : float
        ST depression induced by exercise relative to rest.
    st_slope : int
        Slope of the peak exercise ST segment (0..2).
    major_vessel_count : int
        Number of major vessels coloured by fluoroscopy (0..3).
    thalassemia_type : int
        0=normal, 1=fixed defect, 2=reversible defect.
    height_cm, weight_kg : int, optional
        Body measurements; BMI is scored only when both are given.
    smoking_status : str, optional
        ``never``, ``former`` or ``current``.
    """
    model_config = ConfigDict(populate_by_name=True)

    age: int
    sex: int
    chest_pain_type: int = Field(validation_alias=_alias("chest_pain_type", "cp"))
    resting_blood_pressure: int = Field(validation_alias=_alias("resting_blood_pressure", "trestbps"))
    cholesterol: int = Field(validation_alias=_alias("cholesterol", "chol"))
    fasting_blood_sugar_high: bool = Field(validation_alias=_alias("fasting_blood_sugar_high", "fbs"))
    resting_ecg_result: int = Field(validation_alias=_alias("resting_ecg_result", "restecg"))
    max_heart_rate_achieved: int = Field(validation_alias=_alias("max_heart_rate_achieved", "thalach"))
    exercise_induced_angina: bool = Field(validation_alias=_alias("exercise_induced_angina", "exang"))
    st_depression: float = Field(validation_alias=_alias("st_depression", "oldpeak"))
    st_slope: int = Field(validation_alias=_alias("st_slope", "slope"))
    major_vessel_count: int = Field(validation_alias=_alias("major_vessel_count", "ca"))
    thalassemia_type: int = Field(validation_alias=_alias("thalassemia_type", "thal"))
    height_cm: Optional[int] = Field(default=None, validation_alias=_alias("height_cm", "height"))
    weight_kg: Optional[int] = Field(default=None, validation_alias=_alias("weight_kg", "weight"))
    smoking_status: Optional[str] = None

    def to_record_dict(self) -> Dict[str, Any]:
        """Plain dict keyed by the engine's field names."""
        return self.model_dump()
