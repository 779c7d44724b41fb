"""
Data contracts for the HeartGuard risk engine.

The clinical feature set follows the classic UCI Heart Disease dataset,
extended with optional height, weight and smoking status.

Notes
-----
- Units:
    * resting_blood_pressure: mm Hg (systolic)
    * cholesterol: mg/dL (serum cholesterol)
    * max_heart_rate_achieved: bpm
    * st_depression: ST depression induced by exercise relative to rest
    * height_cm / weight_kg: centimetres / kilograms
- Encodings:
    * sex: 0=female, 1=male
    * chest_pain_type: 0..3 (0=none ... 3=non-anginal)
    * resting_ecg_result: 0..2
    * st_slope: 0=upsloping, 1=flat, 2=downsloping
    * major_vessel_count: 0..3 (fluoroscopy)
    * thalassemia_type: 0=normal, 1=fixed defect, 2=reversible defect
- All result types are frozen dataclasses; the engine never mutates them.
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Dict, List, Optional


class Sex(IntEnum):
    FEMALE = 0
    MALE = 1


class SmokingStatus(str, Enum):
    NEVER = "never"
    FORMER = "former"
    CURRENT = "current"


class RiskLabel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Severity(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


@dataclass(frozen=True)
class ClinicalRecord:
    """A validated clinical submission.

    Instances are produced by ``services.validation.validate_record``;
    constructing one directly skips the range checks, so ``model.predict``
    re-validates anything it is handed.

    Attributes
    ----------
    age : int
        Age in years, 0..120.
    sex : Sex
        Biological sex (0=female, 1=male).
    chest_pain_type : int
        Chest pain type encoded as 0..3.
    resting_blood_pressure : int
        Resting systolic blood pressure (mm Hg), 50..300.
    cholesterol : int
        Serum cholesterol (mg/dL), 100..600.
    fasting_blood_sugar_high : bool
        Fasting blood sugar above 120 mg/dL.
    resting_ecg_result : int
        Resting electrocardiographic result, 0..2.
    max_heart_rate_achieved : int
        Maximum heart rate achieved during exercise (bpm), 50..250.
    exercise_induced_angina : bool
        Angina provoked by exercise.
    st_depression : float
        ST depression ("oldpeak"), 0..10.
    st_slope : int
        Slope of the peak exercise ST segment, 0..2.
    major_vessel_count : int
        Major vessels coloured by fluoroscopy, 0..3.
    thalassemia_type : int
        Thalassemia result, 0..2.
    height_cm : int | None
        Optional height, 100..250 cm.
    weight_kg : int | None
        Optional weight, 30..300 kg.
    smoking_status : SmokingStatus | None
        Optional smoking history.
    """
    age: int
    sex: Sex
    chest_pain_type: int
    resting_blood_pressure: int
    cholesterol: int
    fasting_blood_sugar_high: bool
    resting_ecg_result: int
    max_heart_rate_achieved: int
    exercise_induced_angina: bool
    st_depression: float
    st_slope: int
    major_vessel_count: int
    thalassemia_type: int
    height_cm: Optional[int] = None
    weight_kg: Optional[int] = None
    smoking_status: Optional[SmokingStatus] = None

    @property
    def has_body_measurements(self) -> bool:
        return self.height_cm is not None and self.weight_kg is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "age": self.age,
            "sex": int(self.sex),
            "chest_pain_type": self.chest_pain_type,
            "resting_blood_pressure": self.resting_blood_pressure,
            "cholesterol": self.cholesterol,
            "fasting_blood_sugar_high": self.fasting_blood_sugar_high,
            "resting_ecg_result": self.resting_ecg_result,
            "max_heart_rate_achieved": self.max_heart_rate_achieved,
            "exercise_induced_angina": self.exercise_induced_angina,
            "st_depression": self.st_depression,
            "st_slope": self.st_slope,
            "major_vessel_count": self.major_vessel_count,
            "thalassemia_type": self.thalassemia_type,
            "height_cm": self.height_cm,
            "weight_kg": self.weight_kg,
            "smoking_status": self.smoking_status.value if self.smoking_status else None,
        }


@dataclass(frozen=True)
class RiskContribution:
    """One factor's weighted share of a prediction, with a plain-language note."""
    factor_name: str
    raw_contribution: float
    explanation_text: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "factor": self.factor_name,
            "contribution": self.raw_contribution,
            "explanation": self.explanation_text,
        }


@dataclass(frozen=True)
class RiskFactor:
    """A flagged risk category with its severity and a fixed recommendation."""
    category: str
    severity: Severity
    recommendation: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "severity": self.severity.value,
            "recommendation": self.recommendation,
        }


@dataclass(frozen=True)
class PredictionResult:
    """Output of ``model.predict``.

    Attributes
    ----------
    score : float
        Aggregate risk in [0, 1], rounded to 4 decimals.
    label : RiskLabel
        ``high`` at >= 0.70, ``medium`` at >= 0.40, otherwise ``low``.
    model_version : str
        Static version tag of the scoring rules.
    top_contributions : list[RiskContribution]
        At most five contributions ordered by magnitude.
    risk_factors : list[RiskFactor]
        Categorical findings independent of the score.
    lifestyle_recommendations : list[str]
        Ordered recommendation strings.
    """
    score: float
    label: RiskLabel
    model_version: str
    top_contributions: List[RiskContribution] = field(default_factory=list)
    risk_factors: List[RiskFactor] = field(default_factory=list)
    lifestyle_recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "label": self.label.value,
            "model_version": self.model_version,
            "top_contributions": [c.to_dict() for c in self.top_contributions],
            "risk_factors": [r.to_dict() for r in self.risk_factors],
            "lifestyle_recommendations": list(self.lifestyle_recommendations),
        }
