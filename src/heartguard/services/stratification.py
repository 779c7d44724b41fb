"""
Risk stratification for clinician dashboards.

``stratify`` buckets a patient into one of four levels from an aggregate
score on a **0-100 percentage scale** plus the prediction's top
contributions and any known condition tags. The prediction model reports
scores on a [0, 1] scale; ``score_to_percentage`` is the one place where the
two scales meet, and ``build_risk_profile`` applies it at that boundary.

Rules
-----
1. Base level: score > 75 very-high, > 50 high, > 30 moderate, else low.
2. Three or more contributions with ``abs(contribution) > 0.15``: escalate
   (high becomes very-high, low or moderate become high).
3. Any severe condition tag (``heart-disease``, ``severe-hypertension``,
   ``diabetes-type-2``): escalate one level.

Rules 2 and 3 apply in that order, may compound, and never go past
very-high.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Union

from ..records import ClinicalRecord, PredictionResult, RiskContribution, RiskLabel


class StratificationLevel(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    VERY_HIGH = "very-high"


_LEVEL_ORDER = [
    StratificationLevel.LOW,
    StratificationLevel.MODERATE,
    StratificationLevel.HIGH,
    StratificationLevel.VERY_HIGH,
]

SEVERE_CONDITIONS = ("heart-disease", "severe-hypertension", "diabetes-type-2")
HIGH_IMPACT_CONTRIBUTION = 0.15
HIGH_IMPACT_FACTOR_COUNT = 3

Contribution = Union[RiskContribution, Mapping[str, Any]]


@dataclass(frozen=True)
class RiskCategory:
    level: StratificationLevel
    description: str
    color: str
    criteria: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "level": self.level.value,
            "description": self.description,
            "color": self.color,
            "criteria": list(self.criteria),
        }


RISK_CATEGORIES = [
    RiskCategory(
        StratificationLevel.LOW, "Low Risk", "green",
        ["Risk score < 30%", "No significant contributing factors", "Stable health metrics"],
    ),
    RiskCategory(
        StratificationLevel.MODERATE, "Moderate Risk", "yellow",
        ["Risk score 30-50%", "1-2 moderate risk factors", "Some health concerns requiring monitoring"],
    ),
    RiskCategory(
        StratificationLevel.HIGH, "High Risk", "orange",
        ["Risk score 51-75%", "Multiple risk factors present", "Requires regular monitoring and intervention"],
    ),
    RiskCategory(
        StratificationLevel.VERY_HIGH, "Very High Risk", "red",
        ["Risk score > 75%", "Multiple severe risk factors", "Requires immediate clinical attention"],
    ),
]


def risk_category(level: Union[StratificationLevel, str]) -> RiskCategory:
    level = StratificationLevel(level)
    for category in RISK_CATEGORIES:
        if category.level == level:
            return category
    raise KeyError(level)


def _escalate(level: StratificationLevel) -> StratificationLevel:
    idx = _LEVEL_ORDER.index(level)
    return _LEVEL_ORDER[min(idx + 1, len(_LEVEL_ORDER) - 1)]


def _contribution_value(item: Contribution) -> float:
    if isinstance(item, RiskContribution):
        return item.raw_contribution
    if isinstance(item, Mapping):
        value = item.get("contribution", item.get("raw_contribution"))
        if value is not None:
            return float(value)
    raise ValueError("Contribution entries need a numeric 'contribution' value.")


def base_level(score: float) -> StratificationLevel:
    """Level from the 0-100 score alone; bounds are exclusive."""
    if score > 75:
        return StratificationLevel.VERY_HIGH
    if score > 50:
        return StratificationLevel.HIGH
    if score > 30:
        return StratificationLevel.MODERATE
    return StratificationLevel.LOW


def stratify(
    score: float,
    contributions: Iterable[Contribution],
    condition_tags: Iterable[str],
) -> StratificationLevel:
    """Stratify a patient.

    Args
    ----
    score:
        Aggregate risk on the 0-100 scale (use ``score_to_percentage`` to
        convert a model score).
    contributions:
        Top contributions of the prediction, as ``RiskContribution`` objects
        or mappings with a ``contribution`` key.
    condition_tags:
        Known condition tags for the patient.

    Returns
    -------
    StratificationLevel
        The escalated level, capped at very-high.

    Raises
    ------
    TypeError
        If ``condition_tags`` is a single string instead of a collection.
    ValueError
        If a contribution carries no numeric value.
    """
    if isinstance(condition_tags, str):
        raise TypeError("condition_tags must be a collection of tags, not a single string.")

    level = base_level(score)

    high_impact = sum(
        1 for c in contributions if abs(_contribution_value(c)) > HIGH_IMPACT_CONTRIBUTION
    )
    if high_impact >= HIGH_IMPACT_FACTOR_COUNT and level != StratificationLevel.VERY_HIGH:
        if level == StratificationLevel.HIGH:
            level = StratificationLevel.VERY_HIGH
        else:
            level = StratificationLevel.HIGH

    if any(tag in SEVERE_CONDITIONS for tag in condition_tags):
        level = _escalate(level)

    return level


# ---------------------
# Patient risk profiles
# ---------------------

def score_to_percentage(score: float) -> float:
    """Convert a [0, 1] model score to the 0-100 stratification scale."""
    return round(score * 100, 2)


def derive_condition_tags(record: ClinicalRecord) -> List[str]:
    """Condition tags implied by the clinical record itself."""
    tags = []
    if record.chest_pain_type > 0:
        tags.append("chest-pain")
    if record.resting_blood_pressure >= 140:
        tags.append("hypertension")
    if record.cholesterol >= 240:
        tags.append("high-cholesterol")
    if record.fasting_blood_sugar_high:
        tags.append("diabetes")
    if record.exercise_induced_angina:
        tags.append("exercise-angina")
    return tags


@dataclass(frozen=True)
class PatientRiskProfile:
    user_id: str
    risk_score: float  # 0-100 scale
    risk_level: RiskLabel
    stratification_level: StratificationLevel
    last_assessment_date: datetime
    age: int
    sex: int
    conditions: List[str] = field(default_factory=list)
    contributing_factors: List[RiskContribution] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "user_id": self.user_id,
            "risk_score": self.risk_score,
            "risk_level": self.risk_level.value,
            "stratification_level": self.stratification_level.value,
            "last_assessment_date": self.last_assessment_date.isoformat(),
            "age": self.age,
            "sex": self.sex,
            "conditions": list(self.conditions),
            "contributing_factors": [c.to_dict() for c in self.contributing_factors],
        }


def build_risk_profile(
    user_id: str,
    record: ClinicalRecord,
    prediction: PredictionResult,
    assessed_at: datetime,
    conditions: Sequence[str] = (),
) -> PatientRiskProfile:
    """Assemble a stratified profile from a record and its prediction.

    Conditions derived from the record come first, followed by any extra
    tags supplied by the caller (duplicates dropped).
    """
    tags: List[str] = []
    for tag in list(derive_condition_tags(record)) + list(conditions):
        if tag not in tags:
            tags.append(tag)

    pct = score_to_percentage(prediction.score)
    return PatientRiskProfile(
        user_id=user_id,
        risk_score=pct,
        risk_level=prediction.label,
        stratification_level=stratify(pct, prediction.top_contributions, tags),
        last_assessment_date=assessed_at,
        age=record.age,
        sex=int(record.sex),
        conditions=tags,
        contributing_factors=list(prediction.top_contributions),
    )
