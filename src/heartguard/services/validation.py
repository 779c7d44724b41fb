"""
Clinical input validation.

``validate_record`` checks a submitted clinical record field by field, in a
fixed order, and stops at the first violation (fail-fast). On success it
returns an immutable ``ClinicalRecord`` with normalized Python types.

Accepted value shapes
---------------------
- Integer fields: ``int`` (including NumPy integers) or an integral ``float``
  such as ``140.0``. ``bool`` is never accepted as a number.
- Boolean fields: ``bool`` or the integers ``0`` / ``1`` (dataset encoding).
- ``st_depression``: any finite real number.
- Optional fields: a missing key or ``None`` means "not provided".
"""

import math
import numbers
from typing import Any, Mapping, Union

import numpy as np

from ..errors import ValidationError
from ..records import ClinicalRecord, Sex, SmokingStatus

# (field, kind, lower, upper, reason) in validation order
_REQUIRED_FIELDS = [
    ("age", "int", 0, 120, "Age must be between 0 and 120"),
    ("sex", "int", 0, 1, "Sex must be 0 (female) or 1 (male)"),
    ("chest_pain_type", "int", 0, 3, "Chest pain type must be between 0 and 3"),
    ("resting_blood_pressure", "int", 50, 300, "Resting blood pressure must be between 50 and 300 mmHg"),
    ("cholesterol", "int", 100, 600, "Cholesterol must be between 100 and 600 mg/dL"),
    ("fasting_blood_sugar_high", "flag", None, None, "Fasting blood sugar must be true/false or 0/1"),
    ("resting_ecg_result", "int", 0, 2, "Resting ECG results must be between 0 and 2"),
    ("max_heart_rate_achieved", "int", 50, 250, "Maximum heart rate must be between 50 and 250 bpm"),
    ("exercise_induced_angina", "flag", None, None, "Exercise induced angina must be true/false or 0/1"),
    ("st_depression", "number", 0, 10, "ST depression must be between 0 and 10"),
    ("st_slope", "int", 0, 2, "Slope must be between 0 and 2"),
    ("major_vessel_count", "int", 0, 3, "Number of major vessels must be between 0 and 3"),
    ("thalassemia_type", "int", 0, 2, "Thalassemia must be between 0 and 2"),
]

_OPTIONAL_FIELDS = [
    ("height_cm", "int", 100, 250, "Height must be between 100 and 250 cm"),
    ("weight_kg", "int", 30, 300, "Weight must be between 30 and 300 kg"),
]

_SMOKING_REASON = "Smoking status must be 'never', 'former', or 'current'"


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, (bool, np.bool_))


def _check_int(field: str, value: Any, lower: int, upper: int, reason: str) -> int:
    if not _is_number(value):
        raise ValidationError(field, f"{reason} (got a non-numeric value)")
    if isinstance(value, numbers.Integral):
        number = int(value)
    else:
        if not math.isfinite(value) or not float(value).is_integer():
            raise ValidationError(field, f"{reason} (must be a whole number)")
        number = int(value)
    if number < lower or number > upper:
        raise ValidationError(field, reason)
    return number


def _check_number(field: str, value: Any, lower: float, upper: float, reason: str) -> float:
    if not _is_number(value) or not math.isfinite(value):
        raise ValidationError(field, f"{reason} (got a non-numeric value)")
    number = float(value)
    if number < lower or number > upper:
        raise ValidationError(field, reason)
    return number


def _check_flag(field: str, value: Any, reason: str) -> bool:
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    if isinstance(value, numbers.Integral) and int(value) in (0, 1):
        return bool(value)
    raise ValidationError(field, reason)


def _check_field(field: str, kind: str, value: Any, lower, upper, reason: str):
    if kind == "flag":
        return _check_flag(field, value, reason)
    if kind == "number":
        return _check_number(field, value, lower, upper, reason)
    return _check_int(field, value, lower, upper, reason)


def validate_record(data: Union[Mapping[str, Any], ClinicalRecord]) -> ClinicalRecord:
    """Validate a clinical submission and return an immutable record.

    Parameters
    ----------
    data:
        A mapping keyed by the snake_case field names, or an existing
        ``ClinicalRecord`` (re-validated, since direct construction skips
        the checks).

    Returns
    -------
    ClinicalRecord
        The validated record with normalized types.

    Raises
    ------
    ValidationError
        On the first missing, mistyped or out-of-range field, in the order
        age, sex, chest pain, blood pressure, cholesterol, fasting blood
        sugar, resting ECG, max heart rate, angina, ST depression, slope,
        vessels, thalassemia, height, weight, smoking status.
    """
    if isinstance(data, ClinicalRecord):
        data = data.to_dict()
    if not isinstance(data, Mapping):
        raise ValidationError("record", "Clinical data must be a mapping of field names to values")

    values = {}
    for field, kind, lower, upper, reason in _REQUIRED_FIELDS:
        value = data.get(field)
        if value is None:
            raise ValidationError(field, f"{field} is required")
        values[field] = _check_field(field, kind, value, lower, upper, reason)

    for field, kind, lower, upper, reason in _OPTIONAL_FIELDS:
        value = data.get(field)
        values[field] = None if value is None else _check_field(field, kind, value, lower, upper, reason)

    smoking = data.get("smoking_status")
    if isinstance(smoking, SmokingStatus):
        smoking = smoking.value
    if smoking is not None:
        if not isinstance(smoking, str) or smoking not in {s.value for s in SmokingStatus}:
            raise ValidationError("smoking_status", _SMOKING_REASON)
        smoking = SmokingStatus(smoking)
    values["smoking_status"] = smoking

    values["sex"] = Sex(values["sex"])
    return ClinicalRecord(**values)
