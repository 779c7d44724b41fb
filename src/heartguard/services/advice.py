"""
Risk-factor findings and lifestyle recommendations.

``advise`` flags individual risk categories from the raw record and does not
look at the score. ``recommend`` builds the ordered recommendation list from
the score tier plus specific factor values; its order is part of the
contract.
"""

from typing import List, Optional

from ..records import ClinicalRecord, RiskFactor, Severity, SmokingStatus
from .calculators import body_mass_index
from .scoring import HIGH_RISK_THRESHOLD, MEDIUM_RISK_THRESHOLD

GENERAL_RECOMMENDATIONS = [
    "Aim for at least 150 minutes of moderate-intensity aerobic activity per week.",
    "Follow a Mediterranean-style diet rich in fruits, vegetables, and whole grains.",
    "Limit alcohol consumption to moderate levels (up to one drink per day for women, two for men).",
    "Get 7-9 hours of quality sleep each night.",
]


def _bmi(record: ClinicalRecord) -> Optional[float]:
    if not record.has_body_measurements:
        return None
    return body_mass_index(record.weight_kg, record.height_cm)


# -----------------
# Risk factors
# -----------------

def advise(record: ClinicalRecord) -> List[RiskFactor]:
    """Flag risk categories, evaluated in a fixed order.

    Order: Blood Pressure, Cholesterol, Smoking, Weight, Exercise Response,
    Age. Each category yields at most one finding.
    """
    findings: List[RiskFactor] = []

    if record.resting_blood_pressure >= 140:
        findings.append(RiskFactor(
            "Blood Pressure", Severity.HIGH,
            "Work with your doctor to manage high blood pressure through medication, diet, and exercise.",
        ))
    elif record.resting_blood_pressure >= 120:
        findings.append(RiskFactor(
            "Blood Pressure", Severity.MODERATE,
            "Monitor your blood pressure regularly and maintain heart-healthy habits.",
        ))

    if record.cholesterol >= 240:
        findings.append(RiskFactor(
            "Cholesterol", Severity.HIGH,
            "Focus on a low-cholesterol diet and consider medication as prescribed by your doctor.",
        ))
    elif record.cholesterol >= 200:
        findings.append(RiskFactor(
            "Cholesterol", Severity.MODERATE,
            "Improve your diet by reducing saturated fats and increasing fiber intake.",
        ))

    if record.smoking_status == SmokingStatus.CURRENT:
        findings.append(RiskFactor(
            "Smoking", Severity.HIGH,
            "Seek support to quit smoking immediately - this is one of the most impactful "
            "changes you can make.",
        ))
    elif record.smoking_status == SmokingStatus.FORMER:
        findings.append(RiskFactor(
            "Smoking", Severity.MODERATE,
            "Maintain your smoke-free lifestyle and avoid exposure to secondhand smoke.",
        ))

    bmi = _bmi(record)
    if bmi is not None and bmi >= 30:
        findings.append(RiskFactor(
            "Weight", Severity.HIGH,
            "Work with a healthcare provider on a safe weight loss plan to reduce cardiovascular risk.",
        ))
    elif bmi is not None and bmi >= 25:
        findings.append(RiskFactor(
            "Weight", Severity.MODERATE,
            "Focus on maintaining a healthy weight through balanced nutrition and regular activity.",
        ))

    if record.exercise_induced_angina:
        findings.append(RiskFactor(
            "Exercise Response", Severity.HIGH,
            "Report exercise-induced chest pain to your doctor immediately for further evaluation.",
        ))

    if record.age >= 65:
        findings.append(RiskFactor(
            "Age", Severity.MODERATE,
            "Regular cardiac screenings become more important with age - maintain regular check-ups.",
        ))
    elif record.age >= 50:
        findings.append(RiskFactor(
            "Age", Severity.LOW,
            "Begin focusing on preventive heart health measures as you approach higher risk years.",
        ))

    return findings


# -----------------
# Lifestyle
# -----------------

def recommend(record: ClinicalRecord, score: float) -> List[str]:
    """Ordered lifestyle recommendations for a record and its score.

    The list starts with the score-tier intro, continues with blood pressure,
    cholesterol, smoking and BMI specific advice, and always ends with the
    four ``GENERAL_RECOMMENDATIONS``.
    """
    recs: List[str] = []

    if score >= HIGH_RISK_THRESHOLD:
        recs.append("Seek immediate medical consultation for a comprehensive cardiac evaluation.")
        recs.append("Consider cardiac rehabilitation programs under medical supervision.")
    elif score >= MEDIUM_RISK_THRESHOLD:
        recs.append("Schedule a consultation with a cardiologist for preventive care.")
        recs.append("Begin a physician-supervised exercise program.")
    else:
        recs.append("Maintain your healthy habits and continue regular check-ups.")

    if record.resting_blood_pressure >= 140:
        recs.append("Reduce sodium intake to less than 1,500mg daily.")
        recs.append("Practice stress-reduction techniques like meditation or deep breathing.")

    if record.cholesterol >= 240:
        recs.append("Limit saturated fats and eliminate trans fats from your diet.")
        recs.append("Increase intake of omega-3 fatty acids through fish or supplements.")

    if record.smoking_status == SmokingStatus.CURRENT:
        recs.append("Contact a smoking cessation program or your doctor for quit support.")
        recs.append("Consider nicotine replacement therapy or prescription quit aids.")
    elif record.smoking_status == SmokingStatus.FORMER:
        recs.append("Continue avoiding tobacco products and secondhand smoke.")

    bmi = _bmi(record)
    if bmi is not None and bmi >= 30:
        recs.append("Focus on gradual weight loss of 1-2 pounds per week through diet and exercise.")
        recs.append("Consider working with a registered dietitian for a personalized nutrition plan.")
    elif bmi is not None and bmi >= 25:
        recs.append("Maintain your current weight through balanced nutrition and regular activity.")

    recs.extend(GENERAL_RECOMMENDATIONS)
    return recs
