import pytest

from heartguard.records import RiskContribution
from heartguard.services.calculators import compute_factor_risks
from heartguard.services.explain import TOP_K, candidate_contributions, explain, rank_contributions
from heartguard.services.validation import validate_record


def _explain(data, top_k=TOP_K):
    record = validate_record(data)
    return explain(record, compute_factor_risks(record), top_k=top_k)


def test_healthy_zero_ties_keep_enumeration_order(healthy_data):
    top = _explain(healthy_data)
    assert [c.factor_name for c in top] == [
        "age", "sex", "resting_blood_pressure", "cholesterol", "max_heart_rate_achieved",
    ]
    assert [c.raw_contribution for c in top] == [0.05, 0.02, 0.0, 0.0, 0.0]


def test_symptomatic_ranking(symptomatic_data):
    top = _explain(symptomatic_data)
    assert [(c.factor_name, c.raw_contribution) for c in top] == [
        ("age", 0.25),
        ("smoking", 0.15),
        ("sex", 0.12),
        ("exercise_induced_angina", 0.045),
        ("resting_blood_pressure", 0.03),
    ]


def test_rounded_ties_resolved_by_enumeration(make_data):
    # chest pain 3 (0.20 * 0.10) and thalassemia 2 (0.25 * 0.08) both round to 0.02
    data = make_data(
        age=45, sex=1, chest_pain_type=3, resting_blood_pressure=120, cholesterol=200,
        max_heart_rate_achieved=150, exercise_induced_angina=True, st_depression=2.0,
        st_slope=2, major_vessel_count=2, thalassemia_type=2, smoking_status="current",
    )
    ranked = _explain(data, top_k=None)
    assert [c.factor_name for c in ranked][:8] == [
        "smoking", "sex", "age", "exercise_induced_angina", "st_depression",
        "major_vessel_count", "chest_pain_type", "thalassemia_type",
    ]

    seven = _explain(data, top_k=7)
    assert seven[-1].factor_name == "chest_pain_type"
    assert "thalassemia_type" not in [c.factor_name for c in seven]


def test_conditional_factors_omitted_when_absent(healthy_data):
    names = [c.factor_name for c in _explain(healthy_data, top_k=None)]
    for absent in (
        "exercise_induced_angina", "chest_pain_type", "st_depression", "st_slope",
        "major_vessel_count", "thalassemia_type", "bmi", "smoking",
    ):
        assert absent not in names


def test_never_smoker_not_explained(make_data):
    names = [c.factor_name for c in _explain(make_data(smoking_status="never"), top_k=None)]
    assert "smoking" not in names


def test_zero_bmi_contribution_truncated(make_data):
    data = make_data(height_cm=180, weight_kg=70)
    assert "bmi" not in [c.factor_name for c in _explain(data)]

    bmi = [c for c in _explain(data, top_k=None) if c.factor_name == "bmi"][0]
    assert bmi.raw_contribution == 0.0
    assert bmi.explanation_text == "Your BMI of 21.6 is in the healthy range and affects cardiovascular risk."


def test_bmi_texts(make_data):
    obese = [c for c in _explain(make_data(height_cm=170, weight_kg=95), top_k=None) if c.factor_name == "bmi"][0]
    assert obese.explanation_text == "Your BMI of 32.9 indicates obesity, which affects cardiovascular risk."
    assert obese.raw_contribution == 0.01

    thin = [c for c in _explain(make_data(height_cm=180, weight_kg=50), top_k=None) if c.factor_name == "bmi"][0]
    assert "indicates underweight, which" in thin.explanation_text
    assert thin.raw_contribution == 0.0025


def test_texts_quote_patient_values(symptomatic_data):
    texts = {c.factor_name: c.explanation_text for c in _explain(symptomatic_data, top_k=None)}

    assert texts["age"].startswith("At 60 years old")
    assert texts["sex"].startswith("Male sex")
    assert texts["resting_blood_pressure"] == (
        "Resting blood pressure of 145 mmHg is elevated and affects heart disease risk."
    )
    assert texts["cholesterol"] == "Cholesterol level of 250 mg/dL is high and impacts cardiovascular health."
    assert texts["max_heart_rate_achieved"].startswith(
        "Maximum heart rate of 130 bpm during exercise is lower than expected for your age"
    )
    assert texts["st_depression"].startswith("ST depression of 1.5 during exercise")
    assert "being flat" in texts["st_slope"]
    assert texts["major_vessel_count"].startswith("1 major vessels")
    assert "fixed defect" in texts["thalassemia_type"]
    assert "current smoker" in texts["smoking"]


def test_candidates_in_enumeration_order(symptomatic_data):
    record = validate_record(symptomatic_data)
    names = [c.factor_name for c in candidate_contributions(record, compute_factor_risks(record))]
    assert names == [
        "age", "sex", "resting_blood_pressure", "cholesterol", "exercise_induced_angina",
        "chest_pain_type", "max_heart_rate_achieved", "st_depression", "st_slope",
        "major_vessel_count", "thalassemia_type", "smoking",
    ]


def test_rank_uses_absolute_value():
    items = [
        RiskContribution("a", 0.1, ""),
        RiskContribution("b", -0.3, ""),
        RiskContribution("c", 0.2, ""),
    ]
    assert [c.factor_name for c in rank_contributions(items, top_k=2)] == ["b", "c"]


def test_rank_rejects_non_positive_top_k():
    with pytest.raises(ValueError):
        rank_contributions([], top_k=0)
