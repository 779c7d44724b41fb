import numpy as np
import pandas as pd
import pytest

from heartguard import MODEL_VERSION, ValidationError, predict, predict_frame
from heartguard.records import RiskLabel, SmokingStatus
from heartguard.services.validation import validate_record


def test_predict_healthy(healthy_data):
    result = predict(healthy_data)

    assert result.score == 0.0735
    assert result.label is RiskLabel.LOW
    assert result.model_version == MODEL_VERSION == "v3.0.0"
    assert len(result.top_contributions) == 5
    assert result.risk_factors == []
    assert result.lifestyle_recommendations[0] == "Maintain your healthy habits and continue regular check-ups."


def test_predict_symptomatic(symptomatic_data):
    result = predict(symptomatic_data)

    assert result.score == 0.6746
    assert result.label is RiskLabel.MEDIUM
    assert [c.factor_name for c in result.top_contributions][:2] == ["age", "smoking"]
    assert len(result.risk_factors) == 5
    assert len(result.lifestyle_recommendations) == 12


def test_predict_high(symptomatic_data):
    result = predict({**symptomatic_data, "age": 70})
    assert result.score == 0.7746
    assert result.label is RiskLabel.HIGH
    assert result.lifestyle_recommendations[0].startswith("Seek immediate medical consultation")


def test_predict_is_deterministic(symptomatic_data):
    assert predict(symptomatic_data).to_dict() == predict(dict(symptomatic_data)).to_dict()


def test_predict_accepts_record(symptomatic_data):
    record = validate_record(symptomatic_data)
    assert predict(record) == predict(symptomatic_data)


def test_predict_propagates_validation_error(make_data):
    with pytest.raises(ValidationError) as exc:
        predict(make_data(resting_blood_pressure=400))
    assert exc.value.field == "resting_blood_pressure"


def test_label_matches_score_over_grid(make_data):
    for age in (20, 45, 60, 75):
        for bp in (110, 135, 185):
            for smoking in ("never", "former", "current"):
                result = predict(make_data(age=age, sex=1, resting_blood_pressure=bp, smoking_status=smoking))
                assert 0.0 <= result.score <= 1.0
                if result.score >= 0.70:
                    assert result.label is RiskLabel.HIGH
                elif result.score >= 0.40:
                    assert result.label is RiskLabel.MEDIUM
                else:
                    assert result.label is RiskLabel.LOW


def test_to_dict_shape(symptomatic_data):
    out = predict(symptomatic_data).to_dict()
    assert set(out) == {
        "score", "label", "model_version", "top_contributions", "risk_factors", "lifestyle_recommendations",
    }
    assert out["top_contributions"][0] == {
        "factor": "age",
        "contribution": 0.25,
        "explanation": (
            "At 60 years old, your age contributes to cardiovascular risk. "
            "Risk naturally increases after age 40."
        ),
    }
    assert out["risk_factors"][0]["severity"] == "high"


class TestPredictFrame:
    def test_scores_rows_and_keeps_index(self, healthy_data, symptomatic_data):
        df = pd.DataFrame([healthy_data, symptomatic_data], index=["a", "b"])
        out = predict_frame(df)

        assert list(out.columns) == ["score", "label", "model_version"]
        assert list(out.index) == ["a", "b"]
        assert out.loc["a", "score"] == 0.0735
        assert out.loc["b", "score"] == 0.6746
        assert list(out["label"]) == ["low", "medium"]

    def test_nan_optional_values_are_absent(self, healthy_data):
        df = pd.DataFrame(
            [
                {**healthy_data, "height_cm": 170, "weight_kg": 95},
                {**healthy_data, "height_cm": np.nan, "weight_kg": np.nan},
            ]
        )
        out = predict_frame(df)
        assert out.loc[0, "score"] == pytest.approx(0.0835)
        assert out.loc[1, "score"] == 0.0735

    def test_invalid_row_raises(self, healthy_data):
        df = pd.DataFrame([healthy_data, {**healthy_data, "cholesterol": 50}])
        with pytest.raises(ValidationError) as exc:
            predict_frame(df)
        assert exc.value.field == "cholesterol"

    def test_smoking_enum_survives_frame(self, healthy_data):
        df = pd.DataFrame([{**healthy_data, "smoking_status": SmokingStatus.CURRENT.value}])
        assert predict_frame(df).loc[0, "score"] == 0.2235
