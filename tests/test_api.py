import pytest
from fastapi.testclient import TestClient

from heartguard import api
from heartguard.api import app


UCI_ROW = {
    "age": 25, "sex": 0, "cp": 0, "trestbps": 110, "chol": 180, "fbs": 0, "restecg": 0,
    "thalach": 190, "exang": 0, "oldpeak": 0.0, "slope": 0, "ca": 0, "thal": 0,
}


@pytest.fixture
def client():
    api.HISTORY.clear()
    yield TestClient(app)
    api.HISTORY.clear()


class TestMeta:
    def test_health_check(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "OK"
        assert response.json()["model_version"] == "v3.0.0"

    def test_version(self, client):
        assert client.get("/version").json()["model_version"] == "v3.0.0"

    def test_feature_map(self, client):
        data = client.get("/feature-map").json()
        assert data["weights"]["age"] == 1.0
        assert data["weights"]["resting_blood_pressure"] == 0.15
        assert data["flat_addends"] == {"fasting_blood_sugar_high": 0.03, "resting_ecg_result": 0.05}
        assert data["label_thresholds"] == {"high": 0.70, "medium": 0.40}

    def test_risk_categories(self, client):
        data = client.get("/risk-categories").json()
        assert [c["level"] for c in data] == ["low", "moderate", "high", "very-high"]


class TestPredict:
    def test_single_record(self, client, healthy_data):
        response = client.post("/predict", json=healthy_data)
        assert response.status_code == 200
        data = response.json()
        assert data["score"] == 0.0735
        assert data["label"] == "low"
        assert len(data["top_contributions"]) == 5
        assert "prediction_id" not in data

    def test_uci_column_names(self, client):
        response = client.post("/predict", json=UCI_ROW)
        assert response.status_code == 200
        assert response.json()["score"] == 0.0735

    def test_batch(self, client, healthy_data, symptomatic_data):
        response = client.post("/predict", json=[healthy_data, symptomatic_data])
        assert response.status_code == 200
        assert [p["label"] for p in response.json()["predictions"]] == ["low", "medium"]

    def test_out_of_range_is_400(self, client, make_data):
        response = client.post("/predict", json=make_data(age=200))
        assert response.status_code == 400
        assert response.json()["detail"] == {"field": "age", "reason": "Age must be between 0 and 120"}

    def test_batch_error_reports_index(self, client, healthy_data, make_data):
        response = client.post("/predict", json=[healthy_data, make_data(thalassemia_type=5)])
        assert response.status_code == 400
        assert response.json()["detail"]["index"] == 1
        assert response.json()["detail"]["field"] == "thalassemia_type"

    def test_bad_smoking_status_is_400(self, client, make_data):
        response = client.post("/predict", json=make_data(smoking_status="sometimes"))
        assert response.status_code == 400
        assert response.json()["detail"]["field"] == "smoking_status"

    def test_missing_field_is_422(self, client, healthy_data):
        del healthy_data["cholesterol"]
        assert client.post("/predict", json=healthy_data).status_code == 422


class TestExplain:
    def test_top_k(self, client, symptomatic_data):
        response = client.post("/explain", params={"top_k": 2}, json=symptomatic_data)
        assert response.status_code == 200
        assert [c["factor"] for c in response.json()["contributions"]] == ["age", "smoking"]

    def test_top_k_bounds(self, client, symptomatic_data):
        assert client.post("/explain", params={"top_k": 6}, json=symptomatic_data).status_code == 422
        assert client.post("/explain", params={"top_k": 0}, json=symptomatic_data).status_code == 422


class TestStratify:
    def test_very_high(self, client):
        payload = {
            "score": 80,
            "contributions": [{"contribution": 0.2}, {"contribution": 0.2}, {"contribution": 0.2}],
            "conditions": ["heart-disease"],
        }
        response = client.post("/stratify", json=payload)
        assert response.status_code == 200
        assert response.json()["level"] == "very-high"
        assert response.json()["category"]["color"] == "red"

    def test_severe_condition(self, client):
        response = client.post("/stratify", json={"score": 10, "conditions": ["diabetes-type-2"]})
        assert response.json()["level"] == "moderate"

    def test_score_out_of_scale_is_422(self, client):
        assert client.post("/stratify", json={"score": 150}).status_code == 422


class TestHistoryEndpoints:
    def test_stored_prediction_roundtrip(self, client, symptomatic_data):
        created = client.post("/predict", params={"user_id": "u1"}, json=symptomatic_data).json()
        prediction_id = created["prediction_id"]

        fetched = client.get(f"/predictions/id/{prediction_id}")
        assert fetched.status_code == 200
        assert fetched.json()["features"]["smoking_status"] == "current"
        assert fetched.json()["prediction"]["score"] == 0.6746

        history = client.get("/predictions/u1").json()
        assert history["user_id"] == "u1"
        assert [p["id"] for p in history["predictions"]] == [prediction_id]

    def test_unknown_prediction_is_404(self, client):
        assert client.get("/predictions/id/pred_missing").status_code == 404

    def test_unknown_user_has_empty_history(self, client):
        assert client.get("/predictions/nobody").json()["predictions"] == []

    def test_risk_profile(self, client, symptomatic_data):
        client.post("/predict", params={"user_id": "u1"}, json=symptomatic_data)

        profile = client.get("/patients/u1/risk-profile").json()
        assert profile["risk_score"] == 67.46
        assert profile["stratification_level"] == "high"

        escalated = client.get("/patients/u1/risk-profile", params={"conditions": ["heart-disease"]}).json()
        assert escalated["stratification_level"] == "very-high"
        assert escalated["conditions"][-1] == "heart-disease"

    def test_risk_profile_unknown_user_is_404(self, client):
        assert client.get("/patients/nobody/risk-profile").status_code == 404

    def test_cohort(self, client, healthy_data, symptomatic_data):
        assert client.get("/cohort/analysis").json()["total_patients"] == 0

        client.post("/predict", params={"user_id": "u1"}, json=healthy_data)
        client.post("/predict", params={"user_id": "u1"}, json=symptomatic_data)
        client.post("/predict", params={"user_id": "u2"}, json=healthy_data)

        data = client.get("/cohort/analysis").json()
        assert data["total_patients"] == 2
        assert data["risk_distribution"]["high"] == 1
        assert data["risk_distribution"]["low"] == 1
        assert data["average_risk_score"] == pytest.approx((67.46 + 7.35) / 2, abs=0.01)
