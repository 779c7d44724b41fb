import pytest


HEALTHY = {
    "age": 25,
    "sex": 0,
    "chest_pain_type": 0,
    "resting_blood_pressure": 110,
    "cholesterol": 180,
    "fasting_blood_sugar_high": False,
    "resting_ecg_result": 0,
    "max_heart_rate_achieved": 190,
    "exercise_induced_angina": False,
    "st_depression": 0,
    "st_slope": 0,
    "major_vessel_count": 0,
    "thalassemia_type": 0,
}

# Older male smoker with angina; scores 0.6746 under the weight table
SYMPTOMATIC = {
    "age": 60,
    "sex": 1,
    "chest_pain_type": 2,
    "resting_blood_pressure": 145,
    "cholesterol": 250,
    "fasting_blood_sugar_high": False,
    "resting_ecg_result": 0,
    "max_heart_rate_achieved": 130,
    "exercise_induced_angina": True,
    "st_depression": 1.5,
    "st_slope": 1,
    "major_vessel_count": 1,
    "thalassemia_type": 1,
    "smoking_status": "current",
}


@pytest.fixture
def healthy_data():
    return dict(HEALTHY)


@pytest.fixture
def symptomatic_data():
    return dict(SYMPTOMATIC)


@pytest.fixture
def make_data():
    """Build a record dict from the healthy baseline plus overrides."""
    def _make(**overrides):
        data = dict(HEALTHY)
        data.update(overrides)
        return data
    return _make
