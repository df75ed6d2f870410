import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest

from strokeml.config import Config

TINY_BMI = ["22.5", "31.0", "N/A", "27.3", "19.8", "35.2", "24.1", "29.9", "26.4", "33.0"]


def make_stroke_frame(n=200, seed=0, invalid_bmi=("N/A", "", "unknown")):
    """Synthetic patient records; stroke risk rises with age and glucose."""
    rng = np.random.default_rng(seed)
    age = rng.uniform(20, 85, n).round(0)
    glucose = rng.normal(110, 35, n).clip(55, 270).round(2)
    hypertension = rng.binomial(1, 0.15, n)
    heart_disease = rng.binomial(1, 0.08, n)
    logit = -9 + 0.09 * age + 0.01 * glucose + 0.8 * hypertension
    stroke = rng.binomial(1, 1 / (1 + np.exp(-logit)))
    # guarantee both classes in every stratified partition
    stroke[:10] = 1
    bmi = rng.normal(28, 6, n).clip(12, 60).round(1).astype(str).astype(object)
    for i, token in enumerate(invalid_bmi):
        bmi[(20 + i * 7) % n] = token

    return pd.DataFrame({
        "id": np.arange(1000, 1000 + n),
        "gender": rng.choice(["Male", "Female", "Other"], n, p=[0.45, 0.54, 0.01]),
        "age": age,
        "hypertension": hypertension,
        "heart_disease": heart_disease,
        "ever_married": rng.choice(["Yes", "No"], n),
        "work_type": rng.choice(["Private", "Self-employed", "Govt_job", "children", "Never_worked"], n),
        "Residence_type": rng.choice(["Urban", "Rural"], n),
        "avg_glucose_level": glucose,
        "bmi": bmi,
        "smoking_status": rng.choice(["never smoked", "formerly smoked", "smokes", "Unknown"], n),
        "stroke": stroke,
    })


@pytest.fixture
def cfg(tmp_path):
    return Config(model_path=str(tmp_path / "models" / "rf.joblib"), out_dir=str(tmp_path / "outputs"))


@pytest.fixture
def stroke_df():
    return make_stroke_frame()


@pytest.fixture
def tiny_df():
    """Ten records, two strokes, one 'N/A' BMI."""
    return pd.DataFrame({
        "gender": ["Male", "Female", "Female", "Male", "Female", "Male", "Female", "Male", "Female", "Male"],
        "age": [67.0, 61.0, 80.0, 49.0, 79.0, 81.0, 74.0, 69.0, 59.0, 78.0],
        "hypertension": [0, 0, 0, 0, 1, 0, 1, 0, 0, 0],
        "heart_disease": [1, 0, 1, 0, 0, 0, 1, 0, 0, 0],
        "ever_married": ["Yes", "Yes", "Yes", "Yes", "Yes", "Yes", "Yes", "No", "Yes", "Yes"],
        "work_type": ["Private", "Self-employed", "Private", "Private", "Self-employed",
                      "Private", "Private", "Private", "Private", "Private"],
        "Residence_type": ["Urban", "Rural", "Rural", "Urban", "Rural", "Urban", "Rural", "Urban", "Rural", "Urban"],
        "avg_glucose_level": [228.69, 202.21, 105.92, 171.23, 174.12, 186.21, 70.09, 94.39, 76.15, 58.57],
        "bmi": list(TINY_BMI),
        "smoking_status": ["formerly smoked", "never smoked", "never smoked", "smokes", "never smoked",
                           "formerly smoked", "never smoked", "never smoked", "Unknown", "Unknown"],
        "stroke": [0, 1, 0, 0, 0, 1, 0, 0, 0, 0],
    })


@pytest.fixture
def stroke_csv(tmp_path, stroke_df):
    path = tmp_path / "stroke.csv"
    stroke_df.to_csv(path, index=False)
    return path
