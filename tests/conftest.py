"""Shared fixtures: small fitted sleep models dumped to temp files"""
import joblib
import numpy as np
import pandas as pd
import pytest
from sklearn.dummy import DummyRegressor
from sklearn.linear_model import LinearRegression

from bedtime import FEATURE_COLUMNS, Predictor

EIGHT_HOURS = 8 * 60 * 60


def _training_frame():
    rng = np.random.default_rng(42)
    n = 200
    df = pd.DataFrame({
        "wake": rng.integers(4, 12, n) * 3600 + rng.integers(0, 60, n) * 60,
        "estimatedSleep": rng.integers(16, 49, n) * 0.25,
        "coffee": rng.integers(1, 21, n),
    }, columns=FEATURE_COLUMNS)
    # needed sleep grows with target sleep and caffeine
    y = df["estimatedSleep"] * 3600 + df["coffee"] * 300 + 600
    return df, y


@pytest.fixture
def linear_model():
    X, y = _training_frame()
    return LinearRegression().fit(X, y)


@pytest.fixture
def constant_model():
    X, _ = _training_frame()
    return DummyRegressor(strategy="mean").fit(X, np.full(len(X), EIGHT_HOURS))


@pytest.fixture
def constant_predictor(constant_model):
    return Predictor(constant_model)


@pytest.fixture
def model_file(tmp_path, linear_model):
    path = tmp_path / "sleep_calculator.joblib"
    joblib.dump(linear_model, path)
    return path


@pytest.fixture
def constant_model_file(tmp_path, constant_model):
    path = tmp_path / "constant.joblib"
    joblib.dump({"model": constant_model, "columns": FEATURE_COLUMNS}, path)
    return path


@pytest.fixture
def mismatched_model_file(tmp_path, constant_model):
    """Loads fine, but asks for a feature the form never produces"""
    path = tmp_path / "mismatched.joblib"
    joblib.dump({"model": constant_model, "columns": ["caffeine_mg"]}, path)
    return path
