import logging

import joblib
import numpy as np
import pytest
from sklearn.linear_model import LinearRegression

from src.data.load_data import load_scaling_params
from src.exceptions import ConfigurationError, InferenceFailure, InvalidInputError
from src.features.build_features import prepare
from src.models.predict import PricePredictor, describe, format_price
from tests.conftest import MEAN, STD


class _Exploding:
    def predict(self, X):
        raise ValueError("bad input tensor")


class _Constant:
    def __init__(self, value):
        self.value = value
        self.seen = []

    def predict(self, X):
        self.seen.append(X)
        return self.value


@pytest.fixture
def regressor():
    rng = np.random.default_rng(42)
    X = rng.normal(size=(40, 8))
    y = X @ np.arange(1.0, 9.0) * 1000 + 15000
    return LinearRegression().fit(X, y)


@pytest.fixture
def predictor(regressor, frequency_map, scaler_file):
    return PricePredictor(regressor, frequency_map, load_scaling_params(scaler_file), reference_year=2026)


def test_predict_price_matches_regressor(predictor, regressor, form, frequency_map):
    vec = prepare(form, frequency_map, MEAN, STD, reference_year=2026)
    expected = float(regressor.predict(vec.to_array())[0])
    assert predictor.predict_price(form) == pytest.approx(expected)


def test_model_receives_float32_batch_of_one(frequency_map, scaler_file, form):
    model = _Constant(np.array([[12345.0]]))
    p = PricePredictor(model, frequency_map, load_scaling_params(scaler_file))
    assert p.predict_price(form) == 12345.0
    (X,) = model.seen
    assert X.shape == (1, 8)
    assert X.dtype == np.float32


def test_from_files(tmp_path, regressor, freq_file, scaler_file, form):
    model_file = tmp_path / "model.joblib"
    joblib.dump(regressor, model_file)
    p = PricePredictor.from_files(model_file, freq_file, scaler_file, reference_year=2026)
    assert p.model_names() == ["camry", "civic", "f-150"]
    assert np.isfinite(p.predict_price(form))


def test_from_files_missing_model(tmp_path, freq_file, scaler_file):
    with pytest.raises(ConfigurationError):
        PricePredictor.from_files(tmp_path / "none.joblib", freq_file, scaler_file)


def test_model_error_becomes_inference_failure(frequency_map, scaler_file, form):
    p = PricePredictor(_Exploding(), frequency_map, load_scaling_params(scaler_file))
    with pytest.raises(InferenceFailure) as excinfo:
        p.predict_price(form)
    assert isinstance(excinfo.value.__cause__, ValueError)


@pytest.mark.parametrize("output", [np.array([]), np.array([np.nan]), [float("inf")]])
def test_unusable_output_is_inference_failure(frequency_map, scaler_file, form, output):
    p = PricePredictor(_Constant(output), frequency_map, load_scaling_params(scaler_file))
    with pytest.raises(InferenceFailure):
        p.predict_price(form)


def test_invalid_input_never_reaches_model(frequency_map, scaler_file, form):
    model = _Constant([1.0])
    p = PricePredictor(model, frequency_map, load_scaling_params(scaler_file))
    form["odometer"] = "lots"
    with pytest.raises(InvalidInputError) as excinfo:
        p.predict_price(form)
    assert excinfo.value.field == "odometer"
    assert model.seen == []


def test_predictor_usable_after_failed_submission(predictor, form):
    bad = dict(form, year="abc")
    with pytest.raises(InvalidInputError):
        predictor.predict_price(bad)
    assert np.isfinite(predictor.predict_price(form))


def test_unknown_model_logs_warning(predictor, form, caplog):
    form["model"] = "unknown-model-xyz"
    with caplog.at_level(logging.WARNING, logger="src.models.predict"):
        vec = predictor.prepare(form)
    assert vec.raw_model == 1
    assert "unknown-model-xyz" in caplog.text


@pytest.mark.parametrize("value, expected", [
    (12345.6, "$12,346"),
    (999.4, "$999"),
    (0, "$0"),
    (1234567, "$1,234,567"),
])
def test_format_price(value, expected):
    assert format_price(value) == expected


def test_format_price_custom_currency():
    assert format_price(2500, currency="€") == "€2,500"


def test_describe(predictor, form):
    out = describe(predictor.prepare(form))
    assert out["raw"]["CarAge"] == 11
    assert out["raw"]["model"] == 200
    assert set(out["scaled"]) == set(out["raw"])


def test_from_files_with_malformed_reference_year(tmp_path, regressor, freq_file, scaler_file, monkeypatch):
    model_file = tmp_path / "model.joblib"
    joblib.dump(regressor, model_file)
    monkeypatch.setenv("CAR_AGE_REFERENCE_YEAR", "next year")
    with pytest.raises(ConfigurationError):
        PricePredictor.from_files(model_file, freq_file, scaler_file)
