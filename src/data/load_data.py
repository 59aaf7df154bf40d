"""
Load the static artifacts the predictor needs at startup.

- `load_frequency_map()` reads the model-name frequency table (JSON object).
- `load_scaling_params()` reads the scaler mean/std dump (JSON object with
  `feature_names`, `mean` and `std`).
- `load_model()` unpickles the trained regressor with joblib.

Every loader raises ConfigurationError when its artifact is missing or
malformed, so a broken deployment fails at startup instead of on the first
submission.
"""

import json
import logging
import math
import os
from pathlib import Path
from typing import Mapping

import joblib

from src.config import FEATURE_ORDER, FREQUENCY_MAP_FILE, MODEL_FILE, SCALER_PARAMS_FILE
from src.exceptions import ConfigurationError
from src.features.build_features import ScalingParams, freeze_frequency_map

logger = logging.getLogger(__name__)


def _read_json(path, what: str):
    p = Path(path)
    if not p.exists():
        raise ConfigurationError(f"{what} not found at {p}")
    try:
        return json.loads(p.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise ConfigurationError(f"Could not read {what} at {p}: {exc}") from exc


def load_frequency_map(path=FREQUENCY_MAP_FILE) -> Mapping[str, float]:
    """
    Load the model-name -> frequency table.

    Returns
    -------
    Mapping[str, float]
        Read-only mapping keyed by lowercase, trimmed model name.
    """
    payload = _read_json(path, "Frequency map")
    if not isinstance(payload, dict) or not payload:
        raise ConfigurationError(f"Frequency map at {path} must be a non-empty JSON object")

    for name, score in payload.items():
        if isinstance(score, bool) or not isinstance(score, (int, float)):
            raise ConfigurationError(f"Frequency for '{name}' is not a number: {score!r}")
        if not math.isfinite(score) or score <= 0:
            raise ConfigurationError(f"Frequency for '{name}' must be positive: {score!r}")

    frequency_map = freeze_frequency_map(payload)
    logger.info("Loaded frequency map with %d model names from %s", len(frequency_map), path)
    return frequency_map


def load_scaling_params(path=SCALER_PARAMS_FILE) -> ScalingParams:
    payload = _read_json(path, "Scaler parameters")
    if not isinstance(payload, dict):
        raise ConfigurationError(f"Scaler parameters at {path} must be a JSON object")
    missing = [k for k in ("mean", "std") if k not in payload]
    if missing:
        raise ConfigurationError(f"Scaler parameters at {path} missing keys: {missing}")

    params = ScalingParams(
        mean=payload["mean"],
        std=payload["std"],
        feature_names=payload.get("feature_names", FEATURE_ORDER),
    )
    logger.info("Loaded scaler parameters for %s from %s", list(params.feature_names), path)
    return params


def scaling_params_from_scaler(scaler) -> ScalingParams:
    """
    Build ScalingParams from a fitted scikit-learn StandardScaler.

    Uses `feature_names_in_` when the scaler was fitted on a DataFrame.
    """
    if not hasattr(scaler, "mean_") or not hasattr(scaler, "scale_"):
        raise ConfigurationError("Scaler is not fitted (missing mean_/scale_)")
    names = getattr(scaler, "feature_names_in_", None)
    return ScalingParams(
        mean=list(scaler.mean_),
        std=list(scaler.scale_),
        feature_names=FEATURE_ORDER if names is None else [str(n) for n in names],
    )


def load_model(path=MODEL_FILE):
    """Load the trained regressor; it must expose a `predict` method."""
    if not os.path.exists(path):
        raise ConfigurationError(f"Model file not found at {path}")
    try:
        model = joblib.load(path)
    except Exception as exc:
        raise ConfigurationError(f"Could not load model from {path}: {exc}") from exc
    if not callable(getattr(model, "predict", None)):
        raise ConfigurationError(f"Object loaded from {path} has no predict method")

    logger.info("Loaded %s from %s", type(model).__name__, path)
    return model
