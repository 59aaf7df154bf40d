"""
Central configuration for the project.

This module centralizes the constants shared by the feature pipeline, the
artifact loaders and the front end (artifact paths, feature order, reference
year and logging settings).

Constants
---------
BASE_DIR : str
    Absolute path to the project `src` parent directory.
DATA_DIR, MODELS_DIR : str
    Paths to data and model artifact folders.
MODEL_FILE, FREQUENCY_MAP_FILE, SCALER_PARAMS_FILE : str
    Paths to the serialized regressor, the model-name frequency map and the
    scaler parameters. Each can be overridden through an environment variable
    of the same name.
FEATURE_ORDER : tuple of str
    Column order the regressor was trained on.
DEFAULT_REFERENCE_YEAR : int
    Year used to derive CarAge unless CAR_AGE_REFERENCE_YEAR is set; must match
    the year used at training time. Read it through `get_reference_year()`.
"""

import os

from src.exceptions import ConfigurationError

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DATA_DIR = os.path.join(BASE_DIR, "data")
MODELS_DIR = os.path.join(BASE_DIR, "models")

MODEL_FILE = os.getenv("MODEL_FILE", os.path.join(MODELS_DIR, "car_price_model.joblib"))
FREQUENCY_MAP_FILE = os.getenv("FREQUENCY_MAP_FILE", os.path.join(DATA_DIR, "freq_map.json"))
SCALER_PARAMS_FILE = os.getenv("SCALER_PARAMS_FILE", os.path.join(MODELS_DIR, "scaler_params.json"))

FEATURE_ORDER = (
    "model",
    "condition",
    "cylinders",
    "fuel",
    "odometer",
    "transmission",
    "drive",
    "CarAge",
)

DEFAULT_REFERENCE_YEAR = 2026
ODOMETER_CAP = 10_000_000
DEFAULT_MODEL_FREQUENCY = 1

CURRENCY_SYMBOL = "$"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_reference_year() -> int:
    """CarAge reference year, overridable through CAR_AGE_REFERENCE_YEAR."""
    value = os.getenv("CAR_AGE_REFERENCE_YEAR", str(DEFAULT_REFERENCE_YEAR))
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"CAR_AGE_REFERENCE_YEAR must be an integer year, got {value!r}") from None
