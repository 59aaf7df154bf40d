"""
Used Car Prices - Prediction Helper

Provides `PricePredictor`, which:
- Holds the regressor, frequency map and scaler parameters loaded at startup.
- Prepares the scaled feature vector for one form submission.
- Runs the regressor on a float32 (1, 8) array and returns the first scalar.

and `format_price()` for display.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, Mapping, Optional, Union

import numpy as np

from src.config import (
    CURRENCY_SYMBOL,
    FREQUENCY_MAP_FILE,
    MODEL_FILE,
    SCALER_PARAMS_FILE,
    get_reference_year,
)
from src.data.load_data import load_frequency_map, load_model, load_scaling_params
from src.exceptions import InferenceFailure
from src.features.build_features import (
    FeatureVector,
    RawInput,
    ScalingParams,
    freeze_frequency_map,
    model_names,
    normalize_model_name,
    parse_raw_input,
    prepare,
)

logger = logging.getLogger(__name__)


class PricePredictor:
    """Feature preparation plus inference for single submissions."""

    def __init__(
        self,
        model,
        frequency_map: Mapping[str, float],
        scaling: ScalingParams,
        reference_year: Optional[int] = None,
    ):
        self.model = model
        self.frequency_map = freeze_frequency_map(frequency_map)
        self.scaling = scaling
        self.reference_year = get_reference_year() if reference_year is None else reference_year

    @classmethod
    def from_files(
        cls,
        model_file=MODEL_FILE,
        frequency_map_file=FREQUENCY_MAP_FILE,
        scaler_params_file=SCALER_PARAMS_FILE,
        reference_year: Optional[int] = None,
    ) -> "PricePredictor":
        """
        Load all artifacts. Raises ConfigurationError if any of them is unusable.
        """
        scaling = load_scaling_params(scaler_params_file)
        frequency_map = load_frequency_map(frequency_map_file)
        model = load_model(model_file)
        predictor = cls(model, frequency_map, scaling, reference_year=reference_year)
        logger.info("Predictor ready (features=%s, reference year=%d)",
                    list(scaling.feature_names), predictor.reference_year)
        return predictor

    def model_names(self):
        return model_names(self.frequency_map)

    def prepare(self, form: Union[RawInput, Mapping[str, Any]]) -> FeatureVector:
        raw = form if isinstance(form, RawInput) else parse_raw_input(form)
        vector = prepare(
            raw,
            self.frequency_map,
            self.scaling.mean,
            self.scaling.std,
            reference_year=self.reference_year,
        )
        if normalize_model_name(raw.model) not in self.frequency_map:
            logger.warning("Unknown model name %r, using default frequency", raw.model)
        logger.debug("Raw values: %s", list(vector.raw))
        logger.debug("Scaled values: %s", list(vector.scaled))
        return vector

    def predict_vector(self, vector: FeatureVector) -> float:
        """
        Run the regressor on a prepared vector.

        Raises
        ------
        InferenceFailure
            If the regressor raises, returns nothing, or returns a non-finite value.
        """
        try:
            output = np.asarray(self.model.predict(vector.to_array()))
        except Exception as exc:
            logger.exception("Inference error")
            raise InferenceFailure(f"Model failed to predict: {exc}") from exc

        if output.size == 0:
            raise InferenceFailure("Model returned an empty prediction")
        value = float(output.ravel()[0])
        if not math.isfinite(value):
            raise InferenceFailure(f"Model returned a non-finite prediction: {value}")

        logger.info("Final prediction: %.2f", value)
        return value

    def predict_price(self, form: Union[RawInput, Mapping[str, Any]]) -> float:
        return self.predict_vector(self.prepare(form))


def format_price(value: float, currency: Optional[str] = None) -> str:
    """Whole-unit price with thousands separators, e.g. '$12,346'."""
    symbol = CURRENCY_SYMBOL if currency is None else currency
    return f"{symbol}{value:,.0f}"


def describe(vector: FeatureVector) -> Dict[str, Dict[str, float]]:
    """Raw and scaled values keyed by feature name."""
    return {
        "raw": dict(zip(vector.as_dict().keys(), vector.raw)),
        "scaled": vector.as_dict(),
    }


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)
    example = {
        "model": "f-150",
        "condition": 3,
        "cylinders": 6,
        "fuel": 1,
        "odometer": 85000,
        "transmission": 1,
        "drive": 1,
        "year": 2015,
    }
    predictor = PricePredictor.from_files()
    print("Predicted price:", format_price(predictor.predict_price(example)))
