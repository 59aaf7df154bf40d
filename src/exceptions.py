"""
Error types raised by the price predictor.

ConfigurationError is fatal at startup, the other two are scoped to a single
submission and leave the predictor ready for the next one.
"""


class PricePredictorError(Exception):
    """Base class for all predictor errors."""


class ConfigurationError(PricePredictorError):
    """Static data (model, frequency map, scaler parameters) is missing or malformed."""


class InvalidInputError(PricePredictorError):
    """A submitted form field is missing or not a finite number."""

    def __init__(self, field: str, value=None, reason: str = "must be a finite number"):
        self.field = field
        self.value = value
        super().__init__(f"Invalid value for '{field}': {value!r} ({reason})")


class InferenceFailure(PricePredictorError):
    """The regressor rejected the feature vector or failed internally."""
