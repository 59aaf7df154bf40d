"""
Feature preparation for the used car price regressor.

Turns one raw form submission into the ordered, standard-scaled feature vector
the regressor was trained on:

    [model, condition, cylinders, fuel, odometer, transmission, drive, CarAge]

The categorical `model` name is replaced by its frequency score, the odometer
is capped, CarAge is derived from the model year, and every position is scaled
with the training-time mean/std. All functions here are pure.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from src.config import DEFAULT_MODEL_FREQUENCY, FEATURE_ORDER, ODOMETER_CAP, get_reference_year
from src.exceptions import ConfigurationError, InvalidInputError

NUMERIC_FIELDS = ("condition", "cylinders", "fuel", "odometer", "transmission", "drive", "year")


@dataclass(frozen=True)
class ScalingParams:
    """
    Per-feature mean and standard deviation captured when the regressor was trained.

    Validated on construction: both sequences must have one finite entry per
    feature in `feature_names`, and no std may be zero.
    """
    mean: Tuple[float, ...]
    std: Tuple[float, ...]
    feature_names: Tuple[str, ...] = FEATURE_ORDER

    def __post_init__(self):
        object.__setattr__(self, "feature_names", tuple(self.feature_names))
        object.__setattr__(self, "mean", _as_float_tuple("mean", self.mean))
        object.__setattr__(self, "std", _as_float_tuple("std", self.std))

        if self.feature_names != FEATURE_ORDER:
            raise ConfigurationError(
                f"Scaler feature order {list(self.feature_names)} does not match {list(FEATURE_ORDER)}"
            )
        _check_scaling(self.mean, self.std)


@dataclass(frozen=True)
class RawInput:
    """A single parsed form submission."""
    model: str
    condition: float
    cylinders: float
    fuel: float
    odometer: float
    transmission: float
    drive: float
    year: float


@dataclass(frozen=True)
class FeatureVector:
    """
    Ordered feature values for one submission.

    `raw` holds the values after frequency lookup, odometer cap and CarAge
    derivation; `scaled` holds the standardized values passed to the regressor.
    """
    raw: Tuple[float, ...]
    scaled: Tuple[float, ...]

    def __len__(self):
        return len(self.scaled)

    def raw_value(self, name: str) -> float:
        return self.raw[FEATURE_ORDER.index(name)]

    @property
    def raw_model(self) -> float:
        return self.raw_value("model")

    @property
    def raw_odometer(self) -> float:
        return self.raw_value("odometer")

    @property
    def raw_car_age(self) -> float:
        return self.raw_value("CarAge")

    def as_dict(self) -> Dict[str, float]:
        return dict(zip(FEATURE_ORDER, self.scaled))

    def to_array(self) -> np.ndarray:
        """Scaled values as a float32 array of shape (1, n_features)."""
        return np.asarray([self.scaled], dtype=np.float32)


def _as_float_tuple(name: str, values) -> Tuple[float, ...]:
    try:
        return tuple(float(v) for v in values)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Scaling {name} must be a sequence of numbers: {exc}") from exc


def _check_scaling(mean: Sequence[float], std: Sequence[float]) -> None:
    n = len(FEATURE_ORDER)
    if len(mean) != n or len(std) != n:
        raise ConfigurationError(
            f"Scaling parameters must have {n} entries (got mean={len(mean)}, std={len(std)})"
        )
    for name, m, s in zip(FEATURE_ORDER, mean, std):
        if not (math.isfinite(m) and math.isfinite(s)):
            raise ConfigurationError(f"Non-finite scaling parameter for '{name}'")
        if s == 0:
            raise ConfigurationError(f"Zero standard deviation for '{name}'")


def _parse_number(field: str, value: Any) -> float:
    if value is None:
        raise InvalidInputError(field, value, "missing")
    if isinstance(value, (bool, np.bool_)):
        raise InvalidInputError(field, value)
    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise InvalidInputError(field, value, "missing")
        # float() also accepts digit separators such as "1_000"
        if "_" in value:
            raise InvalidInputError(field, value)
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        raise InvalidInputError(field, value) from None
    if not math.isfinite(number):
        raise InvalidInputError(field, value)
    return number


def normalize_model_name(name: Any) -> str:
    if name is None:
        return ""
    return str(name).lower().strip()


def parse_raw_input(form: Mapping[str, Any]) -> RawInput:
    """
    Parse untyped form values into a RawInput.

    Raises InvalidInputError naming the first field that is missing or does not
    parse as a finite number.
    """
    values = {field: _parse_number(field, form.get(field)) for field in NUMERIC_FIELDS}
    model = form.get("model")
    return RawInput(model="" if model is None else str(model), **values)


def resolve_model_frequency(model_name: Any, frequency_map: Mapping[str, float]) -> float:
    """Frequency score for a model name; unknown names score DEFAULT_MODEL_FREQUENCY."""
    return float(frequency_map.get(normalize_model_name(model_name), DEFAULT_MODEL_FREQUENCY))


def clamp_odometer(odometer: float) -> float:
    return min(odometer, ODOMETER_CAP)


def car_age(year: float, reference_year: Optional[int] = None) -> float:
    if reference_year is None:
        reference_year = get_reference_year()
    return reference_year - year


def standard_scale(values: Sequence[float], mean: Sequence[float], std: Sequence[float]) -> Tuple[float, ...]:
    return tuple((x - m) / s for x, m, s in zip(values, mean, std))


def prepare(
    raw: Union[RawInput, Mapping[str, Any]],
    frequency_map: Mapping[str, float],
    scaling_mean: Sequence[float],
    scaling_std: Sequence[float],
    reference_year: Optional[int] = None,
) -> FeatureVector:
    """
    Build the scaled feature vector for one submission.

    Parameters
    ----------
    raw : RawInput or mapping
        Parsed submission, or raw form values which are parsed first.
    frequency_map : mapping
        Lowercase model name -> frequency score.
    scaling_mean, scaling_std : sequence of float
        Training-time statistics, one per position of FEATURE_ORDER.
    reference_year : int, optional
        Year CarAge is measured from; defaults to `get_reference_year()`.

    Returns
    -------
    FeatureVector
    """
    if not isinstance(raw, RawInput):
        raw = parse_raw_input(raw)
    mean = _as_float_tuple("mean", scaling_mean)
    std = _as_float_tuple("std", scaling_std)
    _check_scaling(mean, std)

    ordered = (
        resolve_model_frequency(raw.model, frequency_map),
        raw.condition,
        raw.cylinders,
        raw.fuel,
        clamp_odometer(raw.odometer),
        raw.transmission,
        raw.drive,
        car_age(raw.year, reference_year),
    )
    return FeatureVector(raw=ordered, scaled=standard_scale(ordered, mean, std))


def model_names(frequency_map: Mapping[str, float]) -> list:
    """Known model names, sorted, for the form's suggestion list."""
    return sorted(frequency_map.keys())


def freeze_frequency_map(frequency_map: Mapping[str, float]) -> Mapping[str, float]:
    return MappingProxyType({normalize_model_name(k): v for k, v in frequency_map.items()})


def build_frequency_map(df: pd.DataFrame, column: str = "model") -> Dict[str, int]:
    """
    Count listings per normalized model name.

    Empty and missing names are dropped.
    """
    if column not in df.columns:
        raise KeyError(f"Column '{column}' not found")
    names = df[column].dropna().astype(str).str.lower().str.strip()
    names = names[names != ""]
    counts = names.value_counts().sort_index()
    return {name: int(count) for name, count in counts.items()}


def prepare_frame(
    df: pd.DataFrame,
    frequency_map: Mapping[str, float],
    scaling: ScalingParams,
    reference_year: Optional[int] = None,
) -> pd.DataFrame:
    """
    Apply the feature preparation to every row of `df`.

    Returns a DataFrame indexed like `df` with columns FEATURE_ORDER holding the
    scaled values.
    """
    if reference_year is None:
        reference_year = get_reference_year()
    parsed = {}
    for field in NUMERIC_FIELDS:
        if field not in df.columns:
            raise InvalidInputError(field, None, "missing")
        parsed[field] = df[field].map(lambda v, f=field: _parse_number(f, v)).astype(float)

    model_col: Optional[pd.Series] = df["model"] if "model" in df.columns else None
    if model_col is None:
        model_freq = pd.Series(float(DEFAULT_MODEL_FREQUENCY), index=df.index)
    else:
        model_freq = model_col.map(lambda name: resolve_model_frequency(name, frequency_map)).astype(float)

    ordered = pd.DataFrame(
        {
            "model": model_freq,
            "condition": parsed["condition"],
            "cylinders": parsed["cylinders"],
            "fuel": parsed["fuel"],
            "odometer": parsed["odometer"].clip(upper=ODOMETER_CAP),
            "transmission": parsed["transmission"],
            "drive": parsed["drive"],
            "CarAge": reference_year - parsed["year"],
        },
        index=df.index,
        columns=list(FEATURE_ORDER),
    )
    return (ordered - np.asarray(scaling.mean)) / np.asarray(scaling.std)
