import json

import pytest

from src.config import FEATURE_ORDER

MEAN = [177.62431826259606, 2.7129042932604515, 5.882453151618399, 0.9710882060961112,
        121739.12073339625, 0.9238169941048865, 1.057431397301239, 17.380767958035616]
STD = [283.53371191795486, 0.7306282533024211, 1.6256224551274014, 0.3256881776561781,
       206713.83456102648, 0.2652907000026549, 0.8860048265932386, 9.566076237447591]


@pytest.fixture
def form():
    return {
        "model": "f-150",
        "condition": 3,
        "cylinders": 6,
        "fuel": 1,
        "odometer": 85000,
        "transmission": 1,
        "drive": 1,
        "year": 2015,
    }


@pytest.fixture
def frequency_map():
    return {"f-150": 200, "civic": 150, "camry": 120}


@pytest.fixture
def scaler_file(tmp_path):
    p = tmp_path / "scaler_params.json"
    p.write_text(json.dumps({"feature_names": list(FEATURE_ORDER), "mean": MEAN, "std": STD}))
    return p


@pytest.fixture
def freq_file(tmp_path, frequency_map):
    p = tmp_path / "freq_map.json"
    p.write_text(json.dumps(frequency_map))
    return p
