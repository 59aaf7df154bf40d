"""
Build data/freq_map.json from a listings CSV.

Usage (from project root)
-------------------------
python -m scripts.build_frequency_map vehicles.csv
python -m scripts.build_frequency_map vehicles.csv --column model --out data/freq_map.json
"""
import argparse
import json
import logging
from pathlib import Path

import pandas as pd

from src.config import FREQUENCY_MAP_FILE, LOG_FORMAT, LOG_LEVEL
from src.features.build_features import build_frequency_map

logger = logging.getLogger(__name__)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Count listings per vehicle model name.")
    parser.add_argument("csv", help="Listings CSV with a model column")
    parser.add_argument("--column", default="model")
    parser.add_argument("--out", default=FREQUENCY_MAP_FILE)
    args = parser.parse_args(argv)

    logger.info("Loading listings from %s", args.csv)
    df = pd.read_csv(args.csv, usecols=[args.column])
    freq_map = build_frequency_map(df, column=args.column)

    out = Path(args.out)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(json.dumps(freq_map, indent=2, sort_keys=True), encoding="utf-8")
    logger.info("Saved %d model names to %s", len(freq_map), out)
    return freq_map


if __name__ == "__main__":
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
    main()
