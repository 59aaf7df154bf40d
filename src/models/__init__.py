"""
Model utilities package.

Typical entrypoint:

- src.models.predict.PricePredictor.from_files() : load artifacts once
- PricePredictor.predict_price(form)             : predicted price for one submission
"""
