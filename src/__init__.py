"""
src package initializer.

This package contains the project source code for artifact loading, feature
preparation and price prediction for the used car price predictor.

Modules
-------
- config: Central configuration and path constants.
- exceptions: Error types shared across the package.
- data: Loaders for the model, frequency map and scaler parameters.
- features: Feature preparation pipeline.
- models: Prediction helper.
"""
