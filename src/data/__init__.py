"""
Data package for loading the static artifacts used at prediction time.

This package exposes loaders for the model-name frequency map, the scaler
parameters and the serialized regressor.
"""
