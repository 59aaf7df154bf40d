"""
Feature preparation: raw form values to the scaled vector the regressor expects.
"""
