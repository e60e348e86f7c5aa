"""Estimator, validator and countdown timer."""
