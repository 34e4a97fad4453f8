"""Hourly bike rental demand: features, models and the Kaggle submission."""

__version__ = "0.1.0"
