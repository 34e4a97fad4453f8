class BikeDemandError(Exception):
    """Base class for every failure raised by the pipeline."""


class DataIntegrityError(BikeDemandError, ValueError):
    """Input rows or columns are malformed (bad timestamps, counts < 1, missing columns)."""


class ConfigurationError(BikeDemandError, ValueError):
    """A requested column, strategy or split setting cannot be honoured."""


class ShapeMismatchError(BikeDemandError, ValueError):
    """Predictions and actual values differ in length."""
