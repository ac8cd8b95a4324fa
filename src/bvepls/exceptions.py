"""
Exception hierarchy for backward variable elimination runs.
"""


class BVEError(Exception):
    """Base exception for all elimination errors."""


class InvalidPartitionError(BVEError, ValueError):
    """Calibration/holdout split is empty or misses a class."""


class DegenerateWorkingMatrixError(BVEError, ValueError):
    """Too few variables are left to fit a latent-variable model."""


class ModelFitError(BVEError, RuntimeError):
    """PLS or discriminant fitting failed."""
