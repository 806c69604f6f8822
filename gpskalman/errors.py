"""
Exception types raised by the GPS Kalman filter.
"""

import numpy as np


class GPSKalmanError(Exception):
    """Base class for all gpskalman errors."""


class DimensionError(GPSKalmanError, ValueError):
    """Matrix shapes are incompatible with the requested operation."""


class SingularMatrixError(GPSKalmanError, np.linalg.LinAlgError):
    """A matrix that must be inverted is numerically singular."""


class InvalidInputError(GPSKalmanError, ValueError):
    """An observation or model parameter is outside its valid range."""


class ConfigError(GPSKalmanError):
    """Configuration file could not be read or parsed."""
