"""
Kalman filtering of GPS tracks.

This package provides:
- A dimension-checked matrix type and inversion routines
- A generic linear Kalman filter
- A 2-D constant velocity model for latitude/longitude tracks
- Bearing and speed derived from the smoothed estimate
"""

__version__ = "1.0.0"

from .errors import GPSKalmanError, DimensionError, SingularMatrixError, InvalidInputError, ConfigError
from .linalg import Matrix, invert
from .kalman import KalmanFilter, MotionModelBuilder
from .sensors import GPSTrack, GPSObservation, DerivedKinematics, LatLonReader, read_lat_long

__all__ = [
    "GPSKalmanError",
    "DimensionError",
    "SingularMatrixError",
    "InvalidInputError",
    "ConfigError",
    "Matrix",
    "invert",
    "KalmanFilter",
    "MotionModelBuilder",
    "GPSTrack",
    "GPSObservation",
    "DerivedKinematics",
    "LatLonReader",
    "read_lat_long",
]
