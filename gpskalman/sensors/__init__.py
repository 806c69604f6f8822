"""
GPS observation handling: track smoothing and input parsing.
"""

from .gps import GPSTrack, GPSObservation, DerivedKinematics
from .reader import LatLonReader, read_lat_long

__all__ = ["GPSTrack", "GPSObservation", "DerivedKinematics", "LatLonReader", "read_lat_long"]
