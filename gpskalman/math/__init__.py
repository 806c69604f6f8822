"""
Mathematical utilities for geographic track calculations.
"""

from .utils import (
    wrap_degrees,
    calculate_bearing,
    angular_distance,
    haversine_distance,
    calculate_mph,
)
from .constants import *

__all__ = [
    "wrap_degrees",
    "calculate_bearing",
    "angular_distance",
    "haversine_distance",
    "calculate_mph",
]
