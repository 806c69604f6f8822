"""
Linear Kalman filter and motion model configuration.
"""

from .filter import KalmanFilter
from .models import MotionModelBuilder

__all__ = ["KalmanFilter", "MotionModelBuilder"]
