"""
GPS track smoothing on top of the constant velocity Kalman filter.
"""

import logging
import math
from dataclasses import dataclass
from typing import Tuple, Dict, Any

from ..errors import InvalidInputError, SingularMatrixError
from ..kalman import MotionModelBuilder
from ..linalg import Matrix
from ..math.constants import (
    MAX_LATITUDE,
    MAX_LONGITUDE,
    POSITION_SCALE,
    VELOCITY_SCALE,
    DEFAULT_NOISE_MULTIPLIER,
)
from ..math.utils import calculate_bearing, calculate_mph

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GPSObservation:
    """One position fix and the time elapsed since the previous one."""

    lat: float                 # degrees
    lon: float                 # degrees
    seconds_since_last: float  # seconds, > 0

    def validate(self):
        """Raise InvalidInputError unless the fix can be fed to the filter."""
        values = (self.lat, self.lon, self.seconds_since_last)
        try:
            finite = all(math.isfinite(v) for v in values)
        except TypeError as e:
            raise InvalidInputError(f"Observation values must be numbers: {values}") from e
        if not finite:
            raise InvalidInputError(f"Observation contains non-finite values: {values}")
        if self.seconds_since_last <= 0:
            raise InvalidInputError(
                f"Seconds since last observation must be positive, got {self.seconds_since_last}"
            )
        if not -MAX_LATITUDE <= self.lat <= MAX_LATITUDE:
            raise InvalidInputError(f"Latitude {self.lat} outside [-90, 90]")
        if not -MAX_LONGITUDE <= self.lon <= MAX_LONGITUDE:
            raise InvalidInputError(f"Longitude {self.lon} outside [-180, 180]")

    @property
    def is_valid(self) -> bool:
        try:
            self.validate()
        except InvalidInputError:
            return False
        return True


@dataclass(frozen=True)
class DerivedKinematics:
    """Position, velocity, bearing and speed read from the current estimate."""

    lat: float
    lon: float
    velocity_lat: float   # degrees per second
    velocity_lon: float   # degrees per second
    bearing_degrees: float
    speed_mph: float

    def __str__(self) -> str:
        return (
            f"DerivedKinematics(pos=[{self.lat:.6f}, {self.lon:.6f}], "
            f"vel=[{self.velocity_lat:.3e}, {self.velocity_lon:.3e}], "
            f"bearing={self.bearing_degrees:.1f}, "
            f"mph={self.speed_mph:.2f})"
        )


class GPSTrack:
    """
    Smooths a sequence of GPS fixes belonging to one moving object.

    A track owns its filter exclusively and is not thread safe; callers
    that share a track between threads must serialize access.
    """

    def __init__(self, noise: float = DEFAULT_NOISE_MULTIPLIER):
        """
        Initialize the track.

        Args:
            noise: Observation noise multiplier; larger values trust the
                sensor less and smooth more
        """
        self.noise = noise
        self.filter = MotionModelBuilder.build(noise)

        # Statistics
        self.observation_count = 0
        self.skipped_count = 0

    def observe(self, lat: float, lon: float, seconds_since_last: float,
                skip_singular: bool = False) -> bool:
        """
        Feed one GPS fix to the filter.

        Args:
            lat: Latitude in degrees
            lon: Longitude in degrees
            seconds_since_last: Time since the previous fix (> 0)
            skip_singular: If True, an observation whose innovation
                covariance cannot be inverted is dropped (state unchanged)
                instead of raising SingularMatrixError

        Returns:
            True if the observation was applied, False if it was skipped

        Raises:
            InvalidInputError: Fix outside the valid range; state unchanged
            SingularMatrixError: Update failed and skip_singular is False
        """
        GPSObservation(lat, lon, seconds_since_last).validate()

        saved_transition = self.filter.state_transition.copy()
        MotionModelBuilder.set_time_step(self.filter, seconds_since_last)

        observation = Matrix.column([lat * POSITION_SCALE, lon * POSITION_SCALE])

        try:
            self.filter.update(observation)
        except SingularMatrixError:
            self.filter.state_transition = saved_transition
            if not skip_singular:
                raise
            self.skipped_count += 1
            logger.warning("Skipping observation (%.6f, %.6f): singular innovation covariance", lat, lon)
            return False

        self.observation_count += 1
        logger.debug("Observation %d: (%.6f, %.6f) after %.3fs",
                     self.observation_count, lat, lon, seconds_since_last)
        return True

    def observe_observation(self, observation: GPSObservation, skip_singular: bool = False) -> bool:
        """Feed a GPSObservation; see observe()."""
        return self.observe(observation.lat, observation.lon, observation.seconds_since_last,
                            skip_singular=skip_singular)

    def current_position(self) -> Tuple[float, float]:
        """Get smoothed (lat, lon) in degrees."""
        x = self.filter.state_estimate
        return (x[0, 0] / POSITION_SCALE, x[1, 0] / POSITION_SCALE)

    def current_velocity(self) -> Tuple[float, float]:
        """Get smoothed (delta_lat, delta_lon) in degrees per second."""
        x = self.filter.state_estimate
        return (x[2, 0] / VELOCITY_SCALE, x[3, 0] / VELOCITY_SCALE)

    def bearing_degrees(self) -> float:
        """
        Compass direction of travel in degrees clockwise from north, [0, 360).

        This is the initial great-circle bearing from the position one second
        ago (current position minus velocity) to the current position.
        """
        lat, lon = self.current_position()
        delta_lat, delta_lon = self.current_velocity()
        return calculate_bearing(lat - delta_lat, lon - delta_lon, lat, lon)

    def speed_mph(self) -> float:
        """
        Speed in miles per hour.

        The velocity is taken as one second of travel, independent of the
        spacing between the observations that produced it.
        """
        lat, lon = self.current_position()
        delta_lat, delta_lon = self.current_velocity()
        return calculate_mph(lat, lon, delta_lat, delta_lon)

    def kinematics(self) -> DerivedKinematics:
        """Snapshot of everything derived from the current estimate."""
        lat, lon = self.current_position()
        delta_lat, delta_lon = self.current_velocity()
        return DerivedKinematics(
            lat=lat,
            lon=lon,
            velocity_lat=delta_lat,
            velocity_lon=delta_lon,
            bearing_degrees=calculate_bearing(lat - delta_lat, lon - delta_lon, lat, lon),
            speed_mph=calculate_mph(lat, lon, delta_lat, delta_lon),
        )

    def reset(self):
        """Forget all observations and start from a totally unknown position."""
        self.filter = MotionModelBuilder.build(self.noise)
        self.observation_count = 0
        self.skipped_count = 0

    def get_statistics(self) -> Dict[str, Any]:
        """Get track statistics."""
        stats = {
            'observations': self.observation_count,
            'skipped': self.skipped_count,
            'noise': self.noise,
        }
        stats.update(self.filter.get_statistics())
        return stats
