"""
Motion model configuration for the Kalman filter.
"""

import logging

from .filter import KalmanFilter
from ..errors import InvalidInputError
from ..linalg import Matrix
from ..math.constants import (
    POSITION_NOISE,
    VELOCITY_NOISE,
    UNIT_SCALE,
    INITIAL_UNCERTAINTY,
    DEFAULT_NOISE_MULTIPLIER,
    DEFAULT_SECONDS_PER_TIMESTEP,
)

logger = logging.getLogger(__name__)


class MotionModelBuilder:
    """
    Constant velocity motion model in two dimensions.

    State: [x, y, vx, vy]
    Observation: [x, y]

    Positions are in thousandths of a degree and velocities in thousandths
    of a position unit per second, so one velocity unit moves the position
    by one unit after a thousand seconds. Treating lat/lon as rectilinear
    axes is wrong near the poles, but the error is small next to sensor
    noise and avoids any coordinate conversion.
    """

    STATE_DIM = 4
    OBS_DIM = 2

    POSITION_NOISE = POSITION_NOISE
    VELOCITY_NOISE = VELOCITY_NOISE
    UNIT_SCALE = UNIT_SCALE
    INITIAL_UNCERTAINTY = INITIAL_UNCERTAINTY

    @classmethod
    def build(cls, observation_noise_multiplier: float = DEFAULT_NOISE_MULTIPLIER) -> KalmanFilter:
        """
        Create a filter configured for 2-D constant velocity tracking.

        Args:
            observation_noise_multiplier: Scale of sensor noise relative to
                the position process noise (> 0)

        Returns:
            Configured KalmanFilter
        """
        kf = KalmanFilter(cls.STATE_DIM, cls.OBS_DIM)

        kf.state_transition.set_identity()
        cls.set_time_step(kf, DEFAULT_SECONDS_PER_TIMESTEP)

        # We observe (x, y) in each time step
        kf.observation_model.set(1.0, 0.0, 0.0, 0.0,
                                 0.0, 1.0, 0.0, 0.0)

        cls.configure(kf, observation_noise_multiplier)

        # The start position is totally unknown
        kf.reset(cls.initial_covariance())

        logger.debug("Built constant velocity model, noise multiplier %g", observation_noise_multiplier)
        return kf

    @classmethod
    def configure(cls, kf: KalmanFilter, observation_noise_multiplier: float):
        """
        Set process and observation noise.

        Args:
            kf: Filter built by this class
            observation_noise_multiplier: Scale of sensor noise (> 0)
        """
        if not observation_noise_multiplier > 0:
            raise InvalidInputError(
                f"Observation noise multiplier must be positive, got {observation_noise_multiplier}"
            )

        pos = cls.POSITION_NOISE
        vel = cls.VELOCITY_NOISE

        # Noise in the world; velocity dominates so the filter adapts quickly
        kf.process_noise_covariance.set(pos, 0.0, 0.0, 0.0,
                                        0.0, pos, 0.0, 0.0,
                                        0.0, 0.0, vel, 0.0,
                                        0.0, 0.0, 0.0, vel)

        # Noise in our observation
        kf.observation_noise_covariance.set(pos * observation_noise_multiplier, 0.0,
                                            0.0, pos * observation_noise_multiplier)

    @classmethod
    def set_time_step(cls, kf: KalmanFilter, seconds: float):
        """
        Re-derive the velocity to position coupling for an elapsed time.

        Must be called before every update, since the model is only linear
        within a single step.

        Args:
            kf: Filter built by this class
            seconds: Time since the previous observation (>= 0)
        """
        if not seconds >= 0:
            raise InvalidInputError(f"Time step must be non-negative, got {seconds}")

        kf.state_transition[0, 2] = cls.UNIT_SCALE * seconds
        kf.state_transition[1, 3] = cls.UNIT_SCALE * seconds

    @classmethod
    def initial_covariance(cls) -> Matrix:
        """Very large diagonal covariance so the first fix dominates the prior."""
        return Matrix.identity(cls.STATE_DIM).scale_in_place(cls.INITIAL_UNCERTAINTY)
