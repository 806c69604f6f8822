"""
Linear Kalman filter over dimension-checked matrices.
"""

import logging
from typing import Optional, Dict, Any

import numpy as np

from ..errors import DimensionError, SingularMatrixError
from ..linalg import Matrix, invert

logger = logging.getLogger(__name__)


class KalmanFilter:
    """
    Generic linear Kalman filter.

    The filter owns all of its matrices. Models are configured by writing
    into them after construction (see MotionModelBuilder); the shapes are
    fixed by state_dim and obs_dim.

    Matrices:
        state_transition (F):              state_dim x state_dim
        observation_model (H):             obs_dim x state_dim
        process_noise_covariance (Q):      state_dim x state_dim
        observation_noise_covariance (R):  obs_dim x obs_dim
        state_estimate (x):                state_dim x 1
        estimate_covariance (P):           state_dim x state_dim
        observation (z):                   obs_dim x 1
    """

    def __init__(self, state_dim: int, obs_dim: int):
        """
        Allocate a filter with zeroed model matrices.

        Args:
            state_dim: Number of state variables
            obs_dim: Number of observed variables
        """
        if state_dim <= 0 or obs_dim <= 0:
            raise DimensionError(f"Filter dimensions must be positive, got state={state_dim}, obs={obs_dim}")

        self.state_dim = state_dim
        self.obs_dim = obs_dim

        # Model
        self.state_transition = Matrix.identity(state_dim)
        self.observation_model = Matrix(obs_dim, state_dim)
        self.process_noise_covariance = Matrix(state_dim, state_dim)
        self.observation_noise_covariance = Matrix(obs_dim, obs_dim)

        # Latest measurement
        self.observation = Matrix(obs_dim, 1)

        # Estimate
        self.state_estimate = Matrix(state_dim, 1)
        self.estimate_covariance = Matrix.identity(state_dim)

        # Statistics
        self.prediction_count = 0
        self.update_count = 0

    def predict(self):
        """
        Prediction step of the Kalman filter.

        x = F * x
        P = F * P * F^T + Q
        """
        F = self.state_transition

        self.state_estimate = F @ self.state_estimate
        self.estimate_covariance = F @ self.estimate_covariance @ F.T + self.process_noise_covariance

        self.prediction_count += 1

    def update(self, observation: Optional[Matrix] = None):
        """
        Predict, then correct with an observation.

        Args:
            observation: obs_dim x 1 measurement. When omitted, the
                matrix already stored in self.observation is used.

        Raises:
            DimensionError: observation has the wrong shape
            SingularMatrixError: innovation covariance cannot be inverted.
                The filter is left exactly as it was before the call.
        """
        if observation is not None:
            if observation.shape != (self.obs_dim, 1):
                raise DimensionError(
                    f"Observation must be {self.obs_dim}x1, got {observation.rows}x{observation.cols}"
                )
            self.observation = observation.copy()

        saved_state = self.state_estimate
        saved_covariance = self.estimate_covariance
        saved_predictions = self.prediction_count

        self.predict()

        H = self.observation_model
        P = self.estimate_covariance

        # Innovation (measurement residual)
        innovation = self.observation - H @ self.state_estimate

        # Innovation covariance
        S = H @ P @ H.T + self.observation_noise_covariance

        # Kalman gain
        try:
            K = P @ H.T @ invert(S)
        except SingularMatrixError:
            self.state_estimate = saved_state
            self.estimate_covariance = saved_covariance
            self.prediction_count = saved_predictions
            raise

        # Update state and covariance
        self.state_estimate = self.state_estimate + K @ innovation
        I = Matrix.identity(self.state_dim)
        self.estimate_covariance = ((I - K @ H) @ P).symmetrize()

        self.update_count += 1

        logger.debug("Update %d: innovation=%s", self.update_count, innovation.to_list())

    def reset(self, initial_covariance: Optional[Matrix] = None):
        """
        Zero the state estimate and restore the estimate covariance.

        Args:
            initial_covariance: Covariance to restart from (identity if None)
        """
        self.state_estimate = Matrix(self.state_dim, 1)
        if initial_covariance is None:
            self.estimate_covariance = Matrix.identity(self.state_dim)
        else:
            if initial_covariance.shape != (self.state_dim, self.state_dim):
                raise DimensionError(
                    f"Covariance must be {self.state_dim}x{self.state_dim}, "
                    f"got {initial_covariance.rows}x{initial_covariance.cols}"
                )
            self.estimate_covariance = initial_covariance.copy()

        self.prediction_count = 0
        self.update_count = 0

    def get_uncertainty(self) -> np.ndarray:
        """Get current state uncertainty (square root of covariance diagonal)."""
        diagonal = np.diag(self.estimate_covariance.to_numpy())
        return np.sqrt(np.clip(diagonal, 0.0, None))

    def get_statistics(self) -> Dict[str, Any]:
        """Get filter statistics."""
        return {
            'predictions': self.prediction_count,
            'updates': self.update_count,
            'state_uncertainty': self.get_uncertainty().tolist()
        }
