"""
Mathematical and physical constants for GPS track filtering.
"""

import math

# Mathematical constants
PI = math.pi

# Earth parameters
EARTH_RADIUS_MILES = 3963.1676  # Mean Earth radius in statute miles
SECONDS_PER_HOUR = 3600.0

# Geographic limits (degrees)
MAX_LATITUDE = 90.0
MAX_LONGITUDE = 180.0

# Internal filter units.
# Positions are thousandths of a degree; velocities are thousandths of a
# position unit per second.
POSITION_SCALE = 1000.0
VELOCITY_SCALE = 1000.0 * 1000.0
UNIT_SCALE = 0.001  # Position change per velocity unit per second

# Default noise parameters
POSITION_NOISE = 0.000001  # Position process/observation noise (units^2)
VELOCITY_NOISE = 1.0       # Velocity process noise (units^2)
DEFAULT_NOISE_MULTIPLIER = 1.0

# Kalman filter parameters
INITIAL_UNCERTAINTY = 1000.0 * 1000.0 * 1000.0 * 1000.0  # Unknown start position
DEFAULT_SECONDS_PER_TIMESTEP = 1.0

# Relative pivot threshold for matrix inversion
SINGULARITY_EPSILON = 1e-12
