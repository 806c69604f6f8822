"""
Spherical trigonometry helpers for GPS tracks.

See http://www.movable-type.co.uk/scripts/latlong.html for the formulas.
"""

import math

from .constants import EARTH_RADIUS_MILES, SECONDS_PER_HOUR


def wrap_degrees(angle):
    """
    Wrap angle to [0, 360) range.

    Args:
        angle (float): Angle in degrees, any sign

    Returns:
        float: Wrapped angle in [0, 360)
    """
    wrapped = angle % 360.0
    # A tiny negative input rounds up to exactly 360.0
    if wrapped >= 360.0:
        wrapped = 0.0
    return wrapped


def calculate_bearing(lat1, lon1, lat2, lon2):
    """
    Calculate the initial great-circle bearing between two GPS coordinates.

    Args:
        lat1, lon1: Starting latitude and longitude (degrees)
        lat2, lon2: Ending latitude and longitude (degrees)

    Returns:
        float: Bearing in degrees clockwise from true north, [0, 360)
    """
    # Convert to radians
    lat1, lon1, lat2, lon2 = map(math.radians, [lat1, lon1, lat2, lon2])

    dlon = lon2 - lon1

    y = math.sin(dlon) * math.cos(lat2)
    x = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(dlon)

    bearing = math.degrees(math.atan2(y, x))

    return wrap_degrees(bearing)


def angular_distance(lat1, lon1, lat2, lon2):
    """
    Great-circle angle between two points using the haversine formula.

    Args:
        lat1, lon1: Latitude and longitude of first point (degrees)
        lat2, lon2: Latitude and longitude of second point (degrees)

    Returns:
        float: Central angle in radians
    """
    lat1, lon1, lat2, lon2 = map(math.radians, [lat1, lon1, lat2, lon2])

    sin_half_dlat = math.sin((lat2 - lat1) / 2.0)
    sin_half_dlon = math.sin((lon2 - lon1) / 2.0)
    a = sin_half_dlat**2 + math.cos(lat1) * math.cos(lat2) * sin_half_dlon**2

    # Guard against a creeping just past 1.0 for antipodal points
    a = min(max(a, 0.0), 1.0)

    return 2.0 * math.atan2(math.sqrt(a), math.sqrt(1.0 - a))


def haversine_distance(lat1, lon1, lat2, lon2):
    """
    Calculate the great circle distance between two points on Earth.

    Args:
        lat1, lon1: Latitude and longitude of first point (degrees)
        lat2, lon2: Latitude and longitude of second point (degrees)

    Returns:
        float: Distance in miles
    """
    return angular_distance(lat1, lon1, lat2, lon2) * EARTH_RADIUS_MILES


def calculate_mph(lat, lon, delta_lat, delta_lon):
    """
    Convert a per-second displacement into miles per hour.

    The displacement (delta_lat, delta_lon) is treated as exactly one
    second of travel ending at (lat, lon), regardless of how much time
    actually separated the observations that produced it.

    Args:
        lat, lon: Current position (degrees)
        delta_lat, delta_lon: Displacement per second (degrees)

    Returns:
        float: Speed in miles per hour, >= 0
    """
    miles_per_second = haversine_distance(lat - delta_lat, lon - delta_lon, lat, lon)
    return miles_per_second * SECONDS_PER_HOUR
