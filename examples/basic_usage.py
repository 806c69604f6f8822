#!/usr/bin/env python3
"""
Basic usage example of the GPS track filter.

This example feeds a simulated, noisy GPS track to a GPSTrack and prints
the smoothed position, bearing and speed.
"""

import sys
import os
import numpy as np

# Add package to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from gpskalman import GPSTrack, GPSObservation


def simulate_track(duration=120, rng=None):
    """
    Simulate a vehicle driving north-east at constant speed.

    Fixes arrive at irregular intervals between 0.5 and 2 seconds.

    Args:
        duration: Simulation duration in seconds
        rng: numpy random Generator

    Yields:
        (elapsed_time, GPSObservation) tuples
    """
    rng = rng or np.random.default_rng(0)

    # Starting position (Philadelphia)
    start_lat = 40.0
    start_lon = -75.0

    # Vehicle motion parameters (degrees per second)
    vel_lat = 0.0001
    vel_lon = 0.0001

    gps_noise = 0.00001  # degrees (~1m)

    t = 0.0
    while t < duration:
        dt = float(rng.uniform(0.5, 2.0))
        t += dt

        lat = start_lat + vel_lat * t + rng.normal(0, gps_noise)
        lon = start_lon + vel_lon * t + rng.normal(0, gps_noise)

        yield t, GPSObservation(lat=lat, lon=lon, seconds_since_last=dt)


def main():
    """Main example function."""
    print("GPS Kalman Filter - Basic Usage Example")
    print("=" * 50)

    track = GPSTrack(noise=10.0)

    last_print_time = 0
    print_interval = 15.0  # Print status every 15 seconds

    for elapsed, observation in simulate_track():
        track.observe_observation(observation)

        if elapsed - last_print_time >= print_interval:
            print(f"Time: {elapsed:.1f}s")
            print(f"  Raw:      [{observation.lat:.6f}, {observation.lon:.6f}]")
            print(f"  Filtered: {track.kinematics()}")
            print()
            last_print_time = elapsed

    print("Simulation completed!")

    stats = track.get_statistics()
    print("\n=== Final Statistics ===")
    print(f"Observations: {stats['observations']}")
    print(f"Skipped:      {stats['skipped']}")
    print(f"Bearing:      {track.bearing_degrees():.1f} deg")
    print(f"Speed:        {track.speed_mph():.1f} mph")


if __name__ == "__main__":
    main()
