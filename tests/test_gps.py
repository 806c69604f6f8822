#!/usr/bin/env python3
"""
Unit tests for GPS track smoothing, geodesy helpers and input parsing.
"""

import io
import math
import unittest
import numpy as np
import sys
import os

# Add package to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from gpskalman.errors import InvalidInputError, SingularMatrixError
from gpskalman.linalg import Matrix
from gpskalman.math.utils import (
    wrap_degrees,
    calculate_bearing,
    haversine_distance,
    calculate_mph,
)
from gpskalman.sensors import GPSTrack, GPSObservation, DerivedKinematics, LatLonReader, read_lat_long


def bearing_error(bearing, expected):
    """Smallest angle between two compass bearings."""
    diff = abs(bearing - expected) % 360.0
    return min(diff, 360.0 - diff)


class TestGeodesy(unittest.TestCase):
    """Test bearing and distance helpers."""

    def test_wrap_degrees(self):
        """Test wrapping into [0, 360)."""
        self.assertAlmostEqual(wrap_degrees(-90.0), 270.0)
        self.assertAlmostEqual(wrap_degrees(725.0), 5.0)
        self.assertEqual(wrap_degrees(360.0), 0.0)
        self.assertEqual(wrap_degrees(-720.0), 0.0)

        tiny = wrap_degrees(-1e-20)
        self.assertGreaterEqual(tiny, 0.0)
        self.assertLess(tiny, 360.0)

    def test_cardinal_bearings(self):
        """Test north, east, south and west."""
        lat, lon = 40.0, -75.0

        self.assertAlmostEqual(calculate_bearing(lat, lon, lat + 0.001, lon), 0.0)
        self.assertAlmostEqual(calculate_bearing(lat, lon, lat, lon + 0.001), 90.0, delta=0.01)
        self.assertAlmostEqual(calculate_bearing(lat, lon, lat - 0.001, lon), 180.0)
        self.assertAlmostEqual(calculate_bearing(lat, lon, lat, lon - 0.001), 270.0, delta=0.01)

    def test_diagonal_bearing(self):
        """Test a north-east bearing at the equator."""
        self.assertAlmostEqual(calculate_bearing(0.0, 0.0, 0.001, 0.001), 45.0, delta=0.01)

    def test_haversine_distance(self):
        """Test one degree of latitude."""
        expected = 3963.1676 * math.pi / 180.0

        self.assertAlmostEqual(haversine_distance(10.0, 20.0, 11.0, 20.0), expected, places=6)
        self.assertEqual(haversine_distance(10.0, 20.0, 10.0, 20.0), 0.0)

    def test_mph_one_arc_minute_per_second(self):
        """Test one minute of latitude (about a nautical mile) per second."""
        mph = calculate_mph(40.0, -75.0, 1.0 / 60.0, 0.0)

        self.assertAlmostEqual(mph, 1.1508 * 3600.0, delta=0.01 * 1.1508 * 3600.0)

    def test_mph_stationary(self):
        """Test zero velocity."""
        self.assertEqual(calculate_mph(40.0, -75.0, 0.0, 0.0), 0.0)


class TestGPSObservation(unittest.TestCase):
    """Test GPSObservation validation."""

    def test_valid(self):
        self.assertTrue(GPSObservation(40.0, -75.0, 1.0).is_valid)
        self.assertTrue(GPSObservation(-90.0, 180.0, 0.01).is_valid)

    def test_invalid(self):
        """Test every rejected field."""
        for lat, lon, dt in [(40.0, -75.0, 0.0),
                             (40.0, -75.0, -1.0),
                             (90.5, -75.0, 1.0),
                             (40.0, -180.5, 1.0),
                             (float('nan'), -75.0, 1.0),
                             (40.0, -75.0, float('inf')),
                             ("40.0", -75.0, 1.0),
                             (40.0, None, 1.0)]:
            observation = GPSObservation(lat, lon, dt)
            self.assertFalse(observation.is_valid)
            with self.assertRaises(InvalidInputError):
                observation.validate()


class TestGPSTrack(unittest.TestCase):
    """Test GPSTrack."""

    def setUp(self):
        self.track = GPSTrack(noise=1.0)

    def test_rejects_invalid_input(self):
        """Test that invalid fixes leave the state unchanged."""
        self.track.observe(40.0, -75.0, 1.0)
        before = self.track.filter.state_estimate.to_numpy()

        for args in [(40.0, -75.0, 0.0), (91.0, -75.0, 1.0), (40.0, 181.0, 1.0),
                     ("40.0", -75.0, 1.0)]:
            with self.assertRaises(InvalidInputError):
                self.track.observe(*args)

        np.testing.assert_array_equal(self.track.filter.state_estimate.to_numpy(), before)
        self.assertEqual(self.track.observation_count, 1)

    def test_first_observation(self):
        """Test that the first fix is adopted almost exactly."""
        self.track.observe(40.0, -75.0, 1.0)

        lat, lon = self.track.current_position()
        self.assertAlmostEqual(lat, 40.0, places=6)
        self.assertAlmostEqual(lon, -75.0, places=6)

    def test_three_point_scenario(self):
        """Test a short track moving due north."""
        for lat in (40.0000, 40.0001, 40.0002):
            self.assertTrue(self.track.observe(lat, -75.0, 1.0))

        lat, lon = self.track.current_position()
        self.assertAlmostEqual(lat, 40.0002, delta=1e-5)
        self.assertAlmostEqual(lon, -75.0, delta=1e-5)
        self.assertLess(bearing_error(self.track.bearing_degrees(), 0.0), 5.0)

    def test_constant_velocity_convergence(self):
        """Test velocity convergence on a noiseless northbound track."""
        for k in range(100):
            self.track.observe(40.0 + 0.0001 * k, -75.0, 1.0)

        d_lat, d_lon = self.track.current_velocity()
        self.assertAlmostEqual(d_lat, 0.0001, delta=0.01 * 0.0001)
        self.assertAlmostEqual(d_lon, 0.0, delta=0.01 * 0.0001)

        lat, lon = self.track.current_position()
        self.assertAlmostEqual(lat, 40.0 + 0.0001 * 99, delta=1e-5)
        self.assertAlmostEqual(lon, -75.0, delta=1e-5)

        self.assertLess(bearing_error(self.track.bearing_degrees(), 0.0), 1.0)

    def test_irregular_time_steps(self):
        """Test that varying seconds_since_last is honoured."""
        t = 0.0
        for k in range(100):
            dt = 0.5 if k % 2 else 2.0
            t += dt
            self.track.observe(10.0, 20.0 + 0.0002 * t, dt)

        d_lat, d_lon = self.track.current_velocity()
        self.assertAlmostEqual(d_lon, 0.0002, delta=0.01 * 0.0002)
        self.assertAlmostEqual(d_lat, 0.0, delta=0.01 * 0.0002)
        self.assertLess(bearing_error(self.track.bearing_degrees(), 90.0), 1.0)

    def test_noisy_track(self):
        """Test smoothing of a noisy south-west track."""
        rng = np.random.default_rng(11)
        track = GPSTrack(noise=100.0)

        for k in range(300):
            track.observe(35.0 - 0.0001 * k + rng.normal(0, 0.00001),
                          139.0 - 0.0001 * k + rng.normal(0, 0.00001), 1.0)

        self.assertLess(bearing_error(track.bearing_degrees(), 225.0), 10.0)
        expected_mph = calculate_mph(35.0, 139.0, -0.0001, -0.0001)
        self.assertAlmostEqual(track.speed_mph(), expected_mph, delta=0.15 * expected_mph)

    def test_speed(self):
        """Test speed for a track moving 0.0001 degrees of latitude per second."""
        for k in range(20):
            self.track.observe(40.0 + 0.0001 * k, -75.0, 1.0)

        expected = 0.0001 * math.pi / 180.0 * 3963.1676 * 3600.0
        self.assertAlmostEqual(self.track.speed_mph(), expected, delta=0.01 * expected)

    def test_speed_ignores_elapsed_time(self):
        """Test that speed uses the per-second velocity, not the sample spacing."""
        for k in range(50):
            self.track.observe(40.0 + 0.0005 * k, -75.0, 5.0)

        expected = calculate_mph(40.0, -75.0, 0.0001, 0.0)
        self.assertAlmostEqual(self.track.speed_mph(), expected, delta=0.01 * expected)

    def test_kinematics(self):
        """Test the derived snapshot matches the individual getters."""
        for k in range(10):
            self.track.observe(40.0, -75.0 + 0.0001 * k, 1.0)

        k = self.track.kinematics()

        self.assertIsInstance(k, DerivedKinematics)
        self.assertEqual((k.lat, k.lon), self.track.current_position())
        self.assertEqual((k.velocity_lat, k.velocity_lon), self.track.current_velocity())
        self.assertEqual(k.bearing_degrees, self.track.bearing_degrees())
        self.assertEqual(k.speed_mph, self.track.speed_mph())
        self.assertIn("bearing=", str(k))

    def test_singular_observation(self):
        """Test the opt-in skip path for singular updates."""
        self.track.observe(40.0, -75.0, 1.0)

        kf = self.track.filter
        kf.observation_noise_covariance = Matrix(2, 2)
        kf.process_noise_covariance = Matrix(4, 4)
        kf.estimate_covariance = Matrix(4, 4)
        before = kf.state_estimate.to_numpy()

        with self.assertRaises(SingularMatrixError):
            self.track.observe(40.001, -75.0, 5.0)

        self.assertFalse(self.track.observe(40.001, -75.0, 5.0, skip_singular=True))

        np.testing.assert_array_equal(kf.state_estimate.to_numpy(), before)
        self.assertAlmostEqual(kf.state_transition[0, 2], 0.001)
        self.assertEqual(self.track.observation_count, 1)
        self.assertEqual(self.track.skipped_count, 1)

    def test_overflowing_time_step(self):
        """Test that a time step large enough to overflow the covariance is refused."""
        self.track.observe(40.0, -75.0, 1.0)
        self.track.observe(40.0001, -75.0, 1.0)

        kf = self.track.filter
        state_before = kf.state_estimate.to_numpy()
        covariance_before = kf.estimate_covariance.to_numpy()

        with np.errstate(over='ignore', invalid='ignore'):
            with self.assertRaises(SingularMatrixError):
                self.track.observe(40.0002, -75.0, 1e200)

            np.testing.assert_array_equal(kf.state_estimate.to_numpy(), state_before)
            np.testing.assert_array_equal(kf.estimate_covariance.to_numpy(), covariance_before)
            self.assertAlmostEqual(kf.state_transition[0, 2], 0.001)

            self.assertFalse(self.track.observe(40.0002, -75.0, 1e200, skip_singular=True))

        self.assertEqual(self.track.skipped_count, 1)
        self.assertEqual(self.track.observation_count, 2)
        self.assertTrue(all(math.isfinite(v) for v in self.track.current_position()))

    def test_observe_observation(self):
        """Test feeding GPSObservation records."""
        self.assertTrue(self.track.observe_observation(GPSObservation(1.0, 2.0, 1.0)))
        self.assertEqual(self.track.observation_count, 1)

    def test_reset_and_statistics(self):
        """Test statistics and reset."""
        self.track.observe(40.0, -75.0, 1.0)

        stats = self.track.get_statistics()
        self.assertEqual(stats['observations'], 1)
        self.assertEqual(stats['updates'], 1)

        self.track.reset()

        self.assertEqual(self.track.current_position(), (0.0, 0.0))
        self.assertEqual(self.track.get_statistics()['observations'], 0)

    def test_independent_tracks(self):
        """Test that tracks share no state."""
        other = GPSTrack(noise=1.0)

        self.track.observe(40.0, -75.0, 1.0)

        self.assertEqual(other.current_position(), (0.0, 0.0))
        self.assertIsNot(self.track.filter.state_transition, other.filter.state_transition)


class TestLatLonReader(unittest.TestCase):
    """Test LatLonReader."""

    def test_parse_line(self):
        reader = LatLonReader()

        self.assertEqual(reader.parse_line("40.5,-75.25\n"), (40.5, -75.25))
        self.assertEqual(reader.parse_line("  -1e-3, 2.\n"), (-0.001, 2.0))
        self.assertIsNone(reader.parse_line("lat,lon"))
        self.assertIsNone(reader.parse_line("40.5 -75.25"))

    def test_read_skips_malformed_lines(self):
        """Test that bad lines are skipped and counted."""
        text = io.StringIO(
            "lat,lon\n"
            "40.0,-75.0\n"
            "\n"
            "  40.1, -75.1 trailing text\n"
            "garbage\n"
            "40.2,-75.2,12.0"
        )
        reader = LatLonReader()

        records = list(reader.read(text))

        self.assertEqual(records, [(40.0, -75.0), (40.1, -75.1), (40.2, -75.2)])
        stats = reader.get_statistics()
        self.assertEqual(stats['lines'], 6)
        self.assertEqual(stats['records'], 3)
        self.assertEqual(stats['parse_errors'], 2)

    def test_read_lat_long(self):
        """Test the functional wrapper on empty and short inputs."""
        self.assertEqual(list(read_lat_long([])), [])
        self.assertEqual(list(read_lat_long(["1,2\n", "3,4\n"])), [(1.0, 2.0), (3.0, 4.0)])


if __name__ == '__main__':
    unittest.main()
