#!/usr/bin/env python3
"""Test suite for data structures"""

import unittest

import numpy as np

from pytaws.core.data_structures import (
    DangerLevel, FlightSample, PredictionMode, ProcessResult, SampleHistory,
    SmoothedState, TerrainLoadResult, TerrainStatus, Trajectory,
)


def make_sample(**overrides):
    values = dict(roll=1.0, pitch=2.0, heading=90.0, vx=80.0, vy=0.0, vz=-1.0,
                  latitude=60.0, longitude=30.0, altitude=1500.0)
    values.update(overrides)
    return FlightSample(**values)


class TestFlightSample(unittest.TestCase):
    """Test flight sample validation"""

    def test_heading_normalised(self):
        self.assertAlmostEqual(make_sample(heading=370.0).heading, 10.0)
        self.assertAlmostEqual(make_sample(heading=-90.0).heading, 270.0)

    def test_rejects_non_finite(self):
        with self.assertRaises(ValueError):
            make_sample(altitude=float('nan'))
        with self.assertRaises(ValueError):
            make_sample(vx=float('inf'))

    def test_speed(self):
        sample = make_sample(vx=3.0, vy=4.0, vz=0.0)
        self.assertAlmostEqual(sample.speed, 5.0)

    def test_array_round_trip(self):
        sample = make_sample()
        vector = sample.as_array()
        self.assertEqual(vector.shape, (9,))
        self.assertEqual(FlightSample.from_array(vector), sample)

    def test_from_array_shape(self):
        with self.assertRaises(ValueError):
            FlightSample.from_array(np.zeros(8))

    def test_frozen(self):
        sample = make_sample()
        with self.assertRaises(Exception):
            sample.altitude = 10.0


class TestSmoothedState(unittest.TestCase):
    """Test the in-place smoothed record"""

    def test_seed_and_snapshot(self):
        state = SmoothedState()
        self.assertFalse(state.is_seeded)
        with self.assertRaises(ValueError):
            state.snapshot()

        sample = make_sample()
        state.seed(sample.as_array())
        self.assertTrue(state.is_seeded)
        self.assertEqual(state.snapshot(), sample)
        self.assertAlmostEqual(state.altitude, 1500.0)
        self.assertAlmostEqual(state.speed, sample.speed)

    def test_values_read_only(self):
        state = SmoothedState()
        state.seed(make_sample().as_array())
        with self.assertRaises(ValueError):
            state.values[0] = 5.0

    def test_copy_is_independent(self):
        state = SmoothedState()
        state.seed(make_sample().as_array())
        other = state.copy()
        state.buffer()[8] = 0.0
        self.assertAlmostEqual(other.altitude, 1500.0)

    def test_reset(self):
        state = SmoothedState()
        state.seed(make_sample().as_array())
        state.reset()
        self.assertFalse(state.is_seeded)


class TestSampleHistory(unittest.TestCase):
    """Test the ring buffer"""

    def test_capacity_and_eviction(self):
        history = SampleHistory(3)
        for alt in range(5):
            history.append(make_sample(altitude=float(alt)).as_array())

        self.assertEqual(len(history), 3)
        np.testing.assert_array_equal(history.to_array()[:, 8], [2.0, 3.0, 4.0])
        self.assertAlmostEqual(history[0].altitude, 2.0)
        self.assertAlmostEqual(history[-1].altitude, 4.0)

    def test_latest(self):
        history = SampleHistory(4)
        for alt in range(3):
            history.append(make_sample(altitude=float(alt)).as_array())
        np.testing.assert_array_equal(history.latest(2)[:, 8], [1.0, 2.0])
        self.assertEqual(history.latest(10).shape, (3, 9))

    def test_append_copies(self):
        history = SampleHistory(2)
        values = make_sample().as_array()
        history.append(values)
        values[8] = -1.0
        self.assertAlmostEqual(history[0].altitude, 1500.0)

    def test_index_errors(self):
        history = SampleHistory(2)
        with self.assertRaises(IndexError):
            history[0]
        with self.assertRaises(ValueError):
            SampleHistory(0)

    def test_clear(self):
        history = SampleHistory(2)
        history.append(make_sample().as_array())
        history.clear()
        self.assertEqual(len(history), 0)
        self.assertEqual(list(history), [])


class TestTrajectory(unittest.TestCase):

    def test_points(self):
        trajectory = Trajectory(np.array([60.0, 60.1]), np.array([30.0, 30.1]),
                                np.array([100.0, 110.0]), np.array([0.0, 1.0]))
        self.assertEqual(len(trajectory), 2)
        self.assertEqual(trajectory[1].altitude, 110.0)
        self.assertEqual(trajectory.horizon, 1.0)
        self.assertEqual(trajectory.time_step, 1.0)
        self.assertEqual(trajectory.mode, PredictionMode.LINEAR)

    def test_validation(self):
        with self.assertRaises(ValueError):
            Trajectory(np.array([]), np.array([]), np.array([]), np.array([]))
        with self.assertRaises(ValueError):
            Trajectory(np.zeros(2), np.zeros(1), np.zeros(2), np.arange(2.0))
        with self.assertRaises(ValueError):
            Trajectory(np.zeros(2), np.zeros(2), np.zeros(2), np.array([1.0, 0.0]))


class TestResults(unittest.TestCase):

    def test_danger_level_values(self):
        self.assertEqual([int(level) for level in DangerLevel], [0, 1, 2])
        self.assertGreater(DangerLevel.CRITICAL, DangerLevel.WARNING)

    def test_process_result(self):
        trajectory = Trajectory(np.zeros(1), np.zeros(1), np.zeros(1), np.zeros(1))
        result = ProcessResult(make_sample(), trajectory,
                               [DangerLevel.SAFE, DangerLevel.WARNING], 12.5)
        self.assertTrue(result.collision_warning)
        self.assertEqual(result.max_danger, DangerLevel.WARNING)
        self.assertEqual(result.warning_text(), "COLLISION WARNING: 12 sec")

        clear = ProcessResult(make_sample(), trajectory)
        self.assertFalse(clear.collision_warning)
        self.assertEqual(clear.max_danger, DangerLevel.SAFE)
        self.assertEqual(clear.warning_text(), '')

    def test_load_result(self):
        result = TerrainLoadResult(False, TerrainStatus.DEGRADED, 'demo', 'no file')
        self.assertTrue(result.degraded)


if __name__ == '__main__':
    unittest.main()
