import unittest

import numpy as np

from pytaws.core.config import SmootherConfig
from pytaws.core.data_structures import FlightSample
from pytaws.filter.smoother import SampleSmoother


def make_sample(**overrides):
    values = dict(roll=0.0, pitch=0.0, heading=90.0, vx=80.0, vy=0.0, vz=0.0,
                  latitude=60.0, longitude=30.0, altitude=1000.0)
    values.update(overrides)
    return FlightSample(**values)


class TestSampleSmoother(unittest.TestCase):

    def setUp(self):
        self.smoother = SampleSmoother(smoothing_interval=5)

    def test_alpha(self):
        self.assertAlmostEqual(self.smoother.alpha, 2.0 / 6.0)
        self.assertAlmostEqual(SampleSmoother.from_config(SmootherConfig(9)).alpha, 0.2)

    def test_first_sample_seeds(self):
        sample = make_sample()
        state = self.smoother.smooth(sample)
        self.assertTrue(state.is_seeded)
        self.assertEqual(state.snapshot(), sample)
        self.assertEqual(len(self.smoother.history), 1)

    def test_outlier_moves_by_alpha_delta(self):
        self.smoother.smooth(make_sample(altitude=1000.0))
        state = self.smoother.smooth(make_sample(altitude=1600.0))
        self.assertAlmostEqual(state.altitude, 1000.0 + self.smoother.alpha * 600.0)
        self.assertAlmostEqual(state.vx, 80.0)

    def test_converges_to_constant_input(self):
        self.smoother.smooth(make_sample(altitude=0.0, vx=0.0))
        target = make_sample(altitude=500.0, vx=120.0)
        for _ in range(200):
            state = self.smoother.smooth(target)
        np.testing.assert_allclose(state.values, target.as_array(), atol=1e-9)

    def test_heading_wraps_through_north(self):
        self.smoother.smooth(make_sample(heading=359.0))
        state = self.smoother.smooth(make_sample(heading=1.0))
        # +2 degrees of raw change, scaled by alpha
        expected = (359.0 + self.smoother.alpha * 2.0) % 360.0
        self.assertAlmostEqual(state.heading, expected)

        for _ in range(100):
            state = self.smoother.smooth(make_sample(heading=1.0))
        self.assertAlmostEqual(state.heading, 1.0, places=6)

    def test_heading_stays_in_range(self):
        self.smoother.smooth(make_sample(heading=350.0))
        for _ in range(20):
            state = self.smoother.smooth(make_sample(heading=20.0))
            self.assertGreaterEqual(state.heading, 0.0)
            self.assertLess(state.heading, 360.0)

    def test_history_capped_at_twice_interval(self):
        for i in range(25):
            self.smoother.smooth(make_sample(altitude=1000.0 + i))
        history = self.smoother.history
        self.assertEqual(history.capacity, 10)
        self.assertEqual(len(history), 10)
        # oldest first, newest equals the live state
        self.assertAlmostEqual(history[-1].altitude, self.smoother.state.altitude)
        altitudes = history.to_array()[:, 8]
        self.assertTrue(np.all(np.diff(altitudes) > 0))

    def test_state_updated_in_place(self):
        first = self.smoother.smooth(make_sample())
        second = self.smoother.smooth(make_sample(altitude=2000.0))
        self.assertIs(first, second)

    def test_reset(self):
        self.smoother.smooth(make_sample())
        self.smoother.reset()
        self.assertFalse(self.smoother.state.is_seeded)
        self.assertEqual(len(self.smoother.history), 0)
        state = self.smoother.smooth(make_sample(altitude=42.0))
        self.assertAlmostEqual(state.altitude, 42.0)


if __name__ == '__main__':
    unittest.main()
