#!/usr/bin/env python3
"""Test suite for configuration containers"""

import unittest
from pathlib import Path

from pytaws.core.config import (
    CollisionConfig, PredictionConfig, SmootherConfig, TAWSConfig, TerrainConfig,
)


class TestSectionConfigs(unittest.TestCase):

    def test_smoother_defaults(self):
        config = SmootherConfig()
        self.assertEqual(config.smoothing_interval, 5)
        self.assertAlmostEqual(config.alpha, 2.0 / 6.0)
        self.assertEqual(config.history_size, 10)

    def test_prediction_time_step(self):
        self.assertAlmostEqual(PredictionConfig().time_step, 1.0)
        self.assertAlmostEqual(PredictionConfig(steps=30, horizon=60.0).time_step, 2.0)

    def test_validation(self):
        with self.assertRaises(ValueError):
            SmootherConfig(0)
        with self.assertRaises(ValueError):
            PredictionConfig(steps=0)
        with self.assertRaises(ValueError):
            PredictionConfig(horizon=-1.0)
        with self.assertRaises(ValueError):
            CollisionConfig(critical_clearance=400.0, warning_clearance=300.0)
        with self.assertRaises(ValueError):
            TerrainConfig(min_zoom_clamp=15, max_zoom_clamp=14)

    def test_terrain_paths_coerced(self):
        config = TerrainConfig(preferred_dir='/tmp/maps', search_dirs=['/a', '/b'])
        self.assertEqual(config.preferred_dir, Path('/tmp/maps'))
        self.assertEqual(config.search_dirs, [Path('/a'), Path('/b')])


class TestTAWSConfig(unittest.TestCase):

    def test_from_dict_partial(self):
        config = TAWSConfig.from_dict({
            'smoother': {'smoothing_interval': 9},
            'collision': {'warning_clearance': 500.0},
            'replay_rate': 0.25,
            'logging': {'default_level': 'DEBUG'},
        })
        self.assertEqual(config.smoother.smoothing_interval, 9)
        self.assertEqual(config.collision.warning_clearance, 500.0)
        self.assertEqual(config.collision.critical_clearance, 100.0)
        self.assertEqual(config.prediction.steps, 60)
        self.assertEqual(config.replay_rate, 0.25)
        self.assertEqual(config.logging, {'default_level': 'DEBUG'})

    def test_unknown_option(self):
        with self.assertRaises(ValueError):
            TAWSConfig.from_dict({'smoother': {'window': 3}})

    def test_invalid_replay_rate(self):
        with self.assertRaises(ValueError):
            TAWSConfig.from_dict({'replay_rate': 0})

    def test_to_dict(self):
        data = TAWSConfig().to_dict()
        self.assertEqual(set(data), {'smoother', 'prediction', 'collision', 'terrain',
                                     'replay_rate', 'logging'})
        self.assertEqual(data['prediction']['horizon'], 60.0)
        rebuilt = TAWSConfig.from_dict(data)
        self.assertEqual(rebuilt.to_dict(), data)


if __name__ == '__main__':
    unittest.main()
