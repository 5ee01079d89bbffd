#!/usr/bin/env python3
"""Test suite for pipeline constants"""

import unittest

from pytaws.core.constants import (
    COLLISION_SKIP_POINTS, CRITICAL_CLEARANCE, E2_WGS84, EP2_WGS84,
    FLIGHT_FIELDS, IDX_ALT, IDX_HEADING, IDX_LAT, IDX_LON, IDX_VEL,
    MAX_WORKING_ZOOM, MIN_WORKING_ZOOM, NUM_FLIGHT_FIELDS, RB_WGS84,
    RE_WGS84, WARNING_CLEARANCE,
)


class TestEllipsoidConstants(unittest.TestCase):
    """Test ellipsoid parameters"""

    def test_values(self):
        self.assertEqual(RE_WGS84, 6378137.0)
        self.assertEqual(E2_WGS84, 0.00669438)

    def test_derived(self):
        """Semi-minor axis and second eccentricity follow from a and e^2"""
        self.assertAlmostEqual(RB_WGS84, 6356752.3, delta=1.0)
        self.assertAlmostEqual(EP2_WGS84, E2_WGS84 / (1.0 - E2_WGS84), places=12)


class TestFeedLayout(unittest.TestCase):
    """Test the 9-field sample layout"""

    def test_field_order(self):
        self.assertEqual(NUM_FLIGHT_FIELDS, 9)
        self.assertEqual(FLIGHT_FIELDS[IDX_HEADING], 'heading')
        self.assertEqual(FLIGHT_FIELDS[IDX_VEL], ('vx', 'vy', 'vz'))
        self.assertEqual(FLIGHT_FIELDS[IDX_LAT], 'latitude')
        self.assertEqual(FLIGHT_FIELDS[IDX_LON], 'longitude')
        self.assertEqual(FLIGHT_FIELDS[IDX_ALT], 'altitude')


class TestThresholds(unittest.TestCase):

    def test_ordering(self):
        self.assertLess(CRITICAL_CLEARANCE, WARNING_CLEARANCE)
        self.assertLessEqual(MIN_WORKING_ZOOM, MAX_WORKING_ZOOM)
        self.assertEqual(COLLISION_SKIP_POINTS, 5)


if __name__ == '__main__':
    unittest.main()
