import unittest

import numpy as np

from pytaws.core.exceptions import TileDecodeError
from pytaws.terrain.tiles import (
    choose_zoom, decode_tile, encode_tile, flip_row, latlon2tile, tile_range,
)


class TestTileMath(unittest.TestCase):

    def test_origin_tile(self):
        self.assertEqual(latlon2tile(0.0, 0.0, 0), (0, 0))
        self.assertEqual(latlon2tile(0.0, 0.0, 1), (1, 1))
        self.assertEqual(latlon2tile(45.0, -90.0, 2), (1, 1))

    def test_known_tile(self):
        # lon 30, lat 60 at zoom 12
        self.assertEqual(latlon2tile(60.0, 30.0, 12), (2389, 1189))

    def test_out_of_range_positions_clamped(self):
        self.assertEqual(latlon2tile(90.0, 180.0, 3), (7, 0))
        self.assertEqual(latlon2tile(-90.0, -180.0, 3), (0, 7))
        self.assertEqual(tile_range(-90.0, 90.0, -180.0, 180.0, 2), (0, 0, 3, 3))

    def test_non_finite_position(self):
        with self.assertRaises(ValueError):
            latlon2tile(float('nan'), 30.0, 12)

    def test_tile_range_orientation(self):
        min_x, min_y, max_x, max_y = tile_range(59.0, 61.0, 29.0, 31.0, 10)
        self.assertLessEqual(min_x, max_x)
        self.assertLessEqual(min_y, max_y)
        self.assertEqual((min_x, min_y), latlon2tile(61.0, 29.0, 10))
        self.assertEqual((max_x, max_y), latlon2tile(59.0, 31.0, 10))

    def test_flip_row(self):
        self.assertEqual(flip_row(0, 3), 7)
        self.assertEqual(flip_row(flip_row(5, 10), 10), 5)

    def test_choose_zoom(self):
        self.assertEqual(choose_zoom(0, 20), 10)
        self.assertEqual(choose_zoom(8, 9), 10)
        self.assertEqual(choose_zoom(15, 18), 14)
        self.assertEqual(choose_zoom(11, 14), 12)


class TestTileCodec(unittest.TestCase):

    def test_decode_channel_weights(self):
        heights = np.array([[0.0, 0.1], [25.6, 6553.6]])
        decoded = decode_tile(encode_tile(heights))
        np.testing.assert_allclose(decoded, heights, atol=1e-6)

    def test_decode_scale(self):
        blob = encode_tile(np.full((4, 4), 123.4))
        np.testing.assert_allclose(decode_tile(blob, scale=1.0), 1234.0)

    def test_encode_clips_negative(self):
        decoded = decode_tile(encode_tile(np.array([[-50.0, 10.0]])))
        np.testing.assert_allclose(decoded, [[0.0, 10.0]], atol=1e-6)

    def test_decode_garbage(self):
        with self.assertRaises(TileDecodeError):
            decode_tile(b'not an image')


if __name__ == '__main__':
    unittest.main()
