import os
import sqlite3
import tempfile
import unittest

import numpy as np

from pytaws.core.constants import MAX_MERCATOR_LAT
from pytaws.core.exceptions import SourceFormatError, TerrainUnavailable
from pytaws.terrain.mbtiles import MBTilesReader, TileBounds, write_mbtiles
from pytaws.terrain.tiles import decode_tile, encode_tile, flip_row

BOUNDS = "30.0,59.99,30.05,60.01"
TILE = (12, 2389, 1189)


class TestMBTilesReader(unittest.TestCase):

    def setUp(self):
        self.test_dir = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.test_dir.name, 'terrain.mbtiles')
        self.metadata = {'bounds': BOUNDS, 'minzoom': 10, 'maxzoom': 14, 'format': 'png'}

    def tearDown(self):
        self.test_dir.cleanup()

    def test_missing_file(self):
        with self.assertRaises(TerrainUnavailable):
            MBTilesReader(os.path.join(self.test_dir.name, 'missing.mbtiles'))

    def test_metadata(self):
        write_mbtiles(self.path, {}, self.metadata)
        with MBTilesReader(self.path) as reader:
            self.assertEqual(reader.bounds(), TileBounds(30.0, 59.99, 30.05, 60.01))
            self.assertEqual(reader.zoom_range(), (10, 14))
            self.assertEqual(reader.metadata()['format'], 'png')
            self.assertEqual(reader.tile_table, 'tiles')

    def test_get_tile_flips_row(self):
        blob = encode_tile(np.full((256, 256), 200.0))
        write_mbtiles(self.path, {TILE: blob}, self.metadata)

        # stored in TMS order
        with sqlite3.connect(self.path) as connection:
            rows = connection.execute("SELECT tile_row FROM tiles").fetchall()
        self.assertEqual(rows, [(flip_row(TILE[2], TILE[0]),)])

        with MBTilesReader(self.path) as reader:
            np.testing.assert_allclose(decode_tile(reader.get_tile(*TILE)), 200.0)
            self.assertIsNone(reader.get_tile(12, 0, 0))

    def test_this_table_variant(self):
        blob = encode_tile(np.full((256, 256), 50.0))
        write_mbtiles(self.path, {TILE: blob}, self.metadata, table='this')
        with MBTilesReader(self.path) as reader:
            self.assertEqual(reader.tile_table, 'this')
            self.assertIsNotNone(reader.get_tile(*TILE))

    def test_missing_zoom_defaults_to_zero(self):
        write_mbtiles(self.path, {}, {'bounds': BOUNDS})
        with MBTilesReader(self.path) as reader:
            self.assertEqual(reader.zoom_range(), (0, 0))

    def test_missing_tables(self):
        with sqlite3.connect(self.path) as connection:
            connection.execute("CREATE TABLE other (x INTEGER)")
        with MBTilesReader(self.path) as reader:
            with self.assertRaises(SourceFormatError):
                reader.metadata()
            with self.assertRaises(SourceFormatError):
                reader.tile_table

    def test_bad_bounds(self):
        for bounds in ("1,2,3", "a,b,c,d", "30,60,29,61"):
            write_mbtiles(self.path, {}, {'bounds': bounds})
            with MBTilesReader(self.path) as reader:
                with self.assertRaises(SourceFormatError):
                    reader.bounds()

    def test_non_finite_bounds(self):
        for bounds in ("nan,59,31,61", "30,59,inf,61"):
            write_mbtiles(self.path, {}, {'bounds': bounds})
            with MBTilesReader(self.path) as reader:
                with self.assertRaises(SourceFormatError):
                    reader.bounds()

    def test_global_bounds_clamped(self):
        write_mbtiles(self.path, {}, {'bounds': "-180,-90,180,90"})
        with MBTilesReader(self.path) as reader:
            bounds = reader.bounds()
        self.assertEqual((bounds.min_lon, bounds.max_lon), (-180.0, 180.0))
        self.assertAlmostEqual(bounds.min_lat, -MAX_MERCATOR_LAT)
        self.assertAlmostEqual(bounds.max_lat, MAX_MERCATOR_LAT)

    def test_polar_only_bounds_degenerate(self):
        write_mbtiles(self.path, {}, {'bounds': "30,86,31,89"})
        with MBTilesReader(self.path) as reader:
            with self.assertRaises(SourceFormatError):
                reader.bounds()

    def test_not_a_database(self):
        with open(self.path, 'wb') as f:
            f.write(b'garbage' * 100)
        with MBTilesReader(self.path) as reader:
            with self.assertRaises(SourceFormatError):
                reader.metadata()

    def test_write_rejects_unknown_table(self):
        with self.assertRaises(ValueError):
            write_mbtiles(self.path, {}, {}, table='images')


if __name__ == '__main__':
    unittest.main()
