import tempfile
import unittest
from pathlib import Path

from pytaws.core.config import TerrainConfig
from pytaws.terrain.locator import TerrainLocator


class TestTerrainLocator(unittest.TestCase):

    def setUp(self):
        self.test_dir = tempfile.TemporaryDirectory()
        root = Path(self.test_dir.name)
        self.preferred = root / 'SVS_Maps'
        self.storage = root / 'storage'
        self.bundled = root / 'assets'
        for directory in (self.preferred, self.storage, self.bundled):
            directory.mkdir()
        self.locator = TerrainLocator(self.preferred, [self.storage], self.bundled)

    def tearDown(self):
        self.test_dir.cleanup()

    def _touch(self, path):
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b'x')
        return path

    def test_nothing_found(self):
        self.assertIsNone(self.locator.resolve())
        self.assertIsNone(self.locator.resolve('alps.mbtiles'))

    def test_explicit_path(self):
        path = self._touch(Path(self.test_dir.name) / 'elsewhere' / 'custom.mbtiles')
        resolved = self.locator.resolve(str(path))
        self.assertEqual(resolved.path, path)
        self.assertEqual(resolved.origin, 'explicit')
        self.assertFalse(resolved.temporary)

    def test_preferred_by_name_then_any(self):
        other = self._touch(self.preferred / 'a_region.mbtiles')
        named = self._touch(self.preferred / 'terrain.mbtiles')
        self.assertEqual(self.locator.resolve().path, named)
        self.assertEqual(self.locator.resolve('missing.mbtiles').path, other)
        self.assertEqual(self.locator.resolve().origin, 'preferred')

    def test_preferred_ignores_other_files(self):
        self._touch(self.preferred / 'readme.txt')
        self.assertIsNone(self.locator.resolve())

    def test_storage_search_is_recursive(self):
        nested = self._touch(self.storage / 'Download' / 'maps' / 'Region.MBTILES')
        resolved = self.locator.resolve()
        self.assertEqual(resolved.path, nested)
        self.assertEqual(resolved.origin, 'storage')

    def test_bundled_last(self):
        bundled = self._touch(self.bundled / 'terrain.mbtiles')
        self.assertEqual(self.locator.resolve().origin, 'bundled')
        stored = self._touch(self.storage / 'found.mbtiles')
        self.assertEqual(self.locator.resolve().path, stored)
        self.assertTrue(bundled.exists())

    def test_bytes_materialised(self):
        resolved = self.locator.resolve(b'SQLite format 3\x00')
        try:
            self.assertTrue(resolved.temporary)
            self.assertEqual(resolved.origin, 'bytes')
            self.assertEqual(resolved.path.read_bytes(), b'SQLite format 3\x00')
        finally:
            resolved.cleanup()
        self.assertFalse(resolved.path.exists())

    def test_from_config_and_instructions(self):
        locator = TerrainLocator.from_config(TerrainConfig(preferred_dir=self.preferred,
                                                           default_name='alps.mbtiles'))
        text = locator.installation_instructions()
        self.assertIn(str(self.preferred), text)
        self.assertIn('alps.mbtiles', text)
        self.assertIn('pass the file path',
                      TerrainLocator().installation_instructions())


if __name__ == '__main__':
    unittest.main()
