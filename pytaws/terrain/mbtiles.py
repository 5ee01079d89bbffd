# Copyright 2024 inuex35
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Read-only access to MBTiles elevation containers"""

import logging
import math
import sqlite3
from pathlib import Path
from typing import NamedTuple, Optional

from ..core.constants import MAX_MERCATOR_LAT, TILE_TABLES
from ..core.exceptions import SourceFormatError, TerrainUnavailable
from .tiles import flip_row

logger = logging.getLogger(__name__)


class TileBounds(NamedTuple):
    """Geographic bounding box in metadata order (degrees)"""
    min_lon: float
    min_lat: float
    max_lon: float
    max_lat: float


class MBTilesReader:
    """Reader for the SQLite based MBTiles container.

    Only the parts the terrain model needs are exposed: the ``metadata``
    key/value table and tile blobs addressed by (zoom, column, row). Tile rows
    are stored in TMS order, so :meth:`get_tile` takes an XYZ row and flips it.
    Some producers name the tile table ``this`` instead of ``tiles``; both
    are accepted.

    Parameters
    ----------
    path : str or Path
        Path to the ``.mbtiles`` file

    Raises
    ------
    TerrainUnavailable
        If the file does not exist

    Examples
    --------
    >>> with MBTilesReader('terrain.mbtiles') as reader:
    ...     bounds = reader.bounds()
    ...     blob = reader.get_tile(12, 2389, 1185)
    """

    def __init__(self, path):
        self.path = Path(path)
        if not self.path.is_file():
            raise TerrainUnavailable(f"MBTiles file not found: {path}")
        self._connection: Optional[sqlite3.Connection] = None
        self._tile_table: Optional[str] = None

    def open(self) -> 'MBTilesReader':
        if self._connection is None:
            uri = f"{self.path.resolve().as_uri()}?mode=ro"
            try:
                self._connection = sqlite3.connect(uri, uri=True, check_same_thread=False)
            except sqlite3.Error as e:
                raise SourceFormatError(f"Cannot open {self.path}: {e}") from e
            logger.debug(f"Opened MBTiles container {self.path}")
        return self

    def close(self):
        if self._connection is not None:
            self._connection.close()
            self._connection = None
            self._tile_table = None

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def _query(self, sql: str, params: tuple = ()) -> list:
        if self._connection is None:
            self.open()
        try:
            return self._connection.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            raise SourceFormatError(f"Query failed on {self.path}: {e}") from e

    def table_names(self) -> set[str]:
        rows = self._query("SELECT name FROM sqlite_master WHERE type IN ('table', 'view')")
        return {row[0] for row in rows}

    def table_columns(self, table: str) -> list[str]:
        if table not in self.table_names():
            return []
        return [row[1] for row in self._query(f'PRAGMA table_info("{table}")')]

    @property
    def tile_table(self) -> str:
        """Name of the table holding tile blobs"""
        if self._tile_table is None:
            tables = self.table_names()
            for name in TILE_TABLES:
                if name in tables:
                    self._tile_table = name
                    break
            else:
                raise SourceFormatError(f"{self.path} has no tile table (looked for {TILE_TABLES})")
            logger.debug(f"Using tile table '{self._tile_table}'")
        return self._tile_table

    def metadata(self) -> dict[str, str]:
        """All metadata key/value pairs"""
        if 'metadata' not in self.table_names():
            raise SourceFormatError(f"{self.path} has no metadata table")
        rows = self._query("SELECT name, value FROM metadata")
        return {str(name): str(value) for name, value in rows if name is not None and value is not None}

    def bounds(self) -> TileBounds:
        """Bounding box from the ``bounds`` metadata key (minLon,minLat,maxLon,maxLat)

        Latitudes are clamped to the Web-Mercator limit and longitudes to
        [-180, 180], so global extents such as ``-180,-90,180,90`` are usable.
        """
        value = self.metadata().get('bounds')
        if value is None:
            raise SourceFormatError(f"{self.path} metadata has no 'bounds'")
        try:
            parts = [float(part) for part in value.split(',')]
        except ValueError as e:
            raise SourceFormatError(f"Malformed bounds '{value}'") from e
        if len(parts) != 4:
            raise SourceFormatError(f"Malformed bounds '{value}'")
        if not all(math.isfinite(part) for part in parts):
            raise SourceFormatError(f"Non-finite bounds '{value}'")
        min_lon, min_lat, max_lon, max_lat = parts
        bounds = TileBounds(
            max(min_lon, -180.0), max(min_lat, -MAX_MERCATOR_LAT),
            min(max_lon, 180.0), min(max_lat, MAX_MERCATOR_LAT),
        )
        if bounds.min_lon >= bounds.max_lon or bounds.min_lat >= bounds.max_lat:
            raise SourceFormatError(f"Degenerate bounds '{value}'")
        return bounds

    def zoom_range(self) -> tuple[int, int]:
        """(minzoom, maxzoom) from metadata, 0 for missing or unparsable values"""
        metadata = self.metadata()

        def _parse(key):
            try:
                return int(metadata.get(key, 0))
            except ValueError:
                logger.warning(f"Ignoring non-integer {key} '{metadata[key]}'")
                return 0

        return _parse('minzoom'), _parse('maxzoom')

    def get_tile(self, zoom: int, tile_x: int, tile_y: int) -> Optional[bytes]:
        """Tile blob for XYZ indices, or None when the tile is absent"""
        rows = self._query(
            f'SELECT tile_data FROM "{self.tile_table}" '
            "WHERE zoom_level = ? AND tile_column = ? AND tile_row = ?",
            (zoom, tile_x, flip_row(tile_y, zoom)),
        )
        if not rows or rows[0][0] is None:
            return None
        return bytes(rows[0][0])


def write_mbtiles(path, tiles: dict, metadata: dict, table: str = 'tiles') -> Path:
    """Create an MBTiles container

    Parameters
    ----------
    path : str or Path
        Output file, replaced if it exists
    tiles : dict
        Mapping of XYZ ``(zoom, x, y)`` to encoded tile bytes
    metadata : dict
        Metadata key/value pairs, e.g. ``bounds``, ``minzoom``, ``maxzoom``
    table : str
        Tile table name; readers accept ``tiles`` and ``this``

    Returns
    -------
    Path
        The written file
    """
    if table not in TILE_TABLES:
        raise ValueError(f"table must be one of {TILE_TABLES}, got '{table}'")
    path = Path(path)
    if path.exists():
        path.unlink()

    connection = sqlite3.connect(str(path))
    try:
        with connection:
            connection.execute("CREATE TABLE metadata (name TEXT, value TEXT)")
            connection.execute(f'CREATE TABLE "{table}" (zoom_level INTEGER, tile_column INTEGER, '
                               "tile_row INTEGER, tile_data BLOB)")
            connection.executemany("INSERT INTO metadata VALUES (?, ?)",
                                   [(str(k), str(v)) for k, v in metadata.items()])
            connection.executemany(
                f'INSERT INTO "{table}" VALUES (?, ?, ?, ?)',
                [(z, x, flip_row(y, z), sqlite3.Binary(blob)) for (z, x, y), blob in tiles.items()],
            )
    finally:
        connection.close()

    logger.debug(f"Wrote {len(tiles)} tiles to {path}")
    return path
