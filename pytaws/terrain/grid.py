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

"""Bounded 2-D terrain elevation grid"""

import logging
import math
import threading
from typing import Optional

import numpy as np

from ..core.constants import (
    DEMO_AMPLITUDE,
    DEMO_BASE_HEIGHT,
    DEMO_GRID_SIZE,
    DEMO_MAX_LAT,
    DEMO_MAX_LON,
    DEMO_MIN_LAT,
    DEMO_MIN_LON,
    DEMO_WAVENUMBER,
    HEIGHT_SCALE,
    HEIGHT_SENTINEL,
    MAX_GRID_SIZE,
    MAX_WORKING_ZOOM,
    MIN_WORKING_ZOOM,
    TILE_SIZE,
)
from ..core.exceptions import LoadCancelled, SourceFormatError, TileDecodeError
from .tiles import choose_zoom, decode_tile, tile_range

logger = logging.getLogger(__name__)


class ElevationGrid:
    """Rectangular array of terrain heights with its geodetic bounding box.

    Row 0 is the southern edge and column 0 the western edge. Cell (i, j)
    covers latitudes ``[min_lat + i*lat_res, min_lat + (i+1)*lat_res)`` and
    the equivalent longitude span. The grid is read-only once built; a
    reload produces a new instance.

    Parameters
    ----------
    heights : array_like, shape (rows, cols)
        Terrain heights in meters
    min_lat, max_lat, min_lon, max_lon : float
        Bounding box in degrees
    lat_resolution, lon_resolution : float, optional
        Degrees per cell; default to span divided by grid extent
    """

    def __init__(self, heights, min_lat: float, max_lat: float, min_lon: float, max_lon: float,
                 lat_resolution: Optional[float] = None, lon_resolution: Optional[float] = None):
        heights = np.array(heights, dtype=np.float32)
        if heights.ndim != 2:
            raise ValueError(f"Elevation grid must be 2-D, got shape {heights.shape}")
        self.heights = heights
        self.heights.flags.writeable = False
        self.min_lat = float(min_lat)
        self.max_lat = float(max_lat)
        self.min_lon = float(min_lon)
        self.max_lon = float(max_lon)

        rows, cols = heights.shape
        if lat_resolution is None:
            lat_resolution = (self.max_lat - self.min_lat) / rows if rows else 0.0
        if lon_resolution is None:
            lon_resolution = (self.max_lon - self.min_lon) / cols if cols else 0.0
        self.lat_resolution = float(lat_resolution)
        self.lon_resolution = float(lon_resolution)

    def __repr__(self):
        return (f"ElevationGrid(shape={self.shape}, lat=[{self.min_lat}, {self.max_lat}], "
                f"lon=[{self.min_lon}, {self.max_lon}])")

    @property
    def shape(self) -> tuple[int, int]:
        return self.heights.shape

    @property
    def is_empty(self) -> bool:
        return self.heights.size == 0 or self.lat_resolution <= 0 or self.lon_resolution <= 0

    def contains(self, lat: float, lon: float) -> bool:
        """True when the position lies inside the bounding box (edges included)"""
        return self.min_lat <= lat <= self.max_lat and self.min_lon <= lon <= self.max_lon

    def get_height_at(self, lat: float, lon: float) -> float:
        """Terrain height at a position

        Parameters
        ----------
        lat, lon : float
            Position in degrees

        Returns
        -------
        float
            Height of the cell containing the position, or 0 when the grid is
            empty or the position lies outside the bounding box
        """
        if self.is_empty or not self.contains(lat, lon):
            return HEIGHT_SENTINEL

        rows, cols = self.heights.shape
        lat_index = min(max(int(math.floor((lat - self.min_lat) / self.lat_resolution)), 0), rows - 1)
        lon_index = min(max(int(math.floor((lon - self.min_lon) / self.lon_resolution)), 0), cols - 1)
        return float(self.heights[lat_index, lon_index])

    def get_heights_at(self, lats, lons) -> np.ndarray:
        """Vectorised :meth:`get_height_at` with the same sentinel semantics"""
        lats = np.asarray(lats, dtype=np.float64)
        lons = np.asarray(lons, dtype=np.float64)
        result = np.full(np.broadcast(lats, lons).shape, HEIGHT_SENTINEL, dtype=np.float64)
        if self.is_empty:
            return result

        lats, lons = np.broadcast_arrays(lats, lons)
        inside = ((lats >= self.min_lat) & (lats <= self.max_lat)
                  & (lons >= self.min_lon) & (lons <= self.max_lon))
        if not np.any(inside):
            return result

        rows, cols = self.heights.shape
        lat_index = np.clip(np.floor((lats[inside] - self.min_lat) / self.lat_resolution), 0, rows - 1)
        lon_index = np.clip(np.floor((lons[inside] - self.min_lon) / self.lon_resolution), 0, cols - 1)
        result[inside] = self.heights[lat_index.astype(np.intp), lon_index.astype(np.intp)]
        return result

    def cell_center(self, lat_index: int, lon_index: int) -> tuple[float, float]:
        return (self.min_lat + (lat_index + 0.5) * self.lat_resolution,
                self.min_lon + (lon_index + 0.5) * self.lon_resolution)

    def get_heights_in_area(self, min_lat: float, max_lat: float,
                            min_lon: float, max_lon: float) -> list[tuple[float, float, float]]:
        """All cells whose centre lies inside the given box

        Returns
        -------
        list[tuple[float, float, float]]
            (lat, lon, height) per cell, lat/lon being the cell centre, ordered
            south to north then west to east. Empty for an empty grid.
        """
        if self.is_empty:
            return []

        rows, cols = self.heights.shape
        center_lats = self.min_lat + (np.arange(rows) + 0.5) * self.lat_resolution
        center_lons = self.min_lon + (np.arange(cols) + 0.5) * self.lon_resolution
        lat_rows = np.nonzero((center_lats >= min_lat) & (center_lats <= max_lat))[0]
        lon_cols = np.nonzero((center_lons >= min_lon) & (center_lons <= max_lon))[0]

        return [(float(center_lats[i]), float(center_lons[j]), float(self.heights[i, j]))
                for i in lat_rows for j in lon_cols]

    @classmethod
    def empty(cls) -> 'ElevationGrid':
        """Grid with no cells; every lookup returns the sentinel"""
        return cls(np.zeros((0, 0), dtype=np.float32), 0.0, 0.0, 0.0, 0.0)

    @classmethod
    def demo(cls, size: int = DEMO_GRID_SIZE) -> 'ElevationGrid':
        """Deterministic synthetic terrain of gentle hills

        height(i, j) = 100 + 50 sin(0.1 i) + 50 cos(0.1 j) over latitudes
        59-61 and longitudes 29-31.
        """
        i = np.arange(size)[:, None]
        j = np.arange(size)[None, :]
        heights = (DEMO_BASE_HEIGHT
                   + DEMO_AMPLITUDE * np.sin(i * DEMO_WAVENUMBER)
                   + DEMO_AMPLITUDE * np.cos(j * DEMO_WAVENUMBER))
        return cls(heights, DEMO_MIN_LAT, DEMO_MAX_LAT, DEMO_MIN_LON, DEMO_MAX_LON)

    @classmethod
    def from_tiles(cls, reader, zoom: Optional[int] = None, tile_size: int = TILE_SIZE,
                   max_size: int = MAX_GRID_SIZE, scale: float = HEIGHT_SCALE,
                   min_zoom_clamp: int = MIN_WORKING_ZOOM, max_zoom_clamp: int = MAX_WORKING_ZOOM,
                   cancel_event: Optional[threading.Event] = None) -> 'ElevationGrid':
        """Assemble a grid from the tiles of an elevation container

        Parameters
        ----------
        reader : MBTilesReader
            Open tile container
        zoom : int, optional
            Zoom level to load; defaults to the midpoint of the container's
            zoom range clamped to [min_zoom_clamp, max_zoom_clamp]
        tile_size : int
            Tile edge in pixels
        max_size : int
            Cap on cells per axis; pixels beyond the cap are dropped
        scale : float
            Meters per encoded height unit
        cancel_event : threading.Event, optional
            Checked between tiles

        Returns
        -------
        ElevationGrid
            Grid over the container's bounding box

        Raises
        ------
        SourceFormatError
            If metadata is missing or no tile could be decoded
        LoadCancelled
            If ``cancel_event`` was set during the load
        """
        bounds = reader.bounds()
        if zoom is None:
            min_zoom, max_zoom = reader.zoom_range()
            zoom = choose_zoom(min_zoom, max_zoom, min_zoom_clamp, max_zoom_clamp)

        min_x, min_y, max_x, max_y = tile_range(bounds.min_lat, bounds.max_lat,
                                                bounds.min_lon, bounds.max_lon, zoom)
        width = min((max_x - min_x + 1) * tile_size, max_size)
        height = min((max_y - min_y + 1) * tile_size, max_size)
        # tiles starting beyond the cap contribute nothing
        last_x = min(max_x, min_x + (width - 1) // tile_size)
        last_y = min(max_y, min_y + (height - 1) // tile_size)
        logger.info(f"Assembling {width}x{height} grid from tiles x={min_x}..{last_x}, "
                    f"y={min_y}..{last_y} at zoom {zoom}")

        # image order while assembling: row 0 is the northern edge
        heights = np.zeros((height, width), dtype=np.float32)
        loaded = missing = failed = 0
        for tile_x in range(min_x, last_x + 1):
            for tile_y in range(min_y, last_y + 1):
                if cancel_event is not None and cancel_event.is_set():
                    raise LoadCancelled(f"Terrain load cancelled after {loaded} tiles")

                blob = reader.get_tile(zoom, tile_x, tile_y)
                if blob is None:
                    missing += 1
                    continue
                try:
                    tile = decode_tile(blob, scale)
                except TileDecodeError as e:
                    logger.warning(f"Skipping tile ({tile_x}, {tile_y}, {zoom}): {e}")
                    failed += 1
                    continue

                start_x = (tile_x - min_x) * tile_size
                start_y = (tile_y - min_y) * tile_size
                rows = min(tile.shape[0], height - start_y)
                cols = min(tile.shape[1], width - start_x)
                heights[start_y:start_y + rows, start_x:start_x + cols] = tile[:rows, :cols]
                loaded += 1

        if loaded == 0:
            raise SourceFormatError(f"No decodable tiles at zoom {zoom} "
                                    f"({missing} missing, {failed} undecodable)")
        if missing or failed:
            logger.warning(f"{missing} tiles missing and {failed} undecodable, filled with 0")

        return cls(np.flipud(heights), bounds.min_lat, bounds.max_lat, bounds.min_lon, bounds.max_lon)
