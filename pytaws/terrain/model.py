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

"""Terrain elevation model with safe background reloading"""

import logging
import threading
from pathlib import Path
from typing import Optional

import numpy as np

from ..core.config import TerrainConfig
from ..core.data_structures import TerrainLoadResult, TerrainStatus
from ..core.exceptions import LoadCancelled, SourceFormatError, TerrainUnavailable
from .grid import ElevationGrid
from .locator import SourceRef, TerrainLocator
from .mbtiles import MBTilesReader

logger = logging.getLogger(__name__)


class TerrainModel:
    """Owns the active elevation grid and swaps it atomically on reload.

    Queries always see either the complete previous grid or the complete new
    one. A load that cannot find or decode a source installs the demo grid
    and reports ``TerrainStatus.DEGRADED``; a cancelled load leaves the
    previous grid in place.

    Parameters
    ----------
    config : TerrainConfig, optional
        Discovery and grid construction parameters
    locator : TerrainLocator, optional
        Overrides the locator built from ``config``
    """

    def __init__(self, config: Optional[TerrainConfig] = None,
                 locator: Optional[TerrainLocator] = None):
        self.config = config or TerrainConfig()
        self.locator = locator or TerrainLocator.from_config(self.config)
        self._lock = threading.Lock()
        self._grid = ElevationGrid.empty()
        self._status = TerrainStatus.UNLOADED
        self._source: Optional[Path] = None

    def __repr__(self):
        return f"TerrainModel(status={self.status.name}, grid={self.grid!r})"

    @property
    def grid(self) -> ElevationGrid:
        with self._lock:
            return self._grid

    @property
    def status(self) -> TerrainStatus:
        with self._lock:
            return self._status

    @property
    def source(self) -> Optional[Path]:
        with self._lock:
            return self._source

    def is_map_loaded(self) -> bool:
        """True once any grid (real or demo) has been installed"""
        return self.status is not TerrainStatus.UNLOADED

    def _install(self, grid: ElevationGrid, status: TerrainStatus, source: Optional[Path]):
        with self._lock:
            self._grid = grid
            self._status = status
            self._source = source

    def load(self, source_ref: SourceRef = None,
             cancel_event: Optional[threading.Event] = None) -> TerrainLoadResult:
        """Locate, decode and install a terrain grid

        Parameters
        ----------
        source_ref : str, Path, bytes or None
            Container path or name, raw container bytes, or None for discovery
        cancel_event : threading.Event, optional
            Aborts the load between tiles when set

        Returns
        -------
        TerrainLoadResult
            ``success`` is True only when a real terrain source was installed
        """
        try:
            resolved = self.locator.resolve(source_ref)
        except OSError as e:
            logger.error(f"Failed to prepare terrain source: {e}")
            return self._degrade(f"{e}; using demo terrain")
        if resolved is None:
            message = ("No terrain source found, using demo terrain\n"
                       + self.locator.installation_instructions())
            logger.warning(message)
            return self._degrade(message)

        try:
            return self.load_from_path(resolved.path, cancel_event)
        finally:
            resolved.cleanup()

    def load_from_path(self, path, cancel_event: Optional[threading.Event] = None) -> TerrainLoadResult:
        """Decode and install the container at ``path``"""
        path = Path(path)
        config = self.config
        try:
            with MBTilesReader(path) as reader:
                grid = ElevationGrid.from_tiles(
                    reader,
                    tile_size=config.tile_size,
                    max_size=config.max_grid_size,
                    scale=config.height_scale,
                    min_zoom_clamp=config.min_zoom_clamp,
                    max_zoom_clamp=config.max_zoom_clamp,
                    cancel_event=cancel_event,
                )
        except LoadCancelled as e:
            logger.info(f"Terrain load from {path} cancelled, keeping current grid")
            return TerrainLoadResult(False, self.status, str(path), str(e))
        except (TerrainUnavailable, SourceFormatError, ValueError, OverflowError) as e:
            logger.error(f"Failed to load terrain from {path}: {e}")
            return self._degrade(f"{e}; using demo terrain", path)

        self._install(grid, TerrainStatus.LOADED, path)
        logger.info(f"Loaded terrain {grid!r} from {path}")
        return TerrainLoadResult(True, TerrainStatus.LOADED, str(path),
                                 f"Loaded {grid.shape[0]}x{grid.shape[1]} grid")

    def _degrade(self, message: str, source: Optional[Path] = None) -> TerrainLoadResult:
        self.create_demo_terrain()
        return TerrainLoadResult(False, TerrainStatus.DEGRADED, str(source or "demo"), message)

    def create_demo_terrain(self, size: Optional[int] = None) -> ElevationGrid:
        """Install the synthetic demo grid"""
        grid = ElevationGrid.demo() if size is None else ElevationGrid.demo(size)
        self._install(grid, TerrainStatus.DEGRADED, None)
        logger.info("Demo terrain installed")
        return grid

    def load_async(self, source_ref: SourceRef = None, callback=None) -> tuple[threading.Thread, threading.Event]:
        """Run :meth:`load` on a worker thread

        Returns
        -------
        tuple[threading.Thread, threading.Event]
            The started worker and the event that cancels it
        """
        cancel_event = threading.Event()

        def _worker():
            result = self.load(source_ref, cancel_event)
            if callback is not None:
                callback(result)

        thread = threading.Thread(target=_worker, name='terrain-load', daemon=True)
        thread.start()
        return thread, cancel_event

    def get_height_at(self, lat: float, lon: float) -> float:
        return self.grid.get_height_at(lat, lon)

    def get_heights_at(self, lats, lons) -> np.ndarray:
        return self.grid.get_heights_at(lats, lons)

    def get_heights_in_area(self, min_lat: float, max_lat: float,
                            min_lon: float, max_lon: float) -> list[tuple[float, float, float]]:
        return self.grid.get_heights_in_area(min_lat, max_lat, min_lon, max_lon)
