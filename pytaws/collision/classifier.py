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

"""Vertical clearance checks of a predicted trajectory against terrain"""

import logging
from typing import Optional

import numpy as np

from ..core.config import CollisionConfig
from ..core.data_structures import DangerLevel, Trajectory

logger = logging.getLogger(__name__)


class CollisionClassifier:
    """Classifies trajectory points by their clearance above terrain.

    Clearance is the point altitude minus the terrain height below it.
    Positions outside the loaded terrain read a height of 0.

    Parameters
    ----------
    terrain : object
        Terrain provider exposing ``get_height_at(lat, lon)`` and optionally
        the vectorised ``get_heights_at(lats, lons)``
    config : CollisionConfig, optional
        Thresholds and the number of leading points ignored
    """

    def __init__(self, terrain, config: Optional[CollisionConfig] = None):
        self.terrain = terrain
        self.config = config or CollisionConfig()

    def _terrain_heights(self, trajectory: Trajectory) -> np.ndarray:
        if hasattr(self.terrain, 'get_heights_at'):
            return np.asarray(self.terrain.get_heights_at(trajectory.latitudes, trajectory.longitudes),
                              dtype=np.float64)
        return np.array([self.terrain.get_height_at(lat, lon)
                         for lat, lon in zip(trajectory.latitudes, trajectory.longitudes)],
                        dtype=np.float64)

    def clearances(self, trajectory: Trajectory) -> np.ndarray:
        """Altitude above terrain (m) for every trajectory point"""
        return np.asarray(trajectory.altitudes, dtype=np.float64) - self._terrain_heights(trajectory)

    def _level(self, clearance: float) -> DangerLevel:
        if clearance <= self.config.critical_clearance:
            return DangerLevel.CRITICAL
        if clearance <= self.config.warning_clearance:
            return DangerLevel.WARNING
        return DangerLevel.SAFE

    def danger_level(self, lat: float, lon: float, alt: float) -> DangerLevel:
        """Danger level of a single position

        Parameters
        ----------
        lat, lon : float
            Position in degrees
        alt : float
            Altitude in meters

        Returns
        -------
        DangerLevel
            CRITICAL at or below the critical clearance, WARNING at or below
            the warning clearance, SAFE otherwise
        """
        return self._level(alt - self.terrain.get_height_at(lat, lon))

    def classify(self, trajectory: Trajectory) -> list[DangerLevel]:
        """Danger level of every trajectory point, in trajectory order"""
        clearance = self.clearances(trajectory)
        codes = np.where(clearance <= self.config.critical_clearance, int(DangerLevel.CRITICAL),
                         np.where(clearance <= self.config.warning_clearance,
                                  int(DangerLevel.WARNING), int(DangerLevel.SAFE)))
        return [DangerLevel(int(code)) for code in codes]

    def time_to_collision(self, trajectory: Trajectory) -> Optional[float]:
        """Seconds until the first predicted terrain conflict

        The first ``skip_points`` points are ignored, as are points at or
        below ``min_altitude``. A conflict is the first remaining point whose
        clearance is at most ``collision_clearance``.

        Returns
        -------
        float or None
            Time offset of the conflicting point, or None when the trajectory
            stays clear
        """
        config = self.config
        if len(trajectory) <= config.skip_points:
            return None

        clearance = self.clearances(trajectory)[config.skip_points:]
        altitudes = np.asarray(trajectory.altitudes, dtype=np.float64)[config.skip_points:]
        conflict = (altitudes > config.min_altitude) & (clearance <= config.collision_clearance)
        hits = np.flatnonzero(conflict)
        if hits.size == 0:
            return None

        index = config.skip_points + int(hits[0])
        ttc = float(trajectory.time_offsets[index])
        logger.debug(f"Terrain conflict at point {index}: clearance {clearance[hits[0]]:.1f} m, "
                     f"{ttc:.1f} s ahead")
        return ttc
