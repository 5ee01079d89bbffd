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

"""Configuration containers for the terrain awareness pipeline"""

from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Optional

from .constants import (
    COLLISION_CLEARANCE,
    COLLISION_MIN_ALTITUDE,
    COLLISION_SKIP_POINTS,
    CRITICAL_CLEARANCE,
    DEFAULT_TERRAIN_NAME,
    HEIGHT_SCALE,
    MAX_GRID_SIZE,
    MAX_WORKING_ZOOM,
    MIN_WORKING_ZOOM,
    PREDICTION_STEPS,
    PREDICTION_TIME,
    REPLAY_RATE,
    SAMPLE_INTERVAL,
    SMOOTHING_INTERVAL,
    TILE_SIZE,
    WARNING_CLEARANCE,
)


@dataclass
class SmootherConfig:
    """Sample smoother parameters"""
    smoothing_interval: int = SMOOTHING_INTERVAL

    def __post_init__(self):
        if int(self.smoothing_interval) < 1:
            raise ValueError(f"smoothing_interval must be >= 1, got {self.smoothing_interval}")
        self.smoothing_interval = int(self.smoothing_interval)

    @property
    def alpha(self) -> float:
        """Smoothing factor 2/(N+1)"""
        return 2.0 / (self.smoothing_interval + 1)

    @property
    def history_size(self) -> int:
        """Capacity of the trailing history buffer"""
        return 2 * self.smoothing_interval


@dataclass
class PredictionConfig:
    """Trajectory predictor parameters"""
    steps: int = PREDICTION_STEPS
    horizon: float = PREDICTION_TIME          # s
    sample_interval: float = SAMPLE_INTERVAL  # s, assumed spacing of smoothed states

    def __post_init__(self):
        if int(self.steps) < 1:
            raise ValueError(f"steps must be >= 1, got {self.steps}")
        if self.horizon <= 0:
            raise ValueError(f"horizon must be positive, got {self.horizon}")
        if self.sample_interval <= 0:
            raise ValueError(f"sample_interval must be positive, got {self.sample_interval}")
        self.steps = int(self.steps)

    @property
    def time_step(self) -> float:
        return self.horizon / self.steps


@dataclass
class CollisionConfig:
    """Collision classifier thresholds.

    The clearances and the skipped trajectory prefix are tuning values, not
    derived from any certification standard.
    """
    skip_points: int = COLLISION_SKIP_POINTS
    min_altitude: float = COLLISION_MIN_ALTITUDE            # m
    collision_clearance: float = COLLISION_CLEARANCE        # m
    critical_clearance: float = CRITICAL_CLEARANCE          # m
    warning_clearance: float = WARNING_CLEARANCE            # m

    def __post_init__(self):
        if int(self.skip_points) < 0:
            raise ValueError(f"skip_points must be >= 0, got {self.skip_points}")
        if self.critical_clearance > self.warning_clearance:
            raise ValueError("critical_clearance must not exceed warning_clearance")
        self.skip_points = int(self.skip_points)


@dataclass
class TerrainConfig:
    """Terrain source discovery and grid construction parameters.

    Attributes
    ----------
    preferred_dir : Optional[Path]
        Directory checked first, by file name and then for any ``*.mbtiles``
    search_dirs : list[Path]
        Directories searched recursively for any ``*.mbtiles``
    bundled_dir : Optional[Path]
        Directory holding data shipped with the application
    default_name : str
        File name used when a load request names no source
    """
    preferred_dir: Optional[Path] = None
    search_dirs: list = field(default_factory=list)
    bundled_dir: Optional[Path] = None
    default_name: str = DEFAULT_TERRAIN_NAME
    max_grid_size: int = MAX_GRID_SIZE
    tile_size: int = TILE_SIZE
    height_scale: float = HEIGHT_SCALE
    min_zoom_clamp: int = MIN_WORKING_ZOOM
    max_zoom_clamp: int = MAX_WORKING_ZOOM

    def __post_init__(self):
        if self.preferred_dir is not None:
            self.preferred_dir = Path(self.preferred_dir)
        if self.bundled_dir is not None:
            self.bundled_dir = Path(self.bundled_dir)
        self.search_dirs = [Path(d) for d in self.search_dirs]
        if self.max_grid_size < 1 or self.tile_size < 1:
            raise ValueError("max_grid_size and tile_size must be positive")
        if self.min_zoom_clamp > self.max_zoom_clamp:
            raise ValueError("min_zoom_clamp must not exceed max_zoom_clamp")


@dataclass
class TAWSConfig:
    """Aggregate configuration for :class:`pytaws.system.TerrainAwarenessSystem`

    Example config dictionary:
    {
        'smoother': {'smoothing_interval': 5},
        'prediction': {'steps': 60, 'horizon': 60.0},
        'collision': {'warning_clearance': 300.0},
        'terrain': {'preferred_dir': '/data/SVS_Maps'},
        'replay_rate': 1.0,
        'logging': {'default_level': 'INFO'}
    }
    """
    smoother: SmootherConfig = field(default_factory=SmootherConfig)
    prediction: PredictionConfig = field(default_factory=PredictionConfig)
    collision: CollisionConfig = field(default_factory=CollisionConfig)
    terrain: TerrainConfig = field(default_factory=TerrainConfig)
    replay_rate: float = REPLAY_RATE  # s between replayed samples
    logging: dict = field(default_factory=dict)

    _SECTIONS = {
        'smoother': SmootherConfig,
        'prediction': PredictionConfig,
        'collision': CollisionConfig,
        'terrain': TerrainConfig,
    }

    def __post_init__(self):
        if self.replay_rate <= 0:
            raise ValueError(f"replay_rate must be positive, got {self.replay_rate}")

    @classmethod
    def from_dict(cls, config: dict) -> 'TAWSConfig':
        """Build a configuration from a (possibly partial) dictionary"""
        instance = cls()
        instance.configure_from_dict(config)
        return instance

    def configure_from_dict(self, config: dict):
        """Update sections in place from a dictionary"""
        for name, section_cls in self._SECTIONS.items():
            if name in config:
                current = asdict(getattr(self, name))
                unknown = set(config[name]) - {f.name for f in fields(section_cls)}
                if unknown:
                    raise ValueError(f"Unknown {name} option(s): {sorted(unknown)}")
                current.update(config[name])
                setattr(self, name, section_cls(**current))
        if 'replay_rate' in config:
            self.replay_rate = float(config['replay_rate'])
            self.__post_init__()
        if 'logging' in config:
            self.logging = dict(config['logging'])

    def to_dict(self) -> dict[str, Any]:
        result = {name: asdict(getattr(self, name)) for name in self._SECTIONS}
        result['replay_rate'] = self.replay_rate
        result['logging'] = dict(self.logging)
        return result
