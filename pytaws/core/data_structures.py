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

"""Core data structures for terrain awareness processing"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Iterator, NamedTuple, Optional

import numpy as np

from ..attitude.wrap import wrap360
from .constants import (
    FLIGHT_FIELDS,
    IDX_ALT,
    IDX_HEADING,
    IDX_LAT,
    IDX_LON,
    IDX_PITCH,
    IDX_ROLL,
    IDX_VEL,
    NUM_FLIGHT_FIELDS,
)


class DangerLevel(IntEnum):
    """Vertical clearance classification of a trajectory point.

    The integer values are the ones consumed by the rendering layer
    (0 = no colour, 1 = yellow, 2 = red).
    """
    SAFE = 0
    WARNING = 1
    CRITICAL = 2


class PredictionMode(Enum):
    """Trajectory extrapolation model.

    Attributes
    ----------
    LINEAR : str
        Constant velocity, used while fewer than two smoothed states exist
    TREND : str
        Acceleration, vertical rate and turn rate taken from the two most
        recent smoothed states
    """
    LINEAR = 'linear'
    TREND = 'trend'


class TerrainStatus(Enum):
    """State of the terrain elevation model"""
    UNLOADED = 'unloaded'
    LOADED = 'loaded'
    DEGRADED = 'degraded'  # synthetic grid substituted for a real source


@dataclass(frozen=True)
class FlightSample:
    """Single aircraft attitude/velocity/position sample.

    Attributes
    ----------
    roll, pitch, heading : float
        Attitude angles in degrees. Heading is normalised to [0, 360).
    vx, vy, vz : float
        Body-frame velocity components in m/s
    latitude, longitude : float
        Geodetic position in degrees
    altitude : float
        Altitude in meters

    Raises
    ------
    ValueError
        If any field is NaN or infinite
    """
    roll: float
    pitch: float
    heading: float
    vx: float
    vy: float
    vz: float
    latitude: float
    longitude: float
    altitude: float

    def __post_init__(self):
        for name in FLIGHT_FIELDS:
            value = float(getattr(self, name))
            if not np.isfinite(value):
                raise ValueError(f"Flight sample field '{name}' is not finite: {value}")
            object.__setattr__(self, name, value)
        object.__setattr__(self, 'heading', wrap360(self.heading))

    @property
    def speed(self) -> float:
        """Euclidean norm of the body-frame velocity (m/s)"""
        return float(np.sqrt(self.vx**2 + self.vy**2 + self.vz**2))

    @property
    def velocity(self) -> np.ndarray:
        """Body-frame velocity vector [vx, vy, vz] (m/s)"""
        return np.array([self.vx, self.vy, self.vz])

    def as_array(self) -> np.ndarray:
        """Return the sample as a 9-vector in feed order"""
        return np.array([getattr(self, name) for name in FLIGHT_FIELDS], dtype=np.float64)

    @classmethod
    def from_array(cls, values) -> 'FlightSample':
        """Build a sample from a 9-vector in feed order"""
        values = np.asarray(values, dtype=np.float64)
        if values.shape != (NUM_FLIGHT_FIELDS,):
            raise ValueError(f"Flight sample vector must have {NUM_FLIGHT_FIELDS} elements, "
                             f"got shape {values.shape}")
        return cls(*values.tolist())


def _field_property(index: int, doc: str) -> property:
    def getter(self):
        return float(self._values[index])
    return property(getter, doc=doc)


class SmoothedState:
    """Running exponentially weighted estimate of the flight state.

    A single instance is updated in place for every processed sample so the
    per-sample path does not allocate. Use :meth:`snapshot` to obtain an
    immutable :class:`FlightSample` copy.
    """

    roll = _field_property(IDX_ROLL, "Smoothed roll (deg)")
    pitch = _field_property(IDX_PITCH, "Smoothed pitch (deg)")
    heading = _field_property(IDX_HEADING, "Smoothed heading (deg, [0, 360))")
    vx = _field_property(IDX_VEL.start, "Smoothed body x velocity (m/s)")
    vy = _field_property(IDX_VEL.start + 1, "Smoothed body y velocity (m/s)")
    vz = _field_property(IDX_VEL.start + 2, "Smoothed body z velocity (m/s)")
    latitude = _field_property(IDX_LAT, "Smoothed latitude (deg)")
    longitude = _field_property(IDX_LON, "Smoothed longitude (deg)")
    altitude = _field_property(IDX_ALT, "Smoothed altitude (m)")

    def __init__(self):
        self._values = np.zeros(NUM_FLIGHT_FIELDS, dtype=np.float64)
        self._seeded = False

    @property
    def is_seeded(self) -> bool:
        """True once the first sample has been absorbed"""
        return self._seeded

    @property
    def values(self) -> np.ndarray:
        """Read-only view of the underlying 9-vector"""
        view = self._values.view()
        view.flags.writeable = False
        return view

    @property
    def velocity(self) -> np.ndarray:
        return self._values[IDX_VEL].copy()

    @property
    def speed(self) -> float:
        return float(np.linalg.norm(self._values[IDX_VEL]))

    def seed(self, values: np.ndarray):
        """Overwrite the estimate with raw values"""
        self._values[:] = values
        self._seeded = True

    def buffer(self) -> np.ndarray:
        """Writable backing array, reserved for the smoother"""
        return self._values

    def reset(self):
        self._values[:] = 0.0
        self._seeded = False

    def snapshot(self) -> FlightSample:
        """Immutable copy of the current estimate"""
        if not self._seeded:
            raise ValueError("Smoothed state has not been seeded")
        return FlightSample.from_array(self._values)

    def copy(self) -> 'SmoothedState':
        other = SmoothedState()
        other._values[:] = self._values
        other._seeded = self._seeded
        return other

    def __repr__(self):
        if not self._seeded:
            return "SmoothedState(unseeded)"
        fields = ', '.join(f"{name}={value:.6g}" for name, value in zip(FLIGHT_FIELDS, self._values))
        return f"SmoothedState({fields})"


class SampleHistory:
    """Fixed-capacity ring buffer of smoothed states.

    Entries are stored as rows of a preallocated ``(capacity, 9)`` array.
    Once full, each append evicts the oldest entry.
    """

    def __init__(self, capacity: int):
        if capacity < 1:
            raise ValueError(f"History capacity must be positive, got {capacity}")
        self._buffer = np.zeros((capacity, NUM_FLIGHT_FIELDS), dtype=np.float64)
        self._start = 0
        self._size = 0

    @property
    def capacity(self) -> int:
        return self._buffer.shape[0]

    def __len__(self) -> int:
        return self._size

    def append(self, values: np.ndarray):
        """Copy a 9-vector into the buffer, evicting the oldest when full"""
        capacity = self.capacity
        idx = (self._start + self._size) % capacity
        self._buffer[idx, :] = values
        if self._size < capacity:
            self._size += 1
        else:
            self._start = (self._start + 1) % capacity

    def clear(self):
        self._start = 0
        self._size = 0

    def latest(self, count: int = 1) -> np.ndarray:
        """Return the ``count`` most recent entries, oldest first"""
        count = min(count, self._size)
        if count <= 0:
            return np.empty((0, NUM_FLIGHT_FIELDS))
        rows = (self._start + np.arange(self._size - count, self._size)) % self.capacity
        return self._buffer[rows].copy()

    def to_array(self) -> np.ndarray:
        """All entries, oldest first"""
        return self.latest(self._size)

    def __getitem__(self, index: int) -> FlightSample:
        if index < 0:
            index += self._size
        if not 0 <= index < self._size:
            raise IndexError("history index out of range")
        return FlightSample.from_array(self._buffer[(self._start + index) % self.capacity])

    def __iter__(self) -> Iterator[FlightSample]:
        for row in self.to_array():
            yield FlightSample.from_array(row)


class TrajectoryPoint(NamedTuple):
    """Predicted position at a time offset from now"""
    latitude: float
    longitude: float
    altitude: float
    time_offset: float


@dataclass
class Trajectory:
    """Time-ordered sequence of predicted positions.

    The first point is the current position at offset 0 and the last point
    lies on the prediction horizon.

    Attributes
    ----------
    latitudes, longitudes : np.ndarray
        Geodetic coordinates in degrees
    altitudes : np.ndarray
        Altitudes in meters
    time_offsets : np.ndarray
        Seconds from the current sample
    mode : PredictionMode
        Model that produced the trajectory
    """
    latitudes: np.ndarray
    longitudes: np.ndarray
    altitudes: np.ndarray
    time_offsets: np.ndarray
    mode: PredictionMode = PredictionMode.LINEAR

    def __post_init__(self):
        n = len(self.time_offsets)
        if n == 0:
            raise ValueError("Trajectory must contain at least one point")
        for name in ('latitudes', 'longitudes', 'altitudes'):
            if len(getattr(self, name)) != n:
                raise ValueError(f"Trajectory column '{name}' length mismatch")
        if np.any(np.diff(self.time_offsets) < 0):
            raise ValueError("Trajectory time offsets must be non-decreasing")

    def __len__(self) -> int:
        return len(self.time_offsets)

    def __getitem__(self, index: int) -> TrajectoryPoint:
        return TrajectoryPoint(float(self.latitudes[index]), float(self.longitudes[index]),
                               float(self.altitudes[index]), float(self.time_offsets[index]))

    def __iter__(self) -> Iterator[TrajectoryPoint]:
        for i in range(len(self)):
            yield self[i]

    @property
    def points(self) -> list:
        return list(self)

    @property
    def horizon(self) -> float:
        return float(self.time_offsets[-1])

    @property
    def time_step(self) -> float:
        """Spacing between consecutive points (s), 0 for a single point"""
        if len(self) < 2:
            return 0.0
        return float(self.time_offsets[1] - self.time_offsets[0])


@dataclass
class TerrainLoadResult:
    """Outcome of a terrain load request.

    Attributes
    ----------
    success : bool
        True when a real terrain source was loaded
    status : TerrainStatus
        Model status after the request
    source : str
        Description of the source that ended up in use
    message : str
        Human readable detail, e.g. the reason for degraded mode
    """
    success: bool
    status: TerrainStatus
    source: str = ''
    message: str = ''

    @property
    def degraded(self) -> bool:
        return self.status == TerrainStatus.DEGRADED


@dataclass
class ProcessResult:
    """Output of one pipeline step, consumed by the rendering layer"""
    state: FlightSample
    trajectory: Trajectory
    danger_levels: list = field(default_factory=list)
    time_to_collision: Optional[float] = None
    terrain_status: TerrainStatus = TerrainStatus.UNLOADED

    @property
    def collision_warning(self) -> bool:
        return self.time_to_collision is not None

    @property
    def max_danger(self) -> DangerLevel:
        if not self.danger_levels:
            return DangerLevel.SAFE
        return max(self.danger_levels)

    def warning_text(self) -> str:
        """Cockpit style warning string, empty when no collision is predicted"""
        if self.time_to_collision is None:
            return ''
        return f"COLLISION WARNING: {int(self.time_to_collision)} sec"
