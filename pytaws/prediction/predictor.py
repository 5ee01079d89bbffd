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

"""Trajectory extrapolation from smoothed flight states"""

import logging
from typing import Optional, Sequence, Union

import numpy as np

from ..attitude.wrap import angle_diff, wrap360
from ..coordinate.transforms import body2ecef, ecef2geodetic, ecef2geodetic_array, geodetic2ecef
from ..core.config import PredictionConfig
from ..core.constants import (
    IDX_ALT,
    IDX_HEADING,
    IDX_LAT,
    IDX_LON,
    IDX_PITCH,
    IDX_ROLL,
    IDX_VEL,
    NUM_FLIGHT_FIELDS,
    PREDICTION_STEPS,
    PREDICTION_TIME,
    SAMPLE_INTERVAL,
)
from ..core.data_structures import (
    FlightSample,
    PredictionMode,
    SampleHistory,
    SmoothedState,
    Trajectory,
)

logger = logging.getLogger(__name__)

HistoryLike = Union[SampleHistory, SmoothedState, FlightSample, Sequence]


def _as_state_array(history: HistoryLike) -> np.ndarray:
    """Normalise the supported history inputs to an (n, 9) array, oldest first"""
    if isinstance(history, SampleHistory):
        return history.to_array()
    if isinstance(history, SmoothedState):
        if not history.is_seeded:
            return np.empty((0, NUM_FLIGHT_FIELDS))
        return np.array(history.values)[None, :]
    if isinstance(history, FlightSample):
        return history.as_array()[None, :]

    rows = []
    for item in history:
        if isinstance(item, SmoothedState):
            rows.append(np.array(item.values))
        elif isinstance(item, FlightSample):
            rows.append(item.as_array())
        else:
            rows.append(np.asarray(item, dtype=np.float64))
    if not rows:
        return np.empty((0, NUM_FLIGHT_FIELDS))
    states = np.vstack(rows)
    if states.shape[1] != NUM_FLIGHT_FIELDS:
        raise ValueError(f"History rows must have {NUM_FLIGHT_FIELDS} fields, got {states.shape[1]}")
    return states


class TrajectoryPredictor:
    """Extrapolates the future flight path from smoothed states.

    Two models are available and selected by how much history exists:

    - ``PredictionMode.LINEAR`` (fewer than two states): the body velocity is
      rotated into ECEF and the position advanced along a straight line.
    - ``PredictionMode.TREND`` (two or more states): body-axis accelerations,
      vertical rate and turn rate are taken from the two most recent states
      and integrated step by step, so a banking or climbing aircraft gets a
      curved path.

    Parameters
    ----------
    steps : int
        Number of extrapolated points (default 60)
    horizon : float
        Prediction horizon in seconds (default 60)
    sample_interval : float
        Assumed time between the two most recent states, used for trend
        rates (default 0.5 s)
    """

    def __init__(self, steps: int = PREDICTION_STEPS, horizon: float = PREDICTION_TIME,
                 sample_interval: float = SAMPLE_INTERVAL):
        self.config = PredictionConfig(steps, horizon, sample_interval)
        self.last_mode: Optional[PredictionMode] = None

    @classmethod
    def from_config(cls, config: Optional[PredictionConfig] = None) -> 'TrajectoryPredictor':
        config = config or PredictionConfig()
        return cls(config.steps, config.horizon, config.sample_interval)

    @staticmethod
    def select_mode(history: HistoryLike) -> PredictionMode:
        """Choose the extrapolation model for the available history"""
        count = len(_as_state_array(history))
        return PredictionMode.TREND if count >= 2 else PredictionMode.LINEAR

    def predict(self, history: HistoryLike, steps: Optional[int] = None,
                horizon: Optional[float] = None) -> Trajectory:
        """Predict the trajectory over the horizon.

        Parameters
        ----------
        history : SampleHistory, SmoothedState, FlightSample or sequence
            Smoothed states ordered oldest to newest. The newest entry is the
            current state.
        steps : int, optional
            Number of steps, defaults to the configured value
        horizon : float, optional
            Horizon in seconds, defaults to the configured value

        Returns
        -------
        Trajectory
            ``steps + 1`` points; the first is the current position at
            offset 0, the last lies on the horizon

        Raises
        ------
        ValueError
            If the history is empty or steps/horizon are not positive
        """
        steps = self.config.steps if steps is None else int(steps)
        horizon = self.config.horizon if horizon is None else float(horizon)
        if steps < 1:
            raise ValueError(f"steps must be >= 1, got {steps}")
        if horizon <= 0:
            raise ValueError(f"horizon must be positive, got {horizon}")

        states = _as_state_array(history)
        if len(states) == 0:
            raise ValueError("Cannot predict a trajectory without any smoothed state")

        dt = horizon / steps
        mode = PredictionMode.TREND if len(states) >= 2 else PredictionMode.LINEAR
        if mode == PredictionMode.LINEAR:
            llh = self._predict_linear(states[-1], steps, dt)
        else:
            llh = self._predict_trend(states[-2], states[-1], steps, dt)

        self.last_mode = mode
        current = states[-1]
        latitudes = np.concatenate(([current[IDX_LAT]], llh[:, 0]))
        longitudes = np.concatenate(([current[IDX_LON]], llh[:, 1]))
        altitudes = np.concatenate(([current[IDX_ALT]], llh[:, 2]))
        time_offsets = np.linspace(0.0, horizon, steps + 1)

        logger.debug(f"Predicted {steps + 1} points over {horizon:.1f} s in {mode.value} mode")
        return Trajectory(latitudes, longitudes, altitudes, time_offsets, mode)

    def _predict_linear(self, current: np.ndarray, steps: int, dt: float) -> np.ndarray:
        """Constant velocity extrapolation in ECEF"""
        lat, lon, alt = current[IDX_LAT], current[IDX_LON], current[IDX_ALT]
        position = geodetic2ecef(lat, lon, alt)
        velocity = body2ecef(current[IDX_VEL], current[IDX_ROLL], current[IDX_PITCH],
                             current[IDX_HEADING], lat, lon)

        offsets = dt * np.arange(1, steps + 1)
        positions = position[None, :] + offsets[:, None] * velocity[None, :]
        return ecef2geodetic_array(positions)

    def _predict_trend(self, previous: np.ndarray, current: np.ndarray,
                       steps: int, dt: float) -> np.ndarray:
        """Acceleration and turn rate following extrapolation"""
        interval = self.config.sample_interval
        acceleration = (current[IDX_VEL] - previous[IDX_VEL]) / interval
        vertical_rate = (current[IDX_ALT] - previous[IDX_ALT]) / interval
        heading_rate = angle_diff(previous[IDX_HEADING], current[IDX_HEADING]) / interval

        roll, pitch = current[IDX_ROLL], current[IDX_PITCH]
        heading = current[IDX_HEADING]
        velocity = current[IDX_VEL].copy()
        lat, lon, alt = current[IDX_LAT], current[IDX_LON], current[IDX_ALT]

        llh = np.empty((steps, 3))
        for i in range(steps):
            velocity += acceleration * dt
            heading = wrap360(heading + heading_rate * dt)

            velocity_ecef = body2ecef(velocity, roll, pitch, heading, lat, lon)
            position = geodetic2ecef(lat, lon, alt) + velocity_ecef * dt
            lat, lon, _ = ecef2geodetic(*position)

            # altitude follows the observed vertical rate, not the ECEF path
            alt += vertical_rate * dt
            llh[i] = (lat, lon, alt)

        return llh
