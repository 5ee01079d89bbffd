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

"""Exponential recency-weighted smoothing of flight samples"""

import logging
from typing import Optional

import numpy as np

from ..attitude.wrap import angle_diff, wrap360
from ..core.config import SmootherConfig
from ..core.constants import FLIGHT_FIELDS, IDX_HEADING, NUM_FLIGHT_FIELDS, SMOOTHING_INTERVAL
from ..core.data_structures import FlightSample, SampleHistory, SmoothedState

logger = logging.getLogger(__name__)


class SampleSmoother:
    """Modified moving average filter for flight samples.

    Every numeric field follows

        smoothed = previous + alpha * (raw - previous),  alpha = 2 / (N + 1)

    where N is the smoothing interval. Heading uses the shortest angular
    delta so the estimate does not sweep through 180 degrees when the raw
    heading crosses north. The first sample seeds the estimate unchanged.

    The smoothed state is a single record updated in place; a copy of every
    update is appended to a ring buffer of ``2 * N`` entries which the
    trajectory predictor uses to estimate short-term trends.

    Parameters
    ----------
    smoothing_interval : int
        Smoothing interval N (default 5)

    Examples
    --------
    >>> smoother = SampleSmoother(smoothing_interval=5)
    >>> state = smoother.smooth(sample)
    >>> len(smoother.history)
    1
    """

    def __init__(self, smoothing_interval: int = SMOOTHING_INTERVAL):
        self.config = SmootherConfig(smoothing_interval)
        self._alpha = self.config.alpha
        self._state = SmoothedState()
        self._history = SampleHistory(self.config.history_size)
        # scratch buffers reused on every update
        self._raw = np.zeros(NUM_FLIGHT_FIELDS, dtype=np.float64)
        self._delta = np.zeros(NUM_FLIGHT_FIELDS, dtype=np.float64)

    @classmethod
    def from_config(cls, config: Optional[SmootherConfig] = None) -> 'SampleSmoother':
        config = config or SmootherConfig()
        return cls(config.smoothing_interval)

    @property
    def alpha(self) -> float:
        return self._alpha

    @property
    def smoothing_interval(self) -> int:
        return self.config.smoothing_interval

    @property
    def state(self) -> SmoothedState:
        return self._state

    @property
    def history(self) -> SampleHistory:
        return self._history

    def smooth(self, sample: FlightSample) -> SmoothedState:
        """Absorb a raw sample and return the updated smoothed state.

        Parameters
        ----------
        sample : FlightSample
            Raw flight sample

        Returns
        -------
        SmoothedState
            The smoother's live state record (updated in place)
        """
        raw = self._raw
        for i, name in enumerate(FLIGHT_FIELDS):
            raw[i] = getattr(sample, name)

        state = self._state.buffer()
        if not self._state.is_seeded:
            self._state.seed(raw)
            self._history.append(state)
            logger.debug("Smoother seeded with first sample")
            return self._state

        delta = self._delta
        np.subtract(raw, state, out=delta)
        delta[IDX_HEADING] = angle_diff(state[IDX_HEADING], raw[IDX_HEADING])
        delta *= self._alpha
        state += delta
        state[IDX_HEADING] = wrap360(state[IDX_HEADING])

        self._history.append(state)
        return self._state

    def reset(self):
        """Drop the smoothed estimate and the trailing history"""
        self._state.reset()
        self._history.clear()
        logger.debug("Smoother reset")
