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

"""Terrain awareness pipeline: smoothing, prediction and collision checks"""

import logging
import threading
from typing import Callable, List, Optional

from .collision.classifier import CollisionClassifier
from .core.config import TAWSConfig
from .core.data_structures import FlightSample, ProcessResult, TerrainLoadResult, TerrainStatus
from .filter.smoother import SampleSmoother
from .io.flight_reader import load_flight_data
from .io.replay import LiveSampleFeed, SampleReplay
from .logger import setup_logger_from_config
from .prediction.predictor import TrajectoryPredictor
from .terrain.model import TerrainModel

logger = logging.getLogger(__name__)

ResultListener = Callable[[ProcessResult], object]


class TerrainAwarenessSystem:
    """Per-aircraft terrain awareness pipeline.

    Each call to :meth:`process` runs smooth, predict and classify to
    completion and returns a :class:`ProcessResult` for the rendering layer.
    Samples come from the caller directly, from a file replay
    (:meth:`start_simulation`) or from a live feed (:meth:`attach_feed`);
    starting one source switches the other off.

    Parameters
    ----------
    config : TAWSConfig, optional
        Pipeline configuration; a non-empty ``logging`` section configures
        the package loggers
    terrain_model : TerrainModel, optional
        Shared terrain model, built from ``config.terrain`` when omitted

    Examples
    --------
    >>> system = TerrainAwarenessSystem()
    >>> system.load_terrain('alps.mbtiles')
    >>> result = system.process(sample)
    >>> result.warning_text()
    'COLLISION WARNING: 5 sec'
    """

    def __init__(self, config: Optional[TAWSConfig] = None,
                 terrain_model: Optional[TerrainModel] = None):
        self.config = config or TAWSConfig()
        if self.config.logging:
            setup_logger_from_config(self.config.logging)

        self.terrain = terrain_model or TerrainModel(self.config.terrain)
        self.smoother = SampleSmoother.from_config(self.config.smoother)
        self.predictor = TrajectoryPredictor.from_config(self.config.prediction)
        self.classifier = CollisionClassifier(self.terrain, self.config.collision)

        self.flight_data: List[FlightSample] = []
        self.last_result: Optional[ProcessResult] = None
        self._listeners: List[ResultListener] = []
        self._lock = threading.Lock()
        self._replay: Optional[SampleReplay] = None
        self._feed: Optional[LiveSampleFeed] = None

    def add_listener(self, listener: ResultListener):
        """Register a callback receiving every :class:`ProcessResult`"""
        self._listeners.append(listener)

    def process(self, sample: FlightSample) -> ProcessResult:
        """Run one pipeline step for a raw sample

        Parameters
        ----------
        sample : FlightSample
            Raw flight sample

        Returns
        -------
        ProcessResult
            Smoothed state, predicted trajectory, per-point danger levels and
            time to collision (None when the trajectory stays clear)
        """
        with self._lock:
            state = self.smoother.smooth(sample)
            trajectory = self.predictor.predict(self.smoother.history)
            danger_levels = self.classifier.classify(trajectory)
            ttc = self.classifier.time_to_collision(trajectory)
            result = ProcessResult(state.snapshot(), trajectory, danger_levels, ttc,
                                   self.terrain.status)
            self.last_result = result

        if ttc is not None:
            logger.warning(f"Terrain conflict predicted in {ttc:.1f} s at "
                           f"{result.state.latitude:.5f}, {result.state.longitude:.5f}")
        else:
            logger.trace(f"Processed sample at {result.state.latitude:.5f}, {result.state.longitude:.5f}, "
                         f"{result.state.altitude:.1f} m")

        for listener in list(self._listeners):
            listener(result)
        return result

    def load_terrain(self, source_ref=None,
                     cancel_event: Optional[threading.Event] = None) -> TerrainLoadResult:
        """Load terrain elevation data; failures fall back to the demo grid"""
        result = self.terrain.load(source_ref, cancel_event)
        if result.degraded:
            logger.warning(f"Terrain in degraded mode: {result.message}")
        return result

    def terrain_instructions(self) -> str:
        """Where to place a terrain file so :meth:`load_terrain` finds it"""
        return self.terrain.locator.installation_instructions()

    def reset(self):
        """Clear the smoothed state and its history"""
        with self._lock:
            self.smoother.reset()
            self.last_result = None
        logger.info("Pipeline state reset")

    def load_flight_data(self, file_path) -> int:
        """Load recorded samples for replay

        Returns
        -------
        int
            Number of samples loaded
        """
        self.flight_data = load_flight_data(file_path)
        return len(self.flight_data)

    @property
    def has_flight_data(self) -> bool:
        return bool(self.flight_data)

    def initial_sample(self) -> FlightSample:
        """First recorded sample, or an all-zero sample when none is loaded"""
        if self.flight_data:
            return self.flight_data[0]
        return FlightSample(0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0)

    @property
    def simulation_running(self) -> bool:
        return self._replay is not None and self._replay.is_running

    def start_simulation(self, rate: Optional[float] = None) -> Optional[SampleReplay]:
        """Replay the loaded flight data through :meth:`process`

        The demo terrain is installed when no terrain has been loaded, and any
        attached live feed is disabled.

        Parameters
        ----------
        rate : float, optional
            Seconds between samples, defaults to ``config.replay_rate``

        Returns
        -------
        SampleReplay or None
            The running replay, None when no flight data is loaded
        """
        if not self.flight_data:
            logger.warning("No flight data loaded, simulation not started")
            return None

        if self.terrain.status is TerrainStatus.UNLOADED:
            self.terrain.create_demo_terrain()

        if self._feed is not None:
            self._feed.enabled = False

        self.stop_simulation()
        self.reset()
        self._replay = SampleReplay(self.flight_data, self.process,
                                    rate if rate is not None else self.config.replay_rate)
        self._replay.start()
        return self._replay

    def stop_simulation(self):
        if self._replay is not None:
            self._replay.stop()
            self._replay = None

    def attach_feed(self, feed: LiveSampleFeed):
        """Switch to real-time mode driven by a live feed"""
        self.stop_simulation()
        if self._feed is not None and self._feed is not feed:
            self._feed.unsubscribe(self.process)
        self._feed = feed
        feed.subscribe(self.process)
        feed.enabled = True
        logger.info("Live sample feed attached")

    def detach_feed(self):
        if self._feed is not None:
            self._feed.enabled = False
            self._feed.unsubscribe(self.process)
            self._feed = None
            logger.info("Live sample feed detached")

    def close(self):
        """Stop every sample source"""
        self.stop_simulation()
        self.detach_feed()
