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

"""Driving the pipeline from recorded or live flight samples"""

import logging
import threading
from typing import Callable, List, Optional, Sequence

from ..core.constants import REPLAY_RATE
from ..core.data_structures import FlightSample
from .flight_reader import parse_flight_record

logger = logging.getLogger(__name__)

SampleCallback = Callable[[FlightSample], object]


class SampleReplay:
    """Feeds recorded samples to a callback at a fixed rate on a worker thread.

    The first sample is delivered immediately, then one every ``rate``
    seconds. The replay ends by itself after the last sample.

    Parameters
    ----------
    samples : Sequence[FlightSample]
        Samples in replay order
    callback : callable
        Called with each sample from the worker thread
    rate : float
        Seconds between samples
    """

    def __init__(self, samples: Sequence[FlightSample], callback: SampleCallback,
                 rate: float = REPLAY_RATE):
        if rate <= 0:
            raise ValueError(f"rate must be positive, got {rate}")
        self.samples = list(samples)
        self.callback = callback
        self.rate = float(rate)
        self._index = 0
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def index(self) -> int:
        """Number of samples delivered so far"""
        return self._index

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self):
        """Start (or restart) the replay from the first sample"""
        self.stop()
        self._index = 0
        self._stop_event = threading.Event()
        self._thread = threading.Thread(target=self._run, args=(self._stop_event,),
                                        name='sample-replay', daemon=True)
        self._thread.start()
        logger.info(f"Replay of {len(self.samples)} samples started at {self.rate} s intervals")

    def stop(self):
        """Stop the replay; a no-op when it is not running"""
        self._stop_event.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join()
        self._thread = None

    def join(self, timeout: Optional[float] = None):
        thread = self._thread
        if thread is not None:
            thread.join(timeout)

    def _run(self, stop_event: threading.Event):
        while self._index < len(self.samples):
            if stop_event.is_set():
                logger.info(f"Replay stopped at sample {self._index}")
                return
            try:
                self.callback(self.samples[self._index])
            except Exception:
                logger.exception(f"Replay callback failed at sample {self._index}, stopping")
                return
            self._index += 1
            if self._index < len(self.samples) and stop_event.wait(self.rate):
                logger.info(f"Replay stopped at sample {self._index}")
                return
        logger.info("Replay reached the end of the recorded data")


class LiveSampleFeed:
    """Push-based source of live samples.

    Samples pushed while the feed is disabled are dropped, so a replay and a
    live source never drive the pipeline at the same time.
    """

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self._subscribers: List[SampleCallback] = []
        self._lock = threading.Lock()
        self.dropped = 0

    def subscribe(self, callback: SampleCallback):
        with self._lock:
            self._subscribers.append(callback)

    def unsubscribe(self, callback: SampleCallback):
        with self._lock:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

    def push(self, sample: FlightSample) -> bool:
        """Deliver a sample to every subscriber

        Returns
        -------
        bool
            False when the feed is disabled and the sample was dropped
        """
        if not self.enabled:
            return False
        with self._lock:
            subscribers = list(self._subscribers)
        for callback in subscribers:
            callback(sample)
        return True

    def push_line(self, line: str) -> bool:
        """Parse a raw feed record and deliver it; malformed records are dropped"""
        sample = parse_flight_record(line)
        if sample is None:
            self.dropped += 1
            return False
        return self.push(sample)
