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

"""Core Terrain Awareness Module.

This module provides the fundamental components shared by every stage of the
terrain awareness pipeline:

- **Constants and Parameters**: ellipsoid parameters, feed layout, smoothing,
  prediction, collision and terrain defaults
- **Data Structures**: flight samples, the in-place smoothed state, the
  fixed-capacity history ring buffer, trajectories and result containers
- **Configuration**: dataclass based configuration sections
- **Exceptions**: the error taxonomy recovered inside the pipeline

Example Usage:
    >>> from pytaws.core import FlightSample, DangerLevel
    >>>
    >>> sample = FlightSample(roll=0.0, pitch=0.0, heading=370.0,
    ...                       vx=80.0, vy=0.0, vz=0.0,
    ...                       latitude=60.0, longitude=30.0, altitude=1500.0)
    >>> sample.heading
    10.0
"""

from .config import *
from .constants import *
from .data_structures import *
from .exceptions import *
