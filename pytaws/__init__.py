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

"""
PyTAWS - Terrain Awareness Processing Library

A Python library for smoothing aircraft attitude/velocity/position samples,
extrapolating the flight path, looking up terrain elevation from tiled
MBTiles rasters and classifying the predicted clearance above terrain.
"""

__version__ = "0.1.0"
__title__ = "pytaws"
__description__ = "Terrain awareness and collision warning core"

from .core import *
from .attitude import *
from .coordinate import *
from .filter import *
from .prediction import *
from .terrain import *
from .collision import *
from .io import *
from .system import TerrainAwarenessSystem
