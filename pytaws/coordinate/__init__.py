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

"""Coordinate transformation utilities

This module provides the transformations used by the trajectory predictor:
- Geodetic <-> ECEF (closed form / Bowring reduction)
- Vectorised variants for (n, 3) arrays
- DCM for NED <-> ECEF and body -> ECEF
- Body-frame velocity rotation into NED and ECEF

For the euler angle kernels themselves use the pytaws.attitude module.
"""

from .dcm import body2ecef_dcm, ecef2ned_dcm, ned2ecef_dcm
from .transforms import (
    body2ecef,
    body2ned,
    ecef2geodetic,
    ecef2geodetic_array,
    geodetic2ecef,
    geodetic2ecef_array,
)
