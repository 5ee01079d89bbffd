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
Attitude module for body-frame rotations and angle handling.

- Euler angles (roll-pitch-yaw) to body-to-NED direction cosine matrices
- Degree based angle wrapping and shortest-path differences

All rotations assume right-hand coordinate frames with euler angles in the order
'roll-pitch-yaw' and DCMs with the order of 'ZYX'.
"""

from .euler import euler2dcm
from .wrap import angle_diff, wrap180, wrap360

__all__ = [
    'euler2dcm',
    'wrap360', 'wrap180', 'angle_diff',
]
