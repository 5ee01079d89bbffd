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
Euler angle to direction cosine matrix conversion.

Angles follow the aerospace roll-pitch-yaw convention; the matrix is the
product Rz(yaw) Ry(pitch) Rx(roll). The body frame is x forward, y right,
z down and the navigation frame is north-east-down.

References:
    Principles of GNSS, Inertial, and Multisensor Integrated Navigation Systems
    - (2013) Paul D. Groves
"""

import numpy as np
from numba import njit


@njit(cache=True, fastmath=True)
def euler2dcm(roll, pitch, yaw):
    """
    Body-to-NED direction cosine matrix from euler angles.

    Parameters
    ----------
    roll, pitch, yaw : float
        Euler angles in radians (yaw is the heading from north)

    Returns
    -------
    C_b_n : ndarray, shape (3, 3)
        Maps a body-frame vector into north-east-down components
    """
    sr, cr = np.sin(roll), np.cos(roll)
    sp, cp = np.sin(pitch), np.cos(pitch)
    sy, cy = np.sin(yaw), np.cos(yaw)

    C_b_n = np.empty((3, 3))
    C_b_n[0, 0] = cy * cp
    C_b_n[0, 1] = cy * sp * sr - sy * cr
    C_b_n[0, 2] = cy * sp * cr + sy * sr
    C_b_n[1, 0] = sy * cp
    C_b_n[1, 1] = sy * sp * sr + cy * cr
    C_b_n[1, 2] = sy * sp * cr - cy * sr
    C_b_n[2, 0] = -sp
    C_b_n[2, 1] = cp * sr
    C_b_n[2, 2] = cp * cr
    return C_b_n
