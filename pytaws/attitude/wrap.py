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
Attitude angle wrapping utilities.

Angles are in degrees. Headings live in [0, 360) and angular differences in
(-180, 180], so that a 359 -> 1 degree transition is a +2 degree change rather
than -358.

References:
    Principles of GNSS, Inertial, and Multisensor Integrated Navigation Systems
    - (2013) Paul D. Groves
"""

from numba import njit


@njit(cache=True)
def wrap360(angle):
    """
    Wrap an angle to the [0, 360) range.

    Parameters
    ----------
    angle : float
        Angle in degrees

    Returns
    -------
    wrapped : float
        Equivalent angle in degrees [0, 360)
    """
    wrapped = angle % 360.0
    # tiny negative inputs round up to exactly 360
    if wrapped >= 360.0:
        wrapped = 0.0
    return wrapped


@njit(cache=True)
def wrap180(angle):
    """
    Wrap an angle to the (-180, 180] range.

    Parameters
    ----------
    angle : float
        Angle in degrees

    Returns
    -------
    wrapped : float
        Equivalent angle in degrees (-180, 180]
    """
    wrapped = wrap360(angle)
    if wrapped > 180.0:
        wrapped -= 360.0
    return wrapped


@njit(cache=True)
def angle_diff(from_angle, to_angle):
    """
    Shortest-path signed difference ``to_angle - from_angle``.

    Parameters
    ----------
    from_angle : float
        Start angle in degrees
    to_angle : float
        End angle in degrees

    Returns
    -------
    delta : float
        Signed delta in degrees (-180, 180]
    """
    return wrap180(to_angle - from_angle)
