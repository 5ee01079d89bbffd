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

Geodetic coordinates are [latitude, longitude, altitude] in degrees and meters.
ECEF coordinates are [x, y, z] in meters.
"""

import numpy as np

from ..attitude.euler import euler2dcm
from ..core.constants import E2_WGS84, EP2_WGS84, RB_WGS84, RE_WGS84
from .dcm import body2ecef_dcm


def _geodetic2ecef(lat, lon, alt):
    sin_lat = np.sin(lat)
    cos_lat = np.cos(lat)

    N = RE_WGS84 / np.sqrt(1.0 - E2_WGS84 * sin_lat**2)

    x = (N + alt) * cos_lat * np.cos(lon)
    y = (N + alt) * cos_lat * np.sin(lon)
    z = (N * (1.0 - E2_WGS84) + alt) * sin_lat
    return x, y, z


def _ecef2geodetic(x, y, z):
    p = np.sqrt(x**2 + y**2)
    theta = np.arctan2(z * RE_WGS84, p * RB_WGS84)
    sin_theta = np.sin(theta)
    cos_theta = np.cos(theta)

    lon = np.arctan2(y, x)
    lat = np.arctan2(z + EP2_WGS84 * RB_WGS84 * sin_theta**3,
                     p - E2_WGS84 * RE_WGS84 * cos_theta**3)

    sin_lat = np.sin(lat)
    # p*cos(lat) + z*sin(lat) - a^2/N stays well conditioned at the poles
    alt = p * np.cos(lat) + z * sin_lat - RE_WGS84 * np.sqrt(1.0 - E2_WGS84 * sin_lat**2)
    return lat, lon, alt


def geodetic2ecef(lat: float, lon: float, alt: float) -> np.ndarray:
    """Convert geodetic coordinates to ECEF coordinates

    Parameters
    ----------
    lat : float
        Geodetic latitude in degrees
    lon : float
        Longitude in degrees
    alt : float
        Height above the ellipsoid in meters

    Returns
    -------
    np.ndarray
        ECEF coordinates [x, y, z] in meters

    Notes
    -----
    Closed form, no iteration:
    N = a / sqrt(1 - e² sin²(lat)),
    x = (N + h) cos(lat) cos(lon), y = (N + h) cos(lat) sin(lon),
    z = (N (1 - e²) + h) sin(lat).

    Examples
    --------
    >>> ecef = geodetic2ecef(0.0, 0.0, 0.0)
    >>> print(f"{ecef[0]:.1f}")
    6378137.0
    """
    x, y, z = _geodetic2ecef(np.radians(lat), np.radians(lon), alt)
    return np.array([x, y, z], dtype=np.float64)


def ecef2geodetic(x: float, y: float, z: float) -> np.ndarray:
    """Convert ECEF coordinates to geodetic coordinates

    Uses Bowring's closed-form reduction: a parametric latitude
    θ = atan2(z·a, p·b) is substituted back into the latitude equation.

    Parameters
    ----------
    x, y, z : float
        ECEF coordinates in meters

    Returns
    -------
    np.ndarray
        Geodetic coordinates [lat, lon, alt] where lat and lon are in
        degrees and alt is in meters

    Notes
    -----
    For terrestrial and aviation altitudes the single Bowring step is accurate
    to well below a millimeter in height.
    """
    lat, lon, alt = _ecef2geodetic(x, y, z)
    return np.array([np.degrees(lat), np.degrees(lon), alt], dtype=np.float64)


def geodetic2ecef_array(llh: np.ndarray) -> np.ndarray:
    """Vectorised :func:`geodetic2ecef` for an (n, 3) array of [lat, lon, alt]"""
    llh = np.atleast_2d(np.asarray(llh, dtype=np.float64))
    x, y, z = _geodetic2ecef(np.radians(llh[:, 0]), np.radians(llh[:, 1]), llh[:, 2])
    return np.column_stack((x, y, z))


def ecef2geodetic_array(xyz: np.ndarray) -> np.ndarray:
    """Vectorised :func:`ecef2geodetic` for an (n, 3) array of [x, y, z]"""
    xyz = np.atleast_2d(np.asarray(xyz, dtype=np.float64))
    lat, lon, alt = _ecef2geodetic(xyz[:, 0], xyz[:, 1], xyz[:, 2])
    return np.column_stack((np.degrees(lat), np.degrees(lon), alt))


def body2ned(v_body: np.ndarray, roll: float, pitch: float, yaw: float) -> np.ndarray:
    """Rotate a body-frame vector into the local NED frame

    Parameters
    ----------
    v_body : np.ndarray
        Body-frame vector [x forward, y right, z down]
    roll, pitch, yaw : float
        Euler angles in degrees

    Returns
    -------
    np.ndarray
        Vector in north-east-down components
    """
    C_b_n = euler2dcm(np.radians(roll), np.radians(pitch), np.radians(yaw))
    return C_b_n @ np.asarray(v_body, dtype=np.float64)


def body2ecef(v_body: np.ndarray, roll: float, pitch: float, yaw: float,
              lat: float, lon: float) -> np.ndarray:
    """Rotate a body-frame velocity vector into the ECEF frame

    Parameters
    ----------
    v_body : np.ndarray
        Body-frame velocity [vx, vy, vz] in m/s
    roll, pitch, yaw : float
        Euler angles in degrees (yaw is the heading)
    lat, lon : float
        Geodetic position in degrees where the local level frame is anchored

    Returns
    -------
    np.ndarray
        ECEF velocity [vx, vy, vz] in m/s

    Examples
    --------
    >>> # heading north at the equator and prime meridian points along +z
    >>> v = body2ecef(np.array([100.0, 0.0, 0.0]), 0.0, 0.0, 0.0, 0.0, 0.0)
    >>> bool(np.allclose(v, [0.0, 0.0, 100.0]))
    True
    """
    C_b_e = body2ecef_dcm(np.radians(roll), np.radians(pitch), np.radians(yaw),
                          np.radians(lat), np.radians(lon))
    return C_b_e @ np.asarray(v_body, dtype=np.float64)
