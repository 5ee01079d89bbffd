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

"""Direction Cosine Matrix (DCM) transformations for coordinate systems"""

import numpy as np

from ..attitude.euler import euler2dcm


def ecef2ned_dcm(lat: float, lon: float) -> np.ndarray:
    """
    Earth-Centered-Earth-Fixed to North-East-Down direction cosine matrix

    Parameters:
    -----------
    lat : float
        Geodetic latitude (rad)
    lon : float
        Longitude (rad)

    Returns:
    --------
    C_e_n : np.ndarray
        ECEF->NED direction cosine matrix (3x3)
    """
    sin_lat = np.sin(lat)
    cos_lat = np.cos(lat)
    sin_lon = np.sin(lon)
    cos_lon = np.cos(lon)

    C_e_n = np.array([
        [-sin_lat * cos_lon, -sin_lat * sin_lon, cos_lat],
        [-sin_lon, cos_lon, 0.0],
        [-cos_lat * cos_lon, -cos_lat * sin_lon, -sin_lat]
    ], dtype=np.float64)

    return C_e_n


def ned2ecef_dcm(lat: float, lon: float) -> np.ndarray:
    """
    North-East-Down to Earth-Centered-Earth-Fixed direction cosine matrix

    Parameters:
    -----------
    lat : float
        Geodetic latitude (rad)
    lon : float
        Longitude (rad)

    Returns:
    --------
    C_n_e : np.ndarray
        NED->ECEF direction cosine matrix (3x3)
    """
    return ecef2ned_dcm(lat, lon).T


def body2ecef_dcm(roll: float, pitch: float, yaw: float, lat: float, lon: float) -> np.ndarray:
    """
    Body to Earth-Centered-Earth-Fixed direction cosine matrix

    Composes the attitude DCM (body->NED) with the local NED->ECEF rotation.

    Parameters:
    -----------
    roll, pitch, yaw : float
        Euler angles (rad)
    lat, lon : float
        Geodetic position of the body (rad)

    Returns:
    --------
    C_b_e : np.ndarray
        Body->ECEF direction cosine matrix (3x3)
    """
    return ned2ecef_dcm(lat, lon) @ euler2dcm(roll, pitch, yaw)
