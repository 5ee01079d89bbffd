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

"""Web-Mercator tile addressing and elevation tile decoding"""

import io
import logging
import math

import numpy as np
from PIL import Image, UnidentifiedImageError

from ..core.constants import (
    HEIGHT_SCALE,
    MAX_MERCATOR_LAT,
    MAX_WORKING_ZOOM,
    MIN_WORKING_ZOOM,
)
from ..core.exceptions import TileDecodeError

logger = logging.getLogger(__name__)

# Channel weights of the R + G*256 + B*65536 height encoding
RGB_WEIGHTS = np.array([1.0, 256.0, 65536.0])


def latlon2tile(lat: float, lon: float, zoom: int) -> tuple[int, int]:
    """Convert a geodetic position to XYZ tile indices

    Parameters
    ----------
    lat : float
        Latitude in degrees
    lon : float
        Longitude in degrees
    zoom : int
        Zoom level

    Returns
    -------
    tuple[int, int]
        Tile column x and tile row y (row 0 is the northern edge), clamped
        into the 2^zoom x 2^zoom tile matrix

    Notes
    -----
    Standard Web-Mercator tiling:
    x = floor((lon + 180) / 360 * 2^zoom)
    y = floor((1 - ln(tan(lat) + sec(lat)) / pi) / 2 * 2^zoom)
    """
    if not (math.isfinite(lat) and math.isfinite(lon)):
        raise ValueError(f"Non-finite position ({lat}, {lon})")
    n = 2.0 ** zoom
    last = int(n) - 1
    lat_rad = math.radians(min(max(lat, -MAX_MERCATOR_LAT), MAX_MERCATOR_LAT))
    tile_x = int(math.floor((lon + 180.0) / 360.0 * n))
    tile_y = int(math.floor((1.0 - math.log(math.tan(lat_rad) + 1.0 / math.cos(lat_rad)) / math.pi) / 2.0 * n))
    return min(max(tile_x, 0), last), min(max(tile_y, 0), last)


def tile_range(min_lat: float, max_lat: float, min_lon: float, max_lon: float,
               zoom: int) -> tuple[int, int, int, int]:
    """Tiles covering a bounding box

    Returns
    -------
    tuple[int, int, int, int]
        (min_x, min_y, max_x, max_y), inclusive. The north-west corner gives
        the minimum indices and the south-east corner the maximum.
    """
    min_x, min_y = latlon2tile(max_lat, min_lon, zoom)
    max_x, max_y = latlon2tile(min_lat, max_lon, zoom)
    return min_x, min_y, max_x, max_y


def flip_row(row: int, zoom: int) -> int:
    """Convert between XYZ and TMS row numbering (2^zoom - 1 - row)"""
    return (1 << zoom) - 1 - row


def choose_zoom(min_zoom: int, max_zoom: int,
                lower: int = MIN_WORKING_ZOOM, upper: int = MAX_WORKING_ZOOM) -> int:
    """Working zoom level: midpoint of the source range clamped to [lower, upper]"""
    return min(max((min_zoom + max_zoom) // 2, lower), upper)


def decode_tile(blob: bytes, scale: float = HEIGHT_SCALE) -> np.ndarray:
    """Decode a raster tile payload to a height array

    Parameters
    ----------
    blob : bytes
        Encoded image (PNG, JPEG, WebP, ... anything Pillow reads)
    scale : float
        Meters per encoded unit (default 0.1)

    Returns
    -------
    np.ndarray
        Heights in meters, shape (rows, cols), row 0 at the top (north)

    Raises
    ------
    TileDecodeError
        If the payload is not a readable image

    Notes
    -----
    height = (R + G*256 + B*65536) * scale
    """
    try:
        with Image.open(io.BytesIO(blob)) as image:
            rgb = np.asarray(image.convert('RGB'), dtype=np.float64)
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise TileDecodeError(f"Cannot decode tile payload: {e}") from e

    return (rgb @ RGB_WEIGHTS) * scale


def encode_tile(heights: np.ndarray, scale: float = HEIGHT_SCALE) -> bytes:
    """Encode a height array as a PNG tile, the inverse of :func:`decode_tile`

    Heights are rounded to the nearest encoded unit; negative heights are
    clipped to zero since the encoding is unsigned.
    """
    units = np.clip(np.rint(np.asarray(heights, dtype=np.float64) / scale), 0, 2**24 - 1).astype(np.uint32)
    rgb = np.stack([units & 0xFF, (units >> 8) & 0xFF, (units >> 16) & 0xFF], axis=-1).astype(np.uint8)
    buffer = io.BytesIO()
    Image.fromarray(rgb).save(buffer, format='PNG')
    return buffer.getvalue()
