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

"""Terrain Awareness Constants and Default Parameters"""

# ============================================================================
# ELLIPSOID
# ============================================================================
RE_WGS84 = 6378137.0       # earth semimajor axis (m)
E2_WGS84 = 0.00669438      # first eccentricity squared
RB_WGS84 = RE_WGS84 * (1.0 - E2_WGS84) ** 0.5  # earth semiminor axis (m)
EP2_WGS84 = (RE_WGS84**2 - RB_WGS84**2) / RB_WGS84**2  # second eccentricity squared

# ============================================================================
# FLIGHT SAMPLE FEED
# ============================================================================
FLIGHT_FIELDS = ('roll', 'pitch', 'heading', 'vx', 'vy', 'vz',
                 'latitude', 'longitude', 'altitude')
NUM_FLIGHT_FIELDS = len(FLIGHT_FIELDS)
FEED_DELIMITER = ';'

# Field indices in the 9-vector layout
IDX_ROLL = 0
IDX_PITCH = 1
IDX_HEADING = 2
IDX_VEL = slice(3, 6)
IDX_LAT = 6
IDX_LON = 7
IDX_ALT = 8

# ============================================================================
# SMOOTHING
# ============================================================================
SMOOTHING_INTERVAL = 5     # N in alpha = 2/(N+1)

# ============================================================================
# PREDICTION
# ============================================================================
PREDICTION_STEPS = 60      # number of extrapolated points
PREDICTION_TIME = 60.0     # prediction horizon (s)
SAMPLE_INTERVAL = 0.5      # assumed time between samples for trend rates (s)

# ============================================================================
# COLLISION / DANGER
# ============================================================================
COLLISION_SKIP_POINTS = 5        # leading trajectory points ignored
COLLISION_MIN_ALTITUDE = 50.0    # altitude floor for a collision hit (m)
COLLISION_CLEARANCE = 100.0      # clearance that counts as a collision (m)
CRITICAL_CLEARANCE = 100.0       # danger level: critical (m)
WARNING_CLEARANCE = 300.0        # danger level: warning (m)

# ============================================================================
# TERRAIN
# ============================================================================
TILE_SIZE = 256            # pixels per tile edge
MAX_GRID_SIZE = 1024       # cap on grid cells per axis
HEIGHT_SCALE = 0.1         # metres per encoded RGB unit
MIN_WORKING_ZOOM = 10
MAX_WORKING_ZOOM = 14
MAX_MERCATOR_LAT = 85.0511287798  # Web-Mercator tiles stop at +-atan(sinh(pi))
HEIGHT_SENTINEL = 0.0      # returned for out-of-bounds lookups

MBTILES_SUFFIX = '.mbtiles'
DEFAULT_TERRAIN_NAME = 'terrain.mbtiles'
TILE_TABLES = ('this', 'tiles')  # 'this' is a non-standard variant, checked first

# Synthetic fallback grid
DEMO_GRID_SIZE = 100
DEMO_MIN_LAT = 59.0
DEMO_MAX_LAT = 61.0
DEMO_MIN_LON = 29.0
DEMO_MAX_LON = 31.0
DEMO_BASE_HEIGHT = 100.0
DEMO_AMPLITUDE = 50.0
DEMO_WAVENUMBER = 0.1

# ============================================================================
# REPLAY
# ============================================================================
REPLAY_RATE = 1.0          # seconds between replayed samples
