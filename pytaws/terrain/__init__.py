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

"""Terrain elevation model: tile decoding, container access and grid queries"""

from .grid import ElevationGrid
from .locator import ResolvedSource, TerrainLocator
from .mbtiles import MBTilesReader, TileBounds, write_mbtiles
from .model import TerrainModel
from .tiles import choose_zoom, decode_tile, encode_tile, flip_row, latlon2tile, tile_range

__all__ = [
    'ElevationGrid',
    'MBTilesReader',
    'ResolvedSource',
    'TerrainLocator',
    'TerrainModel',
    'TileBounds',
    'choose_zoom',
    'decode_tile',
    'encode_tile',
    'flip_row',
    'latlon2tile',
    'tile_range',
    'write_mbtiles',
]
