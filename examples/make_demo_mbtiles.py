#!/usr/bin/env python3
"""
Synthetic MBTiles Elevation File

This example demonstrates:
1. Computing the Web-Mercator tiles covering a bounding box
2. Encoding a height field as R + G*256 + B*65536 PNG tiles
3. Writing the tiles and metadata into an MBTiles container
4. Loading it back through the terrain model
"""

import argparse
import logging

import numpy as np

from pytaws.logger import setup_logger
from pytaws.terrain import TerrainModel, encode_tile, tile_range, write_mbtiles


def ridge_tile(tile_x, tile_y, size=256, base=150.0, peak=900.0):
    """Height field with a ridge running diagonally through each tile"""
    rows, cols = np.mgrid[0:size, 0:size]
    distance = np.abs(rows - cols) / size
    return base + (peak - base) * np.exp(-(distance * 8.0) ** 2) + (tile_x + tile_y) % 3 * 10.0


def build(output, min_lat, max_lat, min_lon, max_lon, zoom):
    logger = logging.getLogger("pytaws")
    min_x, min_y, max_x, max_y = tile_range(min_lat, max_lat, min_lon, max_lon, zoom)
    tiles = {}
    for tile_x in range(min_x, max_x + 1):
        for tile_y in range(min_y, max_y + 1):
            tiles[(zoom, tile_x, tile_y)] = encode_tile(ridge_tile(tile_x, tile_y))
    logger.info(f"Encoded {len(tiles)} tiles at zoom {zoom}")

    metadata = {
        'name': 'synthetic ridge',
        'format': 'png',
        'bounds': f"{min_lon},{min_lat},{max_lon},{max_lat}",
        'minzoom': zoom,
        'maxzoom': zoom,
    }
    return write_mbtiles(output, tiles, metadata)


def main():
    parser = argparse.ArgumentParser(description='Write a synthetic elevation MBTiles file')
    parser.add_argument('--output', type=str, default='terrain.mbtiles',
                        help='Output MBTiles path')
    parser.add_argument('--bounds', type=float, nargs=4, default=[59.9, 60.1, 29.9, 30.2],
                        metavar=('MIN_LAT', 'MAX_LAT', 'MIN_LON', 'MAX_LON'))
    parser.add_argument('--zoom', type=int, default=12, help='Zoom level (10-14 is loaded)')
    args = parser.parse_args()

    setup_logger("pytaws", "INFO")
    path = build(args.output, *args.bounds, args.zoom)

    model = TerrainModel()
    result = model.load(path)
    grid = model.grid
    print(f"Loaded {path}: status={result.status.name}, grid={grid.shape}, "
          f"heights {grid.heights.min():.1f}..{grid.heights.max():.1f} m")


if __name__ == '__main__':
    main()
