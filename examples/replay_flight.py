#!/usr/bin/env python3
"""
Flight Replay Through the Terrain Awareness Pipeline

This example demonstrates:
1. Loading terrain (falling back to the demo grid when none is found)
2. Reading a semicolon separated flight recording
3. Replaying it at a fixed rate through smoothing, prediction and
   collision classification
4. Reporting danger levels and collision warnings per sample

Without --flight a descending approach over the demo terrain is generated.
"""

import argparse
import tempfile
from pathlib import Path

import numpy as np

from pytaws import TAWSConfig, TerrainAwarenessSystem


def write_demo_flight(path, samples=40):
    """Descent from 1500 m towards the hills of the demo terrain"""
    with open(path, 'w', encoding='utf-8') as fh:
        fh.write("roll;pitch;heading;vx;vy;vz;latitude;longitude;altitude\n")
        for i in range(samples):
            altitude = 1500.0 - 35.0 * i
            noise = np.random.default_rng(i).normal(0.0, 0.5, 3)
            fh.write(f"{noise[0]:.2f};{-3.0 + noise[1]:.2f};{45.0 + noise[2]:.2f};90;0;0;"
                     f"{59.6 + 0.0006 * i:.6f};{29.6 + 0.0011 * i:.6f};{altitude:.1f}\n")
    return path


def main():
    parser = argparse.ArgumentParser(description='Replay a flight recording')
    parser.add_argument('--flight', type=str, default=None, help='Flight data file')
    parser.add_argument('--terrain', type=str, default=None, help='MBTiles terrain file')
    parser.add_argument('--rate', type=float, default=0.05, help='Seconds between samples')
    parser.add_argument('--log-level', type=str, default='INFO')
    args = parser.parse_args()

    config = TAWSConfig.from_dict({'logging': {'default_level': args.log_level}})
    system = TerrainAwarenessSystem(config)

    result = system.load_terrain(args.terrain)
    if result.degraded:
        print(system.terrain_instructions())

    with tempfile.TemporaryDirectory() as tmp:
        flight = args.flight or write_demo_flight(Path(tmp) / 'demo_flight.csv')
        count = system.load_flight_data(flight)
        print(f"Replaying {count} samples")

        def report(processed):
            state = processed.state
            line = (f"{state.latitude:9.5f} {state.longitude:9.5f} {state.altitude:7.1f} m  "
                    f"{processed.max_danger.name:8s}")
            if processed.collision_warning:
                line += f"  {processed.warning_text()}"
            print(line)

        system.add_listener(report)
        replay = system.start_simulation(args.rate)
        if replay is not None:
            replay.join()
        system.close()


if __name__ == '__main__':
    main()
