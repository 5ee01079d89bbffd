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

"""Flight sample feed reading utilities

Records are semicolon delimited with nine numeric fields in the order
roll;pitch;heading;vx;vy;vz;latitude;longitude;altitude
"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional

import numpy as np
import pandas as pd

from ..core.constants import FEED_DELIMITER, FLIGHT_FIELDS, NUM_FLIGHT_FIELDS
from ..core.data_structures import FlightSample
from ..core.exceptions import MalformedInputError

logger = logging.getLogger(__name__)


def decode_flight_record(line: str) -> FlightSample:
    """Parse one feed record

    Raises
    ------
    MalformedInputError
        If the record does not hold exactly nine finite numbers
    """
    tokens = line.strip().split(FEED_DELIMITER)
    # tolerate a single trailing delimiter
    if len(tokens) == NUM_FLIGHT_FIELDS + 1 and not tokens[-1].strip():
        tokens = tokens[:-1]
    if len(tokens) != NUM_FLIGHT_FIELDS:
        raise MalformedInputError(f"Expected {NUM_FLIGHT_FIELDS} fields, got {len(tokens)}")

    try:
        values = [float(token) for token in tokens]
    except ValueError as e:
        raise MalformedInputError(f"Non-numeric field: {e}") from e

    try:
        return FlightSample(*values)
    except ValueError as e:
        raise MalformedInputError(str(e)) from e


def parse_flight_record(line: str) -> Optional[FlightSample]:
    """Parse one feed record, returning None when it is malformed"""
    try:
        return decode_flight_record(line)
    except MalformedInputError as e:
        logger.debug(f"Skipping malformed record {line.strip()!r}: {e}")
        return None


def _is_header(line: str) -> bool:
    # a header holds no numeric field at all, a damaged record still has some
    for token in line.strip().split(FEED_DELIMITER):
        try:
            float(token)
        except ValueError:
            continue
        return False
    return True


class FlightDataReader:
    """Reader for recorded flight sample files.

    An optional header line is skipped. Malformed records are dropped and
    counted in :attr:`skipped`; they never abort the read.

    Parameters
    ----------
    file_path : str or Path
        Path to the flight data file
    """

    def __init__(self, file_path):
        self.file_path = Path(file_path)
        self.skipped = 0

        if not self.file_path.exists():
            raise FileNotFoundError(f"Flight data file not found: {file_path}")

    def read(self) -> List[FlightSample]:
        """Read every well-formed record in file order"""
        with self.file_path.open('r', encoding='utf-8', errors='replace') as fh:
            samples, self.skipped = _parse_lines(fh)

        logger.info(f"Loaded {len(samples)} flight samples from {self.file_path}"
                    + (f" ({self.skipped} malformed records skipped)" if self.skipped else ""))
        return samples

    def read_dataframe(self) -> pd.DataFrame:
        """Read the file into a DataFrame with one column per feed field"""
        samples = self.read()
        if not samples:
            return pd.DataFrame(columns=list(FLIGHT_FIELDS), dtype=np.float64)
        return pd.DataFrame(np.vstack([s.as_array() for s in samples]), columns=list(FLIGHT_FIELDS))


def _parse_lines(lines: Iterable[str]) -> tuple[List[FlightSample], int]:
    samples: List[FlightSample] = []
    skipped = 0
    first = True
    for line in lines:
        if not line.strip():
            continue
        if first:
            first = False
            if _is_header(line):
                logger.debug(f"Skipping header {line.strip()!r}")
                continue

        sample = parse_flight_record(line)
        if sample is None:
            skipped += 1
        else:
            samples.append(sample)
    return samples, skipped


def parse_flight_lines(lines: Iterable[str]) -> List[FlightSample]:
    """Parse an iterable of feed records, dropping malformed ones"""
    samples, skipped = _parse_lines(lines)
    if skipped:
        logger.warning(f"Skipped {skipped} malformed flight records")
    return samples


def load_flight_data(file_path) -> List[FlightSample]:
    """
    Convenience function to load flight samples from file

    Parameters:
    -----------
    file_path : str or Path
        Path to the flight data file

    Returns:
    --------
    List[FlightSample]
        Samples in file order
    """
    return FlightDataReader(file_path).read()
