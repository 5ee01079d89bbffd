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

"""I/O utilities for pytaws."""

from .flight_reader import (
    FlightDataReader,
    decode_flight_record,
    load_flight_data,
    parse_flight_lines,
    parse_flight_record,
)
from .replay import LiveSampleFeed, SampleReplay

__all__ = [
    'FlightDataReader', 'decode_flight_record', 'load_flight_data',
    'parse_flight_lines', 'parse_flight_record',
    'LiveSampleFeed', 'SampleReplay',
]
