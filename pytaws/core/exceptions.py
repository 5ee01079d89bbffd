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

"""Exceptions raised inside the terrain awareness core"""


class TAWSError(Exception):
    """Base exception for all terrain awareness errors."""
    pass


class MalformedInputError(TAWSError, ValueError):
    """Raised when a flight sample record cannot be parsed."""
    pass


class TerrainUnavailable(TAWSError):
    """Raised when no terrain source can be resolved."""
    pass


class SourceFormatError(TAWSError):
    """Raised when a terrain source lacks an expected table or metadata key."""
    pass


class TileDecodeError(SourceFormatError):
    """Raised when a single tile payload cannot be decoded."""
    pass


class LoadCancelled(TAWSError):
    """Raised when a terrain load is cancelled between tiles."""
    pass
