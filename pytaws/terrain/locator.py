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

"""Terrain source discovery"""

import logging
import os
import tempfile
from pathlib import Path
from typing import NamedTuple, Optional, Union

from ..core.config import TerrainConfig
from ..core.constants import DEFAULT_TERRAIN_NAME, MBTILES_SUFFIX

logger = logging.getLogger(__name__)

SourceRef = Union[str, os.PathLike, bytes, bytearray, memoryview, None]


class ResolvedSource(NamedTuple):
    """A terrain container located on disk

    Attributes
    ----------
    path : Path
        File to open
    origin : str
        Where it was found: 'explicit', 'preferred', 'storage', 'bundled' or 'bytes'
    temporary : bool
        True when the file was materialised from raw bytes and should be
        removed after loading
    """
    path: Path
    origin: str
    temporary: bool = False

    def cleanup(self):
        if self.temporary:
            try:
                self.path.unlink()
            except FileNotFoundError:
                pass


def _is_mbtiles(path: Path) -> bool:
    return path.is_file() and path.suffix.lower() == MBTILES_SUFFIX


class TerrainLocator:
    """Resolves a terrain source reference to a container file.

    Lookup order:

    1. an explicit path that exists
    2. the preferred storage directory, by name, then any ``*.mbtiles`` in it
    3. the discoverable search directories, any ``*.mbtiles`` (recursive)
    4. the bundled data directory, by name

    Raw bytes are written to a temporary file.

    Parameters
    ----------
    preferred_dir : str or Path, optional
        Preferred on-device storage directory
    search_dirs : list, optional
        Additional directories scanned for containers
    bundled_dir : str or Path, optional
        Directory with data shipped alongside the application
    default_name : str
        File name assumed when no reference is given
    """

    def __init__(self, preferred_dir=None, search_dirs=(), bundled_dir=None,
                 default_name: str = DEFAULT_TERRAIN_NAME):
        self.preferred_dir = Path(preferred_dir) if preferred_dir is not None else None
        self.search_dirs = [Path(d) for d in search_dirs]
        self.bundled_dir = Path(bundled_dir) if bundled_dir is not None else None
        self.default_name = default_name

    @classmethod
    def from_config(cls, config: Optional[TerrainConfig] = None) -> 'TerrainLocator':
        config = config or TerrainConfig()
        return cls(config.preferred_dir, config.search_dirs, config.bundled_dir, config.default_name)

    def resolve(self, source_ref: SourceRef = None) -> Optional[ResolvedSource]:
        """Locate a terrain container

        Parameters
        ----------
        source_ref : str, Path, bytes or None
            Path or file name of the container, its raw bytes, or None to use
            the default name and discovery

        Returns
        -------
        ResolvedSource or None
            None when nothing could be found
        """
        if isinstance(source_ref, (bytes, bytearray, memoryview)):
            return self._materialise(bytes(source_ref))

        name = self.default_name
        if source_ref is not None:
            path = Path(source_ref)
            if path.is_file():
                logger.debug(f"Using explicit terrain source {path}")
                return ResolvedSource(path, 'explicit')
            name = path.name

        for finder in (self._check_preferred, self._search_storage, self._check_bundled):
            found = finder(name)
            if found is not None:
                logger.info(f"Resolved terrain source {found.path} ({found.origin})")
                return found

        logger.info(f"No terrain source found for '{name}'")
        return None

    def _check_preferred(self, name: str) -> Optional[ResolvedSource]:
        if self.preferred_dir is None or not self.preferred_dir.is_dir():
            logger.debug("Preferred terrain directory does not exist")
            return None

        specific = self.preferred_dir / name
        if specific.is_file():
            return ResolvedSource(specific, 'preferred')

        candidates = sorted(p for p in self.preferred_dir.iterdir() if _is_mbtiles(p))
        if candidates:
            return ResolvedSource(candidates[0], 'preferred')
        return None

    def _search_storage(self, name: str) -> Optional[ResolvedSource]:
        for directory in self.search_dirs:
            if not directory.is_dir():
                continue
            candidates = sorted(p for p in directory.rglob('*') if _is_mbtiles(p))
            if candidates:
                return ResolvedSource(candidates[0], 'storage')
        return None

    def _check_bundled(self, name: str) -> Optional[ResolvedSource]:
        if self.bundled_dir is None:
            return None
        bundled = self.bundled_dir / name
        if bundled.is_file():
            return ResolvedSource(bundled, 'bundled')
        return None

    @staticmethod
    def _materialise(data: bytes) -> ResolvedSource:
        handle, path = tempfile.mkstemp(suffix=MBTILES_SUFFIX)
        with os.fdopen(handle, 'wb') as f:
            f.write(data)
        logger.debug(f"Wrote {len(data)} bytes of terrain data to {path}")
        return ResolvedSource(Path(path), 'bytes', temporary=True)

    def installation_instructions(self) -> str:
        """Where a user can place a terrain container so it is picked up"""
        lines = [f"Place an elevation {MBTILES_SUFFIX} file (e.g. '{self.default_name}') in one of:"]
        if self.preferred_dir is not None:
            lines.append(f"  - {self.preferred_dir} (preferred)")
        lines.extend(f"  - {d}" for d in self.search_dirs)
        if self.bundled_dir is not None:
            lines.append(f"  - {self.bundled_dir} (bundled data)")
        if len(lines) == 1:
            lines.append("  - no directories configured; pass the file path explicitly")
        return "\n".join(lines)
