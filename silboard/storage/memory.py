"""
Persistent Memory
=================

Emulates the flight controller's non-volatile configuration memory with one
binary file per board namespace:

    <root>/<namespace>/mem.bin

The contents are opaque; the firmware owns their layout. Failures are
logged and reported as False, never raised.
"""

import logging
import os
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

DEFAULT_MEMORY_ROOT = "silboard_memory"
MEMORY_FILENAME = "mem.bin"


class PersistentStore:
    """File-backed byte blob for one board instance."""

    def __init__(self, namespace: str = "", root: Union[str, Path] = DEFAULT_MEMORY_ROOT):
        self.namespace = namespace
        self.root = Path(root)

    @property
    def directory(self) -> Path:
        ns = self.namespace.strip("/")
        return self.root / ns if ns else self.root

    @property
    def path(self) -> Path:
        return self.directory / MEMORY_FILENAME

    def write(self, data: bytes) -> bool:
        """Store data, creating the namespace directory if needed."""
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning(f"Unable to create memory directory {self.directory}: {e}")
            return False

        # A failed write leaves the previous blob in place
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            with open(tmp_path, 'wb') as f:
                f.write(bytes(data))
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.warning(f"Unable to write memory file {self.path}: {e}")
            try:
                tmp_path.unlink()
            except OSError:
                pass
            return False

        logger.debug(f"Wrote {len(data)} bytes to {self.path}")
        return True

    def read(self, length: int) -> Optional[bytes]:
        """Return up to length bytes, or None if the file cannot be opened."""
        try:
            with open(self.path, 'rb') as f:
                data = f.read(length)
        except OSError as e:
            logger.warning(f"Unable to load memory file {self.path}: {e}")
            return None
        return data

    def read_into(self, dest: bytearray, length: int) -> bool:
        """Copy up to length stored bytes into dest; dest is untouched on failure."""
        if length < 0:
            logger.warning(f"Invalid memory read length {length}")
            return False
        data = self.read(min(length, len(dest)))
        if data is None:
            return False
        dest[:len(data)] = data
        return True

    def exists(self) -> bool:
        return self.path.is_file()
