"""Persistence of the device save blob."""

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)


class SaveStore:
    """Holds the single opaque save blob in a file."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    def save(self, data: bytes) -> None:
        """Replace the stored blob atomically."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_name(self._path.name + ".tmp")
        tmp.write_bytes(data)
        os.replace(tmp, self._path)
        logger.info("Saved game data to %s: %d bytes", self._path, len(data))

    def load(self) -> bytes | None:
        """Return the stored blob, or None if nothing was saved yet."""
        try:
            data = self._path.read_bytes()
        except FileNotFoundError:
            return None
        logger.debug("Loaded game data from %s: %d bytes", self._path, len(data))
        return data
