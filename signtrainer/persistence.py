"""
Storage backends for the encoded sign vocabulary.
"""
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)


class FileVocabularyBackend:
    """
    Keeps the whole vocabulary in a single file, rewritten on every save.

    Writes go to a temporary file in the same directory which then replaces
    the target, so a reader never sees a half-written vocabulary.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load_vocabulary(self) -> Optional[bytes]:
        """Return the stored bytes, or None if the file does not exist."""
        try:
            return self.path.read_bytes()
        except FileNotFoundError:
            return None

    def save_vocabulary(self, data: bytes) -> None:
        """Atomically replace the stored vocabulary."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_name, self.path)
        except OSError:
            logger.error(f"Failed to write vocabulary to {self.path}")
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
        logger.debug(f"Wrote {len(data)} bytes to {self.path}")


class InMemoryVocabularyBackend:
    """Vocabulary storage that lives only as long as the process."""

    def __init__(self, data: Optional[bytes] = None):
        self._data = data
        self._lock = threading.Lock()
        self.save_count = 0

    def load_vocabulary(self) -> Optional[bytes]:
        with self._lock:
            return self._data

    def save_vocabulary(self, data: bytes) -> None:
        with self._lock:
            self._data = data
            self.save_count += 1
