"""
Read status store

Keeps the read/unread flag of every message, keyed by Maildir filename. The
mapping is loaded once into memory and the whole mapping is rewritten to a
single JSON file after every mutation:

    {"1714492800.3f2a9c0d1e4b5a6f.mailrider": true}

Present means read, absent means unread. All mutations are serialized through
one FIFO lock, so concurrent callers never interleave their write-back.
"""
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional

from app_mailserver.exceptions.metadata_persist_exception import MetadataPersistException
from common.components.fifo_lock import FifoLock
from common.components.singleton import Singleton

logger = logging.getLogger(__name__)


class ReadStatusStore(Singleton):
    """Read status store, one instance per metadata file"""

    def __init__(self, metadata_file: str):
        self.metadata_file = Path(metadata_file)
        self._lock = FifoLock()
        self._cache: Optional[Dict[str, bool]] = None

    def load(self) -> Dict[str, bool]:
        """
        (Re)load the mapping from disk

        A missing or malformed file yields an empty mapping; this never raises.

        Returns:
            Copy of the loaded mapping
        """
        with self._lock:
            self._cache = self._read_file()
            return dict(self._cache)

    def flush(self):
        """Rewrite the metadata file from memory"""
        with self._lock:
            self._ensure_loaded()
            self._persist()

    def snapshot(self) -> Dict[str, bool]:
        with self._lock:
            self._ensure_loaded()
            return dict(self._cache)

    def is_read(self, filename: str) -> bool:
        with self._lock:
            self._ensure_loaded()
            return self._cache.get(filename) is True

    def mark_read(self, filename: str) -> bool:
        with self._lock:
            self._ensure_loaded()
            self._cache[filename] = True
            self._persist()
        return True

    def mark_unread(self, filename: str) -> bool:
        with self._lock:
            self._ensure_loaded()
            self._cache.pop(filename, None)
            self._persist()
        return False

    def remove(self, filename: str):
        """Drop the entry of a deleted message, writing only if it existed"""
        with self._lock:
            self._ensure_loaded()
            if filename in self._cache:
                del self._cache[filename]
                self._persist()

    def clear_all(self):
        with self._lock:
            self._cache = {}
            self._persist()

    def _ensure_loaded(self):
        # caller holds the lock
        if self._cache is None:
            self._cache = self._read_file()

    def _read_file(self) -> Dict[str, bool]:
        try:
            content = self.metadata_file.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            logger.warning(f"[_read_file] Failed to read read status file {self.metadata_file}: {e}")
            return {}

        try:
            data = json.loads(content)
        except ValueError as e:
            logger.warning(f"[_read_file] Corrupted read status file {self.metadata_file}: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"[_read_file] Read status file {self.metadata_file} is not a JSON object")
            return {}

        return {str(key): True for key, value in data.items() if value is True}

    def _persist(self):
        # caller holds the lock; failures keep the in-memory state authoritative
        try:
            self._write_file(self._cache)
        except MetadataPersistException as e:
            logger.error(f"[_persist] {e}")

    def _write_file(self, mapping: Dict[str, bool]):
        tmp_path = None
        try:
            self.metadata_file.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                prefix=self.metadata_file.name + ".",
                suffix=".tmp",
                dir=str(self.metadata_file.parent),
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(mapping, f, indent=2)
            os.replace(tmp_path, self.metadata_file)
        except OSError as e:
            if tmp_path and os.path.exists(tmp_path):
                try:
                    os.unlink(tmp_path)
                except OSError as cleanup_error:
                    logger.warning(f"[_write_file] Failed to remove {tmp_path}: {cleanup_error}")
            raise MetadataPersistException(
                f"Failed to save read status to {self.metadata_file}: {e}"
            ) from e
