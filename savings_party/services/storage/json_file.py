"""
JSON File Storage Implementation

DESIGN DECISION: Each key is stored as its own JSON file in a data
directory, mirroring how a browser keeps one localStorage entry per key:
1. Users can open, back up or hand-edit their party
2. No database setup required
3. A corrupt file only affects its own key

Writes go to a temporary file first and are renamed into place, so a crash
mid-write never leaves a half-written party behind.

TRADEOFFS:
- Whole-value rewrites on every change (fine for a party of six)
- Single process only (the engine holds the locks)
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Optional, Union

import structlog
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from savings_party.services.storage.interface import (
    CorruptDataError,
    KeyValueStore,
    StorageUnavailableError,
)

logger = structlog.get_logger(__name__)


class JsonFileKeyValueStore(KeyValueStore):
    """
    Key-value store keeping one `<key>.json` file per key.

    Handles directory creation and provides retry logic for writes.
    """

    def __init__(self, data_dir: Union[str, Path], write_retries: int = 3):
        self._dir = Path(data_dir)
        self._write_retries = write_retries

    @property
    def data_dir(self) -> Path:
        return self._dir

    def _path(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self._dir / f"{key}.json"

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        path = self._path(key)
        if not path.exists():
            return default

        try:
            with path.open("r", encoding="utf-8") as fh:
                return json.load(fh)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.error("storage_decode_failed", key=key, path=str(path), error=str(e))
            raise CorruptDataError(f"Stored value for {key!r} could not be decoded: {e}")
        except OSError as e:
            raise StorageUnavailableError(f"Could not read {path}: {e}")

    def set(self, key: str, value: Any) -> None:
        path = self._path(key)
        payload = json.dumps(value, ensure_ascii=False, indent=2)

        write = retry(
            retry=retry_if_exception_type(OSError),
            stop=stop_after_attempt(self._write_retries),
            wait=wait_exponential(multiplier=0.1, min=0.1, max=2),
            reraise=True,
        )(self._atomic_write)

        try:
            write(path, payload)
        except OSError as e:
            logger.error("storage_write_failed", key=key, path=str(path), error=str(e))
            raise StorageUnavailableError(f"Could not write {path}: {e}")

        logger.debug("storage_written", key=key, bytes=len(payload))

    def remove(self, key: str) -> bool:
        path = self._path(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageUnavailableError(f"Could not remove {path}: {e}")
        return True

    def _atomic_write(self, path: Path, payload: str) -> None:
        self._dir.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self._dir, prefix=f".{path.stem}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
            os.replace(tmp_name, path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise
