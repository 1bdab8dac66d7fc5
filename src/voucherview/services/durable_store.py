"""Durable key-value backing stores for the cache mirror.

Two implementations of the ``DurableStore`` protocol:

- ``MemoryDurableStore``: dict-backed, with an optional byte quota that
  behaves like browser storage running out of space.
- ``FileDurableStore``: one file per key inside a directory.

Both raise ``DurableStoreError`` on failure. The cache store is the only
consumer and never lets those errors escape.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from urllib.parse import quote, unquote

from voucherview.shared.errors import DurableStoreError, ErrorCode, ErrorContext

logger = logging.getLogger(__name__)

FILE_SUFFIX = ".json"


class MemoryDurableStore:
    """In-process durable store, mostly for tests and headless runs.

    Args:
        quota_bytes: Maximum total size of stored blobs; ``None`` for unlimited.
    """

    def __init__(self, quota_bytes: int | None = None) -> None:
        self._data: dict[str, bytes] = {}
        self.quota_bytes = quota_bytes

    def put(self, key: str, blob: bytes) -> None:
        if self.quota_bytes is not None:
            used = sum(len(v) for k, v in self._data.items() if k != key)
            if used + len(blob) > self.quota_bytes:
                raise DurableStoreError(
                    ErrorCode.DURABLE_QUOTA_EXCEEDED,
                    f"Quota of {self.quota_bytes} bytes exceeded writing '{key}'",
                    ErrorContext(operation="durable_put", key=key),
                )
        self._data[key] = bytes(blob)

    def get(self, key: str) -> bytes | None:
        return self._data.get(key)

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self, prefix: str = "") -> list[str]:
        return [k for k in self._data if k.startswith(prefix)]

    def __len__(self) -> int:
        return len(self._data)


class FileDurableStore:
    """Directory-backed durable store.

    Keys are percent-encoded into file names so that ``keys(prefix)`` can
    recover them without a separate index.

    Args:
        directory: Storage directory, created if missing.

    Raises:
        DurableStoreError: If the directory cannot be created.
    """

    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DurableStoreError(
                ErrorCode.DURABLE_WRITE_FAILED,
                f"Failed to create durable store directory: {self.directory}",
                ErrorContext(
                    operation="durable_init",
                    additional_data={"directory": str(self.directory)},
                ),
                original_error=e,
            ) from e

        logger.debug("Initialized FileDurableStore in %s", self.directory)

    def _path_for(self, key: str) -> Path:
        return self.directory / f"{quote(key, safe='')}{FILE_SUFFIX}"

    def put(self, key: str, blob: bytes) -> None:
        path = self._path_for(key)
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            with open(tmp_path, "wb") as f:
                f.write(blob)
            os.replace(tmp_path, path)
        except OSError as e:
            raise DurableStoreError(
                ErrorCode.DURABLE_WRITE_FAILED,
                f"Failed to write durable entry '{key}': {e!s}",
                ErrorContext(operation="durable_put", key=key),
                original_error=e,
            ) from e

    def get(self, key: str) -> bytes | None:
        path = self._path_for(key)
        try:
            with open(path, "rb") as f:
                return f.read()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise DurableStoreError(
                ErrorCode.DURABLE_READ_FAILED,
                f"Failed to read durable entry '{key}': {e!s}",
                ErrorContext(operation="durable_get", key=key),
                original_error=e,
            ) from e

    def remove(self, key: str) -> None:
        try:
            self._path_for(key).unlink(missing_ok=True)
        except OSError as e:
            raise DurableStoreError(
                ErrorCode.DURABLE_WRITE_FAILED,
                f"Failed to remove durable entry '{key}': {e!s}",
                ErrorContext(operation="durable_remove", key=key),
                original_error=e,
            ) from e

    def keys(self, prefix: str = "") -> list[str]:
        try:
            names = sorted(p.name for p in self.directory.glob(f"*{FILE_SUFFIX}"))
        except OSError as e:
            raise DurableStoreError(
                ErrorCode.DURABLE_READ_FAILED,
                f"Failed to list durable entries: {e!s}",
                ErrorContext(operation="durable_keys"),
                original_error=e,
            ) from e
        decoded = (unquote(name[: -len(FILE_SUFFIX)]) for name in names)
        return [key for key in decoded if key.startswith(prefix)]
