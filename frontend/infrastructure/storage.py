# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Durable key/value storage for credentials that outlive the process."""

from __future__ import annotations

from pathlib import Path

from frontend.domain.users.repositories import CredentialStore
from frontend.shared.errors import StorageError
from frontend.shared.logging import logger
from frontend.utils.fs import read_json_dict, write_json_atomic


class FileCredentialStore(CredentialStore):
    """Keeps string values in a single JSON object on disk.

    Every write replaces the whole file atomically, so concurrent writers
    resolve as last-writer-wins. An unreadable or corrupt file reads as empty.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        logger.debug(f"FileCredentialStore: initialized path={self._path}")

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            raw = read_json_dict(self._path)
        except (OSError, ValueError):
            logger.warning(f"FileCredentialStore: unreadable store path={self._path}, ignoring")
            return {}
        return {str(k): v for k, v in raw.items() if isinstance(v, str)}

    def _save(self, data: dict[str, str]) -> None:
        try:
            write_json_atomic(self._path, data)
        except OSError as e:
            raise StorageError(
                f"Failed to write credential store: {self._path}",
                context={"path": str(self._path)},
            ) from e

    def get(self, key: str) -> str | None:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._save(data)
        logger.debug(f"FileCredentialStore: stored key={key}")

    def delete(self, key: str) -> None:
        data = self._load()
        if data.pop(key, None) is None:
            logger.debug(f"FileCredentialStore: key not found for removal key={key}")
            return
        self._save(data)
        logger.debug(f"FileCredentialStore: removed key={key}")


__all__ = ["FileCredentialStore"]
