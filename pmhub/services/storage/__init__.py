# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from typing import Optional

from pmhub.core.config import settings
from pmhub.services.storage.backend import StorageBackend, StorageError
from pmhub.services.storage.local import LocalFileStorage

_storage_backend: Optional[StorageBackend] = None


def get_storage_backend() -> StorageBackend:
    """Return the process-wide storage backend, creating it on first use."""
    global _storage_backend
    if _storage_backend is None:
        _storage_backend = LocalFileStorage(
            settings.STORAGE_DIR, url_prefix=settings.STORAGE_URL_PREFIX
        )
    return _storage_backend


def reset_storage_backend() -> None:
    """Drop the cached backend so the next call re-reads settings."""
    global _storage_backend
    _storage_backend = None


__all__ = [
    "LocalFileStorage",
    "StorageBackend",
    "StorageError",
    "get_storage_backend",
    "reset_storage_backend",
]
