# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Storage backend abstract interface for attachment payloads.

Attachment rows only hold metadata; the bytes live in a storage backend
addressed by an opaque key. Keys map 1:1 to the public URL under the
configured storage prefix.
"""

from abc import ABC, abstractmethod
from typing import BinaryIO, Optional


class StorageError(Exception):
    """Exception raised when storage operations fail."""

    def __init__(self, message: str, key: Optional[str] = None):
        self.message = message
        self.key = key
        super().__init__(self.message)


class StorageBackend(ABC):
    """
    Abstract base class for attachment storage backends.
    """

    @abstractmethod
    def save(self, key: str, data: bytes) -> str:
        """
        Save file data to the storage backend.

        Args:
            key: Unique storage key
            data: File binary data

        Returns:
            The storage key after saving

        Raises:
            StorageError: If save operation fails
        """

    def save_stream(self, key: str, stream: BinaryIO) -> str:
        """
        Save a readable stream. Backends that can write incrementally should
        override this; the default buffers the whole payload.
        """
        return self.save(key, stream.read())

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Delete file from the storage backend.

        Returns:
            True if deleted, False if the key was not stored

        Raises:
            StorageError: If the file exists but cannot be removed
        """

    def get_url(self, key: str, base_url: str = "") -> Optional[str]:
        """
        Get a URL for accessing the file.

        Backends that don't support direct URL access return None.
        """
        return None

    @property
    @abstractmethod
    def backend_type(self) -> str:
        """Backend type identifier (e.g. "local")."""


def copy_stream(src: BinaryIO, dst: BinaryIO, chunk_size: int = 1024 * 1024) -> int:
    """Copy src into dst in chunks and return the byte count."""
    total = 0
    while True:
        chunk = src.read(chunk_size)
        if not chunk:
            break
        dst.write(chunk)
        total += len(chunk)
    return total
