# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Local filesystem storage backend.

Files are written under STORAGE_DIR with their key as file name and are
served statically from STORAGE_URL_PREFIX by the application.
"""

import logging
import os
from typing import BinaryIO, Optional

from pmhub.services.storage.backend import StorageBackend, StorageError, copy_stream

logger = logging.getLogger(__name__)


class LocalFileStorage(StorageBackend):
    BACKEND_TYPE = "local"

    def __init__(self, root_dir: str, url_prefix: str = "/storage"):
        self.root_dir = os.path.abspath(root_dir)
        self.url_prefix = "/" + url_prefix.strip("/")
        os.makedirs(self.root_dir, exist_ok=True)

    @property
    def backend_type(self) -> str:
        return self.BACKEND_TYPE

    def _path(self, key: str) -> str:
        # Keys are generated server side; refuse anything that could escape root
        if not key or os.path.basename(key) != key or key in (".", ".."):
            raise StorageError("Invalid storage key", key=key)
        return os.path.join(self.root_dir, key)

    def save(self, key: str, data: bytes) -> str:
        path = self._path(key)
        try:
            with open(path, "wb") as f:
                f.write(data)
        except OSError as e:
            raise StorageError(f"Failed to write file: {e}", key=key) from e
        return key

    def save_stream(self, key: str, stream: BinaryIO) -> str:
        path = self._path(key)
        try:
            with open(path, "wb") as f:
                size = copy_stream(stream, f)
        except OSError as e:
            raise StorageError(f"Failed to write file: {e}", key=key) from e
        logger.debug(f"Wrote {size} bytes to {path}")
        return key

    def delete(self, key: str) -> bool:
        path = self._path(key)
        try:
            os.remove(path)
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageError(f"Failed to delete file: {e}", key=key) from e

    def get_url(self, key: str, base_url: str = "") -> Optional[str]:
        return f"{base_url.rstrip('/')}{self.url_prefix}/{key}"
