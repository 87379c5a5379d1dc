# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

import io

import pytest

from pmhub.services.storage import LocalFileStorage, StorageError


@pytest.fixture
def storage(tmp_path):
    return LocalFileStorage(str(tmp_path / "files"), url_prefix="/storage")


@pytest.mark.unit
class TestLocalFileStorage:
    def test_save_stream_writes_file_under_root(self, storage, tmp_path):
        storage.save_stream("abc123", io.BytesIO(b"payload"))

        assert (tmp_path / "files" / "abc123").read_bytes() == b"payload"

    def test_delete(self, storage, tmp_path):
        storage.save("abc123", b"x")

        assert storage.delete("abc123") is True
        assert storage.delete("abc123") is False
        assert not (tmp_path / "files" / "abc123").exists()

    def test_url_maps_key_under_prefix(self, storage):
        assert storage.get_url("abc123", base_url="http://host:8000/") == (
            "http://host:8000/storage/abc123"
        )
        assert storage.get_url("abc123") == "/storage/abc123"

    @pytest.mark.parametrize("key", ["../escape", "a/b", "", ".."])
    def test_rejects_keys_outside_root(self, storage, key):
        with pytest.raises(StorageError):
            storage.save(key, b"x")

    def test_backend_type(self, storage):
        assert storage.backend_type == "local"
