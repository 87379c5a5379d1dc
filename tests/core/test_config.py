# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

import pytest

from pmhub.core.config import Settings


@pytest.mark.unit
class TestSettings:
    """Test configuration settings"""

    def test_default_settings(self, monkeypatch):
        """Test default settings values"""
        monkeypatch.delenv("ACCESS_TOKEN_EXPIRE_MINUTES", raising=False)
        s = Settings(_env_file=None)

        assert s.PROJECT_NAME == "PMHub Backend"
        assert s.API_PREFIX == "/api"
        assert s.ALGORITHM == "HS256"
        assert s.ACCESS_TOKEN_EXPIRE_MINUTES == 0
        assert s.STORAGE_URL_PREFIX == "/storage"
        assert s.ENABLE_OPTIMISTIC_LOCKING is False
        assert s.NOTIFY_ON_TASK_ASSIGNMENT is False

    def test_settings_from_env_variables(self, monkeypatch):
        """Test loading settings from environment variables"""
        monkeypatch.setenv("SECRET_KEY", "from-env")
        monkeypatch.setenv("ACCESS_TOKEN_EXPIRE_MINUTES", "120")
        monkeypatch.setenv("ENABLE_OPTIMISTIC_LOCKING", "true")
        monkeypatch.setenv("BACKEND_CORS_ORIGINS", '["http://localhost:5173"]')

        s = Settings(_env_file=None)

        assert s.SECRET_KEY == "from-env"
        assert s.ACCESS_TOKEN_EXPIRE_MINUTES == 120
        assert s.ENABLE_OPTIMISTIC_LOCKING is True
        assert s.BACKEND_CORS_ORIGINS == ["http://localhost:5173"]

    def test_env_names_are_case_sensitive(self, monkeypatch):
        monkeypatch.setenv("secret_key", "lowercase")
        monkeypatch.setenv("SECRET_KEY", "uppercase")

        assert Settings(_env_file=None).SECRET_KEY == "uppercase"
