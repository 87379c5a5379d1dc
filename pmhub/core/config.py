# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Project configuration
    PROJECT_NAME: str = "PMHub Backend"
    VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"
    # API docs toggle (from env ENABLE_API_DOCS, default True)
    ENABLE_API_DOCS: bool = True

    # Environment configuration
    ENVIRONMENT: str = "development"  # development or production
    LOG_LEVEL: str = "INFO"

    # Database configuration
    DATABASE_URL: str = "sqlite:///./pmhub.db"

    # JWT configuration
    SECRET_KEY: str = "your_jwt_secret"
    ALGORITHM: str = "HS256"
    # 0 means tokens carry no exp claim
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 0

    # CORS configuration
    BACKEND_CORS_ORIGINS: List[str] = ["*"]

    # Uploaded file storage
    STORAGE_DIR: str = "./storage"
    STORAGE_URL_PREFIX: str = "/storage"

    # Socket.IO configuration
    SOCKETIO_PATH: str = "socket.io"
    SOCKETIO_CORS_ORIGINS: List[str] = ["*"]

    # Reject stale writes carrying an outdated version with 409 instead of
    # last-write-wins
    ENABLE_OPTIMISTIC_LOCKING: bool = False

    # Create a task_assignment notification and push notification_event
    # to the assignee's room when a task is assigned
    NOTIFY_ON_TASK_ASSIGNMENT: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


settings = Settings()
