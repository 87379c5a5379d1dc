# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

import os
import tempfile

# Test settings must be in place before pmhub.core.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ACCESS_TOKEN_EXPIRE_MINUTES"] = "0"
os.environ["STORAGE_DIR"] = tempfile.mkdtemp(prefix="pmhub-test-")
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from pmhub.api.dependencies import get_db
from pmhub.core.config import settings
from pmhub.core.security import create_user_token, get_password_hash
from pmhub.db.base import Base
from pmhub.db.session import create_db_engine
from pmhub.models.enums import UserRole
from pmhub.models.user import User
from pmhub.services.realtime import shutdown_realtime_emitter
from pmhub.services.storage import reset_storage_backend


@pytest.fixture
def test_engine():
    """In-memory SQLite shared by every thread of one test"""
    engine = create_db_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def test_db(test_engine) -> Session:
    """Database session for a single test"""
    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=test_engine
    )
    session = TestingSessionLocal()
    yield session
    session.close()


@pytest.fixture
def storage_dir(tmp_path, monkeypatch):
    """Point uploads at a per-test directory"""
    path = tmp_path / "storage"
    path.mkdir()
    monkeypatch.setattr(settings, "STORAGE_DIR", str(path))
    reset_storage_backend()
    yield path
    reset_storage_backend()


@pytest.fixture(autouse=True)
def _reset_realtime():
    yield
    shutdown_realtime_emitter()


@pytest.fixture
def test_app(test_db, storage_dir):
    from pmhub.main import create_app

    app = create_app()

    def override_get_db():
        yield test_db

    app.dependency_overrides[get_db] = override_get_db
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def test_client(test_app) -> TestClient:
    """HTTP client without lifespan, realtime publishing is a no-op"""
    return TestClient(test_app)


@pytest.fixture
def published(mocker):
    """Capture events handed to the realtime emitter"""
    return {
        "task_update": mocker.patch(
            "pmhub.services.realtime.emitter.publish_task_update", return_value=True
        ),
        "comment": mocker.patch(
            "pmhub.services.realtime.emitter.publish_comment", return_value=True
        ),
        "notification": mocker.patch(
            "pmhub.services.realtime.emitter.publish_notification", return_value=True
        ),
    }


def _make_user(db: Session, email: str, role: UserRole, first_name: str) -> User:
    user = User(
        first_name=first_name,
        last_name="Tester",
        email=email,
        password_hash=get_password_hash("testpassword123"),
        role=role.value,
        notification_settings={},
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def test_user(test_db) -> User:
    """Team member account with password testpassword123"""
    return _make_user(test_db, "member@example.com", UserRole.TEAM_MEMBER, "Mia")


@pytest.fixture
def test_token(test_user) -> str:
    return create_user_token(test_user)


@pytest.fixture
def pm_user(test_db) -> User:
    return _make_user(test_db, "pm@example.com", UserRole.PROJECT_MANAGER, "Paul")


@pytest.fixture
def pm_token(pm_user) -> str:
    return create_user_token(pm_user)


@pytest.fixture
def auth_headers(test_token):
    return {"Authorization": f"Bearer {test_token}"}
