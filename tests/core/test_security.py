# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt
from sqlalchemy.orm import Session

from pmhub.core.config import settings
from pmhub.core.exceptions import (
    DuplicateEmail,
    ForbiddenException,
    InvalidCredentials,
    InvalidToken,
    MissingToken,
)
from pmhub.core.security import (
    authenticate_user,
    create_access_token,
    get_current_user,
    get_password_hash,
    get_project_manager_user,
    register_user,
    verify_password,
    verify_token,
)
from pmhub.models.user import User
from pmhub.schemas.user import TokenData, UserRegister


@pytest.mark.unit
class TestPasswordHashing:
    """Test password hashing and verification functions"""

    def test_get_password_hash_creates_valid_hash(self):
        """Test that get_password_hash creates a valid bcrypt hash"""
        hashed = get_password_hash("testpassword123")

        assert hashed != "testpassword123"
        assert hashed.startswith("$2b$")

    def test_verify_password_with_correct_password(self):
        hashed = get_password_hash("testpassword123")

        assert verify_password("testpassword123", hashed) is True

    def test_verify_password_with_incorrect_password(self):
        hashed = get_password_hash("testpassword123")

        assert verify_password("wrongpassword", hashed) is False

    def test_verify_password_with_malformed_hash(self):
        """A corrupt stored hash never authenticates"""
        assert verify_password("testpassword123", "not-a-hash") is False


@pytest.mark.unit
class TestTokens:
    """Test token creation and verification"""

    def test_token_carries_identity_claims(self):
        token = create_access_token({"id": "u1", "email": "a@b.c", "role": "guest"})

        data = verify_token(token)

        assert data == TokenData(id="u1", email="a@b.c", role="guest")

    def test_token_has_no_expiry_by_default(self):
        token = create_access_token({"id": "u1", "email": "a@b.c", "role": "guest"})

        payload = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM]
        )
        assert "exp" not in payload

    def test_token_expiry_when_configured(self, monkeypatch):
        monkeypatch.setattr(settings, "ACCESS_TOKEN_EXPIRE_MINUTES", 30)
        token = create_access_token({"id": "u1", "email": "a@b.c", "role": "guest"})

        payload = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM]
        )
        assert "exp" in payload

    def test_expired_token_is_invalid(self):
        token = jwt.encode(
            {
                "id": "u1",
                "email": "a@b.c",
                "role": "guest",
                "exp": datetime.now(timezone.utc) - timedelta(minutes=1),
            },
            settings.SECRET_KEY,
            algorithm=settings.ALGORITHM,
        )

        with pytest.raises(InvalidToken):
            verify_token(token)

    def test_token_signed_with_other_key_is_invalid(self):
        token = jwt.encode(
            {"id": "u1", "email": "a@b.c", "role": "guest"},
            "another-secret",
            algorithm=settings.ALGORITHM,
        )

        with pytest.raises(InvalidToken):
            verify_token(token)

    def test_token_without_id_is_invalid(self):
        token = create_access_token({"email": "a@b.c", "role": "guest"})

        with pytest.raises(InvalidToken):
            verify_token(token)

    def test_malformed_token_is_invalid(self):
        with pytest.raises(InvalidToken) as exc_info:
            verify_token("not.a.token")

        assert exc_info.value.status_code == 403


@pytest.mark.unit
class TestDependencies:
    def test_get_current_user_without_token(self):
        with pytest.raises(MissingToken) as exc_info:
            get_current_user(token=None)

        assert exc_info.value.status_code == 401

    def test_get_current_user_with_valid_token(self):
        token = create_access_token({"id": "u1", "email": "a@b.c", "role": "guest"})

        assert get_current_user(token=token).id == "u1"

    def test_project_manager_check_rejects_other_roles(self):
        member = TokenData(id="u1", email="a@b.c", role="team_member")

        with pytest.raises(ForbiddenException) as exc_info:
            get_project_manager_user(current_user=member)

        assert exc_info.value.detail == "Not authorized to send invitations"

    def test_project_manager_check_accepts_project_manager(self):
        pm = TokenData(id="u1", email="a@b.c", role="project_manager")

        assert get_project_manager_user(current_user=pm) is pm


@pytest.mark.unit
class TestRegisterAndAuthenticate:
    def _register_payload(self, email="new@example.com") -> UserRegister:
        return UserRegister(
            first_name="Ada",
            last_name="Lovelace",
            email=email,
            password="s3cret-pass",
        )

    def test_register_token_identifies_created_user(self, test_db: Session):
        token, user = register_user(test_db, self._register_payload())

        assert verify_token(token).id == user.id
        assert user.password_hash != "s3cret-pass"
        assert verify_password("s3cret-pass", user.password_hash)

    def test_register_duplicate_email(self, test_db: Session, test_user: User):
        with pytest.raises(DuplicateEmail) as exc_info:
            register_user(test_db, self._register_payload(email=test_user.email))

        assert exc_info.value.status_code == 409

    def test_authenticate_success(self, test_db: Session, test_user: User):
        token, user = authenticate_user(test_db, test_user.email, "testpassword123")

        assert user.id == test_user.id
        assert verify_token(token).email == test_user.email

    def test_wrong_password_and_unknown_email_fail_identically(
        self, test_db: Session, test_user: User
    ):
        with pytest.raises(InvalidCredentials) as wrong_password:
            authenticate_user(test_db, test_user.email, "wrongpassword")
        with pytest.raises(InvalidCredentials) as unknown_email:
            authenticate_user(test_db, "nobody@example.com", "testpassword123")

        assert wrong_password.value.status_code == unknown_email.value.status_code
        assert wrong_password.value.detail == unknown_email.value.detail
