# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from pmhub.core.config import settings
from pmhub.core.exceptions import (
    DuplicateEmail,
    ForbiddenException,
    InvalidCredentials,
    InvalidToken,
    MissingToken,
)
from pmhub.models.enums import UserRole
from pmhub.models.user import User
from pmhub.schemas.user import TokenData, UserRegister
from pmhub.services.user import user_service

logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Bearer token scheme. auto_error is off so a missing header maps to our own
# MissingToken error instead of FastAPI's default 401 body.
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_PREFIX}/auth/login", auto_error=False
)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify password

    Args:
        plain_password: Plain text password
        hashed_password: Hashed password

    Returns:
        Whether the password matches
    """
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Malformed stored hash
        return False


def get_password_hash(password: str) -> str:
    """
    Generate password hash

    Args:
        password: Plain text password

    Returns:
        Password hash
    """
    return pwd_context.hash(password)


def create_access_token(
    data: Dict[str, Any], expires_delta: Optional[int] = None
) -> str:
    """
    Create access token

    Args:
        data: Token claims (id, email, role)
        expires_delta: Expiration time in minutes. Falls back to
            ACCESS_TOKEN_EXPIRE_MINUTES; when both are 0 no exp claim is set.

    Returns:
        Access token
    """
    to_encode = data.copy()
    minutes = expires_delta if expires_delta is not None else settings.ACCESS_TOKEN_EXPIRE_MINUTES
    if minutes and minutes > 0:
        expire = datetime.now(timezone.utc) + timedelta(minutes=minutes)
        to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_user_token(user: User) -> str:
    return create_access_token({"id": user.id, "email": user.email, "role": user.role})


def verify_token(token: str) -> TokenData:
    """
    Verify token

    Args:
        token: Authentication token

    Returns:
        Claims contained in the token

    Raises:
        InvalidToken: bad signature, malformed, expired or missing claims
    """
    try:
        payload = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM]
        )
        return TokenData(
            id=payload.get("id"),
            email=payload.get("email"),
            role=payload.get("role"),
        )
    except (JWTError, ValidationError):
        raise InvalidToken()


def get_current_user(token: Optional[str] = Depends(oauth2_scheme)) -> TokenData:
    """Resolve the caller's claims from the Authorization header."""
    if not token:
        raise MissingToken()
    token_data = verify_token(token)
    return token_data


def get_project_manager_user(
    current_user: TokenData = Depends(get_current_user),
) -> TokenData:
    """
    Verify the caller holds the project_manager role

    Raises:
        ForbiddenException: If the caller is any other role
    """
    if current_user.role != UserRole.PROJECT_MANAGER.value:
        raise ForbiddenException("Not authorized to send invitations")
    return current_user


def register_user(db: Session, user_in: UserRegister) -> Tuple[str, User]:
    """
    Create an account and issue its first token.

    Raises:
        DuplicateEmail: If the email is already registered
    """
    if user_service.get_by_email(db, user_in.email) is not None:
        raise DuplicateEmail()
    try:
        user = user_service.create_user(
            db, user_in, password_hash=get_password_hash(user_in.password)
        )
    except IntegrityError:
        # Lost a race against a concurrent registration for the same email
        raise DuplicateEmail()
    logger.info(f"Registered user {user.id}")
    return create_user_token(user), user


def authenticate_user(db: Session, email: str, password: str) -> Tuple[str, User]:
    """
    Authenticate with email and password.

    Unknown email and wrong password raise the same error.

    Raises:
        InvalidCredentials: If authentication fails
    """
    user = user_service.get_by_email(db, email)
    if user is None or not verify_password(password, user.password_hash):
        raise InvalidCredentials()
    return create_user_token(user), user


def get_user_id_from_request(request) -> str:
    """
    Extract the user id from the Authorization header for request logging

    Returns:
        User id, or 'anonymous' if absent or invalid
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        return "anonymous"
    try:
        return verify_token(auth_header.split(" ", 1)[1]).id
    except InvalidToken:
        return "anonymous"
