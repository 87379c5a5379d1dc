# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pmhub.api.dependencies import get_db
from pmhub.core import security
from pmhub.core.exceptions import InternalException
from pmhub.schemas.user import AuthResponse, UserLogin, UserPublic, UserRegister

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED
)
def register(user_in: UserRegister, db: Session = Depends(get_db)):
    """
    Register a new account and return its first access token.
    """
    try:
        token, user = security.register_user(db, user_in)
    except HTTPException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Registration failed: {e}")
        raise InternalException()
    return AuthResponse(token=token, user=UserPublic.model_validate(user))


@router.post("/login", response_model=AuthResponse)
def login(login_data: UserLogin, db: Session = Depends(get_db)):
    """
    Exchange email and password for an access token.
    """
    try:
        token, user = security.authenticate_user(
            db, email=login_data.email, password=login_data.password
        )
    except HTTPException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Login lookup failed: {e}")
        raise InternalException()
    return AuthResponse(token=token, user=UserPublic.model_validate(user))
