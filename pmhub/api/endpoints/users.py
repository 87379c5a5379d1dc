# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

import logging

from fastapi import APIRouter, Depends, HTTPException, Path
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pmhub.api.dependencies import get_db
from pmhub.core.exceptions import InternalException, NotFoundException
from pmhub.core.security import get_current_user
from pmhub.schemas.user import TokenData, UserPublic, UserUpdate
from pmhub.services.user import user_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/{user_id}", response_model=UserPublic)
def read_user(
    user_id: str = Path(..., description="User ID"),
    current_user: TokenData = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get a user's public profile"""
    user = user_service.get(db, user_id)
    if user is None:
        raise NotFoundException("User not found")
    return user


@router.put("/{user_id}", response_model=UserPublic)
def update_user(
    user_in: UserUpdate,
    user_id: str = Path(..., description="User ID"),
    current_user: TokenData = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Update profile fields. Omitted or null fields keep their current value.
    """
    user = user_service.get(db, user_id)
    if user is None:
        raise NotFoundException("User not found")
    try:
        return user_service.update_profile(db, user, user_in)
    except HTTPException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Failed to update user {user_id}: {e}")
        raise InternalException()
