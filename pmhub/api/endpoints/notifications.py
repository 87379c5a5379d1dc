# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

import logging
from typing import List

from fastapi import APIRouter, Depends, Path
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pmhub.api.dependencies import get_db
from pmhub.core.exceptions import InternalException, NotFoundException
from pmhub.core.security import get_current_user
from pmhub.schemas.notification import NotificationResponse, NotificationUpdate
from pmhub.schemas.user import TokenData
from pmhub.services.notification_service import notification_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=List[NotificationResponse])
def list_notifications(
    current_user: TokenData = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """The caller's notifications, newest first."""
    try:
        return notification_service.list_for_user(db, current_user.id)
    except SQLAlchemyError as e:
        logger.error(f"Failed to list notifications: {e}")
        raise InternalException()


@router.put("/{notification_id}", response_model=NotificationResponse)
def mark_notification(
    notification_update: NotificationUpdate,
    notification_id: str = Path(..., description="Notification ID"),
    current_user: TokenData = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Mark a notification read (default) or unread."""
    notification = notification_service.get(db, notification_id)
    if notification is None:
        raise NotFoundException("Notification not found")
    try:
        return notification_service.set_read(
            db, notification, is_read=notification_update.is_read
        )
    except SQLAlchemyError as e:
        logger.error(f"Failed to update notification {notification_id}: {e}")
        raise InternalException()
