# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pmhub.api.dependencies import get_db
from pmhub.core.exceptions import InternalException
from pmhub.core.security import get_project_manager_user
from pmhub.schemas.invitation import InvitationCreate, InvitationResponse
from pmhub.schemas.user import TokenData
from pmhub.services.invitation_service import invitation_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "", response_model=InvitationResponse, status_code=status.HTTP_201_CREATED
)
def send_invitation(
    invitation_in: InvitationCreate,
    current_user: TokenData = Depends(get_project_manager_user),
    db: Session = Depends(get_db),
):
    """
    Invite someone by email. Only project managers may invite.
    """
    try:
        return invitation_service.send_invitation(
            db, inviter_id=current_user.id, invitation_in=invitation_in
        )
    except SQLAlchemyError as e:
        logger.error(f"Failed to create invitation: {e}")
        raise InternalException()
