# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from sqlalchemy.orm import Session

from pmhub.models.enums import InvitationStatus
from pmhub.models.invitation import Invitation
from pmhub.schemas.invitation import InvitationCreate
from pmhub.services.base import BaseService


class InvitationService(BaseService[Invitation]):
    def send_invitation(
        self, db: Session, inviter_id: str, invitation_in: InvitationCreate
    ) -> Invitation:
        return self.create(
            db,
            obj_in={
                "inviter_id": inviter_id,
                "invitee_email": invitation_in.invitee_email,
                "role": invitation_in.role.value,
                "status": InvitationStatus.PENDING.value,
            },
        )


invitation_service = InvitationService(Invitation)
