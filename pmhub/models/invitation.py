# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from sqlalchemy import Column, DateTime, ForeignKey, String

from pmhub.db.base import Base, generate_uuid, utcnow
from pmhub.models.enums import InvitationStatus


class Invitation(Base):
    __tablename__ = "user_invitations"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    inviter_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    invitee_email = Column(String(255), nullable=False, index=True)
    role = Column(String(32), nullable=False)
    status = Column(String(16), nullable=False, default=InvitationStatus.PENDING.value)
    created_at = Column(DateTime, nullable=False, default=utcnow)
