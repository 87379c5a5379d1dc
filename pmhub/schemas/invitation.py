# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr

from pmhub.models.enums import UserRole


class InvitationCreate(BaseModel):
    invitee_email: EmailStr
    role: UserRole


class InvitationResponse(BaseModel):
    id: str
    inviter_id: str
    invitee_email: str
    role: str
    status: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
