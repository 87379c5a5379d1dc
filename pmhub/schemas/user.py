# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from pmhub.models.enums import UserRole


class TokenData(BaseModel):
    """Claims carried by a bearer token"""

    id: str
    email: str
    role: str


class UserRegister(BaseModel):
    """Registration payload"""

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=1)
    role: UserRole = UserRole.TEAM_MEMBER
    profile_picture_url: Optional[str] = None


class UserLogin(BaseModel):
    """Login payload. Email is not format-checked so every failure looks alike"""

    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserUpdate(BaseModel):
    """Profile update. Fields left out or null keep their stored value"""

    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    profile_picture_url: Optional[str] = None
    notification_settings: Optional[Dict[str, Any]] = None
    version: Optional[int] = Field(
        None, description="Expected current version, checked when optimistic locking is on"
    )


class UserPublic(BaseModel):
    """Public profile, never includes the password hash"""

    id: str
    first_name: str
    last_name: str
    email: str
    profile_picture_url: Optional[str] = None
    role: str
    notification_settings: Dict[str, Any] = Field(default_factory=dict)
    version: int = 1
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AuthResponse(BaseModel):
    token: str
    user: UserPublic
