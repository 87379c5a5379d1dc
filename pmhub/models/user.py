# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
User database model.

The password is only ever stored as a salted bcrypt hash and is never part of
any API response.
"""

from sqlalchemy import JSON, Column, DateTime, Integer, String

from pmhub.db.base import Base, generate_uuid, utcnow
from pmhub.models.enums import UserRole


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    first_name = Column(String(100), nullable=False, default="")
    last_name = Column(String(100), nullable=False, default="")
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    profile_picture_url = Column(String(1024), nullable=True)
    role = Column(String(32), nullable=False, default=UserRole.TEAM_MEMBER.value)
    notification_settings = Column(JSON, nullable=False, default=dict)
    version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
