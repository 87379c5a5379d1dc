# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text

from pmhub.db.base import Base, generate_uuid, utcnow
from pmhub.models.enums import NotificationType


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    type = Column(String(32), nullable=False, default=NotificationType.OTHER.value)
    message = Column(Text, nullable=False)
    related_project_id = Column(String(36), nullable=True)
    related_task_id = Column(String(36), nullable=True)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)
