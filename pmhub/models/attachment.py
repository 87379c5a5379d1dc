# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from sqlalchemy import Column, DateTime, ForeignKey, String

from pmhub.db.base import Base, generate_uuid, utcnow


class Attachment(Base):
    """Attachment metadata. The payload itself lives in the storage backend."""

    __tablename__ = "task_attachments"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    task_id = Column(
        String(36), ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    file_name = Column(String(512), nullable=False)
    storage_key = Column(String(255), nullable=False)
    file_url = Column(String(1024), nullable=False)
    file_type = Column(String(64), nullable=False, default="")
    uploaded_at = Column(DateTime, nullable=False, default=utcnow)
