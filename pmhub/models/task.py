# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Task model.

parent_task_id is a plain adjacency reference: depth is not bounded, cycles
are not prevented and the parent is not checked to live in the same project.
"""

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, Text

from pmhub.db.base import Base, generate_uuid, utcnow
from pmhub.models.enums import TaskPriority, TaskStatus


class Task(Base):
    __tablename__ = "tasks"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    project_id = Column(String(36), ForeignKey("projects.id"), nullable=False, index=True)
    parent_task_id = Column(
        String(36), ForeignKey("tasks.id", ondelete="SET NULL"), nullable=True, index=True
    )
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    assignee_id = Column(String(36), ForeignKey("users.id"), nullable=True, index=True)
    due_date = Column(Date, nullable=True)
    priority = Column(String(16), nullable=False, default=TaskPriority.MEDIUM.value)
    status = Column(String(32), nullable=False, default=TaskStatus.NOT_STARTED.value)
    version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
