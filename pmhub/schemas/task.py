# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from pmhub.models.enums import TaskPriority, TaskStatus


class TaskCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    parent_task_id: Optional[str] = None
    assignee_id: Optional[str] = None
    due_date: Optional[date] = None
    priority: TaskPriority = TaskPriority.MEDIUM
    status: TaskStatus = TaskStatus.NOT_STARTED


class TaskUpdate(BaseModel):
    """Partial update. Null and missing fields keep their stored value."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    parent_task_id: Optional[str] = None
    assignee_id: Optional[str] = None
    due_date: Optional[date] = None
    priority: Optional[TaskPriority] = None
    status: Optional[TaskStatus] = None
    version: Optional[int] = None


class TaskResponse(BaseModel):
    """Full task record, also the task_update_event payload."""

    id: str
    project_id: str
    parent_task_id: Optional[str] = None
    name: str
    description: Optional[str] = None
    assignee_id: Optional[str] = None
    due_date: Optional[date] = None
    priority: str
    status: str
    version: int = 1
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
