# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class NotificationUpdate(BaseModel):
    is_read: bool = True


class NotificationResponse(BaseModel):
    """Notification record, also the notification_event payload."""

    id: str
    user_id: str
    type: str
    message: str
    related_project_id: Optional[str] = None
    related_task_id: Optional[str] = None
    is_read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
