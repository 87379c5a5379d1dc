# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from pmhub.models.enums import NotificationType
from pmhub.models.notification import Notification
from pmhub.models.task import Task
from pmhub.services.base import BaseService


class NotificationService(BaseService[Notification]):
    def list_for_user(self, db: Session, user_id: str) -> List[Notification]:
        """Newest first."""
        stmt = (
            select(Notification)
            .where(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc())
        )
        return list(db.scalars(stmt).all())

    def set_read(self, db: Session, notification: Notification, is_read: bool = True) -> Notification:
        notification.is_read = is_read
        db.add(notification)
        self.commit(db)
        db.refresh(notification)
        return notification

    def notify(
        self,
        db: Session,
        *,
        user_id: str,
        type: NotificationType,
        message: str,
        related_project_id: Optional[str] = None,
        related_task_id: Optional[str] = None,
    ) -> Notification:
        return self.create(
            db,
            obj_in={
                "user_id": user_id,
                "type": type.value,
                "message": message,
                "related_project_id": related_project_id,
                "related_task_id": related_task_id,
                "is_read": False,
            },
        )

    def notify_task_assignment(self, db: Session, task: Task) -> Notification:
        """Record that a task was assigned to its current assignee."""
        return self.notify(
            db,
            user_id=task.assignee_id,
            type=NotificationType.TASK_ASSIGNMENT,
            message=f'You have been assigned to task "{task.name}"',
            related_project_id=task.project_id,
            related_task_id=task.id,
        )


notification_service = NotificationService(Notification)
