# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Task service.

Status transitions are not validated: any enumerated status may follow any
other. Concurrent updates follow last-write-wins unless optimistic locking
is switched on.
"""
import logging
from typing import List

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from pmhub.models.attachment import Attachment
from pmhub.models.comment import Comment
from pmhub.models.task import Task
from pmhub.schemas.task import TaskCreate, TaskUpdate
from pmhub.services.base import BaseService
from pmhub.services.storage import StorageError, get_storage_backend

logger = logging.getLogger(__name__)


class TaskService(BaseService[Task]):
    def create_task(self, db: Session, project_id: str, task_in: TaskCreate) -> Task:
        return self.create(
            db,
            obj_in={
                "project_id": project_id,
                "parent_task_id": task_in.parent_task_id,
                "name": task_in.name,
                "description": task_in.description,
                "assignee_id": task_in.assignee_id,
                "due_date": task_in.due_date,
                "priority": task_in.priority.value,
                "status": task_in.status.value,
            },
        )

    def list_for_project(self, db: Session, project_id: str) -> List[Task]:
        """All tasks and subtasks of a project in creation order."""
        stmt = (
            select(Task)
            .where(Task.project_id == project_id)
            .order_by(Task.created_at.asc())
        )
        return list(db.scalars(stmt).all())

    def update_task(self, db: Session, task: Task, task_in: TaskUpdate) -> Task:
        data = task_in.model_dump(exclude={"version"}, exclude_unset=True)
        for key in ("priority", "status"):
            if data.get(key) is not None:
                data[key] = data[key].value
        return self.update(
            db, db_obj=task, obj_in=data, expected_version=task_in.version
        )

    def delete_task(self, db: Session, task: Task) -> None:
        """
        Delete a task. Direct subtasks are detached (parent set to null) in
        the same transaction; comments and attachment rows go with the task.
        Stored attachment files are removed once the transaction commits.
        """
        task_id = task.id
        storage_keys = list(
            db.scalars(
                select(Attachment.storage_key).where(Attachment.task_id == task_id)
            ).all()
        )
        db.execute(delete(Comment).where(Comment.task_id == task_id))
        db.execute(delete(Attachment).where(Attachment.task_id == task_id))
        db.execute(
            update(Task)
            .where(Task.parent_task_id == task_id)
            .values(parent_task_id=None)
        )
        db.delete(task)
        self.commit(db)
        logger.info(f"Deleted task {task_id}")

        storage = get_storage_backend()
        for key in storage_keys:
            try:
                storage.delete(key)
            except StorageError as e:
                # Leftover files are tolerated once the rows are gone
                logger.warning(f"Failed to remove stored file {key}: {e.message}")


task_service = TaskService(Task)
