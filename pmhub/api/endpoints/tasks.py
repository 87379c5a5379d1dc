# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Task API endpoints, including the comment and attachment sub-resources.

Every task create/update is broadcast as task_update_event and every new
comment as comment_event to all connected clients. Delivery is best-effort;
clients resynchronize through the list endpoints.
"""
import logging
from typing import List, Optional

from fastapi import (
    APIRouter,
    Depends,
    File,
    HTTPException,
    Path,
    Request,
    UploadFile,
    status,
)
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pmhub.api.dependencies import get_db
from pmhub.core.config import settings
from pmhub.core.exceptions import (
    InternalException,
    NotFoundException,
    ValidationException,
)
from pmhub.core.security import get_current_user
from pmhub.models.task import Task
from pmhub.schemas.attachment import AttachmentResponse
from pmhub.schemas.comment import CommentCreate, CommentResponse
from pmhub.schemas.common import MessageResponse
from pmhub.schemas.notification import NotificationResponse
from pmhub.schemas.task import TaskResponse, TaskUpdate
from pmhub.schemas.user import TokenData
from pmhub.services.attachment_service import attachment_service
from pmhub.services.comment_service import comment_service
from pmhub.services.notification_service import notification_service
from pmhub.services.realtime import emitter as realtime
from pmhub.services.storage import StorageError
from pmhub.services.task_service import task_service
from pmhub.services.user import user_service

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_task_or_404(db: Session, task_id: str) -> Task:
    task = task_service.get(db, task_id)
    if task is None:
        raise NotFoundException("Task not found")
    return task


def check_task_references(
    db: Session, assignee_id: Optional[str], parent_task_id: Optional[str]
) -> None:
    """Reject references to users or tasks that do not exist."""
    fields = {}
    if assignee_id and user_service.get(db, assignee_id) is None:
        fields["assignee_id"] = "Unknown user"
    if parent_task_id and task_service.get(db, parent_task_id) is None:
        fields["parent_task_id"] = "Unknown task"
    if fields:
        raise ValidationException("Invalid task reference", fields=fields)


def after_task_write(db: Session, task: Task, assignee_changed: bool) -> TaskResponse:
    """
    Publish the written task and, when enabled, notify a new assignee.
    """
    payload = TaskResponse.model_validate(task)
    realtime.publish_task_update(payload.model_dump(mode="json"))

    if settings.NOTIFY_ON_TASK_ASSIGNMENT and assignee_changed and task.assignee_id:
        notification = notification_service.notify_task_assignment(db, task)
        realtime.publish_notification(
            task.assignee_id,
            NotificationResponse.model_validate(notification).model_dump(mode="json"),
        )
    return payload


@router.get("/{task_id}", response_model=TaskResponse)
def get_task_endpoint(
    task_id: str = Path(..., description="Task ID"),
    current_user: TokenData = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get a task by ID. Tasks of archived projects stay readable."""
    return _get_task_or_404(db, task_id)


@router.put("/{task_id}", response_model=TaskResponse)
def update_task_endpoint(
    task_in: TaskUpdate,
    task_id: str = Path(..., description="Task ID"),
    current_user: TokenData = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Update a task. Any status may follow any other.
    """
    task = _get_task_or_404(db, task_id)
    previous_assignee = task.assignee_id
    check_task_references(db, task_in.assignee_id, task_in.parent_task_id)
    try:
        task = task_service.update_task(db, task, task_in)
        return after_task_write(
            db, task, assignee_changed=task.assignee_id != previous_assignee
        )
    except HTTPException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Failed to update task {task_id}: {e}")
        raise InternalException()


@router.delete("/{task_id}", response_model=MessageResponse)
def delete_task_endpoint(
    task_id: str = Path(..., description="Task ID"),
    current_user: TokenData = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Delete a task with its comments and attachment records. Subtasks are
    detached, not deleted.
    """
    task = _get_task_or_404(db, task_id)
    try:
        task_service.delete_task(db, task)
    except SQLAlchemyError as e:
        logger.error(f"Failed to delete task {task_id}: {e}")
        raise InternalException()
    return MessageResponse(message="Task deleted")


@router.post(
    "/{task_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_comment_endpoint(
    comment_in: CommentCreate,
    task_id: str = Path(..., description="Task ID"),
    current_user: TokenData = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Add a comment to a task and broadcast it as comment_event.
    """
    _get_task_or_404(db, task_id)
    try:
        comment = comment_service.add_comment(
            db, task_id=task_id, user_id=current_user.id, text=comment_in.comment_text
        )
    except SQLAlchemyError as e:
        logger.error(f"Failed to add comment to task {task_id}: {e}")
        raise InternalException()

    payload = CommentResponse.model_validate(comment)
    realtime.publish_comment(payload.model_dump(mode="json"))
    return payload


@router.get("/{task_id}/comments", response_model=List[CommentResponse])
def list_comments_endpoint(
    task_id: str = Path(..., description="Task ID"),
    current_user: TokenData = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    _get_task_or_404(db, task_id)
    return comment_service.list_for_task(db, task_id)


@router.post(
    "/{task_id}/attachments",
    response_model=AttachmentResponse,
    status_code=status.HTTP_201_CREATED,
)
def upload_attachment_endpoint(
    request: Request,
    task_id: str = Path(..., description="Task ID"),
    file: UploadFile = File(..., description="File to attach"),
    current_user: TokenData = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Upload a file to a task. The file is stored under a generated name and
    served from the storage URL prefix.
    """
    _get_task_or_404(db, task_id)
    try:
        return attachment_service.upload(
            db,
            task_id=task_id,
            user_id=current_user.id,
            file_name=file.filename or "upload",
            stream=file.file,
            base_url=str(request.base_url),
        )
    except StorageError as e:
        logger.error(f"Failed to store upload for task {task_id}: {e}")
        raise InternalException()
    except SQLAlchemyError as e:
        logger.error(f"Failed to record attachment for task {task_id}: {e}")
        raise InternalException()


@router.get("/{task_id}/attachments", response_model=List[AttachmentResponse])
def list_attachments_endpoint(
    task_id: str = Path(..., description="Task ID"),
    current_user: TokenData = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    _get_task_or_404(db, task_id)
    return attachment_service.list_for_task(db, task_id)
