# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Project API endpoints.

Projects are containers for tasks and carry their milestones inline.
DELETE archives a project; its tasks and milestones are kept and stay
reachable by id.
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pmhub.api.dependencies import get_db
from pmhub.api.endpoints.tasks import after_task_write, check_task_references
from pmhub.core.exceptions import InternalException, NotFoundException
from pmhub.core.security import get_current_user
from pmhub.models.project import Project
from pmhub.schemas.project import ProjectCreate, ProjectResponse, ProjectUpdate
from pmhub.schemas.task import TaskCreate, TaskResponse
from pmhub.schemas.user import TokenData
from pmhub.services.project_service import project_service
from pmhub.services.task_service import task_service

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_project_or_404(db: Session, project_id: str) -> Project:
    project = project_service.get(db, project_id)
    if project is None:
        raise NotFoundException("Project not found")
    return project


@router.get("", response_model=List[ProjectResponse])
def list_projects(
    archived: bool = Query(False, description="List archived projects instead"),
    current_user: TokenData = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    List projects the caller created or is a member of, newest first.
    """
    try:
        return project_service.list_projects(
            db, user_id=current_user.id, archived=archived
        )
    except SQLAlchemyError as e:
        logger.error(f"Failed to list projects: {e}")
        raise InternalException()


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
def create_project_endpoint(
    project_create: ProjectCreate,
    current_user: TokenData = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Create a new project.
    The current user becomes the project creator.
    """
    try:
        return project_service.create_project(
            db, project_data=project_create, user_id=current_user.id
        )
    except SQLAlchemyError as e:
        logger.error(f"Failed to create project: {e}")
        raise InternalException()


@router.get("/{project_id}", response_model=ProjectResponse)
def get_project_endpoint(
    project_id: str = Path(..., description="Project ID"),
    current_user: TokenData = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Get project details by ID with its milestones.
    """
    return _get_project_or_404(db, project_id)


@router.put("/{project_id}", response_model=ProjectResponse)
def update_project_endpoint(
    project_update: ProjectUpdate,
    project_id: str = Path(..., description="Project ID"),
    current_user: TokenData = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Update a project. A supplied milestone list replaces every existing
    milestone, so an empty list removes them all.
    """
    project = _get_project_or_404(db, project_id)
    try:
        return project_service.update_project(db, project, project_update)
    except HTTPException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Failed to update project {project_id}: {e}")
        raise InternalException()


@router.delete("/{project_id}", response_model=ProjectResponse)
def archive_project_endpoint(
    project_id: str = Path(..., description="Project ID"),
    current_user: TokenData = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Archive a project. It disappears from default listings but keeps its data.
    """
    project = _get_project_or_404(db, project_id)
    try:
        return project_service.archive_project(db, project)
    except SQLAlchemyError as e:
        logger.error(f"Failed to archive project {project_id}: {e}")
        raise InternalException()


@router.post(
    "/{project_id}/tasks",
    response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_task_endpoint(
    task_in: TaskCreate,
    project_id: str = Path(..., description="Project ID"),
    current_user: TokenData = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Create a task under a project and broadcast it as task_update_event.
    """
    _get_project_or_404(db, project_id)
    check_task_references(db, task_in.assignee_id, task_in.parent_task_id)
    try:
        task = task_service.create_task(db, project_id=project_id, task_in=task_in)
        return after_task_write(db, task, assignee_changed=task.assignee_id is not None)
    except SQLAlchemyError as e:
        logger.error(f"Failed to create task in project {project_id}: {e}")
        raise InternalException()


@router.get("/{project_id}/tasks", response_model=List[TaskResponse])
def list_project_tasks(
    project_id: str = Path(..., description="Project ID"),
    current_user: TokenData = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    List every task and subtask of a project in creation order.
    """
    _get_project_or_404(db, project_id)
    try:
        return task_service.list_for_project(db, project_id)
    except SQLAlchemyError as e:
        logger.error(f"Failed to list tasks of project {project_id}: {e}")
        raise InternalException()
