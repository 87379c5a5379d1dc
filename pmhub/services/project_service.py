# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Project service for managing projects, their milestones and members.

A project owns its milestones: a supplied milestone list always replaces the
whole set within the same transaction as the project row itself, so a failed
replace never leaves a partial set behind.
"""
import logging
from typing import Iterable, List, Optional

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from pmhub.models.milestone import Milestone
from pmhub.models.project import Project, ProjectMember
from pmhub.schemas.project import MilestoneIn, ProjectCreate, ProjectUpdate
from pmhub.services.base import BaseService

logger = logging.getLogger(__name__)


def _build_milestones(milestones: Iterable[MilestoneIn]) -> List[Milestone]:
    return [
        Milestone(
            title=milestone.title,
            due_date=milestone.due_date,
            description=milestone.description,
        )
        for milestone in milestones
    ]


class ProjectService(BaseService[Project]):
    def create_project(
        self, db: Session, project_data: ProjectCreate, user_id: str
    ) -> Project:
        """
        Create a new project together with its initial milestones.

        Args:
            db: Database session
            project_data: Project creation data
            user_id: User ID of the project creator

        Returns:
            Created project
        """
        project = Project(
            title=project_data.title,
            description=project_data.description,
            start_date=project_data.start_date,
            end_date=project_data.end_date,
            archived=False,
            created_by=user_id,
            milestones=_build_milestones(project_data.milestones or []),
        )
        db.add(project)
        self.commit(db)
        db.refresh(project)
        logger.info(
            f"Created project {project.id} with {len(project.milestones)} milestones"
        )
        return project

    def list_projects(
        self, db: Session, user_id: str, archived: bool = False
    ) -> List[Project]:
        """
        List projects the user created or is a member of, newest first.

        Args:
            db: Database session
            user_id: Caller user ID
            archived: Archived flag to filter on

        Returns:
            Projects with milestones loaded
        """
        member_projects = select(ProjectMember.project_id).where(
            ProjectMember.user_id == user_id
        )
        stmt = (
            select(Project)
            .where(
                Project.archived == archived,
                or_(Project.created_by == user_id, Project.id.in_(member_projects)),
            )
            .order_by(Project.created_at.desc())
        )
        return list(db.scalars(stmt).all())

    def update_project(
        self, db: Session, project: Project, update_data: ProjectUpdate
    ) -> Project:
        """
        Update project fields and, when a milestone list is supplied, replace
        every existing milestone with the new set.

        Args:
            db: Database session
            project: Project to update
            update_data: Update data

        Returns:
            Updated project
        """
        self.check_version(project, update_data.version)

        data = update_data.model_dump(
            exclude={"milestones", "version"}, exclude_unset=True
        )
        for field, value in data.items():
            if value is not None:
                setattr(project, field, value)

        if update_data.milestones is not None:
            # delete-orphan removes the previous rows on flush
            project.milestones = _build_milestones(update_data.milestones)

        project.version = (project.version or 0) + 1
        db.add(project)
        self.commit(db)
        db.refresh(project)
        return project

    def archive_project(self, db: Session, project: Project) -> Project:
        """Soft delete: tasks and milestones are kept."""
        project.archived = True
        project.version = (project.version or 0) + 1
        db.add(project)
        self.commit(db)
        db.refresh(project)
        return project


project_service = ProjectService(Project)
