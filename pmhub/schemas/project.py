# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Project schemas for API request/response validation.

Milestones travel inline with their project. Supplying a milestone list on
update replaces the whole set; omitting it leaves the set untouched.
"""
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class MilestoneIn(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    due_date: date
    description: Optional[str] = None


class MilestoneResponse(BaseModel):
    id: str
    project_id: str
    title: str
    due_date: date
    description: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ProjectCreate(BaseModel):
    """Request model for creating a project."""

    title: str = Field(..., min_length=1, max_length=255, description="Project title")
    description: Optional[str] = Field(None, description="Project description")
    start_date: date
    end_date: date
    milestones: Optional[List[MilestoneIn]] = None


class ProjectUpdate(BaseModel):
    """Request model for updating a project."""

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    milestones: Optional[List[MilestoneIn]] = Field(
        None, description="When present, replaces every existing milestone"
    )
    version: Optional[int] = None


class ProjectResponse(BaseModel):
    """Response model for a project with its milestones."""

    id: str
    title: str
    description: Optional[str] = None
    start_date: date
    end_date: date
    archived: bool
    created_by: str
    version: int = 1
    created_at: datetime
    updated_at: datetime
    milestones: List[MilestoneResponse] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)
