# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from pmhub.models.attachment import Attachment
from pmhub.models.comment import Comment
from pmhub.models.invitation import Invitation
from pmhub.models.milestone import Milestone
from pmhub.models.notification import Notification
from pmhub.models.project import Project, ProjectMember
from pmhub.models.task import Task
from pmhub.models.user import User

__all__ = [
    "Attachment",
    "Comment",
    "Invitation",
    "Milestone",
    "Notification",
    "Project",
    "ProjectMember",
    "Task",
    "User",
]
