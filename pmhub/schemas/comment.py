# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CommentCreate(BaseModel):
    comment_text: str = Field(..., min_length=1)


class CommentResponse(BaseModel):
    """Full comment record, also the comment_event payload."""

    id: str
    task_id: str
    user_id: str
    comment_text: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
