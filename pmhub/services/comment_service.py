# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from pmhub.models.comment import Comment
from pmhub.services.base import BaseService


class CommentService(BaseService[Comment]):
    """Append-only task comments."""

    def add_comment(self, db: Session, task_id: str, user_id: str, text: str) -> Comment:
        return self.create(
            db, obj_in={"task_id": task_id, "user_id": user_id, "comment_text": text}
        )

    def list_for_task(self, db: Session, task_id: str) -> List[Comment]:
        stmt = (
            select(Comment)
            .where(Comment.task_id == task_id)
            .order_by(Comment.created_at.asc())
        )
        return list(db.scalars(stmt).all())


comment_service = CommentService(Comment)
