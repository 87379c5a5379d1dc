# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Attachment service.

The payload is written to the storage backend before the metadata row is
inserted. A failure between the two leaves an orphaned file in storage, which
is tolerated and not garbage-collected.
"""
import logging
import os
import uuid
from typing import BinaryIO, List

from sqlalchemy import select
from sqlalchemy.orm import Session

from pmhub.models.attachment import Attachment
from pmhub.services.base import BaseService
from pmhub.services.storage import get_storage_backend

logger = logging.getLogger(__name__)


def file_type_from_name(file_name: str) -> str:
    """Extension without the dot, empty when there is none."""
    return os.path.splitext(file_name)[1].lstrip(".")


class AttachmentService(BaseService[Attachment]):
    def upload(
        self,
        db: Session,
        *,
        task_id: str,
        user_id: str,
        file_name: str,
        stream: BinaryIO,
        base_url: str,
    ) -> Attachment:
        """
        Store an uploaded file under a generated opaque name and record its
        metadata.

        Args:
            db: Database session
            task_id: Owning task
            user_id: Uploader
            file_name: Original client file name
            stream: Readable binary stream with the payload
            base_url: Externally visible server root used to build file_url

        Returns:
            Created attachment row
        """
        storage = get_storage_backend()
        key = uuid.uuid4().hex
        storage.save_stream(key, stream)
        logger.info(f"Stored upload '{file_name}' for task {task_id} as {key}")

        return self.create(
            db,
            obj_in={
                "task_id": task_id,
                "user_id": user_id,
                "file_name": file_name,
                "storage_key": key,
                "file_url": storage.get_url(key, base_url=base_url),
                "file_type": file_type_from_name(file_name),
            },
        )

    def list_for_task(self, db: Session, task_id: str) -> List[Attachment]:
        stmt = (
            select(Attachment)
            .where(Attachment.task_id == task_id)
            .order_by(Attachment.uploaded_at.asc())
        )
        return list(db.scalars(stmt).all())


attachment_service = AttachmentService(Attachment)
