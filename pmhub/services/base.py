# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Generic data access for a single ORM model.

Services own no business rules beyond data access: they read and write rows,
stamp versions and keep every multi-row write inside one transaction.
"""

import logging
from typing import Any, Dict, Generic, Optional, Type, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pmhub.core.config import settings
from pmhub.core.exceptions import ConflictException
from pmhub.db.base import Base

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=Base)


class BaseService(Generic[ModelType]):
    """
    CRUD operations for one model class.
    """

    def __init__(self, model: Type[ModelType]):
        self.model = model

    def get(self, db: Session, id: str) -> Optional[ModelType]:
        return db.get(self.model, id)

    def create(self, db: Session, *, obj_in: Dict[str, Any]) -> ModelType:
        db_obj = self.model(**obj_in)
        db.add(db_obj)
        self.commit(db)
        db.refresh(db_obj)
        return db_obj

    def update(
        self,
        db: Session,
        *,
        db_obj: ModelType,
        obj_in: Dict[str, Any],
        expected_version: Optional[int] = None,
    ) -> ModelType:
        """
        Apply non-null values from obj_in to db_obj.

        Null values keep the stored value. When the model is versioned its
        version is bumped on every update.
        """
        self.check_version(db_obj, expected_version)
        for field, value in obj_in.items():
            if value is None:
                continue
            setattr(db_obj, field, value)
        if hasattr(db_obj, "version"):
            db_obj.version = (db_obj.version or 0) + 1
        db.add(db_obj)
        self.commit(db)
        db.refresh(db_obj)
        return db_obj

    @staticmethod
    def check_version(db_obj: Any, expected_version: Optional[int]) -> None:
        """Reject stale writes, only when optimistic locking is switched on."""
        if not settings.ENABLE_OPTIMISTIC_LOCKING or expected_version is None:
            return
        current = getattr(db_obj, "version", None)
        if current is not None and current != expected_version:
            raise ConflictException(
                f"Stale write: expected version {expected_version}, current is {current}"
            )

    @staticmethod
    def commit(db: Session) -> None:
        """Commit the unit of work, rolling back on any store failure."""
        try:
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise
