# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from typing import Any, Dict, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from pmhub.models.user import User
from pmhub.schemas.user import UserRegister, UserUpdate
from pmhub.services.base import BaseService


class UserService(BaseService[User]):
    """
    User service class
    """

    def get_by_email(self, db: Session, email: str) -> Optional[User]:
        """Look up a user by email, ignoring case."""
        return db.scalar(
            select(User).where(func.lower(User.email) == email.strip().lower())
        )

    def create_user(self, db: Session, user_in: UserRegister, password_hash: str) -> User:
        return self.create(
            db,
            obj_in={
                "first_name": user_in.first_name,
                "last_name": user_in.last_name,
                "email": user_in.email,
                "password_hash": password_hash,
                "profile_picture_url": user_in.profile_picture_url,
                "role": user_in.role.value,
                "notification_settings": {},
            },
        )

    def update_profile(self, db: Session, user: User, user_in: UserUpdate) -> User:
        data: Dict[str, Any] = user_in.model_dump(exclude={"version"}, exclude_unset=True)
        return self.update(
            db, db_obj=user, obj_in=data, expected_version=user_in.version
        )


user_service = UserService(User)
