# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from typing import Generator

from sqlalchemy.orm import Session

from pmhub.db.session import get_db_session


def get_db() -> Generator[Session, None, None]:
    """Database session dependency, one session per request."""
    with get_db_session() as db:
        yield db
