# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

import uuid
from datetime import datetime, timezone

from sqlalchemy.orm import declarative_base

# Declare base class
Base = declarative_base()


def generate_uuid() -> str:
    """Opaque primary key for every entity."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """Naive UTC timestamp with microsecond precision."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
