# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """Plain acknowledgement body."""

    message: str = Field(..., description="Human readable result")
