# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class AttachmentResponse(BaseModel):
    id: str
    task_id: str
    user_id: str
    file_name: str
    file_url: str
    file_type: str
    uploaded_at: datetime

    model_config = ConfigDict(from_attributes=True)
