# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from pmhub.services.realtime.emitter import (
    RealtimeEmitter,
    get_realtime_emitter,
    init_realtime_emitter,
    publish_comment,
    publish_notification,
    publish_task_update,
    shutdown_realtime_emitter,
)
from pmhub.services.realtime.registry import ConnectionRegistry, user_room

__all__ = [
    "ConnectionRegistry",
    "RealtimeEmitter",
    "get_realtime_emitter",
    "init_realtime_emitter",
    "publish_comment",
    "publish_notification",
    "publish_task_update",
    "shutdown_realtime_emitter",
    "user_room",
]
