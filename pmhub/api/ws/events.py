# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Socket.IO event definitions.

This module defines the server-pushed event names and the connection
lifecycle states tracked by the connection registry.
"""

from enum import Enum


class ServerEvents:
    """Server -> Client event names."""

    # Broadcast to every connected client
    TASK_UPDATE = "task_update_event"  # payload: full Task record
    COMMENT = "comment_event"  # payload: full Comment record

    # Delivered to a single user's room
    NOTIFICATION = "notification_event"  # payload: full Notification record


class ConnectionState(str, Enum):
    """Lifecycle of one realtime connection."""

    CONNECTING = "connecting"
    AUTHENTICATING = "authenticating"
    JOINED = "joined"
    DISCONNECTED = "disconnected"  # terminal
