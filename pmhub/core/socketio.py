# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Socket.IO server setup.

A single AsyncServer in ASGI mode shares the event loop with FastAPI. The
combined ASGI app routes /socket.io traffic to it and everything else to the
REST application.
"""

import logging
from typing import Optional

import socketio

from pmhub.core.config import settings

logger = logging.getLogger(__name__)

_sio: Optional[socketio.AsyncServer] = None


def create_sio() -> socketio.AsyncServer:
    cors = settings.SOCKETIO_CORS_ORIGINS
    return socketio.AsyncServer(
        async_mode="asgi",
        cors_allowed_origins="*" if cors == ["*"] else cors,
        logger=False,
        engineio_logger=False,
    )


def get_sio() -> socketio.AsyncServer:
    """Get the process-wide Socket.IO server, creating it on first use."""
    global _sio
    if _sio is None:
        _sio = create_sio()
        logger.info("Socket.IO server created")
    return _sio
