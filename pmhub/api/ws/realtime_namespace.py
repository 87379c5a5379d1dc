# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Default namespace for the realtime update channel.

Connections authenticate during the handshake with the same bearer token
used by the REST API, supplied either in the Socket.IO auth payload
({"token": "..."}) or as a token query parameter. An authenticated connection
joins the room keyed by its user id. Clients send no events; the server only
pushes.
"""

import logging
import uuid
from typing import Optional
from urllib.parse import parse_qs

import socketio
from socketio.exceptions import ConnectionRefusedError

from pmhub.core.context import set_request_context
from pmhub.core.exceptions import InvalidToken
from pmhub.core.security import verify_token
from pmhub.services.realtime.registry import ConnectionRegistry

logger = logging.getLogger(__name__)


def extract_token(environ: dict, auth: Optional[dict]) -> Optional[str]:
    """Token from the auth payload, falling back to the query string."""
    if isinstance(auth, dict) and auth.get("token"):
        return auth["token"]
    query = parse_qs(environ.get("QUERY_STRING", "") if environ else "")
    values = query.get("token")
    return values[0] if values else None


class RealtimeNamespace(socketio.AsyncNamespace):
    """
    Socket.IO namespace handling authentication and user rooms.
    """

    def __init__(self, registry: ConnectionRegistry, namespace: str = "/"):
        super().__init__(namespace)
        self.registry = registry

    async def on_connect(self, sid: str, environ: dict, auth: Optional[dict] = None):
        """
        Handle client connection.

        Raises:
            ConnectionRefusedError: If the token is missing or invalid
        """
        request_id = str(uuid.uuid4())[:8]
        set_request_context(request_id)

        if not self.registry.is_running:
            logger.warning(f"[WS] Rejecting connection, registry stopped sid={sid}")
            raise ConnectionRefusedError("Server is not accepting connections")

        self.registry.open(sid)
        logger.info(f"[WS] Connection attempt sid={sid}")

        self.registry.authenticating(sid)
        token = extract_token(environ, auth)
        if not token:
            self.registry.reject(sid)
            logger.warning(f"[WS] Missing token sid={sid}")
            raise ConnectionRefusedError("Authentication error: missing token")

        try:
            token_data = verify_token(token)
        except InvalidToken:
            self.registry.reject(sid)
            logger.warning(f"[WS] Invalid token sid={sid}")
            raise ConnectionRefusedError("Authentication error: invalid token")

        await self.save_session(
            sid, {"user_id": token_data.id, "request_id": request_id}
        )
        await self.registry.join(sid, token_data.id)
        logger.info(f"[WS] Connected user={token_data.id} sid={sid}")

    async def on_disconnect(self, sid: str, *args):
        conn = self.registry.close(sid)
        if conn is not None and conn.user_id is not None:
            logger.info(f"[WS] Disconnected user={conn.user_id} sid={sid}")
        else:
            logger.info(f"[WS] Disconnected sid={sid}")


def register_realtime_namespace(
    sio: socketio.AsyncServer, registry: ConnectionRegistry
) -> RealtimeNamespace:
    namespace = RealtimeNamespace(registry)
    sio.register_namespace(namespace)
    return namespace
