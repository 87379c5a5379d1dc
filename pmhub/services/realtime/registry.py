# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
In-memory connection registry for the realtime channel.

The registry owns the mapping from user id to the set of Socket.IO session
ids currently joined for that user, and the lifecycle state of every
connection. It lives for the duration of the application lifespan; a process
restart drops every connection and clients re-authenticate on reconnect.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Set

import socketio

from pmhub.api.ws.events import ConnectionState

logger = logging.getLogger(__name__)


def user_room(user_id: str) -> str:
    """Room name for targeted delivery to one user."""
    return str(user_id)


@dataclass
class Connection:
    sid: str
    state: ConnectionState = ConnectionState.CONNECTING
    user_id: Optional[str] = None
    opened_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class ConnectionRegistry:
    """
    Tracks realtime connections and delivers events to them.

    All methods run on the event loop that serves Socket.IO, so no locking
    is needed around the in-memory maps.
    """

    def __init__(self, sio: socketio.AsyncServer, namespace: str = "/"):
        self.sio = sio
        self.namespace = namespace
        self._connections: Dict[str, Connection] = {}
        self._user_sids: Dict[str, Set[str]] = {}
        self._running = False

    # ============================================================
    # Lifecycle
    # ============================================================

    def start(self) -> None:
        self._running = True
        logger.info("Connection registry started")

    def stop(self) -> None:
        """Forget every tracked connection."""
        count = len(self._connections)
        for conn in self._connections.values():
            conn.state = ConnectionState.DISCONNECTED
        self._connections.clear()
        self._user_sids.clear()
        self._running = False
        logger.info(f"Connection registry stopped, dropped {count} connection(s)")

    @property
    def is_running(self) -> bool:
        return self._running

    # ============================================================
    # Connection state transitions
    # ============================================================

    def open(self, sid: str) -> Connection:
        conn = Connection(sid=sid)
        self._connections[sid] = conn
        return conn

    def authenticating(self, sid: str) -> None:
        conn = self._connections.get(sid) or self.open(sid)
        conn.state = ConnectionState.AUTHENTICATING

    async def join(self, sid: str, user_id: str) -> None:
        """Bind an authenticated connection to its user's room."""
        conn = self._connections.get(sid) or self.open(sid)
        await self.sio.enter_room(sid, user_room(user_id), namespace=self.namespace)
        conn.user_id = str(user_id)
        conn.state = ConnectionState.JOINED
        self._user_sids.setdefault(conn.user_id, set()).add(sid)
        logger.debug(f"[WS] sid={sid} joined room {user_room(user_id)}")

    def reject(self, sid: str) -> None:
        """Authentication failed: go straight to Disconnected, no room."""
        conn = self._connections.pop(sid, None)
        if conn is not None:
            conn.state = ConnectionState.DISCONNECTED

    def close(self, sid: str) -> Optional[Connection]:
        conn = self._connections.pop(sid, None)
        if conn is None:
            return None
        conn.state = ConnectionState.DISCONNECTED
        if conn.user_id is not None:
            sids = self._user_sids.get(conn.user_id)
            if sids is not None:
                sids.discard(sid)
                if not sids:
                    del self._user_sids[conn.user_id]
        return conn

    # ============================================================
    # Queries
    # ============================================================

    def get_state(self, sid: str) -> ConnectionState:
        conn = self._connections.get(sid)
        return conn.state if conn is not None else ConnectionState.DISCONNECTED

    def get_user_sids(self, user_id: str) -> Set[str]:
        return set(self._user_sids.get(str(user_id), ()))

    def connected_users(self) -> List[str]:
        return list(self._user_sids.keys())

    def connection_count(self) -> int:
        return sum(
            1 for c in self._connections.values() if c.state == ConnectionState.JOINED
        )

    # ============================================================
    # Delivery
    # ============================================================

    async def send_to_user(self, user_id: str, event: str, data: Any) -> bool:
        """
        Emit an event to every connection of one user.

        Returns:
            False if the user has no joined connection (nothing is queued)
        """
        if not self._user_sids.get(str(user_id)):
            logger.debug(f"[WS] {event} to user={user_id} dropped, not connected")
            return False
        await self.sio.emit(
            event, data, room=user_room(user_id), namespace=self.namespace
        )
        return True

    async def broadcast(self, event: str, data: Any) -> None:
        """Emit an event to every connected client."""
        await self.sio.emit(event, data, namespace=self.namespace)
        logger.debug(f"[WS] broadcast {event} to {self.connection_count()} connection(s)")
