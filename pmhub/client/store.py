# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Client-side state store.

Holds the session (token, current user), the notification list with its
derived unread count, navigation state and the realtime connection handle.
The realtime connection exists if and only if a non-empty auth token is
set: setting a token opens it once, clearing the token closes it once.

Pushed task and comment events only refresh caches for projects and tasks
the caller currently watches. Realtime is a hint; REST loads are the source
of truth, so every watch starts with a full fetch.
"""

import logging
import threading
from typing import Any, Callable, Dict, List, Optional, Set, Tuple

import socketio
from socketio.exceptions import ConnectionError as SocketConnectionError

from pmhub.client.api_client import PMHubClient

logger = logging.getLogger(__name__)

TASK_UPDATE_EVENT = "task_update_event"
COMMENT_EVENT = "comment_event"
NOTIFICATION_EVENT = "notification_event"

# Fields written by snapshot(); the connection handle is never persisted
PERSISTED_FIELDS = (
    "auth_token",
    "current_user",
    "is_authenticated",
    "notification_list",
    "unread_notification_count",
    "global_search_query",
    "breadcrumb_path",
    "active_nav_item",
)

Listener = Callable[["ClientStore"], None]


def _unread(notifications: List[Dict[str, Any]]) -> int:
    return sum(1 for n in notifications if not n.get("is_read"))


def _is_newer(incoming: Dict[str, Any], cached: Dict[str, Any]) -> bool:
    """Order by version when both carry one, else by updated_at."""
    if incoming.get("version") is not None and cached.get("version") is not None:
        return incoming["version"] >= cached["version"]
    return str(incoming.get("updated_at") or "") >= str(cached.get("updated_at") or "")


class ClientStore:
    """
    Observable application state for a PMHub client.
    """

    def __init__(
        self,
        server_url: str = "http://localhost:8000",
        api_client: Optional[PMHubClient] = None,
        socket_factory: Optional[Callable[[], Any]] = None,
        socketio_path: str = "socket.io",
    ):
        self.server_url = server_url.rstrip("/")
        self.api = api_client or PMHubClient(self.server_url)
        self.socketio_path = socketio_path
        self._socket_factory = socket_factory or socketio.Client

        self.auth_token: str = ""
        self.current_user: Optional[Dict[str, Any]] = None
        self.is_authenticated: bool = False
        self.notification_list: List[Dict[str, Any]] = []
        self.unread_notification_count: int = 0
        self.is_socket_connected: bool = False
        self.global_search_query: str = ""
        self.breadcrumb_path: List[Dict[str, str]] = []
        self.active_nav_item: str = "dashboard"
        self.socket: Optional[Any] = None
        self.connection_error: Optional[str] = None

        # Caches reconciled from REST loads and pushed events
        self.tasks: Dict[str, Dict[str, Any]] = {}
        self.comments: Dict[str, List[Dict[str, Any]]] = {}
        self.watched_projects: Set[str] = set()
        self.watched_tasks: Set[str] = set()

        self._listeners: List[Listener] = []
        # Socket callbacks arrive on the realtime client's own thread
        self._lock = threading.RLock()

    # ============================================================
    # Subscription
    # ============================================================

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a callback run after every state change."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _changed(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    # ============================================================
    # Session
    # ============================================================

    def set_auth_token(self, token: Optional[str]) -> None:
        with self._lock:
            self.auth_token = token or ""
            self.api.token = self.auth_token or None
            opened, closed = self._sync_connection()
            token = self.auth_token
        # Socket callbacks take the lock, so connect and disconnect run outside it
        if opened is not None:
            self._connect(opened, token)
        if closed is not None:
            closed.disconnect()
        self._changed()

    def set_current_user(self, user: Optional[Dict[str, Any]]) -> None:
        with self._lock:
            self.current_user = user
        self._changed()

    def set_is_authenticated(self, value: bool) -> None:
        with self._lock:
            self.is_authenticated = value
        self._changed()

    def login(self, email: str, password: str) -> Dict[str, Any]:
        """
        Authenticate against the API and start the session.

        Raises:
            APIError: on invalid credentials or transport failure
        """
        result = self.api.login(email, password)
        with self._lock:
            self.current_user = result.get("user")
            self.is_authenticated = True
        self.set_auth_token(result.get("token"))
        return result

    def logout(self) -> None:
        with self._lock:
            self.current_user = None
            self.is_authenticated = False
            self.notification_list = []
            self.unread_notification_count = 0
            self.breadcrumb_path = []
            self.tasks.clear()
            self.comments.clear()
            self.watched_projects.clear()
            self.watched_tasks.clear()
        self.set_auth_token("")

    # ============================================================
    # Realtime connection
    # ============================================================

    def _sync_connection(self) -> Tuple[Optional[Any], Optional[Any]]:
        """
        Install or drop the connection handle for the current token.

        Returns the socket to connect and the socket to disconnect; the
        caller does both after releasing the lock.
        """
        if self.auth_token and self.socket is None:
            return self._open_connection(), None
        if not self.auth_token and self.socket is not None:
            return None, self._close_connection()
        return None, None

    def _open_connection(self) -> Any:
        sock = self._socket_factory()
        sock.on("connect", self._on_connect)
        sock.on("disconnect", self._on_disconnect)
        sock.on(NOTIFICATION_EVENT, self._on_notification)
        sock.on(TASK_UPDATE_EVENT, self._on_task_update)
        sock.on(COMMENT_EVENT, self._on_comment)
        self.socket = sock
        self.connection_error = None
        return sock

    def _connect(self, sock: Any, token: str) -> None:
        try:
            sock.connect(
                self.server_url,
                auth={"token": token},
                socketio_path=self.socketio_path,
            )
        except SocketConnectionError as e:
            # The handle stays so the token/connection pairing holds
            with self._lock:
                self.connection_error = str(e)
            logger.warning(f"Realtime connection failed: {e}")

    def _close_connection(self) -> Any:
        sock = self.socket
        self.socket = None
        self.is_socket_connected = False
        return sock

    def _on_connect(self) -> None:
        with self._lock:
            self.is_socket_connected = True
            self.connection_error = None
        self._changed()

    def _on_disconnect(self, *args) -> None:
        with self._lock:
            self.is_socket_connected = False
        self._changed()

    def _on_notification(self, data: Dict[str, Any]) -> None:
        self.add_notification(data)

    def _on_task_update(self, data: Dict[str, Any]) -> None:
        self.apply_task_update(data)

    def _on_comment(self, data: Dict[str, Any]) -> None:
        self.apply_comment(data)

    # ============================================================
    # Notifications
    # ============================================================

    def set_notification_list(self, notifications: List[Dict[str, Any]]) -> None:
        with self._lock:
            self.notification_list = list(notifications)
            self.unread_notification_count = _unread(self.notification_list)
        self._changed()

    def add_notification(self, notification: Dict[str, Any]) -> None:
        with self._lock:
            if any(n.get("id") == notification.get("id") for n in self.notification_list):
                return
            self.notification_list.append(notification)
            self.unread_notification_count = _unread(self.notification_list)
        self._changed()

    def mark_notification_read(self, notification_id: str) -> None:
        with self._lock:
            for n in self.notification_list:
                if n.get("id") == notification_id:
                    n["is_read"] = True
            self.unread_notification_count = _unread(self.notification_list)
        self._changed()

    def refresh_notifications(self) -> List[Dict[str, Any]]:
        """Replace the notification list with the server's copy."""
        notifications = self.api.list_notifications()
        self.set_notification_list(notifications)
        return notifications

    def read_notification(self, notification_id: str) -> None:
        """Mark read on the server, then locally."""
        self.api.mark_notification(notification_id, is_read=True)
        self.mark_notification_read(notification_id)

    # ============================================================
    # Navigation
    # ============================================================

    def set_global_search_query(self, query: str) -> None:
        with self._lock:
            self.global_search_query = query
        self._changed()

    def set_breadcrumb_path(self, path: List[Dict[str, str]]) -> None:
        with self._lock:
            self.breadcrumb_path = [
                {"name": item["name"], "url": item["url"]} for item in path
            ]
        self._changed()

    def set_active_nav_item(self, item: str) -> None:
        with self._lock:
            self.active_nav_item = item
        self._changed()

    # ============================================================
    # Task and comment caches
    # ============================================================

    def load_project_tasks(self, project_id: str) -> List[Dict[str, Any]]:
        """Fetch a project's tasks and start following its task events."""
        tasks = self.api.list_tasks(project_id)
        with self._lock:
            self.watched_projects.add(project_id)
            stale = [
                k for k, t in self.tasks.items() if t.get("project_id") == project_id
            ]
            for task_id in stale:
                del self.tasks[task_id]
            for task in tasks:
                self.tasks[task["id"]] = task
        self._changed()
        return tasks

    def load_task(self, task_id: str) -> Dict[str, Any]:
        """Fetch one task with its comments and start following it."""
        task = self.api.get_task(task_id)
        comments = self.api.list_comments(task_id)
        with self._lock:
            self.watched_tasks.add(task_id)
            self.tasks[task_id] = task
            self.comments[task_id] = list(comments)
        self._changed()
        return task

    def unwatch_project(self, project_id: str) -> None:
        with self._lock:
            self.watched_projects.discard(project_id)

    def unwatch_task(self, task_id: str) -> None:
        with self._lock:
            self.watched_tasks.discard(task_id)
            self.comments.pop(task_id, None)

    def apply_task_update(self, task: Dict[str, Any]) -> bool:
        """
        Merge a pushed task record. Returns False when the task belongs to
        nothing currently watched or is older than the cached copy.
        """
        task_id = task.get("id")
        with self._lock:
            if (
                task.get("project_id") not in self.watched_projects
                and task_id not in self.watched_tasks
            ):
                return False
            cached = self.tasks.get(task_id)
            if cached is not None and not _is_newer(task, cached):
                return False
            self.tasks[task_id] = task
        self._changed()
        return True

    def apply_comment(self, comment: Dict[str, Any]) -> bool:
        """Append a pushed comment to a watched task's thread."""
        task_id = comment.get("task_id")
        with self._lock:
            if task_id not in self.watched_tasks:
                return False
            thread = self.comments.setdefault(task_id, [])
            if any(c.get("id") == comment.get("id") for c in thread):
                return False
            thread.append(comment)
        self._changed()
        return True

    # ============================================================
    # Persistence
    # ============================================================

    def snapshot(self) -> Dict[str, Any]:
        """Serializable copy of the persisted state."""
        with self._lock:
            return {field: _copy(getattr(self, field)) for field in PERSISTED_FIELDS}

    def restore(self, data: Dict[str, Any]) -> None:
        """
        Rehydrate from a snapshot. A restored token reopens the realtime
        connection.
        """
        with self._lock:
            for field in PERSISTED_FIELDS:
                if field in data and field != "auth_token":
                    setattr(self, field, _copy(data[field]))
            self.unread_notification_count = _unread(self.notification_list)
        self.set_auth_token(data.get("auth_token", ""))


def _copy(value: Any) -> Any:
    if isinstance(value, list):
        return [dict(v) if isinstance(v, dict) else v for v in value]
    if isinstance(value, dict):
        return dict(value)
    return value


__all__ = ["ClientStore", "PERSISTED_FIELDS"]
