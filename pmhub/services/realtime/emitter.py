# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Realtime emitter for server-pushed Socket.IO events.

REST handlers run synchronously in the threadpool while the Socket.IO server
lives on the main event loop. The publish_* helpers schedule emission onto
that loop with run_coroutine_threadsafe and return immediately. Delivery is
at-most-once: if no loop or emitter is available the event is dropped.
"""

import asyncio
import logging
from concurrent.futures import Future
from typing import Any, Awaitable, Callable, Dict, Optional

from pmhub.api.ws.events import ServerEvents
from pmhub.services.realtime.registry import ConnectionRegistry

logger = logging.getLogger(__name__)


class RealtimeEmitter:
    """
    Typed emit methods on top of the connection registry.
    """

    def __init__(self, registry: ConnectionRegistry):
        self.registry = registry

    async def emit_task_update(self, task: Dict[str, Any]) -> None:
        await self.registry.broadcast(ServerEvents.TASK_UPDATE, task)
        logger.debug(f"[WS] emit {ServerEvents.TASK_UPDATE} task={task.get('id')}")

    async def emit_comment(self, comment: Dict[str, Any]) -> None:
        await self.registry.broadcast(ServerEvents.COMMENT, comment)
        logger.debug(f"[WS] emit {ServerEvents.COMMENT} comment={comment.get('id')}")

    async def emit_notification(
        self, user_id: str, notification: Dict[str, Any]
    ) -> bool:
        return await self.registry.send_to_user(
            user_id, ServerEvents.NOTIFICATION, notification
        )


# Global emitter instance
_emitter: Optional[RealtimeEmitter] = None
# Global reference to the main event loop (set during initialization)
_main_event_loop: Optional[asyncio.AbstractEventLoop] = None


def get_realtime_emitter() -> Optional[RealtimeEmitter]:
    """
    Get the global realtime emitter instance.

    Returns:
        RealtimeEmitter or None if not initialized
    """
    return _emitter


def get_main_event_loop() -> Optional[asyncio.AbstractEventLoop]:
    return _main_event_loop


def init_realtime_emitter(registry: ConnectionRegistry) -> RealtimeEmitter:
    """
    Initialize the global realtime emitter.

    Must be called from the application lifespan so the running loop is the
    one serving Socket.IO.
    """
    global _emitter, _main_event_loop
    _emitter = RealtimeEmitter(registry)
    try:
        _main_event_loop = asyncio.get_running_loop()
        logger.info("Realtime emitter initialized with main event loop reference")
    except RuntimeError:
        _main_event_loop = None
        logger.warning("Realtime emitter initialized without event loop reference")
    return _emitter


def shutdown_realtime_emitter() -> None:
    global _emitter, _main_event_loop
    _emitter = None
    _main_event_loop = None


def _log_failure(event: str):
    def _callback(future: Future) -> None:
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            logger.error(f"[WS] Failed to emit {event}: {exc}", exc_info=exc)

    return _callback


def _schedule(
    event: str, factory: Callable[[RealtimeEmitter], Awaitable[Any]]
) -> bool:
    emitter = get_realtime_emitter()
    if emitter is None:
        logger.debug(f"[WS] Emitter not initialized, dropping {event}")
        return False

    main_loop = get_main_event_loop()
    if main_loop is None or not main_loop.is_running():
        logger.warning(f"[WS] No running event loop available, dropping {event}")
        return False

    future = asyncio.run_coroutine_threadsafe(factory(emitter), main_loop)
    future.add_done_callback(_log_failure(event))
    return True


def publish_task_update(task: Dict[str, Any]) -> bool:
    """Schedule a task_update_event broadcast. Safe to call from any thread."""
    return _schedule(ServerEvents.TASK_UPDATE, lambda e: e.emit_task_update(task))


def publish_comment(comment: Dict[str, Any]) -> bool:
    """Schedule a comment_event broadcast. Safe to call from any thread."""
    return _schedule(ServerEvents.COMMENT, lambda e: e.emit_comment(comment))


def publish_notification(user_id: str, notification: Dict[str, Any]) -> bool:
    """Schedule a notification_event to one user's room."""
    return _schedule(
        ServerEvents.NOTIFICATION,
        lambda e: e.emit_notification(user_id, notification),
    )
