# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Request-scoped context shared between the HTTP middleware, the Socket.IO
namespace and the logging filter.
"""

from contextvars import ContextVar
from typing import Optional

_request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def set_request_context(request_id: Optional[str]) -> None:
    """Set the request ID for the current context."""
    _request_id_var.set(request_id)


def get_request_id() -> Optional[str]:
    """
    Get the current request ID from ContextVar.

    This is used by the logging filter to add request_id to log records.
    """
    return _request_id_var.get()

