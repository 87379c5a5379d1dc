# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from pmhub.client.api_client import APIError, PMHubClient
from pmhub.client.store import ClientStore

__all__ = ["APIError", "ClientStore", "PMHubClient"]
