# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""HTTP client for the PMHub REST API."""

from typing import Any, BinaryIO, Dict, List, Optional

import requests


class APIError(Exception):
    """API error with status code and message."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"API Error {status_code}: {message}")


class PMHubClient:
    """Client for the PMHub API."""

    def __init__(self, server: str = "http://localhost:8000", token: Optional[str] = None):
        self.server = server.rstrip("/")
        self.token = token

    def _headers(self, json_body: bool = True) -> Dict[str, str]:
        """Build request headers."""
        headers = {"Content-Type": "application/json"} if json_body else {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _request(
        self,
        method: str,
        path: str,
        data: Optional[Dict] = None,
        params: Optional[Dict] = None,
        files: Optional[Dict] = None,
    ) -> Any:
        """Make HTTP request to API."""
        url = f"{self.server}/api{path}"
        try:
            response = requests.request(
                method,
                url,
                json=data,
                params=params,
                files=files,
                headers=self._headers(json_body=files is None),
                timeout=30,
            )
        except requests.exceptions.ConnectionError:
            raise APIError(0, f"Failed to connect to server: {self.server}")
        except requests.exceptions.Timeout:
            raise APIError(0, "Request timeout")

        if response.status_code >= 400:
            try:
                error = response.json()
                message = error.get("error", str(error))
            except ValueError:
                message = response.text or response.reason
            raise APIError(response.status_code, message)

        if response.status_code == 204:
            return {}

        try:
            return response.json()
        except ValueError:
            return {}

    # Auth
    def register(self, profile: Dict[str, Any]) -> Dict[str, Any]:
        """Register and remember the returned token."""
        result = self._request("POST", "/auth/register", profile)
        self.token = result.get("token")
        return result

    def login(self, email: str, password: str) -> Dict[str, Any]:
        """Log in and remember the returned token."""
        result = self._request(
            "POST", "/auth/login", {"email": email, "password": password}
        )
        self.token = result.get("token")
        return result

    # Users
    def get_user(self, user_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/users/{user_id}")

    def update_user(self, user_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("PUT", f"/users/{user_id}", changes)

    def send_invitation(self, invitee_email: str, role: str) -> Dict[str, Any]:
        return self._request(
            "POST", "/invitations", {"invitee_email": invitee_email, "role": role}
        )

    # Projects
    def list_projects(self, archived: bool = False) -> List[Dict[str, Any]]:
        return self._request(
            "GET", "/projects", params={"archived": str(archived).lower()}
        )

    def get_project(self, project_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/projects/{project_id}")

    def create_project(self, project: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/projects", project)

    def update_project(self, project_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("PUT", f"/projects/{project_id}", changes)

    def archive_project(self, project_id: str) -> Dict[str, Any]:
        return self._request("DELETE", f"/projects/{project_id}")

    # Tasks
    def list_tasks(self, project_id: str) -> List[Dict[str, Any]]:
        return self._request("GET", f"/projects/{project_id}/tasks")

    def create_task(self, project_id: str, task: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", f"/projects/{project_id}/tasks", task)

    def get_task(self, task_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/tasks/{task_id}")

    def update_task(self, task_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("PUT", f"/tasks/{task_id}", changes)

    def delete_task(self, task_id: str) -> Dict[str, Any]:
        return self._request("DELETE", f"/tasks/{task_id}")

    # Comments and attachments
    def list_comments(self, task_id: str) -> List[Dict[str, Any]]:
        return self._request("GET", f"/tasks/{task_id}/comments")

    def add_comment(self, task_id: str, comment_text: str) -> Dict[str, Any]:
        return self._request(
            "POST", f"/tasks/{task_id}/comments", {"comment_text": comment_text}
        )

    def list_attachments(self, task_id: str) -> List[Dict[str, Any]]:
        return self._request("GET", f"/tasks/{task_id}/attachments")

    def upload_attachment(
        self, task_id: str, file_name: str, stream: BinaryIO
    ) -> Dict[str, Any]:
        return self._request(
            "POST", f"/tasks/{task_id}/attachments", files={"file": (file_name, stream)}
        )

    # Notifications
    def list_notifications(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/notifications")

    def mark_notification(self, notification_id: str, is_read: bool = True) -> Dict[str, Any]:
        return self._request(
            "PUT", f"/notifications/{notification_id}", {"is_read": is_read}
        )
