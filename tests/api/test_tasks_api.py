# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
API integration tests for tasks and the events they publish
"""
from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import select
from sqlalchemy.orm import Session

from pmhub.core.config import settings
from pmhub.models.comment import Comment
from pmhub.models.notification import Notification
from pmhub.models.task import Task
from pmhub.models.user import User


@pytest.fixture
def project(test_client: TestClient, auth_headers):
    response = test_client.post(
        "/api/projects",
        headers=auth_headers,
        json={"title": "Launch", "start_date": "2024-01-01", "end_date": "2024-06-01"},
    )
    return response.json()


def _create_task(client: TestClient, headers, project_id: str, **fields):
    payload = {"name": "Draft wireframes", **fields}
    response = client.post(f"/api/projects/{project_id}/tasks", headers=headers, json=payload)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.api
class TestTasksAPI:
    def test_task_lifecycle_scenario(self, test_client: TestClient, auth_headers, project):
        """Create, move to in_progress, then read back through the project listing"""
        task = _create_task(
            test_client, auth_headers, project["id"], status="not_started"
        )
        assert task["priority"] == "Medium"

        response = test_client.put(
            f"/api/tasks/{task['id']}", headers=auth_headers, json={"status": "in_progress"}
        )
        assert response.status_code == 200

        tasks = test_client.get(
            f"/api/projects/{project['id']}/tasks", headers=auth_headers
        ).json()
        assert len(tasks) == 1
        assert tasks[0]["name"] == "Draft wireframes"
        assert tasks[0]["status"] == "in_progress"
        assert datetime.fromisoformat(tasks[0]["updated_at"]) > datetime.fromisoformat(
            tasks[0]["created_at"]
        )

    def test_create_publishes_task_update(
        self, test_client: TestClient, auth_headers, project, published
    ):
        task = _create_task(test_client, auth_headers, project["id"])

        published["task_update"].assert_called_once()
        (payload,) = published["task_update"].call_args.args
        assert payload == task

    def test_update_publishes_exactly_one_event_with_full_record(
        self, test_client: TestClient, auth_headers, project, published
    ):
        task = _create_task(test_client, auth_headers, project["id"])
        published["task_update"].reset_mock()

        response = test_client.put(
            f"/api/tasks/{task['id']}", headers=auth_headers, json={"status": "blocked"}
        )

        published["task_update"].assert_called_once()
        (payload,) = published["task_update"].call_args.args
        assert payload == response.json()
        assert payload["status"] == "blocked"
        assert payload["project_id"] == project["id"]
        assert payload["name"] == "Draft wireframes"

    def test_any_status_transition_is_allowed(
        self, test_client: TestClient, auth_headers, project
    ):
        task = _create_task(test_client, auth_headers, project["id"], status="completed")

        response = test_client.put(
            f"/api/tasks/{task['id']}", headers=auth_headers, json={"status": "not_started"}
        )

        assert response.json()["status"] == "not_started"

    def test_unknown_status_is_rejected(self, test_client: TestClient, auth_headers, project):
        task = _create_task(test_client, auth_headers, project["id"])

        response = test_client.put(
            f"/api/tasks/{task['id']}", headers=auth_headers, json={"status": "done"}
        )

        assert response.status_code == 400
        assert "status" in response.json()["fields"]

    def test_create_under_unknown_project(self, test_client: TestClient, auth_headers):
        response = test_client.post(
            "/api/projects/missing/tasks", headers=auth_headers, json={"name": "x"}
        )

        assert response.status_code == 404
        assert response.json() == {"error": "Project not found"}

    def test_unknown_assignee_is_rejected(self, test_client: TestClient, auth_headers, project):
        response = test_client.post(
            f"/api/projects/{project['id']}/tasks",
            headers=auth_headers,
            json={"name": "x", "assignee_id": "nobody"},
        )

        assert response.status_code == 400
        assert response.json()["fields"] == {"assignee_id": "Unknown user"}

    def test_subtask_references_parent(self, test_client: TestClient, auth_headers, project):
        parent = _create_task(test_client, auth_headers, project["id"])
        child = _create_task(
            test_client, auth_headers, project["id"], name="Wireframes", parent_task_id=parent["id"]
        )

        assert child["parent_task_id"] == parent["id"]

    def test_delete_detaches_subtasks_and_drops_comments(
        self, test_client: TestClient, auth_headers, project, test_db: Session
    ):
        parent = _create_task(test_client, auth_headers, project["id"])
        child = _create_task(
            test_client, auth_headers, project["id"], name="Wireframes", parent_task_id=parent["id"]
        )
        test_client.post(
            f"/api/tasks/{parent['id']}/comments",
            headers=auth_headers,
            json={"comment_text": "Looks good"},
        )

        response = test_client.delete(f"/api/tasks/{parent['id']}", headers=auth_headers)

        assert response.status_code == 200
        assert test_client.get(f"/api/tasks/{parent['id']}", headers=auth_headers).status_code == 404
        test_db.expire_all()
        assert test_db.get(Task, child["id"]).parent_task_id is None
        assert test_db.scalars(
            select(Comment).where(Comment.task_id == parent["id"])
        ).all() == []

    def test_assignment_creates_no_notification_by_default(
        self, test_client: TestClient, auth_headers, project, test_user: User, test_db: Session, published
    ):
        _create_task(test_client, auth_headers, project["id"], assignee_id=test_user.id)

        assert test_db.scalars(select(Notification)).all() == []
        published["notification"].assert_not_called()

    def test_assignment_notification_when_enabled(
        self,
        test_client: TestClient,
        auth_headers,
        project,
        pm_user: User,
        test_db: Session,
        published,
        monkeypatch,
    ):
        monkeypatch.setattr(settings, "NOTIFY_ON_TASK_ASSIGNMENT", True)
        task = _create_task(test_client, auth_headers, project["id"])

        test_client.put(
            f"/api/tasks/{task['id']}", headers=auth_headers, json={"assignee_id": pm_user.id}
        )

        notifications = test_db.scalars(select(Notification)).all()
        assert len(notifications) == 1
        assert notifications[0].user_id == pm_user.id
        assert notifications[0].type == "task_assignment"
        assert notifications[0].related_task_id == task["id"]
        published["notification"].assert_called_once()
        user_id, payload = published["notification"].call_args.args
        assert user_id == pm_user.id
        assert payload["id"] == notifications[0].id
