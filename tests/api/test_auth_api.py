# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
API integration tests for registration, login and token enforcement
"""
import pytest
from fastapi.testclient import TestClient

from pmhub.core.security import verify_token
from pmhub.models.user import User

REGISTER_PAYLOAD = {
    "first_name": "Grace",
    "last_name": "Hopper",
    "email": "grace@example.com",
    "password": "cobol-4-ever",
}


@pytest.mark.api
class TestAuthAPI:
    """Test auth endpoints"""

    def test_register_returns_token_for_created_user(self, test_client: TestClient):
        response = test_client.post("/api/auth/register", json=REGISTER_PAYLOAD)

        assert response.status_code == 201
        data = response.json()
        assert verify_token(data["token"]).id == data["user"]["id"]
        assert data["user"]["email"] == "grace@example.com"
        assert data["user"]["role"] == "team_member"
        assert "password" not in response.text
        assert "password_hash" not in data["user"]

    def test_register_duplicate_email(self, test_client: TestClient, test_user: User):
        payload = dict(REGISTER_PAYLOAD, email=test_user.email)

        response = test_client.post("/api/auth/register", json=payload)

        assert response.status_code == 409
        assert response.json() == {"error": "Email already registered"}

    def test_register_missing_field_reports_fields(self, test_client: TestClient):
        payload = {k: v for k, v in REGISTER_PAYLOAD.items() if k != "email"}

        response = test_client.post("/api/auth/register", json=payload)

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Request validation failed"
        assert "email" in body["fields"]

    def test_login_success(self, test_client: TestClient, test_user: User):
        response = test_client.post(
            "/api/auth/login",
            json={"email": test_user.email, "password": "testpassword123"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["user"]["id"] == test_user.id
        assert verify_token(data["token"]).id == test_user.id
        assert "testpassword123" not in response.text

    def test_login_failures_are_indistinguishable(
        self, test_client: TestClient, test_user: User
    ):
        wrong_password = test_client.post(
            "/api/auth/login",
            json={"email": test_user.email, "password": "wrongpassword"},
        )
        unknown_email = test_client.post(
            "/api/auth/login",
            json={"email": "ghost@example.com", "password": "testpassword123"},
        )

        assert wrong_password.status_code == unknown_email.status_code == 401
        assert wrong_password.json() == unknown_email.json()
        assert wrong_password.json() == {"error": "Invalid credentials"}

    def test_login_with_mixed_case_email_as_registered(self, test_client: TestClient):
        payload = dict(REGISTER_PAYLOAD, email="Alice@Example.COM")
        registered = test_client.post("/api/auth/register", json=payload)
        assert registered.status_code == 201

        for email in ("Alice@Example.COM", "alice@example.com"):
            response = test_client.post(
                "/api/auth/login",
                json={"email": email, "password": REGISTER_PAYLOAD["password"]},
            )
            assert response.status_code == 200
            assert response.json()["user"]["id"] == registered.json()["user"]["id"]

        wrong_password = test_client.post(
            "/api/auth/login",
            json={"email": "Alice@Example.COM", "password": "wrongpassword"},
        )
        assert wrong_password.status_code == 401
        assert wrong_password.json() == {"error": "Invalid credentials"}

    def test_register_duplicate_email_ignores_case(
        self, test_client: TestClient, test_user: User
    ):
        payload = dict(REGISTER_PAYLOAD, email=test_user.email.upper())

        response = test_client.post("/api/auth/register", json=payload)

        assert response.status_code == 409

    def test_protected_route_without_token(self, test_client: TestClient):
        response = test_client.get("/api/projects")

        assert response.status_code == 401
        assert response.json() == {"error": "Missing token"}

    def test_protected_route_with_invalid_token(self, test_client: TestClient):
        response = test_client.get(
            "/api/projects", headers={"Authorization": "Bearer garbage"}
        )

        assert response.status_code == 403
        assert response.json() == {"error": "Invalid token"}

    def test_liveness_endpoint(self, test_client: TestClient):
        response = test_client.get("/")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"
