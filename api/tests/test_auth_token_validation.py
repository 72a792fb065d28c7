"""
Tests for session-token validation.

These tests verify that:
1. Tokens from the identity service work via cookie and bearer header
2. Expired, forged and malformed tokens are rejected with a trace id
3. The session endpoints set and clear the httpOnly cookie
"""

import pytest

pytest.importorskip("fastapi")

import study_partner.main as m
from study_partner.auth import deps as auth_deps
from study_partner.auth import security
from study_partner.auth.deps import get_current_user
from study_partner.auth.security import create_access_token
from study_partner.config import SESSION_COOKIE_NAME


@pytest.fixture
def auth_client(client, monkeypatch):
    monkeypatch.setattr(security, "JWT_SECRET", "test-secret")
    m.app.dependency_overrides.pop(get_current_user, None)
    return client


class TestTokenTransport:
    def test_bearer_token_resolves_identity(self, auth_client):
        token = create_access_token("idp-user-42", email="kim@example.com", name="Kim")
        resp = auth_client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 200
        assert resp.json() == {"id": "idp-user-42", "email": "kim@example.com", "name": "Kim"}

    def test_cookie_token_takes_priority_over_bearer(self, auth_client):
        cookie_token = create_access_token("cookie-user")
        bearer_token = create_access_token("bearer-user")
        resp = auth_client.get(
            "/auth/me",
            headers={"Cookie": f"{SESSION_COOKIE_NAME}={cookie_token}", "Authorization": f"Bearer {bearer_token}"},
        )
        assert resp.status_code == 200
        assert resp.json()["id"] == "cookie-user"

    def test_identity_flows_into_profile_routes(self, auth_client):
        token = create_access_token("idp-user-7")
        headers = {"Authorization": f"Bearer {token}"}
        payload = {"name": "Lee", "age": 17, "grade": "Grade 11", "favorite_subjects": "Biology"}
        assert auth_client.post("/profile", json=payload, headers=headers).status_code == 200
        assert auth_client.get("/profile", headers=headers).json()["profile"]["user_id"] == "idp-user-7"


class TestTokenRejection:
    def test_expired_token(self, auth_client):
        token = create_access_token("u1", ttl_minutes=-5)
        resp = auth_client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401
        detail = resp.json()["detail"]
        assert detail["message"] == "unauthorized"
        assert detail["trace_id"]

    def test_token_signed_with_other_secret(self, auth_client, monkeypatch):
        monkeypatch.setattr(security, "JWT_SECRET", "someone-else")
        token = create_access_token("u1")
        monkeypatch.setattr(security, "JWT_SECRET", "test-secret")
        resp = auth_client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401

    def test_token_without_subject(self, auth_client):
        token = create_access_token("")
        resp = auth_client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401

    @pytest.mark.parametrize("header", ["Token abc", "Bearer"])
    def test_malformed_authorization_header(self, auth_client, header):
        resp = auth_client.get("/auth/me", headers={"Authorization": header})
        assert resp.status_code == 401

    def test_dev_mode_exposes_reason(self, auth_client, monkeypatch):
        monkeypatch.setattr(auth_deps, "DEV_MODE", True)
        resp = auth_client.get("/auth/me")
        assert resp.status_code == 401
        assert resp.json()["detail"]["reason"] == "missing_token"

    def test_missing_secret_is_server_error(self, auth_client, monkeypatch):
        token = create_access_token("u1")
        monkeypatch.setattr(security, "JWT_SECRET", "")
        resp = auth_client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 500


class TestSessionCookie:
    def test_session_exchange_sets_http_only_cookie(self, auth_client):
        token = create_access_token("u1")
        resp = auth_client.post("/auth/session", json={"access_token": token})
        assert resp.status_code == 200
        set_cookie = resp.headers["set-cookie"]
        assert f"{SESSION_COOKIE_NAME}={token}" in set_cookie
        assert "HttpOnly" in set_cookie

    def test_session_exchange_rejects_invalid_token(self, auth_client):
        resp = auth_client.post("/auth/session", json={"access_token": "not-a-jwt"})
        assert resp.status_code == 401
        assert "set-cookie" not in resp.headers

    def test_logout_clears_cookie(self, auth_client):
        resp = auth_client.post("/auth/logout")
        assert resp.status_code == 200
        assert resp.json() == {"success": True}
        assert "Max-Age=0" in resp.headers["set-cookie"]
