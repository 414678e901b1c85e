"""Tests for the health and authentication endpoints."""

from __future__ import annotations

import time


def test_health_check(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "database": "ok"}


def test_health_check_reports_database_outage(client, monkeypatch):
    monkeypatch.setattr("portfolio_cms.api.routes.health.ping_database", lambda: False)
    response = client.get("/health")
    assert response.status_code == 503
    assert response.json()["status"] == "unhealthy"


def test_login_returns_token_and_user(client, admin_user):
    response = client.post(
        "/api/auth/login", json={"email": "Admin@Example.com", "password": "s3cret-pass"}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["user"] == {
        "id": admin_user["id"],
        "email": "admin@example.com",
        "name": "Admin",
        "role": "admin",
    }
    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {data['token']}"})
    assert me.status_code == 200
    assert me.json()["user"]["email"] == "admin@example.com"


def test_login_with_wrong_password(client, admin_user):
    response = client.post(
        "/api/auth/login", json={"email": "admin@example.com", "password": "nope"}
    )
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid email or password."


def test_me_requires_token(client):
    assert client.get("/api/auth/me").status_code == 401
    response = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


def test_tampered_token_is_rejected(client, auth_headers):
    header, payload, signature = auth_headers["Authorization"].split(".")
    middle = len(signature) // 2
    flipped = "A" if signature[middle] != "A" else "B"
    tampered = ".".join([header, payload, signature[:middle] + flipped + signature[middle + 1 :]])
    response = client.get("/api/auth/me", headers={"Authorization": tampered})
    assert response.status_code == 401


def test_expired_token_is_rejected(client, admin_user, monkeypatch):
    from portfolio_cms.services.auth import issue_token

    monkeypatch.setenv("PORTFOLIO_TOKEN_TTL_SECONDS", "60")
    token = issue_token(admin_user["id"], now=time.time() - 120)
    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_about_read_is_public_and_update_requires_auth(client, auth_headers):
    assert client.get("/api/about").status_code == 200
    assert client.put("/api/about", json={"name": "Ada"}).status_code == 401

    response = client.put(
        "/api/about", json={"name": "Ada", "title": "Engineer"}, headers=auth_headers
    )

    assert response.status_code == 200
    assert response.json()["name"] == "Ada"
    assert client.get("/api/about").json()["title"] == "Engineer"


def test_cors_origins_from_environment(monkeypatch):
    from portfolio_cms.api.main import DEFAULT_CORS_ORIGINS, get_cors_origins

    monkeypatch.delenv("PORTFOLIO_CORS_ORIGINS", raising=False)
    assert get_cors_origins() == list(DEFAULT_CORS_ORIGINS)

    monkeypatch.setenv("PORTFOLIO_CORS_ORIGINS", "https://me.dev, https://admin.me.dev,")
    assert get_cors_origins() == ["https://me.dev", "https://admin.me.dev"]
