from datetime import timedelta

import jwt

from ebookstore import models
from ebookstore.auth import create_token

from .conftest import PASSWORD


def register(client, **overrides):
    payload = {"name": "Ada Lovelace", "email": "Ada@Example.com", "password": PASSWORD, "phone": "+5491122334455"}
    payload.update(overrides)
    return client.post("/api/auth/register", json=payload)


def test_register_creates_customer_and_returns_token(client):
    response = register(client)
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    user = body["data"]["user"]
    assert user["email"] == "ada@example.com"
    assert user["role"] == "customer"
    assert user["role_id"] == models.ROLE_CUSTOMER
    assert "password_hash" not in user

    profile = client.get("/api/auth/profile", headers={"Authorization": f"Bearer {body['data']['token']}"})
    assert profile.status_code == 200
    assert profile.json()["data"]["user"]["name"] == "Ada Lovelace"


def test_register_duplicate_email(client):
    assert register(client).status_code == 201
    response = register(client, email="ada@example.com")
    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Email already exists"}


def test_register_rejects_weak_password_with_field_errors(client):
    response = register(client, password="password")
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Validation failed"
    assert [error["field"] for error in body["errors"]] == ["password"]


def test_register_rejects_missing_fields(client):
    response = client.post("/api/auth/register", json={"email": "x@example.com"})
    assert response.status_code == 400
    fields = {error["field"] for error in response.json()["errors"]}
    assert {"name", "password"} <= fields


def test_login(client):
    register(client)
    response = client.post("/api/auth/login", json={"email": "ADA@example.com", "password": PASSWORD})
    assert response.status_code == 200
    payload = jwt.decode(response.json()["data"]["token"], "test-secret", algorithms=["HS256"])
    assert payload["email"] == "ada@example.com"
    assert payload["role"] == "customer"
    assert payload["role_id"] == models.ROLE_CUSTOMER
    assert "exp" in payload


def test_login_wrong_password(client):
    register(client)
    response = client.post("/api/auth/login", json={"email": "ada@example.com", "password": "Wrong123!"})
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid credentials"


def test_login_unknown_email(client):
    response = client.post("/api/auth/login", json={"email": "nobody@example.com", "password": PASSWORD})
    assert response.status_code == 401


def test_update_profile(client, customer):
    response = client.put("/api/auth/profile", json={"name": "New Name", "phone": "12345"}, headers=customer["headers"])
    assert response.status_code == 200
    user = response.json()["data"]["user"]
    assert user["name"] == "New Name"
    assert user["phone"] == "12345"


def test_update_profile_without_fields(client, customer):
    response = client.put("/api/auth/profile", json={}, headers=customer["headers"])
    assert response.status_code == 400


def test_change_password(client, customer):
    response = client.put(
        "/api/auth/change-password",
        json={"current_password": PASSWORD, "new_password": "Another1!", "confirm_password": "Another1!"},
        headers=customer["headers"],
    )
    assert response.status_code == 200

    login = client.post("/api/auth/login", json={"email": customer["email"], "password": "Another1!"})
    assert login.status_code == 200


def test_change_password_requires_current_password(client, customer):
    response = client.put(
        "/api/auth/change-password",
        json={"current_password": "Wrong123!", "new_password": "Another1!", "confirm_password": "Another1!"},
        headers=customer["headers"],
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Current password is incorrect"


def test_change_password_confirmation_mismatch(client, customer):
    response = client.put(
        "/api/auth/change-password",
        json={"current_password": PASSWORD, "new_password": "Another1!", "confirm_password": "Different1!"},
        headers=customer["headers"],
    )
    assert response.status_code == 400
    errors = response.json()["errors"]
    assert errors == [{"field": "confirm_password", "message": "Password confirmation does not match new password"}]


def test_missing_token(client):
    response = client.get("/api/auth/profile")
    assert response.status_code == 401
    assert response.json()["message"] == "Access token required"


def test_expired_token_is_reported_as_expired(client, customer, settings, db_session):
    user = db_session().get(models.User, customer["id"])
    token = create_token(user, settings, expires_delta=timedelta(seconds=-10))
    response = client.get("/api/auth/profile", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.json()["message"] == "Token expired"


def test_expired_token_for_deleted_user_is_still_expired(client, settings):
    token = jwt.encode(
        {"user_id": 9999, "exp": 1}, settings.jwt_secret, algorithm=settings.jwt_algorithm
    )
    response = client.get("/api/auth/profile", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.json()["message"] == "Token expired"


def test_token_with_bad_signature(client, customer):
    forged = jwt.encode({"user_id": customer["id"]}, "another-secret", algorithm="HS256")
    response = client.get("/api/auth/profile", headers={"Authorization": f"Bearer {forged}"})
    assert response.status_code == 403
    assert response.json()["message"] == "Invalid token"


def test_malformed_token(client):
    response = client.get("/api/auth/profile", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 403
    assert response.json()["message"] == "Invalid token"


def test_token_of_deleted_user(client, customer, admin):
    assert client.delete(f"/api/users/{customer['id']}", headers=admin["headers"]).status_code == 200
    response = client.get("/api/auth/profile", headers=customer["headers"])
    assert response.status_code == 401
    assert response.json()["message"] == "User not found"
