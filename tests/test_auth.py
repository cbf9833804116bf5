from datetime import timedelta

from flask_jwt_extended import create_access_token

from corpsite.extensions import db
from corpsite.models import User


def test_register_creates_plain_user(client):
    response = client.post(
        "/api/auth/register",
        json={"name": "Nia", "email": "Nia@Example.com", "password": "secret123", "role": "admin"},
    )
    body = response.get_json()

    assert response.status_code == 201
    assert body["data"]["user"]["role"] == "user"
    assert body["data"]["user"]["email"] == "nia@example.com"
    assert "password" not in body["data"]["user"]
    assert body["data"]["token"]


def test_register_duplicate_email(client):
    payload = {"name": "Nia", "email": "nia@example.com", "password": "secret123"}
    client.post("/api/auth/register", json=payload)
    response = client.post("/api/auth/register", json=payload)
    assert response.status_code == 409


def test_register_validation(client):
    response = client.post("/api/auth/register", json={"email": "bad", "password": "123"})
    assert response.status_code == 400
    assert set(response.get_json()["errors"]) == {"name", "email", "password"}


def test_login(client, admin_headers):
    response = client.post("/api/auth/login", json={"email": "admin@example.com", "password": "secret123"})
    assert response.status_code == 200
    assert response.get_json()["data"]["user"]["role"] == "admin"

    response = client.post("/api/auth/login", json={"email": "admin@example.com", "password": "wrong"})
    assert response.status_code == 401
    assert response.get_json()["message"] == "Invalid email or password"


def test_me_with_token(client, admin_headers):
    response = client.get("/api/auth/me", headers=admin_headers)
    assert response.status_code == 200
    assert response.get_json()["data"]["user"]["email"] == "admin@example.com"


def test_missing_token(client):
    response = client.get("/api/auth/me")
    assert response.status_code == 401
    assert response.get_json() == {"success": False, "message": "Access denied. No token provided."}


def test_garbage_token(client):
    response = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.get_json()["message"] == "Invalid token"


def test_expired_token(app, client):
    with app.app_context():
        user = User(name="Old", email="old@example.com", password="x", role="admin")
        db.session.add(user)
        db.session.commit()
        token = create_access_token(identity=user.id, expires_delta=timedelta(seconds=-1))

    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.get_json()["message"] == "Token expired"


def test_token_for_deleted_user(app, client):
    with app.app_context():
        token = create_access_token(identity="ghost")
    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.get_json()["message"] == "User not found"


def test_deactivated_user(app, client, user_headers):
    with app.app_context():
        user = db.session.query(User).filter_by(email="reader@example.com").one()
        user.is_active = False
        db.session.commit()

    response = client.get("/api/auth/me", headers=user_headers)
    assert response.status_code == 401
    assert response.get_json()["message"] == "User account is deactivated"


def test_non_admin_is_forbidden(client, user_headers):
    response = client.get("/api/dashboard/counts", headers=user_headers)
    assert response.status_code == 403
    assert response.get_json()["message"] == "Access denied. Admin role required."


def test_profile_and_password(client, user_headers):
    response = client.put("/api/auth/profile", json={"name": "Renamed"}, headers=user_headers)
    assert response.get_json()["data"]["user"]["name"] == "Renamed"

    response = client.put(
        "/api/auth/change-password",
        json={"currentPassword": "wrong", "newPassword": "another1"},
        headers=user_headers,
    )
    assert response.status_code == 400

    response = client.put(
        "/api/auth/change-password",
        json={"currentPassword": "secret123", "newPassword": "another1"},
        headers=user_headers,
    )
    assert response.status_code == 200
    login = client.post("/api/auth/login", json={"email": "reader@example.com", "password": "another1"})
    assert login.status_code == 200


def test_health(client):
    body = client.get("/api/health").get_json()
    assert body["success"] is True
    assert body["version"]
