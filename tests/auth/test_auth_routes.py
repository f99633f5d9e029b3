"""
Tests for registration, login and the current-user endpoint.
"""
from medibook.auth.models import AccountStatus, User


def register(client, email="new@example.com", password="password1"):
    return client.post("/api/v1/auth/register", json={
        "email": email,
        "full_name": "New Patient",
        "password": password,
        "age": 41,
        "contact": "555-0100",
    })


def test_register_patient_creates_profile(client, db):
    response = register(client)
    assert response.status_code == 201
    data = response.json()
    assert data["role"] == "PATIENT"
    assert "password" not in data and "password_hash" not in data

    user = db.query(User).filter(User.email == "new@example.com").one()
    assert user.patient_profile is not None
    assert user.patient_profile.age == 41


def test_register_duplicate_email_is_rejected(client, db):
    assert register(client).status_code == 201
    response = register(client)
    assert response.status_code == 400
    assert db.query(User).filter(User.email == "new@example.com").count() == 1


def test_login_and_me(client):
    register(client)
    response = client.post("/api/v1/auth/login", json={"email": "new@example.com", "password": "password1"})
    assert response.status_code == 200
    token = response.json()["access_token"]

    me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["email"] == "new@example.com"


def test_login_with_wrong_password(client):
    register(client)
    response = client.post("/api/v1/auth/login", json={"email": "new@example.com", "password": "nope-nope"})
    assert response.status_code == 401


def test_login_unknown_email(client):
    response = client.post("/api/v1/auth/login", json={"email": "ghost@example.com", "password": "whatever"})
    assert response.status_code == 401


def test_login_refused_for_disabled_account(client, db):
    register(client)
    user = db.query(User).filter(User.email == "new@example.com").one()
    user.status = AccountStatus.DISABLED
    db.commit()

    response = client.post("/api/v1/auth/login", json={"email": "new@example.com", "password": "password1"})
    assert response.status_code == 403


def test_oauth2_token_form(client):
    register(client)
    response = client.post(
        "/api/v1/auth/token",
        data={"username": "new@example.com", "password": "password1"},
    )
    assert response.status_code == 200
    assert response.json()["token_type"] == "bearer"


def test_me_requires_token(client):
    assert client.get("/api/v1/auth/me").status_code == 401


def test_me_rejects_garbage_token(client):
    response = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
