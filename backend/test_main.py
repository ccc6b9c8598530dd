from fastapi.testclient import TestClient
from sqlmodel import Session, select

from guardline.users.models import User, UserRole

def register(client: TestClient, email, password="password123"):
    return client.post("/api/users", json={"email": email, "password": password, "firstName": "Dana"})

def get_token(client: TestClient, email, password="password123"):
    register(client, email, password)
    response = client.post("/api/auth/login", data={"username": email, "password": password})
    return response.json()["access_token"]

def test_root(client: TestClient):
    response = client.get("/")
    assert response.status_code == 200
    assert "Guardline" in response.json()["message"]

def test_registration_creates_client_account(client: TestClient, session: Session):
    response = register(client, "Owner@Guardline.io")
    assert response.status_code == 201
    data = response.json()
    assert data["email"] == "owner@guardline.io"
    assert data["role"] == "client"
    assert data["firstName"] == "Dana"
    assert "hashedPassword" not in data

    # Email is unique regardless of case
    response = register(client, "owner@guardline.io")
    assert response.status_code == 400

    assert len(session.exec(select(User)).all()) == 1

def test_login(client: TestClient):
    register(client, "tech@guardline.io")

    response = client.post("/api/auth/login", data={"username": "tech@guardline.io", "password": "password123"})
    assert response.status_code == 200
    assert response.json()["token_type"] == "bearer"

    response = client.post("/api/auth/login", data={"username": "tech@guardline.io", "password": "wrong-password"})
    assert response.status_code == 401

def test_me_requires_token(client: TestClient):
    assert client.get("/api/users/me").status_code == 401
    assert client.get("/api/users/me", headers={"Authorization": "Bearer not-a-token"}).status_code == 401

    token = get_token(client, "me@guardline.io")
    response = client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    assert response.json()["email"] == "me@guardline.io"

def test_user_management_permissions(client: TestClient, login_as):
    manager, headers_manager = login_as(UserRole.MANAGER)
    token_client = get_token(client, "customer@guardline.io")
    headers_client = {"Authorization": f"Bearer {token_client}"}

    # Clients cannot list users
    assert client.get("/api/users", headers=headers_client).status_code == 403

    response = client.get("/api/users", headers=headers_manager)
    assert response.status_code == 200
    assert len(response.json()) == 2

    customer_id = client.get("/api/users/me", headers=headers_client).json()["id"]

    # A user may edit their own profile but not their role
    response = client.patch(f"/api/users/{customer_id}", json={"phone": "555-0100"}, headers=headers_client)
    assert response.status_code == 200
    assert response.json()["phone"] == "555-0100"

    response = client.patch(f"/api/users/{customer_id}", json={"role": "admin"}, headers=headers_client)
    assert response.status_code == 403

    response = client.patch(f"/api/users/{manager.id}", json={"phone": "555-0199"}, headers=headers_client)
    assert response.status_code == 403

    # Managers can promote staff
    response = client.patch(f"/api/users/{customer_id}", json={"role": "employee"}, headers=headers_manager)
    assert response.status_code == 200
    assert response.json()["role"] == "employee"

    response = client.patch(f"/api/users/{customer_id}", json={"role": None}, headers=headers_manager)
    assert response.status_code == 422

    response = client.get("/api/users/technicians", headers=headers_manager)
    assert [u["id"] for u in response.json()] == [customer_id]

    # Delete
    assert client.delete(f"/api/users/{manager.id}", headers=headers_manager).status_code == 400
    assert client.delete(f"/api/users/{customer_id}", headers=headers_manager).status_code == 204
    assert client.get(f"/api/users/{customer_id}", headers=headers_manager).status_code == 404

def test_deactivated_user_cannot_log_in(client: TestClient, login_as):
    _, headers_admin = login_as(UserRole.ADMIN)
    register(client, "leaver@guardline.io")
    response = client.post("/api/auth/login", data={"username": "leaver@guardline.io", "password": "password123"})
    assert response.status_code == 200

    users = client.get("/api/users", params={"role": "client"}, headers=headers_admin).json()
    response = client.patch(f"/api/users/{users[0]['id']}", json={"isActive": False}, headers=headers_admin)
    assert response.status_code == 200

    response = client.post("/api/auth/login", data={"username": "leaver@guardline.io", "password": "password123"})
    assert response.status_code == 401

def test_referenced_user_cannot_be_deleted(client: TestClient, login_as):
    _, headers_manager = login_as(UserRole.MANAGER)
    salesperson, _ = login_as(UserRole.SALES)

    response = client.post(
        "/api/leads",
        json={"name": "Pier 9", "email": "desk@pier9.com", "phone": "555-0160", "assignedToId": str(salesperson.id)},
        headers=headers_manager,
    )
    assert response.status_code == 201

    response = client.delete(f"/api/users/{salesperson.id}", headers=headers_manager)
    assert response.status_code == 409
    assert client.get(f"/api/users/{salesperson.id}", headers=headers_manager).status_code == 200

    # Deactivating is the way out
    response = client.patch(f"/api/users/{salesperson.id}", json={"isActive": False}, headers=headers_manager)
    assert response.json()["isActive"] is False
