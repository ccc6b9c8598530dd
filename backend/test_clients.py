from fastapi.testclient import TestClient
from sqlmodel import Session, select
import uuid

from guardline.users.models import UserRole
from guardline.clients.models import Client
from guardline.clients import service as client_service
from guardline.leads.models import Lead, LeadStatus
from guardline.leads.history_models import LeadHistory, LeadAction

LEAD = {
    "name": "Riverside Apartments",
    "email": "manager@riverside-apts.com",
    "phone": "555-0150",
    "company": "Riverside Property Group",
    "industry": "residential",
    "address": "400 River St",
    "notes": "Intercom upgrade for 3 buildings",
}

def create_lead(client: TestClient, headers):
    response = client.post("/api/leads", json=LEAD, headers=headers)
    assert response.status_code == 201
    return response.json()

def convert(client: TestClient, lead_id, headers, **body):
    return client.post(f"/api/clients/convert-from-lead/{lead_id}", json=body or None, headers=headers)

def test_convert_lead_to_client(client: TestClient, login_as):
    sales, headers = login_as(UserRole.SALES)
    lead = create_lead(client, headers)

    response = convert(client, lead["id"], headers)
    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "potential"
    assert data["leadId"] == lead["id"]
    assert data["accountManagerId"] == str(sales.id)
    for field in ("name", "email", "phone", "company", "industry", "address", "notes"):
        assert data[field] == LEAD[field]

    lead = client.get(f"/api/leads/{lead['id']}", headers=headers).json()
    assert lead["status"] == "converted"

    history = client.get(f"/api/leads/{lead['id']}/history", headers=headers).json()
    converted = [entry for entry in history if entry["action"] == "converted"]
    assert len(converted) == 1
    assert converted[0]["newValue"] == {"status": "converted", "client_id": data["id"]}

def test_convert_lead_twice_conflicts(client: TestClient, session: Session, login_as):
    _, headers = login_as(UserRole.MANAGER)
    lead = create_lead(client, headers)
    response = client.patch(f"/api/leads/{lead['id']}", json={"status": "qualified"}, headers=headers)
    assert response.json()["status"] == "qualified"

    assert convert(client, lead["id"], headers).status_code == 201
    response = convert(client, lead["id"], headers)
    assert response.status_code == 409
    assert "already converted" in response.json()["detail"]

    clients = session.exec(select(Client).where(Client.lead_id == uuid.UUID(lead["id"]))).all()
    assert len(clients) == 1
    assert client.get(f"/api/leads/{lead['id']}", headers=headers).json()["status"] == "converted"

def test_convert_lead_race_rolls_back(client: TestClient, session: Session, login_as, monkeypatch):
    _, headers = login_as(UserRole.SALES)
    lead = create_lead(client, headers)
    lead_id = uuid.UUID(lead["id"])

    # Another request already created the client but the lead row has not been flipped yet
    session.add(Client(lead_id=lead_id, name=LEAD["name"], email=LEAD["email"], phone=LEAD["phone"]))
    session.commit()
    monkeypatch.setattr(client_service, "get_client_for_lead", lambda session, lead_id: None)

    response = convert(client, lead["id"], headers)
    assert response.status_code == 409
    assert "already converted" in response.json()["detail"]

    assert len(session.exec(select(Client)).all()) == 1
    stored = session.get(Lead, lead_id)
    assert stored.status == LeadStatus.NEW
    history = session.exec(select(LeadHistory).where(LeadHistory.lead_id == lead_id)).all()
    assert [entry.action for entry in history] == [LeadAction.CREATED]

def test_converted_lead_cannot_be_deleted(client: TestClient, login_as):
    _, headers = login_as(UserRole.MANAGER)
    lead = create_lead(client, headers)
    data = convert(client, lead["id"], headers).json()

    response = client.delete(f"/api/leads/{lead['id']}", headers=headers)
    assert response.status_code == 409
    assert client.get(f"/api/leads/{lead['id']}", headers=headers).status_code == 200
    assert client.get(f"/api/clients/{data['id']}", headers=headers).json()["leadId"] == lead["id"]

def test_convert_unknown_lead(client: TestClient, session: Session, login_as):
    _, headers = login_as(UserRole.SALES)
    assert convert(client, uuid.uuid4(), headers).status_code == 404
    assert session.exec(select(Client)).all() == []

def test_convert_with_contract_terms(client: TestClient, login_as):
    _, headers = login_as(UserRole.SALES)
    account_manager, _ = login_as(UserRole.MANAGER)
    lead = create_lead(client, headers)

    response = convert(
        client,
        lead["id"],
        headers,
        accountManagerId=str(account_manager.id),
        companySize="50-200",
        contractValue="48000",
        preferredContactMethod="phone",
    )
    assert response.status_code == 201
    data = response.json()
    assert data["accountManagerId"] == str(account_manager.id)
    assert data["companySize"] == "50-200"
    assert float(data["contractValue"]) == 48000.0
    assert data["preferredContactMethod"] == "phone"
    # Identity always comes from the lead
    assert data["name"] == LEAD["name"]

def test_convert_rejects_bad_options(client: TestClient, login_as):
    _, headers = login_as(UserRole.SALES)
    lead = create_lead(client, headers)

    response = convert(
        client,
        lead["id"],
        headers,
        contractStartDate="2026-06-01T00:00:00",
        contractEndDate="2026-01-01T00:00:00",
    )
    assert response.status_code == 422
    assert convert(client, lead["id"], headers, accountManagerId=str(uuid.uuid4())).status_code == 400

    # Nothing was written, so the lead can still be converted
    assert convert(client, lead["id"], headers).status_code == 201

def test_client_is_a_snapshot_of_the_lead(client: TestClient, login_as):
    _, headers = login_as(UserRole.SALES)
    lead = create_lead(client, headers)
    data = convert(client, lead["id"], headers).json()

    response = client.patch(f"/api/leads/{lead['id']}", json={"name": "Riverside HOA", "phone": "555-0999"}, headers=headers)
    assert response.status_code == 200

    stored = client.get(f"/api/clients/{data['id']}", headers=headers).json()
    assert stored["name"] == LEAD["name"]
    assert stored["email"] == LEAD["email"]
    assert stored["phone"] == LEAD["phone"]

def test_convert_requires_lead_permission(client: TestClient, login_as):
    _, headers_sales = login_as(UserRole.SALES)
    _, headers_pm = login_as(UserRole.PROJECT_MANAGER)
    lead = create_lead(client, headers_sales)
    assert convert(client, lead["id"], headers_pm).status_code == 403

def test_client_crud(client: TestClient, login_as):
    _, headers = login_as(UserRole.PROJECT_MANAGER)
    _, headers_employee = login_as(UserRole.EMPLOYEE)

    response = client.post(
        "/api/clients",
        json={"name": "Metro Bank", "email": "security@metrobank.com", "phone": "555-0133", "status": "active"},
        headers=headers,
    )
    assert response.status_code == 201
    created = response.json()
    assert created["leadId"] is None
    url = f"/api/clients/{created['id']}"

    assert client.get("/api/clients", headers=headers_employee).status_code == 403
    assert len(client.get("/api/clients", params={"status": "active"}, headers=headers).json()) == 1

    response = client.patch(url, json={"status": "archived", "notes": "Contract ended"}, headers=headers)
    assert response.json()["status"] == "archived"
    assert client.patch(url, json={"email": None}, headers=headers).status_code == 422
    # leadId is not editable
    assert client.patch(url, json={"leadId": str(uuid.uuid4())}, headers=headers).json()["leadId"] is None

    assert client.delete(url, headers=headers).status_code == 204
    assert client.get(url, headers=headers).status_code == 404

def test_delete_client_with_projects_conflicts(client: TestClient, login_as):
    _, headers = login_as(UserRole.MANAGER)
    created = client.post(
        "/api/clients",
        json={"name": "Metro Bank", "email": "security@metrobank.com", "phone": "555-0133"},
        headers=headers,
    ).json()
    response = client.post(
        "/api/projects",
        json={"projectName": "Vault cameras", "serviceType": "cctv", "clientId": created["id"]},
        headers=headers,
    )
    assert response.status_code == 201
    assert client.delete(f"/api/clients/{created['id']}", headers=headers).status_code == 409
