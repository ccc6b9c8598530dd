from fastapi.testclient import TestClient
from sqlmodel import Session, select
import uuid

from guardline.users.models import UserRole
from guardline.leads.history_models import LeadHistory

NEW_LEAD = {
    "name": "Harbor Clinic",
    "email": "facilities@harborclinic.org",
    "phone": "555-0120",
    "company": "Harbor Clinic",
    "industry": "healthcare",
    "serviceType": "access_control",
    "estimatedValue": "12500.00",
}

def create_lead(client: TestClient, headers, **overrides):
    response = client.post("/api/leads", json={**NEW_LEAD, **overrides}, headers=headers)
    assert response.status_code == 201
    return response.json()

def test_create_lead(client: TestClient, login_as):
    sales, headers = login_as(UserRole.SALES)
    lead = create_lead(client, headers)

    assert lead["source"] == "manual"
    assert lead["status"] == "new"
    assert lead["inquiryId"] is None
    assert lead["assignedToId"] == str(sales.id)
    assert float(lead["estimatedValue"]) == 12500.0

    history = client.get(f"/api/leads/{lead['id']}/history", headers=headers).json()
    assert [entry["action"] for entry in history] == ["created"]

def test_create_lead_accepts_snake_case(client: TestClient, login_as):
    _, headers = login_as(UserRole.SALES)
    payload = {
        "name": "Northside Depot",
        "email": "it@northside.com",
        "phone": "555-0177",
        "service_type": "alarm",
        "estimated_value": "900",
        "source": "referral",
    }
    response = client.post("/api/leads", json=payload, headers=headers)
    assert response.status_code == 201
    lead = response.json()
    assert lead["serviceType"] == "alarm"
    assert float(lead["estimatedValue"]) == 900.0
    assert lead["source"] == "referral"

def test_create_lead_rejects_reserved_values(client: TestClient, login_as):
    _, headers = login_as(UserRole.SALES)
    assert client.post("/api/leads", json={**NEW_LEAD, "source": "inquiry"}, headers=headers).status_code == 422
    assert client.post("/api/leads", json={**NEW_LEAD, "status": "converted"}, headers=headers).status_code == 422
    assert client.post("/api/leads", json={**NEW_LEAD, "assignedToId": str(uuid.uuid4())}, headers=headers).status_code == 400

def test_lead_permissions(client: TestClient, login_as):
    _, headers_sales = login_as(UserRole.SALES)
    _, headers_employee = login_as(UserRole.EMPLOYEE)
    create_lead(client, headers_sales)

    assert client.get("/api/leads", headers=headers_employee).status_code == 403
    assert client.post("/api/leads", json=NEW_LEAD, headers=headers_employee).status_code == 403
    assert len(client.get("/api/leads", headers=headers_sales).json()) == 1

def test_update_lead_records_history(client: TestClient, login_as):
    sales, headers = login_as(UserRole.SALES)
    manager, _ = login_as(UserRole.MANAGER)
    lead = create_lead(client, headers)
    url = f"/api/leads/{lead['id']}"

    response = client.patch(url, json={"status": "qualified"}, headers=headers)
    assert response.status_code == 200
    assert response.json()["status"] == "qualified"

    response = client.patch(url, json={"assignedToId": str(manager.id)}, headers=headers)
    assert response.json()["assignedToId"] == str(manager.id)

    response = client.patch(url, json={"notes": "Wants a site survey"}, headers=headers)
    assert response.json()["notes"] == "Wants a site survey"

    # No change, no entry
    client.patch(url, json={"notes": "Wants a site survey"}, headers=headers)

    history = client.get(f"{url}/history", headers=headers).json()
    actions = sorted(entry["action"] for entry in history)
    assert actions == ["assigned", "created", "status_changed", "updated"]

    status_entry = next(entry for entry in history if entry["action"] == "status_changed")
    assert status_entry["oldValue"] == {"status": "new"}
    assert status_entry["newValue"] == {"status": "qualified"}
    assert status_entry["performedById"] == str(sales.id)

def test_update_lead_rejects_reserved_values(client: TestClient, login_as):
    _, headers = login_as(UserRole.SALES)
    lead = create_lead(client, headers)
    url = f"/api/leads/{lead['id']}"

    assert client.patch(url, json={"status": "converted"}, headers=headers).status_code == 422
    assert client.patch(url, json={"name": None}, headers=headers).status_code == 422
    assert client.patch(url, json={"assignedToId": str(uuid.uuid4())}, headers=headers).status_code == 400

    # Any other transition is allowed, including out of lost
    assert client.patch(url, json={"status": "lost"}, headers=headers).json()["status"] == "lost"
    assert client.patch(url, json={"status": "contacted"}, headers=headers).json()["status"] == "contacted"

def test_unknown_lead(client: TestClient, login_as):
    _, headers = login_as(UserRole.SALES)
    missing = uuid.uuid4()
    assert client.get(f"/api/leads/{missing}", headers=headers).status_code == 404
    assert client.get(f"/api/leads/{missing}/history", headers=headers).status_code == 404
    assert client.patch(f"/api/leads/{missing}", json={"notes": "x"}, headers=headers).status_code == 404

def test_delete_lead(client: TestClient, session: Session, login_as):
    _, headers = login_as(UserRole.MANAGER)
    lead = create_lead(client, headers)
    client.patch(f"/api/leads/{lead['id']}", json={"status": "contacted"}, headers=headers)

    assert client.delete(f"/api/leads/{lead['id']}", headers=headers).status_code == 204
    assert client.get(f"/api/leads/{lead['id']}", headers=headers).status_code == 404
    assert session.exec(select(LeadHistory)).all() == []

def test_delete_lead_with_projects_conflicts(client: TestClient, login_as):
    _, headers = login_as(UserRole.MANAGER)
    lead = create_lead(client, headers)
    response = client.post(
        "/api/projects",
        json={"projectName": "Clinic badge readers", "serviceType": "access_control", "leadId": lead["id"]},
        headers=headers,
    )
    assert response.status_code == 201

    assert client.delete(f"/api/leads/{lead['id']}", headers=headers).status_code == 409
    assert client.get(f"/api/leads/{lead['id']}", headers=headers).status_code == 200
