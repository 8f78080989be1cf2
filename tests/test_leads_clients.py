"""
Lead and client endpoint tests.
"""

import pytest

from backend import models


def test_create_and_get_lead(client, lead_id):
    response = client.get(f"/api/leads/{lead_id}")
    assert response.status_code == 200
    data = response.json()
    assert data["stage"] == "new"
    assert data["source"] == "referral"


def test_lead_rejects_unknown_source(client):
    response = client.post("/api/leads/", json={
        "name": "X", "phone": "1", "source": "billboard", "project_tag": "Y",
    })
    assert response.status_code == 422


def test_update_lead_stage(client, lead_id):
    response = client.patch(f"/api/leads/{lead_id}", json={"stage": "quoted"})
    assert response.status_code == 200
    assert response.json()["stage"] == "quoted"


@pytest.mark.parametrize("field", ["name", "phone", "project_tag", "stage"])
def test_update_lead_rejects_null_required_field(client, lead_id, db, field):
    response = client.patch(f"/api/leads/{lead_id}", json={field: None})
    assert response.status_code == 422

    stored = db.query(models.Lead).filter(models.Lead.id == lead_id).first()
    assert stored.phone == "+91-9800000001"
    assert stored.name == "Asha Menon"
    assert stored.project_tag == "Whitefield 3BHK"


def test_update_lead_allows_clearing_optional_field(client, lead_id):
    response = client.patch(f"/api/leads/{lead_id}", json={"email": None})
    assert response.status_code == 200
    assert response.json()["email"] is None


def test_add_lead_notes(client, lead_id):
    assert client.get(f"/api/leads/{lead_id}").json()["notes"] == []

    client.post(f"/api/leads/{lead_id}/notes", json={"content": "Called, site visit Friday"})
    response = client.post(f"/api/leads/{lead_id}/notes", json={"content": "Wants oak finish"})
    assert response.status_code == 201
    notes = response.json()["notes"]
    assert [n["content"] for n in notes] == ["Called, site visit Friday", "Wants oak finish"]
    assert all(n["created_at"] for n in notes)


def test_add_lead_note_rejects_empty_content(client, lead_id):
    response = client.post(f"/api/leads/{lead_id}/notes", json={"content": ""})
    assert response.status_code == 422


def test_add_lead_note_unknown_lead_404(client):
    response = client.post("/api/leads/404/notes", json={"content": "Hello"})
    assert response.status_code == 404


def test_client_unknown_lead_404(client):
    response = client.post("/api/clients/", json={"name": "Orphan", "lead_id": 55})
    assert response.status_code == 404


def test_get_client(client, client_id):
    response = client.get(f"/api/clients/{client_id}")
    assert response.status_code == 200
    assert response.json()["name"] == "Asha Menon"


def test_update_client(client, client_id):
    response = client.patch(f"/api/clients/{client_id}", json={"address": "12 Lake Road, Bengaluru"})
    assert response.status_code == 200
    data = response.json()
    assert data["address"] == "12 Lake Road, Bengaluru"
    assert data["name"] == "Asha Menon"


def test_update_client_rejects_null_name(client, client_id, db):
    response = client.patch(f"/api/clients/{client_id}", json={"name": None})
    assert response.status_code == 422

    stored = db.query(models.Client).filter(models.Client.id == client_id).first()
    assert stored.name == "Asha Menon"


def test_update_client_404(client):
    response = client.patch("/api/clients/999", json={"phone": "1"})
    assert response.status_code == 404


def test_add_client_notes(client, client_id):
    response = client.post(f"/api/clients/{client_id}/notes", json={"content": "Prefers WhatsApp updates"})
    assert response.status_code == 201
    notes = response.json()["notes"]
    assert len(notes) == 1
    assert notes[0]["content"] == "Prefers WhatsApp updates"

    fetched = client.get(f"/api/clients/{client_id}").json()
    assert fetched["notes"] == notes


def test_health(client):
    assert client.get("/health").json()["status"] == "ok"
