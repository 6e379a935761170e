import pytest
from fastapi.testclient import TestClient

from leaddesk.core.config import settings
from leaddesk.core.dependencies import get_db
from leaddesk.main import app

API = settings.api_v1_str


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    # No context manager: the lifespan would open the configured database
    yield TestClient(app)
    app.dependency_overrides.clear()


def upload(client, content, **form):
    return client.post(
        f"{API}/imports",
        files={"file": ("leads.csv", content, "text/csv")},
        data=form,
    )


def test_root(client):
    assert client.get("/").json()["message"] == "API is running"


def test_import_grouped_by_query(client):
    content = b"query,name,rating,competitors\nPlumbers,Acme,4.5,\"Name: Rival\"\nRoofers,Top,,\n"

    response = upload(client, content)

    assert response.status_code == 200
    body = response.json()
    assert body["total_leads_imported"] == 2
    assert body["categories_created"] == 2
    assert body["summary"] == "Imported 2 leads across 2 new categories"
    assert body["errors"] == []

    categories = client.get(f"{API}/categories").json()
    assert [(c["name"], c["lead_count"]) for c in categories] == [("Plumbers", 1), ("Roofers", 1)]


def test_import_into_named_category(client):
    response = upload(client, b"name\nAcme\nBest\n", category_name="Dentists", default_status="Interested")

    assert response.status_code == 200
    assert response.json()["created_category_names"] == ["Dentists"]

    category_id = client.get(f"{API}/categories").json()[0]["id"]
    page = client.get(f"{API}/categories/{category_id}/leads", params={"sort_by": "name"}).json()
    assert [(item["name"], item["status"]) for item in page["items"]] == [
        ("Acme", "Interested"),
        ("Best", "Interested"),
    ]


def test_malformed_csv_is_rejected(client):
    response = upload(client, b'query,name\nA,"unterminated\n')

    assert response.status_code == 400
    assert client.get(f"{API}/categories").json() == []


def test_blank_category_name_is_rejected(client):
    response = upload(client, b"name\nAcme\n", category_name="   ")

    assert response.status_code == 422
    assert response.json()["detail"] == "Please provide a category name."


def test_category_crud(client):
    created = client.post(f"{API}/categories", json={"name": "  Roofers "})
    assert created.status_code == 201
    assert created.json()["name"] == "Roofers"

    duplicate = client.post(f"{API}/categories", json={"name": "Roofers"})
    assert duplicate.status_code == 422

    blank = client.post(f"{API}/categories", json={"name": "  "})
    assert blank.status_code == 422

    deleted = client.delete(f"{API}/categories/{created.json()['id']}")
    assert deleted.json()["leads_deleted"] == 0
    assert client.delete(f"{API}/categories/{created.json()['id']}").status_code == 404


def test_category_leads_filters_and_rejects_bad_sort(client):
    upload(client, b"name\nAcme\nBest\n", category_name="Dentists")
    category_id = client.get(f"{API}/categories").json()[0]["id"]

    bad_sort = client.get(f"{API}/categories/{category_id}/leads", params={"sort_by": "notes"})
    assert bad_sort.status_code == 422

    searched = client.get(f"{API}/categories/{category_id}/leads", params={"search": "bes"}).json()
    assert [item["name"] for item in searched["items"]] == ["Best"]

    assert client.get(f"{API}/categories/999/leads").status_code == 404


def test_update_and_assign_leads(client):
    upload(client, b"name\nAcme\n", category_name="Dentists")
    category_id = client.get(f"{API}/categories").json()[0]["id"]
    lead_id = client.get(f"{API}/categories/{category_id}/leads").json()["items"][0]["id"]

    updated = client.patch(
        f"{API}/leads/{lead_id}", json={"status": "Follow-up", "follow_up_date": "2024-07-01"}
    )
    assert updated.status_code == 200
    assert updated.json()["follow_up_date"] == "2024-07-01"

    cleared = client.patch(f"{API}/leads/{lead_id}", json={"status": "Interested"})
    assert cleared.json()["follow_up_date"] is None

    assigned = client.post(f"{API}/leads/assign", json={"lead_ids": [lead_id], "assigned_to": "u1"})
    assert assigned.json() == {"updated": 1, "assigned_to": "u1"}

    activity = client.get(f"{API}/users/u1/activity").json()
    assert activity["total_leads"] == 1
    assert activity["interested_today"] == 1

    assert client.patch(f"{API}/leads/999", json={"notes": "x"}).status_code == 404


def test_lead_detail_and_analytics(client):
    upload(client, b"query,name,rating,competitors\nPlumbers,Acme,4.0,\"Name: Rival\nReviews: 12\"\n")
    category_id = client.get(f"{API}/categories").json()[0]["id"]
    lead_id = client.get(f"{API}/categories/{category_id}/leads").json()["items"][0]["id"]

    detail = client.get(f"{API}/leads/{lead_id}").json()
    assert [(c["name"], c["reviews"]) for c in detail["competitors"]] == [("Rival", 12)]

    stats = client.get(f"{API}/categories/{category_id}/analytics").json()
    assert stats["total_leads"] == 1
    assert stats["average_rating"] == 4.0
    assert client.get(f"{API}/categories/999/analytics").status_code == 404


def test_api_key_is_enforced_when_configured(client, monkeypatch):
    monkeypatch.setattr(settings.security, "api_key", "s3cret")

    assert client.post(f"{API}/categories", json={"name": "X"}).status_code == 401
    assert client.post(f"{API}/categories", json={"name": "X"}, headers={"X-API-Key": "nope"}).status_code == 403
    assert client.post(f"{API}/categories", json={"name": "X"}, headers={"X-API-Key": "s3cret"}).status_code == 201
    # Reads stay open
    assert client.get(f"{API}/categories").status_code == 200


def test_health_reports_counts(client):
    upload(client, b"name\nAcme\n", category_name="Dentists")

    body = client.get("/health").json()

    assert body["status"] == "healthy"
    assert body["store"] == "db"
    assert (body["database"]["categories"], body["database"]["leads"]) == (1, 1)


def test_delete_lead(client):
    upload(client, b"name\nAcme\nBest\n", category_name="Dentists")
    category_id = client.get(f"{API}/categories").json()[0]["id"]
    lead_id = client.get(f"{API}/categories/{category_id}/leads", params={"sort_by": "name"}).json()["items"][0]["id"]

    response = client.delete(f"{API}/leads/{lead_id}")

    assert response.status_code == 200
    assert client.get(f"{API}/leads/{lead_id}").status_code == 404
    assert client.delete(f"{API}/leads/{lead_id}").status_code == 404
    assert client.get(f"{API}/categories").json()[0]["lead_count"] == 1


def test_assign_category_leads(client):
    upload(client, b"name\nAcme\nBest\n", category_name="Dentists")
    category_id = client.get(f"{API}/categories").json()[0]["id"]

    response = client.post(f"{API}/categories/{category_id}/assign", json={"assigned_to": "u7"})

    assert response.json() == {"updated": 2, "assigned_to": "u7"}
    page = client.get(f"{API}/categories/{category_id}/leads", params={"assigned_to": "u7"}).json()
    assert page["total"] == 2
    assert client.post(f"{API}/categories/999/assign", json={"assigned_to": "u7"}).status_code == 404
