from fastapi.testclient import TestClient

from tests.helpers import STANDARD_INPUTS, billed_trip, completed_booking, register_agency


def test_second_agency_sees_nothing_of_the_first(client: TestClient, auth_headers: dict):
    bill = billed_trip(client, auth_headers)
    other = register_agency(client, agency_name="Other Travels")["headers"]

    assert client.get("/clients", headers=other).json() == []
    assert client.get("/drivers", headers=other).json() == []
    assert client.get("/vehicles", headers=other).json() == []
    assert client.get("/bookings", headers=other).json()["total_items"] == 0
    assert client.get("/billing/bills", headers=other).json()["total_items"] == 0
    assert client.get("/billing/pending-trips", headers=other).json() == []
    assert client.get("/reports/groups", headers=other).json()["groups"] == []
    assert client.get(f"/billing/bills/{bill['id']}/invoice", headers=other).status_code == 404

    dashboard = client.get("/dashboard", headers=other).json()
    assert dashboard["total_clients"] == 0
    assert dashboard["active_trips"] == 0


def test_second_agency_cannot_bill_or_move_foreign_bookings(client: TestClient, auth_headers: dict):
    booking = completed_booking(client, auth_headers)
    other = register_agency(client, agency_name="Other Travels")["headers"]

    response = client.post(
        "/billing/bills", json={"booking_id": booking["id"], "inputs": STANDARD_INPUTS}, headers=other
    )
    assert response.status_code == 404
    assert client.post(f"/bookings/{booking['id']}/complete", headers=other).status_code == 404
    assert client.get(f"/bookings/{booking['id']}/share-link", headers=other).status_code == 404

    mine = client.get(f"/bookings/{booking['id']}", headers=auth_headers).json()
    assert mine["status"] == "Completed"


def test_tenant_comes_from_the_token_only(client: TestClient, auth_headers: dict, tenant: dict):
    other = register_agency(client, agency_name="Other Travels")

    response = client.post(
        "/clients",
        json={"name": "Injected", "mobile": "9000000009", "agency_id": tenant["agency"]["id"]},
        headers=other["headers"],
    )
    assert response.status_code == 201
    assert client.get("/clients", headers=auth_headers).json() == []
    assert [c["name"] for c in client.get("/clients", headers=other["headers"]).json()] == ["Injected"]
