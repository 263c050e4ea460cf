import uuid
from datetime import date

from fastapi.testclient import TestClient

ADMIN_HEADERS = {"X-Admin-Key": "test-admin-key"}
AGENCY_PASSWORD = "agency@123"


def register_agency(client: TestClient, agency_name: str = "Chalbo Travels") -> dict:
    """Provision a fresh agency and sign in; every test gets its own tenant"""
    email = f"{uuid.uuid4().hex[:10]}@agencymail.com"
    response = client.post(
        "/agencies",
        json={
            "agency_name": agency_name,
            "owner_name": "Ravi Kumar",
            "email": email,
            "password": AGENCY_PASSWORD,
            "mobile": "9876543210",
            "address": "12 MG Road, Pune",
        },
        headers=ADMIN_HEADERS,
    )
    assert response.status_code == 201, response.json()
    agency = response.json()

    login = client.post("/login", json={"email": email, "password": AGENCY_PASSWORD})
    assert login.status_code == 200, login.json()
    tokens = login.json()
    return {
        "agency": agency,
        "email": email,
        "tokens": tokens,
        "headers": {"Authorization": f"Bearer {tokens['access_token']}"},
    }


# === Roster, bookings and bills through the API ===

def create_client_record(client: TestClient, headers: dict, name: str = "Anita Sharma", mobile: str = "9000000001") -> dict:
    response = client.post("/clients", json={"name": name, "mobile": mobile}, headers=headers)
    assert response.status_code == 201, response.json()
    return response.json()


def create_driver(client: TestClient, headers: dict, name: str = "Suresh Patil") -> dict:
    response = client.post(
        "/drivers",
        json={"name": name, "mobile": "9000000002", "license_number": "mh12 20190001234"},
        headers=headers,
    )
    assert response.status_code == 201, response.json()
    return response.json()


def create_vehicle(client: TestClient, headers: dict, number: str = "MH12AB1234") -> dict:
    response = client.post(
        "/vehicles",
        json={"number": number, "model": "Toyota Innova", "vehicle_type": "MUV", "owner": "Self"},
        headers=headers,
    )
    assert response.status_code == 201, response.json()
    return response.json()


def create_agent(client: TestClient, headers: dict, name: str = "Mahesh Tours") -> dict:
    response = client.post(
        "/agents",
        json={"name": name, "agency_name": "Mahesh Holidays", "mobile": "9000000003", "office_city": "Nashik"},
        headers=headers,
    )
    assert response.status_code == 201, response.json()
    return response.json()


def create_booking(client: TestClient, headers: dict, client_id: int, **overrides) -> dict:
    payload = {
        "client_id": client_id,
        "pickup": "Pune Station",
        "drop": "Mumbai Airport",
        "trip_date": date(2025, 3, 14).isoformat(),
        "trip_time": "06:30",
        "trip_type": "One Way",
    }
    payload.update(overrides)
    response = client.post("/bookings", json=payload, headers=headers)
    assert response.status_code == 201, response.json()
    return response.json()


def assigned_booking(
    client: TestClient, headers: dict, client_name: str = "Anita Sharma",
    driver_name: str = "Suresh Patil", vehicle_number: str = "MH12AB1234", with_agent: bool = False,
) -> dict:
    customer = create_client_record(client, headers, name=client_name)
    driver = create_driver(client, headers, name=driver_name)
    vehicle = create_vehicle(client, headers, number=vehicle_number)
    booking = create_booking(client, headers, customer["id"])
    body = {"driver_id": driver["id"], "vehicle_id": vehicle["id"]}
    if with_agent:
        body["agent_id"] = create_agent(client, headers)["id"]
    response = client.post(f"/bookings/{booking['id']}/assign", json=body, headers=headers)
    assert response.status_code == 200, response.json()
    return response.json()


def completed_booking(client: TestClient, headers: dict, **kwargs) -> dict:
    booking = assigned_booking(client, headers, **kwargs)
    response = client.post(f"/bookings/{booking['id']}/complete", headers=headers)
    assert response.status_code == 200, response.json()
    return response.json()


STANDARD_INPUTS = {
    "opening_km": "100",
    "closing_km": "250",
    "rate_per_km": "15",
    "driver_allowance": "300",
    "toll_parking": "50",
    "gst_enabled": True,
    "gst_percent": "5",
    "advance": "1000",
}


def create_bill(client: TestClient, headers: dict, booking_id: int, **overrides) -> dict:
    inputs = dict(STANDARD_INPUTS)
    inputs.update(overrides)
    response = client.post("/billing/bills", json={"booking_id": booking_id, "inputs": inputs}, headers=headers)
    assert response.status_code == 201, response.json()
    return response.json()


def billed_trip(client: TestClient, headers: dict, **overrides) -> dict:
    """Completed booking billed with the standard inputs (grand total 2730, balance 1730)"""
    booking = completed_booking(client, headers)
    return create_bill(client, headers, booking["id"], **overrides)
