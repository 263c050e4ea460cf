from decimal import Decimal

from fastapi.testclient import TestClient

from app.billing import calculator
from app.billing.schemas import BillInputs
from tests.helpers import (
    STANDARD_INPUTS, assigned_booking, billed_trip, completed_booking, create_bill,
)


def test_preview_computes_without_saving(client: TestClient, auth_headers: dict):
    response = client.post("/billing/preview", json=STANDARD_INPUTS, headers=auth_headers)
    assert response.status_code == 200
    calculation = response.json()["calculation"]

    assert Decimal(calculation["total_km"]) == Decimal("150")
    assert Decimal(calculation["base_amount"]) == Decimal("2250")
    assert Decimal(calculation["sub_total"]) == Decimal("2600")
    assert Decimal(calculation["gst_amount"]) == Decimal("130")
    assert Decimal(calculation["grand_total"]) == Decimal("2730")
    assert Decimal(calculation["balance_due"]) == Decimal("1730")

    assert client.get("/billing/bills", headers=auth_headers).json()["total_items"] == 0


def test_preview_fills_form_defaults(client: TestClient, auth_headers: dict):
    response = client.post("/billing/preview", json={"opening_km": "0", "closing_km": "10"}, headers=auth_headers)
    assert response.status_code == 200
    body = response.json()
    assert Decimal(body["inputs"]["rate_per_km"]) == Decimal("15")
    assert Decimal(body["inputs"]["driver_allowance"]) == Decimal("300")
    assert body["inputs"]["gst_enabled"] is True
    # (10 * 15 + 300) * 1.05
    assert Decimal(body["calculation"]["grand_total"]) == Decimal("472.5")


def test_closing_below_opening_is_rejected(client: TestClient, auth_headers: dict):
    booking = completed_booking(client, auth_headers)
    inputs = dict(STANDARD_INPUTS, opening_km="500", closing_km="400")

    response = client.post("/billing/preview", json=inputs, headers=auth_headers)
    assert response.status_code == 400
    assert response.json() == {"detail": "Closing KM cannot be less than Opening KM"}

    response = client.post("/billing/bills", json={"booking_id": booking["id"], "inputs": inputs}, headers=auth_headers)
    assert response.status_code == 400
    assert client.get(f"/bookings/{booking['id']}", headers=auth_headers).json()["status"] == "Completed"
    assert client.get("/billing/bills", headers=auth_headers).json()["total_items"] == 0


def test_negative_amounts_fail_validation(client: TestClient, auth_headers: dict):
    inputs = dict(STANDARD_INPUTS, toll_parking="-10")
    assert client.post("/billing/preview", json=inputs, headers=auth_headers).status_code == 422


def test_create_bill_moves_booking_to_billed(client: TestClient, auth_headers: dict):
    booking = completed_booking(client, auth_headers, with_agent=True)
    bill = create_bill(client, auth_headers, booking["id"])

    assert bill["booking_id"] == booking["id"]
    assert bill["trip_id"] == booking["trip_id"]
    assert bill["client_name"] == "Anita Sharma"
    assert bill["invoice_number"].startswith("INV-")
    assert Decimal(bill["grand_total"]) == Decimal("2730.00")
    assert Decimal(bill["advance"]) == Decimal("1000.00")
    assert Decimal(bill["balance_due"]) == Decimal("1730.00")
    assert Decimal(bill["amount_paid"]) == Decimal("1000.00")
    assert bill["status"] == "Due"
    assert bill["payments"] == []

    reloaded = client.get(f"/bookings/{booking['id']}", headers=auth_headers).json()
    assert reloaded["status"] == "Billed"


def test_advance_covering_total_bills_as_paid(client: TestClient, auth_headers: dict):
    bill = billed_trip(client, auth_headers, advance="3000")
    assert Decimal(bill["balance_due"]) == Decimal("-270.00")
    assert bill["status"] == "Paid"


def test_billing_twice_is_rejected(client: TestClient, auth_headers: dict):
    bill = billed_trip(client, auth_headers)

    response = client.post(
        "/billing/bills", json={"booking_id": bill["booking_id"], "inputs": STANDARD_INPUTS}, headers=auth_headers
    )
    assert response.status_code == 409
    assert client.get("/billing/bills", headers=auth_headers).json()["total_items"] == 1


def test_only_completed_bookings_are_billable(client: TestClient, auth_headers: dict):
    booking = assigned_booking(client, auth_headers)
    response = client.post(
        "/billing/bills", json={"booking_id": booking["id"], "inputs": STANDARD_INPUTS}, headers=auth_headers
    )
    assert response.status_code == 409
    assert client.get(f"/bookings/{booking['id']}", headers=auth_headers).json()["status"] == "Assigned"


def test_billing_unknown_booking(client: TestClient, auth_headers: dict):
    response = client.post(
        "/billing/bills", json={"booking_id": 987654, "inputs": STANDARD_INPUTS}, headers=auth_headers
    )
    assert response.status_code == 404


def test_pending_trips_lists_unbilled_completed_bookings(client: TestClient, auth_headers: dict):
    waiting = completed_booking(client, auth_headers)
    billed = billed_trip(client, auth_headers)
    assigned_booking(client, auth_headers)

    response = client.get("/billing/pending-trips", headers=auth_headers)
    assert response.status_code == 200
    assert [b["id"] for b in response.json()] == [waiting["id"]]
    assert billed["booking_id"] != waiting["id"]


def test_list_bills_filters_by_status(client: TestClient, auth_headers: dict):
    due = billed_trip(client, auth_headers)
    paid = billed_trip(client, auth_headers, advance="2730")

    listing = client.get("/billing/bills", headers=auth_headers).json()
    assert [b["id"] for b in listing["items"]] == [paid["id"], due["id"]]

    only_paid = client.get("/billing/bills", params={"status": "Paid"}, headers=auth_headers).json()
    assert [b["id"] for b in only_paid["items"]] == [paid["id"]]


def test_invoice_pdf_download(client: TestClient, auth_headers: dict):
    bill = billed_trip(client, auth_headers)

    response = client.get(f"/billing/bills/{bill['id']}/invoice", headers=auth_headers)
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert f"{bill['invoice_number']}_{bill['trip_id']}.pdf" in response.headers["content-disposition"]
    assert response.content.startswith(b"%PDF")


def test_invoice_is_stable_across_downloads(client: TestClient, auth_headers: dict):
    bill = billed_trip(client, auth_headers)
    first = client.get(f"/billing/bills/{bill['id']}/invoice", headers=auth_headers).content
    second = client.get(f"/billing/bills/{bill['id']}/invoice", headers=auth_headers).content
    assert first == second


def test_stored_bill_recomputes_from_its_stored_inputs(client: TestClient, auth_headers: dict):
    booking = completed_booking(client, auth_headers)
    bill = create_bill(
        client, auth_headers, booking["id"],
        rate_per_km="12.35", extra_hours="1.5", extra_hour_charge="99.99", night_charge="0.05",
    )

    stored_inputs = BillInputs(**{name: bill[name] for name in BillInputs.model_fields})
    recomputed = calculator.settle(stored_inputs)
    for field in ("total_km", "base_amount", "extra_hours_amount", "sub_total", "gst_amount", "grand_total", "balance_due"):
        assert Decimal(bill[field]) == getattr(recomputed, field), field

    assert Decimal(bill["extra_hours_amount"]) == Decimal("149.99")
    assert Decimal(bill["sub_total"]) + Decimal(bill["gst_amount"]) == Decimal(bill["grand_total"])


def test_inputs_finer_than_a_paisa_are_rejected(client: TestClient, auth_headers: dict):
    booking = completed_booking(client, auth_headers)
    inputs = dict(STANDARD_INPUTS, rate_per_km="10.005")

    assert client.post("/billing/preview", json=inputs, headers=auth_headers).status_code == 422
    response = client.post("/billing/bills", json={"booking_id": booking["id"], "inputs": inputs}, headers=auth_headers)
    assert response.status_code == 422
    assert client.get(f"/bookings/{booking['id']}", headers=auth_headers).json()["status"] == "Completed"
    assert client.get("/billing/bills", headers=auth_headers).json()["total_items"] == 0


def test_oversized_bill_total_is_rejected(client: TestClient, auth_headers: dict):
    booking = completed_booking(client, auth_headers)
    inputs = dict(STANDARD_INPUTS, opening_km="0", closing_km="9999999999.99", rate_per_km="9999.99")

    response = client.post("/billing/bills", json={"booking_id": booking["id"], "inputs": inputs}, headers=auth_headers)
    assert response.status_code == 400
    assert "exceeds the allowed maximum" in response.json()["detail"]
    assert client.get(f"/bookings/{booking['id']}", headers=auth_headers).json()["status"] == "Completed"
