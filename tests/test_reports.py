import csv
import json
from decimal import Decimal
from io import BytesIO, StringIO

from fastapi.testclient import TestClient
from openpyxl import load_workbook

from tests.helpers import billed_trip, completed_booking, create_bill

CSV_HEADER = "Bill ID,Client,Trip ID,Date,Total Amount,Paid,Due Amount,Status"


def seed_bills(client: TestClient, headers: dict) -> dict:
    """Three bills: one via an agent, one direct and settled, one on another vehicle"""
    via_agent = create_bill(
        client, headers, completed_booking(client, headers, with_agent=True)["id"],
    )
    settled = billed_trip(client, headers, advance="2730")
    other_vehicle = create_bill(
        client, headers,
        completed_booking(client, headers, client_name="Rahul Mehta", vehicle_number="MH14XY9999")["id"],
        advance="0",
    )
    return {"via_agent": via_agent, "settled": settled, "other_vehicle": other_vehicle}


def test_summary_totals(client: TestClient, auth_headers: dict):
    seed_bills(client, auth_headers)

    response = client.get("/reports/summary", headers=auth_headers)
    assert response.status_code == 200
    body = response.json()
    totals = body["totals"]
    assert Decimal(totals["total_revenue"]) == Decimal("8190.00")
    assert Decimal(totals["total_due"]) == Decimal("4460.00")
    assert Decimal(totals["total_paid"]) == Decimal("3730.00")
    assert totals["paid_bills"] == 1
    assert totals["pending_bills"] == 2

    assert {s["name"]: s["value"] for s in body["status_breakdown"]} == {"Paid": 1, "Due": 2}
    assert [p["label"] for p in body["revenue_series"]] == ["Anita", "Anita", "Rahul"]


def test_empty_agency_summary(client: TestClient, auth_headers: dict):
    body = client.get("/reports/summary", headers=auth_headers).json()
    assert Decimal(body["totals"]["total_revenue"]) == 0
    assert body["revenue_series"] == []


def test_group_by_agent_separates_direct_bookings(client: TestClient, auth_headers: dict):
    seed_bills(client, auth_headers)

    response = client.get("/reports/groups", params={"group_by": "agent"}, headers=auth_headers)
    assert response.status_code == 200
    groups = {g["name"]: g for g in response.json()["groups"]}

    assert set(groups) == {"Mahesh Tours", "Direct Booking"}
    assert groups["Mahesh Tours"]["count"] == 1
    assert groups["Mahesh Tours"]["status"] == "Outstanding"
    assert groups["Direct Booking"]["count"] == 2
    assert Decimal(groups["Direct Booking"]["total"]) == Decimal("5460.00")


def test_group_by_vehicle_and_client(client: TestClient, auth_headers: dict):
    seed_bills(client, auth_headers)

    vehicles = client.get("/reports/groups", params={"group_by": "vehicle"}, headers=auth_headers).json()
    by_vehicle = {g["name"]: g["count"] for g in vehicles["groups"]}
    assert by_vehicle == {"MH12AB1234": 2, "MH14XY9999": 1}

    clients = client.get("/reports/groups", params={"group_by": "client"}, headers=auth_headers).json()
    by_client = {g["name"]: g for g in clients["groups"]}
    assert by_client["Anita Sharma"]["count"] == 2
    assert Decimal(by_client["Rahul Mehta"]["due"]) == Decimal("2730.00")


def test_group_by_trip_counts_each_bill_once(client: TestClient, auth_headers: dict):
    bills = seed_bills(client, auth_headers)

    trips = client.get("/reports/groups", params={"group_by": "trip"}, headers=auth_headers).json()["groups"]
    assert sorted(g["name"] for g in trips) == sorted(b["trip_id"] for b in bills.values())
    assert all(g["count"] == 1 for g in trips)


def test_unknown_dimension_is_rejected(client: TestClient, auth_headers: dict):
    response = client.get("/reports/groups", params={"group_by": "city"}, headers=auth_headers)
    assert response.status_code == 422


def test_csv_export(client: TestClient, auth_headers: dict):
    bill = billed_trip(client, auth_headers)

    response = client.get("/reports/export", params={"format": "csv"}, headers=auth_headers)
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "finance_report.csv" in response.headers["content-disposition"]

    lines = response.text.splitlines()
    assert lines[0] == CSV_HEADER
    row = next(csv.DictReader(StringIO(response.text)))
    assert row["Bill ID"] == str(bill["id"])
    assert row["Trip ID"] == bill["trip_id"]
    assert row["Total Amount"] == "2730.00"
    assert row["Paid"] == "1000.00"
    assert row["Due Amount"] == "1730.00"
    assert row["Status"] == "Due"


def test_csv_export_quotes_names_with_commas(client: TestClient, auth_headers: dict):
    create_bill(
        client, auth_headers,
        completed_booking(client, auth_headers, client_name="Sharma, Anita")["id"],
    )

    response = client.get("/reports/export", params={"format": "csv"}, headers=auth_headers)
    assert '"Sharma, Anita"' in response.text
    row = next(csv.DictReader(StringIO(response.text)))
    assert row["Client"] == "Sharma, Anita"


def test_csv_export_of_empty_agency_has_header_only(client: TestClient, auth_headers: dict):
    response = client.get("/reports/export", params={"format": "csv"}, headers=auth_headers)
    assert response.text.splitlines() == [CSV_HEADER]


def test_excel_export(client: TestClient, auth_headers: dict):
    bill = billed_trip(client, auth_headers)

    response = client.get("/reports/export", params={"format": "excel"}, headers=auth_headers)
    assert response.status_code == 200
    sheet = load_workbook(BytesIO(response.content)).active
    assert [c.value for c in sheet[1]] == CSV_HEADER.split(",")
    assert sheet.cell(row=2, column=3).value == bill["trip_id"]


def test_pdf_and_json_exports(client: TestClient, auth_headers: dict):
    bill = billed_trip(client, auth_headers)

    pdf = client.get("/reports/export", params={"format": "pdf"}, headers=auth_headers)
    assert pdf.status_code == 200
    assert pdf.content.startswith(b"%PDF")

    data = json.loads(client.get("/reports/export", params={"format": "json"}, headers=auth_headers).content)
    assert data[0]["Trip ID"] == bill["trip_id"]
    assert data[0]["Status"] == "Due"
