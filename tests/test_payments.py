import asyncio
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from app.agencies.utils import TenantContext
from app.billing.exceptions import InvalidPaymentAmountException
from app.billing.repository import BillingRepository
from app.billing.schemas import PaymentCreate
from app.billing.services import BillingService
from app.core.db import AsyncSessionLocal
from tests.helpers import billed_trip, register_agency


def pay(client: TestClient, headers: dict, bill_id: int, amount: str, **extra):
    return client.post(f"/billing/bills/{bill_id}/payments", json={"amount": amount, **extra}, headers=headers)


def assert_reconciled(bill: dict):
    """grand total - advance - payments == balance due, Paid exactly when nothing is due"""
    payments = sum((Decimal(p["amount"]) for p in bill["payments"]), Decimal("0"))
    balance_due = Decimal(bill["balance_due"])
    assert Decimal(bill["grand_total"]) - Decimal(bill["advance"]) - payments == balance_due
    assert bill["status"] == ("Paid" if balance_due <= 0 else "Due")


def test_partial_payments_reduce_balance(client: TestClient, auth_headers: dict):
    bill = billed_trip(client, auth_headers)

    response = pay(client, auth_headers, bill["id"], "730", note="Cash at drop")
    assert response.status_code == 200
    bill = response.json()
    assert Decimal(bill["balance_due"]) == Decimal("1000.00")
    assert bill["status"] == "Due"
    assert bill["payments"][0]["note"] == "Cash at drop"
    assert_reconciled(bill)

    response = pay(client, auth_headers, bill["id"], "1000", payment_date="2025-03-20")
    bill = response.json()
    assert Decimal(bill["balance_due"]) == Decimal("0.00")
    assert Decimal(bill["amount_paid"]) == Decimal("2730.00")
    assert bill["status"] == "Paid"
    assert [p["payment_date"] for p in bill["payments"]][1] == "2025-03-20"
    assert_reconciled(bill)


def test_paid_bill_accepts_no_more_payments(client: TestClient, auth_headers: dict):
    bill = billed_trip(client, auth_headers)
    assert pay(client, auth_headers, bill["id"], "1730").json()["status"] == "Paid"

    response = pay(client, auth_headers, bill["id"], "1")
    assert response.status_code == 400
    assert "no balance remains" in response.json()["detail"]


@pytest.mark.parametrize("amount", ["0", "-5", "1730.01", "1e30"])
def test_invalid_amounts_leave_bill_untouched(client: TestClient, auth_headers: dict, amount: str):
    bill = billed_trip(client, auth_headers)

    response = pay(client, auth_headers, bill["id"], amount)
    assert response.status_code == 400
    assert response.json()["detail"].startswith("Invalid payment amount")

    reloaded = client.get(f"/billing/bills/{bill['id']}", headers=auth_headers).json()
    assert Decimal(reloaded["balance_due"]) == Decimal("1730.00")
    assert reloaded["payments"] == []
    assert reloaded["status"] == "Due"


def test_payment_on_foreign_bill_is_not_found(client: TestClient, auth_headers: dict, tenant: dict):
    bill = billed_trip(client, auth_headers)
    other = register_agency(client, agency_name="Other Travels")["headers"]
    assert pay(client, other, bill["id"], "10").status_code == 404
    assert client.get(f"/billing/bills/{bill['id']}", headers=other).status_code == 404


# === Concurrent payments ===

def tenant_context(tenant: dict) -> TenantContext:
    agency = tenant["agency"]
    return TenantContext(
        uid=agency["id"],
        email=agency["email"],
        agency_name=agency["agency_name"],
        owner_name=agency["owner_name"],
        plan=agency["plan"],
    )


async def pay_with_stale_copy(ctx: TenantContext, bill_id: int, stale_amount: str):
    """
    Load the bill in one session, let a second session pay 1000 first,
    then pay from the first session with its outdated balance.
    """
    async with AsyncSessionLocal() as stale, AsyncSessionLocal() as fresh:
        stale_repo = BillingRepository(stale)
        stale_bill = await stale_repo.get_bill(ctx.uid, bill_id)
        assert stale_bill.balance_due == Decimal("1730.00")

        await BillingService(BillingRepository(fresh)).record_payment(
            ctx, bill_id, PaymentCreate(amount=Decimal("1000"))
        )
        return await BillingService(stale_repo).record_payment(
            ctx, bill_id, PaymentCreate(amount=Decimal(stale_amount))
        )


def test_stale_payment_is_rechecked_against_fresh_balance(client: TestClient, auth_headers: dict, tenant: dict):
    bill = billed_trip(client, auth_headers)

    updated = asyncio.run(pay_with_stale_copy(tenant_context(tenant), bill["id"], "500"))
    assert updated.balance_due == Decimal("230.00")
    assert updated.status == "Due"

    reloaded = client.get(f"/billing/bills/{bill['id']}", headers=auth_headers).json()
    assert len(reloaded["payments"]) == 2
    assert Decimal(reloaded["balance_due"]) == Decimal("230.00")
    assert_reconciled(reloaded)


def test_stale_payment_exceeding_fresh_balance_is_rejected(client: TestClient, auth_headers: dict, tenant: dict):
    bill = billed_trip(client, auth_headers)

    with pytest.raises(InvalidPaymentAmountException):
        asyncio.run(pay_with_stale_copy(tenant_context(tenant), bill["id"], "1000"))

    reloaded = client.get(f"/billing/bills/{bill['id']}", headers=auth_headers).json()
    assert len(reloaded["payments"]) == 1
    assert Decimal(reloaded["balance_due"]) == Decimal("730.00")
    assert_reconciled(reloaded)
