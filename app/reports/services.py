### app/reports/services.py

# Standard library imports
from typing import Any, Dict, List

# Third party imports
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

# Local imports
from app.core.config import settings
from app.core.db import get_async_db
from app.agencies.utils import TenantContext
from app.billing.models import Bill
from app.billing.repository import BillingRepository
from app.reports import aggregator
from app.reports.aggregator import BillRecord, GroupBy, GroupSummary, Summary
from app.utils.exporter_utils import BaseExporter, ExporterFactory
from app.utils.general import fill_if_missing
from app.utils.logger import get_logger

logger = get_logger(__name__)

FINANCE_REPORT_HEADERS = [
    "Bill ID", "Client", "Trip ID", "Date", "Total Amount", "Paid", "Due Amount", "Status",
]


def to_record(bill: Bill) -> BillRecord:
    """Flatten a bill and its booking's assignment snapshot"""
    booking = bill.booking
    return BillRecord(
        bill_id=bill.id,
        trip_id=bill.trip_id,
        client_name=bill.client_name,
        bill_date=bill.created_on.date() if bill.created_on else None,
        grand_total=bill.grand_total,
        balance_due=bill.balance_due,
        agent_name=booking.assigned_agent_name if booking else None,
        vehicle_number=booking.assigned_vehicle_number if booking else None,
        driver_name=booking.assigned_driver_name if booking else None,
    )


def report_row(record: BillRecord) -> Dict[str, Any]:
    return {
        "Bill ID": record.bill_id,
        "Client": fill_if_missing(record.client_name, aggregator.UNKNOWN_CLIENT),
        "Trip ID": record.trip_id,
        "Date": record.bill_date.isoformat() if record.bill_date else aggregator.NOT_AVAILABLE,
        "Total Amount": f"{record.grand_total:.2f}",
        "Paid": f"{record.paid:.2f}",
        "Due Amount": f"{record.balance_due:.2f}",
        "Status": record.status,
    }


def get_report_repository(db: AsyncSession = Depends(get_async_db)) -> BillingRepository:
    """Dependency to get the bill repository used by reports."""
    return BillingRepository(db)


class ReportService:
    """Finance reports over the agency's bills"""

    def __init__(self, repo: BillingRepository = Depends(get_report_repository)):
        self.repo = repo

    async def records(self, tenant: TenantContext) -> List[BillRecord]:
        """Every bill of the agency as report records, newest first"""
        bills = await self.repo.all_bills(tenant.uid)
        return [to_record(bill) for bill in bills]

    async def summary(self, tenant: TenantContext) -> Summary:
        records = await self.records(tenant)
        return aggregator.summarize(records, settings.revenue_series_size)

    async def groups(self, tenant: TenantContext, group_by: GroupBy) -> List[GroupSummary]:
        records = await self.records(tenant)
        return aggregator.aggregate(records, group_by)

    async def export(self, tenant: TenantContext, format_type: str) -> BaseExporter:
        """Exporter for the finance report in the requested format"""
        rows = [report_row(record) for record in await self.records(tenant)]
        logger.info("Exporting finance report", tenant_id=tenant.uid, format=format_type, rows=len(rows))
        return ExporterFactory.get_exporter(
            format_type, rows, headers=FINANCE_REPORT_HEADERS,
            title=f"{tenant.agency_name} Finance Report",
        )
