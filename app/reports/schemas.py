### app/reports/schemas.py

# Standard library imports
from decimal import Decimal
from enum import Enum
from typing import List

# Third party imports
from pydantic import BaseModel, ConfigDict


class ExportFormat(str, Enum):
    """Formats the finance report can be downloaded in"""
    CSV = "csv"
    EXCEL = "excel"
    PDF = "pdf"
    JSON = "json"


class TotalsResponse(BaseModel):
    total_revenue: Decimal
    total_paid: Decimal
    total_due: Decimal
    paid_bills: int
    pending_bills: int

    model_config = ConfigDict(from_attributes=True)


class RevenuePointResponse(BaseModel):
    label: str
    amount: Decimal

    model_config = ConfigDict(from_attributes=True)


class StatusSliceResponse(BaseModel):
    name: str
    value: int

    model_config = ConfigDict(from_attributes=True)


class SummaryResponse(BaseModel):
    """Schema for the finance summary"""
    totals: TotalsResponse
    status_breakdown: List[StatusSliceResponse]
    revenue_series: List[RevenuePointResponse]

    model_config = ConfigDict(from_attributes=True)


class GroupSummaryResponse(BaseModel):
    """One row of a grouped report"""
    name: str
    count: int
    total: Decimal
    paid: Decimal
    due: Decimal
    status: str

    model_config = ConfigDict(from_attributes=True)


class GroupReportResponse(BaseModel):
    group_by: str
    groups: List[GroupSummaryResponse]
