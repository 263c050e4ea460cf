# app/reports/aggregator.py

"""
Read-only folds over an agency's bills for the finance reports.

Works on BillRecord values (a bill plus the booking fields the dimensions
need) and never touches the database.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from app.utils.general import fill_if_missing, split_name

ZERO = Decimal("0")

DIRECT_BOOKING = "Direct Booking"
NOT_AVAILABLE = "N/A"
UNKNOWN_CLIENT = "Unknown"


@dataclass(frozen=True)
class BillRecord:
    """A bill joined with the booking snapshot fields used for grouping"""
    bill_id: int
    trip_id: str
    client_name: Optional[str]
    bill_date: Optional[date]
    grand_total: Decimal
    balance_due: Decimal
    agent_name: Optional[str] = None
    vehicle_number: Optional[str] = None
    driver_name: Optional[str] = None

    @property
    def paid(self) -> Decimal:
        return self.grand_total - self.balance_due

    @property
    def status(self) -> str:
        return "Paid" if self.balance_due <= 0 else "Due"


class GroupBy(str, Enum):
    """Dimensions the bills can be grouped by"""
    CLIENT = "client"
    AGENT = "agent"
    VEHICLE = "vehicle"
    DRIVER = "driver"
    TRIP = "trip"


GROUP_KEYS: Dict[GroupBy, Callable[[BillRecord], str]] = {
    GroupBy.CLIENT: lambda r: fill_if_missing(r.client_name, UNKNOWN_CLIENT),
    GroupBy.AGENT: lambda r: fill_if_missing(r.agent_name, DIRECT_BOOKING),
    GroupBy.VEHICLE: lambda r: fill_if_missing(r.vehicle_number, NOT_AVAILABLE),
    GroupBy.DRIVER: lambda r: fill_if_missing(r.driver_name, NOT_AVAILABLE),
    GroupBy.TRIP: lambda r: fill_if_missing(r.trip_id, NOT_AVAILABLE),
}


@dataclass
class GroupSummary:
    name: str
    count: int = 0
    total: Decimal = ZERO
    paid: Decimal = ZERO
    due: Decimal = ZERO

    @property
    def status(self) -> str:
        return "Settled" if self.due == 0 else "Outstanding"


@dataclass(frozen=True)
class Totals:
    total_revenue: Decimal
    total_paid: Decimal
    total_due: Decimal
    paid_bills: int
    pending_bills: int


@dataclass(frozen=True)
class RevenuePoint:
    label: str
    amount: Decimal


@dataclass(frozen=True)
class StatusSlice:
    name: str
    value: int


@dataclass(frozen=True)
class Summary:
    totals: Totals
    status_breakdown: List[StatusSlice] = field(default_factory=list)
    revenue_series: List[RevenuePoint] = field(default_factory=list)


def aggregate(records: Iterable[BillRecord], group_by: GroupBy) -> List[GroupSummary]:
    """
    Group bills by one dimension. Groups keep the order in which their
    first bill appears.
    """
    key_of = GROUP_KEYS[group_by]
    groups: Dict[str, GroupSummary] = {}

    for record in records:
        key = key_of(record)
        group = groups.setdefault(key, GroupSummary(name=key))
        group.count += 1
        group.total += record.grand_total
        group.paid += record.paid
        group.due += record.balance_due

    return list(groups.values())


def totals(records: Iterable[BillRecord]) -> Totals:
    revenue = ZERO
    due = ZERO
    paid_bills = 0
    pending_bills = 0

    for record in records:
        revenue += record.grand_total
        due += record.balance_due
        if record.balance_due > 0:
            pending_bills += 1
        else:
            paid_bills += 1

    return Totals(
        total_revenue=revenue,
        total_paid=revenue - due,
        total_due=due,
        paid_bills=paid_bills,
        pending_bills=pending_bills,
    )


def revenue_series(records_newest_first: Sequence[BillRecord], size: int) -> List[RevenuePoint]:
    """The `size` most recent bills, oldest first, labelled by client first name"""
    recent = list(records_newest_first[:size])
    recent.reverse()
    return [
        RevenuePoint(
            label=split_name(record.client_name)[0] or UNKNOWN_CLIENT,
            amount=record.grand_total,
        )
        for record in recent
    ]


def summarize(records_newest_first: Sequence[BillRecord], series_size: int) -> Summary:
    """Totals, Paid/Due breakdown and revenue series of the bills"""
    overall = totals(records_newest_first)
    return Summary(
        totals=overall,
        status_breakdown=[
            StatusSlice(name="Paid", value=overall.paid_bills),
            StatusSlice(name="Due", value=overall.pending_bills),
        ],
        revenue_series=revenue_series(records_newest_first, series_size),
    )
