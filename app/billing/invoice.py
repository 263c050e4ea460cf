# app/billing/invoice.py

from decimal import Decimal
from io import BytesIO
from typing import List, Tuple
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from app.core.config import settings
from app.agencies.utils import TenantContext
from app.billing.models import Bill
from app.utils.general import fill_if_missing


def _money(value: Decimal) -> str:
    return f"{settings.invoice_currency_label} {Decimal(value):,.2f}"


def line_items(bill: Bill) -> List[Tuple[str, str]]:
    """Invoice lines; optional charges appear only when non-zero"""
    items = [
        (f"Distance ({bill.total_km:.2f} km x {bill.rate_per_km:.2f})", _money(bill.base_amount)),
        ("Driver Allowance", _money(bill.driver_allowance)),
        ("Toll & Parking", _money(bill.toll_parking)),
    ]
    if bill.night_charge > 0:
        items.append(("Night Charge", _money(bill.night_charge)))
    if bill.extra_hours_amount > 0:
        items.append(
            (f"Extra Hours ({bill.extra_hours:.2f} hrs x {bill.extra_hour_charge:.2f})",
             _money(bill.extra_hours_amount))
        )
    if bill.extra_km_amount > 0:
        items.append((f"Extra KM ({bill.extra_km:.2f} km)", _money(bill.extra_km_amount)))
    return items


def totals(bill: Bill) -> List[Tuple[str, str]]:
    rows = [("Sub Total", _money(bill.sub_total))]
    if bill.gst_enabled:
        rows.append((f"GST @ {bill.gst_percent:.2f}%", _money(bill.gst_amount)))
    rows.extend([
        ("Grand Total", _money(bill.grand_total)),
        ("Less Advance", _money(bill.advance)),
        ("Payments Received", _money(bill.payments_total)),
        ("Balance Due", _money(bill.balance_due)),
    ])
    return rows


def render_invoice(bill: Bill, tenant: TenantContext) -> bytes:
    """
    Render the invoice of a bill as PDF bytes.

    Everything printed comes from the stored bill, its booking snapshot and
    the agency profile, so rendering the same bill twice gives the same
    document content.
    """
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer, pagesize=A4, title=bill.invoice_number, invariant=1,
        leftMargin=18 * mm, rightMargin=18 * mm, topMargin=18 * mm, bottomMargin=18 * mm,
    )
    styles = getSampleStyleSheet()
    booking = bill.booking
    elements = []

    # Letterhead
    elements.append(Paragraph(escape(tenant.agency_name), styles["h1"]))
    address = fill_if_missing(tenant.address, settings.invoice_default_address)
    if address:
        elements.append(Paragraph(escape(address), styles["Normal"]))
    if tenant.mobile:
        elements.append(Paragraph(f"Phone: {escape(tenant.mobile)}", styles["Normal"]))
    elements.append(Spacer(1, 6 * mm))

    # Invoice and trip block
    trip_date = booking.trip_date.strftime("%d-%m-%Y") if booking else "N/A"
    vehicle = "N/A"
    if booking and booking.assigned_vehicle_number:
        vehicle = f"{fill_if_missing(booking.assigned_vehicle_model, 'N/A')} ({booking.assigned_vehicle_number})"
    route = f"{booking.pickup} to {booking.drop}" if booking else "N/A"

    details = Table(
        [
            ["Invoice No", bill.invoice_number, "Date", bill.created_on.strftime("%d-%m-%Y")],
            ["Trip ID", bill.trip_id, "Trip Date", trip_date],
            ["Client", fill_if_missing(bill.client_name, "Unknown"), "Vehicle", vehicle],
            ["Route", route, "", ""],
        ],
        colWidths=[25 * mm, 65 * mm, 25 * mm, 59 * mm],
    )
    details.setStyle(TableStyle([
        ("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"),
        ("FONTNAME", (2, 0), (2, -1), "Helvetica-Bold"),
        ("SPAN", (1, 3), (3, 3)),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
    ]))
    elements.append(details)
    elements.append(Spacer(1, 6 * mm))

    # Line items
    items_table = Table(
        [["Description", "Amount"]] + [list(row) for row in line_items(bill)],
        colWidths=[124 * mm, 50 * mm],
    )
    items_table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.grey),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("ALIGN", (1, 0), (1, -1), "RIGHT"),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.black),
    ]))
    elements.append(items_table)
    elements.append(Spacer(1, 4 * mm))

    # Totals
    totals_rows = totals(bill)
    totals_table = Table([list(row) for row in totals_rows], colWidths=[124 * mm, 50 * mm])
    totals_table.setStyle(TableStyle([
        ("ALIGN", (1, 0), (1, -1), "RIGHT"),
        ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
        ("LINEABOVE", (0, -1), (-1, -1), 1, colors.black),
    ]))
    elements.append(totals_table)
    elements.append(Spacer(1, 10 * mm))

    elements.append(Paragraph(escape(settings.invoice_footer), styles["Italic"]))
    elements.append(Paragraph("This is a computer-generated invoice. No signature required.", styles["Normal"]))

    doc.build(elements)
    return buffer.getvalue()
