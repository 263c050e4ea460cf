# app/utils/exporter_utils.py

import csv
import json
from xml.sax.saxutils import escape
from io import BytesIO, StringIO
from typing import Any, Dict, List, Optional

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, Side
from reportlab.lib import colors
from reportlab.lib.pagesizes import landscape, letter
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Table, TableStyle

from app.utils.logger import get_logger

logger = get_logger(__name__)


class BaseExporter:
    """Abstract base class for exporters."""
    media_type = "application/octet-stream"
    extension = "bin"

    def __init__(
        self, data: List[Dict[str, Any]], headers: Optional[List[str]] = None,
        title: str = "Exported Data",
    ):
        if not data and not headers:
            raise ValueError("No data provided for export.")
        self.data = data
        self.headers = headers or list(data[0].keys())
        self.title = title

    def export(self) -> BytesIO:
        """Exports the data to a file-like object."""
        raise NotImplementedError


class ExcelExporter(BaseExporter):
    """Exports data to an Excel (XLSX) file in memory."""
    media_type = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    extension = "xlsx"

    def export(self) -> BytesIO:
        workbook = Workbook()
        sheet = workbook.active
        sheet.title = self.title[:31]

        # Style for header
        header_font = Font(bold=True)
        header_alignment = Alignment(horizontal="center", vertical="center")
        thin_border = Border(left=Side(style='thin'), right=Side(style='thin'), top=Side(style='thin'), bottom=Side(style='thin'))

        for col_num, header_title in enumerate(self.headers, 1):
            cell = sheet.cell(row=1, column=col_num, value=header_title)
            cell.font = header_font
            cell.alignment = header_alignment
            cell.border = thin_border
            sheet.column_dimensions[cell.column_letter].width = 20

        for row_num, row_data in enumerate(self.data, 2):
            for col_num, header in enumerate(self.headers, 1):
                cell = sheet.cell(row=row_num, column=col_num, value=str(row_data.get(header, "")))
                cell.border = thin_border

        output = BytesIO()
        workbook.save(output)
        output.seek(0)
        return output


class CSVExporter(BaseExporter):
    """Exports data to a CSV file in memory; fields with commas or quotes are quoted."""
    media_type = "text/csv"
    extension = "csv"

    def export(self) -> BytesIO:
        string_io = StringIO()
        writer = csv.DictWriter(string_io, fieldnames=self.headers, extrasaction="ignore", lineterminator="\n")
        writer.writeheader()
        writer.writerows(self.data)

        # Convert StringIO to BytesIO for streaming response
        output = BytesIO(string_io.getvalue().encode('utf-8'))
        output.seek(0)
        return output


class PDFExporter(BaseExporter):
    """Exports data to a PDF file in memory."""
    media_type = "application/pdf"
    extension = "pdf"

    def export(self) -> BytesIO:
        buffer = BytesIO()
        doc = SimpleDocTemplate(buffer, pagesize=landscape(letter))

        table_data = [self.headers]
        for row in self.data:
            table_data.append([str(row.get(header, "")) for header in self.headers])

        table = Table(table_data, repeatRows=1)
        style = TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), colors.grey),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
            ('ALIGN', (0, 0), (-1, -1), 'CENTER'),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('BOTTOMPADDING', (0, 0), (-1, 0), 12),
            ('BACKGROUND', (0, 1), (-1, -1), colors.beige),
            ('GRID', (0, 0), (-1, -1), 1, colors.black)
        ])
        table.setStyle(style)

        elements = []
        styles = getSampleStyleSheet()
        elements.append(Paragraph(escape(self.title), styles["h1"]))
        elements.append(table)
        doc.build(elements)

        buffer.seek(0)
        return buffer


class JSONExporter(BaseExporter):
    """Exports data to a JSON file in memory."""
    media_type = "application/json"
    extension = "json"

    def export(self) -> BytesIO:
        json_string = json.dumps(self.data, indent=4, default=str)  # Decimals and dates as strings
        output = BytesIO(json_string.encode('utf-8'))
        output.seek(0)
        return output


class ExporterFactory:
    """Factory to get the correct exporter based on the format."""

    @staticmethod
    def get_exporter(
        format_type: str, data: List[Dict[str, Any]], headers: Optional[List[str]] = None,
        title: str = "Exported Data",
    ) -> BaseExporter:
        """
        Returns an instance of the appropriate exporter class based on the format type.
        """
        format_type = format_type.lower()
        if format_type == "excel":
            return ExcelExporter(data, headers, title)
        if format_type == "csv":
            return CSVExporter(data, headers, title)
        if format_type == "pdf":
            return PDFExporter(data, headers, title)
        if format_type == "json":
            return JSONExporter(data, headers, title)
        raise ValueError(f"Unsupported export format: {format_type}")
