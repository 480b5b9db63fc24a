"""PDF generation utilities using ReportLab."""
import logging
import re
from io import BytesIO

from django.http import HttpResponse
from django.utils import timezone
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

logger = logging.getLogger("hrms")

HEADER_COLOR = colors.HexColor("#0F172A")
GRID_COLOR = colors.HexColor("#94A3B8")
BAND_COLOR = colors.HexColor("#1D4ED8")
FOOTER_TEXT = "HR Management System"


def _safe_pdf_filename(stem: str, fallback: str = "document") -> str:
    """Build a safe PDF filename from a human-readable stem."""
    safe = re.sub(r'[\\/:*?"<>|]+', "-", (stem or "").strip())
    safe = safe.strip(" .")
    if not safe:
        safe = fallback
    return f"{safe}.pdf"


def pdf_response(content: bytes, stem: str) -> HttpResponse:
    response = HttpResponse(content, content_type="application/pdf")
    response["Content-Disposition"] = f'attachment; filename="{_safe_pdf_filename(stem)}"'
    return response


def _new_document(buffer):
    return SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=12 * mm,
        leftMargin=12 * mm,
        topMargin=12 * mm,
        bottomMargin=12 * mm,
    )


def _grid_table(data, *, header=True, col_widths=None):
    table = Table(data, repeatRows=1 if header else 0, colWidths=col_widths)
    style = [
        ("GRID", (0, 0), (-1, -1), 0.3, GRID_COLOR),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
    ]
    if header:
        style += [
            ("BACKGROUND", (0, 0), (-1, 0), HEADER_COLOR),
            ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ]
    else:
        style.append(("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"))
    table.setStyle(TableStyle(style))
    return table


def _header_band(title, width):
    styles = getSampleStyleSheet()
    band = Table([[Paragraph(f'<font color="white">{title}</font>', styles["Title"])]], colWidths=[width])
    band.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, -1), BAND_COLOR),
                ("TOPPADDING", (0, 0), (-1, -1), 8),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 8),
            ]
        )
    )
    return band


def _footer(styles):
    generated = timezone.localtime().strftime("%d-%m-%Y %I:%M %p")
    return [
        Spacer(1, 12),
        Paragraph(f"Generated on {generated}", styles["Italic"]),
        Paragraph(FOOTER_TEXT, styles["Italic"]),
    ]


def build_attendance_pdf(*, employee_info, summary, records) -> bytes:
    """Individual attendance report.

    *employee_info* and *summary* are lists of ``(label, value)`` pairs,
    *records* a list of ``(date, status, mark)`` rows.
    """
    buffer = BytesIO()
    doc = _new_document(buffer)
    styles = getSampleStyleSheet()

    story = [_header_band("Attendance Report", doc.width), Spacer(1, 10)]
    story.append(Paragraph("Employee Information", styles["Heading2"]))
    story.append(_grid_table([[label, str(value)] for label, value in employee_info], header=False))
    story.append(Spacer(1, 10))
    story.append(Paragraph("Attendance Summary", styles["Heading2"]))
    story.append(_grid_table([[label, str(value)] for label, value in summary], header=False))
    story.append(Spacer(1, 10))
    story.append(Paragraph("Daily Attendance", styles["Heading2"]))
    data = [["Date", "Status", "Mark"]] + [[str(d), str(s), str(m)] for d, s, m in records]
    story.append(_grid_table(data))
    story.extend(_footer(styles))

    doc.build(story)
    logger.debug("Attendance PDF rendered with %s rows", len(records))
    return buffer.getvalue()


def build_table_pdf(*, title, subtitle_lines, headers, rows) -> bytes:
    """Single-table report (bulk exports)."""
    buffer = BytesIO()
    doc = _new_document(buffer)
    styles = getSampleStyleSheet()

    story = [_header_band(title, doc.width), Spacer(1, 8)]
    for line in subtitle_lines:
        story.append(Paragraph(line, styles["Normal"]))
    story.append(Spacer(1, 8))
    story.append(_grid_table([list(headers)] + [[str(cell) for cell in row] for row in rows]))
    story.extend(_footer(styles))

    doc.build(story)
    return buffer.getvalue()
