"""Downloadable attendance and leave reports (CSV, PDF, Excel)."""
from __future__ import annotations

import logging
import re
from datetime import date

from django.http import HttpResponse
from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill

from core.dates import format_ddmmyyyy, month_bounds
from core.export import csv_download
from core.pdf import build_attendance_pdf, build_table_pdf, pdf_response
from reports.services import (
    attendance_rate,
    employee_label,
    employee_month_records,
    monthly_attendance_report,
    summarize_attendance,
)

logger = logging.getLogger("hrms")

ATTENDANCE_COLUMNS = [
    "Employee Name",
    "Employee Email",
    "Total Days",
    "Present Days",
    "Absent Days",
    "Leave Days",
    "Attendance Rate (%)",
]

STATUS_MARKS = {"present": "P", "absent": "A", "leave": "L"}


def attendance_report_rows(report: dict) -> list[dict]:
    return [
        {
            "Employee Name": row["name"],
            "Employee Email": row["email"],
            "Total Days": row["total"],
            "Present Days": row["present"],
            "Absent Days": row["absent"],
            "Leave Days": row["leave"],
            "Attendance Rate (%)": row["rate"],
        }
        for row in report["rows"]
    ]


def leave_report_rows(month_start: date) -> list[dict]:
    from hrm.models import LeaveRequest

    period_start, period_end = month_bounds(month_start)
    leaves = (
        LeaveRequest.objects.filter(start_date__range=(period_start, period_end))
        .select_related("employee")
        .order_by("start_date", "created_at")
    )
    return [
        {
            "Employee Name": employee_label(leave.employee),
            "Leave Type": leave.get_leave_type_display(),
            "Start Date": leave.start_date.isoformat(),
            "End Date": leave.end_date.isoformat(),
            "Status": leave.get_status_display(),
            "Reason": leave.reason,
            "Applied Date": format_ddmmyyyy(leave.created_at),
        }
        for leave in leaves
    ]


def attendance_csv_response(month_start: date) -> HttpResponse:
    report = monthly_attendance_report(month_start)
    return csv_download(attendance_report_rows(report), f"attendance-report-{report['month']}.csv")


def leave_csv_response(month_start: date) -> HttpResponse:
    month = month_start.strftime("%Y-%m")
    return csv_download(leave_report_rows(month_start), f"leave-report-{month}.csv")


def attendance_xlsx_response(month_start: date) -> HttpResponse:
    """Export the monthly attendance table with ``openpyxl``."""
    report = monthly_attendance_report(month_start)

    wb = Workbook()
    ws = wb.active
    ws.title = f"Attendance {report['month']}"
    ws.append(ATTENDANCE_COLUMNS)
    header_fill = PatternFill("solid", fgColor="0F172A")
    for cell in ws[1]:
        cell.font = Font(bold=True, color="FFFFFF")
        cell.fill = header_fill
    for row in attendance_report_rows(report):
        ws.append([row[column] for column in ATTENDANCE_COLUMNS])

    response = HttpResponse(
        content_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )
    response["Content-Disposition"] = f'attachment; filename="attendance-report-{report["month"]}.xlsx"'
    wb.save(response)
    return response


def attendance_bulk_pdf_response(month_start: date) -> HttpResponse:
    report = monthly_attendance_report(month_start)
    stats = report["stats"]
    rows = attendance_report_rows(report)
    content = build_table_pdf(
        title="Attendance Report",
        subtitle_lines=[
            f"Report Period: {report['month']}",
            f"Employees: {stats['total_employees']} - Overall Attendance Rate: {stats['attendance_rate']}%",
        ],
        headers=ATTENDANCE_COLUMNS,
        rows=[[row[column] for column in ATTENDANCE_COLUMNS] for row in rows],
    )
    logger.info("Bulk attendance PDF generated for %s (%s rows)", report["month"], len(rows))
    return pdf_response(content, f"attendance-report-{report['month']}")


def individual_report_filename(employee, month: str) -> str:
    stem = re.sub(r"\s+", "_", employee_label(employee).strip())
    return f"{stem}_Attendance_Report_{month}"


def employee_attendance_pdf_response(employee, month_start: date) -> HttpResponse:
    month = month_start.strftime("%Y-%m")
    records = employee_month_records(employee, month_start)
    summary = summarize_attendance(records).get(str(employee.pk))
    present = summary.present if summary else 0
    absent = summary.absent if summary else 0
    leave = summary.leave if summary else 0
    total = present + absent + leave

    content = build_attendance_pdf(
        employee_info=[
            ("Name", employee_label(employee)),
            ("Email", employee.email or "-"),
            ("Employee ID", employee.employee_code),
            ("Department", employee.department or "N/A"),
            ("Report Period", month),
        ],
        summary=[
            ("Total Working Days", total),
            ("Present", present),
            ("Absent", absent),
            ("Leave", leave),
            ("Attendance Rate", f"{attendance_rate(present, total)}%"),
        ],
        records=[
            (format_ddmmyyyy(record.date), record.get_status_display(), STATUS_MARKS.get(record.status, "-"))
            for record in records
        ],
    )
    logger.info("Attendance PDF generated for %s (%s)", employee.employee_code, month)
    return pdf_response(content, individual_report_filename(employee, month))
