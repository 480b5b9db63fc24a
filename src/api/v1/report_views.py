"""Attendance and leave report endpoints (JSON and file downloads)."""
from __future__ import annotations

from rest_framework.exceptions import ValidationError
from rest_framework.generics import get_object_or_404
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from api.v1.permissions import IsHRAdmin, IsOwnerOrHRAdmin
from core.dates import month_bounds, parse_month, today_local
from hrm.models import Employee
from reports.exports import (
    attendance_bulk_pdf_response,
    attendance_csv_response,
    attendance_xlsx_response,
    employee_attendance_pdf_response,
    leave_csv_response,
)
from reports.services import monthly_attendance_report

EXPORT_FORMATS = {
    "csv": attendance_csv_response,
    "pdf": attendance_bulk_pdf_response,
    "xlsx": attendance_xlsx_response,
}


def _month_param(request):
    raw = request.query_params.get("month")
    if not raw:
        return month_bounds(today_local())[0]
    try:
        return parse_month(raw)
    except ValueError as exc:
        raise ValidationError({"month": str(exc)})


class AttendanceReportView(APIView):
    """GET /api/v1/reports/attendance/?month=YYYY-MM"""

    permission_classes = [IsAuthenticated, IsHRAdmin]

    def get(self, request):
        return Response(monthly_attendance_report(_month_param(request)))


class AttendanceReportExportView(APIView):
    """GET /api/v1/reports/attendance/export/?month=YYYY-MM&format=csv|pdf|xlsx"""

    permission_classes = [IsAuthenticated, IsHRAdmin]

    def get(self, request):
        month_start = _month_param(request)
        fmt = (request.query_params.get("format") or "csv").lower()
        renderer = EXPORT_FORMATS.get(fmt)
        if renderer is None:
            raise ValidationError({"format": f"Formats possibles : {', '.join(EXPORT_FORMATS)}."})
        return renderer(month_start)


class EmployeeAttendancePDFView(APIView):
    """GET /api/v1/reports/attendance/<employee_id>/pdf/?month=YYYY-MM

    Employees may download their own report only.
    """

    permission_classes = [IsAuthenticated, IsOwnerOrHRAdmin]
    owner_field = "pk"

    def get(self, request, employee_id):
        employee = get_object_or_404(Employee, pk=employee_id)
        self.check_object_permissions(request, employee)
        return employee_attendance_pdf_response(employee, _month_param(request))


class LeaveReportExportView(APIView):
    """GET /api/v1/reports/leaves/export/?month=YYYY-MM"""

    permission_classes = [IsAuthenticated, IsHRAdmin]

    def get(self, request):
        return leave_csv_response(_month_param(request))
