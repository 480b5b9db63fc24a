"""Admin registration for HRM models."""
from django.contrib import admin

from hrm.models import AttendanceRecord, Employee, ExitFormality, LeaveRequest, PerformanceReview


@admin.register(Employee)
class EmployeeAdmin(admin.ModelAdmin):
    list_display = ("employee_code", "first_name", "last_name", "department", "designation", "joining_date", "is_active")
    list_filter = ("is_active", "department")
    search_fields = ("employee_code", "first_name", "last_name", "email", "phone")


@admin.register(AttendanceRecord)
class AttendanceRecordAdmin(admin.ModelAdmin):
    list_display = ("employee", "date", "status", "marked_by", "updated_at")
    list_filter = ("status", "date")
    search_fields = ("employee__first_name", "employee__last_name", "employee__employee_code")
    date_hierarchy = "date"


@admin.register(LeaveRequest)
class LeaveRequestAdmin(admin.ModelAdmin):
    list_display = ("employee", "leave_type", "start_date", "end_date", "status", "reviewed_by")
    list_filter = ("status", "leave_type")
    search_fields = ("employee__first_name", "employee__last_name", "reason")


@admin.register(PerformanceReview)
class PerformanceReviewAdmin(admin.ModelAdmin):
    list_display = ("employee", "reviewer", "review_period_start", "review_period_end", "overall_rating")
    search_fields = ("employee__first_name", "employee__last_name")
    readonly_fields = ("overall_rating",)


@admin.register(ExitFormality)
class ExitFormalityAdmin(admin.ModelAdmin):
    list_display = ("employee", "exit_reason", "resignation_date", "last_working_day", "status")
    list_filter = ("status", "exit_reason")
    search_fields = ("employee__first_name", "employee__last_name")
