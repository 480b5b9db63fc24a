"""Admin registration for expense models."""
from django.contrib import admin

from expenses.models import Expense


@admin.register(Expense)
class ExpenseAdmin(admin.ModelAdmin):
    list_display = ("employee", "amount", "status", "expense_date", "reviewed_by", "created_at")
    list_filter = ("status", "expense_date")
    search_fields = ("description", "employee__first_name", "employee__last_name", "employee__email")
    readonly_fields = ("approved_at", "rejected_at", "created_at", "updated_at")
    raw_id_fields = ("employee", "reviewed_by")
