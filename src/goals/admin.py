from django.contrib import admin

from goals.models import KPI, Goal


@admin.register(Goal)
class GoalAdmin(admin.ModelAdmin):
    list_display = ("title", "employee", "category", "current_value", "target_value", "status", "end_date")
    list_filter = ("status", "category")
    search_fields = ("title", "employee__first_name", "employee__last_name")


@admin.register(KPI)
class KPIAdmin(admin.ModelAdmin):
    list_display = ("title", "employee", "frequency", "current_value", "target_value", "status")
    list_filter = ("status", "frequency")
    search_fields = ("title", "employee__first_name", "employee__last_name")
