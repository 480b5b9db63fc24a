import logging

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import User

logger = logging.getLogger("hrms")


class LinkedEmployeeFilter(admin.SimpleListFilter):
    title = "fiche employe"
    parameter_name = "linked"

    def lookups(self, request, model_admin):
        return (("yes", "Liee"), ("no", "Non liee"))

    def queryset(self, request, queryset):
        if self.value() == "yes":
            return queryset.filter(employee__isnull=False)
        if self.value() == "no":
            return queryset.filter(employee__isnull=True)
        return queryset


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Portal accounts: role, linked employee record and access flag."""

    list_display = ("email", "role", "employee_code", "department", "is_active", "last_login")
    list_filter = ("role", "is_active", LinkedEmployeeFilter, "is_superuser")
    list_select_related = ("employee",)
    search_fields = ("email", "first_name", "last_name", "employee__employee_code", "employee__first_name")
    ordering = ("email",)
    autocomplete_fields = ("employee",)
    readonly_fields = ("date_joined", "last_login")
    actions = ("enable_access", "disable_access")

    fieldsets = (
        ("Connexion", {"fields": ("email", "password")}),
        ("Portail RH", {"fields": ("role", "employee", "first_name", "last_name")}),
        ("Acces", {"fields": ("is_active", "is_staff", "is_superuser", "groups", "user_permissions")}),
        ("Historique", {"fields": ("date_joined", "last_login")}),
    )
    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": ("email", "role", "employee", "password1", "password2"),
            },
        ),
    )

    @admin.display(description="Matricule", ordering="employee__employee_code")
    def employee_code(self, obj):
        return obj.employee.employee_code if obj.employee_id else "-"

    @admin.display(description="Departement")
    def department(self, obj):
        return (obj.employee.department if obj.employee_id else "") or "-"

    def _set_access(self, request, queryset, active):
        # The acting admin keeps access to the site.
        updated = queryset.exclude(pk=request.user.pk).update(is_active=active)
        logger.info("Admin site: %s accounts set active=%s by=%s", updated, active, request.user)
        self.message_user(request, f"{updated} compte(s) mis a jour.")

    @admin.action(description="Activer l'acces au portail")
    def enable_access(self, request, queryset):
        self._set_access(request, queryset, True)

    @admin.action(description="Desactiver l'acces au portail")
    def disable_access(self, request, queryset):
        self._set_access(request, queryset, False)
