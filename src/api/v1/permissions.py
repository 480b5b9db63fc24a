"""Custom DRF permissions for the HR management system.

Two portal roles exist: ``admin`` (HR staff, full access) and ``employee``
(self-service on their own records). Accounts that are not linked to an
employee record can only read their own profile.
"""
from rest_framework.permissions import SAFE_METHODS, BasePermission


def is_hr_admin(user) -> bool:
    return bool(
        user
        and user.is_authenticated
        and (user.is_superuser or getattr(user, "role", None) == "admin")
    )


def linked_employee_id(user):
    return getattr(user, "employee_id", None)


def scope_to_user(queryset, user, field_name="employee"):
    """Admins see everything, employees only rows of their linked employee."""
    if is_hr_admin(user):
        return queryset
    employee_id = linked_employee_id(user)
    if employee_id is None:
        return queryset.none()
    return queryset.filter(**{f"{field_name}_id": employee_id})


class IsHRAdmin(BasePermission):
    """Allow access to HR administrators only."""

    message = "Acces reserve aux administrateurs RH."

    def has_permission(self, request, view):
        return is_hr_admin(request.user)


class IsHRAdminOrReadOnly(BasePermission):
    """Everyone authenticated may read; only HR administrators may write."""

    message = "Acces en ecriture reserve aux administrateurs RH."

    def has_permission(self, request, view):
        if not (request.user and request.user.is_authenticated):
            return False
        if request.method in SAFE_METHODS:
            return True
        return is_hr_admin(request.user)


class IsLinkedEmployeeOrHRAdmin(BasePermission):
    """Self-service endpoints need an account linked to an employee record."""

    message = "Votre compte n'est lie a aucun employe."

    def has_permission(self, request, view):
        if not (request.user and request.user.is_authenticated):
            return False
        return is_hr_admin(request.user) or linked_employee_id(request.user) is not None


class IsOwnerOrHRAdmin(BasePermission):
    """Object-level guard: the row must belong to the caller's employee record."""

    message = "Vous n'avez pas acces a cet element."

    owner_field = "employee_id"

    def has_object_permission(self, request, view, obj):
        if is_hr_admin(request.user):
            return True
        employee_id = linked_employee_id(request.user)
        owner_id = getattr(obj, getattr(view, "owner_field", self.owner_field), None)
        return employee_id is not None and owner_id == employee_id
