import pytest
from django.contrib.auth.models import AnonymousUser

from api.v1.permissions import (
    IsHRAdmin,
    IsHRAdminOrReadOnly,
    IsLinkedEmployeeOrHRAdmin,
    IsOwnerOrHRAdmin,
    scope_to_user,
)
from hrm.models import AttendanceRecord


class DummyView:
    pass


class DummyRequest:
    def __init__(self, user, method="GET"):
        self.user = user
        self.method = method


class DummyObject:
    def __init__(self, employee_id):
        self.employee_id = employee_id


@pytest.mark.django_db
def test_is_hr_admin_accepts_admin_role_and_superuser(admin_user, superuser, employee_user):
    permission = IsHRAdmin()

    assert permission.has_permission(DummyRequest(admin_user), DummyView()) is True
    assert permission.has_permission(DummyRequest(superuser), DummyView()) is True
    assert permission.has_permission(DummyRequest(employee_user), DummyView()) is False
    assert permission.has_permission(DummyRequest(AnonymousUser()), DummyView()) is False


@pytest.mark.django_db
def test_read_only_for_employees(employee_user, admin_user):
    permission = IsHRAdminOrReadOnly()

    assert permission.has_permission(DummyRequest(employee_user, "GET"), DummyView()) is True
    assert permission.has_permission(DummyRequest(employee_user, "POST"), DummyView()) is False
    assert permission.has_permission(DummyRequest(admin_user, "DELETE"), DummyView()) is True


@pytest.mark.django_db
def test_self_service_requires_linked_employee(employee_user, unlinked_user, admin_user):
    permission = IsLinkedEmployeeOrHRAdmin()

    assert permission.has_permission(DummyRequest(employee_user, "POST"), DummyView()) is True
    assert permission.has_permission(DummyRequest(unlinked_user, "POST"), DummyView()) is False
    assert permission.has_permission(DummyRequest(admin_user, "POST"), DummyView()) is True


@pytest.mark.django_db
def test_owner_check_compares_linked_employee(employee_user, unlinked_user, employee):
    permission = IsOwnerOrHRAdmin()
    own = DummyObject(employee.pk)

    assert permission.has_object_permission(DummyRequest(employee_user), DummyView(), own) is True
    assert permission.has_object_permission(DummyRequest(unlinked_user), DummyView(), own) is False


@pytest.mark.django_db
def test_scope_to_user_filters_rows(employee_user, unlinked_user, admin_user, employee):
    AttendanceRecord.objects.create(employee=employee, date="2024-01-10", status="present")
    qs = AttendanceRecord.objects.all()

    assert scope_to_user(qs, admin_user).count() == 1
    assert scope_to_user(qs, employee_user).count() == 1
    assert scope_to_user(qs, unlinked_user).count() == 0
