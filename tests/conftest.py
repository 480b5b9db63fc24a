import pytest
from datetime import date

from django.core.cache import cache

from accounts.models import User
from hrm.models import Employee


@pytest.fixture(autouse=True)
def _clear_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def employee(db):
    return Employee.objects.create(
        employee_code="EMP000001",
        first_name="Asha",
        last_name="Verma",
        email="asha.verma@test.com",
        department="Human Resources",
        joining_date=date(2021, 4, 1),
    )


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(
        email="admin@test.com",
        password="testpass123",
        first_name="Admin",
        last_name="User",
        role=User.Role.ADMIN,
    )


@pytest.fixture
def employee_user(db, employee):
    return User.objects.create_user(
        email="asha@test.com",
        password="testpass123",
        role=User.Role.EMPLOYEE,
        employee=employee,
    )


@pytest.fixture
def unlinked_user(db):
    return User.objects.create_user(
        email="unlinked@test.com",
        password="testpass123",
        role=User.Role.EMPLOYEE,
    )


@pytest.fixture
def superuser(db):
    return User.objects.create_superuser(email="root@test.com", password="testpass123")
