"""Shared fixtures for all tests."""
from datetime import date
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from hrm.models import Employee

User = get_user_model()


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def employee(db):
    return Employee.objects.create(
        employee_code="EMP000001",
        first_name="Rahul",
        last_name="Mehta",
        email="rahul.mehta@test.com",
        designation="Developer",
        department="Engineering",
        salary=Decimal("72000.00"),
        joining_date=date(2022, 1, 15),
    )


@pytest.fixture
def other_employee(db):
    return Employee.objects.create(
        employee_code="EMP000002",
        first_name="Priya",
        last_name="Nair",
        email="priya.nair@test.com",
        designation="Accountant",
        department="Finance",
        joining_date=date(2023, 6, 1),
    )


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(
        email="admin@test.com",
        password="TestPass123!",
        first_name="Admin",
        last_name="User",
        role=User.Role.ADMIN,
    )


@pytest.fixture
def employee_user(db, employee):
    return User.objects.create_user(
        email="rahul@test.com",
        password="TestPass123!",
        role=User.Role.EMPLOYEE,
        employee=employee,
    )


@pytest.fixture
def unlinked_user(db):
    return User.objects.create_user(
        email="nobody@test.com",
        password="TestPass123!",
        role=User.Role.EMPLOYEE,
    )


@pytest.fixture
def admin_client(api_client, admin_user):
    api_client.force_authenticate(user=admin_user)
    return api_client


@pytest.fixture
def employee_client(employee_user):
    client = APIClient()
    client.force_authenticate(user=employee_user)
    return client


@pytest.fixture
def unlinked_client(unlinked_user):
    client = APIClient()
    client.force_authenticate(user=unlinked_user)
    return client
