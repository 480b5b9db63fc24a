"""Tests for expense claim API endpoints."""
from decimal import Decimal

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from expenses.models import Expense
from expenses.services import create_expense


def _pdf(name="receipt.pdf", size=None):
    content = b"%PDF-1.4 test" if size is None else b"0" * size
    return SimpleUploadedFile(name, content, content_type="application/pdf")


@pytest.mark.django_db
def test_employee_submits_expense_for_self(employee_client, employee, other_employee):
    resp = employee_client.post(
        "/api/v1/expenses/",
        {"employee": str(other_employee.id), "amount": "1250.50", "description": "  Client travel  "},
        format="json",
    )

    assert resp.status_code == 201, resp.data
    expense = Expense.objects.get(pk=resp.data["id"])
    assert expense.employee == employee
    assert expense.status == Expense.Status.PENDING
    assert expense.description == "Client travel"


@pytest.mark.django_db
def test_admin_must_choose_employee(admin_client):
    resp = admin_client.post(
        "/api/v1/expenses/",
        {"amount": "100.00", "description": "Taxi"},
        format="json",
    )
    assert resp.status_code == 400
    assert "employee" in resp.data


@pytest.mark.django_db
def test_admin_submits_on_behalf_of_employee(admin_client, other_employee):
    resp = admin_client.post(
        "/api/v1/expenses/",
        {"employee": str(other_employee.id), "amount": "100.00", "description": "Taxi"},
        format="json",
    )
    assert resp.status_code == 201, resp.data
    assert resp.data["employee_name"] == "Priya Nair"


@pytest.mark.django_db
@pytest.mark.parametrize("amount", ["0", "-5.00"])
def test_non_positive_amount_is_rejected(employee_client, amount):
    resp = employee_client.post(
        "/api/v1/expenses/",
        {"amount": amount, "description": "Taxi"},
        format="json",
    )
    assert resp.status_code == 400
    assert "amount" in resp.data


@pytest.mark.django_db
def test_blank_description_is_rejected(employee_client):
    resp = employee_client.post(
        "/api/v1/expenses/",
        {"amount": "10.00", "description": "   "},
        format="json",
    )
    assert resp.status_code == 400


@pytest.mark.django_db
def test_unlinked_account_cannot_submit(unlinked_client):
    resp = unlinked_client.post(
        "/api/v1/expenses/",
        {"amount": "10.00", "description": "Taxi"},
        format="json",
    )
    assert resp.status_code == 403


@pytest.mark.django_db
def test_receipt_upload(employee_client):
    resp = employee_client.post(
        "/api/v1/expenses/",
        {"amount": "80.00", "description": "Lunch", "receipt": _pdf()},
        format="multipart",
    )

    assert resp.status_code == 201, resp.data
    expense = Expense.objects.get(pk=resp.data["id"])
    assert expense.receipt.name.startswith("receipts/receipt_")
    assert expense.receipt.name.endswith(".pdf")


@pytest.mark.django_db
def test_receipt_with_forbidden_extension(employee_client):
    upload = SimpleUploadedFile("receipt.exe", b"MZ", content_type="application/octet-stream")
    resp = employee_client.post(
        "/api/v1/expenses/",
        {"amount": "80.00", "description": "Lunch", "receipt": upload},
        format="multipart",
    )
    assert resp.status_code == 400
    assert Expense.objects.count() == 0


@pytest.mark.django_db
def test_receipt_too_large(employee, settings):
    settings.HR_UPLOAD_MAX_BYTES = 10
    with pytest.raises(ValueError):
        create_expense(employee=employee, amount="5", description="Big", receipt=_pdf(size=11))


@pytest.mark.django_db
def test_approve_with_reimbursement_proof(admin_client, admin_user, employee):
    expense = create_expense(employee=employee, amount="300", description="Hotel")

    resp = admin_client.post(
        f"/api/v1/expenses/{expense.id}/approve/",
        {"reimbursement_details": "NEFT ref 42", "reimbursement_file": _pdf("proof.pdf")},
        format="multipart",
    )

    assert resp.status_code == 200, resp.data
    expense.refresh_from_db()
    assert expense.status == Expense.Status.APPROVED
    assert expense.approved_at is not None
    assert expense.reviewed_by == admin_user
    assert expense.reimbursement_file.name.startswith("reimbursements/reimbursement_")


@pytest.mark.django_db
def test_reject_requires_reason(admin_client, employee):
    expense = create_expense(employee=employee, amount="300", description="Hotel")

    resp = admin_client.post(f"/api/v1/expenses/{expense.id}/reject/", {}, format="json")
    assert resp.status_code == 400

    resp = admin_client.post(
        f"/api/v1/expenses/{expense.id}/reject/", {"rejection_reason": "No receipt"}, format="json"
    )
    assert resp.status_code == 200
    assert resp.data["status"] == "rejected"
    assert resp.data["rejection_reason"] == "No receipt"


@pytest.mark.django_db
def test_decided_expense_cannot_be_decided_again(admin_client, employee):
    expense = create_expense(employee=employee, amount="300", description="Hotel")
    admin_client.post(f"/api/v1/expenses/{expense.id}/approve/", {}, format="json")

    resp = admin_client.post(
        f"/api/v1/expenses/{expense.id}/reject/", {"rejection_reason": "Late"}, format="json"
    )
    assert resp.status_code == 400
    expense.refresh_from_db()
    assert expense.status == Expense.Status.APPROVED


@pytest.mark.django_db
def test_employee_cannot_approve(employee_client, employee):
    expense = create_expense(employee=employee, amount="300", description="Hotel")
    resp = employee_client.post(f"/api/v1/expenses/{expense.id}/approve/", {}, format="json")
    assert resp.status_code == 403


@pytest.mark.django_db
def test_employee_lists_own_expenses(employee_client, employee, other_employee):
    create_expense(employee=employee, amount="10", description="Mine")
    create_expense(employee=other_employee, amount="20", description="Not mine")

    resp = employee_client.get("/api/v1/expenses/")
    assert resp.data["count"] == 1
    assert resp.data["results"][0]["description"] == "Mine"


@pytest.mark.django_db
def test_search_by_name_and_exact_amount(admin_client, employee, other_employee):
    create_expense(employee=employee, amount="150.00", description="Taxi")
    create_expense(employee=other_employee, amount="99.00", description="Books")

    by_name = admin_client.get("/api/v1/expenses/", {"search": "priya"})
    assert [row["description"] for row in by_name.data["results"]] == ["Books"]

    by_amount = admin_client.get("/api/v1/expenses/", {"search": "150"})
    assert [row["description"] for row in by_amount.data["results"]] == ["Taxi"]

    nan = admin_client.get("/api/v1/expenses/", {"search": "NaN"})
    assert nan.status_code == 200


@pytest.mark.django_db
def test_expense_stats(admin_client, admin_user, employee):
    create_expense(employee=employee, amount="100.00", description="A")
    approved = create_expense(employee=employee, amount="50.00", description="B")
    admin_client.post(f"/api/v1/expenses/{approved.id}/approve/", {}, format="json")

    resp = admin_client.get("/api/v1/expenses/stats/")

    assert resp.status_code == 200
    assert resp.data["total"] == 2
    assert resp.data["pending"] == 1
    assert resp.data["approved"] == 1
    assert Decimal(str(resp.data["total_amount"])) == Decimal("150.00")
    assert Decimal(str(resp.data["pending_amount"])) == Decimal("100.00")
    assert resp.data["currency"] == "INR"
