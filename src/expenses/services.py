"""Business services for expense claims: submission and approval."""
from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal, InvalidOperation

from django.db import transaction
from django.utils import timezone

from core.uploads import validate_document_upload
from expenses.models import Expense

logger = logging.getLogger("hrms")


def _clean_amount(amount) -> Decimal:
    try:
        amount = Decimal(str(amount if amount is not None else "0"))
    except InvalidOperation as exc:
        raise ValueError("Montant invalide.") from exc
    if amount <= Decimal("0"):
        raise ValueError("Le montant doit etre strictement superieur a 0.")
    return amount


def create_expense(
    *,
    employee,
    amount,
    description: str,
    expense_date: date | None = None,
    receipt=None,
) -> Expense:
    """Submit a pending expense claim for *employee*."""
    amount = _clean_amount(amount)
    description = (description or "").strip()
    if not description:
        raise ValueError("La description est obligatoire.")
    if not employee.is_active:
        raise ValueError("L'employe est inactif.")
    if receipt is not None:
        validate_document_upload(receipt)

    expense = Expense(
        employee=employee,
        amount=amount,
        description=description,
        expense_date=expense_date or timezone.localdate(),
    )
    if receipt is not None:
        expense.receipt = receipt
    expense.save()

    logger.info("Expense submitted: %s amount=%s employee=%s", expense.pk, amount, employee.employee_code)
    return expense


def _lock_pending(expense: Expense) -> Expense:
    locked = Expense.objects.select_for_update().select_related("employee").get(pk=expense.pk)
    if locked.status != Expense.Status.PENDING:
        raise ValueError("Cette depense a deja ete traitee.")
    return locked


@transaction.atomic
def approve_expense(
    expense: Expense,
    *,
    reviewer,
    reimbursement_file=None,
    reimbursement_details: str = "",
) -> Expense:
    """Approve a pending expense, optionally attaching the reimbursement proof."""
    if reimbursement_file is not None:
        validate_document_upload(reimbursement_file)

    locked = _lock_pending(expense)
    locked.status = Expense.Status.APPROVED
    locked.approved_at = timezone.now()
    locked.reviewed_by = reviewer
    locked.reimbursement_details = (reimbursement_details or "").strip()
    update_fields = ["status", "approved_at", "reviewed_by", "reimbursement_details", "updated_at"]
    if reimbursement_file is not None:
        locked.reimbursement_file = reimbursement_file
        update_fields.append("reimbursement_file")
    locked.save(update_fields=update_fields)

    logger.info("Expense approved: %s amount=%s by=%s", locked.pk, locked.amount, reviewer)
    return locked


@transaction.atomic
def reject_expense(expense: Expense, *, reviewer, reason: str) -> Expense:
    """Reject a pending expense; a reason is mandatory."""
    reason = (reason or "").strip()
    if not reason:
        raise ValueError("Le motif de rejet est obligatoire.")

    locked = _lock_pending(expense)
    locked.status = Expense.Status.REJECTED
    locked.rejected_at = timezone.now()
    locked.reviewed_by = reviewer
    locked.rejection_reason = reason
    locked.save(update_fields=["status", "rejected_at", "reviewed_by", "rejection_reason", "updated_at"])

    logger.info("Expense rejected: %s by=%s", locked.pk, reviewer)
    return locked
