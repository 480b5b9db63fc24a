"""Models for employee expense claims and their approval."""
from __future__ import annotations

import os
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from core.models import TimeStampedModel


def _timestamped_upload(prefix, instance, filename):
    ext = os.path.splitext(filename)[1].lower().lstrip(".") or "bin"
    stamp = int(timezone.now().timestamp() * 1000)
    return f"{prefix}s/{prefix}_{instance.pk}_{stamp}.{ext}"


def receipt_upload_to(instance, filename):
    return _timestamped_upload("receipt", instance, filename)


def reimbursement_upload_to(instance, filename):
    """``reimbursements/reimbursement_{id}_{timestamp}.{ext}``."""
    return _timestamped_upload("reimbursement", instance, filename)


class Expense(TimeStampedModel):
    """Expense claim submitted by an employee and decided by an admin."""

    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        APPROVED = "approved", "Approved"
        REJECTED = "rejected", "Rejected"

    employee = models.ForeignKey(
        "hrm.Employee",
        on_delete=models.CASCADE,
        related_name="expenses",
        verbose_name="employe",
    )
    amount = models.DecimalField(
        "montant",
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    description = models.TextField("description")
    expense_date = models.DateField("date de depense", default=timezone.localdate, db_index=True)
    receipt = models.FileField("justificatif", upload_to=receipt_upload_to, blank=True)
    status = models.CharField(
        "statut",
        max_length=10,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True,
    )
    reimbursement_file = models.FileField(
        "document de remboursement",
        upload_to=reimbursement_upload_to,
        blank=True,
    )
    reimbursement_details = models.TextField("details du remboursement", blank=True, default="")
    approved_at = models.DateTimeField("approuvee le", null=True, blank=True)
    rejected_at = models.DateTimeField("rejetee le", null=True, blank=True)
    rejection_reason = models.TextField("motif de rejet", blank=True, default="")
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="expenses_reviewed",
        null=True,
        blank=True,
        verbose_name="decidee par",
    )

    class Meta:
        verbose_name = "depense"
        verbose_name_plural = "depenses"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status", "created_at"]),
        ]

    def __str__(self) -> str:
        return f"{self.employee} - {self.amount} ({self.status})"
