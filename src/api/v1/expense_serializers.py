"""Serializers dedicated to the expenses module."""
from __future__ import annotations

from rest_framework import serializers

from expenses.models import Expense
from hrm.models import Employee


class ExpenseSerializer(serializers.ModelSerializer):
    """Serializer for expense claims."""

    employee = serializers.PrimaryKeyRelatedField(
        queryset=Employee.objects.filter(is_active=True),
        required=False,
    )
    employee_name = serializers.CharField(source="employee.full_name", read_only=True, default="")
    employee_email = serializers.CharField(source="employee.email", read_only=True, default="")
    reviewed_by_email = serializers.CharField(source="reviewed_by.email", read_only=True, default="")

    class Meta:
        model = Expense
        fields = [
            "id",
            "employee",
            "employee_name",
            "employee_email",
            "amount",
            "description",
            "expense_date",
            "receipt",
            "status",
            "reimbursement_file",
            "reimbursement_details",
            "approved_at",
            "rejected_at",
            "rejection_reason",
            "reviewed_by",
            "reviewed_by_email",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "id",
            "status",
            "reimbursement_file",
            "reimbursement_details",
            "approved_at",
            "rejected_at",
            "rejection_reason",
            "reviewed_by",
            "created_at",
            "updated_at",
        ]

    def validate_amount(self, value):
        if value <= 0:
            raise serializers.ValidationError("Le montant doit etre strictement superieur a 0.")
        return value

    def validate_description(self, value):
        value = (value or "").strip()
        if not value:
            raise serializers.ValidationError("La description est obligatoire.")
        return value


class ExpenseApproveSerializer(serializers.Serializer):
    reimbursement_file = serializers.FileField(required=False, allow_null=True)
    reimbursement_details = serializers.CharField(required=False, allow_blank=True, default="")


class ExpenseRejectSerializer(serializers.Serializer):
    rejection_reason = serializers.CharField(allow_blank=False, trim_whitespace=True)
